"""
Configuration dataclass for duplicate resolution.

Mirrors the SearchConfig pattern: every tunable constant of the scoring
and similarity stages lives here with its empirically chosen default.
"""

from dataclasses import dataclass


@dataclass
class DedupConfig:
    """
    Scoring and similarity parameters.

    Defaults reproduce the long-standing cleanup behaviour; they were never
    calibrated and may need tuning per deployment.
    """

    # Content length term: min(content_cap, length / content_divisor)
    content_cap: float = 40.0
    content_divisor: float = 100.0

    # Recency term: max(0, recency_cap - days / recency_divisor_days)
    recency_cap: float = 30.0
    recency_divisor_days: float = 10.0

    # Metadata completeness: points per present field (path, type, source)
    metadata_points: float = 5.0

    # Path specificity bonus, withheld when the path contains temp_marker
    path_bonus: float = 10.0
    temp_marker: str = "temp"

    # Jaccard threshold for "similar, review recommended"
    similarity_threshold: float = 0.8

    # rapidfuzz token_set_ratio threshold (0-100) for the similar-name advisory
    name_similarity_threshold: float = 90.0

    def __post_init__(self):
        """Validate configuration."""
        if not 0 <= self.similarity_threshold <= 1:
            raise ValueError("similarity_threshold must be between 0 and 1")
        if not 0 <= self.name_similarity_threshold <= 100:
            raise ValueError("name_similarity_threshold must be between 0 and 100")
        if self.content_divisor <= 0:
            raise ValueError("content_divisor must be positive")
        if self.recency_divisor_days <= 0:
            raise ValueError("recency_divisor_days must be positive")
        for name in ("content_cap", "recency_cap", "metadata_points", "path_bonus"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
