"""
Version ranking inside a duplicate group.

Each record is scored on content length, upload recency, metadata
completeness and path specificity. Every term is capped on its own so no
single signal dominates; the total is left unclamped.
"""

from datetime import datetime, timezone
from typing import List, Optional

from .base import DocumentRecord, RankedCandidate, ScoreBreakdown
from .config import DedupConfig

SECONDS_PER_DAY = 60 * 60 * 24


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z'. Naive values are read as UTC. Returns None for
    missing or unparseable input.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def score(
    record: DocumentRecord,
    config: Optional[DedupConfig] = None,
    now: Optional[datetime] = None,
) -> ScoreBreakdown:
    """
    Score a single record.

    Args:
        record: Document to score
        config: Scoring constants (defaults if None)
        now: Reference time for recency (current UTC time if None)

    Returns:
        ScoreBreakdown with each capped term
    """
    config = config or DedupConfig()
    now = now or datetime.now(timezone.utc)

    content_term = min(config.content_cap, record.content_length / config.content_divisor)

    # Unknown upload time earns nothing
    recency_term = 0.0
    uploaded = parse_timestamp(record.uploaded_at)
    if uploaded is not None:
        days = (now - uploaded).total_seconds() / SECONDS_PER_DAY
        recency_term = max(0.0, min(config.recency_cap,
                                    config.recency_cap - days / config.recency_divisor_days))

    metadata_term = config.metadata_points * len(record.metadata_flags)

    path_term = 0.0
    if record.path and config.temp_marker not in record.path:
        path_term = config.path_bonus

    return ScoreBreakdown(
        content_length=content_term,
        recency=recency_term,
        metadata=metadata_term,
        path_bonus=path_term,
    )


def rank(
    group: List[DocumentRecord],
    config: Optional[DedupConfig] = None,
    now: Optional[datetime] = None,
) -> List[RankedCandidate]:
    """
    Rank a group best-first.

    Ties on score are broken by id ascending, so the same group always
    yields the same winner.
    """
    config = config or DedupConfig()
    now = now or datetime.now(timezone.utc)

    candidates = [
        RankedCandidate(record=record, breakdown=score(record, config, now))
        for record in group
    ]
    candidates.sort(key=lambda c: (-c.score, c.id))
    return candidates
