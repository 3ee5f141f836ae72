"""
Fuzzy name matching for documents stored under slightly different titles.

Exact name grouping misses "Report Q3.md" vs "report-q3 (1).md". This
advisory pass lists such pairs for review; it never produces actions.
"""

from pathlib import PurePosixPath
from typing import Iterable, List, Tuple

from rapidfuzz import fuzz


def _stem(name: str) -> str:
    return PurePosixPath(name).stem.lower()


def find_similar_names(names: Iterable[str], threshold: float = 90.0) -> List[Tuple[float, str, str]]:
    """
    Pairs of distinct names whose stems look alike.

    Args:
        names: Document names (duplicates and empty names are ignored)
        threshold: Minimum rapidfuzz token_set_ratio (0-100)

    Returns:
        (score, name_a, name_b) tuples, highest score first
    """
    unique = sorted({n for n in names if n})
    stems = [_stem(n) for n in unique]

    matches = []
    for i in range(len(unique)):
        for j in range(i + 1, len(unique)):
            if not stems[i] or not stems[j]:
                continue
            score = fuzz.token_set_ratio(stems[i], stems[j])
            if score >= threshold:
                matches.append((score, unique[i], unique[j]))

    # Sort by similarity (highest first), then by name for stable output
    matches.sort(key=lambda m: (-m[0], m[1], m[2]))
    return matches
