"""
Cheap bag-of-words similarity between document bodies.

Jaccard overlap of normalized token sets. This is an advisory signal for
same-name documents that are not exact copies; it is not semantic and it
never decides a deletion on its own.
"""

import re
from typing import List, Optional, Set, Union

from .base import DocumentRecord, SimilarPair, as_text
from .fingerprint import fingerprint

_NON_WORD = re.compile(r"[^\w\s]")
MIN_TOKEN_LENGTH = 3


def tokenize(text: Union[str, bytes, None]) -> Set[str]:
    """Lowercase, strip punctuation, split on whitespace, drop tokens of length <= 2."""
    text = as_text(text)
    if not text:
        return set()
    cleaned = _NON_WORD.sub("", text.lower())
    return {tok for tok in cleaned.split() if len(tok) >= MIN_TOKEN_LENGTH}


def _jaccard(tokens_a: Set[str], tokens_b: Set[str]) -> float:
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def similarity(a: Union[str, bytes, None], b: Union[str, bytes, None]) -> float:
    """
    Jaccard similarity of the token sets of two texts.

    Returns 0.0 when either text is missing, empty or not valid text, and
    when neither text yields any token: two contentless documents are not
    "similar".
    """
    return _jaccard(tokenize(a), tokenize(b))


def pairwise_similarities(records: List[DocumentRecord]) -> List[SimilarPair]:
    """
    Similarity for every pair of records that are not exact copies.

    Pairs are emitted in input order (i < j). Pairs sharing a non-null
    fingerprint are skipped, they are exact duplicates already.
    """
    digests = [fingerprint(r.content) for r in records]
    tokens = [tokenize(r.content) for r in records]

    pairs = []
    for i in range(len(records)):
        for j in range(i + 1, len(records)):
            if digests[i] is not None and digests[i] == digests[j]:
                continue
            pairs.append(SimilarPair(
                first_id=records[i].id,
                second_id=records[j].id,
                score=_jaccard(tokens[i], tokens[j]),
            ))
    return pairs
