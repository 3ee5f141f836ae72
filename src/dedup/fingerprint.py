"""
Content fingerprints and name grouping.

Exact duplicates are detected by a SHA-256 digest of the trimmed content;
duplicate groups are built from the declared document name.
"""

import hashlib
from collections import defaultdict
from typing import Dict, List, Optional, Union

from .base import DocumentRecord, as_text


def fingerprint(content: Optional[Union[str, bytes]]) -> Optional[str]:
    """
    Digest of the trimmed content.

    Returns None when there is no content field at all, or when the content
    is not valid text, so such records never count as exact matches.
    An empty string has a real fingerprint, distinct from None.
    """
    text = as_text(content)
    if text is None:
        return None
    return hashlib.sha256(text.strip().encode("utf-8")).hexdigest()


def index(records: List[DocumentRecord]) -> Dict[str, List[DocumentRecord]]:
    """
    Group records by declared name.

    Records without a name are left out. Input order is preserved inside
    each group.
    """
    groups: Dict[str, List[DocumentRecord]] = defaultdict(list)
    for record in records:
        if not record.name:
            continue
        groups[record.name].append(record)
    return dict(groups)


def duplicate_groups(groups: Dict[str, List[DocumentRecord]]) -> Dict[str, List[DocumentRecord]]:
    """Keep only names shared by two or more records."""
    return {name: docs for name, docs in groups.items() if len(docs) >= 2}


def fingerprint_groups(records: List[DocumentRecord]) -> Dict[str, List[DocumentRecord]]:
    """Map fingerprint -> records, skipping records without a fingerprint."""
    by_hash: Dict[str, List[DocumentRecord]] = defaultdict(list)
    for record in records:
        digest = fingerprint(record.content)
        if digest is not None:
            by_hash[digest].append(record)
    return dict(by_hash)


def is_exact_group(records: List[DocumentRecord]) -> bool:
    """True when every record has the same non-null fingerprint."""
    if len(records) < 2:
        return False
    digests = {fingerprint(r.content) for r in records}
    return len(digests) == 1 and None not in digests
