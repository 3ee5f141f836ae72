"""
Base classes and data models for duplicate resolution.

This module defines the records the engine works on, the plan and result
types it produces, and the abstract document store it depends on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union


class DedupError(Exception):
    """Base class for duplicate resolution errors."""


class FetchError(DedupError):
    """The document store could not supply the candidate set."""


class DeleteError(DedupError):
    """A single delete request was rejected by the document store."""


class DryRunPlanError(DedupError, TypeError):
    """A dry-run plan was handed to the executor."""


def as_text(content: Union[str, bytes, None]) -> Optional[str]:
    """
    Content as valid UTF-8 text.

    Undecodable bytes and strings holding lone surrogates (valid JSON, but
    not encodable) come back as None, the same as a missing content field.
    """
    if content is None:
        return None
    if isinstance(content, bytes):
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        content.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return content


@dataclass(frozen=True)
class DocumentRecord:
    """
    Read snapshot of a stored document.

    Records are never mutated by the engine; they are classified and,
    at most, deleted by id. Content that is not valid text is stored as None.
    """
    id: str
    name: Optional[str] = None
    content: Optional[str] = None
    uploaded_at: Optional[str] = None  # ISO-8601, None means unknown
    source_tag: Optional[str] = None   # origin archive / import source
    path: Optional[str] = None
    file_type: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "content", as_text(self.content))

    @property
    def has_path(self) -> bool:
        return bool(self.path)

    @property
    def has_type(self) -> bool:
        return bool(self.file_type)

    @property
    def has_source(self) -> bool:
        return bool(self.source_tag)

    @property
    def metadata_flags(self) -> FrozenSet[str]:
        """Names of the auxiliary metadata fields that are present."""
        flags = set()
        if self.has_path:
            flags.add("path")
        if self.has_type:
            flags.add("type")
        if self.has_source:
            flags.add("source")
        return frozenset(flags)

    @property
    def content_length(self) -> int:
        return len(self.content) if self.content else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "content": self.content,
            "uploaded_at": self.uploaded_at,
            "source_tag": self.source_tag,
            "path": self.path,
            "file_type": self.file_type,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-term contributions to a candidate's score."""
    content_length: float = 0.0
    recency: float = 0.0
    metadata: float = 0.0
    path_bonus: float = 0.0

    @property
    def total(self) -> float:
        # Terms are capped individually, the sum is not
        return self.content_length + self.recency + self.metadata + self.path_bonus

    def to_dict(self) -> Dict[str, float]:
        return {
            "content_length": self.content_length,
            "recency": self.recency,
            "metadata": self.metadata,
            "path_bonus": self.path_bonus,
            "total": self.total,
        }


@dataclass(frozen=True)
class RankedCandidate:
    """A document with its version score."""
    record: DocumentRecord
    breakdown: ScoreBreakdown

    @property
    def score(self) -> float:
        return self.breakdown.total

    @property
    def id(self) -> str:
        return self.record.id


class Decision(Enum):
    """What the plan does with a document."""
    KEEP = "keep"
    DELETE = "delete"


@dataclass(frozen=True)
class ResolutionAction:
    """One planned decision for one document of a duplicate group."""
    document_id: str
    decision: Decision
    group_key: str
    reason: str
    exact_match: bool = False
    score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "decision": self.decision.value,
            "group_key": self.group_key,
            "reason": self.reason,
            "exact_match": self.exact_match,
            "score": self.score,
        }


class Outcome(Enum):
    """Result of a single delete request."""
    DELETED = "deleted"
    FAILED = "failed"


@dataclass(frozen=True)
class ExecutionResult:
    document_id: str
    outcome: Outcome
    detail: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "document_id": self.document_id,
            "outcome": self.outcome.value,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class ExecutionSummary:
    """Final tally of a live run."""
    kept: int = 0
    deleted: int = 0
    failed: int = 0


@dataclass(frozen=True)
class SimilarPair:
    """Jaccard similarity between two records of one group."""
    first_id: str
    second_id: str
    score: float


class GroupKind(Enum):
    """How the members of a same-name group relate by content."""
    EXACT = "exact"          # all records share one fingerprint
    PARTIAL = "partial"      # some records share a fingerprint
    SIMILAR = "similar"      # no shared fingerprint, a pair above threshold
    DIFFERENT = "different"  # same name only


@dataclass
class GroupSummary:
    """
    Read-only detection report for one duplicate group.

    Produced by detect(); carries no decisions.
    """
    name: str
    document_ids: List[str]
    kind: GroupKind
    exact_subgroups: List[List[str]] = field(default_factory=list)
    pairs: List[SimilarPair] = field(default_factory=list)
    similar_pairs: List[SimilarPair] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.document_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "document_ids": list(self.document_ids),
            "kind": self.kind.value,
            "exact_subgroups": [list(g) for g in self.exact_subgroups],
            "similar_pairs": [
                {"first_id": p.first_id, "second_id": p.second_id, "score": p.score}
                for p in self.similar_pairs
            ],
        }


class BaseDocumentStore(ABC):
    """
    Abstract document store the engine reads from and deletes through.

    Implementations own transport, pagination, timeouts and pacing.
    """

    @abstractmethod
    def fetch_candidates(self, name_filter: Optional[str] = None) -> List[DocumentRecord]:
        """
        Return all candidate records, optionally restricted to one name.

        Raises:
            FetchError: If the candidate set cannot be read
        """
        pass

    @abstractmethod
    def delete_by_id(self, document_id: str) -> None:
        """
        Delete a single document.

        Raises:
            DeleteError: If the store rejects the request (including unknown ids)
        """
        pass

    def describe(self) -> str:
        """Short human-readable description for logs."""
        return self.__class__.__name__
