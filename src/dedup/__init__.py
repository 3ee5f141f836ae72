"""
Duplicate resolution engine for documents stored in Weaviate.

Documents sharing a name form a duplicate group. Each group is ranked on
content length, recency and metadata completeness; the best version is
kept and the others are planned for deletion. Exact copies (same content
hash) are flagged as safe deletes, everything else is a best-version
heuristic with a similarity note for review.

Example usage:
    from dedup import DuplicateResolver, DedupConfig
    from store import WeaviateDocumentStore, StoreConfig

    store = WeaviateDocumentStore(StoreConfig.from_env())
    resolver = DuplicateResolver(store, DedupConfig(similarity_threshold=0.8))

    records = resolver.fetch()
    for group in resolver.detect(records):
        print(group.name, group.kind.value)

    preview = resolver.plan(records)                  # dry run, cannot be executed
    live = resolver.plan(records, dry_run=False)
    results = resolver.execute(live.exact_only())
"""

from .base import (
    BaseDocumentStore,
    DedupError,
    DeleteError,
    Decision,
    DocumentRecord,
    DryRunPlanError,
    ExecutionResult,
    ExecutionSummary,
    FetchError,
    GroupKind,
    GroupSummary,
    Outcome,
    RankedCandidate,
    ResolutionAction,
    ScoreBreakdown,
    SimilarPair,
)
from .config import DedupConfig
from .fingerprint import fingerprint, index, duplicate_groups
from .similarity import similarity, tokenize
from .ranker import rank, score
from .planner import ResolutionPlan, DryRunPlan, ExecutablePlan, build_plan
from .executor import PlanExecutor, execute, summarize
from .names import find_similar_names
from .pipeline import DuplicateResolver, detect, plan

__all__ = [
    # Data model
    "DocumentRecord",
    "ScoreBreakdown",
    "RankedCandidate",
    "Decision",
    "ResolutionAction",
    "Outcome",
    "ExecutionResult",
    "ExecutionSummary",
    "SimilarPair",
    "GroupKind",
    "GroupSummary",
    "BaseDocumentStore",
    # Errors
    "DedupError",
    "FetchError",
    "DeleteError",
    "DryRunPlanError",
    # Config
    "DedupConfig",
    # Stages
    "fingerprint",
    "index",
    "duplicate_groups",
    "similarity",
    "tokenize",
    "score",
    "rank",
    "ResolutionPlan",
    "DryRunPlan",
    "ExecutablePlan",
    "build_plan",
    "PlanExecutor",
    "execute",
    "summarize",
    "find_similar_names",
    # Pipeline
    "DuplicateResolver",
    "detect",
    "plan",
]
