"""
End-to-end duplicate resolution: fetch -> detect / plan -> execute.

The functions here are the public entry points. detect() and plan() are
pure; only DuplicateResolver talks to a store.
"""

import threading
import time
from datetime import datetime
from typing import List, Optional

from .base import (
    BaseDocumentStore,
    DocumentRecord,
    ExecutionResult,
    FetchError,
    GroupKind,
    GroupSummary,
)
from .config import DedupConfig
from .executor import PlanExecutor
from .fingerprint import duplicate_groups, fingerprint_groups, index
from .planner import ResolutionPlan, build_plan
from .similarity import pairwise_similarities


def summarize_group(name: str, group: List[DocumentRecord], config: DedupConfig) -> GroupSummary:
    """Classify one same-name group by how its contents relate."""
    ids = [r.id for r in group]
    subgroups = [
        [r.id for r in docs]
        for docs in fingerprint_groups(group).values()
        if len(docs) > 1
    ]

    if len(subgroups) == 1 and len(subgroups[0]) == len(group):
        return GroupSummary(name=name, document_ids=ids, kind=GroupKind.EXACT,
                            exact_subgroups=subgroups)

    pairs = pairwise_similarities(group)
    similar = [p for p in pairs if p.score >= config.similarity_threshold]

    if subgroups:
        kind = GroupKind.PARTIAL
    elif similar:
        kind = GroupKind.SIMILAR
    else:
        kind = GroupKind.DIFFERENT

    return GroupSummary(
        name=name,
        document_ids=ids,
        kind=kind,
        exact_subgroups=subgroups,
        pairs=pairs,
        similar_pairs=similar,
    )


def detect(records: List[DocumentRecord], config: Optional[DedupConfig] = None) -> List[GroupSummary]:
    """
    Read-only duplicate report.

    Args:
        records: Snapshot of the store
        config: Similarity threshold and friends (defaults if None)

    Returns:
        One GroupSummary per name shared by two or more records, sorted by name
    """
    config = config or DedupConfig()
    groups = duplicate_groups(index(records))
    return [summarize_group(name, groups[name], config) for name in sorted(groups)]


def plan(
    records: List[DocumentRecord],
    dry_run: bool = True,
    config: Optional[DedupConfig] = None,
    now: Optional[datetime] = None,
) -> ResolutionPlan:
    """Index records by name and build a resolution plan (dry run by default)."""
    return build_plan(duplicate_groups(index(records)), dry_run=dry_run, config=config, now=now)


class DuplicateResolver:
    """
    Wires a document store to the resolution pipeline.

    Example:
        resolver = DuplicateResolver(store)
        records = resolver.fetch()
        preview = resolver.plan(records)              # DryRunPlan
        live = resolver.plan(records, dry_run=False)  # ExecutablePlan
        results = resolver.execute(live, max_workers=4)
    """

    def __init__(self, store: BaseDocumentStore, config: Optional[DedupConfig] = None):
        self.store = store
        self.config = config or DedupConfig()
        self.fetch_time_ms = 0.0

    def fetch(self, name_filter: Optional[str] = None) -> List[DocumentRecord]:
        """
        Read the candidate snapshot.

        Raises:
            FetchError: If the store fails; no partial snapshot is returned
        """
        start = time.time()
        try:
            records = self.store.fetch_candidates(name_filter)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Failed to fetch candidates from {self.store.describe()}: {e}") from e
        self.fetch_time_ms = (time.time() - start) * 1000
        return list(records or [])

    def detect(self, records: List[DocumentRecord]) -> List[GroupSummary]:
        return detect(records, self.config)

    def plan(
        self,
        records: List[DocumentRecord],
        dry_run: bool = True,
        now: Optional[datetime] = None,
    ) -> ResolutionPlan:
        return plan(records, dry_run=dry_run, config=self.config, now=now)

    def execute(
        self,
        resolution_plan: ResolutionPlan,
        max_workers: int = 1,
        abort_event: Optional[threading.Event] = None,
    ) -> List[ExecutionResult]:
        executor = PlanExecutor(self.store, max_workers=max_workers, abort_event=abort_event)
        return executor.execute(resolution_plan)
