"""
Plan execution against a document store.

Each DELETE action is sent exactly once. Failures are recorded and the run
moves on; nothing is retried. Re-run detection afterwards to confirm the
final state of the store.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from .base import (
    BaseDocumentStore,
    Decision,
    DryRunPlanError,
    ExecutionResult,
    ExecutionSummary,
    Outcome,
    ResolutionAction,
)
from .planner import ExecutablePlan, ResolutionPlan


class PlanExecutor:
    """
    Applies an ExecutablePlan through a BaseDocumentStore.

    Deletes are independent, so they may be issued from a bounded thread
    pool. Setting abort_event stops further deletes from starting; calls
    already in flight are allowed to finish.
    """

    def __init__(
        self,
        store: BaseDocumentStore,
        max_workers: int = 1,
        abort_event: Optional[threading.Event] = None,
    ):
        """
        Args:
            store: Document store to delete from
            max_workers: Maximum concurrent delete requests
            abort_event: Optional event that stops further deletes once set
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.store = store
        self.max_workers = max_workers
        self.abort_event = abort_event or threading.Event()

    def _delete(self, action: ResolutionAction) -> Optional[ExecutionResult]:
        if self.abort_event.is_set():
            return None
        try:
            self.store.delete_by_id(action.document_id)
        except KeyboardInterrupt:
            # The request may or may not have reached the store
            self.abort_event.set()
            return ExecutionResult(action.document_id, Outcome.FAILED, "interrupted, outcome unknown")
        except Exception as e:
            return ExecutionResult(action.document_id, Outcome.FAILED, str(e) or e.__class__.__name__)
        return ExecutionResult(action.document_id, Outcome.DELETED, action.reason)

    @property
    def aborted(self) -> bool:
        return self.abort_event.is_set()

    def execute(self, plan: ResolutionPlan) -> List[ExecutionResult]:
        """
        Apply the DELETE actions of a plan.

        An interrupt (Ctrl+C) sets abort_event and ends the run early; the
        results gathered so far are still returned so they can be tallied.

        Args:
            plan: An ExecutablePlan (dry-run plans are refused)

        Returns:
            One ExecutionResult per attempted delete, in plan order

        Raises:
            DryRunPlanError: If plan is not an ExecutablePlan
        """
        if not isinstance(plan, ExecutablePlan):
            raise DryRunPlanError(
                "Refusing to execute a dry-run plan; rebuild it with dry_run=False"
            )

        deletes = [a for a in plan if a.decision is Decision.DELETE]
        if not deletes:
            return []

        results = []
        if self.max_workers == 1:
            for action in deletes:
                try:
                    result = self._delete(action)
                except KeyboardInterrupt:
                    self.abort_event.set()
                    break
                if result is None:
                    break
                results.append(result)
            return results

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self._delete, action) for action in deletes]
            for future in futures:
                try:
                    result = future.result()
                except KeyboardInterrupt:
                    # Queued deletes see the flag and return without calling the store
                    self.abort_event.set()
                    result = future.result()
                if result is not None:
                    results.append(result)
        return results


def execute(
    plan: ResolutionPlan,
    store: BaseDocumentStore,
    max_workers: int = 1,
    abort_event: Optional[threading.Event] = None,
) -> List[ExecutionResult]:
    """Convenience wrapper around PlanExecutor.execute()."""
    return PlanExecutor(store, max_workers=max_workers, abort_event=abort_event).execute(plan)


def summarize(plan: ResolutionPlan, results: List[ExecutionResult]) -> ExecutionSummary:
    """Kept/deleted/failed tally for a finished run."""
    return ExecutionSummary(
        kept=len(plan.keeps),
        deleted=sum(1 for r in results if r.outcome is Outcome.DELETED),
        failed=sum(1 for r in results if r.outcome is Outcome.FAILED),
    )
