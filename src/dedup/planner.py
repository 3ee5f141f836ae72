"""
Resolution planning: turn ranked duplicate groups into keep/delete actions.

A plan is either a DryRunPlan (the default, report only) or an
ExecutablePlan. Only the latter is accepted by the PlanExecutor, so a
preview can never be applied by accident.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Tuple, Any

from .base import Decision, DocumentRecord, ResolutionAction
from .config import DedupConfig
from .fingerprint import fingerprint, is_exact_group
from .ranker import rank
from .similarity import similarity

EXACT_REASON = "Identical content (hash match with {keep_id})"
HEURISTIC_REASON = "Duplicate (kept better version {keep_id})"
KEEP_REASON = "Best version (score {score:.1f})"


@dataclass(frozen=True)
class ResolutionPlan:
    """
    Ordered, immutable list of resolution actions.

    Groups appear in sorted name order; inside a group the kept record
    comes first, followed by the deletions best-first.
    """
    actions: Tuple[ResolutionAction, ...] = ()

    dry_run = True

    def __iter__(self) -> Iterator[ResolutionAction]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    @property
    def keeps(self) -> List[ResolutionAction]:
        return [a for a in self.actions if a.decision is Decision.KEEP]

    @property
    def deletes(self) -> List[ResolutionAction]:
        return [a for a in self.actions if a.decision is Decision.DELETE]

    @property
    def group_keys(self) -> List[str]:
        seen = []
        for action in self.actions:
            if action.group_key not in seen:
                seen.append(action.group_key)
        return seen

    def exact_only(self) -> "ResolutionPlan":
        """
        Restrict the plan to groups resolved by an exact hash match.

        Returns a plan of the same kind. These are the safe-delete groups a
        caller may apply without manual review.
        """
        exact_groups = {a.group_key for a in self.actions
                        if a.decision is Decision.DELETE and a.exact_match}
        return type(self)(actions=tuple(a for a in self.actions if a.group_key in exact_groups))

    def to_dict(self) -> Dict[str, Any]:
        """Export for audit."""
        return {
            "dry_run": self.dry_run,
            "groups": len(self.group_keys),
            "keep_count": len(self.keeps),
            "delete_count": len(self.deletes),
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass(frozen=True)
class DryRunPlan(ResolutionPlan):
    """Plan computed for review only."""
    dry_run = True


@dataclass(frozen=True)
class ExecutablePlan(ResolutionPlan):
    """Plan explicitly built for deletion."""
    dry_run = False


def _advisory(deleted: DocumentRecord, kept: DocumentRecord, threshold: float) -> str:
    """Similarity note appended to heuristic delete reasons."""
    kept_hash = fingerprint(kept.content)
    if kept_hash is not None and kept_hash == fingerprint(deleted.content):
        return "content identical to kept version"
    sim = similarity(deleted.content, kept.content)
    if sim >= threshold:
        return f"{sim:.1%} content similarity, review recommended"
    return f"{sim:.1%} content similarity"


def plan_group(
    key: str,
    group: List[DocumentRecord],
    config: DedupConfig,
    now: datetime,
) -> List[ResolutionAction]:
    """Actions for a single group: one KEEP, the rest DELETE."""
    ranked = rank(group, config, now)
    keep = ranked[0]
    exact = is_exact_group(group)

    actions = [ResolutionAction(
        document_id=keep.id,
        decision=Decision.KEEP,
        group_key=key,
        reason=KEEP_REASON.format(score=keep.score),
        exact_match=exact,
        score=keep.score,
    )]

    for candidate in ranked[1:]:
        if exact:
            reason = EXACT_REASON.format(keep_id=keep.id)
        else:
            reason = HEURISTIC_REASON.format(keep_id=keep.id)
            reason += "; " + _advisory(candidate.record, keep.record, config.similarity_threshold)
        actions.append(ResolutionAction(
            document_id=candidate.id,
            decision=Decision.DELETE,
            group_key=key,
            reason=reason,
            exact_match=exact,
            score=candidate.score,
        ))
    return actions


def build_plan(
    groups: Dict[str, List[DocumentRecord]],
    dry_run: bool = True,
    config: Optional[DedupConfig] = None,
    now: Optional[datetime] = None,
) -> ResolutionPlan:
    """
    Build a resolution plan from name groups.

    Args:
        groups: name -> records, as produced by fingerprint.index()
        dry_run: True (default) returns a DryRunPlan the executor refuses
        config: Scoring constants (defaults if None)
        now: Reference time for recency scoring (current UTC time if None)

    Returns:
        DryRunPlan or ExecutablePlan
    """
    config = config or DedupConfig()
    now = now or datetime.now(timezone.utc)

    actions: List[ResolutionAction] = []
    for key in sorted(groups):
        group = groups[key]
        if not key or len(group) < 2:
            continue
        actions.extend(plan_group(key, group, config, now))

    plan_cls = DryRunPlan if dry_run else ExecutablePlan
    return plan_cls(actions=tuple(actions))
