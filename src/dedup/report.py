"""
Console rendering and JSON export for detection reports, plans and runs.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .base import Decision, DocumentRecord, ExecutionResult, ExecutionSummary, GroupKind, GroupSummary, Outcome
from .planner import ResolutionPlan

KIND_STYLES = {
    GroupKind.EXACT: "green",
    GroupKind.PARTIAL: "cyan",
    GroupKind.SIMILAR: "yellow",
    GroupKind.DIFFERENT: "magenta",
}

KIND_ADVICE = {
    GroupKind.EXACT: "safe to delete",
    GroupKind.PARTIAL: "some identical copies",
    GroupKind.SIMILAR: "review recommended",
    GroupKind.DIFFERENT: "same name only",
}


def print_detection(
    summaries: List[GroupSummary],
    console: Optional[Console] = None,
    similar_names: Optional[List[Tuple[float, str, str]]] = None,
) -> None:
    """Print the read-only duplicate report."""
    console = console or Console()

    if not summaries:
        console.print("[green]No duplicate names found.[/green]")
    else:
        table = Table(title=f"Duplicate groups ({len(summaries)})")
        table.add_column("Name", style="bold")
        table.add_column("Copies", justify="right")
        table.add_column("Kind")
        table.add_column("Best pair", justify="right")
        table.add_column("Advice")

        for summary in summaries:
            style = KIND_STYLES[summary.kind]
            best = max((p.score for p in summary.pairs), default=None)
            best_str = f"{best:.1%}" if best is not None else "-"
            table.add_row(
                escape(summary.name),
                str(summary.size),
                f"[{style}]{summary.kind.value}[/{style}]",
                best_str,
                KIND_ADVICE[summary.kind],
            )
        console.print(table)

        counts = {kind: 0 for kind in GroupKind}
        for summary in summaries:
            counts[summary.kind] += 1
        removable = sum(s.size - 1 for s in summaries if s.kind is GroupKind.EXACT)
        console.print(
            f"Exact: {counts[GroupKind.EXACT]} groups ({removable} removable copies) | "
            f"Partial: {counts[GroupKind.PARTIAL]} | "
            f"Similar: {counts[GroupKind.SIMILAR]} | "
            f"Different: {counts[GroupKind.DIFFERENT]}"
        )

    if similar_names:
        table = Table(title="Similar names (review only)")
        table.add_column("Score", justify="right")
        table.add_column("Name")
        table.add_column("Looks like")
        for score, a, b in similar_names:
            table.add_row(f"{score:5.1f}%", escape(a), escape(b))
        console.print(table)


def print_plan(
    plan: ResolutionPlan,
    records: Optional[Dict[str, DocumentRecord]] = None,
    console: Optional[Console] = None,
) -> None:
    """Print every action of a plan with its reason."""
    console = console or Console()
    records = records or {}

    if not len(plan):
        console.print("[green]Nothing to resolve.[/green]")
        return

    table = Table(title="Resolution plan" + (" (DRY RUN)" if plan.dry_run else ""))
    table.add_column("Group", style="bold")
    table.add_column("Action")
    table.add_column("Document")
    table.add_column("Score", justify="right")
    table.add_column("Chars", justify="right")
    table.add_column("Source")
    table.add_column("Reason")

    for action in plan:
        record = records.get(action.document_id)
        if action.decision is Decision.KEEP:
            label = "[green]KEEP[/green]"
        else:
            label = "[red]DELETE[/red]"
        table.add_row(
            escape(action.group_key),
            label,
            escape(action.document_id),
            f"{action.score:.1f}" if action.score is not None else "-",
            str(record.content_length) if record else "-",
            escape(record.source_tag or "Unknown") if record else "-",
            escape(action.reason),
        )
    console.print(table)

    exact = sum(1 for a in plan.deletes if a.exact_match)
    console.print(
        f"Groups: {len(plan.group_keys)} | Keep: {len(plan.keeps)} | "
        f"Delete: {len(plan.deletes)} ({exact} exact, {len(plan.deletes) - exact} heuristic)"
    )
    if plan.dry_run:
        console.print(Panel(
            "DRY RUN - no documents deleted.\nRun with --execute to apply this plan.",
            style="yellow",
        ))


def print_tally(summary: ExecutionSummary, results: List[ExecutionResult], console: Optional[Console] = None) -> None:
    """Print failures and the final kept/deleted/failed tally."""
    console = console or Console()
    for result in results:
        if result.outcome is Outcome.FAILED:
            console.print(f"[red]{escape('[FAILED]')}[/red] {escape(result.document_id)} - {escape(result.detail)}")

    style = "green" if summary.failed == 0 else "red"
    console.print(Panel(
        f"Kept: {summary.kept}\nDeleted: {summary.deleted}\nFailed: {summary.failed}",
        title="Cleanup complete",
        style=style,
    ))


def export_plan_json(plan: ResolutionPlan, output_path: Path, summaries: Optional[List[GroupSummary]] = None) -> None:
    """Write a plan (and optionally the detection report) for audit."""
    data = plan.to_dict()
    if summaries is not None:
        data["detection"] = [s.to_dict() for s in summaries]

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    print(f"[EXPORT] Plan saved to {output_path}")


def export_results_json(results: List[ExecutionResult], summary: ExecutionSummary, output_path: Path) -> None:
    """Write per-item execution outcomes for audit."""
    data = {
        "kept": summary.kept,
        "deleted": summary.deleted,
        "failed": summary.failed,
        "results": [r.to_dict() for r in results],
    }

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    print(f"[EXPORT] Results saved to {output_path}")
