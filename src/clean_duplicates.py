#!/usr/bin/env python3
"""
clean_duplicates.py - Find and resolve duplicate documents in Weaviate

Usage:
    python3 src/clean_duplicates.py                          # Dry run against WEAVIATE_URL
    python3 src/clean_duplicates.py --input export.jsonl     # Dry run against an offline export
    python3 src/clean_duplicates.py --exact-only --execute   # Delete identical copies only
    python3 src/clean_duplicates.py --execute --workers 4    # Apply the full plan

This script:
1. Reads every document of the configured class (or a JSONL export)
2. Groups documents by file name and reports exact / similar / different content
3. Ranks each group and plans one KEEP plus DELETEs for the other copies
4. Deletes only when --execute is given, then prints a kept/deleted/failed tally
"""

import argparse
import sys
import threading
from pathlib import Path

import dotenv
from rich.console import Console

from dedup import DedupConfig, DuplicateResolver, FetchError, find_similar_names, summarize
from dedup.report import (
    export_plan_json,
    export_results_json,
    print_detection,
    print_plan,
    print_tally,
)
from weaviate_helpers import export_documents_jsonl, get_document_store


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Detect and resolve duplicate documents in Weaviate',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 src/clean_duplicates.py                          # Preview the plan (default)
  python3 src/clean_duplicates.py --name "report.md"       # Only one file name
  python3 src/clean_duplicates.py --similar-names          # Also list look-alike names
  python3 src/clean_duplicates.py --exact-only --execute   # Delete identical copies
  python3 src/clean_duplicates.py --output audit/          # Save plan and results as JSON
        """
    )

    parser.add_argument(
        '--execute',
        action='store_true',
        help='Actually delete the planned duplicates (default: dry run)'
    )
    parser.add_argument(
        '--input',
        default=None,
        help='JSONL export to analyse instead of connecting to Weaviate'
    )
    parser.add_argument(
        '--url',
        default=None,
        help='Weaviate URL (default: WEAVIATE_URL from environment)'
    )
    parser.add_argument(
        '--class-name',
        default=None,
        help='Weaviate class holding the documents (default: WEAVIATE_CLASS or Documents)'
    )
    parser.add_argument(
        '--name',
        default=None,
        help='Only consider documents with this exact file name'
    )
    parser.add_argument(
        '--threshold',
        type=float,
        default=0.8,
        help='Content similarity flagged for review, 0-1 (default: 0.8)'
    )
    parser.add_argument(
        '--exact-only',
        action='store_true',
        help='Restrict the plan to groups of identical content'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=1,
        help='Concurrent delete requests (default: 1)'
    )
    parser.add_argument(
        '--similar-names',
        action='store_true',
        help='Also report distinct names that look alike'
    )
    parser.add_argument(
        '--name-threshold',
        type=float,
        default=90.0,
        help='Fuzzy name score for --similar-names, 0-100 (default: 90)'
    )
    parser.add_argument(
        '--snapshot',
        default=None,
        help='Write the fetched documents to this JSONL file'
    )
    parser.add_argument(
        '--output',
        default=None,
        help='Directory for plan.json / results.json audit files'
    )
    return parser


def main(argv=None) -> int:
    dotenv.load_dotenv()
    args = build_parser().parse_args(argv)

    print("=" * 70)
    print("WEAVIATE DUPLICATE CLEANER")
    print(f"Mode: {'LIVE (will delete documents)' if args.execute else 'DRY RUN (preview only)'}")
    print("=" * 70)

    try:
        if args.workers < 1:
            raise ValueError(f"--workers must be at least 1, got {args.workers}")
        config = DedupConfig(
            similarity_threshold=args.threshold,
            name_similarity_threshold=args.name_threshold,
        )
        store = get_document_store(args.input, url=args.url, class_name=args.class_name)
    except (ValueError, OSError) as e:
        print(f"[ERROR] {e}")
        return 1

    resolver = DuplicateResolver(store, config)

    try:
        records = resolver.fetch(args.name)
    except FetchError as e:
        print(f"[ERROR] {e}")
        return 1
    print(f"[FETCH] {len(records)} documents ({resolver.fetch_time_ms:.0f}ms)")

    if args.snapshot:
        export_documents_jsonl(records, Path(args.snapshot))

    # Step 1: detection report
    summaries = resolver.detect(records)
    similar_names = None
    if args.similar_names:
        similar_names = find_similar_names((r.name for r in records), config.name_similarity_threshold)
    print_detection(summaries, console=console, similar_names=similar_names)

    # Step 2: plan
    plan = resolver.plan(records, dry_run=not args.execute)
    if args.exact_only:
        plan = plan.exact_only()
    print_plan(plan, records={r.id: r for r in records}, console=console)

    output_dir = Path(args.output) if args.output else None
    if output_dir:
        export_plan_json(plan, output_dir / "plan.json", summaries)

    if plan.dry_run or not plan.deletes:
        return 0

    # Step 3: execute
    print(f"\n[DELETE] Deleting {len(plan.deletes)} documents "
          f"({args.workers} worker{'s' if args.workers != 1 else ''})...")
    abort_event = threading.Event()
    results = resolver.execute(plan, max_workers=args.workers, abort_event=abort_event)

    summary = summarize(plan, results)
    print_tally(summary, results, console=console)
    if output_dir:
        export_results_json(results, summary, output_dir / "results.json")

    if abort_event.is_set():
        print(f"\n[ABORT] Interrupted after {len(results)} of {len(plan.deletes)} deletes; "
              "no further deletes were started. Re-run to see the current state.")
        return 130

    return 2 if summary.failed else 0


if __name__ == '__main__':
    sys.exit(main())
