#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance recommendations.

Commands:
  catalog    - List the maintenance catalog in effect
  status     - Show which items are due for one vehicle
  recommend  - Build the ranked recommendation feed for several vehicles
"""

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

import yaml
from tabulate import tabulate

from autocare import (
    Catalog,
    CatalogError,
    DueItem,
    DueState,
    MaintenanceRecommendation,
    default_catalog,
    evaluate_vehicle,
    load_catalog,
    load_overrides,
    load_recommendations,
    load_vehicle,
    recommend,
    save_recommendations,
)

CATALOG_ENV = "AUTOCARE_CATALOG"

# Raised by a vehicle file that is missing, not YAML, or the wrong shape
VEHICLE_ERRORS = (OSError, yaml.YAMLError, AttributeError, KeyError, TypeError, ValueError)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_miles(miles: Optional[float]) -> str:
    """Format mileage for display."""
    return f"{miles:,.0f}" if miles is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_interval(miles: Optional[float], months: Optional[float]) -> str:
    """Format an interval as '5,000 mi / 6 mo'."""
    parts = []
    if miles:
        parts.append(f"{miles:,.0f} mi")
    if months:
        parts.append(f"{months:g} mo")
    return " / ".join(parts) if parts else "-"


def format_used(item: DueItem) -> str:
    """Format fraction of interval used (e.g., '120% (distance)')."""
    return f"{item.percent}% ({item.trigger.value})"


def truncate(text: Optional[str], max_len: int = 40) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


# =============================================================================
# Tables
# =============================================================================


def make_status_table(items: Iterable[DueItem]) -> List[List[str]]:
    """Convert due items to table rows."""
    rows = []
    for item in items:
        last_done = "-"
        if item.from_history:
            last_done = f"{item.baseline_date} @ {format_miles(item.baseline_odometer)}"
        rows.append(
            [
                item.component,
                last_done,
                format_used(item),
                format_miles(item.due_odometer),
                item.due_date.isoformat() if item.due_date else "-",
                item.priority.label,
            ]
        )
    return rows


def make_feed_table(recs: Iterable[MaintenanceRecommendation]) -> List[List[str]]:
    """Convert recommendations to table rows."""
    rows = []
    for rec in recs:
        rows.append(
            [
                rec.priority.label,
                rec.vehicle_id,
                rec.component,
                rec.recommended_by.isoformat(),
                truncate(rec.explanation),
                format_cost(rec.estimated_cost),
                rec.id[:8],
            ]
        )
    return rows


def make_catalog_table(catalog: Catalog) -> List[List[str]]:
    """Convert catalog items to table rows, sorted by component."""
    rows = []
    for item in sorted(catalog, key=lambda i: i.key):
        rows.append(
            [
                item.component,
                format_interval(item.interval_miles, item.interval_months),
                item.safety_class.value,
                format_cost(item.estimated_cost),
            ]
        )
    return rows


FEED_HEADERS = ["Priority", "Vehicle", "Component", "By", "Why", "Est. Cost", "Id"]


# =============================================================================
# Catalog selection
# =============================================================================


def get_catalog(args) -> Catalog:
    """Catalog from --catalog, then $AUTOCARE_CATALOG, then the built-in defaults."""
    catalog_file = args.catalog or os.environ.get(CATALOG_ENV)
    if catalog_file:
        catalog = load_catalog(catalog_file)
    else:
        catalog = default_catalog()
    if args.overrides:
        catalog = catalog.with_overrides(load_overrides(args.overrides))
    return catalog


# =============================================================================
# Commands
# =============================================================================


def cmd_catalog(args, catalog: Catalog):
    """List the maintenance catalog in effect."""
    print(f"Catalog items: {len(catalog)}")
    print()
    headers = ["Component", "Interval", "Safety Class", "Est. Cost"]
    print(tabulate(make_catalog_table(catalog), headers=headers, tablefmt="simple"))
    return 0


def cmd_status(args, catalog: Catalog):
    """Show which items are due for one vehicle."""
    if not args.vehicle_file.exists():
        print(f"Error: File not found: {args.vehicle_file}")
        return 1

    try:
        snapshot = load_vehicle(args.vehicle_file, as_of_date=args.as_of)
        due_items, gaps = evaluate_vehicle(snapshot, catalog)
    except VEHICLE_ERRORS as e:
        print(f"Error: Cannot read {args.vehicle_file}: {e}")
        return 1

    print(f"Vehicle: {snapshot.name}")
    print(
        f"Current odometer: {snapshot.current_odometer:,.0f} "
        f"(as of {snapshot.as_of_date.isoformat()})"
    )
    print(f"History entries: {len(snapshot.history)}")
    print()

    headers = ["Component", "Last Done", "Used", "Due (mi)", "Due (date)", "Priority"]
    for state in (DueState.OVERDUE, DueState.DUE, DueState.DUE_SOON):
        group = sorted(
            (i for i in due_items if i.state is state),
            key=lambda i: (-i.priority.value, i.item.key),
        )
        if group:
            print(f"{state.label.upper()}:")
            print(tabulate(make_status_table(group), headers=headers, tablefmt="simple"))
            print()

    if not due_items:
        print("Nothing due.")
        print()

    if gaps:
        print("NOT EVALUATED (no usable baseline):")
        for gap in gaps:
            print(f"  {gap.component}: {gap.reason}")
        print()

    return 0


def cmd_recommend(args, catalog: Catalog):
    """Build the ranked recommendation feed for several vehicles."""
    snapshots = []
    load_failures = {}
    for path in args.vehicle_files:
        try:
            snapshots.append(load_vehicle(path, as_of_date=args.as_of))
        except VEHICLE_ERRORS as e:
            load_failures[str(path)] = f"{type(e).__name__}: {e}"

    existing = load_recommendations(args.open) if args.open else []
    result = recommend(snapshots, catalog, existing, max_workers=args.workers)

    print(f"Vehicles: {len(snapshots)}")
    print(f"Open recommendations: {len(existing)}")
    print()

    if result.alerts:
        print("ALERTS:")
        print(
            tabulate(make_feed_table(result.alerts), headers=FEED_HEADERS, tablefmt="simple")
        )
        print()

    if result.feed:
        print("RECOMMENDATIONS:")
        print(tabulate(make_feed_table(result.feed), headers=FEED_HEADERS, tablefmt="simple"))
        print()
    else:
        print("No recommendations.")
        print()

    if result.resolved:
        print(f"RESOLVED ({len(result.resolved)} no longer due):")
        for rec in result.resolved:
            print(f"  {rec.vehicle_id}: {rec.component} [{rec.id[:8]}]")
        print()

    failures = {**load_failures, **result.failures}
    if failures:
        print("FAILED:")
        for vehicle_id, message in sorted(failures.items()):
            print(f"  {vehicle_id}: {message}")
        print()

    if args.save:
        save_recommendations(args.open, result.feed, as_of=args.as_of or date.today())
        print(f"Saved {len(result.feed)} recommendation(s) to {args.open}")

    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s catalog
  %(prog)s --catalog catalog.yaml --overrides mine.yaml catalog
  %(prog)s status vehicles/civic.yaml
  %(prog)s status vehicles/civic.yaml --as-of 2025-06-01
  %(prog)s recommend vehicles/*.yaml
  %(prog)s recommend vehicles/*.yaml --open open.yaml --save
""",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help=f"Catalog YAML file (default: ${CATALOG_ENV} or built-in catalog)",
    )
    parser.add_argument(
        "--overrides",
        type=Path,
        help="Per-user catalog overrides YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Catalog subcommand
    subparsers.add_parser("catalog", help="List the maintenance catalog in effect")

    # Status subcommand
    status_parser = subparsers.add_parser(
        "status", help="Show which items are due for one vehicle"
    )
    status_parser.add_argument(
        "vehicle_file",
        type=Path,
        help="Path to vehicle YAML file",
    )
    status_parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        help="Evaluate as of this date (YYYY-MM-DD, default: file or today)",
    )

    # Recommend subcommand
    recommend_parser = subparsers.add_parser(
        "recommend", help="Build the ranked recommendation feed for several vehicles"
    )
    recommend_parser.add_argument(
        "vehicle_files",
        type=Path,
        nargs="+",
        help="Vehicle YAML files",
    )
    recommend_parser.add_argument(
        "--open",
        type=Path,
        help="YAML file of currently open recommendations",
    )
    recommend_parser.add_argument(
        "--save",
        action="store_true",
        help="Write the merged feed back to the --open file",
    )
    recommend_parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        help="Evaluate as of this date (YYYY-MM-DD, default: file or today)",
    )
    recommend_parser.add_argument(
        "--workers",
        type=int,
        help="Number of vehicles evaluated in parallel",
    )

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "recommend" and args.save and not args.open:
        print("Error: --save requires --open")
        return 1

    for path in (args.catalog, args.overrides):
        if path is not None and not path.exists():
            print(f"Error: File not found: {path}")
            return 1

    try:
        catalog = get_catalog(args)
    except (CatalogError, OSError, yaml.YAMLError) as e:
        print(f"Error: Invalid catalog: {e}")
        return 1

    # Dispatch to command handler
    if args.command == "catalog":
        return cmd_catalog(args, catalog)
    elif args.command == "status":
        return cmd_status(args, catalog)
    elif args.command == "recommend":
        return cmd_recommend(args, catalog)

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
