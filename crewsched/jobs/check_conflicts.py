"""Pre-commit schedule conflict check job."""
import argparse
import logging
import sys
from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from crewsched.config import settings
from crewsched.conflicts.detector import detect_conflicts, has_blocking_conflicts, summarize_conflicts
from crewsched.ingest.crews import load_crews
from crewsched.ingest.schedule import ProposedEntry, load_proposed_entries, load_schedule_entries
from crewsched.schedule.models import ConflictCheckContext, ScheduleEntry
from crewsched.schedule.snapshots import RELEASED_STATUSES, crew_day_capacity, entries_on_date
from crewsched.utils.io import write_output_csv
from crewsched.utils.logs import setup_job_logging

logger = logging.getLogger(__name__)


def build_context(
    proposed: ProposedEntry,
    entries: List[ScheduleEntry],
    crew_max_footage: Dict[str, Optional[float]]
) -> ConflictCheckContext:
    """Assemble the same-date context for one proposed entry. Cancelled entries hold no time or footage."""
    entry = proposed.entry
    same_day = [e for e in entries_on_date(entries, entry.scheduled_date) if e.status not in RELEASED_STATUSES]
    return ConflictCheckContext(
        existing_entries=same_day,
        crew_capacity=crew_day_capacity(same_day, entry.crew_id, entry.scheduled_date) if entry.crew_id else None,
        crew_max_footage=crew_max_footage.get(entry.crew_id) if entry.crew_id else None,
        preferred_crew_id=proposed.preferred_crew_id,
        avoid_crew_ids=proposed.avoid_crew_ids,
    )


def check_proposed_entries(
    proposed_entries: List[ProposedEntry],
    entries: List[ScheduleEntry],
    crew_max_footage: Optional[Dict[str, Optional[float]]] = None
) -> pd.DataFrame:
    """
    Run conflict detection for every proposed entry.

    Returns:
        One row per conflict; entries without conflicts get a single row
        with an empty severity so every proposal appears in the report.
    """
    crew_max_footage = crew_max_footage or {}

    rows = []
    for position, proposed in enumerate(proposed_entries, start=1):
        entry = proposed.entry
        context = build_context(proposed, entries, crew_max_footage)
        conflicts = detect_conflicts(entry, context, settings.default_max_daily_footage)

        base = {
            "proposal": position,
            "entry_id": entry.entry_id,
            "entry_type": entry.entry_type.value,
            "crew_id": entry.crew_id,
            "sales_rep_id": entry.sales_rep_id,
            "scheduled_date": entry.scheduled_date.isoformat(),
            "blocking": has_blocking_conflicts(conflicts),
            "summary": summarize_conflicts(conflicts),
        }

        if not conflicts:
            rows.append({**base, "conflict_type": None, "severity": None, "message": None,
                         "details": None, "related_entry_id": None})
            continue

        if base["blocking"]:
            logger.warning(f"Proposal {position} ({entry.entry_type.value} on {base['scheduled_date']}): {base['summary']}")

        for conflict in conflicts:
            rows.append({
                **base,
                "conflict_type": conflict.type.value,
                "severity": conflict.severity.value,
                "message": conflict.message,
                "details": conflict.details,
                "related_entry_id": conflict.related_entry_id,
            })

    return pd.DataFrame(rows)


def main(argv=None) -> int:
    """Main entry point for the conflict check job."""
    parser = argparse.ArgumentParser(description="Validate proposed schedule entries before saving")
    parser.add_argument("--schedule", required=True, help="Existing schedule entries (CSV or XLSX)")
    parser.add_argument("--proposed", required=True, help="Entries to validate (CSV or XLSX)")
    parser.add_argument("--crews", help="Crew export, for per-crew max daily footage")
    parser.add_argument(
        "--fail-on-blocking",
        action="store_true",
        help="Exit with status 1 when any error-severity conflict is found"
    )
    args = parser.parse_args(argv)

    setup_job_logging("check_conflicts", settings.log_dir)

    start_time = datetime.now()
    logger.info("Starting schedule conflict check...")

    try:
        entries = load_schedule_entries(args.schedule)
        proposed_entries = load_proposed_entries(args.proposed)
        crew_max_footage = {}
        if args.crews:
            crew_max_footage = {crew.id: crew.max_daily_footage for crew in load_crews(args.crews)}

        report_df = check_proposed_entries(proposed_entries, entries, crew_max_footage)
        if not report_df.empty:
            write_output_csv(report_df, settings.out_dir, "schedule_conflicts")

    except Exception as e:
        logger.error(f"Error during conflict check: {e}", exc_info=True)
        return 2

    blocking = int(report_df.drop_duplicates("proposal")["blocking"].sum()) if not report_df.empty else 0

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(
        f"Conflict check complete: {len(proposed_entries)} proposals, {blocking} blocked, "
        f"in {duration:.2f} seconds",
        extra={"duration": duration}
    )

    if args.fail_on_blocking and blocking:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
