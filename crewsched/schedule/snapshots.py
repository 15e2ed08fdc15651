"""Same-date filtering and daily capacity rollups over schedule entries."""
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List

from crewsched.schedule.models import CrewCapacity, EntryType, ScheduleEntry

# Statuses that no longer hold crew capacity
RELEASED_STATUSES = {"cancelled"}


def entries_on_date(entries: Iterable[ScheduleEntry], on_date: date) -> List[ScheduleEntry]:
    """Entries scheduled on on_date, as conflict detection expects them."""
    return [e for e in entries if e.scheduled_date == on_date]


def _holds_capacity(entry: ScheduleEntry) -> bool:
    return (
        entry.crew_id is not None
        and entry.entry_type == EntryType.JOB_VISIT
        and entry.status not in RELEASED_STATUSES
    )


def crew_day_capacity(entries: Iterable[ScheduleEntry], crew_id: str, on_date: date) -> CrewCapacity:
    """
    Committed footage, hours and job count for one crew on one date.

    Only non-cancelled job visits count.
    """
    return capacity_by_crew(entries, on_date).get(crew_id, CrewCapacity())


def capacity_by_crew(entries: Iterable[ScheduleEntry], on_date: date) -> Dict[str, CrewCapacity]:
    """Daily capacity for every crew with job visits on on_date."""
    rollup: Dict[str, CrewCapacity] = defaultdict(CrewCapacity)
    for entry in entries:
        if entry.scheduled_date != on_date or not _holds_capacity(entry):
            continue
        capacity = rollup[entry.crew_id]
        capacity.scheduled_footage += entry.estimated_footage or 0
        capacity.scheduled_hours += entry.estimated_hours or 0
        capacity.job_count += 1
    return dict(rollup)
