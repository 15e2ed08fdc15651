"""
Schedule conflict detection.

Validates a prospective schedule entry against the other entries on the
same date. Conflicts are graded signals, never exceptions:

- error: should block saving
- warning: surface prominently
- info: advisory only

existing_entries in the context must already be filtered to the entry's
date. Entries from other dates are treated as same-day commitments.
"""
import logging
from datetime import time
from typing import List, Optional

from crewsched.schedule.models import (
    ConflictCheckContext,
    ConflictCheckInput,
    ConflictSeverity,
    ConflictType,
    EntryType,
    ScheduleConflict,
    ScheduleEntry,
)
from crewsched.score.rules import DEFAULT_MAX_DAILY_FOOTAGE
from crewsched.utils.numbers import format_footage, round_half_up

logger = logging.getLogger(__name__)

# Projected footage as a rounded percent of max footage
ERROR_PERCENT = 150
WARNING_PERCENT = 100
INFO_PERCENT = 90


def detect_conflicts(
    entry: ConflictCheckInput,
    context: ConflictCheckContext,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> List[ScheduleConflict]:
    """
    Run every check and concatenate the results.

    Order: double booking, capacity, time overlap, builder preference.
    """
    conflicts = []
    conflicts.extend(check_double_booking(entry, context))
    conflicts.extend(check_capacity(entry, context, default_max_footage))
    conflicts.extend(check_time_overlap(entry, context))
    conflicts.extend(check_builder_preferences(entry, context))

    if conflicts:
        logger.debug(f"{summarize_conflicts(conflicts)} for entry {entry.entry_id or '<new>'}")
    return conflicts


def _other_entries(entry: ConflictCheckInput, context: ConflictCheckContext) -> List[ScheduleEntry]:
    """Existing entries minus the one being edited."""
    return [e for e in context.existing_entries if entry.entry_id is None or e.id != entry.entry_id]


def check_double_booking(
    entry: ConflictCheckInput,
    context: ConflictCheckContext
) -> List[ScheduleConflict]:
    """
    Flag non-job bookings on a crew's blocked/meeting day and stacked rep assessments.

    Several job visits for one crew on one day are a capacity question and
    are not flagged here.
    """
    conflicts = []
    others = _other_entries(entry, context)

    if entry.crew_id and entry.entry_type != EntryType.JOB_VISIT:
        blocked_or_meeting = [
            e for e in others
            if e.crew_id == entry.crew_id and e.entry_type in (EntryType.BLOCKED, EntryType.MEETING)
        ]
        if blocked_or_meeting:
            conflicts.append(ScheduleConflict(
                type=ConflictType.DOUBLE_BOOKING,
                severity=ConflictSeverity.WARNING,
                message=f"Crew has {len(blocked_or_meeting)} blocked time or meeting(s) on this date",
                details=", ".join(e.title or e.entry_type.value for e in blocked_or_meeting),
                related_entry_id=blocked_or_meeting[0].id,
            ))

    if entry.sales_rep_id and entry.entry_type == EntryType.ASSESSMENT:
        rep_assessments = [
            e for e in others
            if e.sales_rep_id == entry.sales_rep_id and e.entry_type == EntryType.ASSESSMENT
        ]
        if rep_assessments:
            conflicts.append(ScheduleConflict(
                type=ConflictType.DOUBLE_BOOKING,
                severity=ConflictSeverity.INFO,
                message=f"Sales rep has {len(rep_assessments)} other assessment(s) on this date",
                details=", ".join(
                    _format_time(e.start_time) if e.start_time else "All day"
                    for e in rep_assessments
                ),
            ))

    return conflicts


def check_capacity(
    entry: ConflictCheckInput,
    context: ConflictCheckContext,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> List[ScheduleConflict]:
    """Grade the crew's projected footage for the day against its max footage."""
    if entry.entry_type != EntryType.JOB_VISIT or not entry.crew_id or not entry.estimated_footage:
        return []

    max_footage = context.crew_max_footage or default_max_footage
    current_footage = sum(
        e.estimated_footage or 0
        for e in _other_entries(entry, context)
        if e.crew_id == entry.crew_id and e.entry_type == EntryType.JOB_VISIT
    )
    new_total = current_footage + entry.estimated_footage
    percent = round_half_up(new_total / max_footage * 100)

    if percent > ERROR_PERCENT:
        severity = ConflictSeverity.ERROR
        details = "This is significantly over capacity. Consider splitting across days."
    elif percent > WARNING_PERCENT:
        severity = ConflictSeverity.WARNING
        details = "This may require overtime or could extend to next day."
    elif percent > INFO_PERCENT:
        severity = ConflictSeverity.INFO
        details = "Near maximum capacity for the day."
    else:
        return []

    return [ScheduleConflict(
        type=ConflictType.OVER_CAPACITY,
        severity=severity,
        message=(
            f"Crew would be at {percent}% capacity "
            f"({format_footage(new_total)}/{format_footage(max_footage)} LF)"
        ),
        details=details,
    )]


def check_time_overlap(
    entry: ConflictCheckInput,
    context: ConflictCheckContext
) -> List[ScheduleConflict]:
    """Flag timed entries of the same crew or rep whose windows intersect."""
    if entry.start_time is None or entry.end_time is None:
        return []

    conflicts = []
    for other in _other_entries(entry, context):
        if not other.has_time_window:
            continue

        same_crew = entry.crew_id is not None and other.crew_id == entry.crew_id
        same_rep = entry.sales_rep_id is not None and other.sales_rep_id == entry.sales_rep_id
        if not (same_crew or same_rep):
            continue

        if time_ranges_overlap(entry.start_time, entry.end_time, other.start_time, other.end_time):
            side = "Crew" if same_crew else "Sales rep"
            window = f"{_format_time(other.start_time)}-{_format_time(other.end_time)}"
            conflicts.append(ScheduleConflict(
                type=ConflictType.TIME_OVERLAP,
                severity=ConflictSeverity.ERROR,
                message=f"{side} has overlapping time slot ({window})",
                details=other.title or other.entry_type.value,
                related_entry_id=other.id,
            ))

    return conflicts


def check_builder_preferences(
    entry: ConflictCheckInput,
    context: ConflictCheckContext
) -> List[ScheduleConflict]:
    conflicts = []
    if not entry.crew_id:
        return conflicts

    if entry.crew_id in context.avoid_crew_ids:
        conflicts.append(ScheduleConflict(
            type=ConflictType.BUILDER_PREFERENCE,
            severity=ConflictSeverity.WARNING,
            message='This crew is marked as "avoid" for this builder/community',
            details="Consider assigning a different crew if possible.",
        ))

    if context.preferred_crew_id and context.preferred_crew_id != entry.crew_id:
        conflicts.append(ScheduleConflict(
            type=ConflictType.BUILDER_PREFERENCE,
            severity=ConflictSeverity.INFO,
            message="Builder has a preferred crew that is not selected",
            details="This is a preference, not a requirement.",
        ))

    return conflicts


def time_ranges_overlap(start1: time, end1: time, start2: time, end2: time) -> bool:
    """Half-open interval overlap: [start1, end1) and [start2, end2) share time."""
    return start1 < end2 and start2 < end1


def _format_time(value: time) -> str:
    return value.strftime("%H:%M")


# ============================================
# SUMMARY HELPERS
# ============================================

def has_blocking_conflicts(conflicts: List[ScheduleConflict]) -> bool:
    return any(c.severity == ConflictSeverity.ERROR for c in conflicts)


def highest_severity(conflicts: List[ScheduleConflict]) -> Optional[ConflictSeverity]:
    if not conflicts:
        return None
    return max((c.severity for c in conflicts), key=lambda severity: severity.rank)


def summarize_conflicts(conflicts: List[ScheduleConflict]) -> str:
    """Count by severity, e.g. '1 error, 2 warnings, 1 info'. Empty when none."""
    errors = sum(1 for c in conflicts if c.severity == ConflictSeverity.ERROR)
    warnings = sum(1 for c in conflicts if c.severity == ConflictSeverity.WARNING)
    infos = sum(1 for c in conflicts if c.severity == ConflictSeverity.INFO)

    parts = []
    if errors:
        parts.append(f"{errors} error{'s' if errors > 1 else ''}")
    if warnings:
        parts.append(f"{warnings} warning{'s' if warnings > 1 else ''}")
    if infos:
        parts.append(f"{infos} info")
    return ", ".join(parts)
