"""Unit tests for same-date filtering and capacity rollups."""
from datetime import date

from crewsched.schedule.models import EntryType, ScheduleEntry
from crewsched.schedule.snapshots import capacity_by_crew, crew_day_capacity, entries_on_date

DAY = date(2025, 1, 14)
NEXT_DAY = date(2025, 1, 15)


def make_entry(entry_id, crew_id="c1", on_date=DAY, entry_type=EntryType.JOB_VISIT, **kwargs):
    return ScheduleEntry(id=entry_id, crew_id=crew_id, scheduled_date=on_date, entry_type=entry_type, **kwargs)


class TestEntriesOnDate:
    """Test date filtering."""

    def test_filters_to_date(self):
        entries = [make_entry("e1"), make_entry("e2", on_date=NEXT_DAY), make_entry("e3")]
        assert [e.id for e in entries_on_date(entries, DAY)] == ["e1", "e3"]

    def test_empty(self):
        assert entries_on_date([], DAY) == []


class TestCapacityRollup:
    """Test daily capacity aggregation."""

    def test_sums_job_visits(self):
        entries = [
            make_entry("e1", estimated_footage=120, estimated_hours=6),
            make_entry("e2", estimated_footage=40, estimated_hours=2),
            make_entry("e3", crew_id="c2", estimated_footage=75),
        ]
        rollup = capacity_by_crew(entries, DAY)

        assert rollup["c1"].scheduled_footage == 160
        assert rollup["c1"].scheduled_hours == 8
        assert rollup["c1"].job_count == 2
        assert rollup["c2"].scheduled_footage == 75
        assert rollup["c2"].job_count == 1

    def test_ignores_cancelled_other_dates_and_non_jobs(self):
        entries = [
            make_entry("e1", estimated_footage=100, status="cancelled"),
            make_entry("e2", estimated_footage=100, on_date=NEXT_DAY),
            make_entry("e3", entry_type=EntryType.BLOCKED, estimated_footage=100),
            make_entry("e4", crew_id=None, estimated_footage=100),
        ]
        assert capacity_by_crew(entries, DAY) == {}

    def test_missing_footage_counts_as_zero(self):
        capacity = crew_day_capacity([make_entry("e1")], "c1", DAY)
        assert capacity.scheduled_footage == 0
        assert capacity.job_count == 1

    def test_crew_without_jobs_is_empty(self):
        capacity = crew_day_capacity([make_entry("e1", estimated_footage=50)], "c9", DAY)
        assert capacity.scheduled_footage == 0
        assert capacity.job_count == 0
