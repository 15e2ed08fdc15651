"""Unit tests for export ingestion and cell cleaning."""
from datetime import date, time

import pytest

from crewsched.ingest.cells import clean_bool, clean_date, clean_float, clean_time, split_ids
from crewsched.ingest.crews import load_crews, load_distances, parse_proficiency
from crewsched.ingest.schedule import (
    load_jobs,
    load_proposed_entries,
    load_schedule_entries,
    parse_entry_type,
)
from crewsched.schedule.models import EntryType, Proficiency
from crewsched.utils.fuzzy import map_headers


def write_csv(path, text):
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return str(path)


class TestCellCleaning:
    """Test cell cleaners."""

    def test_clean_float(self):
        assert clean_float("1,250") == 1250
        assert clean_float("150 LF") == 150
        assert clean_float(12.5) == 12.5
        assert clean_float("n/a") is None
        assert clean_float(None) is None
        assert clean_float(float("nan")) is None

    def test_clean_bool(self):
        assert clean_bool("Yes") is True
        assert clean_bool("inactive") is False
        assert clean_bool(None) is True
        assert clean_bool("maybe", default=False) is False

    def test_split_ids(self):
        assert split_ids("t1; t2,t3") == ["t1", "t2", "t3"]
        assert split_ids(" ") == []
        assert split_ids(None) == []

    def test_clean_date(self):
        assert clean_date("2025-01-14") == date(2025, 1, 14)
        assert clean_date("1/14/2025") == date(2025, 1, 14)
        assert clean_date("someday") is None

    def test_clean_time(self):
        assert clean_time("9:00") == time(9, 0)
        assert clean_time("13:30:00") == time(13, 30)
        assert clean_time("25:00") is None
        assert clean_time("noon") is None

    def test_parse_enums(self):
        assert parse_proficiency("Expert") == Proficiency.EXPERT
        assert parse_proficiency("guru") is None
        assert parse_entry_type("Job Visit") == EntryType.JOB_VISIT
        assert parse_entry_type("job-visit") == EntryType.JOB_VISIT
        assert parse_entry_type("lunch") == EntryType.OTHER


class TestHeaderMapping:
    """Test header mapping."""

    def test_exact_match_wins(self):
        mapping = map_headers({"crew_id": ["crew_id", "id"], "name": ["name"]}, ["Crew ID", "Name"])
        assert mapping == {"crew_id": "Crew ID", "name": "Name"}

    def test_fuzzy_match(self):
        mapping = map_headers({"estimated_footage": ["estimated_footage"]}, ["Estimated Footag"])
        assert mapping["estimated_footage"] == "Estimated Footag"

    def test_unmapped_is_none(self):
        mapping = map_headers({"territory_id": ["territory_id"]}, ["color"])
        assert mapping["territory_id"] is None


class TestLoadCrews:
    """Test crew and skill loading."""

    def test_loads_crews_with_skills(self, tmp_path):
        crews_path = write_csv(tmp_path / "crews.csv", """
crew_id,name,active,territory_id,territory_name,max_daily_lf,product_skills
c1,Alpha,yes,north,North,250,wood;vinyl
c2,Bravo,no,,,,
,Nobody,yes,,,,
""")
        skills_path = write_csv(tmp_path / "skills.csv", """
crew_id,skill_tag_id,proficiency
c1,t1,expert
c1,t2,
""")
        crews = load_crews(crews_path, skills_path)

        assert [c.id for c in crews] == ["c1", "c2"]
        alpha, bravo = crews
        assert alpha.name == "Alpha"
        assert alpha.home_territory_id == "north"
        assert alpha.max_daily_footage == 250
        assert alpha.product_skills == ["wood", "vinyl"]
        assert alpha.skill_tag_ids == {"t1", "t2"}
        assert alpha.proficiency_for("t1") == Proficiency.EXPERT
        assert alpha.proficiency_for("t2") is None
        assert alpha.capacity is None
        assert bravo.is_active is False
        assert bravo.max_daily_footage is None

    def test_missing_required_header(self, tmp_path):
        path = write_csv(tmp_path / "crews.csv", """
color,size
red,1
""")
        with pytest.raises(ValueError, match="Missing required headers"):
            load_crews(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_crews(str(tmp_path / "nope.csv"))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "crews.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError, match="Unsupported file format"):
            load_crews(str(path))

    def test_load_distances(self, tmp_path):
        path = write_csv(tmp_path / "distances.csv", """
job_id,crew_id,distance_miles,travel_minutes
j1,c1,12.4,25
j1,c2,,
""")
        distances = load_distances(path)
        assert distances[("j1", "c1")] == (12.4, 25)
        assert distances[("j1", "c2")] == (None, None)


class TestLoadSchedule:
    """Test schedule, job and proposed entry loading."""

    def test_load_schedule_entries(self, tmp_path):
        path = write_csv(tmp_path / "schedule.csv", """
id,entry_type,crew_id,scheduled_date,start_time,end_time,estimated_footage,status,title
e1,job_visit,c1,2025-01-14,8:00,12:00,150,,Smith job
e2,Blocked,c1,2025-01-15,,,,,Truck service
e3,job_visit,c2,2025-01-14,14:00,9:00,50,,Backwards
e4,job_visit,c2,2025-01-14,,,80,Cancelled,
""")
        entries = load_schedule_entries(path)

        assert [e.id for e in entries] == ["e1", "e2", "e4"]
        first = entries[0]
        assert first.entry_type == EntryType.JOB_VISIT
        assert first.start_time == time(8, 0)
        assert first.estimated_footage == 150
        assert first.status == "scheduled"
        assert entries[1].entry_type == EntryType.BLOCKED
        assert entries[2].status == "cancelled"

    def test_load_jobs(self, tmp_path):
        path = write_csv(tmp_path / "jobs.csv", """
job_id,scheduled_date,estimated_footage,product_type,skill_tag_ids,territory_id,preferred_crew_id,avoid_crew_ids
j1,2025-01-14,120,vinyl,t1;t2,north,c1,c3;c4
j2,not a date,80,,,,,
""")
        jobs = load_jobs(path)

        assert len(jobs) == 1
        job = jobs[0]
        assert job.job_id == "j1"
        assert job.scheduled_date == date(2025, 1, 14)
        assert job.skill_tag_ids == ["t1", "t2"]
        assert job.avoid_crew_ids == ["c3", "c4"]
        assert job.preferred_crew_id == "c1"

    def test_load_proposed_entries(self, tmp_path):
        path = write_csv(tmp_path / "proposed.csv", """
id,entry_type,crew_id,scheduled_date,start_time,end_time,estimated_footage,avoid_crew_ids
,job_visit,c1,2025-01-14,9:00,11:00,100,c1
e1,job_visit,c1,2025-01-14,,,60,
""")
        proposed = load_proposed_entries(path)

        assert len(proposed) == 2
        assert proposed[0].entry.entry_id is None
        assert proposed[0].avoid_crew_ids == ["c1"]
        assert proposed[1].entry.entry_id == "e1"
        assert proposed[1].entry.estimated_footage == 60
