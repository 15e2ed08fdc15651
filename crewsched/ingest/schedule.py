"""Schedule entry, job and proposed entry ingestion."""
import logging
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError
from tqdm import tqdm

from crewsched.ingest.cells import (
    cell,
    clean_date,
    clean_float,
    clean_text,
    clean_time,
    resolve_headers,
    split_ids,
)
from crewsched.schedule.models import (
    ConflictCheckInput,
    EntryType,
    ScheduleEntry,
    SuggestionContext,
)
from crewsched.utils.io import read_data_file

logger = logging.getLogger(__name__)

ENTRY_HEADERS = {
    "id": ["id", "entry_id"],
    "entry_type": ["entry_type", "type"],
    "crew_id": ["crew_id"],
    "sales_rep_id": ["sales_rep_id", "rep_id"],
    "scheduled_date": ["scheduled_date", "date"],
    "start_time": ["start_time"],
    "end_time": ["end_time"],
    "estimated_footage": ["estimated_footage", "footage", "estimated_lf"],
    "estimated_hours": ["estimated_hours", "hours"],
    "title": ["title"],
    "status": ["status"],
    "job_id": ["job_id"],
}

JOB_HEADERS = {
    "job_id": ["job_id", "id"],
    "scheduled_date": ["scheduled_date", "date"],
    "estimated_footage": ["estimated_footage", "footage", "estimated_lf"],
    "product_type": ["product_type", "fence_type"],
    "skill_tag_ids": ["skill_tag_ids", "required_skills"],
    "territory_id": ["territory_id"],
    "preferred_crew_id": ["preferred_crew_id"],
    "avoid_crew_ids": ["avoid_crew_ids"],
}

PROPOSED_HEADERS = dict(ENTRY_HEADERS, **{
    "preferred_crew_id": ["preferred_crew_id"],
    "avoid_crew_ids": ["avoid_crew_ids"],
})

ENTRY_TYPE_VALUES = {t.value for t in EntryType}


class ProposedEntry(BaseModel):
    """An entry awaiting validation plus the builder preferences that apply to it."""
    entry: ConflictCheckInput
    preferred_crew_id: Optional[str] = None
    avoid_crew_ids: List[str] = Field(default_factory=list)


def parse_entry_type(value) -> EntryType:
    """Normalize "Job Visit", "job-visit" etc.; unknown labels become other."""
    text = clean_text(value)
    if text is None:
        return EntryType.OTHER
    normalized = text.lower().replace(" ", "_").replace("-", "_")
    if normalized not in ENTRY_TYPE_VALUES:
        return EntryType.OTHER
    return EntryType(normalized)


def _entry_fields(row, header_map) -> dict:
    return {
        "entry_type": parse_entry_type(cell(row, header_map, "entry_type")),
        "crew_id": clean_text(cell(row, header_map, "crew_id")),
        "sales_rep_id": clean_text(cell(row, header_map, "sales_rep_id")),
        "scheduled_date": clean_date(cell(row, header_map, "scheduled_date")),
        "start_time": clean_time(cell(row, header_map, "start_time")),
        "end_time": clean_time(cell(row, header_map, "end_time")),
        "estimated_footage": clean_float(cell(row, header_map, "estimated_footage")),
        "job_id": clean_text(cell(row, header_map, "job_id")),
    }


def load_schedule_entries(file_path: str) -> List[ScheduleEntry]:
    """
    Load existing schedule entries.

    Rows without an id or a parseable date are skipped with a warning.
    """
    logger.info(f"Starting schedule entry ingestion from {file_path}")

    df = read_data_file(file_path)
    header_map = resolve_headers(df, ENTRY_HEADERS, ["id", "entry_type", "scheduled_date"])

    entries = []
    skipped = 0
    for idx, row in tqdm(df.iterrows(), total=len(df), desc="Loading schedule"):
        fields = _entry_fields(row, header_map)
        fields.update({
            "id": clean_text(cell(row, header_map, "id")),
            "estimated_hours": clean_float(cell(row, header_map, "estimated_hours")),
            "title": clean_text(cell(row, header_map, "title")),
            "status": (clean_text(cell(row, header_map, "status")) or "scheduled").lower(),
        })
        try:
            entries.append(ScheduleEntry(**fields))
        except ValidationError as e:
            logger.warning(f"Skipping schedule row {idx}: {e.errors()}")
            skipped += 1

    logger.info(f"Loaded {len(entries)} schedule entries ({skipped} skipped)")
    return entries


def load_jobs(file_path: str) -> List[SuggestionContext]:
    """Load jobs awaiting crew assignment as suggestion contexts."""
    logger.info(f"Starting job ingestion from {file_path}")

    df = read_data_file(file_path)
    header_map = resolve_headers(df, JOB_HEADERS, ["job_id", "scheduled_date"])

    jobs = []
    skipped = 0
    for idx, row in df.iterrows():
        try:
            jobs.append(SuggestionContext(
                job_id=clean_text(cell(row, header_map, "job_id")),
                scheduled_date=clean_date(cell(row, header_map, "scheduled_date")),
                estimated_footage=clean_float(cell(row, header_map, "estimated_footage")),
                product_type=clean_text(cell(row, header_map, "product_type")),
                skill_tag_ids=split_ids(cell(row, header_map, "skill_tag_ids")),
                territory_id=clean_text(cell(row, header_map, "territory_id")),
                preferred_crew_id=clean_text(cell(row, header_map, "preferred_crew_id")),
                avoid_crew_ids=split_ids(cell(row, header_map, "avoid_crew_ids")),
            ))
        except ValidationError as e:
            logger.warning(f"Skipping job row {idx}: {e.errors()}")
            skipped += 1

    logger.info(f"Loaded {len(jobs)} jobs ({skipped} skipped)")
    return jobs


def load_proposed_entries(file_path: str) -> List[ProposedEntry]:
    """
    Load entries to validate before saving.

    A present id marks an edit of that existing entry.
    """
    logger.info(f"Starting proposed entry ingestion from {file_path}")

    df = read_data_file(file_path)
    header_map = resolve_headers(df, PROPOSED_HEADERS, ["entry_type", "scheduled_date"])

    proposed = []
    skipped = 0
    for idx, row in df.iterrows():
        fields = _entry_fields(row, header_map)
        fields["entry_id"] = clean_text(cell(row, header_map, "id"))
        try:
            proposed.append(ProposedEntry(
                entry=ConflictCheckInput(**fields),
                preferred_crew_id=clean_text(cell(row, header_map, "preferred_crew_id")),
                avoid_crew_ids=split_ids(cell(row, header_map, "avoid_crew_ids")),
            ))
        except ValidationError as e:
            logger.warning(f"Skipping proposed row {idx}: {e.errors()}")
            skipped += 1

    logger.info(f"Loaded {len(proposed)} proposed entries ({skipped} skipped)")
    return proposed
