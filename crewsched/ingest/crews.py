"""Crew, crew skill and distance export ingestion."""
import logging
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError
from tqdm import tqdm

from crewsched.ingest.cells import (
    cell,
    clean_bool,
    clean_float,
    clean_text,
    resolve_headers,
    split_ids,
)
from crewsched.schedule.models import CandidateCrew, CrewSkillTag, Proficiency
from crewsched.utils.io import read_data_file

logger = logging.getLogger(__name__)

# Canonical field -> accepted header names
CREW_HEADERS = {
    "crew_id": ["crew_id", "id"],
    "name": ["name", "crew_name"],
    "is_active": ["is_active", "active"],
    "home_territory_id": ["home_territory_id", "territory_id"],
    "territory_name": ["territory_name", "home_territory"],
    "max_daily_footage": ["max_daily_lf", "max_daily_footage", "max_footage"],
    "product_skills": ["product_skills", "skills"],
}

SKILL_HEADERS = {
    "crew_id": ["crew_id"],
    "skill_tag_id": ["skill_tag_id", "skill_id", "tag_id"],
    "proficiency": ["proficiency", "skill_level", "proficiency_level"],
    "name": ["skill_name", "tag_name"],
}

DISTANCE_HEADERS = {
    "job_id": ["job_id"],
    "crew_id": ["crew_id"],
    "distance_miles": ["distance_miles", "distance_mi", "miles"],
    "travel_minutes": ["travel_minutes", "drive_minutes", "minutes"],
}

PROFICIENCY_VALUES = {p.value for p in Proficiency}


def parse_proficiency(value) -> Optional[Proficiency]:
    """Map a proficiency cell to a level; unknown labels are left unrecorded."""
    text = clean_text(value)
    if text is None or text.lower() not in PROFICIENCY_VALUES:
        return None
    return Proficiency(text.lower())


def load_crew_skills(file_path: str) -> Dict[str, List[CrewSkillTag]]:
    """
    Load crew skill tags keyed by crew id.

    Args:
        file_path: CSV/XLSX export with one row per (crew, skill tag)

    Returns:
        Dict mapping crew id to its skill tags
    """
    df = read_data_file(file_path)
    header_map = resolve_headers(df, SKILL_HEADERS, ["crew_id", "skill_tag_id"])

    skills: Dict[str, List[CrewSkillTag]] = {}
    for _, row in df.iterrows():
        crew_id = clean_text(cell(row, header_map, "crew_id"))
        tag_id = clean_text(cell(row, header_map, "skill_tag_id"))
        if not crew_id or not tag_id:
            continue
        skills.setdefault(crew_id, []).append(CrewSkillTag(
            skill_tag_id=tag_id,
            proficiency=parse_proficiency(cell(row, header_map, "proficiency")),
            name=clean_text(cell(row, header_map, "name")),
        ))

    logger.info(f"Loaded {sum(len(v) for v in skills.values())} skill tags for {len(skills)} crews")
    return skills


def load_crews(crews_path: str, skills_path: Optional[str] = None) -> List[CandidateCrew]:
    """
    Load crews from an export, attaching skill tags when a skills file is given.

    Rows without a crew id or with invalid values are skipped with a warning.
    """
    logger.info(f"Starting crew ingestion from {crews_path}")

    df = read_data_file(crews_path)
    header_map = resolve_headers(df, CREW_HEADERS, ["crew_id"])
    logger.info(f"Header mapping: {header_map}")

    skills = load_crew_skills(skills_path) if skills_path else {}

    crews = []
    skipped = 0
    for idx, row in tqdm(df.iterrows(), total=len(df), desc="Loading crews"):
        crew_id = clean_text(cell(row, header_map, "crew_id"))
        if not crew_id:
            skipped += 1
            continue

        try:
            crews.append(CandidateCrew(
                id=crew_id,
                name=clean_text(cell(row, header_map, "name")),
                is_active=clean_bool(cell(row, header_map, "is_active"), default=True),
                home_territory_id=clean_text(cell(row, header_map, "home_territory_id")),
                territory_name=clean_text(cell(row, header_map, "territory_name")),
                max_daily_footage=clean_float(cell(row, header_map, "max_daily_footage")),
                product_skills=split_ids(cell(row, header_map, "product_skills")),
                skill_tags=skills.get(crew_id, []),
            ))
        except ValidationError as e:
            logger.warning(f"Skipping crew row {idx}: {e.errors()}")
            skipped += 1

    logger.info(f"Loaded {len(crews)} crews ({skipped} skipped)")
    return crews


def load_distances(file_path: str) -> Dict[Tuple[str, str], Tuple[Optional[float], Optional[float]]]:
    """
    Load precomputed crew-to-job distances.

    Returns:
        Dict mapping (job_id, crew_id) to (distance_miles, travel_minutes)
    """
    df = read_data_file(file_path)
    header_map = resolve_headers(df, DISTANCE_HEADERS, ["job_id", "crew_id", "distance_miles"])

    distances = {}
    for _, row in df.iterrows():
        job_id = clean_text(cell(row, header_map, "job_id"))
        crew_id = clean_text(cell(row, header_map, "crew_id"))
        if not job_id or not crew_id:
            continue
        distances[(job_id, crew_id)] = (
            clean_float(cell(row, header_map, "distance_miles")),
            clean_float(cell(row, header_map, "travel_minutes")),
        )

    logger.info(f"Loaded {len(distances)} crew-job distances")
    return distances
