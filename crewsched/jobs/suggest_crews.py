"""Batch crew suggestion job."""
import argparse
import logging
import sys
from datetime import datetime
from typing import Dict, List, Optional, Tuple

import duckdb
import pandas as pd
from tqdm import tqdm

from crewsched.config import settings
from crewsched.ingest.crews import load_crews, load_distances
from crewsched.ingest.schedule import load_jobs, load_schedule_entries
from crewsched.schedule.models import CandidateCrew, CrewCapacity, ScheduleEntry, SuggestionContext
from crewsched.schedule.snapshots import capacity_by_crew
from crewsched.score.reasons import format_reasons
from crewsched.score.suggester import best_match, quick_picks, suggest_crews
from crewsched.utils.io import write_output_csv
from crewsched.utils.logs import setup_job_logging

logger = logging.getLogger(__name__)

Distances = Dict[Tuple[str, str], Tuple[Optional[float], Optional[float]]]


def crews_for_job(
    crews: List[CandidateCrew],
    job: SuggestionContext,
    entries: Optional[List[ScheduleEntry]],
    distances: Distances
) -> List[CandidateCrew]:
    """
    Copy crews with the job date's capacity and the job's distances attached.

    Without a schedule export capacity stays unknown; with one, a crew with
    nothing booked that day has an empty (zero footage) snapshot.
    """
    capacity = capacity_by_crew(entries, job.scheduled_date) if entries is not None else None

    prepared = []
    for crew in crews:
        update = {}
        if capacity is not None:
            update["capacity"] = capacity.get(crew.id, CrewCapacity())
        miles, minutes = distances.get((job.job_id, crew.id), (None, None))
        if miles is not None:
            update["distance_miles"] = miles
            update["travel_minutes"] = minutes
        prepared.append(crew.model_copy(update=update))
    return prepared


def suggest_for_jobs(
    crews: List[CandidateCrew],
    jobs: List[SuggestionContext],
    entries: Optional[List[ScheduleEntry]] = None,
    distances: Optional[Distances] = None,
    top: Optional[int] = None
) -> pd.DataFrame:
    """
    Rank crews for every job.

    Args:
        crews: Crew roster
        jobs: Jobs awaiting assignment
        entries: Existing schedule entries (all dates), used for capacity
        distances: (job_id, crew_id) -> (miles, minutes)
        top: Keep only the first N suggestions per job

    Returns:
        One row per (job, ranked crew)
    """
    distances = distances or {}
    weights = settings.scoring_weights()

    rows = []
    for job in tqdm(jobs, total=len(jobs), desc="Suggesting crews"):
        candidates = crews_for_job(crews, job, entries, distances)
        suggestions = suggest_crews(candidates, job, weights, settings.default_max_daily_footage)

        picks = {
            s.crew.id for s in quick_picks(
                suggestions, settings.quick_pick_limit, settings.quick_pick_min_score
            )
        }
        best = best_match(suggestions, settings.best_match_min_score)

        if best is None:
            logger.info(f"Job {job.job_id}: no confident match, manual pick required")

        ranked = suggestions[:top] if top else suggestions
        for rank, suggestion in enumerate(ranked, start=1):
            rows.append({
                "job_id": job.job_id,
                "scheduled_date": job.scheduled_date.isoformat(),
                "rank": rank,
                "crew_id": suggestion.crew.id,
                "crew_name": suggestion.crew.name,
                "score": round(suggestion.score, 2),
                "match_percent": suggestion.match_percent,
                "preference_score": round(suggestion.breakdown.preference, 2),
                "territory_score": round(suggestion.breakdown.territory, 2),
                "skill_score": round(suggestion.breakdown.skills, 2),
                "capacity_score": round(suggestion.breakdown.capacity, 2),
                "proximity_score": round(suggestion.breakdown.proximity, 2),
                "is_preferred": suggestion.is_preferred,
                "has_all_skills": suggestion.has_all_skills,
                "is_over_capacity": suggestion.is_over_capacity,
                "should_avoid": suggestion.should_avoid,
                "is_quick_pick": suggestion.crew.id in picks,
                "is_best_match": best is not None and best.crew.id == suggestion.crew.id,
                "reason_text": format_reasons(suggestion.reasons),
            })

    return pd.DataFrame(rows)


def persist_suggestions(result_df: pd.DataFrame, db_path: str) -> None:
    """Replace the crew_suggestion table with this run's results."""
    conn = duckdb.connect(db_path)
    try:
        conn.execute("DROP TABLE IF EXISTS crew_suggestion")
        conn.register("result_df", result_df)
        conn.execute("CREATE TABLE crew_suggestion AS SELECT *, CURRENT_TIMESTAMP AS updated_at FROM result_df")
    finally:
        conn.close()
    logger.info(f"Persisted {len(result_df)} suggestions to DuckDB table crew_suggestion")


def main(argv=None):
    """Main entry point for the crew suggestion job."""
    parser = argparse.ArgumentParser(description="Rank crews for jobs awaiting assignment")
    parser.add_argument("--crews", required=True, help="Crew export (CSV or XLSX)")
    parser.add_argument("--jobs", required=True, help="Jobs to assign (CSV or XLSX)")
    parser.add_argument("--skills", help="Crew skill tags export")
    parser.add_argument("--schedule", help="Existing schedule entries, used for daily capacity")
    parser.add_argument("--distances", help="Precomputed crew-to-job distances")
    parser.add_argument("--top", type=int, help="Keep only the top N crews per job")
    parser.add_argument("--no-db", action="store_true", help="Skip writing results to DuckDB")
    args = parser.parse_args(argv)

    setup_job_logging("suggest_crews", settings.log_dir)

    start_time = datetime.now()
    logger.info("Starting crew suggestion job...")

    try:
        crews = load_crews(args.crews, args.skills)
        jobs = load_jobs(args.jobs)
        entries = load_schedule_entries(args.schedule) if args.schedule else None
        distances = load_distances(args.distances) if args.distances else {}

        if not jobs:
            logger.warning("No jobs found to assign")
            return

        result_df = suggest_for_jobs(crews, jobs, entries, distances, args.top)
        write_output_csv(result_df, settings.out_dir, "crew_suggestions")

        if not args.no_db and not result_df.empty:
            persist_suggestions(result_df, settings.duckdb_path)

    except Exception as e:
        logger.error(f"Error during crew suggestion: {e}", exc_info=True)
        sys.exit(1)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(
        f"Crew suggestion complete: {len(jobs)} jobs ranked in {duration:.2f} seconds",
        extra={"duration": duration}
    )


if __name__ == "__main__":
    main()
