"""Crew assignment suggestions."""
import logging
from typing import Iterable, List, Optional

from crewsched.schedule.models import (
    AssignmentSuggestion,
    CandidateCrew,
    ScoreBreakdown,
    SuggestionContext,
)
from crewsched.score.evaluators import (
    capacity_score,
    is_over_capacity,
    match_skills,
    preference_score,
    proximity_score,
    skill_score,
    territory_score,
)
from crewsched.score.reasons import build_reasons
from crewsched.score.rules import (
    BEST_MATCH_MIN_SCORE,
    DEFAULT_MAX_DAILY_FOOTAGE,
    DEFAULT_WEIGHTS,
    QUICK_PICK_LIMIT,
    QUICK_PICK_MIN_SCORE,
    ScoringWeights,
)
from crewsched.utils.numbers import round_half_up

logger = logging.getLogger(__name__)


def score_crew(
    crew: CandidateCrew,
    context: SuggestionContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> AssignmentSuggestion:
    """
    Score one crew for a job.

    Args:
        crew: Candidate crew with its snapshot for the job date
        context: Job requirements
        weights: Factor weights and penalties
        default_max_footage: Max daily footage for crews without one

    Returns:
        Suggestion whose score equals the sum of its breakdown
    """
    breakdown = ScoreBreakdown(
        preference=preference_score(crew, context, weights),
        territory=territory_score(crew, context, weights),
        skills=skill_score(crew, context, weights),
        capacity=capacity_score(crew, context, weights, default_max_footage),
        proximity=proximity_score(crew, weights),
    )
    score = breakdown.total
    _, missing = match_skills(crew, context.skill_tag_ids)

    return AssignmentSuggestion(
        crew=crew,
        score=score,
        match_percent=round_half_up(score),
        reasons=build_reasons(crew, context, default_max_footage),
        breakdown=breakdown,
        is_preferred=context.preferred_crew_id == crew.id,
        has_all_skills=not missing,
        is_over_capacity=is_over_capacity(crew, context, default_max_footage),
        should_avoid=crew.id in context.avoid_crew_ids,
    )


def rank_key(suggestion: AssignmentSuggestion):
    """Avoided crews after all others, then highest score first."""
    return (suggestion.should_avoid, -suggestion.score)


def suggest_crews(
    candidates: Iterable[CandidateCrew],
    context: SuggestionContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> List[AssignmentSuggestion]:
    """
    Rank active crews for a job.

    Inactive crews are skipped. Ties keep candidate order.
    """
    suggestions = [
        score_crew(crew, context, weights, default_max_footage)
        for crew in candidates
        if crew.is_active
    ]
    suggestions.sort(key=rank_key)

    logger.debug(
        f"Ranked {len(suggestions)} crews for job {context.job_id or '<new>'} "
        f"on {context.scheduled_date.isoformat()}"
    )
    return suggestions


def quick_picks(
    suggestions: List[AssignmentSuggestion],
    limit: int = QUICK_PICK_LIMIT,
    min_score: float = QUICK_PICK_MIN_SCORE
) -> List[AssignmentSuggestion]:
    """Top non-avoided suggestions scoring at least min_score."""
    picks = [s for s in suggestions if not s.should_avoid and s.score >= min_score]
    return picks[:limit]


def best_match(
    suggestions: List[AssignmentSuggestion],
    min_score: float = BEST_MATCH_MIN_SCORE
) -> Optional[AssignmentSuggestion]:
    """
    The top suggestion when it is confident enough to recommend outright.

    None means a dispatcher has to pick manually.
    """
    if not suggestions:
        return None
    best = suggestions[0]
    if best.should_avoid or best.score < min_score:
        return None
    return best
