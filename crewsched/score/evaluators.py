"""Per-factor crew scoring."""
from typing import List, Optional, Tuple

from crewsched.schedule.models import CandidateCrew, SuggestionContext
from crewsched.score.rules import (
    DEFAULT_WEIGHTS,
    DEFAULT_MAX_DAILY_FOOTAGE,
    ScoringWeights,
    PREFERENCE_UNSET_CREDIT,
    TERRITORY_UNSET_CREDIT,
    TERRITORY_FLEXIBLE_CREDIT,
    SKILLS_UNSET_CREDIT,
    CAPACITY_UNKNOWN_CREDIT,
    PROXIMITY_UNKNOWN_CREDIT,
    UTILIZATION_COMFORTABLE,
    UTILIZATION_FULL,
    UTILIZATION_STRETCHED,
    UTILIZATION_NEAR_FULL_SPAN,
    CAPACITY_NEAR_FULL_DROP,
    CAPACITY_STRETCHED_CREDIT,
    CAPACITY_OVERLOADED_CREDIT,
    PROXIMITY_TIERS,
    PROXIMITY_FAR_CREDIT,
)


def preference_score(
    crew: CandidateCrew,
    context: SuggestionContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """
    Score builder/community preference.

    Preferred crew gets full points, avoided crews a flat penalty. With no
    preferred crew on record every crew gets half credit.
    """
    if context.preferred_crew_id == crew.id:
        return weights.preference

    if crew.id in context.avoid_crew_ids:
        return -weights.avoid_penalty

    if not context.preferred_crew_id:
        return weights.preference * PREFERENCE_UNSET_CREDIT

    return 0


def territory_score(
    crew: CandidateCrew,
    context: SuggestionContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """Score home territory match; crews without a home territory are flexible."""
    if not context.territory_id:
        return weights.territory * TERRITORY_UNSET_CREDIT

    if crew.home_territory_id == context.territory_id:
        return weights.territory

    if not crew.home_territory_id:
        return weights.territory * TERRITORY_FLEXIBLE_CREDIT

    return 0


def match_skills(crew: CandidateCrew, required: List[str]) -> Tuple[List[str], List[str]]:
    """Split required skill tag ids into (matched, missing), keeping request order."""
    crew_tags = crew.skill_tag_ids
    matched = [tag_id for tag_id in required if tag_id in crew_tags]
    missing = [tag_id for tag_id in required if tag_id not in crew_tags]
    return matched, missing


def has_legacy_skill(crew: CandidateCrew, context: SuggestionContext) -> bool:
    return bool(context.product_type) and context.product_type in crew.product_skills


def average_proficiency(
    crew: CandidateCrew,
    matched: List[str],
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """Mean proficiency multiplier over matched tags (1.0 when nothing matched)."""
    if not matched:
        return 1.0

    multipliers = [weights.multiplier(crew.proficiency_for(tag_id)) for tag_id in matched]
    return sum(multipliers) / len(multipliers)


def skill_score(
    crew: CandidateCrew,
    context: SuggestionContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """
    Score skill coverage.

    Tag coverage drives the score when tags are required; the legacy product
    type only counts when no tags are required. Each missing tag costs a
    fixed penalty and the result is clamped to [0, weight].
    """
    required = context.skill_tag_ids
    if not required and not context.product_type:
        return weights.skills * SKILLS_UNSET_CREDIT

    matched, missing = match_skills(crew, required)

    base = 0.0
    if required:
        base = weights.skills * (len(matched) / len(required))
        base *= average_proficiency(crew, matched, weights)
    elif has_legacy_skill(crew, context):
        base = weights.skills

    base -= len(missing) * weights.missing_skill_penalty

    return max(0.0, min(weights.skills, base))


def project_utilization(
    crew: CandidateCrew,
    context: SuggestionContext,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> Optional[float]:
    """Projected footage / max footage after adding the job; None without a capacity snapshot."""
    if crew.capacity is None:
        return None

    max_footage = crew.max_daily_footage or default_max_footage
    new_total = crew.capacity.scheduled_footage + (context.estimated_footage or 0)
    return new_total / max_footage


def capacity_credit(utilization: float) -> float:
    """Fraction of the capacity weight earned at a projected utilization."""
    if utilization <= UTILIZATION_COMFORTABLE:
        return 1.0
    elif utilization <= UTILIZATION_FULL:
        # Linear from full credit at 80% down to 70% credit at 100%
        return 1 - (utilization - UTILIZATION_COMFORTABLE) / UTILIZATION_NEAR_FULL_SPAN * CAPACITY_NEAR_FULL_DROP
    elif utilization <= UTILIZATION_STRETCHED:
        return CAPACITY_STRETCHED_CREDIT
    else:
        return CAPACITY_OVERLOADED_CREDIT


def capacity_score(
    crew: CandidateCrew,
    context: SuggestionContext,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> float:
    utilization = project_utilization(crew, context, default_max_footage)
    if utilization is None:
        return weights.capacity * CAPACITY_UNKNOWN_CREDIT
    return weights.capacity * capacity_credit(utilization)


def proximity_score(
    crew: CandidateCrew,
    weights: ScoringWeights = DEFAULT_WEIGHTS
) -> float:
    """Score the precomputed distance to the job site."""
    if crew.distance_miles is None:
        return weights.proximity * PROXIMITY_UNKNOWN_CREDIT

    for max_miles, credit in PROXIMITY_TIERS:
        if crew.distance_miles <= max_miles:
            return weights.proximity * credit
    return weights.proximity * PROXIMITY_FAR_CREDIT


def is_over_capacity(
    crew: CandidateCrew,
    context: SuggestionContext,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> bool:
    utilization = project_utilization(crew, context, default_max_footage)
    return utilization is not None and utilization > UTILIZATION_FULL
