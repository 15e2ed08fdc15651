"""Human-readable reasons behind a crew suggestion."""
from typing import List, Optional

from crewsched.schedule.models import (
    CandidateCrew,
    Proficiency,
    Reason,
    ReasonType,
    SuggestionContext,
)
from crewsched.score.evaluators import has_legacy_skill, match_skills, project_utilization
from crewsched.score.rules import (
    DEFAULT_MAX_DAILY_FOOTAGE,
    PROXIMITY_CLOSE_MILES,
    PROXIMITY_MODERATE_MILES,
    UTILIZATION_COMFORTABLE,
    UTILIZATION_FULL,
)
from crewsched.utils.numbers import round_half_up


def preference_reason(crew: CandidateCrew, context: SuggestionContext) -> Reason:
    if context.preferred_crew_id == crew.id:
        return Reason(type=ReasonType.POSITIVE, label="Preferred", detail="Builder preferred crew")
    if crew.id in context.avoid_crew_ids:
        return Reason(type=ReasonType.WARNING, label="Avoid", detail="Marked to avoid for this builder")
    if not context.preferred_crew_id:
        return Reason(type=ReasonType.NEUTRAL, label="No preference", detail="No builder preference set")
    return Reason(type=ReasonType.NEUTRAL, label="Not preferred", detail="Builder prefers another crew")


def territory_reason(crew: CandidateCrew, context: SuggestionContext) -> Reason:
    if not context.territory_id:
        return Reason(type=ReasonType.NEUTRAL, label="Any territory", detail="No territory required")
    if crew.home_territory_id == context.territory_id:
        return Reason(
            type=ReasonType.POSITIVE,
            label="Territory",
            detail=f"Home territory: {crew.territory_name or 'Match'}"
        )
    if not crew.home_territory_id:
        return Reason(type=ReasonType.NEUTRAL, label="Flexible", detail="No home territory")
    return Reason(type=ReasonType.WARNING, label="Outside territory", detail="Home territory differs")


def skill_reasons(crew: CandidateCrew, context: SuggestionContext) -> List[Reason]:
    """
    Coverage note for required skill tags, plus a warning for missing ones.

    Args:
        crew: Candidate crew
        context: Job requirements

    Returns:
        Zero to two reasons; the legacy product type is reported separately
    """
    required = context.skill_tag_ids
    if not required:
        if context.product_type:
            # Legacy label handled by legacy_skill_reason
            return []
        return [Reason(type=ReasonType.NEUTRAL, label="No skill requirements")]

    reasons = []
    matched, missing = match_skills(crew, required)

    if matched:
        has_expert = any(crew.proficiency_for(tag_id) == Proficiency.EXPERT for tag_id in matched)
        if has_expert:
            reasons.append(Reason(
                type=ReasonType.POSITIVE,
                label="Expert",
                detail="Expert proficiency in required skills"
            ))
        elif not missing:
            reasons.append(Reason(
                type=ReasonType.POSITIVE,
                label="Skills",
                detail="Has all required skills"
            ))

    if missing:
        plural = "s" if len(missing) > 1 else ""
        reasons.append(Reason(type=ReasonType.WARNING, label=f"Missing {len(missing)} skill{plural}"))

    return reasons


def legacy_skill_reason(crew: CandidateCrew, context: SuggestionContext) -> Optional[Reason]:
    """Product-type note; only scored when no skill tags are required."""
    if not context.product_type:
        return None
    if has_legacy_skill(crew, context):
        return Reason(type=ReasonType.POSITIVE, label=context.product_type)
    if not context.skill_tag_ids:
        return Reason(
            type=ReasonType.WARNING,
            label=f"No {context.product_type}",
            detail="Product type not in crew skills"
        )
    return None


def capacity_reason(
    crew: CandidateCrew,
    context: SuggestionContext,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> Reason:
    utilization = project_utilization(crew, context, default_max_footage)
    if utilization is None:
        return Reason(type=ReasonType.NEUTRAL, label="Capacity unknown", detail="No capacity data for this date")

    percent = round_half_up(utilization * 100)
    # Wording follows the displayed percent; scoring keeps the exact ratio
    if percent > UTILIZATION_FULL * 100:
        return Reason(type=ReasonType.WARNING, label=f"{percent}% capacity", detail="Would be over capacity")
    elif percent > UTILIZATION_COMFORTABLE * 100:
        return Reason(type=ReasonType.NEUTRAL, label=f"{percent}% capacity", detail="Near full capacity")
    return Reason(type=ReasonType.POSITIVE, label="Available", detail=f"{percent}% capacity after job")


def proximity_reason(crew: CandidateCrew) -> Reason:
    if crew.distance_miles is None:
        return Reason(type=ReasonType.NEUTRAL, label="Distance unknown")

    label = f"{round_half_up(crew.distance_miles)} mi"
    drive = None
    if crew.travel_minutes is not None:
        drive = f"{round_half_up(crew.travel_minutes)} min drive"

    if crew.distance_miles <= PROXIMITY_CLOSE_MILES:
        return Reason(type=ReasonType.POSITIVE, label=label, detail=drive)
    elif crew.distance_miles <= PROXIMITY_MODERATE_MILES:
        return Reason(type=ReasonType.NEUTRAL, label=label, detail=drive)
    return Reason(type=ReasonType.WARNING, label=label, detail=drive or "Far from job site")


def build_reasons(
    crew: CandidateCrew,
    context: SuggestionContext,
    default_max_footage: float = DEFAULT_MAX_DAILY_FOOTAGE
) -> List[Reason]:
    """
    Compose the ordered reason list for one crew.

    Order: preference, territory, skill coverage, legacy product type,
    capacity, proximity.
    """
    reasons = [
        preference_reason(crew, context),
        territory_reason(crew, context),
    ]
    reasons.extend(skill_reasons(crew, context))

    legacy = legacy_skill_reason(crew, context)
    if legacy is not None:
        reasons.append(legacy)

    reasons.append(capacity_reason(crew, context, default_max_footage))
    reasons.append(proximity_reason(crew))
    return reasons


def format_reasons(reasons: List[Reason]) -> str:
    """Join reasons into one line, e.g. 'Preferred (Builder preferred crew); 12 mi'."""
    parts = []
    for reason in reasons:
        if reason.detail:
            parts.append(f"{reason.label} ({reason.detail})")
        else:
            parts.append(reason.label)
    return "; ".join(parts)
