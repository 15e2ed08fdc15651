"""Scoring weights, partial-credit fractions and thresholds."""
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from crewsched.schedule.models import Proficiency

# Proficiency multipliers applied to the matched-skill base score
PROFICIENCY_MULTIPLIERS: Dict[Proficiency, float] = {
    Proficiency.TRAINEE: 0.6,
    Proficiency.BASIC: 0.8,
    Proficiency.STANDARD: 1.0,
    Proficiency.EXPERT: 1.2,
}


class ScoringWeights(BaseModel):
    """Maximum points per factor (total: 100) plus fixed penalties."""
    model_config = ConfigDict(frozen=True)

    preference: float = Field(default=25, ge=0)   # Builder/community preferred crew
    territory: float = Field(default=20, ge=0)    # Home territory match
    skills: float = Field(default=25, ge=0)       # Required skills + proficiency
    capacity: float = Field(default=20, ge=0)     # Available capacity on date
    proximity: float = Field(default=10, ge=0)    # Distance from job

    avoid_penalty: float = Field(default=10, ge=0)
    missing_skill_penalty: float = Field(default=5, ge=0)
    proficiency_multipliers: Dict[Proficiency, float] = Field(
        default_factory=lambda: dict(PROFICIENCY_MULTIPLIERS)
    )

    @property
    def total(self) -> float:
        return self.preference + self.territory + self.skills + self.capacity + self.proximity

    def multiplier(self, proficiency: Optional[Proficiency]) -> float:
        """Multiplier for a proficiency; unrecorded proficiency counts as standard."""
        if proficiency is None:
            proficiency = Proficiency.STANDARD
        return self.proficiency_multipliers.get(proficiency, 1.0)


DEFAULT_WEIGHTS = ScoringWeights()

# Partial credit when a signal is missing or neutral (fraction of the factor weight)
PREFERENCE_UNSET_CREDIT = 0.5
TERRITORY_UNSET_CREDIT = 0.5
TERRITORY_FLEXIBLE_CREDIT = 0.3    # Crew has no home territory
SKILLS_UNSET_CREDIT = 0.5
CAPACITY_UNKNOWN_CREDIT = 0.7
PROXIMITY_UNKNOWN_CREDIT = 0.5

# Capacity utilization bands (projected footage / max footage)
UTILIZATION_COMFORTABLE = 0.8
UTILIZATION_FULL = 1.0
UTILIZATION_STRETCHED = 1.3
UTILIZATION_NEAR_FULL_SPAN = 0.2
CAPACITY_NEAR_FULL_DROP = 0.3      # Credit lost across the near-full span
CAPACITY_STRETCHED_CREDIT = 0.3
CAPACITY_OVERLOADED_CREDIT = 0.1

DEFAULT_MAX_DAILY_FOOTAGE = 200

# Proximity tiers: (max miles, credit)
PROXIMITY_TIERS: List[Tuple[float, float]] = [
    (10, 1.0),
    (20, 0.8),
    (30, 0.6),
    (50, 0.4),
]
PROXIMITY_FAR_CREDIT = 0.2

# Proximity reason wording
PROXIMITY_CLOSE_MILES = 20
PROXIMITY_MODERATE_MILES = 30

# Derived views
QUICK_PICK_LIMIT = 3
QUICK_PICK_MIN_SCORE = 50
BEST_MATCH_MIN_SCORE = 60

