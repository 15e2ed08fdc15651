"""Value objects exchanged with the scheduling engine."""
from datetime import date, time
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field, model_validator


class Proficiency(str, Enum):
    """Skill proficiency levels recorded for a crew skill tag."""
    TRAINEE = "trainee"
    BASIC = "basic"
    STANDARD = "standard"
    EXPERT = "expert"


class ReasonType(str, Enum):
    """Tone of a suggestion reason."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    WARNING = "warning"


class EntryType(str, Enum):
    """Kinds of schedule entries."""
    JOB_VISIT = "job_visit"
    BLOCKED = "blocked"
    MEETING = "meeting"
    ASSESSMENT = "assessment"
    OTHER = "other"


class ConflictType(str, Enum):
    """Kinds of schedule conflicts."""
    DOUBLE_BOOKING = "double_booking"
    OVER_CAPACITY = "over_capacity"
    MISSING_SKILLS = "missing_skills"
    BUILDER_PREFERENCE = "builder_preference"
    TIME_OVERLAP = "time_overlap"


class ConflictSeverity(str, Enum):
    """Conflict severity; error blocks, warning flags, info advises."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return {"error": 2, "warning": 1, "info": 0}[self.value]


# ============================================
# CREWS
# ============================================

class CrewSkillTag(BaseModel):
    skill_tag_id: str = Field(min_length=1)
    proficiency: Optional[Proficiency] = None
    name: Optional[str] = None


class CrewCapacity(BaseModel):
    """Already-committed work for one crew on one date."""
    scheduled_footage: float = Field(default=0, ge=0)
    scheduled_hours: float = Field(default=0, ge=0)
    job_count: int = Field(default=0, ge=0)


class CandidateCrew(BaseModel):
    """A crew considered for a job, with its per-date snapshot."""
    id: str = Field(min_length=1)
    name: Optional[str] = None
    is_active: bool = True
    home_territory_id: Optional[str] = None
    territory_name: Optional[str] = None
    max_daily_footage: Optional[float] = Field(default=None, ge=0)
    skill_tags: List[CrewSkillTag] = Field(default_factory=list)
    product_skills: List[str] = Field(default_factory=list)
    capacity: Optional[CrewCapacity] = None
    distance_miles: Optional[float] = Field(default=None, ge=0)
    travel_minutes: Optional[float] = Field(default=None, ge=0)

    @property
    def skill_tag_ids(self) -> Set[str]:
        return {tag.skill_tag_id for tag in self.skill_tags}

    def proficiency_for(self, skill_tag_id: str) -> Optional[Proficiency]:
        for tag in self.skill_tags:
            if tag.skill_tag_id == skill_tag_id:
                return tag.proficiency
        return None


class SuggestionContext(BaseModel):
    """Requirements of the job being assigned."""
    job_id: Optional[str] = None
    scheduled_date: date
    estimated_footage: Optional[float] = Field(default=None, ge=0)
    skill_tag_ids: List[str] = Field(default_factory=list)
    product_type: Optional[str] = None
    territory_id: Optional[str] = None
    preferred_crew_id: Optional[str] = None
    avoid_crew_ids: List[str] = Field(default_factory=list)


# ============================================
# SUGGESTIONS
# ============================================

class Reason(BaseModel):
    type: ReasonType
    label: str
    detail: Optional[str] = None


class ScoreBreakdown(BaseModel):
    preference: float
    territory: float
    skills: float
    capacity: float
    proximity: float

    @property
    def total(self) -> float:
        return self.preference + self.territory + self.skills + self.capacity + self.proximity


class AssignmentSuggestion(BaseModel):
    crew: CandidateCrew
    score: float
    match_percent: int
    reasons: List[Reason]
    breakdown: ScoreBreakdown
    is_preferred: bool
    has_all_skills: bool
    is_over_capacity: bool
    should_avoid: bool


# ============================================
# SCHEDULE ENTRIES & CONFLICTS
# ============================================

def _check_time_window(start_time: Optional[time], end_time: Optional[time]) -> None:
    if start_time is not None and end_time is not None and end_time < start_time:
        raise ValueError(f"end_time {end_time} is before start_time {start_time}")


class ScheduleEntry(BaseModel):
    """An existing commitment for a crew or sales rep."""
    id: str = Field(min_length=1)
    entry_type: EntryType
    crew_id: Optional[str] = None
    sales_rep_id: Optional[str] = None
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    estimated_footage: Optional[float] = Field(default=None, ge=0)
    estimated_hours: Optional[float] = Field(default=None, ge=0)
    title: Optional[str] = None
    status: str = "scheduled"
    job_id: Optional[str] = None

    @model_validator(mode="after")
    def _validate_window(self):
        _check_time_window(self.start_time, self.end_time)
        return self

    @property
    def has_time_window(self) -> bool:
        return self.start_time is not None and self.end_time is not None


class ConflictCheckInput(BaseModel):
    """The entry about to be saved. entry_id is set only when editing."""
    entry_id: Optional[str] = None
    crew_id: Optional[str] = None
    sales_rep_id: Optional[str] = None
    scheduled_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    estimated_footage: Optional[float] = Field(default=None, ge=0)
    entry_type: EntryType
    job_id: Optional[str] = None

    @model_validator(mode="after")
    def _validate_window(self):
        _check_time_window(self.start_time, self.end_time)
        return self


class ConflictCheckContext(BaseModel):
    """
    Surroundings of a prospective entry.

    existing_entries must already be limited to the entry's scheduled_date;
    see crewsched.schedule.snapshots.entries_on_date.
    """
    existing_entries: List[ScheduleEntry] = Field(default_factory=list)
    crew_capacity: Optional[CrewCapacity] = None
    crew_max_footage: Optional[float] = Field(default=None, ge=0)
    preferred_crew_id: Optional[str] = None
    avoid_crew_ids: List[str] = Field(default_factory=list)


class ScheduleConflict(BaseModel):
    type: ConflictType
    severity: ConflictSeverity
    message: str
    details: Optional[str] = None
    related_entry_id: Optional[str] = None
