from pydantic import BaseModel, Field
from typing import List, Optional

from ..schedule.models import (
    AssignmentSuggestion,
    CandidateCrew,
    ConflictCheckContext,
    ConflictCheckInput,
    ScheduleConflict,
    SuggestionContext,
)


class SuggestionRequest(BaseModel):
    context: SuggestionContext
    candidates: List[CandidateCrew] = Field(default_factory=list)


class SuggestionResponse(BaseModel):
    suggestions: List[AssignmentSuggestion]
    quick_picks: List[AssignmentSuggestion]
    best_match: Optional[AssignmentSuggestion] = None


class ConflictRequest(BaseModel):
    entry: ConflictCheckInput
    context: ConflictCheckContext = Field(default_factory=ConflictCheckContext)


class ConflictResponse(BaseModel):
    conflicts: List[ScheduleConflict]
    blocking: bool
    summary: str
