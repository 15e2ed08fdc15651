from fastapi import APIRouter
from starlette import status

from . import model
from ..config import settings
from ..conflicts.detector import detect_conflicts, has_blocking_conflicts, summarize_conflicts
from ..score.suggester import best_match, quick_picks, suggest_crews

router = APIRouter(
    tags=["Scheduling"]
)


@router.post("/crew-suggestions", response_model=model.SuggestionResponse, status_code=status.HTTP_200_OK)
def post_crew_suggestions(request: model.SuggestionRequest):
    suggestions = suggest_crews(
        request.candidates,
        request.context,
        settings.scoring_weights(),
        settings.default_max_daily_footage,
    )
    return model.SuggestionResponse(
        suggestions=suggestions,
        quick_picks=quick_picks(suggestions, settings.quick_pick_limit, settings.quick_pick_min_score),
        best_match=best_match(suggestions, settings.best_match_min_score),
    )


@router.post("/schedule-conflicts", response_model=model.ConflictResponse, status_code=status.HTTP_200_OK)
def post_schedule_conflicts(request: model.ConflictRequest):
    conflicts = detect_conflicts(request.entry, request.context, settings.default_max_daily_footage)
    return model.ConflictResponse(
        conflicts=conflicts,
        blocking=has_blocking_conflicts(conflicts),
        summary=summarize_conflicts(conflicts),
    )


@router.get("/health", status_code=status.HTTP_200_OK)
def get_health():
    return {"status": "ok"}
