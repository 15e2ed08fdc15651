"""Unit tests for crew ranking, reasons and derived views."""
from datetime import date

import pytest

from crewsched.schedule.models import (
    CandidateCrew,
    CrewCapacity,
    CrewSkillTag,
    Proficiency,
    ReasonType,
    SuggestionContext,
)
from crewsched.score.reasons import build_reasons, format_reasons
from crewsched.score.suggester import best_match, quick_picks, score_crew, suggest_crews

JOB_DATE = date(2025, 1, 14)


def ideal_crew(crew_id="c1") -> CandidateCrew:
    return CandidateCrew(
        id=crew_id,
        name="Alpha",
        home_territory_id="north",
        territory_name="North",
        max_daily_footage=200,
        skill_tags=[CrewSkillTag(skill_tag_id="vinyl", proficiency=Proficiency.STANDARD)],
        capacity=CrewCapacity(scheduled_footage=0),
        distance_miles=5,
        travel_minutes=12,
    )


def ideal_context(**kwargs) -> SuggestionContext:
    fields = dict(
        job_id="j1",
        scheduled_date=JOB_DATE,
        estimated_footage=100,
        skill_tag_ids=["vinyl"],
        territory_id="north",
        preferred_crew_id="c1",
    )
    fields.update(kwargs)
    return SuggestionContext(**fields)


class TestScoreCrew:
    """Test single-crew scoring."""

    def test_ideal_crew_scores_100(self):
        suggestion = score_crew(ideal_crew(), ideal_context())
        assert suggestion.score == pytest.approx(100)
        assert suggestion.match_percent == 100
        assert suggestion.is_preferred is True
        assert suggestion.has_all_skills is True
        assert suggestion.is_over_capacity is False
        assert suggestion.should_avoid is False

    def test_expert_crew_at_quarter_capacity_scores_100(self):
        """Test the expert bonus is clamped so a perfect crew still totals 100."""
        crew = ideal_crew().model_copy(update={
            "skill_tags": [
                CrewSkillTag(skill_tag_id="t1", proficiency=Proficiency.EXPERT),
                CrewSkillTag(skill_tag_id="t2", proficiency=Proficiency.EXPERT),
            ],
            "distance_miles": 8,
        })
        suggestion = score_crew(crew, ideal_context(skill_tag_ids=["t1", "t2"], estimated_footage=50))

        assert suggestion.breakdown.skills == 25
        assert suggestion.breakdown.capacity == 20
        assert suggestion.score == pytest.approx(100)
        assert suggestion.reasons[2].label == "Expert"

    def test_score_equals_breakdown_sum(self):
        crew = CandidateCrew(id="c2", home_territory_id="south", distance_miles=42)
        suggestion = score_crew(crew, ideal_context())
        assert suggestion.score == pytest.approx(suggestion.breakdown.total)

    def test_unknown_crew_scores_54_with_neutral_reasons(self):
        """Test a crew and job with no signals gets partial credit everywhere."""
        crew = CandidateCrew(id="c9")
        ctx = SuggestionContext(scheduled_date=JOB_DATE)
        suggestion = score_crew(crew, ctx)

        assert suggestion.score == pytest.approx(54)
        assert suggestion.match_percent == 54
        assert len(suggestion.reasons) == 5
        assert all(r.type == ReasonType.NEUTRAL for r in suggestion.reasons)
        assert [r.label for r in suggestion.reasons] == [
            "No preference",
            "Any territory",
            "No skill requirements",
            "Capacity unknown",
            "Distance unknown",
        ]

    def test_match_percent_rounds_half_up(self):
        """Test an 82.5 score displays as 83."""
        crew = ideal_crew()
        ctx = ideal_context(preferred_crew_id=None)
        suggestion = score_crew(crew.model_copy(update={"distance_miles": None}), ctx)
        # 12.5 + 20 + 25 + 20 + 5
        assert suggestion.score == pytest.approx(82.5)
        assert suggestion.match_percent == 83

    def test_avoided_crew_can_go_negative_factor(self):
        ctx = ideal_context(preferred_crew_id=None, avoid_crew_ids=["c1"])
        suggestion = score_crew(ideal_crew(), ctx)
        assert suggestion.breakdown.preference == -10
        assert suggestion.should_avoid is True


class TestReasons:
    """Test reason composition and wording."""

    def test_ideal_reason_order(self):
        reasons = build_reasons(ideal_crew(), ideal_context())
        assert [r.label for r in reasons] == ["Preferred", "Territory", "Skills", "Available", "5 mi"]
        assert reasons[1].detail == "Home territory: North"
        assert reasons[3].detail == "50% capacity after job"
        assert reasons[4].detail == "12 min drive"
        assert all(r.type == ReasonType.POSITIVE for r in reasons)

    def test_expert_and_missing_skills(self):
        crew = CandidateCrew(id="c1", skill_tags=[CrewSkillTag(skill_tag_id="t1", proficiency=Proficiency.EXPERT)])
        ctx = SuggestionContext(scheduled_date=JOB_DATE, skill_tag_ids=["t1", "t2", "t3"])
        labels = [r.label for r in build_reasons(crew, ctx)]
        assert "Expert" in labels
        assert "Missing 2 skills" in labels

    def test_single_missing_skill_is_singular(self):
        ctx = SuggestionContext(scheduled_date=JOB_DATE, skill_tag_ids=["t1"])
        labels = [r.label for r in build_reasons(CandidateCrew(id="c1"), ctx)]
        assert "Missing 1 skill" in labels

    def test_legacy_product_type(self):
        ctx = SuggestionContext(scheduled_date=JOB_DATE, product_type="vinyl")
        has_it = build_reasons(CandidateCrew(id="c1", product_skills=["vinyl"]), ctx)
        lacks_it = build_reasons(CandidateCrew(id="c2"), ctx)
        assert any(r.label == "vinyl" and r.type == ReasonType.POSITIVE for r in has_it)
        assert any(r.label == "No vinyl" and r.type == ReasonType.WARNING for r in lacks_it)

    def test_capacity_wording(self):
        ctx = SuggestionContext(scheduled_date=JOB_DATE, estimated_footage=100)
        near = CandidateCrew(id="c1", capacity=CrewCapacity(scheduled_footage=80))
        over = CandidateCrew(id="c2", capacity=CrewCapacity(scheduled_footage=150))

        near_reason = build_reasons(near, ctx)[3]
        over_reason = build_reasons(over, ctx)[3]
        assert near_reason.label == "90% capacity"
        assert near_reason.type == ReasonType.NEUTRAL
        assert over_reason.label == "125% capacity"
        assert over_reason.type == ReasonType.WARNING

    def test_capacity_wording_uses_rounded_percent(self):
        """Test 80.2% reads as available since it displays as 80%."""
        crew = CandidateCrew(id="c1", max_daily_footage=200, capacity=CrewCapacity(scheduled_footage=160.4))
        reason = build_reasons(crew, SuggestionContext(scheduled_date=JOB_DATE))[3]

        assert reason.type == ReasonType.POSITIVE
        assert reason.label == "Available"
        assert reason.detail == "80% capacity after job"
        assert score_crew(crew, SuggestionContext(scheduled_date=JOB_DATE)).breakdown.capacity < 20

    def test_far_crew_warning(self):
        reasons = build_reasons(CandidateCrew(id="c1", distance_miles=45), SuggestionContext(scheduled_date=JOB_DATE))
        assert reasons[-1].type == ReasonType.WARNING
        assert reasons[-1].label == "45 mi"
        assert reasons[-1].detail == "Far from job site"

    def test_outside_territory(self):
        ctx = SuggestionContext(scheduled_date=JOB_DATE, territory_id="north")
        reasons = build_reasons(CandidateCrew(id="c1", home_territory_id="south"), ctx)
        assert reasons[1].label == "Outside territory"
        assert reasons[1].type == ReasonType.WARNING

    def test_format_reasons(self):
        text = format_reasons(build_reasons(ideal_crew(), ideal_context()))
        assert text.startswith("Preferred (Builder preferred crew); Territory (Home territory: North)")
        assert text.endswith("5 mi (12 min drive)")


class TestSuggestCrews:
    """Test ranking order and derived views."""

    def test_sorted_by_score_descending(self):
        crews = [
            CandidateCrew(id="far", distance_miles=80),
            CandidateCrew(id="near", distance_miles=3),
            CandidateCrew(id="mid", distance_miles=25),
        ]
        ranked = suggest_crews(crews, SuggestionContext(scheduled_date=JOB_DATE))
        assert [s.crew.id for s in ranked] == ["near", "mid", "far"]

    def test_avoided_crews_sort_last(self):
        """Test an avoided crew ranks below every other crew even with a higher score."""
        avoided = ideal_crew("a1")
        weak = CandidateCrew(id="w1", home_territory_id="south", distance_miles=90)
        ctx = ideal_context(preferred_crew_id=None, avoid_crew_ids=["a1"])

        ranked = suggest_crews([avoided, weak], ctx)
        assert ranked[0].score < ranked[1].score
        assert [s.crew.id for s in ranked] == ["w1", "a1"]

    def test_preferred_and_avoided_still_last(self):
        ctx = ideal_context(avoid_crew_ids=["c1"])
        ranked = suggest_crews([ideal_crew("c1"), CandidateCrew(id="c2")], ctx)
        assert ranked[-1].crew.id == "c1"
        assert ranked[-1].breakdown.preference == 25

    def test_inactive_crews_skipped(self):
        crews = [CandidateCrew(id="on"), CandidateCrew(id="off", is_active=False)]
        ranked = suggest_crews(crews, SuggestionContext(scheduled_date=JOB_DATE))
        assert [s.crew.id for s in ranked] == ["on"]

    def test_ties_keep_input_order(self):
        crews = [CandidateCrew(id=f"c{i}") for i in range(5)]
        ranked = suggest_crews(crews, SuggestionContext(scheduled_date=JOB_DATE))
        assert [s.crew.id for s in ranked] == ["c0", "c1", "c2", "c3", "c4"]

    def test_deterministic(self):
        crews = [ideal_crew("c1"), CandidateCrew(id="c2", distance_miles=12), CandidateCrew(id="c3")]
        first = suggest_crews(crews, ideal_context())
        second = suggest_crews(crews, ideal_context())
        assert [s.model_dump() for s in first] == [s.model_dump() for s in second]

    def test_empty_candidates(self):
        ranked = suggest_crews([], SuggestionContext(scheduled_date=JOB_DATE))
        assert ranked == []
        assert quick_picks(ranked) == []
        assert best_match(ranked) is None


class TestDerivedViews:
    """Test quick picks and best match."""

    def test_quick_picks_limit_and_threshold(self):
        crews = [ideal_crew(f"c{i}") for i in range(5)] + [CandidateCrew(id="low", home_territory_id="x")]
        ctx = ideal_context(preferred_crew_id=None, territory_id="north")
        ranked = suggest_crews(crews, ctx)

        picks = quick_picks(ranked)
        assert len(picks) == 3
        assert all(p.score >= 50 for p in picks)

    def test_quick_picks_exclude_avoided(self):
        ctx = ideal_context(preferred_crew_id=None, avoid_crew_ids=["c1"])
        ranked = suggest_crews([ideal_crew("c1")], ctx)
        assert quick_picks(ranked) == []

    def test_best_match_requires_60(self):
        ranked = suggest_crews([CandidateCrew(id="c9")], SuggestionContext(scheduled_date=JOB_DATE))
        assert ranked[0].score == pytest.approx(54)
        assert best_match(ranked) is None
        assert best_match(ranked, min_score=50) is ranked[0]

    def test_best_match_is_top(self):
        ranked = suggest_crews([CandidateCrew(id="c2"), ideal_crew("c1")], ideal_context())
        assert best_match(ranked).crew.id == "c1"

    def test_no_best_match_when_only_avoided(self):
        ctx = ideal_context(avoid_crew_ids=["c1"])
        ranked = suggest_crews([ideal_crew("c1")], ctx)
        assert best_match(ranked) is None
