"""
Tests for the end-of-round services: adjudication and the post-round review.

Run with: pytest tests/test_adjudication.py -v
"""

import logging

import pytest

from app.models.roles import Team
from app.models.schemas import AdjudicateRequest, ComprehensiveFeedbackRequest, Speech
from app.services.adjudication import AdjudicationPipeline, build_default_adjudication
from app.services.analysis import extract_signals, make_rng
from app.services.comprehensive_feedback import ComprehensiveFeedbackService
from app.services.generation import list_improvements, write_feedback
from app.services.generation.adjudication_feedback import FALLBACK_IMPROVEMENTS


PLASTICS = "This House would ban single-use plastics"


def pipeline(classifier, seed: int = 7) -> AdjudicationPipeline:
    return AdjudicationPipeline(classifier, make_rng(seed))


# =============================================================================
# ADJUDICATION
# =============================================================================

@pytest.mark.asyncio
async def test_prohibition_round_has_prohibition_clash(classifier):
    """A ban motion always puts the prohibition clash on the card, weight 9."""
    request = AdjudicateRequest(
        motion=PLASTICS,
        speeches=[Speech(role="LO", content="However, the government's evidence is weak", is_ai=False)],
        user_role="LO",
    )

    card = await pipeline(classifier).run(request)

    titles = {c.title: c for c in card.clashes}
    assert "Prohibition Scope and Justification" in titles, f"Got {list(titles)}"
    assert titles["Prohibition Scope and Justification"].weight == 9
    assert len(card.clashes) == 3


@pytest.mark.asyncio
async def test_no_human_speech_returns_default_card(classifier):
    request = AdjudicateRequest(
        motion=PLASTICS,
        speeches=[Speech(role="PM", content="We propose.", is_ai=True)],
        user_role="PM",
    )

    card = await pipeline(classifier).run(request)

    assert card == build_default_adjudication()
    assert card.ranking == ["OG", "OO", "CG", "CO"]
    assert [card.team_scores[t].total for t in card.ranking] == [20, 18, 16, 14]
    assert card.performance_metrics.average_argument_quality == 5
    assert card.clashes == []


@pytest.mark.asyncio
async def test_seeded_adjudication_is_reproducible(classifier, plastics_round):
    request = AdjudicateRequest(motion=PLASTICS, speeches=plastics_round, user_role="LO")

    first = await pipeline(classifier, seed=99).run(request)
    second = await pipeline(classifier, seed=99).run(request)

    assert first.model_dump() == second.model_dump()


@pytest.mark.asyncio
async def test_team_totals_are_sum_of_axes(classifier, plastics_round):
    request = AdjudicateRequest(motion=PLASTICS, speeches=plastics_round, user_role="LO")

    card = await pipeline(classifier).run(request)

    assert set(card.team_scores) == {"OG", "OO", "CG", "CO"}
    for code, score in card.team_scores.items():
        assert score.total == pytest.approx(score.matter + score.manner + score.method), code
    assert sorted(card.ranking) == ["CG", "CO", "OG", "OO"]
    assert card.methodology


@pytest.mark.asyncio
async def test_strong_user_speech_wins_every_clash(classifier):
    speech = "First, the evidence from the study shows this matters. However, they ignore it."
    request = AdjudicateRequest(
        motion=PLASTICS,
        speeches=[Speech(role="DLO", content=speech, is_ai=False)],
        user_role="DLO",
    )

    card = await pipeline(classifier).run(request)

    assert all(c.winner == "OO" for c in card.clashes)
    assert card.team_scores["OO"].matter == sum(c.weight for c in card.clashes)


@pytest.mark.asyncio
async def test_explicit_user_speech_is_preferred(classifier):
    request = AdjudicateRequest(
        motion=PLASTICS,
        speeches=[Speech(role="PM", content="I think so.", is_ai=False)],
        user_role="PM",
        user_speech=Speech(role="PM", content="First, the evidence is clear. However they disagree."),
    )

    card = await pipeline(classifier).run(request)

    assert card.performance_metrics.structural_coherence == 8
    assert card.performance_metrics.evidence_usage == 7


@pytest.mark.asyncio
async def test_user_role_missing_falls_back_to_any_human_speech(classifier):
    request = AdjudicateRequest(
        motion=PLASTICS,
        speeches=[Speech(role="DPM", content="The evidence is strong.", is_ai=False)],
        user_role="PM",
    )

    card = await pipeline(classifier).run(request)

    assert card.methodology is not None
    assert card.performance_metrics.evidence_usage == 7


def test_feedback_is_logged(caplog):
    signals = extract_signals("I think so.")

    with caplog.at_level(logging.INFO, logger="app.services.generation.adjudication_feedback"):
        feedback = write_feedback(PLASTICS, signals, [Team.OG, Team.OO, Team.CG, Team.CO], "LO")

    assert feedback.startswith("ADJUDICATION FEEDBACK")
    assert f"Wrote {len(feedback)} character feedback for LO (OO team)" in caplog.text


def test_strong_speech_gets_advanced_practice(caplog):
    signals = extract_signals("First, the evidence shows this matters. Second, however, they claim otherwise.")

    with caplog.at_level(logging.INFO, logger="app.services.generation.adjudication_feedback"):
        improvements = list_improvements(signals)

    assert improvements == FALLBACK_IMPROVEMENTS
    assert "suggesting advanced practice" in caplog.text


# =============================================================================
# COMPREHENSIVE FEEDBACK
# =============================================================================

@pytest.mark.asyncio
async def test_review_with_only_government_material(classifier):
    request = ComprehensiveFeedbackRequest(
        motion="This House would ban zoos",
        speeches=[],
        user_role="PM",
        user_speech=(
            "We define the motion clearly. "
            "Evidence from a study shows the harm to animals because enclosures are small."
        ),
    )

    review = await ComprehensiveFeedbackService(classifier).review(request)

    titles = [c.title for c in review.clash_points]
    assert titles == ["Prohibition Scope and Justification", "Stakeholder Impact Analysis"]
    assert all(c.current_leader == "Government" for c in review.clash_points)

    government, opposition = review.team_feedback
    assert government.team == "Government"
    assert "Your framework argument was well supported (strength 8/10)" in government.strengths
    assert government.argument_effectiveness == 8
    assert any(w.startswith("Behind on prohibition scope") for w in opposition.weaknesses)
    assert review.debate_progression.total_speeches == 1


@pytest.mark.asyncio
async def test_review_skips_clashes_nobody_argued(classifier):
    request = ComprehensiveFeedbackRequest(
        motion="This House would tax sugar",
        speeches=[Speech(role="LO", content="Nothing to see here.", is_ai=True)],
        user_role="PM",
        user_speech="I think so.",
    )

    review = await ComprehensiveFeedbackService(classifier).review(request)

    assert review.clash_points == []
    assert review.strategic_recommendations.immediate == []
    # Default effectiveness when the user made no argument
    assert review.team_feedback[0].argument_effectiveness > 0
