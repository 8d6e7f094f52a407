"""
Tests for the analysis stages: signal extraction, classification, clashes, scoring.

All of these are pure functions of their input (plus an injected rng for
scoring). The model classifier runs against the fake_openai fixture.
Run with: pytest tests/test_analysis.py -v
"""

import json

import pytest
from openai import OpenAIError

from app.models.roles import Side, Team
from app.services.analysis import (
    REVIEW_SLOTS,
    ArgumentSignal,
    Bench,
    KeywordArgumentClassifier,
    OpenAIArgumentClassifier,
    SpeechSignals,
    TOPIC_TYPES,
    TeamScore,
    compute_team_scores,
    determine_clash_winner,
    extract_signals,
    extract_tags,
    identify_clashes,
    make_rng,
    performance_metrics,
    rank_teams,
)
from app.services.analysis.classifier import assess_strength


def signal(arg_type: str, strength: int = 5, role: str = "PM") -> ArgumentSignal:
    return ArgumentSignal(
        type=arg_type,
        source_role=role,
        title=f"{arg_type} title",
        claim="claim",
        mechanism="mechanism",
        evidence="evidence",
        impact="impact",
        weighing="weighing",
        strength=strength,
    )


# =============================================================================
# SIGNAL EXTRACTOR
# =============================================================================

def test_signals_all_present():
    """Every flag present gives the high constant for every score."""
    signals = extract_signals("First, the evidence shows this matters. However, they claim otherwise.")

    assert signals.has_structure and signals.has_evidence
    assert signals.has_weighing and signals.has_rebuttals
    assert (signals.structure_score, signals.evidence_score) == (8, 7)
    assert (signals.impact_score, signals.clash_score) == (7, 8)
    assert signals.quality_score == pytest.approx(7.5)
    assert signals.argument_count == 1


def test_signals_empty_text():
    signals = extract_signals("")

    assert signals.word_count == 1
    assert signals.argument_count == 1
    assert signals.quality_score == pytest.approx(3.5)


def test_signals_are_idempotent():
    text = "My second argument is that the data shows real harm, but the opposition ignores it."
    assert extract_signals(text) == extract_signals(text)


def test_signals_do_not_scale_with_repetition():
    once = extract_signals("However we disagree.")
    many = extract_signals("However however however we disagree.")
    assert once.clash_score == many.clash_score


def test_rebuttal_check_is_a_substring_test():
    """'but' inside 'contribute' still counts as engagement."""
    assert extract_signals("We contribute nothing new.").has_rebuttals


def test_argument_markers_are_counted():
    signals = extract_signals("First point. Second point. Third point, and one more argument.")
    assert signals.argument_count == 4


def test_mechanism_tags_need_a_mechanism_gate():
    assert "enforcement" not in extract_tags("Police will enforce it.")
    assert "enforcement" in extract_tags("This is how we enforce it.")


# =============================================================================
# ARGUMENT CLASSIFIER
# =============================================================================

@pytest.mark.asyncio
async def test_classifier_finds_economic_argument(classifier):
    signals = await classifier.classify(
        "Taxes will raise costs for families because prices go up.",
        "PM",
        ("economic", "rights", "social", "practical"),
    )

    assert [s.type for s in signals] == ["economic"]
    economic = signals[0]
    assert economic.claim == "Taxes will raise costs for families because prices go up"
    assert economic.evidence == "Evidence supporting the economic argument"
    assert economic.strength == 6
    assert economic.source_role == "PM"


@pytest.mark.asyncio
async def test_classifier_emits_nothing_without_triggers(classifier):
    """Precision over recall: no trigger word, no argument."""
    signals = await classifier.classify("The weather is pleasant this afternoon.", "LO")
    assert signals == []


@pytest.mark.asyncio
async def test_classifier_one_signal_per_type(classifier):
    signals = await classifier.classify("Tax. More tax. Money everywhere.", "PM", ("economic",))
    assert len(signals) == 1


@pytest.mark.asyncio
async def test_classifier_restricts_to_requested_types(classifier):
    text = "We define the terms. Freedom is at stake."
    structural = await classifier.classify(text, "PM", ("framework", "mechanism", "impact", "stakeholder"))
    assert [s.type for s in structural] == ["framework"]


def test_strength_is_capped():
    assert assess_strength("evidence study example case because therefore important crucial") == 10
    assert assess_strength("") == 5


def test_classifier_sync_matches_async_contract():
    signals = KeywordArgumentClassifier().classify_sync("Liberty matters because rights protect us.", "OW")
    assert signals[0].type == "rights"
    assert signals[0].claim == "Liberty matters because rights protect us"


# =============================================================================
# MODEL CLASSIFIER
# =============================================================================

ECONOMIC_SPEECH = "Taxes will raise costs for families because prices go up."


@pytest.mark.asyncio
async def test_model_classifier_parses_json_mode(fake_openai):
    payload = {
        "arguments": [
            {"type": "Economic", "title": "Costs fall on families", "claim": "Prices rise", "strength": 14},
            {"type": "economic", "title": "Second economic entry", "strength": 3},
            {"type": "astrology", "title": "Not a real type", "strength": 9},
            {"type": "rights", "title": "Not requested", "strength": 7},
            {"type": "mechanism", "strength": -3},
            "not an object",
        ]
    }
    client, completions = fake_openai(content=json.dumps(payload))
    classifier = OpenAIArgumentClassifier(client=client)

    signals = await classifier.classify(ECONOMIC_SPEECH, "PM", ("mechanism", "economic"))

    assert completions.calls == 1
    assert [s.type for s in signals] == ["economic", "mechanism"]
    economic, mechanism = signals
    assert economic.title == "Costs fall on families"
    assert economic.claim == "Prices rise"
    assert economic.strength == 10
    assert economic.source_role == "PM"
    assert mechanism.title == "Policy Mechanism"
    assert mechanism.evidence == "Evidence supporting the mechanism argument"
    assert mechanism.strength == 0


@pytest.mark.asyncio
async def test_model_classifier_skips_empty_text(fake_openai):
    client, completions = fake_openai(content="{}")
    assert await OpenAIArgumentClassifier(client=client).classify("   ", "PM") == []
    assert completions.calls == 0


@pytest.mark.parametrize(
    "response",
    [
        {"error": OpenAIError("rate limited")},
        {"content": "this is not json"},
        {"content": json.dumps([{"type": "economic"}])},
        {"content": json.dumps({"arguments": "economic"})},
        {"empty": True},
    ],
    ids=["api-error", "bad-json", "json-array", "arguments-not-list", "no-choices"],
)
@pytest.mark.asyncio
async def test_model_classifier_falls_back_to_keywords(fake_openai, response):
    client, _ = fake_openai(**response)
    classifier = OpenAIArgumentClassifier(client=client)

    signals = await classifier.classify(ECONOMIC_SPEECH, "PM", TOPIC_TYPES)

    expected = await KeywordArgumentClassifier().classify(ECONOMIC_SPEECH, "PM", TOPIC_TYPES)
    assert [s.type for s in signals] == ["economic"]
    assert signals == expected


# =============================================================================
# CLASH IDENTIFIER
# =============================================================================

def test_tie_goes_to_opposition():
    government = Bench(Side.GOVERNMENT, [signal("framework", 5)])
    opposition = Bench(Side.OPPOSITION, [signal("framework", 5, "LO")])

    clashes = identify_clashes("This House would ban zoos", government, opposition)

    assert clashes[0].id == "framework"
    assert clashes[0].current_leader is Side.OPPOSITION


def test_government_leads_with_strictly_higher_strength():
    government = Bench(Side.GOVERNMENT, [signal("framework", 6)])
    opposition = Bench(Side.OPPOSITION, [signal("framework", 5, "LO")])

    clashes = identify_clashes("This House would ban zoos", government, opposition)

    assert clashes[0].current_leader is Side.GOVERNMENT


def test_slots_without_signals_are_skipped():
    government = Bench(Side.GOVERNMENT, [signal("impact")])
    opposition = Bench(Side.OPPOSITION)

    clashes = identify_clashes("This House would tax sugar", government, opposition)

    assert [c.id for c in clashes] == ["impact"]


def test_all_slots_when_signals_not_required():
    clashes = identify_clashes(
        "This House would tax sugar",
        Bench(Side.GOVERNMENT),
        Bench(Side.OPPOSITION),
        require_signals=False,
    )

    assert [c.id for c in clashes] == ["framework", "mechanism", "impact"]
    assert clashes[0].title == "Economic Intervention Philosophy"
    # Nobody argued anything: 0 vs 0 is a tie
    assert all(c.current_leader is Side.OPPOSITION for c in clashes)


def test_clash_weights_are_bounded():
    for motion in ("ban cars", "tax sugar", "mandate voting", "allow drones"):
        for slots in (None, REVIEW_SLOTS):
            kwargs = {"slots": slots} if slots else {}
            clashes = identify_clashes(
                motion, Bench(Side.GOVERNMENT), Bench(Side.OPPOSITION), require_signals=False, **kwargs
            )
            assert all(1 <= c.weight <= 10 for c in clashes)


def test_prohibition_motion_picks_prohibition_clash():
    clashes = identify_clashes(
        "This House would ban single-use plastics",
        Bench(Side.GOVERNMENT),
        Bench(Side.OPPOSITION),
        require_signals=False,
    )
    assert clashes[0].title == "Prohibition Scope and Justification"
    assert clashes[0].weight == 9


def test_bench_tags_choose_the_impact_clash():
    opposition = Bench(Side.OPPOSITION, [signal("stakeholder", role="LO")], tags={"vulnerable_populations"})

    clashes = identify_clashes("This House would tax sugar", Bench(Side.GOVERNMENT), opposition)

    assert clashes[-1].title == "Vulnerable Population Impact Analysis"
    assert clashes[-1].current_leader is Side.OPPOSITION


# =============================================================================
# SCORING ENGINE
# =============================================================================

def strong_signals() -> SpeechSignals:
    return extract_signals("First, the evidence shows this matters. However, they claim otherwise.")


def weak_signals() -> SpeechSignals:
    return extract_signals("I think so.")


def test_total_is_sum_of_axes():
    scores = compute_team_scores([(Team.OO, 9), (Team.OO, 7)], strong_signals(), "LO", make_rng(3))

    for score in scores.values():
        assert score.total == pytest.approx(score.matter + score.manner + score.method)
    assert scores[Team.OO].matter == 16


def test_user_team_gets_measured_manner_and_method():
    signals = strong_signals()
    scores = compute_team_scores([], signals, "LO", make_rng(3))

    assert scores[Team.OO].manner == pytest.approx(signals.quality_score)
    assert scores[Team.OO].method == pytest.approx((signals.structure_score + signals.clash_score) / 2)


def test_other_teams_are_drawn_from_band():
    scores = compute_team_scores([], strong_signals(), "PM", make_rng(11))

    for team in (Team.OO, Team.CG, Team.CO):
        assert 5 <= scores[team].manner < 8
        assert 5 <= scores[team].method < 8


def test_seeded_scores_are_deterministic():
    first = compute_team_scores([(Team.OG, 9)], strong_signals(), "PM", make_rng(42))
    second = compute_team_scores([(Team.OG, 9)], strong_signals(), "PM", make_rng(42))

    assert {t: s.total for t, s in first.items()} == {t: s.total for t, s in second.items()}


def test_ranking_ties_keep_team_order():
    scores = {team: TeamScore(matter=1, manner=1, method=1) for team in (Team.OG, Team.OO, Team.CG, Team.CO)}
    assert rank_teams(scores) == [Team.OG, Team.OO, Team.CG, Team.CO]


def test_ranking_orders_by_total():
    scores = {
        Team.OG: TeamScore(matter=1),
        Team.OO: TeamScore(matter=4),
        Team.CG: TeamScore(matter=3),
        Team.CO: TeamScore(matter=2),
    }
    assert rank_teams(scores) == [Team.OO, Team.CG, Team.CO, Team.OG]


def test_clash_winner_rules():
    assert determine_clash_winner("Any title", strong_signals(), "LO") is Team.OO
    assert determine_clash_winner("Any title", weak_signals(), "LO") is Team.OG
    # Unknown roles count as OG
    assert determine_clash_winner("Any title", strong_signals(), "XX") is Team.OG


def test_performance_metrics_axes():
    metrics = performance_metrics(strong_signals())

    assert metrics["structural_coherence"] == 8
    assert metrics["evidence_usage"] == 7
    assert metrics["strategic_awareness"] == pytest.approx(8)
    assert all(0 <= value <= 10 for value in metrics.values())
