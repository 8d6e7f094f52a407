"""
Tests for the template generators: speeches, engaged speeches, POIs,
prep-note processing and structured notes.

Run with: pytest tests/test_generation.py -v
"""

import pytest
from openai import OpenAIError

from app.models.schemas import POIRequest, PrepNotesRequest, Speech
from app.services.analysis import make_rng
from app.services.errors import DebateInputError
from app.services.generation import (
    EngagedSpeechGenerator,
    POIGenerator,
    PrepNotesProcessor,
    SpeechGenerator,
    structure_notes,
    validate_structure_request,
)
from app.services.generation.engagement import (
    EngagementReport,
    analyze_previous_speeches,
    assess_engagement_quality,
    extract_key_arguments,
    extract_key_claims,
)
from app.services.generation.poi import POI_TEMPLATES
from app.services.generation.speeches import find_user_role
from app.services.generation.structure_notes import motion_families


MOTION = "This House would ban single-use plastics"
USER_SPEECH = "Taxes will raise costs for families because prices go up. Freedom must be protected."


# =============================================================================
# PRACTICE SPEECHES
# =============================================================================

@pytest.mark.asyncio
async def test_speech_requires_user_speech(classifier):
    with pytest.raises(DebateInputError, match="User must speak first"):
        await SpeechGenerator(classifier).generate(MOTION, "LO", "", [])


@pytest.mark.asyncio
async def test_lo_speech_challenges_the_motion(classifier):
    speech = await SpeechGenerator(classifier).generate(MOTION, "LO", USER_SPEECH, [])

    assert speech.startswith("Thank you, Chair. As Leader of the Opposition")
    assert f'"{MOTION}"' in speech
    assert "SYSTEMATIC REBUTTAL OF GOVERNMENT CASE" in speech


@pytest.mark.asyncio
async def test_every_role_gets_a_speech(classifier):
    generator = SpeechGenerator(classifier)
    for role in ("PM", "LO", "DPM", "DLO", "MG", "MO", "GW", "OW"):
        speech = await generator.generate(MOTION, role, USER_SPEECH, [])
        assert speech.strip(), f"Empty speech for {role}"


@pytest.mark.asyncio
async def test_unknown_role_gets_generic_speech(classifier):
    speech = await SpeechGenerator(classifier).generate(MOTION, "Chair", USER_SPEECH, [])

    assert "As Chair, I present my analysis" in speech
    assert "- Taxes will raise costs for families because prices go up" in speech
    assert "Our case theory: Answer the strongest points raised so far" in speech


@pytest.mark.asyncio
async def test_pm_speech_carries_its_framework(classifier):
    speech = await SpeechGenerator(classifier).generate(MOTION, "PM", USER_SPEECH, [])

    assert (
        "Our case theory: Establish the necessity of the ban to mitigate a significant societal harm "
        "and outline a clear, enforceable mechanism."
    ) in speech
    assert "My roadmap: (1) establish framework (2) present core arguments (3) demonstrate positive impacts." in speech
    assert "- Primary impacts of the policy" in speech


@pytest.mark.asyncio
async def test_lo_clashes_follow_the_users_arguments(classifier):
    speech = await SpeechGenerator(classifier).generate("This House would tax sugar", "LO", USER_SPEECH, [])

    assert "Our case theory: Demonstrate regressive impacts and market distortion effects." in speech
    assert "- Economic impact analysis" in speech
    assert "- Rights vs collective benefit" in speech


@pytest.mark.asyncio
async def test_closing_speeches_carry_their_extensions(classifier):
    generator = SpeechGenerator(classifier)

    mg = await generator.generate(MOTION, "MG", USER_SPEECH, [])
    mo = await generator.generate(MOTION, "MO", USER_SPEECH, [])

    assert "- International competitiveness and global standards" in mg
    assert "- Democratic legitimacy crisis" in mo
    assert "My roadmap: (1) support OG (2) introduce new dimension (3) extend debate scope." in mg


def test_user_role_is_first_human_speech():
    speeches = [
        Speech(role="PM", content="...", is_ai=True),
        Speech(role="LO", content="...", is_ai=False),
        Speech(role="DPM", content="...", is_ai=False),
    ]
    assert find_user_role(speeches) == "LO"
    assert find_user_role([]) == "PM"


# =============================================================================
# ENGAGED SPEECHES
# =============================================================================

def test_key_arguments_explicit_then_topics():
    arguments = extract_key_arguments("My first argument is that taxes hurt. The economic case matters.")
    assert arguments == ["first argument is that taxes hurt.", "economic argument"]


def test_key_claims_need_length_and_claim_word():
    claims = extract_key_claims("It will. The policy will raise growth for every family. Nice weather today.")
    assert claims == ["The policy will raise growth for every family"]


def test_analysis_uses_only_other_ai_speakers():
    previous = [
        Speech(role="PM", content="The economic policy will raise growth for every family.", is_ai=True),
        Speech(role="LO", content="Freedom must be protected from this economic overreach.", is_ai=True),
        Speech(role="DPM", content="This human speech must never be quoted back.", is_ai=False),
    ]

    report = analyze_previous_speeches(previous, "My argument is economic.", "DLO")

    assert report.direct_references[0] == 'PM claimed: "The economic policy will raise growth for every family"'
    assert not any("DPM" in ref for ref in report.direct_references)
    assert report.rebuttals == ["Counter PM's argument about economic argument"]
    assert report.extensions == [
        "Extend LO's point about economic argument",
        "Extend LO's point about rights argument",
    ]
    assert report.clash_points


def test_engagement_quality_counts_whole_words():
    speech = "However, the prime minister ignores costs. But they argued otherwise. We contribute."
    quality = assess_engagement_quality(speech, EngagementReport())

    assert quality.direct_references == 2
    # "contribute" is not a rebuttal
    assert quality.rebuttals_included == 3
    assert quality.clash_engagement == 4
    assert quality.overall_score == pytest.approx(3.0)


def test_engaged_speech_response():
    previous = [Speech(role="PM", content="The economic policy will raise growth.", is_ai=True)]

    response = EngagedSpeechGenerator().generate(MOTION, "DLO", USER_SPEECH, previous)

    assert response.speech.strip()
    assert "CURRENT SPEAKER: Deputy Leader of Opposition" in response.debate_state
    assert "GOVERNMENT POSITION" in response.debate_state
    assert response.engagement_quality.overall_score <= 10
    assert len(response.clash_points) <= 3


def test_engaged_speech_for_pm_uses_generic_writer():
    response = EngagedSpeechGenerator().generate(MOTION, "PM", USER_SPEECH, [])
    assert response.speech.strip()
    assert response.engagement_analysis.direct_references == []


# =============================================================================
# POINTS OF INFORMATION
# =============================================================================

def poi_request(time_spoken: float, transcript: str = "Plain claims only", skill: str | None = "beginner"):
    return POIRequest(current_transcript=transcript, role="PM", motion=MOTION, time_spoken=time_spoken, skill_level=skill)


@pytest.mark.asyncio
async def test_poi_protected_time():
    generator = POIGenerator(make_rng(1))
    assert await generator.generate(poi_request(30)) is None
    assert await generator.generate(poi_request(400)) is None


@pytest.mark.asyncio
async def test_poi_window_is_inclusive():
    generator = POIGenerator(make_rng(1))
    assert await generator.generate(poi_request(60)) is not None
    assert await generator.generate(poi_request(360)) is not None


@pytest.mark.asyncio
async def test_poi_beginner_template():
    poi = await POIGenerator(make_rng(5)).generate(poi_request(120))
    assert poi in POI_TEMPLATES["beginner"]


@pytest.mark.asyncio
async def test_poi_transcript_overrides():
    generator = POIGenerator(make_rng(5))

    poi = await generator.generate(poi_request(120, "For example, Sweden did this."))
    assert poi == "Can you give us a different example that proves the same point?"

    poi = await generator.generate(poi_request(120, "A study found it works.", "advanced"))
    assert poi == "What's the methodology behind that study, and how do you address selection bias?"


@pytest.mark.asyncio
async def test_poi_unknown_skill_uses_intermediate():
    poi = await POIGenerator(make_rng(5)).generate(poi_request(120, skill="expert"))
    assert poi in POI_TEMPLATES["intermediate"]


@pytest.mark.asyncio
async def test_poi_seeded_choice_is_reproducible():
    first = await POIGenerator(make_rng(8)).generate(poi_request(120))
    second = await POIGenerator(make_rng(8)).generate(poi_request(120))
    assert first == second


@pytest.mark.asyncio
async def test_poi_model_text_is_used(fake_openai):
    client, completions = fake_openai(content="  Who pays for the enforcement?  ")
    generator = POIGenerator(make_rng(1), client=client)
    generator.use_model = True

    assert await generator.generate(poi_request(120)) == "Who pays for the enforcement?"
    assert completions.calls == 1


@pytest.mark.asyncio
async def test_poi_model_failure_falls_back_to_templates(fake_openai):
    client, _ = fake_openai(error=OpenAIError("service unavailable"))
    generator = POIGenerator(make_rng(1), client=client)
    generator.use_model = True

    assert await generator.generate(poi_request(120)) in POI_TEMPLATES["beginner"]


# =============================================================================
# PREP NOTES
# =============================================================================

@pytest.mark.asyncio
async def test_prep_notes_keep_the_users_words(classifier):
    notes = "Taxes will cost families money because prices rise. Freedom must be protected."
    request = PrepNotesRequest(notes=notes, motion="This House would tax sugar", role="LO")

    response = await PrepNotesProcessor(classifier).process(request)
    case = response.structured_case

    assert case.case_theory == (
        "Case Theory (based on your prep notes): Taxes will cost families money because prices rise"
    )
    assert case.main_arguments[0].title == (
        "Argument 1: Taxes will cost families money because prices rise (Validated)"
    )
    assert case.main_arguments[1].premise == "Your premise: Freedom must be protected"
    assert case.rebuttals[0].target == "Government Framework"
    assert len(case.rebuttals) == 3
    assert response.strategic_guidance.clash_points == [
        "Economic efficiency", "Distributional justice", "Implementation costs",
    ]
    assert response.quality_metrics.argument_strength == 8


@pytest.mark.asyncio
async def test_empty_notes_are_padded(classifier):
    request = PrepNotesRequest(notes="", motion=MOTION, role="PM")

    case = (await PrepNotesProcessor(classifier).process(request)).structured_case

    assert [a.title for a in case.main_arguments] == [
        "Argument 1: Argument 1 from your notes (Validated)",
        "Argument 2: Argument 2 from your notes (Validated)",
    ]
    assert case.case_theory.startswith("Case Theory (based on your prep notes): This motion should be supported")


@pytest.mark.asyncio
async def test_duties_are_not_duplicated(classifier):
    request = PrepNotesRequest(notes="", motion=MOTION, role="DLO")

    response = await PrepNotesProcessor(classifier).process(request)
    duties = response.structured_case.role_specific_duties

    assert len(duties) == len(set(duties)) == 4


@pytest.mark.asyncio
async def test_team_field_decides_the_bench(classifier):
    request = PrepNotesRequest(notes="", motion=MOTION, role="LO", team="Closing Government")

    case = (await PrepNotesProcessor(classifier).process(request)).structured_case

    assert "should be supported" in case.case_theory


# =============================================================================
# STRUCTURED NOTES
# =============================================================================

def test_structure_notes_validation_messages():
    with pytest.raises(DebateInputError, match="Motion is required"):
        validate_structure_request("   ", "PM", "")
    with pytest.raises(DebateInputError) as excinfo:
        validate_structure_request(MOTION, "Speaker", "")
    assert excinfo.value.message == "Invalid role provided. Accepted roles are: PM, LO, DPM, DLO, MG, MO, GW, OW."
    with pytest.raises(DebateInputError, match="Notes must be a string."):
        validate_structure_request(MOTION, "PM", 42)


def test_motion_families_match_whole_words():
    assert motion_families("this house would ban single-use plastics") == ["prohibition", "policy"]
    assert "prohibition" in motion_families("banning cars in cities")
    # "said" must not fire "ai", "fund" must not fire "un"
    assert motion_families("they said the fund was large") == ["policy"]


def test_structure_notes_brief():
    brief = structure_notes(MOTION, "LO", "Plastic bans push costs onto small shops.")

    assert brief.startswith("STRATEGIC PREPARATION NOTES")
    assert f"### Motion: {MOTION}" in brief
    assert "### Role: Leader of Opposition (Opening Opposition)" in brief
    assert "* **Type(s)**: Prohibition, Policy" in brief
    assert "### YOUR ORIGINAL NOTES\nPlastic bans push costs onto small shops." in brief
