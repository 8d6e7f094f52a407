"""
API Routes — The endpoints that tie everything together.

ENDPOINTS:
- POST /api/adjudicate                         → Final ranking card for the round
- POST /api/comprehensive-feedback             → Clash map and per-team review
- POST /api/generate-poi                       → POI while the user is speaking (or null)
- POST /api/generate-speech                    → One AI speech for a role
- POST /api/generate-speech-with-engagement    → AI speech that rebuts earlier speeches
- POST /api/process-prep-notes                 → Prep notes → structured case
- POST /api/structure-notes                    → Prep notes → markdown brief

FLOW:
1. Before the round, structure the user's notes (/structure-notes, /process-prep-notes)
2. During the user's speech, poll /generate-poi
3. After it, ask for each AI speech (/generate-speech or the engaged variant)
4. At the end, call /adjudicate and /comprehensive-feedback

ERRORS:
Input problems come back as 400 {"error": message}. Anything unexpected is
logged and returned as 500 with a message naming what failed.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import APIRouter, HTTPException

from app.models.schemas import (
    AdjudicateRequest,
    AdjudicationResponse,
    ComprehensiveFeedbackRequest,
    ComprehensiveFeedbackResponse,
    EngagedSpeechRequest,
    EngagedSpeechResponse,
    POIRequest,
    POIResponse,
    PrepNotesRequest,
    PrepNotesResponse,
    SpeechRequest,
    SpeechResponse,
    StructureNotesRequest,
    StructureNotesResponse,
)

# Services
from app.services.adjudication import adjudicate_round
from app.services.analysis import get_classifier
from app.services.comprehensive_feedback import generate_comprehensive_feedback
from app.services.errors import DebateInputError
from app.services.generation import (
    generate_engaged_speech,
    generate_poi,
    generate_speech,
    process_prep_notes,
    structure_notes,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


@contextmanager
def failure_message(message: str) -> Iterator[None]:
    """
    Turn an unexpected error into a 500 carrying `message`.

    Input errors (DebateInputError, HTTPException) pass through untouched so
    the app-level handlers can answer with their own status and text.
    """
    try:
        yield
    except (DebateInputError, HTTPException):
        raise
    except Exception as e:
        logger.exception(f"{message}: {e}")
        raise HTTPException(status_code=500, detail=message) from e


# =============================================================================
# END OF ROUND
# =============================================================================

@router.post(
    "/adjudicate",
    response_model=AdjudicationResponse,
    response_model_exclude_none=True,
)
async def adjudicate(request: AdjudicateRequest) -> AdjudicationResponse:
    """
    Adjudicate the round from the user's point of view.

    This runs the full pipeline:
    1. Find the user's speech (explicit, by role, or first human speech)
    2. Extract structure/evidence/weighing/rebuttal signals
    3. Classify arguments and identify the clashes
    4. Score Matter/Manner/Method and rank the four teams
    5. Write feedback and improvements

    With no user speech at all, the fixed default card is returned.

    Example:
        POST /api/adjudicate
        {"motion": "THW ban private cars", "speeches": [...], "userRole": "PM", "seed": 7}
    """
    logger.info(f"Adjudicating round: user_role={request.user_role}, speeches={len(request.speeches)}")

    with failure_message("Failed to generate adjudication"):
        card = await adjudicate_round(request)

    logger.info(f"Adjudication ranking: {card.ranking}")
    return card


@router.post("/comprehensive-feedback", response_model=ComprehensiveFeedbackResponse)
async def comprehensive_feedback(request: ComprehensiveFeedbackRequest) -> ComprehensiveFeedbackResponse:
    """
    Post-round review: clash map, per-team feedback, progression and advice.
    """
    logger.info(f"Comprehensive feedback: phase={request.debate_phase}, speeches={len(request.speeches)}")

    with failure_message("Failed to generate comprehensive feedback"):
        return await generate_comprehensive_feedback(request)


# =============================================================================
# DURING THE ROUND
# =============================================================================

@router.post("/generate-poi", response_model=POIResponse)
async def generate_poi_endpoint(request: POIRequest) -> POIResponse:
    """
    Offer a Point of Information, or {"poi": null} during protected time.

    Example:
        POST /api/generate-poi
        {"currentTranscript": "...", "role": "PM", "timeSpoken": 95, "skillLevel": "beginner"}
    """
    with failure_message("Failed to generate POI"):
        poi = await generate_poi(request)

    if poi:
        logger.info(f"POI offered at {request.time_spoken}s to {request.role}")
    return POIResponse(poi=poi)


@router.post("/generate-speech", response_model=SpeechResponse)
async def generate_speech_endpoint(request: SpeechRequest) -> SpeechResponse:
    """
    Write the speech for one AI role, built on the user's arguments.

    Returns 400 {"error": "User must speak first"} when there is no user speech.
    """
    if not request.user_speech:
        raise HTTPException(status_code=400, detail="User must speak first")

    with failure_message("Failed to generate speech"):
        speech = await generate_speech(
            motion=request.motion,
            role=request.role,
            user_speech=request.user_speech,
            previous_speeches=request.previous_speeches,
            classifier=get_classifier(),
            skill_level=request.user_skill_level,
        )

    return SpeechResponse(speech=speech, skill_level=request.user_skill_level)


@router.post("/generate-speech-with-engagement", response_model=EngagedSpeechResponse)
async def generate_engaged_speech_endpoint(request: EngagedSpeechRequest) -> EngagedSpeechResponse:
    """
    Write an AI speech that quotes, rebuts and extends what was said before it.
    """
    with failure_message("Failed to generate engaged speech"):
        return generate_engaged_speech(
            motion=request.motion,
            role=request.role,
            user_speech=request.user_speech or "",
            previous_speeches=request.previous_speeches,
            structured_case=request.structured_case,
        )


# =============================================================================
# PREPARATION
# =============================================================================

@router.post("/process-prep-notes", response_model=PrepNotesResponse)
async def process_prep_notes_endpoint(request: PrepNotesRequest) -> PrepNotesResponse:
    """
    Rebuild raw prep notes as a BP case with strategic guidance and quality metrics.
    """
    logger.info(f"Processing prep notes: role={request.role}, notes_length={len(request.notes)}")

    with failure_message("Failed to process prep notes"):
        return await process_prep_notes(request)


@router.post("/structure-notes", response_model=StructureNotesResponse)
async def structure_notes_endpoint(request: StructureNotesRequest) -> StructureNotesResponse:
    """
    Turn prep notes into a markdown preparation brief.

    Returns 400 when the motion is empty, the role is not a BP role code or
    the notes are not a string.
    """
    with failure_message("Failed to structure notes. Please try again or check your input."):
        brief = structure_notes(request.motion, request.role, request.notes)

    return StructureNotesResponse(structured_notes=brief)
