"""
Pydantic schemas for API request/response validation.

These define the shape of data that goes in and out of the API. The browser
client speaks camelCase JSON, so every model uses a camelCase alias generator
while the Python side keeps snake_case attribute names.

FLOW OVERVIEW:
==============
1. Client sends prep notes      → /api/structure-notes, /api/process-prep-notes
2. Client records user speech   → /api/generate-poi fires during the speech
3. AI benches respond           → /api/generate-speech(-with-engagement)
4. Round ends                   → /api/adjudicate, /api/comprehensive-feedback
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# SHARED
# =============================================================================

class Speech(CamelModel):
    """
    One delivered speech.

    USED BY: every endpoint that looks at the round so far
    WHEN: Produced by the user (recording transcript) or by the speech generator
    """
    role: str
    content: str = ""
    is_ai: bool = Field(default=False, alias="isAI")
    timestamp: float | None = None


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    error: str


# =============================================================================
# ADJUDICATION
# =============================================================================
#
# WHEN USED:
# - AdjudicateRequest: POST /api/adjudicate, once the eighth speech is in
# - AdjudicationResponse: Final ranking card shown to the user
#
# PIPELINE:
# SignalExtractor → ArgumentClassifier → ClashIdentifier → ScoringEngine → feedback text
#

class AdjudicateRequest(CamelModel):
    motion: str = ""
    speeches: list[Speech] = Field(default_factory=list)
    user_role: str = "PM"
    user_speech: Speech | None = None
    seed: int | None = Field(
        default=None,
        description="Seed for the non-user manner/method draws (falls back to SCORING_SEED)",
    )


class AdjudicatedClash(CamelModel):
    """
    A clash as judged at the end of the round.

    `winner` is a team code (the team credited with the clash weight),
    `current_leader` is the bench with the stronger material on it.
    """
    title: str
    description: str
    winner: str
    weight: int = Field(ge=1, le=10)
    reasoning: str
    gov_position: str
    opp_position: str
    analysis: str
    current_leader: str


class TeamScore(CamelModel):
    """Matter/Manner/Method for one team. Only `total` is set on the fallback card."""
    matter: float | None = None
    manner: float | None = None
    method: float | None = None
    total: float


class PerformanceMetrics(CamelModel):
    average_argument_quality: float
    clash_engagement: float
    structural_coherence: float
    evidence_usage: float
    rhetorical_effectiveness: float
    strategic_awareness: float


class AdjudicationResponse(CamelModel):
    ranking: list[str]
    clashes: list[AdjudicatedClash]
    team_scores: dict[str, TeamScore]
    performance_metrics: PerformanceMetrics
    feedback: str
    improvements: list[str]
    methodology: str | None = None


# =============================================================================
# COMPREHENSIVE FEEDBACK
# =============================================================================

class ComprehensiveFeedbackRequest(CamelModel):
    motion: str = ""
    speeches: list[Speech] = Field(default_factory=list)
    user_role: str = "PM"
    user_speech: str = ""
    debate_phase: str = "ongoing"


class ClashPointReport(CamelModel):
    """
    A clash point with the bench currently ahead on it.

    USED BY: ComprehensiveFeedbackService
    DISPLAYED: Clash map in the post-round review
    """
    title: str
    description: str
    gov_position: str
    opp_position: str
    analysis: str
    current_leader: str
    reasoning: str
    strategic_importance: int = Field(ge=1, le=10)


class TeamFeedback(CamelModel):
    team: str
    strengths: list[str]
    weaknesses: list[str]
    strategic_advice: list[str]
    argument_effectiveness: float
    engagement_quality: float


class DebateProgression(CamelModel):
    total_speeches: int
    argument_development: str
    clash_evolution: str
    strategic_development: str
    overall_progression: str


class StrategicRecommendations(CamelModel):
    immediate: list[str]
    long_term: list[str]
    role_specific: list[str]


class DebateQuality(CamelModel):
    argument_quality: float
    clash_engagement: float
    strategic_awareness: float
    evidence_usage: float
    overall_score: float
    assessment: str


class ComprehensiveFeedbackResponse(CamelModel):
    clash_points: list[ClashPointReport]
    team_feedback: list[TeamFeedback]
    debate_progression: DebateProgression
    strategic_recommendations: StrategicRecommendations
    debate_quality: DebateQuality
    methodology: str


# =============================================================================
# POINTS OF INFORMATION
# =============================================================================

class POIRequest(CamelModel):
    current_transcript: str = ""
    role: str = ""
    motion: str = ""
    time_spoken: float = 0
    skill_level: str | None = None
    seed: int | None = None


class POIResponse(CamelModel):
    poi: str | None


# =============================================================================
# SPEECH GENERATION
# =============================================================================

class SpeechRequest(CamelModel):
    """
    Request for one AI speech.

    USED BY: POST /api/generate-speech
    WHEN: After the user has spoken; the client asks for each remaining role
    """
    motion: str = ""
    role: str
    previous_speeches: list[Speech] = Field(default_factory=list)
    user_notes: str = ""
    user_skill_level: str = "intermediate"
    user_speech: str | None = None


class SpeechResponse(CamelModel):
    speech: str
    skill_level: str


class EngagedSpeechRequest(SpeechRequest):
    """Same as SpeechRequest, plus the user's processed case if they prepped one."""
    structured_case: dict[str, Any] | None = None


class EngagementAnalysis(CamelModel):
    direct_references: list[str]
    rebuttals: list[str]
    extensions: list[str]
    clash_points: list[str]


class EngagementQuality(CamelModel):
    direct_references: int
    rebuttals_included: int
    clash_engagement: float
    overall_score: float


class EngagedSpeechResponse(CamelModel):
    speech: str
    engagement_analysis: EngagementAnalysis
    debate_state: str
    engagement_quality: EngagementQuality
    clash_points: list[str]


# =============================================================================
# PREP NOTES
# =============================================================================

class PrepNotesRequest(CamelModel):
    notes: str = ""
    motion: str = ""
    role: str = "PM"
    team: str = ""
    skill_level: str = "intermediate"


class CaseArgument(CamelModel):
    title: str
    premise: str
    mechanism: str
    evidence: str
    impact: str
    weighing: str


class CaseRebuttal(CamelModel):
    target: str
    response: str
    evidence: str


class StructuredCase(CamelModel):
    """
    The user's prep notes rebuilt as a BP case.

    LIFECYCLE:
    1. Arguments are classified out of the raw notes
    2. Each argument is labelled with the user's own sentences where found
    3. Rebuttals, framework and weighing are attached for the role
    4. Validation tags the arguments and merges in the role duties
    """
    case_theory: str
    main_arguments: list[CaseArgument]
    rebuttals: list[CaseRebuttal]
    strategic_framework: str
    role_specific_duties: list[str]
    weighing_mechanism: str


class SpeechStructure(CamelModel):
    opening: str
    framework: str
    arguments: str
    rebuttals: str
    conclusion: str


class TimingGuidance(CamelModel):
    total_time: str
    protected_time: str
    poi_window: str
    pacing: str


class StrategicGuidance(CamelModel):
    strategic_priorities: list[str]
    clash_points: list[str]
    speech_structure: SpeechStructure
    timing_guidance: TimingGuidance


class CaseQualityMetrics(CamelModel):
    argument_strength: float
    logical_consistency: float
    evidence_quality: float
    strategic_alignment: float
    originality_preservation: float


class PrepNotesResponse(CamelModel):
    structured_case: StructuredCase
    strategic_guidance: StrategicGuidance
    role_specific_duties: list[str]
    quality_metrics: CaseQualityMetrics


class StructureNotesRequest(CamelModel):
    """
    Fields are loosely typed on purpose: the service checks them itself so it
    can answer with the exact messages the client shows to the user.
    """
    motion: Any = None
    role: Any = None
    notes: Any = None


class StructureNotesResponse(CamelModel):
    structured_notes: str
