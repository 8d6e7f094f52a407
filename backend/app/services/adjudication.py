"""
Adjudication Pipeline — Orchestrates the end-of-round judgement.

WHAT THIS DOES:
Takes the eight speeches of a finished round and produces the adjudication
card: team ranking, the clashes and who won them, Matter/Manner/Method per
team, six performance metrics for the user, feedback text and improvements.

WHY THIS EXISTS:
- Keeps the /adjudicate route thin and focused on HTTP concerns
- Makes the judgement testable without a server
- Single place to see how signals, clashes and scores fit together

PIPELINE STAGES:
1. Locate: find the user's speech (explicit, same role, or any human speech)
2. Analysis: lexical signals of the user's speech
3. Clashes: classify every speech, build both benches, identify three clashes,
   decide each clash winner
4. Scoring: team scores, ranking, performance metrics
5. Assembly: feedback text and the AdjudicationResponse

If no human speech exists there is nothing to judge; a fixed default card
is returned instead of an error.

USAGE:
    pipeline = AdjudicationPipeline(classifier, rng)
    card = await pipeline.run(request)
"""

import logging
import random
from dataclasses import dataclass, field

from app.config import get_settings
from app.models.roles import GOVERNMENT_ROLES, OPPOSITION_ROLES, Side, Team, parse_role
from app.models.schemas import (
    AdjudicateRequest,
    AdjudicatedClash,
    AdjudicationResponse,
    PerformanceMetrics,
    Speech,
    TeamScore as TeamScoreSchema,
)
from app.services.analysis import (
    ADJUDICATION_SLOTS,
    STRUCTURAL_TYPES,
    BaseArgumentClassifier,
    ClashIdentifier,
    ClashPoint,
    SpeechSignals,
    TeamScore,
    build_bench,
    compute_team_scores,
    determine_clash_winner,
    extract_signals,
    get_classifier,
    make_rng,
    performance_metrics,
    rank_teams,
)
from app.services.generation.adjudication_feedback import list_improvements, write_feedback

logger = logging.getLogger(__name__)

METHODOLOGY = (
    "Matrix-based scoring system analyzing argument structure, evidence, clash engagement, "
    "and strategic awareness"
)


@dataclass
class AdjudicationResult:
    """Intermediate result tracking through the pipeline."""

    # Input
    motion: str
    speeches: list[Speech]
    user_role: str

    # Locate stage
    user_speech: Speech | None = None

    # Analysis stage
    signals: SpeechSignals | None = None

    # Clash stage
    clashes: list[ClashPoint] = field(default_factory=list)
    winners: list[Team] = field(default_factory=list)

    # Scoring stage
    scores: dict[Team, TeamScore] = field(default_factory=dict)
    ranking: list[Team] = field(default_factory=list)


class AdjudicationPipeline:
    """
    Orchestrates the adjudication of one round.

    The classifier and random generator are injected so tests (and seeded
    requests) get reproducible cards.
    """

    def __init__(self, classifier: BaseArgumentClassifier, rng: random.Random):
        self.classifier = classifier
        self.rng = rng
        self.identifier = ClashIdentifier(ADJUDICATION_SLOTS)

    async def run(self, request: AdjudicateRequest) -> AdjudicationResponse:
        """
        Adjudicate a round.

        Args:
            request: Motion, speeches, the user's role and (optionally) their speech

        Returns:
            AdjudicationResponse (the default card when no human speech exists)
        """
        logger.info(
            f"Adjudicating: motion='{request.motion}', speeches={len(request.speeches)}, "
            f"user_role={request.user_role}, explicit_user_speech={request.user_speech is not None}"
        )

        result = AdjudicationResult(
            motion=request.motion,
            speeches=list(request.speeches),
            user_role=request.user_role,
        )

        # Stage 1: Locate the user's speech
        self._stage_locate(result, request.user_speech)

        # Early exit if there is nothing to judge
        if result.user_speech is None:
            return build_default_adjudication()

        # Stage 2: Analysis
        result.signals = extract_signals(result.user_speech.content)

        # Stage 3: Clashes
        await self._stage_clashes(result)

        # Stage 4: Scoring
        self._stage_scoring(result)

        # Stage 5: Build final card
        card = self._build_card(result)

        logger.info(
            f"Adjudication complete: ranking={[t.value for t in result.ranking]}, "
            f"quality={result.signals.quality_score:.2f}"
        )
        return card

    # =========================================================================
    # STAGE 1: LOCATE
    # =========================================================================

    def _stage_locate(self, result: AdjudicationResult, explicit: Speech | None) -> None:
        """Explicit speech first, then a human speech in the user's role, then any human speech."""
        if explicit is not None:
            result.user_speech = explicit
            return

        same_role = next(
            (s for s in result.speeches if s.role == result.user_role and not s.is_ai), None
        )
        if same_role is not None:
            result.user_speech = same_role
            return

        logger.warning(
            f"No human speech for role {result.user_role}; available: "
            f"{[(s.role, s.is_ai) for s in result.speeches]}"
        )
        result.user_speech = next((s for s in result.speeches if not s.is_ai), None)
        if result.user_speech is None:
            logger.warning("No human speech found at all; returning default adjudication")

    # =========================================================================
    # STAGE 3: CLASHES
    # =========================================================================

    async def _stage_clashes(self, result: AdjudicationResult) -> None:
        """Build both benches from every speech and judge the three clashes."""
        speeches = list(result.speeches)
        if result.user_speech not in speeches:
            speeches.append(result.user_speech)

        gov_texts, opp_texts = [], []
        gov_signals, opp_signals = [], []

        for speech in speeches:
            role = parse_role(speech.role)
            if role in GOVERNMENT_ROLES:
                texts, signals = gov_texts, gov_signals
            elif role in OPPOSITION_ROLES:
                texts, signals = opp_texts, opp_signals
            else:
                continue
            texts.append(speech.content)
            signals.extend(await self.classifier.classify(speech.content, speech.role, STRUCTURAL_TYPES))

        government = build_bench(Side.GOVERNMENT, gov_texts, gov_signals)
        opposition = build_bench(Side.OPPOSITION, opp_texts, opp_signals)

        result.clashes = self.identifier.identify(
            result.motion, government, opposition, require_signals=False
        )
        result.winners = [
            determine_clash_winner(clash.title, result.signals, result.user_role)
            for clash in result.clashes
        ]

    # =========================================================================
    # STAGE 4: SCORING
    # =========================================================================

    def _stage_scoring(self, result: AdjudicationResult) -> None:
        clash_wins = [(winner, clash.weight) for winner, clash in zip(result.winners, result.clashes)]
        result.scores = compute_team_scores(clash_wins, result.signals, result.user_role, self.rng)
        result.ranking = rank_teams(result.scores)

    # =========================================================================
    # STAGE 5: ASSEMBLY
    # =========================================================================

    def _build_card(self, result: AdjudicationResult) -> AdjudicationResponse:
        clashes = [
            AdjudicatedClash(
                title=clash.title,
                description=clash.description,
                winner=winner.value,
                weight=clash.weight,
                reasoning=clash.reasoning,
                gov_position=clash.gov_position,
                opp_position=clash.opp_position,
                analysis=clash.analysis,
                current_leader=clash.current_leader.value,
            )
            for clash, winner in zip(result.clashes, result.winners)
        ]

        team_scores = {
            team.value: TeamScoreSchema(
                matter=score.matter,
                manner=score.manner,
                method=score.method,
                total=score.total,
            )
            for team, score in result.scores.items()
        }

        return AdjudicationResponse(
            ranking=[team.value for team in result.ranking],
            clashes=clashes,
            team_scores=team_scores,
            performance_metrics=PerformanceMetrics(**performance_metrics(result.signals)),
            feedback=write_feedback(result.motion, result.signals, result.ranking, result.user_role),
            improvements=list_improvements(result.signals),
            methodology=METHODOLOGY,
        )


def build_default_adjudication() -> AdjudicationResponse:
    """The fixed card returned when no human speech could be found."""
    return AdjudicationResponse(
        ranking=["OG", "OO", "CG", "CO"],
        clashes=[],
        team_scores={
            "OG": TeamScoreSchema(total=20),
            "OO": TeamScoreSchema(total=18),
            "CG": TeamScoreSchema(total=16),
            "CO": TeamScoreSchema(total=14),
        },
        performance_metrics=PerformanceMetrics(
            average_argument_quality=5,
            clash_engagement=5,
            structural_coherence=5,
            evidence_usage=5,
            rhetorical_effectiveness=5,
            strategic_awareness=5,
        ),
        feedback="Unable to analyze speech properly. Please try again.",
        improvements=["Ensure your speech is properly recorded and transcribed"],
    )


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

async def adjudicate_round(
    request: AdjudicateRequest,
    classifier: BaseArgumentClassifier | None = None,
) -> AdjudicationResponse:
    """
    Convenience function to adjudicate a round.

    The request seed wins over SCORING_SEED; with neither the non-user
    Manner/Method draws are fresh on every call.

    Example:
        card = await adjudicate_round(AdjudicateRequest(motion=..., speeches=..., user_role="LO"))
    """
    seed = request.seed if request.seed is not None else get_settings().scoring_seed
    pipeline = AdjudicationPipeline(classifier or get_classifier(), make_rng(seed))
    return await pipeline.run(request)
