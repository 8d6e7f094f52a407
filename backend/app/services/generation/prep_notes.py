"""
Prep Notes Processor.

WHAT THIS DOES:
Turns a speaker's free-form prep notes into a structured case they can
speak from: case theory, up to three arguments (each with premise,
mechanism, evidence, impact, weighing), up to three rebuttals, a strategic
framework for their role, a weighing mechanism, guidance on priorities,
expected clashes, speech structure and timing, and a rough quality read.

WHY PRESERVE THE USER'S WORDS:
The point of prep is the speaker's own thinking. Every argument part is a
sentence lifted from the notes when one exists; generated phrasing only
fills the gaps and is labelled as coming from the notes.

PIPELINE:
1. Classify the notes on the topic types (economic, rights, social, practical)
2. Pad to at least two arguments, cap at three
3. Case theory, rebuttals, framework, weighing
4. Validation pass (mark arguments, merge duties)
5. Guidance and quality metrics

USAGE:
    processor = PrepNotesProcessor(classifier)
    response = await processor.process(request)
"""

import logging
from dataclasses import dataclass

from app.models.roles import is_government
from app.models.schemas import (
    CaseArgument,
    CaseQualityMetrics,
    CaseRebuttal,
    PrepNotesRequest,
    PrepNotesResponse,
    SpeechStructure,
    StrategicGuidance,
    StructuredCase,
    TimingGuidance,
)
from app.services.analysis import TOPIC_TYPES, BaseArgumentClassifier, get_classifier
from app.services.analysis.classifier import split_sentences

logger = logging.getLogger(__name__)

MIN_ARGUMENTS = 2
MAX_ARGUMENTS = 3
MAX_REBUTTALS = 3
MAX_DUTIES = 5
SUBSTANTIAL_EVIDENCE_CHARS = 50

ROLE_DUTIES = {
    "PM": ["Define motion scope", "Establish government framework", "Present core government arguments", "Set debate tone"],
    "LO": ["Challenge government definitions", "Present alternative framework", "Establish opposition case", "Identify government weaknesses"],
    "DPM": ["Defend government framework", "Address opposition challenges", "Extend government arguments", "Reinforce PM's case"],
    "DLO": ["Systematic government rebuttal", "Extend opposition arguments", "Crystallize key clashes", "Strengthen opposition case"],
    "MG": ["Support Opening Government", "Introduce new dimensions", "Extend debate scope", "Avoid contradicting OG"],
    "MO": ["Support Opening Opposition", "Counter Closing Government", "Add new opposition angles", "Strengthen opposition bench"],
    "GW": ["Summarize government case", "Final opposition rebuttals", "Comparative weighing", "Close for government"],
    "OW": ["Summarize opposition case", "Final government rebuttals", "Impact weighing", "Close for opposition"],
}

ROLE_FRAMEWORKS = {
    "PM": "Establish clear definitions and framework while presenting your strongest arguments as outlined in your prep notes",
    "LO": "Challenge the government framework and establish your alternative approach based on your prepared critique",
    "DPM": "Defend the PM's framework while extending the case with your additional arguments from prep notes",
    "DLO": "Systematically rebut government responses while extending opposition case using your prepared analysis",
    "MG": "Support OG while introducing your unique dimensional analysis as prepared in your notes",
    "MO": "Support OO while adding your distinct opposition angles from your preparation",
    "GW": "Summarize government case and provide final weighing using your prepared comparative analysis",
    "OW": "Summarize opposition case and provide final impact analysis based on your prepared framework",
}

ROLE_PRIORITIES = {
    "PM": ["Set favorable definitions", "Establish strong case theory", "Present core arguments clearly"],
    "LO": ["Challenge government framework", "Present alternative vision", "Establish opposition credibility"],
    "DPM": ["Defend PM's framework", "Address opposition concerns", "Extend government case"],
    "DLO": ["Systematic government rebuttal", "Extend opposition case", "Crystallize key clashes"],
    "MG": ["Support OG framework", "Introduce new dimensions", "Strengthen government bench"],
    "MO": ["Support OO case", "Counter CG extensions", "Add fresh opposition angles"],
    "GW": ["Summarize government case", "Final opposition rebuttals", "Comparative weighing"],
    "OW": ["Summarize opposition case", "Final clash analysis", "Impact weighing"],
}

THEORY_CUES = ("because", "theory", "approach")

TIMING = TimingGuidance(
    total_time="7 minutes maximum",
    protected_time="First and last minute - no POIs",
    poi_window="Minutes 2-6 - accept 1-2 POIs maximum",
    pacing="Aim for 5-6 minutes to allow for questions",
)


@dataclass
class DraftArgument:
    """One argument as read from the notes, before presentation prefixes."""

    title: str
    premise: str
    mechanism: str
    evidence: str
    impact: str
    weighing: str


def role_duties(role: str) -> list[str]:
    return list(ROLE_DUTIES.get(role, ["Fulfill role responsibilities"]))


def fallback_argument(index: int) -> DraftArgument:
    return DraftArgument(
        title=f"Argument {index} from your notes",
        premise=f"Your {'primary' if index == 1 else 'secondary'} premise as outlined in preparation",
        mechanism="The mechanism you identified in your prep notes",
        evidence="Evidence and examples from your preparation",
        impact="Impact analysis from your notes",
        weighing="Weighing considerations from your preparation",
    )


def unique_contributions(notes: str, role: str) -> list[str]:
    lowered = notes.lower()
    contributions = []
    if role == "LO" and "challenge" in lowered:
        contributions.append("Framework challenge approach")
    if role == "DPM" and "extend" in lowered:
        contributions.append("Case extension strategy")
    if role in ("MG", "MO") and "new" in lowered:
        contributions.append("New dimensional analysis")
    if "stakeholder" in lowered:
        contributions.append("Stakeholder analysis approach")
    if "alternative" in lowered:
        contributions.append("Alternative solution framework")
    return contributions


def case_theory(notes: str, government: bool, arguments: list[DraftArgument]) -> str:
    """The user's own theory sentence if the notes state one, otherwise one built from the lead argument."""
    theory = next(
        (s for s in split_sentences(notes) if any(cue in s.lower() for cue in THEORY_CUES)),
        None,
    )
    if theory is None:
        lead = arguments[0].title.lower() if arguments else "policy analysis"
        if government:
            theory = f"This motion should be supported because {lead} demonstrates clear benefits that outweigh concerns"
        else:
            theory = (
                f"This motion should be opposed because {lead} reveals fundamental problems "
                "that cannot be adequately addressed"
            )
    return f"Case Theory (based on your prep notes): {theory}"


def strategic_rebuttals(
    notes: str,
    role: str,
    government: bool,
    arguments: list[DraftArgument],
) -> list[CaseRebuttal]:
    lowered = notes.lower()
    rebuttals = []

    if role in ("LO", "DLO"):
        if "definition" in lowered or "framework" in lowered:
            response = "Based on your notes, challenge the government's definitional framework as outlined in your preparation"
        else:
            response = "Challenge the government's framework using the approach you've developed in your prep notes"
        rebuttals.append(CaseRebuttal(
            target="Government Framework",
            response=response,
            evidence="Evidence from your prep notes supporting your framework rebuttal approach",
        ))

    if role in ("DPM", "GW"):
        if "response" in lowered or "counter" in lowered:
            response = "Address opposition concerns using the counter-arguments you've prepared in your notes"
        else:
            response = "Respond to opposition challenges using your prepared defense strategy"
        rebuttals.append(CaseRebuttal(
            target="Opposition Challenges",
            response=response,
            evidence="Evidence from your prep notes supporting your opposition rebuttal approach",
        ))

    for arg in arguments:
        if government:
            response = f"Counter the opposition's challenge to your {arg.title.lower()} using your prepared responses"
        else:
            response = f"Challenge the government's {arg.title.lower()} using your critical analysis from prep notes"
        rebuttals.append(CaseRebuttal(
            target=f"Counter to {arg.title}",
            response=response,
            evidence=f"Supporting evidence from your notes: {arg.evidence}",
        ))

    return rebuttals[:MAX_REBUTTALS]


def strategic_framework(role: str, contributions: list[str]) -> str:
    base = ROLE_FRAMEWORKS.get(role, "Execute your role-specific strategy")
    if contributions:
        return f"{base} Focus on: {', '.join(contributions)}"
    return base


def weighing_mechanism(notes: str, arguments: list[DraftArgument]) -> str:
    lowered = notes.lower()
    if any(word in lowered for word in ("weigh", "priority", "important")):
        return "Use the weighing priorities you've established in your prep notes to compare arguments"

    titles = [arg.title.lower() for arg in arguments]
    if any("rights" in title for title in titles):
        return "Weigh fundamental rights considerations against practical outcomes as outlined in your notes"
    if any("economic" in title for title in titles):
        return "Use cost-benefit analysis and economic impact weighing from your preparation"
    return "Apply the comparative weighing framework you've developed in your prep notes"


def expected_clash_points(motion: str) -> list[str]:
    lowered = motion.lower()
    if "ban" in lowered:
        return ["Enforcement feasibility", "Individual liberty vs collective harm", "Alternative solutions"]
    if "tax" in lowered:
        return ["Economic efficiency", "Distributional justice", "Implementation costs"]
    return ["Policy effectiveness", "Stakeholder impacts", "Unintended consequences"]


def speech_structure(role: str, case: StructuredCase) -> SpeechStructure:
    return SpeechStructure(
        opening="Thank you Chair, brief role introduction",
        framework=(
            "Establish/challenge framework (1-2 minutes)" if role in ("PM", "LO") else "Brief framework reference"
        ),
        arguments=f"Present {len(case.main_arguments)} main arguments (3-4 minutes)",
        rebuttals="Address opposing arguments (1-2 minutes)" if case.rebuttals else "Minimal rebuttal",
        conclusion="Summarize and weigh (30 seconds)",
    )


def assess_case_quality(case: StructuredCase) -> CaseQualityMetrics:
    substantial = sum(1 for arg in case.main_arguments if len(arg.evidence) > SUBSTANTIAL_EVIDENCE_CHARS)
    return CaseQualityMetrics(
        argument_strength=min(10, len(case.main_arguments) * 2 + 4),
        # TODO: check the arguments against each other for contradictions instead of a fixed score
        logical_consistency=8,
        evidence_quality=min(10, substantial * 3 + 4),
        strategic_alignment=7,
        originality_preservation=8,
    )


def merge_duties(*groups: list[str]) -> list[str]:
    """Concatenate duty lists, dropping repeats, at most five."""
    merged: list[str] = []
    for group in groups:
        for duty in group:
            if duty not in merged:
                merged.append(duty)
    return merged[:MAX_DUTIES]


class PrepNotesProcessor:
    """
    Builds a structured case from prep notes.
    """

    def __init__(self, classifier: BaseArgumentClassifier):
        self.classifier = classifier

    async def process(self, request: PrepNotesRequest) -> PrepNotesResponse:
        notes, motion, role = request.notes, request.motion, request.role
        government = self._is_government(request.team, role)

        logger.info(
            f"Processing prep notes for {role} ({request.team or 'team not given'}): "
            f"motion='{motion}', notes={len(notes)} chars, skill={request.skill_level}"
        )

        # Stage 1-2: arguments from the notes
        drafts = await self._extract_arguments(notes, role)

        # Stage 3: case
        main_arguments = [
            CaseArgument(
                title=f"Argument {index}: {draft.title}",
                premise=f"Your premise: {draft.premise}",
                mechanism=f"Your mechanism: {draft.mechanism}",
                evidence=f"Your evidence: {draft.evidence}",
                impact=f"Your impact analysis: {draft.impact}",
                weighing=f"Your weighing: {draft.weighing}",
            )
            for index, draft in enumerate(drafts, start=1)
        ]

        case = StructuredCase(
            case_theory=case_theory(notes, government, drafts),
            main_arguments=main_arguments,
            rebuttals=strategic_rebuttals(notes, role, government, drafts),
            strategic_framework=strategic_framework(role, unique_contributions(notes, role)),
            role_specific_duties=role_duties(role),
            weighing_mechanism=weighing_mechanism(notes, drafts),
        )

        # Stage 4: validation
        case = self._validate(case, role)

        # Stage 5: guidance and quality
        guidance = StrategicGuidance(
            strategic_priorities=list(ROLE_PRIORITIES.get(role, ["Execute role effectively"])),
            clash_points=expected_clash_points(motion),
            speech_structure=speech_structure(role, case),
            timing_guidance=TIMING,
        )

        logger.info(f"Structured case: {len(case.main_arguments)} arguments, {len(case.rebuttals)} rebuttals")

        return PrepNotesResponse(
            structured_case=case,
            strategic_guidance=guidance,
            role_specific_duties=role_duties(role),
            quality_metrics=assess_case_quality(case),
        )

    async def _extract_arguments(self, notes: str, role: str) -> list[DraftArgument]:
        signals = await self.classifier.classify(notes, role, TOPIC_TYPES)
        drafts = [
            DraftArgument(
                title=signal.title,
                premise=signal.claim,
                mechanism=signal.mechanism,
                evidence=signal.evidence,
                impact=signal.impact,
                weighing=signal.weighing,
            )
            for signal in signals
        ]

        while len(drafts) < MIN_ARGUMENTS:
            drafts.append(fallback_argument(len(drafts) + 1))

        return drafts[:MAX_ARGUMENTS]

    @staticmethod
    def _is_government(team: str, role: str) -> bool:
        if "Government" in team:
            return True
        if "Opposition" in team:
            return False
        return is_government(role)

    @staticmethod
    def _validate(case: StructuredCase, role: str) -> StructuredCase:
        arguments = [
            arg.model_copy(update={"title": f"{arg.title} (Validated)"}) for arg in case.main_arguments
        ]
        return case.model_copy(update={
            "main_arguments": arguments,
            "role_specific_duties": merge_duties(case.role_specific_duties, role_duties(role)),
        })


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

async def process_prep_notes(
    request: PrepNotesRequest,
    classifier: BaseArgumentClassifier | None = None,
) -> PrepNotesResponse:
    """
    Convenience function to structure prep notes.

    Example:
        response = await process_prep_notes(PrepNotesRequest(notes=..., motion=..., role="LO"))
    """
    processor = PrepNotesProcessor(classifier or get_classifier())
    return await processor.process(request)
