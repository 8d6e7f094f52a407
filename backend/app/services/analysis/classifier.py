"""
Keyword Argument Classifier.

WHAT THIS DOES:
Maps free text onto a fixed taxonomy of argument types and fills in the
parts of each argument (claim, mechanism, evidence, impact, weighing) by
pulling the first sentence that looks like it plays that part.

THE TAXONOMY:
    Topic types (what the argument is about):
        economic, rights, social, practical
    Structural types (what job the argument does in a BP case):
        framework, mechanism, impact, stakeholder

Speech generation and prep-note processing read the topic types. Clash
analysis reads the structural types. A text can trigger both kinds.

PRECISION OVER RECALL:
A type is emitted only when one of its trigger words appears. A speech that
never mentions money produces no economic signal, however economic the
motion is. Missing parts of a present argument fall back to fixed phrases
so downstream templates always get prose.

EXAMPLE:
    "Taxes will raise costs for families because prices go up."
    → economic signal:
        claim    = "Taxes will raise costs for families because prices go up"
        evidence = "Evidence supporting the economic argument"   (fallback)
        strength = 6   (base 5, +1 because)

USAGE:
    classifier = KeywordArgumentClassifier()
    signals = await classifier.classify(speech_text, "PM")
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from app.services.analysis.models import ArgumentSignal
from app.services.analysis.protocols import BaseArgumentClassifier
from app.services.analysis.signals import contains_any

logger = logging.getLogger(__name__)

SENTENCE_SPLIT = re.compile(r"[.!?]+")

TITLE_MAX_CHARS = 60


# =============================================================================
# TAXONOMY
# =============================================================================

@dataclass(frozen=True)
class ArgumentType:
    """Static description of one argument type."""

    name: str
    triggers: tuple[str, ...]
    fallback_title: str
    claim_cues: tuple[str, ...] = ()
    """Empty means any sentence naming a trigger counts as the claim"""


TOPIC_TYPES = ("economic", "rights", "social", "practical")
STRUCTURAL_TYPES = ("framework", "mechanism", "impact", "stakeholder")

CLAIM_CUES = ("will", "should", "must", "because")

TAXONOMY: dict[str, ArgumentType] = {
    "economic": ArgumentType(
        "economic", ("economic", "cost", "money", "tax"), "Economic Impact Analysis", CLAIM_CUES,
    ),
    "rights": ArgumentType(
        "rights", ("right", "freedom", "liberty"), "Fundamental Rights Consideration", CLAIM_CUES,
    ),
    "social": ArgumentType(
        "social", ("social", "community", "society"), "Social Cohesion Effects", CLAIM_CUES,
    ),
    "practical": ArgumentType(
        "practical", ("implement", "practical", "enforce"), "Implementation Feasibility", CLAIM_CUES,
    ),
    "framework": ArgumentType(
        "framework", ("define", "framework", "understand"), "Framework and Definitions",
    ),
    "mechanism": ArgumentType(
        "mechanism", ("mechanism", "implement", "enforce", "work"), "Policy Mechanism",
    ),
    "impact": ArgumentType(
        "impact", ("impact", "harm", "benefit", "consequence"), "Impact Analysis",
    ),
    "stakeholder": ArgumentType(
        "stakeholder", ("people", "community", "vulnerable", "affected"), "Stakeholder Analysis",
    ),
}

MECHANISM_CUES = ("because", "through", "mechanism", "how", " by ")
EVIDENCE_CUES = ("example", "evidence", "study", "research", "data")
IMPACT_CUES = ("impact", "consequence", "result", "effect", "lead to")
WEIGHING_CUES = ("important", "crucial", "matters", "priority", "outweigh")
TITLE_CUES = ("argument", "because")


def summarize_claim(arg_type: str, content: str) -> str:
    """Short stand-in claim used when no sentence states the argument outright."""
    if arg_type == "economic":
        if "cost" in content:
            return "Economic costs outweigh benefits"
        if "growth" in content:
            return "Policy will stimulate economic growth"
        if "inequality" in content:
            return "Policy addresses economic inequality"
        return "Economic argument identified"
    if arg_type == "rights":
        if "freedom" in content:
            return "Fundamental freedom at stake"
        if "privacy" in content:
            return "Privacy rights violation"
        return "Rights-based argument"
    if arg_type == "social":
        return "Social cohesion argument"
    if arg_type == "practical":
        return "Implementation challenge"
    return f"{arg_type.capitalize()} argument identified"


def assess_strength(text: str) -> int:
    """
    Score how well-supported a piece of text is, 0-10.

    Base 5, +2 evidence/study, +1 example/case, +1 because/therefore,
    +1 important/crucial.
    """
    content = text.lower()
    strength = 5
    if contains_any(content, ("evidence", "study")):
        strength += 2
    if contains_any(content, ("example", "case")):
        strength += 1
    if contains_any(content, ("because", "therefore")):
        strength += 1
    if contains_any(content, ("important", "crucial")):
        strength += 1
    return min(10, strength)


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


class KeywordArgumentClassifier(BaseArgumentClassifier):
    """
    Rule-based classifier. Deterministic and side-effect free.

    This is the default backend and the fallback for the model-backed one.
    """

    @property
    def backend_name(self) -> str:
        return "rules"

    async def classify(
        self,
        text: str,
        source_role: str,
        types: Iterable[str] | None = None,
    ) -> list[ArgumentSignal]:
        return self.classify_sync(text, source_role, types)

    def classify_sync(
        self,
        text: str,
        source_role: str,
        types: Iterable[str] | None = None,
    ) -> list[ArgumentSignal]:
        """Synchronous entry point for callers that are not in an event loop."""
        text = text or ""
        content = text.lower()
        wanted = set(types) if types is not None else set(TAXONOMY)
        sentences = split_sentences(text)
        strength = assess_strength(text)

        signals = []
        for name, arg_type in TAXONOMY.items():
            if name not in wanted or not contains_any(content, arg_type.triggers):
                continue
            signals.append(self._build_signal(arg_type, source_role, content, sentences, strength))

        logger.debug(f"Classified {len(signals)} arguments for {source_role}: {[s.type for s in signals]}")
        return signals

    def _build_signal(
        self,
        arg_type: ArgumentType,
        source_role: str,
        content: str,
        sentences: list[str],
        strength: int,
    ) -> ArgumentSignal:
        name = arg_type.name

        title_sentence = self._find_sentence(sentences, arg_type.triggers, TITLE_CUES)
        if title_sentence:
            title = title_sentence[:TITLE_MAX_CHARS] + ("..." if len(title_sentence) > TITLE_MAX_CHARS else "")
        else:
            title = arg_type.fallback_title

        claim = self._find_sentence(sentences, arg_type.triggers, arg_type.claim_cues)

        return ArgumentSignal(
            type=name,
            source_role=source_role,
            title=title,
            claim=claim or summarize_claim(name, content),
            mechanism=(
                self._find_sentence(sentences, arg_type.triggers, MECHANISM_CUES)
                or f"The mechanism operates through the identified {name} pathway"
            ),
            evidence=(
                self._find_sentence(sentences, arg_type.triggers, EVIDENCE_CUES)
                or f"Evidence supporting the {name} argument"
            ),
            impact=(
                self._find_sentence(sentences, arg_type.triggers, IMPACT_CUES)
                or f"The {name} impact as identified in the analysis"
            ),
            weighing=(
                self._find_sentence(sentences, arg_type.triggers, WEIGHING_CUES)
                or f"This {name} consideration is weighted according to strategic priorities"
            ),
            strength=strength,
        )

    @staticmethod
    def _find_sentence(sentences: list[str], triggers: tuple[str, ...], cues: tuple[str, ...]) -> str | None:
        """First sentence that names the argument type and carries one of the cues."""
        for sentence in sentences:
            lowered = f" {sentence.lower()} "
            if contains_any(lowered, triggers) and (not cues or contains_any(lowered, cues)):
                return sentence
        return None


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

async def classify_arguments(
    text: str,
    source_role: str = "",
    types: Iterable[str] | None = None,
) -> list[ArgumentSignal]:
    """
    Convenience function to classify a text with the keyword backend.

    Example:
        signals = await classify_arguments("Rights matter because freedom is at stake.", "LO")
    """
    classifier = KeywordArgumentClassifier()
    return await classifier.classify(text, source_role, types)
