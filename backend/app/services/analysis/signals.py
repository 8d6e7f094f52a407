"""
Lexical Signal Extractor.

WHAT THIS DOES:
Reads a speech transcript and reports a handful of shallow signals:
does it signpost its structure, cite evidence, explain why things matter,
engage with the other side? Each answer becomes a fixed score.

WHY FIXED SCORES:
The adjudication rubric is binary per dimension. Saying "however" once or
ten times is the same signal: the speaker engaged. A fixed high/low score
keeps the rubric explainable to the user ("you lost points because no
evidence words were found").

SCORES:
    | flag       | present | absent |
    |------------|---------|--------|
    | structure  |    8    |   4    |
    | evidence   |    7    |   3    |
    | weighing   |    7    |   4    |
    | rebuttals  |    8    |   3    |

All checks are lower-cased substring tests, so "but" also fires inside
"contribute". That is the documented behaviour; the scores are tuned for it.

USAGE:
    signals = extract_signals("First, the evidence shows... However, they claim...")
    signals.quality_score  # 7.5
"""

import logging
import re

from app.services.analysis.models import SpeechSignals

logger = logging.getLogger(__name__)


# =============================================================================
# KEYWORD SETS
# =============================================================================

STRUCTURE_WORDS = ("first", "second", "third", "argument", "premise", "explanation", "conclusion")
EVIDENCE_WORDS = ("example", "study", "research", "data", "evidence", "statistics", "according to")
WEIGHING_WORDS = ("impact", "because", "therefore", "matters", "important", "significant", "crucial")
REBUTTAL_WORDS = ("however", "opposition", "they argue", "they claim", "but", "although", "despite")

ARGUMENT_MARKER_PATTERN = re.compile(r"\b(first|second|third|argument|premise)\b")

# (present, absent)
STRUCTURE_SCORES = (8, 4)
EVIDENCE_SCORES = (7, 3)
IMPACT_SCORES = (7, 4)
CLASH_SCORES = (8, 3)


# =============================================================================
# SUB-TYPE TAGS
# =============================================================================
# Used by the clash identifier to turn a generic slot into a specific clash.
# Mechanism tags only count when the text is actually talking about how the
# policy works.

MECHANISM_GATE = ("mechanism", "how", "implement")

MECHANISM_TAGS = (
    (("enforce",), "enforcement"),
    (("incentive",), "incentives"),
    (("market",), "market_effects"),
    (("institution",), "institutional"),
)

STAKEHOLDER_TAGS = (
    (("student",), "students"),
    (("business", "company"), "businesses"),
    (("vulnerable", "marginalized"), "vulnerable_populations"),
    (("future", "generation"), "future_generations"),
    (("community",), "communities"),
)

IMPACT_TAGS = (
    (("harm", "damage"), "harm_prevention"),
    (("benefit", "improve"), "positive_outcomes"),
    (("right", "freedom"), "rights_impacts"),
    (("economic", "cost"), "economic_impacts"),
    (("social", "society"), "social_impacts"),
)

EVIDENCE_TAGS = (
    (("study", "research"), "empirical_studies"),
    (("example", "case"), "case_studies"),
    (("data", "statistics"), "statistical_data"),
    (("expert", "authority"), "expert_opinion"),
)


def contains_any(text: str, words) -> bool:
    """True if any of `words` is a substring of the (already lower-cased) text."""
    return any(word in text for word in words)


class SignalExtractor:
    """
    Pure keyword extractor. Holds no state; calling it twice on the same
    text always returns equal results.
    """

    def extract(self, text: str) -> SpeechSignals:
        content = (text or "").lower()

        has_structure = contains_any(content, STRUCTURE_WORDS)
        has_evidence = contains_any(content, EVIDENCE_WORDS)
        has_weighing = contains_any(content, WEIGHING_WORDS)
        has_rebuttals = contains_any(content, REBUTTAL_WORDS)

        structure_score = STRUCTURE_SCORES[0] if has_structure else STRUCTURE_SCORES[1]
        evidence_score = EVIDENCE_SCORES[0] if has_evidence else EVIDENCE_SCORES[1]
        impact_score = IMPACT_SCORES[0] if has_weighing else IMPACT_SCORES[1]
        clash_score = CLASH_SCORES[0] if has_rebuttals else CLASH_SCORES[1]

        markers = ARGUMENT_MARKER_PATTERN.findall(content)

        signals = SpeechSignals(
            # Splitting on a single space never yields an empty list
            word_count=len((text or "").split(" ")),
            has_structure=has_structure,
            has_evidence=has_evidence,
            has_weighing=has_weighing,
            has_rebuttals=has_rebuttals,
            argument_count=len(markers) or 1,
            structure_score=structure_score,
            evidence_score=evidence_score,
            impact_score=impact_score,
            clash_score=clash_score,
            quality_score=min(10, (structure_score + evidence_score + impact_score + clash_score) / 4),
        )

        logger.debug(
            f"Signals: words={signals.word_count} args={signals.argument_count} "
            f"quality={signals.quality_score:.2f}"
        )
        return signals

    def extract_tags(self, text: str) -> set[str]:
        """Mechanism, stakeholder, impact and evidence sub-types mentioned in the text."""
        content = (text or "").lower()
        tags: set[str] = set()

        if contains_any(content, MECHANISM_GATE):
            tags.update(tag for words, tag in MECHANISM_TAGS if contains_any(content, words))

        for table in (STAKEHOLDER_TAGS, IMPACT_TAGS, EVIDENCE_TAGS):
            tags.update(tag for words, tag in table if contains_any(content, words))

        return tags


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_extractor = SignalExtractor()


def extract_signals(text: str) -> SpeechSignals:
    """
    Convenience function to read the lexical signals off a speech.

    Example:
        signals = extract_signals("However, the data shows the opposite.")
        signals.has_rebuttals  # True
    """
    return _extractor.extract(text)


def extract_tags(text: str) -> set[str]:
    return _extractor.extract_tags(text)
