"""
Analysis Module — Rule-based reading of debate speeches.

Every request that needs to understand what was said goes through the same
stages:

    raw text → SignalExtractor → ArgumentClassifier → ClashIdentifier → ScoringEngine

COMPONENTS:
- SignalExtractor: fixed-point structure/evidence/weighing/rebuttal scores
- KeywordArgumentClassifier: argument types and their parts (default)
- OpenAIArgumentClassifier: same contract, backed by a chat model
- ClashIdentifier: up to three Government-vs-Opposition clashes
- scoring: Matter/Manner/Method, ranking, performance metrics

USAGE:
    from app.services.analysis import extract_signals, get_classifier

    signals = extract_signals(speech)
    arguments = await get_classifier().classify(speech, "PM")

TOGGLE:
    MODEL_BACKEND=openai routes classification through the chat model.
"""

from app.config import get_settings

# Data models
from app.services.analysis.models import (
    ArgumentSignal,
    Bench,
    ClashPoint,
    SpeechSignals,
    TeamScore,
)

# Components
from app.services.analysis.signals import SignalExtractor, extract_signals, extract_tags
from app.services.analysis.protocols import BaseArgumentClassifier
from app.services.analysis.classifier import (
    STRUCTURAL_TYPES,
    TOPIC_TYPES,
    KeywordArgumentClassifier,
    classify_arguments,
)
from app.services.analysis.llm_classifier import OpenAIArgumentClassifier
from app.services.analysis.clashes import (
    ADJUDICATION_SLOTS,
    REVIEW_SLOTS,
    ClashIdentifier,
    build_bench,
    identify_clashes,
)
from app.services.analysis.scoring import (
    compute_team_scores,
    determine_clash_winner,
    make_rng,
    performance_metrics,
    rank_teams,
)


def get_classifier() -> BaseArgumentClassifier:
    """Classifier for the configured MODEL_BACKEND (keyword rules by default)."""
    settings = get_settings()
    if settings.model_backend == "openai":
        return OpenAIArgumentClassifier()
    return KeywordArgumentClassifier()


__all__ = [
    # Factory
    "get_classifier",
    # Data models
    "ArgumentSignal",
    "Bench",
    "ClashPoint",
    "SpeechSignals",
    "TeamScore",
    # Components
    "SignalExtractor",
    "extract_signals",
    "extract_tags",
    "BaseArgumentClassifier",
    "KeywordArgumentClassifier",
    "OpenAIArgumentClassifier",
    "classify_arguments",
    "TOPIC_TYPES",
    "STRUCTURAL_TYPES",
    "ClashIdentifier",
    "ADJUDICATION_SLOTS",
    "REVIEW_SLOTS",
    "build_bench",
    "identify_clashes",
    # Scoring
    "compute_team_scores",
    "determine_clash_winner",
    "make_rng",
    "performance_metrics",
    "rank_teams",
]
