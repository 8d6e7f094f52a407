"""
Scoring Engine.

WHAT THIS DOES:
Turns the analysis of the user's speech and the adjudicated clashes into
Matter / Manner / Method scores for all four teams, a ranking, and six
performance-metric axes for the user.

THE RUBRIC:
    Matter  = sum of the weights of the clashes a team won
    Manner  = user team: speech quality score
              other teams: uniform draw from [5, 8)
    Method  = user team: mean(structure score, clash score)
              other teams: uniform draw from [5, 8)
    Total   = Matter + Manner + Method  (uncapped)

Only the user actually spoke, so the other three teams' delivery cannot be
measured. Their Manner/Method are noise within a plausible band, drawn from
an injected random.Random so a seeded request is fully reproducible.

RANKING:
Sorted by total, highest first. Python's sort is stable, so equal totals
keep OG, OO, CG, CO order.

USAGE:
    rng = make_rng(seed=42)
    scores = compute_team_scores(clashes, signals, "LO", rng)
    ranking = rank_teams(scores)
"""

import logging
import random

from app.models.roles import OPPOSING_TEAMS, TEAM_ORDER, Team, team_for
from app.services.analysis.models import SpeechSignals, TeamScore

logger = logging.getLogger(__name__)

OTHER_TEAM_BASE = 5.0
OTHER_TEAM_SPREAD = 3.0


def make_rng(seed: int | None = None) -> random.Random:
    """A fresh generator for one request. None means unseeded."""
    return random.Random(seed)


def determine_clash_winner(title: str, signals: SpeechSignals, user_role: str) -> Team:
    """
    Decide which team takes a clash at the end of the round.

    A speech with both evidence and structure wins every clash for the user's
    team; a weak speech (quality < 5) loses every clash to the team across
    the floor. In between, clashes are split deterministically by title.
    """
    user_team = team_for(user_role)
    opposing = OPPOSING_TEAMS[user_team]

    if signals.has_evidence and signals.has_structure:
        return user_team
    if signals.quality_score < 5:
        return opposing
    if len(title) % 3 == 1:
        return opposing
    return user_team


def compute_team_scores(
    clash_wins: list[tuple[Team, int]],
    signals: SpeechSignals,
    user_role: str,
    rng: random.Random,
) -> dict[Team, TeamScore]:
    """
    Score all four teams.

    Args:
        clash_wins: (winning team, clash weight) for each adjudicated clash
        signals: Lexical signals of the user's speech
        user_role: The user's role code (unknown codes count as OG)
        rng: Source of the other teams' Manner/Method noise

    Returns:
        TeamScore per team, in OG, OO, CG, CO order
    """
    user_team = team_for(user_role)
    scores = {team: TeamScore() for team in TEAM_ORDER}

    for winner, weight in clash_wins:
        scores[winner].matter += weight

    for team, score in scores.items():
        if team is user_team:
            score.manner = min(10, signals.quality_score)
            score.method = min(10, (signals.structure_score + signals.clash_score) / 2)
        else:
            score.manner = OTHER_TEAM_BASE + rng.random() * OTHER_TEAM_SPREAD
            score.method = OTHER_TEAM_BASE + rng.random() * OTHER_TEAM_SPREAD

    logger.info(
        "Team totals: " + ", ".join(f"{team.value}={score.total:.2f}" for team, score in scores.items())
    )
    return scores


def rank_teams(scores: dict[Team, TeamScore]) -> list[Team]:
    """Teams by total, highest first; ties keep insertion order."""
    return [team for team, _ in sorted(scores.items(), key=lambda item: item[1].total, reverse=True)]


def performance_metrics(signals: SpeechSignals) -> dict[str, float]:
    """The six performance axes shown on the user's score card."""
    return {
        "average_argument_quality": min(10, signals.quality_score),
        "clash_engagement": min(10, signals.clash_score),
        "structural_coherence": min(10, signals.structure_score),
        "evidence_usage": min(10, signals.evidence_score),
        "rhetorical_effectiveness": min(10, (signals.impact_score + signals.quality_score) / 2),
        "strategic_awareness": min(10, (signals.clash_score + signals.structure_score) / 2),
    }
