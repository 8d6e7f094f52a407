"""
Adjudication Feedback Writer.

Builds the long-form feedback text on the adjudication card and the short
list of improvement bullets shown next to it. Both are driven purely by the
lexical signals of the user's speech and the final ranking.
"""

import logging

from app.models.roles import Team, role_name, team_for
from app.services.analysis.models import SpeechSignals

logger = logging.getLogger(__name__)

IMPROVEMENT_THRESHOLD = 6

FALLBACK_IMPROVEMENTS = [
    "Continue practicing advanced techniques like comparative weighing",
    "Work on strategic role fulfillment and team coordination",
    "Develop more sophisticated rebuttal techniques",
]


def strategic_assessment(role: str, signals: SpeechSignals) -> str:
    """One-line verdict on how well the speech did its role's job."""
    assessments = {
        "PM": (
            "Successfully established framework and case foundation"
            if signals.has_structure
            else "Framework establishment needs strengthening"
        ),
        "LO": (
            "Effectively challenged government framework"
            if signals.has_rebuttals
            else "Framework challenge was insufficient"
        ),
        "DPM": (
            "Good balance of defense and extension"
            if signals.has_rebuttals and signals.has_structure
            else "Need better balance between defending PM and extending case"
        ),
        "DLO": (
            "Strong systematic rebuttal approach"
            if signals.has_rebuttals
            else "Systematic rebuttal needs development"
        ),
        "MG": (
            "Successfully introduced new dimensions"
            if signals.argument_count >= 2
            else "New dimensions need to be more distinct from OG"
        ),
        "MO": (
            "Good support for OO while adding new angles"
            if signals.has_rebuttals
            else "Need stronger coordination with OO and clearer new contributions"
        ),
        "GW": (
            "Effective case summary and comparative weighing"
            if signals.has_weighing
            else "Case summary and weighing need strengthening"
        ),
        "OW": (
            "Strong final analysis and impact weighing"
            if signals.has_weighing
            else "Final analysis and weighing need improvement"
        ),
    }
    return assessments.get(role, "Strategic positioning needs development")


def write_feedback(motion: str, signals: SpeechSignals, ranking: list[Team], user_role: str) -> str:
    """Sectioned feedback text for the adjudication card."""
    user_team = team_for(user_role)
    lines = [f"ADJUDICATION FEEDBACK\n\nMotion: {motion}\n"]

    lines.append("=== TEAM RANKING ===")
    for position, team in enumerate(ranking, start=1):
        marker = " ← YOUR TEAM" if team is user_team else ""
        lines.append(f"{position}. {team.value}{marker}")

    lines.append("\n=== SPEECH ANALYSIS ===")
    lines.append(f"Word Count: {signals.word_count} words")
    lines.append(f"Arguments Identified: {signals.argument_count}")
    lines.append(f"Overall Quality Score: {signals.quality_score:.1f}/10\n")

    lines.append("=== CLASH ENGAGEMENT ANALYSIS ===")
    lines.append(
        "✓ Successfully engaged with opposing arguments"
        if signals.has_rebuttals
        else "✗ Limited engagement with opposing arguments - this is crucial in BP debate"
    )
    lines.append(
        "✓ Clear argument structure with proper signposting"
        if signals.has_structure
        else "✗ Argument structure needs improvement - use clear signposting"
    )
    lines.append(
        "✓ Provided concrete evidence and examples"
        if signals.has_evidence
        else "✗ Insufficient evidence - BP debates require concrete examples and data"
    )

    lines.append("\n=== STRATEGIC POSITIONING ===")
    lines.append(f"Your Role: {role_name(user_role)}")
    lines.append(f"Team Position: {user_team.value}")
    lines.append(f"Strategic Assessment: {strategic_assessment(user_role, signals)}")

    lines.append("\n=== AREAS FOR IMPROVEMENT ===")
    if not signals.has_structure:
        lines.append('• Improve argument signposting: "My first argument...", "Secondly...", etc.')
    if not signals.has_evidence:
        lines.append("• Include specific examples, statistics, or case studies")
    if not signals.has_rebuttals:
        lines.append('• Directly address opposing arguments with phrases like "However, they fail to consider..."')
    if not signals.has_weighing:
        lines.append("• Explain WHY your arguments matter - what are the real-world consequences?")
    if signals.argument_count < 2:
        lines.append("• Develop 2-3 distinct arguments rather than one extended point")

    lines.append("\n=== OVERALL ASSESSMENT ===")
    if signals.quality_score >= 8:
        lines.append(
            "Excellent speech with strong argumentation and clear structure. You demonstrated good "
            "understanding of BP format and engaged effectively with the motion."
        )
    elif signals.quality_score >= 6:
        lines.append(
            "Good speech with solid foundation. Focus on strengthening the weaker areas identified "
            "above to reach the next level."
        )
    else:
        lines.append(
            "Speech shows potential but needs significant work on structure, evidence, and clash "
            "engagement. Practice the fundamentals of BP argumentation."
        )

    feedback = "\n".join(lines)
    logger.info(f"Wrote {len(feedback)} character feedback for {user_role} ({user_team.value} team)")
    return feedback


def list_improvements(signals: SpeechSignals) -> list[str]:
    """Improvement bullets for every rubric axis below threshold."""
    improvements = []

    if signals.structure_score < IMPROVEMENT_THRESHOLD:
        improvements.append("Practice using clear signposting: 'First argument...', 'Second argument...', etc.")
    if signals.evidence_score < IMPROVEMENT_THRESHOLD:
        improvements.append("Include specific examples, statistics, or case studies to support your claims")
    if signals.impact_score < IMPROVEMENT_THRESHOLD:
        improvements.append("Explain WHY your arguments matter - what are the real-world consequences?")
    if signals.clash_score < IMPROVEMENT_THRESHOLD:
        improvements.append("Directly address opposing arguments with phrases like 'However, they fail to consider...'")
    if signals.argument_count < 2:
        improvements.append("Aim for 2-3 distinct arguments rather than one long point")

    if not improvements:
        logger.info("Every rubric axis at or above threshold; suggesting advanced practice instead")
        return list(FALLBACK_IMPROVEMENTS)
    return improvements
