"""
Engaged Speech Generator.

WHAT THIS DOES:
Writes an AI speech that answers the round so far instead of a standalone
case. Before writing, it reads the previous speeches for:
- direct references: strong claims other speakers made ("will", "must", ...)
- rebuttals: arguments from the opposing bench worth countering
- extensions: arguments from the same bench worth building on
- clash points: where the user's arguments and another speaker's collide

It also writes a plain-text debate state summary, and after the speech is
written it scores how much engagement the speech actually contains.

HOW IT DIFFERS FROM THE PRACTICE SPEECH GENERATOR:
The practice generator classifies the user's speech into typed arguments.
This one works on the lexical surface of every previous speech (argument
sentences like "my first argument ..." and topic words), so it can quote
speakers back to the room.

USAGE:
    generator = EngagedSpeechGenerator()
    response = generator.generate(motion, "DLO", user_speech, previous_speeches)
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field

from app.models.roles import (
    Role,
    is_government,
    is_opposition,
    opposing_benches,
    parse_role,
    role_name,
    same_bench,
)
from app.models.schemas import EngagedSpeechResponse, EngagementAnalysis, EngagementQuality, Speech

logger = logging.getLogger(__name__)

MAX_KEY_ARGUMENTS = 5
MAX_KEY_CLAIMS = 3
MAX_NEW_CLASHES = 3
MIN_CLAIM_LENGTH = 20

ARGUMENT_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"first argument[^.]*\.?",
        r"second argument[^.]*\.?",
        r"third argument[^.]*\.?",
        r"my argument is[^.]*\.?",
        r"i argue that[^.]*\.?",
        r"the reason is[^.]*\.?",
    )
]

# (topic words, label) in reporting order
TOPIC_ARGUMENTS = [
    (("economic",), "economic argument"),
    (("rights", "freedom"), "rights argument"),
    (("social", "community"), "social argument"),
    (("practical", "implementation"), "practical argument"),
    (("environment", "climate"), "environmental argument"),
]

CLAIM_WORDS = ("will", "must", "should", "because", "therefore")

# Topics on which two arguments are considered to collide
CLASH_TOPICS = [
    ("economic",),
    ("rights", "freedom"),
    ("practical", "implementation"),
]

REFERENCE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"the prime minister",
        r"the leader of opposition",
        r"the deputy",
        r"the member of",
        r"they argued",
        r"they claimed",
    )
]

REBUTTAL_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (r"\bhowever\b", r"\bbut\b", r"\bfails because\b", r"\bignores\b", r"\boverlooks\b")
]

SENTENCE_SPLIT = re.compile(r"[.!?]+")


@dataclass
class EngagementReport:
    """Engagement opportunities found in the previous speeches."""

    direct_references: list[str] = field(default_factory=list)
    rebuttals: list[str] = field(default_factory=list)
    extensions: list[str] = field(default_factory=list)
    clash_points: list[str] = field(default_factory=list)

    def to_schema(self) -> EngagementAnalysis:
        return EngagementAnalysis(
            direct_references=self.direct_references,
            rebuttals=self.rebuttals,
            extensions=self.extensions,
            clash_points=self.clash_points,
        )


# =============================================================================
# LEXICAL EXTRACTION
# =============================================================================

def extract_key_arguments(content: str) -> list[str]:
    """Explicit argument sentences, then topic labels, at most five."""
    arguments: list[str] = []
    for pattern in ARGUMENT_PATTERNS:
        arguments.extend(match.strip() for match in pattern.findall(content))

    lowered = content.lower()
    for words, label in TOPIC_ARGUMENTS:
        if any(word in lowered for word in words):
            arguments.append(label)

    return arguments[:MAX_KEY_ARGUMENTS]


def extract_key_claims(content: str) -> list[str]:
    """Sentences longer than 20 characters that make a strong claim."""
    claims = []
    for sentence in SENTENCE_SPLIT.split(content):
        lowered = sentence.lower().strip()
        if len(lowered) > MIN_CLAIM_LENGTH and any(word in lowered for word in CLAIM_WORDS):
            claims.append(sentence.strip())
    return claims[:MAX_KEY_CLAIMS]


def arguments_clash(first: str, second: str) -> bool:
    first, second = first.lower(), second.lower()
    return any(
        any(word in first for word in words) and any(word in second for word in words)
        for words in CLASH_TOPICS
    )


# =============================================================================
# ANALYSIS
# =============================================================================

def analyze_previous_speeches(
    previous_speeches: list[Speech],
    user_speech: str,
    current_role: str,
) -> EngagementReport:
    """Collect references, rebuttals, extensions and clash points from other AI speakers."""
    report = EngagementReport()
    user_arguments = extract_key_arguments(user_speech)

    for speech in previous_speeches:
        if not speech.is_ai or speech.role == current_role:
            continue

        speech_arguments = extract_key_arguments(speech.content)

        for claim in extract_key_claims(speech.content):
            report.direct_references.append(f'{speech.role} claimed: "{claim}"')

        if opposing_benches(speech.role, current_role):
            report.rebuttals.extend(
                f"Counter {speech.role}'s argument about {arg}" for arg in speech_arguments
            )

        if same_bench(speech.role, current_role):
            report.extensions.extend(
                f"Extend {speech.role}'s point about {arg}" for arg in speech_arguments
            )

        for user_arg in user_arguments:
            for speech_arg in speech_arguments:
                if arguments_clash(user_arg, speech_arg):
                    report.clash_points.append(
                        f"Clash between user's {user_arg} and {speech.role}'s {speech_arg}"
                    )

    logger.info(
        f"Engagement analysis: references={len(report.direct_references)}, "
        f"rebuttals={len(report.rebuttals)}, extensions={len(report.extensions)}, "
        f"clashes={len(report.clash_points)}"
    )
    return report


def summarize_debate_state(
    motion: str,
    previous_speeches: list[Speech],
    user_speech: str,
    current_role: str,
) -> str:
    """Plain-text summary of both benches and the user's contribution."""
    sections = [f"DEBATE STATE SUMMARY:\n\nMotion: {motion}\n\n"]

    for heading, belongs, fallback in (
        ("GOVERNMENT POSITION", is_government, "Core government arguments"),
        ("OPPOSITION POSITION", is_opposition, "Core opposition arguments"),
    ):
        bench = [s for s in previous_speeches if belongs(s.role)]
        if not bench:
            continue
        sections.append(f"{heading}:\n")
        for speech in bench:
            points = ", ".join(extract_key_arguments(speech.content)[:2])
            sections.append(f"- {speech.role}: {points or fallback}\n")
        sections.append("\n")

    user_bench = "GOVERNMENT" if is_government(current_role) else "OPPOSITION"
    user_points = ", ".join(extract_key_arguments(user_speech)[:2])
    sections.append(f"YOUR CONTRIBUTION ({user_bench}):\n")
    sections.append(f"- {role_name(current_role)}: {user_points or 'Your key arguments'}\n\n")
    sections.append(f"CURRENT SPEAKER: {role_name(current_role)}\n")

    return "".join(sections)


# =============================================================================
# ENGAGEMENT QUALITY
# =============================================================================

def count_matches(patterns: list[re.Pattern], text: str) -> int:
    return sum(len(pattern.findall(text)) for pattern in patterns)


def clash_engagement_score(report: EngagementReport) -> float:
    return min(10, len(report.clash_points) * 2 + 4)


def assess_engagement_quality(speech: str, report: EngagementReport) -> EngagementQuality:
    references = count_matches(REFERENCE_PATTERNS, speech)
    rebuttals = count_matches(REBUTTAL_PATTERNS, speech)
    clash = clash_engagement_score(report)
    return EngagementQuality(
        direct_references=references,
        rebuttals_included=rebuttals,
        clash_engagement=clash,
        overall_score=min(10, (references + rebuttals + clash) / 3),
    )


def identify_new_clash_points(speech: str, user_speech: str) -> list[str]:
    user_arguments = extract_key_arguments(user_speech)
    clashes = [
        f"New clash: {speech_arg} vs {user_arg}"
        for speech_arg in extract_key_arguments(speech)
        for user_arg in user_arguments
        if arguments_clash(speech_arg, user_arg)
    ]
    return clashes[:MAX_NEW_CLASHES]


# =============================================================================
# ROLE SPEECHES
# =============================================================================

def _nth(items: list[str], index: int, fallback: str) -> str:
    return items[index] if len(items) > index else fallback


def direct_rebuttals(references: list[str]) -> str:
    if not references:
        return "The Prime Minister's arguments lack the foundation necessary to support this motion."
    return "\n\n".join(
        f"{ref} - but this analysis is fundamentally flawed because it rests on assumptions that do not hold."
        for ref in references[:2]
    )


def systematic_rebuttals(user_arguments: list[str]) -> str:
    rebuttals = "".join(
        f"\n**Rebuttal {index}: {arg}**\n"
        "The PM's argument fails because it ignores crucial counterevidence and relies on unsubstantiated assumptions.\n"
        for index, arg in enumerate(user_arguments, start=1)
    )
    return rebuttals or "The PM's arguments lack empirical support and ignore crucial implementation challenges."


def direct_opposition_response(references: list[str]) -> str:
    if not references:
        return "The opposition offered no specific challenge that our core mechanism does not already answer."
    return "\n\n".join(
        f"Regarding {ref}: This challenge misunderstands our core mechanism." for ref in references[:2]
    )


def lo_engaged(motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    first_claim = _nth(extract_key_claims(user_speech), 0, "theoretical benefits without concrete evidence")
    return f"""Thank you, Chair. As Leader of the Opposition, I rise to fundamentally challenge the motion: "{motion}"

**DIRECT RESPONSE TO PRIME MINISTER**

The Prime Minister just argued {_nth(args, 0, "for this motion")}, but I'm afraid their analysis contains critical flaws that undermine their entire case.

{direct_rebuttals(report.direct_references)}

**SYSTEMATIC CHALLENGE TO GOVERNMENT FRAMEWORK**

Let me address the PM's core arguments directly:

{systematic_rebuttals(args)}

**OPPOSITION CASE: WHY THIS MOTION FAILS**

Beyond merely responding to the government, I present three fundamental reasons why this motion is not just wrong, but actively harmful:

**First Opposition Argument: Enforcement Impossibility**

This directly contradicts the PM's claim that {_nth(args, 0, "their policy will work")}. The mechanism actually operates in reverse: enforcement gaps reward exactly the behaviour the policy targets.

**Second Opposition Argument: Stakeholder Harm Analysis**

While the PM focused on {_nth(args, 1, "theoretical benefits")}, they ignored the practical reality that the costs fall on those least able to bear them.

**Third Opposition Argument: Superior Alternatives**

The PM's entire framework fails because targeted alternatives achieve the same goals with fewer harms.

**WEIGHING AND CONCLUSION**

The Prime Minister asks us to accept their vision based on {first_claim}, but we have demonstrated concrete, measurable harms that will result.

The fundamental clash here is clear: they believe policy intervention will solve complex social problems, while we have shown such interventions create more problems than they solve.

For these reasons, we firmly oppose this motion.

Thank you."""


def dpm_engaged(motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    return f"""Thank you, Chair. As Deputy Prime Minister, I rise to reinforce our framework while directly addressing the Leader of Opposition's challenges.

**DEFENDING THE PRIME MINISTER'S CASE**

The Leader of Opposition attempted to undermine the PM's arguments about {_nth(args, 0, "our core case")}, but their challenges fail for several critical reasons:

The opposition's challenges ignore the practical realities of implementation and the documented success of similar policies.

**SYSTEMATIC RESPONSE TO OPPOSITION CHALLENGES**

Let me address each of the LO's specific attacks:

{direct_opposition_response(report.direct_references)}

**EXTENDING THE GOVERNMENT CASE**

Beyond defending our position, I present additional substantive material that strengthens our case:

**Government Extension 1: International Competitiveness**

This builds on the PM's argument about {_nth(args, 0, "our first point")} by demonstrating that early adopters set the standards others follow.

**Government Extension 2: Long-term Sustainability**

While the PM established {_nth(args, 1, "our framework")}, I want to extend this analysis to show the benefits compound over time.

**STRATEGIC ANALYSIS OF OPPOSITION APPROACH**

The Opposition's strategy is clear: they want to focus on theoretical problems while ignoring the concrete benefits and safeguards we've outlined.

This approach fails because it fundamentally misunderstands the balance between individual concerns and collective welfare.

**CONCLUSION**

The Opposition has failed to address our core arguments while we have demonstrated both the necessity and feasibility of this motion.

Our case stands stronger than ever.

Thank you."""


def dlo_engaged(motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    return f"""Thank you, Chair. As Deputy Leader of Opposition, I will systematically dismantle the government's responses while extending our opposition case.

**GOVERNMENT RESPONSES FAIL**

The Deputy Prime Minister claimed to address our concerns about {_nth(args, 0, "their policy")}, but their responses are fundamentally inadequate:

Their framework defense ignores practical implementation realities and fails to address our core concerns.

**SYSTEMATIC REBUTTAL OF GOVERNMENT CASE**

Let me address the government's arguments systematically:

Each government argument fails systematic analysis and relies on unsubstantiated assumptions.

**EXTENDING THE OPPOSITION CASE**

Building upon the Leader of Opposition's foundation, I present additional analysis:

**Opposition Extension 1: Democratic Legitimacy Crisis**

This deepens our analysis of why the PM's argument about {_nth(args, 0, "their first point")} fails: affected communities were never part of the design.

**Opposition Extension 2: Intergenerational Justice**

Beyond the LO's critique of {_nth(args, 1, "government framework")}, I demonstrate that future generations carry the costs.

**CRYSTALLIZING THE CLASH**

The fundamental clash in this debate is now clear: between the government's technocratic faith and our evidence-based analysis of implementation realities.

The government wants us to believe technical solutions can solve complex social problems, but this ignores the political and social context that determines policy success.

**CONCLUSION**

The government's case crumbles under systematic analysis. They have failed to address our core concerns while we have demonstrated why this motion is fundamentally flawed.

Thank you."""


def mg_engaged(motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    return f"""Thank you, Chair. As Member of Government, I bring a fresh perspective while supporting the Opening Government's framework.

**SUPPORTING OPENING GOVERNMENT**

The Opening Government established a solid foundation with their arguments about {_nth(args, 0, "core policy benefits")} and {_nth(args, 1, "implementation strategy")}.

I want to reinforce their analysis by providing additional evidence and extending their impact analysis.

**RESPONDING TO OPENING OPPOSITION**

The Opening Opposition raised concerns, but they fail to account for crucial dimensions that I will now explore:

The opposition's concerns actually highlight additional problems they hadn't considered

**NEW GOVERNMENT DIMENSION: Intergenerational Justice and Future Sustainability**

This angle is crucial because the Opening Government couldn't fully explore the long-term consequences for future generations in their time.

**CG Argument 1: Future-focused analysis 1**

This extends beyond the PM's focus on {_nth(args, 0, "immediate benefits")} to demonstrate that the gains persist well beyond this parliament.

**CG Argument 2: Future-focused analysis 2**

While the DPM addressed {_nth(args, 1, "opposition concerns")}, I want to show how the policy shapes the institutions our successors inherit.

**CLOSING GOVERNMENT STRATEGY**

As Closing Government, we occupy a unique position. We can see both the Opening Government's framework and the Opposition's concerns, allowing us to present a more complete analysis.

The Opposition bench has focused on immediate implementation concerns, but they've missed the broader strategic implications.

**CONCLUSION**

Together with the Opening Government, we present a comprehensive case that addresses both immediate concerns and long-term implications.

Thank you."""


def mo_engaged(motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    return f"""Thank you, Chair. As Member of Opposition, I stand with the Opening Opposition while bringing crucial new analysis.

**SUPPORTING OPENING OPPOSITION**

The Opening Opposition correctly identified the fundamental flaws in this motion. The LO's argument about {_nth(args, 0, "policy failure")} and the DLO's extension regarding {_nth(args, 1, "implementation problems")} form a solid foundation.

I reinforce their analysis by strengthening their core arguments with additional analysis.

**RESPONDING TO CLOSING GOVERNMENT**

The Member of Government attempted to introduce new dimensions, but their new dimensions actually reinforce our concerns.

Their argument about long-term benefits actually strengthens our case because those benefits depend on the very implementation we have shown will fail.

**NEW OPPOSITION DIMENSION: Cultural and Community Impact**

This critical angle hasn't been fully explored: the disruption to existing social structures.

**CO Argument 1: Community impact analysis 1**

This builds on the OO's analysis of {_nth(args, 0, "government failure")} by demonstrating that communities absorb the cost of that failure.

**CO Argument 2: Community impact analysis 2**

Beyond the Opening Opposition's critique of {_nth(args, 1, "policy framework")}, I show how the damage to local trust outlasts the policy itself.

**CLOSING OPPOSITION STRATEGY**

As Closing Opposition, we must demonstrate why even the government's extended case fails to justify this motion.

The government bench has tried to expand their case with new dimensions, but they cannot escape the fundamental problems we've identified.

**CONCLUSION**

The government bench, despite their attempts to shore up their case, has failed to address the core issues we've raised.

Thank you."""


def gw_engaged(motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    return f"""Thank you, Chair. As Government Whip, I have the privilege of summarizing our case and providing final analysis.

**GOVERNMENT CASE SUMMARY**

Throughout this debate, the government bench has presented a comprehensive case:

The Prime Minister established {_nth(args, 0, "our core framework")} and demonstrated {_nth(args, 1, "policy necessity")}.

The Deputy Prime Minister reinforced this by defending our framework and extending our analysis while addressing opposition concerns.

The Member of Government extended our case with crucial new dimensions of analysis, showing dimensions the Opening Government couldn't fully explore.

**FINAL RESPONSE TO OPPOSITION**

Let me address the opposition's arguments systematically:

Their concerns are either manageable through proper implementation or outweighed by clear benefits

**COMPARATIVE WEIGHING**

When we weigh the arguments presented by both sides:

The government has provided concrete mechanisms while the opposition relies on speculative harms

**FINAL GOVERNMENT ARGUMENTS**

Even accepting opposition concerns, the benefits clearly justify this policy

**CONCLUSION**

Chair, this debate has demonstrated that {motion.lower()} is not just beneficial, but essential.

The opposition's concerns are either manageable or outweighed by the significant benefits we've outlined.

The choice is clear. We must support this motion.

Thank you."""


def ow_engaged(motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    return f"""Thank you, Chair. As Opposition Whip, I will summarize our case and demonstrate why this motion must be rejected.

**OPPOSITION CASE SUMMARY**

The opposition bench has presented a devastating critique:

The Leader of Opposition showed {_nth(args, 0, "fundamental policy flaws")} and established {_nth(args, 1, "our alternative framework")}.

The Deputy Leader systematically dismantled every government response.

The Member of Opposition brought crucial new analysis showing additional dimensions of harm.

**GOVERNMENT CASE FAILURES**

Despite their attempts, the government has failed to address our core concerns:

They have not provided adequate evidence, their mechanisms are unsound, and their responses are superficial

**FINAL CLASH ANALYSIS**

The fundamental clash in this debate is between government faith in technocratic solutions and our evidence-based analysis.

**IMPACT WEIGHING**

When we consider the real-world impacts:

The harms we've identified are concrete and immediate, while government benefits are speculative and distant

**FINAL OPPOSITION ARGUMENTS**

The government has failed to meet their burden of proof while we have demonstrated measurable harms

**CONCLUSION**

Chair, this motion is fundamentally flawed. The government has failed to meet their burden of proof while we have demonstrated significant harms.

We urge you to reject this motion.

Thank you."""


def generic_engaged(role: str, motion: str, user_speech: str, report: EngagementReport) -> str:
    args = extract_key_arguments(user_speech)[:2]
    engagement = (
        "\n\n".join(report.direct_references[:2])
        or "Previous speakers have raised important points that I will address"
    )
    contribution = " and ".join(args) or "a fresh perspective"
    conclusion = (
        "For these reasons, we support this motion"
        if is_government(role)
        else "For these reasons, we oppose this motion"
    )
    return f"""Thank you, Chair. As {role_name(role)}, I will engage directly with the arguments presented.

**DIRECT ENGAGEMENT WITH PREVIOUS SPEAKERS**

{engagement}

**MY CONTRIBUTION TO THE DEBATE**

As {role_name(role)}, I contribute {contribution} to this debate

**CONCLUSION**

{conclusion}

Thank you."""


EngagedWriter = Callable[[str, str, EngagementReport], str]

# PM opens the round, so there is nothing to engage with yet: it uses the generic writer
ENGAGED_SPEECHES: dict[Role, EngagedWriter] = {
    Role.LO: lo_engaged,
    Role.DPM: dpm_engaged,
    Role.DLO: dlo_engaged,
    Role.MG: mg_engaged,
    Role.MO: mo_engaged,
    Role.GW: gw_engaged,
    Role.OW: ow_engaged,
}


class EngagedSpeechGenerator:
    """
    Analyse the round, write an engaged speech, score its engagement.
    """

    def generate(
        self,
        motion: str,
        role: str,
        user_speech: str,
        previous_speeches: list[Speech],
        structured_case: dict | None = None,
    ) -> EngagedSpeechResponse:
        logger.info(
            f"Generating engaged speech for {role}: previous_speeches={len(previous_speeches)}, "
            f"user_speech_length={len(user_speech)}, structured_case={structured_case is not None}"
        )

        report = analyze_previous_speeches(previous_speeches, user_speech, role)
        debate_state = summarize_debate_state(motion, previous_speeches, user_speech, role)

        parsed = parse_role(role)
        writer = ENGAGED_SPEECHES.get(parsed) if parsed else None
        if writer is None:
            speech = generic_engaged(role, motion, user_speech, report)
        else:
            speech = writer(motion, user_speech, report)

        quality = assess_engagement_quality(speech, report)
        logger.info(f"Engaged speech for {role}: overall engagement {quality.overall_score:.2f}")

        return EngagedSpeechResponse(
            speech=speech,
            engagement_analysis=report.to_schema(),
            debate_state=debate_state,
            engagement_quality=quality,
            clash_points=identify_new_clash_points(speech, user_speech),
        )


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def generate_engaged_speech(
    motion: str,
    role: str,
    user_speech: str,
    previous_speeches: list[Speech],
    structured_case: dict | None = None,
) -> EngagedSpeechResponse:
    """
    Convenience function to write an engaged speech.

    Example:
        response = generate_engaged_speech(motion, "DLO", user_speech, speeches)
    """
    return EngagedSpeechGenerator().generate(motion, role, user_speech, previous_speeches, structured_case)
