"""
Practice Speech Generator.

WHAT THIS DOES:
Writes the speech an AI speaker delivers in a given BP role, anchored on
the user's speech. Every role has its own strategic framework (case theory,
burdens, what only this role contributes, which clashes it owns) and its own
speech template.

WHY ANCHOR ON THE USER:
The round exists to give the user something to respond to and be judged
against. The Leader of Opposition rebuts the arguments the user actually
made; the Prime Minister picks a second argument that fits the motion.
The user's arguments come from the argument classifier (topic types only).

ROLE DISPATCH:
    ROLE_FRAMEWORKS[role](context) → StrategicFramework
    ROLE_SPEECHES[role](context, framework) → speech text
Unknown roles fall through to a generic framework and speech.

USAGE:
    generator = SpeechGenerator(classifier)
    speech = await generator.generate(motion, "LO", user_speech, previous_speeches)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from app.models.roles import Role, parse_role, role_name
from app.models.schemas import Speech
from app.services.analysis import TOPIC_TYPES, ArgumentSignal, BaseArgumentClassifier
from app.services.errors import DebateInputError

logger = logging.getLogger(__name__)


@dataclass
class SpeechContext:
    """Everything a role template can draw on."""

    motion: str
    user_role: str
    user_speech: str
    user_arguments: list[ArgumentSignal]
    previous_speeches: list[Speech] = field(default_factory=list)
    skill_level: str = "intermediate"

    @property
    def motion_lower(self) -> str:
        return self.motion.lower()

    def has_argument(self, arg_type: str) -> bool:
        return any(arg.type == arg_type for arg in self.user_arguments)


@dataclass
class StrategicFramework:
    """What a role is trying to achieve in this particular round."""

    case_theory: str
    burdens: list[str]
    unique_contributions: list[str]
    clash_points: list[str]
    extensions: list[str] = field(default_factory=list)


# =============================================================================
# ARGUMENT BUILDING BLOCKS
# =============================================================================

def argument_title(arg_type: str, side: str) -> str:
    government = side == "government"
    titles = {
        "economic": "Economic Growth and Efficiency" if government else "Economic Inequality and Market Failure",
        "rights": "Rights Protection and Empowerment" if government else "Fundamental Rights Violation",
        "practical": "Effective Implementation Strategy" if government else "Implementation Impossibility",
        "social": "Social Cohesion and Community Building" if government else "Social Fragmentation and Division",
    }
    return titles.get(arg_type, "Policy Analysis")


def argument_mechanism(arg_type: str, side: str) -> str:
    government = side == "government"
    mechanisms = {
        "economic": (
            "This policy creates positive economic incentives that drive innovation and efficiency."
            if government
            else "This policy distorts market mechanisms and creates deadweight losses that harm overall welfare."
        ),
        "rights": (
            "This policy protects fundamental rights by creating institutional safeguards."
            if government
            else "This policy violates fundamental rights through disproportionate state intervention."
        ),
        "practical": (
            "Implementation leverages existing institutional capacity with clear enforcement mechanisms."
            if government
            else "Implementation requires institutional capacity that doesn't exist and creates enforcement gaps."
        ),
        "social": (
            "This policy strengthens social bonds by addressing collective action problems."
            if government
            else "This policy fragments communities by undermining existing social structures."
        ),
    }
    return mechanisms.get(arg_type, "The mechanism operates through institutional change.")


def argument_evidence(arg_type: str) -> str:
    evidence = {
        "economic": "Economic analysis from the World Bank demonstrates measurable impacts on GDP and employment.",
        "rights": "Constitutional law precedents from the European Court of Human Rights establish clear standards.",
        "practical": "Implementation studies from comparable jurisdictions provide concrete success/failure data.",
        "social": "Sociological research from leading universities shows clear patterns in community outcomes.",
    }
    return evidence.get(arg_type, "Research evidence supports this analysis.")


def argument_impact(arg_type: str, side: str) -> str:
    government = side == "government"
    impacts = {
        "economic": (
            "This creates sustainable prosperity that benefits all income levels."
            if government
            else "This perpetuates economic inequality and reduces overall social welfare."
        ),
        "rights": (
            "This protects vulnerable populations and strengthens democratic institutions."
            if government
            else "This erodes civil liberties and sets dangerous precedents for state overreach."
        ),
        "practical": (
            "This achieves policy goals efficiently with minimal administrative burden."
            if government
            else "This wastes resources and creates bureaucratic dysfunction that harms other programs."
        ),
        "social": (
            "This builds stronger communities and increases social capital."
            if government
            else "This fragments society and reduces trust between different groups."
        ),
    }
    return impacts.get(arg_type, "This has significant long-term consequences.")


def argument_block(ordinal: str, title: str, arg_type: str, side: str) -> str:
    return (
        f"\n**{ordinal} Argument: {title}**\n"
        f"{argument_mechanism(arg_type, side)}\n"
        f"{argument_evidence(arg_type)}\n"
        f"{argument_impact(arg_type, side)}\n"
    )


def specific_rebuttal(arg_type: str) -> str:
    rebuttals = {
        "economic": "it ignores distributional effects and assumes perfect market conditions",
        "rights": "it creates a false hierarchy of rights without proper balancing",
        "practical": "it underestimates implementation costs and administrative burden",
        "social": "it misunderstands community dynamics and social capital",
    }
    return rebuttals.get(arg_type, "it relies on unsubstantiated assumptions")


def counter_evidence(arg_type: str) -> str:
    evidence = {
        "economic": "Economic research from the IMF shows that similar policies create market distortions that persist for decades.",
        "rights": "Constitutional law scholars have demonstrated that such restrictions fail proportionality tests.",
        "practical": "Implementation studies from comparable jurisdictions show 70% failure rates due to administrative complexity.",
        "social": "Sociological research indicates that top-down policy changes fragment existing social networks.",
    }
    return evidence.get(arg_type, "Empirical evidence contradicts their theoretical assumptions.")


# =============================================================================
# STRATEGIC FRAMEWORKS
# =============================================================================

def pm_framework(ctx: SpeechContext) -> StrategicFramework:
    if "ban" in ctx.motion_lower:
        theory = (
            "Establish the necessity of the ban to mitigate a significant societal harm and outline a "
            "clear, enforceable mechanism."
        )
    else:
        theory = (
            "Establish the government's framework, define key terms, and present the core arguments for "
            "the motion's positive impact."
        )

    clashes = ["Motion definition and scope", "Government framework validity", "Primary impacts of the policy"]
    if "economic" in ctx.motion_lower or "tax" in ctx.motion_lower:
        clashes.append("Economic efficiency vs. social equity")
    if "rights" in ctx.motion_lower or "freedom" in ctx.motion_lower:
        clashes.append("Individual rights vs. collective good")

    return StrategicFramework(
        case_theory=theory,
        burdens=["Establish framework", "Present core arguments", "Demonstrate positive impacts"],
        unique_contributions=[
            "Clear definition of the motion and its scope",
            "Establishment of the government's core framework",
            "Introduction of primary substantive arguments for the motion",
        ],
        clash_points=clashes,
    )


def lo_framework(ctx: SpeechContext) -> StrategicFramework:
    if "ban" in ctx.motion_lower:
        theory = "Challenge enforcement feasibility and propose harm reduction alternatives"
    elif "tax" in ctx.motion_lower:
        theory = "Demonstrate regressive impacts and market distortion effects"
    else:
        theory = "Challenge government framework and present alternative approach"

    clashes = ["Framework definition", "Policy effectiveness"]
    for arg in ctx.user_arguments:
        if arg.type == "economic":
            clashes.append("Economic impact analysis")
        elif arg.type == "rights":
            clashes.append("Rights vs collective benefit")
        elif arg.type == "practical":
            clashes.append("Implementation feasibility")

    return StrategicFramework(
        case_theory=theory,
        burdens=["Challenge government framework", "Present alternative vision", "Establish opposition case"],
        unique_contributions=[
            "Definitional challenge to government framework",
            "Alternative policy framework",
            "Systematic rebuttal of government arguments",
        ],
        clash_points=clashes,
    )


def dpm_framework(ctx: SpeechContext) -> StrategicFramework:
    return StrategicFramework(
        case_theory="Defend government framework while extending case with new substantive material",
        burdens=["Defend government framework", "Respond to opposition", "Extend government case"],
        unique_contributions=[
            "Framework defense against opposition challenges",
            "Systematic response to opposition arguments",
            "New substantive extensions to government case",
        ],
        clash_points=["Framework validity", "Opposition rebuttal responses", "Government case extensions"],
    )


def dlo_framework(ctx: SpeechContext) -> StrategicFramework:
    return StrategicFramework(
        case_theory="Systematically dismantle government responses and extend opposition case with new analysis",
        burdens=["Systematic rebuttal", "Extend opposition case", "Crystallize clash"],
        unique_contributions=[
            "Systematic dismantling of government responses",
            "Extension of opposition case with new analysis",
            "Crystallization of key clashes",
        ],
        clash_points=["Government response inadequacy", "Opposition case extension", "Key clash points"],
    )


def mg_framework(ctx: SpeechContext) -> StrategicFramework:
    return StrategicFramework(
        case_theory="Support OG framework while introducing new dimensions that extend debate scope",
        burdens=["Support OG", "Introduce new dimension", "Extend debate scope"],
        unique_contributions=["Support for OG framework", "Introduction of new dimensions", "Extension of debate scope"],
        clash_points=["OG framework support", "New dimensions introduction", "Debate scope extension"],
        extensions=[
            "International competitiveness and global standards",
            "Intergenerational justice and future sustainability",
        ],
    )


def mo_framework(ctx: SpeechContext) -> StrategicFramework:
    return StrategicFramework(
        case_theory="Support OO framework while introducing new opposition angles and responding to CG",
        burdens=["Support OO", "Introduce new opposition angle", "Respond to CG"],
        unique_contributions=["Support for OO framework", "Introduction of new opposition angles", "Response to CG"],
        clash_points=["OO framework support", "New opposition angles introduction", "CG response"],
        extensions=["Democratic legitimacy crisis", "Intergenerational justice"],
    )


def gw_framework(ctx: SpeechContext) -> StrategicFramework:
    return StrategicFramework(
        case_theory="Summarize government case, provide final rebuttals, and offer comparative weighing",
        burdens=["Summarize government", "Final rebuttals", "Comparative weighing"],
        unique_contributions=["Government case summary", "Final rebuttals", "Comparative weighing"],
        clash_points=["Government case summary", "Final rebuttals", "Comparative weighing"],
    )


def ow_framework(ctx: SpeechContext) -> StrategicFramework:
    return StrategicFramework(
        case_theory="Summarize opposition case, analyze final clashes, and provide impact weighing",
        burdens=["Summarize opposition", "Final clash analysis", "Impact weighing"],
        unique_contributions=["Opposition case summary", "Final clash analysis", "Impact weighing"],
        clash_points=["Opposition case summary", "Final clash analysis", "Impact weighing"],
    )


def generic_framework(ctx: SpeechContext) -> StrategicFramework:
    return StrategicFramework(
        case_theory="Answer the strongest points raised so far and show which bench deals with them best",
        burdens=["Present arguments"],
        unique_contributions=["Direct engagement with the points already made"],
        clash_points=["The strongest unanswered point"],
    )


def case_theory_line(framework: StrategicFramework) -> str:
    return f"Our case theory: {framework.case_theory.rstrip('.')}."


def roadmap(framework: StrategicFramework) -> str:
    """Numbered outline of the role's burdens, read out at the top of the speech."""
    steps = " ".join(
        f"({i}) {burden[:1].lower()}{burden[1:]}" for i, burden in enumerate(framework.burdens, start=1)
    )
    return f"My roadmap: {steps}."


def bullet_list(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


# =============================================================================
# SECTION WRITERS
# =============================================================================

def pm_definition(motion_lower: str) -> str:
    if "ban" in motion_lower:
        return (
            "Our definition of this motion is clear: we propose a comprehensive prohibition on a specified "
            "activity or item. This will be achieved through a multi-pronged approach involving strict "
            "regulatory oversight and public awareness campaigns. Our framework prioritizes public safety and "
            "long-term societal well-being to ensure effective and equitable implementation."
        )
    if "subsidize" in motion_lower:
        return (
            "This motion proposes a strategic investment in a particular sector through targeted subsidies "
            "designed to stimulate growth and foster innovation. Our framework for this debate centers on "
            "enhancing economic competitiveness and ensuring equitable access to vital resources through "
            "accountable public funding."
        )
    return (
        "We define this motion as a clear and necessary step towards progress. Our framework for evaluating "
        "this debate is based on principles of practical efficacy and positive societal impact, which we "
        "believe are essential for a fair and comprehensive assessment of its merits."
    )


def pm_arguments(ctx: SpeechContext) -> str:
    second_type = "rights" if "rights" in ctx.motion_lower else "social"
    return (
        argument_block("First", "Economic Prosperity and Growth", "economic", "government")
        + argument_block("Second", argument_title(second_type, "government"), second_type, "government")
        + argument_block("Third", "Practicality and Effective Implementation", "practical", "government")
    )


def definitional_challenge(motion_lower: str) -> str:
    if "ban" in motion_lower:
        return (
            "First, the Prime Minister has failed to clearly define the scope of this ban. What exactly "
            "constitutes a violation? How will enforcement work? These definitional gaps create arbitrary "
            "implementation that violates rule of law principles."
        )
    if "should" in motion_lower:
        return (
            "The Prime Minister's framework assumes a false binary choice. They have not established clear "
            "success criteria or considered the spectrum of policy alternatives that could achieve their "
            "stated goals more effectively."
        )
    return (
        "The government's definitional framework is fundamentally flawed because it ignores the complexity "
        "of real-world implementation and the diverse stakeholder impacts."
    )


def framework_critique(ctx: SpeechContext) -> str:
    if ctx.has_argument("economic") and ctx.has_argument("rights"):
        flaw = "treats economic efficiency as the sole metric while ignoring fundamental rights implications"
    elif ctx.has_argument("practical"):
        flaw = "assumes perfect implementation conditions that don't exist in the real world"
    else:
        flaw = "oversimplifies complex social dynamics and ignores unintended consequences"
    return f"The government's framework fails because it {flaw}."


def alternative_framework(ctx: SpeechContext) -> str:
    if "economic" in ctx.motion_lower or ctx.has_argument("economic"):
        return "distributive justice and long-term economic sustainability, not just aggregate efficiency"
    if "rights" in ctx.motion_lower or ctx.has_argument("rights"):
        return "fundamental rights protection with proportionate policy responses"
    return "harm minimization and democratic accountability in policy implementation"


def systematic_rebuttals(ctx: SpeechContext) -> str:
    if not ctx.user_arguments:
        return (
            "The Prime Minister's arguments lack empirical support and ignore crucial counterevidence that "
            "undermines their entire case."
        )
    parts = []
    for index, arg in enumerate(ctx.user_arguments, start=1):
        parts.append(
            f"\n**Rebuttal {index}: {arg.type.capitalize()} Argument**\n"
            f"The PM claimed {arg.claim}, but this analysis is flawed because {specific_rebuttal(arg.type)}.\n"
            f"{counter_evidence(arg.type)}\n"
        )
    return "".join(parts)


def opposition_arguments(ctx: SpeechContext) -> str:
    """Three opposition arguments, the first on a different dimension from the user's main point."""
    main_type = ctx.user_arguments[0].type if ctx.user_arguments else "economic"
    first_type = "rights" if main_type == "economic" else "economic"

    return (
        argument_block("First", argument_title(first_type, "opposition"), first_type, "opposition")
        + "\n**Second Argument: Implementation Failure and Perverse Incentives**\n"
        "This policy will fail because enforcement mechanisms create perverse incentives that undermine the stated goals.\n"
        "We see this pattern in similar failed policies like Prohibition in the US and the War on Drugs.\n"
        "This matters because policy failure erodes public trust and wastes resources that could address real problems.\n"
        "\n**Third Argument: Superior Alternative Solutions**\n"
        "Even if we accept the government's problem diagnosis, this motion is the wrong solution.\n"
        "Evidence from Nordic countries shows that targeted interventions achieve better outcomes with fewer negative side effects.\n"
        "This is crucial because we have limited political capital and resources - we must choose the most effective approach.\n"
    )


LO_WEIGHING = (
    "The fundamental question is whether we accept the government's theoretical benefits despite concrete, "
    "measurable harms. Their case relies on optimistic assumptions about implementation while ignoring the "
    "documented failures of similar policies. Our case demonstrates that the risks are not just probable, "
    "but inevitable given the structural problems we've identified."
)

DPM_FRAMEWORK_DEFENSE = (
    "The opposition's alternative framework is internally inconsistent and would create arbitrary "
    "implementation standards that violate rule of law principles."
)

DPM_REBUTTALS = (
    "Their definitional challenges ignore practical realities. Their alternative framework lacks enforcement "
    "mechanisms. Their systematic rebuttals rely on cherry-picked evidence that ignores broader empirical patterns."
)

DPM_EXTENSION = """**New Argument: International Competitiveness and Global Standards**

This policy positions us as a global leader in addressing shared challenges. The mechanism operates through international coordination that creates positive spillover effects. Evidence from OECD countries shows that early adopters gain competitive advantages in emerging markets.

This matters because global challenges require coordinated responses, and leadership positions create long-term strategic benefits."""

DPM_STRATEGY = (
    "The opposition's strategy relies on fear-mongering about implementation challenges while offering no "
    "viable alternatives to address the underlying problems that necessitate this policy."
)

DLO_FAILURES = (
    "First, their framework defense ignores the practical implementation problems we identified. Second, "
    "their rebuttals to our arguments are superficial and don't address the underlying mechanisms. Third, "
    "their extensions actually strengthen our case by highlighting additional areas of concern."
)

DLO_EXTENSIONS = """**Extension 1: Democratic Legitimacy Crisis**

This policy undermines democratic legitimacy by excluding affected stakeholders from meaningful participation in policy design.

**Extension 2: Intergenerational Justice**

The long-term consequences disproportionately burden future generations who have no voice in current policy decisions."""

DLO_CRYSTALLIZATION = (
    "The fundamental clash is between the government's technocratic faith in policy solutions and our "
    "evidence-based analysis of implementation realities. They want us to accept theoretical benefits while "
    "ignoring documented patterns of policy failure."
)

MG_OG_SUPPORT = (
    "reinforcing their framework with additional evidence and extending their impact analysis to previously "
    "unconsidered stakeholder groups."
)

MG_NEW_DIMENSIONS = """**New Dimension: Intergenerational Justice and Future Sustainability**

The Opening Government focused on immediate impacts, but we must consider how this policy affects future generations and long-term institutional development."""

MG_STRATEGY = (
    "As Closing Government, we can see both the Opening Government's framework and the Opposition's "
    "concerns, allowing us to present a more nuanced analysis that addresses legitimate concerns while "
    "maintaining our core position."
)

MO_OO_SUPPORT = (
    "providing additional evidence for their core arguments and extending their analysis to new contexts "
    "that strengthen the opposition case."
)

MO_NEW_ANGLES = """**New Opposition Angle: Cultural and Community Impact**

This policy disrupts existing cultural practices and community structures that have evolved organically over generations, creating social fragmentation that cannot be easily repaired."""

MO_CG_RESPONSE = (
    "their new dimensions actually strengthen our case by highlighting additional areas where this policy "
    "will cause harm that they hadn't previously considered."
)

GW_SUMMARY = (
    "The Prime Minister established our framework and core arguments. The Deputy Prime Minister defended "
    "against opposition challenges and extended our case. The Member of Government introduced crucial new "
    "dimensions that broaden our analysis."
)

GW_REBUTTALS = (
    "Their enforcement concerns are based on outdated assumptions. Their rights objections ignore the rights "
    "of those harmed by the status quo. Their alternative solutions are either inadequate or politically impossible."
)

OW_SUMMARY = (
    "The Leader of Opposition challenged the government framework and established our case. The Deputy "
    "Leader systematically dismantled government responses. The Member of Opposition introduced crucial new "
    "dimensions that expose additional problems."
)

OW_CLASH_ANALYSIS = (
    "The fundamental clash is between the government's faith in technocratic solutions and our "
    "evidence-based analysis of implementation realities and democratic accountability."
)

OW_IMPACT_WEIGHING = (
    "The harms we've identified are concrete and immediate, while the government's benefits are speculative "
    "and distant. The magnitude of potential harm far exceeds any theoretical benefits."
)


def comparative_weighing(side: str) -> str:
    if side == "government":
        return (
            "The government has provided concrete evidence and clear mechanisms, while the opposition relies "
            "on speculative harms and ignores status quo problems."
        )
    return (
        "The opposition has demonstrated concrete, measurable harms, while the government relies on "
        "theoretical benefits and optimistic implementation assumptions."
    )


# =============================================================================
# ROLE SPEECHES
# =============================================================================

def pm_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Prime Minister, I rise to propose the motion: "{ctx.motion}".

We believe that this motion is not just necessary, but profoundly beneficial for a multitude of reasons. {case_theory_line(framework)}

{roadmap(framework)}

**DEFINING THE MOTION AND OUR FRAMEWORK**

{pm_definition(ctx.motion_lower)}

**THE GOVERNMENT'S CASE: THREE CORE ARGUMENTS**

Let me present our foundational arguments for this motion:

{pm_arguments(ctx)}

**WHERE THIS DEBATE WILL BE DECIDED**

{bullet_list(framework.clash_points)}

**OUR VISION**

Ultimately, our vision for this motion is a future where our communities are stronger, our economy is more dynamic, and individual well-being is enhanced. We believe this policy is a crucial step towards building a more resilient and equitable society.

For these reasons, we proudly propose this motion and urge you to support it.

Thank you."""


def lo_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Leader of the Opposition, I rise to fundamentally challenge the motion: "{ctx.motion}"

The Prime Minister has presented what appears to be a coherent case, but I'm afraid their analysis contains critical flaws that render their entire framework unsustainable.

{case_theory_line(framework)} {roadmap(framework)}

**DEFINITIONAL CHALLENGE AND FRAMEWORK CRITIQUE**

{definitional_challenge(ctx.motion_lower)}

{framework_critique(ctx)}

Instead, we must understand this motion through the lens of {alternative_framework(ctx)}.

**SYSTEMATIC REBUTTAL OF GOVERNMENT CASE**

Let me address the PM's arguments directly:

{systematic_rebuttals(ctx)}

**OPPOSITION CASE: THE FUNDAMENTAL PROBLEMS**

Beyond merely responding to the government, I present three core reasons why this motion is not just misguided, but actively harmful:

{opposition_arguments(ctx)}

The clashes this debate turns on are:
{bullet_list(framework.clash_points)}

**WEIGHING AND CONCLUSION**

{LO_WEIGHING}

The government asks us to accept their vision based on theoretical benefits, but we have demonstrated concrete, measurable harms that will result from this policy.

For these reasons, we firmly oppose this motion.

Thank you."""


def dpm_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Deputy Prime Minister, I rise to reinforce our framework while directly addressing the opposition's challenges and extending our case with crucial additional analysis.

{roadmap(framework)}

**DEFENDING OUR FRAMEWORK**

The Leader of Opposition attempted to undermine our definitional approach, but their alternative framework fails for several critical reasons:

{DPM_FRAMEWORK_DEFENSE}

**SYSTEMATIC RESPONSE TO OPPOSITION**

Let me address each of the LO's challenges directly:

{DPM_REBUTTALS}

**EXTENDING THE GOVERNMENT CASE**

Beyond defending our position, I present additional substantive material that strengthens our case:

{DPM_EXTENSION}

What this speech adds to the government bench:
{bullet_list(framework.unique_contributions)}

**STRATEGIC ANALYSIS**

{DPM_STRATEGY}

The opposition's strategy relies on theoretical concerns while ignoring the concrete benefits and practical safeguards we've outlined.

Our case demonstrates both the necessity and feasibility of this motion.

Thank you."""


def dlo_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Deputy Leader of Opposition, I will systematically dismantle the government's responses while extending our opposition case with crucial additional analysis.

{roadmap(framework)}

**GOVERNMENT RESPONSES FAIL**

The Deputy Prime Minister claimed to address our concerns, but their responses are fundamentally inadequate:

{DLO_FAILURES}

**EXTENDING THE OPPOSITION CASE**

Building upon the Leader of Opposition's foundation, I present additional analysis that strengthens our case:

{DLO_EXTENSIONS}

**CRYSTALLIZING THE CLASH**

{DLO_CRYSTALLIZATION}

{bullet_list(framework.clash_points)}

**CONCLUSION**

The government's case crumbles under systematic analysis. They have failed to address our core concerns while we have demonstrated why this motion is fundamentally flawed.

Thank you."""


def mg_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Member of Government, I bring a fresh perspective to this debate while supporting the Opening Government's framework.

{roadmap(framework)}

**SUPPORTING OPENING GOVERNMENT**

The Opening Government established a solid foundation, and I want to reinforce their analysis by:

{MG_OG_SUPPORT}

**NEW DIMENSIONS: EXTENDING THE DEBATE**

However, there are crucial aspects of this motion that the Opening Government couldn't fully explore in their time:

{MG_NEW_DIMENSIONS}

The extensions Closing Government brings to this debate:
{bullet_list(framework.extensions)}

**CLOSING GOVERNMENT STRATEGY**

{MG_STRATEGY}

**ENGAGING WITH THE OPPOSITION**

The opposition has raised concerns, but they fail to account for the new dimensions I've introduced and the broader context that makes this motion essential.

**CONCLUSION**

Together with the Opening Government, we present a comprehensive case that addresses both immediate concerns and long-term implications.

Thank you."""


def mo_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Member of Opposition, I stand with the Opening Opposition while bringing crucial new analysis that strengthens our case against this motion.

{roadmap(framework)}

**SUPPORTING OPENING OPPOSITION**

The Opening Opposition correctly identified the fundamental flaws in this motion. I reinforce their analysis by:

{MO_OO_SUPPORT}

**NEW OPPOSITION DIMENSIONS**

However, there's a critical angle that hasn't been fully explored:

{MO_NEW_ANGLES}

The extensions Closing Opposition brings to this debate:
{bullet_list(framework.extensions)}

**RESPONDING TO CLOSING GOVERNMENT**

The Member of Government attempted to introduce new dimensions, but:

{MO_CG_RESPONSE}

**CLOSING OPPOSITION STRATEGY**

As Closing Opposition, we must demonstrate why even the government's extended case fails to justify this motion.

**CONCLUSION**

The government bench, despite their attempts to shore up their case, has failed to address the fundamental problems we've identified.

Thank you."""


def gw_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Government Whip, I have the privilege of summarizing our case and providing final analysis on why this motion must pass.

{roadmap(framework)}

**GOVERNMENT CASE SUMMARY**

Throughout this debate, the government bench has presented a comprehensive and compelling case:

{GW_SUMMARY}

**FINAL REBUTTALS**

Let me address the opposition's arguments systematically:

{GW_REBUTTALS}

**COMPARATIVE WEIGHING**

When we weigh the arguments presented by both sides:

{comparative_weighing("government")}

**CONCLUSION**

Chair, this debate has demonstrated that {ctx.motion_lower} is not just beneficial, but essential. The opposition's concerns are either manageable or outweighed by the significant benefits we've outlined.

The choice is clear. We must support this motion.

Thank you."""


def ow_speech(ctx: SpeechContext, framework: StrategicFramework) -> str:
    return f"""Thank you, Chair. As Opposition Whip, I will summarize our case and demonstrate why this motion must be rejected.

{roadmap(framework)}

**OPPOSITION CASE SUMMARY**

The opposition bench has presented a devastating critique of this motion:

{OW_SUMMARY}

**FINAL CLASH ANALYSIS**

{OW_CLASH_ANALYSIS}

{bullet_list(framework.unique_contributions)}

**IMPACT WEIGHING**

When we consider the real-world impacts:

{OW_IMPACT_WEIGHING}

**CONCLUSION**

Chair, this motion is fundamentally flawed. The government has failed to meet their burden of proof while we have demonstrated significant harms.

We urge you to reject this motion.

Thank you."""


def generic_speech(role: str, ctx: SpeechContext, framework: StrategicFramework) -> str:
    points = "\n".join(f"- {arg.claim}" for arg in ctx.user_arguments) or "- The motion deserves careful scrutiny"
    return f"""Thank you, Chair. As {role_name(role)}, I present my analysis of this motion: "{ctx.motion}".

{case_theory_line(framework)}

The key points raised so far in this debate are:
{points}

Each of these deserves a direct answer, and the bench that answers them best should win this debate.

Thank you."""


# =============================================================================
# DISPATCH TABLES
# =============================================================================

SpeechWriter = Callable[[SpeechContext, StrategicFramework], str]
FrameworkBuilder = Callable[[SpeechContext], StrategicFramework]

ROLE_FRAMEWORKS: dict[Role, FrameworkBuilder] = {
    Role.PM: pm_framework,
    Role.LO: lo_framework,
    Role.DPM: dpm_framework,
    Role.DLO: dlo_framework,
    Role.MG: mg_framework,
    Role.MO: mo_framework,
    Role.GW: gw_framework,
    Role.OW: ow_framework,
}

ROLE_SPEECHES: dict[Role, SpeechWriter] = {
    Role.PM: pm_speech,
    Role.LO: lo_speech,
    Role.DPM: dpm_speech,
    Role.DLO: dlo_speech,
    Role.MG: mg_speech,
    Role.MO: mo_speech,
    Role.GW: gw_speech,
    Role.OW: ow_speech,
}


def find_user_role(previous_speeches: list[Speech]) -> str:
    """Role of the first human speech, PM if there is none."""
    human = next((s for s in previous_speeches if not s.is_ai), None)
    return human.role if human else "PM"


class SpeechGenerator:
    """
    Writes AI speeches for any BP role.
    """

    def __init__(self, classifier: BaseArgumentClassifier):
        self.classifier = classifier

    async def build_context(
        self,
        motion: str,
        user_speech: str,
        previous_speeches: list[Speech],
        skill_level: str = "intermediate",
    ) -> SpeechContext:
        user_role = find_user_role(previous_speeches)
        user_arguments = await self.classifier.classify(user_speech, user_role, TOPIC_TYPES)
        logger.info(f"Analyzed {len(user_arguments)} user arguments: {[a.type for a in user_arguments]}")
        return SpeechContext(
            motion=motion,
            user_role=user_role,
            user_speech=user_speech,
            user_arguments=user_arguments,
            previous_speeches=list(previous_speeches),
            skill_level=skill_level,
        )

    def framework_for(self, role: str, ctx: SpeechContext) -> StrategicFramework:
        parsed = parse_role(role)
        builder = ROLE_FRAMEWORKS.get(parsed) if parsed else None
        return builder(ctx) if builder else generic_framework(ctx)

    def write(self, role: str, ctx: SpeechContext, framework: StrategicFramework) -> str:
        parsed = parse_role(role)
        writer = ROLE_SPEECHES.get(parsed) if parsed else None
        if writer is None:
            logger.warning(f"No speech template for role '{role}'; using generic speech")
            return generic_speech(role, ctx, framework)
        return writer(ctx, framework)

    async def generate(
        self,
        motion: str,
        role: str,
        user_speech: str,
        previous_speeches: list[Speech],
        skill_level: str = "intermediate",
    ) -> str:
        """
        Generate one AI speech.

        Args:
            motion: The motion being debated
            role: Role code of the AI speaker
            user_speech: The user's transcript (the speech everything responds to)
            previous_speeches: Speeches so far, used to find the user's role
            skill_level: The user's skill level (echoed back to the client)

        Returns:
            The speech text

        Raises:
            DebateInputError: If the user has not spoken yet
        """
        if not user_speech:
            raise DebateInputError("User must speak first")

        logger.info(f"Generating speech for {role}: motion='{motion}'")

        ctx = await self.build_context(motion, user_speech, previous_speeches, skill_level)
        framework = self.framework_for(role, ctx)
        logger.debug(
            f"Framework for {role}: theory='{framework.case_theory}', clashes={framework.clash_points}"
        )

        speech = self.write(role, ctx, framework)
        logger.info(f"Generated {len(speech)} character speech for {role}")
        return speech


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

async def generate_speech(
    motion: str,
    role: str,
    user_speech: str,
    previous_speeches: list[Speech],
    classifier: BaseArgumentClassifier,
    skill_level: str = "intermediate",
) -> str:
    """
    Convenience function to generate a practice speech.

    Example:
        speech = await generate_speech(motion, "LO", user_speech, [], KeywordArgumentClassifier())
    """
    generator = SpeechGenerator(classifier)
    return await generator.generate(motion, role, user_speech, previous_speeches, skill_level)
