"""
Structured Preparation Notes.

WHAT THIS DOES:
Turns a motion, a role and the user's raw notes into one long markdown
brief: motion analysis, role strategy, a three-argument framework,
anticipated arguments from the other bench, evidence to research, and
strategic reminders. The user's own notes are carried through verbatim.

MOTION ANALYSIS:
A motion can belong to several of ten families (prohibition, economic,
regulation, liberalization, environmental, social, education, health,
technology, international). Families drive the case theory, the core
tensions, the implementation context and the example bank. Keywords match
whole words (plus simple inflections like "bans" or "banning"), so "ai"
does not fire on "said" and "un" not on "fund".

USAGE:
    brief = structure_notes("This House would ban private cars", "PM", "my notes")
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

from app.models.roles import ROLE_TEAMS, TEAM_NAMES, Role, is_government, parse_role, role_name
from app.services.errors import DebateInputError

logger = logging.getLogger(__name__)

ACCEPTED_ROLES = ", ".join(role.value for role in Role)

NOTES_HINT_MIN_CHARS = 50


# =============================================================================
# MOTION TAXONOMY
# =============================================================================

MOTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "prohibition": ("ban", "prohibit", "outlaw", "forbid", "restrict"),
    "economic": ("tax", "subsidize", "incentivize", "tariff", "spend", "funding", "market", "trade"),
    "regulation": ("regulate", "mandate", "require", "control", "licence", "oversight"),
    "liberalization": ("allow", "legalize", "deregulate", "permit", "free", "expand"),
    "environmental": ("environment", "climate", "pollution", "sustainability", "ecological", "conservation"),
    "social": ("society", "community", "public", "welfare", "justice", "equality", "human rights"),
    "education": ("school", "student", "teacher", "curriculum", "university", "education", "learning"),
    "health": ("health", "medical", "patient", "healthcare", "disease", "public health"),
    "technology": ("ai", "artificial intelligence", "tech", "internet", "social media", "data", "cyber"),
    "international": ("international", "global", "un", "nato", "foreign policy", "diplomacy"),
}

IMPLEMENTATION_CONTEXTS = {
    "prohibition": "Requires robust enforcement mechanisms and addresses black market concerns, considering potential for unintended social consequences.",
    "economic": "Operates within existing fiscal and monetary policy frameworks, requiring careful consideration of market reactions and distributional effects.",
    "regulation": "Builds on current regulatory infrastructure and compliance systems, often involving bureaucratic processes and industry adaptation.",
    "liberalization": "Removes existing restrictions while maintaining necessary safeguards, potentially challenging societal norms and requiring public education.",
    "environmental": "Involves complex scientific considerations and often requires international cooperation, with long-term and often irreversible impacts.",
    "social": "Deals with sensitive issues of human behavior and societal structures, requiring broad public buy-in and addressing potential cultural resistance.",
    "technology": "Operates in a rapidly evolving landscape, demanding flexible regulatory approaches and consideration of ethical implications and future advancements.",
    "policy": "Requires institutional capacity, multi-stakeholder coordination, and robust public administration for effective delivery.",
}

# (trigger keywords, stakeholders added) in reporting order
STAKEHOLDER_RULES: list[tuple[tuple[str, ...], tuple[str, ...]]] = [
    (("student", "school", "education"), ("Students", "Parents", "Teachers", "Educational Institutions")),
    (("business", "corporate", "company", "worker", "consumer", "economy"), ("Businesses", "Workers", "Consumers", "Shareholders")),
    (("health", "medical", "patient"), ("Patients", "Healthcare Providers", "Medical Professionals")),
    (("environment", "climate", "ecological"), ("Environmental Groups", "Future Generations", "Affected Communities")),
    (("media", "social media", "platform"), ("Media Companies", "Content Creators", "Platform Users")),
    (("artificial intelligence", "ai"), ("AI Developers", "AI Users", "Researchers")),
    (("criminal justice", "crime", "prison", "police"), ("Law Enforcement", "Offenders", "Victims", "Judicial System")),
    (("developing world", "global south", "aid"), ("Developing Nations", "International Aid Organizations")),
    (("arts", "culture", "creative"), ("Artists", "Cultural Institutions", "Audience/Public")),
]

FAMILY_TENSIONS: dict[str, tuple[str, ...]] = {
    "prohibition": (
        "Individual Liberty vs Collective Harm Prevention",
        "Enforcement Feasibility vs Policy Goals",
        "Intended Effects vs Unintended Consequences",
    ),
    "economic": (
        "Economic Efficiency vs Distributional Justice",
        "Market Freedom vs Government Intervention",
        "Short-term Costs vs Long-term Benefits",
    ),
    "regulation": (
        "Regulatory Compliance vs Innovation",
        "Consumer Protection vs Market Competition",
        "Standardization vs Flexibility",
    ),
    "liberalization": (
        "Expanded Freedom vs Potential Harm",
        "Individual Choice vs Social Consequences",
        "Progressive Values vs Traditional Concerns",
    ),
    "environmental": (
        "Economic Growth vs Environmental Protection",
        "Short-term Gains vs Long-term Sustainability",
        "Global Cooperation vs National Sovereignty",
    ),
    "social": (
        "Individual Rights vs Collective Welfare",
        "Social Cohesion vs Diversity/Pluralism",
        "Moral Imperative vs Practicality",
    ),
    "technology": (
        "Technological Progress vs Human Agency/Control",
        "Efficiency Gains vs Job Displacement",
        "Privacy vs Security/Surveillance",
        "Innovation vs Ethical Concerns",
    ),
    "international": (
        "National Interest vs International Cooperation",
        "Sovereignty vs Humanitarian Intervention",
        "Global Stability vs Regional Conflicts",
    ),
}

GENERAL_TENSIONS = (
    "Practical Implementation vs Theoretical Benefits",
    "Status Quo Problems vs Policy Risks",
)

KEYWORD_TENSIONS = [
    (("capitalism", "socialism"), "Free Markets vs State Control"),
    (("democracy", "authoritarianism"), "Democratic Values vs Efficiency/Order"),
]


# =============================================================================
# ROLE STRATEGIES
# =============================================================================

@dataclass(frozen=True)
class RoleStrategy:
    position: str
    burdens: tuple[str, ...]
    opportunities: tuple[str, ...]
    clashes: tuple[str, ...]


ROLE_STRATEGIES: dict[Role, RoleStrategy] = {
    Role.PM: RoleStrategy(
        position="Framework Setter and Case Establisher",
        burdens=("Define motion scope", "Establish case theory", "Present core arguments for the policy's necessity and benefits"),
        opportunities=("Set favorable definitions", "Frame key tensions", "Establish burden of proof for the Government", "Highlight the urgent need for change"),
        clashes=("Definitional disputes", "Framework challenges", "Core case attacks on problem identification or solution effectiveness"),
    ),
    Role.LO: RoleStrategy(
        position="Framework Challenger and Opposition Establisher",
        burdens=("Challenge government framework (if unfair)", "Present an alternative vision (e.g., status quo or counter-proposal)", "Establish core arguments against the policy"),
        opportunities=("Redefine motion scope (if necessary)", "Challenge underlying assumptions of the motion or Government's case", "Present a counter-framework or alternative perspective"),
        clashes=("Definitional challenges", "Framework critique", "Alternative approaches vs. the proposed policy", "Critique of problem identification and solution viability"),
    ),
    Role.DPM: RoleStrategy(
        position="Framework Defender and Case Extender",
        burdens=("Defend government framework and definitions", "Respond systematically to opposition's arguments", "Extend government case with new, substantive arguments or deeper analysis"),
        opportunities=("Reinforce key definitions and principles established by PM", "Address opposition concerns directly and rebuild attacked arguments", "Add new layers of analysis or impacts to the government's case"),
        clashes=("Framework defense", "Opposition rebuttals on government's core arguments", "Case extensions and their comparative importance"),
    ),
    Role.DLO: RoleStrategy(
        position="Systematic Rebuttal and Opposition Extension",
        burdens=("Deliver comprehensive, systematic rebuttal of government's entire case (PM & DPM)", "Extend opposition case with new arguments or deeper analysis", "Crystallize key clashes and explain why Opposition is winning them"),
        opportunities=("Dismantle government responses to LO's attacks", "Strengthen opposition arguments by adding new impacts or examples", "Identify government contradictions or unfulfilled burdens"),
        clashes=("Government response failures", "Opposition extensions", "Clash crystallization and comparative analysis"),
    ),
    Role.MG: RoleStrategy(
        position="New Dimension Introducer and OG Supporter",
        burdens=("Support Opening Government's core principles without repetition", "Introduce new, distinct dimensions of analysis or argument", "Extend the debate's scope with fresh perspectives"),
        opportunities=("Bring genuinely fresh perspectives or unique impacts (e.g., specific stakeholders, long-term effects)", "Address unexplored angles or neglected aspects of the motion", "Strengthen the government bench by providing additional layers of advocacy"),
        clashes=("New dimensional analysis vs. opposition's responses", "Bench coordination and coherence", "Addressing points OG might have missed"),
    ),
    Role.MO: RoleStrategy(
        position="Opposition Supporter and New Angle Provider",
        burdens=("Support Opening Opposition's core principles without repetition", "Introduce new, distinct opposition angles of critique or impact", "Respond directly to Closing Government's extensions and arguments"),
        opportunities=("Strengthen the opposition bench coordination and synergy", "Counter CG extensions with specific rebuttals and alternative analyses", "Add fresh critique or identify systemic flaws not yet explored"),
        clashes=("CG response and new arguments", "Opposition coordination and unique contributions", "New angle development and its impact on the round"),
    ),
    Role.GW: RoleStrategy(
        position="Government Summarizer and Final Weigher",
        burdens=("Summarize the entire government case coherently, integrating OG and CG contributions", "Deliver final, strategic rebuttals to the most important opposition arguments", "Provide comparative weighing of the round, explaining why government wins"),
        opportunities=("Synthesize government arguments into a compelling narrative", "Identify and refute the opposition's 'best case' arguments", "Offer clear impact weighing (e.g., magnitude, scope, probability, reversibility)", "Frame the round through government's lens"),
        clashes=("Case summary and coherent narrative", "Final rebuttals and refutations", "Comparative analysis and impact weighing"),
    ),
    Role.OW: RoleStrategy(
        position="Opposition Summarizer and Final Analyst",
        burdens=("Summarize the entire opposition case coherently, integrating OO and MO contributions", "Analyze final clashes systematically, highlighting government's failures", "Provide impact weighing, explaining why opposition wins"),
        opportunities=("Synthesize opposition arguments into a powerful counter-narrative", "Deliver definitive critique of the government's entire model and case", "Offer clear comparative impact weighing from the opposition's perspective", "Frame the round through opposition's lens"),
        clashes=("Case summary and coherent critique", "Final clash analysis and government's failures", "Impact comparison and why opposition's harms/principles outweigh"),
    ),
}

GENERAL_REMINDERS = (
    "Stay calm and confident under pressure.",
    "Speak clearly and at a moderate pace.",
    "Make eye contact with the judge and opposition.",
    "Manage your time effectively.",
    "Be concise and avoid jargon.",
    "Use rhetorical devices to make your points memorable.",
)


# =============================================================================
# CASE THEORIES (family → (government, opposition)), first match wins
# =============================================================================

CASE_THEORIES: list[tuple[str, tuple[str, str]]] = [
    ("prohibition", (
        "This prohibition is necessary because the harms of the prohibited activity (e.g., crime, public health crisis) definitively outweigh any individual liberty concerns, and effective, enforceable mechanisms exist to implement it.",
        "This prohibition infringes on fundamental liberties, will create more severe unintended consequences (e.g., black markets, social unrest), and fails to address underlying issues through less restrictive means.",
    )),
    ("economic", (
        "This economic intervention corrects clear market failures, promotes both efficiency and equitable distribution of resources, and will lead to sustainable long-term economic growth for all stakeholders.",
        "This economic intervention distorts natural markets, creates significant unintended consequences (e.g., inflation, job loss), and fails to achieve its stated goals while imposing unacceptable costs on businesses and consumers.",
    )),
    ("regulation", (
        "This regulation addresses critical market/societal failures, protects vulnerable stakeholders (e.g., consumers, environment), and fosters a fairer, safer environment without stifling necessary innovation.",
        "This regulation stifles innovation, imposes excessive compliance costs that disproportionately harm small entities, and will fail to deliver the promised benefits while creating significant bureaucratic burdens.",
    )),
    ("liberalization", (
        "This liberalization expands essential freedoms, fosters innovation, and promotes societal progress by removing outdated or unjust restrictions, with manageable and outweighed risks.",
        "This liberalization introduces unacceptable harms and systemic risks to society (e.g., public safety, moral decline), disproportionately affecting vulnerable groups, and outweighing any perceived individual benefits.",
    )),
    ("environmental", (
        "This policy critically addresses urgent environmental degradation and ensures long-term ecological sustainability, which is paramount for current and future generations, even if it entails short-term economic adjustments.",
        "This environmental policy is economically unfeasible, unfairly burdens specific industries or demographics, and offers insufficient tangible benefits to justify its immense costs or infringements on economic freedom.",
    )),
    ("technology", (
        "This policy ensures that technological advancement proceeds ethically and safely, maximizing its benefits for society while proactively mitigating risks like bias, surveillance, or job displacement.",
        "This policy unduly stifles innovation and technological progress, is based on an insufficient understanding of the tech landscape, and will lead to unforeseen negative consequences for economic competitiveness and individual freedoms.",
    )),
]

DEFAULT_CASE_THEORY = (
    "This policy addresses significant, demonstrable problems through effective and pragmatic mechanisms that will create net positive outcomes for society as a whole.",
    "This policy fails to genuinely solve underlying problems, while creating new and substantial harms that outweigh any theoretical benefits, leading to a worse status quo.",
)

# stakeholder → (government evidence, opposition evidence)
STAKEHOLDER_EVIDENCE = {
    "Students": (
        "Educational research consistently shows improved learning outcomes, reduced stress, and increased engagement in contexts where similar policies were implemented.",
        "Student surveys and anecdotal evidence highlight increased anxiety, reduced autonomy, and a stifling of creativity under comparable policy frameworks.",
    ),
    "Businesses": (
        "Economic analyses project long-term competitiveness gains, increased market stability, and innovation benefits resulting from this policy's environment, citing specific industry reports.",
        "Industry impact studies forecast significant compliance costs, reduced operational flexibility, and a dampening effect on investment and job creation, leading to job losses.",
    ),
    "Healthcare Providers": (
        "Medical association reports and pilot program results indicate improved patient outcomes, enhanced service delivery efficiency, and greater job satisfaction for providers.",
        "Surveys among healthcare professionals reveal increased administrative burdens, potential for burnout, and concerns about compromised patient care quality due to new regulations.",
    ),
    "Environmental Groups": (
        "Independent environmental impact assessments and ecological models predict measurable improvements in air/water quality, biodiversity, and ecosystem health, citing specific scientific studies.",
        "Environmental justice studies and expert critiques point to disproportionate negative impacts on vulnerable communities or highlight the policy's insufficient scope to address the real crisis, leading to greenwashing.",
    ),
    "Workers": (
        "Labor market analyses suggest new job creation, improved working conditions, enhanced worker protections, and increased wage growth in sectors affected by this policy.",
        "Union reports and economic forecasts warn of job displacement, wage stagnation, or reduced worker rights due to automation or increased regulatory burden.",
    ),
    "Consumers": (
        "Consumer protection agencies and market research indicate increased product safety, better service quality, fairer pricing, and greater market transparency benefiting consumers.",
        "Consumer advocacy groups raise concerns about reduced choice, higher prices, or barriers to access for essential goods/services, leading to consumer detriment.",
    ),
    "Future Generations": (
        "Long-term projections and sustainability reports illustrate how this policy secures resources, mitigates future risks, and preserves opportunities for future generations.",
        "Debt accumulation, resource depletion, or irreversible environmental damage resulting from this policy will disproportionately burden future generations.",
    ),
    "Developing Nations": (
        "Case studies of successful development initiatives show how similar policies have fostered economic growth, improved social indicators, and reduced poverty in developing contexts.",
        "Critiques from development economists highlight how this policy could lead to dependency, resource exploitation, or undermine local industries in developing nations.",
    ),
}

GENERIC_STAKEHOLDER_EVIDENCE = (
    "Research shows positive outcomes for affected populations, demonstrating clear benefits and successful implementation in similar contexts.",
    "Studies consistently show negative impacts on affected populations, leading to demonstrable harms and unintended consequences, drawing from real-world examples.",
)


# =============================================================================
# ANTICIPATED ARGUMENTS
# =============================================================================

OPPOSITION_POINTS = (
    "**Implementation challenges and enforcement problems**: The policy is impractical or impossible to execute effectively, leading to failure or unintended side effects.",
    "**Disproportionate impacts**: The policy will harm specific vulnerable populations, industries, or regions unequally.",
    "**Superior alternative solutions**: Other, better ways exist to address the problem that are less intrusive, more efficient, or ethically preferable.",
    "**Violation of fundamental rights/principles**: The policy infringes on individual liberties, economic freedoms, or democratic processes.",
    "**High economic costs/administrative burdens**: The financial or bureaucratic burden of the policy outweighs its purported benefits.",
    "**Problem misidentification/exaggeration**: The problem is not as severe as claimed, or the government misunderstands its root causes.",
    "**Unintended negative consequences**: The policy will create new, unforeseen problems (e.g., black markets, brain drain, social unrest).",
    "**Moral hazard/Dependency**: The policy creates perverse incentives or fosters dependency.",
)

GOVERNMENT_POINTS = (
    "**Significant problems require intervention**: The status quo is demonstrably harmful and necessitates urgent action.",
    "**Feasible implementation**: The policy's mechanisms are robust, practical, and can be effectively implemented.",
    "**Benefits outweigh costs**: The positive impacts (social, economic, environmental) are substantial and justify any associated costs or trade-offs.",
    "**Status quo is unacceptable**: Inaction leads to continued or worsening harm.",
    "**Alignment with values**: The policy aligns with progressive values, justice, or long-term societal progress.",
    "**Mitigation of harms**: Safeguards and provisions are in place to address potential negative impacts on specific groups.",
    "**Successful precedents**: Similar policies have succeeded in comparable jurisdictions or historical contexts.",
    "**Addresses root causes**: The policy targets the fundamental issues, not just symptoms.",
)

GOVERNMENT_PREEMPTIONS = (
    "Our implementation mechanisms are robust, have been successfully tested in pilot programs/similar contexts, and account for potential challenges.",
    "Safeguards are explicitly designed to protect vulnerable populations, and any disproportionate impact is minimal compared to the overarching benefits delivered.",
    "We've thoroughly considered alternatives; they either address symptoms, have failed in practice, or are insufficient in scale and urgency.",
    "Any perceived limitation on rights is proportionate and justified by the magnitude of the collective welfare gains and addresses a clear, demonstrable societal harm.",
    "The long-term societal and economic benefits far outweigh the initial investment or administrative adjustments, which are manageable and yield high returns.",
    "The problem's severity is evidenced by [mention specific stats/trends/examples]; denying its scale is to ignore reality.",
    "Our policy design anticipates and provides concrete mitigations for potential unintended consequences, ensuring net positive outcomes.",
    "This policy fosters responsibility and empowers individuals/entities, rather than creating dependency.",
)

OPPOSITION_COUNTERS = (
    "The problems cited are either overstated, can be addressed through less intrusive means, or are not causally linked to the status quo.",
    "Their proposed implementation lacks crucial specific details, ignores practical realities, or relies on untested assumptions, making success highly improbable.",
    "The costs, both direct (financial) and indirect (e.g., stifled innovation, erosion of liberty), are severely underestimated and will far outweigh any theoretical benefits.",
    "While the status quo has issues, this specific solution is a disproportionate, harmful, or ineffective response that exacerbates existing problems or creates new ones.",
    "The policy fundamentally misinterprets or undermines societal values, leading to a path that degrades rather than strengthens long-term societal well-being.",
    'Their "safeguards" are insufficient, unenforceable, or merely token gestures, leaving vulnerable populations exposed to significant harm.',
    "Comparative examples often fail to account for critical contextual differences, making their claimed successes irrelevant or misleading for our specific situation.",
    "The policy focuses on symptoms or creates new problems, rather than addressing the true root causes, leading to a temporary or false solution.",
)


# =============================================================================
# EVIDENCE BANK
# =============================================================================

GENERAL_EVIDENCE_SOURCES = (
    "Empirical studies, academic research, and peer-reviewed journals on policy effectiveness.",
    "Comparative policy analysis from similar jurisdictions, historical precedents, and case studies (successes and failures).",
    "Economic impact assessments, cost-benefit analyses, market data, and financial reports.",
    "Stakeholder impact assessments, public opinion surveys, anecdotal evidence (used carefully for illustration).",
    "Expert opinions, reports from relevant NGOs, think tanks, and government statistics.",
    "Ethical frameworks, philosophical arguments, and legal precedents (for value-based or legal motions).",
    "Scientific consensus reports, climate models, and epidemiological data (for environmental/health motions).",
    "International treaties, conventions, and practices (for international relations motions).",
)

FAMILY_EXAMPLES: dict[str, tuple[str, ...]] = {
    "prohibition": (
        "Successful bans: Asbestos, lead paint, CFCs and their environmental impact.",
        "Failed prohibitions: Alcohol Prohibition (US), certain aspects of the 'War on Drugs' and their social/economic consequences.",
        "Partial bans/restrictions: Smoking restrictions in public places, plastic bag bans in various cities/countries.",
    ),
    "economic": (
        "Carbon taxes (e.g., British Columbia, Nordic countries) and their environmental/economic effects.",
        "Sin taxes (e.g., tobacco, alcohol, sugar) and their public health impacts.",
        "Universal Basic Income (UBI) trials (e.g., Finland, Stockton, California) and their social/economic outcomes.",
        "Wealth taxes (e.g., France, Switzerland) and their effects on inequality and capital flight.",
    ),
    "regulation": (
        "GDPR implementation in the EU and its impact on data privacy and tech companies.",
        "Automotive safety regulations (e.g., seatbelts, airbags) and their effect on fatality rates.",
        "Financial regulations (e.g., Dodd-Frank Act) and their role in preventing crises.",
    ),
    "liberalization": (
        "Cannabis legalization in Canada or certain US states: economic, social, and public health impacts.",
        "Deregulation of industries (e.g., airlines, telecommunications) and effects on competition/consumer prices.",
        "Expanded free speech rights vs. hate speech laws in different jurisdictions.",
    ),
    "technology": (
        "Section 230 in the US and platform liability debates.",
        "Australia's News Media Bargaining Code and its impact on tech giants and local news.",
        "Germany's NetzDG law on online hate speech.",
        "Concerns about AI bias in facial recognition or hiring algorithms (e.g., Amazon's HR tool).",
        "The development and regulation of autonomous vehicles.",
    ),
    "environmental": (
        "Paris Agreement targets and national climate action plans.",
        "Renewable energy transitions in Germany (Energiewende) or Denmark.",
        "Conservation efforts (e.g., rewilding projects, marine protected areas) and their ecological/economic impact.",
        "Impact of specific industries (e.g., fossil fuels, fashion) on the environment.",
    ),
    "education": (
        "PISA/TIMSS scores, graduation rates, and other educational outcome metrics for different systems.",
        "Pedagogical research on teaching methods and learning environments (e.g., blended learning, Montessori).",
        "Funding models and their impact on educational equity and access.",
        "Case studies of education reforms in different countries or regions (e.g., Finland's system, Singapore's emphasis on STEM).",
    ),
    "international": (
        "UN peacekeeping missions (successes and failures).",
        "Economic sanctions (e.g., against Russia, Iran) and their effectiveness/impact.",
        "International aid programs (e.g., WHO, World Bank) and their long-term effects.",
        "Case studies of diplomatic negotiations or international conflicts.",
    ),
}

HOUSING_EXAMPLES = (
    "Rent control policies and their effect on housing supply/affordability (e.g., Berlin, NYC).",
    "Homelessness solutions: 'Housing First' initiatives (e.g., Utah) vs. traditional shelter models.",
    "Zoning laws and their impact on urban development and housing costs.",
)

FALLBACK_EXAMPLES = (
    "General policy implementations in comparable jurisdictions (identify both successes and failures).",
    "Case studies of similar social movements or reforms from history.",
    "Examples illustrating stakeholder impact (positive and negative) from related policies or events.",
)

QUALITY_CHECK = """✓ Motion-specific arguments that cannot be transplanted to other debates
✓ Role-appropriate strategic positioning and burden fulfillment
✓ Concrete, contextual examples tied directly to motion subject matter
✓ Proactive engagement with likely opposition arguments
✓ Clear prioritization of strongest arguments for this specific round"""


# =============================================================================
# MOTION ANALYSIS
# =============================================================================

INFLECTIONS = r"(?:s|es|d|ed|ing|ned|ning)?"


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern:
    # Two-letter keywords ("ai", "un") must match exactly
    suffix = "" if len(keyword) <= 2 else INFLECTIONS
    return re.compile(rf"\b{re.escape(keyword)}{suffix}\b")


def mentions(text: str, keywords) -> bool:
    """True if any keyword appears in lowercased text as a whole word, allowing simple inflections."""
    return any(_keyword_pattern(keyword).search(text) for keyword in keywords)


@dataclass
class MotionAnalysis:
    types: list[str]
    stakeholders: list[str]
    tensions: list[str]
    context: str


def motion_families(motion_lower: str) -> list[str]:
    families = [family for family, keywords in MOTION_KEYWORDS.items() if mentions(motion_lower, keywords)]
    if not families or "this house would" in motion_lower or mentions(motion_lower, ("thw",)):
        families.append("policy")
    return families


def identify_stakeholders(motion_lower: str) -> list[str]:
    stakeholders = ["Government/State", "Citizens/Public"]
    for keywords, groups in STAKEHOLDER_RULES:
        if mentions(motion_lower, keywords):
            stakeholders.extend(g for g in groups if g not in stakeholders)
    return stakeholders


def identify_tensions(motion_lower: str, families: list[str]) -> list[str]:
    tensions: list[str] = []

    def add(items):
        tensions.extend(t for t in items if t not in tensions)

    for family in families:
        add(FAMILY_TENSIONS.get(family, ()))

    if len(tensions) < 2 or "policy" in families:
        add(GENERAL_TENSIONS)

    for keywords, tension in KEYWORD_TENSIONS:
        if mentions(motion_lower, keywords):
            add((tension,))

    return tensions


def implementation_context(families: list[str]) -> str:
    return next(
        (IMPLEMENTATION_CONTEXTS[f] for f in families if f in IMPLEMENTATION_CONTEXTS),
        IMPLEMENTATION_CONTEXTS["policy"],
    )


def analyze_motion(motion: str) -> MotionAnalysis:
    motion_lower = motion.lower()
    families = motion_families(motion_lower)
    return MotionAnalysis(
        types=families,
        stakeholders=identify_stakeholders(motion_lower),
        tensions=identify_tensions(motion_lower, families),
        context=implementation_context(families),
    )


# =============================================================================
# SECTION WRITERS
# =============================================================================

def case_theory(government: bool, analysis: MotionAnalysis) -> str:
    theories = next(
        (pair for family, pair in CASE_THEORIES if family in analysis.types),
        DEFAULT_CASE_THEORY,
    )
    return theories[0] if government else theories[1]


def stakeholder_evidence(stakeholder: str, government: bool) -> str:
    gov, opp = STAKEHOLDER_EVIDENCE.get(stakeholder, GENERIC_STAKEHOLDER_EVIDENCE)
    return gov if government else opp


def framework_arguments(government: bool, analysis: MotionAnalysis) -> list[dict[str, str]]:
    """Three template arguments: core problem, stakeholder impact, long-term or alternatives."""
    tensions = analysis.tensions
    stakeholders = analysis.stakeholders
    lead_tension = tensions[0] if tensions else "the core tension"
    stakeholder = stakeholders[1] if len(stakeholders) > 2 else "key populations"
    core_value = tensions[0].split(" vs ")[0] if tensions else "Individual Rights"

    if government:
        return [
            {
                "title": "Addressing the Root Cause of [Core Problem/Tension]",
                "claim": f"This policy directly and effectively mitigates the significant underlying problem identified by {lead_tension}.",
                "mechanism": "The proposed mechanisms (e.g., funding, regulation, ban) are specifically designed to target the systemic failures that create this problem, ensuring a durable solution.",
                "evidence": "[Cite studies, expert consensus, or successful comparable policies from your notes] that demonstrate the severity of the problem and the effectiveness of this type of solution.",
                "impact": "This leads to measurable improvements in [e.g., public health, economic stability, environmental quality], improving the welfare of countless individuals and preventing future crises.",
                "weighing": "The sheer **magnitude** and **irreversibility** of the problem necessitate this direct intervention; inaction guarantees continued harm.",
            },
            {
                "title": f"Delivering Tangible Benefits for {stakeholder}",
                "claim": f"This policy will bring substantial and equitable benefits to {stakeholder.lower()}, directly improving their well-being and opportunities.",
                "mechanism": "Specific provisions within the policy (e.g., funding streams, protective regulations, access initiatives) are precisely designed to uplift, protect, or empower this group.",
                "evidence": stakeholder_evidence(stakeholder, True),
                "impact": "This translates into improved quality of life, greater economic opportunity, enhanced safety, or strengthened fundamental rights for a crucial segment of society.",
                "weighing": f"The **direct and significant benefits** to {stakeholder.lower()} are morally compelling and justify the policy's implementation, showing its **scope** of positive reach.",
            },
            {
                "title": "Fostering Long-Term Stability & Systemic Progress",
                "claim": "Beyond immediate effects, this policy fosters long-term stability, systemic progress, and sets a positive precedent for future governance.",
                "mechanism": "The policy addresses systemic issues, promotes institutional reform, or incentivizes innovation that will yield compounding benefits over time.",
                "evidence": "[Cite long-term trend analysis, historical examples of successful systemic reforms, or future projections from your notes] demonstrating the enduring positive impact.",
                "impact": "This creates a more resilient society/economy/environment, enhances international standing, or fundamentally shifts the paradigm towards a more desirable future.",
                "weighing": "The **long-term transformational benefits** and the **precedential value** of this policy are crucial for shaping a better future and outweigh short-term adjustments.",
            },
        ]

    return [
        {
            "title": "Fundamental Flaws: Ineffectiveness & Unintended Consequences",
            "claim": "This policy is fundamentally flawed in its design and implementation, destined to fail its stated goals and create significant, unforeseen negative consequences.",
            "mechanism": "The proposed mechanisms are either impractical, insufficient to address the scale of the problem, or will be circumvented by market/social forces, leading to adverse reactions.",
            "evidence": "[Cite historical precedents or expert analyses from your notes] demonstrating how similar top-down approaches have failed, leading to black markets, resource waste, or public discontent.",
            "impact": "This will worsen the initial problem, divert crucial resources, erode public trust, and create new social/economic harms that did not exist before.",
            "weighing": "The **high probability of failure** and the **severity of unintended harms** mean this policy is actively counterproductive, making it worse than the status quo.",
        },
        {
            "title": f"Disproportionate Harms & Erosion of {core_value}",
            "claim": f"This policy will disproportionately burden and actively harm {stakeholder.lower()}, while simultaneously eroding core values like {core_value}.",
            "mechanism": f"The policy's implementation ignores the specific circumstances of {stakeholder.lower()} and actively undermines principles of {core_value} through overreach or unintended side effects.",
            "evidence": stakeholder_evidence(stakeholder, False),
            "impact": "This leads to reduced welfare, diminished autonomy, increased vulnerability, and sets a dangerous precedent for future infringements on fundamental liberties/economic freedoms.",
            "weighing": "The **severity of harm** to vulnerable populations combined with the **erosion of critical principles** means the policy is fundamentally unjust and indefensible, regardless of theoretical benefits.",
        },
        {
            "title": "Viable & Superior Alternatives / Slippery Slope",
            "claim": "Not only is this policy flawed, but viable and superior alternative solutions exist that address the problem more effectively and without the associated harms, or this policy represents a dangerous slippery slope.",
            "mechanism": "Alternatives (e.g., market-based solutions, targeted social programs, public awareness campaigns) could achieve the desired goals through less intrusive, more efficient, or ethically superior means.",
            "evidence": "[Cite examples of successful alternatives from other jurisdictions or historical contexts, or expert critiques] that propose better ways to solve the problem without the policy's drawbacks.",
            "impact": "Adopting this policy closes off more effective paths, wastes resources on a failing endeavor, and risks incrementally eroding freedoms or stability that society values.",
            "weighing": "The **availability of superior alternatives** (or the **danger of the slippery slope**) makes this policy unnecessary and ultimately harmful, demonstrating its **redundancy and risk**.",
        },
    ]


def argument_framework(government: bool, notes: str, analysis: MotionAnalysis) -> str:
    parts = [f"**Case Theory**: {case_theory(government, analysis)}\n\n"]
    for index, arg in enumerate(framework_arguments(government, analysis), start=1):
        parts.append(
            f"**Argument {index}: {arg['title']}**\n"
            f"* **Claim**: {arg['claim']}\n"
            f"* **Mechanism/Reasoning**: {arg['mechanism']}\n"
            f"* **Evidence/Examples**: {arg['evidence']}\n"
            f"* **Impact**: {arg['impact']}\n"
            f"* **Weighing**: {arg['weighing']}\n\n"
        )
    if len(notes.strip()) > NOTES_HINT_MIN_CHARS:
        parts.append(
            '*Consider how specific points from your "Original Notes" below can enrich these arguments '
            "with concrete details and examples.*"
        )
    return "".join(parts)


def _bullets(items) -> str:
    return "\n".join(f"* {item}" for item in items)


def anticipated_arguments(government: bool) -> str:
    if government:
        return (
            "**Opposition will likely argue:**\n" + _bullets(OPPOSITION_POINTS)
            + "\n\n**Preemptive responses (how to refute them):**\n" + _bullets(GOVERNMENT_PREEMPTIONS) + "\n"
        )
    return (
        "**Government will likely argue:**\n" + _bullets(GOVERNMENT_POINTS)
        + "\n\n**Counter-responses (how to refute them):**\n" + _bullets(OPPOSITION_COUNTERS) + "\n"
    )


def relevant_evidence(motion_lower: str, analysis: MotionAnalysis) -> str:
    examples: list[str] = []
    for family, items in FAMILY_EXAMPLES.items():
        if family in analysis.types:
            examples.extend(items)
    if mentions(motion_lower, ("housing", "homelessness")):
        examples.extend(HOUSING_EXAMPLES)
    if not examples:
        examples.extend(FALLBACK_EXAMPLES)

    return (
        "**Key Evidence Sources & Types (General):**\n"
        + _bullets(GENERAL_EVIDENCE_SOURCES)
        + "\n\n**Specific Examples/Areas to Research:**\n"
        + _bullets(examples)
    )


def strategic_reminders(strategy: RoleStrategy) -> str:
    reminders = list(strategy.opportunities)
    reminders.extend(r for r in GENERAL_REMINDERS if r not in reminders)
    return _bullets(reminders)


# =============================================================================
# ENTRY POINTS
# =============================================================================

def validate_structure_request(motion, role, notes) -> tuple[str, Role, str]:
    """
    Check the raw request fields.

    Raises:
        DebateInputError: With the message the client shows to the user
    """
    if not isinstance(motion, str) or not motion.strip():
        raise DebateInputError("Motion is required and must be a non-empty string.")

    parsed = parse_role(role) if isinstance(role, str) else None
    if parsed is None:
        raise DebateInputError(f"Invalid role provided. Accepted roles are: {ACCEPTED_ROLES}.")

    if not isinstance(notes, str):
        raise DebateInputError("Notes must be a string.")

    return motion, parsed, notes


def structure_notes(motion: str, role: str, notes: str) -> str:
    """
    Build the structured preparation brief.

    Args:
        motion: The motion being debated (non-empty)
        role: One of the eight BP role codes
        notes: The user's raw notes (may be empty)

    Returns:
        Markdown brief
    """
    motion, parsed, notes = validate_structure_request(motion, role, notes)

    preview = notes[:100] + ("..." if len(notes) > 100 else "")
    logger.info(f"Structuring notes for {parsed.value}: motion='{motion}', notes='{preview}'")

    analysis = analyze_motion(motion)
    strategy = ROLE_STRATEGIES[parsed]
    government = is_government(parsed.value)
    families = ", ".join(family.capitalize() for family in analysis.types)

    return f"""STRATEGIC PREPARATION NOTES
---
### Motion: {motion}
### Role: {role_name(parsed.value)} ({TEAM_NAMES[ROLE_TEAMS[parsed]]})
### Strategic Position: {strategy.position}

---
### MOTION ANALYSIS
* **Type(s)**: {families}
* **Key Stakeholders**: {", ".join(analysis.stakeholders)}
* **Core Tensions**: {", ".join(analysis.tensions)}
* **Implementation Context**: {analysis.context}

---
### ROLE-SPECIFIC STRATEGY
* **Primary Burdens**: {", ".join(strategy.burdens)}
* **Strategic Opportunities**: {", ".join(strategy.opportunities)}
* **Key Clashes to Engage**: {", ".join(strategy.clashes)}

---
### ARGUMENT FRAMEWORK
{argument_framework(government, notes, analysis)}

---
### ANTICIPATED OPPOSITION
{anticipated_arguments(government)}

---
### EVIDENCE AND EXAMPLES
{relevant_evidence(motion.lower(), analysis)}

---
### STRATEGIC REMINDERS
{strategic_reminders(strategy)}

---
### YOUR ORIGINAL NOTES
{notes}

---
### QUALITY CHECK
{QUALITY_CHECK}
"""
