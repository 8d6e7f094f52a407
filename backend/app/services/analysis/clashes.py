"""
Clash Identifier.

WHAT THIS DOES:
Lines the Government bench up against the Opposition bench and names the
points where they directly disagree. A BP round is judged on these clashes,
so they drive both the adjudication (who won each one) and the post-round
review (who is currently ahead on each one).

THREE SLOTS, FIXED ORDER:
1. Framework   — what the motion means and how to judge it.
                 Chosen by the motion wording (ban / tax / mandate / other).
2. Mechanism   — will the policy actually work?
                 Chosen by the mechanism sub-types either bench raised.
3. Impact      — who wins and who loses?
                 Chosen by the stakeholder/impact sub-types either bench raised.

WHO LEADS:
Sum the strength of each bench's signals relevant to the slot. Government
leads only with a strictly higher sum; a tie goes to Opposition. Government
carries the burden of proof, so an even clash is not one it has won.

SKIPPING:
With require_signals=True a slot that neither bench said anything relevant
to is dropped, so callers can get 0-3 clashes. The adjudicator passes
require_signals=False and always gets all three.

CATALOGUES:
The adjudication card and the post-round review word their clashes
differently (the review explains who is ahead, the card explains what the
clash is about), so the canned text lives in two catalogues that share the
same selection rules.

USAGE:
    identifier = ClashIdentifier()
    clashes = identifier.identify(motion, government_bench, opposition_bench)
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from app.models.roles import Side
from app.services.analysis.models import ArgumentSignal, Bench, ClashPoint
from app.services.analysis.signals import extract_tags

logger = logging.getLogger(__name__)

MAX_CLASHES = 3


# =============================================================================
# CATALOGUE STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class ClashTemplate:
    """Canned wording for one clash."""

    title: str
    description: str
    weight: int
    gov_position: str
    opp_position: str
    analysis: str
    reasoning: str = ""
    gov_lead_reasoning: str | None = None
    opp_lead_reasoning: str | None = None

    def reasoning_for(self, leader: Side) -> str:
        if leader is Side.GOVERNMENT and self.gov_lead_reasoning:
            return self.gov_lead_reasoning
        if leader is Side.OPPOSITION and self.opp_lead_reasoning:
            return self.opp_lead_reasoning
        return self.reasoning


@dataclass(frozen=True)
class ClashSlot:
    """
    One of the three clash slots.

    `options` are checked in order; the first whose keys match wins,
    otherwise `default`. For the framework slot keys are motion keywords,
    for the others they are bench tags.
    """

    id: str
    relevant_types: frozenset[str]
    options: tuple[tuple[tuple[str, ...], ClashTemplate], ...]
    default: ClashTemplate
    match_motion: bool = False

    def select(self, motion: str, tags: set[str]) -> ClashTemplate:
        motion_lower = motion.lower()
        for keys, template in self.options:
            if self.match_motion:
                if any(key in motion_lower for key in keys):
                    return template
            elif any(key in tags for key in keys):
                return template
        return self.default


FRAMEWORK_TYPES = frozenset({"framework"})
MECHANISM_TYPES = frozenset({"mechanism", "practical"})
IMPACT_TYPES = frozenset({"impact", "stakeholder"})


# =============================================================================
# ADJUDICATION CATALOGUE
# =============================================================================

ADJUDICATION_SLOTS: tuple[ClashSlot, ...] = (
    ClashSlot(
        id="framework",
        relevant_types=FRAMEWORK_TYPES,
        match_motion=True,
        options=(
            (("ban", "prohibit"), ClashTemplate(
                title="Prohibition Scope and Justification",
                description=(
                    "Fundamental disagreement over whether prohibition is the appropriate policy "
                    "response and how broadly it should be defined"
                ),
                weight=9,
                reasoning=(
                    "Government argues prohibition is necessary and clearly definable; Opposition "
                    "challenges both the scope of prohibition and whether it's justified as a policy tool"
                ),
                gov_position="Prohibition is clearly definable, enforceable, and necessary to prevent significant harms",
                opp_position=(
                    "Prohibition is either too broad/vague to implement fairly or unjustified given "
                    "less restrictive alternatives"
                ),
                analysis="This clash is central because it determines whether the policy can even be implemented as intended",
            )),
            (("tax", "subsidize"), ClashTemplate(
                title="Economic Intervention Philosophy",
                description="Core disagreement over whether market intervention improves or distorts economic outcomes",
                weight=8,
                reasoning=(
                    "Government argues market failures justify intervention; Opposition argues "
                    "intervention creates worse distortions"
                ),
                gov_position="Market failures require government intervention to achieve optimal outcomes",
                opp_position="Government intervention distorts markets and creates worse outcomes than market solutions",
                analysis="This philosophical clash underlies all specific arguments about implementation and effects",
            )),
            (("require", "mandate"), ClashTemplate(
                title="Regulatory Authority and Individual Autonomy",
                description="Fundamental tension between collective regulation and individual choice",
                weight=8,
                reasoning=(
                    "Government argues collective action problems require mandates; Opposition argues "
                    "individual autonomy should be preserved"
                ),
                gov_position="Collective action problems justify regulatory mandates that override individual preferences",
                opp_position="Individual autonomy and choice should be preserved except in cases of direct harm to others",
                analysis="This clash determines the legitimacy of the entire policy approach",
            )),
        ),
        default=ClashTemplate(
            title="Policy Approach and State Role",
            description="Disagreement over whether this issue requires active government intervention",
            weight=7,
            reasoning=(
                "Government argues active intervention is necessary; Opposition argues current approaches "
                "are sufficient or intervention will backfire"
            ),
            gov_position="Active government intervention is necessary to address significant problems",
            opp_position=(
                "Current approaches are adequate or government intervention will create more problems "
                "than it solves"
            ),
            analysis="This clash establishes the fundamental justification for any policy change",
        ),
    ),
    ClashSlot(
        id="mechanism",
        relevant_types=MECHANISM_TYPES,
        options=(
            (("enforcement",), ClashTemplate(
                title="Implementation Feasibility and Enforcement",
                description="Direct disagreement over whether the policy can be effectively implemented and enforced",
                weight=8,
                reasoning=(
                    "Government claims implementation mechanisms are robust; Opposition argues enforcement "
                    "will fail or create perverse incentives"
                ),
                gov_position="Implementation mechanisms are well-designed, enforceable, and will achieve policy goals",
                opp_position=(
                    "Implementation will fail due to enforcement challenges, creating perverse incentives "
                    "and wasting resources"
                ),
                analysis="This clash is crucial because policy effectiveness depends entirely on successful implementation",
            )),
            (("incentives",), ClashTemplate(
                title="Behavioral Incentives and Unintended Consequences",
                description=(
                    "Disagreement over how the policy will actually change behavior and what secondary "
                    "effects will occur"
                ),
                weight=8,
                reasoning=(
                    "Government argues incentives will produce desired behavioral changes; Opposition "
                    "argues perverse incentives will undermine goals"
                ),
                gov_position="Policy creates proper incentives that will drive desired behavioral changes",
                opp_position="Policy creates perverse incentives that will produce opposite or harmful behavioral responses",
                analysis="This mechanism clash determines whether the policy will achieve its stated objectives",
            )),
            (("market_effects",), ClashTemplate(
                title="Market Dynamics and Economic Effects",
                description="Fundamental disagreement over how the policy will affect market functioning and economic outcomes",
                weight=7,
                reasoning=(
                    "Government argues policy corrects market failures; Opposition argues it distorts "
                    "efficient market operations"
                ),
                gov_position="Policy corrects market failures and improves overall economic efficiency",
                opp_position="Policy distorts market signals and reduces economic efficiency and innovation",
                analysis="This clash determines the economic consequences of the policy",
            )),
        ),
        default=ClashTemplate(
            title="Policy Effectiveness and Practical Outcomes",
            description="Core disagreement over whether the policy will work as intended in practice",
            weight=7,
            reasoning=(
                "Government argues policy mechanisms will achieve stated goals; Opposition argues practical "
                "implementation will fail"
            ),
            gov_position="Policy mechanisms are sound and will achieve the intended outcomes",
            opp_position="Policy will fail to achieve its goals due to practical implementation problems",
            analysis="This clash addresses the fundamental question of whether the policy will work",
        ),
    ),
    ClashSlot(
        id="impact",
        relevant_types=IMPACT_TYPES,
        options=(
            (("vulnerable_populations",), ClashTemplate(
                title="Vulnerable Population Impact Analysis",
                description=(
                    "Direct disagreement over whether the policy helps or harms the most vulnerable "
                    "members of society"
                ),
                weight=9,
                reasoning=(
                    "Government argues policy protects vulnerable populations; Opposition argues it "
                    "disproportionately harms them"
                ),
                gov_position=(
                    "Policy provides crucial protections and benefits for vulnerable populations who "
                    "cannot protect themselves"
                ),
                opp_position=(
                    "Policy disproportionately burdens vulnerable populations while benefiting those "
                    "who are already privileged"
                ),
                analysis=(
                    "This clash is critical because vulnerable population impacts often determine the "
                    "moral legitimacy of policies"
                ),
            )),
            (("rights_impacts",), ClashTemplate(
                title="Individual Rights vs Collective Benefits",
                description="Fundamental tension between protecting individual rights and achieving collective goods",
                weight=8,
                reasoning=(
                    "Government argues collective benefits justify individual restrictions; Opposition "
                    "argues individual rights cannot be sacrificed"
                ),
                gov_position="Collective benefits and harm prevention justify reasonable restrictions on individual rights",
                opp_position="Individual rights are fundamental and cannot be sacrificed for speculative collective benefits",
                analysis=(
                    "This clash represents a core philosophical disagreement about the relationship "
                    "between individual and collective interests"
                ),
            )),
            (("future_generations",), ClashTemplate(
                title="Intergenerational Justice and Long-term Consequences",
                description="Disagreement over how to weigh present costs against future benefits or harms",
                weight=7,
                reasoning=(
                    "Government argues policy protects future generations; Opposition argues it imposes "
                    "unjustified costs on current generations"
                ),
                gov_position="Policy is necessary to protect future generations from serious long-term harms",
                opp_position=(
                    "Policy imposes certain present costs for speculative future benefits, unfairly "
                    "burdening current generations"
                ),
                analysis=(
                    "This clash involves complex questions about intergenerational responsibility and "
                    "temporal weighing"
                ),
            )),
        ),
        default=ClashTemplate(
            title="Cost-Benefit Analysis and Proportionality",
            description="Disagreement over whether the policy's benefits justify its costs and restrictions",
            weight=7,
            reasoning="Government argues benefits clearly outweigh costs; Opposition argues costs exceed benefits",
            gov_position="Policy benefits clearly outweigh the costs and any negative side effects",
            opp_position="Policy costs and negative consequences outweigh any theoretical benefits",
            analysis="This clash requires weighing competing values and assessing proportionality of policy responses",
        ),
    ),
)


# =============================================================================
# REVIEW CATALOGUE (post-round feedback)
# =============================================================================

FRAMEWORK_GOV_LEAD = "Government has provided clearer definitional framework with stronger justification"
FRAMEWORK_OPP_LEAD = "Opposition has successfully challenged government framework and provided compelling alternatives"
IMPACT_GOV_LEAD = "Government has provided compelling evidence of positive impacts with concrete examples"
IMPACT_OPP_LEAD = "Opposition has demonstrated significant harms that outweigh claimed benefits"


def _review_framework(title: str, description: str, gov_position: str, opp_position: str) -> ClashTemplate:
    return ClashTemplate(
        title=title,
        description=description,
        weight=9,
        gov_position=gov_position,
        opp_position=opp_position,
        analysis=(
            "This clash is central to the debate because it determines the fundamental approach to "
            f"the motion. {description.lower()}."
        ),
        gov_lead_reasoning=FRAMEWORK_GOV_LEAD,
        opp_lead_reasoning=FRAMEWORK_OPP_LEAD,
    )


def _review_impact(title: str, description: str, gov_position: str, opp_position: str) -> ClashTemplate:
    return ClashTemplate(
        title=title,
        description=description,
        weight=8,
        gov_position=gov_position,
        opp_position=opp_position,
        analysis=(
            "This clash is significant because it addresses the real-world consequences of the "
            f"policy. {description.lower()}."
        ),
        gov_lead_reasoning=IMPACT_GOV_LEAD,
        opp_lead_reasoning=IMPACT_OPP_LEAD,
    )


REVIEW_SLOTS: tuple[ClashSlot, ...] = (
    ClashSlot(
        id="framework",
        relevant_types=FRAMEWORK_TYPES,
        match_motion=True,
        options=(
            (("ban", "prohibit"), _review_framework(
                "Prohibition Scope and Justification",
                "Core disagreement over whether prohibition is justified and how it should be defined",
                "Prohibition is necessary, clearly definable, and enforceable",
                "Prohibition is either unjustified, too broad, or unenforceable",
            )),
            (("tax", "subsidize"), _review_framework(
                "Economic Intervention Philosophy",
                "Fundamental disagreement over the role of government in market intervention",
                "Market failures justify targeted government intervention",
                "Market mechanisms are superior to government intervention",
            )),
            (("require", "mandate"), _review_framework(
                "Regulatory Authority vs Individual Autonomy",
                "Core tension between collective regulation and individual choice",
                "Collective action problems justify regulatory mandates",
                "Individual autonomy should be preserved except for direct harm prevention",
            )),
        ),
        default=_review_framework(
            "Framework and Definitional Approach",
            "Fundamental disagreement over how to understand and approach this motion",
            "Government framework is appropriate and well-defined",
            "Government framework is flawed or inappropriate",
        ),
    ),
    ClashSlot(
        id="mechanism",
        relevant_types=MECHANISM_TYPES,
        options=(),
        default=ClashTemplate(
            title="Implementation Feasibility and Effectiveness",
            description="Direct disagreement over whether the policy can be effectively implemented",
            weight=8,
            gov_position="Implementation mechanisms are robust, tested, and will achieve policy goals",
            opp_position="Implementation will fail due to practical challenges, creating unintended consequences",
            analysis=(
                "This clash is crucial because policy effectiveness depends entirely on successful "
                "implementation. The debate centers on whether the proposed mechanisms will work in practice."
            ),
            gov_lead_reasoning="Government has provided detailed implementation plans with evidence of feasibility",
            opp_lead_reasoning="Opposition has identified critical implementation flaws that government cannot address",
        ),
    ),
    ClashSlot(
        id="impact",
        relevant_types=IMPACT_TYPES,
        options=(
            (("vulnerable_populations",), _review_impact(
                "Vulnerable Population Impact",
                "Direct disagreement over whether the policy helps or harms vulnerable populations",
                "Policy provides crucial protections for vulnerable populations",
                "Policy disproportionately burdens those least able to bear the costs",
            )),
            (("rights_impacts",), _review_impact(
                "Individual Rights vs Collective Benefits",
                "Fundamental tension between individual rights and collective welfare",
                "Collective benefits justify reasonable restrictions on individual rights",
                "Individual rights cannot be sacrificed for speculative collective benefits",
            )),
            (("economic_impacts",), _review_impact(
                "Economic Impact and Cost-Benefit Analysis",
                "Disagreement over the economic consequences and whether benefits justify costs",
                "Economic benefits clearly outweigh implementation costs",
                "Economic costs and negative consequences exceed any theoretical benefits",
            )),
        ),
        default=_review_impact(
            "Stakeholder Impact Analysis",
            "Disagreement over who benefits and who is harmed by this policy",
            "Policy provides significant benefits to key stakeholders",
            "Policy disproportionately harms vulnerable populations",
        ),
    ),
)


# =============================================================================
# IDENTIFIER
# =============================================================================

class ClashIdentifier:
    """
    Selects up to three clashes from a catalogue of slots.

    Pure: the same motion and benches always produce the same clashes.
    """

    def __init__(self, slots: tuple[ClashSlot, ...] = ADJUDICATION_SLOTS):
        self.slots = slots

    def identify(
        self,
        motion: str,
        government: Bench,
        opposition: Bench,
        require_signals: bool = True,
    ) -> list[ClashPoint]:
        """
        Identify the clashes between two benches.

        Args:
            motion: The motion text (drives the framework slot)
            government: Government bench material
            opposition: Opposition bench material
            require_signals: Skip slots no bench said anything relevant to

        Returns:
            0-3 ClashPoints in slot order (always 3 when require_signals=False)
        """
        motion = motion or ""
        tags = government.tags | opposition.tags
        clashes: list[ClashPoint] = []

        for slot in self.slots:
            if require_signals and not (
                government.has_any(slot.relevant_types) or opposition.has_any(slot.relevant_types)
            ):
                logger.debug(f"Skipping {slot.id} clash: no relevant arguments on either bench")
                continue

            template = slot.select(motion, tags)
            gov_strength = government.strength_for(slot.relevant_types)
            opp_strength = opposition.strength_for(slot.relevant_types)

            # Strict comparison: Government must out-argue Opposition to lead
            leader = Side.GOVERNMENT if gov_strength > opp_strength else Side.OPPOSITION

            clashes.append(ClashPoint(
                id=slot.id,
                title=template.title,
                description=template.description,
                gov_position=template.gov_position,
                opp_position=template.opp_position,
                analysis=template.analysis,
                current_leader=leader,
                reasoning=template.reasoning_for(leader),
                weight=max(1, min(10, template.weight)),
            ))

        logger.info(f"Identified {len(clashes)} clashes: {[c.title for c in clashes]}")
        return clashes[:MAX_CLASHES]


def build_bench(side: Side, texts: Iterable[str], signals: Iterable[ArgumentSignal]) -> Bench:
    """Collect one bench's signals and the sub-type tags mentioned in its texts."""
    tags: set[str] = set()
    for text in texts:
        tags |= extract_tags(text)
    return Bench(side=side, signals=list(signals), tags=tags)


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def identify_clashes(
    motion: str,
    government: Bench,
    opposition: Bench,
    require_signals: bool = True,
    slots: tuple[ClashSlot, ...] = ADJUDICATION_SLOTS,
) -> list[ClashPoint]:
    """
    Convenience function to identify clashes between two benches.

    Example:
        clashes = identify_clashes("This House would ban zoos", gov_bench, opp_bench)
    """
    return ClashIdentifier(slots).identify(motion, government, opposition, require_signals)
