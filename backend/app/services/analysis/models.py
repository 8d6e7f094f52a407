"""
Analysis Models — Data structures passed between the analysis stages.

These dataclasses define the contract between analysis components:
- SpeechSignals: What the lexical extractor reads off one speech
- ArgumentSignal: One classified argument (what the classifier produces)
- Bench: Everything one side of the room has said, ready for clash analysis
- ClashPoint: A point of direct disagreement between the benches
- TeamScore: Matter/Manner/Method for one team
"""

from dataclasses import dataclass, field

from app.models.roles import Side


@dataclass(frozen=True)
class SpeechSignals:
    """
    Shallow lexical read of a single speech.

    Every score is fixed-point: a flag present maps to a high constant and
    absent maps to a low one. Nothing here scales with how often a keyword
    appears.
    """

    word_count: int
    has_structure: bool
    has_evidence: bool
    has_weighing: bool
    has_rebuttals: bool
    argument_count: int

    structure_score: float
    evidence_score: float
    impact_score: float
    clash_score: float

    quality_score: float
    """Mean of the four scores, capped at 10"""


@dataclass
class ArgumentSignal:
    """
    One argument found in a speech or in prep notes.

    The classifier emits at most one signal per argument type per text.
    """

    type: str
    """economic | rights | social | practical | framework | mechanism | stakeholder | impact"""

    source_role: str
    """Role code of the speaker (or the note-taker)"""

    title: str
    claim: str
    mechanism: str
    evidence: str
    impact: str
    weighing: str

    strength: int = 5
    """0-10, computed on the whole text the signal came from"""


@dataclass
class Bench:
    """
    One side of the room as seen by the clash identifier.

    `tags` are the mechanism, stakeholder and impact sub-types mentioned
    anywhere in the bench's material. They decide which canned clash a slot
    turns into; `signals` decide whether the slot is live and who leads it.
    """

    side: Side
    signals: list[ArgumentSignal] = field(default_factory=list)
    tags: set[str] = field(default_factory=set)

    def strength_for(self, types: frozenset[str]) -> int:
        return sum(s.strength for s in self.signals if s.type in types)

    def has_any(self, types: frozenset[str]) -> bool:
        return any(s.type in types for s in self.signals)


@dataclass
class ClashPoint:
    """A point of direct disagreement between Government and Opposition."""

    id: str
    """Slot identifier: framework | mechanism | impact"""

    title: str
    description: str
    gov_position: str
    opp_position: str
    analysis: str
    current_leader: Side
    reasoning: str

    weight: int
    """Strategic importance, always within [1, 10]"""


@dataclass
class TeamScore:
    """Matter/Manner/Method for one team. `total` is always their sum."""

    matter: float = 0.0
    manner: float = 0.0
    method: float = 0.0

    @property
    def total(self) -> float:
        return self.matter + self.manner + self.method
