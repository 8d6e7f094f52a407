"""
Generation Module — Template text for every role and every stage of a round.

COMPONENTS:
- SpeechGenerator: role-specific AI speeches built on the user's arguments
- EngagedSpeechGenerator: speeches that quote and rebut earlier speeches
- POIGenerator: Points of Information during the user's speech
- PrepNotesProcessor: raw prep notes → structured BP case
- structure_notes: motion analysis + role strategy as a markdown brief
- adjudication_feedback: the written half of the adjudication card

USAGE:
    from app.services.generation import generate_speech, structure_notes
"""

from app.services.generation.speeches import SpeechGenerator, generate_speech
from app.services.generation.engagement import EngagedSpeechGenerator, generate_engaged_speech
from app.services.generation.poi import POIGenerator, generate_poi
from app.services.generation.prep_notes import PrepNotesProcessor, process_prep_notes
from app.services.generation.structure_notes import structure_notes, validate_structure_request
from app.services.generation.adjudication_feedback import list_improvements, write_feedback

__all__ = [
    "SpeechGenerator",
    "generate_speech",
    "EngagedSpeechGenerator",
    "generate_engaged_speech",
    "POIGenerator",
    "generate_poi",
    "PrepNotesProcessor",
    "process_prep_notes",
    "structure_notes",
    "validate_structure_request",
    "list_improvements",
    "write_feedback",
]
