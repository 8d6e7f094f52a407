# Role catalogue and API schemas
from app.models.roles import Role, Side, Team, parse_role
from app.models.schemas import (
    AdjudicationResponse,
    ComprehensiveFeedbackResponse,
    Speech,
    StructuredCase,
)

__all__ = [
    "Role",
    "Side",
    "Team",
    "parse_role",
    "Speech",
    "AdjudicationResponse",
    "ComprehensiveFeedbackResponse",
    "StructuredCase",
]
