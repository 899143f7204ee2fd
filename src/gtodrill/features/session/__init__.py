"""Session feature: service layer, schemas, and API router."""

from .router import create_session_router
from .schemas import (
    ActionOptionPayload,
    AnswerResult,
    FeedbackPayload,
    HistoryEntryPayload,
    SpotPayload,
    SpotResponse,
    SummaryPayload,
)
from .service import SessionManager

__all__ = [
    "ActionOptionPayload",
    "AnswerResult",
    "FeedbackPayload",
    "HistoryEntryPayload",
    "SessionManager",
    "SpotPayload",
    "SpotResponse",
    "SummaryPayload",
    "create_session_router",
]
