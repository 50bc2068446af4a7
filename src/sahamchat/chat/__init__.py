"""Conversational session engine.

Module structure (each module hides a design decision):
- models.py: Message and SessionState (what a conversation looks like)
- store.py: SessionStateStore (which mutations are allowed)
- persistence.py: HistoryPersistence (how the log survives restarts)
- session.py: ChatSession (request lifecycle and cancellation)
"""

from .config import STORAGE_KEY
from .models import Message, Role, SessionState
from .persistence import HistoryPersistence, decode_history, encode_history
from .session import ChatSession, describe_error
from .store import SessionStateStore

__all__ = [
    "ChatSession",
    "HistoryPersistence",
    "Message",
    "Role",
    "STORAGE_KEY",
    "SessionState",
    "SessionStateStore",
    "decode_history",
    "describe_error",
    "encode_history",
]
