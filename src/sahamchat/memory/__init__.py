"""Chat history storage module for sahamchat.

Provides the scoped key-value stores the session persists its log to.
"""

from .base import ChatHistoryStore
from .factory import create_history_store
from .file import JsonFileHistoryStore
from .in_memory import InMemoryHistoryStore

__all__ = [
    "ChatHistoryStore",
    "InMemoryHistoryStore",
    "JsonFileHistoryStore",
    "create_history_store",
]
