"""
Sahamchat: the Saham Cerdas AI learning assistant.

A chat session engine with optimistic updates, rollback on failure,
cancellable completions and durable local history, plus a terminal widget
and command line on top of it.
"""

__version__ = "0.1.0"

from .chat import ChatSession, Message, Role, SessionState
from .llm import CompletionClient, CompletionError, create_llm_provider
from .memory import ChatHistoryStore, create_history_store

__all__ = [
    "ChatHistoryStore",
    "ChatSession",
    "CompletionClient",
    "CompletionError",
    "Message",
    "Role",
    "SessionState",
    "create_history_store",
    "create_llm_provider",
]
