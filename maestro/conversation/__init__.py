"""Conversation persistence and active-session management.

- ConversationRepository: CRUD over the stored conversation collection
- ActiveSessionSet: bounded recency set that reports evictions
- SessionReconciler: resolves the current conversation and drives the display
"""

from maestro.conversation.active_sessions import (
    ActiveSessionSet,
    TouchResult,
    apply_touch,
    normalize_members,
)
from maestro.conversation.reconciler import SessionReconciler
from maestro.conversation.repository import ConversationRepository, most_recent

__all__ = [
    "ActiveSessionSet",
    "ConversationRepository",
    "SessionReconciler",
    "TouchResult",
    "apply_touch",
    "most_recent",
    "normalize_members",
]
