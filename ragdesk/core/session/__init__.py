"""Conversation history."""

from ragdesk.core.session.conversation_store import ConversationStore, group_rounds

__all__ = ["ConversationStore", "group_rounds"]
