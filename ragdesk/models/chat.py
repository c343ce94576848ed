"""
Conversation models.

Dependencies: pydantic
System role: Chat history structures
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ConversationRole(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    """Single message in a conversation. Order is the position in the history."""

    model_config = ConfigDict(frozen=True)

    role: ConversationRole = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")
