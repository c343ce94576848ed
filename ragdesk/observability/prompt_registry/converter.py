"""
LangChain to Langfuse prompt converter.

Converts ChatPromptTemplate messages to Langfuse chat messages and rewrites
variable syntax.

Dependencies: langchain_core.prompts
System role: Template format conversion for the prompt mirror
"""

import re
from typing import TypedDict

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.prompts.chat import (
    AIMessagePromptTemplate,
    HumanMessagePromptTemplate,
    SystemMessagePromptTemplate,
)

# Single-brace placeholder, not part of an escaped ``{{`` / ``}}`` pair
_VARIABLE_PATTERN = re.compile(r"(?<!\{)\{([A-Za-z_][A-Za-z0-9_]*)\}(?!\})")

_ROLES: tuple[tuple[type, str], ...] = (
    (SystemMessagePromptTemplate, "system"),
    (HumanMessagePromptTemplate, "user"),
    (AIMessagePromptTemplate, "assistant"),
)


class LangfuseMessage(TypedDict):
    """Langfuse chat message format."""

    role: str
    content: str


def convert_variables(content: str) -> str:
    """
    Convert LangChain ``{variable}`` syntax to Langfuse ``{{variable}}``.

    Args:
        content: Template string with LangChain variables

    Returns:
        str: Template string with Langfuse variables
    """
    return _VARIABLE_PATTERN.sub(r"{{\1}}", content)


def convert_chat_template(template: ChatPromptTemplate) -> list[LangfuseMessage]:
    """
    Convert a ChatPromptTemplate to Langfuse chat messages.

    Args:
        template: LangChain chat template

    Returns:
        list[LangfuseMessage]: Langfuse-formatted messages

    Raises:
        ValueError: If the template holds a message type with no Langfuse role
    """
    messages: list[LangfuseMessage] = []
    for message in template.messages:
        role = next((name for cls, name in _ROLES if isinstance(message, cls)), None)
        if role is None:
            raise ValueError(f"Unsupported message type: {type(message).__name__}")
        content = str(message.prompt.template)
        messages.append(LangfuseMessage(role=role, content=convert_variables(content)))
    return messages
