"""
Prompt registry module.

Named LangChain chat templates with optional Langfuse version mirroring.

Dependencies: langfuse, langchain_core, pydantic
System role: Prompt management
"""

from ragdesk.observability.prompt_registry.defaults import (
    DEFAULT_PROMPTS,
    GENERAL_CHAT,
    RETRIEVAL_QUERY,
    RETRIEVAL_SUMMARY,
)
from ragdesk.observability.prompt_registry.models import ModelConfig, PromptSpec
from ragdesk.observability.prompt_registry.registry import PromptRegistry

__all__ = [
    "PromptRegistry",
    "PromptSpec",
    "ModelConfig",
    "DEFAULT_PROMPTS",
    "GENERAL_CHAT",
    "RETRIEVAL_QUERY",
    "RETRIEVAL_SUMMARY",
]
