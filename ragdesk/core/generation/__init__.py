"""Answer generation."""

from ragdesk.core.generation.chat_orchestrator import GenerationOrchestrator
from ragdesk.core.generation.prompts import (
    build_rag_prompt,
    escape_braces,
    format_history,
)

__all__ = ["GenerationOrchestrator", "build_rag_prompt", "escape_braces", "format_history"]
