"""
Generation orchestrator.

Runs chat turns: records the user turn, optionally retrieves snippets,
renders the prompt, calls the chat model and records the answer.

Dependencies: langchain_core, ragdesk.core, ragdesk.observability
System role: Chat and RAG chat orchestration
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from langchain_core.messages import BaseMessage

from ragdesk.core.exceptions import ValidationError
from ragdesk.core.generation.prompts import build_rag_prompt, format_history
from ragdesk.core.providers.provider_registry import ProviderRegistry, ProviderSnapshot
from ragdesk.core.retrieval.retriever import RetrievalMode, RetrievalOrchestrator
from ragdesk.core.session.conversation_store import ConversationStore
from ragdesk.models.chat import ConversationTurn
from ragdesk.observability.correlation import set_correlation_id
from ragdesk.observability.log_utils import log_exception_with_context
from ragdesk.observability.prompt_registry import GENERAL_CHAT, PromptRegistry

logger = logging.getLogger(__name__)

MessageBuilder = Callable[[ProviderSnapshot, str], Awaitable[list[BaseMessage]]]


class GenerationOrchestrator:
    """
    Chat and RAG chat over per-session history.

    Per call: user turn recorded, snippets retrieved (RAG only), answer
    generated, assistant turn recorded, history truncated. When any step
    fails the user turn stays recorded with no answer and no truncation
    happens.
    """

    def __init__(
        self,
        conversation_store: ConversationStore,
        retriever: RetrievalOrchestrator,
        provider_registry: ProviderRegistry,
        prompt_registry: PromptRegistry,
        default_top_k: int = 4,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            conversation_store: Per-session history
            retriever: Snippet retrieval for RAG chat
            provider_registry: Source of the chat model gateway
            prompt_registry: Named prompts for plain chat
            default_top_k: Candidates fetched when rag_chat gets no top_k
        """
        self._store = conversation_store
        self._retriever = retriever
        self._providers = provider_registry
        self._prompts = prompt_registry
        self._default_top_k = default_top_k

    @staticmethod
    def _check_question(question: str) -> None:
        if not question or not question.strip():
            raise ValidationError("Question must not be empty", field="question")

    async def _run_turn(self, session_id: str, question: str, build_messages: MessageBuilder, method: str) -> str:
        self._check_question(question)
        async with self._store.lock(session_id):
            correlation_id = set_correlation_id()
            snapshot = self._providers.current()
            history = format_history(self._store.current_history(session_id))

            logger.info(f"{__name__}:{method} - Step 1: Recording user turn session_id={session_id}")
            self._store.append_user(session_id, question)

            try:
                messages = await build_messages(snapshot, history)
                logger.info(f"{__name__}:{method} - Step 3: Generating with model={snapshot.llm.model}")
                answer = await snapshot.llm.invoke(messages)
            except Exception as e:
                log_exception_with_context(
                    logger,
                    f"{__name__}:{method} - FAILED, user turn kept without answer",
                    e,
                    session_id=session_id,
                    correlation_id=correlation_id,
                    provider_version=snapshot.version,
                )
                raise

            self._store.append_assistant(session_id, answer)
            evicted = self._store.truncate(session_id)
            logger.info(f"{__name__}:{method} - Step 4: Answer recorded, evicted {evicted} turns")
            return answer

    async def chat(self, session_id: str, question: str) -> str:
        """
        Answer from conversation history alone.

        Args:
            session_id: Conversation identifier
            question: User question

        Returns:
            str: Model answer

        Raises:
            ValidationError: On an empty question or session id
            ExternalServiceError: When generation fails
        """
        async def build(snapshot: ProviderSnapshot, history: str) -> list[BaseMessage]:
            return self._prompts.render(GENERAL_CHAT, {"chat_history": history, "question": question})

        return await self._run_turn(session_id, question, build, "chat")

    async def rag_chat(self, session_id: str, question: str, top_k: int | None = None) -> str:
        """
        Answer from reranked retrieved snippets plus conversation history.

        Args:
            session_id: Conversation identifier
            question: User question
            top_k: Candidates to retrieve (default from settings)

        Returns:
            str: Model answer

        Raises:
            ValidationError: On invalid input or reranking disabled
            ExternalServiceError: When retrieval or generation fails
        """
        k = top_k if top_k is not None else self._default_top_k
        if k < 1:
            raise ValidationError("top_k must be at least 1", field="top_k", details={"top_k": k})
        if not self._retriever.rerank_available:
            raise ValidationError("RAG chat requires reranking, which is disabled", field="mode")
        self._retriever.check_rerank_ready()

        async def build(snapshot: ProviderSnapshot, history: str) -> list[BaseMessage]:
            logger.info(f"{__name__}:rag_chat - Step 2: Retrieving top_k={k}")
            snippets = await self._retriever.retrieve(question, k, mode=RetrievalMode.RERANKED, snapshot=snapshot)
            return build_rag_prompt(snippets).format_messages(chat_history=history, question=question)

        return await self._run_turn(session_id, question, build, "rag_chat")

    async def generate_with_prompt(self, name: str, variables: dict[str, Any]) -> str:
        """
        Render a named prompt and generate without touching history.

        Raises:
            NotFoundError: When the prompt is unknown
            ValidationError: When variables are missing
            ExternalServiceError: When generation fails
        """
        messages = self._prompts.render(name, variables)
        snapshot = self._providers.current()
        logger.info(f"{__name__}:generate_with_prompt - prompt={name} model={snapshot.llm.model}")
        return await snapshot.llm.invoke(messages)

    def history(self, session_id: str) -> list[ConversationTurn]:
        """Current turns of a session, oldest first."""
        return self._store.current_history(session_id)
