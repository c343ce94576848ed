"""
Dependency injection container.

Builds the object graph from Settings once and caches it.

Dependencies: ragdesk.configs, ragdesk.application, ragdesk.boundary, ragdesk.core
System role: Composition root for services
"""

from functools import lru_cache, partial

from ragdesk.application.ingestion_service import IngestionService
from ragdesk.boundary.llm.llm_gateway import LLMGateway
from ragdesk.boundary.parsing.markdown_parser import MarkdownFileParser
from ragdesk.boundary.rerank.rerank_client import RerankClient
from ragdesk.boundary.vdb.faiss_vector_index import FAISSVectorIndex
from ragdesk.configs import Settings, get_settings
from ragdesk.core.chunking.markdown_chunker import MarkdownChunker
from ragdesk.core.generation.chat_orchestrator import GenerationOrchestrator
from ragdesk.core.providers.provider_registry import ProviderRegistry, build_provider_config
from ragdesk.core.retrieval.retriever import RetrievalOrchestrator
from ragdesk.core.session.conversation_store import ConversationStore
from ragdesk.observability.logger import configure_logging
from ragdesk.observability.prompt_registry import ModelConfig, PromptRegistry


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._vector_index: FAISSVectorIndex | None = None
        self._provider_registry: ProviderRegistry | None = None
        self._prompt_registry: PromptRegistry | None = None
        self._conversation_store: ConversationStore | None = None
        self._retriever: RetrievalOrchestrator | None = None
        self._generation: GenerationOrchestrator | None = None
        self._ingestion: IngestionService | None = None

    @property
    def vector_index(self) -> FAISSVectorIndex:
        """Get cached vector index."""
        if self._vector_index is None:
            vs = self.settings.vector_store
            self._vector_index = FAISSVectorIndex(
                dimension=vs.embedding_dimension,
                index_dir=vs.index_dir,
                index_name=vs.index_name,
            )
        return self._vector_index

    @property
    def provider_registry(self) -> ProviderRegistry:
        """Get cached provider registry, version 1 built from settings."""
        if self._provider_registry is None:
            emb, llm = self.settings.embedding, self.settings.llm
            self._provider_registry = ProviderRegistry(
                vector_index=self.vector_index,
                embedding_config=build_provider_config(emb.model, emb.base_url, emb.api_key),
                llm_config=build_provider_config(llm.model, llm.base_url, llm.api_key),
                llm_factory=partial(
                    LLMGateway,
                    temperature=llm.temperature,
                    max_tokens=llm.max_tokens,
                    timeout=llm.timeout_seconds,
                    max_retries=llm.max_retries,
                ),
            )
        return self._provider_registry

    @property
    def prompt_registry(self) -> PromptRegistry:
        """Get cached prompt registry."""
        if self._prompt_registry is None:
            llm = self.settings.llm
            self._prompt_registry = PromptRegistry(
                settings=self.settings.observability,
                model_config=ModelConfig(
                    model=llm.model or "unset",
                    temperature=llm.temperature,
                    max_tokens=llm.max_tokens,
                ),
            )
        return self._prompt_registry

    @property
    def conversation_store(self) -> ConversationStore:
        """Get cached conversation store."""
        if self._conversation_store is None:
            self._conversation_store = ConversationStore(self.settings.pipeline.max_history_rounds)
        return self._conversation_store

    @property
    def retriever(self) -> RetrievalOrchestrator:
        """Get cached retrieval orchestrator."""
        if self._retriever is None:
            self._retriever = RetrievalOrchestrator(
                vector_index=self.vector_index,
                provider_registry=self.provider_registry,
                reranker=RerankClient(self.settings.rerank),
            )
        return self._retriever

    @property
    def generation(self) -> GenerationOrchestrator:
        """Get cached generation orchestrator."""
        if self._generation is None:
            self._generation = GenerationOrchestrator(
                conversation_store=self.conversation_store,
                retriever=self.retriever,
                provider_registry=self.provider_registry,
                prompt_registry=self.prompt_registry,
                default_top_k=self.settings.pipeline.top_k,
            )
        return self._generation

    @property
    def ingestion(self) -> IngestionService:
        """Get cached ingestion service."""
        if self._ingestion is None:
            pipeline = self.settings.pipeline
            self._ingestion = IngestionService(
                parser=MarkdownFileParser(),
                chunker=MarkdownChunker(pipeline.max_chunk_size, pipeline.chunk_overlap),
                vector_index=self.vector_index,
                provider_registry=self.provider_registry,
                batch_size=pipeline.ingest_batch_size,
            )
        return self._ingestion


@lru_cache
def get_services() -> ServiceCache:
    """Get the process-wide service container, configuring logging on first use."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return ServiceCache(settings)


def get_generation_orchestrator() -> GenerationOrchestrator:
    return get_services().generation


def get_ingestion_service() -> IngestionService:
    return get_services().ingestion
