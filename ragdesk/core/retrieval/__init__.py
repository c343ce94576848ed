"""Query-time retrieval."""

from ragdesk.core.retrieval.retriever import RetrievalMode, RetrievalOrchestrator, apply_rerank_order

__all__ = ["RetrievalMode", "RetrievalOrchestrator", "apply_rerank_order"]
