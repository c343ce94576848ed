"""Rerank service client."""

from ragdesk.boundary.rerank.rerank_client import RerankClient, RerankResult

__all__ = ["RerankClient", "RerankResult"]
