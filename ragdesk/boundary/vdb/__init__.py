"""Vector index adapters."""

from ragdesk.boundary.vdb.faiss_vector_index import FAISSVectorIndex

__all__ = ["FAISSVectorIndex"]
