"""
ragdesk - document question answering over a vector index.

Ingests Markdown-like documents into heading-aware chunks, indexes them,
and answers questions with retrieval-augmented generation.
"""

__version__ = "0.1.0"
