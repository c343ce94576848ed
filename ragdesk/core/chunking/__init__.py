"""Heading-aware document chunking."""

from ragdesk.core.chunking.markdown_chunker import MarkdownChunker, chunk_markdown

__all__ = ["MarkdownChunker", "chunk_markdown"]
