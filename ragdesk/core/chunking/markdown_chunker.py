"""
Heading-aware Markdown chunking using RecursiveCharacterTextSplitter.

Splits document text at Markdown headings, keeps small sections whole and
breaks oversized ones down paragraph, line, sentence, word and finally
character-wise, re-attaching the section's first line to every piece.

Dependencies: langchain_text_splitters
System role: Chunking stage of the ingestion pipeline
"""

import logging
import re

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ragdesk.core.exceptions import ValidationError
from ragdesk.models.chunk import Chunk
from ragdesk.models.document import RawDocument

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^#{1,5} ")

# Zero-width boundary before every heading line
_SECTION_BOUNDARY = re.compile(r"(?m)^(?=#{1,5} )")

# Tried in order: paragraph, line, sentence end (CJK or ASCII), word, character
SEPARATORS = [
    r"\n\n",
    r"\n",
    r"[。！？；]|[.!?](?=\s)",
    " ",
    "",
]


def _build_splitter(chunk_size: int, overlap: int) -> RecursiveCharacterTextSplitter:
    return RecursiveCharacterTextSplitter(
        separators=SEPARATORS,
        is_separator_regex=True,
        keep_separator="end",
        chunk_size=chunk_size,
        chunk_overlap=min(overlap, chunk_size - 1),
        length_function=len,
        strip_whitespace=True,
    )


class MarkdownChunker:
    """Split Markdown-like text into bounded, heading-aware chunks."""

    def __init__(self, max_chunk_size: int = 500, overlap_size: int = 0) -> None:
        """
        Initialize chunker with size limits.

        Args:
            max_chunk_size: Maximum chunk size in characters
            overlap_size: Characters of trailing context repeated between sub-chunks

        Raises:
            ValidationError: When sizes are out of range
        """
        if max_chunk_size <= 0:
            raise ValidationError("max_chunk_size must be positive", field="max_chunk_size")
        if overlap_size < 0 or overlap_size >= max_chunk_size:
            raise ValidationError(
                "overlap_size must be in [0, max_chunk_size)",
                field="overlap_size",
                details={"overlap_size": overlap_size, "max_chunk_size": max_chunk_size},
            )

        self.max_chunk_size = max_chunk_size
        self.overlap_size = overlap_size
        # One character of the budget goes to the newline after the header
        self._body_splitter = _build_splitter(max(max_chunk_size - 1, 1), overlap_size)

    @staticmethod
    def _sections(content: str) -> list[str]:
        return [s.strip() for s in _SECTION_BOUNDARY.split(content) if s.strip()]

    @staticmethod
    def _heading_of(section: str) -> str:
        first_line = section.split("\n", 1)[0]
        return first_line.strip() if HEADING_PATTERN.match(first_line) else ""

    def _split_section(self, section: str) -> list[str]:
        if len(section) <= self.max_chunk_size:
            return [section]

        # The first line heads every piece, heading or not
        header, _, body = section.partition("\n")
        header = header.strip()
        if not body.strip():
            # A lone first line is indivisible
            return [header]
        return [f"{header}\n{sub}" for sub in self._body_splitter.split_text(body) if sub.strip()]

    def split(self, content: str) -> list[str]:
        """
        Split content into chunk texts.

        Args:
            content: Markdown or plain text

        Returns:
            list[str]: Non-empty chunk texts in document order
        """
        if not content or not content.strip():
            return []

        chunks: list[str] = []
        for section in self._sections(content):
            chunks.extend(c for c in self._split_section(section) if c.strip())
        return chunks

    def chunk_document(self, document: RawDocument) -> list[Chunk]:
        """
        Split a parsed document into Chunk models.

        Args:
            document: Parsed document

        Returns:
            list[Chunk]: Chunks with source, order and nearest heading
        """
        chunks: list[Chunk] = []
        for section in self._sections(document.content):
            heading = self._heading_of(section)
            for text in self._split_section(section):
                if not text.strip():
                    continue
                chunks.append(
                    Chunk(
                        text=text,
                        source_id=document.source_id,
                        sequential_index=len(chunks),
                        heading_path=heading,
                    )
                )

        logger.info(
            f"{__name__}:chunk_document - Split document_id={document.id} into {len(chunks)} chunks"
        )
        return chunks


def chunk_markdown(content: str, max_chunk_size: int = 500, overlap_size: int = 0) -> list[str]:
    """
    Split content into chunk texts.

    Pure function of its arguments: identical input always yields identical output.
    Blank content yields no chunks for any sizes.
    """
    if not content or not content.strip():
        return []
    return MarkdownChunker(max_chunk_size, overlap_size).split(content)
