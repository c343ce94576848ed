"""
Markdown and plain-text file parser.

Loads text documents with LangChain's TextLoader and strips image markup.

Dependencies: langchain_community.document_loaders
System role: Parsing stage of the ingestion pipeline
"""

import hashlib
import logging
import re
from pathlib import Path

from langchain_community.document_loaders import TextLoader

from ragdesk.core.exceptions import NotFoundError, UnsupportedFormatError, ValidationError
from ragdesk.models.document import RawDocument

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({".md", ".markdown", ".txt"})

_MARKDOWN_IMAGE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_HTML_IMAGE = re.compile(r"<img[^>]*>", re.IGNORECASE)


def strip_images(content: str) -> str:
    """Remove Markdown and HTML image markup."""
    return _HTML_IMAGE.sub("", _MARKDOWN_IMAGE.sub("", content))


class MarkdownFileParser:
    """Parse .md/.markdown/.txt files into RawDocument."""

    def parse(self, file_path: str | Path) -> RawDocument:
        """
        Read a text document.

        Args:
            file_path: Path to the document

        Returns:
            RawDocument: Content with images stripped; id derived from the path

        Raises:
            NotFoundError: When the file does not exist
            UnsupportedFormatError: When the extension is not a text format
            ValidationError: When the file is not valid UTF-8
        """
        path = Path(file_path)
        if not path.is_file():
            raise NotFoundError(f"File not found: {path}", resource=str(path))

        extension = path.suffix.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFormatError(extension, file_path=str(path))

        try:
            documents = TextLoader(str(path), encoding="utf-8").load()
        except RuntimeError as e:
            # TextLoader wraps decode errors in RuntimeError
            raise ValidationError(f"Cannot decode {path.name} as UTF-8", field="file_path") from e

        content = strip_images("".join(doc.page_content for doc in documents))
        document_id = hashlib.sha256(str(path.resolve()).encode()).hexdigest()[:16]
        logger.info(f"{__name__}:parse - Parsed {path.name}: {len(content)} chars")
        return RawDocument(id=document_id, content=content, source_id=path.name)
