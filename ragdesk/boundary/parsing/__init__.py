"""Document parsers."""

from ragdesk.boundary.parsing.markdown_parser import MarkdownFileParser, strip_images

__all__ = ["MarkdownFileParser", "strip_images"]
