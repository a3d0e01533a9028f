"""Markdown vault adapter."""

from __future__ import annotations

from .document import NoteDocument, parse_document, read_document, render_document, write_document
from .filenames import note_basename, sanitize_filename
from .frontmatter import FrontmatterReader, FrontmatterWriter, parse_link, render_link
from .repository import MarkdownNoteRepository

__all__ = [
    "FrontmatterReader",
    "FrontmatterWriter",
    "MarkdownNoteRepository",
    "NoteDocument",
    "note_basename",
    "parse_document",
    "parse_link",
    "read_document",
    "render_document",
    "render_link",
    "sanitize_filename",
    "write_document",
]
