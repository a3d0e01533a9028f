"""Markdown documents with a YAML frontmatter block."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    from pathlib import Path

_FRONTMATTER_BLOCK_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<frontmatter>.*?)^---[ \t]*(?:\r?\n|\Z)(?P<body>.*)\Z",
    re.DOTALL | re.MULTILINE,
)


class FrontmatterError(ValueError):
    """The frontmatter block is not a YAML mapping."""


@dataclass(slots=True)
class NoteDocument:
    frontmatter: dict[str, Any] = field(default_factory=dict[str, Any])
    body: str = ""


def parse_document(markdown: str) -> NoteDocument:
    match = _FRONTMATTER_BLOCK_RE.match(markdown)
    if match is None:
        return NoteDocument(frontmatter={}, body=markdown)
    try:
        frontmatter_raw = yaml.safe_load(match.group("frontmatter"))
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"frontmatter is not valid YAML: {exc}") from exc
    if frontmatter_raw is None:
        frontmatter: dict[str, Any] = {}
    elif isinstance(frontmatter_raw, dict):
        frontmatter = {str(key): value for key, value in frontmatter_raw.items()}
    else:
        raise FrontmatterError("frontmatter must be a mapping")
    return NoteDocument(frontmatter=frontmatter, body=match.group("body") or "")


def render_document(document: NoteDocument) -> str:
    if document.frontmatter:
        dumped = yaml.safe_dump(
            document.frontmatter,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    else:
        dumped = ""
    return f"---\n{dumped}---\n{document.body}"


def read_document(path: Path) -> NoteDocument:
    return parse_document(path.read_text(encoding="utf-8"))


def write_document(path: Path, document: NoteDocument) -> None:
    """Replace ``path`` atomically with the rendered document.

    Content goes to a hidden ``.tmp`` sibling first and is then renamed over
    the target, so readers never observe a half-written note.
    """

    tmp = path.with_name(f".{path.name}.tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(render_document(document))
            handle.flush()
            os.fsync(handle.fileno())
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def reserve_path(path: Path) -> bool:
    """Create ``path`` empty if it does not exist yet; ``False`` when taken."""

    try:
        with path.open("x", encoding="utf-8"):
            pass
    except FileExistsError:
        return False
    return True
