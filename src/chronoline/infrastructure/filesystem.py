"""Note discovery and reading.

INVARIANT: Files are read, never written. The domain layer receives
plain data (:class:`NoteDocument`) and never sees a path it could open.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from chronoline.domain.metadata import NoteMetadata
from chronoline.domain.tags import find_inline_tags

logger = logging.getLogger(__name__)

_FRONTMATTER_DELIMITER = "---"

# Directories to skip when discovering notes.
_SKIP_DIRS = frozenset({".obsidian", ".git", ".trash"})


@dataclass(frozen=True)
class NoteDocument:
    """Everything the core needs from one note file."""

    source: str
    title: str
    metadata: NoteMetadata
    body: str
    inline_tags: list[str] = field(default_factory=list)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter and body from markdown content.

    Expects the file to start with ``---`` on the first line. The second
    ``---`` closes the YAML block. Everything after is the body.

    Returns:
        A ``(frontmatter_dict, body_text)`` tuple. If no valid
        frontmatter delimiters are found, returns ``({}, content)``.

    Raises:
        ValueError: The YAML block is malformed or not a mapping.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])
    if body.startswith("\n"):
        body = body[1:]

    try:
        fm = YAML(typ="safe").load(yaml_block) or {}
    except YAMLError as exc:
        msg = f"Invalid frontmatter: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(fm, dict):
        msg = f"Frontmatter must be a mapping, got {type(fm).__name__}"
        raise ValueError(msg)
    return fm, body


def read_note(path: Path) -> NoteDocument:
    """Read a markdown note into a :class:`NoteDocument`.

    Raises:
        OSError: The file cannot be read.
        ValueError: The frontmatter is malformed.
    """
    content = path.read_text(encoding="utf-8")
    frontmatter, body = parse_frontmatter(content)
    return NoteDocument(
        source=str(path),
        title=path.stem,
        metadata=NoteMetadata.from_frontmatter(frontmatter),
        body=body,
        inline_tags=find_inline_tags(body),
    )


def discover_notes(paths: Iterable[Path]) -> list[Path]:
    """Expand files and directories into a sorted list of ``*.md`` files.

    Hidden tool directories (``.obsidian``, ``.git``, ``.trash``) are skipped.
    """
    found: set[Path] = set()
    for path in paths:
        if path.is_file():
            if path.suffix == ".md":
                found.add(path)
            continue
        if not path.is_dir():
            logger.warning("Skipping missing path %s", path)
            continue
        for md_file in path.rglob("*.md"):
            if _SKIP_DIRS.intersection(md_file.relative_to(path).parts):
                continue
            found.add(md_file)
    return sorted(found)
