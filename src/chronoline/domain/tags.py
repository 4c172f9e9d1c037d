"""Tag domain logic — hierarchy expansion and tag collection.

Tags are ``/``-separated paths (``project/alpha``). Inside condition
expressions a whole path must be a single identifier, so the separator
is encoded as ``_`` before matching.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chronoline.domain.metadata import NoteMetadata

TAG_SEPARATOR = "/"
IDENTIFIER_SEPARATOR = "_"

# Obsidian inline tags: ``#tag`` or ``#tag/nested``, not preceded by a word char.
_INLINE_TAG_RE = re.compile(r"(?<![\w&#/])#([A-Za-z0-9_][\w\-/]*)")


def encode_tag(tag: str) -> str:
    """Encode a tag path as a condition identifier.

    Examples:
        >>> encode_tag("project/alpha")
        'project_alpha'
    """
    return tag.replace(TAG_SEPARATOR, IDENTIFIER_SEPARATOR)


def expand_tags(tags: Iterable[str]) -> frozenset[str]:
    """Return every non-empty hierarchical prefix of every tag, encoded.

    Examples:
        >>> sorted(expand_tags({"a/b/c"}))
        ['a', 'a_b', 'a_b_c']
    """
    expanded: set[str] = set()
    for tag in tags:
        parts = [part for part in encode_tag(tag).split(IDENTIFIER_SEPARATOR) if part]
        for i in range(1, len(parts) + 1):
            expanded.add(IDENTIFIER_SEPARATOR.join(parts[:i]))
    return frozenset(expanded)


def find_inline_tags(body: str) -> list[str]:
    """Find ``#tag`` tokens in markdown text, without the leading ``#``.

    Fenced code blocks are skipped. Each tag is returned once, in
    first-seen order.
    """
    found: list[str] = []
    in_fence = False
    for line in body.splitlines():
        if line.lstrip().startswith("```"):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        for match in _INLINE_TAG_RE.finditer(line):
            tag = match.group(1).rstrip(TAG_SEPARATOR)
            if tag and tag not in found:
                found.append(tag)
    return found


def collect_note_tags(
    metadata: NoteMetadata,
    inline_tags: Sequence[str] = (),
    *,
    timeline_key: str = "timelines",
    look_for_tags: bool = False,
) -> list[str]:
    """Gather the tags used to match a note against a timeline condition.

    The list under *timeline_key* is always used. When *look_for_tags* is
    set, inline tags and the frontmatter ``tags`` key (a list or a
    comma-separated string) are added too.
    """
    output = list(metadata.get_string_list(timeline_key))
    if not look_for_tags:
        return output

    output.extend(tag.removeprefix("#") for tag in inline_tags)

    frontmatter_tags = metadata.get_string("tags")
    if frontmatter_tags is not None:
        output.extend(tag.strip() for tag in frontmatter_tags.split(",") if tag.strip())
    else:
        output.extend(metadata.get_string_list("tags"))
    return output
