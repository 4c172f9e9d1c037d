"""Typed view over note frontmatter.

Frontmatter arrives as an arbitrary YAML mapping. :class:`NoteMetadata`
validates it once at the boundary and keeps only the value shapes the
core understands: string, number, boolean, and list of strings. Every
other value is treated as absent.

INVARIANT: ``bool`` is never reported as a number, even though it is an
``int`` subclass in Python.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

MetadataValue = str | int | float | bool | list[str]


def _coerce_value(value: Any) -> MetadataValue | None:
    """Normalize one raw YAML value, or return None when unsupported."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return value
    # YAML loaders turn ``2024-03-07`` into a date; the parser wants text.
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if isinstance(item, str)]
    return None


class NoteMetadata(BaseModel):
    """Frozen key -> typed value mapping built from a note's frontmatter."""

    model_config = {"frozen": True}

    values: dict[str, MetadataValue] = Field(default_factory=dict)

    @classmethod
    def from_frontmatter(cls, raw: Mapping[str, Any] | None) -> NoteMetadata:
        """Validate a raw frontmatter mapping, dropping unsupported values."""
        values: dict[str, MetadataValue] = {}
        for key, value in (raw or {}).items():
            coerced = _coerce_value(value)
            if coerced is not None:
                values[str(key)] = coerced
        return cls(values=values)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def get_string(self, key: str) -> str | None:
        value = self.values.get(key)
        return value if isinstance(value, str) else None

    def get_number(self, key: str) -> int | float | None:
        value = self.values.get(key)
        if isinstance(value, bool):
            return None
        return value if isinstance(value, (int, float)) else None

    def get_bool(self, key: str) -> bool | None:
        value = self.values.get(key)
        return value if isinstance(value, bool) else None

    def get_string_list(self, key: str) -> list[str]:
        value = self.values.get(key)
        return list(value) if isinstance(value, list) else []
