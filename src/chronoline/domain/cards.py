"""Card extraction — one timeline event per note.

A card is built from a note's typed metadata and body. Which frontmatter
keys hold the start date, end date, title, and body overrides is
configurable through :class:`CardKeys`.

End-date rule: when the end-date key holds a boolean instead of a
parsable date, the event is ongoing (:attr:`EndMarker.ONGOING`).
"""

from __future__ import annotations

import functools
from collections.abc import Sequence

from pydantic import BaseModel, Field

from chronoline.domain.dates import AbstractDate, EndMarker, EventDate, compare_dates
from chronoline.domain.metadata import NoteMetadata
from chronoline.domain.presets import DatePreset
from chronoline.domain.tags import collect_note_tags


class CardKeys(BaseModel):
    """Frontmatter keys read when building a card."""

    model_config = {"frozen": True}

    start_date_key: str = "start-date"
    end_date_key: str = "end-date"
    title_override_key: str = "event-title"
    body_override_key: str = "event-description"
    timeline_tag_key: str = "timelines"
    render_toggle_key: str = "timeline"


class CardData(BaseModel):
    """The event record extracted from one note."""

    model_config = {"frozen": True}

    source: str
    title: str
    body: str | None = None
    start_date: AbstractDate | None = None
    end_date: EventDate | None = None
    tags: list[str] = Field(default_factory=list)


def abstract_date_from_metadata(
    metadata: NoteMetadata,
    key: str,
    preset: DatePreset,
) -> AbstractDate | None:
    """Parse the date stored under *key*, preferring a numeric value."""
    number = metadata.get_number(key)
    if number is not None:
        return preset.parse_date(number)
    text = metadata.get_string(key)
    if not text:
        return None
    return preset.parse_date(text)


def end_date_from_metadata(
    metadata: NoteMetadata,
    key: str,
    preset: DatePreset,
) -> EventDate | None:
    """Parse the end date, falling back to ``ONGOING`` for a boolean flag."""
    parsed = abstract_date_from_metadata(metadata, key, preset)
    if parsed is not None:
        return parsed
    if metadata.get_bool(key) is not None:
        return EndMarker.ONGOING
    return None


def extract_body(body: str, override: str | None = None) -> str | None:
    """Return the card body: the override, or the note text minus quotes."""
    if override:
        return override
    lines = [line for line in body.splitlines() if not line.strip().startswith(">")]
    text = "\n".join(lines).strip()
    return text or None


def is_rendered(metadata: NoteMetadata, keys: CardKeys) -> bool:
    """A note opts into timelines by setting the toggle key to ``true``."""
    return metadata.get_bool(keys.render_toggle_key) is True


def note_tags(
    metadata: NoteMetadata,
    inline_tags: Sequence[str],
    keys: CardKeys,
    *,
    look_for_tags: bool,
) -> list[str]:
    return collect_note_tags(
        metadata,
        inline_tags,
        timeline_key=keys.timeline_tag_key,
        look_for_tags=look_for_tags,
    )


def extract_card(
    *,
    source: str,
    default_title: str,
    metadata: NoteMetadata,
    body: str,
    tags: Sequence[str],
    keys: CardKeys,
    preset: DatePreset,
) -> CardData:
    """Build the card for an included note."""
    title = metadata.get_string(keys.title_override_key) or default_title
    return CardData(
        source=source,
        title=title,
        body=extract_body(body, metadata.get_string(keys.body_override_key)),
        start_date=abstract_date_from_metadata(metadata, keys.start_date_key, preset),
        end_date=end_date_from_metadata(metadata, keys.end_date_key, preset),
        tags=list(tags),
    )


def _compare_optional(a: EventDate | None, b: EventDate | None) -> int:
    if a is None or b is None:
        return (a is not None) - (b is not None)
    return compare_dates(a, b)


def compare_cards(a: CardData, b: CardData) -> int:
    """Order by start date, then end date, then title.

    Cards without a date sort before cards with one.
    """
    result = _compare_optional(a.start_date, b.start_date)
    if result:
        return result
    result = _compare_optional(a.end_date, b.end_date)
    if result:
        return result
    return (a.title > b.title) - (a.title < b.title)


card_sort_key = functools.cmp_to_key(compare_cards)
