"""TimelineService — note filtering, card extraction, date operations.

Surfaces:
- build / build_from_paths: batch over notes, filter by condition,
  extract cards, sort, and format their dates
- translate / check: condition language on its own
- parse_date / format_date / list_presets: date subsystem on its own

INVARIANT: A failure on one note never aborts the batch. The note is
excluded and recorded under ``data["failures"]``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from chronoline.domain.cards import (
    CardData,
    CardKeys,
    card_sort_key,
    extract_card,
    is_rendered,
    note_tags,
)
from chronoline.domain.conditions import (
    ConditionParseError,
    evaluate_condition,
    legacy_condition,
    translate_condition,
)
from chronoline.domain.dates import EndMarker, EventDate
from chronoline.domain.formatting import FormatRangeError
from chronoline.domain.presets import DatePreset, format_event_date
from chronoline.infrastructure.filesystem import NoteDocument, discover_notes, read_note
from chronoline.services.base import BaseService
from chronoline.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _serialize_date(date: EventDate | None) -> list[int | None] | str | None:
    if date is None:
        return None
    if isinstance(date, EndMarker):
        return date.value
    return list(date)


def _failure(source: str, code: str, exc: Exception) -> dict[str, str]:
    return {"source": source, "code": code, "message": str(exc)}


class TimelineService(BaseService):
    """Builds timelines from notes and exposes the condition/date core."""

    # ------------------------------------------------------------------
    # Condition resolution
    # ------------------------------------------------------------------

    def _resolve_condition(self, condition: str | None) -> str | None:
        """Explicit condition, else configured one, else legacy tag lists."""
        if condition:
            return condition
        timeline = self._settings.timeline
        if timeline.condition:
            return timeline.condition
        if timeline.tags_to_find:
            return legacy_condition(timeline.tags_to_find, timeline.not_tags)
        return None

    def _card_keys(self) -> CardKeys:
        return CardKeys(**self._settings.metadata.model_dump())

    # ------------------------------------------------------------------
    # build — the batch pipeline
    # ------------------------------------------------------------------

    def build_from_paths(
        self,
        paths: Iterable[Path],
        *,
        condition: str | None = None,
        preset: str | None = None,
    ) -> ServiceResult:
        """Read every note under *paths* and build the timeline."""
        documents: list[NoteDocument] = []
        failures: list[dict[str, str]] = []
        for path in discover_notes(paths):
            try:
                documents.append(read_note(path))
            except (OSError, ValueError) as exc:
                logger.debug("Could not read %s", path, exc_info=True)
                failures.append(_failure(str(path), "READ_ERROR", exc))
        return self.build(documents, condition=condition, preset=preset, failures=failures)

    def build(
        self,
        documents: Sequence[NoteDocument],
        *,
        condition: str | None = None,
        preset: str | None = None,
        failures: list[dict[str, str]] | None = None,
    ) -> ServiceResult:
        """Filter *documents*, extract and sort cards, format their dates."""
        op = "build_timeline"
        failures = list(failures or [])

        try:
            active_preset = self._resolve_preset(preset)
        except KeyError as exc:
            return ServiceResult.failure(op, "UNKNOWN_PRESET", str(exc.args[0]))

        try:
            query = self._resolve_condition(condition)
        except ValueError as exc:
            return ServiceResult.failure(op, "NO_CONDITION", str(exc))
        if query is None:
            return ServiceResult.failure(
                op,
                "NO_CONDITION",
                "No timeline condition given and none configured",
            )

        keys = self._card_keys()
        items: list[tuple[CardData, dict[str, Any]]] = []
        skipped = 0
        for document in documents:
            try:
                card = self._process_note(document, query, keys, active_preset)
                if card is None:
                    skipped += 1
                    continue
                items.append((card, self._render_card(card, active_preset)))
            except ConditionParseError as exc:
                failures.append(_failure(document.source, "INVALID_CONDITION", exc))
            except FormatRangeError as exc:
                failures.append(_failure(document.source, "FORMAT_RANGE", exc))
            except ValueError as exc:
                logger.debug("Could not process %s", document.source, exc_info=True)
                failures.append(_failure(document.source, "INVALID_NOTE", exc))

        items.sort(key=lambda pair: card_sort_key(pair[0]))
        warnings = [f"{f['source']}: {f['message']}" for f in failures]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(items),
                "items": [rendered for _, rendered in items],
                "skipped": skipped,
                "failures": failures,
            },
            warnings=warnings,
            meta={"preset": active_preset.name, "condition": query},
        )

    def _process_note(
        self,
        document: NoteDocument,
        query: str,
        keys: CardKeys,
        preset: DatePreset,
    ) -> CardData | None:
        """Return the note's card, or None when it is not on this timeline."""
        timeline = self._settings.timeline
        if timeline.require_render_toggle and not is_rendered(document.metadata, keys):
            logger.debug("Skipping %s: render toggle not set", document.source)
            return None

        tags = note_tags(
            document.metadata,
            document.inline_tags,
            keys,
            look_for_tags=timeline.look_for_tags,
        )
        if not evaluate_condition(translate_condition(query), tags):
            logger.debug("Skipping %s: condition not met", document.source)
            return None

        return extract_card(
            source=document.source,
            default_title=document.title,
            metadata=document.metadata,
            body=document.body,
            tags=tags,
            keys=keys,
            preset=preset,
        )

    def _render_card(self, card: CardData, preset: DatePreset) -> dict[str, Any]:
        return {
            "source": card.source,
            "title": card.title,
            "body": card.body,
            "tags": card.tags,
            "start": format_event_date(card.start_date, preset) if card.start_date else None,
            "end": format_event_date(card.end_date, preset) if card.end_date else None,
            "start_date": _serialize_date(card.start_date),
            "end_date": _serialize_date(card.end_date),
        }

    # ------------------------------------------------------------------
    # Condition language
    # ------------------------------------------------------------------

    def translate(self, query: str) -> ServiceResult:
        """Translate a user condition into the normalized expression."""
        op = "translate_condition"
        try:
            expression = translate_condition(query)
        except ConditionParseError as exc:
            return ServiceResult.failure(op, "INVALID_CONDITION", str(exc), query=query)
        return ServiceResult(ok=True, op=op, data={"query": query, "expression": expression})

    def check(self, query: str, tags: Sequence[str]) -> ServiceResult:
        """Evaluate a user condition against an explicit tag list."""
        op = "check_condition"
        try:
            expression = translate_condition(query)
            matched = evaluate_condition(expression, tags)
        except ConditionParseError as exc:
            return ServiceResult.failure(op, "INVALID_CONDITION", str(exc), query=query)
        return ServiceResult(
            ok=True,
            op=op,
            data={"query": query, "expression": expression, "tags": list(tags), "match": matched},
        )

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def parse_date(self, value: str, *, preset: str | None = None) -> ServiceResult:
        """Parse raw date text with a preset."""
        op = "parse_date"
        try:
            active = self._resolve_preset(preset)
        except KeyError as exc:
            return ServiceResult.failure(op, "UNKNOWN_PRESET", str(exc.args[0]))

        parsed = active.parse_date(value)
        if parsed is None:
            return ServiceResult.failure(
                op,
                "PATTERN_MISMATCH",
                f"{value!r} does not match the {active.name} date pattern",
                pattern=active.date_parser_regex,
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "value": value,
                "preset": active.name,
                "groups": active.group_priority,
                "date": list(parsed),
            },
        )

    def format_date(self, value: str, *, preset: str | None = None) -> ServiceResult:
        """Parse raw date text, then render it with the same preset."""
        op = "format_date"
        parsed = self.parse_date(value, preset=preset)
        if not parsed.ok:
            return parsed.model_copy(update={"op": op})

        active = self._resolve_preset(preset)
        try:
            formatted = active.format_date(tuple(parsed.data["date"]))
        except FormatRangeError as exc:
            return ServiceResult.failure(op, "FORMAT_RANGE", str(exc), value=value)
        return ServiceResult(
            ok=True,
            op=op,
            data={**parsed.data, "formatted": formatted},
        )

    def list_presets(self) -> ServiceResult:
        """Describe every available preset."""
        items = [
            {
                "name": preset.name,
                "display": preset.date_display_format,
                "groups": preset.group_priority,
                "conditional_formatting": preset.apply_additional_condition_formatting,
            }
            for preset in self._presets
        ]
        return ServiceResult(
            ok=True,
            op="list_presets",
            data={"count": len(items), "items": items, "default": self._settings.dates.preset},
        )
