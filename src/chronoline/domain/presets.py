"""Date presets — one bundle of parse + format rules per calendar.

Presets are frozen and built once from a translation function, then
passed by reference wherever dates are parsed or formatted::

    presets = build_presets(default_translate)
    preset = get_preset(presets, "normal")
    preset.format_date(preset.parse_date("2024-03-07"))  # '07/03/2024'

The built-in catalogue mirrors the calendars shipped with the timeline
plugin: ``normal``, ``imperial``, ``verbose-day``,
``dnd-calendar-of-harptos-dalereckoning``, and ``malanachan-calendar``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from pydantic import BaseModel, Field

from chronoline.domain.dates import (
    AbstractDate,
    EndMarker,
    EventDate,
    parse_abstract_date,
    split_group_priority,
)
from chronoline.domain.formatting import (
    Condition,
    ConditionalFormatRule,
    DateTokenConfiguration,
    Evaluation,
    exclusive_rule,
    format_abstract_date,
    number_token,
    string_token,
)

Translate = Callable[[str], str]

# English strings for every key the built-in presets look up.
DEFAULT_CATALOG: dict[str, str] = {
    "dates.ongoing": "Ongoing",
    "months.january": "January",
    "months.february": "February",
    "months.march": "March",
    "months.april": "April",
    "months.may": "May",
    "months.june": "June",
    "months.july": "July",
    "months.august": "August",
    "months.september": "September",
    "months.october": "October",
    "months.november": "November",
    "months.december": "December",
    "harptos.hammer": "Hammer",
    "harptos.alturiak": "Alturiak",
    "harptos.ches": "Ches",
    "harptos.tarsakh": "Tarsakh",
    "harptos.mirtul": "Mirtul",
    "harptos.kythorn": "Kythorn",
    "harptos.flamerule": "Flamerule",
    "harptos.eleasis": "Eleasis",
    "harptos.eleint": "Eleint",
    "harptos.marpenoth": "Marpenoth",
    "harptos.uktar": "Uktar",
    "harptos.nightal": "Nightal",
    "cycles.empriclus": "Empriclus",
    "cycles.apiclus": "Apiclus",
    "cycles.finiclus": "Finiclus",
    "weeks.eribrus": "Eribrus",
    "weeks.valebrus": "Valebrus",
    "weeks.andrebrus": "Andrebrus",
    "weeks.sigurbrus": "Sigurbrus",
    "weeks.marbrus": "Marbrus",
    "weeks.susabris": "Susabris",
    "weeks.melubris": "Melubris",
    "weeks.jabrus": "Jabrus",
    "weeks.vinzebrus": "Vinzebrus",
    "weeks.leobrus": "Leobrus",
    "weeks.cecibris": "Cecibris",
    "weeks.talebris": "Talebris",
    "weeks.volcebrus": "Volcebrus",
}


def default_translate(key: str) -> str:
    """Look *key* up in :data:`DEFAULT_CATALOG`, echoing unknown keys."""
    return DEFAULT_CATALOG.get(key, key)


class DatePreset(BaseModel):
    """Parse pattern, priority, and display rules for one calendar."""

    model_config = {"frozen": True}

    name: str
    icon: str = "calendar"
    date_display_format: str
    date_parser_group_priority: str
    date_parser_regex: str
    apply_additional_condition_formatting: bool = False
    date_token_configuration: tuple[DateTokenConfiguration, ...] = Field(default=())

    @property
    def group_priority(self) -> list[str]:
        return split_group_priority(self.date_parser_group_priority)

    def parse_date(self, raw_value: str | int | float) -> AbstractDate | None:
        """Parse *raw_value* with this preset's pattern and priority."""
        return parse_abstract_date(self.group_priority, raw_value, self.date_parser_regex)

    def format_date(self, date: AbstractDate) -> str:
        """Render *date* with this preset's display template and tokens."""
        return format_abstract_date(
            date,
            self.date_display_format,
            self.date_token_configuration,
            self.group_priority,
            apply_conditional_formatting=self.apply_additional_condition_formatting,
        )


def format_event_date(
    date: EventDate,
    preset: DatePreset,
    translate: Translate = default_translate,
) -> str:
    """Render a start or end date, including the ``ONGOING`` marker."""
    if isinstance(date, EndMarker):
        return translate(f"dates.{date.value}")
    return preset.format_date(date)


# ---------------------------------------------------------------------------
# Built-in presets
# ---------------------------------------------------------------------------

_DASHED_YMD = r"(?<year>-?[0-9]*)-(?<month>-?[0-9]*)-(?<day>-?[0-9]*)"

_MONTH_KEYS = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

_HARPTOS_KEYS = (
    "hammer",
    "alturiak",
    "ches",
    "tarsakh",
    "mirtul",
    "kythorn",
    "flamerule",
    "eleasis",
    "eleint",
    "marpenoth",
    "uktar",
    "nightal",
)

_MALANACHAN_CYCLE_KEYS = ("empriclus", "apiclus", "finiclus")

_MALANACHAN_WEEK_KEYS = (
    "eribrus",
    "valebrus",
    "andrebrus",
    "sigurbrus",
    "marbrus",
    "susabris",
    "melubris",
    "jabrus",
    "vinzebrus",
    "leobrus",
    "cecibris",
    "talebris",
    "volcebrus",
)


def _english_ordinal_rules() -> list[ConditionalFormatRule]:
    """1st, 2nd, 3rd, 4th ... 21st, 22nd, 23rd ... 31st."""

    def any_of(values: Sequence[int], template: str) -> ConditionalFormatRule:
        return ConditionalFormatRule(
            evaluations=tuple(Evaluation(condition=Condition.EQUAL, value=v) for v in values),
            conditions_are_exclusive=True,
            format=template,
        )

    return [
        any_of((1, 21, 31), "{value}st"),
        any_of((2, 22), "{value}nd"),
        any_of((3, 23), "{value}rd"),
        exclusive_rule(Condition.GREATER, 3, "{value}th"),
    ]


def normal_preset(translate: Translate) -> DatePreset:
    return DatePreset(
        name="normal",
        date_display_format="{day}/{month}/{year}",
        date_parser_group_priority="year,month,day",
        date_parser_regex=_DASHED_YMD,
        date_token_configuration=(
            number_token("year", min_length=4),
            number_token("month", min_length=2),
            number_token("day", min_length=2),
        ),
    )


def imperial_preset(translate: Translate) -> DatePreset:
    return DatePreset(
        name="imperial",
        date_display_format="{month}/{day}/{year}",
        date_parser_group_priority="year,month,day",
        date_parser_regex=_DASHED_YMD,
        date_token_configuration=(
            number_token("year", min_length=4),
            number_token("month", min_length=2),
            number_token("day", min_length=2),
        ),
    )


def verbose_day_preset(translate: Translate) -> DatePreset:
    return DatePreset(
        name="verbose-day",
        icon="calendar-days",
        date_display_format="{day} {month} {year}",
        date_parser_group_priority="year,month,day",
        date_parser_regex=_DASHED_YMD,
        apply_additional_condition_formatting=True,
        date_token_configuration=(
            number_token("year"),
            string_token("month", ["", *(translate(f"months.{key}") for key in _MONTH_KEYS)]),
            number_token("day", formatting=_english_ordinal_rules()),
        ),
    )


def harptos_preset(translate: Translate) -> DatePreset:
    """Forgotten Realms calendar, years in Dalereckoning."""
    return DatePreset(
        name="dnd-calendar-of-harptos-dalereckoning",
        icon="swords",
        date_display_format="{day} {month} {year} DR",
        date_parser_group_priority="year,month,day",
        date_parser_regex=_DASHED_YMD,
        apply_additional_condition_formatting=True,
        date_token_configuration=(
            number_token("year"),
            string_token("month", ["", *(translate(f"harptos.{key}") for key in _HARPTOS_KEYS)]),
            number_token("day", formatting=_english_ordinal_rules()),
        ),
    )


def malanachan_preset(translate: Translate) -> DatePreset:
    """Three cycles of thirteen eight-day weeks."""
    return DatePreset(
        name="malanachan-calendar",
        date_display_format="{day} {week} {cycle} {year}",
        date_parser_group_priority="year,cycle,week,day",
        date_parser_regex=(
            r"(?<year>-?[0-9]+)(?:[/-](?<cycle>[1-3]))?"
            r"(?:[/-](?<week>1[0-3]|[1-9]))?(?:[/-](?<day>[1-8]))?"
        ),
        apply_additional_condition_formatting=True,
        date_token_configuration=(
            number_token("year"),
            string_token(
                "cycle",
                ["", *(translate(f"cycles.{key}") for key in _MALANACHAN_CYCLE_KEYS)],
            ),
            string_token(
                "week",
                ["", *(translate(f"weeks.{key}") + "," for key in _MALANACHAN_WEEK_KEYS)],
            ),
            number_token(
                "day",
                formatting=[
                    exclusive_rule(Condition.EQUAL, 0, ""),
                    exclusive_rule(Condition.EQUAL, 1, "{value}st"),
                    exclusive_rule(Condition.EQUAL, 2, "{value}nd"),
                    exclusive_rule(Condition.EQUAL, 3, "{value}rd"),
                    exclusive_rule(Condition.GREATER, 3, "{value}th"),
                ],
            ),
        ),
    )


PRESET_BUILDERS: tuple[Callable[[Translate], DatePreset], ...] = (
    normal_preset,
    imperial_preset,
    verbose_day_preset,
    harptos_preset,
    malanachan_preset,
)


def build_presets(translate: Translate = default_translate) -> tuple[DatePreset, ...]:
    """Build the immutable list of built-in presets."""
    return tuple(builder(translate) for builder in PRESET_BUILDERS)


def get_preset(presets: Sequence[DatePreset], name: str) -> DatePreset:
    """Return the preset called *name*.

    Raises:
        KeyError: No preset has that name.
    """
    for preset in presets:
        if preset.name == name:
            return preset
    known = ", ".join(preset.name for preset in presets)
    msg = f"Unknown date preset {name!r} (known: {known})"
    raise KeyError(msg)
