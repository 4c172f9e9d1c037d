"""Abstract dates — parsing and ordering.

An abstract date is a tuple of numeric components in priority order, most
significant first (``(year, month, day)``, ``(year, cycle, week, day)``).
It knows nothing about calendars: no leap years, no month lengths.

A component the pattern did not capture is ``None``. ``None`` is distinct
from ``0`` and sorts below every number.

An end date may instead be :attr:`EndMarker.ONGOING`, meaning the event
has not finished; it sorts after every concrete date.
"""

from __future__ import annotations

import functools
import logging
import math
import re
from collections.abc import Sequence
from enum import StrEnum

logger = logging.getLogger(__name__)

AbstractDate = tuple[int | None, ...]


class EndMarker(StrEnum):
    """Sentinel values allowed in place of an end date."""

    ONGOING = "ongoing"


EventDate = AbstractDate | EndMarker

# JavaScript-style ``(?<name>`` groups, but not lookbehinds ``(?<=`` / ``(?<!``.
_JS_GROUP_RE = re.compile(r"\(\?<(?![=!])")


@functools.lru_cache(maxsize=64)
def compile_date_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a date pattern, accepting ``(?<name>...)`` group syntax too."""
    return re.compile(_JS_GROUP_RE.sub("(?P<", pattern))


def split_group_priority(group_priority: str) -> list[str]:
    """Split a comma-separated priority string into component names.

    Examples:
        >>> split_group_priority("year, month,day")
        ['year', 'month', 'day']
    """
    return [name.strip() for name in group_priority.split(",") if name.strip()]


def _to_component(text: str | None) -> int | None:
    if text is None:
        return None
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        return None


def parse_abstract_date(
    group_priority: Sequence[str],
    raw_value: str | int | float,
    pattern: str,
) -> AbstractDate | None:
    """Normalize a raw date value into an abstract date.

    A number becomes the most significant component, with every
    subordinate component set to ``1``; NaN and infinities are absent.
    Text is searched with *pattern*: each named group fills the component
    of the same name, and groups that did not participate become ``None``.

    Returns:
        The abstract date, or None when the text does not match or no
        group captured a number. That is a recoverable "date absent" case.
    """
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, float) and not math.isfinite(raw_value):
        logger.debug("Date %r is not a finite number", raw_value)
        return None
    if isinstance(raw_value, (int, float)):
        return (int(raw_value), *([1] * max(0, len(group_priority) - 1)))

    match = compile_date_pattern(pattern).search(raw_value)
    if match is None:
        logger.debug("Date %r does not match pattern %r", raw_value, pattern)
        return None

    groups = match.groupdict()
    components = tuple(_to_component(groups.get(name)) for name in group_priority)
    if all(component is None for component in components):
        logger.debug("Date %r matched pattern %r but captured nothing", raw_value, pattern)
        return None
    return components


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_component(a: int | None, b: int | None) -> int:
    if a is None or b is None:
        return (a is not None) - (b is not None)
    return _sign(a - b)


def compare_dates(a: EventDate, b: EventDate) -> int:
    """Three-way comparison of two dates: -1, 0, or 1.

    ``ONGOING`` is greater than any concrete date. Otherwise components
    are compared most significant first; if one date is a prefix of the
    other, the shorter one is smaller.
    """
    a_ongoing = isinstance(a, EndMarker)
    b_ongoing = isinstance(b, EndMarker)
    if a_ongoing or b_ongoing:
        return a_ongoing - b_ongoing

    for left, right in zip(a, b):
        result = _compare_component(left, right)
        if result:
            return result
    return _sign(len(a) - len(b))


date_sort_key = functools.cmp_to_key(compare_dates)
