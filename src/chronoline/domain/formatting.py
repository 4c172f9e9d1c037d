"""Date token formatting — abstract date -> display string.

Each component of an abstract date is rendered by a
:class:`DateTokenConfiguration`:

- ``number`` tokens are zero-padded to ``min_length`` digits.
- ``string`` tokens index into a dictionary of display strings.

Optional conditional rules then pick a template (``"{value}st"``) based on
the numeric component value. The rendered tokens are finally substituted
into the preset's display template (``"{day}/{month}/{year}"``).
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, model_validator

from chronoline.domain.dates import AbstractDate


class FormatRangeError(IndexError):
    """A dictionary token received a value outside its dictionary."""


class DateTokenType(StrEnum):
    """How a component is rendered."""

    NUMBER = "number"
    STRING = "string"


class Condition(StrEnum):
    """Comparison operators for conditional formatting."""

    EQUAL = "Equal"
    NOT_EQUAL = "NotEqual"
    GREATER = "Greater"
    GREATER_OR_EQUAL = "GreaterOrEqual"
    LESS = "Less"
    LESS_OR_EQUAL = "LessOrEqual"


_OPERATORS: dict[Condition, Callable[[int, int], bool]] = {
    Condition.EQUAL: operator.eq,
    Condition.NOT_EQUAL: operator.ne,
    Condition.GREATER: operator.gt,
    Condition.GREATER_OR_EQUAL: operator.ge,
    Condition.LESS: operator.lt,
    Condition.LESS_OR_EQUAL: operator.le,
}


class Evaluation(BaseModel):
    """One ``value OP threshold`` check."""

    model_config = {"frozen": True}

    condition: Condition
    value: int

    def holds(self, component: int) -> bool:
        return _OPERATORS[self.condition](component, self.value)


class ConditionalFormatRule(BaseModel):
    """A template applied when its evaluations hold.

    With ``conditions_are_exclusive`` the rule matches as soon as one
    evaluation holds; otherwise every evaluation must hold.
    """

    model_config = {"frozen": True}

    evaluations: tuple[Evaluation, ...] = ()
    conditions_are_exclusive: bool = False
    format: str = "{value}"

    def matches(self, component: int) -> bool:
        if not self.evaluations:
            return False
        if self.conditions_are_exclusive:
            return any(evaluation.holds(component) for evaluation in self.evaluations)
        return all(evaluation.holds(component) for evaluation in self.evaluations)


class DateTokenConfiguration(BaseModel):
    """Rendering rules for one abstract date component."""

    model_config = {"frozen": True}

    name: str
    type: DateTokenType = DateTokenType.NUMBER
    min_length: int = Field(default=1, ge=0)
    dictionary: tuple[str, ...] | None = None
    formatting: tuple[ConditionalFormatRule, ...] = ()

    @model_validator(mode="after")
    def _string_tokens_need_dictionary(self) -> Self:
        if self.type is DateTokenType.STRING and self.dictionary is None:
            msg = f"String token {self.name!r} requires a dictionary"
            raise ValueError(msg)
        return self


def number_token(
    name: str,
    *,
    min_length: int = 1,
    formatting: Sequence[ConditionalFormatRule] = (),
) -> DateTokenConfiguration:
    """Shorthand for a zero-padded numeric token."""
    return DateTokenConfiguration(
        name=name,
        type=DateTokenType.NUMBER,
        min_length=min_length,
        formatting=tuple(formatting),
    )


def string_token(
    name: str,
    dictionary: Sequence[str],
    *,
    formatting: Sequence[ConditionalFormatRule] = (),
) -> DateTokenConfiguration:
    """Shorthand for a dictionary-backed token."""
    return DateTokenConfiguration(
        name=name,
        type=DateTokenType.STRING,
        dictionary=tuple(dictionary),
        formatting=tuple(formatting),
    )


def exclusive_rule(condition: Condition, value: int, template: str) -> ConditionalFormatRule:
    """Single-evaluation exclusive rule, the common case for ordinals."""
    return ConditionalFormatRule(
        evaluations=(Evaluation(condition=condition, value=value),),
        conditions_are_exclusive=True,
        format=template,
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def pad_number(value: int, min_length: int) -> str:
    """Zero-pad the digits of *value*, keeping the sign in front.

    Examples:
        >>> pad_number(7, 2)
        '07'
        >>> pad_number(-5, 3)
        '-005'
    """
    sign = "-" if value < 0 else ""
    return f"{sign}{str(abs(value)).zfill(min_length)}"


def render_token(
    value: int | None,
    config: DateTokenConfiguration,
    *,
    apply_conditional_formatting: bool = False,
) -> str:
    """Render a single component value.

    Raises:
        FormatRangeError: A string token's value is not a valid index
            into its dictionary.
    """
    if value is None:
        return ""

    if config.type is DateTokenType.STRING:
        dictionary = config.dictionary or ()
        if not 0 <= value < len(dictionary):
            msg = (
                f"Dictionary index out of range for token {config.name!r}: "
                f"{value} not in [0, {len(dictionary)})"
            )
            raise FormatRangeError(msg)
        rendered = dictionary[value]
    else:
        rendered = pad_number(value, config.min_length)

    if not apply_conditional_formatting:
        return rendered
    for rule in config.formatting:
        if rule.matches(value):
            return rule.format.replace("{value}", rendered)
    return rendered


def format_abstract_date(
    date: AbstractDate,
    display_template: str,
    token_configs: Sequence[DateTokenConfiguration],
    group_priority: Sequence[str],
    *,
    apply_conditional_formatting: bool = False,
) -> str:
    """Render *date* through *display_template*.

    Each token's component is found by the position of its name in
    *group_priority*. Placeholders without a token configuration are left
    untouched; tokens the template does not reference are not shown.
    """
    positions = {name: index for index, name in enumerate(group_priority)}
    output = display_template
    for config in token_configs:
        index = positions.get(config.name)
        value = date[index] if index is not None and index < len(date) else None
        rendered = render_token(
            value,
            config,
            apply_conditional_formatting=apply_conditional_formatting,
        )
        output = output.replace(f"{{{config.name}}}", rendered)
    return output.strip()
