"""BaseService — shared foundation for chronoline services.

Every service receives the frozen :class:`ChronoSettings` and the
immutable preset list at construction time. Neither is mutated, so one
service instance can process any number of notes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from chronoline.domain.presets import DatePreset, build_presets, get_preset

if TYPE_CHECKING:
    from chronoline.config.settings import ChronoSettings

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class TimelineService(BaseService):
            def build(self, ...) -> ServiceResult:
                preset = self._resolve_preset(name)
                ...
    """

    def __init__(
        self,
        settings: ChronoSettings,
        presets: Sequence[DatePreset] | None = None,
    ) -> None:
        self._settings = settings
        self._presets: tuple[DatePreset, ...] = (
            tuple(presets) if presets is not None else build_presets()
        )

    @property
    def presets(self) -> tuple[DatePreset, ...]:
        return self._presets

    def _resolve_preset(self, name: str | None = None) -> DatePreset:
        """Return the named preset, or the configured default.

        Raises:
            KeyError: No preset has that name.
        """
        resolved = name or self._settings.dates.preset
        logger.debug("Using date preset %s", resolved)
        return get_preset(self._presets, resolved)
