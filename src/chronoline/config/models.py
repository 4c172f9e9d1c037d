"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, chronoline.toml only contains
overrides. A fresh project needs only a [timeline] condition.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- chronoline.toml sections ---


class MetadataConfig(BaseModel):
    """[metadata] section — frontmatter keys read from each note."""

    model_config = {"frozen": True}

    start_date_key: str = "start-date"
    end_date_key: str = "end-date"
    title_override_key: str = "event-title"
    body_override_key: str = "event-description"
    timeline_tag_key: str = "timelines"
    render_toggle_key: str = "timeline"


class TimelineConfig(BaseModel):
    """[timeline] section.

    ``tags_to_find`` / ``not_tags`` are the older way of selecting notes;
    they are only consulted when ``condition`` is empty.
    """

    model_config = {"frozen": True}

    condition: str = ""
    tags_to_find: list[str] = Field(default_factory=list)
    not_tags: list[str] = Field(default_factory=list)
    look_for_tags: bool = False
    require_render_toggle: bool = True


class DatesConfig(BaseModel):
    """[dates] section."""

    model_config = {"frozen": True}

    preset: str = "normal"
