"""Shared pytest fixtures and test helpers for chronoline tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from chronoline.config.settings import ChronoSettings
from chronoline.domain.presets import DatePreset, build_presets, get_preset
from chronoline.services.timeline import TimelineService

NoteWriter = Callable[..., Path]


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's CHRONOLINE_* environment out of the tests."""
    monkeypatch.delenv("CHRONOLINE_CONFIG", raising=False)
    monkeypatch.delenv("CHRONOLINE_DATES__PRESET", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project directory with an empty ``notes/`` folder."""
    (tmp_path / "notes").mkdir()
    return tmp_path


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI discovers no outside config.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def settings(project_root: Path) -> ChronoSettings:
    return ChronoSettings.from_cli(project_root=project_root)


@pytest.fixture
def service(settings: ChronoSettings) -> TimelineService:
    return TimelineService(settings)


@pytest.fixture(scope="session")
def presets() -> tuple[DatePreset, ...]:
    return build_presets()


@pytest.fixture
def normal(presets: tuple[DatePreset, ...]) -> DatePreset:
    return get_preset(presets, "normal")


@pytest.fixture
def write_note(project_root: Path) -> NoteWriter:
    """Write a markdown note with YAML frontmatter under ``notes/``."""

    def _write(name: str, frontmatter: str, body: str = "", folder: str = "notes") -> Path:
        path = project_root / folder / f"{name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"---\n{frontmatter.strip()}\n---\n{body}", encoding="utf-8")
        return path

    return _write
