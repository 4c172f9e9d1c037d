"""Tests for ChronoSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from chronoline.config.settings import ChronoSettings


class TestChronoSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = ChronoSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.metadata.start_date_key == "start-date"
        assert settings.timeline.condition == ""
        assert settings.timeline.require_render_toggle is True
        assert settings.dates.preset == "normal"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = ChronoSettings.from_cli(project_root=tmp_path)
        with pytest.raises(ValidationError):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "chronoline.toml").write_text(
            '[timeline]\ncondition = "history AND NOT(draft)"\n'
            '[dates]\npreset = "verbose-day"\n'
        )
        settings = ChronoSettings.from_cli(project_root=tmp_path)
        assert settings.timeline.condition == "history AND NOT(draft)"
        assert settings.dates.preset == "verbose-day"
        assert settings.timeline.look_for_tags is False  # default preserved

    def test_sparse_override(self, tmp_path: Path) -> None:
        """Only overridden fields change — rest keeps defaults."""
        (tmp_path / "chronoline.toml").write_text('[metadata]\nstart_date_key = "born"\n')
        settings = ChronoSettings.from_cli(project_root=tmp_path)
        assert settings.metadata.start_date_key == "born"
        assert settings.metadata.end_date_key == "end-date"

    def test_legacy_tag_lists(self, tmp_path: Path) -> None:
        (tmp_path / "chronoline.toml").write_text(
            '[timeline]\ntags_to_find = ["rome", "greece"]\nnot_tags = ["draft"]\n'
        )
        settings = ChronoSettings.from_cli(project_root=tmp_path)
        assert settings.timeline.tags_to_find == ["rome", "greece"]
        assert settings.timeline.not_tags == ["draft"]

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "chronoline.toml").write_text("")
        settings = ChronoSettings.from_cli(project_root=tmp_path)
        assert settings.dates.preset == "normal"
        assert settings.config_path == (tmp_path / "chronoline.toml").resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[dates]\npreset = "imperial"\n')
        settings = ChronoSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.dates.preset == "imperial"
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "chronoline.toml").write_text("[timeline\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            ChronoSettings.from_cli(project_root=tmp_path)


class TestCliFlags:
    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = ChronoSettings.from_cli(
            project_root=tmp_path,
            json_output=True,
            quiet=True,
            verbose=True,
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True

    def test_cli_flags_override_toml(self, tmp_path: Path) -> None:
        """CLI flags take priority over TOML values."""
        (tmp_path / "chronoline.toml").write_text("quiet = true\n")
        settings = ChronoSettings.from_cli(project_root=tmp_path, quiet=False)
        assert settings.quiet is False


class TestProjectRootResolution:
    def test_root_from_toml_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """When no explicit root, use parent of discovered chronoline.toml."""
        subdir = tmp_path / "sub" / "deep"
        subdir.mkdir(parents=True)
        (tmp_path / "chronoline.toml").write_text("")
        monkeypatch.chdir(subdir)
        settings = ChronoSettings.from_cli()
        assert settings.project_root.resolve() == tmp_path.resolve()


class TestEnvVars:
    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHRONOLINE_QUIET", "true")
        settings = ChronoSettings.from_cli(project_root=tmp_path)
        assert settings.quiet is True

    def test_nested_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "chronoline.toml").write_text('[dates]\npreset = "imperial"\n')
        monkeypatch.setenv("CHRONOLINE_DATES__PRESET", "verbose-day")

        settings = ChronoSettings.from_cli(project_root=tmp_path)

        assert settings.dates.preset == "verbose-day"
