"""Tests for TimelineService — building timelines and the date/condition ops."""

from __future__ import annotations

from pathlib import Path

import pytest

from chronoline.config.settings import ChronoSettings
from chronoline.domain.metadata import NoteMetadata
from chronoline.infrastructure.filesystem import NoteDocument
from chronoline.services.timeline import TimelineService


def _service_with_config(project_root: Path, toml: str) -> TimelineService:
    (project_root / "chronoline.toml").write_text(toml)
    return TimelineService(ChronoSettings.from_cli(project_root=project_root))


def _doc(name: str, **frontmatter: object) -> NoteDocument:
    return NoteDocument(
        source=f"{name}.md",
        title=name,
        metadata=NoteMetadata.from_frontmatter(frontmatter),
        body="",
    )


@pytest.fixture
def history_notes(write_note):
    write_note(
        "Caesar crosses the Rubicon",
        'timeline: true\ntimelines: ["history/rome"]\nstart-date: "-49-01-10"',
        body="Alea iacta est.\n",
    )
    write_note(
        "Founding of Rome",
        'timeline: true\ntimelines: ["history/rome"]\nstart-date: "-753-04-21"',
    )
    write_note(
        "Draft note",
        'timeline: true\ntimelines: ["history/rome", "draft"]\nstart-date: "100-01-01"',
    )
    write_note(
        "Hidden",
        'timelines: ["history/rome"]\nstart-date: "1-01-01"',
    )
    write_note(
        "Athens",
        'timeline: true\ntimelines: ["history/greece"]\nstart-date: "-508-01-01"',
    )


class TestBuild:
    @pytest.mark.usefixtures("history_notes")
    def test_filters_and_sorts(self, service: TimelineService, project_root: Path) -> None:
        result = service.build_from_paths(
            [project_root / "notes"], condition="history/rome AND NOT(draft)"
        )
        assert result.ok
        assert result.op == "build_timeline"
        titles = [item["title"] for item in result.data["items"]]
        assert titles == ["Founding of Rome", "Caesar crosses the Rubicon"]
        assert result.data["count"] == 2
        assert result.data["skipped"] == 3
        assert result.data["failures"] == []
        assert result.meta == {"preset": "normal", "condition": "history/rome AND NOT(draft)"}

    @pytest.mark.usefixtures("history_notes")
    def test_rendered_item(self, service: TimelineService, project_root: Path) -> None:
        result = service.build_from_paths([project_root / "notes"], condition="history_greece")
        (item,) = result.data["items"]
        assert item["title"] == "Athens"
        assert item["start"] == "01/01/-0508"
        assert item["start_date"] == [-508, 1, 1]
        assert item["end"] is None
        assert item["end_date"] is None
        assert item["tags"] == ["history/greece"]

    @pytest.mark.usefixtures("history_notes")
    def test_parent_tag_matches_children(
        self, service: TimelineService, project_root: Path
    ) -> None:
        result = service.build_from_paths([project_root / "notes"], condition="history")
        assert result.data["count"] == 4

    def test_ongoing_end(self, service: TimelineService, write_note, project_root: Path) -> None:
        write_note(
            "Cold war",
            'timeline: true\ntimelines: ["era"]\nstart-date: "1947-03-12"\nend-date: true',
        )
        result = service.build_from_paths([project_root / "notes"], condition="era")
        (item,) = result.data["items"]
        assert item["end"] == "Ongoing"
        assert item["end_date"] == "ongoing"

    def test_title_and_body_overrides(
        self, service: TimelineService, write_note, project_root: Path
    ) -> None:
        write_note(
            "raw-name",
            'timeline: true\ntimelines: ["era"]\nevent-title: "Nice title"\n'
            'event-description: "Summary"',
            body="Long body",
        )
        (item,) = service.build_from_paths(
            [project_root / "notes"], condition="era"
        ).data["items"]
        assert item["title"] == "Nice title"
        assert item["body"] == "Summary"

    def test_batch_continues_past_failures(self, project_root: Path, write_note) -> None:
        service = _service_with_config(project_root, '[dates]\npreset = "verbose-day"\n')
        write_note("good", 'timeline: true\ntimelines: ["era"]\nstart-date: "2024-03-07"')
        write_note("bad-month", 'timeline: true\ntimelines: ["era"]\nstart-date: "2024-13-07"')
        broken = project_root / "notes" / "broken.md"
        broken.write_text("---\ntitle: [unclosed\n---\n")

        result = service.build_from_paths([project_root / "notes"], condition="era")

        assert result.ok
        assert [item["start"] for item in result.data["items"]] == ["7th March 2024"]
        codes = sorted(f["code"] for f in result.data["failures"])
        assert codes == ["FORMAT_RANGE", "READ_ERROR"]
        assert len(result.warnings) == 2
        assert any(w.startswith(str(broken)) for w in result.warnings)

    def test_non_finite_dates_do_not_abort_batch(
        self, service: TimelineService, write_note, project_root: Path
    ) -> None:
        write_note("nan", 'timeline: true\ntimelines: ["rome"]\nstart-date: .nan')
        write_note("inf", 'timeline: true\ntimelines: ["rome"]\nend-date: .inf')
        write_note("valid", 'timeline: true\ntimelines: ["rome"]\nstart-date: "2024-01-02"')

        result = service.build_from_paths([project_root / "notes"], condition="rome")

        assert result.ok
        assert result.data["failures"] == []
        items = {item["title"]: item for item in result.data["items"]}
        assert items["nan"]["start_date"] is None
        assert items["inf"]["end_date"] is None
        assert items["valid"]["start"] == "02/01/2024"

    def test_unexpected_value_error_recorded(
        self, service: TimelineService, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from chronoline.services import timeline as timeline_module

        real_extract = timeline_module.extract_card

        def extract(**kwargs: object):
            if kwargs["source"] == "bad.md":
                msg = "unusable metadata"
                raise ValueError(msg)
            return real_extract(**kwargs)

        monkeypatch.setattr(timeline_module, "extract_card", extract)
        docs = [
            _doc("bad", timeline=True, timelines=["x"]),
            _doc("good", timeline=True, timelines=["x"]),
        ]
        result = service.build(docs, condition="x")

        assert result.ok
        assert [item["title"] for item in result.data["items"]] == ["good"]
        assert result.data["failures"] == [
            {"source": "bad.md", "code": "INVALID_NOTE", "message": "unusable metadata"}
        ]

    def test_invalid_condition_recorded_per_note(self, service: TimelineService) -> None:
        docs = [_doc("a", timeline=True, timelines=["x"]), _doc("b", timeline=False)]
        result = service.build(docs, condition="x AND NOT(a, (b))")
        assert result.ok
        assert result.data["count"] == 0
        assert result.data["skipped"] == 1
        assert [f["code"] for f in result.data["failures"]] == ["INVALID_CONDITION"]

    def test_unknown_preset(self, service: TimelineService) -> None:
        result = service.build([], condition="x", preset="gregorian")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_PRESET"
        assert "gregorian" in result.error.message

    def test_no_condition(self, service: TimelineService) -> None:
        result = service.build([])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NO_CONDITION"

    def test_configured_condition(self, project_root: Path) -> None:
        service = _service_with_config(project_root, '[timeline]\ncondition = "a OR b"\n')
        docs = [_doc("one", timeline=True, timelines=["b"]), _doc("two", timeline=True)]
        result = service.build(docs)
        assert [item["title"] for item in result.data["items"]] == ["one"]
        assert result.meta is not None
        assert result.meta["condition"] == "a OR b"

    def test_legacy_tag_lists(self, project_root: Path) -> None:
        service = _service_with_config(
            project_root,
            '[timeline]\ntags_to_find = ["rome", "greece"]\nnot_tags = ["draft"]\n',
        )
        docs = [
            _doc("r", timeline=True, timelines=["rome"]),
            _doc("g", timeline=True, timelines=["greece", "draft"]),
            _doc("e", timeline=True, timelines=["egypt"]),
        ]
        result = service.build(docs)
        assert [item["title"] for item in result.data["items"]] == ["r"]
        assert result.meta is not None
        assert result.meta["condition"] == "(rome OR greece) AND NOT(draft)"

    def test_explicit_condition_beats_config(self, project_root: Path) -> None:
        service = _service_with_config(project_root, '[timeline]\ncondition = "a"\n')
        docs = [
            _doc("a", timeline=True, timelines=["a"]),
            _doc("b", timeline=True, timelines=["b"]),
        ]
        result = service.build(docs, condition="b")
        assert [item["title"] for item in result.data["items"]] == ["b"]

    def test_render_toggle_optional(self, project_root: Path) -> None:
        service = _service_with_config(project_root, "[timeline]\nrequire_render_toggle = false\n")
        result = service.build([_doc("a", timelines=["x"])], condition="x")
        assert result.data["count"] == 1

    def test_inline_tags(self, project_root: Path, write_note) -> None:
        service = _service_with_config(project_root, "[timeline]\nlook_for_tags = true\n")
        write_note("inline", "timeline: true", body="Battle notes #war/naval\n")
        write_note("fm", 'timeline: true\ntags: "war, navy"')
        result = service.build_from_paths([project_root / "notes"], condition="war")
        assert sorted(item["title"] for item in result.data["items"]) == ["fm", "inline"]

    def test_inline_tags_ignored_by_default(
        self, service: TimelineService, write_note, project_root: Path
    ) -> None:
        write_note("inline", "timeline: true", body="#war\n")
        result = service.build_from_paths([project_root / "notes"], condition="war")
        assert result.data["count"] == 0

    def test_custom_metadata_keys(self, project_root: Path) -> None:
        service = _service_with_config(
            project_root,
            '[metadata]\nstart_date_key = "born"\ntimeline_tag_key = "eras"\n',
        )
        doc = _doc("p", timeline=True, eras=["people"], born="1815-12-10")
        (item,) = service.build([doc], condition="people").data["items"]
        assert item["start"] == "10/12/1815"

    def test_undated_cards_first(self, service: TimelineService) -> None:
        docs = [
            _doc("dated", timeline=True, timelines=["x"], **{"start-date": 5}),
            _doc("undated", timeline=True, timelines=["x"]),
        ]
        result = service.build(docs, condition="x")
        assert [item["title"] for item in result.data["items"]] == ["undated", "dated"]
        assert result.data["items"][1]["start_date"] == [5, 1, 1]


class TestConditionOps:
    def test_translate(self, service: TimelineService) -> None:
        result = service.translate("a/b AND NOT(c)")
        assert result.ok
        assert result.data == {"query": "a/b AND NOT(c)", "expression": "a_b and not (c)"}

    def test_translate_invalid(self, service: TimelineService) -> None:
        result = service.translate("NOT()")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_CONDITION"
        assert result.error.detail == {"query": "NOT()"}

    def test_check_match(self, service: TimelineService) -> None:
        result = service.check("history AND NOT(draft)", ["history/rome"])
        assert result.ok
        assert result.data["match"] is True
        assert result.data["tags"] == ["history/rome"]

    def test_check_no_match(self, service: TimelineService) -> None:
        assert service.check("history AND NOT(draft)", ["history", "draft"]).data["match"] is False

    def test_check_malformed(self, service: TimelineService) -> None:
        result = service.check("a AND (b", ["a"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_CONDITION"


class TestDateOps:
    def test_parse(self, service: TimelineService) -> None:
        result = service.parse_date("2024-03-07")
        assert result.ok
        assert result.data == {
            "value": "2024-03-07",
            "preset": "normal",
            "groups": ["year", "month", "day"],
            "date": [2024, 3, 7],
        }

    def test_parse_mismatch(self, service: TimelineService) -> None:
        result = service.parse_date("sometime")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "PATTERN_MISMATCH"
        assert "pattern" in result.error.detail

    def test_parse_unknown_preset(self, service: TimelineService) -> None:
        result = service.parse_date("1", preset="nope")
        assert result.error is not None
        assert result.error.code == "UNKNOWN_PRESET"

    def test_format(self, service: TimelineService) -> None:
        result = service.format_date("1250-2-7-3", preset="malanachan-calendar")
        assert result.ok
        assert result.op == "format_date"
        assert result.data["formatted"] == "3rd Melubris, Apiclus 1250"
        assert result.data["date"] == [1250, 2, 7, 3]

    def test_format_mismatch_keeps_op(self, service: TimelineService) -> None:
        result = service.format_date("never")
        assert not result.ok
        assert result.op == "format_date"
        assert result.error is not None
        assert result.error.code == "PATTERN_MISMATCH"

    def test_format_range(self, service: TimelineService) -> None:
        result = service.format_date("1492-13-1", preset="dnd-calendar-of-harptos-dalereckoning")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "FORMAT_RANGE"

    def test_configured_default_preset(self, project_root: Path) -> None:
        service = _service_with_config(project_root, '[dates]\npreset = "imperial"\n')
        assert service.format_date("2024-03-07").data["formatted"] == "03/07/2024"

    def test_list_presets(self, service: TimelineService) -> None:
        result = service.list_presets()
        assert result.data["count"] == 5
        assert result.data["default"] == "normal"
        normal = result.data["items"][0]
        assert normal == {
            "name": "normal",
            "display": "{day}/{month}/{year}",
            "groups": ["year", "month", "day"],
            "conditional_formatting": False,
        }
