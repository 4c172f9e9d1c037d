"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from chronoline.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from chronoline.services.result import ServiceResult

    Renderer = Callable[[ServiceResult, Console], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose and result.meta:
            _render_meta(console, result.meta)
    else:
        _render_error(result, console)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    data = result.data
    if result.op == "build_timeline":
        return "\n".join(item["title"] for item in data.get("items", []))
    if result.op == "check_condition":
        return "true" if data.get("match") else "false"
    if result.op == "translate_condition":
        return str(data.get("expression", ""))
    if result.op == "parse_date":
        return ",".join("" if c is None else str(c) for c in data.get("date", []))
    if result.op == "format_date":
        return str(data.get("formatted", ""))
    if result.op == "list_presets":
        return "\n".join(item["name"] for item in data.get("items", []))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="chrono.ok")
    op = Text(f"  {result.op}", style="chrono.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any, style: str = "") -> None:
    k = Text(f"  {key}: ", style="chrono.key")
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    console.print(Text.assemble(k, Text(str(value), style=style)))


def _render_meta(console: Console, meta: dict[str, Any]) -> None:
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in meta.items():
        console.print(Text(f"    {k}: {v}"))


def _render_error(result: ServiceResult, console: Console) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="chrono.error")
    op = Text(f"  {result.op}", style="chrono.op")
    console.print(label, op, Text(" — "), Text(msg))
    if err and err.detail:
        for k, v in err.detail.items():
            _field(console, k, v)


# ── Op renderers ──────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_timeline(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    items: list[dict[str, Any]] = data.get("items", [])
    if items:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Start", style="chrono.date", no_wrap=True)
        table.add_column("End", style="chrono.date", no_wrap=True)
        table.add_column("Title", style="chrono.title")
        table.add_column("Source", style="chrono.source")
        for item in items:
            table.add_row(
                Text(item.get("start") or ""),
                Text(item.get("end") or ""),
                Text(item.get("title", "")),
                Text(item.get("source", "")),
            )
        console.print(table)
    _field(console, "count", data.get("count", 0))
    _field(console, "skipped", data.get("skipped", 0))
    if data.get("failures"):
        _field(console, "failures", len(data["failures"]))


def _render_check(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    matched = result.data.get("match")
    verdict = Text("MATCH" if matched else "NO MATCH")
    verdict.stylize("chrono.match" if matched else "chrono.nomatch")
    console.print(Text("  "), verdict)
    _field(console, "expression", result.data.get("expression", ""))
    _field(console, "tags", result.data.get("tags", []))


def _render_date(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    if "formatted" in data:
        _field(console, "formatted", data["formatted"], style="chrono.date")
    components = [
        f"{name}={'' if value is None else value}"
        for name, value in zip(data.get("groups", []), data.get("date", []))
    ]
    _field(console, "date", " ".join(components))
    _field(console, "preset", data.get("preset", ""))


def _render_presets(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    default = result.data.get("default")
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="chrono.title")
    table.add_column("Display")
    table.add_column("Groups")
    for item in result.data.get("items", []):
        name = item["name"] + (" *" if item["name"] == default else "")
        table.add_row(Text(name), Text(item["display"]), Text(",".join(item["groups"])))
    console.print(table)


_OP_RENDERERS: dict[str, Renderer] = {
    "build_timeline": _render_timeline,
    "check_condition": _render_check,
    "parse_date": _render_date,
    "format_date": _render_date,
    "list_presets": _render_presets,
}
