"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from lockshaker.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from lockshaker.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    # For list results, return paths only
    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("path", "")) for item in items)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="shaker.ok")
    op = Text(f"  {result.op}", style="shaker.op")
    console.print(Text.assemble(label, op))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="shaker.key")
    if key in ("path", "lockfile", "config"):
        v = Text(str(value), style="shaker.path")
    elif isinstance(value, int) and not isinstance(value, bool):
        v = Text(str(value), style="shaker.count")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}", markup=False)


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _path_list(console: Console, title: str, paths: list[str]) -> None:
    console.print()
    console.print(Text(f"  {title}:", style="dim"))
    for path in paths:
        console.print(Text(f"    {path}", style="shaker.path"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="shaker.error")
    op = Text(f"  {result.op}", style="shaker.op")
    console.print(Text.assemble(label, op, " — ", msg))

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}", markup=False)


# ── Operation renderers ───────────────────────────────────────────────


def _render_shake(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "lockfile", d.get("lockfile", ""))

    if d.get("skipped"):
        _field(console, "skipped", d.get("reason", "yes"))
        return

    verb = "Would change" if d.get("dry_run") else "Changed"
    console.print(
        f"  {verb} {d['changed_count']} packages to dev-only. "
        f"Production package count reduced from {d['production_before']} "
        f"to {d['production_after']}."
    )
    if d.get("pending"):
        _field(console, "pending", len(d["pending"]))

    if verbose:
        if d.get("changed"):
            _path_list(console, "changed", d["changed"])
        if d.get("pending"):
            _path_list(console, "pending", d["pending"])
        _render_meta(console, result)


def _render_dependants(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "path", d["path"])
    _field(console, "name", d["name"])
    _field(console, "dev", d["dev"])

    items = d.get("items", [])
    if not items:
        console.print(Text("  No dependants.", style="dim"))
    else:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Dependant", style="shaker.path", no_wrap=True)
        table.add_column("Class")
        for item in items:
            if item["dev"]:
                label = Text("dev", style="shaker.dev")
            else:
                label = Text("prod", style="shaker.prod")
            table.add_row(item["path"], label)
        console.print(table)

    if verbose:
        _render_meta(console, result)


def _describe_matcher(matcher: Any) -> str:
    if isinstance(matcher, dict):
        flags = matcher.get("flags", "")
        return f"/{matcher['regex']}/{flags}"
    return repr(matcher)


def _render_policy(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "config", d.get("config") or "(none)")
    _field(console, "explicit", d.get("explicit", False))

    for i, group in enumerate(d.get("patterns", []), start=1):
        console.print()
        console.print(Text(f"  group {i}", style="bold"))
        packages = ", ".join(_describe_matcher(m) for m in group["packages"])
        console.print(f"    packages: {packages}", markup=False)
        safe = ", ".join(_describe_matcher(m) for m in group["safe_dependants"]) or "(none)"
        console.print(f"    safe dependants: {safe}", markup=False)

    force = d.get("force_patterns", [])
    console.print()
    forced = ", ".join(_describe_matcher(m) for m in force) or "(none)"
    console.print(f"  force patterns: {forced}", markup=False)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "shake": _render_shake,
    "dependants": _render_dependants,
    "policy": _render_policy,
}
