"""Lockfile reading and format-preserving writing.

INVARIANT: Write-back changes nothing but the records the engine touched.
Key order comes from the parsed dicts; indentation and the trailing newline
are detected from the original text, the same way npm keeps them stable.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lockshaker.domain.lockfile import InvalidLockfileError, LockfileNotFoundError

DEFAULT_INDENT = "  "

_INDENT_RE = re.compile(r"^([ \t]+)\S", re.MULTILINE)


@dataclass(frozen=True)
class JsonStyle:
    """Formatting detected from an existing JSON document."""

    indent: str = DEFAULT_INDENT
    newline: str = "\n"
    trailing_newline: bool = True


@dataclass
class LoadedLockfile:
    """A parsed lockfile plus what is needed to write it back."""

    path: Path
    document: dict[str, Any]
    style: JsonStyle


def detect_style(text: str) -> JsonStyle:
    """Detect indentation and line endings of *text*.

    Uses the first indented line; falls back to two spaces.
    """
    match = _INDENT_RE.search(text)
    indent = match.group(1) if match else DEFAULT_INDENT
    if "\t" in indent:
        indent = "\t"
    newline = "\r\n" if "\r\n" in text else "\n"
    return JsonStyle(
        indent=indent,
        newline=newline,
        trailing_newline=text.endswith("\n"),
    )


def read_lockfile(path: Path) -> LoadedLockfile:
    """Read and parse *path*.

    Raises:
        LockfileNotFoundError: *path* does not exist.
        InvalidLockfileError: The file is not a JSON object.
    """
    if not path.is_file():
        msg = f"No lockfile at {path}"
        raise LockfileNotFoundError(msg)

    # newline="" keeps CRLF visible to detect_style.
    with path.open(encoding="utf-8", newline="") as fh:
        text = fh.read()
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise InvalidLockfileError(msg) from exc
    if not isinstance(document, dict):
        msg = f"Lockfile {path} does not contain a JSON object"
        raise InvalidLockfileError(msg)

    return LoadedLockfile(path=path, document=document, style=detect_style(text))


def render_lockfile(document: dict[str, Any], style: JsonStyle) -> str:
    """Serialize *document* using *style*."""
    text = json.dumps(document, indent=style.indent, ensure_ascii=False)
    if style.newline != "\n":
        text = text.replace("\n", style.newline)
    if style.trailing_newline:
        text += style.newline
    return text


def write_lockfile(lockfile: LoadedLockfile) -> None:
    """Write *lockfile* back to its original path."""
    rendered = render_lockfile(lockfile.document, lockfile.style)
    # newline="" keeps the detected line endings as-is on every platform.
    with lockfile.path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(rendered)
