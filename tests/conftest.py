"""Shared pytest fixtures and test helpers for lockshaker tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from lockshaker.config.settings import ShakerSettings
from lockshaker.domain.lockfile import DependencyGraph
from lockshaker.domain.policy import Policy
from lockshaker.services.propagation import PropagationEngine
from lockshaker.services.telemetry import disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host npm/lockshaker variables out of every test."""
    monkeypatch.delenv("npm_command", raising=False)
    monkeypatch.delenv("LOCKSHAKER_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Restore root logger state after tests that configure logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    shaker = logging.getLogger("lockshaker")
    shaker_level = shaker.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    shaker.setLevel(shaker_level)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Iterator[None]:
    """``--verbose`` turns telemetry on for the whole thread; turn it off again."""
    yield
    disable_telemetry()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty project directory."""
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> ShakerSettings:
    """Settings rooted at the temp project, plugins off."""
    return ShakerSettings.from_cli(project_root=project_root, plugins={"enabled": False})


@pytest.fixture
def write_lockfile(project_root: Path) -> Callable[..., Path]:
    """Write a package-lock.json into the project and return its path."""

    def _write(packages: dict[str, Any], *, version: int = 3, indent: int | str = 2) -> Path:
        path = project_root / "package-lock.json"
        doc = lockfile_doc(packages, version=version)
        path.write_text(json.dumps(doc, indent=indent) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI finds its lockfile there."""
    monkeypatch.chdir(project_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def nm(*names: str) -> str:
    """Build a nested package path: nm("a", "b") -> node_modules/a/node_modules/b."""
    return "/".join(f"node_modules/{n}" for n in names)


def pkg(*deps: str, dev: bool = False, dev_optional: bool = False, **extra: Any) -> dict[str, Any]:
    """Build a package record depending on *deps*."""
    record: dict[str, Any] = {"version": "1.0.0", **extra}
    if deps:
        record["dependencies"] = {d: "^1.0.0" for d in deps}
    if dev:
        record["dev"] = True
    if dev_optional:
        record["devOptional"] = True
    return record


def lockfile_doc(packages: dict[str, Any], *, version: int = 3) -> dict[str, Any]:
    return {
        "name": "app",
        "version": "1.0.0",
        "lockfileVersion": version,
        "requires": True,
        "packages": packages,
    }


def run_engine(
    packages: dict[str, Any],
    policy: Policy | None = None,
) -> tuple[DependencyGraph, PropagationEngine]:
    """Run one full pass over *packages* (mutated in place)."""
    graph = DependencyGraph(packages)
    engine = PropagationEngine(graph, policy or Policy())
    engine.run()
    return graph, engine
