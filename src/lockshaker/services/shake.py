"""ShakeService — run the propagation engine over a lockfile and save it.

The run is a single pass: every package path is evaluated once, in the
order the lockfile stores them. Packages blocked only by visiting order keep
their classification until the next run.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from lockshaker.domain.lockfile import LockfileError
from lockshaker.domain.policy import PolicyError
from lockshaker.infrastructure.lockfile import write_lockfile
from lockshaker.services.base import BaseService
from lockshaker.services.propagation import PropagationEngine
from lockshaker.services.result import ServiceResult
from lockshaker.services.telemetry import trace_span, traced

# npm exports the running command to lifecycle scripts.
NPM_COMMAND_ENV = "npm_command"


class ShakeService(BaseService):
    """Reclassifies dev-only packages in a lockfile."""

    @traced
    def shake(
        self,
        lockfile: Path | None = None,
        *,
        dry_run: bool = False,
        presets: Sequence[str] = (),
        force: bool = False,
    ) -> ServiceResult:
        """Make every package that production does not need dev-only.

        Args:
            lockfile: Lockfile to rewrite; defaults to the configured one.
            dry_run: Evaluate without writing the file back.
            presets: Extra named presets merged into the policy.
            force: Run even inside ``npm ci``.
        """
        path = self._resolve_lockfile(lockfile)

        if (
            not force
            and self._settings.lockfile.skip_on_npm_ci
            and os.environ.get(NPM_COMMAND_ENV) == "ci"
        ):
            return ServiceResult(
                ok=True,
                op="shake",
                data={"lockfile": str(path), "skipped": True, "reason": "npm ci"},
            )

        warnings: list[str] = []
        try:
            with trace_span("policy"):
                policy = self._build_policy(presets, warnings)
        except PolicyError as exc:
            return ServiceResult.failure("shake", "INVALID_CONFIG", str(exc))

        try:
            with trace_span("load") as span:
                loaded, graph = self._load_graph(path, warnings)
                if span:
                    span.annotate("packages", len(graph))
        except LockfileError as exc:
            return ServiceResult.failure("shake", exc.code, str(exc), lockfile=str(path))

        dev_before = graph.dev_paths()
        with trace_span("evaluate") as span:
            engine = PropagationEngine(graph, policy)
            pending = engine.run()
            if span:
                span.annotate("decisions", len(engine.decisions))

        changed = [p for p in graph if p not in dev_before and graph.is_dev(p)]
        warnings.extend(
            f"Could not find package for dependency {miss.name!r} of {miss.parent!r}"
            for miss in engine.unresolved
        )

        written = False
        if changed and not dry_run:
            with trace_span("write"):
                write_lockfile(loaded)
            written = True

        if self._plugins is not None:
            self._plugins.notify_shake(
                warnings,
                lockfile_path=str(path),
                changed=changed,
                dry_run=dry_run,
            )

        total = len(graph)
        data: dict[str, Any] = {
            "lockfile": str(path),
            "total": total,
            "changed_count": len(changed),
            "production_before": total - len(dev_before),
            "production_after": total - len(dev_before) - len(changed),
            "pending": pending,
            "dry_run": dry_run,
            "written": written,
            "changed": changed,
        }
        return ServiceResult(ok=True, op="shake", data=data, warnings=warnings)
