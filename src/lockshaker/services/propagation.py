"""PropagationEngine — decide, package by package, whether dev-only is safe.

A package may become dev-only when every package that actually resolves to
it is already dev-only, is declared safe by a matching pattern group, or can
itself become dev-only. Once a package flips, the engine tries the same on
the packages it depends on.

INVARIANT: ``dev`` is monotonic. The engine never clears it.
INVARIANT: The in-progress set holds exactly the packages whose dependant
scan is still running. Every exit path removes the package again; this is
the only guard against infinite recursion on cyclic graphs.

Cycles resolve optimistically: a dependant that is still being decided
further up the *same* chain counts as safe, so a closed loop with no outside
disqualifier flips as a whole. A dependant that is pending for any other
reason blocks the package for this pass; the driver does not iterate to a
fixed point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from lockshaker.domain.dependants import find_dependants
from lockshaker.domain.lockfile import DependencyGraph
from lockshaker.domain.paths import find_installed_copy
from lockshaker.domain.policy import Policy
from lockshaker.domain.types import Outcome

logger = logging.getLogger(__name__)

ROOT = ""


@dataclass
class Unresolved:
    """A declared dependency with no installed copy in the ancestor chain."""

    parent: str
    name: str


@dataclass
class PropagationEngine:
    """Single-run evaluator over one lockfile graph.

    Attributes:
        graph: The graph to mutate in place.
        policy: Compiled reclassification policy.
        decisions: Every non-memoized decision in the order it was made.
        unresolved: Dependencies skipped during downward propagation.
    """

    graph: DependencyGraph
    policy: Policy
    decisions: list[tuple[str, Outcome]] = field(default_factory=list)
    unresolved: list[Unresolved] = field(default_factory=list)
    _in_progress: set[str] = field(default_factory=set, init=False, repr=False)

    def run(self) -> list[str]:
        """Evaluate every package once, in lockfile order.

        Returns the paths that ended the pass pending (still not dev-only
        and last decided as PENDING).
        """
        for path in list(self.graph):
            self.evaluate(path)
        latest = dict(self.decisions)
        return [
            p
            for p, outcome in latest.items()
            if outcome is Outcome.PENDING and not self.graph.is_dev(p)
        ]

    def evaluate(self, path: str, chain: frozenset[str] = frozenset()) -> Outcome:
        """Decide whether *path* can be dev-only, flipping it if so.

        *chain* holds the packages whose evaluation is waiting on this one.
        """
        if path == ROOT:
            return Outcome.NOT_DEV
        if self.graph.is_dev(path):
            return Outcome.DEV
        if path in self._in_progress:
            return Outcome.PENDING

        self._in_progress.add(path)
        try:
            if self.policy.is_forced(path):
                logger.debug("Forcing %s to dev-only", path)
            else:
                outcome = self._check_dependants(path, chain)
                if outcome is not None:
                    self._decide(path, outcome)
                    return outcome
            self.graph.mark_dev(path)
        finally:
            self._in_progress.discard(path)

        self._decide(path, Outcome.DEV)
        self._propagate(path)
        return Outcome.DEV

    def _check_dependants(self, path: str, chain: frozenset[str]) -> Outcome | None:
        """Scan the dependants of *path*.

        Returns NOT_DEV or PENDING when *path* must stay as it is, None when
        every dependant allows the flip.
        """
        groups = self.policy.matching_groups(path)
        inner = chain | {path}
        blocked = False

        for dependant in find_dependants(self.graph, path):
            if dependant == ROOT:
                return Outcome.NOT_DEV
            if self.graph.is_dev(dependant):
                continue
            if self.policy.is_safe_dependant(groups, dependant):
                continue

            outcome = self.evaluate(dependant, inner)
            if outcome is Outcome.DEV:
                continue
            if outcome is Outcome.NOT_DEV:
                return Outcome.NOT_DEV
            if dependant in inner:
                # Circular: the dependant is waiting on us further up the chain.
                continue
            # Keep scanning; a later dependant may still rule us out.
            blocked = True

        return Outcome.PENDING if blocked else None

    def _propagate(self, path: str) -> None:
        """Try to flip the installed copies of everything *path* depends on."""
        for name in self.graph.dependency_names(path):
            dependency = find_installed_copy(self.graph.packages, path, name)
            if dependency is None:
                self.unresolved.append(Unresolved(parent=path, name=name))
                continue
            self.evaluate(dependency)

    def _decide(self, path: str, outcome: Outcome) -> None:
        logger.debug("%s -> %s", path, outcome)
        self.decisions.append((path, outcome))
