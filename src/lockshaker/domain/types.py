"""Evaluation outcomes for the propagation engine."""

from __future__ import annotations

from enum import StrEnum


class Outcome(StrEnum):
    """Result of evaluating whether a single package may become dev-only."""

    DEV = "dev"
    NOT_DEV = "not_dev"
    PENDING = "pending"
