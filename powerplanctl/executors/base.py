"""Command executor interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class CommandExecutor(Protocol):
    def run(self, command: Sequence[str], *, host: str | None = None) -> list[str]:
        """Run a command line against `host` (local when None) and return its stdout lines."""
