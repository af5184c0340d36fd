"""Local command execution via subprocess."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from powerplanctl.core.errors import ExecutionFailure, ExecutorTimeoutError

LOGGER = logging.getLogger(__name__)


def _describe_failure(command: Sequence[str], result: subprocess.CompletedProcess[str]) -> str:
    detail = (result.stderr or "").strip() or (result.stdout or "").strip()
    message = f"'{' '.join(command)}' exited with status {result.returncode}"
    return f"{message}: {detail}" if detail else message


class LocalExecutor:
    def __init__(self, *, timeout_s: float | None = 30.0) -> None:
        self.timeout_s = timeout_s

    def run(self, command: Sequence[str], *, host: str | None = None) -> list[str]:
        if host is not None:
            raise ExecutionFailure(
                f"Local executor cannot run commands on remote host '{host}'"
            )
        LOGGER.debug("Running locally: %s", " ".join(command))
        try:
            result = subprocess.run(
                list(command),
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout_s,
            )
        except FileNotFoundError as exc:
            raise ExecutionFailure(f"Command not found: {command[0]}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ExecutorTimeoutError(
                f"'{' '.join(command)}' timed out after {self.timeout_s}s"
            ) from exc
        except OSError as exc:
            raise ExecutionFailure(f"Could not run '{' '.join(command)}': {exc}") from exc

        if result.returncode != 0:
            raise ExecutionFailure(_describe_failure(command, result))
        return result.stdout.splitlines()
