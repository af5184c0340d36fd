"""Host-based routing between local and remote executors."""

from __future__ import annotations

from collections.abc import Sequence

from powerplanctl.executors.base import CommandExecutor
from powerplanctl.executors.local import LocalExecutor
from powerplanctl.executors.ssh import SSHExecutor


class DispatchingExecutor:
    def __init__(
        self,
        *,
        local: CommandExecutor | None = None,
        remote: CommandExecutor | None = None,
    ) -> None:
        self.local = local or LocalExecutor()
        self.remote = remote or SSHExecutor()

    def run(self, command: Sequence[str], *, host: str | None = None) -> list[str]:
        if host is None:
            return self.local.run(command)
        return self.remote.run(command, host=host)
