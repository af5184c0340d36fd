"""Remote command execution through the OpenSSH client."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence

from powerplanctl.core.errors import (
    ExecutionFailure,
    ExecutorConnectError,
    ExecutorTimeoutError,
)
from powerplanctl.core.model import HostProfile

LOGGER = logging.getLogger(__name__)

DEFAULT_SSH_OPTIONS: tuple[str, ...] = (
    "-o", "BatchMode=yes",
    "-o", "ConnectTimeout=10",
)
_SSH_CONNECT_FAILURE = 255


class SSHExecutor:
    """Runs commands on Windows hosts that expose an OpenSSH server.

    `host` is looked up in `profiles` first; an unknown name is used as a bare
    ssh destination.
    """

    def __init__(
        self,
        profiles: Mapping[str, HostProfile] | None = None,
        *,
        ssh_binary: str = "ssh",
        timeout_s: float | None = 60.0,
    ) -> None:
        self.profiles = dict(profiles or {})
        self.ssh_binary = ssh_binary
        self.timeout_s = timeout_s

    def profile_for(self, host: str) -> HostProfile:
        profile = self.profiles.get(host)
        if profile is None:
            LOGGER.warning("Host '%s' has no configured profile; using it as ssh destination", host)
            profile = HostProfile(name=host, address=host)
        return profile

    def build_command(self, profile: HostProfile, command: Sequence[str]) -> list[str]:
        # cmd.exe on the remote side parses the line with Windows quoting rules.
        remote_line = subprocess.list2cmdline(list(command))
        return [
            self.ssh_binary,
            *DEFAULT_SSH_OPTIONS,
            *profile.ssh_options,
            "-p",
            str(profile.port),
            profile.destination,
            remote_line,
        ]

    def run(self, command: Sequence[str], *, host: str | None = None) -> list[str]:
        if host is None:
            raise ExecutionFailure("SSH executor requires a target host")
        profile = self.profile_for(host)
        ssh_cmd = self.build_command(profile, command)
        timeout = profile.timeout_s if profile.timeout_s is not None else self.timeout_s
        LOGGER.debug("Running on %s: %s", profile.destination, " ".join(command))
        try:
            result = subprocess.run(
                ssh_cmd,
                check=False,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise ExecutorConnectError(f"ssh client not found: {self.ssh_binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ExecutorTimeoutError(
                f"'{' '.join(command)}' on {host} timed out after {timeout}s"
            ) from exc

        stderr = (result.stderr or "").strip()
        if result.returncode == _SSH_CONNECT_FAILURE:
            raise ExecutorConnectError(f"Could not connect to {profile.destination}: {stderr}")
        if result.returncode != 0:
            detail = stderr or (result.stdout or "").strip()
            message = f"'{' '.join(command)}' on {host} exited with status {result.returncode}"
            raise ExecutionFailure(f"{message}: {detail}" if detail else message)
        return result.stdout.splitlines()
