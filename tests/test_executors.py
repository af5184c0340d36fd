from __future__ import annotations

import subprocess

import pytest

from powerplanctl.core.errors import ExecutionFailure, ExecutorConnectError, ExecutorTimeoutError
from powerplanctl.core.model import HostProfile
from powerplanctl.executors.dispatch import DispatchingExecutor
from powerplanctl.executors.local import LocalExecutor
from powerplanctl.executors.ssh import SSHExecutor


def _cp(cmd: list[str], rc: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(cmd, rc, stdout=stdout, stderr=stderr)


def test_local_executor_returns_stdout_lines(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text, timeout):
        seen.append(cmd)
        return _cp(cmd, 0, stdout="line one\nline two\n")

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert LocalExecutor().run(["powercfg", "/l"]) == ["line one", "line two"]
    assert seen == [["powercfg", "/l"]]


def test_local_executor_nonzero_exit_is_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, timeout):
        return _cp(cmd, 1, stdout="Unable to perform operation. An invalid parameter was specified.\n")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(ExecutionFailure) as exc:
        LocalExecutor().run(["powercfg", "/s", "bad"])
    assert "invalid parameter" in str(exc.value)


def test_local_executor_missing_binary(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, timeout):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(ExecutionFailure):
        LocalExecutor().run(["powercfg", "/l"])


def test_local_executor_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, timeout):
        raise subprocess.TimeoutExpired(cmd, timeout)

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(ExecutorTimeoutError):
        LocalExecutor(timeout_s=1.0).run(["powercfg", "/l"])


def test_local_executor_rejects_remote_host() -> None:
    with pytest.raises(ExecutionFailure):
        LocalExecutor().run(["powercfg", "/l"], host="lab-pc")


def test_ssh_executor_builds_command_from_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text, timeout):
        seen.append(cmd)
        return _cp(cmd, 0, stdout="ok\n")

    monkeypatch.setattr(subprocess, "run", fake_run)
    profile = HostProfile(name="lab", address="10.0.0.5", user="admin", port=2222, ssh_options=("-i", "key"))
    executor = SSHExecutor({"lab": profile})

    assert executor.run(["powercfg", "/changename", "id", "My Plan"], host="lab") == ["ok"]
    cmd = seen[0]
    assert cmd[0] == "ssh"
    assert cmd[-2] == "admin@10.0.0.5"
    assert cmd[-1] == 'powercfg /changename id "My Plan"'
    assert ["-p", "2222"] == cmd[cmd.index("-p"):cmd.index("-p") + 2]
    assert "-i" in cmd


def test_ssh_executor_unknown_host_is_bare_destination(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text, timeout):
        seen.append(cmd)
        return _cp(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)
    SSHExecutor().run(["powercfg", "/l"], host="desk.example.org")
    assert seen[0][-2] == "desk.example.org"


def test_ssh_connect_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, timeout):
        return _cp(cmd, 255, stderr="ssh: connect to host lab port 22: Connection refused")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(ExecutorConnectError):
        SSHExecutor().run(["powercfg", "/l"], host="lab")


def test_ssh_remote_command_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, timeout):
        return _cp(cmd, 1, stdout="Invalid Parameters")

    monkeypatch.setattr(subprocess, "run", fake_run)
    with pytest.raises(ExecutionFailure) as exc:
        SSHExecutor().run(["powercfg", "/q", "bad"], host="lab")
    assert not isinstance(exc.value, ExecutorConnectError)


class RecordingExecutor:
    def __init__(self) -> None:
        self.calls: list[tuple[tuple[str, ...], str | None]] = []

    def run(self, command, *, host=None):
        self.calls.append((tuple(command), host))
        return []


def test_dispatch_routes_by_host() -> None:
    local, remote = RecordingExecutor(), RecordingExecutor()
    executor = DispatchingExecutor(local=local, remote=remote)

    executor.run(["powercfg", "/l"])
    executor.run(["powercfg", "/l"], host="lab")

    assert local.calls == [(("powercfg", "/l"), None)]
    assert remote.calls == [(("powercfg", "/l"), "lab")]
