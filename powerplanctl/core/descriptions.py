"""Optional plan description sources.

Descriptions are enrichment only. The service treats any error raised by a
source as "no descriptions" and still builds the plan table.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from powerplanctl.executors.base import CommandExecutor

CIM_QUERY = (
    "Get-CimInstance -Namespace root\\cimv2\\power -ClassName Win32_PowerPlan"
    " | Format-List ElementName,Description"
)


class DescriptionSource(Protocol):
    def descriptions(self, host: str | None = None) -> dict[str, str]:
        """Return plan display name -> description."""


class NoDescriptionSource:
    def descriptions(self, host: str | None = None) -> dict[str, str]:
        return {}


class ConfigDescriptionSource:
    def __init__(self, descriptions: Mapping[str, str]) -> None:
        self._descriptions = dict(descriptions)

    def descriptions(self, host: str | None = None) -> dict[str, str]:
        return dict(self._descriptions)


def parse_format_list(lines: Sequence[str]) -> dict[str, str]:
    """Parse `Format-List ElementName,Description` records into name -> description."""
    result: dict[str, str] = {}
    name: str | None = None
    description: str | None = None
    last_key: str | None = None

    def _flush() -> None:
        if name is not None and description is not None:
            result[name] = description

    for raw in lines:
        if not raw.strip():
            _flush()
            name, description, last_key = None, None, None
            continue
        key, sep, value = raw.partition(" : ")
        key = key.strip()
        if sep and key in ("ElementName", "Description"):
            if key == "ElementName":
                name = value.strip()
            else:
                description = value.strip()
            last_key = key
        elif last_key == "Description" and description is not None and raw[:1].isspace():
            # Format-List wraps long values onto indented continuation lines.
            description = f"{description} {raw.strip()}"
    _flush()
    return result


class CimDescriptionSource:
    """Reads `Win32_PowerPlan` descriptions through PowerShell on the target host."""

    def __init__(self, executor: CommandExecutor, *, shell: str = "powershell") -> None:
        self.executor = executor
        self.shell = shell

    def command(self) -> list[str]:
        return [self.shell, "-NoProfile", "-NonInteractive", "-Command", CIM_QUERY]

    def descriptions(self, host: str | None = None) -> dict[str, str]:
        return parse_format_list(self.executor.run(self.command(), host=host))
