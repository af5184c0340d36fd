"""Stable public API for building tooling on top of powerplanctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from dataclasses import dataclass

from powerplanctl.core.errors import (
    AmbiguousMatchError,
    ConfigLoadError,
    ConfigValidationError,
    ExecutionFailure,
    ExecutorConnectError,
    ExecutorTimeoutError,
    NotFoundError,
    PowerPlanError,
    ValidationError,
)
from powerplanctl.core.model import (
    AppConfig,
    EntityRef,
    HostProfile,
    Plan,
    QueryContext,
    Setting,
    SettingRange,
    SubGroup,
)
from powerplanctl.core.service import ConfirmWrite, PowerCfgService
from powerplanctl.executors.base import CommandExecutor

__all__ = [
    "PowerPlanError",
    "AmbiguousMatchError",
    "ConfigLoadError",
    "ConfigValidationError",
    "ExecutionFailure",
    "ExecutorConnectError",
    "ExecutorTimeoutError",
    "NotFoundError",
    "ValidationError",
    "AppConfig",
    "EntityRef",
    "HostProfile",
    "Plan",
    "QueryContext",
    "Setting",
    "SettingRange",
    "SubGroup",
    "CommandExecutor",
    "ConfirmWrite",
    "PlanSnapshot",
    "Client",
]


@dataclass(frozen=True)
class PlanSnapshot:
    """A plan together with its queried subgroups and settings."""

    plan: Plan
    subgroups: tuple[SubGroup, ...]


class Client:
    """Public client for querying and changing power plans.

    A `Client` instance targets one host (local when `host` is None) and
    wraps plan listing, name resolution, detail queries, and write-back behind
    a stable API intended for third-party tools (GUI/TUI/services/scripts).
    """

    def __init__(
        self,
        *,
        host: str | None = None,
        executor: CommandExecutor | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self._service = PowerCfgService(executor=executor, host=host, config=config)

    @property
    def host(self) -> str | None:
        return self._service.host

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_plans(self) -> list[Plan]:
        return self._service.list_plans()

    def get_plan(self, plan: str | None = None) -> Plan:
        return self._service.get_plan(plan)

    def get_plan_snapshot(
        self,
        plan: str | None = None,
        *,
        subgroup: str | None = None,
        setting: str | None = None,
    ) -> PlanSnapshot:
        resolved, subgroups = self._service.snapshot(plan, subgroup, setting)
        return PlanSnapshot(plan=resolved, subgroups=tuple(subgroups))

    def list_subgroups(
        self,
        plan: str | None = None,
        *,
        subgroup: str | None = None,
        setting: str | None = None,
    ) -> list[SubGroup]:
        return self._service.list_subgroups(plan, subgroup, setting)

    def get_subgroup(self, subgroup: str, *, plan: str | None = None) -> SubGroup:
        return self._service.get_subgroup(plan, subgroup)

    def get_setting(self, subgroup: str, setting: str, *, plan: str | None = None) -> Setting:
        return self._service.get_setting(plan, subgroup, setting)

    def set_value(
        self,
        subgroup: str,
        setting: str,
        value: int | str,
        *,
        plan: str | None = None,
        ac: bool = True,
        dc: bool = True,
        confirm: ConfirmWrite | None = None,
    ) -> Setting:
        return self._service.set_value(plan, subgroup, setting, value, ac=ac, dc=dc, confirm=confirm)

    def write(
        self,
        plan_id: str,
        subgroup_id: str,
        setting_id: str,
        value: int,
        *,
        apply_ac: bool,
        apply_dc: bool,
    ) -> Setting:
        return self._service.write(
            plan_id,
            subgroup_id,
            setting_id,
            value,
            apply_ac=apply_ac,
            apply_dc=apply_dc,
        )

    def activate(self, plan: str) -> list[Plan]:
        return self._service.activate(plan)

    def delete(self, plan: str) -> list[Plan]:
        return self._service.delete(plan)

    def duplicate(self, plan: str) -> list[Plan]:
        return self._service.duplicate(plan)

    def rename(self, plan: str, new_name: str, *, description: str | None = None) -> list[Plan]:
        return self._service.rename(plan, new_name, description)
