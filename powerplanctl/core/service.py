"""Service layer used by CLI and API frontends."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from powerplanctl.core.commands import PowerCfgCommands
from powerplanctl.core.config_loader import load_config
from powerplanctl.core.descriptions import (
    CimDescriptionSource,
    ConfigDescriptionSource,
    DescriptionSource,
    NoDescriptionSource,
)
from powerplanctl.core.errors import ExecutionFailure, PowerPlanError, ValidationError
from powerplanctl.core.grammar import parse_uint
from powerplanctl.core.model import AppConfig, EntityRef, Plan, QueryContext, Setting, SubGroup
from powerplanctl.core.plan_table import parse_plan_listing
from powerplanctl.core.resolver import filter_by_name, resolve_one, resolve_plan
from powerplanctl.core.scheme_parser import (
    build_setting,
    parse_plan_headers,
    parse_setting_headers,
    parse_subgroup_headers,
)
from powerplanctl.executors.base import CommandExecutor
from powerplanctl.executors.dispatch import DispatchingExecutor
from powerplanctl.executors.local import LocalExecutor
from powerplanctl.executors.ssh import SSHExecutor

LOGGER = logging.getLogger(__name__)

AC = "AC"
DC = "DC"

# Called once per power state before a write; returning False skips that state.
ConfirmWrite = Callable[[str, Setting, int], bool]


class PowerCfgService:
    def __init__(
        self,
        *,
        executor: CommandExecutor | None = None,
        host: str | None = None,
        config: AppConfig | None = None,
        description_source: DescriptionSource | None = None,
    ) -> None:
        self.load_warnings: tuple[str, ...] = ()
        if config is None:
            loaded = load_config()
            config = loaded.config
            self.load_warnings = loaded.warnings
        self.config = config
        self.host = host
        self.commands = PowerCfgCommands(config.powercfg_path)
        self.executor = executor or DispatchingExecutor(
            local=LocalExecutor(timeout_s=config.timeout_s),
            remote=SSHExecutor(config.hosts, timeout_s=config.timeout_s),
        )
        self.description_source = description_source or _description_source(config, self.executor)

    @property
    def context(self) -> QueryContext:
        return QueryContext(host=self.host)

    def _run(self, command: Sequence[str], context: QueryContext | None = None) -> list[str]:
        host = self.host if context is None else context.host
        return self.executor.run(command, host=host)

    def _descriptions(self) -> dict[str, str]:
        try:
            return self.description_source.descriptions(self.host)
        except PowerPlanError as exc:
            LOGGER.warning("Plan descriptions unavailable: %s", exc)
            return {}

    # Plans

    def list_plans(self, *, with_descriptions: bool = True) -> list[Plan]:
        output = self._run(self.commands.list_plans())
        descriptions = self._descriptions() if with_descriptions else None
        return parse_plan_listing(output, descriptions)

    def get_plan(self, plan: str | None = None) -> Plan:
        """Resolve a plan by name; an empty name selects the active plan."""
        return resolve_plan(self.list_plans(), plan)

    def _plan_context(self, plan: str | None) -> QueryContext:
        resolved = resolve_plan(self.list_plans(with_descriptions=False), plan)
        return self.context.with_plan(resolved.ref)

    # Queries

    def _subgroup_headers(self, context: QueryContext) -> list[EntityRef]:
        plan = _require_plan(context)
        return parse_subgroup_headers(self._run(self.commands.query(plan.id), context))

    def _setting_headers(self, context: QueryContext) -> list[EntityRef]:
        plan = _require_plan(context)
        if context.subgroup is None:
            raise ValidationError("Query context needs plan and subgroup")
        output = self._run(self.commands.query(plan.id, context.subgroup.id), context)
        return parse_setting_headers(output)

    def query_setting(self, context: QueryContext) -> Setting:
        """Query one setting by its resolved identifier triple."""
        if context.plan is None or context.subgroup is None or context.setting is None:
            raise ValidationError("Query context needs plan, subgroup and setting")
        output = self._run(
            self.commands.query(context.plan.id, context.subgroup.id, context.setting.id),
            context,
        )
        plan = _find(parse_plan_headers(output), context.plan)
        subgroup = _find(parse_subgroup_headers(output), context.subgroup)
        header = _find(parse_setting_headers(output), context.setting)
        return build_setting(header, subgroup, plan, output)

    def _settings(self, context: QueryContext, setting: str | None) -> list[Setting]:
        headers = filter_by_name(self._setting_headers(context), setting)
        return [self.query_setting(context.with_setting(header)) for header in headers]

    def list_subgroups(
        self,
        plan: str | None = None,
        subgroup: str | None = None,
        setting: str | None = None,
    ) -> list[SubGroup]:
        """Query a plan into subgroups and settings, optionally filtered by name.

        Filters keep every subgroup/setting whose name contains the filter text;
        a filter matching nothing raises `NotFoundError`.
        """
        return self._subgroups(self._plan_context(plan), subgroup, setting)

    def snapshot(
        self,
        plan: str | None = None,
        subgroup: str | None = None,
        setting: str | None = None,
    ) -> tuple[Plan, list[SubGroup]]:
        resolved = resolve_plan(self.list_plans(), plan)
        return resolved, self._subgroups(self.context.with_plan(resolved.ref), subgroup, setting)

    def _subgroups(
        self,
        context: QueryContext,
        subgroup: str | None,
        setting: str | None,
    ) -> list[SubGroup]:
        plan = _require_plan(context)
        subgroups: list[SubGroup] = []
        for header in filter_by_name(self._subgroup_headers(context), subgroup):
            settings = self._settings(context.with_subgroup(header), setting)
            subgroups.append(
                SubGroup(name=header.name, id=header.id, plan=plan, settings=tuple(settings))
            )
        return subgroups

    def get_subgroup(self, plan: str | None, subgroup: str, setting: str | None = None) -> SubGroup:
        context = self._plan_context(plan)
        plan_ref = _require_plan(context)
        header = resolve_one(self._subgroup_headers(context), subgroup)
        settings = self._settings(context.with_subgroup(header), setting)
        return SubGroup(name=header.name, id=header.id, plan=plan_ref, settings=tuple(settings))

    def _setting_context(self, plan: str | None, subgroup: str, setting: str) -> QueryContext:
        context = self._plan_context(plan)
        context = context.with_subgroup(resolve_one(self._subgroup_headers(context), subgroup))
        return context.with_setting(resolve_one(self._setting_headers(context), setting))

    def get_setting(self, plan: str | None, subgroup: str, setting: str) -> Setting:
        return self.query_setting(self._setting_context(plan, subgroup, setting))

    # Writes

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
        """Write `value` for the selected power states and return the re-queried setting."""
        _validate_write(value, apply_ac, apply_dc)
        if apply_ac:
            LOGGER.info("Setting AC value %s for %s/%s/%s", value, plan_id, subgroup_id, setting_id)
            self._run(self.commands.set_ac_value(plan_id, subgroup_id, setting_id, value))
        if apply_dc:
            LOGGER.info("Setting DC value %s for %s/%s/%s", value, plan_id, subgroup_id, setting_id)
            self._run(self.commands.set_dc_value(plan_id, subgroup_id, setting_id, value))

        context = QueryContext(
            host=self.host,
            plan=EntityRef(name="", id=plan_id),
            subgroup=EntityRef(name="", id=subgroup_id),
            setting=EntityRef(name="", id=setting_id),
        )
        return self.query_setting(context)

    def set_value(
        self,
        plan: str | None,
        subgroup: str,
        setting: str,
        value: int | str,
        *,
        ac: bool = True,
        dc: bool = True,
        confirm: ConfirmWrite | None = None,
    ) -> Setting:
        """Resolve names, then write the value for each confirmed power state.

        `value` may be an integer or the friendly name of one of the setting's
        options. When every state is declined no command runs and the current
        setting is returned unchanged.
        """
        if not ac and not dc:
            raise ValidationError("Select at least one of AC or DC to write a value")
        context = self._setting_context(plan, subgroup, setting)
        current = self.query_setting(context)
        index = resolve_value(current, value)
        _validate_write(index, ac, dc)

        apply_ac = ac and (confirm is None or confirm(AC, current, index))
        apply_dc = dc and (confirm is None or confirm(DC, current, index))
        if not apply_ac and not apply_dc:
            LOGGER.info("Write to '%s' declined for all power states", current.name)
            return current

        return self.write(
            current.plan.id,
            current.subgroup.id,
            current.id,
            index,
            apply_ac=apply_ac,
            apply_dc=apply_dc,
        )

    # Plan mutations

    def activate(self, plan: str) -> list[Plan]:
        target = resolve_plan(self.list_plans(with_descriptions=False), plan)
        LOGGER.info("Activating plan '%s' (%s)", target.name, target.id)
        self._run(self.commands.activate(target.id))
        return self.list_plans()

    def delete(self, plan: str) -> list[Plan]:
        target = resolve_plan(self.list_plans(with_descriptions=False), plan)
        LOGGER.info("Deleting plan '%s' (%s)", target.name, target.id)
        self._run(self.commands.delete(target.id))
        return self.list_plans()

    def rename(self, plan: str, new_name: str, description: str | None = None) -> list[Plan]:
        if not new_name:
            raise ValidationError("New plan name must not be empty")
        target = resolve_plan(self.list_plans(with_descriptions=False), plan)
        LOGGER.info("Renaming plan '%s' (%s) to '%s'", target.name, target.id, new_name)
        self._run(self.commands.rename(target.id, new_name, description))
        return self.list_plans()

    def duplicate(self, plan: str) -> list[Plan]:
        """Duplicate a plan and name the copy "<name>-Copy".

        powercfg does not report the new identifier, so it is found as the
        difference between listings taken before and after the duplicate.
        """
        before = self.list_plans(with_descriptions=False)
        target = resolve_plan(before, plan)
        LOGGER.info("Duplicating plan '%s' (%s)", target.name, target.id)
        self._run(self.commands.duplicate(target.id))

        known = {p.id for p in before}
        created = [p for p in self.list_plans(with_descriptions=False) if p.id not in known]
        if len(created) != 1:
            LOGGER.warning(
                "Expected one new plan after duplicating '%s', found %d", target.name, len(created)
            )
            raise ExecutionFailure(
                f"Could not identify the copy of '{target.name}': "
                f"{len(created)} new plans appeared after duplicating"
            )

        copy_name = f"{target.name}-Copy"
        self._run(self.commands.rename(created[0].id, copy_name))
        return self.list_plans()


def _require_plan(context: QueryContext) -> EntityRef:
    if context.plan is None:
        raise ValidationError("Query context needs a plan")
    return context.plan


def _find(headers: Sequence[EntityRef], ref: EntityRef) -> EntityRef:
    for header in headers:
        if header.id == ref.id:
            return header
    return ref


def resolve_value(setting: Setting, value: int | str) -> int:
    """Map an integer or an option friendly name to the index to write."""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid value {value!r} for '{setting.name}'")
    if isinstance(value, int):
        return value
    text = value.strip()
    if setting.options and text in setting.options:
        return setting.options[text]
    index = parse_uint(text)
    if index is None:
        allowed = ", ".join(setting.options) if setting.options else "a non-negative integer"
        raise ValidationError(
            f"Setting '{setting.name}' does not accept value '{value}'. Allowed: {allowed}"
        )
    return index


def _validate_write(value: int, apply_ac: bool, apply_dc: bool) -> None:
    if not apply_ac and not apply_dc:
        raise ValidationError("Select at least one of AC or DC to write a value")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"Value must be a non-negative integer, got {value!r}")


def _description_source(config: AppConfig, executor: CommandExecutor) -> DescriptionSource:
    if config.description_source == "cim":
        return CimDescriptionSource(executor)
    if config.description_source == "none":
        return NoDescriptionSource()
    return ConfigDescriptionSource(config.descriptions)
