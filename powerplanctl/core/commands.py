"""Command lines passed verbatim to the command executor."""

from __future__ import annotations

DEFAULT_TOOL = "powercfg"


class PowerCfgCommands:
    def __init__(self, tool: str = DEFAULT_TOOL) -> None:
        self.tool = tool

    def list_plans(self) -> list[str]:
        return [self.tool, "/l"]

    def query(
        self,
        plan_id: str,
        subgroup_id: str | None = None,
        setting_id: str | None = None,
    ) -> list[str]:
        command = [self.tool, "/q", plan_id]
        if subgroup_id is not None:
            command.append(subgroup_id)
            if setting_id is not None:
                command.append(setting_id)
        return command

    def set_ac_value(self, plan_id: str, subgroup_id: str, setting_id: str, value: int) -> list[str]:
        return [self.tool, "/setacvalueindex", plan_id, subgroup_id, setting_id, str(value)]

    def set_dc_value(self, plan_id: str, subgroup_id: str, setting_id: str, value: int) -> list[str]:
        return [self.tool, "/setdcvalueindex", plan_id, subgroup_id, setting_id, str(value)]

    def activate(self, plan_id: str) -> list[str]:
        return [self.tool, "/s", plan_id]

    def delete(self, plan_id: str) -> list[str]:
        return [self.tool, "/d", plan_id]

    def duplicate(self, plan_id: str) -> list[str]:
        return [self.tool, "/duplicatescheme", plan_id]

    def rename(self, plan_id: str, new_name: str, description: str | None = None) -> list[str]:
        command = [self.tool, "/changename", plan_id, new_name]
        if description is not None:
            command.append(description)
        return command
