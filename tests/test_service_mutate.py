from __future__ import annotations

import pytest

from powercfg_fake import BALANCED, HIGH_PERF, POWER_SAVER, FakePowerCfg
from powerplanctl.core.errors import AmbiguousMatchError, ExecutionFailure, NotFoundError, ValidationError
from powerplanctl.core.service import PowerCfgService


def test_activate_returns_refreshed_table(service: PowerCfgService, powercfg: FakePowerCfg) -> None:
    plans = service.activate("saver")
    assert powercfg.commands("/s") == [("powercfg", "/s", POWER_SAVER)]
    active = [p for p in plans if p.active]
    assert [p.id for p in active] == [POWER_SAVER]


def test_delete_removes_plan(service: PowerCfgService, powercfg: FakePowerCfg) -> None:
    plans = service.delete("High")
    assert powercfg.commands("/d") == [("powercfg", "/d", HIGH_PERF)]
    assert HIGH_PERF not in {p.id for p in plans}


def test_rename_with_description(service: PowerCfgService, powercfg: FakePowerCfg) -> None:
    plans = service.rename("High", "Gaming", "Fans up")
    assert powercfg.commands("/changename") == [("powercfg", "/changename", HIGH_PERF, "Gaming", "Fans up")]
    assert "Gaming" in [p.name for p in plans]


def test_rename_requires_new_name(service: PowerCfgService, powercfg: FakePowerCfg) -> None:
    with pytest.raises(ValidationError):
        service.rename("High", "")
    assert powercfg.calls == []


def test_duplicate_renames_new_plan(service: PowerCfgService, powercfg: FakePowerCfg) -> None:
    plans = service.duplicate("Balanced")

    assert powercfg.commands("/duplicatescheme") == [("powercfg", "/duplicatescheme", BALANCED)]
    renames = powercfg.commands("/changename")
    assert len(renames) == 1
    new_id = renames[0][2]
    assert new_id not in {BALANCED, HIGH_PERF, POWER_SAVER}
    assert renames[0][3] == "Balanced-Copy"
    assert [p.name for p in plans if p.id == new_id] == ["Balanced-Copy"]
    assert len(plans) == 4


def test_duplicate_refuses_to_guess_when_several_plans_appear(
    service: PowerCfgService, powercfg: FakePowerCfg
) -> None:
    powercfg.extra_plans_on_duplicate = 1
    with pytest.raises(ExecutionFailure):
        service.duplicate("Balanced")
    assert powercfg.commands("/changename") == []


def test_copy_makes_original_name_ambiguous(service: PowerCfgService) -> None:
    service.duplicate("Balanced")
    with pytest.raises(AmbiguousMatchError):
        service.activate("Balanced")


def test_mutators_fail_on_resolution_errors(service: PowerCfgService, powercfg: FakePowerCfg) -> None:
    with pytest.raises(NotFoundError):
        service.delete("Ultimate")
    with pytest.raises(AmbiguousMatchError):
        service.activate("e")
    assert powercfg.commands("/d") == []
    assert powercfg.commands("/s") == []
