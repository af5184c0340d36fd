from __future__ import annotations

import pytest

from powercfg_fake import BALANCED, HARD_DISK, DISK_OFF, FakePowerCfg
from powerplanctl.api import Client, NotFoundError, PlanSnapshot
from powerplanctl.core.model import AppConfig


@pytest.fixture
def client(powercfg: FakePowerCfg) -> Client:
    return Client(executor=powercfg, config=AppConfig(description_source="none"))


def test_public_client_lists_plans(client: Client) -> None:
    plans = client.list_plans()
    assert [p.name for p in plans if p.active] == ["Balanced"]
    assert client.get_plan().id == BALANCED


def test_public_client_plan_snapshot(client: Client) -> None:
    snapshot = client.get_plan_snapshot(subgroup="Hard")
    assert isinstance(snapshot, PlanSnapshot)
    assert snapshot.plan.name == "Balanced"
    assert [sg.id for sg in snapshot.subgroups] == [HARD_DISK]
    assert snapshot.subgroups[0].settings[0].id == DISK_OFF


def test_public_client_set_value_and_write(client: Client) -> None:
    setting = client.set_value("Hard", "disk", 10, dc=False)
    assert setting.current_ac == 10
    written = client.write(BALANCED, HARD_DISK, DISK_OFF, 20, apply_ac=False, apply_dc=True)
    assert (written.current_ac, written.current_dc) == (10, 20)


def test_public_client_plan_mutations(client: Client) -> None:
    plans = client.duplicate("High")
    assert "High performance-Copy" in [p.name for p in plans]
    plans = client.rename("-Copy", "Gaming", description="loud")
    assert "Gaming" in [p.name for p in plans]
    plans = client.activate("Gaming")
    assert [p.name for p in plans if p.active] == ["Gaming"]
    plans = client.delete("saver")
    assert len(plans) == 3


def test_public_client_errors_are_exported(client: Client) -> None:
    with pytest.raises(NotFoundError):
        client.get_setting("Display", "brightness")


def test_client_targets_host(powercfg: FakePowerCfg) -> None:
    client = Client(host="lab", executor=powercfg, config=AppConfig(description_source="none"))
    client.list_plans()
    assert client.host == "lab"
    assert powercfg.calls[0][0] == "lab"
