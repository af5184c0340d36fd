from __future__ import annotations

import pytest

from powercfg_fake import FakePowerCfg
from powerplanctl.core.model import AppConfig
from powerplanctl.core.service import PowerCfgService


@pytest.fixture
def powercfg() -> FakePowerCfg:
    return FakePowerCfg()


@pytest.fixture
def service(powercfg: FakePowerCfg) -> PowerCfgService:
    return PowerCfgService(
        executor=powercfg,
        config=AppConfig(description_source="config", descriptions={"Balanced": "Default plan"}),
    )
