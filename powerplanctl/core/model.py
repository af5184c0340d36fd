"""Core data models used across parser, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EntityRef:
    name: str
    id: str


@dataclass(frozen=True)
class SettingRange:
    minimum: int
    maximum: int


@dataclass(frozen=True)
class Plan:
    name: str
    id: str
    active: bool = False
    description: str | None = None

    @property
    def ref(self) -> EntityRef:
        return EntityRef(name=self.name, id=self.id)


@dataclass(frozen=True)
class Setting:
    name: str
    id: str
    subgroup: EntityRef
    plan: EntityRef
    options: dict[str, int] | None = None
    range: SettingRange | None = None
    current_ac: int = 0
    current_dc: int = 0

    @property
    def ref(self) -> EntityRef:
        return EntityRef(name=self.name, id=self.id)


@dataclass(frozen=True)
class SubGroup:
    name: str
    id: str
    plan: EntityRef
    settings: tuple[Setting, ...] = ()

    @property
    def ref(self) -> EntityRef:
        return EntityRef(name=self.name, id=self.id)


@dataclass(frozen=True)
class QueryContext:
    """Identifiers resolved so far for one logical operation."""

    host: str | None = None
    plan: EntityRef | None = None
    subgroup: EntityRef | None = None
    setting: EntityRef | None = None

    def with_plan(self, plan: EntityRef) -> QueryContext:
        return QueryContext(host=self.host, plan=plan)

    def with_subgroup(self, subgroup: EntityRef) -> QueryContext:
        return QueryContext(host=self.host, plan=self.plan, subgroup=subgroup)

    def with_setting(self, setting: EntityRef) -> QueryContext:
        return QueryContext(
            host=self.host,
            plan=self.plan,
            subgroup=self.subgroup,
            setting=setting,
        )


@dataclass(frozen=True)
class HostProfile:
    name: str
    address: str
    user: str | None = None
    port: int = 22
    ssh_options: tuple[str, ...] = ()
    timeout_s: float | None = None

    @property
    def destination(self) -> str:
        return f"{self.user}@{self.address}" if self.user else self.address


@dataclass(frozen=True)
class AppConfig:
    powercfg_path: str = "powercfg"
    timeout_s: float = 30.0
    description_source: str = "config"
    descriptions: dict[str, str] = field(default_factory=dict)
    hosts: dict[str, HostProfile] = field(default_factory=dict)
