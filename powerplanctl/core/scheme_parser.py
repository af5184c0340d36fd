"""Parsers for `powercfg /q` output.

`powercfg /q` prints one block per subgroup and, inside it, one block per
setting. Headers are parsed into `EntityRef`s; the detail of a single setting
is read by a small state machine that pairs each `Possible Setting Index`
with the following `Possible Setting Friendly Name`, and each minimum with
the following maximum.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from powerplanctl.core.grammar import ClassifiedLine, LineKind, classify_lines
from powerplanctl.core.model import EntityRef, Setting, SettingRange


@dataclass(frozen=True)
class SettingDetail:
    options: dict[str, int] | None
    range: SettingRange | None
    current_ac: int
    current_dc: int


def _headers(lines: Iterable[str], kind: LineKind) -> list[EntityRef]:
    refs: list[EntityRef] = []
    seen: set[str] = set()
    for classified in classify_lines(lines):
        if classified.kind is not kind or classified.guid is None or classified.name is None:
            continue
        if classified.guid in seen:
            continue
        seen.add(classified.guid)
        refs.append(EntityRef(name=classified.name, id=classified.guid))
    return refs


def parse_plan_headers(lines: Iterable[str]) -> list[EntityRef]:
    return _headers(lines, LineKind.PLAN_LINE)


def parse_subgroup_headers(lines: Iterable[str]) -> list[EntityRef]:
    return _headers(lines, LineKind.SUBGROUP_HEADER)


def parse_setting_headers(lines: Iterable[str]) -> list[EntityRef]:
    return _headers(lines, LineKind.SETTING_HEADER)


class _DetailState:
    def __init__(self) -> None:
        self.options: dict[str, int] = {}
        self.pending_index: int | None = None
        self.pending_minimum: int | None = None
        self.range: SettingRange | None = None
        self.current_ac: int | None = None
        self.current_dc: int | None = None

    def feed(self, line: ClassifiedLine) -> None:
        kind = line.kind
        if kind is LineKind.OPTION_INDEX:
            self.pending_index = line.value
        elif kind is LineKind.OPTION_NAME:
            if self.pending_index is not None and line.text is not None:
                self.options[line.text] = self.pending_index
                self.pending_index = None
        elif kind is LineKind.RANGE_MIN:
            if self.range is None and self.pending_minimum is None:
                self.pending_minimum = line.value
        elif kind is LineKind.RANGE_MAX:
            if self.pending_minimum is not None and line.value is not None:
                self.range = SettingRange(minimum=self.pending_minimum, maximum=line.value)
                self.pending_minimum = None
        elif kind is LineKind.CURRENT_AC:
            if self.current_ac is None:
                self.current_ac = line.value
        elif kind is LineKind.CURRENT_DC:
            if self.current_dc is None:
                self.current_dc = line.value

    def detail(self) -> SettingDetail:
        return SettingDetail(
            options=dict(self.options) if self.options else None,
            range=self.range,
            current_ac=self.current_ac or 0,
            current_dc=self.current_dc or 0,
        )


def parse_setting_detail(lines: Iterable[str]) -> SettingDetail:
    state = _DetailState()
    for classified in classify_lines(lines):
        state.feed(classified)
    return state.detail()


def build_setting(
    header: EntityRef,
    subgroup: EntityRef,
    plan: EntityRef,
    lines: Sequence[str],
) -> Setting:
    detail = parse_setting_detail(lines)
    return Setting(
        name=header.name,
        id=header.id,
        subgroup=subgroup,
        plan=plan,
        options=detail.options,
        range=detail.range,
        current_ac=detail.current_ac,
        current_dc=detail.current_dc,
    )
