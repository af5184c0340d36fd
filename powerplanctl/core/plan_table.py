"""Plan table construction from `powercfg /l` output."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

from powerplanctl.core.grammar import LineKind, classify_line, strip_banner
from powerplanctl.core.model import Plan

LOGGER = logging.getLogger(__name__)


def build_plan_table(
    lines: Sequence[str],
    descriptions: Mapping[str, str] | None = None,
) -> list[Plan]:
    """Build plans from banner-stripped listing lines, in line order.

    Lines without both a parenthesised name and a GUID are dropped. A plan
    whose display name has no exact entry in `descriptions` keeps
    `description=None`.
    """
    descriptions = descriptions or {}
    plans: list[Plan] = []
    for line in lines:
        classified = classify_line(line)
        if classified.kind is not LineKind.PLAN_LINE or classified.name is None or classified.guid is None:
            continue
        plans.append(
            Plan(
                name=classified.name,
                id=classified.guid,
                active=classified.active,
                description=descriptions.get(classified.name),
            )
        )

    active = [plan for plan in plans if plan.active]
    if len(active) > 1:
        # powercfg marks one scheme; keep the first mark so a snapshot never has two.
        LOGGER.warning(
            "Plan listing marked %d plans active; keeping '%s'", len(active), active[0].name
        )
        keep = active[0].id
        plans = [
            plan if not plan.active or plan.id == keep else replace(plan, active=False)
            for plan in plans
        ]
    return plans


def parse_plan_listing(
    output: Sequence[str],
    descriptions: Mapping[str, str] | None = None,
) -> list[Plan]:
    """Parse raw `powercfg /l` output, including its 3-line banner."""
    return build_plan_table(strip_banner(output), descriptions)


def active_plan(plans: Sequence[Plan]) -> Plan | None:
    for plan in plans:
        if plan.active:
            return plan
    return None
