"""Name-to-identifier resolution for plans, subgroups, and settings."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, TypeVar

from powerplanctl.core.errors import AmbiguousMatchError, NotFoundError
from powerplanctl.core.model import Plan


class Named(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def id(self) -> str: ...


T = TypeVar("T", bound=Named)


def _name_contains(candidate: Named, query: str) -> bool:
    return query in candidate.name


def filter_by_name(candidates: Sequence[T], query: str | None) -> list[T]:
    """Return every candidate whose name contains `query`.

    `None` selects all candidates. An empty selection raises `NotFoundError`;
    several matches are allowed.
    """
    if query is None:
        return list(candidates)
    matched = [c for c in candidates if _name_contains(c, query)]
    if not matched:
        raise NotFoundError(query)
    return matched


def resolve_one(candidates: Sequence[T], query: str) -> T:
    matched = [c for c in candidates if _name_contains(c, query)]
    if not matched:
        raise NotFoundError(query)
    if len(matched) > 1:
        raise AmbiguousMatchError(query, len(matched), tuple(c.name for c in matched))
    return matched[0]


def resolve(candidates: Sequence[Named], query: str) -> str:
    return resolve_one(candidates, query).id


def resolve_plan(plans: Sequence[Plan], query: str | None) -> Plan:
    """Resolve a plan by name, defaulting to the active plan for an empty query."""
    if not query:
        for plan in plans:
            if plan.active:
                return plan
        raise NotFoundError(query, "No active power plan found")
    return resolve_one(plans, query)
