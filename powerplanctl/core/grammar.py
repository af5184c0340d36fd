"""Line classification for powercfg output.

Every line of `powercfg /l` and `powercfg /q` output is mapped to one
`LineKind`. Parsers consume the tagged lines and never look at raw text, so
banner and help text that carries no marker falls out as `UNRECOGNIZED`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

_GUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_NAME_RE = re.compile(r"\(([^)]*)\)")
_DIGIT_RE = re.compile(r"\d")
BANNER_LINES = 3


class LineKind(Enum):
    PLAN_LINE = "plan"
    SUBGROUP_HEADER = "subgroup"
    SETTING_HEADER = "setting"
    OPTION_INDEX = "option_index"
    OPTION_NAME = "option_name"
    RANGE_MIN = "range_min"
    RANGE_MAX = "range_max"
    CURRENT_AC = "current_ac"
    CURRENT_DC = "current_dc"
    UNRECOGNIZED = "unrecognized"


_HEADER_MARKERS: tuple[tuple[str, LineKind], ...] = (
    ("SubGroup GUID: ", LineKind.SUBGROUP_HEADER),
    ("Power Setting GUID: ", LineKind.SETTING_HEADER),
)

_VALUE_MARKERS: tuple[tuple[str, LineKind], ...] = (
    ("Possible Setting Index: ", LineKind.OPTION_INDEX),
    ("Minimum Possible Setting: ", LineKind.RANGE_MIN),
    ("Maximum Possible Setting: ", LineKind.RANGE_MAX),
    ("Current AC Power Setting Index: ", LineKind.CURRENT_AC),
    ("Current DC Power Setting Index: ", LineKind.CURRENT_DC),
)

_FRIENDLY_NAME_MARKER = "Possible Setting Friendly Name: "


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    guid: str | None = None
    name: str | None = None
    active: bool = False
    value: int | None = None
    text: str | None = None


UNRECOGNIZED = ClassifiedLine(kind=LineKind.UNRECOGNIZED)


def extract_display_name(line: str) -> str | None:
    match = _NAME_RE.search(line)
    if not match:
        return None
    return match.group(1)


def extract_guid(line: str) -> str | None:
    for token in line.split():
        if _DIGIT_RE.search(token) and _GUID_RE.match(token):
            return token
    return None


def is_active_line(line: str) -> bool:
    return line.strip().endswith("*")


def parse_uint(text: str) -> int | None:
    """Parse an unsigned tool value: `0x` hex or zero-padded decimal."""
    token = text.strip()
    if not token:
        return None
    try:
        if token.lower().startswith("0x"):
            value = int(token[2:], 16)
        else:
            value = int(token, 10)
    except ValueError:
        return None
    return value if value >= 0 else None


def classify_line(line: str) -> ClassifiedLine:
    for marker, kind in _HEADER_MARKERS:
        if marker in line:
            guid = extract_guid(line.split(marker, 1)[1])
            name = extract_display_name(line)
            if guid is None or name is None:
                return UNRECOGNIZED
            return ClassifiedLine(kind=kind, guid=guid, name=name)

    if _FRIENDLY_NAME_MARKER in line:
        text = line.split(_FRIENDLY_NAME_MARKER, 1)[1].strip()
        return ClassifiedLine(kind=LineKind.OPTION_NAME, text=text)

    for marker, kind in _VALUE_MARKERS:
        if marker in line:
            value = parse_uint(line.split(marker, 1)[1])
            if value is None:
                return UNRECOGNIZED
            return ClassifiedLine(kind=kind, value=value)

    guid = extract_guid(line)
    name = extract_display_name(line)
    if guid is not None and name is not None:
        return ClassifiedLine(
            kind=LineKind.PLAN_LINE,
            guid=guid,
            name=name,
            active=is_active_line(line),
        )
    return UNRECOGNIZED


def classify_lines(lines: Iterable[str]) -> list[ClassifiedLine]:
    return [classify_line(line) for line in lines]


def strip_banner(lines: Sequence[str]) -> list[str]:
    """Drop the fixed header/underline/blank banner of `powercfg /l`."""
    if len(lines) < BANNER_LINES:
        return []
    return list(lines[BANNER_LINES:])
