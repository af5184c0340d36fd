"""Configuration loading and validation for powerplanctl."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from powerplanctl.core.errors import ConfigLoadError, ConfigValidationError
from powerplanctl.core.model import AppConfig, HostProfile

_HOST_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")
CONFIG_ENV = "POWERPLANCTL_CONFIG"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# Plan names such as "On" or "Off" must stay strings in the descriptions map.
for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedConfig:
    config: AppConfig
    source: Path | None
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("powerplanctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "powerplanctl/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_host(name: Any, entry: dict[str, Any]) -> HostProfile:
    if not isinstance(name, str) or not _HOST_NAME_RE.match(name):
        raise ConfigValidationError(f"Host profile name '{name}' must match [A-Za-z0-9._-]+")
    timeout = entry.get("timeout_s")
    return HostProfile(
        name=name,
        address=entry["address"].strip(),
        user=entry.get("user"),
        port=int(entry.get("port", 22)),
        ssh_options=tuple(entry.get("ssh_options", [])),
        timeout_s=float(timeout) if timeout is not None else None,
    )


def build_config(doc: dict[str, Any], source: Path | str = "<config>") -> AppConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    defaults = AppConfig()
    hosts = {name: _build_host(name, entry) for name, entry in doc.get("hosts", {}).items()}
    return AppConfig(
        powercfg_path=doc.get("powercfg_path", defaults.powercfg_path),
        timeout_s=float(doc.get("timeout_s", defaults.timeout_s)),
        description_source=doc.get("description_source", defaults.description_source),
        descriptions={str(k): v for k, v in doc.get("descriptions", {}).items()},
        hosts=hosts,
    )


def load_config(path: Path | str | None = None) -> LoadedConfig:
    """Load configuration from `path`, `$POWERPLANCTL_CONFIG`, or the XDG default.

    An explicitly requested file must exist; a missing default file yields the
    built-in defaults.
    """
    explicit = path if path is not None else os.environ.get(CONFIG_ENV)
    config_path = Path(explicit) if explicit else default_config_path()
    warnings: list[str] = []

    if not config_path.exists():
        if explicit:
            raise ConfigLoadError(f"Config file {config_path} does not exist")
        LOGGER.debug("No config file at %s; using defaults", config_path)
        return LoadedConfig(config=AppConfig(), source=None, warnings=())

    doc = _read_yaml(config_path)
    config = build_config(doc, config_path)
    if config.description_source != "config" and config.descriptions:
        warning = (
            f"'descriptions' in {config_path} are ignored while description_source "
            f"is '{config.description_source}'"
        )
        LOGGER.warning(warning)
        warnings.append(warning)
    return LoadedConfig(config=config, source=config_path, warnings=tuple(warnings))
