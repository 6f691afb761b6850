"""Config loading entry points for fetchretry."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Mapping

import yaml
from pydantic import ValidationError

from fetchretry.errors import FetchRetryError

from .models import SYSTEM_DEFAULTS, FetchRetryParams

SECTION_KEY = "fetch_retry"
ENV_PREFIX = "FETCHRETRY_"


class ConfigError(FetchRetryError):
    """Raised when configuration files cannot be loaded or validated."""


def load_config(
    path: Path | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> FetchRetryParams:
    """Load builder-time retry defaults.

    Precedence, lowest first: the config file at ``path``, ``FETCHRETRY_*``
    environment variables, then ``overrides``. Fields left unset stay ``None``
    so the system defaults still apply when a policy is resolved.
    """

    merged: dict[str, Any] = {}
    if path:
        merged.update(_expect_mapping(_read_structured_file(path), path))
    merged.update(_env_overrides())
    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return FetchRetryParams.model_validate(merged)
    except ValidationError as exc:
        source = path or "environment/overrides"
        raise ConfigError(f"Invalid retry configuration from {source}: {exc}") from exc


def dump_example_config(dest: Path) -> None:
    """Write the system default configuration to ``dest``."""

    suffix = dest.suffix.lower()
    if suffix == ".toml":
        raise ConfigError("TOML export is not supported yet; use a YAML destination.")

    dest.parent.mkdir(parents=True, exist_ok=True)
    payload = {SECTION_KEY: SYSTEM_DEFAULTS.model_dump()}
    if suffix == ".json":
        dest.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return
    dest.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


def _expect_mapping(payload: Any, source: Path) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Expected mapping data in {source}, got {type(payload)!r}.")
    section = payload.get(SECTION_KEY, payload)
    if not isinstance(section, Mapping):
        raise ConfigError(f"Section '{SECTION_KEY}' in {source} must be a mapping.")
    return dict(section)


def _env_overrides() -> dict[str, Any]:
    """Collect ``FETCHRETRY_RETRIES``, ``FETCHRETRY_RETRY_DELAY`` and ``FETCHRETRY_RETRY_ON``."""

    result: dict[str, Any] = {}

    retries = os.getenv(f"{ENV_PREFIX}RETRIES", "").strip()
    if retries:
        result["retries"] = retries

    delay = os.getenv(f"{ENV_PREFIX}RETRY_DELAY", "").strip()
    if delay:
        result["retry_delay"] = delay

    statuses = os.getenv(f"{ENV_PREFIX}RETRY_ON", "")
    members = [item.strip() for item in statuses.split(",") if item.strip()]
    if members:
        try:
            result["retry_on"] = [int(item) for item in members]
        except ValueError as exc:
            raise ConfigError(f"{ENV_PREFIX}RETRY_ON must be comma-separated integers, got {statuses!r}.") from exc

    return result


def _read_structured_file(path: Path) -> Any:
    """Parse a YAML, TOML or JSON config file chosen by its suffix."""

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise ConfigError(f"Unsupported config format for {path}")
    if not path.is_file():
        raise ConfigError(f"Config file {path} does not exist.")

    try:
        return parser(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc


def _parse_yaml(text: str) -> Any:
    return yaml.safe_load(text) or {}


_PARSERS: dict[str, Callable[[str], Any]] = {
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".toml": tomllib.loads,
    ".json": json.loads,
}


__all__ = [
    "ConfigError",
    "ENV_PREFIX",
    "SECTION_KEY",
    "dump_example_config",
    "load_config",
]
