"""Layered configuration loading.

Precedence, lowest first::

    DEFAULT_CONFIG < YAML file < MIRRORARR_* environment (.env included) < CLI

Every layer is brought into the sectioned shape of ``config.yaml`` before it
is merged, so flat keys (``proxy_url``) and sectioned keys
(``mirrors.proxy_url``) can be mixed freely.  Loading never touches the
filesystem beyond reading the given files.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_TOP_LEVEL_KEYS = frozenset({"app_name", "environment"})
_SECTIONS = frozenset({"http", "logging", "mirrors"})

# Flat key -> (section, key inside section)
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "bootstrap_url": ("mirrors", "bootstrap_url"),
    "proxy_url": ("mirrors", "proxy_url"),
    "title_similarity_threshold": ("mirrors", "title_similarity_threshold"),
}


def merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge *layer* into *target* (mappings merge, anything else replaces)."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merge_into(current, value)
        elif isinstance(value, Mapping):
            target[key] = merge_into({}, value)
        else:
            target[key] = deepcopy(value)
    return target


def sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into sectioned shape; unknown keys are dropped.

    Flat keys are applied after section blocks, so within one layer
    ``log_level`` beats ``logging.level``.
    """
    out: dict[str, Any] = {}
    for key in layer.keys() & _TOP_LEVEL_KEYS:
        out[key] = layer[key]
    for key in layer.keys() & _SECTIONS:
        if isinstance(layer[key], Mapping):
            merge_into(out.setdefault(key, {}), layer[key])
    for key, (section, name) in _FLAT_KEYS.items():
        if key in layer:
            out.setdefault(section, {})[name] = layer[key]
    return out


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None,
    cli_overrides: Mapping[str, Any],
) -> Iterator[Mapping[str, Any]]:
    yield DEFAULT_CONFIG
    if config_path is not None:
        yield _read_yaml(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Merge all configuration layers and validate the result.

    ``dotenv_path`` is loaded into the process environment first (without
    overriding variables that are already set), so it takes part in the
    environment layer.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        merge_into(merged, sectioned(layer))
    return AppConfig.model_validate(merged)
