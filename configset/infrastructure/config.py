"""
Configuration Module

Architectural Intent:
- Centralized configuration loading from JSON files
- Provides typed access to Tinkerer credentials, executor and logging settings
- Falls back to sensible defaults when config file is absent
- Environment variables override file-based config

Design Decisions:
- Config is a frozen dataclass, passed explicitly to the composition root
  instead of being looked up globally
- Nested config sections map to sub-dataclasses
- The Tinkerer password never appears in repr()
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import dataclasses
import json
import logging
import os

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TinkererConfig:
    """Remote agent control plane endpoint and credentials."""
    base_url: str = ""
    username: str = ""
    password: str = field(default="", repr=False)
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class ExecutorConfig:
    """Change set executor configuration."""
    platform: str = "unix"
    product_home_env: str = "PRODUCT_HOME"
    max_parallel_agents: int = 1


@dataclass(frozen=True)
class ConfigSetConfig:
    """Root configuration for configset."""
    tinkerer: TinkererConfig = field(default_factory=TinkererConfig)
    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    log_level: str = "WARNING"
    json_logs: bool = False


def _env_override(data: dict, prefix: str = "CONFIGSET") -> dict:
    """Override config values with environment variables.

    Environment variables follow the pattern CONFIGSET_SECTION_KEY.
    For example: CONFIGSET_TINKERER_BASE_URL=https://tinkerer:8443/deployment-tinkerer/v0.9/api,
    CONFIGSET_EXECUTOR_MAX_PARALLEL_AGENTS=4
    """
    sections = {"tinkerer", "executor"}
    top_level = {"log_level", "json_logs"}
    for key, value in os.environ.items():
        if not key.startswith(f"{prefix}_"):
            continue
        name = key[len(prefix) + 1:].lower()
        if name in top_level:
            data[name] = value
            continue
        parts = name.split("_", 1)
        if len(parts) == 2 and parts[0] in sections:
            section, field_name = parts
            if not isinstance(data.get(section), dict):
                data[section] = {}
            data[section][field_name] = value
    return data


def _parse_config_file(path: Path) -> dict:
    """Parse a JSON config file. Returns empty dict on failure."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError:
        logger.debug("Config file not found: %s", path)
        return {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid config file %s: %s", path, e)
        return {}


def _coerce(type_name: str, value):
    if not isinstance(value, str):
        return value
    if type_name == "int":
        return int(value)
    if type_name == "float":
        return float(value)
    if type_name == "bool":
        return value.lower() in ("true", "1", "yes")
    return value


def _build_sub_config(cls, data: dict):
    """Build a sub-config dataclass from a dict, ignoring unknown keys."""
    types = {f.name: f.type for f in dataclasses.fields(cls)}
    return cls(**{
        k: _coerce(types[k], v) for k, v in data.items() if k in types
    })


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "CONFIGSET",
) -> ConfigSetConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables (CONFIGSET_SECTION_KEY)
    2. Config file values
    3. Defaults

    Args:
        path: Path to config file (JSON). Defaults to configset.json in CWD.
        env_prefix: Environment variable prefix. Defaults to CONFIGSET.
    """
    config_path = Path(path) if path else Path("configset.json")
    data = _parse_config_file(config_path)
    data = _env_override(data, env_prefix)

    return ConfigSetConfig(
        tinkerer=_build_sub_config(TinkererConfig, data.get("tinkerer", {})),
        executor=_build_sub_config(ExecutorConfig, data.get("executor", {})),
        log_level=str(data.get("log_level", "WARNING")).upper(),
        json_logs=_coerce("bool", data.get("json_logs", False)),
    )
