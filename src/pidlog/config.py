"""
Run configuration for pidlog.

Settings come from an optional YAML file and are overridden by whatever was
given on the command line.
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from pidlog.errors import ConfigError


@dataclass(slots=True, frozen=True)
class RunConfig:
    """Settings for one sampling run."""

    interval: int | None = None  # Seconds between samples, None = no sleep
    duration: int | None = None  # Seconds to run, None = until process exit
    network: bool = False  # Adds the two network columns
    echo: bool = True  # Print each sample to stdout

    def __post_init__(self) -> None:
        for name in ("interval", "duration"):
            value = getattr(self, name)
            if value is None:
                continue
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer number of seconds, got {value!r}")
            if value < 0:
                raise ConfigError(f"{name} must not be negative, got {value}")
        for name in ("network", "echo"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false, got {getattr(self, name)!r}")

    def merge(self, **overrides: Any) -> "RunConfig":
        """Return a copy with every override that is not None applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: Path) -> RunConfig:
    """
    Load a RunConfig from a YAML file.

    Args:
        path: YAML file with any of the keys interval, duration, network, echo.

    Returns:
        RunConfig: Configuration with file values over the defaults.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    # An empty file loads as None
    if data is None:
        return RunConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    known = {f.name for f in fields(RunConfig)}
    unknown = sorted(str(key) for key in set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    return RunConfig(**data)
