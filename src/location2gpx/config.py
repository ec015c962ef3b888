"""Fields and segments configuration.

Loads the first YAML file found among: an explicitly provided path,
.loc2gpx.yaml in the working directory, ~/.loc2gpx.yaml. Missing files fall
back to defaults. Environment variables override the logging section:
LOC2GPX_LOG_LEVEL.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields as dataclass_fields
from pathlib import Path
from typing import Any

import yaml

from location2gpx.core.errors import InvalidConfiguration
from location2gpx.modules.normalization import FieldMapping
from location2gpx.pipeline import SegmentOptions

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".loc2gpx.yaml"


@dataclass
class LoggingConfig:
    level: str = "info"


@dataclass
class AppConfig:
    fields: FieldMapping = field(default_factory=FieldMapping)
    segments: SegmentOptions = field(default_factory=SegmentOptions)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Path | None = None  # file the configuration was read from


def candidate_paths(provided: str | Path | None = None) -> list[Path]:
    """Config file locations, in lookup order."""
    options = []
    if provided is not None:
        options.append(Path(provided))
    options.append(Path(CONFIG_FILENAME))
    options.append(Path.home() / CONFIG_FILENAME)
    return options


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise InvalidConfiguration(f"Section `{name}` must be a mapping, got {section!r}")
    return section


def _known(section: dict[str, Any], cls) -> dict[str, Any]:
    names = {f.name for f in dataclass_fields(cls)}
    unknown = set(section) - names
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(sorted(unknown)))
    return {k: v for k, v in section.items() if k in names}


def _parse_fields(section: dict[str, Any]) -> FieldMapping:
    values = _known(section, FieldMapping)
    for k, v in values.items():
        if k == "flip_coordinates":
            if not isinstance(v, bool):
                raise InvalidConfiguration(f"fields.flip_coordinates must be true or false, got {v!r}")
        elif not isinstance(v, str) or not v.strip():
            raise InvalidConfiguration(f"fields.{k} must be a non-empty field name, got {v!r}")
    return FieldMapping(**{k: v.strip() if isinstance(v, str) else v for k, v in values.items()})


def _apply_env_overrides(config: AppConfig) -> None:
    level = os.environ.get("LOC2GPX_LOG_LEVEL")
    if level is not None:
        config.logging.level = level


def parse_config(raw: dict[str, Any] | None) -> AppConfig:
    """Build an AppConfig from an already-parsed YAML document."""
    config = AppConfig()
    raw = raw or {}
    if not isinstance(raw, dict):
        raise InvalidConfiguration(f"Configuration must be a mapping, got {raw!r}")

    config.fields = _parse_fields(_section(raw, "fields"))
    config.segments = SegmentOptions(**_known(_section(raw, "segments"), SegmentOptions))
    for k, v in _known(_section(raw, "logging"), LoggingConfig).items():
        setattr(config.logging, k, v)
    return config


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load configuration from the first YAML file found + environment overrides."""
    config = AppConfig()
    for path in candidate_paths(config_path):
        if not path.is_file():
            continue

        try:
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"Failed on parse the config file {path}: {exc}") from exc

        config = parse_config(raw)
        config.path = path
        logger.debug("Loaded configuration from %s", path)
        break
    else:
        if config_path is not None:
            logger.warning("Config file %s not found, using defaults", config_path)

    # Environment overrides always win
    _apply_env_overrides(config)
    return config
