"""Config loading utilities for testid-manager."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from testid_manager.core.models import ManagerConfig

logger = logging.getLogger(__name__)

CONFIG_FILES = [
    Path("testid-manager.config.json"),
    Path("cypress") / "testid-manager.config.json",
    Path("playwright") / "testid-manager.config.json",
    Path("testid-manager.config.yaml"),
    Path("cypress") / "testid-manager.config.yaml",
    Path("playwright") / "testid-manager.config.yaml",
]


def find_config_file(project_dir: Path) -> Path | None:
    """Return the first conventional config file present under *project_dir*."""
    for name in CONFIG_FILES:
        path = project_dir / name
        if path.is_file():
            return path
    return None


def load_config_file(project_dir: Path) -> dict[str, Any]:
    """Load the project config file as a dict.

    Returns empty dict if no config file exists.
    """
    path = find_config_file(project_dir)
    if path is None:
        logger.debug("No config file found under %s; using defaults", project_dir)
        return {}

    logger.info("Loaded config from: %s", path.relative_to(project_dir))
    with path.open(encoding="utf-8") as f:
        try:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ValueError(f"{path.name} is not valid: {exc}") from exc

    if not isinstance(data, dict):
        logger.warning("%s did not contain a mapping; ignoring it", path.name)
        return {}

    return data


def make_config(file_config: dict[str, Any], **overrides: Any) -> ManagerConfig:
    """Build a ManagerConfig from config file values and CLI overrides.

    Overrides that are ``None`` are treated as absent, so file values and
    then the defaults of :class:`ManagerConfig` fill the gaps.
    """
    valid_keys = set(ManagerConfig.model_fields)
    valid_keys.update(
        f.alias for f in ManagerConfig.model_fields.values() if f.alias is not None
    )
    filtered = {k: v for k, v in file_config.items() if k in valid_keys}

    if dropped := set(file_config) - set(filtered):
        logger.warning("Ignoring unknown config keys: %s", sorted(dropped))

    config = ManagerConfig.model_validate(filtered)
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    return ManagerConfig.model_validate({**config.model_dump(), **updates})


def resolve_config(project_dir: Path, **overrides: Any) -> ManagerConfig:
    """Load the project config file and merge CLI *overrides* on top."""
    return make_config(load_config_file(project_dir), **overrides)
