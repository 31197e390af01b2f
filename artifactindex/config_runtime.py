"""Runtime configuration for artifactindex - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from artifactindex.utils.constants import CATALOG_FILE, CONFIG_FILE_NAME, EXPORT_FILE, STATE_DIR
from artifactindex.utils.logging import logger

from .indexer.config import DEFAULT_PAGE_SIZE

DEFAULTS = {
    "paths": {
        "catalog_db": str(CATALOG_FILE),
        "storage_root": "./storage",
        "output": str(EXPORT_FILE),
    },
    "export": {
        "storage_id": "storage0",
        "repository_id": "releases",
    },
    "limits": {
        "page_size": DEFAULT_PAGE_SIZE,
    },
}


def load_runtime_config(root: str = ".") -> dict[str, Any]:
    """
    Load runtime configuration from .artifactindex/config.json and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (ARTIFACTINDEX_<SECTION>_<KEY>)
    2. .artifactindex/config.json file
    3. Built-in defaults

    Args:
        root: Root directory to look for config file

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / STATE_DIR.name / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config file from {}: {}", path, e)
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"ARTIFACTINDEX_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    if isinstance(cfg[section][key], int):
                        cfg[section][key] = int(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning("Invalid value for environment variable {}: '{}' - {}", env_var, value, e)
                    logger.info("Using default value: {}", cfg[section][key])

    return cfg
