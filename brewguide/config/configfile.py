##############################################################################
# Copyright (c) Brew Guide Project developers. See top-level LICENSE and
# COPYRIGHT files for dates and other details. No copyright assignment is
# required to contribute to Brew Guide.
##############################################################################

"""
This module provides functionality for locating and loading the application
configuration file and filling in default settings.

It houses the `CONFIG` object that's used throughout Brew Guide's codebase.
"""
import logging
import os
from typing import Dict, Optional

from brewguide.config import Config
from brewguide.config.config_filepaths import APP_FILENAME, BREWGUIDE_HOME
from brewguide.utils import dict_deep_merge, load_yaml


LOG: logging.Logger = logging.getLogger(__name__)

CONFIG: Optional[Config] = None


def get_default_config() -> Dict:
    """
    Creates the default configuration used when no `app.yaml` exists.

    Returns:
        A configuration dictionary with every setting populated.
    """
    return {
        "storage": {
            "data_dir": BREWGUIDE_HOME,
            "database": "brewguide.db",
        },
        "key_value": {
            "backend": "file",
            "filename": "preferences.json",
            "url": "redis://localhost:6379/0",
        },
        "cache": {
            "max_size": 100,
            "default_ttl": 600.0,
            "enable_lru": True,
        },
    }


def find_config_file(path: str = None) -> Optional[str]:
    """
    Locate the Brew Guide configuration file (`app.yaml`).

    If no directory is given the current working directory is checked first,
    then the `BREWGUIDE_HOME` directory.

    Args:
        path: A specific directory to look for `app.yaml`.

    Returns:
        The full path to the `app.yaml` file if found, otherwise `None`.
    """
    if path is None:
        local_app = os.path.join(os.getcwd(), APP_FILENAME)
        if os.path.isfile(local_app):
            return local_app

        path_app = os.path.join(BREWGUIDE_HOME, APP_FILENAME)
        if os.path.isfile(path_app):
            return path_app

        return None

    app_path = os.path.join(path, APP_FILENAME)
    if os.path.exists(app_path):
        return app_path

    return None


def load_config(filepath: str) -> Optional[Dict]:
    """
    Reads a Brew Guide YAML configuration file and returns its contents as a dictionary.

    Args:
        filepath: The path to the YAML configuration file.

    Returns:
        A dictionary containing the contents of the YAML file or None if file doesn't exist.
    """
    if not os.path.isfile(filepath):
        LOG.info(f"No app config file at {filepath}")
        return None
    LOG.info(f"Reading app config from file {filepath}")
    return load_yaml(filepath)


def apply_env_overrides(config: Dict):
    """
    Apply the environment variables that override file settings.

    Args:
        config: The configuration dictionary to update in place.
    """
    backend = os.environ.get("BREWGUIDE_KV_BACKEND")
    if backend:
        LOG.debug(f"Key-value backend overridden by environment: {backend}")
        config["key_value"]["backend"] = backend


def get_config(path: Optional[str] = None) -> Dict:
    """
    Load the configuration, layering the file found (if any) over the defaults.

    Args:
        path: The directory path to search for the configuration file. If `None`,
            default search paths are used.

    Returns:
        A dictionary containing all the configuration data.
    """
    config = get_default_config()
    filepath = find_config_file(path)
    if filepath is None:
        LOG.debug("No app.yaml found; using default configuration.")
    else:
        file_config = load_config(filepath) or {}
        dict_deep_merge(config, file_config)
    apply_env_overrides(config)
    return config


def initialize_config(path: Optional[str] = None) -> Config:
    """
    Initializes and returns the Brew Guide configuration.

    Args:
        path: Path to look for configuration file.

    Returns:
        The initialized configuration object.
    """
    global CONFIG  # pylint: disable=global-statement
    CONFIG = Config(get_config(path))
    return CONFIG


initialize_config()
