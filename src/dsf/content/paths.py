from __future__ import annotations

import os
from pathlib import Path

ASSETS_DIR_ENV_VAR = "DSF_ASSETS_DIR"
USERDATA_DIR_ENV_VAR = "DSF_USERDATA_DIR"
DEFAULT_ASSETS_DIR = "assets"
DEFAULT_USERDATA_DIR = ".userdata"
WORLD_DIR_NAME = "world"
ADVENTURES_DIR_NAME = "adventures"
LEVELS_DIR_NAME = "levels"
CONTENT_FILE_SUFFIX = ".json"
DEFAULT_ADVENTURE_NAME = "default"
USER_CACHE_FILE_NAME = "cache.json"


def _env_path(var_name: str, default: str) -> Path:
    value = os.environ.get(var_name, "").strip()
    return Path(value) if value else Path(default)


def _create_if_missing(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_assets_dir() -> Path:
    return _env_path(ASSETS_DIR_ENV_VAR, DEFAULT_ASSETS_DIR)


def get_world_dir() -> Path:
    return _create_if_missing(get_assets_dir() / WORLD_DIR_NAME)


def get_adventures_dir() -> Path:
    return _create_if_missing(get_world_dir() / ADVENTURES_DIR_NAME)


def get_levels_dir() -> Path:
    return _create_if_missing(get_world_dir() / LEVELS_DIR_NAME)


def get_user_data_dir() -> Path:
    """Transient per-player data: settings, key bindings, cache and save files.

    Never checked in; empty or absent on a player's first start.
    """
    return _create_if_missing(_env_path(USERDATA_DIR_ENV_VAR, DEFAULT_USERDATA_DIR))


def get_user_cache_file() -> Path:
    return get_user_data_dir() / USER_CACHE_FILE_NAME


def adventure_path(name: str) -> Path:
    return get_adventures_dir() / f"{name}{CONTENT_FILE_SUFFIX}"


def default_adventure_path() -> Path:
    return adventure_path(DEFAULT_ADVENTURE_NAME)


def level_path(name: str) -> Path:
    return get_levels_dir() / f"{name}{CONTENT_FILE_SUFFIX}"
