#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path
from typing import Optional, Union

import logging
import sys

import yaml

logger = logging.getLogger("regcheck")

CONFIG_FILENAMES = ['.regcheck.json', '.regcheck.toml', '.regcheck.yaml', '.regcheck.yml']


def setup_logging(level: Union[str, int] = "INFO", fmt: str = "%(levelname)s: %(message)s") -> None:
    """Configure stderr logging for the regcheck loggers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[
            logging.StreamHandler(sys.stderr)  # stdout is reserved for data
        ],
        force=True,
    )


def get_config_path(root: Union[str, Path] = ".") -> Optional[Path]:
    """Get the path to the configuration file.

    Checks in order:
    1. REGCHECK_CONFIG environment variable
    2. .regcheck.{json,toml,yaml,yml} in the registry repository root

    Returns None when no configuration file exists (defaults apply).
    """
    if 'REGCHECK_CONFIG' in os.environ:
        path = Path(os.environ['REGCHECK_CONFIG'])
        if path.exists():
            return path
        logger.warning(f"REGCHECK_CONFIG points to missing file {path}")

    for filename in CONFIG_FILENAMES:
        path = Path(root) / filename
        if path.exists():
            return path

    return None


def _read_config_file(config_path: Path) -> dict:
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config(root: Union[str, Path] = "."):
    """Load configuration: defaults, then the config file, then environment overrides."""
    config = get_default_config()

    config_path = get_config_path(root)
    if config_path is not None:
        try:
            file_config = _read_config_file(config_path)
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            else:
                logger.error(f"Ignoring config {config_path}: top level must be a mapping")
        except (OSError, ValueError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "registries": {
            "plugins": {
                "file": "plugins.json",
            },
            "themes": {
                "file": "themes.json",
            },
        },
        "git": {
            "remote": "origin",
            "base_branch": "main",
            "base_ref": "origin/main",
            "head_ref": "HEAD",
            "fetch": True,
            "timeout": 30,
        },
        "http": {
            "timeout": None,  # transport default
            "user_agent": "regcheck",
        },
        "classifier": {
            "match": "substring",  # or "basename"
        },
        "schema": {
            "format": True,
        },
        "scan": {
            "enabled": True,
            "allowed_extensions": [
                ".ts", ".js", ".json", ".md", ".css", ".png", ".jpg", ".jpeg",
                ".svg", ".gitignore", ".yml", ".yaml", ".mjs",
            ],
            "allowed_basenames": ["LICENSE", "README"],
            "scanned_extensions": [".ts", ".js"],
            "forbidden_tokens": [
                {"token": "window.", "message": 'Direct access to "window" is forbidden. Use platform-agnostic abstractions.'},
                {"token": "document.", "message": 'Direct access to "document" is forbidden. Use platform-agnostic abstractions.'},
                {"token": "innerHTML", "message": 'Usage of "innerHTML" is forbidden.'},
                {"token": "outerHTML", "message": 'Usage of "outerHTML" is forbidden.'},
                {"token": "@codemirror/", "message": 'Direct imports from "@codemirror/" are forbidden. Use @inkdown/core editor abstractions.'},
                {"token": "@tauri-apps/", "message": 'Direct imports from "@tauri-apps/" are forbidden. Use @inkdown/core native abstractions.'},
            ],
        },
        "labels": {
            "enabled": True,
            "passed": "waiting-for-review",
            "failed": "validation-error",
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s",
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: REGCHECK_SECTION_SUBSECTION_KEY
    For example: REGCHECK_GIT_BASE_REF=origin/develop
    """
    env_prefix = "REGCHECK_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict: env var is longer but we found a non-dict value
                    break
            else:
                break

    return config
