#!/usr/bin/env python3
"""
Configuration for rangelog.

Settings come from built-in defaults, then ~/.rangelog/config.{json,toml,yaml}
(or the file named by RANGELOG_CONFIG), then RANGELOG_* environment
variables. Importing this module also sets up logging to stderr.
"""

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import toml
import yaml

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger("rangelog")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """
    Path of the config file in use.

    RANGELOG_CONFIG wins when it names an existing file. Otherwise the first
    non-trivial config.* in ~/.rangelog, falling back to config.json there
    (which may not exist yet).
    """
    override = os.environ.get('RANGELOG_CONFIG')
    if override:
        path = Path(override).expanduser()
        if path.exists():
            return path

    rangelog_dir = Path.home() / '.rangelog'
    for filename in CONFIG_FILENAMES:
        path = rangelog_dir / filename
        if path.exists() and path.stat().st_size > 2:
            return path

    return rangelog_dir / 'config.json'


def read_config_file(config_path):
    """Read a JSON, TOML or YAML config file into a dict."""
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ['.yaml', '.yml']:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Defaults, overlaid with the config file, overlaid with RANGELOG_* variables."""
    config_path = get_config_path()
    config = get_default_config()

    if config_path.exists():
        try:
            file_config = read_config_file(config_path)
        except (OSError, ValueError, tomllib.TOMLDecodeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")
        else:
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            else:
                logger.error(f"Ignoring config {config_path}: expected a mapping")

    return apply_env_overrides(config)


def save_config(config, config_path=None):
    """
    Write ``config`` in the format its suffix names (JSON otherwise).

    Returns:
        The path written, or None if it could not be written
    """
    config_path = Path(config_path) if config_path else get_config_path()
    suffix = config_path.suffix.lower()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            if suffix == '.toml':
                toml.dump(config, f)
            elif suffix in ['.yaml', '.yml']:
                yaml.safe_dump(config, f, default_flow_style=False)
            else:
                json.dump(config, f, indent=2)
    except OSError as e:
        logger.error(f"Error saving config to {config_path}: {e}")
        return None

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def get_default_config():
    """Built-in defaults; every key here can be overridden."""
    return {
        "github": {
            "token": "",
            "api_url": "https://api.github.com",
            "timeout_seconds": 30,
            "rate_limit": {
                "max_retries": 3,
                "base_delay_seconds": 1,
                "max_delay_seconds": 60,
            },
        },
        "releases": {
            "page_size": 30,      # GitHub's default per_page
            "default_pages": 10,  # pages read when listing versions
            "max_pages": 100,     # bound while resolving a range
        },
        "aggregation": {
            "max_workers": 1,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s",
        },
    }


def configure_logging(config, verbose=False):
    """Apply the "logging" section (or DEBUG when verbose) to the rangelog logger."""
    logging_config = config.get("logging", {})
    level_name = "DEBUG" if verbose else str(logging_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logger.setLevel(level)
    fmt = logging_config.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def merge_configs(base_config, override_config):
    """Merge ``override_config`` into a copy of ``base_config``, section by section."""
    merged = dict(base_config)
    for key, value in override_config.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_configs(current, value)
        else:
            merged[key] = value
    return merged


ENV_PREFIX = "RANGELOG_"


def _env_value(raw):
    lowered = raw.lower()
    if lowered in ('true', 'yes', 'on'):
        return True
    if lowered in ('false', 'no', 'off'):
        return False
    if raw.isdigit():
        return int(raw)
    return raw


def _longest_key(section, parts):
    """Key of ``section`` spelling the most leading ``parts``, and how many it used."""
    best, used = None, 0
    for key in section:
        words = key.split('_')
        if parts[:len(words)] == words and len(words) > used:
            best, used = key, len(words)
    return best, used


def apply_env_overrides(config):
    """
    Apply RANGELOG_SECTION_KEY=value variables to ``config`` in place.

    Underscores separate both path segments and words inside a key, so each
    step takes the longest existing key that matches, e.g.
    RANGELOG_GITHUB_RATE_LIMIT_MAX_RETRIES=5 sets github.rate_limit.max_retries.
    Variables that match no existing key are ignored.
    """
    for env_key, raw in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue

        parts = env_key[len(ENV_PREFIX):].lower().split('_')
        section = config
        while parts:
            key, used = _longest_key(section, parts)
            if key is None:
                break
            parts = parts[used:]
            if not parts:
                section[key] = _env_value(raw)
            elif isinstance(section[key], dict):
                section = section[key]
            else:
                break

    return config
