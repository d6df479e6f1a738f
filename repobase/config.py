#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("repobase")


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. REPOBASE_CONFIG environment variable
    2. ~/.repobase/ directory
    """
    if 'REPOBASE_CONFIG' in os.environ:
        path = Path(os.environ['REPOBASE_CONFIG'])
        if path.exists():
            return path

    repobase_dir = Path.home() / '.repobase'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = repobase_dir / filename
        if path.exists():
            return path

    return repobase_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "gitlab": {
            "host": "gitlab.com",
            "token": "",
            "timeout_seconds": 30,
            "use_glab_cli": True
        },
        "resolution": {
            "remote_priority": ["upstream", "gitlab", "origin"],
            "max_remotes_for_lookup": 5,
            "config_key": "repobase-resolved"
        },
        "logging": {
            "level": "INFO"
        }
    }


def load_config():
    """Load configuration from file, defaults and environment."""
    config_path = get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        config = merge_configs(config, file_config)

    config = apply_env_overrides(config)

    # Token fallbacks shared with other GitLab tooling
    if not config["gitlab"].get("token"):
        config["gitlab"]["token"] = os.environ.get("GITLAB_TOKEN", "")

    return config


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
    Environment variables follow the pattern: REPOBASE_SECTION_KEY
    For example: REPOBASE_GITLAB_HOST=gitlab.example.com
    """
    env_prefix = "REPOBASE_"

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
            # Longest config key that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                if isinstance(current_level[matched_key], str):
                    typed_value = value
                elif isinstance(current_level[matched_key], list):
                    typed_value = [v.strip() for v in value.split(',') if v.strip()]
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config


def configure_logging(config=None, verbose=False):
    """Set the repobase log level from config or the --verbose flag."""
    level_name = "DEBUG" if verbose else (config or {}).get("logging", {}).get("level", "INFO")
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logger.setLevel(level)
    return level
