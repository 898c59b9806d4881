#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("reposeed")

DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. REPOSEED_CONFIG environment variable
    2. ~/.reposeed/ directory
    """
    if 'REPOSEED_CONFIG' in os.environ:
        path = Path(os.environ['REPOSEED_CONFIG'])
        if path.exists():
            return path

    reposeed_dir = Path.home() / '.reposeed'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = reposeed_dir / filename
        if path.exists() and path.stat().st_size > 0:
            return path

    # If no file exists, return default path
    return reposeed_dir / 'config.json'


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
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
                # Default to JSON format
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


def get_default_config():
    """Get default configuration."""
    return {
        "general": {
            "staging_root": "",  # Empty means the system temporary directory
            "progress": True
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s"
        }
    }


def apply_logging_config(config, debug=False):
    """
    Apply the logging section of a configuration to the reposeed logger.

    Args:
        config (dict): Loaded configuration
        debug (bool): Force DEBUG level with timestamps
    """
    settings = config.get("logging", {})
    level_name = "DEBUG" if debug else str(settings.get("level", "WARNING")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level '{level_name}', using WARNING")
        level = logging.WARNING

    fmt = DEBUG_FORMAT if debug else settings.get("format", "%(levelname)s: %(message)s")
    for handler in logging.getLogger().handlers:
        handler.setFormatter(logging.Formatter(fmt))
    logger.setLevel(level)


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
    Environment variables follow the pattern: REPOSEED_SECTION_KEY
    For example: REPOSEED_GENERAL_PROGRESS=false
    """
    env_prefix = "REPOSEED_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        # Convert value
        if value.lower() in ('true', '1', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', '0', 'no', 'off'):
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
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    # Path conflict, e.g., env var is longer but we found a non-dict value
                    break
            else:
                break

    return config
