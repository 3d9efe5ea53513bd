"""
Configuration — site settings from mirrorwiz.yml.
"""

from mirrorwiz.core.config.loader import (
    CONFIG_FILE,
    ConfigError,
    find_config_file,
    load_site_config,
)

__all__ = ["CONFIG_FILE", "ConfigError", "find_config_file", "load_site_config"]
