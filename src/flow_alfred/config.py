"""flow-alfred Configuration

Configuration loading with environment variable support and sensible defaults.

Environment Variables:
    FLOW_ALFRED_CONFIG_PATH: Path to config file (default: ~/.config/flow-alfred/config.yaml)
    FLOW_ALFRED_LOG_LEVEL: Override logging level from config
    code_root: Alfred workflow variable overriding code.root
    repos_root: Alfred workflow variable overriding repos.root

Configuration Schema:
    code:
        root: str - Root scanned by `code` (default: "~/code")
    repos:
        root: str - owner/repo root scanned by `repos` (default: "~/repos")
    workflow:
        bundle_id: str - Alfred workflow bundle ID (default: "nikiv.dev.flow")
        dir: str - Workflow source directory (default: "Flow.alfredworkflow")
        package: str - Output path for `pack` (default: "Flow-Workflow.alfredworkflow")
    logging:
        level: str - Logging level (default: "WARNING")
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "code": {
        "root": "~/code",
    },
    "repos": {
        "root": "~/repos",
    },
    "workflow": {
        "bundle_id": "nikiv.dev.flow",
        "dir": "Flow.alfredworkflow",
        "package": "Flow-Workflow.alfredworkflow",
    },
    "logging": {
        "level": "WARNING",
    },
}

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "code_root": ("code", "root"),
    "repos_root": ("repos", "root"),
    "FLOW_ALFRED_LOG_LEVEL": ("logging", "level"),
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_default_config_path() -> Path:
    """Get path to the optional user config file."""
    return Path.home() / ".config" / "flow-alfred" / "config.yaml"


def _read_config_file(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        file_config = yaml.safe_load(f) or {}
    if not isinstance(file_config, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")
    return file_config


def _is_valid_log_level(name: Any) -> bool:
    return isinstance(logging.getLevelName(str(name).upper()), int)


def _drop_invalid_log_level(file_config: Dict[str, Any], path: Path) -> None:
    """Remove an unknown logging.level from an optional config file in place."""
    section = file_config.get("logging")
    if not isinstance(section, dict) or "level" not in section:
        return
    if not _is_valid_log_level(section["level"]):
        logger.warning(
            f"Unknown log level {section['level']!r} in {path} (using default)"
        )
        del section["level"]


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (config_path parameter, FLOW_ALFRED_CONFIG_PATH, or default path)
    3. Environment variable overrides (code_root, repos_root, FLOW_ALFRED_LOG_LEVEL)

    Args:
        config_path: Explicit config file path (overrides FLOW_ALFRED_CONFIG_PATH)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file exists but is invalid
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    file_path = config_path or os.environ.get("FLOW_ALFRED_CONFIG_PATH")

    if file_path:
        # Explicit config path - must be valid if it exists
        resolved_path = expand_path(file_path)
        if resolved_path.exists():
            try:
                config = _deep_merge(config, _read_config_file(resolved_path))
                logger.info(f"Loaded configuration from: {resolved_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file: {e}")
            except IOError as e:
                raise ConfigurationError(f"Cannot read config file: {e}")
        else:
            logger.warning(f"Config file not found (using defaults): {file_path}")
    else:
        default_config_path = get_default_config_path()
        if default_config_path.exists():
            try:
                file_config = _read_config_file(default_config_path)
                _drop_invalid_log_level(file_config, default_config_path)
                config = _deep_merge(config, file_config)
                logger.info(f"Loaded configuration from: {default_config_path}")
            except (yaml.YAMLError, ConfigurationError) as e:
                logger.warning(f"Invalid default config (ignoring): {e}")
            except IOError as e:
                logger.warning(f"Cannot read default config (ignoring): {e}")
        else:
            logger.debug("No config file found, using defaults")

    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config.setdefault(section, {})[key] = value
            logger.debug(f"{section}.{key} override from env {env_var}: {value}")

    return config


def get_code_root(config: Dict[str, Any]) -> str:
    """Get the unexpanded root for unbounded code search."""
    return config.get("code", {}).get("root") or DEFAULT_CONFIG["code"]["root"]


def get_repos_root(config: Dict[str, Any]) -> str:
    """Get the unexpanded root for owner/repo search."""
    return config.get("repos", {}).get("root") or DEFAULT_CONFIG["repos"]["root"]


def get_workflow_config(config: Dict[str, Any]) -> Dict[str, str]:
    """Get workflow settings merged over defaults."""
    return {**DEFAULT_CONFIG["workflow"], **config.get("workflow", {})}


def get_log_level(config: Dict[str, Any]) -> int:
    """Resolve the configured log level name to a logging constant."""
    name = str(config.get("logging", {}).get("level", "WARNING")).upper()
    if not _is_valid_log_level(name):
        raise ConfigurationError(f"Unknown log level: {name}")
    return logging.getLevelName(name)


# =============================================================================
# Path and Alfred environment helpers
# =============================================================================


def expand_path(path: str) -> Path:
    """Expand a leading "~/" against $HOME; other paths are returned as-is."""
    home = os.environ.get("HOME")
    if path.startswith("~/") and home:
        return Path(home) / path[2:]
    if path == "~" and home:
        return Path(home)
    return Path(path)


def alfred_env(name: str) -> Optional[str]:
    """Get an environment variable set by Alfred (alfred_<name>)."""
    return os.environ.get(f"alfred_{name}")


def in_alfred() -> bool:
    """Check if running inside Alfred."""
    return "alfred_version" in os.environ


def bundle_id() -> Optional[str]:
    """Get workflow bundle ID from environment."""
    return alfred_env("workflow_bundleid")


def data_dir() -> Optional[Path]:
    """Get workflow data directory from environment."""
    value = alfred_env("workflow_data")
    return Path(value) if value else None


def cache_dir() -> Optional[Path]:
    """Get workflow cache directory from environment."""
    value = alfred_env("workflow_cache")
    return Path(value) if value else None
