"""Application configuration for the Lokalise key uploader."""
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from lokalise_keys.batching import MAX_KEYS_PER_REQUEST
from lokalise_keys.errors import AuthError
from lokalise_keys.logging_config import setup_logger
from lokalise_keys.lokalise_client import (
    DEFAULT_BASE_URL,
    DEFAULT_REQUESTS_PER_SECOND,
    DEFAULT_TIMEOUT
)
from lokalise_keys.payloads import DEFAULT_PLATFORMS

API_TOKEN_ENV_VAR = 'LOKALISE_API_TOKEN'
CONFIG_FILE_ENV_VAR = 'LOKALISE_KEYS_CONFIG_FILE'
BATCH_SIZE_ENV_VAR = 'LOKALISE_BATCH_SIZE'


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    project_root: str

    # Lokalise API
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND

    # Processing settings
    batch_size: int = MAX_KEYS_PER_REQUEST
    platforms: List[str] = field(default_factory=lambda: list(DEFAULT_PLATFORMS))
    dry_run: bool = False


def _compute_project_root() -> str:
    """Compute the project root directory."""
    package_dir = os.path.dirname(os.path.realpath(__file__))
    return os.path.abspath(os.path.join(package_dir, os.pardir))


def _dotenv_candidates(project_root: str) -> List[str]:
    return [os.path.join(os.getcwd(), '.env'), os.path.join(project_root, '.env')]


def _load_dotenv_files(project_root: str) -> Optional[str]:
    """Load the first .env file found; variables already set are kept."""
    for dotenv_path in _dotenv_candidates(project_root):
        if os.path.exists(dotenv_path):
            load_dotenv(dotenv_path)
            return dotenv_path
    return None


def _load_yaml_config() -> Dict[str, Any]:
    """Load the optional YAML configuration file."""
    explicit_path = os.environ.get(CONFIG_FILE_ENV_VAR)
    config_file = os.path.abspath(explicit_path or os.path.join(os.getcwd(), 'config.yaml'))

    config = {}
    if not os.path.exists(config_file):
        # The default config file is optional, a configured one is not.
        if explicit_path:
            print(f"Warning: Configuration file '{config_file}' not found. Using default configuration.",
                  file=sys.stderr)
        return config

    try:
        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
            if loaded_config is None:
                print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                      file=sys.stderr)
            elif isinstance(loaded_config, dict):
                config = loaded_config
            else:
                print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                      file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except OSError as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging') or {}
    if not isinstance(log_config, dict):
        print("Error: 'logging' in the configuration file must be a mapping. Using default logging settings.",
              file=sys.stderr)
        log_config = {}
    log_level_str = str(log_config.get('log_level') or 'INFO').upper()
    log_file_path = log_config.get('log_file_path', 'logs/lokalise_keys.log')
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def _resolve_batch_size(config: Dict[str, Any], logger: logging.Logger) -> int:
    """Read the batch size, letting the environment override the file, and clamp it."""
    raw_value = os.environ.get(BATCH_SIZE_ENV_VAR, config.get('batch_size', MAX_KEYS_PER_REQUEST))
    try:
        batch_size = int(raw_value)
    except (TypeError, ValueError):
        logger.warning("Invalid batch size %r, using %d.", raw_value, MAX_KEYS_PER_REQUEST)
        return MAX_KEYS_PER_REQUEST
    return clamp_batch_size(batch_size, logger)


def _read_float(config: Dict[str, Any], name: str, default: float, logger: logging.Logger) -> float:
    raw_value = config.get(name)
    if raw_value is None:
        return float(default)
    try:
        return float(raw_value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s %r, using %s.", name, raw_value, default)
        return float(default)


def _read_platforms(config: Dict[str, Any], logger: logging.Logger) -> List[str]:
    platforms = config.get('platforms') or DEFAULT_PLATFORMS
    if isinstance(platforms, str):
        return [platforms]
    if not isinstance(platforms, list):
        logger.warning("Invalid platforms %r, using %s.", platforms, DEFAULT_PLATFORMS)
        return list(DEFAULT_PLATFORMS)
    return [str(platform) for platform in platforms]


def clamp_batch_size(batch_size: int, logger: logging.Logger) -> int:
    """Keep a batch size within what a single Lokalise request accepts."""
    if batch_size < 1:
        logger.warning("Batch size %d is too small, using 1.", batch_size)
        return 1
    if batch_size > MAX_KEYS_PER_REQUEST:
        logger.warning("Batch size %d exceeds the Lokalise limit, using %d.", batch_size, MAX_KEYS_PER_REQUEST)
        return MAX_KEYS_PER_REQUEST
    return batch_size


def read_api_token() -> str:
    """
    Return the Lokalise API token from the environment.

    Raises:
        AuthError: If ``LOKALISE_API_TOKEN`` is unset or blank.
    """
    token = os.environ.get(API_TOKEN_ENV_VAR, '').strip()
    if not token:
        raise AuthError(f"Missing env var {API_TOKEN_ENV_VAR}")
    return token


def load_app_config() -> AppConfig:
    """
    Load application configuration from .env files, the YAML config file and
    environment variables, and configure logging.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    dotenv_path = _load_dotenv_files(project_root)

    config = _load_yaml_config()

    logger = _setup_logger_from_config(config)

    if dotenv_path:
        logger.debug("Loaded environment variables from: %s", dotenv_path)
    else:
        logger.debug("No .env file found. Relying on system environment variables if any.")

    return AppConfig(
        project_root=project_root,
        api_base_url=config.get('api_base_url') or DEFAULT_BASE_URL,
        request_timeout=_read_float(config, 'request_timeout', DEFAULT_TIMEOUT, logger),
        requests_per_second=_read_float(config, 'requests_per_second', DEFAULT_REQUESTS_PER_SECOND, logger),
        batch_size=_resolve_batch_size(config, logger),
        platforms=_read_platforms(config, logger),
        dry_run=bool(config.get('dry_run', False)),
    )
