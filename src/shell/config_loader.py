"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, PushLimitConfig) are defined in src/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from src.core.config import Config, PushLimitConfig
from src.shell.secret_manager_client import SecretManagerClient, SecretManagerConfig


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _get_secret_manager_client() -> Optional[SecretManagerClient]:
    """Get a Secret Manager client for the current project.

    Returns None if GCP_PROJECT is not set (e.g., local development).
    """
    project_id = os.environ.get("GCP_PROJECT") or os.environ.get("GOOGLE_CLOUD_PROJECT")
    if project_id:
        return SecretManagerClient(SecretManagerConfig(project_id=project_id))
    return None


def _resolve_value(value: Any, secret_client: Optional[SecretManagerClient] = None) -> Any:
    """Resolve a value that may contain secret or env var placeholders.

    Args:
        value: Value to resolve (may contain ${...} placeholders)
        secret_client: Client for resolving secrets

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if secret_client:
        return secret_client.resolve(value)

    # No secret client - only handle env vars
    if value.startswith("${") and value.endswith("}"):
        var_spec = value[2:-1]
        if not var_spec.startswith("secret:"):
            env_value = os.environ.get(var_spec)
            if env_value:
                return env_value
            logger.warning("Environment variable %s not set", var_spec)

    return value


def _parse_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _parse_push_limits(data: dict[str, Any]) -> PushLimitConfig:
    """Parse push limits from config data."""
    return PushLimitConfig(
        max_pushes_per_day=int(data.get("max_pushes_per_day", 3)),
        max_recipients_per_push=int(data.get("max_recipients_per_push", 0)),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only placeholder expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    secret_client = _get_secret_manager_client()

    firestore_data = data.get("firestore", {}) or {}
    fcm_data = data.get("fcm", {}) or {}

    return Config(
        firestore_project=_resolve_value(firestore_data.get("project"), secret_client),
        firestore_database=_resolve_value(firestore_data.get("database"), secret_client),
        fcm_project_id=_resolve_value(fcm_data.get("project_id"), secret_client),
        fcm_timeout_seconds=int(fcm_data.get("timeout_seconds", 10)),
        cron_secret=_resolve_value(data.get("cron_secret"), secret_client),
        push_enabled=_parse_bool(data.get("push_enabled"), True),
        push_limits=_parse_push_limits(data.get("push_limits", {}) or {}),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: push %s, daily cap %d, database %s",
        "enabled" if config.push_enabled else "disabled",
        config.push_limits.max_pushes_per_day,
        config.firestore_database or "(default)",
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for deployments without a YAML file.

    Environment variables:
        CRON_SECRET: Bearer secret for job endpoints
        CRON_SECRET_NAME: Secret Manager name to read the cron secret from instead
        FIRESTORE_DATABASE: Firestore database name
        FCM_PROJECT_ID: Firebase project for FCM
        PUSH_ENABLED: 'false' to disable delivery
        MAX_PUSHES_PER_DAY: Daily non-P0 cap per user

    Returns:
        Config object from environment
    """
    cron_secret = None

    secret_name = os.environ.get("CRON_SECRET_NAME")
    if secret_name:
        secret_client = _get_secret_manager_client()
        if secret_client:
            cron_secret = secret_client.get_secret(secret_name)
            if cron_secret:
                logger.info("Using cron secret from Secret Manager")

    if not cron_secret:
        cron_secret = os.environ.get("CRON_SECRET")

    if not cron_secret:
        logger.warning("CRON_SECRET not set and no secret found")

    return Config(
        firestore_project=os.environ.get("GCP_PROJECT"),
        firestore_database=os.environ.get("FIRESTORE_DATABASE"),
        fcm_project_id=os.environ.get("FCM_PROJECT_ID"),
        fcm_timeout_seconds=int(os.environ.get("FCM_TIMEOUT_SECONDS", "10")),
        cron_secret=cron_secret,
        push_enabled=_parse_bool(os.environ.get("PUSH_ENABLED"), True),
        push_limits=PushLimitConfig(
            max_pushes_per_day=int(os.environ.get("MAX_PUSHES_PER_DAY", "3")),
        ),
    )
