"""Configuration management"""
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from lifetrack.exceptions import ConfigurationError

load_dotenv()

logger = logging.getLogger(__name__)

# Azure Blob Storage
# Either a literal connection string or a value with %NAME% placeholders
# that are filled in from the environment (see resolve_placeholders)
AZURE_STORAGE_CONNECTION_STRING: str = os.getenv("AZURE_STORAGE_CONNECTION_STRING", "")
AZURE_STORAGE_CONTAINER: str = os.getenv("AZURE_STORAGE_CONTAINER", "")
DEFAULT_CONTAINER_NAME = "lifetrack-data"

# Azurite development placeholder. Treated as "not configured".
DEVELOPMENT_STORAGE_SENTINEL = "UseDevelopmentStorage=true"

# Optional JSON settings file (appsettings.json layout)
APPSETTINGS_PATH: Path = Path(os.getenv("APPSETTINGS_PATH", "appsettings.json"))

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))
SEED_FILE_PATH: Path = Path(os.getenv("SEED_FILE_PATH", "goals.txt"))

# Calendar days are evaluated in this timezone (empty = server local time)
APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "")

# API
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8080"))
CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000")

# Rate limits (slowapi syntax): everyday endpoints, and profile edits / goal creation
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
RATE_LIMIT_STRICT: str = os.getenv("RATE_LIMIT_STRICT", "30/minute")

# Goal sessions kept in memory; the least recently used is dropped beyond this
MAX_SESSIONS: int = int(os.getenv("MAX_SESSIONS", "500"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

_PLACEHOLDER = re.compile(r"%([A-Za-z_][A-Za-z0-9_]*)%")


def load_settings_file(path: Optional[Path] = None) -> dict[str, Any]:
    """Load the optional JSON settings file, returning {} if absent"""
    path = path or APPSETTINGS_PATH
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            message=f"Could not read settings file {path}: {e}",
            config_key=str(path),
            cause=e
        )

    if not isinstance(data, dict):
        raise ConfigurationError(
            message=f"Settings file {path} must contain a JSON object",
            config_key=str(path)
        )
    return data


def resolve_placeholders(value: str, config_key: str = "") -> str:
    """
    Replace %NAME% placeholders with environment variable values.

    Raises:
        ConfigurationError: If a referenced variable is not set
    """
    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        resolved = os.environ.get(name)
        if resolved is None:
            raise ConfigurationError(
                message=f"Environment variable {name} referenced by {config_key or 'configuration'} is not set",
                config_key=config_key or name
            )
        return resolved

    return _PLACEHOLDER.sub(_substitute, value)


def get_storage_connection_string(settings: Optional[dict[str, Any]] = None) -> str:
    """
    Resolve the blob storage connection string.

    Order: AZURE_STORAGE_CONNECTION_STRING, then AzureStorage.ConnectionString
    from the settings file. Placeholders are substituted in either.

    Raises:
        ConfigurationError: If nothing usable is configured
    """
    raw = os.getenv("AZURE_STORAGE_CONNECTION_STRING", AZURE_STORAGE_CONNECTION_STRING)
    config_key = "AZURE_STORAGE_CONNECTION_STRING"

    if not raw:
        if settings is None:
            settings = load_settings_file()
        raw = (settings.get("AzureStorage") or {}).get("ConnectionString") or ""
        config_key = "AzureStorage:ConnectionString"

    if not raw:
        raise ConfigurationError(
            message="No blob storage connection string configured",
            config_key=config_key
        )

    resolved = resolve_placeholders(raw, config_key).strip()

    if not resolved or resolved == DEVELOPMENT_STORAGE_SENTINEL:
        raise ConfigurationError(
            message="Blob storage connection string is not configured for this environment",
            config_key=config_key
        )
    return resolved


def get_container_name(settings: Optional[dict[str, Any]] = None) -> str:
    """Blob container name: env, then settings file, then default"""
    name = os.getenv("AZURE_STORAGE_CONTAINER", AZURE_STORAGE_CONTAINER)
    if name:
        return name

    if settings is None:
        try:
            settings = load_settings_file()
        except ConfigurationError:
            settings = {}
    return (settings.get("AzureStorage") or {}).get("ContainerName") or DEFAULT_CONTAINER_NAME


def validate_config() -> None:
    """Validate configuration that must be sane at startup"""
    if LOG_LEVEL.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(f"LOG_LEVEL must be a standard logging level, got {LOG_LEVEL}")
    if not 0 < API_PORT < 65536:
        raise ValueError(f"API_PORT out of range: {API_PORT}")
    if MAX_SESSIONS < 1:
        raise ValueError(f"MAX_SESSIONS must be at least 1, got {MAX_SESSIONS}")
    # Storage settings are optional: without them the app runs on local files
