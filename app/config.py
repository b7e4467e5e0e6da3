"""Configuration management using Pydantic BaseSettings with JSON file support."""
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

APPROVAL_BACKEND_FILE = "file"
APPROVAL_BACKEND_REDIS = "redis"


def flatten_json_config(config: dict[str, Any]) -> dict[str, Any]:
    """Flatten nested JSON config into flat key-value pairs.

    Supports nested structures like:
    {
        "hostaway": {"hostaway_account_id": "61148", "hostaway_reviews_limit": 100},
        "server": {"server_port": 3001}
    }

    Becomes:
    {"hostaway_account_id": "61148", "hostaway_reviews_limit": 100, "server_port": 3001}

    Keys starting with "_" (like "_comment") are skipped.
    """
    result = {}

    for key, value in config.items():
        if key.startswith("_"):
            continue

        if isinstance(value, dict):
            result.update(flatten_json_config(value))
        else:
            result[key] = value

    return result


def load_json_config(config_file: Optional[str] = None) -> dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        config_file: Path to JSON config file. If None, checks CONFIG_FILE env var.

    Returns:
        Dictionary of configuration values (flattened), or empty dict if no file found.
    """
    file_path = config_file or os.getenv("CONFIG_FILE")

    if not file_path:
        return {}

    path = Path(file_path)
    if not path.exists():
        logger.warning(f"Config file not found: {file_path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in config file {file_path}: {e}")
        return {}
    except OSError as e:
        logger.error(f"Error reading config file {file_path}: {e}")
        return {}

    if not isinstance(config, dict):
        logger.error(f"Config file {file_path} must contain a JSON object")
        return {}

    logger.info(f"Loaded configuration from: {file_path}")
    return flatten_json_config(config)


class Settings(BaseSettings):
    """Application configuration with JSON file and environment variable support.

    Configuration priority (highest to lowest):
    1. Environment variables
    2. JSON config file (specified via CONFIG_FILE env var)
    3. Default values
    """

    # Hostaway API Configuration
    # Empty credentials mean the fixture dataset is always used
    hostaway_account_id: str = ""
    hostaway_api_key: str = ""
    hostaway_base_url: str = "https://api.hostaway.com/v1"
    hostaway_reviews_limit: int = 100
    hostaway_timeout_seconds: float = 10.0

    # Google Places API Configuration
    google_api_key: str = ""
    google_places_base_url: str = "https://maps.googleapis.com/maps/api/place"

    # Approval store: "file" (JSON on disk) or "redis" (hash)
    approval_store_backend: str = APPROVAL_BACKEND_FILE
    approvals_file: str = "review-approvals.json"

    # Redis Configuration (only used by the redis approval backend)
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    # Review snapshot refresh
    reviews_refresh_minutes: int = 15
    refresh_on_startup: bool = True

    # Server Configuration
    server_port: int = 3001
    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["*"]

    # Project Paths
    project_root: str = ""
    resources_path_prefix: str = "resources"

    # Resource Files
    mock_reviews_resource: str = "mock_reviews.json"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def __init__(self, **kwargs):
        """Initialize settings from JSON file and environment variables.

        Priority: env vars > JSON config > defaults
        """
        json_config = load_json_config()

        # Env vars outrank the JSON file, so drop JSON keys that are set there
        json_config = {
            key: value for key, value in json_config.items()
            if os.getenv(key.upper()) is None
        }

        merged_kwargs = {**json_config, **kwargs}

        super().__init__(**merged_kwargs)

        if not self.project_root:
            self.project_root = os.getenv("PROJECT_ROOT", os.getcwd())

    @property
    def base_dir(self) -> Path:
        """Get the project root directory as a Path object."""
        return Path(self.project_root)

    def get_resource_path(self, resource_file: str) -> Path:
        """Get the full path to a resource file."""
        return self.base_dir / self.resources_path_prefix / resource_file

    @property
    def approvals_path(self) -> Path:
        """Approvals file, relative paths resolved against the project root."""
        path = Path(self.approvals_file)
        return path if path.is_absolute() else self.base_dir / path

    @property
    def mock_reviews_path(self) -> Path:
        return self.get_resource_path(self.mock_reviews_resource)

    @property
    def redis_address(self) -> str:
        """Get Redis connection address in host:port format."""
        return f"{self.redis_host}:{self.redis_port}"


# Global settings instance
settings = Settings()
