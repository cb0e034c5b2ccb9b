"""
Configuration loader for Workboard.
Loads configuration from YAML files and environment variables.

Order (later wins):
1. config/default.yaml
2. config/<WORKBOARD_ENV>.yaml
3. Environment variables (a .env file is loaded first)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .core.domain.models import COMPLETED_STATUS
from .core.domain.rules import default_board_columns
from .core.domain.schemas import ColumnInput

logger = logging.getLogger(__name__)


class SupabaseConfig(BaseModel):
    """Supabase connection settings."""
    url: str = ""
    key: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)


class BoardSettings(BaseModel):
    """Board defaults."""
    default_columns: List[ColumnInput] = Field(default_factory=default_board_columns)


class WorkboardConfig(BaseModel):
    """Main Workboard configuration."""

    model_config = ConfigDict(extra="allow")

    # Environment
    environment: str = "development"
    debug: bool = False

    # Logging
    log_level: str = "INFO"

    # Storage
    storage_backend: Literal["supabase", "memory"] = "supabase"
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)

    # Board
    board: BoardSettings = Field(default_factory=BoardSettings)
    completed_status: str = COMPLETED_STATUS

    @model_validator(mode="after")
    def _align_done_column(self) -> "WorkboardConfig":
        """Seeded boards must have a column that counts toward epic progress."""
        if "default_columns" not in self.board.model_fields_set:
            self.board.default_columns = default_board_columns(self.completed_status)
        elif not any(c.status == self.completed_status for c in self.board.default_columns):
            raise ValueError(
                f"board.default_columns has no column with completed_status '{self.completed_status}'"
            )
        return self


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay ``override`` onto ``base``."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Load and manage Workboard configuration."""

    def __init__(self, config_dir: str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
        """
        self.config_dir = Path(config_dir)
        self.config: Optional[WorkboardConfig] = None
        self.load()

    def load(self) -> WorkboardConfig:
        """Load configuration from YAML and environment variables."""
        load_dotenv()

        env = os.getenv("WORKBOARD_ENV", "development")
        config_file = self.config_dir / f"{env}.yaml"

        data = self._load_yaml(self.config_dir / "default.yaml")

        if config_file.exists():
            data = _merge(data, self._load_yaml(config_file))
        else:
            logger.warning(f"Config file not found: {config_file}, using defaults")

        data = _merge(data, self._load_from_env())

        self.config = WorkboardConfig(**data)
        logger.info(
            f"Configuration loaded (environment: {env}, storage: {self.config.storage_backend})"
        )
        return self.config

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML config file."""
        if not path.exists():
            return {}

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
                return data or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load YAML config {path}: {e}")
            return {}

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        supabase = {}
        if supabase_url := os.getenv("SUPABASE_URL"):
            supabase["url"] = supabase_url
        if supabase_key := os.getenv("SUPABASE_KEY"):
            supabase["key"] = supabase_key
        if supabase:
            config["supabase"] = supabase

        if log_level := os.getenv("WORKBOARD_LOG_LEVEL"):
            config["log_level"] = log_level
        if backend := os.getenv("WORKBOARD_STORAGE_BACKEND"):
            config["storage_backend"] = backend

        return config

    def get(self) -> WorkboardConfig:
        """Get current configuration."""
        if not self.config:
            self.load()
        return self.config

    def reload(self):
        """Reload configuration (useful for development)."""
        logger.info("Reloading configuration...")
        self.load()


# Global config instance
_global_config_loader: Optional[ConfigLoader] = None


def get_config() -> WorkboardConfig:
    """Get the global Workboard configuration."""
    global _global_config_loader
    if _global_config_loader is None:
        _global_config_loader = ConfigLoader()
    return _global_config_loader.get()


def initialize_config(config_dir: str = "config") -> WorkboardConfig:
    """Initialize the global configuration loader."""
    global _global_config_loader
    _global_config_loader = ConfigLoader(config_dir)
    return _global_config_loader.get()


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the configured log level. For entry points only."""
    level = level or get_config().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
