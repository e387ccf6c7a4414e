"""Configuration management for commitsplit."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

# Try to import tomllib (Python 3.11+) or fall back to tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]

logger = logging.getLogger(__name__)

FALSE_VALUES = {"0", "false", "no", "off"}


class Config(BaseModel):
    """Application configuration."""

    model: str = Field(default="gemini-2.0-flash", description="Default model to use")
    api_key: str | None = Field(default=None, description="Google API key")
    ai_enabled: bool = Field(default=True, description="Ask the model for boundaries and categories")
    ai_timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for each model request")

    max_boundary_size: int = Field(default=8, ge=1, description="Boundaries larger than this are split")
    split_chunk_size: int = Field(default=4, ge=1, description="Maximum files per split part")
    merge_limit: int = Field(default=4, ge=1, description="Singletons only merge into smaller boundaries")
    ai_gate_file_count: int = Field(
        default=8,
        ge=0,
        description="Above this many files the model's grouping is used even if it has one boundary",
    )

    boundary_max_tokens: int = Field(default=1000, ge=1)
    boundary_temperature: float = Field(default=0.3, ge=0, le=2)
    category_max_tokens: int = Field(default=100, ge=1)
    category_temperature: float = Field(default=0.1, ge=0, le=2)

    @property
    def use_ai(self) -> bool:
        return self.ai_enabled and bool(self.api_key)

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the config file."""
        # Check for XDG config directory first (Linux/macOS)
        if xdg_config := os.getenv("XDG_CONFIG_HOME"):
            return Path(xdg_config) / "commitsplit" / "config.toml"
        # Fall back to ~/.config on Unix or APPDATA on Windows
        if os.name == "nt":
            base = Path(os.getenv("APPDATA", Path.home()))
        else:
            base = Path.home() / ".config"
        return base / "commitsplit" / "config.toml"


def load_env_file(path: Path) -> None:
    """Load KEY=VALUE lines into the environment without overriding it."""
    try:
        with open(path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, _, value = line.partition("=")
                    key = key.strip()
                    value = value.strip().strip('"').strip("'")
                    if key and key not in os.environ:
                        os.environ[key] = value
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from environment variables and config file.

    Priority: Environment variables > .env.local > Config file > Defaults
    """
    env_local = Path.cwd() / ".env.local"
    if env_local.exists():
        load_env_file(env_local)

    config_data: dict[str, object] = {}

    # 1. Load from config file if it exists
    config_path = config_path or Config.get_config_path()
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                file_config = tomllib.load(f)
            # Get settings from [default] section
            config_data.update(file_config.get("default", {}))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring config file %s: %s", config_path, e)

    # 2. Environment variables override config file
    if api_key := os.getenv("GOOGLE_API_KEY"):
        config_data["api_key"] = api_key
    if model := os.getenv("COMMITSPLIT_MODEL"):
        config_data["model"] = model
    if ai := os.getenv("COMMITSPLIT_AI"):
        config_data["ai_enabled"] = ai.strip().lower() not in FALSE_VALUES

    return Config(**config_data)
