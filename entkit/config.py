"""
Configuration for entkit.

Uses pydantic-settings for environment variable loading.
All settings have sensible defaults for local development.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Engine configuration loaded from environment."""

    # Storage
    data_dir: str = Field(default=".entkit", description="Directory for the SQLite database")
    database_name: str = Field(default="app.db", description="SQLite database file name")
    wal_mode: bool = Field(default=True, description="Enable SQLite WAL journal mode")
    busy_timeout_ms: int = Field(default=5000, description="SQLite busy timeout")

    # Logging
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    log_format: str = Field(default="text", description="Log format (text, json)")

    model_config = {"env_prefix": "ENTKIT_"}

    @property
    def database_path(self) -> Path:
        """Full path of the database file."""
        return Path(self.data_dir) / self.database_name
