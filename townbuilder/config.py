"""
Townbuilder Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Map generation
    MAP_WIDTH: int = int(os.getenv("TOWNBUILDER_MAP_WIDTH", "30"))
    MAP_HEIGHT: int = int(os.getenv("TOWNBUILDER_MAP_HEIGHT", "20"))

    # Upper bound on a single tick's delta (milliseconds)
    MAX_TICK_MS: int = int(os.getenv("TOWNBUILDER_MAX_TICK_MS", "100"))

    # Persistence
    SAVE_DIR: Path = Path(os.getenv("TOWNBUILDER_SAVE_DIR", "saves"))
    SAVE_KEY: str = os.getenv("TOWNBUILDER_SAVE_KEY", "townGameSave")

    # Logging
    LOG_LEVEL: str = os.getenv("TOWNBUILDER_LOG_LEVEL", "INFO")

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors on unusable values."""
        if cls.MAP_WIDTH <= 0 or cls.MAP_HEIGHT <= 0:
            raise ValueError(
                "TOWNBUILDER_MAP_WIDTH and TOWNBUILDER_MAP_HEIGHT must be positive "
                f"(got {cls.MAP_WIDTH}x{cls.MAP_HEIGHT})"
            )

        if cls.MAX_TICK_MS <= 0:
            raise ValueError(
                f"TOWNBUILDER_MAX_TICK_MS must be positive (got {cls.MAX_TICK_MS})"
            )

        if not cls.SAVE_KEY:
            raise ValueError("TOWNBUILDER_SAVE_KEY must not be empty")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Townbuilder Configuration:",
            f"  Map Size: {cls.MAP_WIDTH}x{cls.MAP_HEIGHT}",
            f"  Max Tick: {cls.MAX_TICK_MS}ms",
            f"  Save Dir: {cls.SAVE_DIR}",
            f"  Save Key: {cls.SAVE_KEY}",
            f"  Log Level: {cls.LOG_LEVEL}",
        ]
        return "\n".join(lines)
