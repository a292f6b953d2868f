"""Logging utilities for Townbuilder sessions.

Provides color-coded console output so engine steps, successes and rejections
are easy to tell apart when a session is driven from a terminal.
"""

import os
from enum import Enum

from .config import Config


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for message types
    BLUE = "\033[94m"      # Deterministic engine steps (tick, placement)
    RED = "\033[91m"       # Errors and rejections
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata
    GREY = "\033[90m"      # Debug trace

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for message types (color-blind accessible)
LOG_TAG_DETERMINISTIC = "[•]"
LOG_TAG_ERROR = "[!]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_INFO = "[i]"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if TOWNBUILDER_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("TOWNBUILDER_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def debug_enabled() -> bool:
    """True when TOWNBUILDER_LOG_LEVEL (read at call time) is DEBUG."""
    return os.getenv("TOWNBUILDER_LOG_LEVEL", Config.LOG_LEVEL).upper() == "DEBUG"


def log_deterministic(message: str) -> None:
    """Log a deterministic engine step (blue)."""
    print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_error(message: str) -> None:
    """Log an error or rejection (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN, bold=True))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


def log_debug(message: str) -> None:
    """Log a per-tick trace line (grey); silent unless debug is enabled."""
    if debug_enabled():
        print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.GREY))
