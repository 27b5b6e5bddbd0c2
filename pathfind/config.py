"""
Configuration constants for the pathfinding viewer.

Defaults can be overridden through environment variables, and the viewer
also accepts ``--width=``, ``--height=``, ``--delay=`` and ``--log-level=``
on the command line.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


def _int_or(value: Optional[str], default: int, source: str) -> int:
    """Parse an integer setting; a malformed value keeps the default."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", source, value, default)
        return default


# =============================================================================
# Grid
# =============================================================================

DEFAULT_WIDTH = _int_or(os.environ.get("PATHFIND_WIDTH"), 20, "PATHFIND_WIDTH")
DEFAULT_HEIGHT = _int_or(os.environ.get("PATHFIND_HEIGHT"), 20, "PATHFIND_HEIGHT")

# Bounds of the grid-size choice in the original menu sliders
MIN_DIMENSION = 2
MAX_DIMENSION = 100

# =============================================================================
# Display pacing
# =============================================================================

# Sleep after every paced flush, in milliseconds (0 = as fast as possible)
DEFAULT_DELAY_MS = _int_or(os.environ.get("PATHFIND_DELAY_MS"), 0, "PATHFIND_DELAY_MS")
MAX_DELAY_MS = 1000
DELAY_STEP_MS = 10

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get("PATHFIND_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@dataclass
class Settings:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    delay_ms: int = DEFAULT_DELAY_MS
    log_level: str = LOG_LEVEL

    @property
    def delay(self) -> float:
        return self.delay_ms / 1000.0


def _clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def resolve_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    """Environment defaults, overridden by ``--key=value`` arguments."""
    s = Settings()
    for arg in argv or ():
        if not arg.startswith("--") or "=" not in arg:
            continue
        key, value = arg[2:].split("=", 1)
        if key == "width":
            s.width = _int_or(value, s.width, "--width")
        elif key == "height":
            s.height = _int_or(value, s.height, "--height")
        elif key == "delay":
            s.delay_ms = _int_or(value, s.delay_ms, "--delay")
        elif key == "log-level":
            s.log_level = value.upper()
    s.width = _clamp(s.width, MIN_DIMENSION, MAX_DIMENSION)
    s.height = _clamp(s.height, MIN_DIMENSION, MAX_DIMENSION)
    s.delay_ms = _clamp(s.delay_ms, 0, MAX_DELAY_MS)
    return s
