# Configuration for the combat reaction engine
#
# Every value can be overridden through environment variables so a host can
# tune the engine without touching code. Values are read once at import time;
# call reload() after changing the environment (tests do this).

import logging
import os
from typing import Optional

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


DEFAULT_TABLES_DIR = os.path.join(os.path.dirname(__file__), "threshold_tables")

# Dumps the attribute set to the log before each composition
DEBUG = False

# Directory holding the YAML weight tables
TABLES_DIR = DEFAULT_TABLES_DIR

# Placeholder the host substitutes with the character's name
CHAR_TOKEN = "{{char}}"

# Seed for composers created without an explicit RNG (None = module random)
SEED: Optional[int] = None


def reload() -> None:
    """Re-read all settings from the environment."""
    global DEBUG, TABLES_DIR, CHAR_TOKEN, SEED

    DEBUG = _env_flag("COMBAT_REACTIONS_DEBUG", False)
    TABLES_DIR = os.getenv("COMBAT_REACTIONS_TABLES_DIR") or DEFAULT_TABLES_DIR
    CHAR_TOKEN = os.getenv("COMBAT_REACTIONS_CHAR_TOKEN") or "{{char}}"
    SEED = _env_int("COMBAT_REACTIONS_SEED")


def setup_logging(debug: bool = False) -> None:
    """Set up logging for a host process. The library itself never calls this."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


reload()

# Example environment:
# COMBAT_REACTIONS_DEBUG=1
# COMBAT_REACTIONS_SEED=1337
# COMBAT_REACTIONS_CHAR_TOKEN={{char}}
