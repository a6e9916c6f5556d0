# config.py
"""Central configuration: paths, game constants, env overrides."""
from __future__ import annotations

import logging
import os
from pathlib import Path

# ============================================================
#  Filesystem paths
# ============================================================
ROOT = Path(__file__).parent
DATA_DIR = Path(os.environ.get("TYPERACE_DATA_DIR", ROOT / "data"))
LEADERBOARD_FILE = DATA_DIR / "leaderboard.json"
CALIBRATION_FILE = DATA_DIR / "ai_calibration.json"

# ============================================================
#  Auth
# ============================================================
# Single shared password for the admin page.
ADMIN_PASSWORD = os.environ.get("TYPERACE_ADMIN_PASSWORD", "typerace2023")

# ============================================================
#  Race
# ============================================================
AI_DIFFICULTY = os.environ.get("TYPERACE_DIFFICULTY", "easy")
TICK_SECONDS = 0.1  # one AI step every 100ms
FINISH_GRACE_SECONDS = float(os.environ.get("TYPERACE_FINISH_GRACE", "1.0"))
MAX_ATTEMPTS = 3
DATE_FORMAT = "%d/%m/%Y"
SESSION_TTL_SECONDS = float(os.environ.get("TYPERACE_SESSION_TTL", "3600"))

# ============================================================
#  Logging
# ============================================================
LOG_LEVEL = os.environ.get("TYPERACE_LOG_LEVEL", "INFO").upper()


def get_logger() -> logging.Logger:
    """Shared app logger; rides on uvicorn's handler when served."""
    logger = logging.getLogger("uvicorn.error")
    logger.setLevel(LOG_LEVEL)
    return logger
