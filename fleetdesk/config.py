# fleetdesk/config.py
from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATA_DIR = PROJECT_ROOT / "data"
DATA_DIR.mkdir(parents=True, exist_ok=True)

DB_PATH = DATA_DIR / "fleetdesk.db"
DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH.as_posix()}")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

SESSION_HOURS: int = int(os.getenv("SESSION_HOURS", "24"))

# Display defaults used when a source row has no value of its own
ADMIN_DISPLAY_NAME: str = os.getenv("ADMIN_DISPLAY_NAME", "Admin")
CONTACT_US_SUBJECT: str = os.getenv("CONTACT_US_SUBJECT", "Contact Us")
UNKNOWN_SENDER: str = "Unknown"

INBOX_MAX_LIMIT: int = int(os.getenv("INBOX_MAX_LIMIT", "500"))
