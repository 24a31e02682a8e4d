"""
Configuration for the job listings board.
Loads settings from environment variables / .env file.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

# Job data: an http(s) URL or a path relative to BASE_DIR
DATA_SOURCE = os.getenv("JOBS_DATA_SOURCE", "data/data.json")
FETCH_TIMEOUT = float(os.getenv("JOBS_FETCH_TIMEOUT", "10"))

# Seconds a status message stays in the live region
ANNOUNCE_DURATION = float(os.getenv("ANNOUNCE_DURATION", "1.0"))

SESSION_TTL = int(os.getenv("SESSION_TTL", "3600"))  # 1 hour
CLEANUP_INTERVAL = int(os.getenv("SESSION_CLEANUP_INTERVAL", "300"))  # every 5 minutes

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))

SSE_PING_INTERVAL = int(os.getenv("SSE_PING_INTERVAL", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
