"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'projecthub.sqlite'}")
SEED_ON_INIT = os.getenv("SEED_ON_INIT", "false").lower() == "true"

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# HTTP API
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

# Pagination defaults (per resource list)
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))
PROJECTS_PAGE_LIMIT = int(os.getenv("PROJECTS_PAGE_LIMIT", "20"))
THREAD_MESSAGES_PAGE_LIMIT = int(os.getenv("THREAD_MESSAGES_PAGE_LIMIT", "20"))

# Email import: fraction of the smaller participant set that must overlap
# before a same-subject thread counts as a duplicate.
DUPLICATE_OVERLAP_THRESHOLD = float(os.getenv("DUPLICATE_OVERLAP_THRESHOLD", "0.7"))

# Author used for discussion threads/messages when the request names none (no auth layer).
DEFAULT_USER_ID = os.getenv("DEFAULT_USER_ID", "").strip() or None
