"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent

# Database file (override with CLIENT_API_DATABASE_PATH)
DATABASE_PATH = Path(os.environ.get("CLIENT_API_DATABASE_PATH", str(BASE_DIR / "clients.db")))

# Pagination defaults
DEFAULT_PAGE_SIZE = int(os.environ.get("CLIENT_API_DEFAULT_PAGE_SIZE", "12"))
MAX_PAGE_SIZE = int(os.environ.get("CLIENT_API_MAX_PAGE_SIZE", "1000"))
DEFAULT_ORDER_BY = "name"
DEFAULT_DIRECTION = "ASC"

# Insert sample clients on startup when the table is empty
SEED_DATA = os.environ.get("CLIENT_API_SEED_DATA", "false").lower() in ("1", "true", "yes")

# Logging
LOG_LEVEL = os.environ.get("CLIENT_API_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
