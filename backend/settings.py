import os
from pathlib import Path

from dotenv import load_dotenv

from models.common import parse_bool

# Load environment variables from .env file in the backend folder
backend_dir = Path(__file__).parent
env_path = backend_dir / ".env"
load_dotenv(env_path)

SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY")
if not SESSION_SECRET_KEY:  # pragma: no cover
    raise ValueError("SESSION_SECRET_KEY must be set")

API_PREFIX = os.getenv("API_PREFIX", "")
BACKEND_DIR = Path(__file__).parent
DATABASE_PATH = BACKEND_DIR / "matchup.sqlite"
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATABASE_PATH}")
PROJECT_PATH = BACKEND_DIR.parent

TESTING_MODE = parse_bool(os.getenv("TESTING_MODE", False))

# --- Presence ---
# a stored "online" older than this is read as offline
PRESENCE_WINDOW_SECONDS = int(os.getenv("PRESENCE_WINDOW_SECONDS", "300"))
HEARTBEAT_INTERVAL_SECONDS = float(os.getenv("HEARTBEAT_INTERVAL_SECONDS", "30"))

# --- Listing limits ---
NOTIFICATIONS_LIMIT = int(os.getenv("NOTIFICATIONS_LIMIT", "50"))
LEADERBOARD_LIMIT = int(os.getenv("LEADERBOARD_LIMIT", "50"))
GAME_HISTORY_LIMIT = int(os.getenv("GAME_HISTORY_LIMIT", "50"))
SEARCH_LIMIT = int(os.getenv("SEARCH_LIMIT", "10"))

PROFILE_CACHE_SECONDS = int(os.getenv("PROFILE_CACHE_SECONDS", "600"))

# --- Client SDK ---
API_URL = os.getenv("API_URL", "http://127.0.0.1:8000")
PREFERENCES_DIR = Path(os.getenv("PREFERENCES_DIR", BACKEND_DIR / "preferences"))
