# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

# Load environment variables from .env before reading them below
load_dotenv()


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SQLITE_DB_PATH = os.path.join(BASE_DIR, 'saints.db')
    DATABASE_URL = os.getenv('DATABASE_URL', f"sqlite:///{SQLITE_DB_PATH}")

    # Hosted model
    ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY')
    MODEL_NAME = os.getenv('MODEL_NAME', 'claude-3-5-haiku-latest')
    MODEL_MAX_TOKENS = int(os.getenv('MODEL_MAX_TOKENS', '4096'))
    MODEL_TIMEOUT = float(os.getenv('MODEL_TIMEOUT', '120'))
    MODEL_MAX_RETRIES = int(os.getenv('MODEL_MAX_RETRIES', '0'))  # no automatic retry
    MIRACLE_WEB_SEARCH = _env_bool('MIRACLE_WEB_SEARCH', True)
    MIRACLE_MAX_SEARCHES = int(os.getenv('MIRACLE_MAX_SEARCHES', '5'))

    # Bookmarks: 'sql', 'file' or 'memory'
    BOOKMARK_BACKEND = os.getenv('BOOKMARK_BACKEND', 'sql')
    BOOKMARK_FILE_DIR = os.getenv('BOOKMARK_FILE_DIR', os.path.join(BASE_DIR, 'bookmarks'))
    BOOKMARK_KEY = 'saints-app-bookmarks'

    DEFAULT_LANGUAGE = os.getenv('DEFAULT_LANGUAGE', 'en')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Autocomplete tuning
    SUGGESTION_MIN_LENGTH = 3
    SUGGESTION_QUIET_PERIOD = 0.3  # seconds
    SUGGESTION_LIMIT = 5
