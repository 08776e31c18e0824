"""
Runtime settings for OmniFocus Kiwi.

Everything is read from the environment (a .env file is honoured through
python-dotenv) at call time, so tests can monkeypatch variables freely.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# osascript is killed after this long; scripts mutate a live store, so there is no retry
OSASCRIPT_TIMEOUT_MS = 30_000

_FALSEY = {"0", "false", "no", "off"}


def get_omnifocus_kiwi_home() -> Path:
    """Get state directory from OMNIFOCUS_KIWI_HOME env var or default to ~/.omnifocus-kiwi."""
    home = os.getenv("OMNIFOCUS_KIWI_HOME")
    if home:
        return Path(home)
    return Path.home() / ".omnifocus-kiwi"


def get_osascript_path() -> str:
    """Get the osascript binary (OSASCRIPT_PATH, default: resolved from PATH)."""
    return os.getenv("OSASCRIPT_PATH") or "osascript"


def history_enabled() -> bool:
    """Run history is on unless OMNIFOCUS_KIWI_HISTORY is set to a falsey value."""
    value = os.getenv("OMNIFOCUS_KIWI_HISTORY", "1")
    return value.strip().lower() not in _FALSEY


def get_log_level() -> str:
    return os.getenv("OMNIFOCUS_KIWI_LOG_LEVEL", "WARNING").upper()


def get_supabase_credentials() -> tuple:
    """Return (url, key) for the optional remote history sink; either may be None."""
    return os.getenv("SUPABASE_URL"), os.getenv("SUPABASE_SECRET_KEY")
