"""Runtime configuration, read from the environment (or a local .env file)."""

import logging
import os

from babel import Locale, UnknownLocaleError
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Pick up a .env file sitting next to where the program is started
load_dotenv()

DEFAULT_LOCALE = "en_GB"


def check_locale(name, default=DEFAULT_LOCALE):
    """Return `name` if babel knows it, otherwise warn and fall back to `default`"""
    try:
        Locale.parse(name)
    except (UnknownLocaleError, ValueError, TypeError) as e:
        logger.warning("Unknown locale %r (%s), using %s", name, e, default)
        return default
    return name


# SQLite file holding the architect, contractor, customer and projects tables
DB_FILE = os.getenv("POISEPMS_DB_FILE", "poisepms.db")

LOG_LEVEL = os.getenv("POISEPMS_LOG_LEVEL", "WARNING").upper()
LOG_FILE = os.getenv("POISEPMS_LOG_FILE") or None  # stderr when unset

# Default target of "Export projects to CSV"
EXPORT_FILE = os.getenv("POISEPMS_EXPORT_FILE", "projects.csv")

# Locale used when printing GBP amounts
LOCALE = check_locale(os.getenv("POISEPMS_LOCALE", DEFAULT_LOCALE))
