"""Configuration and local storage locations for Recipe Book."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# App directories
APP_NAME = "recipe-book"
CONFIG_DIR = Path(os.getenv("RECIPE_BOOK_HOME") or Path.home() / f".{APP_NAME}")
OVERRIDES_FILE = CONFIG_DIR / "overrides.json"
EXPORT_DIR = CONFIG_DIR / "exports"

# Seed dataset shipped with the package
DEFAULT_RECIPES_FILE = Path(__file__).parent / "data" / "recipes.json"
RECIPES_FILE = Path(os.getenv("RECIPE_BOOK_RECIPES_FILE") or DEFAULT_RECIPES_FILE)

DEVICE_CLASSES = ("mobile", "desktop")


def get_device_class() -> str:
    """Get the device class reported in exports ("mobile" or "desktop")."""
    device = (os.getenv("RECIPE_BOOK_DEVICE") or "desktop").strip().lower()
    if device not in DEVICE_CLASSES:
        return "desktop"
    return device


def get_log_level() -> int:
    """Get the log level from the environment, defaulting to WARNING."""
    name = (os.getenv("RECIPE_BOOK_LOG_LEVEL") or "WARNING").strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.WARNING
