from __future__ import annotations

import copy
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
API_BASE_URL = "https://hacker-news.firebaseio.com/v0"
ITEM_PAGE_URL = "https://news.ycombinator.com/item?id={id}"
TOP_STORIES_LIMIT = 30
HTTP_TIMEOUT = 15
RETRY_ATTEMPTS = 0

CONFIG_PATH = os.path.expanduser("~/.config/hn/config.json")

REQUEST_HEADERS = {
    "User-Agent": "hn-tui/0.1",
    "Accept": "application/json",
}

DEFAULT_THEME = "dracula"

# Default UI settings
UI_DEFAULTS = {
    "statusbar_keybindings": (
        "[b {color}]r[/] to reload, [b {color}]enter[/] to open, "
        "[b {color}]q[/] to quit"
    ),
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "theme": DEFAULT_THEME,
    "sources": {
        "hackernews": {
            "base_url": API_BASE_URL,
            "limit": TOP_STORIES_LIMIT,
            "timeout": HTTP_TIMEOUT,
            "retries": RETRY_ATTEMPTS,
        }
    },
    "ui": dict(UI_DEFAULTS),
}

# --- Logging ---
logger = logging.getLogger("hn")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/hn_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(threadName)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def ensure_config_file_exists() -> None:
    """Write the default config file if the user's config file is not found."""
    if not os.path.exists(CONFIG_PATH):
        logger.info("Config file not found at %s, creating default.", CONFIG_PATH)
        save_config(DEFAULT_CONFIG)


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config() -> Dict[str, Any]:
    """Load the main configuration file, filling in missing keys from defaults."""
    ensure_config_file_exists()
    try:
        with open(CONFIG_PATH, "r") as f:
            config = json.load(f)
        logger.info("Loaded config from %s", CONFIG_PATH)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(config, dict):
        logger.error("Ignoring config at %s: top level is not an object", CONFIG_PATH)
        return copy.deepcopy(DEFAULT_CONFIG)
    return _merge(DEFAULT_CONFIG, config)


def save_config(config: Dict[str, Any]) -> None:
    """Save the main configuration file."""
    try:
        os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
        with open(CONFIG_PATH, "w") as f:
            json.dump(config, f, indent=2)
        logger.info("Saved config to %s", CONFIG_PATH)
    except IOError as e:
        logger.error("Failed to save config to %s: %s", CONFIG_PATH, e)


def source_config(config: Dict[str, Any], name: str = "hackernews") -> Dict[str, Any]:
    return config.get("sources", {}).get(name, {})
