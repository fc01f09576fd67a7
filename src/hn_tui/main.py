#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from textual.theme import BUILTIN_THEMES

from .app import HackerNewsApp
from .config import DEFAULT_THEME, load_config, setup_logging, source_config

logger = logging.getLogger("hn")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="Hacker News TUI Client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--theme", type=str, help="Set theme for this run")
    parser.add_argument(
        "--limit",
        type=int,
        help="Number of top stories to load (default from config, 30)",
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    if args.limit is not None:
        if args.limit < 1:
            parser.error("--limit must be at least 1")
        config.setdefault("sources", {}).setdefault("hackernews", {})
        source_config(config)["limit"] = args.limit

    theme_name = args.theme or config.get("theme") or DEFAULT_THEME

    if theme_name not in BUILTIN_THEMES:
        print(
            f"Theme '{theme_name}' not found, falling back to {DEFAULT_THEME}. "
            f"Available: {', '.join(sorted(BUILTIN_THEMES))}",
            file=sys.stderr,
        )
        theme_name = DEFAULT_THEME

    try:
        app = HackerNewsApp(theme=theme_name, config=config)
        logger.info("Using theme: %s", app.theme_name)
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
