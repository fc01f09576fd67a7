from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type

from .base import Source
from .hackernews import HackerNewsSource

logger = logging.getLogger("hn")

AVAILABLE_SOURCES: Dict[str, Type[Source]] = {
    "hackernews": HackerNewsSource,
}
DEFAULT_SOURCE = "hackernews"


class SourceManager:
    """Builds the configured story sources and owns their HTTP sessions."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.sources: Dict[str, Source] = {}
        for name, options in self.config.get("sources", {}).items():
            source_class = AVAILABLE_SOURCES.get(name)
            if source_class is None:
                logger.warning("Ignoring unknown source '%s' in config", name)
                continue
            self.sources[name] = source_class(options or {})

    def default_source(self) -> Optional[Source]:
        """The source named by ``source`` in the config, else Hacker News."""
        name = self.config.get("source", DEFAULT_SOURCE)
        return self.sources.get(name)

    def close(self) -> None:
        for source in self.sources.values():
            source.close()
