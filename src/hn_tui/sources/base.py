from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..datamodels import StoryDetail, StorySummary


class Source(ABC):
    """Abstract base class for a story source."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    @abstractmethod
    def get_top_story_ids(self) -> List[int]:
        """Return the ranked list of top story IDs, truncated to the limit."""
        pass

    @abstractmethod
    def get_story(self, story_id: int) -> StorySummary:
        """Return the list view of a single story."""
        pass

    @abstractmethod
    def get_story_detail(self, story_id: int) -> StoryDetail:
        """Return a single story including its body text."""
        pass

    def close(self) -> None:
        """Release any held resources."""
