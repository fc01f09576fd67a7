from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional


# --- Data models ---
@dataclass
class StorySummary:
    id: int
    title: str
    url: Optional[str] = None
    score: Optional[int] = None
    author: Optional[str] = None
    time: Optional[int] = None
    descendants: Optional[int] = None


@dataclass
class StoryDetail(StorySummary):
    text: Optional[str] = None


class LoadStatus(enum.Enum):
    LOADING = "loading"
    ERROR = "error"
    LOADED = "loaded"


@dataclass
class StoriesState:
    """One of loading, error(message) or loaded(stories)."""

    status: LoadStatus
    message: Optional[str] = None
    stories: List[StorySummary] = field(default_factory=list)

    @classmethod
    def loading(cls) -> StoriesState:
        return cls(LoadStatus.LOADING)

    @classmethod
    def failed(cls, message: str) -> StoriesState:
        return cls(LoadStatus.ERROR, message=message)

    @classmethod
    def loaded(cls, stories: List[StorySummary]) -> StoriesState:
        return cls(LoadStatus.LOADED, stories=list(stories))

    @property
    def is_loading(self) -> bool:
        return self.status is LoadStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status is LoadStatus.ERROR
