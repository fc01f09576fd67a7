from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional

from .datamodels import StoriesState, StoryDetail, StorySummary
from .errors import FetchError, LoadCancelled
from .sources.base import Source

logger = logging.getLogger("hn")


def _score(story: StorySummary) -> int:
    return story.score or 0


class Fetcher:
    """Loads the top stories from a :class:`Source`.

    ``cancel_event`` ties a fetcher to the lifetime of whatever consumes its
    results. Once set, pending item fetches are dropped and the running load
    raises :class:`LoadCancelled` instead of returning.
    """

    def __init__(
        self,
        source: Source,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.source = source
        self.cancel_event = cancel_event or threading.Event()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        self.cancel_event.set()

    def _check_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise LoadCancelled("load cancelled")

    def load_top_stories(self) -> StoriesState:
        """Fetch the top story IDs and then every story they name.

        Any failure of the ID list becomes an error state; the item fetches
        are not started in that case.
        """
        self._check_cancelled()
        try:
            ids = self.source.get_top_story_ids()
        except FetchError as e:
            logger.error("Failed to load top stories: %s", e.describe())
            return StoriesState.failed(e.describe())

        self._check_cancelled()
        stories = self.fetch_stories(ids)
        logger.info("Loaded %d of %d top stories", len(stories), len(ids))
        return StoriesState.loaded(stories)

    def fetch_stories(self, ids: Iterable[int]) -> List[StorySummary]:
        """Fetch all ``ids`` concurrently and return them by descending score.

        Every fetch gets its own thread so none waits on an earlier one.
        Items that fail to fetch or decode are left out. Equal scores keep
        the order of ``ids``.
        """
        ids = list(ids)
        if not ids:
            return []

        by_rank: Dict[int, StorySummary] = {}
        executor = ThreadPoolExecutor(max_workers=len(ids), thread_name_prefix="hn-item")
        try:
            future_to_rank = {
                executor.submit(self.source.get_story, story_id): (rank, story_id)
                for rank, story_id in enumerate(ids)
            }
            for future in as_completed(future_to_rank):
                self._check_cancelled()
                rank, story_id = future_to_rank[future]
                try:
                    by_rank[rank] = future.result()
                except FetchError as e:
                    logger.warning("Dropping story %s: %s", story_id, e.describe())
                except Exception as e:
                    logger.error("Failed to fetch story %s: %s", story_id, e, exc_info=True)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        ordered = [by_rank[rank] for rank in sorted(by_rank)]
        return sorted(ordered, key=_score, reverse=True)

    def get_story_detail(self, story_id: int) -> StoryDetail:
        self._check_cancelled()
        return self.source.get_story_detail(story_id)
