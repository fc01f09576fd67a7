from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type

import requests
from requests.adapters import DEFAULT_POOLSIZE, HTTPAdapter
from urllib3.util.retry import Retry

from ..config import (
    API_BASE_URL,
    HTTP_TIMEOUT,
    REQUEST_HEADERS,
    RETRY_ATTEMPTS,
    TOP_STORIES_LIMIT,
)
from ..datamodels import StoryDetail, StorySummary
from ..errors import BadStatusError, DecodeError, TransportError
from .base import Source

logger = logging.getLogger("hn")

# wire name -> (attribute name, expected type)
_OPTIONAL_FIELDS = {
    "url": ("url", str),
    "score": ("score", int),
    "by": ("author", str),
    "time": ("time", int),
    "descendants": ("descendants", int),
}


class HackerNewsSource(Source):
    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.base_url = self.config.get("base_url", API_BASE_URL).rstrip("/")
        self.limit = int(self.config.get("limit", TOP_STORIES_LIMIT))
        self.timeout = self.config.get("timeout", HTTP_TIMEOUT)
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        retries = Retry(
            total=int(self.config.get("retries", RETRY_ATTEMPTS)),
            backoff_factor=0.3,
            status_forcelist=[429, 500, 502, 503, 504],
            raise_on_status=False,
        )
        # one pooled connection per concurrent item fetch
        adapter = HTTPAdapter(
            pool_maxsize=max(self.limit, DEFAULT_POOLSIZE), max_retries=retries
        )
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        s.hooks["response"].append(_log_response)
        return s

    def _get_json(self, url: str) -> Any:
        logger.debug("Fetching %s", url)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug("Task failed: %s - Error: %s", url, e)
            raise TransportError(str(e), url) from e

        if not resp.ok:
            raise BadStatusError(resp.status_code, url, resp.reason or "")

        try:
            data = resp.json()
        except ValueError as e:
            raise DecodeError(f"invalid JSON from {url}: {e}", url) from e
        logger.debug("Task completed: %s", url)
        return data

    def get_top_story_ids(self) -> List[int]:
        url = f"{self.base_url}/topstories.json"
        data = self._get_json(url)
        if not isinstance(data, list) or not all(_is_int(i) for i in data):
            raise DecodeError("expected a list of story IDs", url)
        logger.info("Received %d top story IDs", len(data))
        return data[: self.limit]

    def get_story(self, story_id: int) -> StorySummary:
        url = self.item_url(story_id)
        return decode_item(self._get_json(url), StorySummary, url)

    def get_story_detail(self, story_id: int) -> StoryDetail:
        url = self.item_url(story_id)
        return decode_item(self._get_json(url), StoryDetail, url)

    def item_url(self, story_id: int) -> str:
        return f"{self.base_url}/item/{story_id}.json"

    def close(self) -> None:
        self.session.close()


def decode_item(
    data: Any, model: Type[StorySummary], url: Optional[str] = None
) -> Any:
    """Build ``model`` from an item JSON object.

    ``id`` must be an integer and ``title`` a string. Optional fields may be
    absent or null but must otherwise have the right type. ``text`` is only
    read for :class:`StoryDetail`.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"expected an item object, got {type(data).__name__}", url)

    story_id = data.get("id")
    if not _is_int(story_id):
        raise DecodeError("item has no integer 'id'", url)
    title = data.get("title")
    if not isinstance(title, str):
        raise DecodeError(f"item {story_id} has no 'title'", url)

    fields: Dict[str, Any] = {}
    wanted = dict(_OPTIONAL_FIELDS)
    if issubclass(model, StoryDetail):
        wanted["text"] = ("text", str)
    for key, (attr, expected) in wanted.items():
        value = data.get(key)
        if value is None:
            continue
        if expected is int and not _is_int(value):
            raise DecodeError(f"item {story_id} field '{key}' is not an integer", url)
        if expected is str and not isinstance(value, str):
            raise DecodeError(f"item {story_id} field '{key}' is not a string", url)
        fields[attr] = value

    return model(id=story_id, title=title, **fields)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _log_response(resp: requests.Response, *args: Any, **kwargs: Any) -> None:
    logger.debug("Response received: %s - Status: %d", resp.url, resp.status_code)
