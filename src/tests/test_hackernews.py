from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from hn_tui.datamodels import StoryDetail, StorySummary
from hn_tui.errors import BadStatusError, DecodeError, TransportError
from hn_tui.sources.hackernews import HackerNewsSource, decode_item


DROPBOX = {
    "by": "dhouston",
    "descendants": 71,
    "id": 8863,
    "kids": [8952, 9224],
    "score": 111,
    "time": 1175714200,
    "title": "My YC app: Dropbox - Throw away your USB drive",
    "type": "story",
    "url": "http://www.getdropbox.com/u/2/screencast.html",
}


@pytest.fixture
def hn_source():
    return HackerNewsSource({"base_url": "https://hn.test/v0/", "limit": 3})


def _response(status_code=200, payload=None, json_error=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.reason = "Service Unavailable" if status_code == 503 else "OK"
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


def test_top_story_ids_are_truncated_to_limit(hn_source):
    with patch("hn_tui.sources.hackernews.HackerNewsSource._get_json") as mock_fetch:
        mock_fetch.return_value = [5, 4, 3, 2, 1]
        ids = hn_source.get_top_story_ids()
        assert ids == [5, 4, 3]
        mock_fetch.assert_called_once_with("https://hn.test/v0/topstories.json")


def test_top_story_ids_default_limit_is_thirty():
    source = HackerNewsSource({})
    with patch.object(source, "_get_json", return_value=list(range(500))):
        assert source.get_top_story_ids() == list(range(30))


@pytest.mark.parametrize("payload", [{"ids": [1]}, [1, "2"], [1, True], None])
def test_top_story_ids_reject_bad_shape(hn_source, payload):
    with patch.object(hn_source, "_get_json", return_value=payload):
        with pytest.raises(DecodeError):
            hn_source.get_top_story_ids()


def test_get_story_decodes_item(hn_source):
    with patch.object(hn_source, "_get_json", return_value=DROPBOX) as mock_fetch:
        story = hn_source.get_story(8863)
    mock_fetch.assert_called_once_with("https://hn.test/v0/item/8863.json")
    assert story == StorySummary(
        id=8863,
        title="My YC app: Dropbox - Throw away your USB drive",
        url="http://www.getdropbox.com/u/2/screencast.html",
        score=111,
        author="dhouston",
        time=1175714200,
        descendants=71,
    )


def test_get_story_detail_keeps_text(hn_source):
    item = {"id": 121003, "title": "Ask HN: The Arc Effect", "text": "<i>or</i> HN"}
    with patch.object(hn_source, "_get_json", return_value=item):
        detail = hn_source.get_story_detail(121003)
    assert isinstance(detail, StoryDetail)
    assert detail.text == "<i>or</i> HN"
    assert detail.url is None
    assert detail.score is None


def test_summary_ignores_text():
    story = decode_item({"id": 1, "title": "t", "text": "body"}, StorySummary)
    assert type(story) is StorySummary
    assert not hasattr(story, "text")


def test_null_optional_fields_are_omitted():
    story = decode_item({"id": 1, "title": "t", "score": None, "by": None}, StorySummary)
    assert story.score is None
    assert story.author is None


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        {"title": "no id"},
        {"id": "8863", "title": "string id"},
        {"id": 1},
        {"id": 1, "title": 5},
        {"id": 1, "title": "t", "score": "111"},
        {"id": 1, "title": "t", "by": 42},
        {"id": 1, "title": "t", "time": 1.5},
    ],
)
def test_decode_item_rejects_bad_records(payload):
    with pytest.raises(DecodeError):
        decode_item(payload, StorySummary)


def test_get_json_wraps_transport_errors(hn_source):
    with patch.object(
        hn_source.session, "get", side_effect=requests.Timeout("read timed out")
    ):
        with pytest.raises(TransportError) as excinfo:
            hn_source.get_story(1)
    assert excinfo.value.describe() == "Network error: read timed out"
    assert excinfo.value.url == "https://hn.test/v0/item/1.json"


def test_get_json_raises_on_bad_status(hn_source):
    with patch.object(hn_source.session, "get", return_value=_response(503)):
        with pytest.raises(BadStatusError) as excinfo:
            hn_source.get_top_story_ids()
    assert excinfo.value.status_code == 503
    assert excinfo.value.describe() == "Bad response: HTTP 503 Service Unavailable"


def test_get_json_raises_decode_error_on_invalid_json(hn_source):
    resp = _response(json_error=ValueError("Expecting value"))
    with patch.object(hn_source.session, "get", return_value=resp):
        with pytest.raises(DecodeError):
            hn_source.get_top_story_ids()


def test_get_json_passes_timeout(hn_source):
    with patch.object(
        hn_source.session, "get", return_value=_response(payload=DROPBOX)
    ) as mock_get:
        hn_source.get_story(8863)
    mock_get.assert_called_once_with("https://hn.test/v0/item/8863.json", timeout=15)


def test_session_is_per_source():
    a = HackerNewsSource({})
    b = HackerNewsSource({})
    assert a.session is not b.session
    assert a.session.headers["Accept"] == "application/json"
    assert a.session.hooks["response"]


def test_connection_pool_fits_every_item_fetch():
    source = HackerNewsSource({"limit": 30})
    adapter = source.session.get_adapter("https://hacker-news.firebaseio.com/v0")
    assert adapter._pool_maxsize >= 30
