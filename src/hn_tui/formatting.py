from __future__ import annotations

import re
import time
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

_BLANK_LINES = re.compile(r"\n{3,}")
# ASCII punctuation CommonMark lets a backslash escape
_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()<>#+\-=.!|~&])")

# (upper bound in seconds, seconds per unit, singular, plural)
_UNITS = (
    (60, 1, "sec.", "sec."),
    (3600, 60, "min.", "min."),
    (86400, 3600, "hr.", "hr."),
    (7 * 86400, 86400, "day", "days"),
    (30 * 86400, 7 * 86400, "wk.", "wk."),
    (365 * 86400, 30 * 86400, "mo.", "mo."),
)
_YEAR = 365 * 86400


def display_date(epoch: Optional[int], now: Optional[float] = None) -> str:
    """Abbreviated relative date, e.g. ``5 min. ago`` or ``2 days ago``."""
    if epoch is None:
        return "Unknown"
    if now is None:
        now = time.time()

    delta = int(now - epoch)
    future = delta < 0
    delta = abs(delta)

    for bound, size, singular, plural in _UNITS:
        if delta < bound:
            amount = delta // size
            break
    else:
        amount, singular, plural = delta // _YEAR, "yr.", "yr."

    text = f"{amount} {singular if amount == 1 else plural}"
    return f"in {text}" if future else f"{text} ago"


def html_to_text(html: Optional[str]) -> str:
    """Flatten an item body to plain text with blank lines between paragraphs."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for p in soup.find_all("p"):
        p.insert_before("\n\n")
    text = soup.get_text()
    return _BLANK_LINES.sub("\n\n", text).strip()


def escape_markdown(text: str) -> str:
    """Backslash-escape Markdown syntax so ``text`` renders literally."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def url_host(url: str) -> str:
    return urlparse(url).hostname or url
