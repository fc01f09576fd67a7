from __future__ import annotations

from datetime import datetime
from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import ListItem, Static
from textual.reactive import reactive
from rich.text import Text

from .datamodels import StorySummary
from .formatting import display_date


# --- UI Widgets ---
class StoryListItem(ListItem):
    def __init__(self, story: StorySummary, rank: int):
        super().__init__()
        self.story = story
        self.rank = rank

    def compose(self) -> ComposeResult:
        with Horizontal(classes="story-container"):
            yield Static(f"{self.rank}.", classes="story-rank")
            with Vertical(classes="story-body"):
                yield Static(self.story.title, classes="story-title", markup=False)
                yield Static(story_meta(self.story), classes="story-meta", markup=False)


def story_meta(story: StorySummary) -> str:
    """Score, author and age of a story; absent fields are left out."""
    parts = []
    if story.score is not None:
        parts.append(f"▲ {story.score}")
    if story.author:
        parts.append(f"by {story.author}")
    parts.append(display_date(story.time))
    return "  ".join(parts)


class StatusBar(Static):
    """Load status, story count with last refresh time, and key hints."""

    loading_status = reactive("")
    story_count = reactive(0)
    loaded_at: reactive[Optional[datetime]] = reactive(None)
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def mark_loaded(self, count: int, when: Optional[datetime] = None) -> None:
        self.story_count = count
        self.loaded_at = when or datetime.now()
        self.loading_status = ""

    def status_text(self) -> str:
        status_items = []
        if self.loading_status:
            status_items.append(self.loading_status)
        elif self.loaded_at is not None:
            status_items.append(
                f"{self.story_count} stories, updated {self.loaded_at:%H:%M:%S}"
            )

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)
        return " | ".join(status_items)

    def update_display(self) -> None:
        self.update(self.status_text())

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_loaded_at(self, loaded_at: Optional[datetime]) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()


class ErrorMessage(Static):
    def __init__(self, message: str, **kwargs):
        super().__init__(Text(message, style="bold red"), **kwargs)
