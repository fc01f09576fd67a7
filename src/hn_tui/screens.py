from __future__ import annotations

import logging
import webbrowser

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.worker import Worker, WorkerState
from textual.widgets import (
    Footer,
    Header,
    Label,
    LoadingIndicator,
    Markdown,
)

from .config import ITEM_PAGE_URL
from .datamodels import StoryDetail, StorySummary
from .errors import FetchError, LoadCancelled
from .fetcher import Fetcher
from .formatting import escape_markdown, html_to_text, url_host
from .sources.base import Source
from .widgets import StatusBar

logger = logging.getLogger("hn")


def render_detail(detail: StoryDetail) -> str:
    """Markdown for the story view; absent fields are omitted."""
    parts = [f"# {escape_markdown(detail.title)}\n\n"]

    meta = []
    if detail.score is not None:
        meta.append(f"▲ {detail.score} points")
    if detail.author:
        meta.append(f"by {escape_markdown(detail.author)}")
    if detail.descendants is not None:
        meta.append(f"{detail.descendants} comments")
    if meta:
        parts.append(" · ".join(meta) + "\n\n")

    parts.append("---\n\n")
    if detail.url:
        href = detail.url.replace(" ", "%20").replace("(", "%28").replace(")", "%29")
        parts.append(f"[{url_host(detail.url)}]({href})\n\n")
    if detail.text:
        parts.append(escape_markdown(html_to_text(detail.text)) + "\n")
    return "".join(parts)


# --- Story screen ---
class StoryViewScreen(Screen):
    BINDINGS = [
        Binding("escape,q,b,left", "app.pop_screen", "Back"),
        Binding("o", "open_in_browser", "Open link"),
        Binding("c", "open_comments", "Comments"),
        Binding("r", "reload_story", "Reload"),
        Binding("down", "scroll_down", "Scroll Down"),
        Binding("up", "scroll_up", "Scroll Up"),
    ]

    def __init__(self, story: StorySummary, source: Source):
        super().__init__()
        self.story = story
        self.fetcher = Fetcher(source)
        self.detail: StoryDetail | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield LoadingIndicator(id="story-loading")
        yield VerticalScroll(
            Markdown("", id="story-markdown"),
            id="story-scroll",
        )
        yield StatusBar()

    def on_mount(self) -> None:
        self.title = "Story Details"
        self.sub_title = self.story.title
        self.query_one("#story-scroll").focus()
        self.load_story()

        keybinding_style = self.app.get_keybinding_style()
        self.query_one(StatusBar).set_keybindings(
            f"[b {keybinding_style}]o[/] to open, [b {keybinding_style}]c[/] for comments"
        )

    def on_unmount(self) -> None:
        self.fetcher.cancel()

    def load_story(self) -> None:
        self.query_one("#story-loading", LoadingIndicator).display = True
        self.query_one("#story-scroll").display = False
        self.run_worker(
            lambda: self.fetcher.get_story_detail(self.story.id),
            name="story_loader",
            thread=True,
            exclusive=True,
            exit_on_error=False,
        )

    async def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker.name != "story_loader":
            return
        if event.state in (WorkerState.PENDING, WorkerState.RUNNING, WorkerState.CANCELLED):
            return

        self.query_one("#story-loading", LoadingIndicator).display = False
        self.query_one("#story-scroll").display = True
        md = self.query_one("#story-markdown", Markdown)

        if event.state is WorkerState.SUCCESS:
            self.detail = event.worker.result
            md.styles.color = None
            await md.update(render_detail(self.detail))
            return

        error = event.worker.error
        if isinstance(error, LoadCancelled):
            return
        if isinstance(error, FetchError):
            message = error.describe()
        else:
            message = str(error) or "Unable to load story."
        logger.error("Story loader failed for %s: %s", self.story.id, message)
        md.styles.color = "red"
        await md.update(f"**Error: {escape_markdown(message)}**")

    def action_open_in_browser(self) -> None:
        url = (self.detail.url if self.detail else None) or self.story.url
        if url:
            webbrowser.open(url)
        else:
            self.action_open_comments()

    def action_open_comments(self) -> None:
        webbrowser.open(ITEM_PAGE_URL.format(id=self.story.id))

    def action_reload_story(self) -> None:
        self.load_story()

    def action_scroll_down(self) -> None:
        self.query_one("#story-scroll").scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#story-scroll").scroll_up()


class ErrorScreen(Screen):
    BINDINGS = [Binding("q", "app.quit", "Quit")]

    def __init__(self, title: str, message: str):
        super().__init__()
        self.error_title = title
        self.message = message

    def compose(self) -> ComposeResult:
        yield Header()
        yield Label(self.error_title, classes="error-title")
        yield Markdown(self.message)
        yield Footer()
