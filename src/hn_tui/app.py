from __future__ import annotations

import logging
from typing import Any, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.worker import Worker, WorkerState
from textual.widgets import Header, ListView, LoadingIndicator, Static

from .config import DEFAULT_THEME, UI_DEFAULTS
from .datamodels import StoriesState
from .errors import FetchError, LoadCancelled
from .fetcher import Fetcher
from .screens import ErrorScreen, StoryViewScreen
from .sources.manager import SourceManager
from .widgets import ErrorMessage, StatusBar, StoryListItem

logger = logging.getLogger("hn")

EMPTY_MESSAGE = "No stories loaded. Press [b]r[/] to load stories."


class HackerNewsApp(App):
    TITLE = "Hacker News"
    SUB_TITLE = "Top stories"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("ctrl+p", "command_palette", "Commands"),
    ]

    def __init__(
        self,
        theme: Optional[str] = None,
        config: Optional[dict[str, Any]] = None,
        fetcher: Optional[Fetcher] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self._theme_name = theme or DEFAULT_THEME
        self.config = config or {}
        self.source_manager: Optional[SourceManager] = None
        if fetcher is None:
            self.source_manager = SourceManager(self.config)
            source = self.source_manager.default_source()
            if source is not None:
                fetcher = Fetcher(source)
        self.fetcher = fetcher
        self.state = StoriesState.loaded([])

    @property
    def theme_name(self) -> str:
        return self._theme_name

    def get_keybinding_style(self) -> str:
        return "$accent"

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main"):
            yield LoadingIndicator(id="stories-loading")
            yield ErrorMessage("", id="stories-error")
            yield Static(EMPTY_MESSAGE, id="stories-empty")
            yield ListView(id="stories-list")
        yield StatusBar()

    def on_mount(self) -> None:
        self.theme = self._theme_name

        if self.fetcher is None:
            self.push_screen(
                ErrorScreen(
                    "No story source configured",
                    "Please configure `sources.hackernews` in `~/.config/hn/config.json`.",
                )
            )
            return

        self.query_one(StatusBar).set_keybindings(self.keybinding_hint())
        self.query_one("#stories-list", ListView).focus()
        self.load_top_stories()

    def keybinding_hint(self) -> str:
        """Status bar hint from config, or the default if it cannot be formatted."""
        style = self.get_keybinding_style()
        text = self.config.get("ui", {}).get(
            "statusbar_keybindings", UI_DEFAULTS["statusbar_keybindings"]
        )
        try:
            return text.format(color=style)
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            logger.warning("Ignoring invalid ui.statusbar_keybindings %r: %s", text, e)
            return UI_DEFAULTS["statusbar_keybindings"].format(color=style)

    def on_unmount(self) -> None:
        if self.fetcher is not None:
            self.fetcher.cancel()
        if self.source_manager is not None:
            self.source_manager.close()

    def load_top_stories(self) -> None:
        """Start a load; a retry is simply another call."""
        self.state = StoriesState.loading()
        self._show_loading()
        self.run_worker(
            self.fetcher.load_top_stories,
            name="stories_loader",
            thread=True,
            exclusive=True,
            exit_on_error=False,
        )

    def _show_loading(self) -> None:
        self.query_one(StatusBar).loading_status = "Loading stories..."
        self.query_one("#stories-loading").display = True
        self.query_one("#stories-error").display = False
        self.query_one("#stories-empty").display = False
        self.query_one("#stories-list").display = False

    async def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.worker.name != "stories_loader":
            return
        if event.state is WorkerState.SUCCESS:
            await self._show_state(event.worker.result)
        elif event.state is WorkerState.ERROR:
            error = event.worker.error
            if isinstance(error, LoadCancelled):
                return
            if isinstance(error, FetchError):
                message = error.describe()
            else:
                logger.error("Stories worker failed: %s", error)
                message = f"Unexpected error: {error}"
            await self._show_state(StoriesState.failed(message))

    async def _show_state(self, state: StoriesState) -> None:
        self.state = state
        self.query_one("#stories-loading").display = False
        status_bar = self.query_one(StatusBar)
        error_widget = self.query_one("#stories-error", ErrorMessage)
        empty_widget = self.query_one("#stories-empty")
        stories_list = self.query_one("#stories-list", ListView)

        await stories_list.clear()
        if state.is_error:
            status_bar.loading_status = "Error loading stories."
            error_widget.update(
                Text.assemble(
                    ("Error\n", "bold"),
                    state.message or "",
                    "\n\nPress ",
                    ("r", "bold"),
                    " to retry.",
                    style="red",
                )
            )
            error_widget.display = True
            stories_list.display = False
            return

        error_widget.display = False
        if not state.stories:
            status_bar.mark_loaded(0)
            empty_widget.display = True
            stories_list.display = False
            return

        status_bar.mark_loaded(len(state.stories))
        empty_widget.display = False
        await stories_list.extend(
            StoryListItem(story, rank) for rank, story in enumerate(state.stories, 1)
        )
        stories_list.index = 0
        stories_list.display = True
        stories_list.focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, StoryListItem):
            self.push_screen(StoryViewScreen(event.item.story, self.fetcher.source))

    def action_refresh(self) -> None:
        if self.fetcher is None or self.state.is_loading:
            return
        self.load_top_stories()
