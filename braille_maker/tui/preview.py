"""Braille preview widget for the TUI."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Static

from braille_maker.core.processor import RenderedImage

EMPTY_MESSAGE = "No file loaded. Press 'o' to open a file."


class BraillePreview(Widget):
    """Widget that displays the rendered braille text."""

    DEFAULT_CSS = """
    BraillePreview {
        width: 1fr;
        height: 1fr;
        overflow: auto;
        background: $surface;
    }

    BraillePreview #preview-content {
        width: auto;
        height: auto;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._current: RenderedImage | None = None

    def compose(self) -> ComposeResult:
        yield Static(EMPTY_MESSAGE, id="preview-content")

    def update_render(self, rendered: RenderedImage) -> None:
        """Show a new rendering."""
        self._current = rendered
        content = self.query_one("#preview-content", Static)
        content.update(Text("\n".join(rendered.lines), no_wrap=True))

    @property
    def current(self) -> RenderedImage | None:
        return self._current
