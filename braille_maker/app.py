"""Main Textual application for the braille_maker TUI."""

from __future__ import annotations

import logging
import platform
import subprocess
from pathlib import Path

from PIL import Image
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Input, Label, Static
from textual.worker import get_current_worker

from braille_maker.core.processor import RenderedImage, Settings, process_image
from braille_maker.core.reader import ImageInfo, open_media
from braille_maker.core.writer import save_output
from braille_maker.tui.controls import ControlPanel
from braille_maker.tui.preview import BraillePreview
from braille_maker.utils.terminal import fit_to_terminal

logger = logging.getLogger(__name__)


class SaveScreen(ModalScreen[str | None]):
    """Modal screen for saving output."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    DEFAULT_CSS = """
    SaveScreen {
        align: center middle;
    }

    SaveScreen #save-dialog {
        width: 60;
        height: 12;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    SaveScreen #save-title {
        text-style: bold;
        margin-bottom: 1;
    }

    SaveScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    SaveScreen Button {
        margin: 0 1;
    }
    """

    def __init__(self, default_path: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._default_path = default_path

    def action_cancel(self) -> None:
        self.dismiss(None)

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Save Output", id="save-title")
            yield Label("Output file path (.txt or .png):")
            yield Input(value=self._default_path, placeholder="output.txt", id="save-path")
            with Horizontal(classes="button-row"):
                yield Button("Save", variant="primary", id="btn-save")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            self.dismiss(self.query_one("#save-path", Input).value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class OpenFileScreen(ModalScreen[str | None]):
    """Simple modal for entering a file path."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    DEFAULT_CSS = """
    OpenFileScreen {
        align: center middle;
    }

    OpenFileScreen #open-dialog {
        width: 60;
        height: 10;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    OpenFileScreen #open-title {
        text-style: bold;
        margin-bottom: 1;
    }

    OpenFileScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    OpenFileScreen Button {
        margin: 0 1;
    }
    """

    def action_cancel(self) -> None:
        self.dismiss(None)

    def compose(self) -> ComposeResult:
        with Vertical(id="open-dialog"):
            yield Static("Open File", id="open-title")
            yield Input(placeholder="Path to an image or video...", id="file-input")
            with Horizontal(classes="button-row"):
                yield Button("Open", variant="primary", id="btn-open")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open":
            inp = self.query_one("#file-input", Input)
            self.dismiss(inp.value if inp.value else None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value if event.value else None)


class BrailleMakerApp(App):
    """Main TUI application."""

    TITLE = "braille_maker"
    CSS = """
    #main-area {
        height: 1fr;
        width: 1fr;
    }

    #preview-container {
        width: 1fr;
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $panel;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("s", "save", "Save", priority=True),
        Binding("c", "copy", "Copy", priority=True),
        Binding("o", "open_file", "Open", priority=True),
        Binding("tab", "toggle_panel", "Toggle Panel"),
    ]

    def __init__(
        self,
        input_path: str | None = None,
        settings: Settings | None = None,
        frame: int = 0,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._input_path = input_path
        self._frame = frame
        self._settings = settings or Settings()
        self._image: Image.Image | None = None
        self._info: ImageInfo | None = None
        self._panel_visible = True

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            with Vertical(id="preview-container"):
                yield BraillePreview()
            yield ControlPanel(self._settings, id="control-panel")
        yield Static("Ready", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._input_path:
            self._load_file(self._input_path)

    def _load_file(self, path: str) -> None:
        """Load an image and render it."""
        try:
            reader = open_media(path)
            self._image = reader.seek(self._frame)
            self._info = reader.info
        except (OSError, ValueError, IndexError) as e:
            logger.debug("Failed to open %s", path, exc_info=True)
            self._update_status(f"Error: {e}")
            return

        self.title = f"braille_maker - {self._info.path.name}"
        panel = self.query_one(ControlPanel)
        if panel.auto_size:
            self._fit_to_preview()
        self._settings = panel.settings
        self._update_status(
            f"Loaded {self._info.path.name} ({self._image.width}x{self._image.height})"
        )
        self._render_image()

    def _fit_to_preview(self) -> None:
        """Size the image so its braille rendering fills the preview area."""
        if self._image is None:
            return
        preview = self.query_one(BraillePreview)
        pw = preview.size.width or 80
        ph = preview.size.height or 24
        size = fit_to_terminal(
            self._image.width, self._image.height, max_cols=pw - 2, max_rows=ph - 1
        )
        self.query_one(ControlPanel).update_size(size)

    def _update_status(self, text: str) -> None:
        self.query_one("#status-bar", Static).update(text)

    @work(thread=True, exclusive=True, group="preview")
    def _render_image(self) -> None:
        """Render the loaded image in a background thread."""
        if self._image is None:
            return

        worker = get_current_worker()
        try:
            rendered = process_image(self._image, self._settings)
        except Exception as e:
            logger.exception("Rendering failed")
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Error: {e}")
            return

        if not worker.is_cancelled:
            self.call_from_thread(self._display, rendered)

    def _display(self, rendered: RenderedImage) -> None:
        """Show a rendering (called on main thread)."""
        self.query_one(BraillePreview).update_render(rendered)
        self._update_status(
            f"{self._settings.rule} | {rendered.width}x{rendered.height} px"
            f" -> {rendered.cols}x{rendered.rows} cells"
        )

    # --- Actions ---

    def action_save(self) -> None:
        if self.query_one(BraillePreview).current is None or self._info is None:
            self._update_status("Nothing to save")
            return
        default_path = str(self._info.path.parent / f"{self._info.path.stem}_braille.txt")
        self.push_screen(SaveScreen(default_path), self._on_save_result)

    def _on_save_result(self, path: str | None) -> None:
        rendered = self.query_one(BraillePreview).current
        if path is None or rendered is None:
            return
        out = Path(path)
        try:
            save_output(rendered.lines, out)
        except (OSError, ValueError) as e:
            self._update_status(f"Save error: {e}")
            return
        self._update_status(f"Saved to {out}")

    def action_copy(self) -> None:
        """Copy the current rendering to the system clipboard."""
        rendered = self.query_one(BraillePreview).current
        if rendered is None:
            self._update_status("Nothing to copy")
            return

        text = "\n".join(rendered.lines)
        system = platform.system()
        if system == "Darwin":
            command = ["pbcopy"]
        elif system == "Linux":
            command = ["xclip", "-selection", "clipboard"]
        elif system == "Windows":
            command = ["clip"]
        else:
            self._update_status("Clipboard not supported on this platform")
            return

        try:
            proc = subprocess.Popen(command, stdin=subprocess.PIPE)
            proc.communicate(text.encode("utf-8"))
        except FileNotFoundError:
            self._update_status("Clipboard tool not found (pbcopy/xclip/clip)")
            return
        if proc.returncode == 0:
            self._update_status("Copied to clipboard")
        else:
            self._update_status("Failed to copy to clipboard")

    def action_open_file(self) -> None:
        self.push_screen(OpenFileScreen(), self._on_file_selected)

    def _on_file_selected(self, path: str | None) -> None:
        if path:
            self._load_file(path)

    def action_toggle_panel(self) -> None:
        panel = self.query_one("#control-panel", ControlPanel)
        self._panel_visible = not self._panel_visible
        panel.display = self._panel_visible

    # --- Message handlers ---

    def on_control_panel_settings_changed(self, event: ControlPanel.SettingsChanged) -> None:
        if event.auto_size:
            self._fit_to_preview()
        self._settings = self.query_one(ControlPanel).settings
        self._render_image()

    def on_control_panel_settings_invalid(self, event: ControlPanel.SettingsInvalid) -> None:
        self._update_status(f"Error: {event.error}")


def run_app(
    input_path: str | None = None,
    settings: Settings | None = None,
    frame: int = 0,
) -> None:
    """Launch the TUI application."""
    app = BrailleMakerApp(input_path=input_path, settings=settings, frame=frame)
    app.run()
