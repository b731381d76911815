"""Settings control panel for the TUI."""

from __future__ import annotations

from dataclasses import replace

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Checkbox, Input, Label, Select, Static

from braille_maker.core.errors import ConfigError
from braille_maker.core.evaluator import Strategy
from braille_maker.core.processor import Settings
from braille_maker.core.rules import parse_rule
from braille_maker.core.size import ImageSize, parse_size

AUTO_SIZE_TEXT = "auto"


class ControlPanel(Widget):
    """Settings panel with controls for the on/off rule and output size.

    The size input accepts ``auto`` (fit the preview), ``_`` (source size)
    or ``WxH``.
    """

    DEFAULT_CSS = """
    ControlPanel {
        width: 32;
        height: 1fr;
        background: $panel;
        padding: 1;
        border-left: solid $accent;
    }

    ControlPanel Label {
        margin-top: 1;
        color: $text-muted;
    }

    ControlPanel Select {
        width: 100%;
    }

    ControlPanel Checkbox {
        margin-top: 1;
    }

    ControlPanel #panel-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }
    """

    class SettingsChanged(Message):
        """Posted when any setting changes to a valid value."""
        def __init__(self, settings: Settings, auto_size: bool) -> None:
            super().__init__()
            self.settings = settings
            self.auto_size = auto_size

    class SettingsInvalid(Message):
        """Posted when typed rule or size text doesn't parse."""
        def __init__(self, error: ConfigError) -> None:
            super().__init__()
            self.error = error

    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._settings = settings or Settings()
        self._auto_size = self._settings.size.is_default

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Settings", id="panel-title")

            yield Label("Rule")
            yield Input(value=str(self._settings.rule), id="rule-input")

            yield Label("Size")
            yield Input(
                value=AUTO_SIZE_TEXT if self._auto_size else str(self._settings.size),
                id="size-input",
            )

            yield Label("Strategy")
            yield Select(
                [(s.value, s.value) for s in Strategy],
                value=self._settings.strategy.value,
                id="strategy-select",
            )

            yield Checkbox("Keep aspect", value=self._settings.keep_aspect, id="aspect-check")
            yield Checkbox("Trailing cells", value=self._settings.inclusive, id="inclusive-check")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def auto_size(self) -> bool:
        return self._auto_size

    def _update_settings(self, **overrides) -> None:
        """Create new settings with overrides and emit change."""
        self._settings = replace(self._settings, **overrides)
        self.post_message(self.SettingsChanged(self._settings, self._auto_size))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        try:
            if event.input.id == "rule-input":
                self._update_settings(rule=parse_rule(event.value.strip()))
            elif event.input.id == "size-input":
                text = event.value.strip()
                self._auto_size = text == AUTO_SIZE_TEXT
                size = self._settings.size if self._auto_size else parse_size(text)
                self._update_settings(size=size)
        except ConfigError as e:
            self.post_message(self.SettingsInvalid(e))

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "strategy-select" and isinstance(event.value, str):
            self._update_settings(strategy=Strategy(event.value))

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "aspect-check":
            self._update_settings(keep_aspect=event.value)
        elif event.checkbox.id == "inclusive-check":
            self._update_settings(inclusive=event.value)

    def update_size(self, size: ImageSize) -> None:
        """Set the automatically fitted size without emitting a change."""
        self._settings = replace(self._settings, size=size)
