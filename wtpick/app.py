"""Fuzzy list picker built on Textual.

The picker shows a list of lines, filters them as the user types, and exits
with the key that ended the session, the highlighted line and the query.
"""

import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.fuzzy import Matcher
from textual.widgets import Input, Label, OptionList, Static
from textual.widgets.option_list import Option

from wtpick.constants import ACTION_DEFAULT
from wtpick.models import PickerOptions, PickerResult

logger = logging.getLogger(__name__)

_COLUMN_GAP = "  "


def display_columns(lines: list[str], delimiter: str, with_nth: list[int] | None) -> list[str]:
    """Project each line onto the selected columns, padded to aligned widths."""
    if not with_nth:
        return list(lines)
    rows = []
    for line in lines:
        fields = line.split(delimiter)
        rows.append([fields[i - 1] if 0 < i <= len(fields) else "" for i in with_nth])
    widths = [max((len(row[col]) for row in rows), default=0) for col in range(len(with_nth))]
    return [_COLUMN_GAP.join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]


class PickerApp(App[PickerResult | None]):
    """Single-shot picker. Use `build_picker_app` to get one bound to extra action keys."""

    DEFAULT_CSS = """
    #picker-bar {
        height: 1;
    }
    #picker-prompt {
        width: auto;
        color: $accent;
        text-style: bold;
    }
    #picker-query {
        width: 1fr;
        height: 1;
        border: none;
        padding: 0;
    }
    #picker-status {
        height: auto;
        padding: 0 1;
        color: $warning;
    }
    #picker-list {
        height: 1fr;
        border: none;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("down", "cursor_down", "Down", show=False, priority=True),
        Binding("up", "cursor_up", "Up", show=False, priority=True),
    ]

    def __init__(self, lines: list[str], options: PickerOptions) -> None:
        super().__init__()
        self._lines = list(lines)
        self._options = options
        self._displays = display_columns(self._lines, options.delimiter, options.with_nth)
        self._visible: list[str] = []

    def compose(self) -> ComposeResult:
        with Horizontal(id="picker-bar"):
            yield Label(self._options.prompt, id="picker-prompt", markup=False)
            yield Input(value=self._options.query, id="picker-query")
        if self._options.status:
            yield Static(self._options.status, id="picker-status", markup=False)
        yield OptionList(id="picker-list")

    def on_mount(self) -> None:
        option_list = self.query_one("#picker-list", OptionList)
        option_list.can_focus = False
        self.query_one("#picker-query", Input).focus()
        self._refilter(self._options.query)

    def _refilter(self, query: str) -> None:
        matcher = Matcher(query) if query else None
        scored = []
        for index, display in enumerate(self._displays):
            if matcher is None:
                scored.append((1.0, index, Text(display)))
                continue
            score = matcher.match(display)
            if score > 0:
                scored.append((score, index, matcher.highlight(display)))
        scored.sort(key=lambda item: -item[0])

        option_list = self.query_one("#picker-list", OptionList)
        option_list.clear_options()
        option_list.add_options([Option(prompt) for _, _, prompt in scored])
        self._visible = [self._lines[index] for _, index, _ in scored]
        if self._visible:
            option_list.highlighted = 0

    @property
    def visible_lines(self) -> list[str]:
        return list(self._visible)

    def on_input_changed(self, event: Input.Changed) -> None:
        self._refilter(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.action_accept(ACTION_DEFAULT)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.query_one("#picker-list", OptionList).highlighted = event.option_index
        self.action_accept(ACTION_DEFAULT)

    def action_cursor_down(self) -> None:
        self.query_one("#picker-list", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#picker-list", OptionList).action_cursor_up()

    def action_accept(self, key: str) -> None:
        index = self.query_one("#picker-list", OptionList).highlighted
        selected = [self._visible[index]] if index is not None and index < len(self._visible) else []
        query = self.query_one("#picker-query", Input).value
        logger.debug("Picker accepted", extra={"key": key, "selected": selected, "query": query})
        self.exit(PickerResult(key=key, selected=selected, query=query))

    def action_cancel(self) -> None:
        self.exit(None)


def build_picker_app(lines: list[str], options: PickerOptions) -> PickerApp:
    """Create a picker whose action keys end the session with that key.

    Action keys are priority bindings so the query input cannot consume them
    (Input binds several ctrl keys for editing).
    """
    bindings = [Binding(key, f"accept({key!r})", show=False, priority=True) for key in options.keys]
    app_class = type("PickerApp", (PickerApp,), {"BINDINGS": bindings})
    return app_class(lines, options)


def run_picker(lines: list[str], options: PickerOptions) -> PickerResult | None:
    return build_picker_app(lines, options).run()
