"""Modal text prompt for confirmations and path entry."""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Label


class PromptScreen(ModalScreen[str | None]):
    """One-line prompt. Dismisses with the typed text, the default when left empty, or None on escape."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    PromptScreen {
        align: center middle;
    }
    #prompt-dialog {
        width: 70;
        height: 9;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    """

    def __init__(self, prompt: str, default: str = "") -> None:
        super().__init__()
        self._prompt = prompt
        self._default = default

    def compose(self) -> ComposeResult:
        with Vertical(id="prompt-dialog"):
            yield Label(self._prompt.strip(), markup=False)
            yield Input(value=self._default, placeholder=self._default, id="prompt-input")
            yield Label("Press Enter to accept, Escape to cancel")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.action_submit()

    def action_submit(self) -> None:
        answer = self.query_one("#prompt-input", Input).value.strip()
        self.dismiss(answer or self._default)

    def action_cancel(self) -> None:
        self.dismiss(None)


class PromptApp(App[str | None]):
    """Hosts a single PromptScreen and exits with its answer."""

    def __init__(self, prompt: str, default: str = "") -> None:
        super().__init__()
        self._prompt = prompt
        self._default = default

    def on_mount(self) -> None:
        self.push_screen(PromptScreen(self._prompt, self._default), callback=self.exit)


class TextualPrompter:
    def ask(self, prompt: str, default: str = "") -> str | None:
        return PromptApp(prompt, default).run()
