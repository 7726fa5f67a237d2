"""Modal screens for the chat TUI.

This module hides the design decisions about:
- How file paths and passphrases are prompted for
- How a transcript is presented when no clipboard is reachable

To change how these dialogs look, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, TextArea

DIALOG_CSS = """
{name} {{
    align: center middle;
    background: $background 70%;
}}

.dialog {{
    width: 70;
    height: auto;
    max-height: 80%;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}}

.dialog-title {{
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 0 0 1 0;
}}

.dialog-buttons {{
    width: 100%;
    height: 3;
    align: center middle;
    margin-top: 1;
}}

.dialog-buttons Button {{
    margin: 0 1;
    min-width: 10;
}}
"""


class PromptScreen(ModalScreen[str | None]):
    """Single-line prompt; dismisses with the entered value or None."""

    TITLE_TEXT = ""
    PLACEHOLDER = ""
    PASSWORD = False

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static(self.TITLE_TEXT, classes="dialog-title")
            yield Input(
                placeholder=self.PLACEHOLDER,
                password=self.PASSWORD,
                id="prompt-input",
            )
            with Horizontal(classes="dialog-buttons"):
                yield Button("OK", id="btn-ok", variant="primary")
                yield Button("Cancel", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        self.query_one("#prompt-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value.strip() or None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-ok":
            self.dismiss(self.query_one("#prompt-input", Input).value.strip() or None)
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class AttachFileScreen(PromptScreen):
    """Asks for the path of a text file to attach."""

    CSS = DIALOG_CSS.format(name="AttachFileScreen")
    TITLE_TEXT = "Attach a text file"
    PLACEHOLDER = "path/to/file.py"


class PassphraseScreen(PromptScreen):
    """Asks for the server's access passphrase."""

    CSS = DIALOG_CSS.format(name="PassphraseScreen")
    TITLE_TEXT = "This server requires a passphrase"
    PLACEHOLDER = "passphrase"
    PASSWORD = True


class ManualCopyScreen(ModalScreen[None]):
    """Shows the transcript in a read-only text area for manual copying."""

    CSS = DIALOG_CSS.format(name="ManualCopyScreen") + """
    #manual-copy-text {
        height: 20;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=False),
    ]

    def __init__(self, text: str) -> None:
        super().__init__()
        self._text = text

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static(
                "Clipboard unavailable: select the text below and copy it",
                classes="dialog-title",
            )
            yield TextArea(self._text, read_only=True, id="manual-copy-text")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Close", id="btn-close", variant="primary")

    def on_mount(self) -> None:
        text_area = self.query_one("#manual-copy-text", TextArea)
        text_area.focus()
        text_area.select_all()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
