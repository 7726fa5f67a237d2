"""Main Textual TUI application.

Drives a ChatSession against a chatrelay server: renders the visible
messages, gates input while a request is in flight, and wires the
attach/copy shortcuts.
"""

import asyncio
from typing import Any

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Input, Static

from ..client import ChatSession, ClipboardChain, CopyMethod, VisibleMessage
from ..errors import AttachmentError, SessionNotReadyError
from .screens import AttachFileScreen, ManualCopyScreen, PassphraseScreen
from .styles import APP_CSS
from .widgets import ChatHistoryWidget


class ChatRelayApp(App):
    """Textual chat client for a chatrelay server."""

    CSS = APP_CSS
    TITLE = "chatrelay"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True),
        Binding("ctrl+o", "attach_file", "Attach", priority=True),
        Binding("ctrl+x", "detach_file", "Detach", priority=True),
        Binding("ctrl+y", "copy_conversation", "Copy Chat", priority=True),
    ]

    def __init__(
        self,
        server_url: str,
        conversation_id: str | None = None,
        osc52: bool = True,
        **session_kwargs: Any,
    ) -> None:
        """Initialize the app.

        Args:
            server_url: Root URL of the chatrelay server
            conversation_id: Existing conversation to resume, if any
            osc52: Use the terminal OSC 52 escape when the system clipboard
                fails. It cannot report failure, so turn it off in terminals
                that ignore it to fall through to the manual-copy screen.
            **session_kwargs: Additional kwargs for ChatSession
        """
        super().__init__()
        self._server_url = server_url
        self._conversation_id = conversation_id
        self._session = ChatSession(
            server_url,
            clipboard=ClipboardChain(
                legacy=self.copy_to_clipboard if osc52 else None,
                manual=self._show_manual_copy,
            ),
            on_message=self._on_session_message,
            **session_kwargs
        )

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield Static("Connecting...", id="status-bar")
        yield Input(placeholder="Type a message and press Enter", id="chat-input")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = self._server_url
        self.query_one("#chat-input", Input).disabled = True
        self._connect()

    async def on_unmount(self) -> None:
        await self._session.close()

    def _on_session_message(self, message: VisibleMessage) -> None:
        self.query_one("#chat-history", ChatHistoryWidget).add_message(message)

    def _set_status(self, text: str) -> None:
        self.query_one("#status-bar", Static).update(text)

    def _refresh_status(self) -> None:
        attachment = self._session.attachment
        if self._session.is_sending:
            self._set_status("Waiting for reply...")
        elif attachment is not None:
            self._set_status(f"Attached: {attachment.filename} (ctrl+x to remove)")
        else:
            self._set_status(f"Conversation {self._session.conversation_id}")

    @work(exclusive=True, group="connect")
    async def _connect(self) -> None:
        """Create or resume the conversation."""
        started = await self._session.start(self._conversation_id)
        if started:
            if self._conversation_id is not None:
                self.query_one("#chat-history", ChatHistoryWidget).replace_messages(
                    self._session.messages
                )
            chat_input = self.query_one("#chat-input", Input)
            chat_input.disabled = False
            chat_input.focus()
            self._refresh_status()
            return

        if self._session.requires_passphrase:
            self._set_status("Locked")
            self.push_screen(PassphraseScreen(), callback=self._on_passphrase)
        else:
            self._set_status("Could not start a conversation")
            self.notify("Could not reach the server", severity="error", timeout=5)

    def _on_passphrase(self, passphrase: str | None) -> None:
        if passphrase is None:
            self._set_status("Locked: restart to try again")
            return
        self._unlock(passphrase)

    @work(exclusive=True, group="unlock")
    async def _unlock(self, passphrase: str) -> None:
        if await self._session.unlock(passphrase):
            self._connect()
        else:
            self.notify("Wrong passphrase", severity="error", timeout=3)
            self.push_screen(PassphraseScreen(), callback=self._on_passphrase)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle user input submission."""
        if self._session.is_sending:
            return
        self._session.draft = event.value
        event.input.value = ""
        self._send()

    @work(exclusive=True, group="send")
    async def _send(self) -> None:
        chat_input = self.query_one("#chat-input", Input)
        chat_input.disabled = True
        self._set_status("Waiting for reply...")
        try:
            reply = await self._session.send()
            if reply is not None and reply.is_error:
                self.notify("Request failed", severity="error", timeout=3)
        except SessionNotReadyError as e:
            self.notify(str(e), severity="error", timeout=5)
        finally:
            chat_input.disabled = False
            chat_input.focus()
            self._refresh_status()

    def action_attach_file(self) -> None:
        """Prompt for a file to attach to the next message."""
        self.push_screen(AttachFileScreen(), callback=self._on_attach_path)

    def _on_attach_path(self, path: str | None) -> None:
        if path is None:
            return
        try:
            attachment = self._session.attach_file(path)
        except AttachmentError as e:
            self.notify(str(e), severity="error", timeout=5)
            return
        except OSError as e:
            self.notify(f"Could not read file: {e.strerror or e}", severity="error", timeout=5)
            return
        self.notify(f"Attached {attachment.filename}", timeout=2)
        self._refresh_status()

    def action_detach_file(self) -> None:
        if self._session.attachment is None:
            return
        self._session.detach_file()
        self.notify("Attachment removed", timeout=2)
        self._refresh_status()

    def action_copy_conversation(self) -> None:
        """Copy the transcript to the clipboard."""
        if not self._session.messages:
            self.notify("Nothing to copy", severity="warning")
            return
        method = self._session.copy_conversation_to_clipboard()
        if method is CopyMethod.SYSTEM:
            self.notify("Conversation copied", timeout=2)
        elif method is CopyMethod.LEGACY:
            self.notify("Sent to the terminal clipboard (OSC 52)", timeout=3)

    def _show_manual_copy(self, text: str) -> None:
        self.push_screen(ManualCopyScreen(text))


async def run_textual_tui(
    server_url: str,
    conversation_id: str | None = None,
    osc52: bool = True,
) -> None:
    """Run the Textual chat client.

    Args:
        server_url: Root URL of the chatrelay server
        conversation_id: Existing conversation to resume, if any
        osc52: Fall back to the terminal OSC 52 clipboard escape
    """
    app = ChatRelayApp(server_url, conversation_id=conversation_id, osc52=osc52)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
