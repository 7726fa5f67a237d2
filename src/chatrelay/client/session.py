"""Client-side chat session.

Holds the visible message list, the draft, an optional pending attachment
and the session state, and talks to the chatrelay HTTP API.

States: UNINITIALIZED -> READY -> (SENDING -> READY)*
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx

from ..errors import AuthenticationError, SessionNotReadyError
from ..logger import get_logger
from .attachments import Attachment, compose_content, load_attachment, split_content
from .clipboard import ClipboardChain, CopyMethod
from .models import SessionState, VisibleMessage

logger = get_logger(__name__)

FALLBACK_ERROR_MESSAGE = "Sorry, something went wrong. Please try again."
DEFAULT_REQUEST_TIMEOUT = 120.0


class ChatSession:
    """A single conversation as seen from the client.

    Usage:
        async with ChatSession("http://localhost:3000") as session:
            await session.start()
            reply = await session.send("hello")
    """

    def __init__(
        self,
        base_url: str,
        clipboard: ClipboardChain | None = None,
        on_message: Callable[[VisibleMessage], None] | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        **client_kwargs: Any
    ):
        """Initialize the session.

        Args:
            base_url: Root URL of the chatrelay server
            clipboard: Clipboard chain used for transcript copies
            on_message: Called with each message appended to the visible list
            timeout: Request timeout in seconds
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, **client_kwargs)
        self.clipboard = clipboard or ClipboardChain()
        self.on_message = on_message
        self.state = SessionState.UNINITIALIZED
        self.conversation_id: str | None = None
        self.requires_passphrase = False
        self.draft = ""
        self._attachment: Attachment | None = None
        self._messages: list[VisibleMessage] = []

    @property
    def messages(self) -> list[VisibleMessage]:
        """Visible messages in display order."""
        return list(self._messages)

    @property
    def attachment(self) -> Attachment | None:
        return self._attachment

    @property
    def is_sending(self) -> bool:
        return self.state is SessionState.SENDING

    async def start(self, conversation_id: str | None = None) -> bool:
        """Create a conversation, or resume an existing one.

        Returns:
            True if the session is READY. On failure the session stays
            UNINITIALIZED and sends are refused.
        """
        try:
            if conversation_id is None:
                response = await self._client.post("/api/conversation")
                self._raise_for_status(response)
                self.conversation_id = response.json()["conversationId"]
            else:
                self.conversation_id = conversation_id
                await self.load_history()
        except AuthenticationError:
            self.requires_passphrase = True
            self.conversation_id = None
            logger.warning("Server requires a passphrase")
            return False
        except (httpx.HTTPError, KeyError, ValueError) as e:
            self.conversation_id = None
            logger.error("Failed to create conversation", error=str(e))
            return False

        self.state = SessionState.READY
        logger.info("Session ready", conversation_id=self.conversation_id)
        return True

    async def unlock(self, passphrase: str) -> bool:
        """Trade the shared passphrase for a session token."""
        try:
            response = await self._client.post("/api/session", json={"passphrase": passphrase})
            self._raise_for_status(response)
            token = response.json()["token"]
        except AuthenticationError:
            return False
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("Failed to unlock session", error=str(e))
            return False

        self._client.headers["Authorization"] = f"Bearer {token}"
        self.requires_passphrase = False
        return True

    async def load_history(self) -> list[VisibleMessage]:
        """Replace the visible list with the server's stored messages.

        Attachment blocks are stripped; only the file name is kept.
        """
        response = await self._client.get(f"/api/conversation/{self.conversation_id}/messages")
        self._raise_for_status(response)
        self._messages = []
        for item in response.json():
            attachment_name, free_text = split_content(item["content"])
            self._messages.append(VisibleMessage(
                role=item["role"],
                content=free_text,
                attachment_name=attachment_name,
            ))
        return self.messages

    def attach_file(self, path: str | Path) -> Attachment:
        """Validate a file and hold it for the next send.

        Raises:
            UnsupportedFileTypeError: If the file is not a text/code file
            FileTooLargeError: If the file exceeds the size ceiling
        """
        self._attachment = load_attachment(path)
        logger.debug("File attached", filename=self._attachment.filename)
        return self._attachment

    def detach_file(self) -> None:
        self._attachment = None

    async def send(self, text: str | None = None) -> VisibleMessage | None:
        """Send the draft (or given text) with any pending attachment.

        Returns:
            The assistant message appended to the visible list (the reply or
            the fallback error message), or None if nothing was sent.

        Raises:
            SessionNotReadyError: If no conversation exists
        """
        free_text = (self.draft if text is None else text).strip()
        attachment = self._attachment

        if not free_text and attachment is None:
            return None
        if self.state is SessionState.UNINITIALIZED:
            raise SessionNotReadyError("No conversation; the session failed to start")
        if self.state is SessionState.SENDING:
            return None

        self._append(VisibleMessage(
            role="user",
            content=free_text,
            attachment_name=attachment.filename if attachment else None,
        ))
        self.state = SessionState.SENDING
        try:
            response = await self._client.post(
                f"/api/conversation/{self.conversation_id}/message",
                json={"content": compose_content(free_text, attachment)},
            )
            self._raise_for_status(response)
            reply = VisibleMessage(role="assistant", content=response.json()["reply"])
        except (httpx.HTTPError, AuthenticationError, KeyError, ValueError) as e:
            logger.error("Failed to send message", error=str(e))
            reply = VisibleMessage(role="assistant", content=FALLBACK_ERROR_MESSAGE, is_error=True)
        finally:
            self._attachment = None
            self.draft = ""
            self.state = SessionState.READY

        self._append(reply)
        return reply

    def _append(self, message: VisibleMessage) -> None:
        self._messages.append(message)
        if self.on_message is not None:
            self.on_message(message)

    def transcript(self) -> str:
        """Render the visible conversation as plain text."""
        return "\n\n".join(
            f"{message.role_label}: {message.content}" for message in self._messages
        )

    def copy_conversation_to_clipboard(self) -> CopyMethod:
        """Copy the transcript through the clipboard chain. Never raises."""
        return self.clipboard.copy(self.transcript())

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code == 401:
            raise AuthenticationError(response.text)
        response.raise_for_status()

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
