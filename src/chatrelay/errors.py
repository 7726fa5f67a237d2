"""Error taxonomy for chatrelay.

Server-side errors map onto HTTP status classes at the request boundary.
Client-side errors are raised by the chat session before anything is sent.
"""


class ChatRelayError(Exception):
    """Base class for all chatrelay errors."""


class ConfigurationError(ChatRelayError):
    """Required configuration is missing or invalid."""


class ValidationError(ChatRelayError):
    """Caller-supplied input is malformed or missing (400)."""


class NotFoundError(ChatRelayError):
    """Referenced conversation does not exist (404)."""


class AuthenticationError(ChatRelayError):
    """Missing or invalid session credentials (401)."""


class StoreError(ChatRelayError):
    """Persistence failure (500)."""


class UpstreamError(ChatRelayError):
    """Completion provider call failed.

    Attributes:
        status_code: Provider HTTP status, or None for transport failures
        body: Raw provider error body, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"{base} (status {self.status_code})"
        return base


class AttachmentError(ChatRelayError):
    """Base class for rejected file attachments."""


class UnsupportedFileTypeError(AttachmentError):
    """File extension and MIME type are both outside the allow-list."""


class FileTooLargeError(AttachmentError):
    """File exceeds the attachment size ceiling."""


class SessionNotReadyError(ChatRelayError):
    """Client session has no conversation to send to."""
