"""Client side of chatrelay: session state, attachments and clipboard."""

from .attachments import (
    ALLOWED_EXTENSIONS,
    MAX_ATTACHMENT_BYTES,
    Attachment,
    compose_content,
    load_attachment,
    split_content,
)
from .clipboard import ClipboardChain, CopyMethod
from .models import SessionState, VisibleMessage
from .session import FALLBACK_ERROR_MESSAGE, ChatSession

__all__ = [
    "ALLOWED_EXTENSIONS",
    "FALLBACK_ERROR_MESSAGE",
    "MAX_ATTACHMENT_BYTES",
    "Attachment",
    "ChatSession",
    "ClipboardChain",
    "CopyMethod",
    "SessionState",
    "VisibleMessage",
    "compose_content",
    "load_attachment",
    "split_content",
]
