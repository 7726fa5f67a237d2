"""File attachments inlined into outgoing messages.

Only text files are accepted. The decoded text travels inside the message
content in a delimited block; it is shown to the model, never to the user.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from ..errors import FileTooLargeError, UnsupportedFileTypeError

MAX_ATTACHMENT_BYTES = 1024 * 1024

ALLOWED_EXTENSIONS = frozenset({
    # text and markup
    "txt", "md", "markdown", "rst", "log", "csv", "tsv",
    "json", "jsonl", "xml", "yaml", "yml", "toml", "ini", "cfg", "conf", "env",
    "html", "htm", "css", "scss", "tex",
    # code
    "py", "pyi", "js", "jsx", "mjs", "ts", "tsx", "vue", "svelte",
    "java", "kt", "scala", "go", "rs", "rb", "php", "pl", "lua", "r", "dart", "swift",
    "c", "h", "cpp", "hpp", "cc", "cs", "m",
    "sh", "bash", "zsh", "ps1", "sql", "graphql", "proto", "tf",
})

ATTACHMENT_BEGIN = "ATTACHMENT_BEGIN"
ATTACHMENT_END = "ATTACHMENT_END"


@dataclass(frozen=True)
class Attachment:
    """A decoded text file waiting to be sent."""

    filename: str
    mime_type: str
    extension: str
    raw_text: str

    def to_block(self) -> str:
        """Render the delimited block embedded in message content."""
        return "\n".join([
            ATTACHMENT_BEGIN,
            f"filename: {self.filename}",
            f"type: {self.mime_type}",
            f"extension: {self.extension}",
            "content:",
            self.raw_text,
            ATTACHMENT_END,
        ])


def is_supported_type(extension: str, mime_type: str | None) -> bool:
    """Allow-listed extension, or a textual MIME type as fallback."""
    if extension in ALLOWED_EXTENSIONS:
        return True
    if not mime_type:
        return False
    return mime_type.startswith("text/") or "json" in mime_type or "csv" in mime_type


def load_attachment(path: str | Path, max_bytes: int = MAX_ATTACHMENT_BYTES) -> Attachment:
    """Validate and decode a file for attaching.

    Args:
        path: File to attach
        max_bytes: Size ceiling in bytes

    Returns:
        Attachment holding the decoded text

    Raises:
        UnsupportedFileTypeError: If neither extension nor MIME type is textual
        FileTooLargeError: If the file exceeds max_bytes
        OSError: If the file cannot be read
    """
    path = Path(path)
    extension = path.suffix.lstrip(".").lower()
    mime_type, _ = mimetypes.guess_type(path.name)

    if not is_supported_type(extension, mime_type):
        raise UnsupportedFileTypeError(
            f"Unsupported file type: {path.name} ({mime_type or 'unknown'})"
        )

    size = path.stat().st_size
    if size > max_bytes:
        raise FileTooLargeError(
            f"{path.name} is {size} bytes; attachments are limited to {max_bytes} bytes"
        )

    raw_text = path.read_bytes().decode("utf-8", errors="replace")
    return Attachment(
        filename=path.name,
        mime_type=mime_type or "text/plain",
        extension=extension,
        raw_text=raw_text,
    )


def compose_content(text: str, attachment: Attachment | None) -> str:
    """Combine an optional attachment block with the free-text message."""
    if attachment is None:
        return text
    block = attachment.to_block()
    if not text:
        return block
    return f"{block}\n\n{text}"


def split_content(content: str) -> tuple[str | None, str]:
    """Separate a leading attachment block from the free text.

    Inverse of compose_content() for display purposes.

    Returns:
        (attachment filename or None, free text)
    """
    if not content.startswith(ATTACHMENT_BEGIN + "\n"):
        return None, content

    end = content.find("\n" + ATTACHMENT_END)
    if end == -1:
        return None, content

    header = content[len(ATTACHMENT_BEGIN) + 1:end].split("\n", 1)[0]
    filename = header.removeprefix("filename: ") if header.startswith("filename: ") else None
    free_text = content[end + len(ATTACHMENT_END) + 1:].lstrip("\n")
    return filename, free_text
