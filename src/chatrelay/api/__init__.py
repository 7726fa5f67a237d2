"""HTTP surface of the conversation service."""

from .app import create_app
from .auth import SessionTokenSigner

__all__ = ["SessionTokenSigner", "create_app"]
