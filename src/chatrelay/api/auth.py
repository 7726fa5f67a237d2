"""Shared-passphrase gate backed by server-issued session tokens.

A client trades the passphrase for a JWT once; later requests carry it as
a bearer credential. Tokens are signed HS256 with a per-process secret and
carry an ``exp`` claim, so they lapse after the configured lifetime or on
restart, whichever comes first.
"""

import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from ..errors import AuthenticationError

ALGORITHM = "HS256"
DEFAULT_TOKEN_LIFETIME = timedelta(minutes=30)
TOKEN_SUBJECT = "chatrelay-session"


class SessionTokenSigner:
    """Issue and verify session tokens for one passphrase."""

    def __init__(
        self,
        passphrase: str,
        secret_key: str | None = None,
        lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
    ):
        if not passphrase:
            raise ValueError("passphrase must not be empty")
        self._passphrase = passphrase.encode()
        self._secret_key = secret_key or secrets.token_urlsafe(32)
        self.lifetime = lifetime

    def issue(self, passphrase: str, expires_delta: timedelta | None = None) -> str:
        """Exchange the passphrase for a session token.

        Raises:
            AuthenticationError: If the passphrase is wrong
        """
        if not hmac.compare_digest(passphrase.encode(), self._passphrase):
            raise AuthenticationError("Invalid passphrase")
        expire = datetime.now(timezone.utc) + (expires_delta or self.lifetime)
        payload = {"sub": TOKEN_SUBJECT, "exp": expire}
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str | None) -> None:
        """Check a token issued by this signer.

        Raises:
            AuthenticationError: If the token is missing, forged or expired
        """
        if not token:
            raise AuthenticationError("Missing session token")
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError("Session token expired") from e
        except jwt.PyJWTError as e:
            raise AuthenticationError("Invalid session token") from e
        if payload.get("sub") != TOKEN_SUBJECT:
            raise AuthenticationError("Invalid session token")
