from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..service import ConversationService
from .auth import SessionTokenSigner

_bearer = HTTPBearer(auto_error=False)


def get_service(request: Request) -> ConversationService:
    return request.app.state.service


def get_signer(request: Request) -> SessionTokenSigner | None:
    return request.app.state.signer


def require_session(
    signer: Annotated[SessionTokenSigner | None, Depends(get_signer)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> None:
    """Reject the request unless the gate is off or the token verifies."""
    if signer is None:
        return
    signer.verify(credentials.credentials if credentials else None)


ServiceDep = Annotated[ConversationService, Depends(get_service)]
SignerDep = Annotated[SessionTokenSigner | None, Depends(get_signer)]
