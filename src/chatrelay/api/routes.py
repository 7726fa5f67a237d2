from fastapi import APIRouter, Depends, status

from ..errors import AuthenticationError
from ..logger import get_logger
from .deps import ServiceDep, SignerDep, require_session
from .errors import ErrorResponder
from .schemas import (
    CreateConversationResponse,
    ErrorResponse,
    HealthResponse,
    MessageOut,
    PostMessageRequest,
    PostMessageResponse,
    SessionRequest,
    SessionResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api")

conversation_router = APIRouter(
    prefix="/conversation",
    dependencies=[Depends(require_session)],
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("/health", response_model=HealthResponse)
async def health(service: ServiceDep) -> HealthResponse:
    return HealthResponse(status="ok", store=service.store.backend_type)


@router.post(
    "/session",
    status_code=status.HTTP_201_CREATED,
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Exchange the shared passphrase for a session token",
)
async def create_session(payload: SessionRequest, signer: SignerDep):
    responder = ErrorResponder(logger=logger, operation="create_session")
    if signer is None:
        return responder.handle_not_found_error(
            AuthenticationError("gate disabled"), "Passphrase gate is not enabled"
        )
    try:
        token = signer.issue(payload.passphrase)
    except AuthenticationError as e:
        return responder.handle_unauthorized(e, "Invalid passphrase")
    logger.info("Session token issued")
    return SessionResponse(token=token)


@conversation_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateConversationResponse,
    summary="Create a new, empty conversation",
)
async def create_conversation(service: ServiceDep):
    responder = ErrorResponder(logger=logger, operation="create_conversation")
    try:
        conversation_id = await service.create_conversation()
    except Exception as e:
        return responder.respond(e, "Failed to create conversation")
    return CreateConversationResponse(conversation_id=conversation_id)


@conversation_router.get(
    "/{conversation_id}/messages",
    response_model=list[MessageOut],
    responses={404: {"model": ErrorResponse}},
    summary="List the messages of a conversation in order",
)
async def get_messages(conversation_id: str, service: ServiceDep):
    responder = ErrorResponder(logger=logger, operation="get_messages")
    try:
        messages = await service.get_messages(conversation_id)
    except Exception as e:
        return responder.respond(
            e, "Failed to fetch messages", conversation_id=conversation_id
        )
    return [MessageOut.from_message(message) for message in messages]


@conversation_router.post(
    "/{conversation_id}/message",
    response_model=PostMessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Send a user message and receive the assistant reply",
)
async def post_message(
    conversation_id: str,
    payload: PostMessageRequest,
    service: ServiceDep,
):
    responder = ErrorResponder(logger=logger, operation="post_message")
    try:
        reply = await service.post_message(conversation_id, payload.content)
    except Exception as e:
        return responder.respond(
            e, "Failed to process message", conversation_id=conversation_id
        )
    return PostMessageResponse(reply=reply)


router.include_router(conversation_router)
