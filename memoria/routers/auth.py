from fastapi import APIRouter, Depends, Request, Response
import logging

from memoria.dependencies.dependencies import get_session_guard
from memoria.exceptions import (
    BadRequestException,
    IncorrectPasswordException,
    ServerPasswordNotSetException,
    PASSWORD_NOT_SET,
)
from memoria.session.guard import SessionGuard, SessionStatus, persist_session
from memoria.settings import Settings, get_settings

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["session"]
)

@router.post("/auth")
async def authenticate(
    request: Request,
    response: Response,
    guard: SessionGuard = Depends(get_session_guard),
    settings: Settings = Depends(get_settings),
):
    """
    Checks the shared password.

    Body: { "password": str }. On a match the session cookie is set.
    """
    try:
        body = await request.json()
    except ValueError:
        raise BadRequestException()
    if not isinstance(body, dict):
        raise BadRequestException()

    result = guard.login(body.get("password"))
    if not result.ok:
        if result.reason == PASSWORD_NOT_SET:
            raise ServerPasswordNotSetException()
        raise IncorrectPasswordException()

    persist_session(guard.context, response, settings)
    return {"ok": True}

@router.get("/session", response_model=SessionStatus)
def session_status(guard: SessionGuard = Depends(get_session_guard)):
    """Reports whether the client holds an active session."""
    return SessionStatus(authenticated=guard.is_session_active())

@router.post("/logout")
def logout(
    response: Response,
    guard: SessionGuard = Depends(get_session_guard),
    settings: Settings = Depends(get_settings),
):
    """Ends the session and clears the session cookie."""
    guard.end_session()
    persist_session(guard.context, response, settings)
    return {"ok": True}
