"""
    Shared-password gate and the client-held session flag.
"""
import hmac
import logging
from typing import Mapping, Optional

from fastapi import Response
from pydantic import BaseModel

from memoria.exceptions import INCORRECT_PASSWORD, PASSWORD_NOT_SET
from memoria.settings import Settings

log = logging.getLogger(__name__)

SESSION_ACTIVE = "1"

class PasswordCheck(BaseModel):
    ok: bool
    reason: Optional[str] = None

class SessionStatus(BaseModel):
    authenticated: bool

class SessionContext:
    """
        Session flag as the client holds it.

        Built from the request cookies; `changed` marks whether the flag must be
        written back to the client.
    """

    def __init__(self, flags: Optional[Mapping[str, str]] = None, flag_key: str = "memoria_auth"):
        self.flag_key = flag_key
        self.flags = dict(flags or {})
        self.changed = False

    @property
    def active(self) -> bool:
        return self.flags.get(self.flag_key) == SESSION_ACTIVE

    def set_active(self, active: bool):
        if active == self.active:
            return
        if active:
            self.flags[self.flag_key] = SESSION_ACTIVE
        else:
            self.flags.pop(self.flag_key, None)
        self.changed = True

class SessionGuard:
    def __init__(self, secret: Optional[str], context: SessionContext):
        self.secret = secret
        self.context = context

    def check_password(self, submitted) -> PasswordCheck:
        if not self.secret:
            log.error("Password check refused: no server password configured")
            return PasswordCheck(ok=False, reason=PASSWORD_NOT_SET)
        if not isinstance(submitted, str):
            return PasswordCheck(ok=False, reason=INCORRECT_PASSWORD)
        if hmac.compare_digest(submitted.encode("utf-8"), self.secret.encode("utf-8")):
            return PasswordCheck(ok=True)
        log.info("Rejected incorrect password")
        return PasswordCheck(ok=False, reason=INCORRECT_PASSWORD)

    def is_session_active(self) -> bool:
        return self.context.active

    def start_session(self):
        self.context.set_active(True)

    def end_session(self):
        self.context.set_active(False)

    def login(self, submitted) -> PasswordCheck:
        """Checks the password and starts the session when it matches."""
        result = self.check_password(submitted)
        if result.ok:
            self.start_session()
        return result

def persist_session(context: SessionContext, response: Response, settings: Settings):
    """Writes a changed session flag back to the client as a cookie."""
    if not context.changed:
        return
    if context.active:
        response.set_cookie(
            key=context.flag_key,
            value=SESSION_ACTIVE,
            max_age=settings.session_cookie_max_age,
            httponly=True,
            samesite="lax",
        )
    else:
        response.delete_cookie(key=context.flag_key, httponly=True, samesite="lax")
