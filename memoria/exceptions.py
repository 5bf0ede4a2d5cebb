"""
    Centralized exception handling for the FastAPI application.
"""
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
import logging

log = logging.getLogger(__name__)

INCORRECT_PASSWORD = "Senha incorreta"
PASSWORD_NOT_SET = "Server password not set"

class APIException(Exception):
    """Base class for API exceptions."""
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.detail)

# -------------------------
# Authentication
# -------------------------
class IncorrectPasswordException(APIException):
    """Exception for a submitted password that does not match."""
    def __init__(self):
        super().__init__(status_code=401, detail=INCORRECT_PASSWORD)

class ServerPasswordNotSetException(APIException):
    """Exception for a server without a configured password."""
    def __init__(self):
        super().__init__(status_code=500, detail=PASSWORD_NOT_SET)

class SessionRequiredException(APIException):
    """Exception for gallery access without an active session."""
    def __init__(self):
        super().__init__(status_code=401, detail="Authentication required")

# -------------------------
# Validation
# -------------------------
class BadRequestException(APIException):
    """Exception for request bodies that cannot be parsed."""
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=400, detail=detail)

class InvalidImageException(APIException):
    """Exception for invalid image files."""
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class ConfirmationRequiredException(APIException):
    """Exception for a delete issued without explicit confirmation."""
    def __init__(self, key: str):
        super().__init__(status_code=400, detail=f"Deleting '{key}' is irreversible and must be confirmed.")

# -------------------------
# Storage
# -------------------------
class StorageException(APIException):
    """Base class for object storage failures."""

class StorageTransportException(StorageException):
    """Exception for failed calls to the object storage backend."""
    def __init__(self, detail: str):
        super().__init__(status_code=502, detail=detail)

class StorageUnavailableException(StorageException):
    """Exception for calls made while no storage backend is configured."""
    def __init__(self, detail: str = "Object storage is not configured."):
        super().__init__(status_code=503, detail=detail)

class UploadConflictException(StorageException):
    """Exception for uploads onto a key that already exists."""
    def __init__(self, key: str):
        super().__init__(status_code=409, detail=f"Object '{key}' already exists.")

def error_body(detail: str) -> dict:
    return {"ok": False, "error": detail}

async def api_exception_handler(request: Request, exc: APIException):
    """Handles API exceptions."""
    log.error(f"API Exception: {exc.detail}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    """Handles HTTP exceptions raised by FastAPI and Starlette routing."""
    log.error(f"HTTP Exception: {exc.detail}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles request validation failures."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    detail = f"Invalid request: {location} {first.get('msg', '')}".strip()
    log.error(f"Validation Exception: {detail}")
    return JSONResponse(
        status_code=422,
        content=error_body(detail),
    )

async def generic_exception_handler(request: Request, exc: Exception):
    """Handles all other exceptions."""
    log.error(f"Unhandled Exception: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_body("An unexpected error occurred."),
    )

def add_exception_handlers(app):
    """Adds exception handlers to the FastAPI app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
