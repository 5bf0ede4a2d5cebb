from fastapi import Depends, Request
from memoria.exceptions import SessionRequiredException
from memoria.gallery.controller import GalleryController
from memoria.session.guard import SessionContext, SessionGuard
from memoria.settings import Settings, get_settings
from memoria.storage.gateway import StorageGateway

def get_storage_gateway(request: Request) -> StorageGateway:
    """Dependency provider for the StorageGateway"""
    return request.app.state.storage

def get_session_guard(request: Request, settings: Settings = Depends(get_settings)) -> SessionGuard:
    """Dependency provider for a SessionGuard over the request's session cookie"""
    context = SessionContext(request.cookies, flag_key=settings.session_cookie_name)
    return SessionGuard(settings.memoria_password, context)

def require_session(guard: SessionGuard = Depends(get_session_guard)) -> SessionGuard:
    """Rejects requests without an active session"""
    if not guard.is_session_active():
        raise SessionRequiredException()
    return guard

def get_gallery_controller(gateway: StorageGateway = Depends(get_storage_gateway)) -> GalleryController:
    """Dependency provider for GalleryController"""
    return GalleryController(gateway)
