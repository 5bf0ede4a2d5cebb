from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse
from typing import List
import logging

from memoria.dependencies.dependencies import get_gallery_controller, get_storage_gateway, require_session
from memoria.exceptions import APIException
from memoria.gallery.controller import GalleryController
from memoria.gallery.models import DeleteResult, GalleryListing, PendingUpload, UploadBatchResult
from memoria.storage.gateway import StorageGateway

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/gallery",
    tags=["gallery"],
    dependencies=[Depends(require_session)],
)

@router.get("", response_model=GalleryListing)
def list_gallery(controller: GalleryController = Depends(get_gallery_controller)):
    """Lists the collection, newest first."""
    return controller.refresh()

@router.post("", response_model=UploadBatchResult)
async def upload_images(
    files: List[UploadFile] = File(...),
    controller: GalleryController = Depends(get_gallery_controller),
):
    """Uploads a batch of images one by one and returns the refreshed listing."""
    pending = []
    for file in files:
        pending.append(PendingUpload(
            filename=file.filename or "",
            data=await file.read(),
            content_type=file.content_type,
        ))
    return await run_in_threadpool(controller.upload_all, pending)

@router.get("/{key:path}/view")
def view_image(key: str, gateway: StorageGateway = Depends(get_storage_gateway)):
    """Redirects to the full-size image."""
    return RedirectResponse(gateway.get_public_url(key), status_code=307)

@router.delete("/{key:path}", response_model=DeleteResult)
def delete_image(
    key: str,
    confirm: bool = Query(False, description="Acknowledges that the delete cannot be undone"),
    controller: GalleryController = Depends(get_gallery_controller),
):
    """Deletes one image and returns the refreshed listing."""
    result = controller.delete_one(key, confirmed=confirm)
    if not result.ok:
        raise APIException(status_code=result.status_code or 502, detail=result.error)
    return result
