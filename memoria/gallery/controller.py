"""
    Gallery state: the current listing and the operations that rebuild it.

    The bucket is the only source of truth. Every mutation is followed by a full
    refresh instead of patching the listing in place.
"""
import logging
import time
from typing import Callable, Iterable, Optional

from memoria.exceptions import APIException, ConfirmationRequiredException, StorageException
from memoria.gallery.models import (
    DeleteResult,
    GalleryListing,
    PendingUpload,
    StoredImage,
    UploadBatchResult,
    UploadOutcome,
)
from memoria.gallery.validation import make_object_key, validate_image_bytes
from memoria.storage.gateway import StorageGateway

log = logging.getLogger(__name__)

def current_time_millis() -> int:
    return int(time.time() * 1000)

class GalleryController:
    def __init__(self, gateway: StorageGateway, clock: Callable[[], int] = current_time_millis):
        self.gateway = gateway
        self.clock = clock
        self.listing = GalleryListing()

    def refresh(self) -> GalleryListing:
        """Rebuilds the listing from the bucket; a failed listing yields an empty one."""
        try:
            images = [
                StoredImage(
                    key=obj.name,
                    public_url=self.gateway.get_public_url(obj.name),
                    last_modified=obj.last_modified,
                    size=obj.size,
                )
                for obj in self.gateway.list()
            ]
        except StorageException as e:
            log.error("Listing failed, showing empty gallery: %s", e.detail)
            self.listing = GalleryListing(error=e.detail)
            return self.listing

        self.listing = GalleryListing(images=images)
        log.debug("Refreshed listing with %d images", len(images))
        return self.listing

    def upload_all(self, files: Iterable[PendingUpload]) -> UploadBatchResult:
        """
            Uploads files one at a time in input order.

            A failed file is recorded and the batch moves on. The listing is
            refreshed once after the whole batch.
        """
        outcomes = [self._upload_one(item) for item in files]
        failed = sum(1 for outcome in outcomes if not outcome.ok)
        if failed:
            log.warning("Upload batch finished with %d of %d failures", failed, len(outcomes))
        else:
            log.info("Uploaded %d files", len(outcomes))
        return UploadBatchResult(uploads=outcomes, listing=self.refresh())

    def _upload_one(self, item: PendingUpload) -> UploadOutcome:
        key: Optional[str] = None
        try:
            key = make_object_key(item.filename, self.clock())
            content_type = validate_image_bytes(item.data, item.content_type)
            self.gateway.upload(key, item.data, content_type=content_type)
        except APIException as e:
            log.error("Upload of %s failed: %s", item.filename, e.detail)
            return UploadOutcome(filename=item.filename, key=key, ok=False, error=e.detail)
        return UploadOutcome(filename=item.filename, key=key, ok=True)

    def delete_one(self, key: str, confirmed: bool = False) -> DeleteResult:
        """Removes one object once the caller has confirmed the irreversible delete."""
        if not confirmed:
            raise ConfirmationRequiredException(key)
        try:
            self.gateway.remove([key])
        except StorageException as e:
            log.error("Delete of %s failed: %s", key, e.detail)
            return DeleteResult(key=key, ok=False, error=e.detail, status_code=e.status_code, listing=self.listing)

        log.info("Deleted %s", key)
        return DeleteResult(key=key, ok=True, listing=self.refresh())
