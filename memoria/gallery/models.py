from typing import List, NamedTuple, Optional
from datetime import datetime
from pydantic import BaseModel, Field

class StoredImage(BaseModel):
    key: str
    public_url: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None

class GalleryListing(BaseModel):
    """Images newest first. `error` is set when the listing degraded to empty."""
    images: List[StoredImage] = []
    error: Optional[str] = None

    @property
    def keys(self) -> List[str]:
        return [image.key for image in self.images]

class PendingUpload(NamedTuple):
    filename: str
    data: bytes
    content_type: Optional[str] = None

class UploadOutcome(BaseModel):
    filename: str
    key: Optional[str] = None
    ok: bool
    error: Optional[str] = None

class UploadBatchResult(BaseModel):
    uploads: List[UploadOutcome]
    listing: GalleryListing

    @property
    def succeeded(self) -> List[str]:
        return [outcome.key for outcome in self.uploads if outcome.ok]

class DeleteResult(BaseModel):
    key: str
    ok: bool
    error: Optional[str] = None
    # HTTP status of the failure, not serialized
    status_code: Optional[int] = Field(default=None, exclude=True)
    listing: GalleryListing
