import boto3
from datetime import datetime
from typing import Iterable, List, NamedTuple, Optional
from urllib.parse import quote
from botocore.exceptions import BotoCoreError, ClientError
from memoria.settings import Settings
from memoria.exceptions import (
    StorageTransportException,
    StorageUnavailableException,
    UploadConflictException,
)
import logging

log = logging.getLogger(__name__)

class StoredObject(NamedTuple):
    name: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None

# -------------------------
# Storage Gateway
# -------------------------
class StorageGateway:
    """
        Capability over one flat object collection.

        Every operation may raise a StorageException; callers decide how to degrade.
    """

    def list(self) -> List[StoredObject]:
        raise NotImplementedError

    def get_public_url(self, name: str) -> str:
        raise NotImplementedError

    def upload(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        upsert: bool = False,
    ):
        raise NotImplementedError

    def remove(self, keys: Iterable[str]):
        raise NotImplementedError

    def close(self):
        pass

class S3StorageGateway(StorageGateway):
    def __init__(self, settings: Settings):
        self.bucket = settings.storage_bucket
        self.region = settings.storage_region
        self.endpoint_url = settings.storage_endpoint_url
        self.public_url = settings.storage_public_url
        self.cache_control = settings.storage_cache_control
        self.list_limit = settings.list_limit

        session = boto3.session.Session(region_name=settings.storage_region)
        kwargs = {
            "aws_access_key_id": settings.storage_access_key_id,
            "aws_secret_access_key": settings.storage_secret_access_key,
        }
        if settings.storage_endpoint_url:
            kwargs["endpoint_url"] = settings.storage_endpoint_url

        self.client = session.client("s3", **kwargs)
        log.info("Initialized S3 client for bucket %s", self.bucket)

        if settings.storage_ensure_bucket:
            self.ensure_bucket()

    def ensure_bucket(self):
        try:
            self.client.head_bucket(Bucket=self.bucket)
            log.debug("Bucket %s already exists", self.bucket)
            return
        except ClientError as e:
            if e.response["Error"]["Code"] not in ("404", "NoSuchBucket"):
                log.error("Failed to check bucket %s: %s", self.bucket, e)
                return
        except BotoCoreError as e:
            log.error("Failed to check bucket %s: %s", self.bucket, e)
            return

        try:
            self.client.create_bucket(Bucket=self.bucket)
            log.info("Created bucket %s", self.bucket)
        except (BotoCoreError, ClientError) as e:
            log.error("Failed to create bucket %s: %s", self.bucket, e)

    def list(self) -> List[StoredObject]:
        # S3 lists ascending, so read every page and keep the newest keys.
        objects = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket):
                for entry in page.get("Contents", []):
                    objects.append(
                        StoredObject(
                            name=entry["Key"],
                            last_modified=entry.get("LastModified"),
                            size=entry.get("Size"),
                        )
                    )
        except (BotoCoreError, ClientError) as e:
            log.error(f"S3 list failed: {e}")
            raise StorageTransportException(f"Failed to list objects in '{self.bucket}': {e}")

        objects.sort(key=lambda obj: obj.name, reverse=True)
        if len(objects) > self.list_limit:
            log.warning("Listing of %s truncated to %d of %d objects", self.bucket, self.list_limit, len(objects))
        return objects[: self.list_limit]

    def get_public_url(self, name: str) -> str:
        if self.public_url:
            base = self.public_url.rstrip("/")
        elif self.endpoint_url:
            base = f"{self.endpoint_url.rstrip('/')}/{self.bucket}"
        else:
            base = f"https://{self.bucket}.s3.{self.region}.amazonaws.com"
        return f"{base}/{quote(name)}"

    def upload(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        upsert: bool = False,
    ):
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "CacheControl": cache_control or self.cache_control,
        }
        if content_type:
            params["ContentType"] = content_type
        if not upsert:
            params["IfNoneMatch"] = "*"
        try:
            self.client.put_object(**params)
        except ClientError as e:
            if e.response["Error"]["Code"] in ("412", "PreconditionFailed", "409", "ConditionalRequestConflict"):
                log.warning("Upload of %s refused: key already exists", key)
                raise UploadConflictException(key)
            log.error(f"S3 upload failed: {e}")
            raise StorageTransportException(f"Failed to upload '{key}': {e}")
        except BotoCoreError as e:
            log.error(f"S3 upload failed: {e}")
            raise StorageTransportException(f"Failed to upload '{key}': {e}")
        log.debug("Uploaded s3://%s/%s", self.bucket, key)

    def remove(self, keys: Iterable[str]):
        keys = list(keys)
        if not keys:
            return
        try:
            resp = self.client.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": k} for k in keys], "Quiet": True},
            )
        except (BotoCoreError, ClientError) as e:
            log.error(f"S3 delete failed: {e}")
            raise StorageTransportException(f"Failed to delete {keys}: {e}")

        errors = resp.get("Errors", [])
        if errors:
            failed = ", ".join(f"{err.get('Key')} ({err.get('Code')})" for err in errors)
            log.error("S3 delete reported errors: %s", failed)
            raise StorageTransportException(f"Failed to delete: {failed}")
        log.debug("Deleted %s from s3://%s", keys, self.bucket)

    def close(self):
        self.client.close()
        log.info("Closed S3 client")

class UnavailableStorageGateway(StorageGateway):
    """Stands in for the bucket when no storage credentials are configured."""

    def list(self) -> List[StoredObject]:
        raise StorageUnavailableException()

    def get_public_url(self, name: str) -> str:
        raise StorageUnavailableException()

    def upload(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None,
        cache_control: Optional[str] = None,
        upsert: bool = False,
    ):
        raise StorageUnavailableException()

    def remove(self, keys: Iterable[str]):
        raise StorageUnavailableException()

def build_storage_gateway(settings: Settings) -> StorageGateway:
    if not settings.storage_access_key_id:
        log.warning("No storage credentials configured; gallery storage is unavailable")
        return UnavailableStorageGateway()
    return S3StorageGateway(settings)
