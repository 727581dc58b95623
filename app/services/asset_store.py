"""
Asset Store
===========
Stores binary assets (posters, photos) outside the database and hands back
a stable reference (URL) that the entity keeps.

The database never owns the bytes: entities only hold the reference, and
replacing an asset supersedes the previous one. The superseded asset is only
removed once the new reference has been committed.
"""
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import urlparse
import logging
import os
import uuid

from fastapi import UploadFile

from app.config import settings
from app.exceptions import ValidationFailedError

logger = logging.getLogger(__name__)

MOVIES_CONTAINER = "movies"
ACTORS_CONTAINER = "actors"

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


@dataclass
class AssetUpload:
    """Raw upload content plus what the store needs to name it"""
    content: bytes
    extension: str
    content_type: Optional[str] = None

    @classmethod
    def from_upload(cls, upload: Optional[UploadFile], field: str = "file") -> Optional["AssetUpload"]:
        """
        Read an UploadFile; missing or empty uploads mean "no asset sent".
        Only image extensions are accepted since stored files are served
        from the app's own origin.
        """
        if upload is None or not upload.filename:
            return None
        extension = os.path.splitext(upload.filename)[1].lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationFailedError(
                f"Unsupported {field} file type",
                [{
                    "field": field,
                    "message": f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
                }],
            )
        content = upload.file.read()
        if not content:
            return None
        return cls(content=content, extension=extension, content_type=upload.content_type)


class AssetStore(Protocol):
    def store(self, content: bytes, extension: str, container: str,
              content_type: Optional[str] = None) -> str: ...

    def replace(self, content: bytes, extension: str, container: str,
                old_reference: Optional[str], content_type: Optional[str] = None) -> str: ...

    def delete(self, reference: Optional[str], container: str) -> None: ...


class LocalAssetStore:
    """
    Filesystem-backed asset store.
    Files live under <root>/<container>/<uuid><ext> and are served from base_url.
    """

    def __init__(self, root: str, base_url: str):
        self.root = root
        self.base_url = base_url.rstrip("/")

    def _path_for(self, reference: str, container: str) -> str:
        file_name = os.path.basename(urlparse(reference).path)
        return os.path.join(self.root, container, file_name)

    def store(self, content: bytes, extension: str, container: str,
              content_type: Optional[str] = None) -> str:
        directory = os.path.join(self.root, container)
        os.makedirs(directory, exist_ok=True)

        file_name = f"{uuid.uuid4().hex}{extension}"
        with open(os.path.join(directory, file_name), "wb") as f:
            f.write(content)

        logger.info(f"Stored asset {container}/{file_name} ({len(content)} bytes, {content_type})")
        return f"{self.base_url}/{container}/{file_name}"

    def replace(self, content: bytes, extension: str, container: str,
                old_reference: Optional[str], content_type: Optional[str] = None) -> str:
        # The superseded file stays until the caller's commit succeeds
        reference = self.store(content, extension, container, content_type)
        logger.info(f"Asset {old_reference} superseded by {reference}")
        return reference

    def delete(self, reference: Optional[str], container: str) -> None:
        if not reference:
            return
        path = self._path_for(reference, container)
        if os.path.exists(path):
            os.remove(path)
            logger.info(f"Deleted asset {path}")


def save_asset(store: AssetStore, upload: AssetUpload, container: str,
               current_reference: Optional[str] = None) -> str:
    """
    Store a new asset, or replace the current one when a reference exists.
    The caller discards current_reference after its commit succeeds.
    """
    if current_reference:
        return store.replace(
            upload.content, upload.extension, container, current_reference, upload.content_type
        )
    return store.store(upload.content, upload.extension, container, upload.content_type)


def discard_asset(store: AssetStore, reference: Optional[str], container: str) -> None:
    """Best-effort removal; a failure here only leaves an orphaned file"""
    if not reference:
        return
    try:
        store.delete(reference, container)
    except Exception as e:
        logger.warning(f"Could not remove asset {reference}: {str(e)}")


asset_store = LocalAssetStore(settings.ASSET_ROOT, settings.ASSET_BASE_URL)


# Dependency for FastAPI routes
def get_asset_store() -> AssetStore:
    return asset_store
