# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles client photos in Supabase Storage:
# - mapping public URLs <-> bucket keys
# - signed URLs for private objects
# - upload / remove
# - resolving a displayable avatar URL with a placeholder fallback
# - resolve_avatars: the same for many clients, concurrently
# =============================================================================

import asyncio
import logging
import time
from pathlib import Path
from typing import Iterable

from lib.supabase_client import SupabaseClient
from lib.validation import safe_file_name
from app.config import settings
from app.exceptions import StorageUploadError
from core.models.client import Client

logger = logging.getLogger(__name__)

# Storage bucket name
BUCKET_CLIENTS = settings.CLIENTS_BUCKET

# Bundled placeholder, served by the API under /assets
ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
FALLBACK_AVATAR_FILE = ASSETS_DIR / "avatar.svg"
FALLBACK_AVATAR = "/assets/avatar.svg"


def extract_storage_path(url_or_path: str | None, bucket_name: str = BUCKET_CLIENTS) -> str:
    """
    Get the bucket-relative key from a stored photo reference.

    Keys pass through unchanged. For URLs, the part after the public object
    marker is used, then the part after "/<bucket>/"; anything else gives "".

    Example:
        extract_storage_path(
            "https://host/storage/v1/object/public/clients_avatar/u1/123_x.png",
            "clients_avatar",
        )  # "u1/123_x.png"
    """
    if not url_or_path:
        return ""
    if not url_or_path.startswith("http"):
        return url_or_path

    marker = f"/storage/v1/object/public/{bucket_name}/"
    idx = url_or_path.find(marker)
    if idx != -1:
        return url_or_path[idx + len(marker):]

    parts = url_or_path.split(f"/{bucket_name}/")
    return parts[1] if len(parts) > 1 else ""


class StorageService:
    """
    Service for Supabase Storage operations on the client photo bucket.
    """

    @staticmethod
    def get_signed_url(path: str, expires_in: int | None = None) -> str:
        """
        Create a time-limited URL for a private object.

        Args:
            path: Key in the bucket
            expires_in: Lifetime in seconds (default: SIGNED_URL_TTL_SECONDS)

        Returns:
            Signed URL string

        Raises:
            Exception: Whatever the storage client raised, or ValueError when
                the response carries no URL
        """
        client = SupabaseClient.get_client()
        ttl = expires_in or settings.SIGNED_URL_TTL_SECONDS

        result = client.storage.from_(BUCKET_CLIENTS).create_signed_url(path, ttl)
        signed = (result or {}).get("signedURL") or (result or {}).get("signedUrl")
        if not signed:
            raise ValueError(f"No signed URL returned for {path}")
        return signed

    @staticmethod
    def resolve_client_image_url(foto_url: str | None, expires_in: int | None = None) -> str:
        """
        Turn a photo reference into something an <img> can load.

        - empty -> placeholder
        - absolute URL -> unchanged
        - storage key -> signed URL

        Any failure resolving the key returns the placeholder; this never raises.
        """
        if not foto_url:
            return FALLBACK_AVATAR
        if foto_url.startswith("http"):
            return foto_url

        try:
            return StorageService.get_signed_url(foto_url, expires_in) or FALLBACK_AVATAR
        except Exception as e:
            logger.warning(f"Could not sign avatar {foto_url}: {e}")
            return FALLBACK_AVATAR

    @staticmethod
    def upload_client_image(
        user_id: str,
        filename: str,
        content: bytes,
        content_type: str | None = None,
        prefix: str | None = None,
    ) -> str:
        """
        Upload a client photo.

        The key is "<prefix or user_id>/<epoch millis>_<safe filename>", so a
        new photo never overwrites the one it replaces.

        Args:
            user_id: Owner (default folder)
            filename: Original filename
            content: File bytes
            content_type: MIME type sent to storage
            prefix: Folder override (the client id when editing)

        Returns:
            Storage key of the uploaded file

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        path = f"{prefix or user_id}/{int(time.time() * 1000)}_{safe_file_name(filename)}"
        file_options = {"upsert": "true"}
        if content_type:
            file_options["content-type"] = content_type

        try:
            client.storage.from_(BUCKET_CLIENTS).upload(
                path=path,
                file=content,
                file_options=file_options,
            )
            logger.info(f"Uploaded client image: {path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def remove_file(path: str | None) -> None:
        """
        Delete a photo from the bucket.

        Empty paths are ignored. Errors propagate; callers that treat removal
        as best-effort catch them.
        """
        if not path:
            return
        client = SupabaseClient.get_client()
        client.storage.from_(BUCKET_CLIENTS).remove([path])
        logger.info(f"Deleted file from storage: {path}")


async def resolve_avatars(
    clients: Iterable[Client],
    concurrency: int | None = None,
    expires_in: int | None = None,
) -> dict[str, str]:
    """
    Resolve a displayable avatar URL for each client, concurrently.

    Each client is an independent task; a failing task only affects its own
    row, which gets the placeholder.

    Returns:
        {client_id: url}
    """
    semaphore = asyncio.Semaphore(concurrency or settings.AVATAR_CONCURRENCY)

    async def resolve_one(client: Client) -> tuple[str, str]:
        if not client.foto_url:
            return client.id, FALLBACK_AVATAR
        async with semaphore:
            try:
                url = await asyncio.to_thread(
                    StorageService.resolve_client_image_url, client.foto_url, expires_in
                )
            except Exception as e:
                logger.warning(f"Avatar resolution failed for client {client.id}: {e}")
                url = None
        return client.id, url or FALLBACK_AVATAR

    pairs = await asyncio.gather(*(resolve_one(c) for c in clients))
    return dict(pairs)
