# app/core/storage_utils.py
import logging
import uuid

from app.core.config import get_settings
from app.core.supabase_client import supabase_admin

logger = logging.getLogger(__name__)


def _bucket_name() -> str:
    return get_settings().STORAGE_BUCKET


def upload_to_storage(path: str, file_bytes: bytes, content_type: str | None = None) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    If a file already exists at this path, it will be overwritten
    thanks to the 'upsert' option.

    Args:
        path: Full object path inside the bucket.
              Example: "designs/<user_id>/logo/<uuid>.png"
        file_bytes: File content in bytes.
        content_type: Optional MIME type stored with the object.

    Returns:
        Public URL to the uploaded file.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    options = {"upsert": "true"}
    if content_type:
        options["content-type"] = content_type

    bucket = supabase_admin().storage.from_(_bucket_name())
    bucket.upload(path, file_bytes, options)
    return bucket.get_public_url(path)


def delete_from_storage(path: str) -> None:
    """
    Delete a file from Supabase Storage by its object path.

    Example path (relative to bucket):
        'designs/<user_id>/logo/<uuid>.png'
    """
    # Supabase Python client expects a list of paths.
    supabase_admin().storage.from_(_bucket_name()).remove([path])


def extract_path_from_public_url(url: str) -> str | None:
    """
    Given a public URL, extract the object path relative to the bucket.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/nfc-designs/designs/u/logo.png
        -> 'designs/u/logo.png'
    """
    marker = f"/storage/v1/object/public/{_bucket_name()}/"
    idx = url.find(marker)
    if idx == -1:
        return None
    path = url[idx + len(marker) :]
    # get_public_url may append a trailing "?" or query string
    return path.split("?", 1)[0] or None


def delete_public_url(url: str) -> bool:
    """
    Best-effort delete of a file by its public URL.

    No-op if the URL does not belong to this bucket. Storage errors are
    logged and swallowed so that a failed cleanup never blocks the caller.

    Returns:
        True if a delete was issued successfully, False otherwise.
    """
    path = extract_path_from_public_url(url)
    if not path:
        return False
    try:
        delete_from_storage(path)
    except Exception:
        logger.warning("Could not delete superseded storage object %s", path, exc_info=True)
        return False
    return True


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"
