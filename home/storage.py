import logging
import os
import time
from collections import namedtuple
from django.conf import settings
from django.core.files.storage import default_storage
from vercel_blob import delete as del_, put

logger = logging.getLogger(__name__)

StoredFile = namedtuple("StoredFile", ["filename", "url"])


def timestamped_name(original_name):
    """`<epoch millis>-<basename>`, the stored name of every upload."""
    base = os.path.basename(original_name or "upload")
    return f"{int(time.time() * 1000)}-{base}"


def store_upload(uploaded_file, folder="uploads"):
    """
    Save an uploaded file and return its stored name and public URL.
    Goes to Vercel Blob when a token is configured, MEDIA_ROOT otherwise.
    """
    filename = timestamped_name(uploaded_file.name)

    if settings.VERCEL_BLOB_TOKEN:
        blob = put(f"{folder}/{filename}", uploaded_file.read(), options={'allowOverwrite': True})
        logger.info(f"Stored {filename} in blob storage")
        return StoredFile(filename, blob["url"])

    saved_path = default_storage.save(f"{folder}/{filename}", uploaded_file)
    logger.info(f"Stored {filename} at {saved_path}")
    # default_storage may rename on collision
    return StoredFile(os.path.basename(saved_path), settings.MEDIA_URL + saved_path)


def delete_stored(url):
    """Best-effort removal of a stored file; failures are logged only."""
    if not url:
        return
    try:
        if url.startswith(("http://", "https://")):
            del_(url)
        elif url.startswith(settings.MEDIA_URL):
            default_storage.delete(url[len(settings.MEDIA_URL):])
        else:
            logger.debug(f"Not a managed file URL, nothing to delete: {url}")
    except Exception as e:
        logger.warning(f"Failed to delete stored file {url}: {e}")
