"""Service layer – mock object storage.

Nothing is written anywhere: the service only fabricates the filename,
path and public URL a real blob store would have returned.
"""

from __future__ import annotations

import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from pathlib import PurePath

from src.neon_upload.config import STORAGE_PREFIX, settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    """Location of a (pretend) stored upload."""
    server_filename: str
    pathname: str
    url: str


def file_extension(filename: str, content_type: str) -> str:
    """Return the extension (without dot) to keep on the server filename.

    Falls back to the extension registered for *content_type* and to an
    empty string when neither source has one.
    """
    suffix = PurePath(filename).suffix.lower().lstrip(".")
    if suffix:
        return suffix
    guessed = mimetypes.guess_extension(content_type) or ""
    return guessed.lstrip(".")


def generate_server_filename(filename: str, content_type: str) -> str:
    """``<epoch-ms>_<random>.<ext>``; the random part keeps names distinct
    even when two uploads land in the same millisecond."""
    timestamp = int(time.time() * 1000)
    random_id = uuid.uuid4().hex[:12]
    ext = file_extension(filename, content_type)
    stem = f"{timestamp}_{random_id}"
    return f"{stem}.{ext}" if ext else stem


def store(filename: str, content_type: str) -> StoredObject:
    """Fabricate a storage location for an upload."""
    server_filename = generate_server_filename(filename, content_type)
    pathname = f"{STORAGE_PREFIX}/{server_filename}"
    url = f"{settings.public_base_url.rstrip('/')}{pathname}"
    logger.debug("Mock-stored %s as %s", filename, server_filename)
    return StoredObject(server_filename=server_filename, pathname=pathname, url=url)
