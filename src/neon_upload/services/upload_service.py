"""Service layer – upload validation, preview encoding and response shaping."""

from __future__ import annotations

import asyncio
import base64
import logging
import random
from datetime import datetime, timezone

from src.neon_upload.config import (
    MEDIA_TYPES,
    SUPPORTED_MIME_TYPES,
    UPLOAD_ENDPOINT,
    settings,
)
from src.neon_upload.exceptions import UploadValidationError
from src.neon_upload.schemas.upload import CapabilitiesResponse, UploadResponse, UsageInfo
from src.neon_upload.services.storage_service import store

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def media_kind(content_type: str) -> str | None:
    """Map a MIME type to ``image`` / ``video`` / ``audio`` (``None`` if not allowed)."""
    for kind, mimes in MEDIA_TYPES.items():
        if content_type in mimes:
            return kind
    return None


def validate_upload(filename: str | None, content_type: str | None, size: int) -> str:
    """
    Check an upload against the allow-list and the per-kind size ceiling.

    Returns the media kind on success, raises ``UploadValidationError``
    otherwise.
    """
    if not filename:
        raise UploadValidationError("No file provided")

    kind = media_kind(content_type or "")
    if kind is None:
        raise UploadValidationError(
            f"File type '{content_type or 'unknown'}' is not supported",
            details="Supported types: " + ", ".join(SUPPORTED_MIME_TYPES),
        )

    limit = settings.max_sizes[kind]
    if size > limit:
        raise UploadValidationError(
            f"File size must be less than {limit // _MB}MB for {kind} files",
            details=f"Received {size} bytes",
        )
    return kind


def build_preview_url(content: bytes, content_type: str) -> str | None:
    """Inline *content* as a base64 data URL when it is under the preview threshold."""
    if len(content) >= settings.preview_max_size:
        return None
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


async def simulate_latency() -> None:
    """Sleep for the configured artificial upload delay, if any."""
    high = max(settings.upload_delay_min, settings.upload_delay_max)
    if high <= 0:
        return
    await asyncio.sleep(random.uniform(settings.upload_delay_min, high))


async def mock_upload(filename: str, content_type: str, content: bytes) -> UploadResponse:
    """Validate and "upload" a single file, returning its descriptor."""
    kind = validate_upload(filename, content_type, len(content))
    preview_url = build_preview_url(content, content_type)

    await simulate_latency()

    stored = store(filename, content_type)
    logger.info(
        "Accepted %s (%s, %d bytes) as %s",
        filename, content_type, len(content), stored.server_filename,
    )
    return UploadResponse(
        filename=filename,
        server_filename=stored.server_filename,
        url=stored.url,
        preview_url=preview_url,
        pathname=stored.pathname,
        size=len(content),
        content_type=content_type,
        file_type=kind,
        uploaded_at=datetime.now(timezone.utc),
    )


def capabilities() -> CapabilitiesResponse:
    """Static description of what the upload endpoint accepts."""
    return CapabilitiesResponse(
        message="Media Upload API (Preview Mode)",
        endpoint=UPLOAD_ENDPOINT,
        method="POST",
        content_type="multipart/form-data",
        supported_formats=list(SUPPORTED_MIME_TYPES),
        file_types={kind: list(mimes) for kind, mimes in MEDIA_TYPES.items()},
        max_file_size=f"{settings.max_upload_size // _MB}MB",
        max_file_sizes=dict(settings.max_sizes),
        preview_max_size=settings.preview_max_size,
        note="This is a preview version. Files are not persisted; "
             "the returned URL is a mock storage location.",
        usage=UsageInfo(
            description="Upload media files using FormData",
            example=(
                'const formData = new FormData(); formData.append("file", mediaFile); '
                f'fetch("{UPLOAD_ENDPOINT}", {{ method: "POST", body: formData }})'
            ),
        ),
    )
