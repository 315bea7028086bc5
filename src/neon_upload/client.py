"""Async client for the upload endpoint.

Mirrors the uploader page: unsupported files are dropped before any request
is made, every remaining file gets its own POST, all requests run
concurrently and the results come back in selection order.

    python -m src.neon_upload.client photo.png clip.mp4 --url http://localhost:8000
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import mimetypes
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from src.neon_upload.config import SUPPORTED_MIME_TYPES, UPLOAD_ENDPOINT

logger = logging.getLogger(__name__)

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]

# mimetypes guesses that differ from the names browsers send
_MIME_ALIASES = {"audio/x-wav": "audio/wav"}


@dataclass(frozen=True)
class LocalFile:
    """A file selected for upload."""
    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class UploadOutcome:
    """Result of one upload, tagged with the file's position in the selection."""
    index: int
    file: str
    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None


def filter_supported(files: Iterable[LocalFile]) -> list[LocalFile]:
    """Keep only files whose MIME type is on the allow-list, in order."""
    return [f for f in files if f.content_type in SUPPORTED_MIME_TYPES]


def load_local_file(path: str | Path) -> LocalFile:
    """Read *path* from disk and guess its MIME type from the name."""
    path = Path(path)
    content_type, _ = mimetypes.guess_type(path.name)
    content_type = content_type or "application/octet-stream"
    return LocalFile(
        name=path.name,
        content_type=_MIME_ALIASES.get(content_type, content_type),
        data=path.read_bytes(),
    )


def format_file_size(num_bytes: int) -> str:
    """Human readable size, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


class MediaUploader:
    """Posts files to ``/api/upload`` concurrently."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _upload_one(
        self, client: httpx.AsyncClient, file: LocalFile, index: int,
    ) -> UploadOutcome:
        try:
            response = await client.post(
                UPLOAD_ENDPOINT,
                files={"file": (file.name, file.data, file.content_type)},
            )
        except httpx.HTTPError as exc:
            logger.warning("Upload of %s failed: %s", file.name, exc)
            return UploadOutcome(index=index, file=file.name, success=False,
                                 error=str(exc) or type(exc).__name__)

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_success:
            return UploadOutcome(index=index, file=file.name, success=True, data=body)

        error = body.get("error") if isinstance(body, dict) else None
        return UploadOutcome(
            index=index,
            file=file.name,
            success=False,
            data=body if isinstance(body, dict) else None,
            error=error or "Unknown error",
        )

    async def upload_all(self, files: Sequence[LocalFile]) -> list[UploadOutcome]:
        """Upload every file at once; one failure never cancels the others."""
        if not files:
            return []

        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport,
        ) as client:
            outcomes = await asyncio.gather(
                *(self._upload_one(client, file, index) for index, file in enumerate(files))
            )
        return sorted(outcomes, key=lambda outcome: outcome.index)


# ──────────────────────────────────────────────
# Command line
# ──────────────────────────────────────────────
def _describe(outcome: UploadOutcome) -> str:
    if not outcome.success or outcome.data is None:
        return f"✗ {outcome.file}: upload failed: {outcome.error or 'Unknown error'}"
    data = outcome.data
    return (
        f"✓ {outcome.file} [{str(data.get('fileType', 'file')).upper()}] "
        f"{format_file_size(int(data.get('size', 0)))} | {data.get('contentType')} | "
        f"{data.get('url')}"
    )


async def run(paths: Sequence[str], base_url: str) -> int:
    selected = []
    unreadable = 0
    for path in paths:
        try:
            selected.append(load_local_file(path))
        except OSError as exc:
            unreadable += 1
            print(f"✗ {path}: cannot read file: {exc.strerror or exc}")

    files = filter_supported(selected)
    skipped = len(selected) - len(files)
    if skipped:
        logger.info("Skipped %d unsupported file(s)", skipped)
    if not files:
        print("No supported media files selected.")
        return 1

    outcomes = await MediaUploader(base_url).upload_all(files)
    for outcome in outcomes:
        print(_describe(outcome))

    urls = [o.data["url"] for o in outcomes if o.success and o.data]
    print(f"\n{len(urls)}/{len(outcomes)} uploaded")
    for url in urls:
        print(url)
    return 0 if len(urls) == len(outcomes) and not unreadable else 1


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Upload media files to the Neon Upload API.")
    parser.add_argument("files", nargs="+", help="image, video or audio files")
    parser.add_argument("--url", default="http://localhost:8000", help="API base URL")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    return asyncio.run(run(args.files, args.url))


if __name__ == "__main__":
    sys.exit(main())
