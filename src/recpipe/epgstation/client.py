"""EPGStation API client for listing, downloading and uploading recordings.

This module provides an async HTTP client built on httpx. Transfers stream
their bodies chunk by chunk and offer TransferProgress snapshots to a
caller-supplied sink without ever waiting on it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

import httpx
from pydantic import ValidationError

from recpipe.config.models import ServerConfig
from recpipe.domain.models import RecordId, TransferProgress, VideoFileId
from recpipe.epgstation.models import (
    Record,
    RecordedEndpointResponse,
    RecordedQuery,
    VideoFileProperty,
)
from recpipe.exceptions import (
    TransferConnectionError,
    TransferIOError,
    TransferProtocolError,
    TransferStatusError,
)
from recpipe.logging.context import operation_context
from recpipe.progress.channel import ProgressSink, try_deliver

logger = logging.getLogger(__name__)

RECORDED_PATH = "/api/recorded"
VIDEOS_PATH = "/api/videos"
UPLOAD_PATH = "/api/videos/upload"
UPLOAD_CONTENT_TYPE = "application/octet-stream"
# Download progress counts wire bytes against content-length
DOWNLOAD_HEADERS = {"Accept-Encoding": "identity"}


class _ProgressReader:
    """File wrapper that reports every chunk httpx reads for the request body."""

    def __init__(
        self,
        fileobj: BinaryIO,
        total: int,
        progress: ProgressSink[TransferProgress] | None,
    ) -> None:
        self._file = fileobj
        self._total = total
        self._progress = progress
        self.sent = 0

    def fileno(self) -> int:
        # httpx sizes the request body from the descriptor
        return self._file.fileno()

    def read(self, size: int = -1) -> bytes:
        chunk = self._file.read(size)
        if chunk:
            self.sent += len(chunk)
            try_deliver(self._progress, TransferProgress(self.sent, self._total))
        return chunk


class EPGStationClient:
    """Async HTTP client for the EPGStation recording server.

    Usable as an async context manager; the underlying httpx client is
    created lazily and closed on exit. Each call owns its own response and
    file handles, so calls may run concurrently.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Server URL, e.g. "http://localhost:8888".
            timeout: Connect/read timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: ServerConfig) -> EPGStationClient:
        """Create a client from the [server] configuration."""
        return cls(config.url, timeout=config.timeout_seconds)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> EPGStationClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if not response.is_success:
            raise TransferStatusError(
                response.status_code,
                f"{operation} failed: HTTP {response.status_code} "
                f"{response.reason_phrase}",
            )

    @staticmethod
    def _content_length(response: httpx.Response) -> int:
        """Declared body size of a download response.

        Raises:
            TransferProtocolError: If the header is missing or invalid.
        """
        header = response.headers.get("content-length")
        if header is None:
            raise TransferProtocolError(
                "Download response has no content-length header"
            )
        try:
            length = int(header)
        except ValueError as e:
            raise TransferProtocolError(
                f"Invalid content-length header: {header!r}"
            ) from e
        if length < 0:
            raise TransferProtocolError(f"Invalid content-length header: {header!r}")
        return length

    async def query_records(
        self,
        query: RecordedQuery,
        offset: int,
        limit: int,
    ) -> list[Record]:
        """List recordings matching a query.

        Args:
            query: Filter and sort criteria.
            offset: Number of records to skip.
            limit: Maximum number of records to return.

        Returns:
            Records in server-supplied order.

        Raises:
            TransferConnectionError: If the server cannot be reached.
            TransferStatusError: On a non-success status.
            TransferProtocolError: If the body is not a valid listing.
        """
        params = [
            *query.to_parameters(),
            ("offset", str(offset)),
            ("limit", str(limit)),
        ]
        client = self._get_client()
        try:
            response = await client.get(RECORDED_PATH, params=params)
        except httpx.TransportError as e:
            raise TransferConnectionError(f"Cannot reach recording server: {e}") from e
        except httpx.HTTPError as e:
            raise TransferProtocolError(f"Unreadable recordings response: {e}") from e

        self._raise_for_status(response, "Listing recordings")
        try:
            body = RecordedEndpointResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise TransferProtocolError(f"Malformed recordings response: {e}") from e

        logger.debug(
            "Fetched %d records (offset=%d, limit=%d)", len(body.records), offset, limit
        )
        return body.records

    async def iter_records(
        self,
        query: RecordedQuery,
        page_size: int = 100,
    ) -> AsyncIterator[Record]:
        """Iterate over every matching recording, one page at a time.

        Stops after the first page shorter than page_size.

        Raises:
            ValueError: If page_size is less than 1.
            TransferError: Any error from query_records().
        """
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        offset = 0
        while True:
            page = await self.query_records(query, offset, page_size)
            for record in page:
                yield record
            if len(page) < page_size:
                return
            offset += len(page)

    async def download_file(
        self,
        video_file_id: VideoFileId,
        target: Path,
        progress: ProgressSink[TransferProgress] | None = None,
    ) -> None:
        """Download a video file to a local path.

        The target is only created once the response has declared its size.
        A failure mid-stream leaves the partial file in place.

        Args:
            video_file_id: Server id of the file.
            target: Local destination (created or truncated).
            progress: Optional non-blocking sink for TransferProgress.

        Raises:
            TransferConnectionError: If the server cannot be reached.
            TransferStatusError: On a non-success status.
            TransferProtocolError: If content-length is missing or invalid.
            TransferIOError: If the body stream or the local write fails.
        """
        with operation_context("download", video_file_id):
            client = self._get_client()
            try:
                async with client.stream(
                    "GET",
                    f"{VIDEOS_PATH}/{video_file_id}",
                    headers=DOWNLOAD_HEADERS,
                ) as response:
                    self._raise_for_status(response, "Download")
                    total = self._content_length(response)
                    logger.info("Downloading %d bytes to %s", total, target)
                    received = await self._write_body(response, target, total, progress)
            except httpx.TransportError as e:
                raise TransferConnectionError(
                    f"Cannot reach recording server: {e}"
                ) from e

            if received != total:
                logger.warning(
                    "Received %d bytes but server declared %d", received, total
                )
            logger.info("Downloaded %s", target)

    @staticmethod
    async def _write_body(
        response: httpx.Response,
        target: Path,
        total: int,
        progress: ProgressSink[TransferProgress] | None,
    ) -> int:
        """Append each body chunk to target, reporting after every write.

        Returns:
            Number of bytes written.

        Raises:
            TransferIOError: If reading the body or writing the file fails.
        """
        received = 0
        try:
            with target.open("wb") as fh:
                async for chunk in response.aiter_raw():
                    await asyncio.to_thread(fh.write, chunk)
                    received += len(chunk)
                    try_deliver(progress, TransferProgress(received, total))
        except OSError as e:
            raise TransferIOError(f"Failed writing {target}: {e}") from e
        except httpx.HTTPError as e:
            raise TransferIOError(
                f"Download interrupted after {received} bytes: {e}"
            ) from e
        return received

    async def upload_file(
        self,
        local_path: Path,
        property: VideoFileProperty,
        record_id: RecordId,
        progress: ProgressSink[TransferProgress] | None = None,
    ) -> None:
        """Upload a local video file and attach it to a recording.

        Args:
            local_path: File to upload.
            property: Upload metadata.
            record_id: Recording to attach the file to.
            progress: Optional non-blocking sink for TransferProgress.

        Raises:
            TransferIOError: If the local file cannot be read.
            TransferConnectionError: If the server cannot be reached.
            TransferStatusError: On a non-success status.
            TransferProtocolError: If the response body cannot be read.
        """
        with operation_context("upload", record_id):
            try:
                fh = local_path.open("rb")
            except OSError as e:
                raise TransferIOError(f"Cannot open {local_path}: {e}") from e

            with fh:
                try:
                    total = local_path.stat().st_size
                except OSError as e:
                    raise TransferIOError(f"Cannot stat {local_path}: {e}") from e

                reader = _ProgressReader(fh, total, progress)
                files = {"file": (property.file_name, reader, UPLOAD_CONTENT_TYPE)}
                logger.info(
                    "Uploading %s (%d bytes) to record %s", local_path, total, record_id
                )
                client = self._get_client()
                try:
                    response = await client.post(
                        UPLOAD_PATH,
                        data=property.form_fields(record_id),
                        files=files,
                    )
                except httpx.TransportError as e:
                    raise TransferConnectionError(
                        f"Cannot reach recording server: {e}"
                    ) from e
                except OSError as e:
                    raise TransferIOError(f"Failed reading {local_path}: {e}") from e
                except httpx.HTTPError as e:
                    raise TransferProtocolError(
                        f"Unreadable upload response: {e}"
                    ) from e

            self._raise_for_status(response, "Upload")
            logger.info("Uploaded %s (%d bytes)", local_path, reader.sent)
