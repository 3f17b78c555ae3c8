"""Custom exceptions for encode and transfer operations.

Every exception here is terminal for the operation that raised it: nothing
is retried internally and no partial-success result exists. Callers can
catch EncodeError or TransferError to handle a whole family at once.
"""

from __future__ import annotations


class EncodeError(Exception):
    """Base exception for transcode failures."""


class MediaProbeError(EncodeError):
    """Raised when a source file cannot be probed.

    Covers missing files, an unavailable ffprobe, timeouts and output that
    is not valid probe JSON. Always raised before the encoder is spawned.
    """


class StreamSelectionError(EncodeError):
    """Raised when probe data is inconsistent with stream selection.

    Attributes:
        stream_index: Index of the offending stream.
    """

    def __init__(self, stream_index: int, message: str) -> None:
        self.stream_index = stream_index
        super().__init__(message)


class MissingDurationError(EncodeError):
    """Raised when the probed duration is absent or unparsable."""


class EncoderSpawnError(EncodeError):
    """Raised when the encoder process cannot be started."""


class EncoderProcessError(EncodeError):
    """Raised when the encoder exits unsuccessfully.

    Attributes:
        returncode: Process exit status.
        stderr_tail: Last lines the encoder wrote to stderr.
    """

    def __init__(self, returncode: int, stderr_tail: list[str] | None = None) -> None:
        self.returncode = returncode
        self.stderr_tail = stderr_tail or []
        detail = self.stderr_tail[-1].strip() if self.stderr_tail else ""
        message = f"Encoder exited with status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class TransferError(Exception):
    """Base exception for recording server operations."""


class TransferConnectionError(TransferError):
    """Raised when the server cannot be reached or times out."""


class TransferStatusError(TransferError):
    """Raised when the server answers with a non-success status.

    Attributes:
        status_code: HTTP status code of the response.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)


class TransferProtocolError(TransferError):
    """Raised for responses that violate the expected API contract.

    Examples: a missing content-length header on a download, or a listing
    body that is not the expected JSON shape.
    """


class TransferIOError(TransferError):
    """Raised when reading or writing the local file or the body stream fails."""
