"""Error hierarchy for the upload pipeline.

Local input problems, cancellation, per-attempt delivery failures and the
terminal 410 signal from the collection service are kept apart so callers
can decide whether to retry, stop or shut down.
"""

from __future__ import annotations

from typing import Optional


class UploadError(Exception):
    """Base error for everything raised by the uploader."""


class PreparationError(UploadError):
    """The payload could not be built from the local log files."""

    def __str__(self) -> str:
        return f"failed to prepare log data: {super().__str__()}"


class LogReadError(PreparationError):
    """A log file could not be read."""


class CompressionError(PreparationError):
    """The compressor failed on one of the payload stages."""


class SerializationError(PreparationError):
    """The envelope could not be serialized to JSON."""


class UploadCancelledError(UploadError):
    """The caller asked the upload to stop."""

    def __init__(self, stage: str, cause: Optional[str] = None) -> None:
        text = f"upload cancelled {stage}"
        if cause:
            text = f"{text} ({cause})"
        super().__init__(text)
        self.stage = stage
        self.cause = cause


class DeliveryError(UploadError):
    """The remote call itself could not complete."""


class UploadRejectedError(UploadError):
    """The service answered with a status code other than 200 or 410."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(f"upload failed: {message} (code: {status_code})")
        self.message = message
        self.status_code = status_code


class ApiGoneError(UploadError):
    """The service returned 410 Gone: stop sending data and terminate."""

    def __init__(self, message: str = "") -> None:
        text = "API returned 410 Gone: sensor should stop sending data and terminate"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)
        self.message = message


class UploadRetriesExhaustedError(UploadError):
    """Every attempt failed with a retryable error."""

    def __init__(self, attempts: int, last_error: Optional[Exception]) -> None:
        super().__init__(f"failed to upload after {attempts} retries: {last_error}")
        self.attempts = attempts
        self.last_error = last_error
