"""Upload coordinator: one prepared payload, bounded delivery attempts."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .config import Settings
from .delivery_client import DeliveryClient
from .errors import (
    ApiGoneError,
    DeliveryError,
    UploadCancelledError,
    UploadRejectedError,
    UploadRetriesExhaustedError,
)
from .models import DeliveryOutcome, LogFileSet, UploadResult
from .preparer import LogDataPreparer

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_GONE = 410


class LogUploader:
    """Deliver the DNS and connection logs with bounded retries."""

    def __init__(
        self,
        client: DeliveryClient,
        api_key: str,
        retry_count: int = 3,
        retry_delay: float = 5.0,
        preparer: Optional[LogDataPreparer] = None,
        cancel_poll_interval: float = 0.05,
    ) -> None:
        if retry_count < 1:
            raise ValueError("retry_count must be at least 1")
        if retry_delay < 0:
            raise ValueError("retry_delay must not be negative")
        if cancel_poll_interval <= 0:
            raise ValueError("cancel_poll_interval must be positive")
        self.client = client
        self.api_key = api_key
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.preparer = preparer or LogDataPreparer()
        self.cancel_poll_interval = cancel_poll_interval

    @classmethod
    def from_settings(cls, settings: Settings, client: DeliveryClient) -> "LogUploader":
        return cls(
            client=client,
            api_key=settings.collector_api_key,
            retry_count=settings.upload_retry_count,
            retry_delay=settings.upload_retry_delay,
        )

    def upload_logs(
        self, files: LogFileSet, cancel: Optional[threading.Event] = None
    ) -> UploadResult:
        """Prepare the payload once and send it until it is accepted.

        Raises ``ApiGoneError`` as soon as the service answers 410, and
        ``UploadRetriesExhaustedError`` once every attempt failed.
        """
        cancel = cancel or threading.Event()
        if cancel.is_set():
            raise UploadCancelledError("before start", _cause(cancel))

        payload = self.preparer.prepare(files)

        last_error: Exception | None = None
        for attempt in range(1, self.retry_count + 1):
            if cancel.is_set():
                raise UploadCancelledError(f"before attempt {attempt}", _cause(cancel))

            outcome = self._send(payload, attempt, cancel)
            try:
                self._check(outcome)
            except ApiGoneError:
                logger.error("Collector returned 410 Gone on attempt %s; stopping uploads", attempt)
                raise
            except (DeliveryError, UploadRejectedError) as exc:
                last_error = exc
                logger.warning(
                    "Upload attempt %s/%s failed: %s", attempt, self.retry_count, exc
                )
                if cancel.wait(self.retry_delay):
                    raise UploadCancelledError(
                        f"while waiting after attempt {attempt}", _cause(cancel)
                    ) from exc
                continue

            logger.info(
                "Uploaded %d bytes on attempt %s/%s (%s)",
                len(payload),
                attempt,
                self.retry_count,
                outcome.status or outcome.status_code,
            )
            return UploadResult(
                attempts=attempt,
                payload_size=len(payload),
                status=outcome.status,
                message=outcome.message,
            )

        logger.error("Giving up after %s attempts: %s", self.retry_count, last_error)
        raise UploadRetriesExhaustedError(self.retry_count, last_error) from last_error

    def _send(self, payload: bytes, attempt: int, cancel: threading.Event) -> DeliveryOutcome:
        """Run one delivery call on a worker thread, returning early on cancellation.

        An abandoned call keeps running on its daemon thread until the client's
        own timeout ends it; its outcome is discarded.
        """
        result: dict[str, DeliveryOutcome] = {}
        finished = threading.Event()

        def _deliver() -> None:
            try:
                result["outcome"] = self.client.send(payload, self.api_key)
            except Exception as exc:
                result["outcome"] = DeliveryOutcome(error=exc)
            finally:
                finished.set()

        threading.Thread(
            target=_deliver, name=f"sensor-upload-attempt-{attempt}", daemon=True
        ).start()
        while not finished.wait(self.cancel_poll_interval):
            if cancel.is_set():
                logger.warning("Upload attempt %s abandoned: cancelled in flight", attempt)
                raise UploadCancelledError(f"during attempt {attempt}", _cause(cancel))
        return result["outcome"]

    @staticmethod
    def _check(outcome: DeliveryOutcome) -> None:
        if outcome.transport_failed:
            if isinstance(outcome.error, DeliveryError):
                raise outcome.error
            raise DeliveryError(f"delivery call failed: {outcome.error}") from outcome.error
        if outcome.status_code == STATUS_GONE:
            raise ApiGoneError(outcome.message)
        if outcome.status_code != STATUS_OK:
            raise UploadRejectedError(outcome.message, outcome.status_code)


def _cause(cancel: threading.Event) -> Optional[str]:
    return getattr(cancel, "cause", None)
