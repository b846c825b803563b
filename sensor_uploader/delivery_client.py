"""Collection service client."""

from __future__ import annotations

import logging
from typing import Protocol

import requests

from .config import Settings
from .errors import DeliveryError
from .models import DeliveryOutcome

logger = logging.getLogger(__name__)


class DeliveryClient(Protocol):
    """Anything that can hand a payload to the collection service.

    Implementations report transport trouble through ``DeliveryOutcome.error``
    instead of raising.
    """

    def send(self, payload: bytes, credential: str) -> DeliveryOutcome: ...


class CollectorClient:
    """Post compressed log payloads to the collection service over HTTPS."""

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.endpoint = settings.upload_endpoint

    def send(self, payload: bytes, credential: str) -> DeliveryOutcome:
        """Upload one payload and report what the service said about it."""
        headers = {
            "Authorization": f"Token {credential}",
            "Content-Type": "application/octet-stream",
        }

        logger.debug("Posting %d bytes to %s", len(payload), self.endpoint)
        try:
            response = self.session.post(
                self.endpoint,
                headers=headers,
                data=payload,
                timeout=self.settings.collector_timeout,
            )
        except requests.RequestException as exc:
            logger.debug("Collector request failed: %s", exc)
            return DeliveryOutcome(error=DeliveryError(f"request to collector failed: {exc}"))

        return self._to_outcome(response)

    @classmethod
    def _to_outcome(cls, response) -> DeliveryOutcome:
        payload = cls._parse_response_body(response)
        if isinstance(payload, dict) and payload.get("status_code") is not None:
            try:
                status_code = int(payload["status_code"])
            except (TypeError, ValueError):
                status_code = response.status_code
            return DeliveryOutcome(
                status=str(payload.get("status") or response.reason or ""),
                status_code=status_code,
                message=str(payload.get("message") or ""),
            )

        message = payload.get("message", "") if isinstance(payload, dict) else payload
        return DeliveryOutcome(
            status=response.reason or "",
            status_code=response.status_code,
            message=str(message).strip(),
        )

    @staticmethod
    def _parse_response_body(response) -> dict | str:
        try:
            return response.json()
        except ValueError:
            return response.text
