"""Typed containers shared across the upload pipeline."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class LogFileSet:
    """Paths of the two logs shipped in one upload."""

    conn_path: Path
    dns_path: Optional[Path] = None


@dataclass
class CompressedEnvelope:
    """Base64 text of the independently compressed DNS and connection logs."""

    dns: str
    conn: str

    def to_json(self) -> str:
        """Serialize with the exact field names the collection service expects."""
        return json.dumps({"dns": self.dns, "conn": self.conn}, separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str | bytes) -> "CompressedEnvelope":
        payload = json.loads(raw)
        return cls(dns=payload["dns"], conn=payload["conn"])


@dataclass
class DeliveryOutcome:
    """What a single delivery attempt produced."""

    status: str = ""
    status_code: int = 0
    message: str = ""
    error: Optional[Exception] = None

    @property
    def transport_failed(self) -> bool:
        return self.error is not None


@dataclass
class UploadResult:
    """Summary of a successful upload."""

    attempts: int
    payload_size: int
    status: str
    message: str


class CancelSignal(threading.Event):
    """Cancellation event that remembers why it was set."""

    def __init__(self) -> None:
        super().__init__()
        self.cause: Optional[str] = None

    def cancel(self, cause: str) -> None:
        if self.cause is None:
            self.cause = cause
        self.set()
