from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from sensor_uploader.models import DeliveryOutcome, LogFileSet


class FakeDeliveryClient:
    """Replays scripted outcomes and records every payload it was handed.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, outcomes: List[DeliveryOutcome]) -> None:
        self._outcomes = list(outcomes)
        self.calls: List[tuple[bytes, str]] = []

    def send(self, payload: bytes, credential: str) -> DeliveryOutcome:
        self.calls.append((payload, credential))
        if len(self._outcomes) > 1:
            return self._outcomes.pop(0)
        return self._outcomes[0]


def ok() -> DeliveryOutcome:
    return DeliveryOutcome(status="OK", status_code=200, message="stored")


def transport_error() -> DeliveryOutcome:
    return DeliveryOutcome(error=ConnectionError("connection reset by peer"))


@pytest.fixture
def log_files(tmp_path: Path) -> LogFileSet:
    dns = tmp_path / "dns.log"
    conn = tmp_path / "conn.log"
    dns.write_bytes(b"1700000000.1\tquery\texample.com\tA\n")
    conn.write_bytes(b"1700000000.2\t10.0.0.1\t443\ttcp\n")
    return LogFileSet(dns_path=dns, conn_path=conn)
