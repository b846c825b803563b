"""Turns the DNS and connection logs into the compressed upload payload."""

from __future__ import annotations

import base64
import logging
from pathlib import Path
from typing import Optional

from .compression import Compressor, zlib_compress
from .errors import CompressionError, LogReadError, SerializationError
from .models import CompressedEnvelope, LogFileSet
from .utils import describe_size, sha256_hex

logger = logging.getLogger(__name__)


class LogDataPreparer:
    """Read, compress, envelope and compress again.

    The payload is ``compress(json({"dns": b64(compress(dns)), "conn":
    b64(compress(conn))}))``. Base64 and JSON inflate the inner blobs, the
    outer pass wins most of that back before transmission.
    """

    def __init__(self, compressor: Compressor = zlib_compress) -> None:
        self.compressor = compressor

    def prepare(self, files: LogFileSet) -> bytes:
        """Build the payload, raising the first PreparationError encountered."""
        dns_data = self._read_dns(files.dns_path)
        conn_data = self._read_conn(files.conn_path)

        dns_compressed = self._compress(dns_data, "DNS data")
        conn_compressed = self._compress(conn_data, "connection data")

        envelope = CompressedEnvelope(
            dns=base64.b64encode(dns_compressed).decode("ascii"),
            conn=base64.b64encode(conn_compressed).decode("ascii"),
        )
        try:
            serialized = envelope.to_json().encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"failed to marshal combined data: {exc}") from exc

        payload = self._compress(serialized, "combined data")
        logger.debug(
            "Prepared payload: dns=%s conn=%s payload=%s sha256=%s",
            describe_size(len(dns_data)),
            describe_size(len(conn_data)),
            describe_size(len(payload)),
            sha256_hex(payload),
        )
        return payload

    @staticmethod
    def _read_dns(path: Optional[Path]) -> bytes:
        if path is None:
            logger.debug("No DNS log configured; sending empty DNS data")
            return b""
        try:
            return Path(path).read_bytes()
        except FileNotFoundError:
            logger.debug("DNS log %s not found; sending empty DNS data", path)
            return b""
        except OSError as exc:
            raise LogReadError(f"failed to read DNS log: {exc}") from exc

    @staticmethod
    def _read_conn(path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise LogReadError(f"failed to read connection log: {exc}") from exc

    def _compress(self, data: bytes, label: str) -> bytes:
        try:
            return self.compressor(data)
        except Exception as exc:
            raise CompressionError(f"failed to compress {label}: {exc}") from exc
