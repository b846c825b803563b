"""Utility helpers shared across modules."""

from __future__ import annotations

from hashlib import sha256


def sha256_hex(payload: bytes) -> str:
    """Convenience wrapper for hex digests."""
    return sha256(payload).hexdigest()


def describe_size(size: int) -> str:
    """Render a byte count for log lines."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KiB"
    return f"{size / (1024 * 1024):.1f} MiB"
