"""zlib helpers used for every compression stage of the payload."""

from __future__ import annotations

import zlib
from typing import Callable

Compressor = Callable[[bytes], bytes]


def zlib_compress(data: bytes) -> bytes:
    """Compress into the zlib stream format the collection service decodes."""
    return zlib.compress(data)


def zlib_decompress(data: bytes) -> bytes:
    """Inverse of ``zlib_compress``; raises ``zlib.error`` on corrupt input."""
    return zlib.decompress(data)
