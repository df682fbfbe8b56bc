"""Content fingerprints for imported documents.

The digest identifies a source PDF by content so a re-import of the same
file can be recognised.  It is an identity check, not an authentication
mechanism.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO

_CHUNK_SIZE = 1024 * 1024


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def sha256_stream(stream: BinaryIO, chunk_size: int = _CHUNK_SIZE) -> str:
    """Hash a binary stream to exhaustion and return the hex digest.

    Read errors propagate unchanged; no partial digest is ever returned.
    """
    digest = hashlib.sha256()
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        digest.update(chunk)
    return digest.hexdigest()


def sha256_file(path: Path | str) -> str:
    """Return the SHA-256 hex digest of a file on disk."""
    with open(path, "rb") as fh:
        return sha256_stream(fh)
