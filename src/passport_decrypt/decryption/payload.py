"""Padding removal and content hash verification over decrypted chunks."""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import IO, Iterable, Protocol

from cryptography.hazmat.primitives import hashes

from passport_decrypt.errors import IntegrityFailure

MIN_PADDING_LEN = 32
MAX_PADDING_LEN = 255

logger = logging.getLogger(__name__)


class ContentWriterProtocol(Protocol):
    def feed(self, data: bytes) -> None: ...


class _NullWriter:
    def feed(self, data: bytes) -> None:
        del data


@dataclass
class _StreamWriter:
    destination: IO[bytes]

    def feed(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = self.destination.write(view)
            # Raw streams may accept only part of the buffer.
            if written is None:
                raise BlockingIOError("destination would block")
            if written == 0:
                raise OSError("destination accepted no bytes")
            view = view[written:]


def _padding_is_valid(padding_len: int, available: int) -> bool:
    return MIN_PADDING_LEN <= padding_len <= MAX_PADDING_LEN and padding_len <= available


def strip_and_verify(
    chunks: Iterable[bytes],
    writer: ContentWriterProtocol,
    file_hash: bytes,
) -> int:
    """Drop the padding prefix, pass the content to ``writer`` and check its hash.

    The first decrypted byte gives the padding length (the prefix includes
    that byte). Everything after the prefix is written out and hashed with
    SHA-256 as it arrives; the digest is compared with ``file_hash`` once
    ``chunks`` is exhausted. Returns the number of content bytes written.
    """

    iterator = iter(chunks)
    head = bytearray()
    for chunk in iterator:
        head.extend(chunk)
        if len(head) > MAX_PADDING_LEN:
            break

    padding_len = head[0] if head else 0
    if not _padding_is_valid(padding_len, len(head)):
        raise IntegrityFailure(f"Data padding length is invalid: {padding_len}.")

    digest = hashes.Hash(hashes.SHA256())
    written = 0

    def emit(data: bytes) -> None:
        nonlocal written
        if not data:
            return
        digest.update(data)
        writer.feed(data)
        written += len(data)

    emit(bytes(head[padding_len:]))
    for chunk in iterator:
        emit(chunk)

    if not hmac.compare_digest(digest.finalize(), file_hash):
        logger.debug("Content hash mismatch after %d bytes", written)
        raise IntegrityFailure(f"Data hash mismatch at position {written}.")

    return written


__all__ = [
    "ContentWriterProtocol",
    "MAX_PADDING_LEN",
    "MIN_PADDING_LEN",
    "_NullWriter",
    "_StreamWriter",
    "strip_and_verify",
]
