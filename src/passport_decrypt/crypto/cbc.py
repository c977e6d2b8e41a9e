"""Streaming AES-256-CBC decryption."""

from __future__ import annotations

import logging
from typing import IO, Iterator

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

BLOCK_SIZE = 16
STREAM_CHUNK_SIZE = 1024 * 64

logger = logging.getLogger(__name__)


def validate_chunk_size(chunk_size: int) -> int:
    if chunk_size <= 0 or chunk_size % BLOCK_SIZE:
        raise ValueError(f"chunk_size must be a positive multiple of {BLOCK_SIZE}, got {chunk_size}")
    return chunk_size


def decrypt_blocks(
    source: IO[bytes],
    key: bytes | memoryview,
    iv: bytes | memoryview,
    *,
    chunk_size: int = STREAM_CHUNK_SIZE,
) -> Iterator[bytes]:
    """Yield plaintext for ``source`` read from its current position.

    No padding scheme is removed here. A source that ends on a partial block
    makes the decryptor's ``finalize`` raise :class:`ValueError`, which is
    left to propagate.
    """

    validate_chunk_size(chunk_size)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()

    consumed = 0
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        consumed += len(chunk)
        plaintext = decryptor.update(chunk)
        if plaintext:
            yield plaintext

    logger.debug("Read %d encrypted bytes", consumed)
    final_chunk = decryptor.finalize()
    if final_chunk:
        yield final_chunk
