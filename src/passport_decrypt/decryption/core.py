"""High-level operations for Passport file decryption."""
from __future__ import annotations

import io
import logging
from typing import IO

from passport_decrypt.crypto.cbc import STREAM_CHUNK_SIZE, decrypt_blocks, validate_chunk_size
from passport_decrypt.crypto.kdf import derive_file_key
from passport_decrypt.decryption.credentials import FileCredentials
from passport_decrypt.decryption.payload import (
    ContentWriterProtocol,
    _NullWriter,
    _StreamWriter,
    strip_and_verify,
)
from passport_decrypt.decryption.validation import ValidatedRequest, validate_request

logger = logging.getLogger(__name__)


def _run_pipeline(request: ValidatedRequest, writer: ContentWriterProtocol, chunk_size: int) -> int:
    logger.debug("Decrypting %s source", "seekable" if request.seekable else "non-seekable")
    with derive_file_key(request.secret, request.file_hash) as derived:
        plaintext = decrypt_blocks(request.source, derived.key, derived.iv, chunk_size=chunk_size)
        try:
            written = strip_and_verify(plaintext, writer, request.file_hash)
        finally:
            plaintext.close()
    logger.debug("Decrypted %d content bytes", written)
    return written


def _validated(
    encrypted_content: IO[bytes] | None,
    credentials: FileCredentials | None,
    destination: IO[bytes] | None,
) -> ValidatedRequest:
    result = validate_request(encrypted_content, credentials, destination)
    if isinstance(result, Exception):
        logger.debug("Rejected decryption request: %s", type(result).__name__)
        raise result
    return result


def decrypt_file(
    encrypted_content: IO[bytes] | None,
    credentials: FileCredentials | None,
    destination: IO[bytes] | None,
    *,
    chunk_size: int = STREAM_CHUNK_SIZE,
) -> None:
    """Decrypt a Passport file from ``encrypted_content`` into ``destination``.

    Reading starts at the current position of ``encrypted_content``; the
    stream is never rewound. Content is written as it is verified
    incrementally, so on an integrity failure ``destination`` may already hold
    part of the output. Neither stream is closed.

    Raises:
        NullArgumentError: a required argument or credential field is ``None``.
        InvalidStreamError: a stream lacks read/write support or is empty.
        InvalidEncodingError: a credential field is not valid base64.
        IntegrityFailure: bad length, hash size, padding or content hash.
        ValueError: a non-seekable source ended on a partial cipher block.
    """

    validate_chunk_size(chunk_size)
    request = _validated(encrypted_content, credentials, destination)
    _run_pipeline(request, _StreamWriter(request.destination), chunk_size)


def check_file(
    encrypted_content: IO[bytes] | None,
    credentials: FileCredentials | None,
    *,
    chunk_size: int = STREAM_CHUNK_SIZE,
) -> int:
    """Verify padding and content hash without keeping the plaintext.

    Returns the length of the decrypted content.
    """

    validate_chunk_size(chunk_size)
    request = _validated(encrypted_content, credentials, io.BytesIO())
    return _run_pipeline(request, _NullWriter(), chunk_size)


def decrypt_file_bytes(encrypted: bytes | None, credentials: FileCredentials | None) -> bytes:
    """Decrypt an in-memory Passport file and return its content."""

    destination = io.BytesIO()
    decrypt_file(
        None if encrypted is None else io.BytesIO(encrypted),
        credentials,
        destination,
    )
    return destination.getvalue()
