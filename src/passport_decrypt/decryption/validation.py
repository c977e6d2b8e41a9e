"""Argument and stream-capability checks run before any decryption work.

:func:`validate_request` applies the checks in a fixed order and returns the
first failure as an exception *instance* instead of raising it, so the order
itself can be inspected and tested. :func:`passport_decrypt.decryption.core.decrypt_file`
raises whatever comes back.

Order:

1. encrypted content present
2. credentials present
3. ``credentials.secret`` present
4. ``credentials.file_hash`` present
5. destination present
6. encrypted content readable
7. seekable encrypted content: non-empty and a multiple of the block size
8. destination writable
9. both credential fields are valid base64
10. decoded file hash is :data:`HASH_LEN` bytes
"""
from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import IO, Any, Union

from passport_decrypt.crypto.cbc import BLOCK_SIZE
from passport_decrypt.decryption.credentials import FileCredentials, decode_field
from passport_decrypt.errors import (
    IntegrityFailure,
    InvalidEncodingError,
    InvalidStreamError,
    NullArgumentError,
)

HASH_LEN = 32


@dataclass(frozen=True)
class ValidatedRequest:
    source: IO[bytes]
    destination: IO[bytes]
    secret: bytes = field(repr=False)
    file_hash: bytes = field(repr=False)
    seekable: bool


ValidationResult = Union[ValidatedRequest, Exception]


def _probe(stream: Any, capability: str, fallback: str | None = None) -> bool:
    probe = getattr(stream, capability, None)
    if callable(probe):
        try:
            return bool(probe())
        except (OSError, ValueError):
            return False
    return fallback is not None and callable(getattr(stream, fallback, None))


def is_readable(stream: Any) -> bool:
    return _probe(stream, "readable", fallback="read")


def is_writable(stream: Any) -> bool:
    return _probe(stream, "writable", fallback="write")


def is_seekable(stream: Any) -> bool:
    return _probe(stream, "seekable")


def total_length(stream: IO[bytes]) -> int:
    """Return the full length of a seekable stream, leaving its cursor untouched."""
    position = stream.tell()
    try:
        stream.seek(0, io.SEEK_END)
        return stream.tell()
    finally:
        stream.seek(position, io.SEEK_SET)


def validate_request(
    encrypted_content: IO[bytes] | None,
    credentials: FileCredentials | None,
    destination: IO[bytes] | None,
) -> ValidationResult:
    if encrypted_content is None:
        return NullArgumentError("encryptedContent")
    if credentials is None:
        return NullArgumentError("fileCredentials")
    if credentials.secret is None:
        return NullArgumentError("Secret")
    if credentials.file_hash is None:
        return NullArgumentError("FileHash")
    if destination is None:
        return NullArgumentError("destination")

    if not is_readable(encrypted_content):
        return InvalidStreamError("encryptedContent", "does not support reading")

    seekable = is_seekable(encrypted_content)
    if seekable:
        length = total_length(encrypted_content)
        if length == 0:
            return InvalidStreamError("encryptedContent", "is empty")
        if length % BLOCK_SIZE:
            return IntegrityFailure(f"Data length is not divisible by {BLOCK_SIZE}: {length}.")

    if not is_writable(destination):
        return InvalidStreamError("destination", "does not support writing")

    try:
        secret = decode_field(credentials.secret, "Secret")
        file_hash = decode_field(credentials.file_hash, "FileHash")
    except InvalidEncodingError as exc:
        return exc

    if len(file_hash) != HASH_LEN:
        return IntegrityFailure(f"Hash length is not {HASH_LEN}: {len(file_hash)}.")

    return ValidatedRequest(
        source=encrypted_content,
        destination=destination,
        secret=secret,
        file_hash=file_hash,
        seekable=seekable,
    )
