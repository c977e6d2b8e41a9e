import base64
import hashlib
import io
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

from passport_decrypt.decryption import FileCredentials  # noqa: E402


@dataclass(frozen=True)
class EncryptedSample:
    ciphertext: bytes
    credentials: FileCredentials
    content: bytes
    padding_len: int


class NonSeekableStream(io.RawIOBase):
    """Read-only stream that cannot seek or report its length."""

    def __init__(self, data: bytes, max_read: int | None = None) -> None:
        self._inner = io.BytesIO(data)
        self._max_read = max_read

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[override]
        view = memoryview(buffer)
        if self._max_read is not None:
            view = view[: self._max_read]
        return self._inner.readinto(view)


def _aligned_padding(content_len: int, minimum: int) -> int:
    padding = minimum + (-(minimum + content_len)) % 16
    if padding > 255:
        padding -= 16
    return padding


def encrypt_passport_file(
    content: bytes,
    *,
    secret: bytes | None = None,
    padding_len: int = 32,
    hash_override: bytes | None = None,
) -> EncryptedSample:
    """Build a Passport-format encrypted file the way the Bot API delivers it."""

    secret = os.urandom(32) if secret is None else secret
    padding_len = _aligned_padding(len(content), padding_len)
    padding = bytes([padding_len]) + os.urandom(padding_len - 1)

    file_hash = hash_override if hash_override is not None else hashlib.sha256(content).digest()
    secret_hash = hashlib.sha512(secret + file_hash).digest()
    encryptor = Cipher(algorithms.AES(secret_hash[:32]), modes.CBC(secret_hash[32:48])).encryptor()
    ciphertext = encryptor.update(padding + content) + encryptor.finalize()

    credentials = FileCredentials(
        secret=base64.b64encode(secret).decode("ascii"),
        file_hash=base64.b64encode(file_hash).decode("ascii"),
    )
    return EncryptedSample(ciphertext, credentials, content, padding_len)


@pytest.fixture(scope="session")
def encrypt_file():
    return encrypt_passport_file


@pytest.fixture(scope="session")
def non_seekable():
    return NonSeekableStream
