from __future__ import annotations

import io

import pytest

import passport_decrypt.decryption as public
from passport_decrypt.decryption import (
    BLOCK_SIZE,
    HASH_LEN,
    STREAM_CHUNK_SIZE,
    FileCredentials,
    check_file,
    decrypt_file,
    decrypt_file_bytes,
)


def test_public_names_resolve() -> None:
    for name in public.__all__:
        assert hasattr(public, name), name


def test_public_constants() -> None:
    assert BLOCK_SIZE == 16
    assert HASH_LEN == 32
    assert STREAM_CHUNK_SIZE % BLOCK_SIZE == 0


def test_public_round_trip(encrypt_file) -> None:
    sample = encrypt_file("top secret".encode("utf-8"))
    destination = io.BytesIO()

    decrypt_file(io.BytesIO(sample.ciphertext), sample.credentials, destination)

    assert destination.getvalue().decode("utf-8") == "top secret"
    assert decrypt_file_bytes(sample.ciphertext, sample.credentials) == sample.content
    assert check_file(io.BytesIO(sample.ciphertext), sample.credentials) == len(sample.content)


def test_credentials_repr_hides_secret() -> None:
    credentials = FileCredentials(secret="c2VjcmV0LXZhbHVl", file_hash="aGFzaA==")

    assert "c2VjcmV0LXZhbHVl" not in repr(credentials)


def test_decrypt_file_bytes_rejects_none() -> None:
    with pytest.raises(TypeError, match="encryptedContent"):
        decrypt_file_bytes(None, FileCredentials(secret="", file_hash=""))
