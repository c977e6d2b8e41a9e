"""Key derivation for Passport file payloads."""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes

from passport_decrypt.crypto.secure_memory import SecureBuffer

KEY_LEN = 32
IV_LEN = 16


class DerivedKey:
    """AES-256 key and CBC IV for one decryption call.

    Both values are views into one :class:`SecureBuffer`; :meth:`close` wipes
    them. Use as a context manager so the material is cleared on any exit.
    """

    def __init__(self, material: bytes) -> None:
        if len(material) < KEY_LEN + IV_LEN:
            raise ValueError(f"Key material must be at least {KEY_LEN + IV_LEN} bytes, got {len(material)}")
        self._material = SecureBuffer.from_bytes(material[: KEY_LEN + IV_LEN])

    @property
    def key(self) -> memoryview:
        return self._material.view(0, KEY_LEN)

    @property
    def iv(self) -> memoryview:
        return self._material.view(KEY_LEN, KEY_LEN + IV_LEN)

    def close(self) -> None:
        self._material.close()

    def __enter__(self) -> DerivedKey:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return "DerivedKey(key=<redacted>, iv=<redacted>)"


def derive_file_key(secret: bytes, file_hash: bytes) -> DerivedKey:
    """Derive the AES-256 key and CBC IV from a file secret and its hash.

    ``SHA512(secret + file_hash)`` is split into the first 32 bytes (key) and
    the following 16 bytes (IV).
    """

    digest = hashes.Hash(hashes.SHA512())
    digest.update(secret)
    digest.update(file_hash)
    return DerivedKey(digest.finalize())
