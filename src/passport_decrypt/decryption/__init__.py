"""Public decryption API re-exported for external users.

The objects listed in ``__all__`` form the supported public surface.
Everything else in :mod:`passport_decrypt.decryption` is considered internal
and may change without notice.
"""
from __future__ import annotations

from passport_decrypt.crypto.cbc import BLOCK_SIZE, STREAM_CHUNK_SIZE
from passport_decrypt.crypto.kdf import DerivedKey, derive_file_key
from passport_decrypt.decryption.core import check_file, decrypt_file, decrypt_file_bytes
from passport_decrypt.decryption.credentials import FileCredentials
from passport_decrypt.decryption.payload import MAX_PADDING_LEN, MIN_PADDING_LEN
from passport_decrypt.decryption.validation import HASH_LEN, ValidatedRequest, validate_request

__all__ = [
    "BLOCK_SIZE",
    "DerivedKey",
    "FileCredentials",
    "HASH_LEN",
    "MAX_PADDING_LEN",
    "MIN_PADDING_LEN",
    "STREAM_CHUNK_SIZE",
    "ValidatedRequest",
    "check_file",
    "decrypt_file",
    "decrypt_file_bytes",
    "derive_file_key",
    "validate_request",
]
