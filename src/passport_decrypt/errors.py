"""Custom exceptions for Passport file decryption."""

from __future__ import annotations

import binascii


class PassportDecryptError(Exception):
    """Base exception for Passport file decryption."""


class NullArgumentError(PassportDecryptError, TypeError):
    """A required argument was not supplied."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Value cannot be null. (Parameter '{field}')")


class InvalidStreamError(PassportDecryptError, ValueError):
    """Stream lacks a capability the operation needs, or is empty."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Stream {reason}. (Parameter '{field}')")


class IntegrityFailure(PassportDecryptError):
    """Encrypted data or its credentials failed an integrity check."""


class InvalidEncodingError(binascii.Error):
    """Credential field is not valid base64.

    Not a :class:`PassportDecryptError`; raised from the underlying decoding
    error with the offending field attached.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid base64 encoding. (Parameter '{field}')")
