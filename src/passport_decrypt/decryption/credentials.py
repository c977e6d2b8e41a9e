"""File credentials and their base64 wire form."""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field

from passport_decrypt.errors import InvalidEncodingError


@dataclass(frozen=True)
class FileCredentials:
    """Credentials for one encrypted Passport file.

    Both fields hold the base64 strings exactly as delivered by the Bot API.
    """

    secret: str | None = field(default=None, repr=False)
    file_hash: str | None = None


def decode_field(value: str, field_name: str) -> bytes:
    """Strictly decode a base64 credential field."""
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidEncodingError(field_name) from exc
