"""Zeroable storage for derived key material.

Key and IV bytes live in a single bytearray that is mlock'ed where the
platform allows it and wiped when the decryption call ends.
"""
from __future__ import annotations

import ctypes
import ctypes.util
import logging
import platform

logger = logging.getLogger(__name__)

_libc: ctypes.CDLL | None = None

if platform.system() != "Windows":
    try:
        _libc_name = ctypes.util.find_library("c")
        if _libc_name:
            _libc = ctypes.CDLL(_libc_name, use_errno=True)
    except OSError:
        _libc = None


def mlock_available() -> bool:
    """Return True if mlock can be attempted on this platform."""
    return _libc is not None


def _address(buffer: bytearray) -> int:
    return ctypes.addressof((ctypes.c_char * len(buffer)).from_buffer(buffer))


class SecureBuffer:
    """Fixed-size buffer that is locked in memory when possible and zeroed on close.

    Usage::

        with SecureBuffer.from_bytes(material) as buf:
            use_key(buf.view(0, 32))
        # buffer is zeroed here
    """

    def __init__(self, size: int) -> None:
        self._buffer = bytearray(size)
        self._locked = False

        if _libc is not None and size:
            if _libc.mlock(_address(self._buffer), size) == 0:
                self._locked = True
            else:
                logger.debug("mlock failed (errno=%d), key material not locked", ctypes.get_errno())

    @classmethod
    def from_bytes(cls, data: bytes) -> SecureBuffer:
        secure = cls(len(data))
        secure._buffer[:] = data
        return secure

    def __enter__(self) -> SecureBuffer:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._buffer)

    def view(self, start: int, end: int) -> memoryview:
        """Return a zero-copy view over ``[start:end]``."""
        return memoryview(self._buffer)[start:end]

    def close(self) -> None:
        """Zero the buffer and release the memory lock."""
        secure_zeroize(self._buffer)
        if self._locked and _libc is not None:
            _libc.munlock(_address(self._buffer), len(self._buffer))
            self._locked = False

    @property
    def buffer(self) -> bytearray:
        return self._buffer


def secure_zeroize(data: bytearray | None) -> None:
    """Zero a bytearray in place."""
    if data is None:
        return
    for i in range(len(data)):
        data[i] = 0
