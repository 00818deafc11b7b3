from __future__ import annotations

import hmac
import logging
import threading
from typing import final

from webcrypto.core.protocols import KeyStorage
from webcrypto.exceptions import StorageError

__all__ = ["InMemoryVault", "KeyMaterial"]

logger = logging.getLogger(__name__)


@final
class KeyMaterial:
    """Opaque wrapper around raw key bytes.

    The bytes are only handed out through :meth:`reveal`, which is meant for
    storage backends and the operation engine. ``repr`` never shows them and
    equality is checked in constant time.
    """

    __slots__ = ("_data",)

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)

    def reveal(self) -> bytes:
        """Return the raw key bytes."""
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"KeyMaterial(<{len(self._data)} bytes redacted>)"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, KeyMaterial):
            other_bytes = other._data
        elif isinstance(other, (bytes, bytearray, memoryview)):
            other_bytes = bytes(other)
        else:
            return NotImplemented
        return hmac.compare_digest(self._data, other_bytes)

    __hash__ = None  # type: ignore[assignment]


@final
class InMemoryVault(KeyStorage[int]):
    """List-backed key storage where the handle is the list index."""

    __slots__ = ("_capacity", "_lock", "_materials")

    def __init__(self, capacity: int | None = None) -> None:
        """Initialize an empty vault, optionally bounded to ``capacity`` keys."""
        self._materials: list[KeyMaterial] = []
        self._capacity = capacity
        self._lock = threading.Lock()

    def store(self, material: KeyMaterial) -> int:
        """Append material and return its index."""
        with self._lock:
            if self._capacity is not None and len(self._materials) >= self._capacity:
                msg = f"Vault is full ({self._capacity} keys)"
                raise StorageError(msg)
            self._materials.append(material)
            handle = len(self._materials) - 1

        logger.debug("Stored key material under handle %d", handle)
        return handle

    def get(self, handle: int) -> KeyMaterial | None:
        """Return the material for ``handle`` or ``None``."""
        with self._lock:
            if 0 <= handle < len(self._materials):
                return self._materials[handle]
        return None

    def __len__(self) -> int:
        return len(self._materials)
