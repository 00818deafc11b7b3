from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Generic, final

from webcrypto.core.protocols import HandleT

if TYPE_CHECKING:
    from webcrypto.models.algorithms import KeyAlgorithm

__all__ = ["CryptoKey", "CryptoKeyPair", "KeyType", "KeyUsage", "usage_set"]


class KeyUsage(StrEnum):
    """Operations a key may be used for."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    SIGN = "sign"
    VERIFY = "verify"
    WRAP_KEY = "wrapKey"
    UNWRAP_KEY = "unwrapKey"
    DERIVE_KEY = "deriveKey"
    DERIVE_BITS = "deriveBits"


class KeyType(StrEnum):
    """Role of a key."""

    PUBLIC = "public"
    PRIVATE = "private"
    SECRET = "secret"


def usage_set(usages: Iterable[KeyUsage | str]) -> frozenset[KeyUsage]:
    """Coerce usage names or members into a frozen set.

    Raises ``ValueError`` for a name outside :class:`KeyUsage`.
    """
    return frozenset(KeyUsage(usage) for usage in usages)


@final
@dataclass(frozen=True, slots=True)
class CryptoKey(Generic[HandleT]):
    """Public metadata of a key plus the storage handle of its material.

    Attributes:
        type: Whether the key is public, private or secret
        extractable: Whether the material may be exported
        algorithm: Stored algorithm the key was generated for
        usages: Operations the key is allowed to take part in
        handle: Storage backend token for the key material
    """

    type: KeyType
    extractable: bool
    algorithm: KeyAlgorithm
    usages: frozenset[KeyUsage]
    handle: HandleT = field(repr=False)

    def allows(self, usage: KeyUsage) -> bool:
        """Check whether ``usage`` was granted at generation time."""
        return usage in self.usages


@final
@dataclass(frozen=True, slots=True)
class CryptoKeyPair(Generic[HandleT]):
    """Private and public halves of an asymmetric key."""

    private_key: CryptoKey[HandleT]
    public_key: CryptoKey[HandleT]
