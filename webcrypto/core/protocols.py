from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .primitives import SignaturePadding
    from .storage import KeyMaterial

__all__ = ("HandleT", "KeyStorage", "PrimitiveLibrary", "RandomSource")

HandleT = TypeVar("HandleT")


@runtime_checkable
class RandomSource(Protocol):
    """Protocol for the injected randomness source."""

    def randbytes(self, n: int) -> bytes:
        """Return ``n`` random bytes."""
        ...


@runtime_checkable
class KeyStorage(Protocol[HandleT]):
    """Protocol for handle-indexed key material storage.

    A handle is only meaningful to the instance that issued it. Implementations
    must either keep every stored material or raise; silently dropping input is
    not allowed.
    """

    def store(self, material: KeyMaterial) -> HandleT:
        """Store material and return a fresh handle for it."""
        ...

    def get(self, handle: HandleT) -> KeyMaterial | None:
        """Look up material by handle, ``None`` when unknown or evicted."""
        ...


@runtime_checkable
class PrimitiveLibrary(Protocol):
    """Protocol for the low-level cryptographic primitives."""

    def generate_rsa_keypair(
        self,
        bits: int,
        exponent: int,
        rng: RandomSource,
    ) -> tuple[bytes, bytes]:
        """Generate an RSA key pair, returned as (PKCS#8 DER, SPKI DER)."""
        ...

    def public_key(self, private_der: bytes) -> bytes:
        """Derive the SPKI DER public key from a PKCS#8 DER private key."""
        ...

    def hash(self, algorithm: str, data: bytes) -> bytes:
        """Digest data with the named hash."""
        ...

    def sign(
        self,
        private_der: bytes,
        padding: SignaturePadding,
        hash_name: str,
        digest: bytes,
        rng: RandomSource,
    ) -> bytes:
        """Sign a precomputed digest."""
        ...

    def verify(
        self,
        private_der: bytes,
        padding: SignaturePadding,
        hash_name: str,
        digest: bytes,
        signature: bytes,
    ) -> bool:
        """Check a signature over a precomputed digest."""
        ...
