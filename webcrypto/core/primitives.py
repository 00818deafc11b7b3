from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, NoReturn, assert_never, final

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa, utils
from cryptography.hazmat.primitives.serialization import load_der_private_key

from webcrypto.core.protocols import PrimitiveLibrary
from webcrypto.exceptions import OperationError

if TYPE_CHECKING:
    from webcrypto.core.protocols import RandomSource

__all__ = [
    "HASH_ALGORITHMS",
    "CryptographyPrimitives",
    "Pkcs1v15Padding",
    "PssPadding",
    "SignaturePadding",
]

logger = logging.getLogger(__name__)

HASH_ALGORITHMS: Final[dict[str, type[hashes.HashAlgorithm]]] = {
    "SHA-1": hashes.SHA1,
    "SHA-256": hashes.SHA256,
    "SHA-384": hashes.SHA384,
    "SHA-512": hashes.SHA512,
}


@final
@dataclass(frozen=True, slots=True)
class Pkcs1v15Padding:
    """RSASSA-PKCS1-v1_5 signature padding."""


@final
@dataclass(frozen=True, slots=True)
class PssPadding:
    """RSASSA-PSS signature padding with an explicit salt length."""

    salt_length: int


SignaturePadding = Pkcs1v15Padding | PssPadding


@final
class CryptographyPrimitives(PrimitiveLibrary):
    """Primitive library backed by pyca/cryptography.

    RSA primes and PSS salts come from OpenSSL's CSPRNG; the ``rng`` arguments
    are accepted to satisfy :class:`PrimitiveLibrary` but not consumed.
    """

    __slots__ = ()

    def generate_rsa_keypair(
        self,
        bits: int,
        exponent: int,
        rng: RandomSource,
    ) -> tuple[bytes, bytes]:
        """Generate an RSA key pair as (PKCS#8 DER, SPKI DER).

        The primes come from OpenSSL, not from ``rng``.
        """
        logger.debug("Generating %d-bit RSA key pair (e=%d)", bits, exponent)
        try:
            private_key = rsa.generate_private_key(
                public_exponent=exponent,
                key_size=bits,
            )
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            self._fail(f"RSA key generation failed: {e!s}", e)

        private_der = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return private_der, self._public_bytes(private_key)

    def public_key(self, private_der: bytes) -> bytes:
        """Derive the SPKI DER public key from a PKCS#8 DER private key."""
        return self._public_bytes(self._load_private_key(private_der))

    def hash(self, algorithm: str, data: bytes) -> bytes:
        """Digest data with the named hash."""
        digest = hashes.Hash(self._hash_algorithm(algorithm))
        digest.update(data)
        return digest.finalize()

    def sign(
        self,
        private_der: bytes,
        padding: SignaturePadding,
        hash_name: str,
        digest: bytes,
        rng: RandomSource,
    ) -> bytes:
        """Sign a digest produced by :meth:`hash` with the same hash.

        PSS salts come from OpenSSL, not from ``rng``.
        """
        private_key = self._load_private_key(private_der)
        hash_algorithm = self._hash_algorithm(hash_name)
        try:
            return private_key.sign(
                digest,
                self._padding(padding, hash_algorithm),
                utils.Prehashed(hash_algorithm),
            )
        except (ValueError, TypeError) as e:
            self._fail(f"Signing failed: {e!s}", e)

    def verify(
        self,
        private_der: bytes,
        padding: SignaturePadding,
        hash_name: str,
        digest: bytes,
        signature: bytes,
    ) -> bool:
        """Check a signature with the public half of the stored private key."""
        public_key = self._load_private_key(private_der).public_key()
        hash_algorithm = self._hash_algorithm(hash_name)
        try:
            public_key.verify(
                signature,
                digest,
                self._padding(padding, hash_algorithm),
                utils.Prehashed(hash_algorithm),
            )
        except InvalidSignature:
            return False
        except (ValueError, TypeError) as e:
            self._fail(f"Verification failed: {e!s}", e)
        return True

    @staticmethod
    def _padding(
        scheme: SignaturePadding,
        hash_algorithm: hashes.HashAlgorithm,
    ) -> padding.AsymmetricPadding:
        if isinstance(scheme, Pkcs1v15Padding):
            return padding.PKCS1v15()
        if isinstance(scheme, PssPadding):
            return padding.PSS(
                mgf=padding.MGF1(hash_algorithm),
                salt_length=scheme.salt_length,
            )
        assert_never(scheme)

    def _hash_algorithm(self, name: str) -> hashes.HashAlgorithm:
        try:
            return HASH_ALGORITHMS[name]()
        except KeyError as e:
            self._fail(f"Unknown hash algorithm: '{name}'", e)

    def _load_private_key(self, der: bytes) -> rsa.RSAPrivateKey:
        try:
            loaded = load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            self._fail(f"Failed to load private key: {e!s}", e)

        if not isinstance(loaded, rsa.RSAPrivateKey):
            msg = "Stored key is not an RSA private key"
            raise OperationError(msg)
        return loaded

    @staticmethod
    def _public_bytes(private_key: rsa.RSAPrivateKey) -> bytes:
        return private_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    @staticmethod
    def _fail(message: str, cause: Exception | None = None) -> NoReturn:
        """Uniform error handling for primitive failures."""
        raise OperationError(message) from cause
