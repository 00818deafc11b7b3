from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

__all__ = [
    "AES_ALGORITHMS",
    "EC_ALGORITHMS",
    "HASH_ALGORITHMS",
    "HMAC_ALGORITHMS",
    "RSA_HASHED_ALGORITHMS",
    "AesKeyAlgorithm",
    "AesKeyGenParams",
    "Algorithm",
    "EcKeyAlgorithm",
    "EcKeyGenParams",
    "EcdsaParams",
    "HmacKeyAlgorithm",
    "HmacKeyGenParams",
    "KeyAlgorithm",
    "KeyGenParams",
    "RsaHashedKeyAlgorithm",
    "RsaHashedKeyGenParams",
    "RsaPssParams",
    "SignParams",
    "normalize_name",
]

RSA_HASHED_ALGORITHMS: Final[tuple[str, ...]] = (
    "RSASSA-PKCS1-v1_5",
    "RSA-PSS",
    "RSA-OAEP",
)
AES_ALGORITHMS: Final[tuple[str, ...]] = ("AES-CTR", "AES-CBC", "AES-GCM", "AES-KW")
HMAC_ALGORITHMS: Final[tuple[str, ...]] = ("HMAC",)
EC_ALGORITHMS: Final[tuple[str, ...]] = ("ECDSA", "ECDH")
HASH_ALGORITHMS: Final[tuple[str, ...]] = ("SHA-1", "SHA-256", "SHA-384", "SHA-512")

_CANONICAL_NAMES: Final[dict[str, str]] = {
    name.upper(): name
    for name in (
        *RSA_HASHED_ALGORITHMS,
        *AES_ALGORITHMS,
        *HMAC_ALGORITHMS,
        *EC_ALGORITHMS,
        *HASH_ALGORITHMS,
    )
}


def normalize_name(name: str) -> str:
    """Map a case-insensitive algorithm name to its registered spelling.

    Unknown names are returned untouched so the caller can reject them.
    """
    return _CANONICAL_NAMES.get(name.upper(), name)


class _Descriptor(BaseModel):
    """Common shape of every algorithm dictionary.

    Field names accept both the snake_case attribute and the WebCrypto
    camelCase key (``modulusLength``, ``publicExponent``, ``saltLength``...).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(..., description="Algorithm name used for dispatch")

    @field_validator("name")
    @classmethod
    def normalize_algorithm_name(cls, value: str) -> str:
        """Rewrite registered names to their canonical spelling."""
        return normalize_name(value)


class _HashedDescriptor(_Descriptor):
    hash: str = Field(..., description="Digest algorithm name, e.g. SHA-256")

    @field_validator("hash", mode="before")
    @classmethod
    def normalize_hash_name(cls, value: object) -> object:
        """Accept `{"name": ...}` dictionaries and canonicalize the name."""
        if isinstance(value, Mapping):
            value = value.get("name", value)
        return normalize_name(value) if isinstance(value, str) else value


class _RsaHashedDescriptor(_HashedDescriptor):
    modulus_length: int = Field(..., gt=0, description="Modulus size in bits")
    public_exponent: bytes = Field(..., description="Big-endian public exponent")

    @field_validator("public_exponent", mode="before")
    @classmethod
    def exponent_from_octets(cls, value: object) -> object:
        """Accept a sequence of octets such as `[0x01, 0x00, 0x01]`."""
        if isinstance(value, (list, tuple)):
            return bytes(value)
        return value

    @property
    def public_exponent_int(self) -> int:
        """Public exponent decoded as an integer."""
        return int.from_bytes(self.public_exponent, "big")


class RsaHashedKeyAlgorithm(_RsaHashedDescriptor):
    """Stored algorithm of an RSA key bound to a hash."""


class RsaHashedKeyGenParams(_RsaHashedDescriptor):
    """Generation parameters for RSASSA-PKCS1-v1_5, RSA-PSS and RSA-OAEP."""

    def to_key_algorithm(self) -> RsaHashedKeyAlgorithm:
        return RsaHashedKeyAlgorithm(
            name=self.name,
            hash=self.hash,
            modulus_length=self.modulus_length,
            public_exponent=self.public_exponent,
        )


class AesKeyAlgorithm(_Descriptor):
    """Stored algorithm of an AES key."""

    length: int = Field(..., gt=0, description="Key length in bits")


class AesKeyGenParams(_Descriptor):
    """Generation parameters for AES-CTR, AES-CBC, AES-GCM and AES-KW."""

    length: int = Field(..., gt=0, description="Key length in bits")

    def to_key_algorithm(self) -> AesKeyAlgorithm:
        return AesKeyAlgorithm(name=self.name, length=self.length)


class HmacKeyAlgorithm(_HashedDescriptor):
    """Stored algorithm of an HMAC key."""

    length: int = Field(..., gt=0, description="Key length in bits")


class HmacKeyGenParams(_HashedDescriptor):
    """Generation parameters for HMAC. The length has no default."""

    length: int = Field(..., gt=0, description="Key length in bits")

    def to_key_algorithm(self) -> HmacKeyAlgorithm:
        return HmacKeyAlgorithm(name=self.name, hash=self.hash, length=self.length)


class EcKeyAlgorithm(_Descriptor):
    """Stored algorithm of an elliptic-curve key."""

    named_curve: str = Field(..., description="Curve name, e.g. P-256")


class EcKeyGenParams(_Descriptor):
    """Generation parameters for ECDSA and ECDH."""

    named_curve: str = Field(..., description="Curve name, e.g. P-256")

    def to_key_algorithm(self) -> EcKeyAlgorithm:
        return EcKeyAlgorithm(name=self.name, named_curve=self.named_curve)


class Algorithm(_Descriptor):
    """Bare algorithm identifier, used for RSASSA-PKCS1-v1_5 signatures."""


class RsaPssParams(_Descriptor):
    """Signature parameters for RSA-PSS."""

    salt_length: int = Field(..., ge=0, description="Salt length in bytes")


class EcdsaParams(_HashedDescriptor):
    """Signature parameters for ECDSA."""


KeyGenParams = RsaHashedKeyGenParams | AesKeyGenParams | HmacKeyGenParams | EcKeyGenParams
KeyAlgorithm = RsaHashedKeyAlgorithm | AesKeyAlgorithm | HmacKeyAlgorithm | EcKeyAlgorithm
SignParams = Algorithm | RsaPssParams | EcdsaParams
