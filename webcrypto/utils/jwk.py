from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, Literal, NotRequired, TypedDict

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
)
from jwt.algorithms import HMACAlgorithm, RSAAlgorithm

from webcrypto.exceptions import NotSupportedError, OperationError
from webcrypto.models.algorithms import (
    AesKeyAlgorithm,
    HmacKeyAlgorithm,
    RsaHashedKeyAlgorithm,
)
from webcrypto.models.keys import KeyType

if TYPE_CHECKING:
    from webcrypto.models.algorithms import KeyAlgorithm
    from webcrypto.models.keys import CryptoKey

__all__ = ["Jwk", "jwk_algorithm", "to_jwk"]


class Jwk(TypedDict):
    """JSON Web Key (JWK) representation of an exported key."""

    kty: Literal["RSA", "oct"]
    alg: NotRequired[str]
    ext: bool
    key_ops: list[str]
    n: NotRequired[str]
    e: NotRequired[str]
    d: NotRequired[str]
    p: NotRequired[str]
    q: NotRequired[str]
    dp: NotRequired[str]
    dq: NotRequired[str]
    qi: NotRequired[str]
    k: NotRequired[str]


_HASH_SUFFIX: Final[dict[str, str]] = {
    "SHA-1": "1",
    "SHA-256": "256",
    "SHA-384": "384",
    "SHA-512": "512",
}
_RSA_PREFIX: Final[dict[str, str]] = {
    "RSASSA-PKCS1-v1_5": "RS",
    "RSA-PSS": "PS",
}
_AES_SUFFIX: Final[dict[str, str]] = {
    "AES-CTR": "CTR",
    "AES-CBC": "CBC",
    "AES-GCM": "GCM",
    "AES-KW": "KW",
}


def jwk_algorithm(algorithm: KeyAlgorithm) -> str | None:
    """Return the JOSE ``alg`` value for a stored algorithm.

    HMAC over SHA-1 has no registered JOSE name and yields ``None``.
    """
    if isinstance(algorithm, RsaHashedKeyAlgorithm):
        suffix = _HASH_SUFFIX[algorithm.hash]
        if algorithm.name == "RSA-OAEP":
            return "RSA-OAEP" if suffix == "1" else f"RSA-OAEP-{suffix}"
        return f"{_RSA_PREFIX[algorithm.name]}{suffix}"
    if isinstance(algorithm, AesKeyAlgorithm):
        return f"A{algorithm.length}{_AES_SUFFIX[algorithm.name]}"
    if isinstance(algorithm, HmacKeyAlgorithm):
        suffix = _HASH_SUFFIX[algorithm.hash]
        return None if suffix == "1" else f"HS{suffix}"

    msg = f"JWK export is not supported for {algorithm.name}"
    raise NotSupportedError(msg)


def to_jwk(key: CryptoKey[Any], material: bytes) -> Jwk:
    """Render key material as a JWK.

    ``material`` is the raw secret for secret keys, PKCS#8 DER for private
    keys and SPKI DER for public keys.
    """
    alg = jwk_algorithm(key.algorithm)

    if isinstance(key.algorithm, RsaHashedKeyAlgorithm):
        members = _rsa_members(material, private=key.type is KeyType.PRIVATE)
    else:
        members = HMACAlgorithm.to_jwk(material, as_dict=True)

    jwk: Jwk = {
        **members,  # type: ignore[typeddict-item]
        "ext": key.extractable,
        "key_ops": sorted(str(usage) for usage in key.usages),
    }
    if alg is not None:
        jwk["alg"] = alg
    return jwk


def _rsa_members(der: bytes, *, private: bool) -> dict[str, Any]:
    try:
        if private:
            loaded = load_der_private_key(der, password=None)
        else:
            loaded = load_der_public_key(der)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        msg = f"Failed to load RSA key for JWK export: {e!s}"
        raise OperationError(msg) from e

    if not isinstance(loaded, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        msg = "Stored key is not an RSA key"
        raise OperationError(msg)
    return RSAAlgorithm.to_jwk(loaded, as_dict=True)
