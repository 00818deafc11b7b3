from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final, Generic, NoReturn, assert_never, final

from pydantic import ValidationError

from webcrypto.core.primitives import (
    CryptographyPrimitives,
    Pkcs1v15Padding,
    PssPadding,
    SignaturePadding,
)
from webcrypto.core.protocols import HandleT
from webcrypto.core.storage import KeyMaterial
from webcrypto.exceptions import (
    AlgorithmNotImplementedError,
    InvalidAccessError,
    InvalidSyntaxError,
    KeyStorageConsistencyError,
    NotSupportedError,
    OperationError,
    WebCryptoError,
)
from webcrypto.models.algorithms import (
    AES_ALGORITHMS,
    EC_ALGORITHMS,
    HASH_ALGORITHMS,
    HMAC_ALGORITHMS,
    RSA_HASHED_ALGORITHMS,
    AesKeyAlgorithm,
    AesKeyGenParams,
    Algorithm,
    EcdsaParams,
    EcKeyGenParams,
    HmacKeyAlgorithm,
    HmacKeyGenParams,
    KeyGenParams,
    RsaHashedKeyAlgorithm,
    RsaHashedKeyGenParams,
    RsaPssParams,
    SignParams,
    normalize_name,
)
from webcrypto.models.keys import CryptoKey, CryptoKeyPair, KeyType, KeyUsage, usage_set
from webcrypto.utils.jwk import Jwk, to_jwk

if TYPE_CHECKING:
    from webcrypto.core.protocols import KeyStorage, PrimitiveLibrary, RandomSource

__all__ = ["KeyFormat", "SubtleCrypto"]

logger = logging.getLogger(__name__)

_SIGNING_HALVES: Final[tuple[frozenset[KeyUsage], frozenset[KeyUsage]]] = (
    frozenset({KeyUsage.SIGN}),
    frozenset({KeyUsage.VERIFY}),
)
_ENCRYPTION_HALVES: Final[tuple[frozenset[KeyUsage], frozenset[KeyUsage]]] = (
    frozenset({KeyUsage.DECRYPT, KeyUsage.UNWRAP_KEY}),
    frozenset({KeyUsage.ENCRYPT, KeyUsage.WRAP_KEY}),
)
# name -> (private key usages, public key usages)
_RSA_USAGES: Final[dict[str, tuple[frozenset[KeyUsage], frozenset[KeyUsage]]]] = {
    "RSASSA-PKCS1-v1_5": _SIGNING_HALVES,
    "RSA-PSS": _SIGNING_HALVES,
    "RSA-OAEP": _ENCRYPTION_HALVES,
}


class KeyFormat(StrEnum):
    """Serialization formats accepted by :meth:`SubtleCrypto.export_key`."""

    RAW = "raw"
    PKCS8 = "pkcs8"
    SPKI = "spki"
    JWK = "jwk"


@final
class SubtleCrypto(Generic[HandleT]):
    """Key generation, signing and verification over pluggable storage.

    The engine never keeps key bytes itself: generated material goes straight
    into the injected :class:`KeyStorage` and every returned
    :class:`CryptoKey` carries only the handle. The randomness source and the
    storage are used as given; sharing one engine across threads is only safe
    when both of them are.
    """

    __slots__ = ("_primitives", "_rng", "_storage")

    AES_KEY_LENGTHS: Final[tuple[int, ...]] = (128, 192, 256)

    def __init__(
        self,
        rng: RandomSource,
        storage: KeyStorage[HandleT],
        primitives: PrimitiveLibrary | None = None,
    ) -> None:
        self._rng = rng
        self._storage = storage
        self._primitives = primitives or CryptographyPrimitives()

    @property
    def rng(self) -> RandomSource:
        """Injected randomness source."""
        return self._rng

    @property
    def storage(self) -> KeyStorage[HandleT]:
        """Injected key storage backend."""
        return self._storage

    # Key generation

    def generate_key(
        self,
        algorithm: KeyGenParams | Mapping[str, Any],
        extractable: bool,
        usages: Iterable[KeyUsage | str],
    ) -> CryptoKey[HandleT] | CryptoKeyPair[HandleT]:
        """Generate a secret key or an asymmetric key pair.

        Every parameter and usage check runs before randomness is drawn or
        anything is written to storage.
        """
        params = self._key_gen_params(algorithm)
        requested = self._usage_set(usages)

        if isinstance(params, RsaHashedKeyGenParams):
            return self._generate_rsa(params, extractable, requested)
        if isinstance(params, AesKeyGenParams):
            return self._generate_aes(params, extractable, requested)
        if isinstance(params, HmacKeyGenParams):
            return self._generate_hmac(params, extractable, requested)
        if isinstance(params, EcKeyGenParams):
            return self._generate_ec(params)
        assert_never(params)

    def _generate_rsa(
        self,
        params: RsaHashedKeyGenParams,
        extractable: bool,
        usages: frozenset[KeyUsage],
    ) -> CryptoKeyPair[HandleT]:
        halves = _RSA_USAGES.get(params.name)
        if halves is None:
            self._unsupported(params.name)

        private_usages, public_usages = halves
        illegal = usages - (private_usages | public_usages)
        if illegal:
            self._handle_error(
                f"Usages {sorted(map(str, illegal))} are not allowed for {params.name}",
                InvalidSyntaxError,
            )
        self._check_hash(params.hash)

        private_der, _ = self._primitives.generate_rsa_keypair(
            params.modulus_length,
            params.public_exponent_int,
            self._rng,
        )
        handle = self._storage.store(KeyMaterial(private_der))
        logger.debug("Generated %s key pair under handle %r", params.name, handle)

        algorithm = params.to_key_algorithm()
        return CryptoKeyPair(
            private_key=CryptoKey(
                type=KeyType.PRIVATE,
                extractable=extractable,
                algorithm=algorithm,
                usages=usages & private_usages,
                handle=handle,
            ),
            public_key=CryptoKey(
                type=KeyType.PUBLIC,
                extractable=True,
                algorithm=algorithm,
                usages=usages & public_usages,
                handle=handle,
            ),
        )

    def _generate_aes(
        self,
        params: AesKeyGenParams,
        extractable: bool,
        usages: frozenset[KeyUsage],
    ) -> CryptoKey[HandleT]:
        if params.name not in AES_ALGORITHMS:
            self._unsupported(params.name)
        if params.length not in self.AES_KEY_LENGTHS:
            self._handle_error(
                f"AES key length must be one of {self.AES_KEY_LENGTHS}, "
                f"got {params.length}",
                OperationError,
            )
        return self._secret_key(
            params.length,
            params.to_key_algorithm(),
            extractable,
            usages,
        )

    def _generate_hmac(
        self,
        params: HmacKeyGenParams,
        extractable: bool,
        usages: frozenset[KeyUsage],
    ) -> CryptoKey[HandleT]:
        if params.name not in HMAC_ALGORITHMS:
            self._unsupported(params.name)
        self._check_hash(params.hash)
        if params.length % 8:
            self._handle_error(
                f"HMAC key length must be a multiple of 8, got {params.length}",
                OperationError,
            )
        return self._secret_key(
            params.length,
            params.to_key_algorithm(),
            extractable,
            usages,
        )

    def _generate_ec(self, params: EcKeyGenParams) -> NoReturn:
        if params.name in EC_ALGORITHMS:
            self._handle_error(
                f"{params.name} key generation is not implemented",
                AlgorithmNotImplementedError,
            )
        self._unsupported(params.name)

    def _secret_key(
        self,
        length: int,
        algorithm: AesKeyAlgorithm | HmacKeyAlgorithm,
        extractable: bool,
        usages: frozenset[KeyUsage],
    ) -> CryptoKey[HandleT]:
        material = KeyMaterial(self._rng.randbytes(length // 8))
        handle = self._storage.store(material)
        logger.debug("Generated %s secret key under handle %r", algorithm.name, handle)
        return CryptoKey(
            type=KeyType.SECRET,
            extractable=extractable,
            algorithm=algorithm,
            usages=usages,
            handle=handle,
        )

    # Sign / verify

    def sign(
        self,
        algorithm: SignParams | Mapping[str, Any] | str,
        key: CryptoKey[HandleT],
        data: bytes,
    ) -> bytes:
        """Sign ``data`` with a private key."""
        if key.type is not KeyType.PRIVATE:
            self._handle_error("Signing requires a private key", InvalidAccessError)
        material = self._fetch(key)

        params = self._sign_params(algorithm)
        padding = self._signature_padding(params)
        hash_name = self._check_key(params, key, KeyUsage.SIGN)

        digest = self._primitives.hash(hash_name, bytes(data))
        logger.debug("Signing with %s/%s key %r", params.name, hash_name, key.handle)
        return self._primitives.sign(
            material.reveal(),
            padding,
            hash_name,
            digest,
            self._rng,
        )

    def verify(
        self,
        algorithm: SignParams | Mapping[str, Any] | str,
        key: CryptoKey[HandleT],
        signature: bytes,
        data: bytes,
    ) -> bool:
        """Check ``signature`` over ``data`` with a public key.

        ``False`` means only that the signature does not match; structural
        problems raise instead.
        """
        if key.type is not KeyType.PUBLIC:
            self._handle_error("Verification requires a public key", InvalidAccessError)
        material = self._fetch(key)

        params = self._sign_params(algorithm)
        padding = self._signature_padding(params)
        hash_name = self._check_key(params, key, KeyUsage.VERIFY)

        digest = self._primitives.hash(hash_name, bytes(data))
        logger.debug("Verifying with %s/%s key %r", params.name, hash_name, key.handle)
        return self._primitives.verify(
            material.reveal(),
            padding,
            hash_name,
            digest,
            bytes(signature),
        )

    def _signature_padding(self, params: SignParams) -> SignaturePadding:
        if isinstance(params, RsaPssParams):
            if params.name == "RSA-PSS":
                return PssPadding(salt_length=params.salt_length)
        elif isinstance(params, Algorithm):
            if params.name == "RSASSA-PKCS1-v1_5":
                return Pkcs1v15Padding()
        elif isinstance(params, EcdsaParams):
            if params.name == "ECDSA":
                self._handle_error(
                    "ECDSA signatures are not implemented",
                    AlgorithmNotImplementedError,
                )
        else:
            assert_never(params)
        self._unsupported(params.name)

    def _check_key(
        self,
        params: SignParams,
        key: CryptoKey[HandleT],
        usage: KeyUsage,
    ) -> str:
        """Match the key against the operation and return its hash name."""
        if key.algorithm.name != params.name:
            self._handle_error(
                f"Key algorithm {key.algorithm.name} does not match {params.name}",
                InvalidAccessError,
            )
        if not key.allows(usage):
            self._handle_error(f"Key usages do not include '{usage}'", InvalidAccessError)
        if not isinstance(key.algorithm, RsaHashedKeyAlgorithm):
            self._handle_error("Key algorithm carries no hash", InvalidAccessError)
        self._check_hash(key.algorithm.hash)
        return key.algorithm.hash

    # Export

    def export_key(
        self,
        format: KeyFormat | str,  # noqa: A002
        key: CryptoKey[HandleT],
    ) -> bytes | Jwk:
        """Serialize an extractable key.

        ``raw`` applies to secret keys, ``pkcs8`` to private keys, ``spki`` to
        public keys and ``jwk`` to all of them.
        """
        try:
            key_format = KeyFormat(format)
        except ValueError as e:
            self._handle_error(f"Unknown key format: '{format}'", NotSupportedError, e)

        if not key.extractable:
            self._handle_error("Key is not extractable", InvalidAccessError)
        material = self._fetch(key).reveal()

        if key_format is KeyFormat.JWK:
            if key.type is KeyType.PUBLIC:
                material = self._primitives.public_key(material)
            return to_jwk(key, material)
        if key_format is KeyFormat.RAW:
            if key.type is not KeyType.SECRET:
                self._handle_error(
                    f"'raw' export is not supported for {key.algorithm.name} keys",
                    NotSupportedError,
                )
            return material
        if key_format is KeyFormat.PKCS8:
            if key.type is not KeyType.PRIVATE:
                self._handle_error("'pkcs8' requires a private key", InvalidAccessError)
            return material
        if key_format is KeyFormat.SPKI:
            if key.type is not KeyType.PUBLIC:
                self._handle_error("'spki' requires a public key", InvalidAccessError)
            return self._primitives.public_key(material)
        assert_never(key_format)

    # Helpers

    def _fetch(self, key: CryptoKey[HandleT]) -> KeyMaterial:
        material = self._storage.get(key.handle)
        if material is None:
            msg = f"Storage returned nothing for issued handle {key.handle!r}"
            raise KeyStorageConsistencyError(msg)
        return material

    def _key_gen_params(
        self,
        algorithm: KeyGenParams | Mapping[str, Any],
    ) -> KeyGenParams:
        if not isinstance(algorithm, Mapping):
            return algorithm

        name = normalize_name(str(algorithm.get("name", "")))
        model: type[KeyGenParams]
        if name in RSA_HASHED_ALGORITHMS:
            model = RsaHashedKeyGenParams
        elif name in AES_ALGORITHMS:
            model = AesKeyGenParams
        elif name in HMAC_ALGORITHMS:
            model = HmacKeyGenParams
        elif name in EC_ALGORITHMS:
            model = EcKeyGenParams
        else:
            self._unsupported(name)
        return self._validate(model, algorithm)

    def _sign_params(self, algorithm: SignParams | Mapping[str, Any] | str) -> SignParams:
        if isinstance(algorithm, str):
            algorithm = {"name": algorithm}
        if not isinstance(algorithm, Mapping):
            return algorithm

        name = normalize_name(str(algorithm.get("name", "")))
        model: type[SignParams] = Algorithm
        if name == "RSA-PSS":
            model = RsaPssParams
        elif name == "ECDSA":
            model = EcdsaParams
        return self._validate(model, algorithm)

    def _validate(self, model: type[Any], algorithm: Mapping[str, Any]) -> Any:
        try:
            return model.model_validate(dict(algorithm))
        except ValidationError as e:
            self._handle_error(
                f"Invalid {model.__name__} dictionary: {e.error_count()} error(s)",
                InvalidSyntaxError,
                e,
            )

    def _usage_set(self, usages: Iterable[KeyUsage | str]) -> frozenset[KeyUsage]:
        try:
            return usage_set(usages)
        except ValueError as e:
            self._handle_error(f"Unknown key usage: {e!s}", InvalidSyntaxError, e)

    def _check_hash(self, name: str) -> None:
        if name not in HASH_ALGORITHMS:
            self._handle_error(f"Unrecognized hash algorithm: '{name}'", InvalidSyntaxError)

    def _unsupported(self, name: str) -> NoReturn:
        self._handle_error(f"Unsupported algorithm: '{name}'", NotSupportedError)

    def _handle_error(
        self,
        message: str,
        exception_type: type[WebCryptoError] = OperationError,
        original_exception: Exception | None = None,
    ) -> NoReturn:
        """Centralized error handling with consistent exception raising."""
        raise exception_type(message) from original_exception
