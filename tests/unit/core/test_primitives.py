from __future__ import annotations

import hashlib
import random

import pytest
from cryptography.hazmat.primitives.serialization import (
    load_der_private_key,
    load_der_public_key,
)

from webcrypto.core.primitives import (
    CryptographyPrimitives,
    Pkcs1v15Padding,
    PssPadding,
)
from webcrypto.core.protocols import PrimitiveLibrary
from webcrypto.exceptions import OperationError


@pytest.fixture(scope="module")
def primitives() -> CryptographyPrimitives:
    return CryptographyPrimitives()


@pytest.fixture(scope="module")
def keypair(primitives: CryptographyPrimitives) -> tuple[bytes, bytes]:
    return primitives.generate_rsa_keypair(1024, 65537, random.Random(0))


def test_satisfies_protocol(primitives: CryptographyPrimitives) -> None:
    assert isinstance(primitives, PrimitiveLibrary)


@pytest.mark.parametrize(
    ("name", "reference"),
    [
        ("SHA-1", hashlib.sha1),
        ("SHA-256", hashlib.sha256),
        ("SHA-384", hashlib.sha384),
        ("SHA-512", hashlib.sha512),
    ],
)
def test_hash_matches_hashlib(
    primitives: CryptographyPrimitives,
    name: str,
    reference: object,
) -> None:
    assert primitives.hash(name, b"abc") == reference(b"abc").digest()  # type: ignore[operator]


def test_unknown_hash_is_operation_error(primitives: CryptographyPrimitives) -> None:
    with pytest.raises(OperationError):
        primitives.hash("MD5", b"abc")


def test_keypair_is_der_encoded(keypair: tuple[bytes, bytes]) -> None:
    private_der, public_der = keypair

    private_key = load_der_private_key(private_der, password=None)
    public_key = load_der_public_key(public_der)

    assert private_key.key_size == 1024  # type: ignore[union-attr]
    assert public_key.public_numbers().e == 65537  # type: ignore[union-attr]


def test_public_key_derived_from_private(
    primitives: CryptographyPrimitives,
    keypair: tuple[bytes, bytes],
) -> None:
    private_der, public_der = keypair

    assert primitives.public_key(private_der) == public_der


def test_rejected_exponent_is_operation_error(
    primitives: CryptographyPrimitives,
) -> None:
    with pytest.raises(OperationError, match="RSA key generation failed"):
        primitives.generate_rsa_keypair(1024, 4, random.Random(0))


def test_too_small_modulus_is_operation_error(
    primitives: CryptographyPrimitives,
) -> None:
    with pytest.raises(OperationError):
        primitives.generate_rsa_keypair(256, 65537, random.Random(0))


def test_garbage_key_is_operation_error(primitives: CryptographyPrimitives) -> None:
    digest = primitives.hash("SHA-256", b"data")

    with pytest.raises(OperationError, match="Failed to load private key"):
        primitives.sign(b"not a key", Pkcs1v15Padding(), "SHA-256", digest, random.Random(0))


@pytest.mark.parametrize("padding", [Pkcs1v15Padding(), PssPadding(salt_length=32)])
def test_sign_verify_digest(
    primitives: CryptographyPrimitives,
    keypair: tuple[bytes, bytes],
    padding: Pkcs1v15Padding | PssPadding,
) -> None:
    private_der, _ = keypair
    digest = primitives.hash("SHA-256", b"payload")

    signature = primitives.sign(private_der, padding, "SHA-256", digest, random.Random(0))

    assert primitives.verify(private_der, padding, "SHA-256", digest, signature)
    other = primitives.hash("SHA-256", b"other payload")
    assert not primitives.verify(private_der, padding, "SHA-256", other, signature)


def test_oversized_salt_is_operation_error(
    primitives: CryptographyPrimitives,
    keypair: tuple[bytes, bytes],
) -> None:
    private_der, _ = keypair
    digest = primitives.hash("SHA-512", b"payload")

    with pytest.raises(OperationError, match="Signing failed"):
        primitives.sign(
            private_der,
            PssPadding(salt_length=200),
            "SHA-512",
            digest,
            random.Random(0),
        )
