from __future__ import annotations

import dataclasses

import pytest

from webcrypto.models.algorithms import AesKeyAlgorithm
from webcrypto.models.keys import CryptoKey, KeyType, KeyUsage, usage_set


def test_usage_set_accepts_names_and_members() -> None:
    usages = usage_set(["sign", KeyUsage.VERIFY, "wrapKey"])

    assert usages == frozenset({KeyUsage.SIGN, KeyUsage.VERIFY, KeyUsage.WRAP_KEY})


def test_usage_set_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="launch"):
        usage_set(["launch"])


def test_usage_values_follow_webcrypto_names() -> None:
    assert [usage.value for usage in KeyUsage] == [
        "encrypt",
        "decrypt",
        "sign",
        "verify",
        "wrapKey",
        "unwrapKey",
        "deriveKey",
        "deriveBits",
    ]


@pytest.fixture
def key() -> CryptoKey[int]:
    return CryptoKey(
        type=KeyType.SECRET,
        extractable=False,
        algorithm=AesKeyAlgorithm(name="AES-GCM", length=128),
        usages=frozenset({KeyUsage.ENCRYPT}),
        handle=3,
    )


def test_crypto_key_is_immutable(key: CryptoKey[int]) -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        key.extractable = True  # type: ignore[misc]


def test_crypto_key_allows(key: CryptoKey[int]) -> None:
    assert key.allows(KeyUsage.ENCRYPT)
    assert not key.allows(KeyUsage.DECRYPT)


def test_crypto_key_repr_hides_handle(key: CryptoKey[int]) -> None:
    assert "handle" not in repr(key)
