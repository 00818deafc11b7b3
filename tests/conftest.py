"""Shared fixtures: seeded randomness, an in-memory vault and cached RSA pairs."""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from webcrypto.core.storage import InMemoryVault
from webcrypto.models.algorithms import RsaHashedKeyGenParams
from webcrypto.models.keys import CryptoKeyPair, KeyUsage
from webcrypto.services.subtle import SubtleCrypto

RSA_TEST_BITS = 1024
F4 = b"\x01\x00\x01"

RsaPairFactory = Callable[..., CryptoKeyPair[int]]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def vault() -> InMemoryVault:
    return InMemoryVault()


@pytest.fixture
def subtle(rng: random.Random, vault: InMemoryVault) -> SubtleCrypto[int]:
    return SubtleCrypto(rng, vault)


@pytest.fixture(scope="session")
def shared_subtle() -> SubtleCrypto[int]:
    """Engine reused across tests so RSA pairs are generated only once."""
    return SubtleCrypto(random.Random(99), InMemoryVault())


@pytest.fixture(scope="session")
def rsa_pair(shared_subtle: SubtleCrypto[int]) -> RsaPairFactory:
    """Return a cached key pair for (name, hash, usages)."""
    cache: dict[tuple[str, str, frozenset[KeyUsage]], CryptoKeyPair[int]] = {}

    def factory(
        name: str = "RSA-PSS",
        hash_name: str = "SHA-256",
        usages: frozenset[KeyUsage] = frozenset({KeyUsage.SIGN, KeyUsage.VERIFY}),
    ) -> CryptoKeyPair[int]:
        cache_key = (name, hash_name, usages)
        if cache_key not in cache:
            pair = shared_subtle.generate_key(
                RsaHashedKeyGenParams(
                    name=name,
                    modulus_length=RSA_TEST_BITS,
                    public_exponent=F4,
                    hash=hash_name,
                ),
                True,
                usages,
            )
            assert isinstance(pair, CryptoKeyPair)
            cache[cache_key] = pair
        return cache[cache_key]

    return factory
