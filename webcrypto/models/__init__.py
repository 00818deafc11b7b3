from .algorithms import (
    AesKeyAlgorithm,
    AesKeyGenParams,
    Algorithm,
    EcdsaParams,
    EcKeyAlgorithm,
    EcKeyGenParams,
    HmacKeyAlgorithm,
    HmacKeyGenParams,
    KeyAlgorithm,
    KeyGenParams,
    RsaHashedKeyAlgorithm,
    RsaHashedKeyGenParams,
    RsaPssParams,
    SignParams,
    normalize_name,
)
from .keys import CryptoKey, CryptoKeyPair, KeyType, KeyUsage, usage_set

__all__ = [
    "AesKeyAlgorithm",
    "AesKeyGenParams",
    "Algorithm",
    "CryptoKey",
    "CryptoKeyPair",
    "EcKeyAlgorithm",
    "EcKeyGenParams",
    "EcdsaParams",
    "HmacKeyAlgorithm",
    "HmacKeyGenParams",
    "KeyAlgorithm",
    "KeyGenParams",
    "KeyType",
    "KeyUsage",
    "RsaHashedKeyAlgorithm",
    "RsaHashedKeyGenParams",
    "RsaPssParams",
    "SignParams",
    "normalize_name",
    "usage_set",
]
