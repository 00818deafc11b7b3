from .primitives import (
    HASH_ALGORITHMS,
    CryptographyPrimitives,
    Pkcs1v15Padding,
    PssPadding,
    SignaturePadding,
)
from .protocols import KeyStorage, PrimitiveLibrary, RandomSource
from .storage import InMemoryVault, KeyMaterial

__all__ = [
    "HASH_ALGORITHMS",
    "CryptographyPrimitives",
    "InMemoryVault",
    "KeyMaterial",
    "KeyStorage",
    "Pkcs1v15Padding",
    "PrimitiveLibrary",
    "PssPadding",
    "RandomSource",
    "SignaturePadding",
]
