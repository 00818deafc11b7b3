__version__ = "0.1.0"
__license__ = "MIT"

import logging

from .exceptions import (
    AlgorithmNotImplementedError,
    InvalidAccessError,
    InvalidSyntaxError,
    KeyStorageConsistencyError,
    NotSupportedError,
    OperationError,
    QuotaExceededError,
    StorageError,
    WebCryptoError,
)
from .facade import Context
from .models import CryptoKey, CryptoKeyPair, KeyType, KeyUsage
from .services import KeyFormat, SubtleCrypto

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AlgorithmNotImplementedError",
    "Context",
    "CryptoKey",
    "CryptoKeyPair",
    "InvalidAccessError",
    "InvalidSyntaxError",
    "KeyFormat",
    "KeyStorageConsistencyError",
    "KeyType",
    "KeyUsage",
    "NotSupportedError",
    "OperationError",
    "QuotaExceededError",
    "StorageError",
    "SubtleCrypto",
    "WebCryptoError",
]
