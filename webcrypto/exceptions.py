from typing import ClassVar


class WebCryptoError(Exception):
    """Base class for all recoverable WebCrypto errors"""

    name: ClassVar[str] = "Error"


class InvalidSyntaxError(WebCryptoError):
    """Illegal usage set or unrecognized algorithm parameter"""

    name = "SyntaxError"


class InvalidAccessError(WebCryptoError):
    """Operation requested against an unsuitable key"""

    name = "InvalidAccessError"


class NotSupportedError(WebCryptoError):
    """Unsupported algorithm or key format"""

    name = "NotSupportedError"


class AlgorithmNotImplementedError(NotSupportedError):
    """Algorithm family has a dispatch slot but no implementation"""


class OperationError(WebCryptoError):
    """Cryptographic operation failure"""

    name = "OperationError"


class QuotaExceededError(WebCryptoError):
    """Requested more random bytes than allowed"""

    name = "QuotaExceededError"


class StorageError(WebCryptoError):
    """Key storage backend refused the material"""


class KeyStorageConsistencyError(RuntimeError):
    """A handle issued by the storage backend can no longer be read back."""
