from .subtle import KeyFormat, SubtleCrypto

__all__ = ["KeyFormat", "SubtleCrypto"]
