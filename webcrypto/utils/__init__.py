from .jwk import Jwk, jwk_algorithm, to_jwk

__all__ = ["Jwk", "jwk_algorithm", "to_jwk"]
