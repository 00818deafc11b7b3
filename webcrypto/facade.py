from __future__ import annotations

import secrets
import uuid
from typing import TYPE_CHECKING, Any, Final, Generic, final

from webcrypto.core.protocols import HandleT
from webcrypto.core.storage import InMemoryVault
from webcrypto.exceptions import QuotaExceededError
from webcrypto.services.subtle import SubtleCrypto

if TYPE_CHECKING:
    from webcrypto.core.protocols import KeyStorage, PrimitiveLibrary, RandomSource


@final
class Context(Generic[HandleT]):
    """WebCrypto entry point bundling a randomness source and key storage.

    Contexts are cheap; an application may create as many as it needs.
    """

    __slots__ = ("_subtle",)

    MAX_RANDOM_BYTES: Final[int] = 65536

    def __init__(
        self,
        rng: RandomSource | None = None,
        storage: KeyStorage[HandleT] | None = None,
        primitives: PrimitiveLibrary | None = None,
    ) -> None:
        vault: Any = storage if storage is not None else InMemoryVault()
        self._subtle: SubtleCrypto[HandleT] = SubtleCrypto(
            rng if rng is not None else secrets.SystemRandom(),
            vault,
            primitives,
        )

    @property
    def subtle(self) -> SubtleCrypto[HandleT]:
        return self._subtle

    def get_random_values(
        self,
        buffer: bytearray | memoryview,
    ) -> bytearray | memoryview:
        """Fill ``buffer`` in place with random bytes and return it."""
        view = memoryview(buffer).cast("B")
        if view.nbytes > self.MAX_RANDOM_BYTES:
            msg = (
                f"Requested {view.nbytes} random bytes, "
                f"limit is {self.MAX_RANDOM_BYTES}"
            )
            raise QuotaExceededError(msg)

        view[:] = self._subtle.rng.randbytes(view.nbytes)
        return buffer

    def random_uuid(self) -> str:
        """Return a random RFC 4122 version 4 UUID string."""
        return str(uuid.UUID(bytes=self._subtle.rng.randbytes(16), version=4))
