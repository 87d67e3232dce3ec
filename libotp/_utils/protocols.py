from __future__ import annotations

from typing import Protocol

from typing_extensions import Buffer, Self


class CopyableHash(Protocol):
    """
    The part of the hashlib object interface HMAC needs:
    a pre-keyed state that can be cloned, fed, and read out.
    """

    def copy(self) -> Self: ...

    def update(self, data: Buffer, /) -> None: ...

    def digest(self) -> bytes: ...
