"""libotp.crypto.mac -- HMAC-SHA1 (RFC 2104) built on the pure-python SHA-1 engine"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from libotp._utils.bytes import KeyLike, to_bytes
from libotp._utils.const import SHA1_BLOCK_SIZE
from libotp.crypto.sha1 import SHA1, sha1

if TYPE_CHECKING:
    from typing_extensions import Buffer

    from libotp._utils.protocols import CopyableHash

__all__ = ["compile_hmac_sha1", "hmac_sha1", "normalize_key"]

_TRANS_5C = bytes((x ^ 0x5C) for x in range(256))
_TRANS_36 = bytes((x ^ 0x36) for x in range(256))


def normalize_key(key: KeyLike) -> bytes:
    """
    derive the block-sized HMAC key:
    keys longer than a block are hashed first, then zero-padded to 64 bytes.
    """
    key = to_bytes(key, param="key")
    if len(key) > SHA1_BLOCK_SIZE:
        key = sha1(key)
    return key.ljust(SHA1_BLOCK_SIZE, b"\x00")


def compile_hmac_sha1(key: KeyLike) -> Callable[[Buffer], bytes]:
    """
    This function returns an HMAC-SHA1 function hardcoded with a specific key.
    It can be used via ``hmac = compile_hmac_sha1(key)``, then ``hmac(msg) -> digest``.

    :arg key:
        secret key as :class:`!str` (encoded using utf-8) or any bytes-like object.

    The padded inner & outer key blocks are absorbed once, and the resulting
    hasher state is copied for every message.
    """
    key = normalize_key(key)

    _inner_copy: Callable[[], CopyableHash] = SHA1(key.translate(_TRANS_36)).copy
    _outer_copy: Callable[[], CopyableHash] = SHA1(key.translate(_TRANS_5C)).copy

    def hmac(msg: Buffer) -> bytes:
        """generated by compile_hmac_sha1()"""
        inner = _inner_copy()
        inner.update(msg)
        outer = _outer_copy()
        outer.update(inner.digest())
        return outer.digest()

    return hmac


def hmac_sha1(key: KeyLike, data: Buffer) -> bytes:
    """return the 20-byte HMAC-SHA1 of data under key"""
    return compile_hmac_sha1(key)(data)
