"""
libotp.crypto.sha1 -- pure-python SHA-1 implementation (FIPS 180-4 / RFC 3174)

The :class:`SHA1` object mimics the :mod:`hashlib` interface, with one addition:
:meth:`SHA1.finalize` pads & compresses the final block in place, after which
the object can no longer be used.
"""

from __future__ import annotations

import enum
import struct
from typing import TYPE_CHECKING

from libotp._utils.const import (
    MAX_UINT32,
    MAX_UINT64,
    SHA1_BLOCK_SIZE,
    SHA1_DIGEST_SIZE,
)

if TYPE_CHECKING:
    from typing_extensions import Buffer, Self

__all__ = ["SHA1", "sha1"]

#: initial hash words
_IV = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)

#: offset of the 64-bit message length inside the final block
_LENGTH_OFFSET = SHA1_BLOCK_SIZE - 8

_unpack_block = struct.Struct(">16I").unpack
_pack_digest = struct.Struct(">5I").pack


def _rotl(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & MAX_UINT32


def _compress(hash: list[int], block: bytes | bytearray) -> None:
    """run the SHA-1 compression function over one 64-byte block, updating hash"""
    w = list(_unpack_block(block))
    for i in range(16, 80):
        w.append(_rotl(w[i - 3] ^ w[i - 8] ^ w[i - 14] ^ w[i - 16], 1))

    a, b, c, d, e = hash

    # rounds 0-19: choose
    for i in range(0, 20):
        temp = (
            _rotl(a, 5) + ((b & c) | (~b & d)) + e + w[i] + 0x5A827999
        ) & MAX_UINT32
        e, d, c, b, a = d, c, _rotl(b, 30), a, temp

    # rounds 20-39: parity
    for i in range(20, 40):
        temp = (_rotl(a, 5) + (b ^ c ^ d) + e + w[i] + 0x6ED9EBA1) & MAX_UINT32
        e, d, c, b, a = d, c, _rotl(b, 30), a, temp

    # rounds 40-59: majority
    for i in range(40, 60):
        temp = (
            _rotl(a, 5) + ((b & c) | (b & d) | (c & d)) + e + w[i] + 0x8F1BBCDC
        ) & MAX_UINT32
        e, d, c, b, a = d, c, _rotl(b, 30), a, temp

    # rounds 60-79: parity
    for i in range(60, 80):
        temp = (_rotl(a, 5) + (b ^ c ^ d) + e + w[i] + 0xCA62C1D6) & MAX_UINT32
        e, d, c, b, a = d, c, _rotl(b, 30), a, temp

    hash[0] = (hash[0] + a) & MAX_UINT32
    hash[1] = (hash[1] + b) & MAX_UINT32
    hash[2] = (hash[2] + c) & MAX_UINT32
    hash[3] = (hash[3] + d) & MAX_UINT32
    hash[4] = (hash[4] + e) & MAX_UINT32


class _State(enum.Enum):
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


class SHA1:
    """
    streaming SHA-1 hasher.

    :arg data: optional initial data, passed to :meth:`update`.

    Input is absorbed into a 64-byte block buffer, and each block is compressed
    as soon as it fills. Calling :meth:`finalize` consumes the hasher:
    any further calls raise :exc:`RuntimeError`.
    :meth:`digest` and :meth:`hexdigest` finalize a copy instead,
    so they may be called at any point while accumulating.
    """

    name = "sha1"
    digest_size = SHA1_DIGEST_SIZE
    block_size = SHA1_BLOCK_SIZE

    def __init__(self, data: Buffer = b"") -> None:
        self._hash = list(_IV)
        self._block = bytearray(SHA1_BLOCK_SIZE)
        self._index = 0
        self._length = 0
        self._state = _State.ACCUMULATING
        self.update(data)

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"<{name} state={self._state.value} length={self._length}>"

    def _check_accumulating(self) -> None:
        if self._state is not _State.ACCUMULATING:
            raise RuntimeError("sha1 object has already been finalized")

    def _absorb(self, data: bytes | memoryview) -> None:
        """copy bytes into the block buffer, compressing each time it fills"""
        block = self._block
        size = len(data)
        pos = 0
        while pos < size:
            take = min(SHA1_BLOCK_SIZE - self._index, size - pos)
            block[self._index : self._index + take] = data[pos : pos + take]
            self._index += take
            pos += take
            if self._index == SHA1_BLOCK_SIZE:
                _compress(self._hash, block)
                self._index = 0

    def update(self, data: Buffer, /) -> None:
        self._check_accumulating()
        if isinstance(data, str):
            raise TypeError("Strings must be encoded before hashing")
        with memoryview(data) as view, view.cast("B") as octets:
            self._absorb(octets)
            self._length += len(octets)

    def finalize(self) -> bytes:
        """
        pad the message, compress the final block(s), and return the 20-byte digest.
        the hasher is unusable afterwards.
        """
        self._check_accumulating()
        bit_length = (self._length * 8) & MAX_UINT64

        self._absorb(b"\x80")
        if self._index > _LENGTH_OFFSET:
            # no room for the length field, zero-fill & flush this block
            self._absorb(bytes(SHA1_BLOCK_SIZE - self._index))
        self._absorb(bytes(_LENGTH_OFFSET - self._index))
        self._absorb(struct.pack(">Q", bit_length))
        assert self._index == 0, "padding must end on a block boundary"

        self._state = _State.FINALIZED
        return _pack_digest(*self._hash)

    def copy(self) -> Self:
        self._check_accumulating()
        other = type(self).__new__(type(self))
        other._hash = list(self._hash)
        other._block = bytearray(self._block)
        other._index = self._index
        other._length = self._length
        other._state = self._state
        return other

    def digest(self) -> bytes:
        return self.copy().finalize()

    def hexdigest(self) -> str:
        return self.digest().hex()


def sha1(data: Buffer) -> bytes:
    """one-shot helper, returns the raw 20-byte SHA-1 digest of data"""
    return SHA1(data).finalize()
