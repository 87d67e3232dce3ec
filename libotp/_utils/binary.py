from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from libotp.exc import InvalidCharacterError, InvalidLengthError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from libotp._utils.bytes import StrOrBytes

__all__ = ["B32_CHARS", "Base32Engine", "b32_engine", "b32decode"]

#: RFC 4648 base32 alphabet, symbol index is its 5-bit value
B32_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def _decode_bytes_big(next_value: Callable[[], int], chunks: int) -> Iterator[int]:
    """helper used by decode_bytes() to unpack big-endian quintets"""
    #
    # output bit layout (8 quintets -> 5 bytes):
    #
    # first byte:   v1 43210...
    #              +v2 ......43
    #
    # second byte:  v2 10......
    #              +v3 ..43210.
    #              +v4 .......4
    #
    # third byte:   v4 3210....
    #              +v5 ....4321
    #
    # fourth byte:  v5 0.......
    #              +v6 .43210..
    #              +v7 ......43
    #
    # fifth byte:   v7 210.....
    #              +v8 ...43210
    #
    idx = 0
    while idx < chunks:
        v1 = next_value()
        v2 = next_value()
        v3 = next_value()
        v4 = next_value()
        v5 = next_value()
        v6 = next_value()
        v7 = next_value()
        v8 = next_value()
        yield (v1 << 3) | (v2 >> 2)
        yield ((v2 & 0x03) << 6) | (v3 << 1) | (v4 >> 4)
        yield ((v4 & 0x0F) << 4) | (v5 >> 1)
        yield ((v5 & 0x01) << 7) | (v6 << 2) | (v7 >> 3)
        yield ((v7 & 0x07) << 5) | v8
        idx += 1


class Base32Engine:
    def __init__(self, charmap: str) -> None:
        if len(charmap) != 32:
            raise ValueError("charmap must be 32 characters")

        self._charmap = charmap
        self._decode_map = {char: idx for idx, char in enumerate(charmap)}

    def _decode32(self, char: str, position: int) -> int:
        try:
            return self._decode_map[char]
        except KeyError:
            raise InvalidCharacterError(char, position) from None

    def decode_bytes(self, source: str) -> bytes:
        """decode base32 string to bytes.

        :arg source: string of 8-symbol blocks, no padding.
        :raises InvalidLengthError: if length is not a multiple of 8.
        :raises InvalidCharacterError: if a symbol isn't in the charmap.
        :returns: decoded bytes, 5 per block.
        """
        chunks, tail = divmod(len(source), 8)
        if tail:
            raise InvalidLengthError(len(source))
        values = (self._decode32(char, idx) for idx, char in enumerate(source))
        return bytes(_decode_bytes_big(values.__next__, chunks))


b32_engine = Base32Engine(B32_CHARS)


def b32decode(source: StrOrBytes) -> bytes:
    """
    decode RFC 4648 base32 (uppercase, unpadded) to raw bytes.
    byte strings are read as latin-1, so every byte is checked as a symbol.
    """
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    return b32_engine.decode_bytes(source)
