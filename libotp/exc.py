"""libotp.exc -- exceptions raised by libotp"""

from __future__ import annotations

__all__ = [
    "Base32DecodeError",
    "InvalidLengthError",
    "InvalidCharacterError",
    "TokenError",
    "MalformedTokenError",
]


class Base32DecodeError(ValueError):
    """
    Base class for errors raised when decoding a base32 string.
    Subclass of :exc:`ValueError`.
    """


class InvalidLengthError(Base32DecodeError):
    """
    Raised when the length of a base32 string is not a multiple of 8.
    No ``=`` padding is accepted, so partial blocks always fail here.
    """

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(
            f"base32 input length must be a multiple of 8 (got {length})"
        )


class InvalidCharacterError(Base32DecodeError):
    """
    Raised when a base32 string contains a symbol outside ``A-Z2-7``.
    """

    def __init__(self, char: str, position: int) -> None:
        self.char = char
        self.position = position
        super().__init__(
            f"invalid base32 character {char!r} at position {position}"
        )


class TokenError(ValueError):
    """
    Base class for all token verification errors.
    """

    _default_message = None

    def __init__(self, msg: str | None = None) -> None:
        if msg is None:
            msg = self._default_message
        super().__init__(msg)


class MalformedTokenError(TokenError):
    """
    Raised by :meth:`~libotp.tokens.TotpGenerator.verify` if the token
    has the wrong number of digits or contains non-digit characters.
    """

    _default_message = "Unrecognized token"
