from __future__ import annotations

from typing import Union

from typing_extensions import Buffer

__all__ = ["KeyLike", "StrOrBytes", "to_bytes", "to_unicode"]

StrOrBytes = Union[str, bytes]

#: HMAC keys & secrets: text (utf-8 encoded) or any bytes-like object
KeyLike = Union[str, Buffer]


def to_bytes(source: KeyLike, param: str = "value") -> bytes:
    """Helper to normalize a secret or key to bytes.

    :arg source: str (encoded as utf-8) or any bytes-like object.
    :param param: name of the argument, used in error messages.
    :raises TypeError: if source is neither str nor bytes-like.
    """
    if isinstance(source, bytes):
        return source
    if isinstance(source, str):
        return source.encode("utf-8")
    try:
        with memoryview(source) as view:
            return view.tobytes()
    except TypeError:
        raise TypeError(
            f"{param} must be str or bytes-like, not {type(source).__name__}"
        ) from None


def to_unicode(source: StrOrBytes, param: str = "value") -> str:
    """Helper to normalize ascii input (e.g. tokens) to str.

    :raises UnicodeDecodeError: if source is bytes containing non-ascii octets.
    :raises TypeError: if source is neither str nor bytes.
    """
    if isinstance(source, str):
        return source
    if isinstance(source, bytes):
        return source.decode("ascii")
    raise TypeError(f"{param} must be str or bytes, not {type(source).__name__}")
