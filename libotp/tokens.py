"""libotp.tokens -- TOTP / RFC 6238 token generation"""

from __future__ import annotations

import math
import re
import secrets
import struct
from typing import Union

from libotp._logging import logger
from libotp._utils.binary import b32decode
from libotp._utils.bytes import StrOrBytes, to_unicode
from libotp._utils.const import MAX_UINT64, TOTP_DIGITS, TOTP_PERIOD
from libotp.crypto.mac import compile_hmac_sha1, hmac_sha1
from libotp.exc import Base32DecodeError, MalformedTokenError

__all__ = [
    "TotpGenerator",
    "hotp",
    "totp",
    "totp_from_base32",
]

EpochTime = Union[int, float]

#: regex used to clean whitespace & separators from tokens
_clean_re = re.compile(r"\s|-")


def _truncate(digest: bytes) -> str:
    """
    RFC 4226 dynamic truncation:
    derive the 31-bit token value from the digest, and render it as decimal.
    """
    offset = digest[-1] & 0xF
    value = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return "%0*d" % (TOTP_DIGITS, value % 10**TOTP_DIGITS)


def _check_counter(counter: int) -> None:
    if not 0 <= counter <= MAX_UINT64:
        raise ValueError("counter must be in range 0 .. 2**64-1")


def hotp(secret: bytes, counter: int) -> str:
    """
    generate the HOTP token (RFC 4226) for a raw secret & counter value.

    :arg secret: raw secret bytes.
    :arg counter: non-negative integer which fits in 64 bits.
    :returns: token as a 6-digit string.
    """
    _check_counter(counter)
    return _truncate(hmac_sha1(secret, struct.pack(">Q", counter)))


class TotpGenerator:
    """
    Generates & verifies 6-digit TOTP tokens, using a fixed 30 second period
    and HMAC-SHA1.

    :param window:
        number of time steps before & after the current one which
        :meth:`verify` will also accept.
    """

    period = TOTP_PERIOD
    digits = TOTP_DIGITS

    def __init__(self, window: int = 1) -> None:
        if window < 0:
            raise ValueError("window must be >= 0")
        self._window = window

    def time_to_counter(self, epoch_secs: EpochTime) -> int:
        """
        convert unix epoch seconds to a TOTP counter.
        floats are truncated to whole seconds.
        """
        if isinstance(epoch_secs, bool) or not isinstance(epoch_secs, (int, float)):
            raise TypeError(
                f"time must be int or float, not {type(epoch_secs).__name__}"
            )
        if isinstance(epoch_secs, float) and not math.isfinite(epoch_secs):
            raise ValueError("time must be finite")
        if epoch_secs < 0:
            raise ValueError("time must be >= 0")
        if epoch_secs > MAX_UINT64:
            raise ValueError("time must fit in 64 bits")
        return int(epoch_secs) // self.period

    def generate(self, raw_secret: bytes, epoch_secs: EpochTime) -> str:
        """
        generate token for the specified time.

        :arg raw_secret: raw secret bytes.
        :arg epoch_secs: unix epoch time.
        :returns: token as a 6-digit string, zero-padded on the left.

        Usage example::

            >>> TotpGenerator().generate(b"12345678901234567890", 59)
            '287082'
        """
        return hotp(raw_secret, self.time_to_counter(epoch_secs))

    def generate_from_encoded(
        self, secret_text: StrOrBytes, epoch_secs: EpochTime
    ) -> str:
        """
        same as :meth:`generate`, but the secret is base32 encoded.

        :raises ~libotp.exc.InvalidLengthError:
            if the secret's length is not a multiple of 8.
        :raises ~libotp.exc.InvalidCharacterError:
            if the secret contains a character outside ``A-Z2-7``.
        """
        try:
            raw_secret = b32decode(secret_text)
        except Base32DecodeError as err:
            logger.debug("rejected base32 secret: %s", type(err).__name__)
            raise
        return self.generate(raw_secret, epoch_secs)

    def normalize_token(self, token: StrOrBytes | int) -> str:
        """
        normalize token representation:
        strips whitespace & dashes, converts integers to zero-padded string.

        :raises ~libotp.exc.MalformedTokenError:
            if token doesn't contain exactly 6 digits.
        """
        if isinstance(token, int):
            if token < 0:
                raise MalformedTokenError("Token must not be negative")
            token = "%0*d" % (self.digits, token)
        else:
            try:
                token = to_unicode(token, param="token")
            except UnicodeDecodeError:
                raise MalformedTokenError(
                    "Token must contain only the digits 0-9"
                ) from None
            token = _clean_re.sub("", token)
            if not (token.isascii() and token.isdigit()):
                raise MalformedTokenError("Token must contain only the digits 0-9")
        if len(token) != self.digits:
            raise MalformedTokenError(f"Token must have exactly {self.digits} digits")
        return token

    def verify(
        self, raw_secret: bytes, token: StrOrBytes | int, epoch_secs: EpochTime
    ) -> bool:
        """
        check if token is valid for the specified time,
        allowing for ``window`` time steps of clock drift in either direction.

        :raises ~libotp.exc.MalformedTokenError:
            if token is not a 6-digit value.
        :returns: ``True`` if token matches, else ``False``.
        """
        token = self.normalize_token(token)
        counter = self.time_to_counter(epoch_secs)
        start = max(counter - self._window, 0)
        end = min(counter + self._window, MAX_UINT64)

        keyed_hmac = compile_hmac_sha1(raw_secret)
        for candidate in range(start, end + 1):
            expected = _truncate(keyed_hmac(struct.pack(">Q", candidate)))
            if secrets.compare_digest(token, expected):
                return True
        logger.debug("token rejected for counter range %d .. %d", start, end)
        return False


_default_generator = TotpGenerator()


def totp(secret: bytes, epoch_secs: EpochTime) -> str:
    """generate the 6-digit TOTP token for a raw secret at epoch_secs"""
    return _default_generator.generate(secret, epoch_secs)


def totp_from_base32(secret_text: StrOrBytes, epoch_secs: EpochTime) -> str:
    """generate the 6-digit TOTP token for a base32-encoded secret at epoch_secs"""
    return _default_generator.generate_from_encoded(secret_text, epoch_secs)
