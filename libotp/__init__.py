"""libotp -- TOTP tokens on a pure-python SHA-1 / HMAC-SHA1 core"""

from libotp._utils.binary import b32decode
from libotp.crypto.mac import hmac_sha1
from libotp.crypto.sha1 import SHA1, sha1
from libotp.exc import (
    Base32DecodeError,
    InvalidCharacterError,
    InvalidLengthError,
    MalformedTokenError,
    TokenError,
)
from libotp.tokens import TotpGenerator, hotp, totp, totp_from_base32

__version__ = "1.0.0"

__all__ = [
    "SHA1",
    "Base32DecodeError",
    "InvalidCharacterError",
    "InvalidLengthError",
    "MalformedTokenError",
    "TokenError",
    "TotpGenerator",
    "b32decode",
    "hmac_sha1",
    "hotp",
    "sha1",
    "totp",
    "totp_from_base32",
]
