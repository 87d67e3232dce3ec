#: max 32-bit value
MAX_UINT32 = (1 << 32) - 1

#: max 64-bit value
MAX_UINT64 = (1 << 64) - 1

SHA1_BLOCK_SIZE = 64
SHA1_DIGEST_SIZE = 20

#: TOTP time step, in seconds
TOTP_PERIOD = 30
TOTP_DIGITS = 6
