"""
Invitation Token Service

Raw tokens are 32 bytes from the OS CSPRNG, hex encoded (64 chars). Only the
SHA-256 hex digest of a token is ever persisted; redemption looks the
invitation up by re-hashing the presented token.
"""

import hashlib
import secrets
import string

TOKEN_BYTES = 32
TOKEN_LENGTH = TOKEN_BYTES * 2

_HEX_DIGITS = frozenset(string.hexdigits)


def generate_token() -> str:
    """
    Generate an opaque invitation token.

    Raises whatever the OS raises when secure randomness is unavailable;
    callers must abort issuance rather than fall back to a weaker source.
    """
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(raw_token: str) -> str:
    """Deterministic one-way digest of a raw token, used for lookup."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def is_well_formed_token(raw_token: str) -> bool:
    if not raw_token or len(raw_token) != TOKEN_LENGTH:
        return False
    return all(char in _HEX_DIGITS for char in raw_token)
