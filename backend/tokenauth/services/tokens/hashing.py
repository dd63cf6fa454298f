"""bcrypt hashing of refresh tokens."""

from __future__ import annotations

import bcrypt

from tokenauth.services._shared.errors import HashingError

# bcrypt only reads the first 72 bytes of its input
BCRYPT_MAX_INPUT_BYTES = 72


def truncate_token(token: str) -> bytes:
    """
    Return the part of ``token`` bcrypt actually hashes.

    Generated tokens are 88 ASCII characters, so the trailing 16 are dropped.
    Storage and verification both go through this function, which keeps the two
    sides consistent (recent ``bcrypt`` releases reject longer inputs outright).
    """
    return token.encode("utf-8")[:BCRYPT_MAX_INPUT_BYTES]


class RefreshTokenHasher:
    """
    Salted, adaptive one-way hashing for refresh tokens.

    :param rounds: bcrypt cost factor (log2 of the iteration count).
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds

    def hash(self, token: str) -> str:
        """
        Hash ``token`` with a fresh salt.

        :returns: Modular-crypt bcrypt string (``$2b$...``).
        :raises HashingError: On invalid cost factors or library failures.
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(truncate_token(token), salt).decode("ascii")
        except (TypeError, ValueError) as exc:
            raise HashingError(f"bcrypt hashing failed: {type(exc).__name__}") from exc

    def matches(self, token: str, token_hash: str) -> bool:
        """
        Constant-time check of ``token`` against a stored bcrypt hash.

        :raises HashingError: When the stored value is not a bcrypt hash.
        """
        try:
            return bcrypt.checkpw(truncate_token(token), token_hash.encode("ascii"))
        except (TypeError, ValueError) as exc:
            raise HashingError(f"bcrypt check failed: {type(exc).__name__}") from exc
