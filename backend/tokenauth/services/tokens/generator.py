"""Opaque refresh-token generation."""

from __future__ import annotations

import base64
import hashlib
import secrets
from collections.abc import Callable

from tokenauth.services._shared.errors import EntropySourceError

RAW_ENTROPY_BYTES = 64
# urlsafe base64 of a 64-byte SHA-512 digest, "=" padding included
REFRESH_TOKEN_LENGTH = 88


class RefreshTokenGenerator:
    """
    Produce 512-bit, URL-safe refresh tokens.

    Each call draws fresh bytes from the OS CSPRNG (:func:`secrets.token_bytes`),
    collapses them with SHA-512 and renders the digest as URL-safe base64.
    There is no counter and no seeding: calls are independent.

    :param random_source: Callable returning ``n`` random bytes; only replaced
        in tests.
    """

    def __init__(self, random_source: Callable[[int], bytes] = secrets.token_bytes) -> None:
        self._random = random_source

    def generate(self) -> str:
        """
        Return a new raw refresh token (88 printable characters).

        :raises EntropySourceError: When the random source is unavailable.
        """
        try:
            raw = self._random(RAW_ENTROPY_BYTES)
        except (OSError, NotImplementedError) as exc:
            raise EntropySourceError("Random source unavailable") from exc
        if len(raw) != RAW_ENTROPY_BYTES:
            raise EntropySourceError("Random source returned a short read")

        digest = hashlib.sha512(raw).digest()
        return base64.urlsafe_b64encode(digest).decode("ascii")
