from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class AccessToken:
    """
    A signed, self-contained access credential.

    :ivar token: Encoded compact JWS handed to the client.
    :ivar subject: User identity (``sub`` claim).
    :ivar binding: Client address at issuance (``client_ip`` claim).
    :ivar expires_at: Absolute expiry (``exp`` claim), UTC.
    """

    token: str
    subject: str
    binding: str
    expires_at: datetime


class AccessTokenIssuer(Protocol):
    """Port for minting short-lived access tokens."""

    def issue(self, user_id: str, client_ip: str) -> AccessToken:
        """
        Build and sign a token for ``user_id`` bound to ``client_ip``.

        :raises SigningError: When the secret is missing or signing fails.
        """
        ...
