# tokenauth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class IssueIn:
    """
    Input DTO for issuing a token pair.

    :param user_id: Subject identifier (UUID v4 string).
    :type user_id: str
    :param client_ip: Address the request came from.
    :type client_ip: str
    """

    user_id: str
    client_ip: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param user_id: Subject the refresh token was issued to.
    :type user_id: str
    :param refresh_token: Raw refresh token as returned at issuance.
    :type refresh_token: str
    :param client_ip: Address the request came from.
    :type client_ip: str
    """

    user_id: str
    refresh_token: str
    client_ip: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token (88 characters).
    :type refresh_token: str
    :param expires_at: Access token expiry.
    :type expires_at: datetime
    """

    access_token: str
    refresh_token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class AccessTokenOut:
    """
    Output DTO for a refresh: a new access token only.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param expires_at: Access token expiry.
    :type expires_at: datetime
    """

    access_token: str
    expires_at: datetime
