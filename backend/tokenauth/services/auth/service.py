# tokenauth/services/auth/service.py
from __future__ import annotations

import logging

from tokenauth.services._shared.base import BaseService
from tokenauth.services._shared.ports import AccessTokenIssuer
from tokenauth.services.auth.dto import AccessTokenOut, IssueIn, RefreshIn, TokenPairOut
from tokenauth.services.tokens import (
    RefreshTokenGenerator,
    RefreshTokenStore,
    RefreshTokenVerifier,
)

log = logging.getLogger(__name__)


class TokenService(BaseService):
    """
    Token lifecycle service (issue / refresh).

    Issuance signs an access token, generates a refresh token and persists its
    hash. Refresh consumes the stored refresh token and signs a new access token;
    the old refresh token is then unusable.
    """

    def __init__(
        self,
        *,
        issuer: AccessTokenIssuer,
        generator: RefreshTokenGenerator,
        store: RefreshTokenStore,
        verifier: RefreshTokenVerifier,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param issuer: Signs access tokens.
        :param generator: Produces raw refresh tokens.
        :param store: Persists refresh-token hashes.
        :param verifier: Consumes refresh tokens atomically.
        """
        super().__init__()
        self.issuer = issuer
        self.generator = generator
        self.store = store
        self.verifier = verifier

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_pair(self, dto: IssueIn) -> TokenPairOut:
        """
        Issue an access token and a fresh refresh token for ``dto.user_id``.

        The refresh token is returned only once its hash is stored, so a client
        never holds a token the server cannot verify.

        :raises SigningError: Access token could not be signed.
        :raises EntropySourceError: Refresh token could not be generated.
        :raises HashingError: Refresh token could not be hashed.
        :raises StorageError: Refresh token could not be stored.
        """
        access = self.issuer.issue(dto.user_id, dto.client_ip)
        refresh_token = self.generator.generate()
        self.store.persist(dto.user_id, refresh_token, dto.client_ip)
        log.info(
            "token_pair.issued",
            extra={"event": "token_pair.issued", "user_id": dto.user_id},
        )
        return TokenPairOut(
            access_token=access.token,
            refresh_token=refresh_token,
            expires_at=access.expires_at,
        )

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> AccessTokenOut:
        """
        Exchange a refresh token for a new access token.

        :raises NotFoundError: No stored token, or it was already used.
        :raises InvalidTokenError: The token does not match the stored one.
        """
        self.verifier.verify_and_rotate(dto.user_id, dto.refresh_token, dto.client_ip)
        access = self.issuer.issue(dto.user_id, dto.client_ip)
        return AccessTokenOut(access_token=access.token, expires_at=access.expires_at)
