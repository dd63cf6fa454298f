"""Token issuance and refresh orchestration."""

from __future__ import annotations

from .dto import AccessTokenOut, IssueIn, RefreshIn, TokenPairOut
from .service import TokenService

__all__ = ["AccessTokenOut", "IssueIn", "RefreshIn", "TokenPairOut", "TokenService"]
