# tokenauth/services/_shared/base.py
from __future__ import annotations

import logging
from datetime import UTC, datetime

from tokenauth.core import errors as api_errors
from tokenauth.services._shared.errors import CredentialError, ServiceError

log = logging.getLogger(__name__)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Centralize error translation and logging.
    * Provide a single UTC clock so tests can freeze time in one place.
    * Keep services orchestration-only: no web or ORM leakage.
    """

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, CredentialError):
            # → 401, same body whether the record was missing or mismatched
            return api_errors.Unauthorized(CredentialError.public_message)

        if isinstance(exc, ServiceError):
            # → 500 with a fixed public message; the cause stays in the logs
            log.error(
                "token_service.failure: %s",
                type(exc).__name__,
                extra={"event": "token_service.failure"},
                exc_info=exc,
            )
            return api_errors.InternalError(exc.public_message)

        # Fallback: return untouched (will bubble up to the Flask handler)
        return exc
