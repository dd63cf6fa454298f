"""
Domain-level exceptions raised by the token components.

These exceptions are **framework-agnostic**: they never import Flask, HTTP or
SQLAlchemy. ``BaseService.translate_exceptions()`` maps them onto API errors.

Messages are operator-facing and must never carry a raw token or a stored hash.
``public_message`` is the only text that may reach a client.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for all token service errors."""

    public_message = "Token service failure"


# --------------------------------------------------------------------------- #
# Server-side failures (surfaced as a generic 500)
# --------------------------------------------------------------------------- #


class SigningError(ServiceError):
    """The access token could not be signed (missing secret, signer failure)."""

    public_message = "Failed to generate access token"


class EntropySourceError(ServiceError):
    """The operating system random source is unavailable."""

    public_message = "Failed to generate refresh token"


class HashingError(ServiceError):
    """bcrypt failed to hash or to check a refresh token."""

    public_message = "Failed to process refresh token"


class StorageError(ServiceError):
    """The refresh-token datastore rejected or failed an operation."""

    public_message = "Refresh token storage failure"


# --------------------------------------------------------------------------- #
# Credential failures (surfaced as 401, indistinguishable from each other)
# --------------------------------------------------------------------------- #


class CredentialError(ServiceError):
    """The presented refresh token cannot be honoured."""

    public_message = "Invalid refresh token"


class NotFoundError(CredentialError):
    """No refresh token record exists for the user."""

    def __init__(self, message: str = "refresh token not found") -> None:
        super().__init__(message)


class InvalidTokenError(CredentialError):
    """The presented token does not match the latest stored hash."""

    def __init__(self, message: str = "invalid refresh token") -> None:
        super().__init__(message)
