"""Token endpoint Marshmallow schemas."""

from __future__ import annotations

import uuid

from marshmallow import Schema, fields, validate


class UUID4String(fields.String):
    """String field accepting only UUID version 4 values, returned in canonical form."""

    default_error_messages = {"invalid_uuid4": "Not a valid UUID v4."}

    def _deserialize(self, value, attr, data, **kwargs):
        raw = super()._deserialize(value, attr, data, **kwargs)
        try:
            parsed = uuid.UUID(raw)
        except ValueError as exc:
            raise self.make_error("invalid_uuid4") from exc
        if parsed.version != 4 or parsed.variant != uuid.RFC_4122:
            raise self.make_error("invalid_uuid4")
        return str(parsed)


class IssueTokenSchema(Schema):
    """Input payload for issuing a token pair."""

    user_id = UUID4String(required=True)


class RefreshTokenSchema(Schema):
    """Input payload for exchanging a refresh token."""

    user_id = UUID4String(required=True)
    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=1024))


class TokenPairSchema(Schema):
    """Response payload with both tokens."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)


class AccessTokenSchema(Schema):
    """Response payload for a refresh."""

    access_token = fields.String(required=True)


class WhoAmISchema(Schema):
    """Identity carried by a verified access token."""

    user_id = fields.String(required=True)
    client_ip = fields.String(allow_none=True)
    expires_at = fields.DateTime(required=True)


__all__ = [
    "AccessTokenSchema",
    "IssueTokenSchema",
    "RefreshTokenSchema",
    "TokenPairSchema",
    "UUID4String",
    "WhoAmISchema",
]
