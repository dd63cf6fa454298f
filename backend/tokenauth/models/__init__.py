from tokenauth.models.refresh_token import RefreshTokenRecord

__all__ = ["RefreshTokenRecord"]
