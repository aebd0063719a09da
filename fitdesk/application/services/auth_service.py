"""Auth service — JWT access/refresh token issuance and verification."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from fitdesk.config import Settings, get_settings
from fitdesk.core.exceptions import InvalidTokenError, TokenExpiredError
from fitdesk.domain.models.user import User

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenIssuer:
    """Turns a verified identity into signed, time-bounded credentials."""

    def __init__(self, settings: Settings):
        self.secret_key = settings.SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.access_ttl = timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
        self.refresh_ttl = timedelta(days=settings.JWT_REFRESH_EXPIRATION_DAYS)

    def _encode(self, claims: dict, expires_delta: timedelta) -> str:
        to_encode = claims.copy()
        to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def create_access_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        claims = {
            "sub": str(user.id),
            "id": user.id,
            "email": user.email,
            "phone_number": user.phone_number,
            "is_admin": bool(user.is_admin),
            "is_trainer": bool(user.is_trainer),
            "type": ACCESS_TOKEN,
        }
        return self._encode(claims, expires_delta or self.access_ttl)

    def create_refresh_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        claims = {"sub": str(user.id), "id": user.id, "type": REFRESH_TOKEN}
        return self._encode(claims, expires_delta or self.refresh_ttl)

    def issue_tokens(self, user: User) -> dict:
        return {
            "access_token": self.create_access_token(user),
            "refresh_token": self.create_refresh_token(user),
            "token_type": "bearer",
        }

    def decode(self, token: str, expected_type: str = ACCESS_TOKEN) -> dict:
        """Verify signature, expiry and token type; return the claims."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise InvalidTokenError()

        if payload.get("type") != expected_type or not isinstance(payload.get("id"), int):
            raise InvalidTokenError()
        return payload


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(get_settings())
