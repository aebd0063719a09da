"""FastAPI dependency — JWT access guard and role checks."""

from typing import Optional

from fastapi import Depends, Header

from fitdesk.application.services.auth_service import ACCESS_TOKEN, TokenIssuer, get_token_issuer
from fitdesk.core.exceptions import AuthError, ForbiddenError
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.interfaces.deps import get_user_repository


def get_current_user(
    authorization: Optional[str] = Header(None),
    issuer: TokenIssuer = Depends(get_token_issuer),
    repo: UserRepository = Depends(get_user_repository),
) -> User:
    """Extract and validate the current user from the access token."""
    if not authorization:
        raise AuthError("No authorization header provided")

    token = authorization.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == "bearer":
        token = rest.strip()
    if not token:
        raise AuthError("No token provided")

    payload = issuer.decode(token, expected_type=ACCESS_TOKEN)

    user = repo.get_by_id(payload["id"])
    if user is None:
        raise AuthError("User not found")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require admin role."""
    if not user.role.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def require_trainer(user: User = Depends(get_current_user)) -> User:
    """Require trainer or admin role."""
    if not user.role.can_train:
        raise ForbiddenError("Trainer or Admin access required")
    return user


def require_owner_or_admin(user_id: int, user: User = Depends(get_current_user)) -> User:
    """Allow access to ``user_id``'s data only to that user or an admin."""
    if user.id != user_id and not user.role.is_admin:
        raise ForbiddenError("You can only access your own data")
    return user
