from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config import Settings
from ..database import get_db
from ..models.enums import Role
from ..models.user import User
from ..services.emailer import Mailer
from .error_handlers import AuthError, ForbiddenError, get_error_message
from .jwt import decode_access_token

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity decoded from a bearer token."""
    id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def _identity_from_token(token: str, *, settings: Settings, db: Session) -> CurrentUser:
    payload = decode_access_token(token, secret_key=settings.secret_key)
    try:
        user_id = int(payload.get("id") or payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthError("Invalid or expired token")

    # Deactivation must take effect for tokens issued before it.
    user = db.get(User, user_id)
    if user is None:
        raise AuthError(get_error_message("user_not_found"))
    if not user.active:
        raise ForbiddenError(get_error_message("account_deactivated"))

    return CurrentUser(id=user.id, email=user.email, role=user.role)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise AuthError(get_error_message("token_required"))
    return _identity_from_token(credentials.credentials, settings=settings, db=db)


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> CurrentUser | None:
    if credentials is None or not credentials.credentials:
        return None
    try:
        return _identity_from_token(credentials.credentials, settings=settings, db=db)
    except AuthError:
        # A stale session still gets the anonymous view.
        return None


def require_verified_email(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CurrentUser:
    # Looked up fresh: the token may predate verification.
    row = db.get(User, user.id)
    if row is None:
        raise AuthError(get_error_message("user_not_found"))
    if not row.email_verified:
        raise ForbiddenError(
            get_error_message("verification_required"),
            details={"email_verification_required": True},
        )
    return user
