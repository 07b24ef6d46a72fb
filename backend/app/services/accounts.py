"""
Account lifecycle: signup, login, email verification.

Signup is all-or-nothing with respect to the verification email: the user row is
only committed once the mailer accepted the message.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings
from ..models.user import Profile, User
from ..utils.dependencies import CurrentUser
from ..utils.error_handlers import (
    AuthError,
    ConflictError,
    DependencyError,
    ExpiredError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    get_error_message,
)
from ..utils.jwt import create_access_token
from ..utils.security import as_utc, generate_verification_token, hash_password, verify_password
from ..utils.serializers import profile_payload, user_account
from ..utils.validation import (
    validate_email,
    validate_password,
    validate_signup_role,
    validate_string_field,
)
from .emailer import EmailDeliveryError, Mailer

logger = logging.getLogger(__name__)

RESEND_MESSAGE = (
    "If an account exists for this email and is not yet verified, "
    "a new verification link has been sent."
)


def issue_token(user: User, *, settings: Settings) -> str:
    return create_access_token(
        {"sub": str(user.id), "id": user.id, "email": user.email, "role": user.role.value},
        secret_key=settings.secret_key,
    )


def signup(
    db: Session,
    *,
    mailer: Mailer,
    name,
    email,
    password,
    role,
) -> dict:
    if not name or not email or not password or not role:
        raise ValidationError("All fields are required")
    name = validate_string_field(name, "Name", min_length=1, max_length=255)
    email = validate_email(email)
    validate_password(password)
    role = validate_signup_role(role)

    if db.query(User.id).filter(User.email == email).first():
        raise ConflictError(get_error_message("email_exists"))

    token, expires = generate_verification_token()
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        active=True,
        email_verified=False,
        verification_token=token,
        verification_expires=expires,
    )
    user.profile = Profile()

    try:
        db.add(user)
        db.flush()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email.
        db.rollback()
        raise ConflictError(get_error_message("email_exists"))

    try:
        mailer.send_verification_email(to_email=email, name=name, token=token)
    except EmailDeliveryError as e:
        db.rollback()
        logger.warning("Signup for %s rolled back, verification email failed: %s", email, e)
        raise DependencyError(get_error_message("verification_email_failed"))

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("User %s signed up as %s", user.id, user.role.value)

    return {
        "message": "Account created. Please check your email to verify your account.",
        "email_verification_required": True,
        "user": user_account(user),
    }


def login(db: Session, *, settings: Settings, email, password) -> dict:
    if not email or not password:
        raise ValidationError("Email and password required")
    email = validate_email(email)

    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        raise AuthError(get_error_message("invalid_credentials"))

    if not user.active:
        raise ForbiddenError(get_error_message("account_deactivated"))

    token = issue_token(user, settings=settings)
    return {
        "user": user_account(user),
        "token": token,
        "access_token": token,
        "token_type": "bearer",
    }


def get_me(db: Session, *, identity: CurrentUser) -> dict:
    user = db.get(User, identity.id)
    if user is None:
        raise NotFoundError(get_error_message("user_not_found"))
    payload = user_account(user)
    payload["profile"] = profile_payload(user.profile)
    return payload


def verify_email(db: Session, *, mailer: Mailer, token: str) -> dict:
    token = (token or "").strip()
    user = db.query(User).filter(User.verification_token == token).first() if token else None
    if user is None:
        raise ValidationError("Invalid verification token")

    if user.email_verified:
        return {"message": "Email already verified", "already_verified": True}

    expires = as_utc(user.verification_expires)
    if expires is None or expires < datetime.now(timezone.utc):
        raise ExpiredError(
            "Verification token has expired. Please request a new one.",
            details={"expired": True},
        )

    # The token is kept (with no expiry) so that re-opening the link reports
    # "already verified"; a resend replaces it.
    user.email_verified = True
    user.verification_expires = None
    db.commit()
    logger.info("User %s verified their email", user.id)

    try:
        mailer.send_welcome_email(to_email=user.email, name=user.name, role=user.role)
    except EmailDeliveryError as e:
        logger.warning("Welcome email to %s failed: %s", user.email, e)

    return {"message": "Email verified successfully", "already_verified": False}


def resend_verification(db: Session, *, mailer: Mailer, email) -> dict:
    try:
        email = validate_email(email)
    except ValidationError:
        return {"message": RESEND_MESSAGE}

    user = db.query(User).filter(User.email == email).first()
    if user is None or user.email_verified:
        return {"message": RESEND_MESSAGE}

    token, expires = generate_verification_token()
    user.verification_token = token
    user.verification_expires = expires
    db.commit()

    try:
        mailer.send_verification_email(to_email=user.email, name=user.name, token=token)
    except EmailDeliveryError as e:
        logger.warning("Resending verification to %s failed: %s", user.email, e)

    return {"message": RESEND_MESSAGE}
