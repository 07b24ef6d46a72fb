from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..config import Settings
from ..database import get_db
from ..schemas.auth import LoginRequest, ResendVerificationRequest, SignupRequest
from ..services import accounts
from ..services.emailer import Mailer
from ..utils.dependencies import CurrentUser, get_current_user, get_mailer, get_settings

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", status_code=201)
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    return accounts.signup(
        db,
        mailer=mailer,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
    )


@router.post("/login")
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return accounts.login(db, settings=settings, email=payload.email, password=payload.password)


@router.post("/logout")
def logout():
    # Tokens are stateless; the client drops its stored session.
    return {"message": "Logged out successfully"}


@router.get("/me")
def me(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return accounts.get_me(db, identity=user)


@router.get("/verify-email/{token}")
def verify_email(
    token: str,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    return accounts.verify_email(db, mailer=mailer, token=token)


@router.post("/resend-verification")
def resend_verification(
    payload: ResendVerificationRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    return accounts.resend_verification(db, mailer=mailer, email=payload.email)
