from pydantic import BaseModel


# Fields are optional so missing values surface as our own 400 messages.
class SignupRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None  # BUSINESS_OWNER / FREELANCER


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ResendVerificationRequest(BaseModel):
    email: str | None = None
