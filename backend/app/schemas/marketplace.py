from pydantic import BaseModel


class ProposalCreate(BaseModel):
    job_id: int | None = None
    message: str | None = None
    proposed_price: float | None = None


class ProposalStatusUpdate(BaseModel):
    status: str | None = None


class MessageCreate(BaseModel):
    job_id: int | None = None
    text: str | None = None


class ReviewCreate(BaseModel):
    job_id: int | None = None
    to_user_id: int | None = None
    rating: float | None = None
    comment: str | None = None


class ProfileUpdate(BaseModel):
    business_name: str | None = None
    website: str | None = None
    location: str | None = None
    niche: str | None = None
    skills: str | None = None
    bio: str | None = None
