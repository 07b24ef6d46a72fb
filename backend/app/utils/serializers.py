from datetime import datetime

from ..models.job import Job
from ..models.message import Message
from ..models.proposal import Proposal
from ..models.review import Review
from ..models.user import Profile, User


def _iso(value):
    return value.isoformat() if isinstance(value, datetime) else value


def _enum_value(value):
    return getattr(value, "value", value)


def user_brief(user: User | None) -> dict | None:
    if user is None:
        return None
    return {"id": user.id, "name": user.name}


def user_contact(user: User | None) -> dict | None:
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


def user_account(user: User) -> dict:
    # Keep keys aligned with what the client stores in its session.
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": _enum_value(user.role),
        "active": bool(user.active),
        "email_verified": bool(user.email_verified),
        "created_at": _iso(user.created_at),
    }


def profile_payload(profile: Profile | None) -> dict | None:
    if profile is None:
        return None
    return {
        "id": profile.id,
        "user_id": profile.user_id,
        "business_name": profile.business_name,
        "website": profile.website,
        "location": profile.location,
        "niche": profile.niche,
        "skills": profile.skills,
        "bio": profile.bio,
        "updated_at": _iso(profile.updated_at),
    }


def job_payload(
    job: Job,
    *,
    proposal_count: int | None = None,
    message_count: int | None = None,
    owner_email: bool = False,
) -> dict:
    payload = {
        "id": job.id,
        "owner_id": job.owner_id,
        "title": job.title,
        "description": job.description,
        "category": job.category,
        "budget_min": job.budget_min,
        "budget_max": job.budget_max,
        "deadline": _iso(job.deadline),
        "status": _enum_value(job.status),
        "chosen_freelancer_id": job.chosen_freelancer_id,
        "created_at": _iso(job.created_at),
        "owner": user_contact(job.owner) if owner_email else user_brief(job.owner),
        "chosen_freelancer": user_brief(job.chosen_freelancer),
    }
    counts = {}
    if proposal_count is not None:
        counts["proposals"] = int(proposal_count)
    if message_count is not None:
        counts["messages"] = int(message_count)
    if counts:
        payload["counts"] = counts
    return payload


def proposal_payload(
    proposal: Proposal,
    *,
    include_freelancer: bool = False,
    include_freelancer_profile: bool = False,
    include_job: bool = False,
) -> dict:
    payload = {
        "id": proposal.id,
        "job_id": proposal.job_id,
        "freelancer_id": proposal.freelancer_id,
        "message": proposal.message,
        "proposed_price": proposal.proposed_price,
        "status": _enum_value(proposal.status),
        "created_at": _iso(proposal.created_at),
    }
    if include_freelancer or include_freelancer_profile:
        freelancer = user_brief(proposal.freelancer)
        if include_freelancer_profile and freelancer is not None:
            profile = proposal.freelancer.profile
            freelancer["profile"] = {
                "niche": profile.niche if profile else None,
                "skills": profile.skills if profile else None,
                "bio": profile.bio if profile else None,
            }
        payload["freelancer"] = freelancer
    if include_job:
        job = proposal.job
        payload["job"] = {
            "id": job.id,
            "title": job.title,
            "description": job.description,
            "budget_min": job.budget_min,
            "budget_max": job.budget_max,
            "status": _enum_value(job.status),
            "owner": user_brief(job.owner),
        }
    return payload


def message_payload(message: Message) -> dict:
    return {
        "id": message.id,
        "job_id": message.job_id,
        "sender_id": message.sender_id,
        "text": message.text,
        "created_at": _iso(message.created_at),
        "sender": user_brief(message.sender),
    }


def review_payload(review: Review, *, include_job: bool = False) -> dict:
    payload = {
        "id": review.id,
        "job_id": review.job_id,
        "from_user_id": review.from_user_id,
        "to_user_id": review.to_user_id,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": _iso(review.created_at),
        "from_user": user_brief(review.from_user),
        "to_user": user_brief(review.to_user),
    }
    if include_job:
        payload["job"] = {"id": review.job.id, "title": review.job.title} if review.job else None
    return payload
