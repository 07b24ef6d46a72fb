from sqlalchemy.orm import Session

from ..models.review import Review
from ..models.user import Profile, User
from ..utils.dependencies import CurrentUser
from ..utils.error_handlers import NotFoundError, get_error_message
from ..utils.serializers import _iso, profile_payload, user_brief
from ..utils.validation import validate_string_field
from .reviews import rating_summary

PROFILE_FIELDS = {
    "business_name": 255,
    "website": 255,
    "location": 255,
    "niche": 255,
    "skills": 5000,
    "bio": 5000,
}


def _own_profile(db: Session, user_id: int) -> Profile:
    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    if profile is None:
        raise NotFoundError(get_error_message("profile_not_found"))
    return profile


def _with_user(profile: Profile) -> dict:
    payload = profile_payload(profile)
    user = profile.user
    payload["user"] = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }
    return payload


def get_own_profile(db: Session, *, identity: CurrentUser) -> dict:
    return _with_user(_own_profile(db, identity.id))


def update_own_profile(db: Session, *, identity: CurrentUser, fields: dict) -> dict:
    profile = _own_profile(db, identity.id)
    for name, max_length in PROFILE_FIELDS.items():
        if name not in fields or fields[name] is None:
            continue
        label = name.replace("_", " ").capitalize()
        # Empty string clears a field.
        value = validate_string_field(fields[name], label, max_length=max_length, required=False)
        setattr(profile, name, value or None)
    db.commit()
    db.refresh(profile)
    return _with_user(profile)


def get_public_user(db: Session, *, user_id: int) -> dict:
    user = db.get(User, int(user_id))
    if user is None:
        raise NotFoundError(get_error_message("user_not_found"))

    received = (
        db.query(Review)
        .filter(Review.to_user_id == user.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    return {
        "id": user.id,
        "name": user.name,
        "role": user.role.value,
        "created_at": _iso(user.created_at),
        "profile": profile_payload(user.profile),
        "reviews_received": [
            {
                "id": r.id,
                "job_id": r.job_id,
                "rating": r.rating,
                "comment": r.comment,
                "created_at": _iso(r.created_at),
                "from_user": user_brief(r.from_user),
            }
            for r in received
        ],
        "rating": rating_summary(db, user_id=user.id),
    }
