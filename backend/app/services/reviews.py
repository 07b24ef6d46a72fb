import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.review import Review
from ..utils.dependencies import CurrentUser
from ..utils.error_handlers import ConflictError, ValidationError, get_error_message
from ..utils.permissions import JobRelation, ensure_participant
from ..utils.serializers import review_payload
from ..utils.validation import validate_integer_field, validate_rating, validate_string_field
from .jobs import get_job_or_404, has_review

logger = logging.getLogger(__name__)


def create_review(
    db: Session,
    *,
    author: CurrentUser,
    job_id,
    to_user_id,
    rating,
    comment=None,
) -> dict:
    if job_id in (None, "") or to_user_id in (None, "") or rating in (None, ""):
        raise ValidationError("Job ID, recipient, and rating required")
    rating = validate_rating(rating)
    job_id = validate_integer_field(job_id, "job_id")
    to_user_id = validate_integer_field(to_user_id, "to_user_id")
    comment = validate_string_field(comment, "Comment", max_length=2000, required=False) or None

    job = get_job_or_404(db, job_id)
    relation = ensure_participant(author, job)
    counterparty = job.chosen_freelancer_id if relation is JobRelation.OWNER else job.owner_id
    if counterparty is None or to_user_id != counterparty:
        raise ValidationError("Reviews can only be left for the other participant of this job")

    if has_review(db, job_id=job.id, from_user_id=author.id, to_user_id=to_user_id):
        raise ConflictError(get_error_message("already_reviewed"))

    review = Review(
        job_id=job.id,
        from_user_id=author.id,
        to_user_id=to_user_id,
        rating=rating,
        comment=comment,
    )
    try:
        db.add(review)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(get_error_message("already_reviewed"))
    db.refresh(review)
    logger.info("Review %s left on job %s by user %s", review.id, job.id, author.id)
    return review_payload(review)


def list_for_user(db: Session, *, user_id: int) -> list[dict]:
    reviews = (
        db.query(Review)
        .filter(Review.to_user_id == int(user_id))
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    return [review_payload(r, include_job=True) for r in reviews]


def rating_summary(db: Session, *, user_id: int) -> dict:
    count, average = (
        db.query(func.count(Review.id), func.avg(Review.rating))
        .filter(Review.to_user_id == int(user_id))
        .one()
    )
    return {
        "count": int(count or 0),
        "average": round(float(average), 2) if average is not None else None,
    }
