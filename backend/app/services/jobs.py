"""
Job lifecycle: posting, browsing, editing, selecting a freelancer, completion.

Status moves OPEN -> IN_PROGRESS (select_freelancer) -> COMPLETED (complete_job);
OPEN or IN_PROGRESS jobs may be CANCELLED through update_job.
"""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.enums import JobStatus, ProposalStatus
from ..models.job import Job
from ..models.message import Message
from ..models.proposal import Proposal
from ..models.review import Review
from ..utils.dependencies import CurrentUser
from ..utils.error_handlers import NotFoundError, ValidationError, get_error_message
from ..utils.permissions import (
    JobRelation,
    ensure_can_manage_job,
    ensure_job_owner,
    ensure_participant,
)
from ..utils.serializers import job_payload, review_payload
from ..utils.validation import (
    parse_deadline,
    validate_integer_field,
    validate_job_status,
    validate_number_field,
    validate_rating,
    validate_string_field,
)

logger = logging.getLogger(__name__)

REQUIRED_JOB_FIELDS = ("title", "description", "category", "budget_min", "budget_max", "deadline")
CANCELLABLE_STATUSES = (JobStatus.OPEN, JobStatus.IN_PROGRESS)


def get_job_or_404(db: Session, job_id: int, *, for_update: bool = False) -> Job:
    query = db.query(Job).filter(Job.id == int(job_id))
    if for_update:
        query = query.with_for_update()
    job = query.first()
    if job is None:
        raise NotFoundError(get_error_message("job_not_found"))
    return job


def count_grouped(db: Session, column, keys: list[int]) -> dict[int, int]:
    """{key: row count} grouped by a foreign key column (job_id, owner_id, ...)."""
    if not keys:
        return {}
    rows = (
        db.query(column, func.count())
        .filter(column.in_(keys))
        .group_by(column)
        .all()
    )
    return {int(key): int(n) for key, n in rows}


def _validate_budget(budget_min: float, budget_max: float) -> None:
    if budget_min > budget_max:
        raise ValidationError("budget_min cannot exceed budget_max")


def create_job(db: Session, *, owner: CurrentUser, fields: dict) -> dict:
    missing = [name for name in REQUIRED_JOB_FIELDS if fields.get(name) in (None, "")]
    if missing:
        raise ValidationError(
            get_error_message("invalid_job_data"),
            details={"missing": missing},
        )

    title = validate_string_field(fields["title"], "Title", min_length=2, max_length=150)
    description = validate_string_field(fields["description"], "Description", min_length=10, max_length=10000)
    category = validate_string_field(fields["category"], "Category", max_length=100)
    budget_min = validate_number_field(fields["budget_min"], "budget_min", min_value=0)
    budget_max = validate_number_field(fields["budget_max"], "budget_max", min_value=0)
    _validate_budget(budget_min, budget_max)
    deadline = parse_deadline(fields["deadline"])

    job = Job(
        owner_id=owner.id,
        title=title,
        description=description,
        category=category,
        budget_min=budget_min,
        budget_max=budget_max,
        deadline=deadline,
        status=JobStatus.OPEN,
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    logger.info("Job %s created by user %s", job.id, owner.id)
    return job_payload(job, proposal_count=0, owner_email=True)


def list_jobs(
    db: Session,
    *,
    owner_id=None,
    status=None,
    category: str | None = None,
) -> list[dict]:
    query = db.query(Job)
    if owner_id not in (None, ""):
        query = query.filter(Job.owner_id == validate_integer_field(owner_id, "owner"))
    if status:
        query = query.filter(Job.status == validate_job_status(status))
    if category:
        query = query.filter(Job.category == category.strip())

    jobs = query.order_by(Job.created_at.desc(), Job.id.desc()).all()
    proposal_counts = count_grouped(db, Proposal.job_id, [j.id for j in jobs])
    return [job_payload(j, proposal_count=proposal_counts.get(j.id, 0)) for j in jobs]


def get_job(db: Session, *, job_id: int) -> dict:
    job = get_job_or_404(db, job_id)
    return job_payload(
        job,
        proposal_count=count_grouped(db, Proposal.job_id, [job.id]).get(job.id, 0),
        message_count=count_grouped(db, Message.job_id, [job.id]).get(job.id, 0),
        owner_email=True,
    )


def update_job(db: Session, *, user: CurrentUser, job_id: int, fields: dict) -> dict:
    job = get_job_or_404(db, job_id)
    ensure_can_manage_job(user, job)

    if fields.get("title") is not None:
        job.title = validate_string_field(fields["title"], "Title", min_length=2, max_length=150)
    if fields.get("description") is not None:
        job.description = validate_string_field(
            fields["description"], "Description", min_length=10, max_length=10000
        )
    if fields.get("category") is not None:
        job.category = validate_string_field(fields["category"], "Category", max_length=100)
    if fields.get("budget_min") is not None:
        job.budget_min = validate_number_field(fields["budget_min"], "budget_min", min_value=0)
    if fields.get("budget_max") is not None:
        job.budget_max = validate_number_field(fields["budget_max"], "budget_max", min_value=0)
    _validate_budget(job.budget_min, job.budget_max)
    if fields.get("deadline") is not None:
        job.deadline = parse_deadline(fields["deadline"])

    if fields.get("status") is not None:
        target = validate_job_status(fields["status"])
        if target != job.status:
            if target is not JobStatus.CANCELLED:
                raise ValidationError(
                    "Job status can only be changed to CANCELLED here; "
                    "use select-freelancer or complete for other transitions"
                )
            if job.status not in CANCELLABLE_STATUSES:
                raise ValidationError(f"A {job.status.value} job cannot be cancelled")
            job.status = JobStatus.CANCELLED
            logger.info("Job %s cancelled by user %s", job.id, user.id)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(job)
    return job_payload(job)


def select_freelancer(db: Session, *, user: CurrentUser, job_id: int, freelancer_id) -> dict:
    # Lock the job row so two selections on the same job serialize.
    job = get_job_or_404(db, job_id, for_update=True)
    ensure_job_owner(user, job)
    freelancer_id = validate_integer_field(freelancer_id, "freelancerId")
    if job.status is not JobStatus.OPEN:
        raise ValidationError(f"Cannot select a freelancer for a {job.status.value} job")

    chosen = (
        db.query(Proposal)
        .filter(Proposal.job_id == job.id, Proposal.freelancer_id == freelancer_id)
        .first()
    )
    if chosen is None:
        raise ValidationError("This freelancer has not submitted a proposal for this job")

    # One transaction: job assignment, acceptance and rival rejections commit together.
    try:
        job.chosen_freelancer_id = freelancer_id
        job.status = JobStatus.IN_PROGRESS
        chosen.status = ProposalStatus.ACCEPTED
        (
            db.query(Proposal)
            .filter(Proposal.job_id == job.id, Proposal.id != chosen.id)
            .update({Proposal.status: ProposalStatus.REJECTED}, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Selecting freelancer %s for job %s failed", freelancer_id, job.id)
        raise

    db.refresh(job)
    logger.info("Job %s assigned to freelancer %s", job.id, freelancer_id)
    return job_payload(job)


def has_review(db: Session, *, job_id: int, from_user_id: int, to_user_id: int) -> bool:
    row = (
        db.query(Review.id)
        .filter(
            Review.job_id == job_id,
            Review.from_user_id == from_user_id,
            Review.to_user_id == to_user_id,
        )
        .first()
    )
    return row is not None


def complete_job(
    db: Session,
    *,
    user: CurrentUser,
    job_id: int,
    rating=None,
    comment: str | None = None,
) -> dict:
    job = get_job_or_404(db, job_id)
    relation = ensure_participant(user, job)
    if job.status is not JobStatus.IN_PROGRESS:
        raise ValidationError(f"Only IN_PROGRESS jobs can be completed (job is {job.status.value})")

    review = None
    review_skipped = None
    if rating is not None:
        rating = validate_rating(rating)
        to_user_id = job.chosen_freelancer_id if relation is JobRelation.OWNER else job.owner_id

    try:
        job.status = JobStatus.COMPLETED
        db.flush()
        if rating is not None:
            if has_review(db, job_id=job.id, from_user_id=user.id, to_user_id=to_user_id):
                review_skipped = get_error_message("already_reviewed")
            else:
                review = Review(
                    job_id=job.id,
                    from_user_id=user.id,
                    to_user_id=to_user_id,
                    rating=rating,
                    comment=(comment or "").strip() or None,
                )
                # A review posted concurrently loses only the savepoint, not the completion.
                try:
                    with db.begin_nested():
                        db.add(review)
                except IntegrityError:
                    review = None
                    review_skipped = get_error_message("already_reviewed")
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(job)
    logger.info("Job %s completed by user %s", job.id, user.id)

    payload = job_payload(job)
    if review is not None:
        db.refresh(review)
        payload["review"] = review_payload(review)
    if review_skipped:
        payload["review_skipped"] = review_skipped
    return payload
