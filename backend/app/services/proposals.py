import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models.enums import JobStatus, ProposalStatus
from ..models.proposal import Proposal
from ..utils.dependencies import CurrentUser
from ..utils.error_handlers import (
    ConflictError,
    NotFoundError,
    ValidationError,
    get_error_message,
)
from ..utils.permissions import ensure_can_manage_job
from ..utils.serializers import proposal_payload
from ..utils.validation import (
    validate_integer_field,
    validate_number_field,
    validate_proposal_status,
    validate_string_field,
)
from .jobs import get_job_or_404

logger = logging.getLogger(__name__)

# ACCEPTED is reachable only through select-freelancer; nothing is ever re-opened.
ALLOWED_STATUS_TRANSITIONS: dict[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.PENDING: frozenset({ProposalStatus.REJECTED}),
    ProposalStatus.ACCEPTED: frozenset(),
    ProposalStatus.REJECTED: frozenset(),
}


def has_proposal(db: Session, *, job_id: int, freelancer_id: int) -> bool:
    row = (
        db.query(Proposal.id)
        .filter(Proposal.job_id == job_id, Proposal.freelancer_id == freelancer_id)
        .first()
    )
    return row is not None


def create_proposal(
    db: Session,
    *,
    freelancer: CurrentUser,
    job_id,
    message,
    proposed_price,
) -> dict:
    if job_id in (None, "") or not message or proposed_price in (None, ""):
        raise ValidationError("All fields are required")
    job_id = validate_integer_field(job_id, "job_id")
    message = validate_string_field(message, "Message", max_length=5000)
    proposed_price = validate_number_field(proposed_price, "proposed_price", min_value=0)

    job = get_job_or_404(db, job_id)
    if job.status is not JobStatus.OPEN:
        raise ValidationError(get_error_message("job_closed"))

    if has_proposal(db, job_id=job.id, freelancer_id=freelancer.id):
        raise ConflictError(get_error_message("already_proposed"))

    proposal = Proposal(
        job_id=job.id,
        freelancer_id=freelancer.id,
        message=message,
        proposed_price=proposed_price,
        status=ProposalStatus.PENDING,
    )
    try:
        db.add(proposal)
        db.commit()
    except IntegrityError:
        # A concurrent submission for the same pair won the unique constraint.
        db.rollback()
        raise ConflictError(get_error_message("already_proposed"))
    db.refresh(proposal)
    logger.info("Proposal %s submitted on job %s by user %s", proposal.id, job.id, freelancer.id)

    payload = proposal_payload(proposal, include_freelancer=True)
    payload["job"] = {"id": job.id, "title": job.title}
    return payload


def list_for_job(db: Session, *, user: CurrentUser, job_id: int) -> list[dict]:
    job = get_job_or_404(db, job_id)
    ensure_can_manage_job(user, job)

    proposals = (
        db.query(Proposal)
        .filter(Proposal.job_id == job.id)
        .order_by(Proposal.created_at.desc(), Proposal.id.desc())
        .all()
    )
    return [proposal_payload(p, include_freelancer_profile=True) for p in proposals]


def list_mine(db: Session, *, freelancer: CurrentUser) -> list[dict]:
    proposals = (
        db.query(Proposal)
        .filter(Proposal.freelancer_id == freelancer.id)
        .order_by(Proposal.created_at.desc(), Proposal.id.desc())
        .all()
    )
    return [proposal_payload(p, include_job=True) for p in proposals]


def update_status(db: Session, *, user: CurrentUser, proposal_id: int, status) -> dict:
    proposal = db.get(Proposal, int(proposal_id))
    if proposal is None:
        raise NotFoundError(get_error_message("proposal_not_found"))
    ensure_can_manage_job(user, proposal.job)

    target = validate_proposal_status(status)
    if target is proposal.status:
        return proposal_payload(proposal)

    if target not in ALLOWED_STATUS_TRANSITIONS[proposal.status]:
        hint = " (use select-freelancer to accept)" if target is ProposalStatus.ACCEPTED else ""
        raise ConflictError(
            f"Cannot change proposal from {proposal.status.value} to {target.value}{hint}"
        )

    proposal.status = target
    db.commit()
    db.refresh(proposal)
    logger.info("Proposal %s set to %s by user %s", proposal.id, target.value, user.id)
    return proposal_payload(proposal)
