import logging

from sqlalchemy.orm import Session

from ..models.job import Job
from ..models.message import Message
from ..models.proposal import Proposal
from ..models.user import User
from ..utils.dependencies import CurrentUser
from ..utils.error_handlers import NotFoundError, ValidationError, get_error_message
from ..utils.serializers import job_payload, user_account
from .jobs import count_grouped

logger = logging.getLogger(__name__)


def list_users(db: Session) -> list[dict]:
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    ids = [u.id for u in users]
    jobs_owned = count_grouped(db, Job.owner_id, ids)
    proposals = count_grouped(db, Proposal.freelancer_id, ids)

    payload = []
    for u in users:
        row = user_account(u)
        row["counts"] = {
            "jobs_owned": jobs_owned.get(u.id, 0),
            "proposals": proposals.get(u.id, 0),
        }
        payload.append(row)
    return payload


def list_jobs(db: Session) -> list[dict]:
    jobs = db.query(Job).order_by(Job.created_at.desc(), Job.id.desc()).all()
    ids = [j.id for j in jobs]
    proposals = count_grouped(db, Proposal.job_id, ids)
    messages = count_grouped(db, Message.job_id, ids)
    return [
        job_payload(
            j,
            proposal_count=proposals.get(j.id, 0),
            message_count=messages.get(j.id, 0),
            owner_email=True,
        )
        for j in jobs
    ]


def _set_active(db: Session, *, admin: CurrentUser, user_id: int, active: bool) -> dict:
    user = db.get(User, int(user_id))
    if user is None:
        raise NotFoundError(get_error_message("user_not_found"))
    if not active and user.id == admin.id:
        raise ValidationError("You cannot deactivate your own account")

    # No cascade: jobs, proposals and messages stay; only authentication stops.
    user.active = active
    db.commit()
    db.refresh(user)
    logger.info("Admin %s set user %s active=%s", admin.id, user.id, active)
    return {"id": user.id, "name": user.name, "email": user.email, "active": bool(user.active)}


def deactivate_user(db: Session, *, admin: CurrentUser, user_id: int) -> dict:
    return _set_active(db, admin=admin, user_id=user_id, active=False)


def activate_user(db: Session, *, admin: CurrentUser, user_id: int) -> dict:
    return _set_active(db, admin=admin, user_id=user_id, active=True)
