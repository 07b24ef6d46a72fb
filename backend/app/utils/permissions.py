"""
Authorization predicates for jobs and the records hanging off them.

Every route decides access through `job_relation`, so the owner / chosen
freelancer / admin rules live in one place.
"""
import enum

from ..models.enums import Role
from ..models.job import Job
from .dependencies import CurrentUser
from .error_handlers import ForbiddenError, get_error_message


class JobRelation(enum.Enum):
    OWNER = "owner"
    CHOSEN_FREELANCER = "chosen_freelancer"
    ADMIN = "admin"
    NONE = "none"


def job_relation(user: CurrentUser, job: Job) -> JobRelation:
    # Ownership wins over role: an admin who owns a job acts as its owner.
    if job.owner_id == user.id:
        return JobRelation.OWNER
    if job.chosen_freelancer_id is not None and job.chosen_freelancer_id == user.id:
        return JobRelation.CHOSEN_FREELANCER
    if user.role is Role.ADMIN:
        return JobRelation.ADMIN
    return JobRelation.NONE


def is_participant(relation: JobRelation) -> bool:
    return relation in (JobRelation.OWNER, JobRelation.CHOSEN_FREELANCER)


def ensure_can_manage_job(user: CurrentUser, job: Job) -> JobRelation:
    """Owner or admin: edit, cancel, read proposals."""
    relation = job_relation(user, job)
    if relation not in (JobRelation.OWNER, JobRelation.ADMIN):
        raise ForbiddenError(get_error_message("forbidden"))
    return relation


def ensure_job_owner(user: CurrentUser, job: Job) -> None:
    if job_relation(user, job) is not JobRelation.OWNER:
        raise ForbiddenError(get_error_message("forbidden"))


def ensure_participant(user: CurrentUser, job: Job) -> JobRelation:
    """Owner or chosen freelancer: complete, review."""
    relation = job_relation(user, job)
    if not is_participant(relation):
        raise ForbiddenError(get_error_message("forbidden"))
    return relation


def ensure_can_message(user: CurrentUser, job: Job, *, action: str = "message on") -> JobRelation:
    relation = job_relation(user, job)
    if relation is JobRelation.NONE:
        raise ForbiddenError(f"Not authorized to {action} this job")
    return relation
