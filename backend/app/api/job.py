from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.job import CompleteJobRequest, JobCreate, JobUpdate, SelectFreelancerRequest
from ..services import jobs
from ..utils.dependencies import CurrentUser, get_current_user, get_optional_user
from ..utils.roles import verified_business_owner

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", status_code=201)
def create_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(verified_business_owner),
):
    return jobs.create_job(db, owner=user, fields=payload.model_dump())


@router.get("")
def list_jobs(
    owner: str | None = Query(default=None),
    status: str | None = Query(default=None),
    category: str | None = Query(default=None),
    db: Session = Depends(get_db),
    user: CurrentUser | None = Depends(get_optional_user),
):
    return jobs.list_jobs(db, owner_id=owner, status=status, category=category)


@router.get("/{job_id}")
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return jobs.get_job(db, job_id=job_id)


@router.put("/{job_id}")
def update_job(
    job_id: int,
    payload: JobUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return jobs.update_job(db, user=user, job_id=job_id, fields=payload.model_dump(exclude_unset=True))


@router.put("/{job_id}/select-freelancer")
def select_freelancer(
    job_id: int,
    payload: SelectFreelancerRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return jobs.select_freelancer(db, user=user, job_id=job_id, freelancer_id=payload.chosen_id)


@router.put("/{job_id}/complete")
def complete_job(
    job_id: int,
    payload: CompleteJobRequest | None = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    payload = payload or CompleteJobRequest()
    return jobs.complete_job(db, user=user, job_id=job_id, rating=payload.rating, comment=payload.comment)
