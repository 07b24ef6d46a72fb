from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.marketplace import MessageCreate
from ..services import messages
from ..utils.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", status_code=201)
def send_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return messages.send_message(db, sender=user, job_id=payload.job_id, text=payload.text)


@router.get("/job/{job_id}")
def job_messages(
    job_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return messages.list_for_job(db, user=user, job_id=job_id)
