from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.marketplace import ProposalCreate, ProposalStatusUpdate
from ..services import proposals
from ..utils.dependencies import CurrentUser, get_current_user
from ..utils.roles import freelancer_only

router = APIRouter(prefix="/proposals", tags=["Proposals"])


@router.post("", status_code=201)
def create_proposal(
    payload: ProposalCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(freelancer_only),
):
    return proposals.create_proposal(
        db,
        freelancer=user,
        job_id=payload.job_id,
        message=payload.message,
        proposed_price=payload.proposed_price,
    )


@router.get("/my-proposals")
def my_proposals(db: Session = Depends(get_db), user: CurrentUser = Depends(freelancer_only)):
    return proposals.list_mine(db, freelancer=user)


@router.get("/job/{job_id}")
def proposals_for_job(
    job_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return proposals.list_for_job(db, user=user, job_id=job_id)


@router.put("/{proposal_id}")
def update_proposal(
    proposal_id: int,
    payload: ProposalStatusUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return proposals.update_status(db, user=user, proposal_id=proposal_id, status=payload.status)
