from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.marketplace import ReviewCreate
from ..services import reviews
from ..utils.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", status_code=201)
def create_review(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return reviews.create_review(
        db,
        author=user,
        job_id=payload.job_id,
        to_user_id=payload.to_user_id,
        rating=payload.rating,
        comment=payload.comment,
    )


@router.get("/user/{user_id}")
def user_reviews(
    user_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return reviews.list_for_user(db, user_id=user_id)
