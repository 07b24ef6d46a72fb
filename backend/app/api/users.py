from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.marketplace import ProfileUpdate
from ..services import profiles
from ..utils.dependencies import CurrentUser, get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile")
def get_profile(db: Session = Depends(get_db), user: CurrentUser = Depends(get_current_user)):
    return profiles.get_own_profile(db, identity=user)


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return profiles.update_own_profile(db, identity=user, fields=payload.model_dump(exclude_unset=True))


@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    return profiles.get_public_user(db, user_id=user_id)
