from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import admin
from ..utils.dependencies import CurrentUser
from ..utils.roles import admin_only

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(admin_only)])


@router.get("/users")
def all_users(db: Session = Depends(get_db)):
    return admin.list_users(db)


@router.get("/jobs")
def all_jobs(db: Session = Depends(get_db)):
    return admin.list_jobs(db)


@router.put("/users/{user_id}/deactivate")
def deactivate_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(admin_only),
):
    return admin.deactivate_user(db, admin=user, user_id=user_id)


@router.put("/users/{user_id}/activate")
def activate_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(admin_only),
):
    return admin.activate_user(db, admin=user, user_id=user_id)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(admin_only),
):
    # Accounts are never hard-deleted; DELETE is a soft deactivate.
    return admin.deactivate_user(db, admin=user, user_id=user_id)
