from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_principal
from ..database import get_db
from ..schemas import MessageOut, UserOut, UserUpdatedOut, UserUpdateIn
from ..services import users
from ..services.validation import parse_id
from ..token import Principal

router = APIRouter(tags=["users"])

INVALID_USER_ID = "Invalid user ID format."


@router.get("/users", response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return users.list_users(db)


@router.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return users.get_user(db, parse_id(user_id, INVALID_USER_ID))


@router.patch("/users/{user_id}", response_model=UserUpdatedOut)
def update_user(
    user_id: str,
    payload: UserUpdateIn | None = Body(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    patch = payload.model_dump(exclude_unset=True) if payload else {}
    updated = users.update_user(db, parse_id(user_id, INVALID_USER_ID), patch, principal)
    return {"message": "User successfully updated.", "updated_user": updated}


@router.delete("/users/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    users.delete_user(db, parse_id(user_id, INVALID_USER_ID), principal)
    return {"message": "User successfully deleted."}
