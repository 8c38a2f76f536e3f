from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import get_settings
from ..config import Settings
from ..database import get_db
from ..errors import AuthenticationError, NotFoundError
from ..schemas import AuthOut, LoginIn, SignupIn
from ..services import users

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupIn, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    result = users.signup(db, settings, payload.name, payload.email, payload.password)
    return {"message": "User created successfully.", "user": result.user, "token": result.token}


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    try:
        result = users.login(db, settings, payload.email, payload.password)
    except NotFoundError as exc:
        # an unknown email is an authentication failure on this surface
        raise AuthenticationError(exc.message)
    return {"message": "Login successful.", "user": result.user, "token": result.token}
