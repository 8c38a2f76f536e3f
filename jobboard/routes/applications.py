from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from ..auth import get_current_principal
from ..database import get_db
from ..schemas import ApplicationCreatedOut, ApplicationCreateIn, ApplicationOut, MessageOut
from ..services import applications
from ..services.validation import parse_id
from ..token import Principal

router = APIRouter(tags=["applications"])

INVALID_APPLICATION_ID = "Invalid application ID format."


@router.post("/applications", response_model=ApplicationCreatedOut, status_code=status.HTTP_201_CREATED)
def create_application(
    payload: ApplicationCreateIn | None = Body(default=None),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    payload = payload or ApplicationCreateIn()
    job_id = parse_id(payload.job_id, "Job ID is required in a valid format.")
    # the body may name the user explicitly; otherwise the caller applies for themselves
    user_id = principal.user_id
    if payload.user_id is not None:
        user_id = parse_id(payload.user_id, "Invalid user ID format.")
    application = applications.create_application(db, user_id, job_id, principal)
    return {"message": "Application successfully saved.", "application": application}


@router.get("/applications", response_model=list[ApplicationOut])
def list_applications(db: Session = Depends(get_db)):
    return applications.list_applications(db)


@router.get("/applicationsByUser", response_model=list[ApplicationOut])
def list_applications_by_user(db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    return applications.list_applications_by_user(db, principal)


@router.get("/applications/{application_id}", response_model=ApplicationOut)
def get_application(application_id: str, db: Session = Depends(get_db)):
    return applications.get_application(db, parse_id(application_id, INVALID_APPLICATION_ID))


@router.delete("/applications/{application_id}", response_model=MessageOut)
def delete_application(
    application_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    applications.delete_application(db, parse_id(application_id, INVALID_APPLICATION_ID), principal)
    return {"message": "Application successfully deleted."}
