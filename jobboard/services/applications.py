"""
Application resource service.

An application is either absent or present; it is created by its owner under
the existence and uniqueness preconditions and removed only by its owner.
"""
from __future__ import annotations
import logging

from sqlalchemy.orm import Session

from .. import crud, models
from ..errors import ConflictError, NotFoundError
from ..token import Principal
from .validation import require_owner

LOGGER = logging.getLogger("jobboard.applications")

APPLICATION_NOT_FOUND_MESSAGE = "Application not found."
APPLICATION_EXISTS_MESSAGE = "Application already exists."


def create_application(db: Session, user_id: int, job_id: int, principal: Principal | None) -> models.Application:
    require_owner(principal, user_id)
    if crud.get_user(db, user_id) is None:
        raise NotFoundError("User not found.")
    if crud.get_job(db, job_id) is None:
        raise NotFoundError("Job not found.")
    if crud.find_application(db, user_id, job_id) is not None:
        raise ConflictError(APPLICATION_EXISTS_MESSAGE)

    # a concurrent duplicate still fails on the unique constraint inside crud.commit
    application = crud.create_application(db, user_id, job_id)
    LOGGER.info("application created id=%s user=%s job=%s", application.id, user_id, job_id)
    return application


def list_applications(db: Session) -> list[models.Application]:
    return crud.list_applications(db)


def get_application(db: Session, application_id: int) -> models.Application:
    application = crud.get_application(db, application_id)
    if application is None:
        raise NotFoundError(APPLICATION_NOT_FOUND_MESSAGE)
    return application


def list_applications_by_user(db: Session, principal: Principal) -> list[models.Application]:
    return crud.list_applications(db, user_id=principal.user_id)


def delete_application(db: Session, application_id: int, principal: Principal) -> None:
    # missing and not-owned look the same to the caller
    application = crud.get_owned_application(db, application_id, principal.user_id)
    if application is None:
        raise NotFoundError(APPLICATION_NOT_FOUND_MESSAGE)
    crud.delete_application(db, application)
    LOGGER.info("application deleted id=%s user=%s", application_id, principal.user_id)
