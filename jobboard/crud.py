from __future__ import annotations
import logging
from dataclasses import dataclass

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from . import models
from .errors import ConflictError, InternalError

LOGGER = logging.getLogger("jobboard.store")


def commit(db: Session, operation: str, conflict_message: str = "Conflict.") -> None:
    """
    Commit the unit of work. Unique-constraint violations become
    ConflictError; any other store failure is logged and becomes InternalError.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        LOGGER.info("constraint violation during %s", operation)
        raise ConflictError(conflict_message)
    except SQLAlchemyError:
        db.rollback()
        LOGGER.exception("store failure during %s", operation)
        raise InternalError()


# Users

def get_user(db: Session, user_id: int) -> models.User | None:
    return db.get(models.User, user_id)

def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == email).first()

def list_users(db: Session) -> list[models.User]:
    stmt = select(models.User).options(selectinload(models.User.applications)).order_by(models.User.id.asc())
    return list(db.execute(stmt).scalars())

def create_user(db: Session, name: str, email: str, hashed_password: str) -> models.User:
    user = models.User(name=name, email=email, password=hashed_password)
    db.add(user)
    commit(db, "create_user", "Email already in use.")
    db.refresh(user)
    return user

def update_user(db: Session, user: models.User, values: dict) -> models.User:
    for field, value in values.items():
        setattr(user, field, value)
    commit(db, f"update_user id={user.id}", "Email already in use.")
    db.refresh(user)
    return user

def delete_user(db: Session, user: models.User) -> None:
    db.delete(user)
    commit(db, f"delete_user id={user.id}")


# Jobs

@dataclass(frozen=True)
class JobQuery:
    """
    The only supported job search predicates: ``keyword`` matches title,
    description or company (OR); ``location`` matches location. Both are
    case-insensitive substring matches and are ANDed when both are set.
    """
    keyword: str | None = None
    location: str | None = None

    @property
    def is_filtered(self) -> bool:
        return self.keyword is not None or self.location is not None

    def where_clauses(self) -> list:
        clauses = []
        if self.keyword is not None:
            clauses.append(
                or_(
                    models.Job.title.icontains(self.keyword, autoescape=True),
                    models.Job.description.icontains(self.keyword, autoescape=True),
                    models.Job.company.icontains(self.keyword, autoescape=True),
                )
            )
        if self.location is not None:
            clauses.append(models.Job.location.icontains(self.location, autoescape=True))
        return clauses


def get_job(db: Session, job_id: int) -> models.Job | None:
    return db.get(models.Job, job_id)

def get_job_by_url(db: Session, url: str) -> models.Job | None:
    return db.execute(select(models.Job).where(models.Job.url == url).limit(1)).scalar_one_or_none()

def search_jobs(db: Session, query: JobQuery) -> list[models.Job]:
    stmt = select(models.Job).where(*query.where_clauses()).order_by(models.Job.id.asc())
    return list(db.execute(stmt).scalars())

def create_job(db: Session, values: dict) -> models.Job:
    job = models.Job(**values)
    db.add(job)
    commit(db, "create_job")
    db.refresh(job)
    return job

def add_job_if_new(db: Session, values: dict) -> models.Job | None:
    """Stage a job unless one with the same url exists. Caller commits."""
    if get_job_by_url(db, values["url"]) is not None:
        return None
    job = models.Job(**values)
    db.add(job)
    db.flush()  # get job.id and make the url visible to the next lookup
    return job

def update_job(db: Session, job: models.Job, values: dict) -> models.Job:
    for field, value in values.items():
        setattr(job, field, value)
    commit(db, f"update_job id={job.id}")
    db.refresh(job)
    return job

def delete_job(db: Session, job: models.Job) -> None:
    db.delete(job)
    commit(db, f"delete_job id={job.id}")


# Applications

def _application_select():
    return select(models.Application).options(
        selectinload(models.Application.user),
        selectinload(models.Application.job),
    )

def get_application(db: Session, application_id: int) -> models.Application | None:
    stmt = _application_select().where(models.Application.id == application_id)
    return db.execute(stmt).scalar_one_or_none()

def get_owned_application(db: Session, application_id: int, user_id: int) -> models.Application | None:
    stmt = _application_select().where(
        models.Application.id == application_id,
        models.Application.user_id == user_id,
    )
    return db.execute(stmt).scalar_one_or_none()

def find_application(db: Session, user_id: int, job_id: int) -> models.Application | None:
    stmt = select(models.Application).where(
        models.Application.user_id == user_id,
        models.Application.job_id == job_id,
    )
    return db.execute(stmt).scalar_one_or_none()

def list_applications(db: Session, user_id: int | None = None) -> list[models.Application]:
    stmt = _application_select().order_by(models.Application.id.asc())
    if user_id is not None:
        stmt = stmt.where(models.Application.user_id == user_id)
    return list(db.execute(stmt).scalars())

def create_application(db: Session, user_id: int, job_id: int) -> models.Application:
    application = models.Application(user_id=user_id, job_id=job_id)
    db.add(application)
    commit(db, f"create_application user={user_id} job={job_id}", "Application already exists.")
    return get_application(db, application.id)

def delete_application(db: Session, application: models.Application) -> None:
    db.delete(application)
    commit(db, f"delete_application id={application.id}")
