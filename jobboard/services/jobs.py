"""
Job resource service.

Jobs form a shared catalog: anyone may create, update or delete them. Search
and single reads may consult the external job-search API when it is
configured; those calls are best effort and never change the outcome of the
primary operation.
"""
from __future__ import annotations
import logging
import requests
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import crud, models
from ..config import Settings
from ..crud import JobQuery
from ..errors import JobBoardError, NotFoundError
from ..jobs import fetch_jobs
from .validation import clean_patch, optional_filter, require_fields

LOGGER = logging.getLogger("jobboard.jobs")

JOB_NOT_FOUND_MESSAGE = "Job not found."
REQUIRED_FIELDS = ["title", "url", "description", "company", "company_url", "location"]
UPDATABLE_FIELDS = set(REQUIRED_FIELDS) | {"posted_at"}

# failures of the enrichment path that are logged and swallowed
ENRICHMENT_ERRORS = (requests.RequestException, ValueError, SQLAlchemyError, JobBoardError)


def create_job(db: Session, fields: dict) -> models.Job:
    require_fields(
        fields,
        REQUIRED_FIELDS,
        "Title, URL, description, company, companyURL and location are required.",
    )
    values = {field: fields[field] for field in REQUIRED_FIELDS}
    posted_at: datetime | None = fields.get("posted_at")
    if posted_at is not None:
        values["posted_at"] = posted_at
    job = crud.create_job(db, values)
    LOGGER.info("job created id=%s", job.id)
    return job


def list_jobs(db: Session, settings: Settings, keyword: str | None = None, location: str | None = None) -> list[models.Job]:
    query = JobQuery(
        keyword=optional_filter(keyword, "Keyword is required."),
        location=optional_filter(location, "Location is required."),
    )
    jobs = crud.search_jobs(db, query)
    if jobs or not query.is_filtered or not settings.job_search_enabled:
        return jobs

    try:
        fetch_jobs.fetch_and_store_jobs(db, settings, query.keyword, query.location)
    except ENRICHMENT_ERRORS as exc:
        db.rollback()
        LOGGER.warning("job search enrichment failed keyword=%r location=%r: %s", query.keyword, query.location, exc)
        return jobs
    return crud.search_jobs(db, query)


def get_job(db: Session, settings: Settings, job_id: int) -> models.Job:
    job = crud.get_job(db, job_id)
    if job is None:
        raise NotFoundError(JOB_NOT_FOUND_MESSAGE)
    if not job.description and settings.job_info_enabled:
        _backfill_description(db, settings, job)
    return job


def _backfill_description(db: Session, settings: Settings, job: models.Job) -> None:
    try:
        description = fetch_jobs.fetch_job_description(settings, job.url)
        if description:
            crud.update_job(db, job, {"description": description})
    except ENRICHMENT_ERRORS as exc:
        db.rollback()
        LOGGER.warning("description backfill failed job_id=%s: %s", job.id, exc)


def update_job(db: Session, job_id: int, patch: dict) -> models.Job:
    values = clean_patch(patch, UPDATABLE_FIELDS)
    job = crud.get_job(db, job_id)
    if job is None:
        raise NotFoundError(JOB_NOT_FOUND_MESSAGE)
    job = crud.update_job(db, job, values)
    LOGGER.info("job updated id=%s fields=%s", job.id, sorted(values))
    return job


def delete_job(db: Session, job_id: int) -> None:
    job = crud.get_job(db, job_id)
    if job is None:
        raise NotFoundError(JOB_NOT_FOUND_MESSAGE)
    crud.delete_job(db, job)
    LOGGER.info("job deleted id=%s", job_id)
