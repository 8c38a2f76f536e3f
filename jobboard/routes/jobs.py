from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from ..auth import get_settings
from ..config import Settings
from ..database import get_db
from ..schemas import JobCreatedOut, JobCreateIn, JobOut, JobUpdatedOut, JobUpdateIn, MessageOut
from ..services import jobs
from ..services.validation import parse_id

router = APIRouter(tags=["jobs"])

INVALID_JOB_ID = "Invalid job ID format."


@router.post("/jobs", response_model=JobCreatedOut, status_code=status.HTTP_201_CREATED)
def create_job(payload: JobCreateIn | None = Body(default=None), db: Session = Depends(get_db)):
    fields = payload.model_dump() if payload else {}
    job = jobs.create_job(db, fields)
    return {"message": "Job created successfully.", "job": job}


@router.get("/jobs", response_model=list[JobOut])
def list_jobs(
    keyword: str | None = Query(None, description="Matches title, description or company"),
    location: str | None = Query(None, description="Matches location"),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return jobs.list_jobs(db, settings, keyword, location)


@router.get("/jobs/{job_id}", response_model=JobOut)
def get_job(job_id: str, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return jobs.get_job(db, settings, parse_id(job_id, INVALID_JOB_ID))


@router.patch("/jobs/{job_id}", response_model=JobUpdatedOut)
def update_job(job_id: str, payload: JobUpdateIn | None = Body(default=None), db: Session = Depends(get_db)):
    parsed_id = parse_id(job_id, INVALID_JOB_ID)
    patch = payload.model_dump(exclude_unset=True) if payload else {}
    updated = jobs.update_job(db, parsed_id, patch)
    return {"message": "Job successfully updated.", "updated_job": updated}


@router.delete("/jobs/{job_id}", response_model=MessageOut)
def delete_job(job_id: str, db: Session = Depends(get_db)):
    jobs.delete_job(db, parse_id(job_id, INVALID_JOB_ID))
    return {"message": "Job successfully deleted."}
