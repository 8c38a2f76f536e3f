from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    # JSON uses camelCase (createdAt, jobId); Python code uses snake_case
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


# Requests. Fields are optional so the services can report missing ones with
# their own messages; wrong JSON types still fail validation (400).

class SignupIn(WireModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None

class LoginIn(WireModel):
    email: str | None = None
    password: str | None = None

class UserUpdateIn(WireModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None

class JobCreateIn(WireModel):
    title: str | None = None
    url: str | None = None
    description: str | None = None
    company: str | None = None
    company_url: str | None = Field(None, alias="companyURL")
    location: str | None = None
    posted_at: datetime | None = None

class JobUpdateIn(JobCreateIn):
    pass

class ApplicationCreateIn(WireModel):
    job_id: int | str | None = None
    user_id: int | str | None = None


# Responses

class ApplicationSummaryOut(WireModel):
    id: int
    applied_at: datetime
    user_id: int
    job_id: int

class UserBriefOut(WireModel):
    id: int
    name: str
    email: str
    created_at: datetime

class UserOut(UserBriefOut):
    applications: list[ApplicationSummaryOut] = Field(default_factory=list)

class JobOut(WireModel):
    id: int
    title: str
    url: str
    description: str
    company: str
    company_url: str = Field(alias="companyURL")
    location: str
    posted_at: datetime
    created_at: datetime

class ApplicationOut(ApplicationSummaryOut):
    user: UserBriefOut
    job: JobOut

class MessageOut(WireModel):
    message: str

class AuthOut(MessageOut):
    user: UserOut
    token: str

class UserUpdatedOut(MessageOut):
    updated_user: UserOut

class JobCreatedOut(MessageOut):
    job: JobOut

class JobUpdatedOut(MessageOut):
    updated_job: JobOut

class ApplicationCreatedOut(MessageOut):
    application: ApplicationOut
