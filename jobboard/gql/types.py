from datetime import datetime
from typing import Optional

import strawberry

from .. import models


@strawberry.type(name="User")
class UserType:
    id: int
    name: str
    email: str
    created_at: datetime
    row: strawberry.Private[models.User]

    @classmethod
    def from_row(cls, row: models.User) -> "UserType":
        return cls(id=row.id, name=row.name, email=row.email, created_at=row.created_at, row=row)

    @strawberry.field
    def applications(self) -> list["ApplicationType"]:
        return [ApplicationType.from_row(a) for a in self.row.applications]


@strawberry.type(name="Job")
class JobType:
    id: int
    title: str
    url: str
    description: str
    company: str
    company_url: str = strawberry.field(name="companyURL")
    location: str
    posted_at: datetime
    created_at: datetime
    row: strawberry.Private[models.Job]

    @classmethod
    def from_row(cls, row: models.Job) -> "JobType":
        return cls(
            id=row.id,
            title=row.title,
            url=row.url,
            description=row.description,
            company=row.company,
            company_url=row.company_url,
            location=row.location,
            posted_at=row.posted_at,
            created_at=row.created_at,
            row=row,
        )

    @strawberry.field
    def applications(self) -> list["ApplicationType"]:
        return [ApplicationType.from_row(a) for a in self.row.applications]


@strawberry.type(name="Application")
class ApplicationType:
    id: int
    applied_at: datetime
    row: strawberry.Private[models.Application]

    @classmethod
    def from_row(cls, row: models.Application) -> "ApplicationType":
        return cls(id=row.id, applied_at=row.applied_at, row=row)

    @strawberry.field
    def user(self) -> UserType:
        return UserType.from_row(self.row.user)

    @strawberry.field
    def job(self) -> JobType:
        return JobType.from_row(self.row.job)


@strawberry.type
class AuthPayload:
    success: bool
    message: str
    token: Optional[str]
    user: Optional[UserType]


@strawberry.input
class UpdateUserInput:
    name: Optional[str] = strawberry.UNSET
    email: Optional[str] = strawberry.UNSET
    password: Optional[str] = strawberry.UNSET


@strawberry.input
class CreateJobInput:
    title: str
    url: str
    description: str
    company: str
    company_url: str = strawberry.field(name="companyURL")
    location: str
    posted_at: Optional[datetime] = None


@strawberry.input
class UpdateJobInput:
    title: Optional[str] = strawberry.UNSET
    url: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    company: Optional[str] = strawberry.UNSET
    company_url: Optional[str] = strawberry.field(name="companyURL", default=strawberry.UNSET)
    location: Optional[str] = strawberry.UNSET
    posted_at: Optional[datetime] = strawberry.UNSET


@strawberry.input
class CreateApplicationInput:
    user_id: strawberry.ID
    job_id: strawberry.ID


def provided_fields(data) -> dict:
    """Fields the client actually sent on a partial-update input."""
    return {
        name: value
        for name, value in vars(data).items()
        if value is not strawberry.UNSET
    }
