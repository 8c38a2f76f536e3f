"""
GraphQL surface over the resource services.

The bearer header is decoded once per request in ``get_context``. Single-item
queries answer ``null`` for a missing row; mutations raise. Known service
errors reach the client with their message, anything else is masked.
"""
import logging
from typing import Optional

import strawberry
from fastapi import Depends, Request, Response, status
from graphql import GraphQLError
from sqlalchemy.orm import Session
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter
from strawberry.http import GraphQLHTTPResponse
from strawberry.types import ExecutionResult, Info

from ..auth import get_settings, get_token_from_header, resolve_principal
from ..config import Settings
from ..database import get_db
from ..errors import AuthenticationError, JobBoardError, NotFoundError
from ..services import applications, jobs, users
from ..services.validation import parse_id
from ..token import Principal
from .types import (
    ApplicationType,
    AuthPayload,
    CreateApplicationInput,
    CreateJobInput,
    JobType,
    UpdateJobInput,
    UpdateUserInput,
    UserType,
    provided_fields,
)

LOGGER = logging.getLogger("jobboard.graphql")


def get_context(request: Request, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> dict:
    principal = None
    auth_error = None
    try:
        principal = resolve_principal(settings, get_token_from_header(request))
    except AuthenticationError as exc:
        # public queries still work; protected resolvers raise this error
        LOGGER.info("graphql request with invalid token path=%s", request.url.path)
        auth_error = exc
    return {"db": db, "settings": settings, "principal": principal, "auth_error": auth_error}


def require_principal(info: Info) -> Principal:
    principal = info.context["principal"]
    if principal is None:
        raise info.context["auth_error"] or AuthenticationError("Not authenticated.")
    return principal


@strawberry.type
class Query:
    @strawberry.field
    def users(self, info: Info) -> list[UserType]:
        return [UserType.from_row(u) for u in users.list_users(info.context["db"])]

    @strawberry.field
    def user(self, info: Info, id: strawberry.ID) -> Optional[UserType]:
        user_id = parse_id(id, "Invalid user ID format.")
        try:
            return UserType.from_row(users.get_user(info.context["db"], user_id))
        except NotFoundError:
            return None

    @strawberry.field
    def jobs(self, info: Info, keyword: Optional[str] = None, location: Optional[str] = None) -> list[JobType]:
        rows = jobs.list_jobs(info.context["db"], info.context["settings"], keyword, location)
        return [JobType.from_row(j) for j in rows]

    @strawberry.field
    def job(self, info: Info, id: strawberry.ID) -> Optional[JobType]:
        job_id = parse_id(id, "Invalid job ID format.")
        try:
            return JobType.from_row(jobs.get_job(info.context["db"], info.context["settings"], job_id))
        except NotFoundError:
            return None

    @strawberry.field
    def applications(self, info: Info) -> list[ApplicationType]:
        return [ApplicationType.from_row(a) for a in applications.list_applications(info.context["db"])]

    @strawberry.field
    def application(self, info: Info, id: strawberry.ID) -> Optional[ApplicationType]:
        application_id = parse_id(id, "Invalid application ID format.")
        try:
            return ApplicationType.from_row(applications.get_application(info.context["db"], application_id))
        except NotFoundError:
            return None

    @strawberry.field
    def applications_by_user(self, info: Info) -> list[ApplicationType]:
        principal = require_principal(info)
        rows = applications.list_applications_by_user(info.context["db"], principal)
        return [ApplicationType.from_row(a) for a in rows]


@strawberry.type
class Mutation:
    @strawberry.mutation
    def signup(self, info: Info, name: str, email: str, password: str) -> AuthPayload:
        result = users.signup(info.context["db"], info.context["settings"], name, email, password)
        return AuthPayload(success=True, message="Signup successful.", token=result.token, user=UserType.from_row(result.user))

    @strawberry.mutation
    def login(self, info: Info, email: str, password: str) -> AuthPayload:
        try:
            result = users.login(info.context["db"], info.context["settings"], email, password)
        except NotFoundError as exc:
            raise AuthenticationError(exc.message)
        return AuthPayload(success=True, message="Login successful.", token=result.token, user=UserType.from_row(result.user))

    @strawberry.mutation
    def update_user(self, info: Info, id: strawberry.ID, data: UpdateUserInput) -> UserType:
        principal = require_principal(info)
        user_id = parse_id(id, "Invalid user ID format.")
        return UserType.from_row(users.update_user(info.context["db"], user_id, provided_fields(data), principal))

    @strawberry.mutation
    def delete_user(self, info: Info, id: strawberry.ID) -> bool:
        principal = require_principal(info)
        users.delete_user(info.context["db"], parse_id(id, "Invalid user ID format."), principal)
        return True

    @strawberry.mutation
    def create_job(self, info: Info, data: CreateJobInput) -> JobType:
        return JobType.from_row(jobs.create_job(info.context["db"], vars(data)))

    @strawberry.mutation
    def update_job(self, info: Info, id: strawberry.ID, data: UpdateJobInput) -> JobType:
        job_id = parse_id(id, "Invalid job ID format.")
        return JobType.from_row(jobs.update_job(info.context["db"], job_id, provided_fields(data)))

    @strawberry.mutation
    def delete_job(self, info: Info, id: strawberry.ID) -> bool:
        jobs.delete_job(info.context["db"], parse_id(id, "Invalid job ID format."))
        return True

    @strawberry.mutation
    def create_application(self, info: Info, data: CreateApplicationInput) -> ApplicationType:
        principal = require_principal(info)
        user_id = parse_id(data.user_id, "Invalid user ID format.")
        job_id = parse_id(data.job_id, "Job ID is required in a valid format.")
        return ApplicationType.from_row(applications.create_application(info.context["db"], user_id, job_id, principal))

    @strawberry.mutation
    def delete_application(self, info: Info, id: strawberry.ID) -> bool:
        principal = require_principal(info)
        applications.delete_application(info.context["db"], parse_id(id, "Invalid application ID format."), principal)
        return True


def _should_mask_error(error: GraphQLError) -> bool:
    # syntax/validation errors carry no original error; service errors are intentional
    original = error.original_error
    return original is not None and not isinstance(original, JobBoardError)


def _is_request_error(result: ExecutionResult) -> bool:
    """Parse and validation failures: nothing executed and no error has a field path."""
    return result.data is None and bool(result.errors) and all(e.path is None for e in result.errors)


class JobBoardGraphQLRouter(GraphQLRouter):
    """Answers 400 for documents rejected before execution; resolver errors stay 200."""

    async def process_result(self, request: Request, result: ExecutionResult) -> GraphQLHTTPResponse:
        if _is_request_error(result):
            request.state.graphql_status = status.HTTP_400_BAD_REQUEST
        return await super().process_result(request, result)

    async def run(self, request, context=strawberry.UNSET, root_value=strawberry.UNSET):
        response = await super().run(request, context=context, root_value=root_value)
        graphql_status = getattr(request.state, "graphql_status", None)
        if graphql_status is not None and isinstance(response, Response):
            response.status_code = graphql_status
        return response


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[lambda: MaskErrors(should_mask_error=_should_mask_error, error_message="Unexpected error.")],
)


def build_graphql_router(settings: Settings) -> GraphQLRouter:
    return JobBoardGraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.DEBUG else None,
    )
