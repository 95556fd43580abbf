"""
Contract schemas for /users endpoints.

Endpoints:
- GET  /users        list every user
- GET  /users/{id}   fetch one user
- POST /users        create a user
"""

from typing import List, Optional

from pydantic import EmailStr, Field

from ..common import ErrorResponse
from ..registry import RequestSpec, ResponseSpec, register_contract
from ..schema import ContractModel, ISODateTime, omit, pick


# =============================================================================
# Entities
# =============================================================================

class User(ContractModel):
    """A user as stored and returned by the API."""
    id: str = Field(
        description="User ID",
        examples=["123"],
    )
    name: str = Field(
        min_length=1,
        max_length=100,
        description="User name",
        examples=["Taro Yamada"],
    )
    email: EmailStr = Field(
        description="Email address",
        examples=["yamada@example.com"],
    )
    age: int = Field(
        default=None,
        ge=0,
        le=150,
        description="Age in years",
        examples=[25],
    )
    createdAt: ISODateTime = Field(
        description="Creation timestamp (ISO-8601)",
        examples=["2025-01-01T00:00:00Z"],
    )


# id and createdAt are assigned by the server
CreateUserRequest = omit(User, "id", "createdAt", name="CreateUserRequest")

UserIdParams = pick(User, "id", name="UserIdParams")


class UsersListResponse(ContractModel):
    """Every user plus the count."""
    users: List[User] = Field(description="Array of users")
    total: int = Field(
        description="Total number of users",
        examples=[10],
    )


# =============================================================================
# GET /users
# =============================================================================

LIST_USERS_CONTRACT = register_contract(
    "GET", "/users",
    summary="List users",
    description="Returns every user.",
    tags=("users",),
    operation_id="listUsers",
    responses={
        200: ResponseSpec(UsersListResponse, "List of users"),
    },
)


# =============================================================================
# GET /users/{id}
# =============================================================================

GET_USER_CONTRACT = register_contract(
    "GET", "/users/{id}",
    summary="Get user",
    description="Returns the user with the given ID.",
    tags=("users",),
    operation_id="getUser",
    request=RequestSpec(path=UserIdParams),
    responses={
        200: ResponseSpec(User, "The user"),
        404: ResponseSpec(ErrorResponse, "User not found"),
    },
)


# =============================================================================
# POST /users
# =============================================================================

CREATE_USER_CONTRACT = register_contract(
    "POST", "/users",
    summary="Create user",
    description="Creates a new user. id and createdAt are assigned by the server.",
    tags=("users",),
    operation_id="createUser",
    request=RequestSpec(body=CreateUserRequest, body_description="User to create"),
    responses={
        201: ResponseSpec(User, "The created user"),
        400: ResponseSpec(ErrorResponse, "Validation error"),
    },
)
