"""
User API Routes

Endpoints (contracts in api/contracts/schemas/users.py):
- GET  /users        list every user
- GET  /users/{id}   fetch one user
- POST /users        create a user

THIN handlers: input arrives validated and typed, output is validated by the
dispatcher against the schema declared for the returned status code.
"""

from api.contracts import ContractRouter, ResourceNotFound
from api.contracts.schemas.users import (
    CREATE_USER_CONTRACT,
    GET_USER_CONTRACT,
    LIST_USERS_CONTRACT,
    UsersListResponse,
)

users_router = ContractRouter('users')


@users_router.api_contract(LIST_USERS_CONTRACT)
def list_users(req, store):
    users = store.list()
    return UsersListResponse(users=users, total=len(users)), 200


@users_router.api_contract(GET_USER_CONTRACT)
def get_user(req, store):
    user = store.get_by_id(req.path.id)
    if user is None:
        raise ResourceNotFound("User not found")
    return user, 200


@users_router.api_contract(CREATE_USER_CONTRACT)
def create_user(req, store):
    return store.create(req.body), 201
