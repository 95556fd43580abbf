"""
Schema validation tests.

validate() must report every failing field, never coerce, and accept any
value it produced itself.
"""

from typing import List, Literal, Optional, Union

import pytest
from pydantic import Field, ValidationError

from api.contracts import ContractModel, FieldError, Invalid, Valid, omit, pick, validate
from api.contracts.schemas.users import (
    CreateUserRequest,
    User,
    UserIdParams,
    UsersListResponse,
)
from widgets import error_paths


VALID_USER = {
    "id": "1",
    "name": "Taro Yamada",
    "email": "yamada@example.com",
    "age": 25,
    "createdAt": "2025-01-01T00:00:00Z",
}


def _user(**overrides):
    data = dict(VALID_USER)
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


class TestUserSchema:
    def test_valid_user(self):
        result = validate(User, VALID_USER)

        assert isinstance(result, Valid)
        assert result.value.id == "1"
        assert result.value.age == 25

    def test_age_is_optional(self):
        result = validate(User, _user(age=None))

        assert isinstance(result, Valid)
        assert result.value.age is None

    @pytest.mark.parametrize("schema", [User, CreateUserRequest])
    def test_explicit_null_age_is_rejected(self, schema):
        result = validate(schema, {**_user(), "age": None})

        assert isinstance(result, Invalid)
        assert error_paths(result) == {"age"}

    @pytest.mark.parametrize("payload", [
        VALID_USER,
        _user(age=None),
        _user(name="x" * 100, age=0),
        _user(createdAt="2025-06-30T23:59:59.123+09:00", age=150),
    ])
    def test_revalidating_a_valid_value_is_idempotent(self, payload):
        first = validate(User, payload)
        assert isinstance(first, Valid)

        second = validate(User, first.value.model_dump(mode="json", exclude_none=True))

        assert isinstance(second, Valid)
        assert second.value == first.value

    def test_collects_every_failing_field(self):
        result = validate(User, {
            "id": 1,
            "name": "",
            "email": "not-an-email",
            "age": 200,
            "createdAt": "yesterday",
        })

        assert isinstance(result, Invalid)
        assert error_paths(result) == {"id", "name", "email", "age", "createdAt"}
        assert all(err.reason for err in result.errors)

    def test_missing_required_fields(self):
        result = validate(User, {})

        assert isinstance(result, Invalid)
        assert error_paths(result) == {"id", "name", "email", "createdAt"}

    def test_unknown_fields_are_ignored(self):
        result = validate(User, _user(role="admin"))

        assert isinstance(result, Valid)
        assert "role" not in result.value.model_dump()

    @pytest.mark.parametrize("age", ["25", True, 25.5])
    def test_age_is_never_coerced(self, age):
        result = validate(User, _user(age=age))

        assert isinstance(result, Invalid)
        assert error_paths(result) == {"age"}

    @pytest.mark.parametrize("age,ok", [(-1, False), (0, True), (150, True), (151, False)])
    def test_age_bounds(self, age, ok):
        assert isinstance(validate(User, _user(age=age)), Valid) is ok

    @pytest.mark.parametrize("name,ok", [("", False), ("x", True), ("x" * 100, True), ("x" * 101, False)])
    def test_name_length(self, name, ok):
        assert isinstance(validate(User, _user(name=name)), Valid) is ok

    @pytest.mark.parametrize("created_at,ok", [
        ("2025-01-01T00:00:00Z", True),
        ("2025-01-01T00:00:00.000Z", True),
        ("2025-01-01T10:00:00+09:00", True),
        ("2025-01-01", False),
        ("not a date", False),
        ("2025-13-01T00:00:00Z", False),
        ("2025-01-01T00:00:00", False),
        ("2025-01-01T12", False),
        ("2025-W01-1T00:00:00Z", False),
    ])
    def test_created_at_must_be_a_date_time(self, created_at, ok):
        assert isinstance(validate(User, _user(createdAt=created_at)), Valid) is ok

    def test_created_at_text_is_preserved(self):
        result = validate(User, _user(createdAt="2025-01-01T10:00:00+09:00"))

        assert result.value.createdAt == "2025-01-01T10:00:00+09:00"

    def test_validated_user_is_immutable(self):
        user = validate(User, VALID_USER).value

        with pytest.raises(ValidationError):
            user.name = "Someone Else"


class TestDerivedSchemas:
    def test_pick_keeps_only_named_fields(self):
        assert set(UserIdParams.model_fields) == {"id"}

    def test_pick_reuses_field_metadata(self):
        field = UserIdParams.model_fields["id"]

        assert field.description == "User ID"
        assert field.examples == ["123"]

    def test_pick_validates_like_the_source_field(self):
        assert isinstance(validate(UserIdParams, {"id": "123"}), Valid)

        result = validate(UserIdParams, {"id": 123})
        assert isinstance(result, Invalid)
        assert error_paths(result) == {"id"}

    def test_pick_keeps_constraints(self):
        NameOnly = pick(User, "name")

        assert NameOnly.__name__ == "UserName"
        assert isinstance(validate(NameOnly, {"name": ""}), Invalid)
        assert isinstance(validate(NameOnly, {"name": "x" * 101}), Invalid)

    def test_omit_drops_server_assigned_fields(self):
        assert set(CreateUserRequest.model_fields) == {"name", "email", "age"}

    def test_omit_collects_every_failure(self):
        result = validate(CreateUserRequest, {"email": "not-an-email"})

        assert isinstance(result, Invalid)
        assert error_paths(result) == {"name", "email"}

    def test_omit_ignores_server_assigned_fields_in_input(self):
        result = validate(CreateUserRequest, {
            "id": "999",
            "name": "Jiro",
            "email": "jiro@example.com",
            "createdAt": "2020-01-01T00:00:00Z",
        })

        assert isinstance(result, Valid)
        assert result.value.model_dump(exclude_none=True) == {
            "name": "Jiro",
            "email": "jiro@example.com",
        }

    @pytest.mark.parametrize("derive", [pick, omit])
    def test_unknown_field_names_raise(self, derive):
        with pytest.raises(KeyError, match="nickname"):
            derive(User, "nickname")


class TestComposition:
    def test_list_reports_each_bad_element(self):
        result = validate(List[int], [1, "a", "b"])

        assert isinstance(result, Invalid)
        assert error_paths(result) == {"1", "2"}

    def test_list_of_models_uses_index_paths(self):
        result = validate(UsersListResponse, {
            "users": [
                _user(email="broken"),
                _user(id="2", name=""),
            ],
            "total": 2,
        })

        assert isinstance(result, Invalid)
        assert error_paths(result) == {"users.0.email", "users.1.name"}

    def test_literal(self):
        assert isinstance(validate(Literal["red", "blue"], "red"), Valid)
        assert isinstance(validate(Literal["red", "blue"], "green"), Invalid)

    def test_union(self):
        assert isinstance(validate(Union[int, str], 1), Valid)
        assert isinstance(validate(Union[int, str], "one"), Valid)
        assert isinstance(validate(Union[int, str], 1.5), Invalid)

    def test_booleans_are_strict(self):
        assert isinstance(validate(bool, True), Valid)
        assert isinstance(validate(bool, "true"), Invalid)

    def test_optional_field_on_a_model(self):
        class Note(ContractModel):
            text: str = Field(min_length=1)
            author: Optional[str] = None

        assert isinstance(validate(Note, {"text": "hi"}), Valid)
        assert isinstance(validate(Note, {"text": "hi", "author": None}), Valid)
        assert error_paths(validate(Note, {"author": "me"})) == {"text"}


class TestValidationResult:
    def test_invalid_requires_errors(self):
        with pytest.raises(ValueError):
            Invalid(())

    def test_field_error_location(self):
        err = FieldError(path="name", reason="too short").at("body")

        assert err.to_dict() == {"location": "body", "path": "name", "reason": "too short"}

    def test_field_error_without_location(self):
        assert FieldError(path="id", reason="missing").to_dict() == {"path": "id", "reason": "missing"}
