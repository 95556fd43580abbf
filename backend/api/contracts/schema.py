"""
Schema Registry - declarative value shapes and the single validation bridge.

Every entity and request/response shape is a pydantic model deriving from
ContractModel. The model is both the schema (constraints + documentation
metadata) and the typed data structure handlers receive.

Usage:
    from api.contracts.schema import validate, Valid

    result = validate(User, raw)
    if isinstance(result, Valid):
        user = result.value
    else:
        for err in result.errors:
            print(err.path, err.reason)

validate() accepts any pydantic type expression (models, list[Model],
Literal, Union, Annotated constrained types), so composition comes for free.
"""

from copy import copy
from dataclasses import dataclass, replace
from typing import Annotated, Any, Dict, Optional, Tuple, Type, Union

from pydantic import (
    AfterValidator,
    AwareDatetime,
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationError,
    WithJsonSchema,
    create_model,
)


class ContractModel(BaseModel):
    """
    Base model for every schema in the contract layer.

    - frozen=True: schemas and validated values are immutable
    - strict=True: "25" is not an int, 123 is not a string (no coercion)
    - extra='ignore': unknown fields are dropped, never an error

    Optional fields are declared as `age: int = Field(default=None)`: the
    field may be absent, but an explicit null is rejected.
    """
    model_config = ConfigDict(
        frozen=True,
        strict=True,
        extra='ignore',
    )


_AWARE_DATETIME = TypeAdapter(AwareDatetime)


def _check_iso_datetime(value: str) -> str:
    if 'T' not in value:
        raise ValueError("expected an ISO-8601 date-time (YYYY-MM-DDTHH:MM:SSZ)")
    try:
        _AWARE_DATETIME.validate_python(value)
    except ValidationError:
        raise ValueError(f"'{value}' is not an ISO-8601 date-time with a UTC offset") from None
    return value


# String that must parse as an ISO-8601 date-time; the original text is kept.
ISODateTime = Annotated[
    str,
    AfterValidator(_check_iso_datetime),
    WithJsonSchema({"type": "string", "format": "date-time"}),
]


# =============================================================================
# ValidationResult
# =============================================================================

@dataclass(frozen=True)
class FieldError:
    """One failing field: dotted path within the value plus a readable reason."""
    path: str
    reason: str
    location: Optional[str] = None   # request part ("path", "query", "body")

    def at(self, location: str) -> "FieldError":
        return replace(self, location=location)

    def to_dict(self) -> Dict[str, Any]:
        data = {"path": self.path, "reason": self.reason}
        if self.location:
            data = {"location": self.location, **data}
        return data


@dataclass(frozen=True)
class Valid:
    value: Any


@dataclass(frozen=True)
class Invalid:
    errors: Tuple[FieldError, ...]

    def __post_init__(self):
        if not self.errors:
            raise ValueError("Invalid requires at least one FieldError")


ValidationResult = Union[Valid, Invalid]


# =============================================================================
# validate()
# =============================================================================

_ADAPTERS: Dict[Any, TypeAdapter] = {}


def _adapter_for(schema: Any) -> TypeAdapter:
    try:
        adapter = _ADAPTERS.get(schema)
    except TypeError:
        # Unhashable type expression; build a throwaway adapter.
        return TypeAdapter(schema)
    if adapter is None:
        adapter = TypeAdapter(schema)
        _ADAPTERS[schema] = adapter
    return adapter


def _format_loc(loc: Tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def validate(schema: Any, raw: Any) -> ValidationResult:
    """
    Validate a raw (JSON-shaped) value against a schema.

    Collects every failure: an object with three bad fields yields three
    FieldErrors, an array with two bad elements yields entries for both.
    Validation is strict for every schema: nothing is coerced.

    Args:
        schema: ContractModel subclass or any pydantic type expression
        raw: Untrusted value (dicts/lists/scalars as decoded from JSON)

    Returns:
        Valid(typed value) or Invalid(errors), never both
    """
    try:
        value = _adapter_for(schema).validate_python(raw, strict=True)
    except ValidationError as exc:
        return Invalid(tuple(
            FieldError(path=_format_loc(err["loc"]), reason=err["msg"])
            for err in exc.errors(include_url=False)
        ))
    return Valid(value)


# =============================================================================
# Derived schemas
# =============================================================================

def _derive(
    model: Type[ContractModel],
    names,
    name: str,
) -> Type[ContractModel]:
    fields = {}
    for field_name in names:
        info = model.model_fields[field_name]
        fields[field_name] = (info.annotation, copy(info))
    return create_model(
        name,
        __base__=ContractModel,
        __doc__=model.__doc__,
        __module__=model.__module__,
        **fields,
    )


def pick(model: Type[ContractModel], *names: str, name: Optional[str] = None) -> Type[ContractModel]:
    """
    Projection: a new model validating only the named fields.

    Field definitions (type, constraints, description, examples) are reused,
    so pick(User, "id") validates path params exactly like User.id.

    Raises:
        KeyError: If a name is not a field of the model
    """
    unknown = [n for n in names if n not in model.model_fields]
    if unknown:
        raise KeyError(f"{model.__name__} has no field(s): {', '.join(unknown)}")
    suffix = "".join(n[:1].upper() + n[1:] for n in names)
    return _derive(model, names, name or f"{model.__name__}{suffix}")


def omit(model: Type[ContractModel], *names: str, name: Optional[str] = None) -> Type[ContractModel]:
    """
    Complement of pick(): drop the named fields (e.g. server-assigned ones).

    Raises:
        KeyError: If a name is not a field of the model
    """
    unknown = [n for n in names if n not in model.model_fields]
    if unknown:
        raise KeyError(f"{model.__name__} has no field(s): {', '.join(unknown)}")
    kept = [n for n in model.model_fields if n not in names]
    return _derive(model, kept, name or f"{model.__name__}Request")
