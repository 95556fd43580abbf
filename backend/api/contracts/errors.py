"""
Contract error taxonomy.

Client-caused (answered with structured detail):
- InputValidationError  -> 400
- ResourceNotFound      -> 404

Programmer-caused (logged, opaque to the caller):
- OutputContractViolation / UndeclaredStatusCode -> 500

Startup-time (fatal, raised while binding contracts):
- ContractDefinitionError / ContractDefinitionConflict
"""

from typing import Any, Dict, List, Optional, Sequence

from .schema import FieldError


class ContractError(Exception):
    """Base class for every contract-layer error."""


class InputValidationError(ContractError):
    """Request input failed its declared schema; the handler never runs."""

    status_code = 400

    def __init__(self, errors: Sequence[FieldError]):
        self.errors = tuple(errors)
        super().__init__(f"{len(self.errors)} input validation error(s)")

    def details(self) -> List[Dict[str, Any]]:
        return [err.to_dict() for err in self.errors]


class ResourceNotFound(ContractError):
    """Raised by handlers when the addressed resource does not exist."""

    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        self.message = message
        super().__init__(message)


class OutputContractViolation(ContractError):
    """A handler produced a response its contract does not advertise."""

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        endpoint: str,
        status: int,
        errors: Sequence[FieldError] = (),
    ):
        self.endpoint = endpoint
        self.status = status
        self.errors = tuple(errors)
        super().__init__(message)

    def details(self) -> List[Dict[str, Any]]:
        return [err.to_dict() for err in self.errors]


class UndeclaredStatusCode(OutputContractViolation):
    """A handler chose a status code with no registered output schema."""

    def __init__(self, *, endpoint: str, status: int, declared: Sequence[int]):
        self.declared = tuple(declared)
        super().__init__(
            f"{endpoint} returned status {status}; declared: {list(self.declared)}",
            endpoint=endpoint,
            status=status,
        )


class ContractDefinitionError(ContractError):
    """Contracts or handlers were declared inconsistently (startup, fatal)."""


class ContractDefinitionConflict(ContractDefinitionError):
    """Two contracts bound to the same (method, path)."""

    def __init__(self, method: str, path: str, existing: Optional[str] = None):
        self.method = method
        self.path = path
        message = f"Contract already bound for {method} {path}"
        if existing:
            message += f" (operation '{existing}')"
        super().__init__(message)
