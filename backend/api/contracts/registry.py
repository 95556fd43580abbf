"""
Contract Registry - single source of truth for API contracts.

Each endpoint has:
- RequestSpec: input schemas by part (path params, query, JSON body)
- ResponseSpec per status code: what the handler may return
- Metadata: summary, description, tags, operationId (documentation only)

Binding happens once at import/startup. Binding the same (method, path)
twice is a programming error and raises ContractDefinitionConflict.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Type

from .common import ErrorResponse
from .errors import ContractDefinitionConflict, ContractDefinitionError
from .schema import ContractModel

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

_PATH_PARAM = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True)
class ResponseSpec:
    """Output schema for one status code."""
    schema: Type[ContractModel]
    description: str = ""
    content_type: str = "application/json"


@dataclass(frozen=True)
class RequestSpec:
    """Input schemas by request part. None means the part is not read."""
    path: Optional[Type[ContractModel]] = None
    query: Optional[Type[ContractModel]] = None
    body: Optional[Type[ContractModel]] = None
    body_description: str = ""

    def parts(self) -> List[Tuple[str, Type[ContractModel]]]:
        """Declared parts in validation order."""
        declared = [("path", self.path), ("query", self.query), ("body", self.body)]
        return [(name, schema) for name, schema in declared if schema is not None]


@dataclass(frozen=True)
class EndpointContract:
    """Complete contract for one method + path template."""
    method: str
    path: str
    request: RequestSpec
    responses: Mapping[int, ResponseSpec]
    summary: str = ""
    description: str = ""
    tags: Tuple[str, ...] = ()
    operation_id: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"

    @property
    def path_params(self) -> List[str]:
        return _PATH_PARAM.findall(self.path)

    @property
    def rule(self) -> str:
        """werkzeug rule string: /users/{id} -> /users/<id>."""
        return _PATH_PARAM.sub(r"<\1>", self.path)

    @property
    def default_status(self) -> int:
        """Lowest declared 2xx status, used when a handler returns a bare body."""
        success = sorted(s for s in self.responses if 200 <= s < 300)
        if not success:
            raise ContractDefinitionError(f"{self.key} declares no 2xx response")
        return success[0]

    def response_for(self, status: int) -> Optional[ResponseSpec]:
        return self.responses.get(status)


class ContractRegistry:
    """Ordered collection of bound contracts, unique per (method, path)."""

    def __init__(self, default_error_schema: Optional[Type[ContractModel]] = None):
        self._contracts: Dict[Tuple[str, str], EndpointContract] = {}
        self.default_error_schema = default_error_schema

    def bind(
        self,
        method: str,
        path: str,
        *,
        responses: Mapping[int, ResponseSpec],
        request: Optional[RequestSpec] = None,
        summary: str = "",
        description: str = "",
        tags: Tuple[str, ...] = (),
        operation_id: Optional[str] = None,
    ) -> EndpointContract:
        """
        Bind a method + path template to its input/output schemas.

        Raises:
            ContractDefinitionConflict: If (method, path) is already bound
            ContractDefinitionError: If the declaration is inconsistent
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ContractDefinitionError(f"Unsupported method '{method}' for {path}")
        if not path.startswith("/"):
            raise ContractDefinitionError(f"Path template must start with '/': {path}")
        if not responses:
            raise ContractDefinitionError(f"{method} {path} declares no responses")

        existing = self._contracts.get((method, path))
        if existing is not None:
            raise ContractDefinitionConflict(method, path, existing.operation_id)

        request = request or RequestSpec()
        _check_path_params(method, path, request)

        responses = dict(sorted(responses.items()))
        if request.parts() and 400 not in responses and self.default_error_schema:
            responses[400] = ResponseSpec(self.default_error_schema, "Invalid request input")

        contract = EndpointContract(
            method=method,
            path=path,
            request=request,
            responses=MappingProxyType(responses),
            summary=summary,
            description=description,
            tags=tuple(tags),
            operation_id=operation_id,
        )
        self._contracts[(method, path)] = contract
        return contract

    def get(self, method: str, path: str) -> Optional[EndpointContract]:
        return self._contracts.get((method.upper(), path))

    def __iter__(self) -> Iterator[EndpointContract]:
        return iter(list(self._contracts.values()))

    def __len__(self) -> int:
        return len(self._contracts)

    def __contains__(self, contract: Any) -> bool:
        return isinstance(contract, EndpointContract) and \
            self._contracts.get((contract.method, contract.path)) is contract

    def export(self, **info: Any) -> Dict[str, Any]:
        """Render the OpenAPI document for every bound contract."""
        from .openapi import build_openapi_document
        return build_openapi_document(self, **info)


def _check_path_params(method: str, path: str, request: RequestSpec) -> None:
    template_params = set(_PATH_PARAM.findall(path))
    declared = set(request.path.model_fields) if request.path else set()
    if template_params != declared:
        raise ContractDefinitionError(
            f"{method} {path}: path template params {sorted(template_params)} "
            f"do not match path schema fields {sorted(declared)}"
        )


# Global registry instance (populated by api.contracts.schemas on import)
CONTRACTS = ContractRegistry(default_error_schema=ErrorResponse)


def register_contract(method: str, path: str, **kwargs: Any) -> EndpointContract:
    """Bind a contract on the global registry."""
    return CONTRACTS.bind(method, path, **kwargs)


def get_contract(method: str, path: str) -> Optional[EndpointContract]:
    """Get the contract bound to (method, path) on the global registry."""
    return CONTRACTS.get(method, path)


def list_contracts() -> List[str]:
    """Get 'METHOD /path' keys of every registered contract."""
    return [contract.key for contract in CONTRACTS]
