"""
Request Dispatcher - runs one request through its contract.

Stages:
    RECEIVED -> INPUT_VALIDATED -> HANDLED -> OUTPUT_VALIDATED -> SENT

Failure exits:
    NOT_MATCHED      no contract for (method, path)              -> 404
    INPUT_REJECTED   a declared input part failed its schema     -> 400
    OUTPUT_REJECTED  handler body/status not in the contract     -> 500
    HANDLER_FAILED   handler raised an unexpected exception       -> 500

The steps are strictly sequential. On INPUT_REJECTED the handler never runs;
on OUTPUT_REJECTED the invalid body is logged and never serialized.

The dispatcher knows nothing about Flask: it takes method, path, query dict
and raw body bytes, and returns a DispatchResult with serialized bytes.
api.contracts.wrapper mounts it on a Flask app.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel
from pydantic_core import to_jsonable_python
from werkzeug.exceptions import HTTPException
from werkzeug.routing import Map, Rule

from api.serializers.response import error_body, serialize

from .errors import (
    ContractDefinitionError,
    InputValidationError,
    OutputContractViolation,
    ResourceNotFound,
    UndeclaredStatusCode,
)
from .registry import ContractRegistry, EndpointContract
from .schema import FieldError, Invalid, validate

logger = logging.getLogger('api.contracts')


class DispatchStage(Enum):
    """Where a request stopped."""
    RECEIVED = "received"
    INPUT_VALIDATED = "input_validated"
    HANDLED = "handled"
    OUTPUT_VALIDATED = "output_validated"
    SENT = "sent"
    NOT_MATCHED = "not_matched"
    INPUT_REJECTED = "input_rejected"
    HANDLER_FAILED = "handler_failed"
    OUTPUT_REJECTED = "output_rejected"


@dataclass(frozen=True)
class ContractRequest:
    """Validated, typed input handed to a handler."""
    path: Any = None
    query: Any = None
    body: Any = None
    request_id: Optional[str] = None


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one dispatch: status, serialized body and final stage."""
    status: int
    body: bytes
    content_type: str
    stage: DispatchStage
    payload: Any = None
    contract: Optional[EndpointContract] = None


Handler = Callable[[ContractRequest, Any], Any]


class Dispatcher:
    """
    Executes match -> validate -> handle -> validate -> serialize.

    Args:
        registry: Bound contracts
        store: Resource store passed explicitly to every handler
        handlers: Mapping of contract key ("GET /users") to handler

    Raises:
        ContractDefinitionError: If a contract has no handler, or a handler
            targets a contract the registry does not hold
    """

    def __init__(self, registry: ContractRegistry, store: Any, handlers: Mapping[str, Handler]):
        self.registry = registry
        self.store = store

        contracts = {contract.key: contract for contract in registry}
        unknown = sorted(set(handlers) - set(contracts))
        if unknown:
            raise ContractDefinitionError(f"Handlers for unbound contracts: {unknown}")
        missing = sorted(set(contracts) - set(handlers))
        if missing:
            raise ContractDefinitionError(f"Contracts without a handler: {missing}")

        self._contracts = contracts
        self._handlers = dict(handlers)
        self._url_map = Map(
            [Rule(c.rule, endpoint=c.key, methods=[c.method]) for c in contracts.values()],
            merge_slashes=False,
        )

    @classmethod
    def from_routers(cls, registry: ContractRegistry, store: Any, routers: Iterable[Any]) -> "Dispatcher":
        handlers: Dict[str, Handler] = {}
        for router in routers:
            overlap = set(handlers) & set(router.handlers)
            if overlap:
                raise ContractDefinitionError(f"Handlers registered twice: {sorted(overlap)}")
            handlers.update(router.handlers)
        return cls(registry, store, handlers)

    def match(self, method: str, path: str) -> Tuple[Optional[EndpointContract], Dict[str, str]]:
        """Exact method + template match. Returns (None, {}) when nothing matches."""
        adapter = self._url_map.bind("localhost")
        try:
            endpoint, args = adapter.match(path, method=method.upper())
        except HTTPException:
            # NotFound, MethodNotAllowed and slash redirects all mean "no contract".
            return None, {}
        return self._contracts[endpoint], args

    def dispatch(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None,
        request_id: Optional[str] = None,
    ) -> DispatchResult:
        """Run one request through its contract."""
        contract, path_args = self.match(method, path)
        if contract is None:
            logger.debug(f"dispatch: no contract for {method} {path}")
            return self._error(
                404,
                error_body("NOT_FOUND", f"No route for {method.upper()} {path}", request_id=request_id),
                DispatchStage.NOT_MATCHED,
            )
        logger.debug(f"dispatch: {contract.key} stage={DispatchStage.RECEIVED.value} request_id={request_id}")

        # 1. Input
        try:
            validated = self._validate_input(contract, path_args, query or {}, body, request_id)
        except InputValidationError as e:
            logger.info(
                f"Input rejected: endpoint={contract.key} request_id={request_id} {e}",
                extra={
                    "event": "input_rejected",
                    "endpoint": contract.key,
                    "request_id": request_id,
                    "details": e.details(),
                },
            )
            return self._error(
                e.status_code,
                error_body("VALIDATION_ERROR", str(e), details=e.details(), request_id=request_id),
                DispatchStage.INPUT_REJECTED,
                contract,
            )
        logger.debug(f"dispatch: {contract.key} stage={DispatchStage.INPUT_VALIDATED.value}")

        # 2. Handler
        try:
            result = self._handlers[contract.key](validated, self.store)
        except ResourceNotFound as e:
            result = (error_body("NOT_FOUND", e.message, request_id=request_id), e.status_code)
        except Exception:
            logger.exception(f"Handler error for {contract.key} request_id={request_id}")
            return self._internal_error(contract, request_id, DispatchStage.HANDLER_FAILED)
        logger.debug(f"dispatch: {contract.key} stage={DispatchStage.HANDLED.value}")

        # 3. Output
        try:
            payload, status = self._split_result(contract, result)
            validated_body = self._validate_output(contract, status, payload)
        except OutputContractViolation as e:
            logger.error(
                f"Output contract violation: endpoint={contract.key} status={e.status} "
                f"request_id={request_id} message={e}",
                extra={
                    "event": "output_contract_violation",
                    "endpoint": contract.key,
                    "status": e.status,
                    "request_id": request_id,
                    "details": e.details(),
                },
            )
            return self._internal_error(contract, request_id, DispatchStage.OUTPUT_REJECTED)
        logger.debug(f"dispatch: {contract.key} stage={DispatchStage.OUTPUT_VALIDATED.value}")

        # 4. Serialize
        spec = contract.response_for(status)
        out = validated_body.model_dump(mode="json", exclude_none=True)
        return DispatchResult(
            status=status,
            body=serialize(out, spec.content_type),
            content_type=spec.content_type,
            stage=DispatchStage.SENT,
            payload=out,
            contract=contract,
        )

    def _validate_input(
        self,
        contract: EndpointContract,
        path_args: Mapping[str, str],
        query: Mapping[str, str],
        body: Optional[bytes],
        request_id: Optional[str],
    ) -> ContractRequest:
        raw_parts = {"path": dict(path_args), "query": dict(query)}
        errors = []
        values: Dict[str, Any] = {}

        for part, schema in contract.request.parts():
            if part == "body":
                try:
                    raw = _parse_json(body)
                except ValueError as e:
                    errors.append(FieldError(path="", reason=str(e), location="body"))
                    continue
            else:
                raw = raw_parts[part]

            result = validate(schema, raw)
            if isinstance(result, Invalid):
                errors.extend(err.at(part) for err in result.errors)
            else:
                values[part] = result.value

        if errors:
            raise InputValidationError(errors)
        return ContractRequest(request_id=request_id, **values)

    def _split_result(self, contract: EndpointContract, result: Any) -> Tuple[Any, int]:
        if not isinstance(result, tuple):
            return result, contract.default_status
        if len(result) != 2 or isinstance(result[1], bool) or not isinstance(result[1], int):
            raise OutputContractViolation(
                "handler must return body or (body, status)",
                endpoint=contract.key,
                status=500,
            )
        return result

    def _validate_output(self, contract: EndpointContract, status: int, payload: Any) -> BaseModel:
        spec = contract.response_for(status)
        if spec is None:
            raise UndeclaredStatusCode(
                endpoint=contract.key,
                status=status,
                declared=list(contract.responses),
            )

        raw = to_jsonable_python(payload, exclude_none=True)
        result = validate(spec.schema, raw)
        if isinstance(result, Invalid):
            raise OutputContractViolation(
                f"{len(result.errors)} response schema violation(s)",
                endpoint=contract.key,
                status=status,
                errors=result.errors,
            )
        return result.value

    def _internal_error(
        self,
        contract: EndpointContract,
        request_id: Optional[str],
        stage: DispatchStage,
    ) -> DispatchResult:
        return self._error(
            500,
            error_body("INTERNAL_ERROR", "An unexpected error occurred", request_id=request_id),
            stage,
            contract,
        )

    def _error(
        self,
        status: int,
        payload: Dict[str, Any],
        stage: DispatchStage,
        contract: Optional[EndpointContract] = None,
    ) -> DispatchResult:
        return DispatchResult(
            status=status,
            body=serialize(payload, "application/json"),
            content_type="application/json",
            stage=stage,
            payload=payload,
            contract=contract,
        )


def _parse_json(body: Optional[bytes]) -> Any:
    if not body:
        raise ValueError("Request body is required (application/json)")
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Malformed JSON body: {e}") from None
    except RecursionError:
        raise ValueError("Malformed JSON body: nested too deeply") from None
