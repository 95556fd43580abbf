"""
Contract enforcement package.

Provides schema validation, contract binding, OpenAPI export, the request
dispatcher and the ContractRouter.api_contract decorator.
"""

from .common import ErrorDetail, ErrorResponse
from .dispatcher import ContractRequest, DispatchResult, DispatchStage, Dispatcher
from .errors import (
    ContractDefinitionConflict,
    ContractDefinitionError,
    ContractError,
    InputValidationError,
    OutputContractViolation,
    ResourceNotFound,
    UndeclaredStatusCode,
)
from .registry import (
    CONTRACTS,
    ContractRegistry,
    EndpointContract,
    RequestSpec,
    ResponseSpec,
    get_contract,
    list_contracts,
    register_contract,
)
from .schema import (
    ContractModel,
    FieldError,
    Invalid,
    ISODateTime,
    Valid,
    ValidationResult,
    omit,
    pick,
    validate,
)
from .wrapper import ContractRouter, get_dispatcher, mount_dispatcher

__all__ = [
    'ErrorDetail',
    'ErrorResponse',
    'ContractRequest',
    'DispatchResult',
    'DispatchStage',
    'Dispatcher',
    'ContractDefinitionConflict',
    'ContractDefinitionError',
    'ContractError',
    'InputValidationError',
    'OutputContractViolation',
    'ResourceNotFound',
    'UndeclaredStatusCode',
    'CONTRACTS',
    'ContractRegistry',
    'EndpointContract',
    'RequestSpec',
    'ResponseSpec',
    'get_contract',
    'list_contracts',
    'register_contract',
    'ContractModel',
    'FieldError',
    'Invalid',
    'ISODateTime',
    'Valid',
    'ValidationResult',
    'omit',
    'pick',
    'validate',
    'ContractRouter',
    'get_dispatcher',
    'mount_dispatcher',
]
