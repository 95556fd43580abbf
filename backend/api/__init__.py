"""
API package - contract enforcement layer.

This package provides:
- Schema registry and contract binding
- OpenAPI export
- Request dispatcher with input/output validation
- Global middleware (request_id, request logging, error_envelope)
"""

from .contracts import CONTRACTS, ContractRouter, Dispatcher, get_contract

__all__ = ['CONTRACTS', 'ContractRouter', 'Dispatcher', 'get_contract']
