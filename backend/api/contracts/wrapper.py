"""
Handler registration and Flask mounting for the contract layer.

Usage:
    users_router = ContractRouter("users")

    @users_router.api_contract(GET_USER_CONTRACT)
    def get_user(req, store):
        user = store.get_by_id(req.path.id)
        if user is None:
            raise ResourceNotFound("User not found")
        return user, 200

    dispatcher = Dispatcher.from_routers(CONTRACTS, store, [users_router])
    mount_dispatcher(app, dispatcher)

Handlers receive the validated ContractRequest and the store, and return
either a body or (body, status). They never see raw request data.
"""

from typing import Callable, Dict

from flask import Flask, g, request

from .dispatcher import Dispatcher, Handler
from .errors import ContractDefinitionConflict
from .registry import HTTP_METHODS, EndpointContract

DISPATCHER_EXTENSION = 'contract_dispatcher'


class ContractRouter:
    """Collects handlers keyed by the contract they implement."""

    def __init__(self, name: str):
        self.name = name
        self.handlers: Dict[str, Handler] = {}

    def api_contract(self, contract: EndpointContract) -> Callable[[Handler], Handler]:
        """
        Decorator that attaches a handler to a bound contract.

        Raises:
            ContractDefinitionConflict: If the contract already has a handler
        """
        def decorator(fn: Handler) -> Handler:
            if contract.key in self.handlers:
                raise ContractDefinitionConflict(contract.method, contract.path, contract.operation_id)

            fn.contract = contract
            self.handlers[contract.key] = fn
            return fn
        return decorator


def mount_dispatcher(app: Flask, dispatcher: Dispatcher) -> None:
    """
    Route every request that no plain Flask rule claims through the dispatcher.

    Flask prefers static rules (/doc, /ui, /) over the catch-all, so those
    stay outside the contract mechanism.
    """

    def dispatch_contract(path: str):
        result = dispatcher.dispatch(
            request.method,
            request.path,
            query=request.args.to_dict(flat=True),
            body=request.get_data(),
            request_id=getattr(g, 'request_id', None),
        )
        # Read by the request logging middleware
        g.contract_endpoint = result.contract.key if result.contract else None
        g.dispatch_stage = result.stage.value
        return app.response_class(
            result.body,
            status=result.status,
            content_type=result.content_type,
        )

    app.add_url_rule(
        "/<path:path>",
        endpoint="contract_dispatch",
        view_func=dispatch_contract,
        methods=list(HTTP_METHODS),
    )
    app.extensions[DISPATCHER_EXTENSION] = dispatcher


def get_dispatcher(app: Flask) -> Dispatcher:
    """Return the dispatcher mounted on an app."""
    return app.extensions[DISPATCHER_EXTENSION]
