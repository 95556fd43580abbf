"""
Pytest fixtures for contract tests.
"""

import pytest

from api.contracts import ContractRegistry, ErrorResponse, RequestSpec, ResponseSpec
from widgets import CreateWidgetRequest, Widget, WidgetIdParams, WidgetQuery


@pytest.fixture
def registry():
    """Empty registry with the default 400 ErrorResponse."""
    return ContractRegistry(default_error_schema=ErrorResponse)


@pytest.fixture
def widget_registry(registry):
    """Registry with GET /widgets, GET /widgets/{id} and POST /widgets bound."""
    registry.bind(
        "GET", "/widgets",
        operation_id="listWidgets",
        request=RequestSpec(query=WidgetQuery),
        responses={200: ResponseSpec(Widget, "First widget")},
    )
    registry.bind(
        "GET", "/widgets/{id}",
        operation_id="getWidget",
        request=RequestSpec(path=WidgetIdParams),
        responses={
            200: ResponseSpec(Widget, "The widget"),
            404: ResponseSpec(ErrorResponse, "Widget not found"),
        },
    )
    registry.bind(
        "POST", "/widgets",
        operation_id="createWidget",
        request=RequestSpec(body=CreateWidgetRequest),
        responses={201: ResponseSpec(Widget, "The created widget")},
    )
    return registry
