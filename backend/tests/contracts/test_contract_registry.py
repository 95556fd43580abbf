"""
Contract binding tests.

Binding is startup-time: every inconsistency must fail loudly before the
first request is served.
"""

import pytest

from api.contracts import (
    ContractDefinitionConflict,
    ContractDefinitionError,
    ErrorResponse,
    RequestSpec,
    ResponseSpec,
    get_contract,
    list_contracts,
)
from api.contracts.schemas.users import (
    CREATE_USER_CONTRACT,
    GET_USER_CONTRACT,
    LIST_USERS_CONTRACT,
    User,
)
from widgets import CreateWidgetRequest, Widget, WidgetIdParams


OK = {200: ResponseSpec(Widget, "ok")}


class TestBind:
    def test_bind_returns_the_contract(self, registry):
        contract = registry.bind("GET", "/widgets/{id}", responses=OK,
                                 request=RequestSpec(path=WidgetIdParams),
                                 operation_id="getWidget")

        assert contract.key == "GET /widgets/{id}"
        assert contract.path_params == ["id"]
        assert registry.get("GET", "/widgets/{id}") is contract
        assert contract in registry
        assert len(registry) == 1

    def test_method_is_normalized(self, registry):
        contract = registry.bind("get", "/widgets", responses=OK)

        assert contract.method == "GET"
        assert registry.get("get", "/widgets") is contract

    def test_duplicate_binding_conflicts(self, registry):
        registry.bind("GET", "/widgets", responses=OK, operation_id="listWidgets")

        with pytest.raises(ContractDefinitionConflict, match="listWidgets"):
            registry.bind("get", "/widgets", responses=OK)

    def test_same_path_different_methods_coexist(self, registry):
        registry.bind("GET", "/widgets", responses=OK)
        registry.bind("POST", "/widgets", responses={201: ResponseSpec(Widget)},
                      request=RequestSpec(body=CreateWidgetRequest))

        assert [c.key for c in registry] == ["GET /widgets", "POST /widgets"]

    def test_path_params_need_a_path_schema(self, registry):
        with pytest.raises(ContractDefinitionError, match="id"):
            registry.bind("GET", "/widgets/{id}", responses=OK)

    def test_path_schema_fields_must_match_template(self, registry):
        with pytest.raises(ContractDefinitionError):
            registry.bind("GET", "/widgets/{widgetId}", responses=OK,
                          request=RequestSpec(path=WidgetIdParams))

    def test_path_schema_without_template_params(self, registry):
        with pytest.raises(ContractDefinitionError):
            registry.bind("GET", "/widgets", responses=OK,
                          request=RequestSpec(path=WidgetIdParams))

    @pytest.mark.parametrize("method,path,responses", [
        ("TRACE", "/widgets", OK),
        ("GET", "widgets", OK),
        ("GET", "/widgets", {}),
    ])
    def test_malformed_declarations(self, registry, method, path, responses):
        with pytest.raises(ContractDefinitionError):
            registry.bind(method, path, responses=responses)

    def test_failed_bind_leaves_registry_unchanged(self, registry):
        with pytest.raises(ContractDefinitionError):
            registry.bind("GET", "/widgets/{id}", responses=OK)

        assert len(registry) == 0


class TestResponses:
    def test_default_400_added_when_input_declared(self, registry):
        contract = registry.bind("POST", "/widgets", responses={201: ResponseSpec(Widget)},
                                 request=RequestSpec(body=CreateWidgetRequest))

        assert sorted(contract.responses) == [201, 400]
        assert contract.responses[400].schema is ErrorResponse

    def test_explicit_400_is_kept(self, registry):
        custom = ResponseSpec(ErrorResponse, "Bad widget")
        contract = registry.bind("POST", "/widgets", responses={201: ResponseSpec(Widget), 400: custom},
                                 request=RequestSpec(body=CreateWidgetRequest))

        assert contract.responses[400] is custom

    def test_no_default_400_without_input(self, registry):
        contract = registry.bind("GET", "/widgets", responses=OK)

        assert list(contract.responses) == [200]

    def test_responses_are_read_only(self, registry):
        contract = registry.bind("GET", "/widgets", responses=OK)

        with pytest.raises(TypeError):
            contract.responses[500] = ResponseSpec(ErrorResponse)

    def test_default_status_is_lowest_success(self, registry):
        contract = registry.bind("POST", "/widgets",
                                 responses={202: ResponseSpec(Widget), 201: ResponseSpec(Widget)})

        assert contract.default_status == 201
        assert list(contract.responses) == [201, 202]

    def test_default_status_requires_a_success_response(self, registry):
        contract = registry.bind("GET", "/widgets", responses={404: ResponseSpec(ErrorResponse)})

        with pytest.raises(ContractDefinitionError):
            contract.default_status

    def test_rule_uses_werkzeug_converters(self, registry):
        contract = registry.bind("GET", "/widgets/{id}", responses=OK,
                                 request=RequestSpec(path=WidgetIdParams))

        assert contract.rule == "/widgets/<id>"


class TestUserContracts:
    def test_all_user_endpoints_registered(self):
        assert {"GET /users", "GET /users/{id}", "POST /users"} <= set(list_contracts())

    def test_lookup(self):
        assert get_contract("GET", "/users") is LIST_USERS_CONTRACT
        assert get_contract("GET", "/users/{id}") is GET_USER_CONTRACT
        assert get_contract("POST", "/users") is CREATE_USER_CONTRACT
        assert get_contract("DELETE", "/users/{id}") is None

    def test_get_user_declares_not_found(self):
        assert sorted(GET_USER_CONTRACT.responses) == [200, 400, 404]
        assert GET_USER_CONTRACT.responses[200].schema is User
        assert GET_USER_CONTRACT.responses[404].schema is ErrorResponse

    def test_create_user_answers_201(self):
        assert CREATE_USER_CONTRACT.default_status == 201
        assert CREATE_USER_CONTRACT.responses[201].schema is User

    def test_operation_ids(self):
        assert LIST_USERS_CONTRACT.operation_id == "listUsers"
        assert GET_USER_CONTRACT.operation_id == "getUser"
        assert CREATE_USER_CONTRACT.operation_id == "createUser"
