"""
OpenAPI export - renders bound contracts as an OpenAPI 3.0.0 document.

The document is a pure function of the registry: it can be regenerated at
any time without replaying requests. Every contract appears under `paths`;
every schema (with constraints, descriptions and examples) appears under
`components.schemas`.

pydantic emits JSON Schema 2020-12; _to_openapi30() rewrites the few
constructs OpenAPI 3.0 spells differently:
- anyOf [X, null]  -> X + nullable: true
- examples: [v]    -> example: v
- const: v         -> enum: [v]

Generated titles and `default: null` are dropped.
"""

from http import HTTPStatus
from typing import Any, Dict, List, Optional, Type

from pydantic.json_schema import models_json_schema

from .schema import ContractModel

OPENAPI_VERSION = "3.0.0"
REF_TEMPLATE = "#/components/schemas/{model}"


def build_openapi_document(
    registry,
    *,
    title: str = "API",
    version: str = "1.0.0",
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the OpenAPI document for every contract in the registry.

    Args:
        registry: ContractRegistry to export
        title: info.title
        version: info.version
        description: info.description (omitted when empty)

    Returns:
        JSON-serializable OpenAPI 3.0.0 document
    """
    models = _collect_models(registry)
    refs, definitions = models_json_schema(
        [(model, "validation") for model in models],
        ref_template=REF_TEMPLATE,
    )
    components = {
        name: _to_openapi30(schema)
        for name, schema in definitions.get("$defs", {}).items()
    }

    def ref(model: Type[ContractModel]) -> Dict[str, Any]:
        return dict(refs[(model, "validation")])

    def component(model: Type[ContractModel]) -> Dict[str, Any]:
        name = ref(model)["$ref"].rsplit("/", 1)[-1]
        return components[name]

    paths: Dict[str, Dict[str, Any]] = {}
    for contract in registry:
        operation: Dict[str, Any] = {}
        if contract.tags:
            operation["tags"] = list(contract.tags)
        if contract.summary:
            operation["summary"] = contract.summary
        if contract.description:
            operation["description"] = contract.description
        if contract.operation_id:
            operation["operationId"] = contract.operation_id

        parameters: List[Dict[str, Any]] = []
        if contract.request.path is not None:
            parameters.extend(_parameters(component(contract.request.path), "path"))
        if contract.request.query is not None:
            parameters.extend(_parameters(component(contract.request.query), "query"))
        if parameters:
            operation["parameters"] = parameters

        if contract.request.body is not None:
            body: Dict[str, Any] = {
                "required": True,
                "content": {"application/json": {"schema": ref(contract.request.body)}},
            }
            if contract.request.body_description:
                body["description"] = contract.request.body_description
            operation["requestBody"] = body

        operation["responses"] = {
            str(status): {
                "description": spec.description or _status_phrase(status),
                "content": {spec.content_type: {"schema": ref(spec.schema)}},
            }
            for status, spec in contract.responses.items()
        }
        paths.setdefault(contract.path, {})[contract.method.lower()] = operation

    info = {"title": title, "version": version}
    if description:
        info["description"] = description

    return {
        "openapi": OPENAPI_VERSION,
        "info": info,
        "paths": paths,
        "components": {"schemas": components},
    }


def _collect_models(registry) -> List[Type[ContractModel]]:
    """Every model referenced by any contract, first-seen order, no repeats."""
    seen: List[Type[ContractModel]] = []
    for contract in registry:
        candidates = [schema for _, schema in contract.request.parts()]
        candidates.extend(spec.schema for spec in contract.responses.values())
        for model in candidates:
            if model not in seen:
                seen.append(model)
    return seen


def _parameters(schema: Dict[str, Any], location: str) -> List[Dict[str, Any]]:
    required = set(schema.get("required", []))
    params = []
    for name, prop in schema.get("properties", {}).items():
        prop = dict(prop)
        param: Dict[str, Any] = {
            "name": name,
            "in": location,
            "required": location == "path" or name in required,
        }
        if "description" in prop:
            param["description"] = prop.pop("description")
        if "example" in prop:
            param["example"] = prop.pop("example")
        prop.pop("title", None)
        param["schema"] = prop
        params.append(param)
    return params


def _status_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return str(status)


_SCHEMA_MAPS = ("properties", "$defs")
# Keywords whose values are data, not schemas.
_VALUE_KEYS = ("default", "example", "examples", "enum", "const")


def _map_schemas(mapping: Any) -> Any:
    if not isinstance(mapping, dict):
        return _to_openapi30(mapping)
    return {name: _to_openapi30(schema) for name, schema in mapping.items()}


def _convert(key: str, value: Any) -> Any:
    if key in _VALUE_KEYS:
        return value
    if key in _SCHEMA_MAPS:
        return _map_schemas(value)
    return _to_openapi30(value)


def _to_openapi30(node: Any) -> Any:
    if isinstance(node, list):
        return [_to_openapi30(item) for item in node]
    if not isinstance(node, dict):
        return node

    node = {key: _convert(key, value) for key, value in node.items()}

    # Components are named by their key, so no titles.
    node.pop("title", None)
    if "default" in node and node["default"] is None:
        node.pop("default")

    any_of = node.get("anyOf")
    if isinstance(any_of, list):
        others = [s for s in any_of if s != {"type": "null"}]
        if len(others) == 1 and len(others) != len(any_of):
            node.pop("anyOf")
            (other,) = others
            if "$ref" in other:
                node["allOf"] = [other]
            else:
                node = {**other, **node}
            node["nullable"] = True

    if "examples" in node and isinstance(node["examples"], list):
        examples = node.pop("examples")
        if examples:
            node["example"] = examples[0]

    if "const" in node:
        node["enum"] = [node.pop("const")]

    return node

