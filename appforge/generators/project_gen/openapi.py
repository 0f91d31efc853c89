"""OpenAPI 3 contract for the generated backend."""
from typing import Any, Dict, List, Optional

import yaml

from appforge.generators.backend_gen.render import BACKEND_PORT
from appforge.generators.utils import to_pascal_case
from appforge.planner.schema import EntitySpec, FieldSpec, Plan

ERROR_SCHEMA = "ValidationError"
# Pascal-cased entity names never contain "_", so write schemas cannot collide with read schemas
WRITE_SUFFIX = "_Input"

TYPE_MAP = {
    "string": {"type": "string"},
    "text": {"type": "string"},
    "number": {"type": "number"},
    "boolean": {"type": "boolean"},
    "date": {"type": "string", "format": "date-time"},
    "enum": {"type": "string"},
}


def field_to_json_schema(field: FieldSpec) -> Dict[str, Any]:
    """Convert a plan field to a JSON schema property."""
    schema = dict(TYPE_MAP[field.type])
    if field.enum_values:
        schema["enum"] = list(field.enum_values)
    if not field.required:
        schema["nullable"] = True
    return schema


def schema_names(entities: List[EntitySpec]) -> Dict[str, str]:
    """Unique read-schema name per entity (a_b1 and a_b_1 both pascal-case to AB1)."""
    names: Dict[str, str] = {}
    taken = {ERROR_SCHEMA}
    for entity in entities:
        base = to_pascal_case(entity.name)
        name, n = base, 1
        while name in taken:
            n += 1
            name = f"{base}_{n}"
        taken.add(name)
        names[entity.name] = name
    return names


def entity_to_schemas(entity: EntitySpec, schema_name: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """Generate the read and write schemas for an entity."""
    schema_name = schema_name or to_pascal_case(entity.name)
    properties = {f.name: field_to_json_schema(f) for f in entity.fields}
    required = [f.name for f in entity.fields if f.required]

    write_schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        write_schema["required"] = required

    read_schema = {
        "type": "object",
        "properties": {"id": {"type": "integer"}, **properties},
        "required": ["id"] + required,
    }
    return {schema_name: read_schema, f"{schema_name}{WRITE_SUFFIX}": write_schema}


def _json_content(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"application/json": {"schema": schema}}


def _ref(name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def get_error_responses(*codes: str) -> Dict[str, Any]:
    """Standard error responses for operations."""
    responses = {
        "400": {"description": "Validation failed", "content": _json_content(_ref(ERROR_SCHEMA))},
        "404": {"description": "Not Found"},
    }
    return {code: responses[code] for code in codes}


def generate_crud_paths(entity: EntitySpec, schema_name: Optional[str] = None) -> Dict[str, Any]:
    """Generate CRUD paths for an entity."""
    name = entity.name
    schema_name = schema_name or to_pascal_case(name)
    tags = [entity.title]
    id_param = {"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}}

    list_params: List[Dict[str, Any]] = [
        {"name": "limit", "in": "query", "schema": {"type": "integer", "minimum": 1, "maximum": 200, "default": 50}},
        {"name": "offset", "in": "query", "schema": {"type": "integer", "minimum": 0, "default": 0}},
        {"name": "orderBy", "in": "query", "schema": {"type": "string", "enum": ["id"] + [f.name for f in entity.fields], "default": "id"}},
        {"name": "orderDir", "in": "query", "schema": {"type": "string", "enum": ["asc", "desc"], "default": "desc"}},
    ]
    page_schema = {
        "type": "object",
        "properties": {
            "items": {"type": "array", "items": _ref(schema_name)},
            "total": {"type": "integer"},
            "limit": {"type": "integer"},
            "offset": {"type": "integer"},
        },
        "required": ["items", "total", "limit", "offset"],
    }
    body = {"required": True, "content": _json_content(_ref(f"{schema_name}{WRITE_SUFFIX}"))}
    one = {"description": "Successful response", "content": _json_content(_ref(schema_name))}

    return {
        f"/api/{name}": {
            "get": {
                "operationId": f"{name}_list",
                "tags": tags,
                "summary": f"List {entity.title}",
                "parameters": list_params,
                "responses": {"200": {"description": "Successful response", "content": _json_content(page_schema)}},
            },
            "post": {
                "operationId": f"{name}_create",
                "tags": tags,
                "summary": f"Create a {name} record",
                "requestBody": body,
                "responses": {
                    "201": {"description": "Created", "content": _json_content(_ref(schema_name))},
                    **get_error_responses("400"),
                },
            },
        },
        f"/api/{name}/{{id}}": {
            "get": {
                "operationId": f"{name}_get",
                "tags": tags,
                "summary": f"Get a {name} record by ID",
                "parameters": [id_param],
                "responses": {"200": one, **get_error_responses("404")},
            },
            "put": {
                "operationId": f"{name}_replace",
                "tags": tags,
                "summary": f"Replace a {name} record",
                "parameters": [id_param],
                "requestBody": body,
                "responses": {"200": one, **get_error_responses("400", "404")},
            },
            "delete": {
                "operationId": f"{name}_delete",
                "tags": tags,
                "summary": f"Delete a {name} record",
                "parameters": [id_param],
                "responses": {
                    "200": {
                        "description": "Deleted (also returned for unknown IDs)",
                        "content": _json_content({"type": "object", "properties": {"ok": {"type": "boolean"}}, "required": ["ok"]}),
                    },
                },
            },
        },
    }


def build_openapi(plan: Plan) -> Dict[str, Any]:
    schemas: Dict[str, Any] = {
        ERROR_SCHEMA: {
            "type": "object",
            "properties": {
                "error": {"type": "string"},
                "details": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {"field": {"type": "string", "nullable": True}, "message": {"type": "string"}},
                        "required": ["field", "message"],
                    },
                },
            },
            "required": ["error", "details"],
        }
    }
    paths: Dict[str, Any] = {
        "/api/health": {
            "get": {
                "operationId": "health",
                "tags": ["meta"],
                "responses": {"200": {"description": "Service is up"}},
            }
        },
        "/api/spec": {
            "get": {
                "operationId": "spec",
                "tags": ["meta"],
                "responses": {"200": {"description": "Plan the app was generated from"}},
            }
        },
    }
    tags = [{"name": "meta"}]
    names = schema_names(plan.entities)

    for entity in plan.entities:
        schemas.update(entity_to_schemas(entity, names[entity.name]))
        paths.update(generate_crud_paths(entity, names[entity.name]))
        # Titles are display labels and may repeat across entities
        if all(t["name"] != entity.title for t in tags):
            tags.append({"name": entity.title})

    return {
        "openapi": "3.0.3",
        "info": {
            "title": plan.app_name,
            "version": "0.1.0",
            "description": plan.description,
        },
        "servers": [{"url": f"http://localhost:{BACKEND_PORT}", "description": "Development server"}],
        "tags": tags,
        "paths": paths,
        "components": {"schemas": schemas},
    }


class _NoAliasDumper(yaml.SafeDumper):
    # Shared sub-dicts are written out in full instead of as &id anchors
    def ignore_aliases(self, data):
        return True


def render_openapi_yaml(plan: Plan) -> str:
    return yaml.dump(
        build_openapi(plan), Dumper=_NoAliasDumper, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
