"""Entity-specific rendering functions for backend generation."""
from typing import Any, Dict, List

from appforge.generators.utils import py_literal
from appforge.planner.schema import EntitySpec

# Column type per field type; anything not listed is stored as Text
COLUMN_TYPES = {
    "number": "Float",
    "boolean": "Integer",
}


def _column_type(field_type: str) -> str:
    return COLUMN_TYPES.get(field_type, "Text")


def field_dicts(entity: EntitySpec) -> List[Dict[str, Any]]:
    """Field descriptors embedded in the generated model module."""
    return [f.model_dump(by_alias=True, exclude_none=True) for f in entity.fields]


def render_entity_model(entity: EntitySpec) -> str:
    """Generate app/models/<entity>.py: the FIELDS descriptor and the SQLAlchemy Table."""
    types_used = sorted({"Integer"} | {_column_type(f.type) for f in entity.fields})

    lines = [
        f"from sqlalchemy import Column, {', '.join(types_used)}, Table",
        "",
        "from app.db import metadata",
        "",
        f"FIELDS = {py_literal(field_dicts(entity))}",
        "",
        f"{entity.name}_table = Table(",
        f"    {entity.name!r},",
        "    metadata,",
        '    Column("id", Integer, primary_key=True, autoincrement=True),',
    ]
    for field in entity.fields:
        nullable = "False" if field.required else "True"
        lines.append(f"    Column({field.name!r}, {_column_type(field.type)}, nullable={nullable}),")
    lines += [")", ""]
    return "\n".join(lines)


def render_entity_router(entity: EntitySpec) -> str:
    """Generate the CRUD router for an entity."""
    name = entity.name
    return f"""from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException, Query

from app.models.{name} import FIELDS, {name}_table
from app.repo import DEFAULT_LIMIT, SqliteRepo, clamp_limit, clamp_offset
from app.validation import coerce_record

router = APIRouter()
repo = SqliteRepo({name}_table, FIELDS)


@router.get("")
def list_{name}(
    limit: int = Query(DEFAULT_LIMIT),
    offset: int = Query(0),
    orderBy: str = Query("id"),
    orderDir: str = Query("desc"),
):
    limit = clamp_limit(limit)
    offset = clamp_offset(offset)
    page = repo.list(limit=limit, offset=offset, order_by=orderBy, order_dir=orderDir)
    return {{"items": page["items"], "total": page["total"], "limit": limit, "offset": offset}}


@router.get("/{{id}}")
def get_{name}(id: int):
    item = repo.get(id)
    if item is None:
        raise HTTPException(status_code=404, detail="Not found")
    return item


@router.post("", status_code=201)
def create_{name}(payload: Dict[str, Any] = Body(...)):
    return repo.create(coerce_record(FIELDS, payload))


@router.put("/{{id}}")
def replace_{name}(id: int, payload: Dict[str, Any] = Body(...)):
    if repo.get(id) is None:
        raise HTTPException(status_code=404, detail="Not found")
    item = repo.replace(id, coerce_record(FIELDS, payload))
    if item is None:
        raise HTTPException(status_code=404, detail="Not found")
    return item


@router.delete("/{{id}}")
def delete_{name}(id: int):
    repo.delete(id)
    return {{"ok": True}}
"""
