"""Simple string templates for backend code generation (Jinja2-free)."""
from typing import Dict, List

from appforge.generators.utils import py_literal
from appforge.planner.schema import Plan

BACKEND_PORT = 5050
FRONTEND_PORT = 3001


def render_main_py(entity_routers: List[Dict[str, str]]) -> str:
    """Generate app/main.py content.

    Args:
        entity_routers: List of dicts with 'entity_name' and 'title' keys
    """
    lines = [
        "from contextlib import asynccontextmanager",
        "",
        "from fastapi import FastAPI, Request",
        "from fastapi.middleware.cors import CORSMiddleware",
        "from fastapi.responses import JSONResponse",
        "",
        "from app.api.health import router as health_router",
        "from app.core.config import settings",
        "from app.db import init_db",
        "from app.validation import RecordValidationError",
    ]
    for router_info in entity_routers:
        name = router_info["entity_name"]
        lines.append(f"from app.api.entities.{name} import router as {name}_router")

    lines += [
        "",
        "",
        "@asynccontextmanager",
        "async def lifespan(app: FastAPI):",
        "    init_db()",
        "    yield",
        "",
        "",
        'app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)',
        "",
        "app.add_middleware(",
        "    CORSMiddleware,",
        '    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],',
        '    allow_methods=["*"],',
        '    allow_headers=["*"],',
        ")",
        "",
        "",
        "@app.exception_handler(RecordValidationError)",
        "async def record_validation_handler(request: Request, exc: RecordValidationError):",
        '    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": exc.details})',
        "",
        "",
        'app.include_router(health_router, prefix="/api", tags=["meta"])',
    ]
    for router_info in entity_routers:
        name = router_info["entity_name"]
        lines.append(
            f'app.include_router({name}_router, prefix="/api/{name}", tags=[{router_info["title"]!r}])'
        )
    lines.append("")
    return "\n".join(lines)


def render_package_init(description: str) -> str:
    return f"# {description}\n"


def render_api_health() -> str:
    """Generate app/api/health.py content."""
    return """from fastapi import APIRouter

from app.plan import PLAN

router = APIRouter()


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/spec")
def spec():
    return PLAN
"""


def render_plan_py(plan: Plan) -> str:
    """Generate app/plan.py: the plan the app was generated from, served at /api/spec."""
    return (
        "# Plan this backend was generated from. Served at GET /api/spec.\n"
        f"PLAN = {py_literal(plan.to_dict())}\n"
    )


def render_core_config(plan: Plan) -> str:
    """Generate app/core/config.py content."""
    return f"""from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = {plan.app_name!r}
    api_host: str = "0.0.0.0"
    api_port: int = {BACKEND_PORT}

    database_url: str = "sqlite:///./data/app.db"
    cors_origins: str = "http://localhost:{FRONTEND_PORT}"


settings = Settings()
"""


def render_db() -> str:
    """Generate app/db.py content."""
    return """from pathlib import Path

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import make_url

from app.core.config import settings

metadata = MetaData()


def _engine_kwargs(url: str) -> dict:
    parsed = make_url(url)
    if parsed.drivername.startswith("sqlite"):
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        return {"connect_args": {"check_same_thread": False}}
    return {}


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))


def init_db() -> None:
    # Entity tables register themselves on `metadata` when app.models.* is imported
    metadata.create_all(engine)
"""


def render_validation() -> str:
    """Generate app/validation.py: per-field coercion driven by each entity's FIELDS list."""
    return """import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List


class RecordValidationError(Exception):
    # details: one {"field", "message"} entry per offending field
    def __init__(self, details: List[Dict[str, Any]]):
        super().__init__("Validation failed")
        self.details = details


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def coerce_number(value: Any, field: Dict[str, Any]) -> float:
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if not isinstance(value, (int, float, str)):
        raise ValueError("must be a number")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        raise ValueError("must be a number") from None
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return number


def coerce_boolean(value: Any, field: Dict[str, Any]) -> int:
    if value is True or value == "true" or value == "1" or (type(value) is int and value == 1):
        return 1
    if value is False or value == "false" or value == "0" or (type(value) is int and value == 0):
        return 0
    raise ValueError("must be a boolean (true, false, 1 or 0)")


def coerce_date(value: Any, field: Dict[str, Any]) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("must be a valid date")
    text = value.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # Shifting to UTC can step outside year 1..9999
        parsed = parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise ValueError("must be a valid date") from None
    return parsed.strftime("%Y-%m-%dT%H:%M:%S.") + f"{parsed.microsecond // 1000:03d}Z"


def coerce_enum(value: Any, field: Dict[str, Any]) -> str:
    allowed = field.get("enumValues") or []
    if not isinstance(value, str) or value not in allowed:
        raise ValueError("must be one of: " + ", ".join(allowed))
    return value


def coerce_text(value: Any, field: Dict[str, Any]) -> str:
    return str(value)


COERCERS: Dict[str, Callable[[Any, Dict[str, Any]], Any]] = {
    "number": coerce_number,
    "boolean": coerce_boolean,
    "date": coerce_date,
    "enum": coerce_enum,
    "string": coerce_text,
    "text": coerce_text,
}


def coerce_record(fields: List[Dict[str, Any]], payload: Any) -> Dict[str, Any]:
    # Returns a value for every declared field or raises with all problems at once
    if not isinstance(payload, dict):
        raise RecordValidationError([{"field": None, "message": "body must be a JSON object"}])

    values: Dict[str, Any] = {}
    errors: List[Dict[str, Any]] = []
    for field in fields:
        name = field["name"]
        raw = payload.get(name)
        if is_blank(raw):
            if field["required"]:
                errors.append({"field": name, "message": f"{name} is required"})
            values[name] = 0 if field["type"] == "boolean" else None
            continue
        try:
            values[name] = COERCERS[field["type"]](raw, field)
        except ValueError as e:
            errors.append({"field": name, "message": f"{name} {e}"})

    if errors:
        raise RecordValidationError(errors)
    return values
"""


def render_repo() -> str:
    """Generate app/repo.py: table-generic CRUD over SQLAlchemy Core."""
    return """from typing import Any, Dict, List, Optional

from sqlalchemy import Table, delete, func, insert, select, update

from app.db import engine

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


def clamp_limit(limit: int) -> int:
    return min(max(int(limit), 1), MAX_LIMIT)


def clamp_offset(offset: int) -> int:
    return max(int(offset), 0)


class SqliteRepo:
    def __init__(self, table: Table, fields: List[Dict[str, Any]]):
        self.table = table
        self.fields = fields
        self.columns = set(table.c.keys())
        self._booleans = [f["name"] for f in fields if f["type"] == "boolean"]

    def _to_item(self, row) -> Dict[str, Any]:
        item = dict(row._mapping)
        for name in self._booleans:
            if item.get(name) is not None:
                item[name] = bool(item[name])
        return item

    def list(self, limit: int = DEFAULT_LIMIT, offset: int = 0, order_by: str = "id", order_dir: str = "desc") -> Dict[str, Any]:
        column = self.table.c[order_by] if order_by in self.columns else self.table.c.id
        direction = "asc" if str(order_dir).lower() == "asc" else "desc"
        ordering = [column.asc() if direction == "asc" else column.desc()]
        if column is not self.table.c.id:
            ordering.append(self.table.c.id.desc())
        stmt = select(self.table).order_by(*ordering).limit(limit).offset(offset)
        with engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
            total = conn.execute(select(func.count()).select_from(self.table)).scalar_one()
        return {"items": [self._to_item(r) for r in rows], "total": total}

    def get(self, id: int) -> Optional[Dict[str, Any]]:
        with engine.connect() as conn:
            row = conn.execute(select(self.table).where(self.table.c.id == id)).fetchone()
        return self._to_item(row) if row else None

    def create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        with engine.begin() as conn:
            result = conn.execute(insert(self.table).values(values))
            new_id = result.inserted_primary_key[0]
        return self.get(new_id)

    def replace(self, id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with engine.begin() as conn:
            result = conn.execute(update(self.table).where(self.table.c.id == id).values(values))
            if result.rowcount == 0:
                return None
        return self.get(id)

    def delete(self, id: int) -> bool:
        with engine.begin() as conn:
            result = conn.execute(delete(self.table).where(self.table.c.id == id))
        return result.rowcount > 0
"""


def render_requirements_txt() -> str:
    """Generate requirements.txt content."""
    return """fastapi==0.115.6
uvicorn[standard]==0.30.6
pydantic==2.9.2
pydantic-settings==2.5.2
sqlalchemy==2.0.36
"""


def render_env_example() -> str:
    return f"""DATABASE_URL=sqlite:///./data/app.db
CORS_ORIGINS=http://localhost:{FRONTEND_PORT}
"""


def render_dockerfile() -> str:
    """Generate Dockerfile content."""
    return f"""FROM python:3.11-slim

WORKDIR /app

COPY requirements.txt .
RUN pip install --no-cache-dir -r requirements.txt

COPY app ./app

ENV PYTHONUNBUFFERED=1

EXPOSE {BACKEND_PORT}

CMD ["uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", "{BACKEND_PORT}"]
"""


def render_readme(plan: Plan) -> str:
    """Generate backend/README.md content."""
    lines = [
        f"# {plan.app_name} API",
        "",
        "Generated FastAPI + SQLite backend.",
        "",
        "## Running the API",
        "",
        "```bash",
        "pip install -r requirements.txt",
        f"uvicorn app.main:app --host 0.0.0.0 --port {BACKEND_PORT}",
        "```",
        "",
        "## Endpoints",
        "",
        "- `GET /api/health` - Health check",
        "- `GET /api/spec` - Plan this backend was generated from",
    ]
    for entity in plan.entities:
        lines += [
            f"- `GET /api/{entity.name}?limit=50&offset=0&orderBy=id&orderDir=desc` - List {entity.title}",
            f"- `POST /api/{entity.name}` - Create",
            f"- `GET|PUT|DELETE /api/{entity.name}/{{id}}` - Read, replace, delete",
        ]
    lines.append("")
    return "\n".join(lines)
