"""Plan schema: the normalized entity/field description every stage reads."""
import keyword
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

FieldType = Literal["string", "text", "number", "boolean", "date", "enum"]
GenerationMode = Literal["ai", "local", "fallback"]
ProviderName = Literal["gemini", "openai"]

FIELD_TYPES = ("string", "text", "number", "boolean", "date", "enum")

DEFAULT_APP_NAME = "Generated CRUD App"
DEFAULT_DESCRIPTION = "Generated full-stack CRUD app."
DEFAULT_ENTITY_NAME = "items"
PLACEHOLDER_ENUM_VALUES = ["OptionA", "OptionB"]
DEFAULT_STATUS_VALUES = ["todo", "doing", "done"]

MAX_APP_NAME_LENGTH = 60
MAX_ENUM_VALUES = 50

# Names the generated backend already routes under /api/
RESERVED_ENTITY_NAMES = {"health", "spec"}

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def title_case(name: str) -> str:
    """Convert snake_case or kebab-case to a display label."""
    words = re.sub(r"[_\-]+", " ", name).split()
    return " ".join(w[:1].upper() + w[1:] for w in words)


def to_identifier(raw: str, prefix: str = "f") -> str:
    """Sanitize free text into an identifier, preserving case. Returns "" if nothing usable remains."""
    s = re.sub(r"[^A-Za-z0-9]+", "_", str(raw).strip()).strip("_")
    if not s:
        return ""
    if s[0].isdigit():
        s = f"{prefix}_{s}"
    if keyword.iskeyword(s):
        s = f"{s}_"
    return s


def to_entity_name(raw: str) -> str:
    """Sanitize free text into a lowercase snake_case entity name."""
    s = to_identifier(raw, prefix="e").lower()
    if not s:
        return DEFAULT_ENTITY_NAME
    if keyword.iskeyword(s):
        s = f"{s}_"
    if s in RESERVED_ENTITY_NAMES:
        s = f"{s}_items"
    return s


def default_fields() -> List["FieldSpec"]:
    return [
        FieldSpec(name="title", type="string", required=True),
        FieldSpec(name="status", type="enum", enum_values=list(DEFAULT_STATUS_VALUES)),
    ]


class FieldSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    type: FieldType = "string"
    required: bool = False
    enum_values: Optional[List[str]] = Field(default=None, alias="enumValues")

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        if not _IDENTIFIER_RE.match(v):
            raise ValueError(f"field name '{v}' is not a valid identifier")
        if v.lower() == "id":
            raise ValueError("field 'id' is implicit and cannot be declared")
        return v

    @model_validator(mode="after")
    def _check_enum(self) -> "FieldSpec":
        if self.type == "enum" and not self.enum_values:
            raise ValueError(f"enum field '{self.name}' requires enumValues")
        if self.type != "enum" and self.enum_values is not None:
            raise ValueError(f"field '{self.name}' of type {self.type} cannot declare enumValues")
        return self


class EntitySpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    title: str = ""
    fields: List[FieldSpec] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        if not _IDENTIFIER_RE.match(v) or v != v.lower() or keyword.iskeyword(v):
            raise ValueError(f"entity name '{v}' must be a lowercase identifier")
        if v in RESERVED_ENTITY_NAMES:
            raise ValueError(f"entity name '{v}' is reserved")
        return v

    @model_validator(mode="before")
    @classmethod
    def _default_title(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("title") and isinstance(data.get("name"), str):
            data = {**data, "title": title_case(data["name"])}
        return data

    @model_validator(mode="after")
    def _check_fields(self) -> "EntitySpec":
        seen = set()
        for f in self.fields:
            key = f.name.lower()
            if key in seen:
                raise ValueError(f"duplicate field '{f.name}' in entity '{self.name}'")
            seen.add(key)
        return self


class Plan(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    app_name: str = Field(default=DEFAULT_APP_NAME, alias="appName", min_length=1, max_length=MAX_APP_NAME_LENGTH)
    description: str = DEFAULT_DESCRIPTION
    generation_mode: GenerationMode = Field(default="local", alias="generationMode")
    ai_provider: Optional[ProviderName] = Field(default=None, alias="aiProvider")
    entities: List[EntitySpec] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_plan(self) -> "Plan":
        names = [e.name for e in self.entities]
        if len(names) != len(set(names)):
            raise ValueError("entity names must be unique")
        if self.ai_provider is not None and self.generation_mode != "ai":
            raise ValueError("aiProvider is only allowed when generationMode is 'ai'")
        return self

    def with_provenance(self, mode: str, provider: Optional[str] = None) -> "Plan":
        return self.model_copy(update={"generation_mode": mode, "ai_provider": provider})

    def to_dict(self) -> Dict[str, Any]:
        """Wire form (camelCase), omitting absent optional keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


# Strict shape accepted from AI providers before normalization.

class ProviderFieldPayload(BaseModel):
    name: str = Field(min_length=1)
    type: FieldType
    required: Optional[bool] = None
    enumValues: Optional[List[str]] = None


class ProviderEntityPayload(BaseModel):
    name: str = Field(min_length=1)
    title: Optional[str] = None
    label: Optional[str] = None
    fields: List[ProviderFieldPayload] = Field(min_length=1)


class ProviderPlanPayload(BaseModel):
    appName: str = Field(min_length=1)
    description: Optional[str] = None
    entities: List[ProviderEntityPayload] = Field(min_length=1)


def validate_provider_payload(data: Any) -> Dict[str, Any]:
    """Strictly validate a provider's decoded JSON. Raises ValueError with a readable reason."""
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    try:
        payload = ProviderPlanPayload.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"plan does not match schema: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e
    return payload.model_dump(exclude_none=True)


def _normalize_field(raw: Any) -> Optional[FieldSpec]:
    if not isinstance(raw, dict):
        return None
    name = to_identifier(raw.get("name") or "")
    if not name or name.lower() == "id":
        return None

    ftype = str(raw.get("type") or "string").lower()
    if ftype not in FIELD_TYPES:
        ftype = "string"

    enum_values = None
    if ftype == "enum":
        values = []
        for v in raw.get("enumValues") or []:
            s = str(v).strip()
            if s and s not in values:
                values.append(s)
        enum_values = values[:MAX_ENUM_VALUES] or list(PLACEHOLDER_ENUM_VALUES)

    return FieldSpec(
        name=name,
        type=ftype,
        required=bool(raw.get("required", False)),
        enum_values=enum_values,
    )


def _normalize_entity(raw: Any) -> EntitySpec:
    raw = raw if isinstance(raw, dict) else {}
    name = to_entity_name(raw.get("name") or DEFAULT_ENTITY_NAME)

    fields: List[FieldSpec] = []
    seen = set()
    for f in raw.get("fields") or []:
        spec = _normalize_field(f)
        if spec is None or spec.name.lower() in seen:
            continue
        seen.add(spec.name.lower())
        fields.append(spec)

    if not fields:
        fields = default_fields()

    title = str(raw.get("title") or raw.get("label") or "").strip() or title_case(name)
    return EntitySpec(name=name, title=title, fields=fields)


def normalize_plan(raw: Any, generation_mode: str = "local", ai_provider: Optional[str] = None) -> Plan:
    """Leniently coerce a plan-like dict into a valid Plan. Never raises on content."""
    raw = raw if isinstance(raw, dict) else {}

    app_name = str(raw.get("appName") or "").strip()[:MAX_APP_NAME_LENGTH] or DEFAULT_APP_NAME
    description = str(raw.get("description") or "").strip() or DEFAULT_DESCRIPTION

    entities: List[EntitySpec] = []
    used = set()
    for e in raw.get("entities") or []:
        entity = _normalize_entity(e)
        name = entity.name
        suffix = 2
        while name in used:
            name = f"{entity.name}_{suffix}"
            suffix += 1
        if name != entity.name:
            entity = entity.model_copy(update={"name": name})
        used.add(name)
        entities.append(entity)

    if not entities:
        entities = [EntitySpec(name=DEFAULT_ENTITY_NAME, title=title_case(DEFAULT_ENTITY_NAME), fields=default_fields())]

    return Plan(
        app_name=app_name,
        description=description,
        generation_mode=generation_mode,
        ai_provider=ai_provider if generation_mode == "ai" else None,
        entities=entities,
    )
