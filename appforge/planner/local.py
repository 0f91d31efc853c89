"""Deterministic, network-free planner used as the terminal fallback.

Only one entity is ever produced. Multi-entity extraction is left to the AI
providers.
"""
import re
from typing import Any, Dict, List, Optional

from appforge.planner.schema import (
    DEFAULT_APP_NAME,
    DEFAULT_DESCRIPTION,
    DEFAULT_ENTITY_NAME,
    MAX_APP_NAME_LENGTH,
    PLACEHOLDER_ENUM_VALUES,
    Plan,
    normalize_plan,
    title_case,
)

MAX_FIELD_TOKENS = 25

# Ordered: first match wins
APP_NAME_PATTERNS = [
    re.compile(r"""\b(?:called|named)\s+["'“‘]([^"'”’]+)["'”’]""", re.IGNORECASE),
    re.compile(r"\bbuild\s+an?\s+(.+?)(?:\s+with\b|[.;:!?\n]|$)", re.IGNORECASE),
]

FIELDS_MARKER = re.compile(r"\bfields?\s*:\s*([\s\S]+)", re.IGNORECASE)
ENTITY_PATTERN = re.compile(r"\bfor\s+([A-Za-z][\w-]*)", re.IGNORECASE)
FIELD_TOKEN = re.compile(r"^([A-Za-z0-9_-]+)(?:\s*\(([^)]*)\))?$")


def extract_app_name(prompt: str) -> str:
    for pattern in APP_NAME_PATTERNS:
        m = pattern.search(prompt)
        if m and m.group(1).strip():
            return title_case(m.group(1).strip())[:MAX_APP_NAME_LENGTH]
    return DEFAULT_APP_NAME


def extract_fields_part(prompt: str) -> str:
    m = FIELDS_MARKER.search(prompt)
    return m.group(1) if m else ""


def split_field_tokens(text: str) -> List[str]:
    """Split on commas, semicolons and newlines that are not inside parentheses."""
    tokens = []
    depth = 0
    current = []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        if ch in ",;\n" and depth == 0:
            tokens.append("".join(current))
            current = []
            continue
        current.append(ch)
    tokens.append("".join(current))

    cleaned = []
    for t in tokens:
        t = t.strip().rstrip(".!?").strip()
        if t:
            cleaned.append(t)
    return cleaned[:MAX_FIELD_TOKENS]


def classify_hint(hint: str) -> Dict[str, Any]:
    """Map a parenthetical hint to a field type (and enum values)."""
    hint = hint.strip()
    lower = hint.lower()
    if "," in hint:
        values = [v.strip() for v in hint.split(",") if v.strip()]
        return {"type": "enum", "enumValues": values}
    if "number" in lower or "int" in lower or "float" in lower:
        return {"type": "number"}
    if "bool" in lower:
        return {"type": "boolean"}
    if "date" in lower:
        return {"type": "date"}
    if lower == "enum":
        return {"type": "enum", "enumValues": list(PLACEHOLDER_ENUM_VALUES)}
    return {"type": "string"}


def parse_field_token(token: str) -> Optional[Dict[str, Any]]:
    m = FIELD_TOKEN.match(token)
    if not m:
        return None
    field = {"name": m.group(1), "required": False}
    field.update(classify_hint(m.group(2) or ""))
    return field


def extract_entity_name(prompt: str) -> str:
    m = ENTITY_PATTERN.search(prompt)
    return m.group(1) if m else DEFAULT_ENTITY_NAME


def make_local_plan(prompt: str) -> Plan:
    """Plan from prompt text alone. Always succeeds with generationMode=local."""
    prompt = prompt or ""

    fields = []
    for token in split_field_tokens(extract_fields_part(prompt)):
        field = parse_field_token(token)
        if field is not None:
            fields.append(field)

    raw = {
        "appName": extract_app_name(prompt),
        "description": DEFAULT_DESCRIPTION,
        "entities": [
            {"name": extract_entity_name(prompt), "fields": fields},
        ],
    }
    return normalize_plan(raw, generation_mode="local")
