"""Utility functions shared by the generators."""
import json
import pprint
import re
from typing import Any


def to_pascal_case(name: str) -> str:
    """Convert snake_case to PascalCase."""
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[_\-\s]+", name) if part)


def to_label(name: str) -> str:
    """Human label for a field or entity name (habitName -> Habit name)."""
    s = re.sub('([a-z0-9])([A-Z])', r'\1 \2', name).replace("_", " ").strip()
    return s[:1].upper() + s[1:].lower() if s else s


def to_json(obj: Any) -> str:
    """Deterministic JSON text with a trailing newline."""
    return json.dumps(obj, indent=2) + "\n"


def py_literal(obj: Any) -> str:
    """Deterministic Python literal for embedding data in generated modules."""
    return pprint.pformat(obj, indent=4, width=100, sort_dicts=False)


def app_slug(app_name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", app_name.lower()).strip("-") or "generated-app"
