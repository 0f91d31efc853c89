"""Shared contract and response parsing for AI planning providers."""
import json
import re
from typing import Any

from appforge.core.errors import ProviderResponseInvalid, ProviderUnavailable
from appforge.planner.schema import Plan, normalize_plan, validate_provider_payload

PLAN_INSTRUCTIONS = """You are a software planner for small CRUD apps. Output ONLY valid JSON.
Return a single JSON object with this shape:
{
  "appName": string,
  "description": string,
  "entities": [
    {
      "name": string (snake_case, e.g. "tasks"),
      "title": string (display label, optional),
      "fields": [
        { "name": string, "type": "string|text|number|boolean|date|enum", "required": boolean, "enumValues": string[] }
      ]
    }
  ]
}
Rules:
- Include at least 1 entity and 1-12 fields per entity.
- Do NOT include "id" in fields. The backend adds it automatically.
- Prefer "text" for long notes.
- Use "enum" with enumValues when the prompt lists choices.
- Keep the entity list small and focused (1-3).
"""

STRICT_SUFFIX = "\nReturn ONLY minified JSON. No markdown. No code fences. No commentary.\n"

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*|\s*```\s*$")


def build_instructions(strict: bool = False) -> str:
    return PLAN_INSTRUCTIONS + (STRICT_SUFFIX if strict else "")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def decode_json_object(text: str) -> Any:
    """Decode a JSON object, salvaging the outermost {...} if the model added prose."""
    raw = strip_code_fences(text)
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        start = raw.find("{")
        end = raw.rfind("}")
        if start >= 0 and end > start:
            return json.loads(raw[start:end + 1])
        raise


def parse_plan_response(provider: str, text: str) -> Plan:
    """Turn raw provider text into a Plan tagged with the provider. Raises ProviderResponseInvalid."""
    if not text or not text.strip():
        raise ProviderResponseInvalid(provider, "empty response")
    try:
        data = decode_json_object(text)
    except json.JSONDecodeError as e:
        raise ProviderResponseInvalid(provider, f"response is not JSON ({e.msg})") from e
    try:
        payload = validate_provider_payload(data)
    except ValueError as e:
        raise ProviderResponseInvalid(provider, str(e)) from e
    return normalize_plan(payload, generation_mode="ai", ai_provider=provider)


class PlanningProvider:
    """One remote planning strategy. Subclasses implement is_available() and complete()."""
    name: str

    def is_available(self) -> bool:
        raise NotImplementedError

    def complete(self, prompt: str, strict: bool = False) -> str:
        """Send the prompt and return the raw model text."""
        raise NotImplementedError

    def plan(self, prompt: str, mode: str, strict: bool = False) -> Plan:
        if not self.is_available():
            raise ProviderUnavailable(self.name, "not configured")
        return parse_plan_response(self.name, self.complete(prompt, strict=strict))
