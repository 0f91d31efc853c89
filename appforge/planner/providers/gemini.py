from __future__ import annotations
import httpx
from dataclasses import dataclass

from appforge.core.errors import ProviderResponseInvalid, ProviderTransportError, ProviderUnavailable
from appforge.planner.providers.base import PlanningProvider, build_instructions


@dataclass
class GeminiPlanner(PlanningProvider):
    """Plans through the Gemini generateContent REST endpoint."""
    api_key: str | None
    model: str = "gemini-1.5-flash"
    api_base: str = "https://generativelanguage.googleapis.com/v1beta/models"
    timeout: float = 60.0
    client: httpx.Client | None = None
    name: str = "gemini"

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _url(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.model}:generateContent"

    def _body(self, prompt: str, strict: bool) -> dict:
        text = f"{build_instructions(strict)}\n\nUser prompt:\n{prompt}"
        return {
            "contents": [{"role": "user", "parts": [{"text": text}]}],
            "generationConfig": {
                "temperature": 0.2,
                "maxOutputTokens": 2048,
                "responseMimeType": "application/json",
            },
        }

    def complete(self, prompt: str, strict: bool = False) -> str:
        if not self.api_key:
            raise ProviderUnavailable(self.name, "missing GEMINI_API_KEY")
        client = self.client or httpx.Client(timeout=self.timeout)
        try:
            r = client.post(
                self._url(),
                params={"key": self.api_key},
                json=self._body(prompt, strict),
            )
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProviderTransportError(self.name, str(e)) from e
        except ValueError as e:
            raise ProviderResponseInvalid(self.name, "response body is not JSON") from e
        finally:
            if self.client is None:
                client.close()

        if not isinstance(data, dict):
            raise ProviderResponseInvalid(self.name, "unexpected response shape")
        candidates = data.get("candidates") or []
        if not candidates:
            raise ProviderResponseInvalid(self.name, "no candidates in response")
        first = candidates[0] if isinstance(candidates, list) else None
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            raise ProviderResponseInvalid(self.name, "candidate has no content parts")
        return "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict))
