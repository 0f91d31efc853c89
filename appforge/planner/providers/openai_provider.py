from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from openai import OpenAI, OpenAIError

from appforge.core.errors import ProviderResponseInvalid, ProviderTransportError, ProviderUnavailable
from appforge.planner.providers.base import PlanningProvider, build_instructions


@dataclass
class OpenAIPlanner(PlanningProvider):
    """Plans through the OpenAI chat completions API in JSON mode."""
    api_key: str | None
    model: str = "gpt-4o-mini"
    timeout: float = 60.0
    client: Any = None
    name: str = "openai"

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _client(self) -> Any:
        if self.client is None:
            self.client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self.client

    def complete(self, prompt: str, strict: bool = False) -> str:
        if not self.api_key:
            raise ProviderUnavailable(self.name, "missing OPENAI_API_KEY")
        try:
            resp = self._client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_instructions(strict)},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
                temperature=0.2,
            )
        except OpenAIError as e:
            raise ProviderTransportError(self.name, str(e)) from e

        if not resp.choices:
            raise ProviderResponseInvalid(self.name, "no choices in response")
        return resp.choices[0].message.content or ""
