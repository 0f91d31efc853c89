from __future__ import annotations
import logging
from typing import Callable, List, Optional

from appforge.core.config import Settings, settings as default_settings
from appforge.core.errors import ProviderError
from appforge.core.workflow import PlanMode
from appforge.planner.local import make_local_plan
from appforge.planner.providers import PlanningProvider, build_providers
from appforge.planner.schema import Plan

log = logging.getLogger(__name__)

LogSink = Callable[[str], None]

# One call plus one stricter retry per provider
ATTEMPTS_PER_PROVIDER = 2


class PlanningOrchestrator:
    """Chooses between AI providers and the local planner.

    External attempts are bounded by len(providers) * ATTEMPTS_PER_PROVIDER,
    after which the local planner always produces a plan.
    """

    def __init__(self, providers: Optional[List[PlanningProvider]] = None, local_planner: Callable[[str], Plan] = make_local_plan):
        self.providers = list(providers) if providers is not None else []
        self.local_planner = local_planner

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "PlanningOrchestrator":
        return cls(providers=build_providers(settings))

    def _emit(self, sink: Optional[LogSink], message: str) -> None:
        log.info(message, extra={"stage": "plan"})
        if sink is not None:
            sink(message)

    def _try_provider(self, provider: PlanningProvider, prompt: str, mode: PlanMode, sink: Optional[LogSink]) -> Optional[Plan]:
        if not provider.is_available():
            self._emit(sink, f"Planner: {provider.name} not configured, skipping")
            return None

        for attempt in range(ATTEMPTS_PER_PROVIDER):
            strict = attempt > 0
            label = "retrying with strict JSON instruction" if strict else "trying"
            self._emit(sink, f"Planner: {label} {provider.name}")
            try:
                plan = provider.plan(prompt, mode.value, strict=strict)
            except ProviderError as e:
                self._emit(sink, f"Planner: {provider.name} failed: {e.message}")
                continue
            return plan.with_provenance("ai", provider.name)
        return None

    def plan(self, prompt: str, mode: PlanMode | str = PlanMode.AUTO, sink: Optional[LogSink] = None) -> Plan:
        mode = PlanMode(mode)

        if mode == PlanMode.LOCAL:
            self._emit(sink, "Planner: mode=local, using local planner")
            result = self.local_planner(prompt).with_provenance("local")
        else:
            result = None
            for provider in self.providers:
                result = self._try_provider(provider, prompt, mode, sink)
                if result is not None:
                    break
            if result is None:
                fallback_mode = "fallback" if mode == PlanMode.AI else "local"
                self._emit(sink, f"Planner: no AI provider succeeded, using local planner ({fallback_mode})")
                result = self.local_planner(prompt).with_provenance(fallback_mode)

        self._emit(
            sink,
            f"Planner result: generationMode={result.generation_mode} provider={result.ai_provider or 'n/a'}",
        )
        return result
