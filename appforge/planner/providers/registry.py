"""Static capability registry: provider id -> factory, in fallback order."""
from typing import Callable, Dict, List

from appforge.core.config import Settings
from appforge.planner.providers.base import PlanningProvider
from appforge.planner.providers.gemini import GeminiPlanner
from appforge.planner.providers.openai_provider import OpenAIPlanner

PROVIDER_ORDER = ["gemini", "openai"]

PROVIDER_FACTORIES: Dict[str, Callable[[Settings], PlanningProvider]] = {
    "gemini": lambda s: GeminiPlanner(
        api_key=s.gemini_api_key,
        model=s.gemini_model,
        api_base=s.gemini_api_url,
        timeout=s.planner_timeout_seconds,
    ),
    "openai": lambda s: OpenAIPlanner(
        api_key=s.openai_api_key,
        model=s.openai_model,
        timeout=s.planner_timeout_seconds,
    ),
}


def build_providers(settings: Settings) -> List[PlanningProvider]:
    return [PROVIDER_FACTORIES[name](settings) for name in PROVIDER_ORDER]
