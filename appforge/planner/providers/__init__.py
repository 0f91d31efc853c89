from appforge.planner.providers.base import PlanningProvider, parse_plan_response
from appforge.planner.providers.registry import PROVIDER_FACTORIES, PROVIDER_ORDER, build_providers

__all__ = [
    "PROVIDER_FACTORIES",
    "PROVIDER_ORDER",
    "PlanningProvider",
    "build_providers",
    "parse_plan_response",
]
