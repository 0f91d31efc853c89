from appforge.planner.local import make_local_plan
from appforge.planner.orchestrator import PlanningOrchestrator
from appforge.planner.schema import EntitySpec, FieldSpec, Plan, normalize_plan

__all__ = [
    "EntitySpec",
    "FieldSpec",
    "Plan",
    "PlanningOrchestrator",
    "make_local_plan",
    "normalize_plan",
]
