from enum import Enum

class BuildStage(str, Enum):
    PLAN = "plan"
    BACKEND = "backend"
    FRONTEND = "frontend"
    FINALIZE = "finalize"

class StageStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"

class BuildStatus(str, Enum):
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"

class PlanMode(str, Enum):
    """Planning strategy requested by the caller."""
    AUTO = "auto"
    AI = "ai"
    LOCAL = "local"

STAGE_ORDER = [
    BuildStage.PLAN,
    BuildStage.BACKEND,
    BuildStage.FRONTEND,
    BuildStage.FINALIZE,
]
