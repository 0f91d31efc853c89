from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from appforge.core.workflow import BuildStage, BuildStatus, PlanMode, StageStatus, STAGE_ORDER

MAX_LOG_ENTRIES = 500


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StageState(BaseModel):
    name: BuildStage
    status: StageStatus = StageStatus.IDLE
    log: List[str] = []
    output: Optional[Dict[str, Any]] = None


def initial_stages() -> Dict[str, StageState]:
    return {stage.value: StageState(name=stage) for stage in STAGE_ORDER}


class BuildState(BaseModel):
    id: str
    prompt: str
    mode_requested: PlanMode = PlanMode.AUTO
    status: BuildStatus = BuildStatus.RUNNING
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    out_dir: str
    stages: Dict[str, StageState] = Field(default_factory=initial_stages)

    def stage(self, stage: BuildStage | str) -> StageState:
        return self.stages[BuildStage(stage).value]
