from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from appforge.core.workflow import BuildStage
from appforge.generators.types import GeneratedFile
from appforge.planner.orchestrator import PlanningOrchestrator
from appforge.planner.schema import Plan
from appforge.store.builds import BuildStore

log = logging.getLogger(__name__)

FileWriter = Callable[[Iterable[GeneratedFile], Path], List[str]]


@dataclass
class AgentResult:
    stage: BuildStage
    ok: bool
    message: str
    output: Dict[str, Any]


@dataclass
class BuildContext:
    """What a stage agent can see and touch while a build runs."""
    build_id: str
    prompt: str
    mode: str
    out_dir: Path
    store: BuildStore
    orchestrator: PlanningOrchestrator
    writer: FileWriter
    plan: Optional[Plan] = None

    def emit(self, stage: BuildStage, line: str) -> None:
        log.info(line, extra={"build_id": self.build_id, "stage": stage.value})
        self.store.append_log(self.build_id, stage, line)


class BaseAgent:
    stage: BuildStage

    def run(self, ctx: BuildContext) -> AgentResult:
        raise NotImplementedError
