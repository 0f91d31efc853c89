from __future__ import annotations
import logging
import shutil
from typing import Optional

from appforge.agents.base import BuildContext, FileWriter
from appforge.agents.registry import AgentRegistry
from appforge.core.errors import StageFatalError
from appforge.core.workflow import STAGE_ORDER, BuildStage, StageStatus
from appforge.generators.writer import write_files
from appforge.planner.orchestrator import PlanningOrchestrator
from appforge.schemas.builds import BuildState
from appforge.store.builds import BuildStore

log = logging.getLogger(__name__)


class WorkflowEngine:
    """Runs plan -> backend -> frontend -> finalize for one build.

    Stages never run out of order and are never retried. The first failing
    stage marks the build failed; files already written are left in place.
    """

    def __init__(
        self,
        store: BuildStore,
        orchestrator: Optional[PlanningOrchestrator] = None,
        writer: FileWriter = write_files,
        registry: Optional[AgentRegistry] = None,
    ):
        self.store = store
        self.orchestrator = orchestrator or PlanningOrchestrator.from_settings()
        self.writer = writer
        self.registry = registry or AgentRegistry.default()

    def _run_stage(self, ctx: BuildContext, stage: BuildStage) -> None:
        self.store.set_stage_status(ctx.build_id, stage, StageStatus.RUNNING)
        log.info("Running stage", extra={"build_id": ctx.build_id, "stage": stage.value})

        agent = self.registry.get(stage)
        result = agent.run(ctx)
        if not result.ok:
            raise StageFatalError(stage.value, result.message)

        ctx.emit(stage, result.message)
        self.store.set_stage_status(ctx.build_id, stage, StageStatus.DONE, output=result.output)

    def run(self, build_id: str) -> Optional[BuildState]:
        state = self.store.get(build_id)
        if state is None:
            log.error("Build not found", extra={"build_id": build_id, "stage": "-"})
            return None

        # Reruns start from a clean record
        self.store.reset(build_id)
        out_dir = self.store.out_dir(build_id)
        shutil.rmtree(out_dir, ignore_errors=True)
        out_dir.mkdir(parents=True, exist_ok=True)

        ctx = BuildContext(
            build_id=build_id,
            prompt=state.prompt,
            mode=state.mode_requested.value,
            out_dir=out_dir,
            store=self.store,
            orchestrator=self.orchestrator,
            writer=self.writer,
        )

        for stage in STAGE_ORDER:
            try:
                self._run_stage(ctx, stage)
            except Exception as e:
                message = e.message if isinstance(e, StageFatalError) else f"{type(e).__name__}: {e}"
                log.exception("Stage failed", extra={"build_id": build_id, "stage": stage.value})
                self.store.append_log(build_id, stage, f"Error: {message}")
                self.store.set_stage_status(build_id, stage, StageStatus.FAILED)
                return self.store.mark_failed(build_id, message)

        log.info("Build completed successfully", extra={"build_id": build_id, "stage": "-"})
        return self.store.mark_done(build_id)


BuildRunner = WorkflowEngine
