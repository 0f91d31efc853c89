from appforge.agents.base import AgentResult, BaseAgent, BuildContext
from appforge.core.errors import StageFatalError
from appforge.core.workflow import BuildStage, StageStatus
from appforge.generators import render_group


class GroupWriterAgent(BaseAgent):
    """Renders one file group from the plan and writes it under the build's output dir."""
    group: str

    def check_ready(self, ctx: BuildContext) -> None:
        if ctx.plan is None:
            raise StageFatalError(self.stage.value, "no plan available")

    def run(self, ctx: BuildContext) -> AgentResult:
        self.check_ready(ctx)
        files = render_group(ctx.plan, self.group)
        ctx.emit(self.stage, f"Writing {len(files)} {self.group} files")
        written = ctx.writer(files, ctx.out_dir)
        return AgentResult(
            self.stage,
            True,
            f"Generated {len(written)} {self.group} files",
            {"files": written},
        )


class BackendBuilderAgent(GroupWriterAgent):
    stage = BuildStage.BACKEND
    group = "backend"


class FrontendBuilderAgent(GroupWriterAgent):
    stage = BuildStage.FRONTEND
    group = "frontend"


class FinalizeAgent(GroupWriterAgent):
    stage = BuildStage.FINALIZE
    group = "project"

    def check_ready(self, ctx: BuildContext) -> None:
        super().check_ready(ctx)
        state = ctx.store.get(ctx.build_id)
        for required in (BuildStage.BACKEND, BuildStage.FRONTEND):
            if state is None or state.stage(required).status != StageStatus.DONE:
                raise StageFatalError(self.stage.value, f"stage '{required.value}' has not completed")
