from appforge.agents.base import AgentResult, BaseAgent, BuildContext
from appforge.core.workflow import BuildStage


class PlannerAgent(BaseAgent):
    stage = BuildStage.PLAN

    def run(self, ctx: BuildContext) -> AgentResult:
        plan = ctx.orchestrator.plan(ctx.prompt, ctx.mode, sink=lambda line: ctx.emit(self.stage, line))
        ctx.plan = plan
        entities = ", ".join(e.name for e in plan.entities)
        return AgentResult(
            self.stage,
            True,
            f"Planned {len(plan.entities)} entities: {entities}",
            {
                "plan": plan.to_dict(),
                "generationMode": plan.generation_mode,
                "aiProvider": plan.ai_provider,
            },
        )
