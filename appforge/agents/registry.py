from dataclasses import dataclass
from typing import Dict
from appforge.core.workflow import BuildStage
from appforge.agents.base import BaseAgent
from appforge.agents.impl_plan import PlannerAgent
from appforge.agents.impl_build import BackendBuilderAgent, FrontendBuilderAgent, FinalizeAgent

@dataclass
class AgentRegistry:
    mapping: Dict[BuildStage, BaseAgent]

    def get(self, stage: BuildStage) -> BaseAgent:
        return self.mapping[stage]

    @staticmethod
    def default() -> "AgentRegistry":
        return AgentRegistry(mapping={
            BuildStage.PLAN: PlannerAgent(),
            BuildStage.BACKEND: BackendBuilderAgent(),
            BuildStage.FRONTEND: FrontendBuilderAgent(),
            BuildStage.FINALIZE: FinalizeAgent(),
        })
