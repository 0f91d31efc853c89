"""Submit builds and read their progress."""
from __future__ import annotations
import logging
import uuid
from pathlib import Path
from typing import List, Optional

from appforge.core.config import Settings, settings as default_settings
from appforge.core.dispatch import Dispatcher, ThreadDispatcher
from appforge.core.engine import WorkflowEngine
from appforge.core.errors import InvalidBuildRequest
from appforge.core.workflow import PlanMode
from appforge.schemas.builds import BuildState
from appforge.store.builds import BuildStore, FileBuildStore

log = logging.getLogger(__name__)


class BuildService:
    def __init__(self, store: BuildStore, dispatcher: Dispatcher):
        self.store = store
        self.dispatcher = dispatcher

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "BuildService":
        store = FileBuildStore(settings.generated_root)
        engine = WorkflowEngine(store=store)
        return cls(store, ThreadDispatcher(engine, max_workers=settings.max_concurrent_builds))

    def submit_build(self, prompt: str, mode: PlanMode | str = PlanMode.AUTO) -> str:
        """Record a new build and hand it to the dispatcher. Returns the build id immediately."""
        if not isinstance(prompt, str) or not prompt.strip():
            raise InvalidBuildRequest("prompt must be a non-empty string", field="prompt")
        try:
            mode = PlanMode(mode)
        except ValueError:
            allowed = ", ".join(m.value for m in PlanMode)
            raise InvalidBuildRequest(f"mode must be one of: {allowed}", field="mode") from None

        build_id = str(uuid.uuid4())
        self.store.create(build_id, prompt.strip(), mode)
        log.info("Build submitted", extra={"build_id": build_id, "stage": "-"})
        self.dispatcher.dispatch(build_id)
        return build_id

    def get_build_state(self, build_id: str) -> Optional[BuildState]:
        return self.store.get(build_id)

    def list_output_files(self, build_id: str) -> List[str]:
        return self.store.list_output_files(build_id)

    def output_dir(self, build_id: str) -> Optional[Path]:
        return self.store.out_dir(build_id)
