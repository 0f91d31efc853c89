"""Ways to run a submitted build without blocking the caller."""
from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from appforge.core.engine import WorkflowEngine
from appforge.tasks.builds import run_build_workflow

log = logging.getLogger(__name__)


class Dispatcher:
    def dispatch(self, build_id: str) -> None:
        raise NotImplementedError


class InlineDispatcher(Dispatcher):
    """Runs the build on the caller's thread. Used by the CLI and tests."""

    def __init__(self, engine: WorkflowEngine):
        self.engine = engine

    def dispatch(self, build_id: str) -> None:
        self.engine.run(build_id)


class ThreadDispatcher(Dispatcher):
    """Fire-and-forget on a bounded thread pool."""

    def __init__(self, engine: WorkflowEngine, max_workers: int = 4):
        self.engine = engine
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="build")
        self.last_future: Optional[Future] = None

    def _run(self, build_id: str) -> None:
        try:
            self.engine.run(build_id)
        except Exception:
            # engine.run records stage failures itself; this only catches store errors
            log.exception("Build crashed", extra={"build_id": build_id, "stage": "-"})
            self.engine.store.mark_failed(build_id, "internal error")

    def dispatch(self, build_id: str) -> None:
        self.last_future = self.executor.submit(self._run, build_id)

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)


class CeleryDispatcher(Dispatcher):
    """Enqueue on the Celery broker. The worker reopens the store from settings."""

    def dispatch(self, build_id: str) -> None:
        run_build_workflow.delay(build_id)
