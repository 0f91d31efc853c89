from __future__ import annotations
import logging
from appforge.tasks.celery_app import celery_app
from appforge.core.config import settings
from appforge.core.engine import WorkflowEngine
from appforge.store.builds import FileBuildStore

log = logging.getLogger(__name__)

@celery_app.task(name="run_build_workflow")
def run_build_workflow(build_id: str) -> str | None:
    store = FileBuildStore(settings.generated_root)
    try:
        state = store.get(build_id)
        if not state:
            log.error("Build not found", extra={"build_id": build_id, "stage": "-"})
            return None

        log.info("Starting workflow", extra={"build_id": build_id, "stage": "-"})
        engine = WorkflowEngine(store=store)
        final = engine.run(build_id)
        return final.status.value if final else None

    except Exception as e:
        log.exception("Workflow failed", extra={"build_id": build_id, "stage": "-"})
        store.mark_failed(build_id, str(e))
        return "failed"
