"""Tests for the stage-sequencing build runner."""
import json
import tempfile
from pathlib import Path
from unittest.mock import MagicMock
from appforge.agents.base import BuildContext
from appforge.agents.impl_build import FinalizeAgent
from appforge.core.engine import BuildRunner, WorkflowEngine
from appforge.core.errors import StageFatalError
from appforge.core.workflow import BuildStatus, StageStatus
from appforge.generators.writer import write_files
from appforge.planner.orchestrator import PlanningOrchestrator
from appforge.planner.local import make_local_plan
from appforge.store.builds import FileBuildStore, InMemoryBuildStore

PROMPT = "Build a habit tracker with fields: habitName, active (boolean)"


def _offline_orchestrator():
    return PlanningOrchestrator(providers=[])


def test_successful_build_runs_all_stages_in_order():
    """Test that a local build ends done with every stage done and a complete project on disk."""
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)
        store.create("ok1", PROMPT, "local")

        final = WorkflowEngine(store, orchestrator=_offline_orchestrator()).run("ok1")

        assert final.status == BuildStatus.DONE
        assert final.error is None
        assert [s.status for s in final.stages.values()] == [StageStatus.DONE] * 4

        plan_output = final.stage("plan").output
        assert plan_output["generationMode"] == "local"
        assert plan_output["aiProvider"] is None
        assert plan_output["plan"]["appName"] == "Habit Tracker"
        assert any(line.startswith("Planner result:") for line in final.stage("plan").log)

        files = store.list_output_files("ok1")
        assert "backend/app/main.py" in files
        assert "frontend/app/items/page.tsx" in files
        assert "manifest.json" in files
        assert final.stage("backend").output["files"][0].startswith("backend/")

        spec = json.loads((store.out_dir("ok1") / "spec.json").read_text(encoding="utf-8"))
        assert [f["name"] for f in spec["entities"][0]["fields"]] == ["habitName", "active"]


def test_backend_failure_mid_write_stops_the_build():
    """Test that a writer error during backend leaves later stages idle and the build failed."""
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        store.create("fail1", PROMPT, "local")

        def flaky_writer(files, out_dir):
            files = list(files)
            if files[0].path.startswith("backend/"):
                write_files(files[:3], out_dir)
                raise OSError("disk full")
            return write_files(files, out_dir)

        final = BuildRunner(store, orchestrator=_offline_orchestrator(), writer=flaky_writer).run("fail1")

        assert final.status == BuildStatus.FAILED
        assert "disk full" in final.error
        assert final.stage("plan").status == StageStatus.DONE
        assert final.stage("backend").status == StageStatus.FAILED
        assert final.stage("frontend").status == StageStatus.IDLE
        assert final.stage("finalize").status == StageStatus.IDLE
        assert final.stage("backend").log[-1].startswith("Error:")

        written = store.list_output_files("fail1")
        assert len(written) == 3, "Partial output is left in place"

        store.evict()
        reloaded = store.get("fail1")
        assert reloaded.stage("frontend").status == StageStatus.IDLE
        assert reloaded.status == BuildStatus.FAILED


def test_planner_crash_fails_plan_stage():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        store.create("fail2", PROMPT, "auto")
        orchestrator = MagicMock()
        orchestrator.plan.side_effect = RuntimeError("unexpected")

        final = WorkflowEngine(store, orchestrator=orchestrator).run("fail2")

        assert final.status == BuildStatus.FAILED
        assert final.error == "RuntimeError: unexpected"
        assert final.stage("plan").status == StageStatus.FAILED
        assert final.stage("backend").status == StageStatus.IDLE


def test_output_dir_is_wiped_before_run():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)
        store.create("wipe1", PROMPT, "local")
        out = store.out_dir("wipe1")
        out.mkdir(parents=True)
        (out / "stale.txt").write_text("old", encoding="utf-8")

        WorkflowEngine(store, orchestrator=_offline_orchestrator()).run("wipe1")

        assert not (out / "stale.txt").exists()
        assert (out / "README.md").exists()


def test_finalize_requires_backend_and_frontend_done():
    """Test that finalize refuses to run until backend and frontend are done."""
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        store.create("fin1", PROMPT, "local")
        ctx = BuildContext(
            build_id="fin1",
            prompt=PROMPT,
            mode="local",
            out_dir=Path(temp_dir) / "fin1" / "project",
            store=store,
            orchestrator=_offline_orchestrator(),
            writer=write_files,
            plan=make_local_plan(PROMPT),
        )

        try:
            FinalizeAgent().run(ctx)
            raised = None
        except StageFatalError as e:
            raised = e

        assert raised is not None
        assert raised.stage == "finalize"
        assert "backend" in raised.message


def test_unknown_build_returns_none():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        assert WorkflowEngine(store, orchestrator=_offline_orchestrator()).run("nope") is None


def test_rerunning_a_failed_build_starts_from_a_clean_record():
    """Test that running a failed build again clears its error and stage logs."""
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)
        store.create("again1", PROMPT, "local")

        def broken_writer(files, out_dir):
            raise OSError("disk full")

        failed = WorkflowEngine(store, orchestrator=_offline_orchestrator(), writer=broken_writer).run("again1")
        assert failed.status == BuildStatus.FAILED
        assert failed.stage("backend").log[-1] == "Error: OSError: disk full"

        seen = []

        def spy_writer(files, out_dir):
            state = store.get("again1")
            seen.append((state.status, state.error))
            return write_files(files, out_dir)

        final = WorkflowEngine(store, orchestrator=_offline_orchestrator(), writer=spy_writer).run("again1")

        assert seen[0] == (BuildStatus.RUNNING, None), "A rerun must not report the old terminal status"
        assert final.status == BuildStatus.DONE
        assert final.error is None
        assert [s.status for s in final.stages.values()] == [StageStatus.DONE] * 4
        assert not any(line.startswith("Error:") for s in final.stages.values() for line in s.log)
        assert sum(line.startswith("Planner result:") for line in final.stage("plan").log) == 1
