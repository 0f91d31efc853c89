"""Tests for build state persistence."""
import json
import tempfile
import pytest
from pathlib import Path
from appforge.core.workflow import BuildStatus, StageStatus
from appforge.store.builds import MAX_LOG_ENTRIES, FileBuildStore, InMemoryBuildStore


def test_create_initializes_all_stages_idle():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)
        state = store.create("b1", "Build a todo app", "local")

        assert state.status == BuildStatus.RUNNING
        assert state.mode_requested.value == "local"
        assert list(state.stages) == ["plan", "backend", "frontend", "finalize"]
        assert all(s.status == StageStatus.IDLE for s in state.stages.values())
        assert state.out_dir == str((Path(temp_dir) / "b1" / "project").resolve())


def test_fresh_file_store_sees_last_known_state():
    """Test that a new store instance on the same root reloads stage statuses and logs."""
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)
        store.create("b1", "prompt", "auto")
        store.set_stage_status("b1", "plan", StageStatus.RUNNING)
        store.append_log("b1", "plan", "Planner: trying gemini")
        store.set_stage_status("b1", "plan", StageStatus.DONE, output={"generationMode": "local"})
        store.set_stage_status("b1", "backend", StageStatus.RUNNING)
        before = store.get("b1")

        reopened = FileBuildStore(temp_dir).get("b1")

        assert reopened.model_dump() == before.model_dump()
        assert reopened.stage("plan").log == ["Planner: trying gemini"]
        assert reopened.stage("plan").output == {"generationMode": "local"}
        assert reopened.stage("backend").status == StageStatus.RUNNING

        snapshot = json.loads((Path(temp_dir) / "b1" / "status.json").read_text(encoding="utf-8"))
        assert snapshot["stages"]["backend"]["status"] == "running"
        assert not list((Path(temp_dir) / "b1").glob("*.tmp")), "Temp snapshot files must be moved into place"


def test_in_memory_store_reloads_after_evict():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        store.create("b2", "prompt", "ai")
        store.append_log("b2", "frontend", "Writing 12 frontend files")
        store.set_stage_status("b2", "frontend", StageStatus.FAILED)
        store.mark_failed("b2", "disk full")
        before = store.get("b2")

        store.evict()

        after = store.get("b2")
        assert after.model_dump() == before.model_dump()
        assert after.status == BuildStatus.FAILED
        assert after.error == "disk full"


def test_log_is_capped_dropping_oldest():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        store.create("b3", "prompt")
        for i in range(MAX_LOG_ENTRIES + 20):
            store.append_log("b3", "plan", f"line {i}")

        log = store.get("b3").stage("plan").log
        assert len(log) == 500
        assert log[0] == "line 20"
        assert log[-1] == f"line {MAX_LOG_ENTRIES + 19}"


def test_get_returns_a_copy():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        store.create("b4", "prompt")

        state = store.get("b4")
        state.stage("plan").log.append("mutated outside the store")

        assert store.get("b4").stage("plan").log == []


def test_unknown_and_invalid_ids():
    """Test that unknown ids yield None or [] and unsafe ids are refused."""
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)

        assert store.get("missing") is None
        assert store.set_stage_status("missing", "plan", StageStatus.RUNNING) is None
        assert store.append_log("missing", "plan", "x") is None
        assert store.mark_done("missing") is None
        assert store.out_dir("missing") is None
        assert store.list_output_files("missing") == []
        assert store.get("../etc") is None

        with pytest.raises(ValueError):
            store.create("../escape", "prompt")


def test_list_output_files_is_sorted_and_relative():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)
        store.create("b5", "prompt")
        out = store.out_dir("b5")
        (out / "frontend" / "app").mkdir(parents=True)
        (out / "frontend" / "app" / "page.tsx").write_text("x", encoding="utf-8")
        (out / "README.md").write_text("x", encoding="utf-8")
        (out / "backend").mkdir()
        (out / "backend" / "requirements.txt").write_text("x", encoding="utf-8")

        assert store.list_output_files("b5") == [
            "README.md",
            "backend/requirements.txt",
            "frontend/app/page.tsx",
        ]


def test_mark_done_updates_timestamp():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = FileBuildStore(temp_dir)
        created = store.create("b6", "prompt")

        done = store.mark_done("b6")

        assert done.status == BuildStatus.DONE
        assert done.updated_at >= created.updated_at
        assert FileBuildStore(temp_dir).get("b6").status == BuildStatus.DONE


def test_submitting_store_follows_progress_written_by_another_store():
    """Test that the store that created a build sees updates made by a separate worker store."""
    with tempfile.TemporaryDirectory() as temp_dir:
        api_store = FileBuildStore(temp_dir)
        api_store.create("b7", "prompt", "local")
        assert api_store.get("b7").status == BuildStatus.RUNNING

        worker_store = FileBuildStore(temp_dir)
        worker_store.set_stage_status("b7", "plan", StageStatus.DONE, output={"generationMode": "local"})
        worker_store.append_log("b7", "backend", "Writing 20 backend files")
        worker_store.mark_failed("b7", "disk full")

        seen = api_store.get("b7")
        assert seen.status == BuildStatus.FAILED
        assert seen.error == "disk full"
        assert seen.stage("plan").status == StageStatus.DONE
        assert seen.stage("backend").log == ["Writing 20 backend files"]

        api_store.append_log("b7", "backend", "seen by api")
        assert worker_store.get("b7").stage("backend").log == ["Writing 20 backend files", "seen by api"]


def test_reset_returns_build_to_a_clean_running_record():
    with tempfile.TemporaryDirectory() as temp_dir:
        store = InMemoryBuildStore(temp_dir)
        store.create("b8", "prompt", "local")
        store.append_log("b8", "plan", "old line")
        store.set_stage_status("b8", "plan", StageStatus.DONE, output={"plan": {}})
        store.mark_failed("b8", "boom")

        state = store.reset("b8")

        assert state.status == BuildStatus.RUNNING
        assert state.error is None
        assert all(s.status == StageStatus.IDLE and s.log == [] and s.output is None for s in state.stages.values())
        assert state.prompt == "prompt"
        assert store.reset("missing") is None
