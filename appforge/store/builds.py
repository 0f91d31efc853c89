"""Build state persistence.

Every mutation is written to the snapshot before the call returns, so a
fresh store instance pointed at the same root sees the same state.
FileBuildStore re-reads the snapshot on every access, so a store in the
submitting process follows progress written by a worker process.
"""
from __future__ import annotations
import json
import logging
import os
import re
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from appforge.core.workflow import BuildStage, BuildStatus, PlanMode, StageStatus
from appforge.schemas.builds import MAX_LOG_ENTRIES, BuildState, initial_stages, utcnow

log = logging.getLogger(__name__)

BUILD_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")
STATUS_FILE = "status.json"
PROJECT_DIR = "project"


def is_valid_build_id(build_id: str) -> bool:
    return isinstance(build_id, str) and bool(BUILD_ID_RE.match(build_id))


class BuildStore:
    """Shared logic; subclasses decide where snapshots live."""

    # Reload the snapshot on every lookup instead of trusting the resident copy
    shared_snapshots = False

    def __init__(self, root: Path | str):
        self.root = Path(root).resolve()
        self._lock = threading.Lock()
        self._resident: Dict[str, BuildState] = {}

    # Snapshot backend

    def _save_snapshot(self, state: BuildState) -> None:
        raise NotImplementedError

    def _load_snapshot(self, build_id: str) -> Optional[BuildState]:
        raise NotImplementedError

    # Helpers

    def build_dir(self, build_id: str) -> Path:
        return self.root / build_id

    def _project_dir(self, build_id: str) -> Path:
        return self.build_dir(build_id) / PROJECT_DIR

    def _lookup(self, build_id: str) -> Optional[BuildState]:
        if not is_valid_build_id(build_id):
            return None
        state = self._resident.get(build_id)
        if state is None or self.shared_snapshots:
            loaded = self._load_snapshot(build_id)
            if loaded is not None:
                state = loaded
                self._resident[build_id] = state
        return state

    def _mutate(self, build_id: str, fn: Callable[[BuildState], None]) -> Optional[BuildState]:
        with self._lock:
            state = self._lookup(build_id)
            if state is None:
                return None
            fn(state)
            state.updated_at = utcnow()
            self._save_snapshot(state)
            return state.model_copy(deep=True)

    # Public API

    def create(self, build_id: str, prompt: str, mode: PlanMode | str = PlanMode.AUTO) -> BuildState:
        if not is_valid_build_id(build_id):
            raise ValueError(f"Invalid build id: {build_id!r}")
        state = BuildState(
            id=build_id,
            prompt=prompt,
            mode_requested=PlanMode(mode),
            out_dir=str(self._project_dir(build_id)),
        )
        with self._lock:
            self._resident[build_id] = state
            self._save_snapshot(state)
        log.info("Build created", extra={"build_id": build_id, "stage": "-"})
        return state.model_copy(deep=True)

    def get(self, build_id: str) -> Optional[BuildState]:
        with self._lock:
            state = self._lookup(build_id)
            return state.model_copy(deep=True) if state is not None else None

    def set_stage_status(
        self,
        build_id: str,
        stage: BuildStage | str,
        status: StageStatus | str,
        output: Optional[Dict[str, Any]] = None,
    ) -> Optional[BuildState]:
        def apply(state: BuildState) -> None:
            record = state.stage(stage)
            record.status = StageStatus(status)
            if output is not None:
                record.output = output

        return self._mutate(build_id, apply)

    def append_log(self, build_id: str, stage: BuildStage | str, line: str) -> Optional[BuildState]:
        def apply(state: BuildState) -> None:
            record = state.stage(stage)
            record.log.append(line)
            if len(record.log) > MAX_LOG_ENTRIES:
                del record.log[: len(record.log) - MAX_LOG_ENTRIES]

        return self._mutate(build_id, apply)

    def reset(self, build_id: str) -> Optional[BuildState]:
        """Put a build back to running with every stage idle and empty logs."""
        def apply(state: BuildState) -> None:
            state.status = BuildStatus.RUNNING
            state.error = None
            state.stages = initial_stages()

        return self._mutate(build_id, apply)

    def mark_done(self, build_id: str) -> Optional[BuildState]:
        def apply(state: BuildState) -> None:
            state.status = BuildStatus.DONE
            state.error = None

        return self._mutate(build_id, apply)

    def mark_failed(self, build_id: str, message: str) -> Optional[BuildState]:
        def apply(state: BuildState) -> None:
            state.status = BuildStatus.FAILED
            state.error = message

        return self._mutate(build_id, apply)

    def out_dir(self, build_id: str) -> Optional[Path]:
        if self.get(build_id) is None:
            return None
        return self._project_dir(build_id)

    def list_output_files(self, build_id: str) -> List[str]:
        out = self.out_dir(build_id)
        if out is None or not out.is_dir():
            return []
        return sorted(p.relative_to(out).as_posix() for p in out.rglob("*") if p.is_file())


class FileBuildStore(BuildStore):
    """Snapshots at <root>/<id>/status.json, output under <root>/<id>/project/."""

    shared_snapshots = True

    def _status_path(self, build_id: str) -> Path:
        return self.build_dir(build_id) / STATUS_FILE

    def _save_snapshot(self, state: BuildState) -> None:
        path = self._status_path(state.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(f"{STATUS_FILE}.{os.getpid()}.{threading.get_ident()}.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(state.model_dump_json(indent=2))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)

    def _load_snapshot(self, build_id: str) -> Optional[BuildState]:
        path = self._status_path(build_id)
        if not path.is_file():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return BuildState.model_validate(json.load(f))


class InMemoryBuildStore(BuildStore):
    """Snapshots kept as JSON strings in a dict. Output still goes under root.

    evict() drops the resident records, so the next read reloads from the
    snapshots the same way a restarted process would.
    """

    def __init__(self, root: Path | str):
        super().__init__(root)
        self.snapshots: Dict[str, str] = {}

    def _save_snapshot(self, state: BuildState) -> None:
        self.snapshots[state.id] = state.model_dump_json()

    def _load_snapshot(self, build_id: str) -> Optional[BuildState]:
        raw = self.snapshots.get(build_id)
        return BuildState.model_validate_json(raw) if raw is not None else None

    def evict(self, build_id: Optional[str] = None) -> None:
        with self._lock:
            if build_id is None:
                self._resident.clear()
            else:
                self._resident.pop(build_id, None)
