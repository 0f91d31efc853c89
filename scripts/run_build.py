#!/usr/bin/env python3
"""
Run one build synchronously and print what it produced.
Usage: python scripts/run_build.py "Build a habit tracker for habits. Fields: habitName, done (bool)" --mode local
"""
import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from appforge.core.config import settings
from appforge.core.dispatch import InlineDispatcher
from appforge.core.engine import WorkflowEngine
from appforge.core.errors import InvalidBuildRequest
from appforge.core.logging import configure_logging
from appforge.core.service import BuildService
from appforge.core.workflow import STAGE_ORDER, PlanMode
from appforge.store.builds import FileBuildStore


def main():
    parser = argparse.ArgumentParser(description="Plan and generate a CRUD app from a prompt")
    parser.add_argument("prompt", help="Natural-language description of the app")
    parser.add_argument(
        "--mode",
        default=PlanMode.AUTO.value,
        choices=[m.value for m in PlanMode],
        help="Planning strategy (default: auto)",
    )
    parser.add_argument(
        "--out",
        default=settings.generated_root,
        help="Root directory for build output (default: GENERATED_ROOT)",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print the summary")
    args = parser.parse_args()

    if not args.quiet:
        configure_logging()

    store = FileBuildStore(args.out)
    service = BuildService(store, InlineDispatcher(WorkflowEngine(store=store)))

    try:
        build_id = service.submit_build(args.prompt, args.mode)
    except InvalidBuildRequest as e:
        print(f"❌ {e}")
        sys.exit(2)

    state = service.get_build_state(build_id)
    print()
    print("=" * 80)
    print(f"Build {build_id}: {state.status.value}")
    print("=" * 80)
    for stage in STAGE_ORDER:
        record = state.stage(stage)
        print(f"  {stage.value:<10} {record.status.value}")
    if state.error:
        print(f"\nError: {state.error}")

    plan_output = state.stage("plan").output or {}
    if plan_output:
        print(f"\ngenerationMode={plan_output.get('generationMode')} provider={plan_output.get('aiProvider') or 'n/a'}")

    files = service.list_output_files(build_id)
    print(f"\nOutput: {service.output_dir(build_id)} ({len(files)} files)")
    for path in files:
        print(f"  {path}")

    if state.status.value != "done":
        sys.exit(1)


if __name__ == "__main__":
    main()
