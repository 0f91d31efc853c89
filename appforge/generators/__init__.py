"""Deterministic code generation: Plan in, GeneratedFile list out."""
from typing import Dict, List

from appforge.generators.backend_gen import generate_backend
from appforge.generators.frontend_gen import generate_frontend
from appforge.generators.project_gen import generate_project
from appforge.generators.types import GeneratedFile
from appforge.planner.schema import Plan

GROUPS = ("backend", "frontend", "project")


def render_group(plan: Plan, group: str) -> List[GeneratedFile]:
    """Render one file group. Paths are relative to the project root."""
    if group == "backend":
        return generate_backend(plan)
    if group == "frontend":
        return generate_frontend(plan)
    if group == "project":
        return generate_project(plan, generate_backend(plan) + generate_frontend(plan))
    raise ValueError(f"Unknown group: {group}")


def render_project(plan: Plan) -> Dict[str, str]:
    """All groups, in write order, as {path: content}."""
    files: Dict[str, str] = {}
    for group in GROUPS:
        for f in render_group(plan, group):
            files[f.path] = f.content
    return files


__all__ = ["GROUPS", "GeneratedFile", "render_group", "render_project"]
