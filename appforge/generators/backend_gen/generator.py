"""Orchestrator for backend code generation."""
from typing import List

from appforge.generators.backend_gen.render import (
    render_api_health,
    render_core_config,
    render_db,
    render_dockerfile,
    render_env_example,
    render_main_py,
    render_package_init,
    render_plan_py,
    render_readme,
    render_repo,
    render_requirements_txt,
    render_validation,
)
from appforge.generators.backend_gen.render_entity import (
    render_entity_model,
    render_entity_router,
)
from appforge.generators.types import GeneratedFile
from appforge.planner.schema import Plan

BACKEND_DIR = "backend"


def generate_backend(plan: Plan) -> List[GeneratedFile]:
    """
    Render the backend group for a plan.

    Args:
        plan: Normalized plan

    Returns:
        List of GeneratedFile objects with paths under backend/
    """
    files = [
        GeneratedFile(path="app/__init__.py", content=render_package_init(f"{plan.app_name} backend")),
        GeneratedFile(path="app/core/__init__.py", content=render_package_init("Core package")),
        GeneratedFile(path="app/core/config.py", content=render_core_config(plan)),
        GeneratedFile(path="app/db.py", content=render_db()),
        GeneratedFile(path="app/validation.py", content=render_validation()),
        GeneratedFile(path="app/repo.py", content=render_repo()),
        GeneratedFile(path="app/plan.py", content=render_plan_py(plan)),
        GeneratedFile(path="app/api/__init__.py", content=render_package_init("API routes package")),
        GeneratedFile(path="app/api/health.py", content=render_api_health()),
        GeneratedFile(path="app/api/entities/__init__.py", content=render_package_init("Entity routers package")),
        GeneratedFile(path="app/models/__init__.py", content=render_package_init("Models package")),
    ]

    entity_routers = []
    for entity in plan.entities:
        files.append(GeneratedFile(path=f"app/models/{entity.name}.py", content=render_entity_model(entity)))
        files.append(GeneratedFile(path=f"app/api/entities/{entity.name}.py", content=render_entity_router(entity)))
        entity_routers.append({"entity_name": entity.name, "title": entity.title})

    files += [
        GeneratedFile(path="app/main.py", content=render_main_py(entity_routers)),
        GeneratedFile(path="requirements.txt", content=render_requirements_txt()),
        GeneratedFile(path=".env.example", content=render_env_example()),
        GeneratedFile(path="Dockerfile", content=render_dockerfile()),
        GeneratedFile(path="README.md", content=render_readme(plan)),
    ]

    return [GeneratedFile(path=f"{BACKEND_DIR}/{f.path}", content=f.content) for f in files]
