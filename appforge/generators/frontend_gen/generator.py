"""Orchestrator for frontend code generation."""
from typing import List

from appforge.generators.frontend_gen.render import (
    render_entity_manager,
    render_env_example,
    render_field_input,
    render_globals_css,
    render_layout,
    render_lib_api,
    render_next_config,
    render_package_json,
    render_readme,
    render_tsconfig,
)
from appforge.generators.frontend_gen.render_entity import (
    render_dashboard,
    render_entities_ts,
    render_entity_page,
)
from appforge.generators.types import GeneratedFile
from appforge.planner.schema import Plan

FRONTEND_DIR = "frontend"


def generate_frontend(plan: Plan) -> List[GeneratedFile]:
    """Render the frontend group for a plan. Paths are under frontend/."""
    files = [
        GeneratedFile(path="package.json", content=render_package_json(plan)),
        GeneratedFile(path="tsconfig.json", content=render_tsconfig()),
        GeneratedFile(path="next.config.js", content=render_next_config()),
        GeneratedFile(path=".env.example", content=render_env_example()),
        GeneratedFile(path="README.md", content=render_readme(plan)),
        GeneratedFile(path="app/globals.css", content=render_globals_css()),
        GeneratedFile(path="app/layout.tsx", content=render_layout(plan)),
        GeneratedFile(path="app/page.tsx", content=render_dashboard(plan)),
        GeneratedFile(path="lib/api.ts", content=render_lib_api()),
        GeneratedFile(path="lib/entities.ts", content=render_entities_ts(plan)),
        GeneratedFile(path="components/FieldInput.tsx", content=render_field_input()),
        GeneratedFile(path="components/EntityManager.tsx", content=render_entity_manager()),
    ]
    for entity in plan.entities:
        files.append(GeneratedFile(path=f"app/{entity.name}/page.tsx", content=render_entity_page(entity)))

    return [GeneratedFile(path=f"{FRONTEND_DIR}/{f.path}", content=f.content) for f in files]
