"""Root/meta files for a generated project."""
import hashlib
from typing import Iterable, List

from appforge.generators.backend_gen.render import BACKEND_PORT, FRONTEND_PORT
from appforge.generators.project_gen.openapi import render_openapi_yaml
from appforge.generators.types import GeneratedFile
from appforge.generators.utils import to_json
from appforge.planner.schema import Plan

GITIGNORE = """node_modules/
.next/
__pycache__/
*.pyc
.venv/
.env
backend/data/
"""


def render_readme(plan: Plan) -> str:
    entities = "\n".join(f"- **{e.title}** `/api/{e.name}`" for e in plan.entities)
    provider = f" ({plan.ai_provider})" if plan.ai_provider else ""
    return f"""# {plan.app_name}

{plan.description}

Planned with generationMode `{plan.generation_mode}`{provider}.

## What's included
- **Backend**: FastAPI + SQLite (port **{BACKEND_PORT}**), in `backend/`
- **Frontend**: Next.js (port **{FRONTEND_PORT}**), in `frontend/`
- **Spec**: `spec.json`, `openapi.yaml` and `GET /api/spec`

## Run locally
```bash
cd backend && pip install -r requirements.txt && uvicorn app.main:app --port {BACKEND_PORT}
cd frontend && npm install && npm run dev
```

## Entities
{entities}
"""


def render_manifest(plan: Plan, files: Iterable[GeneratedFile]) -> str:
    """Path, size and sha256 of every listed file, plus plan provenance."""
    entries = []
    for f in files:
        data = f.content.encode("utf-8")
        entries.append({"path": f.path, "bytes": len(data), "sha256": hashlib.sha256(data).hexdigest()})
    manifest = {
        "appName": plan.app_name,
        "generationMode": plan.generation_mode,
        "files": entries,
    }
    if plan.ai_provider:
        manifest["aiProvider"] = plan.ai_provider
    return to_json(manifest)


def generate_project(plan: Plan, generated: Iterable[GeneratedFile]) -> List[GeneratedFile]:
    """
    Render the root group.

    Args:
        plan: Normalized plan
        generated: Backend and frontend files already rendered for this plan;
            they are listed in manifest.json together with the root files
    """
    files = [
        GeneratedFile(path="README.md", content=render_readme(plan)),
        GeneratedFile(path="spec.json", content=to_json(plan.to_dict())),
        GeneratedFile(path="openapi.yaml", content=render_openapi_yaml(plan)),
        GeneratedFile(path=".gitignore", content=GITIGNORE),
    ]
    files.append(GeneratedFile(path="manifest.json", content=render_manifest(plan, list(generated) + files)))
    return files
