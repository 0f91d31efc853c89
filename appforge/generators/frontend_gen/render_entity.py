"""Plan-driven frontend files: entity configs, per-entity pages and the dashboard."""
import json
from typing import Any, Dict, List

from appforge.generators.utils import to_json, to_label, to_pascal_case
from appforge.planner.schema import EntitySpec, FieldSpec, Plan

# Presentation is decided by field type alone
FIELD_WIDGETS = {
    "boolean": "toggle",
    "enum": "select",
    "date": "date",
    "number": "number",
    "text": "textarea",
    "string": "text",
}


def field_config(field: FieldSpec) -> Dict[str, Any]:
    config = {
        "name": field.name,
        "label": to_label(field.name),
        "type": field.type,
        "widget": FIELD_WIDGETS[field.type],
        "required": field.required,
    }
    if field.enum_values:
        config["enumValues"] = list(field.enum_values)
    return config


def entity_config(entity: EntitySpec) -> Dict[str, Any]:
    return {
        "name": entity.name,
        "title": entity.title,
        "fields": [field_config(f) for f in entity.fields],
    }


def _ts_literal(obj: Any) -> str:
    # JSON is a valid TS expression; keep it stable for byte-identical output
    return json.dumps(obj, indent=2)


def render_entities_ts(plan: Plan) -> str:
    """Generate lib/entities.ts: navigation entries for every entity, in plan order."""
    entries: List[Dict[str, str]] = [{"name": e.name, "title": e.title} for e in plan.entities]
    return f"export const ENTITIES = {_ts_literal(entries)};\n"


def render_entity_page(entity: EntitySpec) -> str:
    """Generate app/<entity>/page.tsx. The page only embeds its config."""
    component = f"{to_pascal_case(entity.name)}Page"
    return "\n".join([
        '"use client";',
        "",
        'import EntityManager from "../../components/EntityManager";',
        "",
        f"const CONFIG = {_ts_literal(entity_config(entity))};",
        "",
        f"export default function {component}() {{",
        "  return <EntityManager config={CONFIG} />;",
        "}",
        "",
    ])


def render_dashboard(plan: Plan) -> str:
    """Generate app/page.tsx: a card per entity."""
    cards = []
    for entity in plan.entities:
        summary = f"Manage {entity.title.lower()} ({len(entity.fields)} fields)"
        cards += [
            f'        <a className="card" href="/{entity.name}">',
            f"          <div style={{{{ fontWeight: 900 }}}}>{{{_ts_literal(entity.title)}}}</div>",
            f'          <div className="small">{{{_ts_literal(summary)}}}</div>',
            "        </a>",
        ]

    lines = [
        f"const APP_NAME = {to_json(plan.app_name).strip()};",
        f"const DESCRIPTION = {to_json(plan.description).strip()};",
        "",
        "export default function Home() {",
        "  return (",
        '    <div className="container">',
        '      <div className="nav">',
        '        <div className="brand">{APP_NAME}</div>',
        "      </div>",
        '      <p className="small">{DESCRIPTION}</p>',
        '      <div className="cards">',
        *cards,
        "      </div>",
        "    </div>",
        "  );",
        "}",
        "",
    ]
    return "\n".join(lines)
