"""Static templates for the Next.js frontend (Jinja2-free)."""
from appforge.generators.backend_gen.render import BACKEND_PORT, FRONTEND_PORT
from appforge.generators.utils import app_slug, to_json
from appforge.planner.schema import Plan


def render_package_json(plan: Plan) -> str:
    return to_json({
        "name": f"{app_slug(plan.app_name)}-frontend",
        "private": True,
        "scripts": {
            "dev": f"next dev -p {FRONTEND_PORT}",
            "build": "next build",
            "start": f"next start -p {FRONTEND_PORT}",
        },
        "dependencies": {
            "next": "^15.5.12",
            "react": "^18.3.1",
            "react-dom": "^18.3.1",
        },
        "devDependencies": {
            "@types/node": "^20.14.10",
            "@types/react": "^18.3.3",
            "typescript": "^5.5.3",
        },
    })


def render_tsconfig() -> str:
    return to_json({
        "compilerOptions": {
            "target": "ES2020",
            "lib": ["dom", "dom.iterable", "esnext"],
            "allowJs": True,
            "skipLibCheck": True,
            "strict": False,
            "noEmit": True,
            "esModuleInterop": True,
            "module": "esnext",
            "moduleResolution": "bundler",
            "resolveJsonModule": True,
            "isolatedModules": True,
            "jsx": "preserve",
            "incremental": True,
            "plugins": [{"name": "next"}],
        },
        "include": ["next-env.d.ts", "**/*.ts", "**/*.tsx"],
        "exclude": ["node_modules"],
    })


def render_next_config() -> str:
    return """/** @type {import('next').NextConfig} */
const nextConfig = {
  outputFileTracingRoot: process.cwd(),
};

module.exports = nextConfig;
"""


def render_env_example() -> str:
    return f"NEXT_PUBLIC_BACKEND_URL=http://localhost:{BACKEND_PORT}\n"


def render_globals_css() -> str:
    """Generate app/globals.css content."""
    return """:root {
  --bg: #0b1220;
  --panel: rgba(255,255,255,.06);
  --panel2: rgba(255,255,255,.08);
  --text: rgba(255,255,255,.92);
  --muted: rgba(255,255,255,.65);
  --border: rgba(255,255,255,.10);
  --accent: #7c3aed;
}

* { box-sizing: border-box; }
html, body { height: 100%; }
body {
  margin: 0;
  background: var(--bg);
  color: var(--text);
  font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial;
}

a { color: inherit; text-decoration: none; }
button, input, select, textarea { font: inherit; color: inherit; }

.container { max-width: 1100px; margin: 0 auto; padding: 24px; }
.nav { display: flex; justify-content: space-between; align-items: center; padding: 16px 0; }
.brand { display: flex; gap: 10px; align-items: center; font-weight: 900; }

.grid { display: grid; gap: 16px; grid-template-columns: 240px 1fr; }
.cards { display: grid; gap: 12px; grid-template-columns: repeat(auto-fit, minmax(240px, 1fr)); }
.panel { background: var(--panel); border: 1px solid var(--border); border-radius: 18px; overflow: hidden; }
.panelHeader { padding: 12px 14px; border-bottom: 1px solid var(--border); font-weight: 800; color: var(--muted); }
.panelBody { padding: 14px; }

.sidebar a { display: block; padding: 10px 12px; border-radius: 12px; color: var(--muted); }
.sidebar a:hover { background: var(--panel2); }
.sidebar a.active { background: rgba(124,58,237,.18); color: var(--text); }

.card { background: var(--panel); border: 1px solid var(--border); border-radius: 18px; padding: 14px; }
.error { border-color: rgba(239,68,68,.5); margin-bottom: 12px; }

.table { width: 100%; border-collapse: collapse; }
.table th, .table td { padding: 10px 8px; border-bottom: 1px solid var(--border); text-align: left; }
.table th { color: var(--muted); font-weight: 800; font-size: 12px; text-transform: uppercase; }

.rowActions { display: flex; gap: 8px; justify-content: flex-end; }
.btn { padding: 8px 10px; border-radius: 12px; background: var(--panel); border: 1px solid var(--border); cursor: pointer; }
.btn:hover { background: rgba(255,255,255,.10); }
.btnPrimary { background: rgba(124,58,237,.25); border-color: rgba(124,58,237,.45); }

.formGrid { display: grid; gap: 12px; grid-template-columns: 1fr 1fr; }
.field { display: flex; flex-direction: column; gap: 6px; }
.field.wide { grid-column: 1 / -1; }
.label { font-size: 12px; color: var(--muted); font-weight: 800; }
.input, .select, .textarea {
  padding: 10px 12px;
  border-radius: 12px;
  border: 1px solid var(--border);
  background: rgba(0,0,0,.20);
  outline: none;
}
.textarea { min-height: 90px; resize: vertical; }
.toggle { display: flex; gap: 10px; align-items: center; }
.small { font-size: 12px; color: var(--muted); }
.overlay { position: fixed; inset: 0; background: rgba(0,0,0,.5); display: grid; place-items: center; padding: 14px; }

@media (max-width: 900px) {
  .grid { grid-template-columns: 1fr; }
  .formGrid { grid-template-columns: 1fr; }
}
"""


def render_layout(plan: Plan) -> str:
    """Generate app/layout.tsx content."""
    return f"""import "./globals.css";

export const metadata = {{
  title: {to_json(plan.app_name).strip()},
  description: {to_json(plan.description).strip()},
}};

export default function RootLayout({{ children }}: {{ children: React.ReactNode }}) {{
  return (
    <html lang="en">
      <body>{{children}}</body>
    </html>
  );
}}
"""


def render_lib_api() -> str:
    """Generate lib/api.ts: thin fetch client for the generated backend."""
    return f"""const BACKEND = process.env.NEXT_PUBLIC_BACKEND_URL || "http://localhost:{BACKEND_PORT}";

async function request(path: string, init?: RequestInit) {{
  const r = await fetch(`${{BACKEND}}${{path}}`, {{ cache: "no-store", ...init }});
  const body = await r.json().catch(() => null);
  if (!r.ok) {{
    const details = body?.details?.map((d) => d.message).join("; ");
    throw new Error(details || body?.detail || body?.error || `Request failed (${{r.status}})`);
  }}
  return body;
}}

export function getSpec() {{
  return request("/api/spec");
}}

export function list(entity: string, {{ limit = 50, offset = 0, orderBy = "id", orderDir = "desc" }} = {{}}) {{
  const qs = new URLSearchParams({{ limit: String(limit), offset: String(offset), orderBy, orderDir }});
  return request(`/api/${{entity}}?${{qs}}`);
}}

export function getOne(entity: string, id: number) {{
  return request(`/api/${{entity}}/${{id}}`);
}}

export function createOne(entity: string, data: Record<string, unknown>) {{
  return request(`/api/${{entity}}`, {{
    method: "POST",
    headers: {{ "Content-Type": "application/json" }},
    body: JSON.stringify(data),
  }});
}}

export function updateOne(entity: string, id: number, data: Record<string, unknown>) {{
  return request(`/api/${{entity}}/${{id}}`, {{
    method: "PUT",
    headers: {{ "Content-Type": "application/json" }},
    body: JSON.stringify(data),
  }});
}}

export function deleteOne(entity: string, id: number) {{
  return request(`/api/${{entity}}/${{id}}`, {{ method: "DELETE" }});
}}
"""


def render_field_input() -> str:
    """Generate components/FieldInput.tsx: one widget per field, chosen by `field.widget`."""
    return """"use client";

export default function FieldInput({ field, value, onChange }) {
  switch (field.widget) {
    case "toggle":
      return (
        <label className="toggle">
          <input type="checkbox" checked={!!value} onChange={(e) => onChange(e.target.checked)} />
          <span className="small">{value ? "Yes" : "No"}</span>
        </label>
      );
    case "select":
      return (
        <select className="select" value={value ?? ""} onChange={(e) => onChange(e.target.value)}>
          <option value="">Select...</option>
          {(field.enumValues || []).map((v) => (
            <option key={v} value={v}>{v}</option>
          ))}
        </select>
      );
    case "textarea":
      return <textarea className="textarea" value={value ?? ""} onChange={(e) => onChange(e.target.value)} />;
    case "date":
      return (
        <input
          className="input"
          type="date"
          value={value ? String(value).slice(0, 10) : ""}
          onChange={(e) => onChange(e.target.value)}
        />
      );
    case "number":
      return <input className="input" type="number" value={value ?? ""} onChange={(e) => onChange(e.target.value)} />;
    default:
      return <input className="input" type="text" value={value ?? ""} onChange={(e) => onChange(e.target.value)} />;
  }
}
"""


def render_entity_manager() -> str:
    """Generate components/EntityManager.tsx: list, create, edit and delete for any entity config."""
    return """"use client";

import { useEffect, useState } from "react";
import FieldInput from "./FieldInput";
import { createOne, deleteOne, list, updateOne } from "../lib/api";
import { ENTITIES } from "../lib/entities";

function display(field, value) {
  if (value === null || value === undefined) return "";
  if (field.widget === "toggle") return value ? "true" : "false";
  if (field.widget === "date") return String(value).slice(0, 10);
  return String(value);
}

export default function EntityManager({ config }) {
  const [items, setItems] = useState([]);
  const [total, setTotal] = useState(0);
  const [err, setErr] = useState("");
  const [open, setOpen] = useState(false);
  const [editingId, setEditingId] = useState(null);
  const [form, setForm] = useState({});

  async function refresh() {
    setErr("");
    try {
      const res = await list(config.name, { limit: 100, offset: 0 });
      setItems(res.items || []);
      setTotal(res.total || 0);
    } catch (e) {
      setErr(String(e?.message || e));
    }
  }

  useEffect(() => {
    refresh();
  }, [config.name]);

  function openNew() {
    setEditingId(null);
    setForm({});
    setOpen(true);
  }

  function openEdit(row) {
    const next = {};
    config.fields.forEach((f) => {
      next[f.name] = row[f.name];
    });
    setEditingId(row.id);
    setForm(next);
    setOpen(true);
  }

  async function save() {
    setErr("");
    try {
      if (editingId == null) {
        await createOne(config.name, form);
      } else {
        await updateOne(config.name, editingId, form);
      }
      setOpen(false);
      await refresh();
    } catch (e) {
      setErr(String(e?.message || e));
    }
  }

  async function remove(id) {
    if (!confirm("Delete this record?")) return;
    setErr("");
    try {
      await deleteOne(config.name, id);
      await refresh();
    } catch (e) {
      setErr(String(e?.message || e));
    }
  }

  return (
    <div className="container">
      <div className="nav">
        <div className="brand">{config.title}</div>
        <div className="rowActions">
          <a className="btn" href="/">Dashboard</a>
          <button className="btn btnPrimary" onClick={openNew}>New</button>
        </div>
      </div>

      {err ? <div className="card error">{err}</div> : null}

      <div className="grid">
        <div className="panel">
          <div className="panelHeader">Entities</div>
          <div className="panelBody sidebar">
            {ENTITIES.map((e) => (
              <a key={e.name} className={e.name === config.name ? "active" : ""} href={`/${e.name}`}>
                {e.title}
              </a>
            ))}
          </div>
        </div>

        <div className="panel">
          <div className="panelHeader">Records ({total})</div>
          <div className="panelBody" style={{ overflowX: "auto" }}>
            <table className="table">
              <thead>
                <tr>
                  <th>ID</th>
                  {config.fields.map((f) => (
                    <th key={f.name}>{f.label}</th>
                  ))}
                  <th />
                </tr>
              </thead>
              <tbody>
                {items.map((row) => (
                  <tr key={row.id}>
                    <td>{row.id}</td>
                    {config.fields.map((f) => (
                      <td key={f.name}>{display(f, row[f.name])}</td>
                    ))}
                    <td>
                      <div className="rowActions">
                        <button className="btn" onClick={() => openEdit(row)}>Edit</button>
                        <button className="btn" onClick={() => remove(row.id)}>Delete</button>
                      </div>
                    </td>
                  </tr>
                ))}
                {items.length === 0 ? (
                  <tr>
                    <td colSpan={config.fields.length + 2} className="small">
                      No records yet. Click <strong>New</strong> to create one.
                    </td>
                  </tr>
                ) : null}
              </tbody>
            </table>
          </div>
        </div>
      </div>

      {open ? (
        <div className="overlay" onClick={() => setOpen(false)}>
          <div className="panel" style={{ width: "min(820px, 100%)" }} onClick={(e) => e.stopPropagation()}>
            <div className="panelHeader">
              {editingId == null ? "Create" : "Edit"} {config.title}
            </div>
            <div className="panelBody">
              <div className="formGrid">
                {config.fields.map((f) => (
                  <div className={f.widget === "textarea" ? "field wide" : "field"} key={f.name}>
                    <div className="label">
                      {f.label}
                      {f.required ? " *" : ""}
                    </div>
                    <FieldInput
                      field={f}
                      value={form[f.name]}
                      onChange={(v) => setForm((prev) => ({ ...prev, [f.name]: v }))}
                    />
                  </div>
                ))}
              </div>
              <div className="rowActions" style={{ marginTop: 14 }}>
                <button className="btn" onClick={() => setOpen(false)}>Cancel</button>
                <button className="btn btnPrimary" onClick={save}>Save</button>
              </div>
            </div>
          </div>
        </div>
      ) : null}
    </div>
  );
}
"""


def render_readme(plan: Plan) -> str:
    """Generate frontend/README.md content."""
    return f"""# {plan.app_name} frontend

Generated Next.js app.

```bash
npm install
npm run dev
```

Open http://localhost:{FRONTEND_PORT}. The backend URL is read from
`NEXT_PUBLIC_BACKEND_URL` (default http://localhost:{BACKEND_PORT}).
"""
