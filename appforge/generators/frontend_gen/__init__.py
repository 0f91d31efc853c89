"""Next.js frontend generator."""
from appforge.generators.frontend_gen.generator import generate_frontend
from appforge.generators.frontend_gen.render_entity import FIELD_WIDGETS

__all__ = ["FIELD_WIDGETS", "generate_frontend"]
