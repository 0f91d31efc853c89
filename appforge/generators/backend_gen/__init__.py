"""FastAPI + SQLite backend generator."""
from appforge.generators.backend_gen.generator import generate_backend

__all__ = ["generate_backend"]
