"""Root/meta files (README, spec, OpenAPI contract, manifest)."""
from appforge.generators.project_gen.generator import generate_project

__all__ = ["generate_project"]
