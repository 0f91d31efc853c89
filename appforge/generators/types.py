"""Dataclasses for code generation."""
from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratedFile:
    """Represents a generated file."""
    path: str  # Relative path from the build output directory, "/"-separated
    content: str  # File contents
