"""File writer for generated projects."""
import os
from pathlib import Path
from typing import Iterable, List
from appforge.generators.types import GeneratedFile


def write_files(files: Iterable[GeneratedFile], out_dir: Path) -> List[str]:
    """
    Write generated files to the output directory.

    Each file is flushed and fsynced before the call returns, so callers can
    report the group as complete once this returns.

    Args:
        files: GeneratedFile objects to write
        out_dir: Base output directory path

    Returns:
        Relative paths written, in order
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for file in files:
        file_path = out_dir / file.path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(file.content)
            f.flush()
            os.fsync(f.fileno())
        written.append(file.path)
    return written
