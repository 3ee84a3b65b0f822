from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

DEFAULT_IGNORES = frozenset(
    {
        ".git",
        ".venv",
        "venv",
        "__pycache__",
        "node_modules",
        "dist",
        "build",
        ".mypy_cache",
        ".ruff_cache",
        ".pytest_cache",
        ".tox",
        ".eggs",
    }
)


def should_ignore_dir(name: str, exclude: Iterable[str] = ()) -> bool:
    return name in DEFAULT_IGNORES or name in exclude or name.endswith(".egg-info")


def scan_python_files(
    root: Path,
    max_files: int | None = None,
    exclude: Iterable[str] = (),
) -> list[str]:
    """
    Return absolute paths (as strings) of .py files under root, in a
    deterministic walk order. A single .py file is returned as-is.
    """
    root = root.resolve()
    if root.is_file():
        return [str(root)] if root.suffix == ".py" else []

    exclude = frozenset(exclude)
    out: list[str] = []
    for dirpath, dirs, files in os.walk(root):
        root_p = Path(dirpath)

        # prune in place so os.walk doesn't descend; sorted for stable order
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(d, exclude))

        for f in sorted(files):
            if f.endswith(".py"):
                out.append(str((root_p / f).resolve()))
                if max_files is not None and len(out) >= max_files:
                    return out
    return out
