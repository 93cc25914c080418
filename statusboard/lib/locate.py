"""
Status file discovery.

Checks a fixed, ordered list of conventional locations under the workspace.
"""

from pathlib import Path
from typing import Iterable, Optional

from statusboard.lib.constants import CANDIDATE_PATHS


def candidate_paths(workspace_root: Path, extra: Iterable[str] = ()) -> list[Path]:
    """All candidate locations in priority order, existing or not."""
    root = Path(workspace_root)
    candidates = [root.joinpath(*parts) for parts in CANDIDATE_PATHS]
    for rel in extra:
        path = root / rel
        if path not in candidates:
            candidates.append(path)
    return candidates


def find_all_status_files(workspace_root: Path, extra: Iterable[str] = ()) -> list[Path]:
    """Every existing candidate, in priority order."""
    return [p for p in candidate_paths(workspace_root, extra) if p.is_file()]


def find_status_file(workspace_root: Path, extra: Iterable[str] = ()) -> Optional[Path]:
    """First existing candidate, or None."""
    for candidate in candidate_paths(workspace_root, extra):
        if candidate.is_file():
            return candidate
    return None
