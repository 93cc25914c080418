"""
Configuration loaders for statusboard.

Per-workspace settings live in .statusboard/config.yaml. If the file is
missing or unreadable, defaults are used.

Example config.yaml:

    debounce_ms: 300
    replace_retry_ms: 100
    error_retry_ms: 1000
    extra_candidates:
      - planning/bmm-workflow-status.yaml

The selected status file is remembered in .statusboard/selected_file.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from statusboard.lib.constants import (
    DEBOUNCE_SECONDS,
    ERROR_RESUBSCRIBE_SECONDS,
    REPLACE_RESUBSCRIBE_SECONDS,
    STATE_DIR_NAME,
)

logger = logging.getLogger(__name__)


@dataclass
class WatchConfig:
    """Tool configuration from .statusboard/config.yaml"""
    debounce: float = DEBOUNCE_SECONDS
    replace_retry: float = REPLACE_RESUBSCRIBE_SECONDS
    error_retry: float = ERROR_RESUBSCRIBE_SECONDS
    extra_candidates: list[str] = field(default_factory=list)


# yaml key -> (WatchConfig attribute, default seconds)
_DELAY_KEYS = {
    "debounce_ms": ("debounce", DEBOUNCE_SECONDS),
    "replace_retry_ms": ("replace_retry", REPLACE_RESUBSCRIBE_SECONDS),
    "error_retry_ms": ("error_retry", ERROR_RESUBSCRIBE_SECONDS),
}


def get_state_dir(workspace_root: Path) -> Path:
    return Path(workspace_root) / STATE_DIR_NAME


def _parse_delay(key: str, value, default: float) -> float:
    try:
        ms = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {key} '{value}', using {int(default * 1000)}")
        return default
    if ms < 0:
        logger.warning(f"Negative {key} '{value}', using {int(default * 1000)}")
        return default
    return ms / 1000.0


def load_config(workspace_root: Optional[Path]) -> WatchConfig:
    """Load config.yaml and return WatchConfig.

    If workspace_root is None or the file doesn't exist, returns defaults.
    """
    if workspace_root is None:
        return WatchConfig()

    config_path = get_state_dir(workspace_root) / "config.yaml"
    if not config_path.exists():
        return WatchConfig()

    try:
        data = yaml.safe_load(config_path.read_text())
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return WatchConfig()

    if not isinstance(data, dict):
        if data is not None:
            logger.warning(f"Ignoring {config_path}: expected a mapping")
        return WatchConfig()

    config = WatchConfig()
    for key, (attr, default) in _DELAY_KEYS.items():
        if key in data:
            setattr(config, attr, _parse_delay(key, data[key], default))

    extra = data.get("extra_candidates") or []
    if isinstance(extra, list):
        config.extra_candidates = [str(p) for p in extra if p]
    else:
        logger.warning(f"Ignoring extra_candidates in {config_path}: expected a list")

    return config


def get_selected_file(workspace_root: Path) -> Optional[Path]:
    """Get the remembered status file, or None if not set.

    Auto-clears the selection if the file no longer exists.
    """
    selection_file = get_state_dir(workspace_root) / "selected_file"
    if selection_file.exists():
        selected = selection_file.read_text().strip()
        if selected:
            path = Path(selected)
            if not path.is_absolute():
                path = Path(workspace_root) / path
            if path.is_file():
                return path
            # Stale selection - clean it up
            logger.info(f"Clearing stale selection {selected}")
            selection_file.unlink()
    return None


def set_selected_file(workspace_root: Path, status_file: Path) -> None:
    """Remember the selected status file."""
    state_dir = get_state_dir(workspace_root)
    state_dir.mkdir(parents=True, exist_ok=True)
    (state_dir / "selected_file").write_text(str(status_file) + "\n")


def clear_selected_file(workspace_root: Path) -> None:
    selection_file = get_state_dir(workspace_root) / "selected_file"
    if selection_file.exists():
        selection_file.unlink()
