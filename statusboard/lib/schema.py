"""
Schema detection for workflow status documents.

Two layouts exist in the wild:
- Current: `workflows` is a mapping of workflow id -> record
- Legacy: `workflow_status` is a list of records with an `id` field
"""

from enum import Enum

from statusboard.lib.constants import CURRENT_ITEMS_KEY, LEGACY_ITEMS_KEY


class Schema(Enum):
    CURRENT = "current"
    LEGACY = "legacy"


def detect_schema(parsed) -> Schema:
    """Classify a yaml.safe_load() result. Never raises.

    Anything without a `workflows` mapping is Legacy, including empty files
    and non-mapping roots.
    """
    if isinstance(parsed, dict) and isinstance(parsed.get(CURRENT_ITEMS_KEY), dict):
        return Schema.CURRENT
    return Schema.LEGACY


def current_items(parsed) -> dict:
    """Return the Current-schema id -> record mapping."""
    if isinstance(parsed, dict) and isinstance(parsed.get(CURRENT_ITEMS_KEY), dict):
        return parsed[CURRENT_ITEMS_KEY]
    return {}


def legacy_items(parsed) -> list:
    """Return the Legacy-schema record list, or [] for unrecognized shapes."""
    if isinstance(parsed, dict) and isinstance(parsed.get(LEGACY_ITEMS_KEY), list):
        return parsed[LEGACY_ITEMS_KEY]
    return []
