"""Shared constants for statusboard."""

STATUS_FILE_NAME = "bmm-workflow-status.yaml"

# Locations checked relative to the workspace root, in priority order
CANDIDATE_PATHS = (
    ("_bmad-output", "planning-artifacts", STATUS_FILE_NAME),
    ("_bmad-output", STATUS_FILE_NAME),
    ("docs", STATUS_FILE_NAME),
    (STATUS_FILE_NAME,),
)

# Top-level keys for the two schemas
CURRENT_ITEMS_KEY = "workflows"
LEGACY_ITEMS_KEY = "workflow_status"

# Normalized status tokens
STATUS_REQUIRED = "required"
STATUS_BACKLOG = "backlog"
STATUS_READY_FOR_DEV = "ready-for-dev"
STATUS_IN_PROGRESS = "in-progress"
STATUS_REVIEW = "review"
STATUS_DONE = "done"

KNOWN_STATUSES = (
    STATUS_REQUIRED,
    STATUS_BACKLOG,
    STATUS_READY_FOR_DEV,
    STATUS_IN_PROGRESS,
    STATUS_REVIEW,
    STATUS_DONE,
)

# Raw Current-schema status values
RAW_NOT_STARTED = "not_started"
RAW_COMPLETE = "complete"

PREREQUISITE_PHASE = "prerequisite"

# Watcher timing (seconds)
DEBOUNCE_SECONDS = 0.3
REPLACE_RESUBSCRIBE_SECONDS = 0.1
ERROR_RESUBSCRIBE_SECONDS = 1.0

# Per-workspace state directory
STATE_DIR_NAME = ".statusboard"
