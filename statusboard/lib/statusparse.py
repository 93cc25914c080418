"""
Workflow status file parser.

Reads bmm-workflow-status.yaml in either schema and returns a StatusDocument.
Current-schema items get phase/agent/command from the inference tables;
Legacy items are taken as written.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml

from statusboard.lib.constants import (
    PREREQUISITE_PHASE,
    RAW_COMPLETE,
    RAW_NOT_STARTED,
    STATUS_DONE,
    STATUS_REQUIRED,
)
from statusboard.lib.inference import infer_agent, infer_command, infer_phase
from statusboard.lib.schema import Schema, current_items, detect_schema, legacy_items

logger = logging.getLogger(__name__)

Phase = Union[int, str, None]


class MalformedDocument(Exception):
    """Status file exists but is not valid YAML."""

    def __init__(self, path: Path, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Malformed status file {path}: {message}")


@dataclass(frozen=True)
class Item:
    """One workflow or sprint unit of work."""
    id: str
    phase: Phase                         # int, "prerequisite", or None when absent
    status: str                          # normalized token or output file path
    agent: str
    command: str
    note: Optional[str] = None
    output_file: Optional[str] = None    # Current schema only


@dataclass(frozen=True)
class StatusDocument:
    """Parsed status file. Rebuilt on every load."""
    last_updated: str
    status: str
    status_note: Optional[str]
    project: str
    project_type: str
    selected_track: str
    field_type: str
    workflow_path: str
    schema: Schema
    items: tuple[Item, ...] = ()


def _text(value) -> str:
    """Scalar to str, with None/empty as ""."""
    if value is None or value == "":
        return ""
    return str(value)


def _optional_text(value) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _sort_key(item: Item) -> tuple:
    # Non-numeric phases (prerequisite, missing) come before numbered phases
    phase = item.phase
    if isinstance(phase, int) and not isinstance(phase, bool):
        return (1, phase, item.id)
    return (0, 0, item.id)


def normalize_status(raw_status, output_file: Optional[str]) -> str:
    """Map a Current-schema raw status to its display value.

    not_started (or missing) -> "required"; complete with an output file ->
    the output path; anything else passes through.
    """
    status = _text(raw_status) or RAW_NOT_STARTED
    if status == RAW_COMPLETE and output_file:
        return output_file
    if status == RAW_NOT_STARTED:
        return STATUS_REQUIRED
    return status


def _parse_current(parsed: dict) -> list[Item]:
    items = []
    for raw_id, data in current_items(parsed).items():
        workflow_id = str(raw_id)
        if not isinstance(data, dict):
            data = {}

        output_file = _optional_text(data.get("output_file"))
        items.append(Item(
            id=workflow_id,
            phase=infer_phase(workflow_id),
            status=normalize_status(data.get("status"), output_file),
            agent=infer_agent(workflow_id),
            command=infer_command(workflow_id),
            note=_optional_text(data.get("notes") or data.get("note")),
            output_file=output_file,
        ))
    return items


def _parse_legacy(parsed) -> list[Item]:
    items = []
    for entry in legacy_items(parsed):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping non-mapping workflow_status entry: {entry!r}")
            continue
        items.append(Item(
            id=_text(entry.get("id")),
            phase=entry.get("phase"),
            status=_text(entry.get("status")),
            agent=_text(entry.get("agent")),
            command=_text(entry.get("command")),
            note=_optional_text(entry.get("note")),
        ))
    return items


def read_status_text(path: Path) -> str:
    """Read a status file verbatim, line endings included."""
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise MalformedDocument(path, f"not UTF-8 text ({e})") from e


def parse_yaml_text(content: str, path: Path):
    """yaml.safe_load() wrapper raising MalformedDocument on failure."""
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise MalformedDocument(path, str(e)) from e


def load_yaml(path: Path):
    """Read and yaml-parse a status file."""
    return parse_yaml_text(read_status_text(path), path)


def build_document(parsed) -> StatusDocument:
    """Build a StatusDocument from an already-parsed YAML tree."""
    schema = detect_schema(parsed)
    if schema is Schema.CURRENT:
        items = _parse_current(parsed)
    else:
        items = _parse_legacy(parsed)
    items.sort(key=_sort_key)

    fields = parsed if isinstance(parsed, dict) else {}
    return StatusDocument(
        last_updated=_text(fields.get("last_updated")),
        status=_text(fields.get("status")),
        status_note=_optional_text(fields.get("status_note")),
        project=_text(fields.get("project")) or _text(fields.get("project_name")),
        project_type=_text(fields.get("project_type")),
        selected_track=_text(fields.get("selected_track")),
        field_type=_text(fields.get("field_type")),
        workflow_path=_text(fields.get("workflow_path")),
        schema=schema,
        items=tuple(items),
    )


def parse_status_file(filepath) -> Optional[StatusDocument]:
    """Parse a workflow status file.

    Returns None when there is no regular file at the path.

    Raises:
        MalformedDocument: if the file exists but is not valid YAML
    """
    path = Path(filepath)
    if not path.is_file():
        return None

    return build_document(load_yaml(path))


def items_for_phase(document: StatusDocument, phase: Phase) -> list[Item]:
    """Items whose phase equals `phase` (an int or "prerequisite")."""
    return [item for item in document.items if item.phase == phase]


def parse_phase_arg(value: str) -> Phase:
    """Turn a CLI phase argument into a phase value."""
    if value.strip().lower() == PREREQUISITE_PHASE:
        return PREREQUISITE_PHASE
    return int(value)


def is_item_done(item: Item) -> bool:
    """Done, complete, or complete with its output file shown as the status."""
    if item.status in (STATUS_DONE, RAW_COMPLETE):
        return True
    # A reopened item keeps its output_file line but no longer shows it
    return item.output_file is not None and item.status == item.output_file


def progress(document: StatusDocument) -> tuple[int, int]:
    """Return (done, total) item counts."""
    done = sum(1 for item in document.items if is_item_done(item))
    return done, len(document.items)
