"""
sb show / sb phase - Print the parsed status file.
"""

from pathlib import Path

from statusboard.lib.inference import phase_label
from statusboard.lib.statusparse import (
    MalformedDocument,
    StatusDocument,
    is_item_done,
    items_for_phase,
    parse_phase_arg,
    parse_status_file,
    progress,
)


def _load(status_file: Path):
    """Parse or print an error. Returns (document, exit_code)."""
    try:
        document = parse_status_file(status_file)
    except MalformedDocument as e:
        print(f"ERROR: {e}")
        return None, 2

    if document is None:
        print(f"ERROR: Status file not found: {status_file}")
        return None, 2
    return document, 0


def format_item(item) -> str:
    marker = "[x]" if is_item_done(item) else "[ ]"
    line = f"  {marker} {item.id:<28} {item.agent:<12} {item.status}"
    if item.note:
        line += f"  ({item.note})"
    return line


def format_summary(document: StatusDocument, status_file: Path) -> list[str]:
    done, total = progress(document)
    lines = [f"Status file: {status_file}", "=" * 60]
    lines.append(f"Project:     {document.project or '(unnamed)'}")
    if document.project_type:
        lines.append(f"Type:        {document.project_type}")
    if document.selected_track:
        lines.append(f"Track:       {document.selected_track}")
    if document.field_type:
        lines.append(f"Field:       {document.field_type}")
    if document.status:
        status = document.status
        if document.status_note:
            status += f" - {document.status_note}"
        lines.append(f"Status:      {status}")
    if document.last_updated:
        lines.append(f"Updated:     {document.last_updated}")
    lines.append(f"Schema:      {document.schema.value}")
    lines.append(f"Progress:    {done}/{total} items")
    return lines


def format_document(document: StatusDocument, status_file: Path) -> str:
    lines = format_summary(document, status_file)

    current_phase = object()
    for item in document.items:
        if item.phase != current_phase:
            current_phase = item.phase
            lines.append("")
            lines.append(phase_label(item.phase))
        lines.append(format_item(item))

    if not document.items:
        lines.append("")
        lines.append("No workflow items defined")
    return "\n".join(lines)


def cmd_show(args, status_file: Path) -> int:
    """Show all items grouped by phase."""
    document, code = _load(status_file)
    if document is None:
        return code

    print(format_document(document, status_file))
    return 0


def cmd_phase(args, status_file: Path) -> int:
    """Show the items of one phase."""
    try:
        phase = parse_phase_arg(args.phase)
    except ValueError:
        print(f"ERROR: Invalid phase '{args.phase}' (use a number or 'prerequisite')")
        return 2

    document, code = _load(status_file)
    if document is None:
        return code

    items = items_for_phase(document, phase)
    print(phase_label(phase))
    if not items:
        print("  (no items)")
    for item in items:
        print(format_item(item))
    return 0
