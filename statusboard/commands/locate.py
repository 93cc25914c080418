"""
sb locate / sb use - Find status files and manage the remembered selection.
"""

from pathlib import Path

from statusboard.lib.config import (
    clear_selected_file,
    get_selected_file,
    load_config,
    set_selected_file,
)
from statusboard.lib.locate import find_all_status_files, find_status_file


def _display(path: Path, workspace: Path) -> str:
    try:
        return str(path.relative_to(workspace))
    except ValueError:
        return str(path)


def cmd_locate(args, workspace: Path) -> int:
    """Print the status file(s) found in the workspace."""
    config = load_config(workspace)

    if args.all:
        found = find_all_status_files(workspace, config.extra_candidates)
    else:
        first = find_status_file(workspace, config.extra_candidates)
        found = [first] if first else []

    if not found:
        print(f"No status file found under {workspace}")
        return 1

    selected = get_selected_file(workspace)
    for path in found:
        marker = "  (current)" if selected and path.resolve() == selected.resolve() else ""
        print(f"{_display(path, workspace)}{marker}")
    return 0


def cmd_use(args, workspace: Path) -> int:
    """Set, show, or clear the remembered status file."""
    if args.clear:
        clear_selected_file(workspace)
        print("Cleared status file selection.")
        return 0

    if not args.path:
        current = get_selected_file(workspace)
        if current:
            print(f"Current status file: {_display(current, workspace)}")
        else:
            print("No status file selected. Use 'sb use <path>' to select one.")
        return 0

    path = Path(args.path)
    if not path.is_absolute():
        path = workspace / path
    if not path.is_file():
        print(f"ERROR: Status file '{args.path}' not found.")
        return 1

    set_selected_file(workspace, path.resolve())
    print(f"Now using status file: {_display(path, workspace)}")
    return 0
