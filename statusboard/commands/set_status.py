"""
sb set - Change one item's status in place.
"""

from pathlib import Path

from statusboard.lib.mutate import set_status
from statusboard.lib.statusparse import MalformedDocument


def cmd_set(args, status_file: Path) -> int:
    """Set status for an item. Only the status value is rewritten."""
    if not status_file.is_file():
        print(f"ERROR: Status file not found: {status_file}")
        return 2

    try:
        updated = set_status(status_file, args.item, args.status)
    except MalformedDocument as e:
        print(f"ERROR: {e}")
        return 2

    if not updated:
        print(f"ERROR: Failed to update status for {args.item}")
        return 1

    print(f"Set {args.item} to {args.status}")
    return 0
