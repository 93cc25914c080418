"""
sb watch - Follow a status file and print progress on every change.

Reloads are driven by the change watcher, so edits from editors, other tools
and `sb set` in another terminal all show up here.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from statusboard.lib.config import load_config
from statusboard.lib.statusparse import StatusDocument, progress
from statusboard.tracker import StatusTracker

logger = logging.getLogger(__name__)


def _print_update(status_file: Path, document: Optional[StatusDocument]) -> None:
    stamp = datetime.now().strftime("%H:%M:%S")
    if document is None:
        print(f"[{stamp}] {status_file}: not found")
        return
    done, total = progress(document)
    print(f"[{stamp}] {document.project or status_file.name}: {done}/{total} items done")


async def _run(workspace: Path, status_file: Path, stop: Optional[asyncio.Event] = None) -> int:
    tracker = StatusTracker(workspace, load_config(workspace), loop=asyncio.get_running_loop())
    tracker.add_listener(lambda document: _print_update(status_file, document))
    stop = stop or asyncio.Event()

    try:
        tracker.select(status_file, remember=False)
        await stop.wait()
    finally:
        tracker.close()
    return 0


def cmd_watch(args, workspace: Path, status_file: Path) -> int:
    """Watch until interrupted."""
    if not status_file.is_file():
        print(f"ERROR: Status file not found: {status_file}")
        return 2

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    print(f"Watching {status_file} (Ctrl+C to stop)")
    try:
        return asyncio.run(_run(workspace, status_file))
    except KeyboardInterrupt:
        print("Stopped.")
        return 0
