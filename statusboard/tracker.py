"""
Status tracker: the selected status file, its parsed model, and the watcher.

The presentation layer talks to this object. Writes made through
set_status() reload synchronously; the watcher will also see the write and
reload again after its debounce, the same way it handles external edits.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from statusboard.lib import config as config_lib
from statusboard.lib.config import WatchConfig
from statusboard.lib.locate import find_all_status_files
from statusboard.lib.mutate import set_status as mutate_status
from statusboard.lib.statusparse import (
    MalformedDocument,
    StatusDocument,
    parse_status_file,
    progress,
)
from statusboard.watch.watcher import ChangeWatcher

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[StatusDocument]], None]


class StatusTracker:
    """Keeps a StatusDocument in sync with a status file on disk.

    Unless a watcher is passed in, a ChangeWatcher is built on `loop`. With
    no loop, the tracker must be created while an asyncio loop is running
    (inside a coroutine, as `sb watch` does), or construction raises
    RuntimeError.
    """

    def __init__(
        self,
        workspace_root: Path,
        config: Optional[WatchConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        watcher: Optional[ChangeWatcher] = None,
    ):
        self.workspace_root = Path(workspace_root)
        self.config = config or config_lib.load_config(self.workspace_root)
        self.path: Optional[Path] = None
        self.document: Optional[StatusDocument] = None
        self.last_error: Optional[MalformedDocument] = None
        self.candidates: list[Path] = []
        self._listeners: list[Listener] = []

        if watcher is None:
            watcher = ChangeWatcher(
                reload=self.reload,
                loop=loop,
                debounce=self.config.debounce,
                replace_retry=self.config.replace_retry,
                error_retry=self.config.error_retry,
            )
        self.watcher = watcher

    def add_listener(self, listener: Listener) -> None:
        """Register a callback run with the new document after each reload."""
        self._listeners.append(listener)

    def initialize(self) -> Optional[Path]:
        """Pick a status file: remembered selection, else the only candidate.

        With several candidates nothing is selected; they are left in
        `candidates` for the caller to choose from.
        """
        self.candidates = find_all_status_files(self.workspace_root, self.config.extra_candidates)

        saved = config_lib.get_selected_file(self.workspace_root)
        if saved is not None:
            self.select(saved, remember=False)
            return self.path

        if len(self.candidates) == 1:
            self.select(self.candidates[0])
        elif not self.candidates:
            logger.warning(f"No status file found under {self.workspace_root}")
        else:
            logger.info(f"{len(self.candidates)} status files found, selection required")
        return self.path

    def select(self, path, remember: bool = True) -> Optional[StatusDocument]:
        """Switch to a status file, reload it and move the watch over."""
        self.path = Path(path)
        if remember:
            config_lib.set_selected_file(self.workspace_root, self.path)
        document = self.reload()
        self.watcher.watch(self.path)
        return document

    def reload(self) -> Optional[StatusDocument]:
        """Re-parse the selected file and notify listeners.

        A missing file clears the document. A malformed file keeps the
        previous document and records the error.
        """
        if self.path is None:
            self.document = None
        else:
            try:
                self.document = parse_status_file(self.path)
                self.last_error = None
            except MalformedDocument as e:
                logger.error(f"Failed to load {self.path}: {e.message}")
                self.last_error = e
                return self.document

            if self.document is not None:
                done, total = progress(self.document)
                logger.info(f"Loaded {total} items ({done} done) from {self.path}")
            else:
                logger.info(f"Status file {self.path} not found")

        for listener in self._listeners:
            listener(self.document)
        return self.document

    def set_status(self, item_id: str, new_status: str) -> bool:
        """Write a new status for one item, then reload."""
        if self.path is None:
            return False
        if not mutate_status(self.path, item_id, new_status):
            return False
        self.reload()
        return True

    def close(self) -> None:
        self.watcher.close()
