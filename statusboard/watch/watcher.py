"""
Change watcher for a workflow status file.

Watches the file's directory with a watchdog Observer and reloads the model
once a burst of notifications settles. Watchdog delivers events on its own
thread; they are handed to the asyncio loop with call_soon_threadsafe, so
timers, state and the reload callback all run on the loop thread.

Editors and tools often save by writing a temp file and renaming it over the
original. That replacement invalidates the watch, so a replace event also
schedules a fresh subscription. While subscribed, the observer thread is
checked every error_retry seconds and replaced if it has died.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from statusboard.lib.constants import (
    DEBOUNCE_SECONDS,
    ERROR_RESUBSCRIBE_SECONDS,
    REPLACE_RESUBSCRIBE_SECONDS,
)
from statusboard.watch.fsm import WatchFSM

logger = logging.getLogger(__name__)

# Notification kinds
CHANGE = "change"      # modified in place
REPLACE = "replace"    # renamed over, created or deleted
ERROR = "error"        # watched directory went away


class WatchError(Exception):
    """The low-level watch stopped working."""
    pass


def _real(path) -> str:
    return os.path.realpath(os.fsdecode(path))


def classify_event(event, target: str, directory: str) -> Optional[str]:
    """Map a watchdog event to a notification kind for `target`, or None."""
    if event.is_directory:
        if event.event_type in ("deleted", "moved") and _real(event.src_path) == directory:
            return ERROR
        return None

    src = _real(event.src_path)
    if event.event_type == "modified":
        return CHANGE if src == target else None
    if event.event_type == "moved":
        dest = _real(getattr(event, "dest_path", "") or "")
        return REPLACE if target in (src, dest) else None
    if event.event_type in ("created", "deleted"):
        return REPLACE if src == target else None
    return None


class StatusFileHandler(FileSystemEventHandler):
    """Forwards events for one file, tagged with the subscription generation."""

    def __init__(self, target: Path, generation: int, dispatch: Callable[[str, int], None]):
        super().__init__()
        self.target = _real(target)
        self.directory = os.path.dirname(self.target)
        self.generation = generation
        self.dispatch_kind = dispatch

    def on_any_event(self, event):
        kind = classify_event(event, self.target, self.directory)
        if kind:
            self.dispatch_kind(kind, self.generation)


class ChangeWatcher:
    """Debounced, self-healing watch on a single status file.

    Timers run on `loop`. When no loop is given the running loop is used,
    so construct the watcher inside a coroutine or pass the loop in;
    otherwise asyncio raises RuntimeError("no running event loop").

    Usage:
        watcher = ChangeWatcher(reload=tracker.reload, loop=loop)
        watcher.watch(path)
        ...
        watcher.close()
    """

    def __init__(
        self,
        reload: Callable[[], None],
        loop: Optional[asyncio.AbstractEventLoop] = None,
        debounce: float = DEBOUNCE_SECONDS,
        replace_retry: float = REPLACE_RESUBSCRIBE_SECONDS,
        error_retry: float = ERROR_RESUBSCRIBE_SECONDS,
        observer_factory: Callable = Observer,
    ):
        self.reload = reload
        self.loop = loop or asyncio.get_running_loop()
        self.debounce = debounce
        self.replace_retry = replace_retry
        self.error_retry = error_retry
        self.observer_factory = observer_factory

        self.path: Optional[Path] = None
        self._observer = None
        self._watch = None
        self._generation = 0
        self._debounce_timer: Optional[asyncio.TimerHandle] = None
        self._resubscribe_timer: Optional[asyncio.TimerHandle] = None
        self._health_timer: Optional[asyncio.TimerHandle] = None
        self.fsm = WatchFSM(has_pending=lambda: self._debounce_timer is not None)

    @property
    def state(self) -> str:
        return self.fsm.state

    @property
    def reload_pending(self) -> bool:
        return self._debounce_timer is not None

    def watch(self, path) -> None:
        """Watch `path`, tearing down any watch on a previous path."""
        path = Path(path)
        if path == self.path and self.state != "unwatched":
            return
        self.unwatch()
        self.path = path
        self._subscribe()

    def unwatch(self) -> None:
        """Stop watching and drop any pending reload or retry."""
        self._cancel_timers()
        self._teardown()
        self.path = None

    def close(self) -> None:
        self.unwatch()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=2)
            self._observer = None

    def handle_event(self, kind: str) -> None:
        """React to one notification. Runs on the loop thread."""
        if kind == CHANGE:
            self._arm_debounce("file change")
        elif kind == REPLACE:
            self._arm_debounce("file replacement")
            # Replacement breaks the handle's binding to the old file
            self._schedule_resubscribe(self.replace_retry, "file replaced")
        elif kind == ERROR:
            self.handle_error(WatchError(f"watched directory for {self.path} was removed"))
        else:
            logger.debug(f"[watch] Ignoring unknown notification {kind!r}")

    def handle_error(self, error: BaseException) -> None:
        """Drop the broken watch and retry later."""
        logger.error(f"[watch] File watcher error: {error}")
        self._teardown()
        self._schedule_resubscribe(self.error_retry, "watcher error")

    # -- subscription ------------------------------------------------------

    def _ensure_observer(self):
        if self._observer is None or not self._observer.is_alive():
            self._observer = self.observer_factory()
            self._observer.start()
        return self._observer

    def _subscribe(self) -> bool:
        if self.path is None:
            return False

        if not self.path.is_file():
            logger.warning(f"[watch] Cannot watch {self.path}: file not found, retrying in {self.error_retry}s")
            self._schedule_resubscribe(self.error_retry, "file missing")
            return False

        self._generation += 1
        handler = StatusFileHandler(self.path, self._generation, self._dispatch)
        try:
            observer = self._ensure_observer()
            self._watch = observer.schedule(handler, str(self.path.parent), recursive=False)
        except OSError as e:
            logger.warning(f"[watch] Failed to watch {self.path}: {e}, retrying in {self.error_retry}s")
            self._watch = None
            self._schedule_resubscribe(self.error_retry, "subscribe failed")
            return False

        self.fsm.subscribe()
        self._schedule_health_check()
        logger.debug(f"[watch] Watching {self.path}")
        return True

    def _schedule_health_check(self) -> None:
        if self._health_timer is not None:
            self._health_timer.cancel()
        self._health_timer = self.loop.call_later(self.error_retry, self._check_observer)

    def _check_observer(self) -> None:
        # A dead observer thread delivers no events and raises nothing
        self._health_timer = None
        if self._watch is None or self._observer is None:
            return
        if not self._observer.is_alive():
            self.handle_error(WatchError(f"observer thread stopped while watching {self.path}"))
            return
        self._schedule_health_check()

    def _teardown(self) -> None:
        # Events queued from the old handle are ignored after this
        self._generation += 1
        if self._health_timer is not None:
            self._health_timer.cancel()
            self._health_timer = None
        if self._watch is not None and self._observer is not None:
            try:
                self._observer.unschedule(self._watch)
            except (KeyError, OSError) as e:
                logger.debug(f"[watch] Unschedule failed: {e}")
        self._watch = None
        self.fsm.drop()

    def _schedule_resubscribe(self, delay: float, reason: str) -> None:
        if self._resubscribe_timer is not None:
            self._resubscribe_timer.cancel()
        self._resubscribe_timer = self.loop.call_later(delay, self._resubscribe, reason)

    def _resubscribe(self, reason: str) -> None:
        self._resubscribe_timer = None
        if self.path is None:
            return
        logger.info(f"[watch] Re-establishing watch on {self.path} ({reason})")
        self._teardown()
        self._subscribe()

    # -- notifications -----------------------------------------------------

    def _dispatch(self, kind: str, generation: int) -> None:
        # Called on the observer thread
        try:
            self.loop.call_soon_threadsafe(self._on_event, kind, generation)
        except RuntimeError as e:
            logger.debug(f"[watch] Dropping {kind} event, loop unavailable: {e}")

    def _on_event(self, kind: str, generation: int) -> None:
        if generation != self._generation:
            logger.debug(f"[watch] Ignoring stale {kind} event")
            return
        self.handle_event(kind)

    def _arm_debounce(self, reason: str) -> None:
        if self._debounce_timer is not None:
            self._debounce_timer.cancel()
        self._debounce_timer = self.loop.call_later(self.debounce, self._fire, reason)
        self.fsm.notify()

    def _fire(self, reason: str) -> None:
        self._debounce_timer = None
        self.fsm.settle()
        logger.info(f"[watch] Detected {reason}, reloading {self.path}")
        try:
            self.reload()
        except Exception as e:
            logger.exception(f"[watch] Reload failed: {e}")

    def _cancel_timers(self) -> None:
        for timer in (self._debounce_timer, self._resubscribe_timer, self._health_timer):
            if timer is not None:
                timer.cancel()
        self._debounce_timer = None
        self._resubscribe_timer = None
        self._health_timer = None
