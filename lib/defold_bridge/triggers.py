"""
Things that make the bridge talk to the editor:

- HotReloadOnSave: a saved script triggers "hot-reload", silently
- SaveWatcher: watchdog observer feeding saved paths into HotReloadOnSave
- run_manual_command: user-initiated command, prompts when no editor is found
"""

from __future__ import annotations

import asyncio
import sys
import threading
import time
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .commands import EditorCommand
from .config import HotReloadConfig
from .editor import DefoldEditor

SleepFn = Callable[[float], Awaitable[None]]
SavedHandler = Callable[[Path], Awaitable[object]]

SAVE_DEBOUNCE_SECONDS = 0.3


class HotReloadOnSave:
    """Hot-reloads the running editor after a matching file is saved.

    Never prompts: a save must not be interrupted by a dialog. Files produced
    by a transpile step wait `delay_seconds` so the generated Lua is on disk
    before the editor reloads it.
    """

    def __init__(
        self,
        editor: DefoldEditor,
        settings: Optional[HotReloadConfig] = None,
        *,
        sleep: SleepFn = asyncio.sleep,
    ):
        self.editor = editor.with_prompt(False)
        self.settings = settings or editor.config.hot_reload
        self._sleep = sleep

    def matches(self, path: str | Path) -> bool:
        return self.settings.should_reload(path)

    async def on_saved(self, path: str | Path) -> Optional[bool]:
        """None when the file is ignored, else whether the reload was delivered."""
        if not self.matches(path):
            return None
        port = await self.editor.resolve_port()
        if not port:
            return False
        delay = self.settings.delay_for(path)
        if delay > 0:
            await self._sleep(delay)
        return await self.editor.send(port, EditorCommand.HOT_RELOAD)


class _SaveEventHandler(FileSystemEventHandler):
    def __init__(self, watcher: "SaveWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher.notify(Path(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher.notify(Path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors that save via temp file + rename only report the move.
        if not event.is_directory and getattr(event, "dest_path", None):
            self._watcher.notify(Path(event.dest_path))


class SaveWatcher:
    """Watches a project tree and hands saved files to an async handler.

    watchdog delivers events on its own thread; handlers run on `loop`.
    Repeated events for the same path within `debounce` seconds count as one
    save.
    """

    def __init__(
        self,
        root: Path,
        handler: SavedHandler,
        loop: asyncio.AbstractEventLoop,
        *,
        predicate: Optional[Callable[[Path], bool]] = None,
        debounce: float = SAVE_DEBOUNCE_SECONDS,
        time_source: Callable[[], float] = time.monotonic,
    ):
        self.root = Path(root)
        self._handler = handler
        self._loop = loop
        self._predicate = predicate
        self._debounce = debounce
        self._time = time_source
        self._last_seen: Dict[Path, float] = {}
        self._lock = threading.Lock()
        self._observer: Optional[Observer] = None

    def notify(self, path: Path) -> bool:
        """Schedule the handler for path; False when filtered or debounced."""
        if self._predicate is not None and not self._predicate(path):
            return False
        now = self._time()
        with self._lock:
            last = self._last_seen.get(path)
            if last is not None and now - last < self._debounce:
                return False
            stale = [p for p, seen in self._last_seen.items() if now - seen >= self._debounce]
            for p in stale:
                del self._last_seen[p]
            self._last_seen[path] = now
        future = asyncio.run_coroutine_threadsafe(self._handler(path), self._loop)
        future.add_done_callback(lambda f, p=path: self._report(p, f))
        return True

    def _report(self, path: Path, future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            print(f"[watch] {path.name}: {type(exc).__name__}: {exc}", file=sys.stderr)
            return
        result = future.result()
        if result is False:
            print(f"[watch] Hot reload after saving {path.name} was not delivered", file=sys.stderr)

    def start(self) -> None:
        if self._observer is not None:
            return
        observer = Observer()
        observer.schedule(_SaveEventHandler(self), str(self.root), recursive=True)
        observer.start()
        self._observer = observer
        print(f"[watch] Watching {self.root}", file=sys.stderr)

    def stop(self) -> None:
        observer = self._observer
        if observer is None:
            return
        observer.stop()
        observer.join(timeout=5)
        self._observer = None


async def watch_for_saves(editor: DefoldEditor, root: Path, stop: Optional[asyncio.Event] = None) -> None:
    """Run a SaveWatcher until `stop` is set (or forever)."""
    reloader = HotReloadOnSave(editor)
    watcher = SaveWatcher(
        root,
        reloader.on_saved,
        asyncio.get_running_loop(),
        predicate=reloader.matches,
    )
    watcher.start()
    try:
        await (stop or asyncio.Event()).wait()
    finally:
        watcher.stop()


async def run_manual_command(editor: DefoldEditor, command: EditorCommand) -> bool:
    ok = await editor.with_prompt(True).call(command)
    if not ok:
        print(f"Failed to run '{command.value}' in the Defold editor", file=sys.stderr)
    return ok
