from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import httpx
from watchdog.events import DirModifiedEvent, FileModifiedEvent, FileMovedEvent

from defold_bridge.commands import EditorCommand
from defold_bridge.config import BridgeConfig
from defold_bridge.editor import DefoldEditor
from defold_bridge.port_cache import PORT_KEY
from defold_bridge.prompts import NotFoundChoice, UserPrompt
from defold_bridge.state import MemoryStore
from defold_bridge.triggers import HotReloadOnSave, SaveWatcher, _SaveEventHandler, run_manual_command


class ExplodingPrompt(UserPrompt):
    async def ask_not_found(self) -> Optional[NotFoundChoice]:
        raise AssertionError("save events must not prompt")

    async def ask_port(self) -> Optional[str]:
        raise AssertionError("save events must not prompt")

    async def show_error(self, message: str) -> None:
        raise AssertionError("save events must not prompt")


class PortPrompt(UserPrompt):
    def __init__(self, port: str):
        self.port = port
        self.asked = 0

    async def ask_not_found(self) -> Optional[NotFoundChoice]:
        self.asked += 1
        return NotFoundChoice.INPUT_PORT

    async def ask_port(self) -> Optional[str]:
        return self.port

    async def show_error(self, message: str) -> None:
        pass


def _editor(tmp_path: Path, events: list, *, port: Optional[str] = "8080", live: set[str] = frozenset({"8080"}), prompt=None) -> DefoldEditor:
    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url.port) not in live:
            raise httpx.ConnectError("refused", request=request)
        if request.method == "POST":
            events.append(("post", request.url.path))
        return httpx.Response(200)

    config = BridgeConfig()
    config.editor.log_dir = str(tmp_path / "no-logs")
    store = MemoryStore({PORT_KEY: port} if port else {})
    return DefoldEditor(config, store, prompt or ExplodingPrompt(), transport=httpx.MockTransport(handler), platform="linux")


def _sleeper(events: list):
    async def sleep(seconds: float) -> None:
        events.append(("sleep", seconds))

    return sleep


def test_transpiled_file_waits_before_reload(tmp_path: Path) -> None:
    events: list = []
    reloader = HotReloadOnSave(_editor(tmp_path, events), sleep=_sleeper(events))

    assert asyncio.run(reloader.on_saved(tmp_path / "src" / "foo.ts")) is True
    assert events == [("sleep", 1.0), ("post", "/command/hot-reload")]


def test_script_reloads_immediately(tmp_path: Path) -> None:
    events: list = []
    reloader = HotReloadOnSave(_editor(tmp_path, events), sleep=_sleeper(events))

    assert asyncio.run(reloader.on_saved("main/foo.script")) is True
    assert events == [("post", "/command/hot-reload")]


def test_other_files_are_ignored(tmp_path: Path) -> None:
    events: list = []
    reloader = HotReloadOnSave(_editor(tmp_path, events), sleep=_sleeper(events))

    assert asyncio.run(reloader.on_saved("main/atlas.png")) is None
    assert events == []


def test_save_without_editor_never_prompts(tmp_path: Path) -> None:
    events: list = []
    editor = _editor(tmp_path, events, port=None)
    reloader = HotReloadOnSave(editor, sleep=_sleeper(events))

    assert asyncio.run(reloader.on_saved("main/foo.lua")) is False
    assert events == []
    assert editor.store.get(PORT_KEY) is None


def test_manual_command_prompts_for_port(tmp_path: Path) -> None:
    events: list = []
    prompt = PortPrompt("9999")
    editor = _editor(tmp_path, events, port=None, live={"9999"}, prompt=prompt)
    editor.show_not_found_prompt = False

    assert asyncio.run(run_manual_command(editor, EditorCommand.BUILD)) is True
    assert prompt.asked == 1
    assert events == [("post", "/command/build")]
    assert editor.store.get(PORT_KEY) == "9999"


def test_save_watcher_debounces_and_filters(tmp_path: Path) -> None:
    seen: list[Path] = []
    clock = [100.0]

    async def main() -> list[bool]:
        done = asyncio.Event()

        async def handler(path: Path) -> bool:
            seen.append(path)
            done.set()
            return True

        watcher = SaveWatcher(
            tmp_path,
            handler,
            asyncio.get_running_loop(),
            predicate=lambda p: p.suffix == ".lua",
            debounce=0.5,
            time_source=lambda: clock[0],
        )
        script = tmp_path / "main.lua"
        results = [
            await asyncio.to_thread(watcher.notify, script),
            await asyncio.to_thread(watcher.notify, script),
            await asyncio.to_thread(watcher.notify, tmp_path / "image.png"),
        ]
        await asyncio.wait_for(done.wait(), timeout=2)
        clock[0] += 1.0
        done.clear()
        results.append(await asyncio.to_thread(watcher.notify, script))
        await asyncio.wait_for(done.wait(), timeout=2)
        return results

    assert asyncio.run(main()) == [True, False, False, True]
    assert seen == [tmp_path / "main.lua", tmp_path / "main.lua"]


class RecordingWatcher:
    def __init__(self):
        self.paths: list[Path] = []

    def notify(self, path: Path) -> bool:
        self.paths.append(path)
        return True


def test_event_handler_maps_watchdog_events(tmp_path: Path) -> None:
    watcher = RecordingWatcher()
    handler = _SaveEventHandler(watcher)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "a.lua")))
    handler.on_modified(DirModifiedEvent(str(tmp_path)))
    handler.on_moved(FileMovedEvent(str(tmp_path / ".a.lua.swp"), str(tmp_path / "b.lua")))

    assert watcher.paths == [tmp_path / "a.lua", tmp_path / "b.lua"]


def test_save_watcher_forgets_paths_outside_debounce_window(tmp_path: Path) -> None:
    clock = [0.0]

    async def handler(path: Path) -> bool:
        return True

    async def main() -> SaveWatcher:
        watcher = SaveWatcher(
            tmp_path,
            handler,
            asyncio.get_running_loop(),
            debounce=0.5,
            time_source=lambda: clock[0],
        )
        for idx in range(5):
            clock[0] += 1.0
            assert await asyncio.to_thread(watcher.notify, tmp_path / f"file{idx}.lua")
        await asyncio.sleep(0)
        return watcher

    watcher = asyncio.run(main())
    assert watcher._last_seen == {tmp_path / "file4.lua": 5.0}
