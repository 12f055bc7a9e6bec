#!/usr/bin/env python3
"""
defold-bridge: send commands to the running Defold editor.

  defold-bridge call hot-reload      # resolve the editor (asking if needed) and hot-reload
  defold-bridge watch .              # hot-reload whenever a script is saved
  defold-bridge serve --port 8765    # HTTP controller for editor extensions
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .commands import COMMAND_DESCRIPTIONS, EditorCommand, parse_command
from .config import load_config, require_valid
from .editor import DefoldEditor
from .errors import BridgeError
from .prompts import ConsolePrompt, TextualPrompt
from .triggers import run_manual_command, watch_for_saves

DEFAULT_SERVE_HOST = "127.0.0.1"
DEFAULT_SERVE_PORT = 8765


def _build_editor(args: argparse.Namespace) -> DefoldEditor:
    config = require_valid(load_config(Path(args.config) if args.config else None))
    if args.no_prompt:
        config.show_not_found_prompt = False
    prompt = TextualPrompt() if args.tui else ConsolePrompt()
    return DefoldEditor(config, prompt=prompt)


def _cmd_call(args: argparse.Namespace) -> int:
    command = parse_command(args.command)
    editor = _build_editor(args)
    if args.no_prompt:
        ok = asyncio.run(editor.call(command))
    else:
        ok = asyncio.run(run_manual_command(editor, command))
    return 0 if ok else 1


def _cmd_commands(args: argparse.Namespace) -> int:
    width = max(len(c.value) for c in EditorCommand)
    for command in EditorCommand:
        print(f"{command.value:<{width}}  {COMMAND_DESCRIPTIONS.get(command, '')}")
    return 0


def _cmd_resolve(args: argparse.Namespace) -> int:
    port = asyncio.run(_build_editor(args).resolve_port())
    if not port:
        print("Running Defold editor is not found", file=sys.stderr)
        return 1
    print(port)
    return 0


def _cmd_status(args: argparse.Namespace) -> int:
    editor = _build_editor(args).with_prompt(False)
    cached = editor.cache.peek()
    port = asyncio.run(editor.resolve_port())
    print(f"Cached port: {cached or '-'}")
    if port:
        print(f"Editor: running on port {port}")
        return 0
    print("Editor: not found")
    return 1


def _cmd_forget(args: argparse.Namespace) -> int:
    editor = _build_editor(args)
    asyncio.run(editor.cache.set(None))
    print("Forgot cached editor port")
    return 0


def _cmd_watch(args: argparse.Namespace) -> int:
    root = Path(args.root).expanduser().resolve()
    if not root.is_dir():
        raise BridgeError(f"Not a directory: {root}")
    editor = _build_editor(args)
    try:
        asyncio.run(watch_for_saves(editor, root))
    except KeyboardInterrupt:
        print("\nStopped watching.", file=sys.stderr)
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .web import create_app, generate_token

    token = args.token
    if not args.local_only and not token:
        token = generate_token()
        print(f"Access token: {token}")
    app = create_app(_build_editor(args), local_only=args.local_only, auth_token=token)
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="defold-bridge",
        description="Find the running Defold editor and send it commands.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Config file (default: ~/.defold-bridge/config.json)")
    parser.add_argument("--no-prompt", action="store_true", help="Never ask when no editor is found")
    parser.add_argument("--tui", action="store_true", help="Ask with terminal dialogs instead of plain prompts")
    sub = parser.add_subparsers(dest="action", required=True)

    p_call = sub.add_parser("call", help="Run an editor command")
    p_call.add_argument("command", help="Command id, e.g. hot-reload, build")
    p_call.set_defaults(func=_cmd_call)

    p_list = sub.add_parser("commands", help="List editor commands")
    p_list.set_defaults(func=_cmd_commands)

    p_resolve = sub.add_parser("resolve", help="Print the port of the running editor")
    p_resolve.set_defaults(func=_cmd_resolve)

    p_status = sub.add_parser("status", help="Show cached and live editor port")
    p_status.set_defaults(func=_cmd_status)

    p_forget = sub.add_parser("forget", help="Clear the cached editor port")
    p_forget.set_defaults(func=_cmd_forget)

    p_watch = sub.add_parser("watch", help="Hot-reload when scripts are saved")
    p_watch.add_argument("root", nargs="?", default=".", help="Project directory to watch")
    p_watch.set_defaults(func=_cmd_watch)

    p_serve = sub.add_parser("serve", help="Start the HTTP controller")
    p_serve.add_argument("--host", default=DEFAULT_SERVE_HOST)
    p_serve.add_argument("--port", type=int, default=DEFAULT_SERVE_PORT)
    p_serve.add_argument("--token", help="Bearer token for remote clients")
    p_serve.add_argument(
        "--allow-remote",
        dest="local_only",
        action="store_false",
        help="Accept non-local clients with a bearer token",
    )
    p_serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except BridgeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
