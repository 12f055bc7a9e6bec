"""
Command vocabulary understood by the Defold editor HTTP server.

The ids are opaque to the bridge: they are forwarded as-is to
``POST /command/<id>`` and interpreted only by the editor.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict

from .errors import BridgeError


class EditorCommand(str, Enum):
    ASSET_PORTAL = "asset-portal"
    BUILD = "build"
    BUILD_HTML5 = "build-html5"
    DEBUGGER_BREAK = "debugger-break"
    DEBUGGER_CONTINUE = "debugger-continue"
    DEBUGGER_DETACH = "debugger-detach"
    DEBUGGER_START = "debugger-start"
    DEBUGGER_STEP_INTO = "debugger-step-into"
    DEBUGGER_STEP_OUT = "debugger-step-out"
    DEBUGGER_STEP_OVER = "debugger-step-over"
    DEBUGGER_STOP = "debugger-stop"
    DOCUMENTATION = "documentation"
    DONATE_PAGE = "donate-page"
    EDITOR_LOGS = "editor-logs"
    ENGINE_PROFILER = "engine-profiler"
    FETCH_LIBRARIES = "fetch-libraries"
    HOT_RELOAD = "hot-reload"
    ISSUES = "issues"
    REBUILD = "rebuild"
    REBUNDLE = "rebundle"
    RELOAD_EXTENSIONS = "reload-extensions"
    RELOAD_STYLESHEETS = "reload-stylesheets"
    REPORT_ISSUE = "report-issue"
    REPORT_SUGGESTION = "report-suggestion"
    SHOW_BUILD_ERRORS = "show-build-errors"
    SHOW_CONSOLE = "show-console"
    SHOW_CURVE_EDITOR = "show-curve-editor"
    SUPPORT_FORUM = "support-forum"
    TOGGLE_PANE_BOTTOM = "toggle-pane-bottom"
    TOGGLE_PANE_LEFT = "toggle-pane-left"
    TOGGLE_PANE_RIGHT = "toggle-pane-right"

    def __str__(self) -> str:
        return self.value


COMMAND_DESCRIPTIONS: Dict[EditorCommand, str] = {
    EditorCommand.ASSET_PORTAL: "Open the Asset Portal in a web browser",
    EditorCommand.BUILD: "Build and run the project",
    EditorCommand.BUILD_HTML5: "Build the project for HTML5 and open it in a web browser",
    EditorCommand.DEBUGGER_BREAK: "Break into the debugger",
    EditorCommand.DEBUGGER_CONTINUE: "Resume execution in the debugger",
    EditorCommand.DEBUGGER_DETACH: "Detach the debugger from the running project",
    EditorCommand.DEBUGGER_START: "Start the project with the debugger, or attach the debugger to the running project",
    EditorCommand.DEBUGGER_STEP_INTO: "Step into the current expression in the debugger",
    EditorCommand.DEBUGGER_STEP_OUT: "Step out of the current expression in the debugger",
    EditorCommand.DEBUGGER_STEP_OVER: "Step over the current expression in the debugger",
    EditorCommand.DEBUGGER_STOP: "Stop the debugger and the running project",
    EditorCommand.DOCUMENTATION: "Open the Defold documentation in a web browser",
    EditorCommand.DONATE_PAGE: "Open the Donate to Defold page in a web browser",
    EditorCommand.EDITOR_LOGS: "Show the directory containing the editor logs",
    EditorCommand.ENGINE_PROFILER: "Open the Engine Profiler in a web browser",
    EditorCommand.FETCH_LIBRARIES: "Download the latest version of the project library dependencies",
    EditorCommand.HOT_RELOAD: "Hot-reload all modified files into the running project",
    EditorCommand.ISSUES: "Open the Defold Issue Tracker in a web browser",
    EditorCommand.REBUILD: "Rebuild and run the project",
    EditorCommand.REBUNDLE: "Re-bundle the project using the previous Bundle dialog settings",
    EditorCommand.RELOAD_EXTENSIONS: "Reload editor extensions",
    EditorCommand.RELOAD_STYLESHEETS: "Reload editor stylesheets",
    EditorCommand.REPORT_ISSUE: "Open the Report Issue page in a web browser",
    EditorCommand.REPORT_SUGGESTION: "Open the Report Suggestion page in a web browser",
    EditorCommand.SHOW_BUILD_ERRORS: "Show the Build Errors tab",
    EditorCommand.SHOW_CONSOLE: "Show the Console tab",
    EditorCommand.SHOW_CURVE_EDITOR: "Show the Curve Editor tab",
    EditorCommand.SUPPORT_FORUM: "Open the Defold Support Forum in a web browser",
    EditorCommand.TOGGLE_PANE_BOTTOM: "Toggle visibility of the bottom editor pane",
    EditorCommand.TOGGLE_PANE_LEFT: "Toggle visibility of the left editor pane",
    EditorCommand.TOGGLE_PANE_RIGHT: "Toggle visibility of the right editor pane",
}


def parse_command(value: str) -> EditorCommand:
    """Map a command id (``hot-reload``) or member name (``HOT_RELOAD``) to an EditorCommand."""
    raw = (value or "").strip()
    try:
        return EditorCommand(raw.lower())
    except ValueError:
        pass
    member = raw.upper().replace("-", "_")
    if member in EditorCommand.__members__:
        return EditorCommand[member]
    raise BridgeError(f"Unknown editor command: {value!r}")
