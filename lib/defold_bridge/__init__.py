"""
Defold Editor Bridge - trigger commands in a running Defold editor.

Finds the port of the running editor's local command server and sends it
commands such as "hot-reload" or "build".

Key components:
- log_scanner: ports announced in the editor log, most recent first
- prober: liveness check against GET /command/
- port_cache: last known good port, persisted in state.json
- resolver: cache -> log scan -> ask the user
- dispatcher: POST /command/<id>
- editor: DefoldEditor facade
- triggers: hot reload on save, file watcher, manual commands
- web: HTTP controller for editor extensions
"""

__version__ = "0.3.0"

from .commands import (
    EditorCommand,
    COMMAND_DESCRIPTIONS,
    parse_command,
)

from .config import (
    BridgeConfig,
    EditorConfig,
    HttpConfig,
    HotReloadConfig,
    load_config,
    save_config,
    validate_config,
    get_config_dir,
    ensure_config_dir,
)

from .errors import BridgeError

from .log_scanner import (
    LogAnnouncement,
    parse_announcement,
    scan_log_file,
    find_recent_log_file,
)

from .prober import is_editor_running
from .dispatcher import execute_command

from .state import (
    KeyValueStore,
    MemoryStore,
    JsonFileStore,
)

from .port_cache import PortCache
from .resolver import PortResolver
from .editor import DefoldEditor

from .triggers import (
    HotReloadOnSave,
    SaveWatcher,
    run_manual_command,
)

__all__ = [
    "__version__",
    # Commands
    "EditorCommand",
    "COMMAND_DESCRIPTIONS",
    "parse_command",
    # Config
    "BridgeConfig",
    "EditorConfig",
    "HttpConfig",
    "HotReloadConfig",
    "load_config",
    "save_config",
    "validate_config",
    "get_config_dir",
    "ensure_config_dir",
    "BridgeError",
    # Discovery
    "LogAnnouncement",
    "parse_announcement",
    "scan_log_file",
    "find_recent_log_file",
    "is_editor_running",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "PortCache",
    "PortResolver",
    # Dispatch
    "execute_command",
    "DefoldEditor",
    "HotReloadOnSave",
    "SaveWatcher",
    "run_manual_command",
]
