"""
Bridge configuration management.

Configuration is stored in ~/.defold-bridge/config.json
(override the directory with DEFOLD_BRIDGE_HOME).

Sections:
- editor: where the editor writes its logs and how to launch it
- http: probe and command timeouts
- hot_reload: which saved files trigger a hot reload, and which wait for a
  transpile step to flush its output first
- show_not_found_prompt: ask the user what to do when no editor is found
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any, List

from .errors import BridgeError

# Default configuration directory
DEFAULT_CONFIG_DIR = Path.home() / ".defold-bridge"
CONFIG_FILE = "config.json"
STATE_FILE = "state.json"

CURRENT_CONFIG_VERSION = 1

DEFAULT_PROBE_TIMEOUT = 1.5
DEFAULT_COMMAND_TIMEOUT = 2.0
DEFAULT_PROJECT_FILE = "game.project"

DEFAULT_HOT_RELOAD_EXTENSIONS = [".script", ".lua", ".gui_script", ".render_script", ".ts"]
# Files produced by a separate transpile step (TypeScript -> Lua).
DEFAULT_DELAYED_EXTENSIONS = [".ts"]
DEFAULT_HOT_RELOAD_DELAY = 1.0


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.environ.get(key, str(default)) or str(default))
    except Exception:
        return default


def _env_truthy(key: str) -> bool:
    raw = (os.environ.get(key) or "").strip().lower()
    return raw in ("1", "true", "yes", "on")


def _normalize_extensions(values: Any) -> List[str]:
    out: List[str] = []
    for value in values or []:
        ext = str(value).strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        if ext not in out:
            out.append(ext)
    return out


@dataclass
class EditorConfig:
    """Where to find the editor logs and how to start a new editor."""
    log_dir: str = ""  # empty: platform default
    project_file: str = DEFAULT_PROJECT_FILE
    editor_path: str = ""  # empty: let the OS pick the app for game.project

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        return cls(
            log_dir=data.get("log_dir", ""),
            project_file=data.get("project_file", DEFAULT_PROJECT_FILE),
            editor_path=data.get("editor_path", ""),
        )


@dataclass
class HttpConfig:
    """Timeouts for the editor's local command server."""
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HttpConfig":
        return cls(
            probe_timeout=float(data.get("probe_timeout", DEFAULT_PROBE_TIMEOUT)),
            command_timeout=float(data.get("command_timeout", DEFAULT_COMMAND_TIMEOUT)),
        )


@dataclass
class HotReloadConfig:
    """Save-triggered hot reload settings."""
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_HOT_RELOAD_EXTENSIONS))
    delayed_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_DELAYED_EXTENSIONS))
    delay_seconds: float = DEFAULT_HOT_RELOAD_DELAY

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HotReloadConfig":
        return cls(
            extensions=_normalize_extensions(data.get("extensions", DEFAULT_HOT_RELOAD_EXTENSIONS)),
            delayed_extensions=_normalize_extensions(
                data.get("delayed_extensions", DEFAULT_DELAYED_EXTENSIONS)
            ),
            delay_seconds=float(data.get("delay_seconds", DEFAULT_HOT_RELOAD_DELAY)),
        )

    def should_reload(self, path: str | Path) -> bool:
        return Path(path).suffix.lower() in self.extensions

    def delay_for(self, path: str | Path) -> float:
        if Path(path).suffix.lower() in self.delayed_extensions:
            return max(0.0, self.delay_seconds)
        return 0.0


@dataclass
class BridgeConfig:
    """Main bridge configuration."""
    version: int = CURRENT_CONFIG_VERSION
    show_not_found_prompt: bool = True
    editor: EditorConfig = field(default_factory=EditorConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    hot_reload: HotReloadConfig = field(default_factory=HotReloadConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "show_not_found_prompt": self.show_not_found_prompt,
            "editor": self.editor.to_dict(),
            "http": self.http.to_dict(),
            "hot_reload": self.hot_reload.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeConfig":
        return cls(
            version=data.get("version", CURRENT_CONFIG_VERSION),
            show_not_found_prompt=bool(data.get("show_not_found_prompt", True)),
            editor=EditorConfig.from_dict(data.get("editor", {})),
            http=HttpConfig.from_dict(data.get("http", {})),
            hot_reload=HotReloadConfig.from_dict(data.get("hot_reload", {})),
        )

    def apply_env(self) -> "BridgeConfig":
        """Apply DEFOLD_* environment overrides in place."""
        log_dir = (os.environ.get("DEFOLD_EDITOR_LOG_DIR") or "").strip()
        if log_dir:
            self.editor.log_dir = log_dir
        self.http.probe_timeout = _env_float("DEFOLD_BRIDGE_PROBE_TIMEOUT", self.http.probe_timeout)
        self.http.command_timeout = _env_float("DEFOLD_BRIDGE_COMMAND_TIMEOUT", self.http.command_timeout)
        if _env_truthy("DEFOLD_BRIDGE_NO_PROMPT"):
            self.show_not_found_prompt = False
        return self


def get_config_dir() -> Path:
    """Get the bridge configuration directory."""
    return Path(os.environ.get("DEFOLD_BRIDGE_HOME", DEFAULT_CONFIG_DIR)).expanduser()


def ensure_config_dir() -> Path:
    """Ensure the configuration directory exists with proper permissions."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    config_dir.chmod(0o700)
    return config_dir


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILE


def get_state_path() -> Path:
    """Path of the persisted key-value state (last known editor port)."""
    return get_config_dir() / STATE_FILE


def load_config(path: Optional[Path] = None) -> BridgeConfig:
    """Load configuration from file and apply environment overrides."""
    config_path = path or get_config_path()
    if not config_path.exists():
        return BridgeConfig().apply_env()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")
        return BridgeConfig.from_dict(data).apply_env()
    except (json.JSONDecodeError, ValueError, TypeError, OSError) as e:
        print(f"Warning: Failed to load bridge config: {e}", file=sys.stderr)
        return BridgeConfig().apply_env()


def save_config(config: BridgeConfig, path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    if path is None:
        ensure_config_dir()
        path = get_config_path()
    else:
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
    path.chmod(0o600)


def validate_config(config: BridgeConfig) -> List[str]:
    """Validate configuration and return list of errors."""
    errors = []

    if config.http.probe_timeout <= 0:
        errors.append("http.probe_timeout must be positive")
    if config.http.command_timeout <= 0:
        errors.append("http.command_timeout must be positive")
    if config.hot_reload.delay_seconds < 0:
        errors.append("hot_reload.delay_seconds must not be negative")
    missing = [e for e in config.hot_reload.delayed_extensions if e not in config.hot_reload.extensions]
    if missing:
        errors.append(f"hot_reload.delayed_extensions not in extensions: {', '.join(missing)}")
    if not config.editor.project_file:
        errors.append("editor.project_file is required")

    return errors


def require_valid(config: BridgeConfig) -> BridgeConfig:
    errors = validate_config(config)
    if errors:
        raise BridgeError("Invalid bridge config: " + "; ".join(errors))
    return config
