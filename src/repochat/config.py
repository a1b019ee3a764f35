"""repochat configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (REPOCHAT_MODEL, REPOCHAT_GITHUB_API, REPOCHAT_DB)
  3. Per-project repochat.yaml  (current directory)
  4. Global ~/.repochat/config.yaml  (defaults only — no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from repochat.errors import RepoChatError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".repochat"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "repochat.yaml"

# Matches api_key, apikey, api-key, api_secret, *_token, token, *_secret,
# secret, password, passwd, credential(s). Does NOT match max_output_tokens.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(["ingest", "chat", "store"])

# Source, markup, config and documentation formats. No binary formats.
DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "js", "jsx", "ts", "tsx", "py", "java", "cpp", "c", "h",
    "cs", "go", "rs", "php", "rb", "swift", "kt", "scala",
    "html", "css", "scss", "sass", "vue", "svelte", "md",
    "json", "yaml", "yml", "xml", "sql", "sh", "bash",
)

DEFAULT_GITHUB_API = "https://api.github.com"
DEFAULT_DB_PATH = ".repochat.db"
DEFAULT_HISTORY_WINDOW = 10


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(RepoChatError, ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class IngestCfg:
    """Crawler configuration (repochat.yaml: ingest:).

    Attributes:
        extensions: Allowlisted file extensions, lower-case, without the dot.
        api_base: Base URL of the GitHub REST API.
        timeout: Per-request timeout in seconds. None waits indefinitely.
        user_agent: User-Agent header sent with every request.
    """

    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    api_base: str = DEFAULT_GITHUB_API
    timeout: float | None = None
    user_agent: str = "repochat/0.1"


@dataclass
class ChatCfg:
    """Context assembly and generation settings (repochat.yaml: chat:)."""

    model: str = "gemini/gemini-2.0-flash"
    history_window: int = DEFAULT_HISTORY_WINDOW
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 2048


@dataclass
class StoreCfg:
    """Record store location (repochat.yaml: store:)."""

    path: str = DEFAULT_DB_PATH


@dataclass
class RepoChatConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    ingest: IngestCfg = field(default_factory=IngestCfg)
    chat: ChatCfg = field(default_factory=ChatCfg)
    store: StoreCfg = field(default_factory=StoreCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _parse_extensions(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        raise ConfigError(f"ingest.extensions must be a list, got {type(raw).__name__}")
    return tuple(str(e).lower().lstrip(".") for e in raw if str(e).strip())


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> RepoChatConfig:
    """Build a *RepoChatConfig* from a merged raw YAML dict."""
    cfg = RepoChatConfig()

    if "ingest" in data:
        i = data["ingest"] or {}
        timeout = i.get("timeout", cfg.ingest.timeout)
        cfg.ingest = IngestCfg(
            extensions=(
                _parse_extensions(i["extensions"])
                if "extensions" in i
                else cfg.ingest.extensions
            ),
            api_base=str(i.get("api_base", cfg.ingest.api_base)).rstrip("/"),
            timeout=float(timeout) if timeout is not None else None,
            user_agent=str(i.get("user_agent", cfg.ingest.user_agent)),
        )

    if "chat" in data:
        c = data["chat"] or {}
        cfg.chat = ChatCfg(
            model=str(c.get("model", cfg.chat.model)),
            history_window=int(c.get("history_window", cfg.chat.history_window)),
            temperature=float(c.get("temperature", cfg.chat.temperature)),
            top_k=int(c.get("top_k", cfg.chat.top_k)),
            top_p=float(c.get("top_p", cfg.chat.top_p)),
            max_output_tokens=int(c.get("max_output_tokens", cfg.chat.max_output_tokens)),
        )
        if cfg.chat.history_window < 0:
            raise ConfigError("chat.history_window must be >= 0")

    if "store" in data:
        s = data["store"] or {}
        cfg.store = StoreCfg(path=str(s.get("path", cfg.store.path)))

    return cfg


def _apply_env_overrides(cfg: RepoChatConfig) -> RepoChatConfig:
    """Apply REPOCHAT_* environment variable overrides."""
    if model := os.environ.get("REPOCHAT_MODEL"):
        cfg.chat.model = model
    if api_base := os.environ.get("REPOCHAT_GITHUB_API"):
        cfg.ingest.api_base = api_base.rstrip("/")
    if db_path := os.environ.get("REPOCHAT_DB"):
        cfg.store.path = db_path
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> RepoChatConfig:
    """Load and return a merged *RepoChatConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *repochat.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If global config contains API-key-like fields or a
            value has the wrong shape.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    return _apply_env_overrides(cfg)


def global_config_path() -> Path:
    """Location of the global defaults file (~/.repochat/config.yaml)."""
    return _GLOBAL_CONFIG_PATH


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.repochat/config.yaml`` with defaults if it does not exist.

    Creates parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# repochat global configuration — defaults only.\n"
            "# NEVER store API keys here — use environment variables:\n"
            "#   export GEMINI_API_KEY=...\n"
            "\n"
            "chat:\n"
            "  model: gemini/gemini-2.0-flash\n"
            "  history_window: 10\n"
            "\n"
            "ingest:\n"
            "  api_base: https://api.github.com\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
