"""notesift configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (NOTESIFT_ANALYSIS_MODEL, NOTESIFT_TRANSCRIPTION_MODEL,
                             NOTESIFT_CATEGORY)
  3. Per-project notesift.yaml  (in the working directory)
  4. Global ~/.notesift/config.yaml  (defaults only — no API keys)
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

from notesift.ingest.audio import MAX_TRANSCRIPTION_BYTES

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".notesift"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "notesift.yaml"

# Key names that look like credentials. Does not match max_tokens.
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

_KNOWN_SECTIONS: frozenset[str] = frozenset(["notes", "analysis", "transcription", "pipeline"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class NotesCfg:
    """Note output configuration (notesift.yaml: notes:)."""

    category: str = "Uploads"


@dataclass
class AnalysisCfg:
    """Transcript analysis configuration (notesift.yaml: analysis:).

    When disabled, or when the model call fails, the keyword heuristics are
    used instead.
    """

    enabled: bool = True
    model: str = "openai/gpt-4o-mini"
    max_tokens: int = 500


@dataclass
class TranscriptionCfg:
    """Speech-to-text configuration (notesift.yaml: transcription:)."""

    enabled: bool = False
    model: str = "openai/whisper-1"
    max_bytes: int = MAX_TRANSCRIPTION_BYTES


@dataclass
class PipelineCfg:
    workers: int = 1


@dataclass
class NotesiftConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    notes: NotesCfg = field(default_factory=NotesCfg)
    analysis: AnalysisCfg = field(default_factory=AnalysisCfg)
    transcription: TranscriptionCfg = field(default_factory=TranscriptionCfg)
    pipeline: PipelineCfg = field(default_factory=PipelineCfg)


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


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a YAML mapping at the top level.")
    return raw


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


def _cfg_from_dict(data: dict[str, Any]) -> NotesiftConfig:
    """Build a *NotesiftConfig* from a merged raw YAML dict."""
    cfg = NotesiftConfig()

    try:
        if "notes" in data:
            n = data["notes"] or {}
            cfg.notes = NotesCfg(category=str(n.get("category", cfg.notes.category)))

        if "analysis" in data:
            a = data["analysis"] or {}
            cfg.analysis = AnalysisCfg(
                enabled=bool(a.get("enabled", cfg.analysis.enabled)),
                model=str(a.get("model", cfg.analysis.model)),
                max_tokens=int(a.get("max_tokens", cfg.analysis.max_tokens)),
            )

        if "transcription" in data:
            t = data["transcription"] or {}
            cfg.transcription = TranscriptionCfg(
                enabled=bool(t.get("enabled", cfg.transcription.enabled)),
                model=str(t.get("model", cfg.transcription.model)),
                max_bytes=int(t.get("max_bytes", cfg.transcription.max_bytes)),
            )

        if "pipeline" in data:
            p = data["pipeline"] or {}
            cfg.pipeline = PipelineCfg(workers=int(p.get("workers", cfg.pipeline.workers)))
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Invalid config value: {exc}") from exc

    if cfg.pipeline.workers < 1:
        raise ConfigError(f"pipeline.workers must be >= 1, got {cfg.pipeline.workers}")
    if not cfg.notes.category.strip():
        raise ConfigError("notes.category must not be empty")

    return cfg


def _apply_env_overrides(cfg: NotesiftConfig) -> NotesiftConfig:
    """Apply NOTESIFT_* environment variable overrides."""
    if model := os.environ.get("NOTESIFT_ANALYSIS_MODEL"):
        cfg.analysis.model = model
    if model := os.environ.get("NOTESIFT_TRANSCRIPTION_MODEL"):
        cfg.transcription.model = model
    if category := os.environ.get("NOTESIFT_CATEGORY"):
        cfg.notes.category = category
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> NotesiftConfig:
    """Load and return a merged *NotesiftConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *notesift.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If global config contains API-key-like fields, or a
            value has the wrong type.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    return _apply_env_overrides(cfg)


def ensure_global_config(
    global_config_path: Path | None = None,
) -> Path:
    """Create ``~/.notesift/config.yaml`` with defaults if it does not exist.

    Creates the parent directory with mode 0o700 and the config file with
    mode 0o600 (owner-readable only).
    """
    target = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    if not target.exists():
        content = (
            "# notesift global configuration: defaults only.\n"
            "# NEVER store API keys here. Use environment variables:\n"
            "#   export OPENAI_API_KEY=sk-...\n"
            "\n"
            "notes:\n"
            "  category: Uploads\n"
            "\n"
            "analysis:\n"
            "  enabled: true\n"
            "  model: openai/gpt-4o-mini\n"
            "\n"
            "transcription:\n"
            "  enabled: false\n"
            "  model: openai/whisper-1\n"
        )
        target.write_text(content, encoding="utf-8")
        target.chmod(0o600)

    return target
