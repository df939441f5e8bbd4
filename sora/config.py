"""Load extractor configuration from YAML with env var substitution."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SoraBot/1.0; +https://sora.app)"


@dataclass(frozen=True)
class FetchSettings:
    """Bounds applied to the single outbound request of an extraction."""

    timeout_seconds: float = 10.0
    max_bytes: int = 5 * 1024 * 1024
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class ExtractSettings:
    """Length caps and options for field extraction."""

    max_title_length: int = 200
    max_content_length: int = 100_000
    excerpt_length: int = 300
    resolve_relative_images: bool = False


_ENV_REF = re.compile(r"\$\{([^}]+)\}")


def _load_dotenv(path: str | Path = ".env") -> None:
    """Export KEY=value lines from a dotenv file; the real environment wins."""
    env_path = Path(path)
    if not env_path.is_file():
        return
    for line in env_path.read_text().splitlines():
        key, sep, value = line.strip().partition("=")
        if not sep or key.startswith("#"):
            continue
        key = key.strip()
        if key:
            os.environ.setdefault(key, value.strip().strip("'\""))


def _resolve_env_vars(value: Any) -> Any:
    """Expand ${VAR} references in string leaves; unset vars become ''."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]
    return value


def load_config(path: str | Path = "config.yaml") -> dict[str, Any]:
    """Read the YAML config, expanding ${VAR} from the environment and .env.

    Settings that resolve to an empty string (an unset variable) fall back to
    the built-in defaults in the ``get_*_settings`` accessors.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    _load_dotenv()
    raw = yaml.safe_load(path.read_text())
    return _resolve_env_vars(raw or {})


def get_fetch_settings(config: dict | None) -> FetchSettings:
    """Build fetch bounds from the ``fetch`` section, falling back to defaults."""
    cfg = (config or {}).get("fetch") or {}
    defaults = FetchSettings()
    return FetchSettings(
        timeout_seconds=float(cfg.get("timeout_seconds", defaults.timeout_seconds)),
        max_bytes=int(cfg.get("max_bytes", defaults.max_bytes)),
        user_agent=cfg.get("user_agent") or defaults.user_agent,
    )


def get_extract_settings(config: dict | None) -> ExtractSettings:
    """Build extraction caps from the ``extract`` section."""
    cfg = (config or {}).get("extract") or {}
    defaults = ExtractSettings()
    return ExtractSettings(
        max_title_length=int(cfg.get("max_title_length", defaults.max_title_length)),
        max_content_length=int(
            cfg.get("max_content_length", defaults.max_content_length),
        ),
        excerpt_length=int(cfg.get("excerpt_length", defaults.excerpt_length)),
        resolve_relative_images=bool(
            cfg.get("resolve_relative_images", defaults.resolve_relative_images),
        ),
    )


def get_log_settings(config: dict | None) -> dict:
    """Return log level name and optional log file path."""
    cfg = (config or {}).get("logging") or {}
    return {
        "level": str(cfg.get("level", "INFO")).upper(),
        "file": cfg.get("file") or None,
    }
