"""Configuration management for commiter."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigError

CONFIG_FILE_NAME = ".commiter-config.json"
CONFIG_HOME_ENV = "COMMITER_CONFIG_HOME"

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 256
DEFAULT_REQUEST_TIMEOUT = 60.0

_STRING_FIELDS = ("api_key", "model", "base_url")


@dataclass
class Config:
    """Runtime configuration for commiter.

    The engine only reads these values; the CLI setup flags write them.
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    base_url: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def has_llm_credentials(self) -> bool:
        """Return True when both an API key and a model are set."""
        return bool(self.api_key and self.api_key.strip() and self.model)

    def masked_api_key(self) -> str:
        if not self.api_key:
            return "Not set"
        return "***" + self.api_key[-4:]

    def to_dict(self) -> Dict[str, Any]:
        """Serialise configuration to a dict for persistence."""
        return asdict(self)


def config_file_path() -> Path:
    """Return the location of the persisted JSON configuration."""
    home = os.environ.get(CONFIG_HOME_ENV)
    base = Path(home).expanduser() if home else Path.home()
    return base / CONFIG_FILE_NAME


def _resolve(path: Optional[Path]) -> Path:
    return Path(path).expanduser() if path is not None else config_file_path()


def load_persisted_config(path: Optional[Path] = None) -> Optional[Config]:
    cfg_path = _resolve(path)
    if not cfg_path.exists():
        return None
    try:
        data = json.loads(cfg_path.read_text())
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Unable to read config {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {cfg_path} must contain a JSON object")
    known = set(Config.__dataclass_fields__)
    values = {k: v for k, v in data.items() if k in known}
    for key in _STRING_FIELDS:
        value = values.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(
                f"Config {cfg_path}: {key} must be a string, "
                f"got {type(value).__name__}"
            )
    cfg = Config(**values)
    cfg.max_tokens = _as_int(cfg.max_tokens, DEFAULT_MAX_TOKENS)
    cfg.request_timeout = _as_float(cfg.request_timeout, DEFAULT_REQUEST_TIMEOUT)
    return cfg


def save_config(config: Config, path: Optional[Path] = None) -> None:
    """Persist configuration JSON."""
    cfg_path = _resolve(path)
    try:
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        cfg_path.write_text(json.dumps(config.to_dict(), indent=2))
    except OSError as exc:
        raise ConfigError(f"Unable to write config {cfg_path}: {exc}") from exc


def _as_int(value: Any, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _as_float(value: Any, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def load_config(
    *,
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Config:
    """Build configuration from config file, environment and overrides."""

    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    persisted = load_persisted_config(path) or Config()

    api_key = (
        overrides.get("api_key")
        or os.environ.get("COMMITER_API_KEY")
        or persisted.api_key
        or os.environ.get("OPENAI_API_KEY")
    )
    model = (
        overrides.get("model")
        or os.environ.get("COMMITER_MODEL")
        or persisted.model
        or DEFAULT_MODEL
    )
    override_tokens = overrides.get("max_tokens")
    if override_tokens is not None and _as_int(override_tokens, 0) <= 0:
        raise ConfigError(
            f"max_tokens must be a positive integer, got {override_tokens!r}"
        )
    max_tokens = _as_int(
        override_tokens
        or os.environ.get("COMMITER_MAX_TOKENS")
        or persisted.max_tokens,
        DEFAULT_MAX_TOKENS,
    )
    base_url = (
        overrides.get("base_url")
        or os.environ.get("COMMITER_BASE_URL")
        or persisted.base_url
    )
    request_timeout = _as_float(
        overrides.get("request_timeout")
        or os.environ.get("COMMITER_REQUEST_TIMEOUT")
        or persisted.request_timeout,
        DEFAULT_REQUEST_TIMEOUT,
    )

    return Config(
        api_key=api_key or None,
        model=str(model),
        max_tokens=max_tokens,
        base_url=base_url or None,
        request_timeout=request_timeout,
    )


def _update_persisted(path: Optional[Path], **changes: Any) -> Config:
    config = load_persisted_config(path) or Config()
    for key, value in changes.items():
        setattr(config, key, value)
    save_config(config, path)
    return config


def set_api_key(api_key: str, path: Optional[Path] = None) -> Config:
    return _update_persisted(path, api_key=api_key.strip() or None)


def set_model(model: str, path: Optional[Path] = None) -> Config:
    return _update_persisted(path, model=model.strip() or DEFAULT_MODEL)


def set_max_tokens(max_tokens: int, path: Optional[Path] = None) -> Config:
    if max_tokens <= 0:
        raise ConfigError("max_tokens must be a positive integer")
    return _update_persisted(path, max_tokens=max_tokens)


def describe_config(config: Config) -> str:
    return "\n".join(
        [
            f"API Key: {config.masked_api_key()}",
            f"Model: {config.model or 'Not set'}",
            f"Max tokens: {config.max_tokens}",
        ]
    )
