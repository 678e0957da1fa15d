"""commiter - commit staged changes with a synthesized message."""

from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "0.1.0"

# Public API (lazy-exported to avoid importing the OpenAI SDK on package import)
__all__ = [
    # Config
    "Config", "load_config",
    # Changes
    "StagedChange", "build_deterministic_message", "build_fallback_message",
    # Git
    "GitRepo",
    # Engine
    "CommitMessageEngine",
    # Exceptions
    "CommiterError", "GitError", "LLMError", "ConfigError",
]


def __getattr__(name: str):
    """Lazy attribute loader for the public API."""
    mapping = {
        "Config": ("commiter.config", "Config"),
        "load_config": ("commiter.config", "load_config"),
        "StagedChange": ("commiter.changes", "StagedChange"),
        "build_deterministic_message": (
            "commiter.changes",
            "build_deterministic_message",
        ),
        "build_fallback_message": ("commiter.changes", "build_fallback_message"),
        "GitRepo": ("commiter.git", "GitRepo"),
        "CommitMessageEngine": ("commiter.commit", "CommitMessageEngine"),
        "CommiterError": ("commiter.exceptions", "CommiterError"),
        "GitError": ("commiter.exceptions", "GitError"),
        "LLMError": ("commiter.exceptions", "LLMError"),
        "ConfigError": ("commiter.exceptions", "ConfigError"),
    }
    if name in mapping:
        mod_name, attr = mapping[name]
        mod = import_module(mod_name)
        value = getattr(mod, attr)
        globals()[name] = value  # cache for future access
        return value
    raise AttributeError(f"module 'commiter' has no attribute {name!r}")


if TYPE_CHECKING:
    from .changes import (
        StagedChange,
        build_deterministic_message,
        build_fallback_message,
    )
    from .commit import CommitMessageEngine
    from .config import Config, load_config
    from .exceptions import CommiterError, ConfigError, GitError, LLMError
    from .git import GitRepo
