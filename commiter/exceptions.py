"""Exception hierarchy for commiter."""


class CommiterError(Exception):
    """Base exception for all commiter errors."""


class GitError(CommiterError):
    """Raised when a mutating Git command fails."""


class LLMError(CommiterError):
    """Raised when the LLM backend cannot produce a usable message."""


class ConfigError(CommiterError):
    """Raised when the persisted configuration cannot be read or written."""
