from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs for one LLM synthesis call; built fresh per call."""

    model: str
    max_tokens: int
    diff_text: str

    def __post_init__(self) -> None:
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


class BaseDriver(ABC):
    """Abstract base for provider-specific commit generation.

    Each driver encapsulates one provider's client call patterns and
    parameter semantics. Transport retries belong to the driver's client;
    fallback decisions belong to the engine.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        request_timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.request_timeout = request_timeout

    @abstractmethod
    async def complete(self, request: GenerationRequest) -> str:
        """Return the stripped, non-empty message text for ``request``.

        Must raise LLMError (or let the SDK's exception propagate) when no
        usable text is produced; the engine converts every failure into a
        fallback message.
        """
        raise NotImplementedError
