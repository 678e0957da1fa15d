"""Commit message synthesis engine for commiter."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .changes import (
    NO_STAGED_CHANGES,
    build_deterministic_message,
    build_fallback_message,
)
from .config import Config
from .git import GitRepo
from .providers.base import BaseDriver, GenerationRequest
from .providers.openai_driver import OpenAIDriver

logger = logging.getLogger(__name__)

DriverFactory = Callable[..., BaseDriver]


class CommitMessageEngine:
    """Produces commit messages for the staged changes of ``repo``.

    Every public method returns a usable string; LLM failures degrade to
    the fallback heuristic and are only logged.
    """

    def __init__(
        self,
        repo: GitRepo,
        config: Optional[Config] = None,
        driver_factory: DriverFactory = OpenAIDriver,
    ) -> None:
        self.repo = repo
        self.config = config or Config()
        self._driver_factory = driver_factory

    def has_llm_config(self) -> bool:
        return self.config.has_llm_credentials()

    def generate_deterministic(self, max_files_per_category: int = 5) -> str:
        """Summarise the staged files without any network access."""
        changes = self.repo.list_staged_changes()
        return build_deterministic_message(changes, max_files_per_category)

    def generate_fallback(self) -> str:
        return build_fallback_message(self.repo.list_staged_changes())

    async def generate(
        self,
        api_key: str,
        model: str,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Ask the LLM for a message describing the staged diff.

        A blank diff short-circuits without a network call. Any error,
        including an empty completion, yields :meth:`generate_fallback`.
        """
        config = self.config
        budget = max_tokens if max_tokens is not None else config.max_tokens
        try:
            diff = self.repo.get_staged_diff()
            if not diff.strip():
                return NO_STAGED_CHANGES
            request = GenerationRequest(model=model, max_tokens=budget, diff_text=diff)
            driver = self._driver_factory(
                api_key,
                base_url=config.base_url,
                request_timeout=config.request_timeout,
            )
            message = await driver.complete(request)
            if not message or not message.strip():
                raise ValueError("driver returned an empty message")
        except Exception as exc:  # noqa: BLE001 - every failure falls back
            logger.warning("LLM generation failed, using fallback: %s", exc)
            return self.generate_fallback()

        logger.debug("LLM message accepted model=%s len=%d", model, len(message))
        return message

    async def suggest(self, max_files_per_category: int = 5) -> str:
        """Use the LLM when credentials are configured, else summarise locally."""
        config = self.config
        if config.has_llm_credentials():
            return await self.generate(
                str(config.api_key), config.model, config.max_tokens
            )
        logger.debug("no LLM credentials configured; deterministic path")
        return self.generate_deterministic(max_files_per_category)
