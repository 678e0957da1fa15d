from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

import httpx
import openai

from commiter.exceptions import LLMError
from commiter.providers.base import BaseDriver, GenerationRequest

logger = logging.getLogger(__name__)

# Total attempts per request, first try included; the SDK performs retries.
MAX_ATTEMPTS = 3
DEFAULT_TEMPERATURE = 0.2
LEGACY_TOKEN_PARAM = "max_tokens"
CONNECT_TIMEOUT = 10.0

SYSTEM_PROMPT = "\n".join(
    [
        "You are a strict conventional commit message generator.",
        "Output ONLY: type(scope): description",
        "",
        "Rules:",
        "- types: feat fix docs style refactor test chore",
        "- subject <= 72 chars, no trailing period",
        "- describe WHAT changed, based only on the diff",
        "",
        "Return only the commit message.",
    ]
)


@dataclass(frozen=True)
class ModelQuirk:
    """Request adjustment for model ids starting with ``prefix``.

    ``token_param`` replaces the legacy ``max_tokens`` field; ``temperature``
    overrides the sampling temperature.
    """

    prefix: str
    token_param: Optional[str] = None
    temperature: Optional[float] = None

    def matches(self, model: str) -> bool:
        return model.startswith(self.prefix)

    def apply(self, payload: Dict[str, Any], max_tokens: int) -> None:
        if self.token_param:
            payload.pop(LEGACY_TOKEN_PARAM, None)
            payload[self.token_param] = max_tokens
        if self.temperature is not None:
            payload["temperature"] = self.temperature


# Every matching rule applies, in order.
MODEL_QUIRKS: tuple[ModelQuirk, ...] = (
    # Reasoning families only accept max_completion_tokens.
    ModelQuirk("o1", token_param="max_completion_tokens"),
    ModelQuirk("o3", token_param="max_completion_tokens"),
    ModelQuirk("o4", token_param="max_completion_tokens"),
    ModelQuirk("gpt-5", token_param="max_completion_tokens", temperature=1),
    # Small reasoning variants reject any temperature but the default.
    ModelQuirk("o1-mini", temperature=1),
    ModelQuirk("o3-mini", temperature=1),
    ModelQuirk("o4-mini", temperature=1),
)


def build_messages(diff_text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": diff_text},
    ]


def build_request(
    model: str,
    max_tokens: int,
    diff_text: str,
    quirks: Sequence[ModelQuirk] = MODEL_QUIRKS,
) -> Dict[str, Any]:
    """Return chat-completion keyword arguments for ``model``.

    Quirks are matched against ``model`` on every call; ids that match no
    rule get the base request unchanged.
    """
    payload: Dict[str, Any] = {
        "model": model,
        "messages": build_messages(diff_text),
        LEGACY_TOKEN_PARAM: max_tokens,
        "temperature": DEFAULT_TEMPERATURE,
        "n": 1,
    }
    for quirk in quirks:
        if quirk.matches(model):
            quirk.apply(payload, max_tokens)
    return payload


def extract_content(resp: Any) -> str:
    """Return the stripped text of the first choice.

    Handles both plain string content and the list-of-fragments shape.
    Raises LLMError when the response carries no usable text.
    """
    try:
        choice0 = resp.choices[0]
    except (AttributeError, IndexError, TypeError):
        raise LLMError("Missing choices in OpenAI response") from None

    raw_msg = getattr(choice0, "message", None)
    msg_content = getattr(raw_msg, "content", None) if raw_msg is not None else None
    content = ""
    if isinstance(msg_content, str):
        content = msg_content
    elif isinstance(msg_content, list):
        fragments: List[str] = []
        for part in msg_content:
            if isinstance(part, dict):
                txt = part.get("text") or part.get("content") or ""
            else:
                txt = getattr(part, "text", "") or getattr(part, "content", "")
            if txt:
                fragments.append(str(txt))
        content = "".join(fragments)

    logger.debug(
        "finish_reason=%s len=%d",
        getattr(choice0, "finish_reason", None),
        len(content),
    )
    content = content.strip()
    if not content:
        raise LLMError("Empty OpenAI response")
    return content


def _log_usage(resp: Any) -> None:
    usage = getattr(resp, "usage", None)
    if usage is None:
        return
    logger.debug(
        "usage prompt_tokens=%s completion_tokens=%s total_tokens=%s",
        getattr(usage, "prompt_tokens", None),
        getattr(usage, "completion_tokens", None),
        getattr(usage, "total_tokens", None),
    )


class OpenAIDriver(BaseDriver):
    """Driver for OpenAI / OpenAI-compatible chat completions."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        request_timeout: float = 60.0,
        client_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        super().__init__(api_key, base_url=base_url, request_timeout=request_timeout)
        self._client_factory = client_factory or openai.AsyncOpenAI

    def _build_client(self) -> Any:
        return self._client_factory(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=httpx.Timeout(self.request_timeout, connect=CONNECT_TIMEOUT),
            max_retries=MAX_ATTEMPTS - 1,
        )

    async def complete(self, request: GenerationRequest) -> str:
        payload = build_request(request.model, request.max_tokens, request.diff_text)
        logger.debug(
            "invoke model=%s params=%s diff_len=%d",
            request.model,
            sorted(k for k in payload if k != "messages"),
            len(request.diff_text),
        )
        async with self._build_client() as client:
            try:
                resp = await client.chat.completions.create(**payload)
            except openai.OpenAIError as exc:
                raise LLMError(f"OpenAI client error: {exc}") from exc
        _log_usage(resp)
        return extract_content(resp)
