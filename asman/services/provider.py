"""Claude provider client.

Invokes the Anthropic Messages API and reports the outcome as a tagged
result instead of raising:

* :class:`RawText`: Claude answered with text.
* :class:`Unavailable`: no API key configured; the service runs fallback-only.
* :class:`Failure`: every attempt failed (network, status/quota, timeout,
  empty response).

Retry policy: ``max_retries`` attempts with exponential back-off
(1 s → 2 s → 4 s). Each attempt is bounded by ``timeout_seconds`` so a call
always resolves exactly once.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol, Union

import anthropic

from asman.config import Settings, get_settings
from asman.enums import Variant
from asman.exceptions import LessonGenerationError
from asman.services.prompt_builder import UPLOAD_SYSTEM_INSTRUCTION, system_instruction_for

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BACKOFF_BASE_SECONDS = 1  # wait = _BACKOFF_BASE_SECONDS * 2^(attempt-1)
_UPLOAD_MAX_TOKENS = 400


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RawText:
    """Successful call; ``text`` is expected to hold a JSON object."""

    text: str


@dataclass(frozen=True)
class Unavailable:
    """No credential configured."""

    reason: str = "ANTHROPIC_API_KEY is not configured"


@dataclass(frozen=True)
class Failure:
    """Every attempt failed."""

    reason: str
    attempts: int = 1


ProviderResult = Union[RawText, Unavailable, Failure]


class LessonProvider(Protocol):
    """Anything the pipeline can ask for lesson text."""

    @property
    def is_configured(self) -> bool: ...

    async def generate(self, instruction: str, variant: Variant) -> ProviderResult: ...

    async def summarize(self, instruction: str) -> ProviderResult: ...


# ---------------------------------------------------------------------------
# Anthropic client
# ---------------------------------------------------------------------------


class AnthropicLessonProvider:
    """Claude-backed :class:`LessonProvider`.

    Args:
        api_key: Anthropic API key; empty means :class:`Unavailable`.
        model: Claude model name.
        max_tokens: Completion token cap for lesson generation.
        timeout_seconds: Upper bound for one attempt.
        max_retries: Number of attempts before reporting :class:`Failure`.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-6",
        max_tokens: int = 4096,
        timeout_seconds: float = 45.0,
        max_retries: int = 2,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds
        self.max_retries = max(1, max_retries)
        self._client: anthropic.AsyncAnthropic | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AnthropicLessonProvider":
        """Build a provider from application settings (read once at startup)."""
        settings = settings or get_settings()
        return cls(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            max_tokens=settings.max_tokens,
            timeout_seconds=settings.request_timeout_seconds,
            max_retries=settings.max_retries,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Build the SDK client on first use and reuse it for every attempt."""
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._api_key,
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the SDK client's HTTP connection pool, if one was opened."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate(self, instruction: str, variant: Variant) -> ProviderResult:
        """Ask Claude for a lesson.

        Args:
            instruction: Output of the request builder.
            variant: Selects the persona system instruction.

        Returns:
            :class:`RawText`, :class:`Unavailable` or :class:`Failure`.
        """
        return await self._invoke(
            instruction,
            system=system_instruction_for(variant),
            max_tokens=self.max_tokens,
        )

    async def summarize(self, instruction: str) -> ProviderResult:
        """Ask Claude for a short plain-text answer (upload analysis)."""
        return await self._invoke(
            instruction,
            system=UPLOAD_SYSTEM_INSTRUCTION,
            max_tokens=_UPLOAD_MAX_TOKENS,
        )

    # ------------------------------------------------------------------
    # Claude API calls with retry
    # ------------------------------------------------------------------

    async def _invoke(self, prompt: str, system: str, max_tokens: int) -> ProviderResult:
        if not self.is_configured:
            logger.info("Anthropic API key not configured; using fallback content")
            return Unavailable()

        last_exc: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                text = await self._call_claude(prompt, system, max_tokens, attempt)
                return RawText(text=text)
            except LessonGenerationError as exc:
                last_exc = exc
                logger.warning(
                    "Claude API attempt %d/%d failed: %s", attempt, self.max_retries, exc
                )
                if attempt < self.max_retries:
                    wait = _BACKOFF_BASE_SECONDS * (2 ** (attempt - 1))
                    logger.info("Retrying in %.1f seconds…", wait)
                    await asyncio.sleep(wait)

        msg = str(last_exc) if last_exc else "Unknown error"
        return Failure(
            reason=f"Claude call failed after {self.max_retries} attempts: {msg}",
            attempts=self.max_retries,
        )

    async def _call_claude(
        self, prompt: str, system: str, max_tokens: int, attempt: int = 1
    ) -> str:
        """Make a single Claude API call and return the first text block.

        Raises:
            LessonGenerationError: On status/connection errors, timeout, or an
                empty response.
        """
        logger.debug("Calling Claude API (attempt %d, model=%s)", attempt, self.model)

        client = self._get_client()
        try:
            message = await asyncio.wait_for(
                client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise LessonGenerationError(
                f"Claude API timed out after {self.timeout_seconds:.0f}s", attempt
            ) from exc
        except anthropic.APIStatusError as exc:
            raise LessonGenerationError(
                f"Claude API status error {exc.status_code}: {exc.message}", attempt
            ) from exc
        except anthropic.APIConnectionError as exc:
            raise LessonGenerationError(
                f"Claude API connection error: {exc}", attempt
            ) from exc
        except anthropic.APIError as exc:
            raise LessonGenerationError(f"Claude API error: {exc}", attempt) from exc

        raw_text = ""
        for block in message.content:
            text = getattr(block, "text", None)
            if isinstance(text, str) and text.strip():
                raw_text = text
                break

        if not raw_text:
            raise LessonGenerationError("Claude returned an empty response", attempt)

        return raw_text
