"""
llm_query/gemini.py — Gemini text-generation client.

The client is built explicitly with its configuration (API key, model,
retry policy) and handed to whoever needs it; nothing is read from the
environment here.

Retry policy: a 429 (rate-limit) response is retried up to max_retries
times with exponential backoff (10 s, 20 s, 40 s by default). An exhausted
daily quota is not retried. Any other error propagates immediately.

Public API:
  GeminiClient(api_key, model, policy).generate(prompt) -> str
  with_retries(fn, policy, sleep)                       -> T
  RetryPolicy, RateLimitedError, DailyQuotaExceeded, TextGenerator
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeVar, cast

from google import genai as _genai
from google.genai import errors as _genai_errors

if TYPE_CHECKING:
    from pulso.config import Settings

log = logging.getLogger(__name__)

DEFAULT_MODEL   = "gemini-2.5-flash"
DEFAULT_RETRIES = 3

T = TypeVar("T")


class RateLimitedError(RuntimeError):
    """The service answered 429; transient, worth retrying."""


class DailyQuotaExceeded(RuntimeError):
    """The per-day quota is exhausted; retrying today will not help."""


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


class _GeminiGenerateResponse(Protocol):
    text: str | None


class _GeminiModelsAPI(Protocol):
    def generate_content(self, *, model: str, contents: str) -> _GeminiGenerateResponse:
        ...


# ---------------------------------------------------------------------------
# Retry loop
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    Backoff schedule for rate-limited calls.

    - max_retries: retries after the first attempt
    - base_delay:  wait before the first retry; doubled for each next one
    """
    max_retries: int = DEFAULT_RETRIES
    base_delay: float = 10.0

    def delays(self) -> Iterator[float]:
        for attempt in range(self.max_retries):
            yield self.base_delay * 2 ** attempt


def with_retries(
    fn: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Calls fn() and retries it while it raises RateLimitedError.

    Raises the last RateLimitedError once the schedule is exhausted.
    """
    delays = policy.delays()
    attempt = 0
    while True:
        try:
            return fn()
        except RateLimitedError:
            delay = next(delays, None)
            if delay is None:
                raise
            attempt += 1
            log.warning(
                "429 rate-limit, waiting %.0fs (retry %d/%d)",
                delay, attempt, policy.max_retries,
            )
            sleep(delay)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

def _is_daily_quota(error: Exception) -> bool:
    return "PerDay" in str(error)


class GeminiClient:
    """
    Text generation over google-genai.

    Args:
        api_key: Gemini API key.
        model:   model id (default gemini-2.5-flash).
        policy:  retry policy for 429 responses.
        sleep:   wait function (replaced in tests).
        client:  ready genai.Client; built from api_key when None.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        client: _genai.Client | None = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise ValueError("Missing Gemini API key (GEMINI_API_KEY).")
            client = _genai.Client(api_key=api_key)
        self.model = model
        self.policy = policy or RetryPolicy()
        self._client = client
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, model: str | None = None) -> GeminiClient:
        return cls(
            api_key=settings.gemini_api_key,
            model=model or settings.gemini_model,
            policy=RetryPolicy(max_retries=settings.max_retries, base_delay=settings.retry_base_delay),
        )

    def generate(self, prompt: str) -> str:
        """
        Sends the prompt and returns the model's text.

        Raises:
            RateLimitedError:   still rate-limited after every retry.
            DailyQuotaExceeded: daily quota exhausted.
            google.genai.errors.APIError: any other API failure.
        """
        return with_retries(lambda: self._generate_once(prompt), self.policy, self._sleep)

    def _generate_once(self, prompt: str) -> str:
        models_api = cast(_GeminiModelsAPI, self._client.models)
        try:
            response = models_api.generate_content(model=self.model, contents=prompt)
        except _genai_errors.ClientError as exc:
            if exc.code != 429:
                raise
            if _is_daily_quota(exc):
                raise DailyQuotaExceeded(
                    f"Daily request quota for model {self.model} exhausted: {exc}"
                ) from exc
            raise RateLimitedError(str(exc)) from exc

        text = response.text
        if not text:
            raise RuntimeError("Gemini returned an empty text response.")
        return text
