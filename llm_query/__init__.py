"""
llm_query — prompt assembly and the Gemini text-generation client.

Public API:
  GeminiClient(api_key, model, policy).generate(prompt) -> str
  with_retries(fn, policy, sleep)                       -> T
  build_unit_prompt(unit)                               -> str
  build_regional_prompt(units)                          -> str
"""

from .gemini import (
    DEFAULT_MODEL,
    DailyQuotaExceeded,
    GeminiClient,
    RateLimitedError,
    RetryPolicy,
    TextGenerator,
    with_retries,
)
from .prompt import (
    REGIONAL_TEMPLATE_PATH,
    UNIT_TEMPLATE_PATH,
    build_regional_prompt,
    build_unit_prompt,
    format_nps_context,
)

__all__ = [
    "DEFAULT_MODEL",
    "DailyQuotaExceeded",
    "GeminiClient",
    "RateLimitedError",
    "RetryPolicy",
    "TextGenerator",
    "with_retries",
    "REGIONAL_TEMPLATE_PATH",
    "UNIT_TEMPLATE_PATH",
    "build_regional_prompt",
    "build_unit_prompt",
    "format_nps_context",
]
