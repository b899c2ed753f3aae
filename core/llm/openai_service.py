"""
OpenAI Service - LLM implementation using OpenAI API.

Provides bounded-time chat completions for the remote scoring strategy.
"""
from typing import Dict, Any, Optional
import logging
import re

import openai
from openai import OpenAI
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)
from tenacity import RetryCallState
from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import MATCH_SCORING_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)

# Upper bound on any single sleep between attempts, so a Retry-After header
# cannot stall a discovery request.
MAX_RETRY_SLEEP_SECONDS = 5.0


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------

def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    if isinstance(exc, openai.RateLimitError):
        logger.warning(
            "Rate limit hit (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )
    else:
        logger.warning(
            "Transient API error (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )


def _parse_reset_duration(value: str) -> float:
    """Parse an OpenAI reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    total = 0.0
    for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value):
        a = float(amount)
        if unit == "ms":
            total += a / 1000
        elif unit == "s":
            total += a
        elif unit == "m":
            total += a * 60
        else:  # h
            total += a * 3600
    return total


def _wait_from_rate_limit_headers(exc: openai.RateLimitError) -> float:
    """Extract the longest declared wait from rate-limit response headers.

    Returns 0.0 if no usable header is present.
    """
    try:
        headers = exc.response.headers
    except AttributeError:
        return 0.0

    candidates = []
    retry_after = headers.get("retry-after", "")
    if retry_after:
        try:
            candidates.append(float(retry_after))
        except ValueError:
            pass

    for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
        parsed = _parse_reset_duration(headers.get(header, ""))
        if parsed > 0:
            candidates.append(parsed)

    return max(candidates) if candidates else 0.0


def _wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Return how long tenacity should sleep before the next attempt, capped."""
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = _wait_from_rate_limit_headers(exc)
        if wait > 0:
            return min(wait, MAX_RETRY_SLEEP_SECONDS)

    exp = wait_exponential(multiplier=0.5, min=0.5, max=MAX_RETRY_SLEEP_SECONDS)
    return exp(retry_state)


def _llm_retry(max_attempts: int, max_delay_seconds: float):
    """Return a tenacity @retry decorator bounded by attempts and total time."""
    return retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        wait=_wait_respecting_retry_after,
        stop=stop_after_attempt(max_attempts) | stop_after_delay(max_delay_seconds),
        before_sleep=_log_retry,
        reraise=True,
    )


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    Every request carries the configured client timeout; transient failures
    are retried a bounded number of times before the error propagates.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        timeout_seconds: float = 60.0,
        max_retries: int = 2
    ):
        client_kwargs = {'timeout': timeout_seconds, 'max_retries': 0}
        if api_key:
            client_kwargs['api_key'] = api_key
        if base_url:
            client_kwargs['base_url'] = base_url

        self.client = OpenAI(**client_kwargs)

        self.model_config = model_config or {}
        self.model = self.model_config.get('model', 'gpt-4o-mini')
        self.temperature = self.model_config.get('temperature', 0.3)
        self.max_tokens = self.model_config.get('max_tokens', 1000)
        self.timeout_seconds = timeout_seconds
        self.max_attempts = max(1, max_retries + 1)

    def complete(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Run a chat completion and return the first choice's text.

        Raises:
            openai.OpenAIError: on API failure after retries
            ValueError: if the response carries no content
        """
        call = _llm_retry(self.max_attempts, self.timeout_seconds * self.max_attempts)(self._complete_once)
        return call(prompt, system_prompt or MATCH_SCORING_SYSTEM_PROMPT)

    def _complete_once(self, prompt: str, system_prompt: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        if not response.choices:
            raise ValueError("No response from model")

        content = response.choices[0].message.content
        if not content:
            raise ValueError("Empty response from model")

        logger.debug(f"Model {self.model} returned {len(content)} characters")
        return content
