"""
OpenAI Service - scoring oracle backed by the OpenAI chat-completions API.

Talks to Azure OpenAI when an Azure endpoint is configured, otherwise to
api.openai.com or any OpenAI-compatible base_url.
"""
from typing import Any, Dict, Optional
import logging
import re
import threading

import openai
from openai import OpenAI, AzureOpenAI
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import RetryCallState
from core.llm.interfaces import LLMProvider
from core.llm.system_prompts import MATCH_ANALYSIS_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)

MAX_RETRY_WAIT_SECONDS = 10

_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Transient oracle error (attempt %s). Waiting %.1fs before retry. Details: %s",
        retry_state.attempt_number, wait, exc,
    )


def _parse_reset_duration(value: str) -> float:
    """Parse a reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    return sum(
        float(amount) * _DURATION_UNITS[unit]
        for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value or "")
    )


def _retry_after_seconds(exc: BaseException) -> float:
    """Longest wait declared by `retry-after` / `x-ratelimit-reset-*` headers, or 0."""
    response = getattr(exc, "response", None)
    if response is None:
        return 0.0
    headers = response.headers
    candidates = []
    try:
        candidates.append(float(headers.get("retry-after", "")))
    except ValueError:
        pass
    for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
        candidates.append(_parse_reset_duration(headers.get(header, "")))
    return max(candidates) if candidates else 0.0


def _wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Honour server-declared rate-limit timers, else exponential backoff; capped."""
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = _retry_after_seconds(exc)
        if wait > 0:
            return min(wait, MAX_RETRY_WAIT_SECONDS)
    exp = wait_exponential(multiplier=0.5, min=0.5, max=MAX_RETRY_WAIT_SECONDS)
    return exp(retry_state)


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    The client is built on first use so that a missing API key only
    degrades scoring instead of failing service start-up.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        azure_endpoint: Optional[str] = None,
        azure_deployment: Optional[str] = None,
        azure_api_version: Optional[str] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.azure_endpoint = azure_endpoint
        self.azure_deployment = azure_deployment
        self.azure_api_version = azure_api_version

        self.model_config = model_config or {}
        self.model_name = self.model_config.get('model', 'gpt-4o-mini')
        self.temperature = self.model_config.get('temperature', 0.2)
        self.max_tokens = self.model_config.get('max_tokens', 2000)
        self.timeout_seconds = self.model_config.get('timeout_seconds', 60.0)
        self.max_attempts = self.model_config.get('max_retries', 3)

        self.client = None
        self._client_lock = threading.Lock()

    @classmethod
    def from_config(cls, llm_config) -> "OpenAIService":
        return cls(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model_config=llm_config.model_dump(),
            azure_endpoint=llm_config.azure_endpoint,
            azure_deployment=llm_config.azure_deployment,
            azure_api_version=llm_config.azure_api_version,
        )

    def _get_client(self):
        # called from orchestrator worker threads
        with self._client_lock:
            if self.client is None:
                self.client = self._build_client()
        return self.client

    def _build_client(self):
        if self.azure_endpoint:
            return AzureOpenAI(
                api_key=self.api_key,
                azure_endpoint=self.azure_endpoint,
                azure_deployment=self.azure_deployment,
                api_version=self.azure_api_version,
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        client_kwargs = {'timeout': self.timeout_seconds, 'max_retries': 0}
        if self.api_key:
            client_kwargs['api_key'] = self.api_key
        if self.base_url:
            client_kwargs['base_url'] = self.base_url
        return OpenAI(**client_kwargs)

    def generate_response(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        system_prompt: Optional[str] = None
    ) -> str:
        """Run one chat completion and return the raw message text."""
        messages = [
            {"role": "system", "content": system_prompt or MATCH_ANALYSIS_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        @retry(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            wait=_wait_respecting_retry_after,
            stop=stop_after_attempt(self.max_attempts),
            before_sleep=_log_retry,
            reraise=True,
        )
        def _complete():
            return self._get_client().chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=self.max_tokens if max_tokens is None else max_tokens,
            )

        response = _complete()
        content = response.choices[0].message.content
        if content is None:
            raise ValueError("Oracle returned an empty completion")
        return content

    def test_connection(self) -> bool:
        try:
            reply = self.generate_response(
                'Hello, this is a test. Please respond with "Connection successful!"',
                temperature=0.1,
                max_tokens=50,
            )
            return "connection successful" in reply.lower()
        except Exception as e:
            logger.warning(f"Oracle connection test failed: {e}")
            return False
