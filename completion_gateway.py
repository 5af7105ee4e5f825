"""
Completion Gateway — sends the grounded conversation to an OpenAI-compatible
chat completions API.

Several equivalent endpoints can be configured. They are tried strictly in
order, once each, and the first 2xx response wins. Transport faults
(connection errors, timeouts) skip to the next endpoint; a malformed 2xx body
is reported as a parse failure, never as an upstream outage.
"""

import json
import time
from typing import List, Optional, Sequence, Tuple, Union

import requests

from app_config import (
    LLM_API_KEY,
    LLM_CONNECT_TIMEOUT_SECONDS,
    LLM_ENDPOINTS,
    LLM_MAX_TOKENS,
    LLM_MODEL,
    LLM_TEMPERATURE,
    LLM_TIMEOUT_SECONDS,
)
from chat_logger import get_logger, mask_secret, sanitize_log_string
from errors import ConfigurationError, ResponseParseError
from models import ChatMessage, CompletionOutcome, CompletionRequest, FailureKind

logger = get_logger("restore_chat")

NO_SUCCESSFUL_ENDPOINT = "No successful endpoint"
NO_RESPONSE_DETAIL = "No response from any endpoint"

Timeout = Union[float, Tuple[float, float]]


def extract_reply_text(body: str) -> str:
    """
    Pull ``choices[0].message.content`` out of a completion response body.

    Raises:
        ResponseParseError: body is not JSON or does not have that shape
    """
    try:
        data = json.loads(body)
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise ResponseParseError(f"{type(e).__name__}: {e}", raw_body=body) from e
    if not isinstance(content, str):
        raise ResponseParseError(
            f"Expected string content, got {type(content).__name__}", raw_body=body
        )
    return content


class CompletionGateway:
    """Chat completion client with ordered, sequential endpoint failover."""

    def __init__(
        self,
        api_key: str,
        endpoints: Sequence[str],
        model: str = LLM_MODEL,
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
        timeout: Timeout = (LLM_CONNECT_TIMEOUT_SECONDS, LLM_TIMEOUT_SECONDS),
        session: Optional[requests.Session] = None,
    ):
        if not endpoints:
            raise ConfigurationError(
                "At least one completion endpoint is required",
                title="LLM endpoints not configured",
            )
        self.api_key = api_key or ""
        self.endpoints: List[str] = list(endpoints)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, session: Optional[requests.Session] = None) -> "CompletionGateway":
        return cls(api_key=LLM_API_KEY, endpoints=LLM_ENDPOINTS, session=session)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key.strip())

    def configuration_failure(self) -> CompletionOutcome:
        return CompletionOutcome.failure(
            FailureKind.CONFIGURATION,
            ConfigurationError.title,
            "Set LLM_API_KEY before calling the chat endpoint.",
        )

    def build_request(self, messages: List[ChatMessage]) -> CompletionRequest:
        return CompletionRequest(
            model=self.model,
            messages=list(messages),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    def complete(self, messages: List[ChatMessage], request_id: str = "") -> CompletionOutcome:
        """
        Send ``messages`` and return the assistant reply.

        Args:
            messages: Full conversation, system prompt included
            request_id: Correlation id for log lines

        Returns:
            CompletionOutcome.ok(text) or a failure of kind CONFIGURATION,
            UPSTREAM_UNAVAILABLE or RESPONSE_PARSE
        """
        if not self.is_configured:
            logger.error(f"LLM API key missing | request_id={request_id}")
            return self.configuration_failure()

        payload = self.build_request(messages).to_payload()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        logger.info(
            f"LLM request | request_id={request_id} | model={self.model} | "
            f"messages={len(payload['messages'])} | endpoints={len(self.endpoints)} | "
            f"api_key={mask_secret(self.api_key)}"
        )

        last_body: Optional[str] = None
        for attempt, url in enumerate(self.endpoints, start=1):
            start_time = time.time()
            try:
                resp = self.session.post(url, headers=headers, json=payload, timeout=self.timeout)
            except requests.RequestException as e:
                logger.warning(
                    f"LLM endpoint failed | request_id={request_id} | attempt={attempt} | "
                    f"endpoint={url} | error={type(e).__name__}: {sanitize_log_string(str(e))}"
                )
                continue

            latency_ms = int((time.time() - start_time) * 1000)
            last_body = resp.text
            logger.info(
                f"LLM response | request_id={request_id} | attempt={attempt} | endpoint={url} | "
                f"status={resp.status_code} | latency_ms={latency_ms}"
            )

            if 200 <= resp.status_code < 300:
                return self._parse_success(resp.text, url, request_id)

        logger.error(
            f"LLM all endpoints failed | request_id={request_id} | "
            f"tried={len(self.endpoints)} | got_body={last_body is not None}"
        )
        return CompletionOutcome.failure(
            FailureKind.UPSTREAM_UNAVAILABLE,
            NO_SUCCESSFUL_ENDPOINT,
            last_body if last_body is not None else NO_RESPONSE_DETAIL,
            raw_body=last_body,
        )

    def _parse_success(self, body: str, url: str, request_id: str) -> CompletionOutcome:
        try:
            text = extract_reply_text(body)
        except ResponseParseError as e:
            logger.error(
                f"LLM response unparseable | request_id={request_id} | endpoint={url} | "
                f"error={e.detail} | body=\"{sanitize_log_string(body)}\""
            )
            return CompletionOutcome.failure(
                FailureKind.RESPONSE_PARSE,
                ResponseParseError.title,
                f"{e.detail} Response: {body}",
                raw_body=body,
            )
        logger.info(f"LLM reply parsed | request_id={request_id} | chars={len(text)}")
        return CompletionOutcome.ok(text, endpoint=url)
