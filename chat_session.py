"""
Chat session adapter — runs one chat request through the pipeline:

    last user message → keywords → catalog retrieval → system prompt
    → (prepend if caller sent none) → completion gateway → reply text
"""

import uuid
from typing import List, Optional

from catalog_retriever import get_relevant_products
from chat_logger import get_logger, sanitize_log_string
from errors import CatalogAccessError
from keyword_extractor import extract_keywords
from models import ChatMessage, CompletionOutcome, FailureKind, Role
from prompt_composer import build_system_prompt

logger = get_logger("restore_chat")


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def last_user_message(messages: List[ChatMessage]) -> str:
    for message in reversed(messages):
        if message.role == Role.USER:
            return message.content
    return ""


class ChatSessionAdapter:
    """Grounds a caller's conversation in the catalog and asks the LLM for a reply."""

    def __init__(self, catalog, gateway):
        self.catalog = catalog
        self.gateway = gateway

    def prepare_messages(self, messages: List[ChatMessage], request_id: str) -> List[ChatMessage]:
        """Return the conversation to send upstream, system prompt included."""
        if any(m.role == Role.SYSTEM for m in messages):
            logger.info(f"Caller supplied system message | request_id={request_id}")
            return list(messages)

        query = last_user_message(messages)
        tags = extract_keywords(query)
        logger.info(
            f"Keywords extracted | request_id={request_id} | "
            f"message=\"{sanitize_log_string(query)}\" | tags={[t.value for t in tags]}"
        )
        result = get_relevant_products(tags, self.catalog, request_id=request_id)
        system_prompt = build_system_prompt(result.items, query)
        return [ChatMessage(Role.SYSTEM, system_prompt)] + list(messages)

    def handle(self, messages: List[ChatMessage], request_id: Optional[str] = None) -> CompletionOutcome:
        request_id = request_id or new_request_id()
        logger.info(f"Chat request | request_id={request_id} | messages={len(messages)}")

        # Fail before touching the catalog or the network
        if not self.gateway.is_configured:
            logger.error(f"LLM API key missing | request_id={request_id}")
            return self.gateway.configuration_failure()

        try:
            outgoing = self.prepare_messages(messages, request_id)
        except CatalogAccessError as e:
            logger.error(f"Catalog access failed | request_id={request_id} | error={e.detail}")
            return CompletionOutcome.failure(FailureKind.CATALOG_ACCESS, e.title, e.detail)

        outcome = self.gateway.complete(outgoing, request_id=request_id)
        if outcome.success:
            logger.info(f"Chat reply ready | request_id={request_id} | endpoint={outcome.endpoint}")
        else:
            logger.warning(
                f"Chat request failed | request_id={request_id} | kind={outcome.kind.value} | "
                f"title={outcome.title}"
            )
        return outcome
