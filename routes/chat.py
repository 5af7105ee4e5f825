"""
Chat endpoint as a Flask Blueprint.
"""

import time
from typing import List

import requests
from flask import Blueprint, request, jsonify

from catalog_store import CatalogStore
from chat_logger import get_logger
from chat_session import ChatSessionAdapter, new_request_id
from completion_gateway import CompletionGateway
from errors import CatalogAccessError, ChatPipelineError, ConfigurationError
from models import ChatMessage, CompletionOutcome, FailureKind, Role
from store_registry import get_catalog_store

logger = get_logger("restore_chat")

chat_bp = Blueprint("chat", __name__)

INVALID_REQUEST_TITLE = "Invalid chat request"

_VALID_ROLES = {r.value for r in Role}

# One connection pool for the whole process, shared by every chat request
http_session = requests.Session()


def parse_messages(raw) -> List[ChatMessage]:
    """Validate the request's ``messages`` list and convert it to ChatMessage objects."""
    if not isinstance(raw, list) or not raw:
        raise ValueError("'messages' must be a non-empty list")

    messages = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"messages[{i}] must be an object")
        role = item.get("role")
        content = item.get("content")
        if role not in _VALID_ROLES:
            raise ValueError(f"messages[{i}].role must be one of {sorted(_VALID_ROLES)}")
        if not isinstance(content, str):
            raise ValueError(f"messages[{i}].content must be a string")
        messages.append(ChatMessage(Role(role), content))
    return messages


def problem(title: str, detail: str = "", status: int = 400):
    """ProblemDetails-style error response."""
    return jsonify({"title": title, "detail": detail, "status": status}), status


def failure_for_exception(error: Exception) -> CompletionOutcome:
    """Map an exception escaping the pipeline to a failed outcome."""
    if isinstance(error, ConfigurationError):
        return CompletionOutcome.failure(FailureKind.CONFIGURATION, error.title, error.detail)
    if isinstance(error, CatalogAccessError):
        return CompletionOutcome.failure(FailureKind.CATALOG_ACCESS, error.title, error.detail)
    if isinstance(error, ChatPipelineError):
        return CompletionOutcome.failure(FailureKind.INTERNAL, error.title, error.detail)
    return CompletionOutcome.failure(FailureKind.INTERNAL, ChatPipelineError.title, str(error))


def build_session_adapter() -> ChatSessionAdapter:
    catalog = get_catalog_store() or CatalogStore()
    return ChatSessionAdapter(catalog, CompletionGateway.from_config(session=http_session))


@chat_bp.route("/chat", methods=["POST"])
def chat():
    """
    Main chat endpoint.

    Request:
        POST /api/ai/chat
        {
            "messages": [
                {"role": "user", "content": "Do you have a wool hat?"}
            ]
        }

    Response:
        200 {"message": "..."}
        400 {"title": "...", "detail": "...", "status": 400}
    """
    start_time = time.time()
    request_id = new_request_id()

    body = request.get_json(silent=True)
    try:
        messages = parse_messages(body.get("messages") if isinstance(body, dict) else None)
    except ValueError as e:
        logger.warning(f"POST /api/ai/chat | request_id={request_id} | Invalid body | error={e}")
        outcome = CompletionOutcome.failure(FailureKind.INVALID_REQUEST, INVALID_REQUEST_TITLE, str(e))
        return _failure_response(outcome, request_id, start_time)

    logger.info(f"POST /api/ai/chat | request_id={request_id} | messages={len(messages)}")

    try:
        outcome = build_session_adapter().handle(messages, request_id=request_id)
    except ChatPipelineError as e:
        logger.error(f"POST /api/ai/chat | request_id={request_id} | {e.title} | error={e.detail}")
        outcome = failure_for_exception(e)
    except Exception as e:
        logger.error(
            f"POST /api/ai/chat | request_id={request_id} | General error | error={e}",
            exc_info=True,
        )
        outcome = failure_for_exception(e)

    if not outcome.success:
        return _failure_response(outcome, request_id, start_time)

    response_time_ms = round((time.time() - start_time) * 1000)
    logger.info(
        f"POST /api/ai/chat | request_id={request_id} | status=200 | "
        f"response_time_ms={response_time_ms}"
    )
    return jsonify({"message": outcome.text}), 200


def _failure_response(outcome: CompletionOutcome, request_id: str, start_time: float):
    response_time_ms = round((time.time() - start_time) * 1000)
    logger.info(
        f"POST /api/ai/chat | request_id={request_id} | status=400 | "
        f"kind={outcome.kind.value} | response_time_ms={response_time_ms}"
    )
    return problem(outcome.title, outcome.detail)
