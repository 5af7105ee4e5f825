"""
Pytest configuration and fixtures for restore-chat tests.

Provides an in-memory catalog with store-like product data and a fake HTTP
session that can be scripted to fail or succeed per completion endpoint.
"""

import os

# Keep test runs from writing logs/ folders
os.environ.setdefault("LOG_TO_FILE", "false")

import json
import pytest
from typing import Dict, List, Union

from catalog_store import CatalogStore
from completion_gateway import CompletionGateway
from store_registry import set_catalog_store


SAMPLE_PRODUCTS: List[Dict] = [
    {"id": 1, "name": "Angular Speedster Board 2000", "description": "Fast downhill deck.",
     "price": 200.00, "brand": "Angular", "type": "Boards", "pictureUrl": "/images/sb-ang1.png"},
    {"id": 2, "name": "Typescript Entry Board", "description": "Soft beginner board.",
     "price": 120.00, "brand": "TypeScript", "type": "Boards", "pictureUrl": "/images/sb-ts1.png"},
    {"id": 7, "name": "Core Blue Hat", "description": "Cotton baseball cap.",
     "price": 10.00, "brand": "NetCore", "type": "Hats", "pictureUrl": "/images/hat-core1.png"},
    {"id": 8, "name": "Green React Woolen Hat", "description": "Knitted merino beanie.",
     "price": 8.00, "brand": "React", "type": "Hats", "pictureUrl": "/images/hat-react1.png"},
    {"id": 10, "name": "Blue Code Gloves", "description": "Insulated gloves with wool lining.",
     "price": 18.00, "brand": "VS Code", "type": "Gloves", "pictureUrl": "/images/glove-code1.png"},
    {"id": 14, "name": "Redis Red Boots", "description": "Stiff freeride boots.",
     "price": 250.00, "brand": "Redis", "type": "Boots", "pictureUrl": "/images/boot-redis1.png"},
]

COMPLETIONS_1 = "https://llm-one.test/v1/chat/completions"
COMPLETIONS_2 = "https://llm-two.test/v1/chat/completions"


def completion_body(content) -> str:
    """JSON body shaped like a chat completions success response."""
    return json.dumps({
        "id": "cmpl-test",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    })


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """
    Stand-in for requests.Session.

    ``script`` maps endpoint URL → FakeResponse, or an exception instance to
    raise for that endpoint. Every post() is recorded in ``calls``.
    """

    def __init__(self, script: Dict[str, Union[FakeResponse, Exception]]):
        self.script = script
        self.calls: List[Dict] = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        outcome = self.script[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def urls(self) -> List[str]:
        return [c["url"] for c in self.calls]


def make_gateway(script, api_key: str = "sk-test-1234", endpoints=None) -> CompletionGateway:
    endpoints = endpoints if endpoints is not None else list(script.keys())
    return CompletionGateway(
        api_key=api_key,
        endpoints=endpoints,
        model="deepseek-chat",
        temperature=0.7,
        max_tokens=800,
        timeout=(1, 2),
        session=FakeSession(script),
    )


@pytest.fixture
def sample_products() -> List[Dict]:
    return [dict(p) for p in SAMPLE_PRODUCTS]


@pytest.fixture
def catalog(sample_products) -> CatalogStore:
    return CatalogStore(sample_products)


@pytest.fixture
def empty_catalog() -> CatalogStore:
    return CatalogStore([])


@pytest.fixture
def registered_catalog(catalog):
    """Registers the sample catalog for the HTTP layer, then clears it."""
    set_catalog_store(catalog)
    yield catalog
    set_catalog_store(None)
