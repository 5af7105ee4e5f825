"""
Data models for the Restore catalog-grounded chat pipeline.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List


class Role(Enum):
    SYSTEM    = "system"
    USER      = "user"
    ASSISTANT = "assistant"


class Tag(Enum):
    # ──── Product categories ────
    BOARD = "board"
    BOOT  = "boot"
    GLOVE = "glove"
    HAT   = "hat"

    # ──── Material ────
    WOOL  = "wool"

    # ──── Intent signals ────
    PRICE = "price"
    BRAND = "brand"

    # ──── No actionable tag: return the catalog head ────
    ALL   = "all"


CATEGORY_TAGS = (Tag.BOARD, Tag.BOOT, Tag.GLOVE, Tag.HAT)


class RetrievalStage(Enum):
    COMPOUND          = "compound"            # wool AND hat
    COMPOUND_NAME     = "compound_name"       # name has "woolen" AND "hat"
    ALL_HATS          = "all_hats"            # material constraint dropped
    CATEGORY          = "category"            # single category tag
    MATERIAL          = "material"            # wool without a category
    UNFILTERED        = "unfiltered"          # no actionable tag
    FALLBACK_ALL      = "fallback_all"        # single-tag filter found nothing


class FailureKind(Enum):
    CONFIGURATION        = "configuration"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    RESPONSE_PARSE       = "response_parse"
    CATALOG_ACCESS       = "catalog_access"
    INVALID_REQUEST      = "invalid_request"
    INTERNAL             = "internal"


@dataclass
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class CatalogItem:
    id: int
    name: str
    description: str
    price: float
    brand: str
    type: str
    picture_url: str = ""

    def to_dict(self) -> dict:
        """Serialized projection, key order fixed for reproducible prompts."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "brand": self.brand,
            "type": self.type,
            "pictureUrl": self.picture_url,
        }


@dataclass
class RetrievalResult:
    items: List[CatalogItem] = field(default_factory=list)
    stage: RetrievalStage = RetrievalStage.UNFILTERED

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class CompletionRequest:
    model: str
    messages: List[ChatMessage]
    temperature: float
    max_tokens: int

    def to_payload(self) -> dict:
        return {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


@dataclass
class CompletionOutcome:
    success: bool
    text: Optional[str] = None
    kind: Optional[FailureKind] = None
    title: str = ""
    detail: str = ""
    raw_body: Optional[str] = None
    endpoint: Optional[str] = None

    @classmethod
    def ok(cls, text: str, endpoint: Optional[str] = None) -> "CompletionOutcome":
        return cls(success=True, text=text, endpoint=endpoint)

    @classmethod
    def failure(
        cls,
        kind: FailureKind,
        title: str,
        detail: str = "",
        raw_body: Optional[str] = None,
    ) -> "CompletionOutcome":
        return cls(success=False, kind=kind, title=title, detail=detail, raw_body=raw_body)
