"""
Catalog Store — read-only product source for the chat pipeline.

Products are loaded once (from a JSON export of the store database) and
queried with case-insensitive substring clauses. The store supports a
count-only query and a paged fetch ordered by ascending product id.
"""

import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from errors import CatalogAccessError
from models import CatalogItem
from chat_logger import get_logger

logger = get_logger("restore_chat")

SEARCHABLE_FIELDS = ("name", "description", "type", "brand")


# ══════════════════════════════════════════════════════════════
# FILTER CLAUSES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Contains:
    """``field`` contains ``needle``, ignoring case."""
    field: str
    needle: str

    def __post_init__(self):
        if self.field not in SEARCHABLE_FIELDS:
            raise ValueError(f"Unsupported catalog field: {self.field}")

    def matches(self, item: CatalogItem) -> bool:
        value = getattr(item, self.field) or ""
        return self.needle.lower() in value.lower()


@dataclass(frozen=True)
class AnyOf:
    clauses: Tuple["Clause", ...]

    def matches(self, item: CatalogItem) -> bool:
        return any(c.matches(item) for c in self.clauses)


@dataclass(frozen=True)
class AllOf:
    clauses: Tuple["Clause", ...]

    def matches(self, item: CatalogItem) -> bool:
        return all(c.matches(item) for c in self.clauses)


Clause = Union[Contains, AnyOf, AllOf]


def any_of(*clauses: Clause) -> AnyOf:
    return AnyOf(tuple(clauses))


def all_of(*clauses: Clause) -> AllOf:
    return AllOf(tuple(clauses))


# ══════════════════════════════════════════════════════════════
# STORE
# ══════════════════════════════════════════════════════════════

def _to_item(raw: Dict) -> CatalogItem:
    """Project a raw product record onto CatalogItem."""
    try:
        return CatalogItem(
            id=int(raw["id"]),
            name=str(raw["name"]),
            description=str(raw.get("description") or ""),
            price=float(raw.get("price") or 0),
            brand=str(raw.get("brand") or ""),
            type=str(raw.get("type") or ""),
            picture_url=str(raw.get("pictureUrl") or raw.get("picture_url") or ""),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CatalogAccessError(f"Malformed product record {raw!r}: {e}") from e


class CatalogStore:
    """In-memory product catalog with filtered count and paged fetch."""

    def __init__(self, products: Optional[List[Dict]] = None):
        items = [_to_item(p) for p in (products or [])]
        self.products: List[CatalogItem] = sorted(items, key=lambda p: p.id)

    @classmethod
    def load_from_file(cls, path: str) -> "CatalogStore":
        """Load a JSON list of product records (or ``{"products": [...]}``)."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogAccessError(f"Could not read catalog {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("products", [])
        if not isinstance(data, list):
            raise CatalogAccessError(f"Catalog {path} must contain a list of products")

        store = cls(data)
        logger.info(f"Catalog loaded | path={path} | products={len(store)}")
        return store

    def __len__(self) -> int:
        return len(self.products)

    def _select(self, where: Optional[Clause]) -> List[CatalogItem]:
        if where is None:
            return list(self.products)
        return [p for p in self.products if where.matches(p)]

    def count(self, where: Optional[Clause] = None) -> int:
        return len(self._select(where))

    def fetch(
        self,
        where: Optional[Clause] = None,
        limit: int = 15,
        offset: int = 0,
    ) -> List[CatalogItem]:
        """Matching items in ascending id order, ``offset``/``limit`` applied."""
        if limit < 0 or offset < 0:
            raise ValueError("limit and offset must be non-negative")
        return self._select(where)[offset:offset + limit]
