"""
Catalog retrieval — turns extracted tags into a bounded product list.

FILTER PRIORITY:
  1. wool + hat  → hat (type or name) AND wool (name or description)
  2. one category → type contains the category (hat also matches name),
                    narrowed to wool items when wool was also mentioned
  3. wool alone  → wool in name or description
  4. otherwise   → whole catalog

WIDENING FALLBACK (only when the filter matched nothing):
  wool + hat → name has "woolen" and "hat" → every hat
  single tag → whole catalog

Every path returns at most MAX_RETRIEVED_PRODUCTS items in ascending id.
"""

from typing import List, Optional, Tuple

from app_config import MAX_RETRIEVED_PRODUCTS
from catalog_store import Clause, Contains, all_of, any_of
from chat_logger import get_logger
from models import CATEGORY_TAGS, RetrievalResult, RetrievalStage, Tag

logger = get_logger("restore_chat")


def _wool_clause() -> Clause:
    return any_of(
        Contains("name", "wool"),
        Contains("name", "woolen"),
        Contains("description", "wool"),
        Contains("description", "woolen"),
    )


def _hat_clause() -> Clause:
    return any_of(Contains("type", "hat"), Contains("name", "hat"))


def _category_clause(tag: Tag) -> Clause:
    if tag == Tag.HAT:
        return _hat_clause()
    return Contains("type", tag.value)


def select_filter(tags: List[Tag]) -> Tuple[Optional[Clause], RetrievalStage]:
    """Pick the primary filter for a tag set."""
    if Tag.WOOL in tags and Tag.HAT in tags:
        return all_of(_hat_clause(), _wool_clause()), RetrievalStage.COMPOUND

    for tag in CATEGORY_TAGS:
        if tag in tags:
            if Tag.WOOL in tags:
                return all_of(_category_clause(tag), _wool_clause()), RetrievalStage.CATEGORY
            return _category_clause(tag), RetrievalStage.CATEGORY

    if Tag.WOOL in tags:
        return _wool_clause(), RetrievalStage.MATERIAL

    return None, RetrievalStage.UNFILTERED


def get_relevant_products(tags: List[Tag], catalog, request_id: str = "") -> RetrievalResult:
    """
    Retrieve products relevant to ``tags`` from ``catalog``.

    Args:
        tags: Output of extract_keywords()
        catalog: Any object offering count(where) and fetch(where, limit, offset)
        request_id: Correlation id for log lines

    Returns:
        RetrievalResult with at most MAX_RETRIEVED_PRODUCTS items
    """
    where, stage = select_filter(tags)
    count = catalog.count(where)
    logger.info(
        f"Retrieval filter | request_id={request_id} | "
        f"tags={[t.value for t in tags]} | stage={stage.value} | matched={count}"
    )

    if count == 0 and where is not None and catalog.count() > 0:
        if stage == RetrievalStage.COMPOUND:
            where = all_of(Contains("name", "woolen"), Contains("name", "hat"))
            stage = RetrievalStage.COMPOUND_NAME
            count = catalog.count(where)
            logger.info(
                f"Retrieval widened | request_id={request_id} | "
                f"stage={stage.value} | matched={count}"
            )
            if count == 0:
                where = _hat_clause()
                stage = RetrievalStage.ALL_HATS
                logger.info(f"Retrieval widened | request_id={request_id} | stage={stage.value}")
        else:
            where = None
            stage = RetrievalStage.FALLBACK_ALL
            logger.info(f"Retrieval widened | request_id={request_id} | stage={stage.value}")

    items = catalog.fetch(where, limit=MAX_RETRIEVED_PRODUCTS, offset=0)
    items = sorted(items, key=lambda p: p.id)[:MAX_RETRIEVED_PRODUCTS]
    logger.info(
        f"Retrieval done | request_id={request_id} | stage={stage.value} | "
        f"products={len(items)} | ids={[p.id for p in items]}"
    )
    return RetrievalResult(items=items, stage=stage)
