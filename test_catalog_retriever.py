"""
Tests for tag-driven catalog retrieval and its widening fallback.
"""

import random
import pytest
from unittest.mock import MagicMock

from catalog_retriever import get_relevant_products, select_filter
from catalog_store import CatalogStore
from keyword_extractor import extract_keywords
from models import RetrievalStage, Tag


def _store(*records):
    return CatalogStore(list(records))


def _ids(result):
    return [p.id for p in result.items]


class TestFilterSelection:

    def test_compound_wins_over_single_category(self, catalog):
        result = get_relevant_products([Tag.WOOL, Tag.HAT], catalog)
        assert result.stage == RetrievalStage.COMPOUND
        assert _ids(result) == [8]

    def test_single_category_matches_type(self, catalog):
        result = get_relevant_products([Tag.BOARD], catalog)
        assert result.stage == RetrievalStage.CATEGORY
        assert _ids(result) == [1, 2]

    def test_hat_also_matches_name(self):
        store = _store(
            {"id": 1, "name": "Sun Hat", "type": "Accessories"},
            {"id": 2, "name": "Scarf", "type": "Accessories"},
            {"id": 3, "name": "Beanie", "type": "Hats"},
        )
        assert _ids(get_relevant_products([Tag.HAT], store)) == [1, 3]

    def test_board_does_not_match_name(self):
        store = _store(
            {"id": 1, "name": "Board Wax", "type": "Accessories"},
            {"id": 2, "name": "Deck", "type": "Boards"},
        )
        assert _ids(get_relevant_products([Tag.BOARD], store)) == [2]

    def test_first_category_in_taxonomy_order_is_used(self, catalog):
        result = get_relevant_products([Tag.BOOT, Tag.GLOVE, Tag.HAT], catalog)
        assert _ids(result) == [14]

    def test_category_with_wool_keeps_only_wool_items(self):
        store = _store(
            {"id": 1, "name": "Cotton Gloves", "type": "Gloves"},
            {"id": 2, "name": "Woolen Gloves", "type": "Gloves"},
            {"id": 3, "name": "Woolen Scarf", "type": "Accessories"},
        )
        tags = extract_keywords("woolen gloves please")
        assert tags == [Tag.GLOVE, Tag.WOOL]
        result = get_relevant_products(tags, store)
        assert result.stage == RetrievalStage.CATEGORY
        assert _ids(result) == [2]

    def test_category_with_wool_zero_hits_returns_catalog_head(self):
        store = _store(
            {"id": 1, "name": "Cotton Gloves", "type": "Gloves"},
            {"id": 2, "name": "Red Boots", "type": "Boots"},
        )
        result = get_relevant_products([Tag.GLOVE, Tag.WOOL], store)
        assert result.stage == RetrievalStage.FALLBACK_ALL
        assert _ids(result) == [1, 2]

    def test_wool_without_category(self, catalog):
        result = get_relevant_products([Tag.WOOL], catalog)
        assert result.stage == RetrievalStage.MATERIAL
        assert _ids(result) == [8, 10]

    def test_all_sentinel_is_unfiltered(self, catalog):
        result = get_relevant_products([Tag.ALL], catalog)
        assert result.stage == RetrievalStage.UNFILTERED
        assert _ids(result) == [1, 2, 7, 8, 10, 14]

    def test_intent_only_tags_are_unfiltered(self, catalog):
        where, stage = select_filter([Tag.PRICE, Tag.BRAND])
        assert where is None
        assert stage == RetrievalStage.UNFILTERED


class TestWideningFallback:

    def test_compound_falls_back_to_all_hats(self):
        store = _store(
            {"id": 1, "name": "Core Blue Hat", "description": "Cotton cap", "type": "Hats"},
            {"id": 2, "name": "Speed Board", "type": "Boards"},
        )
        result = get_relevant_products([Tag.WOOL, Tag.HAT], store)
        assert result.stage == RetrievalStage.ALL_HATS
        assert _ids(result) == [1]

    def test_compound_with_no_hats_at_all_is_empty(self):
        store = _store({"id": 1, "name": "Speed Board", "type": "Boards"})
        result = get_relevant_products([Tag.WOOL, Tag.HAT], store)
        assert result.stage == RetrievalStage.ALL_HATS
        assert result.items == []

    def test_compound_fallback_only_widens(self, catalog):
        compound = set(_ids(get_relevant_products([Tag.WOOL, Tag.HAT], catalog)))
        all_hats = set(_ids(get_relevant_products([Tag.HAT], catalog)))
        assert compound <= all_hats

    def test_single_tag_zero_hits_returns_catalog_head(self):
        store = _store(
            {"id": 3, "name": "Red Boots", "type": "Boots"},
            {"id": 1, "name": "Blue Gloves", "type": "Gloves"},
        )
        result = get_relevant_products([Tag.BOARD], store)
        assert result.stage == RetrievalStage.FALLBACK_ALL
        assert _ids(result) == [1, 3]

    def test_wool_zero_hits_returns_catalog_head(self):
        store = _store({"id": 1, "name": "Cotton Tee", "type": "Shirts"})
        result = get_relevant_products([Tag.WOOL], store)
        assert result.stage == RetrievalStage.FALLBACK_ALL
        assert _ids(result) == [1]


class TestBounds:

    @pytest.mark.parametrize("tags", [
        [Tag.ALL],
        [Tag.BOARD],
        [Tag.HAT],
        [Tag.WOOL],
        [Tag.WOOL, Tag.HAT],
        [Tag.PRICE],
    ])
    def test_empty_catalog_never_raises(self, empty_catalog, tags):
        result = get_relevant_products(tags, empty_catalog)
        assert result.items == []

    @pytest.mark.parametrize("tags", [[Tag.ALL], [Tag.BOARD], [Tag.HAT], [Tag.WOOL, Tag.HAT]])
    def test_never_more_than_fifteen(self, tags):
        records = [
            {"id": i, "name": f"Woolen Hat Board {i}", "description": "wool", "type": "Boards Hats"}
            for i in range(1, 51)
        ]
        random.Random(7).shuffle(records)
        result = get_relevant_products(tags, CatalogStore(records))
        assert _ids(result) == list(range(1, 16))

    def test_fetch_requested_with_cap(self):
        fake = MagicMock()
        fake.count.return_value = 3
        fake.fetch.return_value = []
        get_relevant_products([Tag.BOOT], fake)
        _, kwargs = fake.fetch.call_args
        assert kwargs["limit"] == 15
        assert kwargs["offset"] == 0

    def test_result_is_sorted_even_if_source_is_not(self):
        fake = MagicMock()
        fake.count.return_value = 2
        fake.fetch.return_value = list(reversed(CatalogStore([
            {"id": 1, "name": "A"}, {"id": 2, "name": "B"},
        ]).fetch()))
        assert _ids(get_relevant_products([Tag.ALL], fake)) == [1, 2]
