"""
Keyword extraction for the Restore chat assistant.

Turns the latest user utterance into a small ordered set of catalog tags
(board / boot / glove / hat / wool) and intent tags (price / brand).
Keyword lists mix English and Chinese; matching is case-folded substring
containment.
"""

import re
from typing import Dict, Iterable, List

from models import Tag


# ─── Category synonyms (first hit wins per category) ───
CATEGORY_KEYWORDS: Dict[Tag, List[str]] = {
    Tag.BOARD: ["board", "angular", "react", "typescript", "vue", "coding", "deck", "skateboard", "滑板"],
    Tag.BOOT:  ["boot", "shoe", "footwear", "hiking", "winter", "靴子", "鞋", "鞋子"],
    Tag.GLOVE: ["glove", "mitt", "hand", "winter", "protection", "手套"],
    Tag.HAT:   ["hat", "cap", "beanie", "head", "winter", "帽", "帽子", "headwear"],
    Tag.WOOL:  ["wool", "woolen", "fleece", "羊毛", "毛", "保暖"],
}

# ─── Intent signals ───
PRICE_PATTERN = re.compile(
    r"(\$|under|less than|cheaper than|above|more than|expensive|affordable|cheap|budget"
    r"|premium|luxury|price range|cost|pricing|价格|便宜|贵|实惠)"
)
BRAND_PATTERN = re.compile(r"(brand|manufacturer|made by|from|provider|品牌|制造商|产自)")

# ─── Compound wool + hat detection ───
WOOL_KEYWORDS = ["wool", "woolen", "羊毛"]
HAT_KEYWORDS = ["hat", "cap", "帽", "帽子"]


def mentions_any(text: str, keywords: Iterable[str]) -> bool:
    """True if ``text`` contains any of ``keywords``, ignoring case."""
    folded = (text or "").casefold()
    return any(k.casefold() in folded for k in keywords)


def is_wool_hat_query(text: str) -> bool:
    return mentions_any(text, WOOL_KEYWORDS) and mentions_any(text, HAT_KEYWORDS)


def extract_keywords(message: str) -> List[Tag]:
    """
    Extract catalog and intent tags from a user message.

    Returns tags in emission order without duplicates. When nothing matches
    the result is ``[Tag.ALL]``, meaning "no filtering".
    """
    text = (message or "").casefold()
    tags: List[Tag] = []

    def add(tag: Tag):
        if tag not in tags:
            tags.append(tag)

    # Wool + hat must travel together so retrieval applies one AND filter
    if is_wool_hat_query(text):
        add(Tag.WOOL)
        add(Tag.HAT)

    for tag, keywords in CATEGORY_KEYWORDS.items():
        for keyword in keywords:
            if keyword in text:
                add(tag)
                break

    if PRICE_PATTERN.search(text):
        add(Tag.PRICE)
    if BRAND_PATTERN.search(text):
        add(Tag.BRAND)

    if not tags:
        tags.append(Tag.ALL)
    return tags
