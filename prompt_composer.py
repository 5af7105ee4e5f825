"""
System prompt construction for the Restore shopping assistant.

The prompt is assembled from fixed clauses in a fixed order, so the same
(products, user query) pair always produces the same text.
"""

import json
from typing import List

from app_config import STORE_NAME
from keyword_extractor import is_wool_hat_query, mentions_any
from models import CatalogItem

PRICE_QUERY_KEYWORDS = ["price", "cost", "expensive", "价格", "贵", "便宜"]
COMPARE_QUERY_KEYWORDS = ["compare", "difference", "versus", "vs", "比较"]


def serialize_products(products: List[CatalogItem]) -> str:
    return json.dumps([p.to_dict() for p in products], ensure_ascii=False)


def build_system_prompt(products: List[CatalogItem], user_query: str) -> str:
    """
    Build the grounding system prompt.

    Args:
        products: Retrieved catalog items, in retrieval order
        user_query: Latest user message

    Returns:
        System message content
    """
    prompt = f"You are a helpful shopping assistant for our e-commerce store {STORE_NAME}. "

    prompt += (
        "IMPORTANT: ONLY recommend products from the provided list. "
        "If the user asks for a product type we don't have, clearly state that we don't carry that product. "
        "For example, if we don't have woolen hats in our catalog and the user asks for them, "
        "you should say 'We currently don't carry woolen hats in our catalog' "
        "rather than recommending something we don't have. "
    )

    if products:
        prompt += (
            "Here are some products from our catalog that might be relevant to the customer's query: "
            f"{serialize_products(products)}. "
        )
    else:
        prompt += (
            "Unfortunately, I don't have specific product information to share at this moment, "
            "but I can still help with general questions. "
        )

    prompt += (
        "Use this product information to make specific recommendations when asked. "
        "Be friendly, helpful, and concise. When recommending products, mention their name, price, "
        "and a brief description. Never make up products that aren't in the provided list. "
        "If the products don't match what the customer is looking for, suggest browsing categories "
        "instead of making up product details. "
    )

    prompt += (
        "Pay careful attention to product names that contain 'Woolen' or 'wool' as they indicate "
        "wool material products. "
        "When a customer asks about wool products, recommend items with 'Woolen' in their names. "
    )

    # ─── Query-specific emphasis (additive) ───
    if mentions_any(user_query, PRICE_QUERY_KEYWORDS):
        prompt += "The customer seems interested in price information, so highlight pricing in your response. "

    if mentions_any(user_query, COMPARE_QUERY_KEYWORDS):
        prompt += "The customer wants to compare products, so provide a comparison of relevant products if available. "

    if is_wool_hat_query(user_query):
        prompt += (
            "The customer is specifically looking for wool hats. "
            "Ensure you mention all products with 'Woolen' in their name that are hats. "
        )

    return prompt
