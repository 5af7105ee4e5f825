"""
Dry-run entry point: loads the catalog → extracts keywords → retrieves
products → prints the system prompt that would be sent. No LLM call.

Usage:
    python main.py "Do you have a wool hat?" "cheap boards"
"""

import sys

from app_config import CATALOG_PATH
from catalog_retriever import get_relevant_products
from catalog_store import CatalogStore
from keyword_extractor import extract_keywords
from prompt_composer import build_system_prompt


def process(utterance: str, catalog) -> str:
    """Run the grounding steps for one utterance, print and return the prompt."""
    tags = extract_keywords(utterance)
    result = get_relevant_products(tags, catalog, request_id="dry-run")
    prompt = build_system_prompt(result.items, utterance)

    print(f"\n{'━'*70}")
    print(f"💬  \"{utterance}\"")
    print(f"🏷️   Tags:   {', '.join(t.value for t in tags)}")
    print(f"🔎  Stage:  {result.stage.value}")
    print(f"📦  Items:  {len(result)}")
    for item in result.items:
        print(f"      #{item.id} {item.name} (${item.price:.2f}) [{item.type}]")
    print(f"\n📝  System prompt:\n{prompt}")
    return prompt


if __name__ == "__main__":
    catalog = CatalogStore.load_from_file(CATALOG_PATH)

    tests = sys.argv[1:] or [
        "Do you have a wool hat?",
        "Show me your boards",
        "我想买羊毛帽子",
        "What is the cheapest pair of gloves?",
        "Hello!",
    ]
    for t in tests:
        process(t, catalog)
