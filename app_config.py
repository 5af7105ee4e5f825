"""
Application configuration module for the Restore Chat API.
Contains environment variables, constants, and settings.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# ═══════════════════════════════════════════
# ENVIRONMENT VARIABLES
# ═══════════════════════════════════════════

STORE_NAME = os.getenv("STORE_NAME", "Restore")
PORT = int(os.getenv("PORT", 5000))
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ═══════════════════════════════════════════
# CATALOG
# ═══════════════════════════════════════════

CATALOG_PATH = os.getenv(
    "CATALOG_PATH",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "products.json"),
)

# Upper bound on items embedded in the system prompt
MAX_RETRIEVED_PRODUCTS = 15

# ═══════════════════════════════════════════
# LLM COMPLETION CONFIGURATION
# ═══════════════════════════════════════════

DEFAULT_LLM_ENDPOINTS = [
    "https://api.deepseek.com/v1/chat/completions",
    "https://api.deepseek.ai/v1/chat/completions",
]


def parse_endpoints(raw: str) -> list:
    """Split a comma-separated endpoint list, dropping blanks, keeping order."""
    return [url.strip() for url in raw.split(",") if url.strip()]


LLM_API_KEY = os.getenv("LLM_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "deepseek-chat")
LLM_ENDPOINTS = parse_endpoints(os.getenv("LLM_ENDPOINTS", "")) or list(DEFAULT_LLM_ENDPOINTS)

# LLM behavior settings
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "800"))
LLM_CONNECT_TIMEOUT_SECONDS = float(os.getenv("LLM_CONNECT_TIMEOUT_SECONDS", "5"))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
