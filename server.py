"""
Restore Store — Chat API Backend
Runs on port 5000 with /api/ai/chat endpoint.

Usage:
    python server.py

Endpoint:
    POST http://localhost:5000/api/ai/chat
    Body: {"messages": [{"role": "user", "content": "..."}]}
"""

from datetime import datetime, timezone

from flask import Flask, jsonify
from flask_cors import CORS

from app_config import CATALOG_PATH, DEBUG, LLM_API_KEY, LLM_ENDPOINTS, PORT
from catalog_store import CatalogStore
from chat_logger import get_logger
from errors import CatalogAccessError
from routes.chat import chat_bp
from store_registry import get_catalog_store, set_catalog_store

logger = get_logger("restore_chat")

# ═══════════════════════════════════════════
# FLASK APP
# ═══════════════════════════════════════════

app = Flask(__name__)
CORS(app)
app.register_blueprint(chat_bp, url_prefix="/api/ai")


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    store = get_catalog_store()
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "catalog": {"products_loaded": len(store) if store else 0},
        "llm": {
            "api_key_configured": bool(LLM_API_KEY.strip()),
            "endpoints": len(LLM_ENDPOINTS),
        },
    })


# ═══════════════════════════════════════════
# STARTUP
# ═══════════════════════════════════════════

def initialize_store(path: str = CATALOG_PATH):
    """Load the product catalog at startup."""
    try:
        store = CatalogStore.load_from_file(path)
    except CatalogAccessError as e:
        logger.error(f"Catalog load failed | path={path} | error={e.detail}")
        logger.warning("Server will answer without product grounding until the catalog loads.")
        store = CatalogStore()
    set_catalog_store(store)
    return store


if __name__ == "__main__":
    print("=" * 60)
    print("  Restore Store — Chat API Server")
    print("=" * 60)
    print()

    initialize_store()

    print()
    print(f"🚀 Starting server on http://localhost:{PORT}")
    print(f"   POST http://localhost:{PORT}/api/ai/chat")
    print(f"   GET  http://localhost:{PORT}/health")
    print()

    app.run(
        host="0.0.0.0",
        port=PORT,
        debug=DEBUG,
    )
