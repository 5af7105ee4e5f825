"""
Registry holding the catalog store loaded at startup.
"""

_catalog_store = None


def set_catalog_store(store):
    global _catalog_store
    _catalog_store = store


def get_catalog_store():
    return _catalog_store
