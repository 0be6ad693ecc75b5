"""Base adapter interface — Abstract classes for search engine connectors."""

from searchrecord.adapters.base.adapter import SearchAdapter
from searchrecord.adapters.base.registry import AdapterRegistry
from searchrecord.adapters.base.search import Search

__all__ = ["AdapterRegistry", "Search", "SearchAdapter"]
