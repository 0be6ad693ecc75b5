"""Connection — resolves which search adapter and index a query runs against.

``QueryExecutor`` never looks up a backend on its own; it is handed a
``ConnectionResolver`` and asks it for a fresh ``Search`` per execution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from searchrecord.adapters.base.adapter import AdapterHealth, SearchAdapter
from searchrecord.adapters.base.exceptions import ConfigurationError
from searchrecord.adapters.base.registry import AdapterRegistry, create_default_registry
from searchrecord.adapters.base.search import Search
from searchrecord.config.settings import AdapterConfig, SearchSettings

if TYPE_CHECKING:
    from searchrecord.models.record import Record

logger = logging.getLogger(__name__)

# Adapters addressed by a single base URL rather than a host list.
_URL_ADAPTERS = {"solr"}
# Adapters that call their default index a collection.
_COLLECTION_ADAPTERS = {"solr"}


class ConnectionResolver(Protocol):
    """Anything that can hand out a ``Search`` for a record class."""

    def get_search(self, model_class: type[Record] | None = None) -> Search: ...


class Connection:
    """Connection to the configured default search adapter.

    The adapter is created and initialized on first use and shared by every
    ``Search`` this connection hands out.

    Args:
        settings: Search backend settings.
        registry: Registry to resolve adapter classes from. Defaults to one
            with the built-in adapters.

    Example::

        with Connection(Settings().search) as conn:
            hits = conn.get_search(Book).set_query("title:dune").search()
    """

    def __init__(self, settings: SearchSettings | None = None, registry: AdapterRegistry | None = None) -> None:
        self._settings = settings or SearchSettings()
        self._registry = registry or create_default_registry()
        self._adapter: SearchAdapter | None = None

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def adapter_name(self) -> str:
        return self._settings.default_adapter

    @property
    def adapter(self) -> SearchAdapter:
        """The initialized default adapter."""
        if self._adapter is None:
            self._adapter = self._open()
        return self._adapter

    def get_search(self, model_class: type[Record] | None = None) -> Search:
        """Return a new ``Search`` on the index of ``model_class``.

        Without a model class the adapter's default index is used.
        """
        index = model_class.index_name() if model_class is not None else None
        return Search(self.adapter, index=index)

    def health(self) -> AdapterHealth:
        return self.adapter.health_check()

    def close(self) -> None:
        """Shut down the adapter if it was opened."""
        if self._adapter is not None:
            self._registry.shutdown_all()
            self._adapter = None

    def _open(self) -> SearchAdapter:
        name = self._settings.default_adapter
        config = self._settings.adapters.get(name, AdapterConfig())
        if not config.enabled:
            raise ConfigurationError(f"Adapter '{name}' is disabled.")

        adapter = self._registry.initialize_adapter(name, **_adapter_kwargs(name, config))
        logger.info("Opened connection using adapter '%s'", name)
        return adapter


def _adapter_kwargs(name: str, config: AdapterConfig) -> dict[str, Any]:
    """Build constructor kwargs for adapter ``name`` from its config."""
    kwargs: dict[str, Any] = {"timeout": config.timeout}
    if config.hosts:
        if name in _URL_ADAPTERS:
            kwargs["base_url"] = config.hosts[0]
        else:
            kwargs["hosts"] = config.hosts
    if config.index_pattern and config.index_pattern != "*":
        if name in _COLLECTION_ADAPTERS:
            kwargs["collection"] = config.index_pattern
        else:
            kwargs["index_pattern"] = config.index_pattern
    if config.api_key:
        kwargs["api_key"] = config.api_key
    if config.username:
        kwargs["username"] = config.username
    if config.password:
        kwargs["password"] = config.password
    kwargs.update(config.extra)
    return kwargs
