"""RegistryStore — known servers plus the active-server selection.

Pure state container: it is fed already-fetched records by its owner and
never talks to the network. Every operation is synchronous and total;
looking up an id that is not present is a no-op, not an error.
"""

import logging
from typing import Any, Optional

from server_registry.config import ServerRecord
from server_registry.storage import ActiveServerStorage

logger = logging.getLogger(__name__)


class RegistryStore:
    """Ordered server registry with an active-server pointer.

    Automatic selection always picks the first enabled record in registry
    order. A manually chosen active server is trusted as-is: it need not be
    enabled, or even present in ``servers``.

    When a storage is given, the active server is rehydrated from it on
    construction and written back every time its value changes.
    """

    def __init__(self, storage: Optional[ActiveServerStorage] = None):
        self.servers: list[ServerRecord] = []
        self.loading = False
        self._storage = storage
        self.active_server: Optional[ServerRecord] = (
            storage.load() if storage is not None else None
        )

    def set_servers(self, records: list[ServerRecord]) -> None:
        """Replace the registry wholesale.

        Picks the first enabled record only when nothing is selected yet.
        An existing selection is kept even if its id is not in ``records``.
        """
        self.servers = list(records)
        if self.active_server is None and self.servers:
            first = self._first_enabled()
            if first is not None:
                logger.info(f"Auto-selected server {first.id}")
                self._set_active(first)

    def set_active_server(self, record: Optional[ServerRecord]) -> None:
        self._set_active(record)

    def get_active_server(self) -> Optional[ServerRecord]:
        return self.active_server

    def get_servers(self) -> list[ServerRecord]:
        return list(self.servers)

    def get_enabled_servers(self) -> list[ServerRecord]:
        return [s for s in self.servers if s.enabled]

    def set_loading(self, loading: bool) -> None:
        self.loading = loading

    def get_loading(self) -> bool:
        return self.loading

    def add_server(self, record: ServerRecord) -> None:
        """Append a record; a record with an already-known id replaces it in place."""
        index = self._index_of(record.id)
        if index is None:
            self.servers.append(record)
            return

        logger.info(f"Server {record.id} already registered, replacing it")
        self.servers[index] = record
        if self.active_server is not None and self.active_server.id == record.id:
            self._set_active(record)

    def update_server(self, server_id: str, patch: dict[str, Any]) -> None:
        """Shallow-merge ``patch`` onto a record, keeping its position.

        The active server gets the same merge when it has the same id.
        """
        index = self._index_of(server_id)
        if index is None:
            return

        self.servers[index] = self.servers[index].merged(patch)
        if self.active_server is not None and self.active_server.id == server_id:
            self._set_active(self.active_server.merged(patch))

    def remove_server(self, server_id: str) -> None:
        """Drop a record; re-select if it was the active server."""
        self.servers = [s for s in self.servers if s.id != server_id]
        if self.active_server is not None and self.active_server.id == server_id:
            replacement = self._first_enabled()
            logger.info(
                f"Active server {server_id} removed, now "
                f"{replacement.id if replacement is not None else 'none'}"
            )
            self._set_active(replacement)

    def get_server_by_id(self, server_id: str) -> Optional[ServerRecord]:
        index = self._index_of(server_id)
        return self.servers[index] if index is not None else None

    def _first_enabled(self) -> Optional[ServerRecord]:
        for server in self.servers:
            if server.enabled:
                return server
        return None

    def _index_of(self, server_id: str) -> Optional[int]:
        for i, server in enumerate(self.servers):
            if server.id == server_id:
                return i
        return None

    def _set_active(self, record: Optional[ServerRecord]) -> None:
        changed = record != self.active_server
        self.active_server = record
        if changed and self._storage is not None:
            self._storage.save(record)
