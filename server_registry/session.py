"""ConsoleSession — owns the registry, its storage and the API client.

One session per console run. The session is the only place that both talks
to the backend and mutates the registry, and it mutates only after a call
has succeeded.
"""

import logging
from typing import Any, Optional

from server_registry.api import ApiClient
from server_registry.config import ClientConfig, ServerRecord
from server_registry.routing import DEFAULT, Scoped, Target
from server_registry.storage import ActiveServerStorage
from server_registry.store import RegistryStore

logger = logging.getLogger(__name__)

# Fields of a create/update payload that describe the record itself;
# "config" holds connection settings the registry does not keep.
RECORD_FIELDS = ("id", "name", "description", "enabled")


class ConsoleSession:
    """Composition root for one console session.

    Builds the ``RegistryStore`` (rehydrating the active server from
    storage) and an ``ApiClient`` from the config unless one is injected.
    An injected client is left open on ``aclose``.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        client: Optional[ApiClient] = None,
        storage: Optional[ActiveServerStorage] = None,
    ):
        self.config = config
        self.storage = storage or ActiveServerStorage(
            config.resolved_state_path, enabled=config.persist_active
        )
        self.store = RegistryStore(storage=self.storage)
        self._owns_client = client is None
        self.client = client or ApiClient.from_config(config)

    async def __aenter__(self) -> "ConsoleSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def target(self, server_id: Optional[str] = None) -> Target:
        """Resolve where a per-server operation should go.

        An explicit id wins, then the active server, then the default server.
        """
        if server_id:
            return Scoped(server_id)
        active = self.store.get_active_server()
        if active is not None:
            return Scoped(active.id)
        return DEFAULT

    async def refresh_servers(self) -> list[ServerRecord]:
        """Fetch the server list and replace the registry with it."""
        self.store.set_loading(True)
        try:
            data = await self.client.list_servers()
            records = [
                ServerRecord.model_validate(s) for s in (data.get("servers") or [])
            ]
            self.store.set_servers(records)
        finally:
            self.store.set_loading(False)

        logger.info(f"Registry refreshed: {len(records)} server(s)")
        return records

    async def create_server(self, payload: dict[str, Any]) -> ServerRecord:
        await self.client.create_server(payload)
        record = ServerRecord.model_validate(
            {k: payload[k] for k in RECORD_FIELDS if k in payload}
        )
        self.store.add_server(record)
        return record

    async def update_server(self, server_id: str, payload: dict[str, Any]) -> None:
        """PUT the changes, then mirror the ones the backend applies.

        The backend skips a null ``enabled`` and an empty ``name`` or
        ``description``, so those never reach the registry either.
        """
        await self.client.update_server(server_id, payload)
        patch = {
            k: v
            for k, v in payload.items()
            if k in RECORD_FIELDS and k != "id" and v is not None and v != ""
        }
        self.store.update_server(server_id, patch)

    async def delete_server(self, server_id: str) -> None:
        await self.client.delete_server(server_id)
        self.store.remove_server(server_id)

    def select_server(self, server_id: str) -> Optional[ServerRecord]:
        """Make a known server the active one; unknown ids change nothing."""
        record = self.store.get_server_by_id(server_id)
        if record is None:
            logger.info(f"Cannot select unknown server {server_id}")
            return None
        self.store.set_active_server(record)
        return record
