"""server-registry — Multi-server registry and API client for a game-server console.

Public API:
    RegistryStore         — known servers plus the active-server selection
    ActiveServerStorage   — JSON-file persistence of the active server
    ApiClient             — async httpx client for the console backend
    ConsoleSession        — per-session owner of store, storage and client
    ServerRecord          — Pydantic model for one server record
    ClientConfig          — Pydantic model for session settings
    Target, Default, Scoped, DEFAULT — request addressing
"""

from server_registry.config import ClientConfig, ServerRecord, load_config
from server_registry.storage import ActiveServerStorage
from server_registry.store import RegistryStore
from server_registry.routing import DEFAULT, Default, Scoped, Target, target_for
from server_registry.api import ApiClient
from server_registry.session import ConsoleSession

__all__ = [
    "RegistryStore",
    "ActiveServerStorage",
    "ApiClient",
    "ConsoleSession",
    "ServerRecord",
    "ClientConfig",
    "load_config",
    "Target",
    "Default",
    "Scoped",
    "DEFAULT",
    "target_for",
]
