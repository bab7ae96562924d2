"""ApiClient — stateless async client for the game-server console backend.

Holds no registry state and caches nothing. Every call returns the decoded
JSON body (``download_backup`` returns raw bytes). HTTP and transport
failures propagate as httpx exceptions so callers never feed a failed
fetch into the registry.
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from server_registry.config import ClientConfig
from server_registry.routing import (
    DEFAULT,
    Target,
    build_path,
    build_query,
    server_path,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """Async HTTP client for server CRUD and per-server operations.

    Per-server operations take a ``target``: ``DEFAULT`` for the legacy
    single-server routes, ``Scoped(server_id)`` for a registered server.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers or {},
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> "ApiClient":
        return cls(config.base_url, headers=config.headers, timeout=config.timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {path}")
        response = await self._client.request(
            method, path, json=json, params=build_query(params)
        )
        response.raise_for_status()
        return response

    async def _json(self, method: str, path: str, **kwargs) -> Any:
        response = await self._request(method, path, **kwargs)
        return response.json()

    # Server records

    async def list_servers(self) -> Any:
        return await self._json("GET", server_path())

    async def get_server(self, server_id: str) -> Any:
        return await self._json("GET", server_path(server_id))

    async def create_server(self, payload: dict[str, Any]) -> Any:
        return await self._json("POST", server_path(), json=payload)

    async def update_server(self, server_id: str, payload: dict[str, Any]) -> Any:
        return await self._json("PUT", server_path(server_id), json=payload)

    async def delete_server(self, server_id: str) -> Any:
        return await self._json("DELETE", server_path(server_id))

    # Server

    async def get_server_info(self, target: Target = DEFAULT) -> Any:
        return await self._json("GET", build_path(target, "server_info"))

    async def get_server_metrics(self, target: Target = DEFAULT) -> Any:
        return await self._json("GET", build_path(target, "server_metrics"))

    async def get_server_tool_info(self) -> Any:
        return await self._json("GET", build_path(DEFAULT, "server_tool"))

    async def send_broadcast(
        self, payload: dict[str, Any], target: Target = DEFAULT
    ) -> Any:
        return await self._json("POST", build_path(target, "broadcast"), json=payload)

    async def shutdown_server(
        self, payload: dict[str, Any], target: Target = DEFAULT
    ) -> Any:
        return await self._json("POST", build_path(target, "shutdown"), json=payload)

    # Players

    async def get_player_list(
        self, params: Optional[Mapping[str, Any]] = None, target: Target = DEFAULT
    ) -> Any:
        return await self._json("GET", build_path(target, "players"), params=params)

    async def get_online_player_list(self, target: Target = DEFAULT) -> Any:
        return await self._json("GET", build_path(target, "online_players"))

    async def get_player(self, player_uid: str, target: Target = DEFAULT) -> Any:
        return await self._json(
            "GET", build_path(target, "player", player_uid=player_uid)
        )

    async def kick_player(self, player_uid: str, target: Target = DEFAULT) -> Any:
        return await self._json(
            "POST", build_path(target, "player_kick", player_uid=player_uid)
        )

    async def ban_player(self, player_uid: str, target: Target = DEFAULT) -> Any:
        return await self._json(
            "POST", build_path(target, "player_ban", player_uid=player_uid)
        )

    async def unban_player(self, player_uid: str, target: Target = DEFAULT) -> Any:
        return await self._json(
            "POST", build_path(target, "player_unban", player_uid=player_uid)
        )

    # Guilds

    async def get_guild_list(self, target: Target = DEFAULT) -> Any:
        return await self._json("GET", build_path(target, "guilds"))

    async def get_guild(self, admin_player_uid: str, target: Target = DEFAULT) -> Any:
        return await self._json(
            "GET", build_path(target, "guild", admin_player_uid=admin_player_uid)
        )

    # Whitelist

    async def get_whitelist(self, target: Target = DEFAULT) -> Any:
        return await self._json("GET", build_path(target, "whitelist"))

    async def add_whitelist(
        self, payload: dict[str, Any], target: Target = DEFAULT
    ) -> Any:
        return await self._json("POST", build_path(target, "whitelist"), json=payload)

    async def remove_whitelist(
        self, payload: dict[str, Any], target: Target = DEFAULT
    ) -> Any:
        return await self._json(
            "DELETE", build_path(target, "whitelist"), json=payload
        )

    async def put_whitelist(
        self, payload: Any, target: Target = DEFAULT
    ) -> Any:
        return await self._json("PUT", build_path(target, "whitelist"), json=payload)

    # RCON

    async def get_rcon_commands(self, target: Target = DEFAULT) -> Any:
        return await self._json("GET", build_path(target, "rcon"))

    async def send_rcon_command(
        self, payload: dict[str, Any], target: Target = DEFAULT
    ) -> Any:
        return await self._json("POST", build_path(target, "rcon_send"), json=payload)

    async def add_rcon_command(
        self, payload: dict[str, Any], target: Target = DEFAULT
    ) -> Any:
        return await self._json("POST", build_path(target, "rcon"), json=payload)

    async def put_rcon_command(
        self, uuid: str, payload: dict[str, Any], target: Target = DEFAULT
    ) -> Any:
        return await self._json(
            "PUT", build_path(target, "rcon_command", uuid=uuid), json=payload
        )

    async def remove_rcon_command(self, uuid: str, target: Target = DEFAULT) -> Any:
        return await self._json(
            "DELETE", build_path(target, "rcon_command", uuid=uuid)
        )

    # Backups

    async def get_backup_list(
        self, params: Optional[Mapping[str, Any]] = None, target: Target = DEFAULT
    ) -> Any:
        return await self._json("GET", build_path(target, "backups"), params=params)

    async def remove_backup(self, uuid: str, target: Target = DEFAULT) -> Any:
        return await self._json("DELETE", build_path(target, "backup", uuid=uuid))

    async def download_backup(self, uuid: str, target: Target = DEFAULT) -> bytes:
        """Fetch a backup archive as raw bytes."""
        response = await self._request("GET", build_path(target, "backup", uuid=uuid))
        return response.content
