"""Target addressing and route building for the console API.

Every per-server operation exists in two flavours: scoped under
``/api/servers/{server_id}`` or addressed to the single default server
through the legacy unscoped paths. ``build_path`` is the one place that
knows both shapes.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote

SERVERS_PATH = "/api/servers"


@dataclass(frozen=True)
class Default:
    """Address the implicit default server."""


@dataclass(frozen=True)
class Scoped:
    """Address one registered server by id."""

    server_id: str


Target = Union[Default, Scoped]

DEFAULT = Default()

# operation -> (suffix under /api/servers/{server_id}, default path)
ROUTES: dict[str, tuple[Optional[str], str]] = {
    "server_info": ("/info", "/api/server"),
    "server_metrics": ("/metrics", "/api/server/metrics"),
    "server_tool": (None, "/api/server/tool"),
    "broadcast": ("/broadcast", "/api/server/broadcast"),
    "shutdown": ("/shutdown", "/api/server/shutdown"),
    "players": ("/players", "/api/player"),
    "player": ("/players/{player_uid}", "/api/player/{player_uid}"),
    "player_kick": ("/players/{player_uid}/kick", "/api/player/{player_uid}/kick"),
    "player_ban": ("/players/{player_uid}/ban", "/api/player/{player_uid}/ban"),
    "player_unban": ("/players/{player_uid}/unban", "/api/player/{player_uid}/unban"),
    "online_players": ("/online_players", "/api/online_player"),
    "guilds": ("/guilds", "/api/guild"),
    "guild": ("/guilds/{admin_player_uid}", "/api/guild/{admin_player_uid}"),
    "whitelist": ("/whitelist", "/api/whitelist"),
    "rcon": ("/rcon", "/api/rcon"),
    "rcon_send": ("/rcon/send", "/api/rcon/send"),
    "rcon_command": ("/rcon/{uuid}", "/api/rcon/{uuid}"),
    "backups": ("/backups", "/api/backup"),
    "backup": ("/backups/{uuid}", "/api/backup/{uuid}"),
}


def target_for(server_id: Optional[str] = None) -> Target:
    """Map an optional server id onto a Target."""
    if server_id:
        return Scoped(server_id)
    return DEFAULT


def server_path(server_id: Optional[str] = None) -> str:
    """Path of the server collection, or of one server record."""
    if server_id is None:
        return SERVERS_PATH
    return f"{SERVERS_PATH}/{_segment(server_id)}"


def build_path(target: Target, operation: str, **params: Any) -> str:
    """Build the request path for ``operation`` addressed to ``target``.

    Raises KeyError for an unknown operation and ValueError when a
    default-only operation is addressed to a scoped server.
    """
    scoped, default = ROUTES[operation]
    encoded = {k: _segment(v) for k, v in params.items()}

    if isinstance(target, Scoped):
        if scoped is None:
            raise ValueError(f"Operation {operation!r} has no per-server route")
        return server_path(target.server_id) + scoped.format(**encoded)
    return default.format(**encoded)


def build_query(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Flatten list-query parameters, dropping None and empty values."""
    query: dict[str, str] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        else:
            query[key] = str(value)
    return query


def _segment(value: Any) -> str:
    return quote(str(value), safe="")
