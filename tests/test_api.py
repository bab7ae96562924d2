"""Tests for ApiClient — routing per target, payloads, errors, raw downloads."""

import json

import httpx
import pytest
import pytest_asyncio
import respx

from server_registry import DEFAULT, ApiClient, ClientConfig, Scoped

BASE = "http://console:8080"


@pytest_asyncio.fixture
async def client():
    api = ApiClient(BASE)
    yield api
    await api.aclose()


# ─────────────────────────────────────────────────────────────────────
# Server records
# ─────────────────────────────────────────────────────────────────────


class TestServerCrud:
    @pytest.mark.asyncio
    @respx.mock
    async def test_list_servers(self, client):
        respx.get(f"{BASE}/api/servers").mock(
            return_value=httpx.Response(
                200, json={"servers": [{"id": "s1", "enabled": True}]}
            )
        )
        data = await client.list_servers()
        assert data["servers"][0]["id"] == "s1"

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_server_posts_payload(self, client):
        route = respx.post(f"{BASE}/api/servers").mock(
            return_value=httpx.Response(201, json={"success": True})
        )
        payload = {"id": "s2", "name": "Second", "enabled": True, "config": {}}

        assert await client.create_server(payload) == {"success": True}
        assert json.loads(route.calls.last.request.content) == payload

    @pytest.mark.asyncio
    @respx.mock
    async def test_update_and_delete(self, client):
        put = respx.put(f"{BASE}/api/servers/s2").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        delete = respx.delete(f"{BASE}/api/servers/s2").mock(
            return_value=httpx.Response(200, json={"success": True})
        )

        await client.update_server("s2", {"name": "Renamed"})
        await client.delete_server("s2")

        assert put.called
        assert delete.called


# ─────────────────────────────────────────────────────────────────────
# Addressing
# ─────────────────────────────────────────────────────────────────────


class TestAddressing:
    @pytest.mark.asyncio
    @respx.mock
    async def test_default_target_uses_legacy_path(self, client):
        route = respx.get(f"{BASE}/api/server").mock(
            return_value=httpx.Response(200, json={"version": "v1", "name": "pal"})
        )
        info = await client.get_server_info()
        assert info["version"] == "v1"
        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_scoped_target_uses_server_path(self, client):
        route = respx.get(f"{BASE}/api/servers/s1/info").mock(
            return_value=httpx.Response(200, json={"version": "v1", "name": "pal"})
        )
        await client.get_server_info(Scoped("s1"))
        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_player_actions(self, client):
        kick = respx.post(f"{BASE}/api/servers/s1/players/p1/kick").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        ban = respx.post(f"{BASE}/api/player/p1/ban").mock(
            return_value=httpx.Response(200, json={"success": True})
        )

        await client.kick_player("p1", Scoped("s1"))
        await client.ban_player("p1", DEFAULT)

        assert kick.called
        assert ban.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_rcon_command_update(self, client):
        route = respx.put(f"{BASE}/api/servers/s1/rcon/u-1").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        await client.put_rcon_command("u-1", {"command": "Save"}, Scoped("s1"))
        assert json.loads(route.calls.last.request.content) == {"command": "Save"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_remove_whitelist_sends_body(self, client):
        route = respx.delete(f"{BASE}/api/whitelist").mock(
            return_value=httpx.Response(200, json={"success": True})
        )
        await client.remove_whitelist({"player_uid": "p1"})
        assert json.loads(route.calls.last.request.content) == {"player_uid": "p1"}


# ─────────────────────────────────────────────────────────────────────
# Queries and downloads
# ─────────────────────────────────────────────────────────────────────


class TestQueriesAndDownloads:
    @pytest.mark.asyncio
    @respx.mock
    async def test_player_list_query(self, client):
        route = respx.get(f"{BASE}/api/servers/s1/players").mock(
            return_value=httpx.Response(200, json=[])
        )
        await client.get_player_list(
            {"order_by": "level", "desc": True, "name": ""}, Scoped("s1")
        )

        params = route.calls.last.request.url.params
        assert params["order_by"] == "level"
        assert params["desc"] == "true"
        assert "name" not in params

    @pytest.mark.asyncio
    @respx.mock
    async def test_backup_list_without_params(self, client):
        route = respx.get(f"{BASE}/api/backup").mock(
            return_value=httpx.Response(200, json=[])
        )
        assert await client.get_backup_list() == []
        assert route.calls.last.request.url.query == b""

    @pytest.mark.asyncio
    @respx.mock
    async def test_download_backup_returns_bytes(self, client):
        respx.get(f"{BASE}/api/servers/s1/backups/b1").mock(
            return_value=httpx.Response(200, content=b"PK\x03\x04archive")
        )
        blob = await client.download_backup("b1", Scoped("s1"))
        assert blob == b"PK\x03\x04archive"


# ─────────────────────────────────────────────────────────────────────
# Errors and config
# ─────────────────────────────────────────────────────────────────────


class TestErrors:
    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_propagates(self, client):
        respx.get(f"{BASE}/api/servers/missing/metrics").mock(
            return_value=httpx.Response(404, json={"error": "Server not found"})
        )
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_server_metrics(Scoped("missing"))

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error_propagates(self, client):
        respx.get(f"{BASE}/api/guild").mock(
            side_effect=httpx.ConnectError("Connection refused")
        )
        with pytest.raises(httpx.ConnectError):
            await client.get_guild_list()


@pytest.mark.asyncio
@respx.mock
async def test_from_config_sends_headers():
    route = respx.get(f"{BASE}/api/server/tool").mock(
        return_value=httpx.Response(200, json={"tool": "ok"})
    )
    config = ClientConfig(base_url=f"{BASE}/", headers={"Authorization": "Bearer t"})

    async with ApiClient.from_config(config) as api:
        await api.get_server_tool_info()

    assert route.calls.last.request.headers["Authorization"] == "Bearer t"
