"""Tests for the operator REST API and JWT authentication.

Uses httpx AsyncClient with an ASGI transport to exercise the
endpoints without starting a real server.
"""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from matchrecorder.loaders.config_loader import RecorderConfig
from matchrecorder.main import create_services
from matchrecorder.network.jwt_auth import create_token, verify_token
from matchrecorder.network.rest_api import create_app

OPERATOR_UID = 7


@pytest.fixture
def services(tmp_path):
    return create_services(RecorderConfig(
        recordings_dir=str(tmp_path), session_name="api", operator_uids=[OPERATOR_UID],
    ))


@pytest.fixture
async def client(services):
    """httpx async client wired to the FastAPI app."""
    transport = ASGITransport(app=create_app(services))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _auth_header(uid: int = OPERATOR_UID) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_token(uid)}"}


class TestJWT:
    def test_create_and_verify(self):
        assert verify_token(create_token(123)) == 123

    def test_invalid_token(self):
        with pytest.raises(ValueError):
            verify_token("not.a.valid.token")

    def test_expired_token(self):
        with pytest.raises(ValueError, match="expired"):
            verify_token(create_token(1, expiry_seconds=-10))


class TestAuth:
    async def test_missing_token(self, client):
        resp = await client.get("/api/status")
        assert resp.status_code == 401

    async def test_non_operator(self, client):
        resp = await client.get("/api/status", headers=_auth_header(99))
        assert resp.status_code == 403

    async def test_operator(self, client):
        resp = await client.get("/api/status", headers=_auth_header())
        assert resp.status_code == 200
        assert resp.json()["mode"] == "idle"


class TestCommands:
    async def test_start_recording(self, client, services):
        resp = await client.post("/api/commands", json={"type": "start_recording"},
                                 headers=_auth_header())
        assert resp.status_code == 200
        assert resp.json()["ok"] is True
        assert services.controller.mode.value == "recording"

    async def test_invalid_transition_is_not_an_http_error(self, client):
        resp = await client.post("/api/commands", json={"type": "stop_recording"},
                                 headers=_auth_header())
        assert resp.status_code == 200
        assert resp.json()["ok"] is False

    async def test_unknown_command(self, client):
        resp = await client.post("/api/commands", json={"type": "self_destruct"},
                                 headers=_auth_header())
        assert resp.status_code == 404

    async def test_invalid_fields(self, client):
        resp = await client.post("/api/commands", json={"type": "load_recording"},
                                 headers=_auth_header())
        assert resp.status_code == 422

    async def test_type_in_path(self, client, services):
        resp = await client.post("/api/commands/start_recording", headers=_auth_header())
        assert resp.status_code == 200
        assert resp.json()["command"] == "start_recording"
        assert services.controller.mode.value == "recording"

    async def test_type_in_path_with_fields(self, client):
        resp = await client.post("/api/commands/start_replay", json={"save_point": "mid"},
                                 headers=_auth_header())
        assert resp.status_code == 200
        assert resp.json()["ok"] is False

    async def test_path_type_overrides_body(self, client, services):
        resp = await client.post("/api/commands/start_recording", json={"type": "stop_recording"},
                                 headers=_auth_header())
        assert resp.json()["command"] == "start_recording"
        assert services.controller.mode.value == "recording"

    async def test_type_in_path_unknown(self, client):
        resp = await client.post("/api/commands/self_destruct", headers=_auth_header())
        assert resp.status_code == 404

    async def test_type_in_path_invalid_fields(self, client):
        resp = await client.post("/api/commands/load_recording", headers=_auth_header())
        assert resp.status_code == 422

    async def test_recordings_listing(self, client, services):
        services.controller.start_recording()
        services.controller.save_recording()
        resp = await client.get("/api/recordings", headers=_auth_header())
        assert resp.json() == {"recordings": ["api_match0recording1.cfg"]}
