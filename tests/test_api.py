"""Tests for sleepy.api — registration, startup and the ASGI entry."""

from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from sleepy.api import API
from sleepy.config import APIConfig
from sleepy.errors import ConfigurationError
from sleepy.resource import GetSupported, PostSupported
from sleepy.testing import TestClient


class Named(GetSupported):
    def __init__(self, name: str) -> None:
        self.name = name

    def get(self, form):
        return 200, {"name": self.name}


class Writer(PostSupported):
    def post(self, form):
        return 201, dict(form)


class TestRegistration:
    def test_table_allocated_by_constructor(self) -> None:
        api = API()
        assert api.routes == []

    def test_add_resource(self) -> None:
        api = API()
        resource = Named("a")
        api.add_resource(resource, "/a")

        [route] = api.routes
        assert route.path == "/a"
        assert route.resource is resource
        assert route.methods.allowed == frozenset({"GET"})

    def test_add_handlers(self) -> None:
        api = API()
        api.add_handlers("/health", get=lambda form: (200, "ok"), delete=lambda form: (204, None))

        [route] = api.routes
        assert route.methods.allowed == frozenset({"GET", "DELETE"})

    def test_default_config(self) -> None:
        assert API().config == APIConfig()

    def test_registration_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("DEBUG", logger="sleepy.api"):
            API().add_resource(Named("a"), "/a")
        assert "Registered '/a' -> Named [GET]" in caplog.text

    async def test_last_registration_wins(self) -> None:
        api = API()
        api.add_resource(Named("first"), "/items")
        api.add_resource(Named("second"), "/items")

        assert len(api.routes) == 1
        async with TestClient(api) as client:
            response = await client.get("/items")
        assert response.json() == {"name": "second"}

    async def test_registration_while_serving(self) -> None:
        api = API()
        api.add_resource(Named("a"), "/a")
        async with TestClient(api) as client:
            assert (await client.get("/b")).status == 404
            api.add_resource(Named("b"), "/b")
            assert (await client.get("/b")).json() == {"name": "b"}


class TestStart:
    def test_no_routes_is_configuration_error(self) -> None:
        with patch("sleepy.server.runner.run_server") as mock_server:
            with pytest.raises(ConfigurationError, match="at least one resource"):
                API().start(8080)
        mock_server.assert_not_called()

    @patch("sleepy.server.runner.run_server")
    def test_delegates_to_server(self, mock_server: MagicMock) -> None:
        api = API(APIConfig(workers=4, log_level="debug"))
        api.add_resource(Named("a"), "/a")

        api.start(3000)

        mock_server.assert_called_once()
        args, kwargs = mock_server.call_args
        assert args == (api, "0.0.0.0", 3000)
        assert kwargs["config"] is api.config

    @patch("sleepy.server.runner.run_server")
    def test_config_defaults_for_host_and_port(self, mock_server: MagicMock) -> None:
        api = API(APIConfig(host="127.0.0.1", port=9000))
        api.add_resource(Named("a"), "/a")

        api.start()

        assert mock_server.call_args[0][1:] == ("127.0.0.1", 9000)

    @patch("sleepy.server.runner.run_server")
    def test_port_zero_is_respected(self, mock_server: MagicMock) -> None:
        api = API()
        api.add_resource(Named("a"), "/a")

        api.start(0, host="localhost")

        assert mock_server.call_args[0][1:] == ("localhost", 0)

    @patch("sleepy.server.runner.run_server")
    def test_transport_error_propagates(self, mock_server: MagicMock) -> None:
        mock_server.side_effect = OSError(98, "Address already in use")
        api = API()
        api.add_resource(Named("a"), "/a")

        with pytest.raises(OSError, match="Address already in use"):
            api.start(3000)


class TestIsolation:
    async def test_two_apis_do_not_share_routes(self) -> None:
        api_a = API()
        api_b = API()
        api_a.add_resource(Named("a"), "/a")
        api_b.add_resource(Named("b"), "/b")

        async with TestClient(api_a) as client_a, TestClient(api_b) as client_b:
            assert (await client_a.get("/a")).json() == {"name": "a"}
            assert (await client_a.get("/b")).status == 404
            assert (await client_b.get("/b")).json() == {"name": "b"}
            assert (await client_b.get("/a")).status == 404

    async def test_same_resource_on_two_apis(self) -> None:
        shared = Named("shared")
        api_a, api_b = API(), API()
        api_a.add_resource(shared, "/x")
        api_b.add_resource(shared, "/y")

        async with TestClient(api_a) as client_a, TestClient(api_b) as client_b:
            assert (await client_a.get("/x")).json() == {"name": "shared"}
            assert (await client_b.get("/y")).json() == {"name": "shared"}


class TestASGI:
    async def test_lifespan(self) -> None:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return incoming.pop(0)

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await API()({"type": "lifespan"}, receive, send)

        assert sent == [
            {"type": "lifespan.startup.complete"},
            {"type": "lifespan.shutdown.complete"},
        ]

    async def test_other_scopes_ignored(self) -> None:
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            raise AssertionError("receive must not be called")

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await API()({"type": "websocket"}, receive, send)
        assert sent == []

    async def test_post_form_round_trip(self) -> None:
        api = API()
        api.add_resource(Writer(), "/things")
        async with TestClient(api) as client:
            response = await client.post("/things", form={"name": "lamp", "colour": "red"})

        assert response.status == 201
        assert response.json() == {"name": "lamp", "colour": "red"}
