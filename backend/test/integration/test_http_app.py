"""Tests for static client serving and the combined ASGI app."""

import pytest
from fastapi.testclient import TestClient

from wrapsync.api.app import _resolve_static_file, create_app, create_http_app
from wrapsync.config.settings import ServerSettings
from wrapsync.connection.player_registry import PlayerRegistry


@pytest.fixture
def bundle(tmp_path):
    (tmp_path / "index.html").write_text("<html>garage</html>")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "app.js").write_text("console.log('vroom')")
    return tmp_path


class TestStaticClient:

    @pytest.mark.integration
    def test_serves_index_and_assets(self, bundle):
        client = TestClient(create_http_app(ServerSettings(static_dir=str(bundle))))

        index = client.get("/")
        assert index.status_code == 200
        assert "garage" in index.text

        asset = client.get("/assets/app.js")
        assert asset.status_code == 200
        assert "vroom" in asset.text

    @pytest.mark.integration
    def test_unknown_paths_fall_back_to_index(self, bundle):
        client = TestClient(create_http_app(ServerSettings(static_dir=str(bundle))))

        response = client.get("/showroom/some-car")

        assert response.status_code == 200
        assert "garage" in response.text

    @pytest.mark.integration
    def test_missing_bundle_returns_404(self, tmp_path):
        client = TestClient(create_http_app(ServerSettings(static_dir=str(tmp_path / "nope"))))

        assert client.get("/").status_code == 404

    @pytest.mark.integration
    def test_resolve_refuses_traversal(self, bundle):
        (bundle.parent / "secret.txt").write_text("keys")

        assert _resolve_static_file(bundle.resolve(), "../secret.txt") is None
        assert _resolve_static_file(bundle.resolve(), "assets") is None
        assert _resolve_static_file(bundle.resolve(), "assets/app.js") == (bundle / "assets" / "app.js").resolve()


class TestCombinedApp:

    @pytest.mark.integration
    def test_create_app_wires_injected_registry(self, bundle):
        registry = PlayerRegistry()

        socket_app = create_app(ServerSettings(static_dir=str(bundle)), registry=registry)

        http_app = socket_app.other_asgi_app
        assert http_app.state.dispatcher.registry is registry
        assert http_app.state.settings.static_dir == str(bundle)

    @pytest.mark.integration
    def test_http_requests_pass_through_to_fastapi(self, bundle):
        client = TestClient(create_app(ServerSettings(static_dir=str(bundle))))

        assert "garage" in client.get("/").text
