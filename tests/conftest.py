import pytest
from fastapi.testclient import TestClient

from calculator_mcp.app import create_app
from calculator_mcp.config import POST_PATH
from calculator_mcp.core.sessions import SessionManager
from calculator_mcp.widgets import WidgetCatalog, WidgetRegistry

WIDGET_DOMAIN = "https://widgets.example.test"
ADD_HTML = "<!DOCTYPE html><html><body><div id=\"add-root\"></div></body></html>"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def assets_dir(tmp_path):
    assets = tmp_path / "assets"
    assets.mkdir()
    (assets / "add.html").write_text(ADD_HTML, encoding="utf-8")
    (assets / "add.js").write_text("console.log('add');", encoding="utf-8")
    (assets / "add.css").write_text("body { margin: 0; }", encoding="utf-8")
    (assets / "logo.bin").write_bytes(b"\x00\x01\x02")
    (assets / "nested").mkdir()
    (assets / "nested" / "chunk.js").write_text("export {};", encoding="utf-8")
    # a file next to (not inside) the assets root
    (tmp_path / "secret.txt").write_text("top secret", encoding="utf-8")
    return assets


@pytest.fixture
def registry(assets_dir):
    return WidgetRegistry.load(assets_dir, WIDGET_DOMAIN)


@pytest.fixture
def catalog(registry):
    return WidgetCatalog(registry)


@pytest.fixture
def session_manager(catalog):
    return SessionManager(catalog, POST_PATH)


@pytest.fixture
def app(assets_dir, tmp_path):
    return create_app(
        assets_dir=assets_dir,
        widget_domain=WIDGET_DOMAIN,
        project_root=tmp_path,
    )


@pytest.fixture
def client(app):
    return TestClient(app)
