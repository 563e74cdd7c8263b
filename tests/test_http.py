import pytest

from calculator_mcp.config import POST_PATH
from calculator_mcp.errors import NotFound, PathTraversal
from calculator_mcp.services.assets import AssetStore, content_type_for


class TestPreflight:
    @pytest.mark.parametrize("path", ["/mcp", "/mcp/messages", "/calculate", "/anything/else"])
    def test_options_always_204(self, client, path):
        response = client.options(path)
        assert response.status_code == 204
        assert response.content == b""
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type, Accept"
        assert response.headers["access-control-max-age"] == "86400"

    def test_browser_preflight(self, client):
        response = client.options(
            "/calculate",
            headers={
                "Origin": "https://chat.example",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 204


class TestCalculate:
    def test_adds_by_default(self, client):
        response = client.post("/calculate", json={"a": 2, "b": 3})
        assert response.status_code == 200
        assert response.json() == {"result": 5}
        assert response.headers["access-control-allow-origin"] == "*"

    def test_other_operations_match_the_tools(self, client):
        response = client.post("/calculate", json={"a": 10, "b": 4, "operation": "divide"})
        assert response.json() == {"result": 2.5}

    def test_non_numeric_inputs(self, client):
        response = client.post("/calculate", json={"a": "x", "b": 2})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid inputs"}

    @pytest.mark.parametrize(
        "body",
        [{"a": 1}, {"a": True, "b": 2}, {"a": 1, "b": 2, "operation": "pow"}, [1, 2], 5],
    )
    def test_rejected_bodies(self, client, body):
        response = client.post("/calculate", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid inputs"}

    def test_malformed_json(self, client):
        response = client.post(
            "/calculate", content=b"{a: 1", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}

    def test_divide_by_zero(self, client):
        response = client.post("/calculate", json={"a": 1, "b": 0, "operation": "divide"})
        assert response.status_code == 400
        assert response.json() == {"error": "Cannot divide by zero"}

    @pytest.mark.parametrize(
        "body",
        [
            {"a": 1e308, "b": 1e308},
            {"a": 1e308, "b": 10, "operation": "multiply"},
            {"a": 10**400, "b": 3, "operation": "divide"},
        ],
    )
    def test_out_of_range_result(self, client, body):
        response = client.post("/calculate", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Result is out of range"}

    @pytest.mark.parametrize(
        "content",
        [b'{"a": NaN, "b": 1}', b'{"a": Infinity, "b": 1}', b'{"a": 1, "b": -Infinity}'],
    )
    def test_non_json_constants(self, client, content):
        response = client.post(
            "/calculate", content=content, headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}

    def test_overflowing_literal(self, client):
        response = client.post(
            "/calculate", content=b'{"a": 1e999, "b": 1}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid inputs"}


class TestMessagePost:
    def test_missing_session_id(self, client):
        response = client.post(POST_PATH, json={"jsonrpc": "2.0", "id": 1, "method": "ping"})
        assert response.status_code == 400
        assert response.text == "Missing sessionId query parameter"

    def test_empty_session_id(self, client):
        response = client.post(f"{POST_PATH}?sessionId=", json={})
        assert response.status_code == 400

    def test_unknown_session(self, client):
        response = client.post(
            f"{POST_PATH}?sessionId=deadbeef",
            json={"jsonrpc": "2.0", "id": 1, "method": "ping"},
        )
        assert response.status_code == 404
        assert response.text == "Unknown session"

    def test_unknown_session_creates_nothing(self, client, app):
        client.post(f"{POST_PATH}?sessionId=deadbeef", json={})
        assert len(app.state.sessions) == 0


class TestAssets:
    @pytest.mark.parametrize(
        "path, content_type",
        [
            ("add.js", "application/javascript"),
            ("add.css", "text/css"),
            ("add.html", "text/html"),
            ("logo.bin", "application/octet-stream"),
            ("nested/chunk.js", "application/javascript"),
        ],
    )
    def test_serves_files(self, client, path, content_type):
        response = client.get(f"/assets/{path}")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(content_type)
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["cache-control"] == "public, max-age=3600"

    def test_missing_file(self, client):
        assert client.get("/assets/nope.js").status_code == 404

    def test_directory_is_not_served(self, client):
        assert client.get("/assets/nested").status_code == 404

    @pytest.mark.parametrize(
        "path",
        [
            "/assets/../secret.txt",
            "/assets/..%2Fsecret.txt",
            "/assets/..%2F..%2F..%2Fetc%2Fpasswd",
            "/assets/%2E%2E/secret.txt",
        ],
    )
    def test_traversal_is_404(self, client, path):
        response = client.get(path)
        assert response.status_code == 404
        assert "top secret" not in response.text


class TestAssetStore:
    def test_resolve_inside_root(self, assets_dir):
        store = AssetStore(assets_dir)
        assert store.resolve("add.js") == str((assets_dir / "add.js").resolve())

    @pytest.mark.parametrize(
        "name", ["../secret.txt", "../../etc/passwd", "nested/../../secret.txt", "", "/etc/passwd"]
    )
    def test_traversal(self, assets_dir, name):
        with pytest.raises(PathTraversal):
            AssetStore(assets_dir).resolve(name)

    def test_symlink_escape(self, assets_dir, tmp_path):
        link = assets_dir / "escape.txt"
        link.symlink_to(tmp_path / "secret.txt")
        with pytest.raises(PathTraversal):
            AssetStore(assets_dir).resolve("escape.txt")

    def test_missing(self, assets_dir):
        with pytest.raises(NotFound):
            AssetStore(assets_dir).resolve("missing.css")

    def test_content_types(self):
        assert content_type_for("a.JS") == "application/javascript"
        assert content_type_for("b.png") == "application/octet-stream"


class TestOtherRoutes:
    def test_unknown_path(self, client):
        response = client.get("/does/not/exist")
        assert response.status_code == 404
        assert response.text == "Not Found"

    def test_wrong_method_is_404(self, client):
        assert client.get(POST_PATH).status_code == 404
        assert client.post("/assets/add.js").status_code == 404
        assert client.put("/calculate", json={"a": 1, "b": 2}).status_code == 404

    def test_index_missing(self, client):
        response = client.get("/")
        assert response.status_code == 404
        assert response.text == "index.html not found"

    def test_index_served(self, client, tmp_path):
        (tmp_path / "index.html").write_text("<h1>Calculator</h1>", encoding="utf-8")
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "<h1>Calculator</h1>"

    def test_domain_verification(self, client, tmp_path):
        assert client.get("/.well-known/openai-apps-challenge").status_code == 404
        (tmp_path / ".well-known").mkdir()
        (tmp_path / ".well-known" / "openai-apps-challenge").write_text("token-123")
        response = client.get("/.well-known/openai-apps-challenge")
        assert response.status_code == 200
        assert response.text == "token-123"
        assert response.headers["content-type"].startswith("text/plain")

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.json() == {"status": "healthy", "sessions": 0}

    def test_unhandled_errors_become_500(self, app, client, monkeypatch):
        def explode(self, file_name):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(AssetStore, "resolve", explode)
        response = client.get("/assets/add.js")
        assert response.status_code == 500
        assert response.text == "Internal Server Error"

    def test_lifespan_runs(self, app):
        from fastapi.testclient import TestClient

        with TestClient(app) as client:
            assert client.get("/api/health").status_code == 200
        assert len(app.state.sessions) == 0
