# tests/conftest.py
# Общие фикстуры: приложение на in-memory SQLite с фиксированным секретом.
import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.db.session import make_engine
from storefront.main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        ENVIRONMENT="test",
        CLIENT_DIR=str(tmp_path / "client"),
        DB_INIT_RETRIES=1,
        DB_INIT_DELAY=0,
    )


@pytest.fixture
def client_dir(settings, tmp_path):
    path = tmp_path / "client"
    (path / "assets").mkdir(parents=True)
    (path / "index.html").write_text("<html><body>storefront</body></html>")
    (path / "assets" / "app.js").write_text("console.log('app');")
    return path


@pytest.fixture
def app(settings, client_dir):
    return create_app(settings, engine=make_engine(settings.DATABASE_URL))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register_admin(client):
    def _register(username="alice", password="pw123"):
        return client.post("/api/admin/register", json={"username": username, "password": password})

    return _register


@pytest.fixture
def admin_token(client, register_admin):
    register_admin("admin", "secret")
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "secret"})
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def create_product(client, auth_headers):
    def _create(name="Widget", price="9.99", image_url="http://x/y.png"):
        resp = client.post(
            "/api/products",
            json={"name": name, "price": price, "imageUrl": image_url},
            headers=auth_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
