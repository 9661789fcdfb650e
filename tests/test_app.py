from app.core.config import Settings
from app.core.database import engine_options


class TestPages:
    """Server-rendered front end"""

    def test_home_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "/api/v1/students" in response.text

    def test_students_page(self, client):
        response = client.get("/students")
        assert response.status_code == 200
        assert 'id="students-table"' in response.text
        assert "/static/app.js" in response.text

    def test_static_assets(self, client):
        assert client.get("/static/app.js").status_code == 200
        assert client.get("/static/style.css").status_code == 200

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["database"] is True

    def test_cors_preflight(self, client):
        response = client.options(
            "/api/v1/students",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers


class TestSettings:

    def test_defaults_to_sqlite_file(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.DATABASE_URL == "sqlite:///./students.db"
        assert settings.is_sqlite

    def test_explicit_database_url(self):
        settings = Settings(_env_file=None, DATABASE_URL="postgresql://u:secret@db:5432/students")
        assert not settings.is_sqlite
        assert "secret" not in settings.masked_database_url()

    def test_cors_origins_from_string(self):
        settings = Settings(_env_file=None, BACKEND_CORS_ORIGINS="http://a.test, http://b.test")
        assert settings.BACKEND_CORS_ORIGINS == ["http://a.test", "http://b.test"]

        settings = Settings(_env_file=None, BACKEND_CORS_ORIGINS='["http://c.test"]')
        assert settings.BACKEND_CORS_ORIGINS == ["http://c.test"]


class TestEngineOptions:

    def test_memory_sqlite_shares_one_connection(self):
        options = engine_options("sqlite://")
        assert options["poolclass"].__name__ == "StaticPool"
        assert options["connect_args"] == {"check_same_thread": False}

    def test_file_sqlite_has_no_pool_sizing(self):
        options = engine_options("sqlite:///./students.db")
        assert "poolclass" not in options
        assert "pool_size" not in options

    def test_server_database_gets_queue_pool(self):
        options = engine_options("postgresql://u:p@localhost/db")
        assert options["poolclass"].__name__ == "QueuePool"
        assert options["pool_pre_ping"] is True
