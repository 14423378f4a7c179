from usuarios_api.config import Settings


def test_defaults_fall_back_to_port_3000(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)

    assert Settings(_env_file=None).port == 3000


def test_url_is_built_from_parts():
    settings = Settings(
        _env_file=None,
        database_url="",
        db_host="db.internal",
        db_port=6543,
        db_user="app",
        db_password="pw",
        db_name="people",
    )

    assert settings.sqlalchemy_url == "postgresql+asyncpg://app:pw@db.internal:6543/people"


def test_database_url_overrides_parts():
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///local.db", db_host="ignored")

    assert settings.sqlalchemy_url == "sqlite+aiosqlite:///local.db"


def test_env_vars_are_read(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test")

    settings = Settings(_env_file=None)

    assert settings.cloudinary_cloud_name == "demo"
    assert settings.port == 8080
    assert settings.origins == ["http://a.test", "http://b.test"]
