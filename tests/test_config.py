import pytest

from marine_ops.config import Config


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("JWT_SECRET_KEY", "x" * 40)
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://ops:ops@db:5432/marine_ops")


def test_production_config_loads(production):
    config = Config()

    assert config.is_production
    assert config.access_token_expire_minutes == 480


def test_production_rejects_short_secret(production, monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "short")

    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        Config()


def test_production_requires_database_url(production, monkeypatch):
    monkeypatch.delenv("DATABASE_URL")

    with pytest.raises(ValueError, match="DATABASE_URL"):
        Config()


def test_cors_origins_are_split_and_trimmed(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://ops.example.ae, https://admin.example.ae,")

    assert Config().cors_origins == ["https://ops.example.ae", "https://admin.example.ae"]


def test_admin_credentials_need_a_password(monkeypatch):
    monkeypatch.setenv("ADMIN_EMAIL", "admin@marineops.ae")
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

    with pytest.raises(ValueError, match="ADMIN_PASSWORD"):
        Config().get_admin_credentials()
