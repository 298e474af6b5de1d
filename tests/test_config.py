from config import load_settings

ENV_VARS = ["DATABASE_URL", "PORT", "LIVE_URL", "RENDER_EXTERNAL_URL", "API_BASE", "STATIC_DIR", "SEED_DEMO", "LOG_LEVEL"]


def clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    clear_env(monkeypatch)
    settings = load_settings()
    assert settings.database_url == "sqlite:///./data/restaurant.db"
    assert settings.port == 4000
    assert settings.live_url == ""
    assert settings.api_base == "/api"
    assert settings.seed_demo is True


def test_api_base_follows_live_url(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("RENDER_EXTERNAL_URL", "https://bistro.onrender.com/")
    settings = load_settings()
    assert settings.live_url == "https://bistro.onrender.com/"
    assert settings.api_base == "https://bistro.onrender.com/api"


def test_explicit_values(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("LIVE_URL", "https://bistro.example.com")
    monkeypatch.setenv("API_BASE", "/v2/api")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("SEED_DEMO", "off")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.api_base == "/v2/api"
    assert settings.port == 8080
    assert settings.seed_demo is False
    assert settings.log_level == "DEBUG"
