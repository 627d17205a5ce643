import pytest
from fastapi.testclient import TestClient

from plywood_catalog.config import Settings, load_settings
from plywood_catalog.main import app

ENV_NAMES = (
    "CSV_URL",
    "CACHE_BUST",
    "APPS_SCRIPT_ENDPOINT",
    "BYPASS_PROXY",
    "ADMIN_TOKEN",
    "PROXY_URL",
    "REQUEST_TIMEOUT",
    "SITE_TITLE",
    "HOST",
    "PORT",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # set-then-delete so monkeypatch restores values written by load_dotenv
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "x")
        monkeypatch.delenv(name)
    empty = tmp_path / "empty.env"
    empty.write_text("")
    return str(empty)


def test_defaults(clean_env):
    settings = load_settings(reload=True, env_file=clean_env)
    assert settings == Settings()
    assert settings.csv_url == "REPLACE_WITH_YOUR_CSV_URL"
    assert settings.csv_configured is False
    assert settings.script_configured is False
    assert settings.bypass_proxy is False
    assert settings.cache_bust is True
    assert settings.admin_token == ""
    assert settings.proxy_url == "http://127.0.0.1:8000/api/proxy"
    assert settings.request_timeout == 10.0
    assert settings.port == 8000
    assert settings.log_level == "INFO"


def test_values_from_environment(clean_env, monkeypatch):
    monkeypatch.setenv("CSV_URL", "https://sheets.example.com/pub?output=csv")
    monkeypatch.setenv("APPS_SCRIPT_ENDPOINT", "https://script.example.com/exec")
    monkeypatch.setenv("ADMIN_TOKEN", "tok")
    monkeypatch.setenv("REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("PORT", "9001")

    settings = load_settings(reload=True, env_file=clean_env)
    assert settings.csv_configured is True
    assert settings.script_configured is True
    assert settings.admin_token == "tok"
    assert settings.request_timeout == 2.5
    assert settings.port == 9001


@pytest.mark.parametrize("raw, expected", [("true", True), ("TRUE", True), (" True ", True), ("yes", False), ("1", False), ("false", False)])
def test_only_literal_true_enables_flags(clean_env, monkeypatch, raw, expected):
    monkeypatch.setenv("BYPASS_PROXY", raw)
    monkeypatch.setenv("CACHE_BUST", raw)
    settings = load_settings(reload=True, env_file=clean_env)
    assert settings.bypass_proxy is expected
    assert settings.cache_bust is expected


def test_bad_numbers_fall_back(clean_env, monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("REQUEST_TIMEOUT", "soon")
    settings = load_settings(reload=True, env_file=clean_env)
    assert settings.port == 8000
    assert settings.request_timeout == 10.0


@pytest.mark.parametrize("raw, expected", [("debug", "DEBUG"), ("Warning", "WARNING"), ("verbose", "INFO")])
def test_log_level(clean_env, monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)
    assert load_settings(reload=True, env_file=clean_env).log_level == expected


def test_unknown_log_level_does_not_break_startup(clean_env, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    load_settings(reload=True, env_file=clean_env)
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200


def test_dotenv_does_not_override_environment(clean_env, monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("SITE_TITLE=From Dotenv\nPORT=9000\n")
    monkeypatch.setenv("PORT", "8100")

    settings = load_settings(reload=True, env_file=str(env_file))
    assert settings.site_title == "From Dotenv"
    assert settings.port == 8100


def test_cached_until_reload(clean_env, monkeypatch):
    monkeypatch.setenv("SITE_TITLE", "First")
    first = load_settings(reload=True, env_file=clean_env)

    monkeypatch.setenv("SITE_TITLE", "Second")
    assert load_settings() is first
    assert load_settings(reload=True, env_file=clean_env).site_title == "Second"
