from assistant_admin.config import ConsoleConfig, load_config


def test_defaults_without_env(monkeypatch):
    for name in ("ADMIN_API_BASE_URL", "ADMIN_EXCLUSIVE_SAVES", "ADMIN_REQUEST_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = ConsoleConfig.from_env()
    assert config.api_base_url == "http://localhost:3000"
    assert config.exclusive_saves is False
    assert config.request_timeout == 60.0
    assert config.message_ttl == 3.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ADMIN_API_BASE_URL", "https://admin.example")
    monkeypatch.setenv("ADMIN_EXCLUSIVE_SAVES", "true")
    monkeypatch.setenv("ADMIN_VALIDATE_BEFORE_SAVE", "1")
    monkeypatch.setenv("ADMIN_REQUEST_TIMEOUT", "none")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    config = ConsoleConfig.from_env()
    assert config.api_base_url == "https://admin.example"
    assert config.exclusive_saves is True
    assert config.validate_before_save is True
    assert config.request_timeout is None
    assert config.log_level == "DEBUG"


def test_load_config_reads_dotenv(tmp_path, monkeypatch):
    # setenv first so monkeypatch restores the variable to "unset" afterwards
    monkeypatch.setenv("ADMIN_CACHE_FILE", "placeholder")
    monkeypatch.delenv("ADMIN_CACHE_FILE")
    env_file = tmp_path / ".env"
    env_file.write_text("ADMIN_CACHE_FILE=/tmp/admin-cache.json\n", encoding="utf-8")
    config = load_config(str(env_file))
    assert config.cache_file == "/tmp/admin-cache.json"
