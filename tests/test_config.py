import pytest

import config


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(config, "load_env", lambda: None)


def test_missing_token_raises(monkeypatch):
    monkeypatch.delenv("BOT_TOKEN", raising=False)
    with pytest.raises(ValueError):
        config.load_config()


def test_defaults(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("DROP_PENDING_UPDATES", raising=False)
    cfg = config.load_config()
    assert cfg.bot_token == "123:abc"
    assert cfg.log_level == "INFO"
    assert cfg.drop_pending_updates is True


def test_overrides(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DROP_PENDING_UPDATES", "false")
    cfg = config.load_config()
    assert cfg.log_level == "DEBUG"
    assert cfg.drop_pending_updates is False
