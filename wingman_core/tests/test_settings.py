import pydantic
import pytest

from wingman_core.config.settings import WingmanSettings, load_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in ("GEMINI_API_KEY", "GEMINI_MODEL", "ENABLE_SEARCH_GROUNDING", "WINGMAN_CONFIG_FILE", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    cfg = load_settings()
    assert cfg.gemini_api_key is None
    assert cfg.gemini_model is None
    assert cfg.enable_search_grounding is True
    assert cfg.default_model == "wingman-chat"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "k" * 20)
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-flash")
    monkeypatch.setenv("ENABLE_SEARCH_GROUNDING", "false")
    cfg = load_settings()
    assert cfg.gemini_api_key == "k" * 20
    assert cfg.gemini_model == "gemini-2.5-flash"
    assert cfg.enable_search_grounding is False


def test_yaml_source_below_env(monkeypatch, tmp_path):
    cfg_file = tmp_path / "wingman.yaml"
    cfg_file.write_text("gemini_model: from-yaml\nlog_level: debug\nhttp_timeout: 5\n", encoding="utf-8")
    monkeypatch.setenv("WINGMAN_CONFIG_FILE", str(cfg_file))
    cfg = load_settings()
    assert cfg.gemini_model == "from-yaml"
    assert cfg.log_level == "DEBUG"
    assert cfg.http_timeout == 5.0

    monkeypatch.setenv("GEMINI_MODEL", "from-env")
    assert load_settings().gemini_model == "from-env"


def test_init_overrides_win(monkeypatch):
    monkeypatch.setenv("GEMINI_MODEL", "from-env")
    assert load_settings(gemini_model="explicit").gemini_model == "explicit"


def test_short_api_key_rejected():
    with pytest.raises(pydantic.ValidationError):
        WingmanSettings(gemini_api_key="short")


def test_bad_log_level_rejected():
    with pytest.raises(pydantic.ValidationError):
        WingmanSettings(log_level="chatty")
