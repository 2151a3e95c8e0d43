import json

from gigline.config import Settings, load_settings


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.delenv("GIGLINE_API_URL", raising=False)
    monkeypatch.delenv("GIGLINE_TIMEOUT", raising=False)
    assert load_settings(tmp_path / "missing.json") == Settings()


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"base_url": "https://file.example", "timeout": 5}))
    monkeypatch.setenv("GIGLINE_API_URL", "https://env.example")
    monkeypatch.delenv("GIGLINE_TIMEOUT", raising=False)
    settings = load_settings(path)
    assert settings.base_url == "https://env.example"
    assert settings.timeout == 5.0


def test_invalid_values_fall_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("GIGLINE_API_URL", raising=False)
    monkeypatch.setenv("GIGLINE_TIMEOUT", "soon")
    assert load_settings(tmp_path / "missing.json") == Settings()
