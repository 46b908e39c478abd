from core import debug


def test_debug_log_redacts_the_token(tmp_path, monkeypatch):
    log_path = tmp_path / "debug.log"
    monkeypatch.setenv("OPENAI_TOKEN", "sk-secret")
    monkeypatch.setattr(debug, "_DEBUG", True)
    monkeypatch.setattr(debug, "LOG_PATH", log_path)

    debug.debug_log("posting with sk-secret")

    text = log_path.read_text(encoding="utf-8")
    assert "sk-secret" not in text
    assert "posting with <redacted>" in text


def test_debug_log_is_silent_when_disabled(tmp_path, monkeypatch):
    log_path = tmp_path / "debug.log"
    monkeypatch.setattr(debug, "_DEBUG", False)
    monkeypatch.setattr(debug, "LOG_PATH", log_path)

    debug.debug_log("hello")

    assert not log_path.exists()
