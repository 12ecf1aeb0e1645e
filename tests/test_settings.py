from ipv.config.settings import Settings

def test_settings_read_env_case_insensitive_and_ignore_unknown(monkeypatch):
    monkeypatch.setenv("guest_max_stores", "5")
    monkeypatch.setenv("CONFIRMED_DISPLAY_SECONDS", "3")
    monkeypatch.setenv("IPV_UNKNOWN_KEY", "x")

    settings = Settings(_env_file=None)

    assert settings.guest_max_stores == 5
    assert settings.confirmed_display_seconds == 3.0
    assert Settings.model_config["extra"] == "ignore"
