import importlib
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

STRONG_KEY = "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"


def reload_config_module():
    config_module = sys.modules.get("app.config")
    if config_module:
        config_module.get_settings.cache_clear()
        sys.modules.pop("app.config", None)
    return importlib.import_module("app.config")


def test_missing_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_weak_secret_key_fails_closed(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "changeme-in-production")

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()

    with pytest.raises(Exception, match="secret_key|SECRET_KEY"):
        config_module.get_settings()


def test_strong_secret_key_passes(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_KEY)

    config_module = reload_config_module()
    config_module.get_settings.cache_clear()
    settings = config_module.get_settings()

    assert settings.secret_key
    assert settings.fee_reminder_days == [7, 3, 1]
    assert settings.reminder_interval.total_seconds() == 6 * 3600


def test_fee_reminder_days_are_normalized(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_KEY)
    monkeypatch.setenv("FEE_REMINDER_DAYS", "[1, 14, 3, 3]")

    config_module = reload_config_module()
    settings = config_module.get_settings()

    assert settings.fee_reminder_days == [14, 3, 1]


@pytest.mark.parametrize("raw", ["[]", "[0, 3]", "[-1]"])
def test_invalid_fee_reminder_days_rejected(monkeypatch, raw):
    monkeypatch.setenv("SECRET_KEY", STRONG_KEY)
    monkeypatch.setenv("FEE_REMINDER_DAYS", raw)

    config_module = reload_config_module()

    with pytest.raises(Exception, match="FEE_REMINDER_DAYS"):
        config_module.get_settings()


def test_non_positive_reminder_interval_rejected(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", STRONG_KEY)
    monkeypatch.setenv("REMINDER_INTERVAL_HOURS", "0")

    config_module = reload_config_module()

    with pytest.raises(Exception, match="REMINDER_INTERVAL_HOURS"):
        config_module.get_settings()
