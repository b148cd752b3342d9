from __future__ import annotations

import pytest

from backend.core.config import Settings, load_settings
from backend.onboarding.progress import BuildTimings


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("AUTOMATION_BASE_URL", "https://automation.example/webhook/")
    monkeypatch.setenv("BUILD_TOTAL_SECONDS", "45")
    monkeypatch.setenv("POLL_INTERVAL", "not-a-number")
    monkeypatch.setenv("REQUIRE_GDPR_CONSENT", "yes")

    settings = load_settings()

    assert settings.automation_base_url == "https://automation.example/webhook/"
    assert settings.build_total_seconds == 45.0
    assert settings.poll_interval == Settings.poll_interval
    assert settings.require_gdpr_consent is True


@pytest.mark.parametrize("raw", ["0", "-5", "nan", "inf"])
def test_non_positive_timings_fall_back_to_defaults(monkeypatch, raw):
    for name in ("BUILD_TOTAL_SECONDS", "BUILD_TICK_SECONDS", "POLL_INTERVAL", "AUTOMATION_TIMEOUT"):
        monkeypatch.setenv(name, raw)

    settings = load_settings()

    assert settings.build_total_seconds == Settings.build_total_seconds
    assert settings.build_tick_seconds == Settings.build_tick_seconds
    assert settings.poll_interval == Settings.poll_interval
    assert settings.automation_timeout == Settings.automation_timeout
    assert BuildTimings.from_settings(settings).step == pytest.approx(1 / 900)


def test_timings_follow_settings():
    timings = BuildTimings.from_settings(Settings(build_total_seconds=60, build_tick_seconds=0.2))
    assert timings.total_seconds == 60
    assert timings.step == 0.2 / 60
    assert timings.poll_initial_delay == 10.0


@pytest.mark.parametrize("field", ["total_seconds", "tick_seconds"])
def test_timings_reject_zero_durations(field):
    with pytest.raises(ValueError):
        BuildTimings(**{field: 0})
