"""Shared fixtures: fast settings and a fresh fake driver per test."""

from __future__ import annotations

import pytest

from fakes import FakeDriver
from pom_kit.core.settings import Settings

BASE_URL = "http://app.test"


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(
        base_url=BASE_URL,
        navigation_timeout_ms=100,
        appear_timeout_ms=40,
        interactive_timeout_ms=60,
        probe_timeout_ms=30,
        action_timeout_ms=80,
    )


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def login_driver(driver: FakeDriver) -> FakeDriver:
    """A login form whose button reveals the dashboard indicator."""
    driver.add("#username")
    driver.add("#password")
    driver.add("#login-button")
    driver.on_click["#login-button"] = lambda d: d.add(".user-dashboard")
    return driver
