"""Shared fixtures for unit tests."""

import pytest
from fakes import FakeNotifier, VirtualSleep


@pytest.fixture
def notifier() -> FakeNotifier:
    """Create a recording notifier."""
    return FakeNotifier()


@pytest.fixture
def virtual_sleep() -> VirtualSleep:
    """Create a virtual sleep function."""
    return VirtualSleep()
