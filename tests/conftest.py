"""Shared test fixtures and configuration for GPC Signal tests."""

import pytest
from pathlib import Path
import sys

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from gpc_signal.signals.config import SignalConfigLoader
from gpc_signal.signals.models import BodyClassList, UserAgentEnvironment
from gpc_signal.signals.resolver import GlobalPrivacyControl


@pytest.fixture(autouse=True)
def clean_signal_environment(monkeypatch):
    """Keep GPC_SIGNAL_* variables from the host out of the tests."""
    for field_name in ("SUPPORT", "ALTER_BODY_CLASS", "BODY_CLASS_PREFIX",
                       "INCLUDE_DNT_SUPPORT", "COOKIE_NAME", "DNT_COOKIE_NAME"):
        monkeypatch.delenv(f"{SignalConfigLoader.ENV_PREFIX}{field_name}", raising=False)


@pytest.fixture
def environment():
    """User agent environment with no signals."""
    return UserAgentEnvironment()


@pytest.fixture
def body_classes():
    """Body class list with an unrelated class already present."""
    return BodyClassList(["govuk-template__body"])


@pytest.fixture
def resolver(environment, body_classes):
    """Resolver with default configuration."""
    return GlobalPrivacyControl(environment=environment, body_classes=body_classes)
