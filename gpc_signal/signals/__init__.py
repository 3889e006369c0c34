"""Privacy signal resolution for Global Privacy Control and Do Not Track.

This package resolves a user's tracking opt-out preference from native user
agent signals and relay cookies, and keeps a signal class on the document
body in sync with the result.
"""

from .parsing import (
    string_to_boolean,
    cookie_value,
    cookie_boolean
)

from .config import (
    SignalConfig,
    SignalConfigLoader,
    load_signal_config,
    validate_config_file
)

from .models import (
    BodyClassList,
    SignalResolution,
    SignalSource,
    UserAgentEnvironment
)

from .resolver import GlobalPrivacyControl

__all__ = [
    # Parsing
    "string_to_boolean",
    "cookie_value",
    "cookie_boolean",

    # Configuration
    "SignalConfig",
    "SignalConfigLoader",
    "load_signal_config",
    "validate_config_file",

    # Models
    "BodyClassList",
    "SignalResolution",
    "SignalSource",
    "UserAgentEnvironment",

    # Resolver
    "GlobalPrivacyControl"
]
