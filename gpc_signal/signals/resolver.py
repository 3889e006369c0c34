"""Global Privacy Control (GPC) and Do Not Track (DNT) signal resolution.

GPC lets users signal that they don't want to be tracked. It follows the
deprecated but still used Do Not Track signal. The resolver checks either
signal, can keep a body class in sync with the result, and exposes
``user_agent_signal`` for analytics setup code.

Minimum to enable support::

    resolver = GlobalPrivacyControl(environment=environment)
    resolver.init({"experimental_gpc_support": True})
"""

import logging
from typing import Any, Mapping, Optional

from .config import SignalConfig
from .models import BodyClassList, SignalResolution, SignalSource, UserAgentEnvironment
from .parsing import cookie_boolean, cookie_value, string_to_boolean

logger = logging.getLogger(__name__)


class GlobalPrivacyControl:
    """Resolves the user's tracking opt-out preference.

    Each instance owns its configuration, the user agent environment it
    reads signals from, and the body class list it keeps in sync.
    """

    def __init__(
        self,
        config: Optional[SignalConfig] = None,
        environment: Optional[UserAgentEnvironment] = None,
        body_classes: Optional[BodyClassList] = None
    ):
        """Initialize the resolver.

        Args:
            config: Signal configuration, defaults to ``SignalConfig()``
            environment: Source of the native signals and the cookie string
            body_classes: Class list of the document's root node
        """
        self.config = config or SignalConfig()
        self.environment = environment or UserAgentEnvironment()
        self.body_classes = body_classes if body_classes is not None else BodyClassList()

    def init(self, options: Optional[Mapping[str, Any]] = None) -> "GlobalPrivacyControl":
        """Merge options into the configuration and refresh the body class.

        Defaults::

            {
              "experimental_gpc_support": False,
              "experimental_gpc_alterBodyClass": True,
              "experimental_gpc_bodyClassPrefix": "global-privacy-control_signal-",
              "experimental_gpc_includeDNTSupport": False,
              "experimental_gpc_cookieNameOverride": "_globalPrivacyControl",
              "experimental_gpc_DNTCookieNameOverride": "_doNotTrack"
            }
        """
        self.config = self.config.merge(options)
        self.refresh_body_class()
        return self

    def reset(self) -> "GlobalPrivacyControl":
        """Restore the default configuration. The body classes are left as they are."""
        self.config = SignalConfig()
        return self

    def signal_class_name(self, signal: bool) -> str:
        return self.config.body_class_prefix + ("true" if signal else "false")

    def refresh_body_class(self) -> Optional[str]:
        """Set a body class based on the user agent signal.

        Either ``<prefix>true`` (user has turned on global privacy control)
        or ``<prefix>false`` (default or user has turned the setting off).
        The opposite class is removed in case the user changed their user
        agent settings since the last refresh.

        Returns:
            The class now present on the body, or None when support or
            body class alteration is disabled.
        """
        if not self.config.support or not self.config.alter_body_class:
            return None

        signal = self.user_agent_signal()
        desired = self.signal_class_name(signal)
        opposite = self.signal_class_name(not signal)

        if self.body_classes.contains(opposite):
            self.body_classes.remove(opposite)
            logger.debug(f"Removed stale body class {opposite}")
        self.body_classes.add(desired)

        return desired

    def user_agent_signal(self) -> bool:
        """Return True when the user agent says the user doesn't want to be tracked."""
        return self.resolve().signal

    def resolve(self) -> SignalResolution:
        """Resolve the signal and record which input decided it.

        Checks the navigator value first and then a custom cookie. Where a
        user agent sends the header but doesn't set the navigator value, a
        proxy or similar has to create the cookie for the value to be read.
        GPC takes precedence entirely; DNT is only consulted when GPC
        support is disabled or neither GPC input is present.
        """
        config = self.config
        environment = self.environment

        if config.support:
            if environment.global_privacy_control is not None:
                return self._resolved(
                    bool(environment.global_privacy_control),
                    SignalSource.GPC_NAVIGATOR
                )
            if cookie_value(environment.cookie, config.cookie_name) is not None:
                return self._resolved(
                    cookie_boolean(environment.cookie, config.cookie_name),
                    SignalSource.GPC_COOKIE
                )

        if config.include_dnt_support:
            if environment.do_not_track is not None:
                return self._resolved(
                    string_to_boolean(environment.do_not_track),
                    SignalSource.DNT_NAVIGATOR
                )
            if cookie_value(environment.cookie, config.dnt_cookie_name) is not None:
                return self._resolved(
                    cookie_boolean(environment.cookie, config.dnt_cookie_name),
                    SignalSource.DNT_COOKIE
                )

        return self._resolved(False, SignalSource.DEFAULT)

    def _resolved(self, signal: bool, source: SignalSource) -> SignalResolution:
        logger.debug(f"User agent signal {signal} from {source.value}")
        return SignalResolution(signal=signal, source=source)
