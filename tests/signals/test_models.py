"""Unit tests for signal models."""

from gpc_signal.signals.config import SignalConfig
from gpc_signal.signals.models import (
    BodyClassList,
    SignalResolution,
    SignalSource,
    UserAgentEnvironment,
)
from gpc_signal.signals.resolver import GlobalPrivacyControl


class TestUserAgentEnvironment:
    """Test UserAgentEnvironment construction."""

    def test_defaults(self):
        environment = UserAgentEnvironment()

        assert environment.global_privacy_control is None
        assert environment.do_not_track is None
        assert environment.cookie == ""

    def test_from_headers(self):
        """Test Sec-GPC, DNT and Cookie headers are read case-insensitively."""
        environment = UserAgentEnvironment.from_headers({
            "sec-gpc": "1",
            "DNT": "0",
            "COOKIE": "a=1; b=2",
        })

        assert environment.global_privacy_control is True
        assert environment.do_not_track == "0"
        assert environment.cookie == "a=1; b=2"

    def test_from_headers_without_signals(self):
        """Test missing headers leave signals absent."""
        environment = UserAgentEnvironment.from_headers({"User-Agent": "test"})

        assert environment.global_privacy_control is None
        assert environment.do_not_track is None
        assert environment.cookie == ""

    def test_from_headers_gpc_zero(self):
        """Test a present but off Sec-GPC header is False, not absent."""
        environment = UserAgentEnvironment.from_headers({"Sec-GPC": "0"})
        assert environment.global_privacy_control is False

    def test_from_navigator(self):
        environment = UserAgentEnvironment.from_navigator({
            "globalPrivacyControl": True,
            "doNotTrack": "1",
            "cookie": "_doNotTrack=1",
        })

        assert environment.global_privacy_control is True
        assert environment.do_not_track == "1"
        assert environment.cookie == "_doNotTrack=1"

    def test_from_navigator_nulls(self):
        """Test null values mean the signal is not provided."""
        environment = UserAgentEnvironment.from_navigator({
            "globalPrivacyControl": None,
            "doNotTrack": None,
            "cookie": None,
        })

        assert environment.global_privacy_control is None
        assert environment.do_not_track is None
        assert environment.cookie == ""

    def test_from_navigator_null_dnt_is_present(self):
        """Test a DNT value defined as null stays present and resolves off."""
        environment = UserAgentEnvironment.from_navigator({"doNotTrack": "null", "cookie": "_doNotTrack=1"})

        assert environment.do_not_track == "null"

        resolver = GlobalPrivacyControl(
            config=SignalConfig(include_dnt_support=True),
            environment=environment
        )
        resolution = resolver.resolve()

        assert resolution.signal is False
        assert resolution.source == SignalSource.DNT_NAVIGATOR

    def test_from_navigator_false_gpc_is_present(self):
        environment = UserAgentEnvironment.from_navigator({"globalPrivacyControl": False})
        assert environment.global_privacy_control is False

    def test_from_navigator_empty(self):
        assert UserAgentEnvironment.from_navigator(None) == UserAgentEnvironment()

    def test_environment_is_mutable(self):
        """Test hosts can update signals between resolutions."""
        environment = UserAgentEnvironment()
        environment.global_privacy_control = True
        assert environment.global_privacy_control is True


class TestBodyClassList:
    """Test BodyClassList token handling."""

    def test_add_and_remove(self):
        classes = BodyClassList()
        classes.add("a")
        classes.add("b")
        classes.add("a")

        assert list(classes) == ["a", "b"]
        assert len(classes) == 2

        classes.remove("a")
        classes.remove("missing")

        assert list(classes) == ["b"]

    def test_contains(self):
        classes = BodyClassList(["a"])

        assert classes.contains("a")
        assert "a" in classes
        assert "b" not in classes

    def test_class_name_round_trip(self):
        """Test parsing and rendering a class attribute."""
        classes = BodyClassList.from_class_name("  js-enabled   govuk-template__body ")

        assert list(classes) == ["js-enabled", "govuk-template__body"]
        assert classes.class_name == "js-enabled govuk-template__body"

    def test_from_empty_class_name(self):
        assert len(BodyClassList.from_class_name(None)) == 0
        assert BodyClassList.from_class_name("").class_name == ""

    def test_initial_tokens_deduplicated(self):
        assert list(BodyClassList(["a", "a", "b"])) == ["a", "b"]


class TestSignalResolution:
    """Test SignalResolution serialization."""

    def test_serialization(self):
        resolution = SignalResolution(signal=True, source=SignalSource.GPC_COOKIE)
        data = resolution.model_dump(mode="json")

        assert data == {"signal": True, "source": "gpc_cookie"}
