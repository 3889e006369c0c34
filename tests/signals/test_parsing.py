"""Unit tests for string and cookie parsing helpers."""

import pytest

from gpc_signal.signals.parsing import cookie_boolean, cookie_value, string_to_boolean


class TestStringToBoolean:
    """Test string_to_boolean."""

    @pytest.mark.parametrize("value", ["true", "TRUE", "True", "1", "on", "ON", " true ", "\t1\n", "  On"])
    def test_truthy_values(self, value):
        """Test accepted truthy spellings, with surrounding whitespace."""
        assert string_to_boolean(value) is True

    @pytest.mark.parametrize("value", [
        "false", "0", "off", "yes", "unspecified", "", " ", "truee", "1 1", "t rue", "10", "null"
    ])
    def test_other_values(self, value):
        """Test every other string is False."""
        assert string_to_boolean(value) is False

    def test_none_is_false(self):
        """Test a missing value parses as False."""
        assert string_to_boolean(None) is False


class TestCookieValue:
    """Test cookie_value lookups."""

    def test_trims_keys_and_values(self):
        """Test surrounding whitespace is ignored."""
        assert cookie_value(" a=1; b=2 ", "b") == "2"
        assert cookie_value(" a=1; b=2 ", "a") == "1"

    def test_missing_cookie(self):
        """Test absent cookie returns None."""
        assert cookie_value("a=1", "z") is None

    def test_empty_jar(self):
        """Test empty and missing cookie strings."""
        assert cookie_value("", "a") is None
        assert cookie_value(None, "a") is None

    def test_first_match_wins(self):
        """Test duplicate names return the first value."""
        assert cookie_value("a=1; a=2", "a") == "1"

    def test_splits_on_first_equals(self):
        """Test values may contain '='."""
        assert cookie_value("token=abc==; b=2", "token") == "abc=="

    def test_pair_without_equals_is_skipped(self):
        """Test malformed pairs never match and never raise."""
        assert cookie_value("flag; b=2", "flag") is None
        assert cookie_value("flag; b=2", "b") == "2"

    def test_empty_value(self):
        """Test a present cookie with an empty value is found."""
        assert cookie_value("a=; b=2", "a") == ""

    def test_name_must_match_exactly(self):
        """Test no prefix or case-insensitive matching."""
        assert cookie_value("_globalPrivacyControlX=1", "_globalPrivacyControl") is None
        assert cookie_value("_GlobalPrivacyControl=1", "_globalPrivacyControl") is None


class TestCookieBoolean:
    """Test cookie_boolean."""

    def test_truthy_cookie(self):
        assert cookie_boolean("_globalPrivacyControl=1", "_globalPrivacyControl") is True
        assert cookie_boolean("x=y; _doNotTrack= on ", "_doNotTrack") is True

    def test_falsy_cookie(self):
        assert cookie_boolean("_globalPrivacyControl=0", "_globalPrivacyControl") is False

    def test_missing_cookie_is_false(self):
        """Test absent cookies parse as False instead of raising."""
        assert cookie_boolean("a=1", "_globalPrivacyControl") is False
        assert cookie_boolean("", "_globalPrivacyControl") is False
