"""Tests for ready-made role extractors."""

import pytest

from rolegate.extractors import (
    extractor_from_settings,
    header_role_extractor,
    parse_numeric_role,
    state_role_extractor,
)
from rolegate.roles import RoleKind
from shared.config import AuthzSettings, RoleKindSetting


class TestParseNumericRole:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2", 2),
            ("0x10", 0x10),
            ("0X10", 0x10),
            (" 0x8000000000000000 ", 0x8000000000000000),
            ("0", 0),
        ],
    )
    def test_valid(self, raw, expected):
        """Test decimal and hex flags parse."""
        assert parse_numeric_role(raw) == expected

    @pytest.mark.parametrize("raw", ["", "admin", "-1", "0x1ffffffffffffffff", "0xzz", "1.5"])
    def test_invalid(self, raw):
        """Test malformed or out-of-range flags parse to None."""
        assert parse_numeric_role(raw) is None


class TestHeaderRoleExtractor:
    def test_text_role(self, make_request):
        """Test a text role is read from the header."""
        extract = header_role_extractor("X-Role")
        assert extract(make_request(headers={"x-role": "ADMIN"})) == ("ADMIN", True)

    def test_text_role_is_stripped_not_folded(self, make_request):
        """Test surrounding blanks are stripped but case is kept."""
        extract = header_role_extractor("X-Role")
        assert extract(make_request(headers={"x-role": "  Admin "})) == ("Admin", True)

    def test_missing_header(self, make_request):
        """Test a missing header means no role."""
        extract = header_role_extractor("X-Role")
        assert extract(make_request()) == (None, False)

    def test_blank_header(self, make_request):
        """Test a blank header means no role."""
        extract = header_role_extractor("X-Role")
        assert extract(make_request(headers={"x-role": "   "})) == (None, False)

    def test_numeric_role(self, make_request):
        """Test a hex flag header parses to an int."""
        extract = header_role_extractor("X-Role", RoleKind.NUMERIC)
        assert extract(make_request(headers={"x-role": "0x04"})) == (4, True)

    def test_numeric_role_unparseable(self, make_request):
        """Test an unparseable flag header means no role."""
        extract = header_role_extractor("X-Role", RoleKind.NUMERIC)
        assert extract(make_request(headers={"x-role": "ADMIN"})) == (None, False)


class TestStateRoleExtractor:
    def test_role_on_state(self, make_request):
        """Test the role is read from request.state."""
        extract = state_role_extractor()
        assert extract(make_request(state={"role": "ADMIN"})) == ("ADMIN", True)

    def test_custom_attribute(self, make_request):
        """Test a custom state attribute can be used."""
        extract = state_role_extractor("user_role")
        assert extract(make_request(state={"user_role": 0x02})) == (0x02, True)

    def test_missing_attribute(self, make_request):
        """Test a missing state attribute means no role."""
        extract = state_role_extractor()
        assert extract(make_request()) == (None, False)


class TestExtractorFromSettings:
    def test_numeric_settings(self, make_request):
        """Test settings select a numeric header extractor."""
        settings = AuthzSettings(role_header="X-Flags", role_kind=RoleKindSetting.NUMERIC)
        extract = extractor_from_settings(settings)

        assert extract(make_request(headers={"x-flags": "3"})) == (3, True)

    def test_text_settings(self, make_request):
        """Test settings select a text header extractor."""
        extract = extractor_from_settings(AuthzSettings())
        assert extract(make_request(headers={"x-role": "GUEST"})) == ("GUEST", True)
