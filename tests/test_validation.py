"""ABOUTME: Tests for the shared validators and the rule-table runner."""

import pytest

from recherche_entreprises_mcp.common.validation import (
    DATE_PATTERN,
    ValidationRule,
    apply_rules,
    validate_date_format,
    validate_departement,
    validate_number_range,
    validate_pattern,
)


class TestValidateNumberRange:
    """Tests for validate_number_range."""

    def test_none_is_valid(self):
        """Test that a missing value passes."""
        assert validate_number_range(None, 0, 10) == (True, None)

    def test_inclusive_bounds(self):
        """Test that both bounds are inclusive by default."""
        assert validate_number_range(0, 0, 10)[0] is True
        assert validate_number_range(10, 0, 10)[0] is True

    def test_out_of_range(self):
        """Test values outside the range."""
        is_valid, error = validate_number_range(11, 0, 10, "per_page")
        assert is_valid is False
        assert "per_page" in error

    def test_exclusive_minimum(self):
        """Test that min_exclusive rejects the bound itself."""
        assert validate_number_range(0, 0, 50, "radius", min_exclusive=True)[0] is False
        assert validate_number_range(0.1, 0, 50, "radius", min_exclusive=True)[0] is True

    def test_rejects_bool(self):
        """Test that booleans are not treated as numbers."""
        is_valid, error = validate_number_range(True, 0, 10)
        assert is_valid is False
        assert "number" in error

    def test_open_ended_bounds(self):
        """Test ranges with only one bound."""
        assert validate_number_range(-5, None, 10)[0] is True
        is_valid, error = validate_number_range(-5, 0, None, "page")
        assert is_valid is False
        assert "at least 0" in error


class TestValidatePattern:
    """Tests for validate_pattern and validate_date_format."""

    def test_empty_is_valid(self):
        """Test that empty strings are treated as missing."""
        assert validate_pattern("", DATE_PATTERN) == (True, None)

    def test_valid_date(self):
        """Test a well-formed date."""
        assert validate_date_format("1970-01-31", "date_naissance_personne_min") == (True, None)

    @pytest.mark.parametrize("value", ["31/01/1970", "1970-1-31", "19700131", "1970-01-31T00:00", "1970-01-31\n"])
    def test_invalid_date(self, value):
        """Test malformed dates report the field and format."""
        is_valid, error = validate_date_format(value, "date_naissance_personne_max")
        assert is_valid is False
        assert error == "date_naissance_personne_max must be in YYYY-MM-DD format"


class TestValidateDepartement:
    """Tests for department code validation."""

    @pytest.mark.parametrize("code", ["75", "01", "2A", "2b", "971", "976", "95", "75,2A,971"])
    def test_valid_codes(self, code):
        """Test metropolitan, Corsican and overseas codes."""
        assert validate_departement(code) == (True, None)

    @pytest.mark.parametrize("code", ["999", "96", "975", "2C", "abc", "75,999", "75x"])
    def test_invalid_codes(self, code):
        """Test codes outside the French department list."""
        is_valid, error = validate_departement(code)
        assert is_valid is False
        assert error == "departement must be a valid French department code (2-3 digits)"

    def test_missing_is_valid(self):
        """Test that no department passes."""
        assert validate_departement(None) == (True, None)


class TestApplyRules:
    """Tests for the ordered rule runner."""

    def test_all_pass(self):
        """Test that passing rules return None."""
        rules = [ValidationRule("a", lambda p: (True, None))]
        assert apply_rules(rules, {}) is None

    def test_first_failure_wins(self):
        """Test that evaluation stops at the first failing rule."""
        calls = []

        def failing(name):
            def check(params):
                calls.append(name)
                return False, f"{name} failed"
            return check

        rules = [
            ValidationRule("first", lambda p: (True, None)),
            ValidationRule("second", failing("second")),
            ValidationRule("third", failing("third")),
        ]
        assert apply_rules(rules, {}) == ("second", "second failed")
        assert calls == ["second"]

    def test_default_message(self):
        """Test a failing rule without a message gets a generic one."""
        rules = [ValidationRule("page", lambda p: (False, None))]
        assert apply_rules(rules, {}) == ("page", "Invalid value for page")
