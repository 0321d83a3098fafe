"""
Environment variable validation tests.

Tests regex patterns for the storage, expiry and port validators.
"""

import pytest
from unittest.mock import MagicMock

from config.env_validation import (
    ENV_VAR_RULES,
    validate_single_var,
    validate_environment,
    log_validation_results,
)


class TestStorageAccountValidation:
    """STORAGE_ACCOUNT_NAME is required and 3-24 lowercase alphanumerics."""

    rule = ENV_VAR_RULES["STORAGE_ACCOUNT_NAME"]

    def test_valid_name_accepted(self, clean_env):
        clean_env.setenv("STORAGE_ACCOUNT_NAME", "sharesafely01")
        assert validate_single_var("STORAGE_ACCOUNT_NAME", self.rule) is None

    def test_missing_is_error(self, clean_env):
        result = validate_single_var("STORAGE_ACCOUNT_NAME", self.rule)
        assert result is not None
        assert result.severity == "error"
        assert result.message == "Required environment variable not set"

    def test_spaces_rejected(self, clean_env):
        clean_env.setenv("STORAGE_ACCOUNT_NAME", "  ")
        result = validate_single_var("STORAGE_ACCOUNT_NAME", self.rule)
        assert result is not None
        assert result.severity == "error"

    @pytest.mark.parametrize("value", ["ab", "Share", "share-safely", "a" * 25])
    def test_invalid_format_rejected(self, clean_env, value):
        clean_env.setenv("STORAGE_ACCOUNT_NAME", value)
        result = validate_single_var("STORAGE_ACCOUNT_NAME", self.rule)
        assert result is not None
        assert result.message == "Invalid format"

    def test_legacy_name_satisfies_rule(self, clean_env):
        clean_env.setenv("AZURE_STORAGE_ACCOUNT_NAME", "legacyaccount")
        assert validate_single_var("STORAGE_ACCOUNT_NAME", self.rule) is None


class TestContainerNameValidation:

    rule = ENV_VAR_RULES["STORAGE_CONTAINER_NAME"]

    @pytest.mark.parametrize("value", ["uploaded-files", "abc", "a1-b2-c3"])
    def test_valid_names_accepted(self, clean_env, value):
        clean_env.setenv("STORAGE_CONTAINER_NAME", value)
        assert validate_single_var("STORAGE_CONTAINER_NAME", self.rule) is None

    @pytest.mark.parametrize("value", ["ab", "Uploads", "double--dash", "-leading", "trailing-"])
    def test_invalid_names_rejected(self, clean_env, value):
        clean_env.setenv("STORAGE_CONTAINER_NAME", value)
        assert validate_single_var("STORAGE_CONTAINER_NAME", self.rule) is not None

    def test_unset_warns_with_default(self, clean_env):
        result = validate_single_var("STORAGE_CONTAINER_NAME", self.rule)
        assert result.severity == "warning"
        assert result.expected_pattern == "Default: uploaded-files"


class TestNumericValidation:

    @pytest.mark.parametrize("var", ["ACCESS_TOKEN_EXPIRY_MINUTES", "MAX_UPLOAD_SIZE_MB"])
    @pytest.mark.parametrize("value", ["0", "-1", "1.5", "ten"])
    def test_non_positive_integers_rejected(self, clean_env, var, value):
        clean_env.setenv(var, value)
        assert validate_single_var(var, ENV_VAR_RULES[var]) is not None

    @pytest.mark.parametrize("value", ["1", "80", "3000", "65535"])
    def test_valid_ports(self, clean_env, value):
        clean_env.setenv("PORT", value)
        assert validate_single_var("PORT", ENV_VAR_RULES["PORT"]) is None

    @pytest.mark.parametrize("value", ["0", "65536", "http"])
    def test_invalid_ports(self, clean_env, value):
        clean_env.setenv("PORT", value)
        assert validate_single_var("PORT", ENV_VAR_RULES["PORT"]) is not None


class TestSummary:

    def test_valid_environment(self, clean_env):
        clean_env.setenv("STORAGE_ACCOUNT_NAME", "sharesafely01")
        errors = [r for r in validate_environment() if r.severity == "error"]
        assert errors == []

    def test_missing_required_reported(self, clean_env):
        errors = [r for r in validate_environment() if r.severity == "error"]
        assert [e.var_name for e in errors] == ["STORAGE_ACCOUNT_NAME"]
        assert errors[0].message == "Required environment variable not set"

    def test_log_validation_results_returns_status(self, clean_env):
        logger = MagicMock()
        assert log_validation_results(logger) is False
        assert logger.error.called

        clean_env.setenv("STORAGE_ACCOUNT_NAME", "sharesafely01")
        assert log_validation_results(logger) is True
