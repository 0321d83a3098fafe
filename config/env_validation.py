# ============================================================================
# ENVIRONMENT VARIABLE VALIDATION
# ============================================================================
# STATUS: Configuration - Startup validation with regex patterns
# PURPOSE: Validate env vars at startup to fail fast with clear error messages
# EXPORTS: ENV_VAR_RULES, EnvVarRule, ValidationError, validate_environment,
#          validate_single_var, log_validation_results
# DEPENDENCIES: standard library only
# ============================================================================
"""
Environment Variable Validation Module.

Validates environment variables at startup using regex patterns to catch
configuration errors EARLY with clear, actionable error messages.

Imported at the start of function_app.py and docker_service.py, before the
storage client is built.

Usage:
    from config.env_validation import validate_environment

    errors = validate_environment()
    for error in errors:
        print(f"{error.var_name}: {error.message}")
        print(f"  Fix: {error.fix_suggestion}")

Example Validations:
    - STORAGE_ACCOUNT_NAME must be lowercase alphanumeric (3-24 chars)
    - STORAGE_CONTAINER_NAME must be a valid blob container name
    - ACCESS_TOKEN_EXPIRY_MINUTES must be a positive integer
"""

import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Any


# ============================================================================
# VALIDATION ERROR
# ============================================================================

@dataclass
class ValidationError:
    """Result of a failed environment variable validation."""
    var_name: str
    message: str
    current_value: Optional[str]
    expected_pattern: str
    fix_suggestion: str
    severity: str = "error"  # error, warning

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "var_name": self.var_name,
            "message": self.message,
            "current_value": self._mask_sensitive(self.current_value),
            "expected_pattern": self.expected_pattern,
            "fix_suggestion": self.fix_suggestion,
            "severity": self.severity,
        }

    def _mask_sensitive(self, value: Optional[str]) -> Optional[str]:
        """Mask potentially sensitive values."""
        if value is None:
            return None
        sensitive_keywords = ["password", "secret", "connection"]
        var_lower = self.var_name.lower()
        if any(kw in var_lower for kw in sensitive_keywords):
            return "***MASKED***"
        if len(value) > 30:
            return f"{value[:20]}...({len(value)} chars)"
        return value


# ============================================================================
# VALIDATION RULE DEFINITION
# ============================================================================

@dataclass
class EnvVarRule:
    """
    Validation rule for an environment variable.

    Attributes:
        pattern: Compiled regex pattern for validation
        pattern_description: Human-readable description of expected format
        required: Whether this variable must be set
        fix_suggestion: How to fix if validation fails
        example: Example valid value
        default_value: Default value used if not set (for warning messages)
        legacy_name: Older variable name read when this one is unset
        warn_on_default: Emit warning when using default value
    """
    pattern: Pattern
    pattern_description: str
    required: bool
    fix_suggestion: str
    example: str
    default_value: Optional[str] = None
    legacy_name: Optional[str] = None
    warn_on_default: bool = True


# ============================================================================
# VALIDATION RULES - Single source of truth for env var formats
# ============================================================================

_AZURE_STORAGE_ACCOUNT = re.compile(r"^[a-z0-9]{3,24}$")
_CONTAINER_NAME = re.compile(r"^(?!.*--)[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")
_POSITIVE_INT = re.compile(r"^[1-9][0-9]*$")
_PORT = re.compile(r"^([1-9][0-9]{0,3}|[1-5][0-9]{4}|6[0-4][0-9]{3}|65[0-4][0-9]{2}|655[0-2][0-9]|6553[0-5])$")
_ENVIRONMENT = re.compile(r"^(dev|qa|uat|test|staging|prod|production)$")
_LOG_LEVEL = re.compile(r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$", re.IGNORECASE)

ENV_VAR_RULES: Dict[str, EnvVarRule] = {
    "STORAGE_ACCOUNT_NAME": EnvVarRule(
        pattern=_AZURE_STORAGE_ACCOUNT,
        pattern_description="Azure storage account name (3-24 lowercase letters and digits)",
        required=True,
        fix_suggestion="Set to the storage account uploads are written to",
        example="sharesafelystorage",
        legacy_name="AZURE_STORAGE_ACCOUNT_NAME",
    ),
    "STORAGE_CONTAINER_NAME": EnvVarRule(
        pattern=_CONTAINER_NAME,
        pattern_description="Blob container name (3-63 lowercase letters, digits, single hyphens)",
        required=False,
        fix_suggestion="Set to the container uploads are written to",
        example="uploaded-files",
        default_value="uploaded-files",
        legacy_name="AZURE_STORAGE_CONTAINER_NAME",
    ),
    "ACCESS_TOKEN_EXPIRY_MINUTES": EnvVarRule(
        pattern=_POSITIVE_INT,
        pattern_description="Positive integer number of minutes",
        required=False,
        fix_suggestion="Set to how long shared links stay valid",
        example="60",
        default_value="60",
        legacy_name="SAS_TOKEN_EXPIRY_MINUTES",
    ),
    "MAX_UPLOAD_SIZE_MB": EnvVarRule(
        pattern=_POSITIVE_INT,
        pattern_description="Positive integer number of MiB",
        required=False,
        fix_suggestion="Set to the largest accepted upload",
        example="100",
        default_value="100",
        warn_on_default=False,
    ),
    "PORT": EnvVarRule(
        pattern=_PORT,
        pattern_description="TCP port 1-65535",
        required=False,
        fix_suggestion="Set to the port the container runtime listens on",
        example="3000",
        default_value="3000",
        warn_on_default=False,
    ),
    "ENVIRONMENT": EnvVarRule(
        pattern=_ENVIRONMENT,
        pattern_description="One of dev, qa, uat, test, staging, prod, production",
        required=False,
        fix_suggestion="Set to the deployment environment name",
        example="prod",
        default_value="dev",
    ),
    "LOG_LEVEL": EnvVarRule(
        pattern=_LOG_LEVEL,
        pattern_description="Python logging level name",
        required=False,
        fix_suggestion="Set to DEBUG, INFO, WARNING, ERROR or CRITICAL",
        example="INFO",
        default_value="INFO",
        warn_on_default=False,
    ),
}


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def _read(var_name: str, rule: EnvVarRule) -> Optional[str]:
    value = os.environ.get(var_name)
    if (value is None or value == "") and rule.legacy_name:
        value = os.environ.get(rule.legacy_name)
    return value


def validate_single_var(
    var_name: str,
    rule: EnvVarRule,
    include_warnings: bool = True
) -> Optional[ValidationError]:
    """
    Validate a single environment variable against its rule.

    Args:
        var_name: Environment variable name
        rule: Validation rule to apply
        include_warnings: Whether to return warnings for vars using defaults

    Returns:
        ValidationError if validation fails or warning if using default, None if passes
    """
    value = _read(var_name, rule)

    if rule.required and (value is None or value.strip() == ""):
        return ValidationError(
            var_name=var_name,
            message="Required environment variable not set",
            current_value=value,
            expected_pattern=rule.pattern_description,
            fix_suggestion=f"{rule.fix_suggestion}. Example: {rule.example}",
            severity="error",
        )

    if value is None or value == "":
        if include_warnings and rule.warn_on_default and rule.default_value is not None:
            return ValidationError(
                var_name=var_name,
                message="Not set, using default value",
                current_value=None,
                expected_pattern=f"Default: {rule.default_value}",
                fix_suggestion=f"Set explicitly or accept default. {rule.fix_suggestion}",
                severity="warning",
            )
        return None

    if not rule.pattern.match(value.strip()):
        return ValidationError(
            var_name=var_name,
            message="Invalid format",
            current_value=value,
            expected_pattern=rule.pattern_description,
            fix_suggestion=f"{rule.fix_suggestion}. Example: {rule.example}",
            severity="error",
        )

    return None


def validate_environment(
    rules: Optional[Dict[str, EnvVarRule]] = None,
    include_warnings: bool = True
) -> List[ValidationError]:
    """
    Validate all environment variables against their rules.

    Returns:
        List of ValidationError objects (errors and optionally warnings)
    """
    if rules is None:
        rules = ENV_VAR_RULES

    results = []
    for var_name, rule in rules.items():
        result = validate_single_var(var_name, rule, include_warnings=include_warnings)
        if result:
            results.append(result)

    return results


def log_validation_results(logger=None) -> bool:
    """
    Log validation results at appropriate levels.

    Logs errors at ERROR level, warnings at WARNING level.

    Returns:
        True if no errors, False if there are errors
    """
    all_results = validate_environment(include_warnings=True)

    errors = [r for r in all_results if r.severity == "error"]
    warnings = [r for r in all_results if r.severity == "warning"]

    def _log(level: str, msg: str):
        if logger:
            getattr(logger, level.lower())(msg)
        else:
            print(f"[{level.upper()}] {msg}")

    for error in errors:
        _log("error", f"ENV VAR ERROR: {error.var_name} - {error.message}")
        _log("error", f"  Expected: {error.expected_pattern}")
        _log("error", f"  Fix: {error.fix_suggestion}")

    if warnings:
        _log("warning", f"ENV VARS: {len(warnings)} optional variables using defaults:")
        for warning in warnings:
            default_val = warning.expected_pattern.replace("Default: ", "")
            _log("warning", f"  {warning.var_name} → {default_val}")

    if errors:
        _log("error", f"❌ STARTUP_FAILED: {len(errors)} environment variable errors")
        return False
    elif warnings:
        _log("info", f"✅ Environment validation passed ({len(warnings)} vars using defaults)")
        return True
    else:
        _log("info", "✅ Environment validation passed (all vars explicitly set)")
        return True


__all__ = [
    "ENV_VAR_RULES",
    "EnvVarRule",
    "ValidationError",
    "validate_environment",
    "validate_single_var",
    "log_validation_results",
]
