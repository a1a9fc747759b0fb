"""Custom exceptions for the dataknobs_validation package.

Validation failures are reported as data (an error report), so these
exceptions only cover misconfigured rules and the opt-in raising entry
point ``ensure_valid``. They are built on the common exception framework
from dataknobs_common.
"""

from __future__ import annotations

from typing import Any

from dataknobs_common import ConfigurationError, ValidationError


class RuleConfigurationError(ConfigurationError):
    """Raised when a rule is constructed with missing or invalid options."""

    def __init__(self, rule: str, message: str, option: str | None = None):
        self.rule = rule
        self.option = option
        context: dict[str, Any] = {"rule": rule}
        if option:
            context["option"] = option
            message = f"Option '{option}': {message}"
        super().__init__(f"Invalid '{rule}' rule configuration: {message}", context=context)


class RecordValidationError(ValidationError):
    """Raised by ``ensure_valid`` when a record fails its rules."""

    def __init__(self, errors: dict[Any, set[str]]):
        self.errors = errors
        super().__init__(
            f"Record failed validation on {len(errors)} attribute(s)",
            context={"errors": errors},
        )
