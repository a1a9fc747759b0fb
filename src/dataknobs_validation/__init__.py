"""Composable validation rules for attribute-bearing records.

This package validates mappings (possibly nested) against declarative rules:
- One rule family per concern: presence, numericality, acceptance,
  inclusion, exclusion, format and length
- Error reports mapping each attribute to its set of messages
- Validation sets that merge the reports of many rules, and nest
- Configuration-driven rule sets through RuleSetFactory

Example:
    ```python
    from dataknobs_validation import (
        inclusion_of, numericality_of, presence_of, valid, validation_set,
    )

    checks = validation_set(
        presence_of("email"),
        numericality_of("age", gt=0, only_integer=True),
        inclusion_of("role", in_=["admin", "user"]),
    )

    ok, errors = checks({"age": -1.5, "role": "guest"})
    # errors == {
    #     "email": {"can't be blank"},
    #     "age": {"should be an integer", "should be greater than 0"},
    #     "role": {"must be one of: admin, user"},
    # }
    valid(checks, {"email": "a@b.com", "age": 30, "role": "user"})  # True
    ```
"""

from .accessor import MISSING, AttributePath, get_path, is_absent
from .exceptions import RecordValidationError, RuleConfigurationError
from .factory import RuleSetFactory, register_rule_family, rule_families, rule_set_factory
from .report import ErrorReport, RuleResult, full_messages, merge_reports
from .rules import (
    Acceptance,
    AttributeRule,
    Exclusion,
    Format,
    Inclusion,
    Length,
    Numericality,
    Presence,
    Rule,
    acceptance_of,
    exclusion_of,
    format_of,
    inclusion_of,
    length_of,
    numericality_of,
    presence_of,
)
from .validation_set import ValidationSet, ensure_valid, invalid, valid, validation_set

__version__ = "0.1.0"

__all__ = [
    # Paths
    "MISSING",
    "AttributePath",
    "get_path",
    "is_absent",
    # Results
    "ErrorReport",
    "RuleResult",
    "merge_reports",
    "full_messages",
    # Rules
    "Rule",
    "AttributeRule",
    "Presence",
    "Numericality",
    "Acceptance",
    "Inclusion",
    "Exclusion",
    "Format",
    "Length",
    "presence_of",
    "numericality_of",
    "acceptance_of",
    "inclusion_of",
    "exclusion_of",
    "format_of",
    "length_of",
    # Composition
    "ValidationSet",
    "validation_set",
    "valid",
    "invalid",
    "ensure_valid",
    # Factories
    "RuleSetFactory",
    "rule_set_factory",
    "rule_families",
    "register_rule_family",
    # Exceptions
    "RuleConfigurationError",
    "RecordValidationError",
]
