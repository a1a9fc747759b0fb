"""Composition of rules into validation sets, and record-level predicates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .exceptions import RecordValidationError, RuleConfigurationError
from .report import RuleResult, merge_reports
from .rules import Rule

logger = logging.getLogger(__name__)


class ValidationSet(Rule):
    """Ordered collection of rules evaluated together (AND logic).

    Every member rule runs against the record and their reports are merged
    per attribute with set union, so two rules on the same attribute both
    contribute their messages. A ValidationSet is itself a Rule and can be
    nested inside another set.
    """

    def __init__(self, rules: Iterable[Rule], name: str | None = None):
        """Initialize with the rules to apply.

        Args:
            rules: Rules (or nested sets) to evaluate
            name: Optional name used in log messages

        Raises:
            RuleConfigurationError: If any member is not a Rule
        """
        rules = tuple(rules)
        for index, rule in enumerate(rules):
            if not isinstance(rule, Rule):
                raise RuleConfigurationError(
                    "set",
                    f"member {index} is not a rule: {type(rule).__name__}",
                    option="rules",
                )
        self._rules = rules
        self.name = name

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        """Apply every rule and merge their reports."""
        errors = merge_reports(*(rule.check(record).errors for rule in self._rules))
        result = RuleResult.from_errors(errors)
        if not result.valid:
            logger.debug(
                f"Validation set {self.name or '<unnamed>'} failed on "
                f"{len(result.errors)} attribute(s)"
            )
        return result

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return f"ValidationSet({label}{len(self._rules)} rules)"


def validation_set(*rules: Rule) -> ValidationSet:
    """Compose rules into a single ValidationSet.

    ```python
    checks = validation_set(
        presence_of("email"),
        format_of("email", format=r"@"),
        length_of(["address", "zip"], is_=5),
    )
    ok, errors = checks(record)
    ```
    """
    return ValidationSet(rules)


def valid(rules: Rule, record: Mapping[Any, Any]) -> bool:
    """Return True if the record passes every rule."""
    return rules.check(record).valid


def invalid(rules: Rule, record: Mapping[Any, Any]) -> bool:
    """Return True if the record violates at least one rule."""
    return not valid(rules, record)


def ensure_valid(rules: Rule, record: Mapping[Any, Any]) -> Mapping[Any, Any]:
    """Return the record unchanged if valid, otherwise raise.

    Args:
        rules: Rule or ValidationSet to apply
        record: Record to validate

    Returns:
        The same record object

    Raises:
        RecordValidationError: If any rule fails; ``errors`` holds the report
    """
    result = rules.check(record)
    if not result.valid:
        raise RecordValidationError(result.errors)
    return record
