"""Rule results and error reports.

An error report maps an attribute key (a bare key, or a tuple of keys for a
nested path) to the set of violation messages for that attribute. An empty
report means the record is valid.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

ErrorReport = dict[Hashable, set[str]]


def merge_reports(*reports: Mapping[Hashable, set[str]]) -> ErrorReport:
    """Combine error reports by taking the union of messages per attribute.

    The inputs are left untouched and a new report is returned, so the merge
    is commutative and associative.

    Args:
        *reports: Error reports to combine

    Returns:
        New ErrorReport containing every message from every input
    """
    merged: ErrorReport = {}
    for report in reports:
        for key, messages in report.items():
            if not messages:
                continue
            merged.setdefault(key, set()).update(messages)
    return merged


@dataclass(frozen=True)
class RuleResult:
    """Outcome of evaluating a rule (or a set of rules) against a record.

    ``valid`` is True exactly when ``errors`` is empty. Unpacks as a pair:

    ```python
    ok, errors = presence_of("email")({})
    # ok is False, errors == {"email": {"can't be blank"}}
    ```
    """

    valid: bool
    errors: ErrorReport = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.valid == bool(self.errors):
            raise ValueError("RuleResult.valid must be True exactly when errors is empty")

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    def __iter__(self) -> Iterator[Any]:
        yield self.valid
        yield self.errors

    def merge(self, other: RuleResult) -> RuleResult:
        """Combine with another result into a new one."""
        return RuleResult.from_errors(merge_reports(self.errors, other.errors))

    @classmethod
    def success(cls) -> RuleResult:
        """Create a passing result with an empty report."""
        return cls(valid=True, errors={})

    @classmethod
    def failure(cls, key: Hashable, *messages: str) -> RuleResult:
        """Create a failing result reporting messages under one attribute key.

        Args:
            key: Report key of the failing attribute
            *messages: One or more violation messages

        Returns:
            Failed RuleResult
        """
        return cls(valid=False, errors={key: set(messages)})

    @classmethod
    def from_errors(cls, errors: ErrorReport) -> RuleResult:
        """Wrap a report, deriving validity from whether it is empty."""
        errors = {key: messages for key, messages in errors.items() if messages}
        return cls(valid=not errors, errors=errors)


def attribute_label(key: Hashable) -> str:
    """Render a report key for display; nested paths are joined with dots."""
    if isinstance(key, tuple):
        return ".".join(str(part) for part in key)
    return str(key)


def full_messages(report: Mapping[Hashable, set[str]]) -> list[str]:
    """Render a report as "<attribute> <message>" lines, sorted.

    ```python
    full_messages({("address", "street"): {"can't be blank"}})
    # ["address.street can't be blank"]
    ```
    """
    return sorted(
        f"{attribute_label(key)} {message}"
        for key, messages in report.items()
        for message in messages
    )
