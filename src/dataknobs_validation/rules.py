"""Rule implementations with a consistent, composable API.

Every rule is bound to one attribute path and evaluates a whole record:

```python
from dataknobs_validation import numericality_of, presence_of

rule = numericality_of("age", gt=0, only_integer=True)
ok, errors = rule({"age": -1.5})
# ok is False
# errors == {"age": {"should be an integer", "should be greater than 0"}}

checks = presence_of("email") & rule   # a ValidationSet
```

Rules are frozen after construction. Options are checked when the rule is
built, so a misconfigured rule raises RuleConfigurationError immediately
instead of silently passing every record.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping, Sized
from dataclasses import dataclass, field
from numbers import Integral, Number
from re import Pattern as RegexPattern
from typing import TYPE_CHECKING, Any, ClassVar

from .accessor import AttributePath, is_absent
from .exceptions import RuleConfigurationError
from .report import RuleResult

if TYPE_CHECKING:
    from .validation_set import ValidationSet

CANT_BE_BLANK = "can't be blank"

DEFAULT_ACCEPT = frozenset({True, "true", "1"})


def is_number(value: Any) -> bool:
    """True for real numbers; booleans and complex numbers do not count."""
    return isinstance(value, Number) and not isinstance(value, (bool, complex))


def is_integer(value: Any) -> bool:
    """True for whole-number types (int and friends, never bool)."""
    return isinstance(value, Integral) and not isinstance(value, bool)


def is_blank_string(value: Any) -> bool:
    """True for empty or whitespace-only strings."""
    return isinstance(value, str) and not value.strip()


def not_allowed_to_be_blank(value: Any, allow_nil: bool, allow_blank: bool) -> bool:
    return (is_absent(value) and not allow_nil) or (is_blank_string(value) and not allow_blank)


def allowed_to_be_blank(value: Any, allow_nil: bool, allow_blank: bool) -> bool:
    return (is_absent(value) and allow_nil) or (is_blank_string(value) and allow_blank)


def same_value(member: Any, value: Any) -> bool:
    """Equality that keeps booleans apart from the numbers 0 and 1."""
    return member == value and isinstance(member, bool) is isinstance(value, bool)


def is_member(values: Collection[Any], value: Any) -> bool:
    """Membership test that tolerates unhashable values.

    ``True`` is not a member of ``[1]`` and ``0`` is not a member of
    ``{False}``, even though Python considers them equal.
    """
    try:
        if value not in values:
            return False
    except TypeError:
        pass
    return any(same_value(member, value) for member in values)


def join_members(values: Collection[Any], separator: str = ", ") -> str:
    return separator.join(str(member) for member in values)


class Rule(ABC):
    """Base class for everything that validates a record.

    A rule is called with a record and returns a RuleResult. Rules combine
    with ``&`` into a ValidationSet.
    """

    @abstractmethod
    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        """Validate a record against this rule.

        Args:
            record: Mapping to validate (never modified)

        Returns:
            RuleResult whose report holds this rule's violations
        """

    def __call__(self, record: Mapping[Any, Any]) -> RuleResult:
        return self.check(record)

    def __and__(self, other: Rule) -> ValidationSet:
        """Combine with AND: the set reports the violations of both sides."""
        from .validation_set import ValidationSet

        if not isinstance(other, Rule):
            return NotImplemented
        left = self.rules if isinstance(self, ValidationSet) else (self,)
        right = other.rules if isinstance(other, ValidationSet) else (other,)
        return ValidationSet(left + right)


@dataclass(frozen=True, eq=False)
class AttributeRule(Rule):
    """A rule bound to a single attribute path."""

    name: ClassVar[str] = "attribute"

    attribute: Any

    def __post_init__(self) -> None:
        try:
            path = AttributePath.of(self.attribute)
        except (TypeError, ValueError) as e:
            raise RuleConfigurationError(self.name, str(e), option="attribute") from e
        object.__setattr__(self, "attribute", path)

    def _fail(self, *messages: str) -> RuleResult:
        return RuleResult.failure(self.attribute.key, *messages)

    def _result(self, messages: set[str]) -> RuleResult:
        if messages:
            return self._fail(*messages)
        return RuleResult.success()

    def _invalid_option(self, option: str, message: str) -> RuleConfigurationError:
        return RuleConfigurationError(self.name, message, option=option)


@dataclass(frozen=True, eq=False)
class Presence(AttributeRule):
    """Attribute must have a value."""

    name: ClassVar[str] = "presence"

    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        if is_absent(self.attribute.resolve(record)):
            return self._fail(CANT_BE_BLANK)
        return RuleResult.success()


@dataclass(frozen=True, eq=False)
class Numericality(AttributeRule):
    """Attribute must be a number, optionally an integer within bounds.

    Every configured check runs and all violations are reported together.
    An absent value only ever reports "can't be blank", and a value that is
    not a number skips the parity, equality and bound checks.
    """

    name: ClassVar[str] = "numericality"
    bound_options: ClassVar[tuple[str, ...]] = ("equal_to", "gt", "gte", "lt", "lte")

    allow_nil: bool = False
    only_integer: bool = False
    gt: Any = None
    gte: Any = None
    lt: Any = None
    lte: Any = None
    equal_to: Any = None
    odd: bool = False
    even: bool = False

    def __post_init__(self) -> None:
        super().__post_init__()
        for option in self.bound_options:
            bound = getattr(self, option)
            if bound is not None and not is_number(bound):
                raise self._invalid_option(
                    option, f"expected a number, got {type(bound).__name__}"
                )
        if self.odd and self.even:
            raise self._invalid_option("even", "a value cannot be both odd and even")

    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        value = self.attribute.resolve(record)
        if is_absent(value):
            if self.allow_nil:
                return RuleResult.success()
            return self._fail(CANT_BE_BLANK)

        errors: set[str] = set()
        if not is_number(value):
            errors.add("should be a number")
        if self.only_integer and not is_integer(value):
            errors.add("should be an integer")
        if is_number(value):
            errors.update(self._comparison_errors(value))
        return self._result(errors)

    def _comparison_errors(self, value: Any) -> set[str]:
        errors = set()
        # Non-integral numbers are neither odd nor even
        if self.odd and not (is_integer(value) and value % 2 == 1):
            errors.add("should be odd")
        if self.even and not (is_integer(value) and value % 2 == 0):
            errors.add("should be even")
        if self.equal_to is not None and value != self.equal_to:
            errors.add(f"should be equal to {self.equal_to}")
        if self.gt is not None and not value > self.gt:
            errors.add(f"should be greater than {self.gt}")
        if self.gte is not None and not value >= self.gte:
            errors.add(f"should be greater than or equal to {self.gte}")
        if self.lt is not None and not value < self.lt:
            errors.add(f"should be less than {self.lt}")
        if self.lte is not None and not value <= self.lte:
            errors.add(f"should be less than or equal to {self.lte}")
        return errors


def _check_collection(rule: AttributeRule, option: str, values: Any) -> None:
    if values is None:
        raise rule._invalid_option(option, "a collection of values is required")
    if isinstance(values, (str, bytes)) or not isinstance(values, Collection):
        raise rule._invalid_option(
            option, f"expected a collection of values, got {type(values).__name__}"
        )


@dataclass(frozen=True, eq=False)
class Acceptance(AttributeRule):
    """Attribute must hold one of the accepted values (a checked box, "1", ...)."""

    name: ClassVar[str] = "acceptance"

    allow_nil: bool = False
    accept: Collection[Any] | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.accept is None:
            object.__setattr__(self, "accept", DEFAULT_ACCEPT)
        _check_collection(self, "accept", self.accept)

    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        value = self.attribute.resolve(record)
        if is_absent(value):
            if self.allow_nil:
                return RuleResult.success()
            return self._fail(CANT_BE_BLANK)
        if is_member(self.accept, value):  # type: ignore[arg-type]
            return RuleResult.success()
        return self._fail("must be accepted")


@dataclass(frozen=True, eq=False)
class _MembershipRule(AttributeRule):
    """Shared configuration for inclusion and exclusion."""

    allow_nil: bool = False
    in_: Collection[Any] | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_collection(self, "in", self.in_)

    @property
    def members(self) -> str:
        """Allowed (or forbidden) values rendered in iteration order."""
        return join_members(self.in_)  # type: ignore[arg-type]

    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        value = self.attribute.resolve(record)
        if is_absent(value):
            if self.allow_nil:
                return RuleResult.success()
            return self._fail(CANT_BE_BLANK)
        return self._check_membership(is_member(self.in_, value))  # type: ignore[arg-type]

    @abstractmethod
    def _check_membership(self, found: bool) -> RuleResult:
        pass


@dataclass(frozen=True, eq=False)
class Inclusion(_MembershipRule):
    """Attribute must be one of the given values."""

    name: ClassVar[str] = "inclusion"

    def _check_membership(self, found: bool) -> RuleResult:
        if found:
            return RuleResult.success()
        return self._fail(f"must be one of: {self.members}")


@dataclass(frozen=True, eq=False)
class Exclusion(_MembershipRule):
    """Attribute must not be one of the given values."""

    name: ClassVar[str] = "exclusion"

    def _check_membership(self, found: bool) -> RuleResult:
        if not found:
            return RuleResult.success()
        return self._fail(f"must not be one of: {self.members}")


@dataclass(frozen=True, eq=False)
class _BlankPolicyRule(AttributeRule):
    """Rules that may allow absent values and blank strings separately."""

    allow_nil: bool = False
    allow_blank: bool = False

    def _blank_gate(self, value: Any) -> RuleResult | None:
        """Return a final result if the blank policy decides, else None."""
        if not_allowed_to_be_blank(value, self.allow_nil, self.allow_blank):
            return self._fail(CANT_BE_BLANK)
        if allowed_to_be_blank(value, self.allow_nil, self.allow_blank):
            return RuleResult.success()
        return None


@dataclass(frozen=True, eq=False)
class Format(_BlankPolicyRule):
    """String attribute must contain a match for a regex pattern."""

    name: ClassVar[str] = "format"

    format: str | RegexPattern[str] | None = None
    pattern: RegexPattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.format is None:
            raise self._invalid_option("format", "a pattern is required")
        if isinstance(self.format, str):
            try:
                pattern = re.compile(self.format)
            except re.error as e:
                raise self._invalid_option("format", f"invalid regex: {e}") from e
        elif isinstance(self.format, RegexPattern):
            pattern = self.format
        else:
            raise self._invalid_option(
                "format", f"expected a regex pattern, got {type(self.format).__name__}"
            )
        object.__setattr__(self, "pattern", pattern)

    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        value = self.attribute.resolve(record)
        gated = self._blank_gate(value)
        if gated is not None:
            return gated
        if isinstance(value, str) and self.pattern.search(value):
            return RuleResult.success()
        return self._fail("has incorrect format")


@dataclass(frozen=True, eq=False)
class Length(_BlankPolicyRule):
    """Attribute length must equal ``is_`` or fall within ``within``.

    ``within`` is either a ``range`` or an inclusive ``(min, max)`` pair and
    takes precedence over ``is_``.
    """

    name: ClassVar[str] = "length"

    is_: int | None = None
    within: range | tuple[int, int] | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.within is not None:
            object.__setattr__(self, "within", self._normalize_within(self.within))
        elif self.is_ is None:
            raise self._invalid_option("is", "either 'is' or 'within' is required")
        elif not is_integer(self.is_) or self.is_ < 0:
            raise self._invalid_option("is", f"expected a non-negative integer, got {self.is_!r}")

    def _normalize_within(self, within: Any) -> range:
        if isinstance(within, range):
            if not within:
                raise self._invalid_option("within", "range is empty")
            return within
        if (
            isinstance(within, (list, tuple))
            and len(within) == 2
            and all(is_integer(bound) for bound in within)
        ):
            low, high = within
            if low > high:
                raise self._invalid_option("within", f"min ({low}) cannot be greater than max ({high})")
            return range(low, high + 1)
        raise self._invalid_option(
            "within", f"expected a range or a (min, max) pair, got {within!r}"
        )

    def check(self, record: Mapping[Any, Any]) -> RuleResult:
        value = self.attribute.resolve(record)
        gated = self._blank_gate(value)
        if gated is not None:
            return gated

        length = len(value) if isinstance(value, Sized) else None
        if self.within is not None:
            within: range = self.within  # type: ignore[assignment]
            if length is not None and length in within:
                return RuleResult.success()
            return self._fail(f"must be from {within[0]} to {within[-1]} characters long")

        if length == self.is_:
            return RuleResult.success()
        return self._fail(f"must be {self.is_} characters long")


def presence_of(attribute: Any) -> Presence:
    """Build a rule that fails with "can't be blank" when the attribute is absent."""
    return Presence(attribute)


def numericality_of(
    attribute: Any,
    *,
    allow_nil: bool = False,
    only_integer: bool = False,
    gt: Any = None,
    gte: Any = None,
    lt: Any = None,
    lte: Any = None,
    equal_to: Any = None,
    odd: bool = False,
    even: bool = False,
) -> Numericality:
    """Build a numeric rule.

    Args:
        attribute: Key or key sequence of the attribute
        allow_nil: If True, an absent value passes
        only_integer: Require a whole-number type
        gt: Value must be strictly greater than this
        gte: Value must be greater than or equal to this
        lt: Value must be strictly less than this
        lte: Value must be less than or equal to this
        equal_to: Value must equal this
        odd: Value must be an odd integer
        even: Value must be an even integer

    Returns:
        Numericality rule

    Raises:
        RuleConfigurationError: If a bound is not a number, or odd and even are both set
    """
    return Numericality(
        attribute,
        allow_nil=allow_nil,
        only_integer=only_integer,
        gt=gt,
        gte=gte,
        lt=lt,
        lte=lte,
        equal_to=equal_to,
        odd=odd,
        even=even,
    )


def acceptance_of(
    attribute: Any,
    *,
    allow_nil: bool = False,
    accept: Collection[Any] | None = None,
) -> Acceptance:
    """Build a rule requiring the attribute to be one of ``accept``.

    ``accept`` defaults to ``{True, "true", "1"}``.
    """
    return Acceptance(attribute, allow_nil=allow_nil, accept=accept)


def inclusion_of(
    attribute: Any,
    *,
    in_: Collection[Any] | None = None,
    allow_nil: bool = False,
) -> Inclusion:
    """Build a rule requiring the attribute to be a member of ``in_``.

    The failure message lists the members in the collection's iteration
    order; pass a list or tuple when the message text must be stable.
    """
    return Inclusion(attribute, allow_nil=allow_nil, in_=in_)


def exclusion_of(
    attribute: Any,
    *,
    in_: Collection[Any] | None = None,
    allow_nil: bool = False,
) -> Exclusion:
    """Build a rule forbidding the attribute from being a member of ``in_``."""
    return Exclusion(attribute, allow_nil=allow_nil, in_=in_)


def format_of(
    attribute: Any,
    *,
    format: str | RegexPattern[str] | None = None,
    allow_nil: bool = False,
    allow_blank: bool = False,
) -> Format:
    """Build a rule requiring a string attribute to match ``format``.

    Args:
        attribute: Key or key sequence of the attribute
        format: Regex string or compiled pattern, searched anywhere in the value
        allow_nil: If True, an absent value passes
        allow_blank: If True, an empty or whitespace-only string passes

    Returns:
        Format rule

    Raises:
        RuleConfigurationError: If no pattern is given or it does not compile
    """
    return Format(attribute, allow_nil=allow_nil, allow_blank=allow_blank, format=format)


def length_of(
    attribute: Any,
    *,
    is_: int | None = None,
    within: range | tuple[int, int] | None = None,
    allow_nil: bool = False,
    allow_blank: bool = False,
) -> Length:
    """Build a length rule.

    Args:
        attribute: Key or key sequence of the attribute
        is_: Exact required length
        within: ``range`` of allowed lengths, or an inclusive ``(min, max)`` pair
        allow_nil: If True, an absent value passes
        allow_blank: If True, an empty or whitespace-only string passes

    Returns:
        Length rule

    Raises:
        RuleConfigurationError: If neither ``is_`` nor a usable ``within`` is given
    """
    return Length(
        attribute, allow_nil=allow_nil, allow_blank=allow_blank, is_=is_, within=within
    )
