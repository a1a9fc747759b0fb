"""
Tests for the built-in rule families.
"""

import re
from decimal import Decimal
from fractions import Fraction

import pytest

from dataknobs_validation import (
    Numericality,
    Presence,
    RuleConfigurationError,
    RuleResult,
    acceptance_of,
    exclusion_of,
    format_of,
    inclusion_of,
    length_of,
    numericality_of,
    presence_of,
)


def assert_consistent(result):
    """A rule reports success exactly when its report is empty."""
    assert isinstance(result, RuleResult)
    assert result.valid is (result.errors == {})


class TestPresence:
    """Test presence_of."""

    def test_missing_attribute(self):
        ok, errors = presence_of("email")({})
        assert ok is False
        assert errors == {"email": {"can't be blank"}}

    def test_present_attribute(self):
        assert tuple(presence_of("email")({"email": "a@b.com"})) == (True, {})

    def test_none_is_blank(self):
        assert presence_of("email")({"email": None}).errors == {"email": {"can't be blank"}}

    @pytest.mark.parametrize("value", [False, 0, "", []])
    def test_falsy_values_are_present(self, value):
        assert presence_of("x")({"x": value}).valid is True

    def test_nested_path(self):
        rule = presence_of(["address", "street"])
        assert rule({"address": {}}).errors == {("address", "street"): {"can't be blank"}}
        assert rule({"address": {"street": "Main"}}).valid is True

    def test_one_element_path_reports_bare_key(self):
        assert presence_of(["email"])({}).errors == {"email": {"can't be blank"}}

    def test_calling_is_check(self, person):
        rule = presence_of("name")
        assert rule(person) == rule.check(person)

    def test_empty_path_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError) as exc_info:
            presence_of([])
        assert exc_info.value.rule == "presence"
        assert exc_info.value.option == "attribute"
        assert exc_info.value.context["option"] == "attribute"

    def test_nested_unhashable_key_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            presence_of(["a", (1, [2])])

    def test_rule_is_frozen(self):
        rule = Presence("email")
        with pytest.raises(AttributeError):
            rule.attribute = "name"


class TestNumericality:
    """Test numericality_of."""

    def test_valid_number(self):
        assert numericality_of("age")({"age": 42}).valid is True

    def test_absent_value(self):
        result = numericality_of("age", gt=0, only_integer=True)({})
        assert result.errors == {"age": {"can't be blank"}}

    def test_absent_value_allowed_skips_bounds(self):
        rule = numericality_of("age", allow_nil=True, gt=0, only_integer=True, odd=True)
        assert rule({}).valid is True
        assert rule({"age": None}).valid is True

    def test_not_a_number(self):
        assert numericality_of("age")({"age": "abc"}).errors == {"age": {"should be a number"}}

    def test_not_a_number_skips_comparisons(self):
        rule = numericality_of("age", gt=0, lt=10, equal_to=5, even=True)
        assert rule({"age": "abc"}).errors == {"age": {"should be a number"}}

    def test_not_a_number_with_only_integer(self):
        rule = numericality_of("age", only_integer=True, gt=0)
        assert rule({"age": "abc"}).errors == {
            "age": {"should be a number", "should be an integer"}
        }

    def test_accumulates_all_violations(self):
        rule = numericality_of("age", gt=0, only_integer=True)
        result = rule({"age": -1.5})
        assert result.valid is False
        assert result.errors == {
            "age": {"should be an integer", "should be greater than 0"}
        }

    @pytest.mark.parametrize("value", [True, False])
    def test_booleans_are_not_numbers(self, value):
        assert numericality_of("x")({"x": value}).errors == {"x": {"should be a number"}}

    @pytest.mark.parametrize("value", [1.5, Decimal("2.5"), Fraction(1, 3)])
    def test_other_number_types(self, value):
        assert numericality_of("x")({"x": value}).valid is True

    def test_only_integer(self):
        rule = numericality_of("x", only_integer=True)
        assert rule({"x": 3}).valid is True
        assert rule({"x": 3.0}).errors == {"x": {"should be an integer"}}

    def test_odd(self):
        rule = numericality_of("x", odd=True)
        assert rule({"x": 3}).valid is True
        assert rule({"x": -3}).valid is True
        assert rule({"x": 4}).errors == {"x": {"should be odd"}}
        assert rule({"x": 3.5}).errors == {"x": {"should be odd"}}

    def test_even(self):
        rule = numericality_of("x", even=True)
        assert rule({"x": 4}).valid is True
        assert rule({"x": 0}).valid is True
        assert rule({"x": 3}).errors == {"x": {"should be even"}}

    def test_equal_to(self):
        rule = numericality_of("x", equal_to=10)
        assert rule({"x": 10}).valid is True
        assert rule({"x": 10.0}).valid is True
        assert rule({"x": 11}).errors == {"x": {"should be equal to 10"}}

    @pytest.mark.parametrize(
        "options,value,message",
        [
            ({"gt": 5}, 5, "should be greater than 5"),
            ({"gte": 5}, 4, "should be greater than or equal to 5"),
            ({"lt": 5}, 5, "should be less than 5"),
            ({"lte": 5}, 6, "should be less than or equal to 5"),
            ({"gt": 0.5}, 0.5, "should be greater than 0.5"),
        ],
    )
    def test_bound_violations(self, options, value, message):
        assert numericality_of("x", **options)({"x": value}).errors == {"x": {message}}

    @pytest.mark.parametrize(
        "options,value",
        [({"gt": 5}, 6), ({"gte": 5}, 5), ({"lt": 5}, 4), ({"lte": 5}, 5)],
    )
    def test_bounds_satisfied(self, options, value):
        assert numericality_of("x", **options)({"x": value}).valid is True

    def test_multiple_bounds(self):
        rule = numericality_of("x", gt=10, lt=0)
        assert rule({"x": 5}).errors == {
            "x": {"should be greater than 10", "should be less than 0"}
        }

    def test_non_numeric_bound_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError) as exc_info:
            numericality_of("x", gt="5")
        assert exc_info.value.option == "gt"

    def test_odd_and_even_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            numericality_of("x", odd=True, even=True)

    def test_fresh_report_per_call(self):
        rule = numericality_of("x", gt=0)
        first = rule({"x": -1})
        first.errors["x"].add("tampered")
        assert rule({"x": -1}).errors == {"x": {"should be greater than 0"}}

    def test_defaults(self):
        rule = Numericality("x")
        assert rule.allow_nil is False
        assert rule.only_integer is False
        assert rule.odd is False
        assert rule.even is False
        assert rule.gt is None


class TestAcceptance:
    """Test acceptance_of."""

    @pytest.mark.parametrize("value", [True, "true", "1"])
    def test_default_accepted_values(self, value):
        assert acceptance_of("terms")({"terms": value}).valid is True

    @pytest.mark.parametrize("value", [False, "false", "yes", "0", 1, 1.0])
    def test_not_accepted(self, value):
        assert acceptance_of("terms")({"terms": value}).errors == {"terms": {"must be accepted"}}

    def test_absent(self):
        assert acceptance_of("terms")({}).errors == {"terms": {"can't be blank"}}
        assert acceptance_of("terms", allow_nil=True)({}).valid is True

    def test_custom_accept(self):
        rule = acceptance_of("terms", accept={"yes", "y"})
        assert rule({"terms": "y"}).valid is True
        assert rule({"terms": "true"}).errors == {"terms": {"must be accepted"}}

    def test_string_accept_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            acceptance_of("terms", accept="yes")


class TestInclusion:
    """Test inclusion_of."""

    def test_member(self):
        assert inclusion_of("role", in_=["admin", "user"])({"role": "user"}).valid is True

    def test_not_a_member(self):
        result = inclusion_of("role", in_=["admin", "user"])({"role": "guest"})
        assert tuple(result) == (False, {"role": {"must be one of: admin, user"}})

    def test_set_members_in_iteration_order(self):
        members = {"admin", "user"}
        result = inclusion_of("role", in_=members)({"role": "guest"})
        assert result.errors == {"role": {f"must be one of: {', '.join(members)}"}}

    def test_absent(self):
        rule = inclusion_of("role", in_=["admin"])
        assert rule({}).errors == {"role": {"can't be blank"}}
        assert inclusion_of("role", in_=["admin"], allow_nil=True)({}).valid is True

    def test_non_string_members(self):
        rule = inclusion_of("level", in_=range(1, 4))
        assert rule({"level": 2}).valid is True
        assert rule({"level": 7}).errors == {"level": {"must be one of: 1, 2, 3"}}

    def test_booleans_are_not_numeric_members(self):
        rule = inclusion_of("x", in_=[0, 1])
        assert rule({"x": 1}).valid is True
        assert rule({"x": False}).errors == {"x": {"must be one of: 0, 1"}}
        assert rule({"x": True}).valid is False
        assert inclusion_of("x", in_=[True])({"x": 1}).valid is False

    def test_unhashable_value(self):
        rule = inclusion_of("tags", in_=frozenset({"a", "b"}))
        assert rule({"tags": ["a"]}).valid is False

    def test_missing_in_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError) as exc_info:
            inclusion_of("role")
        assert exc_info.value.option == "in"

    def test_string_in_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            inclusion_of("role", in_="admin")


class TestExclusion:
    """Test exclusion_of."""

    def test_not_a_member(self):
        assert exclusion_of("name", in_=["root", "admin"])({"name": "alice"}).valid is True

    def test_member(self):
        result = exclusion_of("name", in_=["root", "admin"])({"name": "root"})
        assert result.errors == {"name": {"must not be one of: root, admin"}}

    def test_booleans_are_not_numeric_members(self):
        assert exclusion_of("x", in_=[1])({"x": True}).valid is True
        assert exclusion_of("x", in_={False})({"x": 0}).valid is True
        assert exclusion_of("x", in_=[1])({"x": 1}).valid is False

    def test_absent(self):
        assert exclusion_of("name", in_=["root"])({}).errors == {"name": {"can't be blank"}}
        assert exclusion_of("name", in_=["root"], allow_nil=True)({}).valid is True


class TestFormat:
    """Test format_of."""

    def test_matches(self):
        rule = format_of("email", format=r"^[^@]+@[^@]+$")
        assert rule({"email": "a@b.com"}).valid is True

    def test_does_not_match(self):
        rule = format_of("email", format=r"^[^@]+@[^@]+$")
        assert rule({"email": "nope"}).errors == {"email": {"has incorrect format"}}

    def test_search_semantics(self):
        assert format_of("code", format=r"\d+")({"code": "abc123"}).valid is True

    def test_compiled_pattern(self):
        rule = format_of("code", format=re.compile(r"^[A-Z]{3}$", re.IGNORECASE))
        assert rule({"code": "abc"}).valid is True

    def test_non_string_value(self):
        assert format_of("code", format=r"\d")({"code": 5}).errors == {
            "code": {"has incorrect format"}
        }

    def test_absent(self):
        assert format_of("x", format=r".")({}).errors == {"x": {"can't be blank"}}
        assert format_of("x", format=r".", allow_nil=True)({}).valid is True

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_string(self, value):
        assert format_of("x", format=r"\d")({"x": value}).errors == {"x": {"can't be blank"}}
        assert format_of("x", format=r"\d", allow_blank=True)({"x": value}).valid is True

    def test_allow_nil_does_not_allow_blank_strings(self):
        rule = format_of("x", format=r"\d", allow_nil=True)
        assert rule({}).valid is True
        assert rule({"x": ""}).errors == {"x": {"can't be blank"}}

    def test_allow_blank_does_not_allow_absent(self):
        rule = format_of("x", format=r"\d", allow_blank=True)
        assert rule({}).errors == {"x": {"can't be blank"}}

    def test_missing_pattern_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError) as exc_info:
            format_of("x")
        assert exc_info.value.option == "format"

    def test_invalid_regex_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            format_of("x", format="(unclosed")

    def test_non_pattern_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            format_of("x", format=42)


class TestLength:
    """Test length_of."""

    def test_exact_length(self):
        rule = length_of("code", is_=5)
        assert rule({"code": "12345"}).valid is True
        assert rule({"code": "1234"}).errors == {"code": {"must be 5 characters long"}}

    def test_within_pair_is_inclusive(self):
        rule = length_of("code", within=(3, 6))
        assert rule({"code": "1234"}).valid is True
        assert rule({"code": "123"}).valid is True
        assert rule({"code": "123456"}).valid is True
        assert rule({"code": "12"}).errors == {"code": {"must be from 3 to 6 characters long"}}
        assert rule({"code": "1234567"}).errors == {
            "code": {"must be from 3 to 6 characters long"}
        }

    def test_within_range(self):
        rule = length_of("code", within=range(3, 7))
        assert rule({"code": "123456"}).valid is True
        assert rule({"code": "1234567"}).errors == {
            "code": {"must be from 3 to 6 characters long"}
        }

    def test_within_takes_precedence(self):
        rule = length_of("code", is_=10, within=(1, 4))
        assert rule({"code": "abc"}).valid is True

    def test_collections_have_length(self):
        assert length_of("tags", is_=2)({"tags": ["a", "b"]}).valid is True

    def test_value_without_length(self):
        assert length_of("code", is_=5)({"code": 12345}).errors == {
            "code": {"must be 5 characters long"}
        }

    def test_blank_policy(self):
        assert length_of("code", is_=5)({}).errors == {"code": {"can't be blank"}}
        assert length_of("code", is_=5)({"code": " "}).errors == {"code": {"can't be blank"}}
        assert length_of("code", is_=5, allow_nil=True)({}).valid is True
        assert length_of("code", is_=5, allow_blank=True)({"code": "  "}).valid is True

    def test_no_length_option_is_configuration_error(self):
        with pytest.raises(RuleConfigurationError):
            length_of("code")

    @pytest.mark.parametrize("within", [(6, 3), (1, 2, 3), "abc", range(5, 5), (1.0, 3)])
    def test_bad_within_is_configuration_error(self, within):
        with pytest.raises(RuleConfigurationError) as exc_info:
            length_of("code", within=within)
        assert exc_info.value.option == "within"

    @pytest.mark.parametrize("is_", [-1, "5", 2.5, True])
    def test_bad_is_is_configuration_error(self, is_):
        with pytest.raises(RuleConfigurationError):
            length_of("code", is_=is_)


class TestRuleInvariant:
    """Every rule reports success exactly when its report is empty."""

    @pytest.mark.parametrize(
        "rule",
        [
            presence_of("x"),
            numericality_of("x", gt=0, only_integer=True, odd=True),
            acceptance_of("x"),
            inclusion_of("x", in_=[1, 2]),
            exclusion_of("x", in_=[1, 2]),
            format_of("x", format=r"^\d+$"),
            length_of("x", within=(1, 3)),
        ],
    )
    @pytest.mark.parametrize(
        "record",
        [{}, {"x": None}, {"x": 1}, {"x": -2.5}, {"x": ""}, {"x": "12"}, {"x": [1, 2, 3, 4]}],
    )
    def test_valid_iff_empty_report(self, rule, record):
        assert_consistent(rule(record))
