"""Factory for building validation sets from configuration."""

import logging
from collections.abc import Callable
from typing import Any

from dataknobs_common import NotFoundError, OperationError, Registry
from dataknobs_config import FactoryBase

from .exceptions import RuleConfigurationError
from .rules import (
    Rule,
    acceptance_of,
    exclusion_of,
    format_of,
    inclusion_of,
    length_of,
    numericality_of,
    presence_of,
)
from .validation_set import ValidationSet

logger = logging.getLogger(__name__)

RuleBuilder = Callable[..., Rule]

# Config keys that are Python keywords map onto the builders' trailing-underscore names
OPTION_ALIASES = {"in": "in_", "is": "is_"}

rule_families: Registry[RuleBuilder] = Registry("rule_families")
rule_families.register("presence", presence_of)
rule_families.register("numericality", numericality_of)
rule_families.register("acceptance", acceptance_of)
rule_families.register("inclusion", inclusion_of)
rule_families.register("exclusion", exclusion_of)
rule_families.register("format", format_of)
rule_families.register("length", length_of)


def register_rule_family(name: str, builder: RuleBuilder, allow_overwrite: bool = False) -> None:
    """Make a rule builder available to RuleSetFactory under ``name``.

    Args:
        name: Rule type name used in configuration
        builder: Callable taking the attribute plus keyword options, returning a Rule
        allow_overwrite: Whether to replace an existing family of the same name

    Raises:
        RuleConfigurationError: If the name is taken and allow_overwrite is False
    """
    try:
        rule_families.register(name, builder, allow_overwrite=allow_overwrite)
    except OperationError as e:
        raise RuleConfigurationError(name, "rule family is already registered", option="type") from e


class RuleSetFactory(FactoryBase):
    """Factory for creating validation sets from configuration.

    Configuration Options:
        name (str): Set name, used in log messages
        rules (list): List of rule definitions

    Rule Definition Options:
        type (str): presence, numericality, acceptance, inclusion, exclusion,
            format, length, or set for a nested set
        attribute (str | list): Attribute key, or list of keys for a nested path
        rules (list): Member rules, for type set only
        ...: Any keyword option of the rule's builder; "in" and "is" are
            accepted for in_ and is_

    Example Configuration:
        validation:
          - name: signup
            factory: rule_set
            rules:
              - type: presence
                attribute: email
              - type: format
                attribute: email
                format: "^[^@]+@[^@]+$"
              - type: numericality
                attribute: [profile, age]
                only_integer: true
                gte: 13
              - type: inclusion
                attribute: role
                in: [admin, user]
    """

    def create(self, **config) -> ValidationSet:
        """Create a ValidationSet from configuration.

        Args:
            **config: Rule set configuration

        Returns:
            ValidationSet instance

        Raises:
            RuleConfigurationError: If any rule definition is invalid
        """
        name = config.get("name", "unnamed_rule_set")
        rules = self._build_rules(config.get("rules", []))

        logger.info(f"Creating rule set: {name} ({len(rules)} rules)")
        return ValidationSet(rules, name=name)

    def _build_rules(self, rule_configs: list[dict[str, Any]]) -> list[Rule]:
        """Build rule objects from configuration.

        Args:
            rule_configs: List of rule configurations

        Returns:
            List of Rule objects
        """
        if not isinstance(rule_configs, list):
            raise RuleConfigurationError(
                "set", f"expected a list of rules, got {type(rule_configs).__name__}", option="rules"
            )
        return [self._build_rule(rule_config) for rule_config in rule_configs]

    def _build_rule(self, rule_config: dict[str, Any]) -> Rule:
        if not isinstance(rule_config, dict):
            raise RuleConfigurationError(
                "set", f"expected a rule mapping, got {type(rule_config).__name__}", option="rules"
            )
        options = dict(rule_config)
        rule_type = str(options.pop("type", "")).lower()

        if rule_type == "set":
            # Recursive build for nested sets
            return ValidationSet(
                self._build_rules(options.get("rules", [])), name=options.get("name")
            )

        try:
            builder = rule_families.get(rule_type)
        except NotFoundError as e:
            raise RuleConfigurationError(
                rule_type or "<missing>",
                f"unknown rule type; available: {', '.join(rule_families.list_keys())}",
                option="type",
            ) from e

        if "attribute" not in options:
            raise RuleConfigurationError(rule_type, "attribute is required", option="attribute")
        attribute = options.pop("attribute")
        kwargs = {OPTION_ALIASES.get(key, key): value for key, value in options.items()}

        try:
            return builder(attribute, **kwargs)
        except TypeError as e:
            raise RuleConfigurationError(rule_type, f"unsupported options: {e}") from e


# Create singleton instance for registration
rule_set_factory = RuleSetFactory()
