"""Rule registry for formstate.

Maps rule type names to factories so rules can be built from declarative
definitions (dicts or YAML). Code that builds rules directly uses the
factories in formstate.rules and never needs the registry.
"""

import logging
from typing import Any, Callable

from formstate import rules
from formstate.errors import InvalidRuleError, UnknownRuleTypeError
from formstate.types import Rule, RuleDefinition

logger = logging.getLogger(__name__)

RuleFactory = Callable[[RuleDefinition], Rule]


class RuleRegistry:
    """Registry for rule types.

    Rule types must be registered before definitions naming them can be
    resolved. The built-in types are registered by `register_builtin_rules`;
    applications register their own at startup.

    Example:
        # Register a custom rule type
        RuleRegistry.register_factory("postcode", lambda d: PostcodeRule(d.params["country"]))

        # Later, resolve from a definition
        rule = RuleRegistry.create(RuleDefinition.from_dict({"type": "postcode", ...}))
    """

    _factories: dict[str, RuleFactory] = {}

    @classmethod
    def register_factory(cls, name: str, factory: RuleFactory) -> None:
        """Register a factory that builds rules from definitions.

        Idempotent - re-registering the same name is a no-op.

        Args:
            name: Unique rule type name (e.g., "minLength", "myapp.postcode")
            factory: Function that takes a RuleDefinition and returns a rule
        """
        if name in cls._factories:
            return  # Already registered, no-op
        cls._factories[name] = factory

    @classmethod
    def create(cls, definition: RuleDefinition) -> Rule:
        """Build a rule from a definition.

        Raises:
            UnknownRuleTypeError: If the type is not registered
            InvalidRuleError: If the params are missing or malformed
        """
        factory = cls._factories.get(definition.type)
        if factory is None:
            raise UnknownRuleTypeError(definition.type, cls.list_registered())

        try:
            return factory(definition)
        except KeyError as e:
            raise InvalidRuleError(
                definition.type, f"missing parameter {e.args[0]!r}"
            ) from e
        except TypeError as e:
            raise InvalidRuleError(definition.type, str(e)) from e

    @classmethod
    def create_all(cls, definitions: list[RuleDefinition]) -> list[Rule]:
        """Build a rule chain, preserving declaration order."""
        return [cls.create(definition) for definition in definitions]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._factories

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered rule type names."""
        return sorted(cls._factories)

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._factories.clear()


# =============================================================================
# Built-in Factories
# =============================================================================


def _overrides(definition: RuleDefinition) -> dict[str, Any]:
    """Message/code overrides; empty strings mean "use the rule's default"."""
    return {
        "message": definition.message or None,
        "code": definition.code or None,
    }


def _simple(factory: Callable[..., Rule]) -> RuleFactory:
    def build(definition: RuleDefinition) -> Rule:
        return factory(**_overrides(definition))

    return build


def _length(factory: Callable[..., Rule]) -> RuleFactory:
    def build(definition: RuleDefinition) -> Rule:
        return factory(definition.params["length"], **_overrides(definition))

    return build


def _bound(factory: Callable[..., Rule]) -> RuleFactory:
    def build(definition: RuleDefinition) -> Rule:
        return factory(definition.params["bound"], **_overrides(definition))

    return build


def _membership(factory: Callable[..., Rule]) -> RuleFactory:
    def build(definition: RuleDefinition) -> Rule:
        return factory(definition.params["values"], **_overrides(definition))

    return build


def _count(factory: Callable[..., Rule]) -> RuleFactory:
    def build(definition: RuleDefinition) -> Rule:
        return factory(definition.params["count"], **_overrides(definition))

    return build


def _date(factory: Callable[..., Rule]) -> RuleFactory:
    def build(definition: RuleDefinition) -> Rule:
        return factory(
            definition.params["bound"],
            definition.params.get("format"),
            unparsable_message=definition.params.get("unparsableMessage"),
            **_overrides(definition),
        )

    return build


def _regex_factory(definition: RuleDefinition) -> Rule:
    return rules.regex(definition.params["pattern"], **_overrides(definition))


def _same_factory(definition: RuleDefinition) -> Rule:
    return rules.same(definition.params["field"], **_overrides(definition))


def _required_if_factory(definition: RuleDefinition) -> Rule:
    """Named-field mode only; predicate mode needs a callable."""
    params = definition.params
    if "value" in params:
        return rules.required_if(params["field"], params["value"], **_overrides(definition))
    return rules.required_if(params["field"], **_overrides(definition))


def _range_selected_factory(definition: RuleDefinition) -> Rule:
    return rules.range_selected(
        definition.params["low"],
        definition.params["high"],
        **_overrides(definition),
    )


def register_builtin_rules() -> None:
    """Register all built-in rule types with the RuleRegistry."""
    RuleRegistry.register_factory("required", _simple(rules.required))
    RuleRegistry.register_factory("email", _simple(rules.email))
    RuleRegistry.register_factory("url", _simple(rules.url))
    RuleRegistry.register_factory("integer", _simple(rules.integer))
    RuleRegistry.register_factory("numeric", _simple(rules.numeric))
    RuleRegistry.register_factory("isTrue", _simple(rules.is_true))
    RuleRegistry.register_factory("isFalse", _simple(rules.is_false))
    RuleRegistry.register_factory("minLength", _length(rules.min_length))
    RuleRegistry.register_factory("maxLength", _length(rules.max_length))
    RuleRegistry.register_factory("size", _length(rules.size))
    RuleRegistry.register_factory("minValue", _bound(rules.min_value))
    RuleRegistry.register_factory("maxValue", _bound(rules.max_value))
    RuleRegistry.register_factory("inList", _membership(rules.in_list))
    RuleRegistry.register_factory("notInList", _membership(rules.not_in_list))
    RuleRegistry.register_factory("minSelected", _count(rules.min_selected))
    RuleRegistry.register_factory("maxSelected", _count(rules.max_selected))
    RuleRegistry.register_factory("rangeSelected", _range_selected_factory)
    RuleRegistry.register_factory("dateBefore", _date(rules.date_before))
    RuleRegistry.register_factory("dateAfter", _date(rules.date_after))
    RuleRegistry.register_factory("regex", _regex_factory)
    RuleRegistry.register_factory("same", _same_factory)
    RuleRegistry.register_factory("requiredIf", _required_if_factory)
    logger.debug("Registered %d built-in rule types", len(RuleRegistry.list_registered()))
