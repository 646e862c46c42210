"""Rule registry for supervalidator.

Provides registration and lookup of rule functions by name. Every Validator
works on its own copy of the registry, so rules defined on one instance do
not leak into others.
"""

import logging
from collections.abc import Callable, Mapping

from supervalidator.rules import BUILTIN_RULES
from supervalidator.types import RuleFn

logger = logging.getLogger(__name__)


class RuleRegistry:
    """Mapping of rule name to rule function.

    Unlike a strict registry, lookups of unknown names do not raise: they
    return a fallback rule that logs a warning and passes. An unregistered
    rule therefore never blocks unrelated validations (fail-open policy).

    Example:
        registry = RuleRegistry(BUILTIN_RULES)
        registry.register("even", lambda value, field: value % 2 == 0)
        registry.get("even")(4, "count")  # True
    """

    def __init__(self, rules: Mapping[str, RuleFn] | None = None):
        self._rules: dict[str, RuleFn] = dict(rules or {})

    def register(self, name: str, rule_fn: RuleFn) -> None:
        """Register a rule function by name.

        Overwrites any existing rule of the same name, built-ins included.

        Args:
            name: Rule name as used in rule strings
            rule_fn: Callable taking ``(value, field, *args)`` and returning
                a bool or an awaitable
        """
        self._rules[name] = rule_fn

    def get(self, name: str) -> RuleFn:
        """Get a rule by name, or the missing-rule fallback."""
        if name not in self._rules:
            return self.missing_rule(name)
        return self._rules[name]

    @staticmethod
    def missing_rule(name: str) -> RuleFn:
        """Build the fallback used for unknown or malformed rules."""

        def fallback(*args, **kwargs) -> bool:
            logger.warning("Rule '%s' is not defined", name)
            return True

        return fallback

    def is_registered(self, name: str) -> bool:
        """Check if a rule is registered."""
        return name in self._rules

    def list_registered(self) -> list[str]:
        """List all registered rule names."""
        return sorted(self._rules.keys())

    def copy(self) -> "RuleRegistry":
        return RuleRegistry(self._rules)

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        self._rules.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._rules


# Registry new Validator instances clone at construction time
default_registry = RuleRegistry(BUILTIN_RULES)


def rule(name: str) -> Callable[[RuleFn], RuleFn]:
    """Decorator to register a rule in the default registry.

    Usage:
        @rule("unique")
        async def unique(value, field, table, column):
            ...
    """

    def decorator(fn: RuleFn) -> RuleFn:
        default_registry.register(name, fn)
        return fn

    return decorator


def reset_default_registry() -> None:
    """Restore the default registry to the built-in rules. Primarily for testing."""
    default_registry.clear()
    for name, fn in BUILTIN_RULES.items():
        default_registry.register(name, fn)
