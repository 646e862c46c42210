"""supervalidator: declarative validation of ad-hoc records.

Usage:
    from supervalidator import Validator

    validator = Validator(
        {"email": "me@example.com", "address": {"route": "Main St"}},
        {"email": "required|email|max:64", "address.route": "string|required"},
    )
    if validator.fails():
        print(validator.get_messages())

Custom rules take ``(value, field, *args)`` and return a bool, or an
awaitable for checks that need I/O:

    @rule("unique")
    async def unique(value, field, table, column):
        ...
"""

from supervalidator.messages import MessageRenderer, render_messages, type_tag
from supervalidator.parser import flatten_rules, parse_rule_string, parse_rules
from supervalidator.paths import MISSING, resolve_path
from supervalidator.registry import RuleRegistry, default_registry, rule
from supervalidator.translator import Translator, load_template
from supervalidator.types import (
    CheckResult,
    RuleInvocation,
    SchemaIssue,
    TemplateError,
    ValidationFailed,
)
from supervalidator.validator import PendingOutcome, Validator

__all__ = [
    # Types
    "CheckResult",
    "RuleInvocation",
    "SchemaIssue",
    "TemplateError",
    "ValidationFailed",
    # Parsing
    "flatten_rules",
    "parse_rule_string",
    "parse_rules",
    "MISSING",
    "resolve_path",
    # Registry
    "RuleRegistry",
    "default_registry",
    "rule",
    # Engine
    "PendingOutcome",
    "Validator",
    # Messages
    "MessageRenderer",
    "render_messages",
    "type_tag",
    "Translator",
    "load_template",
]
