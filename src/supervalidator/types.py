"""Core types for the supervalidator engine.

- RuleInvocation: one parsed entry of a field pipeline
- CheckResult: the outcome of one (field, rule) evaluation
- ValidationFailed / TemplateError: the exceptions the engine raises
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from supervalidator.validator import Validator


# Rule function signature: (value, field, *args) -> bool | Awaitable
RuleFn = Callable[..., Any]


@dataclass(frozen=True)
class RuleInvocation:
    """A single rule call parsed from a rule string.

    Attributes:
        name: Rule name as registered in the RuleRegistry
        args: Positional string arguments from the ``name:a,b`` form
    """

    name: str
    args: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {self.name: list(self.args)}


# Pipeline: ordered invocations for one field
Pipeline = list[RuleInvocation]


@dataclass
class CheckResult:
    """Result of running one rule against one field.

    A result is either settled (``value`` holds the outcome) or pending
    (``pending`` holds the awaitable returned by an async rule). A pending
    result is settled exactly once.

    Attributes:
        field: Dotted path of the field that was checked
        rule: Rule name
        attribute_value: The resolved field value the rule received
        args: Arguments of the invocation
        value: Settled outcome; only ``True`` counts as a pass
        pending: Awaitable still in flight, None once settled
    """

    field: str
    rule: str
    attribute_value: Any
    args: tuple[str, ...] = ()
    value: Any = None
    pending: Awaitable[Any] | None = None

    @property
    def is_pending(self) -> bool:
        return self.pending is not None

    @property
    def passed(self) -> bool:
        return not self.is_pending and self.value is True

    def settle(self, value: bool) -> None:
        """Replace the pending awaitable with its final outcome."""
        if self.pending is None:
            raise RuntimeError(
                f"Check '{self.field}.{self.rule}' has already been settled"
            )
        self.pending = None
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "rule": self.rule,
            "value": None if self.is_pending else self.value,
            "pending": self.is_pending,
            "args": list(self.args),
        }


class ValidationFailed(Exception):
    """Raised when an asynchronous validation run finishes with failures.

    Carries the finalized validator so callers can inspect ``errors`` and
    render messages.
    """

    def __init__(self, validator: "Validator"):
        self.validator = validator
        failed = ", ".join(f"{e.field}.{e.rule}" for e in validator.errors)
        super().__init__(f"Validation failed: {failed}")

    @property
    def errors(self) -> list[CheckResult]:
        return self.validator.errors

    def get_messages(self) -> dict[str, dict[str, str]]:
        return self.validator.get_messages()


class TemplateError(Exception):
    """A message template could not be loaded or is malformed."""

    def __init__(self, message: str, issues: list["SchemaIssue"] | None = None):
        self.issues = issues or []
        super().__init__(message)


@dataclass
class SchemaIssue:
    """A single schema violation found in a template or rules document."""

    message: str
    path: str = ""
    source: str = ""

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        src = self.source or "<document>"
        return f"{src}{loc}: {self.message}"
