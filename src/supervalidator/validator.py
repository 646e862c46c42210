"""Validation engine.

Usage:
    validator = Validator({"email": "me@example.com"}, {"email": "required|email|max:64"})
    if validator.fails():
        print(validator.get_messages())

Runs with asynchronous rules return an awaitable outcome instead:

    try:
        await validator.validate()
    except ValidationFailed as exc:
        print(exc.get_messages())

Lifecycle of one run:
1. Parse the rule map into per-field pipelines
2. Evaluate every invocation against the resolved field value
3. If no check is pending, finalize immediately
4. Otherwise settle all pending checks concurrently, then finalize
"""

import asyncio
import functools
import inspect
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable

from supervalidator.messages import render_messages
from supervalidator.parser import flatten_rules, parse_rules
from supervalidator.paths import resolve_path
from supervalidator.registry import RuleRegistry, default_registry
from supervalidator.translator import Template, Translator, load_template
from supervalidator.types import (
    CheckResult,
    Pipeline,
    RuleFn,
    RuleInvocation,
    ValidationFailed,
)

logger = logging.getLogger(__name__)


class _ClassOrInstanceMethod:
    """Bind to the instance when accessed on one, otherwise to the class."""

    def __init__(self, fn: Callable[..., Any]):
        self.fn = fn
        functools.update_wrapper(self, fn)

    def __get__(self, obj: Any, owner: type | None = None) -> Callable[..., Any]:
        return functools.partial(self.fn, owner if obj is None else obj)


class PendingOutcome:
    """Awaitable outcome of a run that has asynchronous checks in flight.

    Awaiting it settles every pending check, then resolves to the validator
    if all checks passed or raises ValidationFailed. It can be awaited any
    number of times; later awaits see the same outcome.
    """

    def __init__(self, validator: "Validator"):
        self._validator = validator
        self._task: asyncio.Future | None = None

    def __await__(self):
        if self._task is None:
            self._task = asyncio.ensure_future(self._validator._settle_pending())
        return self._task.__await__()

    def done(self) -> bool:
        return self._task is not None and self._task.done()


class Validator:
    """Validates a record against a declarative rule map.

    Attributes:
        data: The record being validated (never mutated)
        rules: Field path -> rule string, or nested group of sub-fields
        registry: Rules available to this instance (a copy of the class registry)
        template_path: Explicit template file; wins over translator and default
        translator: Explicit template mapping or Translator
        pipelines: Field path -> parsed pipeline, set when validation starts
        results: One CheckResult per (field, invocation)
        errors: Failing CheckResults, set when validation finalizes
    """

    # Rules new instances start from; Validator.define_rule() extends it
    registry: RuleRegistry = default_registry

    def __init__(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        *,
        template_path: str | Path | None = None,
        translator: Template | Translator | None = None,
        registry: RuleRegistry | None = None,
    ):
        self.data = data
        self.rules = rules
        self.registry = (registry or type(self).registry).copy()
        self.template_path = template_path
        self.translator = translator
        self.pipelines: dict[str, Pipeline] = {}
        self.results: list[CheckResult] = []
        self.errors: list[CheckResult] = []

        # Captured now so later changes to the process default do not apply
        self._default_template_path = Translator.default_template_path
        self._validating = False
        self._validated = False
        self._outcome: "Validator | PendingOutcome | None" = None

    @_ClassOrInstanceMethod
    def define_rule(target: Any, name: str, rule_fn: RuleFn) -> None:
        """Register a rule on this instance, or on the class default set."""
        target.registry.register(name, rule_fn)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def validating(self) -> bool:
        return self._validating

    @property
    def validated(self) -> bool:
        return self._validated

    def has_pending(self) -> bool:
        return any(result.is_pending for result in self.results)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def validate(self) -> "Validator | PendingOutcome":
        """Run every check.

        Returns:
            The validator itself when all checks settled synchronously, or a
            PendingOutcome to await when asynchronous checks are in flight.
            Calling again returns the outcome of the first run.
        """
        if self._outcome is not None:
            return self._outcome

        self._validating = True
        self.pipelines = flatten_rules(parse_rules(self.rules))
        self.results = self._create_results()

        if self.has_pending():
            self._outcome = PendingOutcome(self)
        else:
            self._finalize()
            self._outcome = self

        return self._outcome

    def passes(self) -> bool:
        """True if every check passed.

        Triggers validation on first use. While asynchronous checks are still
        pending this reads the current state, where pending counts as not
        passed; use passes_async() to wait for the final answer.
        """
        if not self._validating and not self._validated:
            self.validate()

        if self.has_pending():
            logger.warning(
                "passes() called with %d asynchronous check(s) still pending; "
                "await validate() or passes_async() for the final outcome",
                sum(1 for r in self.results if r.is_pending),
            )

        return all(result.passed for result in self.results)

    def fails(self) -> bool:
        return not self.passes()

    async def passes_async(self) -> bool:
        """Wait for every check to settle, then report whether all passed."""
        outcome = self.validate()
        if isinstance(outcome, PendingOutcome):
            try:
                await outcome
            except ValidationFailed:
                return False
        return self.passes()

    async def fails_async(self) -> bool:
        return not await self.passes_async()

    def _create_results(self) -> list[CheckResult]:
        results = []
        for field, pipeline in self.pipelines.items():
            value = resolve_path(self.data, field)
            for invocation in pipeline:
                results.append(self._run_rule(field, invocation, value))
        return results

    def _run_rule(self, field: str, invocation: RuleInvocation, value: Any) -> CheckResult:
        """Evaluate one invocation. Never raises."""
        result = CheckResult(
            field=field,
            rule=invocation.name,
            attribute_value=value,
            args=invocation.args,
        )
        rule_fn = self.registry.get(invocation.name)
        call_args = self._fit_args(rule_fn, (value, field, *invocation.args))
        if call_args is None:
            # Malformed token, e.g. "max" without a limit: same policy as unknown rules
            logger.warning(
                "Rule '%s' on '%s' is missing required arguments (got %r), skipping",
                invocation.name,
                field,
                list(invocation.args),
            )
            result.value = True
            return result

        try:
            outcome = rule_fn(*call_args)
        except Exception as e:
            logger.debug("Rule '%s' raised on '%s': %s", invocation.name, field, e)
            result.value = False
            return result

        if inspect.isawaitable(outcome):
            result.pending = outcome
        else:
            result.value = outcome
        return result

    @staticmethod
    def _fit_args(
        rule_fn: RuleFn, call_args: tuple[Any, ...]
    ) -> tuple[Any, ...] | None:
        """Drop arguments the rule has no parameter for.

        Returns None when a required parameter would be left unfilled.
        """
        try:
            signature = inspect.signature(rule_fn)
        except (TypeError, ValueError):
            # No introspectable signature (some C callables); just call it
            return call_args

        params = list(signature.parameters.values())
        if not any(p.kind is p.VAR_POSITIONAL for p in params):
            positional = [
                p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
            ]
            call_args = call_args[: len(positional)]

        try:
            signature.bind(*call_args)
        except TypeError:
            return None
        return call_args

    async def _settle_pending(self) -> "Validator":
        pending = [result for result in self.results if result.is_pending]
        await asyncio.gather(*(self._settle(result) for result in pending))

        self._finalize()
        if self.passes():
            return self
        raise ValidationFailed(self)

    @staticmethod
    async def _settle(result: CheckResult) -> None:
        try:
            await result.pending
        except Exception as e:
            logger.debug(
                "Asynchronous rule '%s' on '%s' failed: %s", result.rule, result.field, e
            )
            result.settle(False)
        else:
            # Async rules fail by raising; any value they settle with is a pass
            result.settle(True)

    def _finalize(self) -> None:
        self.errors = [result for result in self.results if not result.passed]
        self._validating = False
        self._validated = True

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    def get_template(self) -> Template:
        """Resolve the template: template_path, then translator, then default."""
        if self.template_path:
            return load_template(Path(self.template_path))
        if isinstance(self.translator, Translator):
            return self.translator.get_template()
        if self.translator is not None:
            return self.translator
        return Translator(self._default_template_path).get_template()

    def get_messages(self) -> dict[str, dict[str, str]]:
        """Render messages for every failed check as ``{field: {rule: message}}``.

        Raises:
            RuntimeError: If validation has not finished yet
            TemplateError: If the template cannot be loaded
        """
        if not self._validated:
            raise RuntimeError(
                "Messages are only available once validation has finished"
            )
        return render_messages(self.errors, self.get_template())

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self._validated and not self.errors,
            "errors": [e.to_dict() for e in self.errors],
            "messages": self.get_messages() if self._validated else {},
        }
