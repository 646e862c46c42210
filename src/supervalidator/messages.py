"""Message rendering for failed checks.

Supports:
- :attribute - replaced with the field path (e.g. ``address.streetNumber``)
- :<rule> - replaced with the rule's first argument (``max:10`` -> ``:max`` -> ``10``)
- Type-dependent variants: a template entry may map ``string``, ``number``
  and ``array`` to separate messages, picked by the failing value's type
"""

import re
from collections.abc import Iterable, Mapping, Set
from decimal import Decimal
from typing import Any

from supervalidator.types import CheckResult

# Used when the template has no entry for a rule
MISSING_MESSAGE = "??"

ATTRIBUTE_PLACEHOLDER = ":attribute"


def type_tag(value: Any) -> str:
    """Type tag used to pick a message variant: string, number or array."""
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return "number"
    if isinstance(value, (list, tuple, Set)):
        return "array"
    return "string"


class MessageRenderer:
    """Renders failed checks into ``{field: {rule: message}}``.

    Example:
        renderer = MessageRenderer({"max": {"string": "The :attribute may not exceed :max."}})
        renderer.render(validator.errors)
        # {"email": {"max": "The email may not exceed 10."}}
    """

    def __init__(self, template: Mapping[str, Any]):
        self.template = template

    def render(self, results: Iterable[CheckResult]) -> dict[str, dict[str, str]]:
        messages: dict[str, dict[str, str]] = {}

        for result in results:
            messages.setdefault(result.field, {})[result.rule] = self.render_one(result)

        return messages

    def render_one(self, result: CheckResult) -> str:
        message = self._select(result.rule, result.attribute_value)

        values = {ATTRIBUTE_PLACEHOLDER: result.field}
        if result.args:
            values[f":{result.rule}"] = str(result.args[0])

        # One pass, longest placeholder first, so substituted text is never rescanned
        pattern = re.compile(
            "|".join(re.escape(key) for key in sorted(values, key=len, reverse=True))
        )
        return pattern.sub(lambda match: values[match.group(0)], message)

    def _select(self, rule: str, value: Any) -> str:
        """Pick the template entry for a rule, resolving type variants."""
        entry = self.template.get(rule)

        if isinstance(entry, Mapping):
            entry = entry.get(type_tag(value))

        return entry or MISSING_MESSAGE


def render_messages(
    results: Iterable[CheckResult],
    template: Mapping[str, Any],
) -> dict[str, dict[str, str]]:
    """Render failed checks with the given template."""
    return MessageRenderer(template).render(results)
