"""Rule string parsing.

Turns a rule map such as::

    {"email": "required|max:10", "address": {"route": "string"}}

into pipelines of RuleInvocation, one pipeline per field. Grammar:

    field_rule_spec := token ('|' token)*
    token           := rule_name (':' arg (',' arg)*)?

Parsing never fails. Malformed tokens (e.g. an empty rule name) are kept
literally and resolve to the missing-rule fallback at evaluation time.
"""

from collections.abc import Mapping
from typing import Any

from supervalidator.types import Pipeline, RuleInvocation

RULE_SEPARATOR = "|"
ARGS_SEPARATOR = ":"
ARG_SEPARATOR = ","


def parse_token(token: str) -> RuleInvocation:
    """Parse a single ``name[:arg,arg]`` token."""
    name, _, raw_args = token.partition(ARGS_SEPARATOR)
    if not raw_args:
        return RuleInvocation(name=name)
    return RuleInvocation(name=name, args=tuple(raw_args.split(ARG_SEPARATOR)))


def parse_rule_string(spec: str) -> Pipeline:
    """Parse a pipe-delimited rule string into a pipeline."""
    return [parse_token(token) for token in spec.split(RULE_SEPARATOR)]


def parse_rules(rules: Mapping[str, Any]) -> dict[str, Any]:
    """Parse a rule map.

    String values become pipelines; mapping values are parsed recursively
    into nested groups keyed the same way.

    Args:
        rules: Field name (or dotted path) -> rule string or nested mapping

    Returns:
        Field name -> Pipeline, or -> nested dict for grouped sub-keys
    """
    parsed: dict[str, Any] = {}
    for key, spec in rules.items():
        if isinstance(spec, Mapping):
            parsed[key] = parse_rules(spec)
        else:
            parsed[key] = parse_rule_string(str(spec))
    return parsed


def flatten_rules(parsed: Mapping[str, Any], prefix: str = "") -> dict[str, Pipeline]:
    """Collapse nested groups from parse_rules() into dotted field paths.

    ``{"address": {"route": [...]}}`` becomes ``{"address.route": [...]}``.
    """
    flat: dict[str, Pipeline] = {}
    for key, value in parsed.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            flat.update(flatten_rules(value, path))
        else:
            flat[path] = value
    return flat
