"""supervalidator CLI entry point."""

import json
from pathlib import Path

import click
import yaml

from supervalidator.documents import RULES_SCHEMA, load_document, validate_document
from supervalidator.registry import default_registry
from supervalidator.types import TemplateError
from supervalidator.validator import PendingOutcome, Validator

# Exit codes
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


def _load_or_exit(path: Path, label: str):
    try:
        return load_document(path)
    except yaml.YAMLError as exc:
        click.echo(f"Error: {label} file {path} could not be parsed: {exc}", err=True)
        raise SystemExit(EXIT_BAD_INPUT)


@click.group()
def cli():
    """supervalidator: declarative record validation."""
    pass


@cli.command()
@click.argument("data_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--template",
    "template_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Message template to render failures with.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON output.")
def check(data_file: Path, rules_file: Path, template_path: Path | None, as_json: bool):
    """Validate DATA_FILE against RULES_FILE (YAML or JSON)."""
    data = _load_or_exit(data_file, "Data")
    rules = _load_or_exit(rules_file, "Rules")

    issues = validate_document(rules, RULES_SCHEMA, source=str(rules_file))
    if issues:
        for issue in issues:
            click.echo(click.style(f"[ERROR] {issue}", fg="red"), err=True)
        raise SystemExit(EXIT_BAD_INPUT)

    validator = Validator(data or {}, rules, template_path=template_path)
    # Only built-in rules are reachable from the CLI and they are synchronous
    if isinstance(validator.validate(), PendingOutcome):
        raise click.ClickException("Asynchronous rules are not supported from the CLI")

    try:
        messages = validator.get_messages()
    except TemplateError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(EXIT_BAD_INPUT)

    if as_json:
        click.echo(json.dumps(validator.to_dict(), indent=2, default=str))
    elif validator.passes():
        click.echo(click.style("All checks passed", fg="green"))
    else:
        for field, field_messages in messages.items():
            for rule_name, message in field_messages.items():
                click.echo(click.style(f"{field}.{rule_name}: {message}", fg="red"))
        click.echo(f"\n{len(validator.errors)} check(s) failed")

    if validator.fails():
        raise SystemExit(EXIT_FAILED)


@cli.command("rules")
def list_rules():
    """List the available rule names."""
    for name in default_registry.list_registered():
        click.echo(name)
