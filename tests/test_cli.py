"""Tests for the supervalidator CLI."""

import json

import pytest
from click.testing import CliRunner

from supervalidator.cli import EXIT_BAD_INPUT, EXIT_FAILED, cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def files(tmp_path):
    """Write data/rules/template documents into tmp_path."""

    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content)
        return str(path)

    return _write


class TestCheck:
    def test_passing_record(self, runner, files):
        data = files("data.yaml", "address:\n  route: Street, 100\n")
        rules = files("rules.yaml", "address.route: string|required\n")

        result = runner.invoke(cli, ["check", data, rules])
        assert result.exit_code == 0
        assert "All checks passed" in result.output

    def test_failing_record_lists_messages(self, runner, files):
        data = files("data.yaml", "email: myfakeemail@gmail.com\n")
        rules = files("rules.yaml", "email: required|max:10\n")

        result = runner.invoke(cli, ["check", data, rules])
        assert result.exit_code == EXIT_FAILED
        assert "email.max: The email may not be greater than 10 characters." in result.output
        assert "1 check(s) failed" in result.output

    def test_json_output(self, runner, files):
        data = files("data.json", json.dumps({"address": {"streetNumber": "102"}}))
        rules = files("rules.json", json.dumps({"address": {"streetNumber": "number|required"}}))

        result = runner.invoke(cli, ["check", data, rules, "--json"])
        assert result.exit_code == EXIT_FAILED
        payload = json.loads(result.output)
        assert payload["valid"] is False
        assert list(payload["messages"]) == ["address.streetNumber"]

    def test_custom_template(self, runner, files):
        data = files("data.yaml", "name: ''\n")
        rules = files("rules.yaml", "name: required\n")
        template = files("messages.yaml", 'required: "Please fill in :attribute"\n')

        result = runner.invoke(cli, ["check", data, rules, "--template", template])
        assert "name.required: Please fill in name" in result.output

    def test_invalid_template(self, runner, files):
        data = files("data.yaml", "name: ''\n")
        rules = files("rules.yaml", "name: required\n")
        template = files("messages.yaml", "required: [1, 2]\n")

        result = runner.invoke(cli, ["check", data, rules, "--template", template])
        assert result.exit_code == EXIT_BAD_INPUT

    def test_rules_file_must_match_schema(self, runner, files):
        data = files("data.yaml", "age: 5\n")
        rules = files("rules.yaml", "age: 5\n")

        result = runner.invoke(cli, ["check", data, rules])
        assert result.exit_code == EXIT_BAD_INPUT
        assert "[ERROR]" in result.output

    def test_unparsable_data(self, runner, files):
        data = files("data.yaml", "name: [oops\n")
        rules = files("rules.yaml", "name: required\n")

        result = runner.invoke(cli, ["check", data, rules])
        assert result.exit_code == EXIT_BAD_INPUT
        assert "could not be parsed" in result.output


class TestListRules:
    def test_lists_builtins(self, runner):
        result = runner.invoke(cli, ["rules"])
        assert result.exit_code == 0
        assert result.output.split() == [
            "email", "max", "min", "number", "required", "string", "url",
        ]
