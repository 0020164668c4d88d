"""Tests for the ``checker`` and ``checker-config`` command-line tools."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from usecase_checker.config.loader import _DEFAULT_CONFIG_PATH
from usecase_checker.presentation.cli.app import app, config_app

runner = CliRunner()

_HTTP_FEATURE = """\
Feature: Withdraw cash
  Scenario: Withdraw
    When the customer withdraws 100 EUR
    Then the system should return HTTP 200
"""


@pytest.fixture
def clean_files(write, clean_use_case, clean_feature):
    return write("uc.md", clean_use_case), write("withdraw.feature", clean_feature)


# ---------------------------------------------------------------------------
# checker <usecase> <features>...
# ---------------------------------------------------------------------------


class TestCheckCommand:
    def test_clean_inputs_exit_zero(self, clean_files):
        uc, feature = clean_files
        result = runner.invoke(app, [str(uc), str(feature)])
        assert result.exit_code == 0, result.output
        assert "No violations found." in result.output
        assert "Result: PASSED" in result.output

    def test_missing_primary_actor(self, write, clean_use_case, clean_feature):
        uc = write("uc.md", clean_use_case.replace("## Primary Actor\nCustomer\n", ""))
        feature = write("withdraw.feature", clean_feature)
        result = runner.invoke(app, [str(uc), str(feature)])
        assert result.exit_code == 2
        assert "Primary Actor" in result.output

    def test_http_step_is_one_black_box_error(self, write, clean_use_case):
        uc = write("uc.md", clean_use_case)
        feature = write("http.feature", _HTTP_FEATURE)
        result = runner.invoke(app, [str(uc), str(feature)])
        assert result.exit_code == 1
        assert result.output.count("  R6  ") == 1
        assert "'HTTP'" in result.output

    def test_trigger_without_step_reference(self, write, clean_use_case, clean_feature):
        uc = write(
            "uc.md",
            clean_use_case.replace(
                "Trigger: At step 3, the customer enters a wrong PIN.",
                "Trigger: when something fails",
            ),
        )
        feature = write("withdraw.feature", clean_feature)
        result = runner.invoke(app, [str(uc), str(feature)])
        assert result.exit_code == 1
        assert result.output.count("  R4  ") == 1

    def test_warnings_do_not_fail(self, write, clean_use_case, clean_feature):
        uc = write(
            "uc.md",
            clean_use_case.replace(
                "- The account has a positive balance.", "- The cash toggle is on."
            ),
        )
        feature = write("withdraw.feature", clean_feature)
        result = runner.invoke(app, [str(uc), str(feature)])
        assert result.exit_code == 0
        assert "WARNINGS (1)" in result.output

    def test_output_is_repeatable(self, write, clean_use_case):
        uc = write("uc.md", clean_use_case)
        feature = write("http.feature", _HTTP_FEATURE)
        first = runner.invoke(app, [str(uc), str(feature)])
        second = runner.invoke(app, [str(uc), str(feature)])
        assert first.output == second.output

    def test_json_format(self, write, clean_use_case):
        uc = write("uc.md", clean_use_case)
        feature = write("http.feature", _HTTP_FEATURE)
        result = runner.invoke(app, [str(uc), str(feature), "--format", "json"])
        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert [v["rule_id"] for v in payload["violations"]] == ["R6"]
        assert payload["summary"]["exit_code"] == 1

    def test_disable_rule(self, write, clean_use_case):
        uc = write("uc.md", clean_use_case)
        feature = write("http.feature", _HTTP_FEATURE)
        result = runner.invoke(app, [str(uc), str(feature), "--disable", "R6"])
        assert result.exit_code == 0

    def test_feature_directory(self, write, tmp_path, clean_use_case, clean_feature):
        uc = write("uc.md", clean_use_case)
        write("features/withdraw.feature", clean_feature)
        result = runner.invoke(app, [str(uc), str(tmp_path / "features"), "-v"])
        assert result.exit_code == 0
        assert "in 2 file(s)" in result.output


class TestCheckConfiguration:
    def test_unknown_rule_set(self, clean_files):
        uc, feature = clean_files
        result = runner.invoke(app, [str(uc), str(feature), "--rule-set", "9"])
        assert result.exit_code == 2
        assert "Unknown rule set version" in result.output

    def test_rule_set_from_environment(self, clean_files):
        uc, feature = clean_files
        result = runner.invoke(
            app, [str(uc), str(feature)], env={"USECASE_CHECKER_RULE_SET": "9"}
        )
        assert result.exit_code == 2

    def test_invalid_json_config(self, clean_files, write):
        uc, feature = clean_files
        cfg = write("bad.json", "{not json")
        result = runner.invoke(app, [str(uc), str(feature), "--config", str(cfg)])
        assert result.exit_code == 2
        assert "Invalid JSON" in result.output

    def test_schema_error_is_explained(self, clean_files, write):
        uc, feature = clean_files
        cfg = write("cfg.json", json.dumps({"rules": {"dry": {"similarity_threshold": 2}}}))
        result = runner.invoke(app, [str(uc), str(feature), "-c", str(cfg)])
        assert result.exit_code == 2
        assert "similarity_threshold must be at most 1.0" in result.output

    def test_missing_config_file(self, clean_files, tmp_path):
        uc, feature = clean_files
        result = runner.invoke(app, [str(uc), str(feature), "-c", str(tmp_path / "x.json")])
        assert result.exit_code == 2
        assert "Config file not found" in result.output


# ---------------------------------------------------------------------------
# checker-config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_show(self):
        result = runner.invoke(config_app, ["show"])
        assert result.exit_code == 0
        assert "rule_set_version" in result.output

    def test_show_explains_schema_errors(self, write):
        cfg = write("cfg.json", json.dumps({"rules": {"dry": {"similarity_threshold": 2}}}))
        result = runner.invoke(config_app, ["show", "--config", str(cfg)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "similarity_threshold must be at most 1.0" in result.output

    def test_init(self, tmp_path):
        dest = tmp_path / "checker_config.json"
        result = runner.invoke(config_app, ["init", "--output", str(dest)])
        assert result.exit_code == 0
        assert json.loads(dest.read_text()) == json.loads(_DEFAULT_CONFIG_PATH.read_text())

    def test_init_keeps_existing_file(self, write):
        dest = write("checker_config.json", "{}")
        result = runner.invoke(config_app, ["init", "-o", str(dest)], input="n\n")
        assert result.exit_code == 1
        assert dest.read_text() == "{}"

    def test_validate_default(self):
        result = runner.invoke(config_app, ["validate", str(_DEFAULT_CONFIG_PATH)])
        assert result.exit_code == 0
        assert "Valid configuration" in result.output

    def test_validate_invalid_rule_id(self, write):
        cfg = write("cfg.json", json.dumps({"disabled_rules": ["X1"]}))
        result = runner.invoke(config_app, ["validate", str(cfg)])
        assert result.exit_code == 1
        assert "invalid rule id" in result.output

    def test_validate_missing_file(self, tmp_path):
        result = runner.invoke(config_app, ["validate", str(tmp_path / "none.json")])
        assert result.exit_code == 1

    def test_rules(self):
        result = runner.invoke(config_app, ["rules"])
        assert result.exit_code == 0
        assert "Rule set 1" in result.output
        assert "R7" in result.output
