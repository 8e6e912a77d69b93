"""CLI tests for qt-plan using Click's test runner."""

import json
from types import SimpleNamespace

import pytest
from click.testing import CliRunner

from qt_plan.samples import SAMPLE_INDENTED, SAMPLE_SQL, SAMPLE_TABULAR, SAMPLE_TREE_DATA


class TestPlanCLI:
    """Tests for qt-plan commands."""

    @pytest.fixture
    def runner(self):
        """Create a CLI runner."""
        return CliRunner()

    @pytest.fixture
    def cli(self):
        """Import the CLI."""
        from qt_plan.cli import main
        return main

    @pytest.fixture
    def plan_file(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text(SAMPLE_TREE_DATA)
        return str(path)

    @pytest.fixture
    def sql_file(self, tmp_path):
        path = tmp_path / "query.sql"
        path.write_text(SAMPLE_SQL)
        return str(path)

    def test_cli_help(self, runner, cli):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("parse", "insights", "digest", "analyze", "docs", "sample"):
            assert command in result.output

    def test_cli_version(self, runner, cli):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_parse_tree(self, runner, cli, plan_file):
        result = runner.invoke(cli, ["parse", plan_file])
        assert result.exit_code == 0, result.output
        assert "Hash Join" in result.output
        assert "Index Scan" in result.output
        assert "Nodes: 4" in result.output

    def test_parse_json(self, runner, cli, plan_file, sql_file):
        result = runner.invoke(cli, ["parse", plan_file, "--sql", sql_file, "--title", "Orders", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["summary"]["title"] == "Orders"
        assert data["summary"]["sqlText"] == SAMPLE_SQL
        assert data["stats"]["nodeCount"] == 4

    def test_parse_stdin(self, runner, cli):
        result = runner.invoke(cli, ["parse", "-", "--json"], input=SAMPLE_INDENTED)
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["nodes"][0]["name"] == "Aggregate"

    def test_dialect_and_source_options(self, runner, cli):
        result = runner.invoke(
            cli,
            ["parse", "-", "--dialect", "opengauss", "--source", "connection", "--json"],
            input=SAMPLE_TABULAR,
        )
        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)["summary"]
        assert summary["dialect"] == "opengauss"
        assert summary["source"] == "connection"

    def test_empty_plan_is_import_error(self, runner, cli):
        result = runner.invoke(cli, ["parse", "-"], input="   \n")
        assert result.exit_code == 1
        assert "Import failed: Execution plan text is empty" in result.output

    def test_malformed_plan_is_import_error(self, runner, cli):
        result = runner.invoke(cli, ["insights", "-"], input='{"Plan": ')
        assert result.exit_code == 1
        assert "Unable to parse JSON plan" in result.output

    def test_non_finite_values_do_not_crash(self, runner, cli):
        payload = '{"Plan": {"Node Type": "Sort", "Actual Rows": NaN, "Plan Rows": 1e999, "Plans": 5}}'
        result = runner.invoke(cli, ["insights", "-", "--json"], input=payload)
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == []

    def test_missing_file(self, runner, cli):
        result = runner.invoke(cli, ["parse", "/nonexistent/plan.json"])
        assert result.exit_code != 0

    def test_insights_table(self, runner, cli, plan_file):
        result = runner.invoke(cli, ["insights", plan_file])
        assert result.exit_code == 0, result.output
        assert "CRITICAL" in result.output
        assert "dominates runtime" in result.output

    def test_insights_table_shows_node_executor(self, runner, cli, plan_file):
        result = runner.invoke(cli, ["insights", plan_file])
        assert result.exit_code == 0, result.output
        assert "CN" in result.output
        assert "DN1" in result.output

    def test_insight_node_cell(self, tree_execution):
        from qt_plan.cli.cmd_insights import _node_cell

        hash_join = tree_execution.nodes[0].children[0]
        assert _node_cell(tree_execution, hash_join.id) == "DN1\n[dim]640ms[/dim]"
        assert _node_cell(tree_execution, None) == "[dim]plan[/dim]"
        assert _node_cell(tree_execution, "unknown-id") == "[dim]plan[/dim]"

    def test_insights_json(self, runner, cli, plan_file):
        result = runner.invoke(cli, ["insights", plan_file, "--json"])
        assert result.exit_code == 0, result.output
        severities = [i["severity"] for i in json.loads(result.output)]
        assert severities == ["critical", "warn", "info"]

    def test_insights_fail_on_critical(self, runner, cli, plan_file):
        result = runner.invoke(cli, ["insights", plan_file, "--fail-on-critical"])
        assert result.exit_code == 1

    def test_insights_none_found(self, runner, cli):
        result = runner.invoke(cli, ["insights", "-"], input="Result  (rows=1)")
        assert result.exit_code == 0
        assert "No issues detected" in result.output

    def test_digest(self, runner, cli, plan_file, sql_file):
        result = runner.invoke(cli, ["digest", plan_file, "--sql", sql_file])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["dialect"] == "opengauss"
        assert data["sql"]["truncated"] is False
        assert [n["name"] for n in data["skewedNodes"]] == ["Hash Join"]

    def test_docs_list(self, runner, cli):
        result = runner.invoke(cli, ["docs", "--json"])
        assert result.exit_code == 0
        keys = [entry["key"] for entry in json.loads(result.output)]
        assert "hash_join" in keys

    def test_docs_by_operator_name(self, runner, cli):
        result = runner.invoke(cli, ["docs", "Hash Join"])
        assert result.exit_code == 0
        assert "work_mem" in result.output

    def test_docs_unknown(self, runner, cli):
        result = runner.invoke(cli, ["docs", "Nested Loop"])
        assert result.exit_code == 1
        assert "No documentation" in result.output

    @pytest.mark.parametrize("fmt,expected", [
        ("json", SAMPLE_TREE_DATA),
        ("text", SAMPLE_INDENTED),
        ("table", SAMPLE_TABULAR),
    ])
    def test_sample(self, runner, cli, fmt, expected):
        result = runner.invoke(cli, ["sample", "--format", fmt])
        assert result.exit_code == 0
        assert result.output == expected.rstrip("\n") + "\n"

    def test_sample_pipes_into_insights(self, runner, cli):
        sample = runner.invoke(cli, ["sample", "--format", "table"]).output
        result = runner.invoke(cli, ["insights", "-", "--json"], input=sample)
        assert result.exit_code == 0, result.output
        assert [i["severity"] for i in json.loads(result.output)] == ["critical", "warn"]


class TestAnalyzeCommand:
    """qt-plan analyze with a fake openai SDK."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def cli(self):
        from qt_plan.cli import main
        return main

    @pytest.fixture
    def fake_openai(self, monkeypatch):
        """Install a fake openai module; returns the captured request."""
        captured = {"reply": json.dumps({
            "summary": "Join estimate is off.",
            "planQuality": {"rating": "critical", "rationale": ["Row skew"]},
            "findings": [{"title": "Row skew", "severity": "warn", "detail": "5400 vs 2400"}],
            "recommendations": [{"action": "ANALYZE orders", "rationale": "Stale stats"}],
        })}

        class _FakeCompletions:
            @staticmethod
            def create(**kwargs):
                captured["request"] = kwargs
                message = SimpleNamespace(content=captured["reply"])
                usage = SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15)
                return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=usage)

        class _FakeOpenAIClient:
            def __init__(self, api_key: str, base_url: str = None):
                captured["api_key"] = api_key
                captured["base_url"] = base_url
                self.chat = SimpleNamespace(completions=_FakeCompletions())

        monkeypatch.setitem(__import__("sys").modules, "openai", SimpleNamespace(OpenAI=_FakeOpenAIClient))
        return captured

    def _args(self, *extra):
        return [
            "analyze", "-",
            "--base-url", "https://gateway.example.com",
            "--model", "test-model",
            "--api-key", "secret",
            *extra,
        ]

    def test_not_configured(self, runner, cli):
        result = runner.invoke(cli, ["analyze", "-", "--api-key", ""], input=SAMPLE_TREE_DATA)
        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_analyze_report(self, runner, cli, fake_openai):
        result = runner.invoke(cli, self._args(), input=SAMPLE_TREE_DATA)
        assert result.exit_code == 0, result.output
        assert "Join estimate is off." in result.output
        assert "ANALYZE orders" in result.output
        assert fake_openai["api_key"] == "secret"
        assert fake_openai["base_url"] == "https://gateway.example.com/v1"
        assert fake_openai["request"]["model"] == "test-model"

    def test_analyze_sends_digest_only(self, runner, cli, fake_openai):
        result = runner.invoke(cli, self._args("--locale", "zh"), input=SAMPLE_TREE_DATA)
        assert result.exit_code == 0, result.output
        messages = fake_openai["request"]["messages"]
        assert messages[0]["role"] == "system"
        body = json.loads(messages[1]["content"])
        assert body["locale"] == "zh"
        assert set(body) == {"locale", "digest", "tuningDocs", "note"}

    def test_analyze_json(self, runner, cli, fake_openai):
        result = runner.invoke(cli, self._args("--json"), input=SAMPLE_TREE_DATA)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["planQuality"]["rating"] == "critical"
        assert data["indexHints"] == []

    def test_reply_without_json(self, runner, cli, fake_openai):
        fake_openai["reply"] = "Sorry, no analysis today."
        result = runner.invoke(cli, self._args(), input=SAMPLE_TREE_DATA)
        assert result.exit_code == 1
        assert "Sorry, no analysis today." in result.output
        assert "did not contain a JSON object" in result.output
