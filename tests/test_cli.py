"""Tests for linear_changelog/cli.py"""

import pytest
from click.testing import CliRunner

from linear_changelog.cli import cli

URL = "https://api.linear.example/graphql"

NODES = [
    {"assignee": {"name": "Ada", "email": "ada@example.com"}, "url": "https://l/1",
     "title": "Add export", "team": {"name": "Core"}, "project": {"name": "API", "lead": None}},
]


@pytest.fixture(autouse=True)
def _env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LINEAR_API_URL", URL)
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# draft
# ---------------------------------------------------------------------------

def test_draft_prints_title_and_document(runner, requests_mock):
    requests_mock.post(URL, json={"data": {"issues": {"nodes": NODES}}})
    result = runner.invoke(cli, ["draft", "--year", "2024", "--month", "3", "--api-key", "k"])

    assert result.exit_code == 0, result.output
    assert result.output == (
        "# Changelog draft MARCH 2024\n"
        "## Core\n"
        "### API\n"
        "* [Add export](https://l/1) @Ada\n"
        "\n"
    )


def test_draft_empty_month(runner, requests_mock):
    requests_mock.post(URL, json={"data": {"issues": {"nodes": []}}})
    result = runner.invoke(cli, ["draft", "--year", "2024", "--month", "2", "--api-key", "k"])
    assert result.exit_code == 0
    assert result.output == "# Changelog draft FEBRUARY 2024\n\n"


def test_draft_prompts_for_key(runner, requests_mock):
    adapter = requests_mock.post(URL, json={"data": {"issues": {"nodes": []}}})
    result = runner.invoke(cli, ["draft", "--year", "2024", "--month", "1"], input="secret\n")
    assert result.exit_code == 0
    assert adapter.last_request.headers["Authorization"] == "secret"
    assert "secret" not in result.output


def test_draft_key_from_env(runner, requests_mock, monkeypatch):
    monkeypatch.setenv("LINEAR_API_KEY", "from-env")
    adapter = requests_mock.post(URL, json={"data": {"issues": {"nodes": []}}})
    result = runner.invoke(cli, ["draft", "--year", "2024", "--month", "1"])
    assert result.exit_code == 0
    assert adapter.last_request.headers["Authorization"] == "from-env"


def test_draft_rejects_invalid_month(runner):
    result = runner.invoke(cli, ["draft", "--month", "13", "--api-key", "k"])
    assert result.exit_code != 0
    assert "13" in result.output


def test_draft_query_error_exits_without_report(runner, requests_mock):
    requests_mock.post(URL, json={"errors": [{"message": "Argument invalid"}]})
    result = runner.invoke(cli, ["draft", "--year", "2024", "--month", "1", "--api-key", "k"])
    assert result.exit_code == 1
    assert "Query error: Argument invalid" in result.output
    assert "# Changelog draft" not in result.output


def test_draft_writes_output_file(runner, requests_mock, tmp_path):
    requests_mock.post(URL, json={"data": {"issues": {"nodes": NODES}}})
    out = tmp_path / "CHANGELOG-draft.md"
    result = runner.invoke(cli, [
        "--output", str(out), "draft", "--year", "2024", "--month", "3", "--api-key", "k",
    ])
    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8").startswith("# Changelog draft MARCH 2024\n## Core\n")


def test_draft_malformed_config_section_exits_cleanly(runner, tmp_path):
    (tmp_path / "linear-config.yaml").write_text("filter: github\n", encoding="utf-8")
    result = runner.invoke(cli, ["draft", "--api-key", "k"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_draft_missing_explicit_config(runner):
    result = runner.invoke(cli, ["--config", "missing.yaml", "draft", "--api-key", "k"])
    assert result.exit_code == 1
    assert "Configuration error" in result.output


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def test_init_writes_template(runner, tmp_path):
    result = runner.invoke(cli, ["init", "--output", str(tmp_path / "cfg.yaml")])
    assert result.exit_code == 0
    assert (tmp_path / "cfg.yaml").exists()


def test_init_refuses_overwrite(runner, tmp_path):
    target = tmp_path / "cfg.yaml"
    target.write_text("keep me")
    result = runner.invoke(cli, ["init", "--output", str(target)])
    assert result.exit_code == 1
    assert target.read_text() == "keep me"
