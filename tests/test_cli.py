"""Tests for the blessed-golden command line."""

import json

import pytest
from click.testing import CliRunner

from blessed_golden import cli
from conftest import regex_case, write_fixture


@pytest.fixture(autouse=True)
def _isolated(monkeypatch):
    # Root logger handlers would outlive CliRunner's captured streams.
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    for name in ("BLESSED_PROJECT_ROOT", "BLESSED_HARNESS_MODULES", "BLESSED_GIT_BIN", "BLESSED_CASE_COLLISIONS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


class TestHarnesses:
    def test_lists_registered_harnesses_in_definition_order(self, runner):
        result = runner.invoke(cli.main, ["-m", "sample_harnesses", "harnesses"])

        assert result.exit_code == 0, result.output
        names = [line.split()[0] for line in result.output.splitlines()]
        assert names == ["add", "shout", "divide", "leak_object", "count_calls"]

    def test_no_modules_is_an_error(self, runner):
        result = runner.invoke(cli.main, ["harnesses"])
        assert result.exit_code == 1
        assert "No harnesses registered" in result.output


class TestList:
    def test_lists_synthesized_cases(self, runner, git_repo):
        write_fixture(git_repo.root, "src/regex.blessed.json", {"basic": regex_case("ab", ["ab"])})

        result = runner.invoke(cli.main, ["--root", str(git_repo.root), "list"])

        assert result.exit_code == 0, result.output
        assert "blessed_test_regex_blessed_basic  parse_compile_match  blessed/basic.json" in result.output
        assert "1 case(s) in 1 fixture file(s)" in result.output

    def test_json_output(self, runner, git_repo):
        write_fixture(git_repo.root, "src/regex.blessed.json", {"basic": regex_case("ab", ["ab"])})

        result = runner.invoke(cli.main, ["--root", str(git_repo.root), "list", "--json"])

        assert result.exit_code == 0, result.output
        listing = json.loads(result.output)
        [summary] = listing["cases"]
        assert summary["id"] == "blessed_test_regex_blessed_basic"
        assert summary["relative_output_path"] == "blessed/basic.json"
        assert listing["fixtures"]["case_count"] == 1
        assert [f["cases"] for f in listing["fixtures"]["files"]] == [["basic"]]

    @pytest.mark.parametrize("extra", [[], ["--json"]])
    def test_no_fixture_files(self, runner, git_repo, extra):
        result = runner.invoke(cli.main, ["--root", str(git_repo.root), "list", *extra])
        assert result.exit_code == 1
        assert "No test definition files found matching glob pattern" in result.output

    def test_setup_error_is_reported(self, runner, project, monkeypatch):
        monkeypatch.setenv("BLESSED_GIT_BIN", str(project / "no-such-git"))

        result = runner.invoke(cli.main, ["--root", str(project), "list"])

        assert result.exit_code == 1
        assert "Error: Failed to execute" in result.output


class TestRun:
    def test_untracked_then_staged(self, runner, git_repo):
        write_fixture(git_repo.root, "src/regex.blessed.json", {"basic": regex_case("ab", ["ab"])})
        args = ["--root", str(git_repo.root), "-m", "blessed_regex.harnesses", "run"]

        first = runner.invoke(cli.main, args)
        assert first.exit_code == 1
        assert "FAIL blessed_test_regex_blessed_basic: Blessed test 'basic': untracked file" in first.output
        assert '0 passed, 1 failed (verdicts: {"untracked": 1})' in first.output

        git_repo.run("add", "blessed/basic.json")
        second = runner.invoke(cli.main, args)
        assert second.exit_code == 0, second.output
        assert "PASS blessed_test_regex_blessed_basic" in second.output
        assert '1 passed, 0 failed (verdicts: {"staged_new_or_clean": 1})' in second.output

    def test_case_filter(self, runner, git_repo):
        write_fixture(
            git_repo.root,
            "src/regex.blessed.json",
            {"basic": regex_case("ab", ["ab"]), "other": regex_case("x", ["x"])},
        )

        result = runner.invoke(
            cli.main,
            ["--root", str(git_repo.root), "-m", "blessed_regex.harnesses", "run", "--case", "other"],
        )

        assert "blessed_test_regex_blessed_other" in result.output
        assert "blessed_test_regex_blessed_basic" not in result.output
        assert (git_repo.root / "blessed" / "other.json").exists()
        assert not (git_repo.root / "blessed" / "basic.json").exists()

    def test_unknown_case_filter(self, runner, git_repo):
        write_fixture(git_repo.root, "src/regex.blessed.json", {"basic": regex_case("ab", ["ab"])})

        result = runner.invoke(
            cli.main,
            ["--root", str(git_repo.root), "-m", "blessed_regex.harnesses", "run", "--case", "nope"],
        )

        assert result.exit_code == 1
        assert "no cases match ['nope']" in result.output

    def test_missing_harness_fails_the_unit(self, runner, git_repo):
        write_fixture(git_repo.root, "src/regex.blessed.json", {"basic": regex_case("ab", ["ab"])})

        result = runner.invoke(cli.main, ["--root", str(git_repo.root), "run"])

        assert result.exit_code == 1
        assert "[runtime/harness_not_found]: Blessed harness function 'parse_compile_match' not found" in result.output

    def test_raising_harness_fails_only_its_unit(self, runner, git_repo):
        write_fixture(
            git_repo.root,
            "src/math.blessed.json",
            {
                "zero": {"harness": "divide", "params": {"a": 1, "b": 0}},
                "loud": {"harness": "shout", "params": "ok"},
            },
        )
        (git_repo.root / "blessed").mkdir()
        (git_repo.root / "blessed" / "loud.json").write_text('"OK"', encoding="utf-8")
        git_repo.run("add", "blessed/loud.json")

        result = runner.invoke(cli.main, ["--root", str(git_repo.root), "-m", "sample_harnesses", "run"])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "FAIL blessed_test_math_blessed_zero: ZeroDivisionError: " in result.output
        assert "PASS blessed_test_math_blessed_loud" in result.output
        assert '1 passed, 1 failed (verdicts: {"staged_new_or_clean": 1})' in result.output
