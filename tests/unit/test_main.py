# tests/unit/test_main.py - v1
"""Tests for main.py - CLI commands and exit codes."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from xaiprecompute.api.facade import create_orchestrator as real_create_orchestrator
from xaiprecompute.logging.logger import ROOT_LOGGER
from xaiprecompute.main import _build_parser, main


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run each command from an empty directory with a temp JSON cache."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CACHE_BACKEND", "json")
    monkeypatch.setenv("CACHE_ROOT", str(tmp_path / "cache"))
    monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("DELAY_BETWEEN_BATCHES_MS", "0")
    yield
    logging.getLogger(ROOT_LOGGER).handlers.clear()


@pytest.fixture
def patched_orchestrator(llm_client, recording_sleep):
    def _create(settings):
        return real_create_orchestrator(settings, client=llm_client, sleep=recording_sleep)

    with patch("xaiprecompute.api.facade.create_orchestrator", side_effect=_create):
        yield


class TestParser:
    def test_run_defaults(self):
        args = _build_parser().parse_args(["run"])
        assert args.recommended is False
        assert args.export is None
        assert args.complexity == "intermediate"

    def test_sources_exclusive(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["run", "--category", "x", "--domain", "y"])

    def test_no_command(self):
        assert main([]) == 1


class TestQueriesCommand:
    def test_list_categories(self, capsys):
        assert main(["queries"]) == 0
        out = capsys.readouterr().out
        assert "threat-assessment" in out
        assert "counterfactual" in out

    def test_category_queries(self, capsys):
        assert main(["queries", "--category", "risk-assessment"]) == 0
        assert "What are the primary risks involved?" in capsys.readouterr().out

    def test_unknown_category(self):
        assert main(["queries", "--category", "nope"]) == 1


class TestCacheCommands:
    def test_stats_empty(self, capsys):
        assert main(["cache", "stats"]) == 0
        assert "Entries:  0" in capsys.readouterr().out

    def test_lookup_miss(self, capsys):
        assert main(["lookup", "Why?"]) == 1
        assert "Not cached" in capsys.readouterr().out


class TestRunCommand:
    def test_run_file_export_then_lookup(self, tmp_path, capsys, patched_orchestrator):
        source = tmp_path / "queries.txt"
        source.write_text("Why is the radar silent?\n\nWhat if we wait?\n", encoding="utf-8")

        assert main(["run", "--file", str(source), "--batch-size", "1", "--export"]) == 0
        out = capsys.readouterr().out
        assert "completed" in out
        assert "Results:   2" in out

        exports = list((tmp_path / "exports").glob("precompute_job_*.json"))
        assert len(exports) == 1
        data = json.loads(exports[0].read_text(encoding="utf-8"))
        assert data["job"]["totalQueries"] == 2

        assert main(["lookup", "why is the radar silent?"]) == 0
        assert "Confidence:" in capsys.readouterr().out

        assert main(["cache", "clear"]) == 0
        assert "Cleared 2 cached responses" in capsys.readouterr().out

    def test_run_with_failures_exits_zero_when_completed(self, capsys, llm_client, patched_orchestrator):
        from xaiprecompute.core.errors import UpstreamError

        llm_client.script["What is the main conclusion?"] = [UpstreamError("down")] * 2
        assert main([
            "run", "--domain", "general", "--complexity", "basic",
            "--count", "3", "--seed", "1", "--no-retry",
        ]) == 0

    def test_run_missing_key_fails(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "")
        assert main(["run", "--category", "counterfactual", "--no-retry"]) == 1

    def test_run_empty_selection(self):
        assert main(["run", "--category", "nope"]) == 1
