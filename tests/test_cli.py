"""Test cli — OpenALaw command-line entry point."""
from __future__ import annotations

import json
import logging

import pytest

from openalaw.cli import EXAMPLE_TASK, main

LOGGER_NAMES = ("openalaw.core", "openalaw.bridge", "openalaw.orchestrator", "openalaw.routing")


@pytest.fixture(autouse=True)
def restore_logger_levels():
    """main() sets levels on the package loggers; put them back after each test."""
    saved = {name: logging.getLogger(name).level for name in LOGGER_NAMES}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestCli:
    def test_default_run_processes_example_task(self, capsys):
        main([])
        out = capsys.readouterr().out
        assert f"Processing task: {EXAMPLE_TASK}" in out
        assert "[REMOTE] Processed: Analyze this input..." in out
        assert "OpenALaw system ready for tasks!" in out

    def test_custom_task(self, capsys):
        main(["Debug this python function"])
        out = capsys.readouterr().out
        assert "Result: [LOCAL] Processed: Debug this python function..." in out

    def test_combined_result_printed_as_json(self, capsys):
        main(["click 100 200"])
        out = capsys.readouterr().out
        assert '"combined": true' in out
        assert '"x": 100' in out

    def test_status_json(self, capsys):
        main(["Summarize this text", "--status-json"])
        out = capsys.readouterr().out
        start = out.index("{")
        end = out.rindex("}") + 1
        status = json.loads(out[start:end])
        assert status["state"] == "initialized"
        assert status["bridge"]["initialized"] is True

    def test_verbose_sets_debug(self, capsys):
        main(["-v", "Summarize this text"])
        assert logging.getLogger("openalaw.routing").level == logging.DEBUG
        main(["Summarize this text"])
        assert logging.getLogger("openalaw.routing").level == logging.INFO

    def test_unknown_flag_exits(self):
        with pytest.raises(SystemExit):
            main(["--nope"])
