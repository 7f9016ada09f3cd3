"""Tests for the prismbus command line entry point."""

import logging
from unittest.mock import patch

import pytest

from prismbus.app import load_script, main
from prismbus.lib.script_runner import DEMO_SCRIPT


@pytest.fixture
def cli_env(tmp_path):
    """Common arguments keeping config and logs inside tmp_path."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield [
        "--config-file-path",
        str(tmp_path / "config.ini"),
        "--log-dir",
        str(tmp_path / "logs"),
    ]
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_load_script_defaults_to_demo():
    assert load_script(None) == DEMO_SCRIPT.splitlines()


def test_load_script_reads_file(tmp_path):
    script = tmp_path / "scenario.txt"
    script.write_text("register panel\npost talk\n", encoding="utf-8")

    assert load_script(str(script)) == ["register panel", "post talk"]


def test_main_runs_demo(cli_env, capsys):
    assert main(cli_env) == 0

    out = capsys.readouterr().out
    assert "toolbar <- talk 'hello'" in out
    assert "sidebar <- run 'later'" in out


def test_main_runs_script(cli_env, tmp_path, capsys):
    script = tmp_path / "scenario.txt"
    script.write_text("post_delayed ready bus=dialogs\nregister dialog types=ready bus=dialogs\n")

    assert main([str(script), *cli_env]) == 0
    assert capsys.readouterr().out.strip() == "dialog <- ready None"


def test_main_missing_script(cli_env, tmp_path):
    assert main([str(tmp_path / "missing.txt"), *cli_env]) == 1


def test_main_invalid_script(cli_env, tmp_path):
    script = tmp_path / "bad.txt"
    script.write_text("shout talk\n")

    assert main([str(script), *cli_env]) == 1


def test_main_applies_overrides(cli_env):
    with patch("prismbus.app.ScriptRunner") as runner_cls:
        runner_cls.return_value.deliveries = []
        main([*cli_env, "-n", "panels", "--no-thread-safe", "-l", "debug"])

    directory = runner_cls.call_args.args[0]
    assert directory.default_name == "panels"
    assert directory.thread_safe is False
