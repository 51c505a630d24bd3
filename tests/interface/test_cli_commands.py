"""Tests for CLI commands: help, review, answer, rate, levels, config."""

import json
import logging

import pytest
from typer.testing import CliRunner

from lexis.interface.cli import app

runner = CliRunner()


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "spaced-repetition scheduling" in result.stdout
    for command in ("review", "answer", "rate", "replay", "levels", "config"):
        assert command in result.stdout


# --- Review ---


def test_review_json_first_perfect_answer():
    result = runner.invoke(app, ["review", "5", "--now", "2024-01-01", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["state"]["repetitions"] == 1
    assert data["state"]["interval"] == 1
    assert data["state"]["ease_factor"] == 2.6
    assert data["next_review"] == "2024-01-02T00:00:00+00:00"
    assert data["mastery_level"] == "Learning"
    assert data["mastery_changed"] is True


def test_review_text_output():
    result = runner.invoke(
        app,
        ["review", "4", "--repetitions", "2", "--interval", "6", "--now", "2024-01-01"],
    )
    assert result.exit_code == 0
    assert "reps=3 ease=2.50 interval=15d level=Mature next=2024-01-16" in result.stdout
    assert "(up from Young)" in result.stdout


@pytest.mark.parametrize(
    "args,message",
    [
        (["review", "7"], "quality must be in"),
        (["review", "3", "--interval", "-2"], "interval must be non-negative"),
        (["review", "3", "--level", "9"], "Error"),
    ],
)
def test_review_errors(args, message):
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert message in result.output


def test_review_rejects_bad_timestamp():
    result = runner.invoke(app, ["review", "3", "--now", "yesterday"])
    assert result.exit_code != 0


# --- Answer ---


def test_answer_single_miss_keeps_level():
    result = runner.invoke(
        app,
        ["answer", "--incorrect", "--level", "3", "--repetitions", "4", "--now", "2024-01-01", "--json"],
    )
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["mastery_level"] == "Mature"
    assert data["state"]["repetitions"] == 0
    assert data["state"]["interval"] == 53
    assert data["state"]["recent_outcomes"] == ["incorrect"]


def test_answer_correct_text():
    result = runner.invoke(app, ["answer", "--correct", "--now", "2024-01-01"])
    assert result.exit_code == 0
    assert "level=Learning" in result.stdout
    assert "next=2024-01-04" in result.stdout


# --- Rate ---


def test_rate_text():
    result = runner.invoke(app, ["rate", "2", "--now", "2024-06-01"])
    assert result.exit_code == 0
    assert "Next review in 3 days: 2024-06-04" in result.stdout


def test_rate_json_echoes_item():
    result = runner.invoke(app, ["rate", "1", "--item-id", "w:via", "--now", "2024-06-01", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {
        "item_id": "w:via",
        "rating": 1,
        "days_until_review": 1,
        "next_review": "2024-06-02T00:00:00+00:00",
    }


def test_rate_out_of_range():
    result = runner.invoke(app, ["rate", "4"])
    assert result.exit_code == 1
    assert "rating must be in [1, 3]" in result.output


# --- Levels / Config ---


def test_levels_table():
    result = runner.invoke(app, ["levels"])
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert len(lines) == 6
    assert lines[0].startswith("0 New")
    assert "reps>=8" in lines[-1]
    assert "interval=450d" in lines[-1]


def test_levels_follow_config(monkeypatch):
    monkeypatch.setenv("LEXIS_MASTERY_THRESHOLDS", "[2, 4, 6, 8, 12]")
    result = runner.invoke(app, ["levels"])
    assert result.exit_code == 0
    assert "reps>=12" in result.stdout


def test_config_show():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["mastery_thresholds"] == [1, 2, 3, 5, 8]
    assert data["reactivation_days"] == 90


# --- Verbosity ---


@pytest.fixture
def lexis_logger():
    log = logging.getLogger("lexis")
    yield log
    log.setLevel(logging.NOTSET)


@pytest.mark.parametrize(
    "env,args,level",
    [
        (None, [], logging.INFO),
        (None, ["-v"], logging.DEBUG),
        ("0", [], logging.WARNING),
        ("0", ["-v"], logging.INFO),
        ("0", ["-vv"], logging.DEBUG),
    ],
    ids=["default", "one_flag", "quiet_config", "quiet_config_one_flag", "quiet_config_two_flags"],
)
def test_verbosity_combines_config_and_flags(monkeypatch, lexis_logger, env, args, level):
    if env is not None:
        monkeypatch.setenv("LEXIS_VERBOSE", env)
    result = runner.invoke(app, [*args, "levels"])
    assert result.exit_code == 0
    assert lexis_logger.level == level
