"""
Smoke tests for the CLI commands.

Each test runs against a fresh in-memory database patched into the CLI.
"""

import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_db(monkeypatch, session_factory):
    monkeypatch.setattr(cli, "SessionLocal", session_factory)
    yield session_factory
    # the CLI callback points loguru at the runner's captured stderr
    logger.remove()
    logger.add(sys.stderr)


def invoke(*args, **kwargs):
    return runner.invoke(cli.app, [str(a) for a in args], **kwargs)


@pytest.fixture
def learner_id():
    result = invoke("create-learner", "--name", "Ada")
    assert result.exit_code == 0
    return 1


def test_create_and_view_learner():
    result = invoke("create-learner", "--name", "Ada", "--daily-goal", "40")

    assert result.exit_code == 0
    assert "Learner ID: 1" in result.output

    result = invoke("view-learner", "1")
    assert result.exit_code == 0
    assert "Ada" in result.output
    assert "40 minutes" in result.output


def test_unknown_learner_exits_with_error():
    result = invoke("due", "42")

    assert result.exit_code == 1
    assert "not found" in result.output


def test_card_review_cycle(learner_id):
    result = invoke("add-card", "--learner-id", learner_id, "--question-id", "q1", "--chapter-id", "ch-1")
    assert result.exit_code == 0
    card_id = result.output.split("Review card created: ")[1].split()[0]

    result = invoke("due", learner_id)
    assert result.exit_code == 0
    assert "q1" in result.output

    result = invoke("review", "--learner-id", learner_id, "--card-id", card_id, "--quality", "5")
    assert result.exit_code == 0
    assert "Review recorded" in result.output
    assert "in 1 days" in result.output

    result = invoke("due", learner_id)
    assert "Nothing due for review" in result.output


def test_review_rejects_bad_quality(learner_id):
    result = invoke("review", "--learner-id", learner_id, "--card-id", "review_x", "--quality", "7")

    assert result.exit_code == 1
    assert "Invalid rating" in result.output


def test_review_unknown_card(learner_id):
    result = invoke("review", "--learner-id", learner_id, "--card-id", "review_x", "--quality", "4")

    assert result.exit_code == 0
    assert "No review card" in result.output


def test_record_attempt_and_difficulty(learner_id):
    for question_id in ["q1", "q2", "q3"]:
        result = invoke(
            "record-attempt", "--learner-id", learner_id, "--question-id", question_id,
            "--chapter-id", "ch-1", "--correct", "--response-time", "8000"
        )
        assert result.exit_code == 0

    result = invoke("difficulty", learner_id, "ch-1")
    assert result.exit_code == 0
    assert "hard" in result.output


def test_record_attempt_rejects_bad_bloom_level(learner_id):
    result = invoke(
        "record-attempt", "--learner-id", learner_id, "--question-id", "q1",
        "--chapter-id", "ch-1", "--incorrect", "--response-time", "8000", "--bloom-level", "9"
    )

    assert result.exit_code == 1
    assert "Invalid attempt" in result.output


def test_import_chapters_and_plan(learner_id, tmp_path):
    catalog = tmp_path / "chapters.csv"
    catalog.write_text("id,title\nch-1,Sorting\nch-2,Graphs\n")

    result = invoke("import-chapters", "--file-path", str(catalog))
    assert result.exit_code == 0
    assert "2 new" in result.output

    result = invoke("list-chapters")
    assert "ch-1" in result.output and "ch-2" in result.output

    result = invoke("plan", learner_id)
    assert result.exit_code == 0
    assert "Daily Study Plan Generated" in result.output
    assert "Sorting" in result.output

    result = invoke("view-plan", learner_id)
    assert result.exit_code == 0
    assert "Latest Daily Plan" in result.output


def test_import_rejects_unknown_format(tmp_path):
    catalog = tmp_path / "chapters.txt"
    catalog.write_text("id,title\n")

    result = invoke("import-chapters", "--file-path", str(catalog))

    assert result.exit_code == 1
    assert "Unsupported file format" in result.output


def test_sessions_and_progress(learner_id):
    result = invoke("start-session", learner_id)
    assert result.exit_code == 0
    session_id = result.output.split("Session started: ")[1].split()[0]

    result = invoke(
        "end-session", "--learner-id", learner_id, "--session-id", session_id,
        "--attempted", "4", "--correct", "3", "--chapters", "ch-1"
    )
    assert result.exit_code == 0
    assert "Session recorded" in result.output

    result = invoke("progress", learner_id)
    assert result.exit_code == 0
    assert "4/50 questions" in result.output


def test_gaps_and_order(learner_id, tmp_path):
    catalog = tmp_path / "chapters.json"
    catalog.write_text('[{"id": "ch-1", "title": "Sorting"}]')
    invoke("import-chapters", "--file-path", str(catalog))

    result = invoke("gaps", learner_id)
    assert result.exit_code == 0
    assert "Not started" in result.output

    result = invoke("order", learner_id, "q1", "q2")
    assert result.exit_code == 0
    assert "1. q1" in result.output


def test_set_goals(learner_id):
    result = invoke("set-goals", "--learner-id", learner_id, "--weekly-goal", "80", "--difficulty", "easy")
    assert result.exit_code == 0
    assert "Goals updated" in result.output

    result = invoke("view-learner", learner_id)
    assert "80 questions" in result.output
    assert "easy" in result.output


@pytest.mark.parametrize("option,value", [
    ("--daily-goal", "-30"),
    ("--daily-goal", "0"),
    ("--weekly-goal", "0"),
    ("--difficulty", "expert"),
])
def test_set_goals_rejects_invalid_values(learner_id, option, value):
    result = invoke("set-goals", "--learner-id", learner_id, option, value)

    assert result.exit_code == 1
    assert "Invalid goals" in result.output
    assert "Goals updated" not in result.output

    result = invoke("view-learner", learner_id)
    assert "Daily goal: 30 minutes" in result.output
    assert "Weekly goal: 50 questions" in result.output
    assert "adaptive" in result.output


def test_set_goals_without_changes(learner_id):
    result = invoke("set-goals", "--learner-id", learner_id)

    assert result.exit_code == 0
    assert "Nothing to update" in result.output


def test_create_learner_rejects_zero_goal():
    result = invoke("create-learner", "--name", "Ada", "--daily-goal", "0")

    assert result.exit_code == 1
    assert "Invalid profile" in result.output


@pytest.mark.parametrize("attempted,correct", [("-5", "0"), ("3", "-1"), ("2", "4")])
def test_end_session_rejects_invalid_summary(learner_id, attempted, correct):
    result = invoke("start-session", learner_id)
    session_id = result.output.split("Session started: ")[1].split()[0]

    result = invoke(
        "end-session", "--learner-id", learner_id, "--session-id", session_id,
        "--attempted", attempted, "--correct", correct
    )
    assert result.exit_code == 1
    assert "Invalid session summary" in result.output

    # the session stays open and can still be closed properly
    result = invoke("end-session", "--learner-id", learner_id, "--session-id", session_id, "--attempted", "2")
    assert result.exit_code == 0
    assert "Session recorded" in result.output

    result = invoke("progress", learner_id)
    assert "2/50 questions (4%)" in result.output
