"""Unit tests for learning pattern tracking."""

import pytest
from pydantic import ValidationError

from conftest import answer
from study_core.pattern_tracker import derive_difficulty


class TestRecordQuestionAttempt:

    def test_first_correct_attempt_is_medium(self, service, clock):
        pattern = answer(service, "q-1", "ch-1", True, response_time=12000, bloom_level=3)

        assert pattern.attempts == 1
        assert pattern.correct_attempts == 1
        assert pattern.avg_response_time == 12000
        assert pattern.last_attempted == clock.now
        assert pattern.difficulty == "medium"
        assert pattern.bloom_level == 3

    def test_first_incorrect_attempt_is_hard(self, service):
        pattern = answer(service, "q-1", "ch-1", False)

        assert pattern.correct_attempts == 0
        assert pattern.difficulty == "hard"

    def test_response_time_is_running_average(self, service):
        answer(service, "q-1", "ch-1", True, response_time=10000)
        pattern = answer(service, "q-1", "ch-1", True, response_time=30000)

        assert pattern.attempts == 2
        assert pattern.avg_response_time == pytest.approx(20000)

    def test_one_pattern_per_question(self, service):
        answer(service, "q-1", "ch-1", True, times=3)
        answer(service, "q-2", "ch-1", False)

        assert [p.question_id for p in service.state.learning_patterns] == ["q-1", "q-2"]

    def test_chapter_kept_from_first_attempt(self, service):
        answer(service, "q-1", "ch-1", True)
        pattern = answer(service, "q-1", "ch-2", True)

        assert pattern.chapter_id == "ch-1"

    def test_last_attempted_follows_clock(self, service, clock):
        answer(service, "q-1", "ch-1", True)
        clock.advance(minutes=5)
        pattern = answer(service, "q-1", "ch-1", True)

        assert pattern.last_attempted == clock.now

    def test_invalid_attempt_is_rejected(self, service):
        with pytest.raises(ValidationError):
            answer(service, "q-1", "ch-1", True, bloom_level=9)
        with pytest.raises(ValidationError):
            answer(service, "q-1", "ch-1", True, response_time=-1)

        assert service.state.learning_patterns == []


class TestDifficulty:
    """Difficulty uses the running success rate and the latest response time."""

    def test_fast_and_accurate_becomes_easy(self, service):
        answer(service, "q-1", "ch-1", True)
        pattern = answer(service, "q-1", "ch-1", True, response_time=10000)

        assert pattern.difficulty == "easy"

    def test_slow_latest_answer_becomes_hard(self, service):
        answer(service, "q-1", "ch-1", True, times=3)
        pattern = answer(service, "q-1", "ch-1", True, response_time=200000)

        assert pattern.difficulty == "hard"

    def test_moderate_latest_answer_becomes_medium(self, service):
        answer(service, "q-1", "ch-1", True, times=3)
        pattern = answer(service, "q-1", "ch-1", True, response_time=60000)

        assert pattern.difficulty == "medium"

    def test_low_success_rate_becomes_hard(self, service):
        answer(service, "q-1", "ch-1", True)
        answer(service, "q-1", "ch-1", False)
        pattern = answer(service, "q-1", "ch-1", False, response_time=5000)

        assert pattern.difficulty == "hard"

    @pytest.mark.parametrize("rate,response_time,expected", [
        (0.9, 29999, "easy"),
        (0.8, 10000, "medium"),
        (0.9, 30000, "medium"),
        (0.5, 50000, "medium"),
        (0.49, 10000, "hard"),
        (1.0, 120001, "hard"),
    ])
    def test_thresholds(self, rate, response_time, expected):
        assert derive_difficulty(rate, response_time) == expected


class TestChapterPerformance:

    def test_totals_per_chapter_in_first_seen_order(self, service):
        answer(service, "q-1", "ch-2", True, times=2)
        answer(service, "q-2", "ch-1", False, times=3)
        answer(service, "q-3", "ch-2", False)

        performance = service.tracker.chapter_performance()

        assert list(performance) == ["ch-2", "ch-1"]
        assert performance["ch-2"] == (2, 3)
        assert performance["ch-1"] == (0, 3)
