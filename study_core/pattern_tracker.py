from typing import Dict, List, Optional, Tuple
from loguru import logger
from study_core.schemas import Difficulty, LearningPattern, LearningState
from study_core.utils import Clock, safe_ratio

EASY_SUCCESS_RATE = 0.8
HARD_SUCCESS_RATE = 0.5
FAST_RESPONSE_MS = 30000
SLOW_RESPONSE_MS = 120000


def derive_difficulty(success_rate: float, response_time: float) -> Difficulty:
    """Difficulty from the running success rate and the latest response time"""
    if success_rate > EASY_SUCCESS_RATE and response_time < FAST_RESPONSE_MS:
        return "easy"
    if success_rate < HARD_SUCCESS_RATE or response_time > SLOW_RESPONSE_MS:
        return "hard"
    return "medium"


class PatternTracker:
    """Per-question attempt statistics used to infer difficulty and mastery"""

    def __init__(self, state: LearningState, clock: Clock):
        self.state = state
        self.clock = clock

    def record_question_attempt(
        self,
        question_id: str,
        chapter_id: str,
        correct: bool,
        response_time: float,
        bloom_level: int
    ) -> LearningPattern:
        """
        Fold one answered question into its learning pattern.

        Args:
            question_id: Question that was answered
            chapter_id: Chapter the question belongs to (used on first attempt only)
            correct: Whether the answer was right
            response_time: Time to answer in milliseconds
            bloom_level: Cognitive level of the question, 1-6

        Returns:
            The created or updated pattern
        """
        now = self.clock()
        pattern = self.get_pattern(question_id)

        if pattern is None:
            pattern = LearningPattern(
                question_id=question_id,
                chapter_id=chapter_id,
                attempts=1,
                correct_attempts=1 if correct else 0,
                avg_response_time=response_time,
                last_attempted=now,
                difficulty="medium" if correct else "hard",
                bloom_level=bloom_level
            )
            self.state.learning_patterns.append(pattern)
            logger.debug(f"New learning pattern for question {question_id} ({pattern.difficulty})")
            return pattern

        old_attempts = pattern.attempts
        new_attempts = old_attempts + 1
        new_correct = pattern.correct_attempts + (1 if correct else 0)

        pattern.avg_response_time = (pattern.avg_response_time * old_attempts + response_time) / new_attempts
        pattern.attempts = new_attempts
        pattern.correct_attempts = new_correct
        pattern.last_attempted = now
        pattern.difficulty = derive_difficulty(new_correct / new_attempts, response_time)

        logger.debug(
            f"Question {question_id}: {new_correct}/{new_attempts} correct, "
            f"difficulty={pattern.difficulty}"
        )
        return pattern

    def get_pattern(self, question_id: str) -> Optional[LearningPattern]:
        for pattern in self.state.learning_patterns:
            if pattern.question_id == question_id:
                return pattern
        return None

    def patterns_by_question(self) -> Dict[str, LearningPattern]:
        return {p.question_id: p for p in self.state.learning_patterns}

    def patterns_for_chapter(self, chapter_id: str) -> List[LearningPattern]:
        return [p for p in self.state.learning_patterns if p.chapter_id == chapter_id]

    def chapter_performance(self) -> Dict[str, Tuple[int, int]]:
        """(correct, total) per chapter, in order of first appearance"""
        performance: Dict[str, Tuple[int, int]] = {}
        for p in self.state.learning_patterns:
            correct, total = performance.get(p.chapter_id, (0, 0))
            performance[p.chapter_id] = (correct + p.correct_attempts, total + p.attempts)
        return performance

    @staticmethod
    def success_rate(pattern: LearningPattern) -> float:
        return safe_ratio(pattern.correct_attempts, pattern.attempts)
