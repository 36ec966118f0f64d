from typing import List
from study_core.pattern_tracker import PatternTracker
from study_core.review_scheduler import ReviewScheduler
from study_core.schemas import Difficulty, LearningState

MIN_PATTERNS_FOR_ADAPTATION = 3
RECENT_PATTERN_WINDOW = 5
RAISE_DIFFICULTY_RATE = 0.85
LOWER_DIFFICULTY_RATE = 0.5

# Hard questions first, while the learner is fresh
DIFFICULTY_ORDER = {"hard": 0, "medium": 1, "easy": 2}


class AdaptiveOrdering:
    """Difficulty adaptation and question ordering"""

    def __init__(self, state: LearningState, scheduler: ReviewScheduler, tracker: PatternTracker):
        self.state = state
        self.scheduler = scheduler
        self.tracker = tracker

    def get_adaptive_difficulty(self, chapter_id: str) -> Difficulty:
        """
        Difficulty to serve next for a chapter.

        An explicit preference wins. Otherwise the recent success rate over the
        chapter's five most recently attempted questions decides; with fewer
        than three questions attempted the answer is medium.
        """
        if self.state.preferred_difficulty != "adaptive":
            return self.state.preferred_difficulty

        patterns = self.tracker.patterns_for_chapter(chapter_id)
        if len(patterns) < MIN_PATTERNS_FOR_ADAPTATION:
            return "medium"

        recent = sorted(patterns, key=lambda p: p.last_attempted, reverse=True)[:RECENT_PATTERN_WINDOW]
        avg_success = sum(PatternTracker.success_rate(p) for p in recent) / len(recent)

        if avg_success > RAISE_DIFFICULTY_RATE:
            return "hard"
        if avg_success < LOWER_DIFFICULTY_RATE:
            return "easy"
        return "medium"

    def get_optimal_question_order(self, question_ids: List[str]) -> List[str]:
        """
        Reorder questions: due reviews first, then hardest first, then unseen
        before seen. Ties keep their input order.
        """
        due_ids = {card.question_id for card in self.scheduler.get_due_review_cards()}
        patterns = self.tracker.patterns_by_question()

        def sort_key(question_id: str):
            pattern = patterns.get(question_id)
            difficulty = pattern.difficulty if pattern else "medium"
            return (
                0 if question_id in due_ids else 1,
                DIFFICULTY_ORDER[difficulty],
                0 if pattern is None else 1,
            )

        return sorted(question_ids, key=sort_key)
