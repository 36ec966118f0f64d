"""
LearningService: the stateful entry point hosts talk to.

Holds one learner's LearningState together with the clock and ID factory,
and exposes the review, tracking, analysis and planning operations. Hosts
persist the state through load() / snapshot().
"""

from typing import Iterable, List, Optional, Union
from study_core.adaptive import AdaptiveOrdering
from study_core.gap_analyzer import KnowledgeGapAnalyzer
from study_core.pattern_tracker import PatternTracker
from study_core.planner import DailyPlanGenerator
from study_core.review_scheduler import ReviewScheduler
from study_core.schemas import (
    ChapterSchema,
    DailyStudyPlan,
    Difficulty,
    GoalProgress,
    KnowledgeGap,
    LearningPattern,
    LearningState,
    PreferredDifficulty,
    QuestionAttempt,
    ReviewCard,
    ReviewSummary,
    StudySession,
)
from study_core.sessions import StudySessionTracker, summarize_review_results
from study_core.utils import Clock, IdFactory, make_id, utc_now

ChapterLike = Union[ChapterSchema, dict]


def _as_chapters(chapters: Iterable[ChapterLike]) -> List[ChapterSchema]:
    return [c if isinstance(c, ChapterSchema) else ChapterSchema.model_validate(c) for c in chapters]


class LearningService:

    def __init__(
        self,
        state: Optional[LearningState] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None
    ):
        self.clock = clock or utc_now
        self.id_factory = id_factory or make_id
        self.load(state or LearningState())

    def load(self, state: LearningState):
        """Replace the held state (deep copy) and rebind the components to it"""
        self.state = state.model_copy(deep=True)
        self.scheduler = ReviewScheduler(self.state, self.clock, self.id_factory)
        self.tracker = PatternTracker(self.state, self.clock)
        self.gap_analyzer = KnowledgeGapAnalyzer(self.state, self.tracker)
        self.planner = DailyPlanGenerator(self.state, self.clock, self.scheduler, self.tracker)
        self.ordering = AdaptiveOrdering(self.state, self.scheduler, self.tracker)
        self.sessions = StudySessionTracker(self.state, self.clock, self.id_factory)

    def snapshot(self) -> LearningState:
        """Deep copy of the current state, ready to persist"""
        return self.state.model_copy(deep=True)

    # Review scheduler

    def add_review_card(self, question_id: str, chapter_id: str) -> ReviewCard:
        return self.scheduler.add_review_card(question_id, chapter_id)

    def update_review_card(self, card_id: str, quality: int) -> Optional[ReviewCard]:
        return self.scheduler.update_review_card(card_id, quality)

    def get_due_review_cards(self) -> List[ReviewCard]:
        return self.scheduler.get_due_review_cards()

    # Learning patterns

    def record_question_attempt(self, attempt: Union[QuestionAttempt, dict]) -> LearningPattern:
        if not isinstance(attempt, QuestionAttempt):
            attempt = QuestionAttempt.model_validate(attempt)
        return self.tracker.record_question_attempt(
            attempt.question_id,
            attempt.chapter_id,
            attempt.correct,
            attempt.response_time,
            attempt.bloom_level
        )

    # Analysis and planning

    def analyze_knowledge_gaps(self, chapters: Iterable[ChapterLike]) -> List[KnowledgeGap]:
        return self.gap_analyzer.analyze_knowledge_gaps(_as_chapters(chapters))

    def generate_daily_plan(self, chapters: Iterable[ChapterLike]) -> DailyStudyPlan:
        return self.planner.generate_daily_plan(_as_chapters(chapters))

    def get_adaptive_difficulty(self, chapter_id: str) -> Difficulty:
        return self.ordering.get_adaptive_difficulty(chapter_id)

    def get_optimal_question_order(self, question_ids: Iterable[str]) -> List[str]:
        return self.ordering.get_optimal_question_order(list(question_ids))

    # Sessions and goals

    def start_study_session(self) -> str:
        return self.sessions.start_study_session()

    def end_study_session(
        self,
        session_id: str,
        questions_attempted: int,
        correct_answers: int,
        chapters_studied: Iterable[str]
    ) -> Optional[StudySession]:
        return self.sessions.end_study_session(
            session_id, questions_attempted, correct_answers, list(chapters_studied)
        )

    def set_daily_goal(self, minutes: int):
        self.sessions.set_daily_goal(minutes)

    def set_weekly_goal(self, questions: int):
        self.sessions.set_weekly_goal(questions)

    def set_preferred_difficulty(self, difficulty: PreferredDifficulty):
        self.state.preferred_difficulty = difficulty

    def get_goal_progress(self) -> GoalProgress:
        return self.sessions.get_goal_progress()

    @staticmethod
    def summarize_review_results(qualities: Iterable[int]) -> ReviewSummary:
        return summarize_review_results(qualities)

    @property
    def current_plan(self) -> Optional[DailyStudyPlan]:
        return self.state.current_plan

    @property
    def knowledge_gaps(self) -> List[KnowledgeGap]:
        return self.state.knowledge_gaps
