"""Study session tracking, learning goals and review summaries"""

from datetime import timedelta
from typing import Iterable, List, Optional
from loguru import logger
from study_core.config import settings
from study_core.schemas import GoalProgress, LearningState, ReviewSummary, StudySession
from study_core.sm2 import PASSING_QUALITY
from study_core.utils import Clock, IdFactory, round_half_up, safe_ratio

FULL_FOCUS_MIN_DURATION = 5


def calculate_focus_score(questions_attempted: int, correct_answers: int, duration: int) -> int:
    """Accuracy as 0-100, halved for sessions of five minutes or less"""
    if questions_attempted <= 0:
        return 0
    weight = 1 if duration > FULL_FOCUS_MIN_DURATION else 0.5
    return min(100, round_half_up((correct_answers / questions_attempted) * 100 * weight))


def summarize_review_results(qualities: Iterable[int]) -> ReviewSummary:
    """Totals shown at the end of a review session"""
    qualities = list(qualities)
    reviewed = len(qualities)
    correct = len([q for q in qualities if q >= PASSING_QUALITY])
    return ReviewSummary(
        reviewed=reviewed,
        correct=correct,
        avg_quality=safe_ratio(sum(qualities), reviewed)
    )


class StudySessionTracker:
    """Open and close study sessions; keeps a bounded session history"""

    def __init__(self, state: LearningState, clock: Clock, id_factory: IdFactory, history_limit: Optional[int] = None):
        self.state = state
        self.clock = clock
        self.id_factory = id_factory
        self.history_limit = settings.session_history_limit if history_limit is None else history_limit

    def start_study_session(self) -> str:
        session_id = self.id_factory("session")
        self.state.active_sessions[session_id] = self.clock()
        logger.debug(f"Started study session {session_id}")
        return session_id

    def end_study_session(
        self,
        session_id: str,
        questions_attempted: int,
        correct_answers: int,
        chapters_studied: List[str]
    ) -> Optional[StudySession]:
        """
        Close a session and append it to the history.

        Args:
            session_id: Id returned by start_study_session; unknown ids are ignored
            questions_attempted: Questions answered during the session
            correct_answers: Of those, how many were right
            chapters_studied: Chapter ids touched in the session

        Returns:
            The recorded session, or None for an unknown id
        """
        started_at = self.state.active_sessions.pop(session_id, None)
        if started_at is None:
            logger.warning(f"Ignoring end of unknown study session {session_id}")
            return None

        now = self.clock()
        duration = max(0, round_half_up((now - started_at).total_seconds() / 60))

        session = StudySession(
            id=session_id,
            date=now,
            duration=duration,
            questions_attempted=questions_attempted,
            correct_answers=correct_answers,
            chapters_studied=list(chapters_studied),
            focus_score=calculate_focus_score(questions_attempted, correct_answers, duration),
            started_at=started_at
        )

        self.state.study_sessions.append(session)
        overflow = len(self.state.study_sessions) - self.history_limit
        if overflow > 0:
            del self.state.study_sessions[:overflow]

        logger.debug(f"Ended study session {session_id}: {duration} min, focus {session.focus_score}")
        return session

    def set_daily_goal(self, minutes: int):
        self.state.daily_goal_minutes = minutes

    def set_weekly_goal(self, questions: int):
        self.state.weekly_goal_questions = questions

    def get_goal_progress(self) -> GoalProgress:
        """Today's minutes and this week's questions against the learner's goals"""
        now = self.clock()
        today = now.date()
        week_start = now - timedelta(days=7)

        minutes_today = sum(s.duration for s in self.state.study_sessions if s.date.date() == today)
        questions_this_week = sum(
            s.questions_attempted for s in self.state.study_sessions if s.date > week_start
        )

        return GoalProgress(
            minutes_today=minutes_today,
            daily_goal_minutes=self.state.daily_goal_minutes,
            daily_progress=self._percent(minutes_today, self.state.daily_goal_minutes),
            questions_this_week=questions_this_week,
            weekly_goal_questions=self.state.weekly_goal_questions,
            weekly_progress=self._percent(questions_this_week, self.state.weekly_goal_questions),
            streak_days=self._streak_days(today)
        )

    def _streak_days(self, today) -> int:
        """Consecutive study days ending today, or yesterday if nothing yet today"""
        study_days = {s.date.date() for s in self.state.study_sessions}
        day = today if today in study_days else today - timedelta(days=1)

        streak = 0
        while day in study_days:
            streak += 1
            day -= timedelta(days=1)
        return streak

    @staticmethod
    def _percent(completed: float, total: float) -> int:
        return max(0, min(100, round_half_up(safe_ratio(completed, total) * 100)))
