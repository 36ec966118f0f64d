import math
from typing import List, Optional
from loguru import logger
from study_core.config import settings
from study_core.pattern_tracker import PatternTracker
from study_core.review_scheduler import ReviewScheduler
from study_core.schemas import (
    ChapterSchema,
    DailyStudyPlan,
    LearningState,
    ReviewCard,
    StudyRecommendation,
)
from study_core.utils import Clock, round_half_up, safe_ratio

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

MINUTES_PER_REVIEW_CARD = 1.5
WEAKNESS_MINUTES = 15
NEW_CONTENT_MINUTES = 20
STRENGTH_MINUTES = 10

WEAK_RATE = 0.6
WEAK_MIN_ATTEMPTS = 3
STRONG_RATE = 0.8
STRONG_MIN_ATTEMPTS = 5
MAX_RECOMMENDATIONS_FOR_STRENGTH = 4


class DailyPlanGenerator:
    """
    Builds the daily study plan from due cards, chapter performance and
    the chapter catalog.
    """

    def __init__(
        self,
        state: LearningState,
        clock: Clock,
        scheduler: ReviewScheduler,
        tracker: PatternTracker,
        review_card_limit: Optional[int] = None
    ):
        self.state = state
        self.clock = clock
        self.scheduler = scheduler
        self.tracker = tracker
        self.review_card_limit = (
            settings.plan_review_card_limit if review_card_limit is None else review_card_limit
        )

    def generate_daily_plan(self, chapters: List[ChapterSchema]) -> DailyStudyPlan:
        """
        Generate today's plan and cache it as the current plan.

        Recommendations are built in a fixed order (review, weaknesses,
        new content, strength) and then stably sorted by priority.

        Args:
            chapters: Chapter catalog in display order

        Returns:
            The new DailyStudyPlan
        """
        titles = {chapter.id: chapter.title for chapter in chapters}
        recommendations: List[StudyRecommendation] = []

        # 1. Due review cards
        due_cards = self.scheduler.get_due_review_cards()
        if due_cards:
            recommendations.append(self._review_recommendation(due_cards))

        # 2. Weak and strong chapters
        weak_chapters: List[str] = []
        strong_chapters: List[str] = []

        for chapter_id, (correct, total) in self.tracker.chapter_performance().items():
            rate = safe_ratio(correct, total)
            if rate < WEAK_RATE and total >= WEAK_MIN_ATTEMPTS:
                weak_chapters.append(chapter_id)
                if chapter_id in titles:
                    recommendations.append(StudyRecommendation(
                        type="weakness",
                        priority="high",
                        chapter_id=chapter_id,
                        chapter_title=titles[chapter_id],
                        reason=f"Your accuracy is {round_half_up(rate * 100)}% - needs improvement",
                        estimated_time=WEAKNESS_MINUTES
                    ))
            elif rate >= STRONG_RATE and total >= STRONG_MIN_ATTEMPTS:
                strong_chapters.append(chapter_id)

        # 3. New content: first catalog chapter with no attempts
        studied = {p.chapter_id for p in self.state.learning_patterns}
        new_chapters = [chapter for chapter in chapters if chapter.id not in studied]
        if new_chapters:
            next_chapter = new_chapters[0]
            recommendations.append(StudyRecommendation(
                type="new_content",
                priority="medium",
                chapter_id=next_chapter.id,
                chapter_title=next_chapter.title,
                reason="New chapter to explore",
                estimated_time=NEW_CONTENT_MINUTES
            ))

        # 4. Reinforce strengths when the plan is light
        if strong_chapters and len(recommendations) < MAX_RECOMMENDATIONS_FOR_STRENGTH:
            strong_chapter = next((c for c in chapters if c.id in strong_chapters), None)
            if strong_chapter:
                recommendations.append(StudyRecommendation(
                    type="strength",
                    priority="low",
                    chapter_id=strong_chapter.id,
                    chapter_title=strong_chapter.title,
                    reason="Keep your strong areas active",
                    estimated_time=STRENGTH_MINUTES
                ))

        recommendations.sort(key=lambda r: PRIORITY_ORDER[r.priority])

        plan = DailyStudyPlan(
            date=self.clock(),
            total_estimated_time=sum(r.estimated_time for r in recommendations),
            recommendations=recommendations,
            review_cards=[card.model_copy(deep=True) for card in due_cards],
            weak_areas=weak_chapters,
            strong_areas=strong_chapters
        )
        self.state.current_plan = plan

        logger.info(
            f"Daily plan: {len(recommendations)} recommendations, "
            f"{plan.total_estimated_time} min, {len(due_cards)} cards due"
        )
        return plan.model_copy(deep=True)

    def _review_recommendation(self, due_cards: List[ReviewCard]) -> StudyRecommendation:
        """Review block covering the earliest due cards"""
        batch = due_cards[:self.review_card_limit]
        return StudyRecommendation(
            type="review",
            priority="high",
            question_ids=[card.question_id for card in batch],
            reason=f"You have {len(due_cards)} cards due for review",
            estimated_time=math.ceil(len(batch) * MINUTES_PER_REVIEW_CARD)
        )
