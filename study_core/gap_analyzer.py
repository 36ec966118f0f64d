"""Knowledge gap analysis: chapter mastery and weak Bloom levels"""

from typing import Dict, List, Tuple
from loguru import logger
from study_core.pattern_tracker import PatternTracker
from study_core.schemas import ChapterSchema, KnowledgeGap, LearningState
from study_core.utils import round_half_up, safe_ratio

MASTERY_THRESHOLD = 80
WEAK_LEVEL_RATE = 0.6
SLOW_AVG_RESPONSE_MS = 90000
SLOW_PATTERN_SHARE = 0.3

BLOOM_LEVEL_NAMES = {
    1: "Remember",
    2: "Understand",
    3: "Apply",
    4: "Analyze",
    5: "Evaluate",
    6: "Create",
}

NOT_STARTED_TOPIC = "Not started"
NOT_STARTED_ACTION = "Start with the basics of this chapter"
SLOW_RESPONSE_ACTION = "Practice answering faster"
GENERAL_TOPIC = "General improvement needed"
GENERAL_ACTION = "Keep practicing regularly"


def bloom_level_name(level: int) -> str:
    return BLOOM_LEVEL_NAMES.get(level, f"Level {level}")


class KnowledgeGapAnalyzer:
    """Aggregates learning patterns per chapter into mastery levels and weak topics"""

    def __init__(self, state: LearningState, tracker: PatternTracker):
        self.state = state
        self.tracker = tracker

    def analyze_knowledge_gaps(self, chapters: List[ChapterSchema]) -> List[KnowledgeGap]:
        """
        Build the gap report for the given chapters, weakest first.

        Chapters with no attempts are reported as not started. Chapters at or
        above the mastery threshold are left out. The result replaces the
        previously held report.
        """
        gaps: List[KnowledgeGap] = []

        for chapter in chapters:
            patterns = self.tracker.patterns_for_chapter(chapter.id)

            if not patterns:
                gaps.append(KnowledgeGap(
                    chapter_id=chapter.id,
                    chapter_title=chapter.title,
                    mastery_level=0,
                    weak_topics=[NOT_STARTED_TOPIC],
                    recommended_actions=[NOT_STARTED_ACTION]
                ))
                continue

            total_attempts = sum(p.attempts for p in patterns)
            total_correct = sum(p.correct_attempts for p in patterns)
            mastery_level = round_half_up(safe_ratio(total_correct, total_attempts) * 100)

            weak_topics: List[str] = []
            recommended_actions: List[str] = []

            # Analyze by Bloom level
            bloom_performance: Dict[int, Tuple[int, int]] = {}
            for p in patterns:
                correct, total = bloom_performance.get(p.bloom_level, (0, 0))
                bloom_performance[p.bloom_level] = (correct + p.correct_attempts, total + p.attempts)

            for level, (correct, total) in bloom_performance.items():
                rate = safe_ratio(correct, total)
                if rate < WEAK_LEVEL_RATE:
                    level_name = bloom_level_name(level)
                    weak_topics.append(f"{level_name} ({round_half_up(rate * 100)}%)")
                    recommended_actions.append(f"Practice more {level_name.lower()} questions")

            slow_patterns = [p for p in patterns if p.avg_response_time > SLOW_AVG_RESPONSE_MS]
            if len(slow_patterns) > len(patterns) * SLOW_PATTERN_SHARE:
                recommended_actions.append(SLOW_RESPONSE_ACTION)

            if mastery_level < MASTERY_THRESHOLD:
                gaps.append(KnowledgeGap(
                    chapter_id=chapter.id,
                    chapter_title=chapter.title,
                    mastery_level=mastery_level,
                    weak_topics=weak_topics or [GENERAL_TOPIC],
                    recommended_actions=recommended_actions or [GENERAL_ACTION]
                ))

        gaps.sort(key=lambda gap: gap.mastery_level)
        self.state.knowledge_gaps = gaps

        logger.info(f"Knowledge gap analysis: {len(gaps)} of {len(chapters)} chapters below mastery")
        return [gap.model_copy(deep=True) for gap in gaps]
