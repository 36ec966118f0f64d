from study_core.models.learner import Learner
from study_core.models.chapter import Chapter
from study_core.models.review_card import ReviewCardRecord
from study_core.models.learning_pattern import LearningPatternRecord
from study_core.models.study_session import StudySessionRecord
from study_core.models.daily_plan import DailyPlanRecord
from study_core.models.knowledge_gap import KnowledgeGapRecord

__all__ = [
    "Learner",
    "Chapter",
    "ReviewCardRecord",
    "LearningPatternRecord",
    "StudySessionRecord",
    "DailyPlanRecord",
    "KnowledgeGapRecord"
]
