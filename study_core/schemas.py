from pydantic import BaseModel, Field, model_validator
from typing import Dict, List, Literal, Optional
from datetime import datetime

Difficulty = Literal["easy", "medium", "hard"]
PreferredDifficulty = Literal["easy", "medium", "hard", "adaptive"]
RecommendationType = Literal["review", "new_content", "weakness", "strength"]
Priority = Literal["high", "medium", "low"]


# ===================================================================
# BOUNDARY SCHEMAS (host -> engine)
# ===================================================================

class LearnerCreate(BaseModel):
    """Schema for creating a learner profile"""
    name: str
    daily_goal_minutes: int = Field(default=30, ge=1)
    weekly_goal_questions: int = Field(default=50, ge=1)
    preferred_difficulty: PreferredDifficulty = "adaptive"

class LearnerUpdate(BaseModel):
    """Partial profile update; fields left as None are not changed"""
    daily_goal_minutes: Optional[int] = Field(default=None, ge=1)
    weekly_goal_questions: Optional[int] = Field(default=None, ge=1)
    preferred_difficulty: Optional[PreferredDifficulty] = None

class ChapterSchema(BaseModel):
    """Chapter catalog entry supplied by the content subsystem"""
    id: str
    title: str

    class Config:
        from_attributes = True

class QuestionAttempt(BaseModel):
    """One answered question, as emitted by the quiz"""
    question_id: str
    chapter_id: str
    correct: bool
    response_time: float = Field(ge=0, description="Milliseconds")
    bloom_level: int = Field(ge=1, le=6)

class ReviewRating(BaseModel):
    """Quality rating for a reviewed card (0-2 failed, 3-5 passed)"""
    card_id: str
    quality: int = Field(ge=0, le=5)

class SessionEnd(BaseModel):
    """Summary sent when a study session finishes"""
    session_id: str
    questions_attempted: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    chapters_studied: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_correct_answers(self):
        if self.correct_answers > self.questions_attempted:
            raise ValueError("correct_answers cannot exceed questions_attempted")
        return self


# ===================================================================
# ENGINE RECORDS
# ===================================================================

class ReviewCard(BaseModel):
    """SM-2 review card, one per question"""
    id: str
    question_id: str
    chapter_id: str
    ease_factor: float = 2.5
    interval: int = 0
    repetitions: int = 0
    next_review_date: datetime
    last_review_date: Optional[datetime] = None
    last_quality: Optional[int] = None

class LearningPattern(BaseModel):
    """Attempt statistics for a single question"""
    question_id: str
    chapter_id: str
    attempts: int = 0
    correct_attempts: int = 0
    avg_response_time: float = 0.0
    last_attempted: datetime
    difficulty: Difficulty = "medium"
    bloom_level: int = 1

class StudySession(BaseModel):
    """A completed study session"""
    id: str
    date: datetime
    duration: int
    questions_attempted: int
    correct_answers: int
    chapters_studied: List[str] = Field(default_factory=list)
    focus_score: int
    started_at: Optional[datetime] = None

class StudyRecommendation(BaseModel):
    type: RecommendationType
    priority: Priority
    chapter_id: Optional[str] = None
    chapter_title: Optional[str] = None
    question_ids: Optional[List[str]] = None
    reason: str
    estimated_time: int

class DailyStudyPlan(BaseModel):
    date: datetime
    total_estimated_time: int
    recommendations: List[StudyRecommendation] = Field(default_factory=list)
    review_cards: List[ReviewCard] = Field(default_factory=list)
    weak_areas: List[str] = Field(default_factory=list)
    strong_areas: List[str] = Field(default_factory=list)

class KnowledgeGap(BaseModel):
    chapter_id: str
    chapter_title: str
    mastery_level: int
    weak_topics: List[str] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)

class GoalProgress(BaseModel):
    """Progress against the learner's daily and weekly goals"""
    minutes_today: int
    daily_goal_minutes: int
    daily_progress: int
    questions_this_week: int
    weekly_goal_questions: int
    weekly_progress: int
    streak_days: int

class ReviewSummary(BaseModel):
    reviewed: int
    correct: int
    avg_quality: float

class LearningState(BaseModel):
    """Everything the engine holds for one learner; persisted verbatim"""
    review_cards: List[ReviewCard] = Field(default_factory=list)
    learning_patterns: List[LearningPattern] = Field(default_factory=list)
    study_sessions: List[StudySession] = Field(default_factory=list)
    active_sessions: Dict[str, datetime] = Field(default_factory=dict)
    current_plan: Optional[DailyStudyPlan] = None
    knowledge_gaps: List[KnowledgeGap] = Field(default_factory=list)
    preferred_difficulty: PreferredDifficulty = "adaptive"
    daily_goal_minutes: int = 30
    weekly_goal_questions: int = 50
