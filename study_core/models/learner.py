from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from study_core.database import Base

class Learner(Base):
    """Learner profile with study goals and difficulty preference"""
    __tablename__ = "learners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    daily_goal_minutes = Column(Integer, nullable=False, default=30)
    weekly_goal_questions = Column(Integer, nullable=False, default=50)
    preferred_difficulty = Column(String, nullable=False, default="adaptive")  # easy, medium, hard, adaptive
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    review_cards = relationship("ReviewCardRecord", back_populates="learner", cascade="all, delete-orphan")
    learning_patterns = relationship("LearningPatternRecord", back_populates="learner", cascade="all, delete-orphan")
    study_sessions = relationship("StudySessionRecord", back_populates="learner", cascade="all, delete-orphan")
    daily_plans = relationship("DailyPlanRecord", back_populates="learner", cascade="all, delete-orphan")
    knowledge_gaps = relationship("KnowledgeGapRecord", back_populates="learner", cascade="all, delete-orphan")
