from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from study_core.database import Base

class LearningPatternRecord(Base):
    """Attempt statistics per question"""
    __tablename__ = "learning_patterns"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("learners.id"), index=True)
    question_id = Column(String, nullable=False, index=True)
    chapter_id = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    attempts = Column(Integer, default=0)
    correct_attempts = Column(Integer, default=0)
    avg_response_time = Column(Float, default=0.0)  # milliseconds
    last_attempted = Column(DateTime, nullable=False)
    difficulty = Column(String, nullable=False, default="medium")  # easy, medium, hard
    bloom_level = Column(Integer, nullable=False, default=1)

    learner = relationship("Learner", back_populates="learning_patterns")
