from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from study_core.database import Base

class StudySessionRecord(Base):
    """A study session; ended_at is empty while the session is still open"""
    __tablename__ = "study_sessions"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("learners.id"), index=True)
    session_id = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    started_at = Column(DateTime)
    ended_at = Column(DateTime)
    duration = Column(Integer)  # minutes
    questions_attempted = Column(Integer)
    correct_answers = Column(Integer)
    chapters_studied = Column(JSON)  # ["ch-1", ...]
    focus_score = Column(Integer)  # 0-100

    learner = relationship("Learner", back_populates="study_sessions")
