from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from study_core.database import Base

class ReviewCardRecord(Base):
    """SM-2 spaced repetition card per question"""
    __tablename__ = "review_cards"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("learners.id"), index=True)
    card_id = Column(String, nullable=False, index=True)
    question_id = Column(String, nullable=False)
    chapter_id = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # SM-2 algorithm fields
    ease_factor = Column(Float, default=2.5)
    interval = Column(Integer, default=0)  # days until next review
    repetitions = Column(Integer, default=0)  # consecutive successful reviews

    next_review_date = Column(DateTime, nullable=False)
    last_review_date = Column(DateTime)
    last_quality = Column(Integer)  # 0-5

    learner = relationship("Learner", back_populates="review_cards")
