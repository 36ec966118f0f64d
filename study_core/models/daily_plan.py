from sqlalchemy import Column, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from study_core.database import Base

class DailyPlanRecord(Base):
    """Generated daily study plans"""
    __tablename__ = "daily_plans"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("learners.id"), index=True)
    plan_date = Column(DateTime, nullable=False)
    plan_data = Column(JSON, nullable=False)  # full DailyStudyPlan
    generated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    learner = relationship("Learner", back_populates="daily_plans")
