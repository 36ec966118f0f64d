from sqlalchemy import Column, Integer, String, ForeignKey, JSON
from sqlalchemy.orm import relationship
from study_core.database import Base

class KnowledgeGapRecord(Base):
    """Latest knowledge gap report entry per chapter"""
    __tablename__ = "knowledge_gaps"

    id = Column(Integer, primary_key=True, index=True)
    learner_id = Column(Integer, ForeignKey("learners.id"), index=True)
    chapter_id = Column(String, nullable=False)
    chapter_title = Column(String, nullable=False)
    mastery_level = Column(Integer, nullable=False)  # 0-100
    weak_topics = Column(JSON, nullable=False)
    recommended_actions = Column(JSON, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    learner = relationship("Learner", back_populates="knowledge_gaps")
