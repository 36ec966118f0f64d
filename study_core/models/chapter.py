from sqlalchemy import Column, Integer, String
from study_core.database import Base

class Chapter(Base):
    """Chapter catalog entry imported from the content subsystem"""
    __tablename__ = "chapters"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)  # catalog display order
