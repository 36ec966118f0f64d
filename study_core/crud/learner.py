from sqlalchemy.orm import Session
from loguru import logger
from study_core.models import Learner
from study_core.schemas import LearnerCreate, LearnerUpdate
from typing import Optional

def create_learner(db: Session, profile: LearnerCreate) -> Learner:
    """Create a learner with their study goals"""
    learner = Learner(**profile.model_dump())
    db.add(learner)
    db.commit()
    db.refresh(learner)
    logger.info(f"Created learner {learner.id} ({learner.name})")
    return learner

def get_learner(db: Session, learner_id: int) -> Optional[Learner]:
    return db.query(Learner).filter(Learner.id == learner_id).first()

def update_learner(db: Session, learner_id: int, changes: LearnerUpdate) -> Optional[Learner]:
    """
    Apply goal and difficulty changes to a learner.

    Only fields set on `changes` are written. Returns None for an unknown learner.
    """
    learner = get_learner(db, learner_id)
    if learner is None:
        return None

    updates = changes.model_dump(exclude_none=True)
    if updates:
        for field, value in updates.items():
            setattr(learner, field, value)
        db.commit()
        db.refresh(learner)
        logger.debug(f"Updated learner {learner_id}: {', '.join(sorted(updates))}")
    return learner
