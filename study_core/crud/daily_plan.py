from sqlalchemy.orm import Session
from study_core.models import DailyPlanRecord
from study_core.schemas import DailyStudyPlan
from study_core.utils import ensure_utc
from typing import Optional

def save_daily_plan(db: Session, learner_id: int, plan: DailyStudyPlan) -> DailyPlanRecord:
    """Save generated daily plan"""
    db_plan = DailyPlanRecord(
        learner_id=learner_id,
        plan_date=plan.date,
        plan_data=plan.model_dump(mode="json")
    )
    db.add(db_plan)
    db.commit()
    db.refresh(db_plan)
    return db_plan

def get_latest_daily_plan(db: Session, learner_id: int) -> Optional[DailyStudyPlan]:
    """Get most recent daily plan"""
    db_plan = db.query(DailyPlanRecord).filter(
        DailyPlanRecord.learner_id == learner_id
    ).order_by(DailyPlanRecord.plan_date.desc(), DailyPlanRecord.id.desc()).first()

    if not db_plan:
        return None
    return DailyStudyPlan.model_validate(db_plan.plan_data)

def is_saved(db: Session, learner_id: int, plan: DailyStudyPlan) -> bool:
    """True if a plan generated at the same moment is already stored"""
    latest = get_latest_daily_plan(db, learner_id)
    return latest is not None and ensure_utc(latest.date) == ensure_utc(plan.date)
