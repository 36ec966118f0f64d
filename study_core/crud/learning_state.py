from sqlalchemy.orm import Session
from loguru import logger
from study_core.models import (
    Learner,
    ReviewCardRecord,
    LearningPatternRecord,
    StudySessionRecord,
    KnowledgeGapRecord
)
from study_core.schemas import (
    KnowledgeGap,
    LearningPattern,
    LearningState,
    ReviewCard,
    StudySession
)
from study_core.crud.daily_plan import get_latest_daily_plan, is_saved, save_daily_plan
from study_core.utils import ensure_utc
from typing import Optional

def load_learning_state(db: Session, learner_id: int) -> Optional[LearningState]:
    """
    Rebuild a learner's full engine state from the database.

    Returns None if the learner does not exist.
    """
    learner = db.query(Learner).filter(Learner.id == learner_id).first()
    if not learner:
        return None

    cards = db.query(ReviewCardRecord).filter(
        ReviewCardRecord.learner_id == learner_id
    ).order_by(ReviewCardRecord.position).all()

    patterns = db.query(LearningPatternRecord).filter(
        LearningPatternRecord.learner_id == learner_id
    ).order_by(LearningPatternRecord.position).all()

    sessions = db.query(StudySessionRecord).filter(
        StudySessionRecord.learner_id == learner_id
    ).order_by(StudySessionRecord.position).all()

    gaps = db.query(KnowledgeGapRecord).filter(
        KnowledgeGapRecord.learner_id == learner_id
    ).order_by(KnowledgeGapRecord.position).all()

    return LearningState(
        review_cards=[
            ReviewCard(
                id=c.card_id,
                question_id=c.question_id,
                chapter_id=c.chapter_id,
                ease_factor=c.ease_factor,
                interval=c.interval,
                repetitions=c.repetitions,
                next_review_date=ensure_utc(c.next_review_date),
                last_review_date=ensure_utc(c.last_review_date),
                last_quality=c.last_quality
            )
            for c in cards
        ],
        learning_patterns=[
            LearningPattern(
                question_id=p.question_id,
                chapter_id=p.chapter_id,
                attempts=p.attempts,
                correct_attempts=p.correct_attempts,
                avg_response_time=p.avg_response_time,
                last_attempted=ensure_utc(p.last_attempted),
                difficulty=p.difficulty,
                bloom_level=p.bloom_level
            )
            for p in patterns
        ],
        study_sessions=[
            StudySession(
                id=s.session_id,
                date=ensure_utc(s.ended_at),
                duration=s.duration,
                questions_attempted=s.questions_attempted,
                correct_answers=s.correct_answers,
                chapters_studied=s.chapters_studied or [],
                focus_score=s.focus_score,
                started_at=ensure_utc(s.started_at)
            )
            for s in sessions if s.ended_at is not None
        ],
        active_sessions={
            s.session_id: ensure_utc(s.started_at)
            for s in sessions if s.ended_at is None
        },
        current_plan=get_latest_daily_plan(db, learner_id),
        knowledge_gaps=[
            KnowledgeGap(
                chapter_id=g.chapter_id,
                chapter_title=g.chapter_title,
                mastery_level=g.mastery_level,
                weak_topics=g.weak_topics,
                recommended_actions=g.recommended_actions
            )
            for g in gaps
        ],
        preferred_difficulty=learner.preferred_difficulty,
        daily_goal_minutes=learner.daily_goal_minutes,
        weekly_goal_questions=learner.weekly_goal_questions
    )

def save_learning_state(db: Session, learner_id: int, state: LearningState):
    """
    Persist a learner's engine state, replacing the stored cards, patterns,
    sessions and gaps. A plan is stored only when it is new.
    """
    learner = db.query(Learner).filter(Learner.id == learner_id).first()
    if not learner:
        raise ValueError(f"Learner {learner_id} not found")

    learner.preferred_difficulty = state.preferred_difficulty
    learner.daily_goal_minutes = state.daily_goal_minutes
    learner.weekly_goal_questions = state.weekly_goal_questions

    for record_class in (ReviewCardRecord, LearningPatternRecord, StudySessionRecord, KnowledgeGapRecord):
        db.query(record_class).filter(record_class.learner_id == learner_id).delete()

    for position, card in enumerate(state.review_cards):
        db.add(ReviewCardRecord(
            learner_id=learner_id,
            card_id=card.id,
            question_id=card.question_id,
            chapter_id=card.chapter_id,
            position=position,
            ease_factor=card.ease_factor,
            interval=card.interval,
            repetitions=card.repetitions,
            next_review_date=card.next_review_date,
            last_review_date=card.last_review_date,
            last_quality=card.last_quality
        ))

    for position, pattern in enumerate(state.learning_patterns):
        db.add(LearningPatternRecord(
            learner_id=learner_id,
            question_id=pattern.question_id,
            chapter_id=pattern.chapter_id,
            position=position,
            attempts=pattern.attempts,
            correct_attempts=pattern.correct_attempts,
            avg_response_time=pattern.avg_response_time,
            last_attempted=pattern.last_attempted,
            difficulty=pattern.difficulty,
            bloom_level=pattern.bloom_level
        ))

    for position, session in enumerate(state.study_sessions):
        db.add(StudySessionRecord(
            learner_id=learner_id,
            session_id=session.id,
            position=position,
            started_at=session.started_at,
            ended_at=session.date,
            duration=session.duration,
            questions_attempted=session.questions_attempted,
            correct_answers=session.correct_answers,
            chapters_studied=session.chapters_studied,
            focus_score=session.focus_score
        ))

    offset = len(state.study_sessions)
    for position, (session_id, started_at) in enumerate(state.active_sessions.items(), start=offset):
        db.add(StudySessionRecord(
            learner_id=learner_id,
            session_id=session_id,
            position=position,
            started_at=started_at
        ))

    for position, gap in enumerate(state.knowledge_gaps):
        db.add(KnowledgeGapRecord(
            learner_id=learner_id,
            chapter_id=gap.chapter_id,
            chapter_title=gap.chapter_title,
            mastery_level=gap.mastery_level,
            weak_topics=gap.weak_topics,
            recommended_actions=gap.recommended_actions,
            position=position
        ))

    db.commit()

    if state.current_plan and not is_saved(db, learner_id, state.current_plan):
        save_daily_plan(db, learner_id, state.current_plan)

    logger.debug(
        f"Saved state for learner {learner_id}: {len(state.review_cards)} cards, "
        f"{len(state.learning_patterns)} patterns, {len(state.study_sessions)} sessions"
    )
