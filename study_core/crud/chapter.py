from sqlalchemy.orm import Session
from study_core.models import Chapter
from study_core.schemas import ChapterSchema
from typing import List

def add_chapters(db: Session, chapters: List[ChapterSchema]) -> int:
    """Insert or retitle catalog chapters, appending new ones at the end of the catalog"""
    next_position = db.query(Chapter).count()
    added = 0
    seen = set()

    for item in chapters:
        if item.id in seen:
            continue
        seen.add(item.id)

        existing = db.query(Chapter).filter(Chapter.id == item.id).first()
        if existing:
            existing.title = item.title
            continue

        db.add(Chapter(id=item.id, title=item.title, position=next_position))
        next_position += 1
        added += 1

    db.commit()
    return added

def get_chapters(db: Session) -> List[ChapterSchema]:
    """Full chapter catalog in display order"""
    rows = db.query(Chapter).order_by(Chapter.position).all()
    return [ChapterSchema.model_validate(row) for row in rows]
