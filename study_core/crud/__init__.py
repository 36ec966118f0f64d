from study_core.crud.learner import create_learner, get_learner, update_learner
from study_core.crud.chapter import add_chapters, get_chapters
from study_core.crud.learning_state import load_learning_state, save_learning_state
from study_core.crud.daily_plan import save_daily_plan, get_latest_daily_plan

__all__ = [
    "create_learner",
    "get_learner",
    "update_learner",
    "add_chapters",
    "get_chapters",
    "load_learning_state",
    "save_learning_state",
    "save_daily_plan",
    "get_latest_daily_plan",
]
