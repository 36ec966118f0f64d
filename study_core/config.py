from pydantic_settings import BaseSettings
from pathlib import Path

# Get the project root directory (parent of study_core folder)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""
    database_url: str = "sqlite:///./study_core.db"
    log_level: str = "INFO"

    # Learner defaults
    default_daily_goal_minutes: int = 30
    default_weekly_goal_questions: int = 50

    # Engine limits
    session_history_limit: int = 100
    plan_review_card_limit: int = 10

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        extra = "ignore"

settings = Settings()
