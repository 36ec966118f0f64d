import sys
import typer
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typing import Optional, List

from study_core.config import settings
from study_core.database import SessionLocal, init_db
from study_core.crud import (
    create_learner, get_learner, update_learner,
    add_chapters, get_chapters,
    load_learning_state, save_learning_state,
    get_latest_daily_plan
)
from study_core.schemas import (
    LearnerCreate, LearnerUpdate, ChapterSchema, QuestionAttempt, ReviewRating, SessionEnd
)
from study_core.catalog_parser import ChapterCatalogParser
from study_core.service import LearningService
from study_core.sm2 import SM2Algorithm
from study_core.utils import utc_now

app = typer.Typer(help="Study Core CLI - spaced repetition and adaptive study planning")
console = Console()

DIFFICULTY_STYLES = {"hard": "red", "medium": "yellow", "easy": "green"}
PRIORITY_STYLES = {"high": "red", "medium": "yellow", "low": "green"}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    """Configure logging before any command runs"""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else settings.log_level)


def _load_service(db, learner_id: int) -> LearningService:
    """Load the learner's state into a service, or exit if the learner is unknown"""
    state = load_learning_state(db, learner_id)
    if state is None:
        console.print(f"[red]✗[/red] Learner ID {learner_id} not found")
        raise typer.Exit(code=1)
    return LearningService(state)


def _save(db, learner_id: int, service: LearningService):
    """Persist the service state, or exit with an error if the database rejects it"""
    try:
        save_learning_state(db, learner_id, service.snapshot())
    except SQLAlchemyError as e:
        db.rollback()
        console.print(f"[red]✗[/red] Could not save learner {learner_id}: {str(e)}")
        raise typer.Exit(code=1)


def _reject(what: str, error: ValidationError):
    """Print pydantic validation errors as one CLI error line and exit"""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}" for err in error.errors()
    )
    console.print(f"[red]✗[/red] Invalid {what}: {escape(problems)}")
    raise typer.Exit(code=1)


def _catalog(db) -> List[ChapterSchema]:
    chapters = get_chapters(db)
    if not chapters:
        console.print("[yellow]Chapter catalog is empty - run import-chapters first[/yellow]")
    return chapters


@app.command()
def init():
    """Initialize database tables"""
    init_db()
    console.print("[green]✓[/green] Database initialized successfully!")

@app.command()
def reset_db():
    """Delete all data and reinitialize database (WARNING: irreversible!)"""
    confirm = typer.confirm("⚠️  This will DELETE ALL DATA. Are you sure?")
    if not confirm:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    import study_core.models  # noqa: F401
    from study_core.database import engine, Base
    console.print("[yellow]Dropping all tables...[/yellow]")
    Base.metadata.drop_all(bind=engine)
    console.print("[yellow]Recreating tables...[/yellow]")
    Base.metadata.create_all(bind=engine)
    console.print("[green]✓[/green] Database reset complete! All data deleted.")

@app.command("create-learner")
def create_learner_profile(
    name: str = typer.Option(..., prompt="Learner name"),
    daily_goal: int = typer.Option(settings.default_daily_goal_minutes, help="Daily study goal (minutes)"),
    weekly_goal: int = typer.Option(settings.default_weekly_goal_questions, help="Weekly goal (questions)")
):
    """Create a new learner profile"""
    try:
        profile = LearnerCreate(
            name=name,
            daily_goal_minutes=daily_goal,
            weekly_goal_questions=weekly_goal
        )
    except ValidationError as e:
        _reject("profile", e)

    db = SessionLocal()
    try:
        learner = create_learner(db, profile)
        console.print(f"[green]✓[/green] Profile created successfully! Learner ID: {learner.id}")
        console.print(f"  Name: {learner.name}")
        console.print(f"  Goals: {learner.daily_goal_minutes} min/day, {learner.weekly_goal_questions} questions/week")
    finally:
        db.close()

@app.command()
def view_learner(learner_id: int):
    """View learner profile"""
    db = SessionLocal()
    try:
        learner = get_learner(db, learner_id)
        if not learner:
            console.print(f"[red]✗[/red] Learner ID {learner_id} not found")
            raise typer.Exit(code=1)

        console.print("\n[bold]Learner Profile[/bold]")
        console.print(f"  ID: {learner.id}")
        console.print(f"  Name: {learner.name}")
        console.print(f"  Daily goal: {learner.daily_goal_minutes} minutes")
        console.print(f"  Weekly goal: {learner.weekly_goal_questions} questions")
        console.print(f"  Difficulty: {learner.preferred_difficulty}")
    finally:
        db.close()

@app.command()
def set_goals(
    learner_id: int = typer.Option(..., prompt="Learner ID"),
    daily_goal: Optional[int] = typer.Option(None, help="New daily goal (minutes)"),
    weekly_goal: Optional[int] = typer.Option(None, help="New weekly goal (questions)"),
    difficulty: Optional[str] = typer.Option(None, help="easy, medium, hard or adaptive")
):
    """Update learning goals and difficulty preference"""
    try:
        changes = LearnerUpdate(
            daily_goal_minutes=daily_goal,
            weekly_goal_questions=weekly_goal,
            preferred_difficulty=difficulty
        )
    except ValidationError as e:
        _reject("goals", e)

    if not changes.model_dump(exclude_none=True):
        console.print("[yellow]Nothing to update - pass --daily-goal, --weekly-goal or --difficulty[/yellow]")
        return

    db = SessionLocal()
    try:
        learner = update_learner(db, learner_id, changes)
        if learner:
            console.print("[green]✓[/green] Goals updated successfully!")
        else:
            console.print(f"[red]✗[/red] Learner ID {learner_id} not found")
            raise typer.Exit(code=1)
    finally:
        db.close()

@app.command()
def import_chapters(
    file_path: str = typer.Option(..., prompt="Catalog file path (.csv, .xlsx or .json)")
):
    """Import the chapter catalog (id, title columns)"""
    db = SessionLocal()
    try:
        console.print("[yellow]Parsing chapter catalog...[/yellow]")
        raw_items = ChapterCatalogParser.auto_parse(file_path)
        chapters = [ChapterSchema(**item) for item in raw_items]
        added = add_chapters(db, chapters)

        console.print(f"[green]✓[/green] Catalog imported: {len(chapters)} chapters read, {added} new")
    except ValueError as e:
        console.print(f"[red]✗[/red] Error: {str(e)}")
        raise typer.Exit(code=1)
    finally:
        db.close()

@app.command()
def list_chapters():
    """List the chapter catalog"""
    db = SessionLocal()
    try:
        chapters = _catalog(db)
        for chapter in chapters:
            console.print(f"  - [cyan]{chapter.id}[/cyan] {chapter.title}")
    finally:
        db.close()

@app.command()
def add_card(
    learner_id: int = typer.Option(..., prompt="Learner ID"),
    question_id: str = typer.Option(..., prompt="Question ID"),
    chapter_id: str = typer.Option(..., prompt="Chapter ID")
):
    """Put a question under spaced repetition (replaces an existing card)"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        card = service.add_review_card(question_id, chapter_id)
        _save(db, learner_id, service)

        console.print(f"[green]✓[/green] Review card created: {card.id}")
        console.print(f"  Question: {card.question_id} (chapter {card.chapter_id})")
    finally:
        db.close()

@app.command()
def review(
    learner_id: int = typer.Option(..., prompt="Learner ID"),
    card_id: str = typer.Option(..., prompt="Card ID"),
    quality: int = typer.Option(..., prompt="Quality rating 0-5")
):
    """Rate a review card (0-2 = forgot, 3-5 = remembered)"""
    try:
        rating = ReviewRating(card_id=card_id, quality=quality)
    except ValidationError as e:
        _reject("rating", e)

    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        card = service.update_review_card(rating.card_id, rating.quality)
        if card is None:
            console.print(f"[yellow]No review card with ID {card_id}[/yellow]")
            return

        _save(db, learner_id, service)

        console.print("[green]✓[/green] Review recorded!")
        console.print(f"  Next review: {card.next_review_date:%Y-%m-%d %H:%M} (in {card.interval} days)")
        console.print(f"  Ease: {card.ease_factor:.2f}, repetitions: {card.repetitions}")
    finally:
        db.close()

@app.command()
def due(learner_id: int):
    """List review cards that are due now"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        due_cards = service.get_due_review_cards()

        if not due_cards:
            console.print("[green]Nothing due for review.[/green]")
            return

        now = utc_now()
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Card", style="cyan")
        table.add_column("Question", style="green")
        table.add_column("Chapter", style="yellow")
        table.add_column("Due", style="yellow")
        table.add_column("Days Overdue", style="red", justify="right")

        for card in due_cards[:20]:
            days_overdue = SM2Algorithm.get_days_overdue(card.next_review_date, now)
            table.add_row(
                card.id,
                card.question_id,
                card.chapter_id,
                f"{card.next_review_date:%Y-%m-%d}",
                str(days_overdue) if days_overdue > 0 else "Today"
            )

        console.print(table)
        if len(due_cards) > 20:
            console.print(f"[dim]... and {len(due_cards) - 20} more cards[/dim]")
    finally:
        db.close()

@app.command()
def record_attempt(
    learner_id: int = typer.Option(..., prompt="Learner ID"),
    question_id: str = typer.Option(..., prompt="Question ID"),
    chapter_id: str = typer.Option(..., prompt="Chapter ID"),
    correct: bool = typer.Option(..., "--correct/--incorrect", prompt="Answered correctly?"),
    response_time: float = typer.Option(..., prompt="Response time (ms)"),
    bloom_level: int = typer.Option(1, help="Bloom level 1-6")
):
    """Record an answered question"""
    try:
        attempt = QuestionAttempt(
            question_id=question_id,
            chapter_id=chapter_id,
            correct=correct,
            response_time=response_time,
            bloom_level=bloom_level
        )
    except ValidationError as e:
        _reject("attempt", e)

    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        pattern = service.record_question_attempt(attempt)
        _save(db, learner_id, service)

        style = DIFFICULTY_STYLES[pattern.difficulty]
        console.print("[green]✓[/green] Attempt recorded!")
        console.print(f"  {pattern.correct_attempts}/{pattern.attempts} correct, "
                      f"avg {pattern.avg_response_time / 1000:.1f}s")
        console.print(f"  Difficulty: [{style}]{pattern.difficulty}[/{style}]")
    finally:
        db.close()

@app.command()
def start_session(learner_id: int):
    """Start a study session and print its ID"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        session_id = service.start_study_session()
        _save(db, learner_id, service)
        console.print(f"[green]✓[/green] Session started: {session_id}")
    finally:
        db.close()

@app.command()
def end_session(
    learner_id: int = typer.Option(..., prompt="Learner ID"),
    session_id: str = typer.Option(..., prompt="Session ID"),
    attempted: int = typer.Option(0, help="Questions attempted"),
    correct: int = typer.Option(0, help="Correct answers"),
    chapters: Optional[str] = typer.Option(None, help="Chapters studied (comma-separated)")
):
    """Finish a study session"""
    try:
        summary = SessionEnd(
            session_id=session_id,
            questions_attempted=attempted,
            correct_answers=correct,
            chapters_studied=[c.strip() for c in chapters.split(",") if c.strip()] if chapters else []
        )
    except ValidationError as e:
        _reject("session summary", e)

    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        session = service.end_study_session(
            summary.session_id,
            summary.questions_attempted,
            summary.correct_answers,
            summary.chapters_studied
        )
        if session is None:
            console.print(f"[yellow]No open session with ID {session_id}[/yellow]")
            return

        _save(db, learner_id, service)
        console.print("[green]✓[/green] Session recorded!")
        console.print(f"  Duration: {session.duration} min")
        console.print(f"  Focus score: {session.focus_score}/100")
    finally:
        db.close()

@app.command()
def plan(learner_id: int):
    """Generate today's study plan"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        daily_plan = service.generate_daily_plan(_catalog(db))
        _save(db, learner_id, service)

        console.print("\n[green]✓[/green] [bold]Daily Study Plan Generated![/bold]\n")
        _print_plan(daily_plan)
    finally:
        db.close()

@app.command()
def view_plan(learner_id: int):
    """View latest generated daily plan"""
    db = SessionLocal()
    try:
        daily_plan = get_latest_daily_plan(db, learner_id)
        if not daily_plan:
            console.print(f"[yellow]No plans found for learner {learner_id}[/yellow]")
            return

        console.print(f"\n[bold]Latest Daily Plan[/bold]")
        console.print(f"Generated: {daily_plan.date:%Y-%m-%d %H:%M}\n")
        _print_plan(daily_plan)
    finally:
        db.close()

def _print_plan(daily_plan):
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Priority")
    table.add_column("Type", style="cyan")
    table.add_column("Chapter", style="green")
    table.add_column("Reason", style="yellow")
    table.add_column("Time", style="blue", justify="right")

    for rec in daily_plan.recommendations:
        style = PRIORITY_STYLES[rec.priority]
        chapter = rec.chapter_title or (f"{len(rec.question_ids)} cards" if rec.question_ids else "-")
        table.add_row(
            f"[{style}]{rec.priority}[/{style}]",
            rec.type,
            chapter,
            rec.reason,
            f"{rec.estimated_time} min"
        )

    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {daily_plan.total_estimated_time} min")
    if daily_plan.weak_areas:
        console.print(f"[red]Weak areas:[/red] {', '.join(daily_plan.weak_areas)}")
    if daily_plan.strong_areas:
        console.print(f"[green]Strong areas:[/green] {', '.join(daily_plan.strong_areas)}")

@app.command()
def gaps(learner_id: int):
    """Analyze knowledge gaps per chapter"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        knowledge_gaps = service.analyze_knowledge_gaps(_catalog(db))
        _save(db, learner_id, service)

        if not knowledge_gaps:
            console.print("[green]No knowledge gaps - every chapter is mastered![/green]")
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Chapter", style="cyan")
        table.add_column("Mastery", justify="right")
        table.add_column("Weak Topics", style="red")
        table.add_column("Recommended", style="yellow")

        for gap in knowledge_gaps:
            table.add_row(
                gap.chapter_title,
                f"{gap.mastery_level}%",
                "\n".join(gap.weak_topics),
                "\n".join(gap.recommended_actions)
            )

        console.print(table)
    finally:
        db.close()

@app.command()
def difficulty(learner_id: int, chapter_id: str):
    """Show the adaptive difficulty for a chapter"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        level = service.get_adaptive_difficulty(chapter_id)
        style = DIFFICULTY_STYLES[level]
        console.print(f"Next difficulty for {chapter_id}: [{style}]{level}[/{style}]")
    finally:
        db.close()

@app.command()
def order(learner_id: int, question_ids: List[str]):
    """Order questions for a quiz: due first, hardest first, unseen first"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        for i, question_id in enumerate(service.get_optimal_question_order(question_ids), 1):
            console.print(f"  {i}. {question_id}")
    finally:
        db.close()

@app.command()
def progress(learner_id: int):
    """View goal progress and recent study sessions"""
    db = SessionLocal()
    try:
        service = _load_service(db, learner_id)
        goals = service.get_goal_progress()
        due_cards = service.get_due_review_cards()

        console.print(f"\n[bold]Learning Progress[/bold]\n")
        console.print(f"[cyan]Goals:[/cyan]")
        console.print(f"  Today: {goals.minutes_today}/{goals.daily_goal_minutes} min ({goals.daily_progress}%)")
        console.print(f"  This week: {goals.questions_this_week}/{goals.weekly_goal_questions} questions ({goals.weekly_progress}%)")
        console.print(f"  Streak: {goals.streak_days} days")

        console.print(f"\n[cyan]Statistics:[/cyan]")
        console.print(f"  Review cards: {len(service.state.review_cards)} ({len(due_cards)} due)")
        console.print(f"  Questions attempted: {len(service.state.learning_patterns)}")

        recent_sessions = service.state.study_sessions[-5:]
        if recent_sessions:
            console.print(f"\n[cyan]Recent Study Sessions:[/cyan]")
            for session in reversed(recent_sessions):
                console.print(
                    f"  {session.date:%Y-%m-%d} - {session.duration} min, "
                    f"{session.correct_answers}/{session.questions_attempted} correct, "
                    f"focus {session.focus_score}"
                )
    finally:
        db.close()

if __name__ == "__main__":
    app()
