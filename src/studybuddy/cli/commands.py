"""CLI commands for StudyBuddy.

Commands:
- init-db: Create the database schema
- serve: Run the Web API with uvicorn
- config: Show the effective progression rules
- accessible: Chapters a student may open in a course
- quiz-status: A student's current submission for a chapter quiz
- certificates: Certificates earned by a student
"""

import os
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from studybuddy.config import ConfigError, configure_logging, load_app_config
from studybuddy.core import catalog, progression
from studybuddy.core.errors import NotFoundError
from studybuddy.db.database import DB_ENV, get_db_path, init_db

app = typer.Typer(
    name="studybuddy",
    help="Course progression service: quizzes, chapter unlocking and certificates.",
    no_args_is_help=True,
)

console = Console()

DB_OPTION_HELP = "SQLite database file (default: database.path from config)"


def _open_db(db: Path | None) -> None:
    """Initialize the database from the option or the config."""
    try:
        config = load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    configure_logging(config.log_level)
    init_db(db or Path(config.database.path))


@app.command(name="init-db")
def init_db_command(
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV, help=DB_OPTION_HELP),
) -> None:
    """Create the database schema (idempotent)."""
    _open_db(db)
    console.print("[green]✓ Database ready[/green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(5003, "--port", "-p", help="Bind port"),
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV, help=DB_OPTION_HELP),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API.

    The database path is passed to the app through STUDYBUDDY_DB, so
    --db also applies to the worker started by --reload.

    Example:
        studybuddy serve --port 5003
    """
    import uvicorn

    _open_db(db)
    os.environ[DB_ENV] = str(get_db_path())

    console.print(f"[blue]StudyBuddy API on http://{host}:{port}[/blue]")
    uvicorn.run("studybuddy.web.api:app", host=host, port=port, reload=reload)


@app.command(name="config")
def show_config() -> None:
    """Show the effective progression rules."""
    try:
        config = load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    rules = config.progression
    table = Table(title="Progression rules")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("pass_mark", f"{rules.pass_mark}%")
    table.add_row("max_attempts", str(rules.max_attempts))
    table.add_row("free_chapters", str(rules.free_chapters))
    table.add_row("unlock_scan", rules.unlock_scan)
    table.add_row("database", config.database.path)
    console.print(table)


@app.command()
def accessible(
    student_id: int = typer.Argument(..., help="Student id"),
    course_id: int = typer.Argument(..., help="Course id"),
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV, help=DB_OPTION_HELP),
) -> None:
    """List the chapters a student may open in a course."""
    _open_db(db)

    try:
        chapters = catalog.list_chapters(course_id)
    except NotFoundError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    open_ids = set(progression.accessible_chapters(student_id, course_id))

    table = Table(title=f"Course {course_id} - student {student_id}")
    table.add_column("#", justify="right")
    table.add_column("Chapter id", justify="right")
    table.add_column("Title")
    table.add_column("Status")
    for chapter in chapters:
        state = "[green]open[/green]" if chapter.id in open_ids else "[red]locked[/red]"
        table.add_row(str(chapter.order_index + 1), str(chapter.id), chapter.title, state)

    console.print(table)
    console.print(f"  [dim]open:[/dim] {len(open_ids)}/{len(chapters)}")


@app.command(name="quiz-status")
def quiz_status(
    student_id: int = typer.Argument(..., help="Student id"),
    chapter_id: int = typer.Argument(..., help="Chapter id"),
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV, help=DB_OPTION_HELP),
) -> None:
    """Show a student's current submission for a chapter quiz."""
    _open_db(db)

    status = progression.get_chapter_quiz_status(student_id, chapter_id)
    if not status.submitted:
        console.print("[yellow]No submission yet[/yellow]")
        return

    verdict = "[green]passed[/green]" if status.passed else "[red]not passed[/red]"
    console.print(f"Score: {status.score:.1f}% - {verdict}")
    console.print(f"  [dim]attempts:[/dim] {status.attempt}")
    console.print(f"  [dim]retry:[/dim]    {'yes' if status.retry_available else 'no'}")


@app.command()
def certificates(
    student_id: int = typer.Argument(..., help="Student id"),
    db: Path | None = typer.Option(None, "--db", envvar=DB_ENV, help=DB_OPTION_HELP),
) -> None:
    """List the certificates earned by a student."""
    _open_db(db)

    certs = catalog.list_certificates(student_id)
    if not certs:
        console.print("[yellow]No certificates[/yellow]")
        return

    table = Table(title=f"Certificates - student {student_id}")
    table.add_column("Id", justify="right")
    table.add_column("Course")
    table.add_column("Issued at")
    for cert in certs:
        table.add_row(str(cert.id), cert.course_title, cert.issued_at)
    console.print(table)


if __name__ == "__main__":
    app()
