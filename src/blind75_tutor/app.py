"""Interactive CLI application."""
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from blind75_tutor.db import DEFAULT_DB_PATH, PersistenceError, init_db
from blind75_tutor.grid import get_progress_grid
from blind75_tutor.importer import import_problems
from blind75_tutor.migrate import migrate_from_local_storage
from blind75_tutor.models import LEARNING, MASTERED
from blind75_tutor.policy import validate_score
from blind75_tutor.scheduler import build_spaced_repetition_queue
from blind75_tutor.seed import is_seeded, seed_all
from blind75_tutor.settings import get_settings_with_defaults, reset_study_plan, update_settings
from blind75_tutor.store import ProgressStore
from blind75_tutor.tracker import record_attempt, reset_all_progress

console = Console()

DEFAULT_USER = os.environ.get("BLIND75_TUTOR_USER", "local")
EXIT_WORDS = ("q", "menu")

STATUS_STYLES = {MASTERED: "green", LEARNING: "yellow"}


class SessionExitRequested(Exception):
    """Raised when the user leaves a practice session early."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str] | None = None) -> int:
    while True:
        answer = session_prompt(prompt).strip()
        if answer.isdigit() and (choices is None or answer in choices):
            return int(answer)
        console.print("[red]Please enter a whole number.[/red]")


def configure_logging() -> None:
    level = os.environ.get("BLIND75_TUTOR_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level, format="%(message)s", datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome():
    console.print(Panel(
        "[bold]Blind 75 Interview Prep[/bold]\n[dim]Spaced repetition practice planner[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("today", "Today's queue + stats"),
        ("practice", "Work through today's queue"),
        ("topic", "Practice a single topic"),
        ("grid", "Progress by topic"),
        ("settings", "View or change pacing"),
        ("reset", "Restart the plan or clear progress"),
        ("migrate", "Import legacy mastered problems"),
        ("import", "Add problems from a JSON/YAML file"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_stats(stats) -> None:
    pace = "[green]on pace[/green]" if stats.on_pace else "[red]behind pace[/red]"
    console.print(Panel(
        f"Mastered [bold]{stats.mastered_count}[/bold]  |  "
        f"Learning [bold]{stats.learning_count}[/bold]  |  "
        f"New [bold]{stats.new_count}[/bold]  of {stats.total_problems}\n"
        f"Due today: {stats.due_today}  |  Due tomorrow: {stats.due_tomorrow}  |  "
        f"Days left: {stats.days_left}  ({pace})",
        title="Study Stats", border_style="blue",
    ))


def show_queue(queue: list, stats) -> None:
    breakdown = stats.todays_queue
    table = Table(title=f"Today's Queue ({breakdown.reviews} reviews + {breakdown.new_problems} new)")
    table.add_column("#", justify="right")
    table.add_column("Problem", style="cyan")
    table.add_column("Difficulty")
    table.add_column("Topic")
    for i, problem in enumerate(queue, 1):
        table.add_row(str(i), problem.title, problem.difficulty, problem.problem_group)
    console.print(table)


def run_practice_session(store: ProgressStore, user_id: str, queue: list) -> int:
    """Prompt for a score on each queued problem. Returns the number recorded."""
    if not queue:
        console.print("[yellow]Nothing queued right now![/yellow]")
        return 0
    console.print(f"\n[bold]Practice Session[/bold] - {len(queue)} problems ([dim]q to stop[/dim])\n")
    recorded = 0
    for i, problem in enumerate(queue, 1):
        body = problem.prompt or "[dim]Solve it, explain it out loud, then score yourself.[/dim]"
        console.print(Panel(body, title=f"{i}/{len(queue)}  {problem.title} ({problem.difficulty})",
                            border_style="cyan"))
        while True:
            score = session_int_prompt("Score (0-100)")
            try:
                validate_score(score)
                break
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
        progress = record_attempt(store, user_id, problem, score)
        style = STATUS_STYLES.get(progress.status, "white")
        console.print(f"[{style}]{progress.status}[/{style}] "
                      f"({progress.reviews_completed}/{progress.reviews_needed} reviews, best {progress.best_score})\n")
        recorded += 1
    return recorded


def cmd_today(store: ProgressStore, user_id: str, topic: str | None = None):
    result = build_spaced_repetition_queue(store, user_id, topic_filter=topic)
    show_stats(result.stats)
    show_queue(result.queue, result.stats)
    return result


def cmd_practice(store: ProgressStore, user_id: str, topic: str | None = None):
    result = cmd_today(store, user_id, topic)
    try:
        run_practice_session(store, user_id, result.queue)
    except SessionExitRequested:
        console.print("[dim]Session paused. Recorded attempts are saved.[/dim]")


def cmd_topic(store: ProgressStore, user_id: str):
    topic = Prompt.ask("Topic (e.g. Arrays & Hashing)")
    cmd_practice(store, user_id, topic)


def cmd_grid(store: ProgressStore, user_id: str):
    table = Table(title="Progress by Topic")
    table.add_column("Topic", style="cyan")
    table.add_column("Mastered", justify="right")
    table.add_column("Problems")
    for group in get_progress_grid(store, user_id):
        cells = []
        for item in group.problems:
            status = item.progress.status if item.progress else "new"
            style = STATUS_STYLES.get(status, "dim")
            marker = "*" if item.is_due_today else ""
            cells.append(f"[{style}]{item.problem.title}{marker}[/{style}]")
        table.add_row(group.group_name, f"{group.mastered_count}/{group.total_count}", ", ".join(cells))
    console.print(table)
    console.print("[dim]* due for review today[/dim]")


def cmd_settings(store: ProgressStore, user_id: str):
    settings = get_settings_with_defaults(store, user_id)
    console.print(
        f"Target days: [bold]{settings.target_days}[/bold]  |  "
        f"Daily cap: [bold]{settings.daily_cap}[/bold]  |  "
        f"Easy bonus: [bold]{settings.easy_bonus}[/bold]  |  "
        f"Started: {settings.start_date:%Y-%m-%d}"
    )
    if Prompt.ask("Change settings?", choices=["y", "n"], default="n") == "n":
        return
    updated = update_settings(store, user_id, {
        "target_days": IntPrompt.ask("Target days", default=settings.target_days),
        "daily_cap": IntPrompt.ask("Daily cap", default=settings.daily_cap),
        "easy_bonus": IntPrompt.ask("Easy bonus", default=settings.easy_bonus),
    })
    console.print(f"[green]Saved.[/green] {updated.target_days} days, {updated.daily_cap}/day cap")


def cmd_reset(store: ProgressStore, user_id: str):
    what = Prompt.ask("Reset", choices=["plan", "progress", "cancel"], default="cancel")
    if what == "plan":
        reset_study_plan(store, user_id)
        console.print("[green]Study plan restarted from today. Progress kept.[/green]")
    elif what == "progress":
        deleted = reset_all_progress(store, user_id)
        console.print(f"[green]Cleared {deleted} progress records.[/green]")


def cmd_migrate(store: ProgressStore, user_id: str):
    raw = Prompt.ask("Mastered problem titles (comma separated)")
    titles = [t.strip() for t in raw.split(",") if t.strip()]
    if migrate_from_local_storage(store, user_id, titles):
        console.print(f"[green]Migrated {len(titles)} problems.[/green]")
    else:
        console.print("[red]Migration failed; nothing was imported.[/red]")


def cmd_import(store: ProgressStore):
    file_path = Prompt.ask("File path")
    if not os.path.exists(file_path):
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    result = import_problems(store, file_path)
    console.print(f"[green]Imported {result['inserted']} of {result['read']} problems "
                  f"from {result['filename']}[/green]")


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    store = ProgressStore(db_path)
    first_run = not is_seeded(store)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    seed_all(store)
    if first_run:
        console.print("[green]Ready![/green]\n")

    user_id = DEFAULT_USER
    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        try:
            if choice == "today":
                cmd_today(store, user_id)
            elif choice == "practice":
                cmd_practice(store, user_id)
            elif choice == "topic":
                cmd_topic(store, user_id)
            elif choice == "grid":
                cmd_grid(store, user_id)
            elif choice == "settings":
                cmd_settings(store, user_id)
            elif choice == "reset":
                cmd_reset(store, user_id)
            elif choice == "migrate":
                cmd_migrate(store, user_id)
            elif choice == "import":
                cmd_import(store)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck in your interviews![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except (PersistenceError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
