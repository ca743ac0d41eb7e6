"""Interactive CLI application."""
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table

from question_trainer.dashboard import get_status_color
from question_trainer.engine import TrainerEngine
from question_trainer.run import TIER_FEEDBACK, RunState
from question_trainer.selector import ALL, PoolMode

console = Console()

EXIT_WORDS = ("q", "menu")
TIER_COLORS = {"perfect": "green", "pass": "green", "near": "yellow", "fail": "red"}


class SessionExitRequested(Exception):
    """Raised when the user abandons a quiz run from a prompt."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_choice_prompt(prompt: str, option_count: int) -> int:
    """Ask for a 1-based option number, returning the 0-based index."""
    choices = [str(i) for i in range(1, option_count + 1)] + list(EXIT_WORDS)
    answer = session_prompt(prompt, choices=choices, show_choices=False)
    return int(answer) - 1


def show_welcome():
    console.print(Panel(
        "[bold]Question Trainer[/bold]\n[dim]Mastery-based multiple choice practice[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu(engine: TrainerEngine):
    console.print("\n[bold]Commands:[/bold]")
    failed = engine.failed_count()
    commands = [
        ("exam", "Randomised mock test"),
        ("category", "All questions by category"),
        ("unseen", "Unseen questions by category"),
        ("failed", f"Retry failed questions ({failed})" if failed else "Retry failed questions (none)"),
        ("performance", "Mastery by category"),
        ("reset", "Reset mastery + seen stats"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_summary(engine: TrainerEngine) -> None:
    summary = engine.run_summary()
    if summary is None:
        return
    title, message = TIER_FEEDBACK[summary.tier]
    color = TIER_COLORS[summary.tier]
    console.print(Panel(
        f"You scored [bold]{summary.score}[/bold] out of {summary.total}\n"
        f"[{color}]{summary.percent}%[/{color}]\n[dim]{message}[/dim]",
        title=title, border_style=color,
    ))


def run_quiz_session(engine: TrainerEngine) -> None:
    """Drive the current run until it finishes. Raises SessionExitRequested on 'q'."""
    run = engine.run
    if run is None:
        return
    if run.total == 0:
        console.print("[yellow]No questions available![/yellow]")
    console.print(f"\n[bold]Quiz[/bold] — {run.total} questions  [dim](q to abandon)[/dim]\n")
    while run.state is RunState.IN_PROGRESS:
        shown = engine.display_current()
        if shown is None:
            break
        q = shown.question
        console.print(Panel(
            q.text, title=f"Question {shown.position} of {shown.total}",
            subtitle=q.category, border_style="cyan",
        ))
        for i, text in enumerate(shown.options, 1):
            console.print(f"  [cyan]{i})[/cyan] {text}")
        if shown.options:
            result = None
            while result is None:
                index = session_choice_prompt("\nYour answer", len(shown.options))
                result = engine.submit_answer(index)
            if result.is_correct:
                console.print("[green]Correct![/green]")
            elif result.correct_option is not None:
                console.print(
                    f"[red]Incorrect.[/red] Answer: [green]{shown.options[result.correct_option]}[/green]"
                )
            else:
                console.print("[red]Incorrect.[/red]")
        label = "Next" if shown.position < shown.total else "Finish"
        session_prompt(f"[dim]Press Enter for {label}[/dim]", default="", show_default=False)
        console.print()
        engine.advance()
    show_summary(engine)


def _play(engine: TrainerEngine) -> None:
    try:
        run_quiz_session(engine)
    except SessionExitRequested:
        console.print("[dim]Run abandoned.[/dim]")
    finally:
        engine.return_to_start()


def _ask_count(max_count: int, default: str = "10") -> int | str | None:
    answer = Prompt.ask(f"Number of questions (1-{max_count} or 'all')", default=default).strip().lower()
    if answer == ALL:
        return ALL
    try:
        count = int(answer)
    except ValueError:
        return None
    return count if 1 <= count <= max_count else None


def _ask_category(engine: TrainerEngine) -> str | None:
    categories = engine.categories()
    if not categories:
        console.print("[yellow]Questions are not loaded.[/yellow]")
        return None
    for i, cat in enumerate(categories, 1):
        console.print(f"  [cyan]{i}[/cyan]) {cat}")
    choice = Prompt.ask("Select category", choices=[str(i) for i in range(1, len(categories) + 1)])
    return categories[int(choice) - 1]


def cmd_exam(engine: TrainerEngine):
    console.print("\n[bold]Randomised Mock Test[/bold]")
    if not engine.available:
        console.print("[yellow]Questions are not loaded.[/yellow]")
        return
    total = len(engine.bank)
    count = _ask_count(total, default=str(min(10, total)))
    if count is None or engine.start_run(PoolMode.ALL, count=count) is None:
        console.print("[red]Invalid number of questions.[/red]")
        return
    _play(engine)


def cmd_category(engine: TrainerEngine):
    console.print("\n[bold]All Questions by Category[/bold]")
    category = _ask_category(engine)
    if category is None:
        return
    total = engine.category_size(category)
    count = _ask_count(total, default=str(total))
    if count is None or engine.start_run(PoolMode.CATEGORY, category, count) is None:
        console.print("[red]Invalid number of questions.[/red]")
        return
    _play(engine)


def cmd_unseen(engine: TrainerEngine):
    console.print("\n[bold]Unseen Questions by Category[/bold]")
    category = _ask_category(engine)
    if category is None:
        return
    if engine.count_unseen(category) == 0:
        console.print("[yellow]No unseen questions left in this category.[/yellow]")
        return
    engine.start_run(PoolMode.UNSEEN, category)
    _play(engine)


def cmd_failed(engine: TrainerEngine):
    console.print("\n[bold]Retry Failed Questions[/bold]")
    if engine.failed_count() == 0:
        console.print("[green]No failed questions to retry![/green]")
        return
    engine.start_run(PoolMode.FAILED)
    _play(engine)


def cmd_performance(engine: TrainerEngine):
    if not engine.available:
        console.print("[yellow]Questions are not loaded.[/yellow]")
        return
    overall = engine.overall_summary()
    color = get_status_color(overall.status)
    bar_filled = overall.percent // 5
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(Panel(
        f"[bold]{overall.mastered}/{overall.total}[/bold] mastered  {bar} [bold]{overall.percent}%[/bold]",
        title="Overall", border_style="blue",
    ))

    table = Table(title="Mastery by Category")
    table.add_column("Category", style="cyan")
    table.add_column("Mastered", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    for row in overall.rows:
        sc_color = get_status_color(row.status)
        table.add_row(
            row.category + (" ✓" if row.complete else ""),
            f"{row.mastered}/{row.total}",
            f"[{sc_color}]{row.percent}%[/{sc_color}]",
            "[green]Complete[/green]" if row.complete else "",
        )
    console.print(table)


def cmd_reset(engine: TrainerEngine):
    if not Confirm.ask("Reset mastery + seen stats? (Failed-question list is kept.)", default=False):
        return
    engine.reset_mastery()
    console.print("[green]Mastery and seen stats reset.[/green]")


def setup_logging() -> None:
    level = os.environ.get("QUESTION_TRAINER_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level, format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    setup_logging()
    engine = TrainerEngine()
    if not engine.load():
        console.print("[red]Failed to load questions. Only failed-question retry is available.[/red]")

    show_welcome()

    commands = {
        "exam": cmd_exam,
        "category": cmd_category,
        "unseen": cmd_unseen,
        "failed": cmd_failed,
        "performance": cmd_performance,
        "reset": cmd_reset,
    }
    while True:
        show_menu(engine)
        choice = Prompt.ask("\n[bold]>[/bold]", default="exam").strip().lower()
        try:
            if choice in commands:
                commands[choice](engine)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            engine.return_to_start()
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
