"""Interactive CLI application."""
import logging
import os
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt

from garden_tutor.catalog import (
    CustomImageStore, PlantCatalog, UnknownPlantError, UploadInProgressError, load_base_catalog,
)
from garden_tutor.codec import DecodeError, image_size, is_embedded_image
from garden_tutor.dashboard import (
    get_accuracy_color, get_accuracy_label, get_leaderboard, get_study_stats, recent_history,
)
from garden_tutor.db import DEFAULT_DB_PATH, KeyValueStore
from garden_tutor.models import LightRequirement, Plant, SessionKind
from garden_tutor.progress import ProgressStore
from garden_tutor.quiz import EmptyCatalogError
from garden_tutor.session import CycleSession, QuizSession

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")
LIGHT_FILTERS = {
    "all": None,
    "sun": LightRequirement.FULL_SUN,
    "partial": LightRequirement.PARTIAL_SHADE,
    "shade": LightRequirement.SHADE,
}


class SessionExitRequested(Exception):
    """User asked to leave the current session and go back to the menu."""


def session_prompt(prompt: str, choices: list[str] | None = None, **kwargs) -> str:
    if choices is not None:
        choices = list(choices) + [w for w in EXIT_WORDS if w not in choices]
        kwargs["show_choices"] = False
    answer = Prompt.ask(prompt, choices=choices, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str] | None = None, **kwargs) -> int:
    return int(session_prompt(prompt, choices=choices, **kwargs))


def setup_logging(level: str | None = None) -> None:
    level = level or os.environ.get("GARDEN_TUTOR_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def describe_image(ref: str) -> str:
    if is_embedded_image(ref):
        width, height = image_size(ref)
        return f"[magenta]Your photo ({width}x{height})[/magenta]"
    return f"[dim]{ref}[/dim]"


def show_welcome():
    console.print(Panel(
        "[bold]Garden Tutor[/bold]\n[dim]Learn plant names, light needs and trivia[/dim]",
        title="Welcome", border_style="green",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("cycle", "3-minute study cycle"),
        ("study", "Browse the catalog, add photos"),
        ("quiz", "Daily quiz"),
        ("progress", "Streak, accuracy and ranking"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_plant_card(plant: Plant, details: bool = True, title: str | None = None) -> None:
    body = f"[bold]{plant.common_name}[/bold]\n{describe_image(plant.image_url)}"
    if details:
        body += (
            f"\n\n[italic]{plant.scientific_name}[/italic]"
            f"\nLight: [yellow]{plant.light.label}[/yellow]"
            f"\nCategory: {plant.category}"
            f"\n\n{plant.trivia}"
        )
    console.print(Panel(body, title=title, border_style="green"))


def run_cycle_session(session: CycleSession, clock=time.monotonic) -> bool:
    """Drive a cycle from the prompt. Returns True if the cycle was completed."""
    session.start()
    started = clock()
    ticks_done = 0
    while session.is_active:
        show_plant_card(
            session.current_plant,
            details=session.details_shown,
            title=f"Plant {session.index + 1} of {len(session.plants)}  [{session.format_time()}]",
        )
        last = session.is_last_plant
        try:
            action = session_prompt(
                "[d]etails, " + ("[f]inish" if last else "[n]ext"),
                choices=["d", "f"] if last else ["d", "n"],
            )
        except SessionExitRequested:
            action = None
        # The clock keeps running while the prompt waits.
        due = int(clock() - started)
        session.elapse(due - ticks_done)
        ticks_done = due
        if session.is_finished:
            console.print("[yellow]Time's up![/yellow]")
            break
        if action is None:
            console.print("[dim]Cycle abandoned.[/dim]")
            return False
        if action == "d":
            session.toggle_details()
        elif action == "n":
            session.next_plant()
        elif action == "f":
            session.finish()
    console.print(f"[green]Cycle complete! {len(session.plants)} plants studied.[/green]")
    return True


def run_quiz_session(session: QuizSession) -> int:
    """Ask each question in turn and return the final score."""
    session.start()
    total = len(session.questions)
    console.print(f"\n[bold]Quiz[/bold] - {total} questions\n")
    while not session.is_finished:
        q = session.current_question
        console.print(f"[bold]Q{q.id}.[/bold] {q.question_text}")
        if q.image_url:
            console.print(f"  {describe_image(q.image_url)}")
        for i, opt in enumerate(q.options, 1):
            console.print(f"  [cyan]{i})[/cyan] {opt}")
        pick = session_int_prompt("\nYour answer", choices=[str(i) for i in range(1, len(q.options) + 1)])
        if session.answer(q.options[pick - 1]):
            console.print("[green]Correct![/green]\n")
        else:
            console.print(f"[red]Incorrect.[/red] Answer: [green]{q.correct_answer}[/green]\n")
        session.advance()
    console.print(f"[bold]Score: {session.score}/{total}[/bold]\n")
    return session.score


def cmd_cycle(catalog: PlantCatalog, progress: ProgressStore):
    console.print("\n[bold]Study Cycle[/bold] [dim](q to leave)[/dim]")
    run_cycle_session(CycleSession(catalog.plants, progress))


def cmd_quiz(catalog: PlantCatalog, progress: ProgressStore):
    try:
        run_quiz_session(QuizSession(catalog.plants, progress))
    except SessionExitRequested:
        console.print("[dim]Quiz abandoned; nothing was recorded.[/dim]")


def upload_photo(catalog: PlantCatalog, plant_id: str, file_path: str) -> bool:
    path = Path(file_path).expanduser()
    if not path.exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return False
    try:
        with console.status("Compressing photo..."):
            catalog.update_plant_image_from_file(plant_id, str(path))
    except DecodeError:
        console.print("[red]Could not save that image. Try a smaller or different photo.[/red]")
        return False
    except UploadInProgressError:
        console.print("[yellow]A photo for this plant is already being processed.[/yellow]")
        return False
    console.print("[green]Photo saved.[/green]")
    return True


def show_plant_detail(catalog: PlantCatalog, plant_id: str) -> None:
    while True:
        plant = catalog.get(plant_id)
        show_plant_card(plant)
        choices = ["photo", "back"]
        if catalog.has_custom_image(plant_id):
            choices.insert(1, "reset")
        action = session_prompt("Action", choices=choices, default="back")
        if action == "photo":
            upload_photo(catalog, plant_id, session_prompt("Image file path"))
        elif action == "reset":
            catalog.reset_custom_image(plant_id)
            console.print("[green]Original image restored.[/green]")
        else:
            return


def cmd_study(catalog: PlantCatalog):
    console.print("\n[bold]Plant Catalog[/bold] [dim](q to leave)[/dim]")
    try:
        term = session_prompt("Search by name", default="")
        light = session_prompt("Light", choices=list(LIGHT_FILTERS), default="all")
        plants = catalog.search(term, LIGHT_FILTERS[light])
        if not plants:
            console.print("[yellow]No plants found.[/yellow]")
            return
        table = Table(title="Plants")
        table.add_column("#", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Scientific name", style="italic")
        table.add_column("Light")
        table.add_column("Photo")
        for i, p in enumerate(plants, 1):
            table.add_row(
                str(i), p.common_name, p.scientific_name, p.light.label,
                "[magenta]custom[/magenta]" if catalog.has_custom_image(p.id) else "",
            )
        console.print(table)
        pick = session_int_prompt("Open plant", choices=[str(i) for i in range(1, len(plants) + 1)])
        show_plant_detail(catalog, plants[pick - 1].id)
    except SessionExitRequested:
        return


def cmd_progress(progress_store: ProgressStore):
    progress = progress_store.load()
    stats = get_study_stats(progress)
    accuracy = stats["quiz_accuracy"]
    color = get_accuracy_color(accuracy)

    console.print(Panel(
        f"Plants studied: [bold]{stats['plants_studied']}[/bold]  |  "
        f"Streak: [bold]{stats['streak_days']}[/bold] days  |  "
        f"Cycles: [bold]{stats['cycles_completed']}[/bold]  |  "
        f"Quizzes: [bold]{stats['quizzes_taken']}[/bold]",
        title="My Progress", border_style="green",
    ))

    bar_filled = accuracy // 5
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(f"\n  Quiz accuracy: [bold]{accuracy}%[/bold] {bar} [{color}]{get_accuracy_label(accuracy)}[/{color}]")
    console.print(
        f"  [dim]{progress.quiz_correct_answers} correct out of {progress.quiz_total_questions} questions[/dim]\n"
    )

    table = Table(title="Weekly Ranking")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Points", justify="right")
    for entry in get_leaderboard(progress):
        style = "bold green" if entry["is_you"] else None
        table.add_row(str(entry["rank"]), entry["name"], str(entry["points"]), style=style)
    console.print(table)

    history = recent_history(progress)
    if history:
        console.print("\n[bold]Recent sessions:[/bold]")
        for s in history:
            detail = f" - score {s.score}" if s.kind is SessionKind.QUIZ else ""
            console.print(f"  {s.date}  {s.kind.value.lower()}{detail}")


def main():
    setup_logging()
    store = KeyValueStore(DEFAULT_DB_PATH)
    progress = ProgressStore(store)
    catalog = PlantCatalog(load_base_catalog(), CustomImageStore(store))

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="cycle").strip().lower()
        try:
            if choice == "cycle":
                cmd_cycle(catalog, progress)
            elif choice == "study":
                cmd_study(catalog)
            elif choice == "quiz":
                cmd_quiz(catalog, progress)
            elif choice == "progress":
                cmd_progress(progress)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Happy gardening![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except EmptyCatalogError:
            console.print("[yellow]No plants available yet.[/yellow]")
        except UnknownPlantError as e:
            console.print(f"[red]Unknown plant: {e}[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
