"""Interactive command shell for champion select recommendations."""
import argparse
import logging
import threading
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from nexus_crusher import __version__
from nexus_crusher.config import get_settings
from nexus_crusher.context import AppContext, build_context
from nexus_crusher.models.champion import Role
from nexus_crusher.models.events import (
    DisplayEvent,
    ErrorEvent,
    OpponentChangedEvent,
    RecommendationsEvent,
    RoleChangedEvent,
    SessionEndedEvent,
    SessionStartedEvent,
    StatusEvent,
)
from nexus_crusher.models.recommendations import RecommendationBatch
from nexus_crusher.services.session_observer import LcuSessionObserver
from nexus_crusher.utils.role_normalizer import normalize_role, role_choices

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5.0

HELP_LINES = (
    ("recommend", "Get recommendations for your current lane (if in champion select)"),
    ("recommend <lane>", "Get recommendations for a specific lane (top, jungle, mid, bottom, support)"),
    ("connect", "Connect to the League client"),
    ("help", "Show this help menu"),
    ("exit", "Exit the application"),
)


def parse_command(line: str) -> tuple[str, list[str]]:
    """Split an input line into a lowercase command and its arguments."""
    parts = line.strip().split()
    if not parts:
        return "", []
    return parts[0].lower(), parts[1:]


class InteractionShell:
    """Reads commands on the main thread and renders display events.

    Events arrive from tracker threads through ``render``; rich's Console
    serializes the writes.
    """

    def __init__(
        self,
        context: AppContext,
        console: Optional[Console] = None,
        input_func: Optional[Callable[[], str]] = None,
    ):
        self.context = context
        self.console = console or Console()
        self._input = input_func or (lambda: self.console.input("[bold green]> [/]"))

    # Rendering

    def show_header(self):
        self.console.print(Panel.fit(
            "[bold blue]NexusCrusher[/bold blue]\n"
            f"[yellow]League Champion Recommender - v{__version__}[/yellow]",
            border_style="blue",
        ))
        self.console.print('[dim]Type "help" for a list of commands[/dim]\n')

    def show_help(self):
        table = Table(title="Available Commands", show_header=False, box=None, title_justify="left")
        table.add_column(style="green")
        table.add_column()
        for command, description in HELP_LINES:
            table.add_row(command, description)
        self.console.print(table)

    def show_status(self, text: str):
        self.console.print(f"[yellow]{escape(text)}[/yellow]")

    def show_error(self, text: str):
        self.console.print(f"[red]Error: {escape(text)}[/red]")

    def render(self, event: DisplayEvent) -> None:
        """Render one display event. Safe to call from any thread."""
        if isinstance(event, StatusEvent):
            self.show_status(event.text)
        elif isinstance(event, ErrorEvent):
            self.show_error(event.text)
        elif isinstance(event, SessionStartedEvent):
            self._render_session_started(event)
        elif isinstance(event, RoleChangedEvent):
            self.console.print(f"[yellow]You've been assigned to {event.role.value}[/yellow]")
        elif isinstance(event, OpponentChangedEvent):
            self.console.print(
                f"[magenta]Enemy {event.opponent_name} picked for {event.role.value}"
                " - updating recommendations[/magenta]"
            )
        elif isinstance(event, SessionEndedEvent):
            self.show_status("Left champion select. Ready for your next game!")
        elif isinstance(event, RecommendationsEvent):
            if event.superseded:
                logger.debug(f"Dropping superseded recommendations #{event.batch.request_id}")
                return
            self.render_batch(event.batch)
        else:
            logger.debug(f"No renderer for {event.type} event")

    def _render_session_started(self, event: SessionStartedEvent):
        self.console.print("\n[bold green]Champion select detected![/bold green]")
        if event.role is not None:
            self.console.print(f"[yellow]You've been assigned to {event.role.value}[/yellow]")
            self.console.print("[dim]Showing automatic recommendations for your lane...[/dim]")
        else:
            self.console.print("[yellow]No lane assignment detected yet[/yellow]")
            self.console.print("[dim]Recommendations will appear automatically when your lane is assigned[/dim]")
        self.console.print("[dim]Recommendations will update if an enemy champion is picked[/dim]")
        self.console.print('[dim]Type "recommend \\[lane]" for custom recommendations[/dim]\n')

    def render_batch(self, batch: RecommendationBatch) -> None:
        if batch.is_empty:
            self.show_error(f"No recommendations available for {batch.role.value}")
            return

        title = f"Top Champion Recommendations for {batch.role.value}"
        if batch.opponent_name:
            title += f" vs {batch.opponent_name}"
        table = Table(title=title, title_justify="left", show_lines=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Champion", style="bold blue")
        table.add_column("Win Rate", justify="right", style="green")
        table.add_column("Pick Rate", justify="right", style="yellow")
        table.add_column("Score", justify="right", style="cyan")
        table.add_column("Why")

        for index, rec in enumerate(batch.recommendations, start=1):
            stats = rec.champion.stats_for(rec.role)
            why = ", ".join(rec.reasons)
            if rec.intro:
                why = f"[italic]{rec.intro}[/italic]\n{why}"
            if rec.counters:
                why += f"\n[green]Counters: {', '.join(rec.counters)}[/green]"
            if rec.countered_by:
                why += f"\n[red]Countered by: {', '.join(rec.countered_by)}[/red]"
            champion = rec.champion.name
            if rec.champion.title:
                champion += f"\n[dim]{rec.champion.title}[/dim]"
            table.add_row(
                str(index),
                champion,
                f"{stats.win_rate * 100:.1f}%",
                f"{stats.pick_rate * 100:.1f}%",
                f"{rec.score:.1f}",
                why,
            )
        self.console.print(table)

    # Commands

    def prompt_for_role(self) -> Optional[Role]:
        answer = Prompt.ask("Select a lane", choices=role_choices(), console=self.console)
        return normalize_role(answer)

    def handle_line(self, line: str) -> Optional[int]:
        """Run one command line.

        Returns:
            An exit code when the shell should stop, otherwise None
        """
        command, args = parse_command(line)
        if not command:
            return None
        if command == "recommend":
            self.cmd_recommend(args)
        elif command == "help":
            self.show_help()
        elif command == "connect":
            self.cmd_connect()
        elif command in ("exit", "quit"):
            self.console.print("Goodbye!")
            return 0
        else:
            self.show_error(f"Unknown command: {command}")
            self.show_status('Type "help" for a list of available commands')
        return None

    def cmd_recommend(self, args: Sequence[str]) -> None:
        role: Optional[Role] = None
        if args:
            role = normalize_role(args[0])
            if role is None:
                self.show_error(f"Unknown lane: {args[0]} (choose from {', '.join(role_choices())})")
                return
        elif self.context.tracker.state.last_role is None:
            role = self.prompt_for_role()
            if role is None:
                return

        future = self.context.tracker.request_recommendations(role)
        if future is None:
            self.show_error("No lane selected")
            return
        # Done callbacks run in registration order, so this fires after the tracker has rendered the batch
        rendered = threading.Event()
        future.add_done_callback(lambda _: rendered.set())
        rendered.wait()

    def cmd_connect(self) -> bool:
        observer = self.context.observer
        if not isinstance(observer, LcuSessionObserver):
            self.show_status("Session observer does not need a connection")
            return True
        if observer.connected:
            self.show_status("Already connected to the League client")
            return True
        self.show_status("Searching for League client...")
        if observer.connect(timeout=CONNECT_TIMEOUT):
            self.console.print("[green]Connected to League client[/green]")
            return True
        self.show_status("League client not found. Make sure the client is running.")
        self.show_status('Running in standalone mode. Use "recommend <lane>" to get recommendations.')
        return False

    def run(self) -> int:
        self.context.events.add_sink(self.render)
        self.show_header()
        self.context.start()
        if self.context.settings.auto_connect:
            self.cmd_connect()

        try:
            while True:
                try:
                    line = self._input()
                except (EOFError, KeyboardInterrupt):
                    self.console.print("\nGoodbye!")
                    return 0
                try:
                    exit_code = self.handle_line(line)
                except Exception as e:
                    logger.exception("Command failed")
                    self.show_error(f"An unexpected error occurred: {e}")
                    continue
                if exit_code is not None:
                    return exit_code
        finally:
            self.context.events.remove_sink(self.render)
            self.context.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nexus-crusher",
        description="Live champion recommendations during League of Legends champion select",
    )
    parser.add_argument("--no-connect", action="store_true", help="Start without connecting to the client")
    parser.add_argument("--count", type=int, help="Number of recommendations to show")
    parser.add_argument("--log-level", help="Logging level (default from NEXUS_LOG_LEVEL)")
    parser.add_argument("--seed", type=int, help="Seed for intro lines")
    parser.add_argument("--no-intros", action="store_true", help="Hide decorative intro lines")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(level: str, console: Console) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.no_connect:
        overrides["auto_connect"] = False
    if args.count is not None:
        if args.count < 1:
            build_parser().error("--count must be positive")
        overrides["recommendation_count"] = args.count
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.seed is not None:
        overrides["intro_seed"] = args.seed
    if args.no_intros:
        overrides["show_intros"] = False
    settings = get_settings().model_copy(update=overrides)

    console = Console()
    configure_logging(settings.log_level, console)
    shell = InteractionShell(build_context(settings), console=console)
    return shell.run()


if __name__ == "__main__":
    raise SystemExit(main())
