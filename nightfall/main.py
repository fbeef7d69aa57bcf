"""Main game loop and CLI."""

import argparse
import asyncio
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .engine import GameEngine
from .formatting import event_style, phase_header
from .game import GameState
from .llm import LLMAgent, RandomAgent
from .models import EventKind, GameEvent
from .services import EventBus
from .types import DEFAULT_CONFIG, GameConfig

console = Console()

NAMES = [
    "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry", "Iris",
    "Jack", "Kate", "Liam", "Mia", "Noah", "Olivia", "Paul", "Quinn", "Ruby",
    "Sam", "Tina",
]


class ConsoleRenderer:
    """Prints game events to the terminal as they are emitted."""

    def __init__(self, console: Console, show_private: bool = True):
        self.console = console
        self.show_private = show_private

    def __call__(self, event: GameEvent) -> None:
        if not event.is_public and not self.show_private:
            return

        if event.kind == EventKind.PHASE:
            self.console.print(f"\n[bold]{phase_header(event.metadata['phase'], event.round_number)}[/bold]")
            return
        if event.kind == EventKind.WIN and not event.metadata.get("neutral"):
            self.console.print(Panel(event.content, style="bold green"))
            return

        style = event_style(event.kind.value)
        if event.kind in (EventKind.CHAT, EventKind.FACTION_CHAT) and event.actor:
            text = f"💬 [bold]{event.actor}[/bold]: {event.content}"
        else:
            text = event.content
        if not event.is_public:
            targets = ", ".join(event.visibility.targets)
            text = f"[dim]({event.visibility.scope} → {targets})[/dim] {text}"
        self.console.print(text, style=style)


def display_game_start(game: GameState) -> None:
    """Display game start information."""
    console.print("\n[bold cyan]🎭 NIGHTFALL - Mafia 🎭[/bold cyan]\n")

    table = Table(title="Players")
    table.add_column("Seat", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Role", style="magenta")
    table.add_column("Team", style="yellow")

    for seat, player in enumerate(game.players, start=1):
        table.add_row(str(seat), player.name, player.role.display_name(), player.team.value)

    console.print(table)


def display_game_end(game: GameState) -> None:
    """Display final roles."""
    table = Table(title="Final Roles")
    table.add_column("Name", style="cyan")
    table.add_column("Role", style="magenta")
    table.add_column("Status")

    for player in game.players:
        if player.alive:
            status = "[green]alive[/green]"
        else:
            status = f"[red]dead[/red] (shown as {player.revealed_role or 'unknown'})"
        table.add_row(player.name, player.role.display_name(), status)

    console.print(table)
    if game.neutral_winners:
        console.print(f"Neutral winners: {', '.join(game.neutral_winners)}")


def build_config(args: argparse.Namespace) -> GameConfig:
    """Translate CLI arguments into a game config."""
    if not 3 <= args.players <= len(NAMES):
        raise SystemExit(f"--players must be between 3 and {len(NAMES)}")

    config: GameConfig = {
        **DEFAULT_CONFIG,
        "players": NAMES[:args.players],
        "role_seed": args.seed,
        "discussion_rounds": args.discussion_rounds,
        "neutral_win_ends_game": args.neutral_ends_game,
        "enable_reflections": args.reflections,
        "llm_model": args.model,
    }
    if args.rounds:
        config["max_rounds"] = args.rounds
    return config


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="NIGHTFALL - Mafia played by autonomous agents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Dry run with random agents:
    nightfall --dry-run --players 8 --seed 42

  Play with an LLM:
    nightfall --players 7 --reflections
"""
    )
    parser.add_argument("--players", type=int, default=7, help="Number of players (3-20)")
    parser.add_argument("--seed", type=int, default=0, help="Seed for role assignment and seating")
    parser.add_argument("--rounds", type=int, default=0, help="Abort after this many rounds (0 = no limit)")
    parser.add_argument("--discussion-rounds", type=int, default=DEFAULT_CONFIG["discussion_rounds"],
                        help="Public discussion rounds per day")
    parser.add_argument("--dry-run", action="store_true", help="Use seeded random agents instead of an LLM")
    parser.add_argument("--model", default=DEFAULT_CONFIG["llm_model"], help="Anthropic model to use")
    parser.add_argument("--reflections", action="store_true", help="Ask players to reflect after the game")
    parser.add_argument("--neutral-ends-game", action="store_true",
                        help="A jester or executioner win ends the game immediately")
    parser.add_argument("--hide-private", action="store_true", help="Only print public events")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    config = build_config(args)
    if args.dry_run:
        agent = RandomAgent(seed=args.seed)
    else:
        agent = LLMAgent(model=config["llm_model"], temperature=config["llm_temperature"])

    sink = EventBus()
    sink.subscribe(ConsoleRenderer(console, show_private=not args.hide_private))
    engine = GameEngine.from_config(config, agent, sink)

    display_game_start(engine.game)
    try:
        game = asyncio.run(engine.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Game interrupted.[/yellow]")
        return
    display_game_end(game)


if __name__ == "__main__":
    main()
