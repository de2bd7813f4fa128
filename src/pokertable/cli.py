"""Command line interface: play, simulate and ask the bot for advice."""

import logging
import random
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table as RichTable

from .action import ActionType
from .bot import BotContext, BotDecision, decide
from .bot_queue import BotActionQueue
from .card import Card, card
from .config import Config, get_config
from .console import BOT_NAMES, format_cards, run_game_cli, standings_table
from .evaluator import StandardEvaluator, describe
from .player import Player, Role
from .position import seat_position
from .presenter import LoggingPresenter
from .table import Phase, Table, blind_indices
from .tournament import Tournament

app = typer.Typer(help="No-Limit Texas Hold'em table with rule-based bots")
console = Console()

_PHASE_BY_BOARD = {0: Phase.PREFLOP, 3: Phase.FLOP, 4: Phase.TURN, 5: Phase.RIVER}


def parse_cards(s: str) -> list[Card]:
    """Parse space or comma separated cards."""
    s = s.replace(",", " ")
    parts = s.split()
    return [card(p) for p in parts if p]


def _load_config(path: Path | None) -> Config:
    return Config.load(path) if path is not None else get_config()


@app.callback()
def setup(
    log_level: str = typer.Option("WARNING", "--log-level", "-L", help="Logging level"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@app.command()
def play(
    bots: int = typer.Option(5, "--bots", "-b", help="Number of bot opponents (1-9)"),
    stack: int | None = typer.Option(None, "--stack", "-s", help="Starting chip stack"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for the shuffle and the bots"),
    fast: bool = typer.Option(False, "--fast", help="Apply bot actions without delay"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Play a game against bots until one player holds every chip."""
    config = _load_config(config_path)
    table_cfg = config.table
    if stack is not None:
        table_cfg.starting_stack = stack
    if fast:
        config.bot.speed_mode = True
    if config.bot.debug:
        logging.getLogger("pokertable.bot").setLevel(logging.DEBUG)

    run_game_cli(
        num_bots=max(1, min(len(BOT_NAMES), bots)),
        config=table_cfg.tournament(),
        action_delay=config.bot.effective_delay,
        seed=seed if seed is not None else table_cfg.seed,
        timeout_policy=config.human.timeout_policy,
    )


@app.command()
def simulate(
    bots: int = typer.Option(6, "--bots", "-b", help="Number of bots (2-9)"),
    hands: int | None = typer.Option(None, "--hands", "-n", help="Stop after this many hands"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for the shuffle and the bots"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Run a bots-only game in speed mode and print the standings."""
    config = _load_config(config_path)
    if seed is None:
        seed = config.table.seed
    names = BOT_NAMES[: max(2, min(len(BOT_NAMES), bots))]

    tournament = Tournament.create(
        names,
        config=config.table.tournament(max_hands=hands),
        presenter=LoggingPresenter(),
        bot_queue=BotActionQueue.speed_mode(),
        rng=random.Random(seed),
    )
    chips = tournament.table.total_chips
    champion = tournament.run()

    console.print(standings_table(tournament.standings(), title=f"After {tournament.hands_played} hands"))
    if champion is not None:
        console.print(f"[bold green]{champion.name} wins with {champion.chips:,} chips[/bold green]")
    if tournament.table.total_chips != chips:
        console.print("[red]Chip count changed during the game[/red]")
        raise typer.Exit(1)


def build_spot(
    hero_cards: list[Card],
    community: list[Card],
    players: int = 6,
    seat: int = 0,
    stack: int = 2000,
    pot: int = 30,
    to_call: int = 0,
    small_blind: int = 10,
    big_blind: int = 20,
    seed: int | None = None,
) -> tuple[Table, Player]:
    """A table frozen at the hero's decision point, dealer at seat 0."""
    if len(hero_cards) != 2:
        raise ValueError(f"Expected 2 hole cards, got {len(hero_cards)}")
    phase = _PHASE_BY_BOARD.get(len(community))
    if phase is None:
        raise ValueError(f"Invalid board: expected 0, 3, 4, or 5 cards, got {len(community)}")
    if not 2 <= players <= 10:
        raise ValueError("Players must be between 2 and 10")
    if not 0 <= seat < players:
        raise ValueError(f"Seat must be between 0 and {players - 1}")
    if len(set(hero_cards + community)) != len(hero_cards) + len(community):
        raise ValueError("Duplicate cards")

    seated = [
        Player(name="Hero" if i == seat else f"Seat {i}", chips=stack, is_bot=True)
        for i in range(players)
    ]
    table = Table(
        players=seated,
        small_blind=small_blind,
        big_blind=big_blind,
        rng=random.Random(seed),
    )
    seated[0].roles |= Role.DEALER
    sb_idx, bb_idx = blind_indices(table)
    seated[sb_idx].roles |= Role.SMALL_BLIND
    seated[bb_idx].roles |= Role.BIG_BLIND

    hero = seated[seat]
    hero.hole_cards = list(hero_cards)
    table.community = list(community)
    table.phase = phase
    table.pot = pot
    table.current_bet = to_call
    table.last_raise_size = max(big_blind, to_call)
    table.raises_this_round = 1 if to_call > (big_blind if phase is Phase.PREFLOP else 0) else 0
    return table, hero


def _display_decision(decision: BotDecision) -> None:
    """Display a bot decision with Rich formatting."""
    action = decision.action
    color = {
        ActionType.FOLD: "red",
        ActionType.CHECK: "yellow",
        ActionType.CALL: "yellow",
        ActionType.RAISE: "green",
    }.get(action.type, "white")

    trace = decision.trace
    details = RichTable(show_header=False, box=None)
    details.add_column(style="cyan")
    details.add_column(justify="right")
    details.add_row("Strength", f"{trace.strength:.2f}")
    details.add_row("Zone", trace.zone)
    details.add_row("Pot odds", f"{trace.pot_odds:.2f}")
    details.add_row("Position", f"{trace.position:.2f}")

    console.print(
        Panel(
            f"[{color}]{action}[/{color}]\n[dim]{decision.reasoning}[/dim]",
            title="[bold magenta]Bot Decision[/bold magenta]",
            expand=False,
        )
    )
    console.print(details)
    console.print(f"[dim]{trace}[/dim]")


@app.command()
def advise(
    hero: str = typer.Argument(..., help="Hole cards (e.g., 'As Kh')"),
    board: str | None = typer.Option(None, "--board", "-b", help="Community cards"),
    players: int = typer.Option(6, "--players", "-p", help="Players at the table"),
    seat: int = typer.Option(0, "--seat", help="Hero's seat, 0 = dealer"),
    stack: int = typer.Option(2000, "--stack", "-s", help="Every stack, in chips"),
    pot: int = typer.Option(30, "--pot", help="Pot size in chips"),
    to_call: int = typer.Option(0, "--to-call", help="Chips the hero must call"),
    big_blind: int = typer.Option(20, "--big-blind", help="Big blind (small blind is half)"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for the bot's coin flips"),
):
    """Show what the bot would do in a given spot."""
    try:
        hero_cards = parse_cards(hero)
        community = parse_cards(board) if board else []
        table, player = build_spot(
            hero_cards,
            community,
            players=players,
            seat=seat,
            stack=stack,
            pot=pot,
            to_call=to_call,
            small_blind=max(1, big_blind // 2),
            big_blind=big_blind,
            seed=seed,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    evaluator = StandardEvaluator()
    console.print(f"\n[bold]Hand:[/bold]     {format_cards(hero_cards)}")
    console.print(f"[bold]Position:[/bold] {seat_position(seat, players).short}")
    console.print(f"[bold]Street:[/bold]   {table.phase.value.capitalize()}")
    if community:
        console.print(f"[bold]Board:[/bold]    {format_cards(community)}")
        console.print(f"[bold]Made:[/bold]     {describe(evaluator.solve(hero_cards + community))}")
    console.print(f"[bold]Pot:[/bold]      {pot}  |  To call: {to_call}")
    console.print()

    decision = decide(player, BotContext.from_table(table, evaluator))
    _display_decision(decision)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
