"""Rich terminal front end: a Presenter that draws the table."""

from __future__ import annotations

import random
import time

from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table as RichTable

from .action import Action, ActionWindow
from .bot_queue import BotActionQueue
from .card import Card, Suit
from .dealer import HandSummary, TimeoutPolicy
from .player import Player
from .position import seat_position
from .table import Table
from .tournament import Tournament, TournamentConfig

BOT_NAMES = ["Alice", "Bob", "Charlie", "Diana", "Eddie", "Fiona", "George", "Hank", "Iris"]

# Timing
STREET_DELAY = 1.0
HAND_END_DELAY = 2.0

console = Console()


def _pause(seconds: float) -> None:
    if seconds > 0:
        time.sleep(seconds)


def format_card(c: Card) -> str:
    symbol = f"{c.rank.symbol}{c.suit.symbol}"
    if c.suit in (Suit.HEARTS, Suit.DIAMONDS):
        return f"[bold red]{symbol}[/bold red]"
    return f"[bold white]{symbol}[/bold white]"


def format_cards(cards: list[Card]) -> str:
    return " ".join(format_card(c) for c in cards)


class RichPresenter:
    """Draws seats, board and an action log; prompts humans on the terminal."""

    def __init__(
        self,
        table: Table,
        out: Console | None = None,
        street_delay: float = STREET_DELAY,
        max_log_lines: int = 10,
    ) -> None:
        self.table = table
        self.console = out or console
        self.street_delay = street_delay
        self.max_log_lines = max_log_lines
        self.action_log: list[str] = []
        self.board: dict[int, Card] = {}
        self.revealed: set[str] = set()
        self.acting: str | None = None
        self.pot = 0

    def new_hand(self) -> None:
        self.action_log.clear()
        self.board.clear()
        self.revealed.clear()
        self.acting = None

    # ── Presenter protocol ───────────────────────────────────

    def highlight_acting_seat(self, player: Player) -> None:
        self.acting = player.name
        self.redraw()

    def render_pot(self, amount: int) -> None:
        self.pot = amount

    def render_community_card(self, slot: int, code: str) -> None:
        self.board[slot] = Card.from_str(code)
        if len(self.board) in (3, 4, 5):
            self.redraw()
            _pause(self.street_delay / 3)

    def prompt_human_action(self, player: Player, window: ActionWindow) -> Action:
        """Read c/f/r N/a from the terminal. ``r N`` raises to a total of N."""
        self.redraw()
        c = self.console
        c.print()
        c.print(
            f"  [bold]Pot:[/bold] {self.pot:,}  |  [bold]To call:[/bold] {window.to_call}"
            f"  |  [bold]Your chips:[/bold] {player.chips:,}"
        )
        min_to = player.round_bet + window.min_raise
        max_to = player.round_bet + window.max_raise

        options = ["[bold]c[/bold]heck" if window.can_check else f"[bold]c[/bold]all ({window.min_bet})"]
        options.append("[bold]f[/bold]old")
        if window.can_raise:
            options.append(f"[bold]r[/bold]aise N (to {min_to}..{max_to})")
            options.append(f"[bold]a[/bold]ll-in ({player.chips})")
        c.print(f"  {' | '.join(options)}")

        while True:
            response = Prompt.ask("  [bold cyan]>>>[/bold cyan]", console=c).strip().lower()

            if response in ("c", "check", "call"):
                return Action.check() if window.can_check else Action.call(window.min_bet)

            if response in ("f", "fold"):
                if window.can_check:
                    c.print("  [yellow]You can check for free![/yellow]")
                    continue
                return Action.fold()

            if response in ("a", "all-in", "allin", "all") and window.can_raise:
                return Action.raise_(window.max_raise)

            if response.startswith("r") and window.can_raise:
                parts = response.split()
                raw = parts[1] if len(parts) >= 2 else Prompt.ask("  [bold]Raise to[/bold]", console=c)
                try:
                    raise_to = int(raw)
                except ValueError:
                    c.print("  [red]Invalid amount[/red]")
                    continue
                if raise_to < min_to and raise_to < max_to:
                    c.print(f"  [red]Minimum raise is to {min_to}[/red]")
                    continue
                if raise_to > max_to:
                    c.print(f"  [yellow]Capped to all-in ({max_to})[/yellow]")
                    raise_to = max_to
                return Action.raise_(raise_to - player.round_bet)

            c.print("  [red]Invalid action. Use c/f/r/a[/red]")

    def reveal_hand(self, player: Player, cards: list[Card]) -> None:
        self.revealed.add(player.name)
        self.action_log.append(f"  {player.name}: {format_cards(cards)}")

    def announce(self, message: str) -> None:
        style = "bold green" if " wins " in message or " split " in message else "white"
        if "out of chips" in message or "all-in" in message:
            style = "bold red"
        self.action_log.append(f"[{style}]{message}[/{style}]")
        if message.startswith(("Flop", "Turn", "River")):
            self.redraw()
            _pause(self.street_delay)

    # ── Rendering ────────────────────────────────────────────

    def redraw(self) -> None:
        self.console.clear()
        self._render_header()
        self._render_seats()
        self._render_action_log()

    def _render_header(self) -> None:
        t = self.table
        pot_str = f"Pot: {self.pot:,}" if self.pot > 0 else ""
        self.console.print(
            Panel(
                f"[bold]Hand #{t.hand_number}[/bold]  |  Blinds {t.small_blind}/{t.big_blind}"
                f"  |  {pot_str}  |  Players {len(t.players)}",
                style="blue",
                expand=True,
            )
        )

    def _render_seats(self) -> None:
        panels: list[Panel] = []
        n = len(self.table.players)
        for i, p in enumerate(self.table.players):
            marker = "[yellow]D[/yellow] " if p.is_dealer else "  "
            name_color = "bold cyan" if not p.is_bot else "white"
            name_line = f"{marker}[{name_color}]{p.name}[/{name_color}] [dim]{seat_position(i, n).short}[/dim]"

            if p.hole_cards and (not p.is_bot or p.name in self.revealed):
                card_line = format_cards(p.hole_cards)
            elif p.hole_cards and not p.folded:
                card_line = "[dim]██ ██[/dim]"
            else:
                card_line = "    "

            chip_line = f"[green]{p.chips:,}[/green]" if p.chips > 0 else "[red]0[/red]"
            if p.round_bet:
                chip_line += f"  [yellow]bet {p.round_bet}[/yellow]"

            if p.folded:
                border, status = "dim", "[dim]Folded[/dim]"
            elif p.all_in:
                border, status = "red", "[bold red]ALL IN[/bold red]"
            elif p.name == self.acting:
                border, status = "yellow", "[yellow]to act[/yellow]"
            else:
                border, status = ("green" if not p.is_bot else "white"), ""

            body = f"{name_line}\n{card_line}\n{chip_line}"
            if status:
                body += f"\n{status}"
            panels.append(Panel(body, border_style=border, width=22, height=6))

        self.console.print(Columns(panels, equal=True, expand=True))
        if self.board:
            board = [self.board[k] for k in sorted(self.board)]
            self.console.print(Panel(f"  {format_cards(board)}  ", title="Board", expand=False), justify="center")

    def _render_action_log(self) -> None:
        if not self.action_log:
            return
        recent = self.action_log[-self.max_log_lines:]
        self.console.print(
            Panel("\n".join(recent), title="Action", border_style="dim", expand=True)
        )


def standings_table(players: list[Player], title: str = "Standings") -> RichTable:
    out = RichTable(title=title)
    out.add_column("#", justify="right")
    out.add_column("Player", style="bold")
    out.add_column("Chips", justify="right")
    out.add_column("Hands", justify="right")
    out.add_column("VPIP", justify="right")
    out.add_column("PFR", justify="right")
    for i, p in enumerate(players, start=1):
        hands = p.stats.hands
        vpip = f"{p.stats.vpip / hands:.0%}" if hands else "-"
        pfr = f"{p.stats.pfr / hands:.0%}" if hands else "-"
        out.add_row(str(i), p.name, f"{p.chips:,}", str(hands), vpip, pfr)
    return out


def run_game_cli(
    num_bots: int = 5,
    config: TournamentConfig | None = None,
    action_delay: float = 3.0,
    seed: int | None = None,
    timeout_policy: TimeoutPolicy = TimeoutPolicy.CHECK_OR_FOLD,
) -> None:
    """Play against bots in the terminal until one player has every chip."""
    config = config or TournamentConfig()
    names = ["You"] + BOT_NAMES[:num_bots]
    rng = random.Random(seed)

    console.clear()
    console.print(
        Panel(
            "[bold]Texas Hold'em[/bold]\n"
            f"You vs {num_bots} bots  |  Starting stack: {config.starting_stack:,}"
            f"  |  Blinds {config.small_blind}/{config.big_blind}\n"
            "[dim]Actions: c(heck/all) | f(old) | r(aise) N | a(ll-in)[/dim]",
            expand=False,
            border_style="green",
        )
    )
    _pause(1.5)

    tournament = Tournament.create(
        names,
        humans=["You"],
        config=config,
        bot_queue=BotActionQueue(delay=action_delay),
        rng=rng,
        timeout_policy=timeout_policy,
    )
    presenter = RichPresenter(tournament.table)
    tournament.dealer.presenter = presenter

    def on_hand_start(hand_number: int, table: Table) -> None:
        presenter.new_hand()
        presenter.redraw()

    def on_hand_end(summary: HandSummary) -> None:
        presenter.redraw()
        _pause(HAND_END_DELAY)

    def on_elimination(player: Player, place: int) -> None:
        if not player.is_bot:
            console.print(Panel("[bold red]You've been knocked out![/bold red]", expand=False))
            _pause(HAND_END_DELAY)

    def on_tournament_end(winner: Player) -> None:
        console.clear()
        label = "[bold green]YOU WIN![/bold green]" if not winner.is_bot else f"[bold]{winner.name}[/bold] wins!"
        console.print(Panel(label, expand=False), justify="center")

    tournament.on_hand_start = on_hand_start
    tournament.on_hand_end = on_hand_end
    tournament.on_elimination = on_elimination
    tournament.on_tournament_end = on_tournament_end

    try:
        tournament.run()
    except KeyboardInterrupt:
        console.print("\n[dim]Game interrupted.[/dim]")
    console.print(standings_table(tournament.standings()))
