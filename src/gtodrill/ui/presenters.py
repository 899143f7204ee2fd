from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.formatting import format_frequency
from ..features.session.schemas import AnswerResult, SpotPayload, SummaryPayload

_SUIT_COLORS = {
    "s": "bold white",
    "h": "bold #c14657",
    "d": "bold #2f73d2",
    "c": "bold #2f8a5e",
}

_QUALITY_STYLES = {
    "best": "bold green",
    "correct": "green",
    "inaccuracy": "yellow",
    "mistake": "red",
    "blunder": "bold red",
}


class RichPresenter:
    def __init__(self, *, no_color: bool = False):
        if no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console(force_terminal=True, color_system="auto")

    def show_spot(self, spot: SpotPayload) -> None:
        self.console.rule(f"{spot.spot_type} | {spot.tournament_phase or 'tournament'}")

        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Solution", spot.solution_id)
        info.add_row("Your seat", f"{spot.hero_seat} (seat {spot.hero_position})")
        info.add_row("Your hand", f"{self._format_combo(spot.combo)} [dim]({spot.hand})[/]")
        info.add_row("Stack", f"{spot.stack_bb:.1f} BB")
        if spot.raiser_position is not None:
            info.add_row("Villain", f"seat {spot.raiser_position}")
        if spot.shover_positions:
            info.add_row("Shovers", ", ".join(str(seat) for seat in spot.shover_positions))
        if spot.bounties:
            info.add_row("Bounties", "  ".join(f"{seat}: {label}" for seat, label in enumerate(spot.bounties)))
        self.console.print(Panel(info, title="Spot", border_style="magenta", expand=False))

        if spot.history:
            history = Table(title="Action so far", show_header=True, header_style="bold blue", box=box.SIMPLE)
            history.add_column("Street")
            history.add_column("Seat")
            history.add_column("Action", style="bold")
            for entry in spot.history:
                history.add_row(entry.street, entry.position, entry.description)
            self.console.print(history)
        else:
            self.console.print("[dim]First to act.[/]")

        options = Table(show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        options.add_column("#", justify="right", style="cyan", no_wrap=True)
        options.add_column("Action", style="bold")
        options.add_column("Key", style="dim")
        for option in spot.options:
            options.add_row(str(option.index), option.label, option.key)
        self.console.print(options)

    def show_feedback(self, result: AnswerResult) -> None:
        feedback = result.feedback
        style = _QUALITY_STYLES.get(feedback.quality, "bold")
        self.console.print(f"[{style}]{feedback.message}[/]")
        line = f"Frequency {format_frequency(feedback.frequency)} (max {format_frequency(feedback.max_frequency)})"
        if feedback.ev is not None:
            line += f" | EV {feedback.ev:+.2f} BB"
        self.console.print(line)
        self.console.print(f"Points +{feedback.points:.2f} | Lives lost {feedback.lives_lost:g}")
        self.show_summary(result.summary)

    def show_summary(self, summary: SummaryPayload) -> None:
        table = Table(title="Session Summary", show_header=False)
        table.add_row("Questions:", str(summary.questions))
        table.add_row("Counted correct:", f"{summary.correct} ({summary.accuracy_pct:.0f}%)")
        table.add_row("Points:", f"{summary.points:.2f}")
        table.add_row("Lives left:", f"{summary.lives_remaining:g}" + (" [red](busted)[/]" if summary.busted else ""))
        for quality, count in summary.tiers.items():
            if count:
                table.add_row(f"{quality.title()}:", str(count))
        self.console.print(table)

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/]")

    def _format_combo(self, combo: str) -> str:
        parts = []
        for card in (combo[:2], combo[2:4]):
            if len(card) < 2:
                continue
            color = _SUIT_COLORS.get(card[1], "bold")
            parts.append(f"[{color}]{card}[/]")
        return " ".join(parts)
