from __future__ import annotations

from dataclasses import dataclass

from .models import Action, ActionKind

ALL_IN_STACK_FRACTION = 0.5

STREET_NAMES = ("Preflop", "Flop", "Turn", "River")


@dataclass(frozen=True)
class ActionLabel:
    name: str
    amount: float | None = None

    def text(self, big_blind: float) -> str:
        """``"Call 1.0 BB"``, ``"Allin 25.0 BB"``, ``"Raise 2.0 BB"`` or the bare name."""

        if self.name in ("Call", "Allin") and self.amount:
            return f"{self.name} {format_bb(self.amount, big_blind)} BB"
        if self.name.startswith("Raise"):
            return f"{self.name} BB"
        return self.name


def street_name(street: int) -> str:
    if 0 <= street < len(STREET_NAMES):
        return STREET_NAMES[street]
    return STREET_NAMES[0]


def is_all_in(action: Action, player_stack: float) -> bool:
    """A raise committing more than half the actor's stack counts as a shove."""

    return action.kind is ActionKind.RAISE and action.amount > player_stack * ALL_IN_STACK_FRACTION


def format_bb(amount: float, big_blind: float) -> str:
    if big_blind <= 0:
        return f"{amount:g}"
    return f"{amount / big_blind:.1f}"


def describe_action(action: Action, big_blind: float, player_stack: float) -> ActionLabel:
    if action.kind is ActionKind.FOLD:
        return ActionLabel("Fold")
    if action.kind is ActionKind.CALL:
        return ActionLabel("Call", action.amount)
    if action.kind is ActionKind.CHECK:
        return ActionLabel("Check")
    if is_all_in(action, player_stack):
        return ActionLabel("Allin", action.amount)
    return ActionLabel(f"Raise {format_bb(action.amount, big_blind)}", action.amount)


def action_key(action: Action, big_blind: float) -> str:
    """Short stable identifier for an action, e.g. ``R2.0`` or ``F``."""

    if action.kind is ActionKind.RAISE:
        return f"R{format_bb(action.amount, big_blind)}"
    return action.kind.value


def _fmt_pct(value: float) -> str:
    if value >= 100 or value == 0:
        return f"{value:.0f}%"
    if value < 1:
        return f"{value:.2f}%"
    return f"{value:.1f}%"


def format_frequency(freq: float) -> str:
    return _fmt_pct(max(0.0, freq) * 100.0)
