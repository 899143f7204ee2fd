"""Spot generators.

Each generator picks a hero seat and the seats whose actions lead to the hero's
decision, returning a :class:`~gtodrill.core.results.SpotResult`.  Generators
never raise for an unusable tree; they report the reason in ``error``.
"""

from __future__ import annotations

import logging
import random
from enum import Enum

from ..core.config import TrainerConfig
from ..core.formatting import describe_action
from ..core.models import (
    ROOT_NODE_ID,
    Solution,
    VillainAction,
    is_valid_any_solution,
    is_valid_rfi_solution,
    is_valid_vs_multiway_solution,
    is_valid_vs_open_solution,
    is_valid_vs_shove_solution,
)
from ..core.results import Reached, SpotResult
from .cards import ComboCatalog, all_combos, flatten_combos, hand_name_from_combo
from .navigation import SeatRole, drive_until_player, find_all_in, find_fold, find_raise_near, fold_until_player
from .seating import facing_hero_seats, multiway_hero_seats, position_name, rfi_hero_seats
from .store import NodeStore, ensure_node

__all__ = [
    "SpotType",
    "generate_any_spot",
    "generate_rfi_spot",
    "generate_spot",
    "generate_vs_multiway_spot",
    "generate_vs_open_spot",
    "generate_vs_shove_spot",
    "is_eligible",
    "sample_shover_count",
    "spot_roles",
]

logger = logging.getLogger(__name__)


class SpotType(str, Enum):
    RFI = "RFI"
    VS_OPEN = "vs Open"
    VS_SHOVE = "vs Shove"
    VS_MULTIWAY = "vs Multiway"
    ANY = "Any"


def is_eligible(spot_type: SpotType, solution: Solution, config: TrainerConfig | None = None) -> bool:
    config = config or TrainerConfig()
    if spot_type is SpotType.RFI:
        return is_valid_rfi_solution(solution)
    if spot_type is SpotType.VS_OPEN:
        return is_valid_vs_open_solution(solution, config.min_vs_open_stack_bb)
    if spot_type is SpotType.VS_SHOVE:
        return is_valid_vs_shove_solution(solution)
    if spot_type is SpotType.VS_MULTIWAY:
        return is_valid_vs_multiway_solution(solution)
    return is_valid_any_solution(solution)


def generate_rfi_spot(solution: Solution, rng: random.Random) -> SpotResult:
    seats = rfi_hero_seats(solution.num_players)
    if not seats:
        return SpotResult.failure(SpotType.RFI.value, -1, solution, "Not enough players for RFI")
    hero = rng.choice(seats)
    logger.info(
        "Generated RFI spot: hero=%s solution=%s",
        position_name(hero, solution.num_players),
        solution.solution_id,
    )
    return SpotResult(
        spot_type=SpotType.RFI.value,
        success=True,
        hero_position=hero,
        solution=solution,
    )


async def _find_facing_spot(
    spot_type: SpotType,
    solution: Solution,
    rng: random.Random,
    store: NodeStore | None,
    config: TrainerConfig,
) -> SpotResult:
    seats = facing_hero_seats(solution.num_players)
    if not seats:
        return SpotResult.failure(spot_type.value, -1, solution, "Not enough players")
    hero = rng.choice(seats)
    candidates = list(range(hero))
    rng.shuffle(candidates)

    for candidate in candidates:
        walk = await fold_until_player(solution, candidate, store=store, max_steps=config.walk_steps)
        if not isinstance(walk, Reached):
            logger.debug("Candidate seat %d unreachable: %s", candidate, walk)
            continue
        node = walk.solution.node(walk.node_id)
        assert node is not None
        if spot_type is SpotType.VS_OPEN:
            index = find_raise_near(
                node.actions,
                config.open_size_bb,
                walk.solution.big_blind,
                config.raise_tolerance_bb,
            )
            qualifies = index is not None and node.aggregate_frequency(index) > 0
        else:
            index = find_all_in(node.actions, walk.solution.stack(candidate))
            qualifies = index is not None and node.aggregate_frequency(index) > config.min_shove_frequency
        if not qualifies:
            logger.debug("Candidate seat %d has no qualifying action at node %d", candidate, walk.node_id)
            continue
        logger.info(
            "Generated %s spot: hero=%d villain=%d solution=%s",
            spot_type.value,
            hero,
            candidate,
            solution.solution_id,
        )
        return SpotResult(
            spot_type=spot_type.value,
            success=True,
            hero_position=hero,
            solution=walk.solution,
            raiser_position=candidate,
        )

    error = "No valid raiser found" if spot_type is SpotType.VS_OPEN else "No valid shover found"
    return SpotResult.failure(spot_type.value, hero, solution, error)


async def generate_vs_open_spot(
    solution: Solution,
    rng: random.Random,
    *,
    store: NodeStore | None = None,
    config: TrainerConfig | None = None,
) -> SpotResult:
    """Hero faces a single open to ``config.open_size_bb`` with everyone else folded."""

    return await _find_facing_spot(SpotType.VS_OPEN, solution, rng, store, config or TrainerConfig())


async def generate_vs_shove_spot(
    solution: Solution,
    rng: random.Random,
    *,
    store: NodeStore | None = None,
    config: TrainerConfig | None = None,
) -> SpotResult:
    """Hero faces a single all-in with everyone else folded."""

    return await _find_facing_spot(SpotType.VS_SHOVE, solution, rng, store, config or TrainerConfig())


# max shovers -> cumulative (threshold, count) table
_SHOVER_COUNTS: dict[int, tuple[tuple[float, int], ...]] = {
    5: ((0.70, 2), (0.85, 3), (0.95, 4), (1.0, 5)),
    4: ((0.80, 2), (0.95, 3), (1.0, 4)),
    3: ((0.80, 2), (1.0, 3)),
    2: ((1.0, 2),),
}


def sample_shover_count(max_shovers: int, rng: random.Random) -> int:
    if max_shovers < 2:
        return max_shovers
    table = _SHOVER_COUNTS[min(max_shovers, 5)]
    roll = rng.random()
    for threshold, count in table:
        if roll < threshold:
            return count
    return table[-1][1]


async def generate_vs_multiway_spot(
    solution: Solution,
    rng: random.Random,
    *,
    store: NodeStore | None = None,
    config: TrainerConfig | None = None,
) -> SpotResult:
    config = config or TrainerConfig()
    spot = SpotType.VS_MULTIWAY.value
    hero = rng.choice(multiway_hero_seats(solution.num_players))
    if hero < 2:
        return SpotResult.failure(spot, hero, solution, "Not enough positions for multiway shove")

    count = sample_shover_count(hero, rng)
    shovers = tuple(sorted(rng.sample(range(hero), count)))
    roles = {seat: SeatRole.SHOVE for seat in shovers}

    snapshot = solution
    for shover in shovers:
        walk = await drive_until_player(snapshot, shover, roles, store=store, max_steps=config.walk_steps)
        if not isinstance(walk, Reached):
            logger.debug("Multiway shover %d unreachable: %s", shover, walk)
            return SpotResult.failure(spot, hero, solution, "Invalid shover configuration")
        node = walk.solution.node(walk.node_id)
        assert node is not None
        if find_all_in(node.actions, walk.solution.stack(shover)) is None:
            logger.debug("Multiway shover %d has no all-in at node %d", shover, walk.node_id)
            return SpotResult.failure(spot, hero, solution, "Invalid shover configuration")
        snapshot = walk.solution

    logger.info("Generated multiway spot: hero=%d shovers=%s solution=%s", hero, shovers, solution.solution_id)
    return SpotResult(
        spot_type=spot,
        success=True,
        hero_position=hero,
        solution=snapshot,
        shover_positions=shovers,
    )


async def generate_any_spot(
    solution: Solution,
    hero_position: int,
    rng: random.Random,
    *,
    combos: ComboCatalog | None = None,
    store: NodeStore | None = None,
    max_steps: int = 50,
) -> SpotResult:
    """Play villains from the root with random combos until the hero is to act.

    Each villain takes the action its sampled hand plays most often; hands
    the node has no strategy for fold.
    """

    spot = SpotType.ANY.value
    flat = flatten_combos(combos if combos is not None else all_combos())
    if not flat:
        return SpotResult.failure(spot, hero_position, solution, "Combo catalog is empty")

    snapshot = solution
    node = snapshot.node(ROOT_NODE_ID)
    if node is None:
        return SpotResult.failure(spot, hero_position, solution, "Initial node not found")
    big_blind = solution.big_blind
    villain_actions: list[VillainAction] = []

    def failed(error: str, node_id: int | None) -> SpotResult:
        return SpotResult(
            spot_type=spot,
            success=False,
            hero_position=hero_position,
            solution=snapshot,
            error=error,
            node_id=node_id,
            villain_actions=tuple(villain_actions),
        )

    for step in range(max_steps + 1):
        if node.player == hero_position:
            logger.info(
                "Generated Any spot: hero=%d node=%d villains=%d solution=%s",
                hero_position,
                node.node_id,
                len(villain_actions),
                solution.solution_id,
            )
            return SpotResult(
                spot_type=spot,
                success=True,
                hero_position=hero_position,
                solution=snapshot,
                node_id=node.node_id,
                villain_actions=tuple(villain_actions),
            )
        if step == max_steps:
            break

        villain = node.player
        combo = rng.choice(flat)
        data = node.hand(hand_name_from_combo(combo))
        best_index = -1
        best_freq = 0.0
        if data is not None:
            for index, freq in enumerate(data.played):
                if freq > best_freq:
                    best_freq = freq
                    best_index = index

        if best_index < 0:
            fold = find_fold(node.actions)
            if fold is None or node.actions[fold].is_terminal:
                return failed("No fold action available", node.node_id)
            villain_actions.append(VillainAction(position=villain, action="Fold", combo=combo))
            next_id = node.actions[fold].node
        else:
            action = node.actions[best_index]
            label = describe_action(action, big_blind, snapshot.stack(villain))
            villain_actions.append(
                VillainAction(position=villain, action=label.name, amount=label.amount, combo=combo)
            )
            next_id = action.node

        if next_id is None or next_id == ROOT_NODE_ID:
            return failed("Reached terminal node before hero", ROOT_NODE_ID)
        loaded = await ensure_node(snapshot, next_id, store)
        if loaded is None:
            return failed(f"Failed to load node {next_id}", next_id)
        snapshot = loaded
        node = snapshot.node(next_id)
        assert node is not None

    logger.warning("Any walk hit the %d step limit in solution %s", max_steps, solution.solution_id)
    return failed("Max iterations reached", node.node_id)


def spot_roles(result: SpotResult) -> dict[int, SeatRole]:
    """Seat roles that lead from the root to the hero for a generated spot."""

    if result.spot_type == SpotType.VS_OPEN.value and result.raiser_position is not None:
        return {result.raiser_position: SeatRole.OPEN}
    if result.spot_type == SpotType.VS_SHOVE.value and result.raiser_position is not None:
        return {result.raiser_position: SeatRole.SHOVE}
    if result.spot_type == SpotType.VS_MULTIWAY.value:
        return {seat: SeatRole.SHOVE for seat in result.shover_positions}
    return {}


async def generate_spot(
    spot_type: SpotType | str,
    solution: Solution,
    rng: random.Random,
    *,
    store: NodeStore | None = None,
    config: TrainerConfig | None = None,
    combos: ComboCatalog | None = None,
    hero_position: int | None = None,
) -> SpotResult:
    """Check eligibility and run the generator for ``spot_type``."""

    spot_type = SpotType(spot_type)
    config = config or TrainerConfig()
    if not is_eligible(spot_type, solution, config):
        return SpotResult.failure(spot_type.value, -1, solution, f"Solution not eligible for {spot_type.value}")
    if spot_type is SpotType.RFI:
        return generate_rfi_spot(solution, rng)
    if spot_type is SpotType.VS_OPEN:
        return await generate_vs_open_spot(solution, rng, store=store, config=config)
    if spot_type is SpotType.VS_SHOVE:
        return await generate_vs_shove_spot(solution, rng, store=store, config=config)
    if spot_type is SpotType.VS_MULTIWAY:
        return await generate_vs_multiway_spot(solution, rng, store=store, config=config)
    hero = hero_position if hero_position is not None else rng.randrange(solution.num_players)
    return await generate_any_spot(
        solution,
        hero,
        rng,
        combos=combos,
        store=store,
        max_steps=config.any_walk_steps,
    )
