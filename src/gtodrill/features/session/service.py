from __future__ import annotations

import logging
import random
import secrets
import string
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from ...core.config import TrainerConfig
from ...core.formatting import action_key, describe_action
from ...core.models import Node, Solution, VillainAction, format_bounty
from ...core.results import Reached, SpotResult
from ...core.scoring import (
    ActionEvaluation,
    LivesTracker,
    TrainerStats,
    evaluate_action,
    summarize_evaluations,
)
from ...data.solution_loader import SolutionRepository
from ...dynamic.cards import ComboCatalog, all_combos
from ...dynamic.hand_selection import select_random_combo, select_training_hands
from ...dynamic.history import HandHistory, build_hand_history
from ...dynamic.navigation import drive_until_player
from ...dynamic.seating import seat_label
from ...dynamic.spots import SpotType, generate_spot, is_eligible, spot_roles
from ...dynamic.store import NodeStore
from .concurrency import run_blocking
from .schemas import (
    ActionOptionPayload,
    AnswerResult,
    FeedbackPayload,
    HistoryEntryPayload,
    SpotPayload,
    SpotResponse,
    SummaryPayload,
    VillainActionPayload,
)

__all__ = ["SessionManager", "SessionState", "TrainingSpot"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingSpot:
    """A generated spot waiting for the trainee's answer."""

    result: SpotResult
    solution: Solution
    node: Node
    hand: str
    combo: str
    history: HandHistory

    @property
    def frequencies(self) -> tuple[float, ...]:
        data = self.node.hand(self.hand)
        if data is None:
            return tuple(0.0 for _ in self.node.actions)
        return tuple(data.played_at(index) for index in range(len(self.node.actions)))

    @property
    def evs(self) -> tuple[float, ...] | None:
        data = self.node.hand(self.hand)
        return None if data is None else data.evs


@dataclass
class SessionState:
    config: TrainerConfig
    rng: random.Random
    stats: TrainerStats = field(default_factory=TrainerStats)
    lives: LivesTracker = field(default_factory=LivesTracker)
    evaluations: list[ActionEvaluation] = field(default_factory=list)
    current: TrainingSpot | None = None


class SessionManager:
    """Owns training sessions over a shared set of solutions."""

    def __init__(
        self,
        repository: SolutionRepository,
        *,
        store: NodeStore | None = None,
        combos: ComboCatalog | None = None,
        defaults: TrainerConfig | None = None,
    ) -> None:
        self._repository = repository
        self._store: NodeStore = store if store is not None else repository
        self._combos = combos if combos is not None else all_combos()
        self._defaults = defaults or TrainerConfig()
        self._sessions: dict[str, SessionState] = {}
        self._lock = threading.Lock()

    @property
    def defaults(self) -> TrainerConfig:
        return self._defaults

    def create_session(self, config: TrainerConfig | None = None) -> str:
        config = config or self._defaults
        seed = config.seed if config.seed is not None else secrets.SystemRandom().getrandbits(32)
        config = config.with_overrides(seed=seed)
        state = SessionState(
            config=config,
            rng=random.Random(seed),
            lives=LivesTracker(starting=config.starting_lives),
        )
        session_id = _sid()
        with self._lock:
            self._sessions[session_id] = state
        logger.info("Created session", extra={"session_id": session_id, "seed": seed})
        return session_id

    async def create_session_async(self, config: TrainerConfig | None = None) -> str:
        return await run_blocking(self.create_session, config)

    def _candidate_solutions(self, config: TrainerConfig) -> list[Solution]:
        pool = self._repository.snapshots()
        if config.phases:
            pool = [solution for solution in pool if solution.tournament_phase in config.phases]
        if config.player_count is not None:
            pool = [solution for solution in pool if solution.num_players == config.player_count]
        return pool

    async def generate_spot(self, session_id: str) -> SpotResponse:
        with self._lock:
            state = self._require_session(session_id)
            if state.lives.busted:
                raise ValueError("session is out of lives")
            config = state.config
            rng = state.rng

        pool = self._candidate_solutions(config)
        if not pool:
            return SpotResponse(ok=False, error="No solutions match the session filters")

        last_error = "No spot generated"
        for attempt in range(1, config.max_attempts + 1):
            spot_type = SpotType(rng.choice(config.spot_types))
            eligible = [solution for solution in pool if is_eligible(spot_type, solution, config)]
            if not eligible:
                last_error = f"No solution eligible for {spot_type.value}"
                logger.debug("%s", last_error, extra={"session_id": session_id, "attempt": attempt})
                continue
            solution = rng.choice(eligible)
            spot = await self._build_spot(spot_type, solution, rng, config)
            if isinstance(spot, str):
                last_error = spot
                logger.debug(
                    "Spot attempt failed: %s",
                    spot,
                    extra={"session_id": session_id, "solution_id": solution.solution_id, "attempt": attempt},
                )
                continue
            with self._lock:
                state.current = spot
            return SpotResponse(ok=True, spot=_spot_payload(spot, config), attempts=attempt)

        logger.info(
            "Spot generation exhausted %d attempts: %s",
            config.max_attempts,
            last_error,
            extra={"session_id": session_id},
        )
        return SpotResponse(ok=False, error=last_error, attempts=config.max_attempts)

    async def _build_spot(
        self,
        spot_type: SpotType,
        solution: Solution,
        rng: random.Random,
        config: TrainerConfig,
    ) -> TrainingSpot | str:
        result = await generate_spot(
            spot_type,
            solution,
            rng,
            store=self._store,
            config=config,
            combos=self._combos,
        )
        if not result.success:
            return result.error or "Spot generation failed"

        if spot_type is SpotType.ANY and result.node_id is not None:
            snapshot, node_id = result.solution, result.node_id
        else:
            walk = await drive_until_player(
                result.solution,
                result.hero_position,
                spot_roles(result),
                store=self._store,
                max_steps=config.walk_steps,
                open_size_bb=config.open_size_bb,
                tolerance=config.raise_tolerance_bb,
            )
            if not isinstance(walk, Reached):
                return str(walk)
            snapshot, node_id = walk.solution, walk.node_id

        node = snapshot.node(node_id)
        if node is None:
            return f"Node {node_id} not loaded"
        hands = select_training_hands(node)
        if not hands:
            return f"No trainable hands at node {node_id}"
        hand = rng.choice(hands)
        combo = select_random_combo(hand, self._combos, rng)
        if combo is None:
            return f"No combo available for {hand}"
        return TrainingSpot(
            result=result,
            solution=snapshot,
            node=node,
            hand=hand,
            combo=combo,
            history=build_hand_history(snapshot, node_id),
        )

    def answer(self, session_id: str, action_index: int) -> AnswerResult:
        with self._lock:
            state = self._require_session(session_id)
            spot = state.current
            if spot is None:
                raise ValueError("no active spot; request one first")
            if not (0 <= action_index < len(spot.node.actions)):
                raise ValueError("action index out of range")
            frequencies = spot.frequencies
            evaluation = evaluate_action(action_index, frequencies, spot.evs)
            state.stats.record(evaluation, spot.solution.tournament_phase)
            state.lives.apply(evaluation)
            state.evaluations.append(evaluation)
            state.current = None
            best_index = max(range(len(frequencies)), key=frequencies.__getitem__)
            summary = _summary_payload(state)
        logger.debug(
            "Answered %s with action %d: %s",
            spot.hand,
            action_index,
            evaluation.quality.value,
            extra={"session_id": session_id},
        )
        return AnswerResult(
            feedback=FeedbackPayload(
                quality=evaluation.quality.value,
                message=evaluation.message,
                points=evaluation.points,
                lives_lost=evaluation.lives_lost,
                frequency=evaluation.frequency,
                max_frequency=evaluation.max_frequency,
                ev=evaluation.ev,
                counted_correct=evaluation.counted_correct,
                best_index=best_index,
            ),
            summary=summary,
        )

    async def answer_async(self, session_id: str, action_index: int) -> AnswerResult:
        return await run_blocking(self.answer, session_id, action_index)

    def summary(self, session_id: str) -> SummaryPayload:
        with self._lock:
            state = self._require_session(session_id)
            return _summary_payload(state)

    async def summary_async(self, session_id: str) -> SummaryPayload:
        return await run_blocking(self.summary, session_id)

    def current_spot(self, session_id: str) -> TrainingSpot | None:
        with self._lock:
            return self._require_session(session_id).current

    def _require_session(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            raise KeyError(f"session '{session_id}' not found")
        return state


def _sid(length: int = 10) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _villain_payloads(actions: Sequence[VillainAction]) -> list[VillainActionPayload] | None:
    if not actions:
        return None
    return [
        VillainActionPayload(position=action.position, action=action.action, amount=action.amount, combo=action.combo)
        for action in actions
    ]


def _bounty_labels(solution: Solution, in_dollars: bool) -> list[str] | None:
    if not solution.bounties:
        return None
    return [format_bounty(bounty, in_dollars, file_name=solution.file_name) for bounty in solution.bounties]


def _spot_payload(spot: TrainingSpot, config: TrainerConfig) -> SpotPayload:
    solution = spot.solution
    hero = spot.result.hero_position
    big_blind = solution.big_blind
    options = []
    for index, action in enumerate(spot.node.actions):
        label = describe_action(action, big_blind, solution.stack(hero))
        options.append(
            ActionOptionPayload(
                index=index,
                key=action_key(action, big_blind),
                label=label.text(big_blind),
                amount=label.amount,
            )
        )
    return SpotPayload(
        spot_type=spot.result.spot_type,
        solution_id=solution.solution_id,
        tournament_phase=solution.tournament_phase,
        hero_position=hero,
        hero_seat=seat_label(hero, solution.num_players),
        node_id=spot.node.node_id,
        hand=spot.hand,
        combo=spot.combo,
        stack_bb=solution.stack(hero) / big_blind if big_blind > 0 else 0.0,
        options=options,
        history=[
            HistoryEntryPayload(
                seat=entry.seat,
                position=entry.position,
                description=entry.description,
                street=entry.street,
                amount_bb=entry.amount_bb,
            )
            for entry in spot.history.entries
        ],
        raiser_position=spot.result.raiser_position,
        shover_positions=list(spot.result.shover_positions) or None,
        villain_actions=_villain_payloads(spot.result.villain_actions),
        bounties=_bounty_labels(solution, config.bounty_in_dollars),
    )


def _summary_payload(state: SessionState) -> SummaryPayload:
    stats = summarize_evaluations(state.evaluations)
    return SummaryPayload(
        questions=stats.questions,
        correct=stats.correct,
        points=stats.points,
        accuracy_pct=stats.accuracy_pct,
        lives_remaining=state.lives.remaining,
        busted=state.lives.busted,
        tiers=stats.tiers,
        final_table_spots=state.stats.reached_final_table,
        completed_tournaments=state.stats.completed_tournaments,
    )
