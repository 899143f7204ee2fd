"""Node store adapter.

Solutions are served partially loaded; walkers ask a :class:`NodeStore` for the
node ids they are missing and continue on the snapshot it returns.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from ..core.models import Node, Solution

__all__ = ["InMemoryNodeStore", "NodeStore", "ensure_node"]

logger = logging.getLogger(__name__)


@runtime_checkable
class NodeStore(Protocol):
    async def load_nodes(self, solution: Solution, node_ids: Sequence[int]) -> Solution | None:
        """Return a snapshot extended with ``node_ids``, or ``None`` on failure.

        Must be idempotent for ids the snapshot already holds and must never
        drop nodes from the input snapshot.
        """
        ...


class InMemoryNodeStore:
    """Serves nodes from a full in-memory table, keyed by solution id."""

    def __init__(self, tables: Mapping[str, Mapping[int, Node]] | None = None) -> None:
        self._tables: dict[str, dict[int, Node]] = {key: dict(value) for key, value in (tables or {}).items()}
        self.requests: list[tuple[str, tuple[int, ...]]] = []

    async def load_nodes(self, solution: Solution, node_ids: Sequence[int]) -> Solution | None:
        self.requests.append((solution.solution_id, tuple(node_ids)))
        table = self._tables.get(solution.solution_id)
        if table is None:
            logger.warning("No node table for solution %s", solution.solution_id)
            return None
        wanted = solution.missing(node_ids)
        found = {node_id: table[node_id] for node_id in wanted if node_id in table}
        if len(found) != len(wanted):
            absent = sorted(set(wanted) - set(found))
            logger.warning("Solution %s has no nodes %s", solution.solution_id, absent)
            return None
        if not found:
            return solution
        return solution.with_nodes(found)


async def ensure_node(solution: Solution, node_id: int, store: NodeStore | None) -> Solution | None:
    """Return a snapshot holding ``node_id``, loading it when needed.

    ``None`` means the node could not be made available.
    """

    if solution.has_node(node_id):
        return solution
    if store is None:
        logger.debug("Node %d missing and no store configured", node_id)
        return None
    logger.debug("Loading node %d for solution %s", node_id, solution.solution_id)
    loaded = await store.load_nodes(solution, [node_id])
    if loaded is None or not loaded.has_node(node_id):
        logger.warning("Failed to load node %d for solution %s", node_id, solution.solution_id)
        return None
    return loaded
