from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from ..core.config import TrainerConfig
from ..data.solution_loader import DEMO_SOLUTION, SolutionRepository
from ..features.session import SessionManager, create_session_router
from ..features.session.concurrency import shutdown_executor

_SOLUTIONS_ENV = "GTODRILL_SOLUTIONS"

logger = logging.getLogger(__name__)


def _solution_paths(raw: str | None) -> list[Path]:
    if not raw:
        return [DEMO_SOLUTION]
    paths: list[Path] = []
    for entry in raw.split(os.pathsep):
        entry = entry.strip()
        if not entry:
            continue
        path = Path(entry)
        if path.is_dir():
            paths.extend(sorted(path.glob("*.json")))
        else:
            paths.append(path)
    return paths


def create_app(
    repository: SolutionRepository | None = None,
    *,
    config: TrainerConfig | None = None,
    solution_paths: Iterable[Path] | None = None,
) -> FastAPI:
    if repository is None:
        paths = list(solution_paths) if solution_paths is not None else _solution_paths(os.getenv(_SOLUTIONS_ENV))
        repository = SolutionRepository.from_paths(paths)
    logger.info("Serving %d solution(s)", len(repository))
    manager = SessionManager(repository, defaults=config or TrainerConfig.from_env())

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        shutdown_executor()

    app = FastAPI(title="GTO Drill", lifespan=lifespan)
    app.state.manager = manager

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(create_session_router(manager))
    return app


def main(host: str | None = None, port: int | None = None) -> None:  # pragma: no cover - runner
    import uvicorn

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    bind = host or os.environ.get("BIND", "0.0.0.0")
    bind_port = port or int(os.environ.get("PORT", "8000"))
    uvicorn.run(create_app(), host=bind, port=bind_port)


if __name__ == "__main__":  # pragma: no cover
    main()
