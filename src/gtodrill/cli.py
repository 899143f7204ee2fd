from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .core.config import SPOT_TYPES, TrainerConfig
from .core.results import SolutionFormatError
from .data.solution_loader import DEMO_SOLUTION, SolutionRepository, load_solution_file
from .features.session import SessionManager
from .ui.presenters import RichPresenter


def _add_spot_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "solution",
        nargs="?",
        default=str(DEMO_SOLUTION),
        help="Solution JSON file (defaults to the bundled demo)",
    )
    p.add_argument("--type", dest="spot_type", choices=SPOT_TYPES, default=None, help="Spot type (random if omitted)")
    # If omitted, runs with a random seed for variety. Pass an int to reproduce.
    p.add_argument("--seed", type=int, default=None, help="RNG seed (random if omitted)")
    p.add_argument("--answer", type=int, default=None, metavar="INDEX", help="Grade this action index")
    p.add_argument("--attempts", type=int, default=None, help="Generation attempts before giving up")
    p.add_argument("--bounty-dollars", action="store_true", help="Show bounties in dollars instead of multipliers")
    p.add_argument("--no-color", action="store_true", help="Disable colored output (default is colored)")


def _run_spot(args: argparse.Namespace) -> int:
    presenter = RichPresenter(no_color=args.no_color)
    try:
        solution = load_solution_file(args.solution)
    except (OSError, SolutionFormatError) as exc:
        presenter.show_error(f"Could not load {args.solution}: {exc}")
        return 2

    config = TrainerConfig.from_env().with_overrides(
        spot_types=(args.spot_type,) if args.spot_type else None,
        seed=args.seed,
        max_attempts=args.attempts,
        bounty_in_dollars=True if args.bounty_dollars else None,
    )
    manager = SessionManager(SolutionRepository([solution]), defaults=config)
    session_id = manager.create_session()
    response = asyncio.run(manager.generate_spot(session_id))
    if not response.ok or response.spot is None:
        presenter.show_error(f"No spot generated: {response.error}")
        return 1
    presenter.show_spot(response.spot)

    if args.answer is not None:
        try:
            result = manager.answer(session_id, args.answer)
        except ValueError as exc:
            presenter.show_error(str(exc))
            return 2
        presenter.show_feedback(result)
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="gto-drill", description="GTO preflop spot trainer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    spot = sub.add_parser("spot", help="Generate one training spot from a solution file")
    _add_spot_args(spot)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "serve":
        from .web.app import main as serve_main

        serve_main(args.host, args.port)
        return
    if args.command != "spot":
        parser.print_help()
        raise SystemExit(2)
    raise SystemExit(_run_spot(args))


if __name__ == "__main__":
    main()
