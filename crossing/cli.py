"""
Crossing CLI - Command-line interface for the engine.

Usage:
    crossing play [--monsters N] [--humans N] [--capacity N]   Play in the terminal
    crossing serve [--host HOST] [--port PORT]                  Run the REST API

In-game commands:
    b <avatar>   board (e.g. "b h0" or "b human-0")
    d <avatar>   disembark
    s            sail
    r            restart
    q            quit
"""

import argparse
import sys
import time

from pydantic import ValidationError

from .config import GameConfig, VOYAGE_SECONDS, field_errors
from .engine_core.state import Location
from .session import SessionManager, VoyageClock

HELP_TEXT = "Commands: b <avatar> board, d <avatar> disembark, s sail, r restart, q quit"


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Crossing - River crossing puzzle",
        prog="crossing",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--monsters", type=int, default=3, help="Number of monsters")
    play_parser.add_argument("--humans", type=int, default=3, help="Number of humans")
    play_parser.add_argument("--capacity", type=int, default=2, help="Boat capacity")
    play_parser.add_argument(
        "--voyage-seconds", type=float, default=VOYAGE_SECONDS,
        help="Pause while the boat crosses",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.command == "play":
        sys.exit(cmd_play(args))
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args, read=input, write=print, sleep=time.sleep) -> int:
    """Run the terminal game loop. Returns an exit code."""
    try:
        config = GameConfig(
            num_monsters=args.monsters,
            num_humans=args.humans,
            boat_capacity=args.capacity,
        )
    except ValidationError as e:
        for name, message in field_errors(e).items():
            write(f"Error: {name} {message}")
        return 2

    manager = SessionManager(clock_factory=lambda: VoyageClock(duration=args.voyage_seconds))
    session = manager.create_session(config)

    write(HELP_TEXT)
    write(render(session.engine))

    while True:
        try:
            line = read("> ").strip()
        except EOFError:
            break
        if not line:
            continue

        verb, _, arg = line.partition(" ")
        verb = verb.lower()
        engine = session.engine

        if verb == "q":
            break
        if verb == "r":
            session.restart()
            write("New game.")
            write(render(session.engine))
            continue

        if verb == "b":
            result = engine.board_boat(expand_avatar_id(arg.strip()))
        elif verb == "d":
            result = engine.disembark(expand_avatar_id(arg.strip()))
        elif verb == "s":
            result = engine.launch()
            if result.success:
                write("The boat is crossing the river...")
                sleep(session.clock.duration)
                result = session.complete_voyage()
        else:
            write(HELP_TEXT)
            continue

        if not result.success:
            write(result.error)
            continue

        write(render(session.engine))
        if result.outcome is not None:
            write(result.outcome.message)
            if result.outcome.feast is not None:
                for predator, prey in result.outcome.feast.targets.items():
                    write(f"  {predator} eats {prey}")
            write("Type r to play again or q to quit.")

    manager.end_session(session.session_id)
    return 0


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("crossing.api.app:app", host=args.host, port=args.port)


def expand_avatar_id(token: str) -> str:
    """Accept short ids: "h0" -> "human-0", "m2" -> "monster-2"."""
    token = token.lower()
    if len(token) > 1 and token[1:].isdigit():
        if token[0] == "h":
            return f"human-{token[1:]}"
        if token[0] == "m":
            return f"monster-{token[1:]}"
    return token


def short_id(avatar_id: str) -> str:
    kind, _, index = avatar_id.partition("-")
    return f"{kind[0]}{index}"


def render(engine) -> str:
    """One-screen text picture of the river."""
    snap = engine.snapshot()
    boat = "[" + " ".join(short_id(a) for a in snap.boat) + "]"
    origin = " ".join(short_id(a) for a in snap.origin) or "-"
    destination = " ".join(short_id(a) for a in snap.destination) or "-"

    if snap.boat_location == Location.ORIGIN:
        river = f"{boat} ~~~~~~~~"
    elif snap.boat_location == Location.DESTINATION:
        river = f"~~~~~~~~ {boat}"
    else:
        river = f"~~~~ {boat} ~~~~"

    return f"{origin} | {river} | {destination}    trips: {snap.trip_count}"


if __name__ == "__main__":
    main()
