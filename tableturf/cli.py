"""
Tableturf CLI - Command-line interface for the engine.

Usage:
    tableturf play [--games N] [--seed S] [--policies A B]   Play matches between policies
    tableturf play --agent-cmd CMD CMD                       Play matches between agent programs
    tableturf replay <record_file> [--final-only]            Print a recorded match
    tableturf validate-catalog <catalog_file>                Check a JSON card catalog
    tableturf bot [--policy NAME] [--seed S]                 Run a stdio agent
    tableturf serve [--host H] [--port P]                    Start the HTTP API
"""

import argparse
import logging
import sys

from . import config
from .engine_core.errors import TableturfError
from .logger import setup_logging

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    from .bots.policy import POLICIES

    parser = argparse.ArgumentParser(
        description="Tableturf - turn-based territory card game engine",
        prog="tableturf",
    )
    parser.add_argument("--log-level", default=config.TABLETURF_LOG_LEVEL, help="Logging level")
    parser.add_argument(
        "--catalog",
        default=config.TABLETURF_CATALOG,
        help="JSON card catalog (built-in starter set if omitted)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play matches between policies")
    play_parser.add_argument("--games", type=int, default=1, help="Number of games")
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    play_parser.add_argument(
        "--policies", nargs="+", default=["random", "random"], choices=sorted(POLICIES),
        help="One policy per player",
    )
    play_parser.add_argument(
        "--agent-cmd", nargs="+", metavar="CMD", default=None,
        help="One agent command line per player, run over the stdio protocol (replaces --policies)",
    )
    play_parser.add_argument(
        "--agent-timeout", type=float, default=config.AGENT_TIMEOUT,
        help="Seconds an agent gets for each answer",
    )
    play_parser.add_argument("--record", "-o", help="Write the match record (single game only)")
    play_parser.add_argument("--show", action="store_true", help="Print the final board")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Print a recorded match")
    replay_parser.add_argument("record_file", help="Path to match record JSON")
    replay_parser.add_argument("--final-only", action="store_true", help="Print only the last board")

    # Validate command
    validate_parser = subparsers.add_parser("validate-catalog", help="Validate a JSON card catalog")
    validate_parser.add_argument("catalog_file", help="Path to catalog JSON")

    # Bot command
    bot_parser = subparsers.add_parser("bot", help="Run a policy as a stdio agent")
    bot_parser.add_argument("--policy", choices=sorted(POLICIES), default="random")
    bot_parser.add_argument("--seed", type=int, default=None)
    bot_parser.add_argument("--name", default=None, help="Name announced to the judge")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    if args.command == "bot":
        # stdout carries the protocol
        setup_logging(args.log_level, stream=sys.stderr)
    else:
        setup_logging(args.log_level)

    commands = {
        "play": cmd_play,
        "replay": cmd_replay,
        "validate-catalog": cmd_validate_catalog,
        "bot": cmd_bot,
        "serve": cmd_serve,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    try:
        code = command(args)
    except (TableturfError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)
    if code:
        sys.exit(code)


def cmd_play(args):
    """Play matches between built-in policies or agent programs."""
    from .bots.policy import create_policy
    from .catalog import load_catalog, straight_street
    from .render import render_text
    from .session import MatchRunner, ProcessAgent, run_series, save_record

    catalog = load_catalog(args.catalog)
    field_shape = straight_street()
    env = config.DEFAULT_ENVIRONMENT
    if args.agent_cmd:
        if len(args.agent_cmd) != env.player_size:
            print(f"Error: expected {env.player_size} agent commands, got {len(args.agent_cmd)}")
            return 1
        policies = [ProcessAgent(command, timeout=args.agent_timeout) for command in args.agent_cmd]
    else:
        if len(args.policies) != env.player_size:
            print(f"Error: expected {env.player_size} policies, got {len(args.policies)}")
            return 1
        policies = [
            create_policy(name, seed=None if args.seed is None else args.seed + i)
            for i, name in enumerate(args.policies)
        ]

    if args.games > 1:
        series = run_series(env, catalog, field_shape, policies, args.games, seed=args.seed)
        print(f"Games: {series.games}")
        for player_id, wins in enumerate(series.wins):
            print(f"  {policies[player_id].get_name()} (player {player_id}): {wins} wins")
        print(f"  Draws: {series.draws}")
        if series.forfeits:
            print(f"  Forfeits: {series.forfeits}")
        return 0

    runner = MatchRunner(env, catalog, field_shape, policies, seed=args.seed)
    result = runner.play()
    if args.show:
        print(render_text(result.final_state, catalog))
    print(f"Scores: {' - '.join(str(s) for s in result.scores)}")
    if result.forfeited_by:
        print(f"Forfeited by: {', '.join(str(p) for p in result.forfeited_by)}")
    if result.winner is None:
        print("Result: draw")
    else:
        print(f"Winner: player {result.winner} ({runner.names[result.winner]})")
    if args.record:
        save_record(result.record, args.record)
        print(f"Record written to {args.record}")
    return 0


def cmd_replay(args):
    """Print every board of a recorded match."""
    from .render import render_text
    from .session import load_record, replay

    record = load_record(args.record_file)
    result = replay(record)
    catalog = record.build_catalog()

    states = result.snapshots[-1:] if args.final_only else result.snapshots
    for state in states:
        print(render_text(state, catalog))
        print()

    print(f"Scores: {' - '.join(str(s) for s in result.scores)}")
    if not result.finished:
        print("Result: unfinished")
    elif result.winner is None:
        print("Result: draw")
    else:
        print(f"Winner: player {result.winner}")
    return 0


def cmd_validate_catalog(args):
    """Validate a JSON card catalog."""
    from .catalog import load_catalog_file

    print(f"Validating: {args.catalog_file}")
    cards = load_catalog_file(args.catalog_file)
    for card in cards:
        print(f"  {card.id:>4}  power {card.power:>2}  cost {card.cost:>2}  {card.name}")
    print(f"OK: {len(cards)} cards")
    return 0


def cmd_bot(args):
    """Run a policy over stdin/stdout."""
    from .bots.adapter_stdio import AdapterInputError, StdioAgent
    from .bots.policy import create_policy

    agent = StdioAgent(create_policy(args.policy, seed=args.seed), name=args.name)
    try:
        agent.run()
    except AdapterInputError as e:
        logger.error("%s", e)
        return 1
    return 0


def cmd_serve(args):
    """Start the HTTP API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install 'tableturf[server]'")
        return 1

    from .api.app import create_app
    from .api.service import APIService
    from .catalog import load_catalog

    service = APIService(catalog=load_catalog(args.catalog))
    logger.info("serving on %s:%d (%s)", args.host, args.port, config.TABLETURF_ENV)
    uvicorn.run(create_app(service), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    main()
