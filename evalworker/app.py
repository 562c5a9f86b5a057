import argparse
import asyncio
import json
from pathlib import Path

from . import __version__
from .config import ConfigError, LOG_LEVELS, WorkerSettings, load_settings
from .env import load_env
from .handler import build_payload
from .logger import get_logger
from .scoring import SCORING_STRATEGIES, get_scorer
from .worker import serve


def _settings(args: argparse.Namespace) -> WorkerSettings:
    try:
        return load_settings(scoring=args.scoring, log_level=args.log_level)
    except ConfigError as e:
        raise SystemExit(f"Configuration error: {e}")


def cmd_run(args: argparse.Namespace) -> None:
    settings = _settings(args)
    logger = get_logger(level=settings.log_level, log_dir=Path(settings.log_dir))
    try:
        asyncio.run(serve(settings, logger))
    except ConfigError as e:
        raise SystemExit(f"Configuration error: {e}")


def cmd_score(args: argparse.Namespace) -> None:
    settings = _settings(args)
    if args.count < 1:
        raise SystemExit("--count must be at least 1")
    scorer = get_scorer(settings.scoring, fixed_value=settings.fixed_score, seed=settings.random_seed)
    for _ in range(args.count):
        print(json.dumps(build_payload(scorer())))


def cmd_config(args: argparse.Namespace) -> None:
    settings = _settings(args)
    print(json.dumps(settings.masked(), indent=2))


def main(argv=None):
    # Load .env if present (ZEEBE_ADDRESS, ZEEBE_CLIENT_ID, etc.)
    load_env()
    parser = argparse.ArgumentParser(prog="evalworker", description="Zeebe worker for the automated-evaluation task")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--scoring", choices=SCORING_STRATEGIES, help="Score strategy (overrides EVAL_SCORING)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Console log level (overrides LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command")
    run = subparsers.add_parser("run", help="Connect to Zeebe and handle automated-evaluation jobs (default)")
    run.set_defaults(func=cmd_run)

    sc = subparsers.add_parser("score", help="Print completion payloads without connecting to a broker")
    sc.add_argument("--count", type=int, default=1, help="Number of payloads to print (default: 1)")
    sc.set_defaults(func=cmd_score)

    cfg = subparsers.add_parser("config", help="Show the resolved settings with secrets masked")
    cfg.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    func = getattr(args, "func", cmd_run)
    func(args)


if __name__ == "__main__":
    main()
