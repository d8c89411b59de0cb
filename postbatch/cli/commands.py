from __future__ import annotations

import argparse
import sys

from postbatch.config import BatchConfig, ConfigError, load_batch
from postbatch.engine import EngineError, FetchOutcome, FetchSuccess, get_engine
from postbatch.request import FetchRequest
from postbatch.transport import HttpTransport

from .args import build_parser
from .log import configure_logging


def main() -> None:
    sys.exit(run_cli())


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        configure_logging(args.log_level)

        match args.command:
            case "run":
                return cmd_run(args)
            case "list":
                return cmd_list(args)
            case _:
                return 2

    except (ConfigError, EngineError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    except KeyboardInterrupt:
        return 130


def cmd_run(args: argparse.Namespace) -> int:
    batch = load_batch(args.config)
    outcomes = _run_with(batch, args)
    _print_outcomes(batch.requests, outcomes, show_body=args.show_body)
    return 0 if all(outcome.ok for outcome in outcomes.values()) else 1


def cmd_list(args: argparse.Namespace) -> int:
    batch = load_batch(args.config)
    for index, request in enumerate(batch):
        print(f"{index} {request}")
    return 0


def _run_with(
    batch: BatchConfig, args: argparse.Namespace
) -> dict[FetchRequest, FetchOutcome]:
    selector = args.engine or batch.engine
    parallelism = args.parallelism if args.parallelism is not None else batch.parallelism

    with HttpTransport(batch.timeouts, charset=batch.charset) as transport:
        engine = get_engine(selector, transport, parallelism=parallelism)
        return engine.fetch_outcomes(batch.requests)


def _print_outcomes(
    requests: list[FetchRequest],
    outcomes: dict[FetchRequest, FetchOutcome],
    *,
    show_body: bool,
) -> None:
    for index, request in enumerate(requests):
        outcome = outcomes.get(request)
        if outcome is None:
            print(f"SKIP {index} {request}")
        elif isinstance(outcome, FetchSuccess):
            print(
                f"OK {index} {request}, {outcome.duration_s:.3f}s, {len(outcome.text)} chars"
            )
            if show_body:
                print(outcome.text)
        else:
            print(f"FAIL {index} {request}, {outcome.duration_s:.3f}s, {outcome.reason}")
