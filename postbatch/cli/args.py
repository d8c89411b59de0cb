from __future__ import annotations

import argparse

from postbatch.engine import EngineKind


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="postbatch")

    parser.add_argument(
        "--config",
        default="postbatch.yml",
        help="Path to batch file",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (logs go to stderr)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
    )

    # run
    run = subparsers.add_parser("run", help="Send every request of the batch")
    run.add_argument(
        "--engine",
        choices=[kind.name.lower() for kind in EngineKind],
        help="Override the engine set in the batch file",
    )
    run.add_argument(
        "--parallelism",
        type=int,
        help="Parallelism of the concurrent engine (default: cpu count)",
    )
    run.add_argument(
        "--show-body",
        action="store_true",
        help="Print each response body after its status line",
    )

    # list
    subparsers.add_parser("list", help="List requests")

    return parser
