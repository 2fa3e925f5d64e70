from __future__ import annotations

import argparse
import sys
from typing import Sequence

from stagehand.core.milestones import MILESTONE_ORDER
from stagehand.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stagehand", description="Stagehand resolution engine")
    parser.add_argument("--log-level", default=None, help="Log level (default: STAGEHAND_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command")

    plan_parser = subparsers.add_parser(
        "plan",
        help="Render the desired-state resources of a custom resource (dry-run)",
    )
    plan_parser.add_argument("custom_resource", help="Path to custom resource YAML file")
    plan_parser.add_argument(
        "--secrets", dest="secrets_file", help="YAML file of existing secrets (name: {key: value})"
    )
    plan_parser.add_argument(
        "--ready",
        action="append",
        default=[],
        metavar="WORKLOAD",
        help="Report this workload as ready (repeatable)",
    )
    plan_parser.add_argument(
        "--output", choices=["text", "yaml", "json"], default="text", help="Output format"
    )

    subparsers.add_parser("milestones", help="List rollout milestones in order")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, json=False)

    if args.command == "plan":
        from stagehand.cli.plan import plan_command

        sys.exit(
            plan_command(
                args.custom_resource,
                secrets_file=args.secrets_file,
                ready=args.ready,
                output_format=args.output,
            )
        )

    if args.command == "milestones":
        for rank, milestone in enumerate(MILESTONE_ORDER):
            print(f"{rank}: {milestone.value}")
        sys.exit(0)

    parser.print_help()
    sys.exit(2)


if __name__ == "__main__":
    main()
