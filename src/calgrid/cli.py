from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

import orjson

from .bootstrap import configure_logging
from .domain import ViewBy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="calgrid command line interface.")
    parser.add_argument("--log-level", default=None, help="Override CALGRID_LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server exposing the grid functions.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    for name, help_text in (
        ("grid", "Print the buckets of a day as JSON."),
        ("layout", "Print the column layout of a day as JSON."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--day", default=date.today().isoformat(), help="Day as YYYY-MM-DD.")
        sub.add_argument(
            "--view",
            default=ViewBy.DAY.value,
            choices=[view.value for view in ViewBy],
            help="Range to load before reading the day.",
        )

    return parser


def _dump(payload: dict) -> None:
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    logging.getLogger(__name__).info("calgrid CLI starting")

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
        return

    from .api import call_api

    call_api("fetch_view", view=args.view, day=args.day)
    if args.command == "grid":
        _dump(call_api("grid_for_day", day=args.day))
    elif args.command == "layout":
        _dump(call_api("day_layout", day=args.day))
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
