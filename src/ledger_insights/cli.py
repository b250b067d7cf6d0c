import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from . import __version__
from .config import load_settings
from .errors import LedgerError
from .logging_setup import setup_logging


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ledger-insights")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument(
        "command",
        nargs="?",
        default="health",
        choices=["health", "statistics", "issues"],
        help="Command to run",
    )
    parser.add_argument(
        "--period",
        default="monthly",
        help="weekly | monthly | yearly (used with statistics). Default: monthly",
    )
    parser.add_argument(
        "--category",
        default="total_balance",
        help="account_balance | account_transfer | total_balance | total_transfer | "
        "flow | flow_grouping | expenses (used with statistics). Default: total_balance",
    )
    parser.add_argument(
        "--today",
        type=_parse_day,
        default=None,
        help="Reference date (YYYY-MM-DD). Defaults to today in LEDGER_TIMEZONE.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Ledger export directory. Defaults to LEDGER_DATA_DIR.",
    )
    parser.add_argument("--format", choices=["json", "text"], default="json", help="Output format")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    settings = load_settings()
    setup_logging(settings.log_level)

    logger = logging.getLogger(__name__)

    if args.command == "health":
        logger.info("Application started successfully.")
        print("ok")
        return 0

    from .analytics import compute_issues, compute_statistics
    from .ledger import LedgerSnapshot
    from .report import issue_to_dict, render_issues, render_statistics, statistic_to_dict
    from .storage import LedgerStore

    store = LedgerStore(args.data_dir or settings.data_dir)
    today = args.today or settings.today()

    try:
        snapshot = LedgerSnapshot.capture(store)

        if args.command == "statistics":
            stats = compute_statistics(args.period, args.category, snapshot, today=today)
            if args.format == "text":
                print(render_statistics(f"{args.category} / {args.period}", stats))
            else:
                print(json.dumps([statistic_to_dict(s) for s in stats], indent=2))
            return 0

        issues = compute_issues(snapshot, today=today)
        if args.format == "text":
            print(render_issues(issues, {a.id: a.name for a in snapshot.accounts}))
        else:
            print(json.dumps([issue_to_dict(i) for i in issues], indent=2))
        return 0
    except LedgerError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
