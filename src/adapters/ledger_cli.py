"""Command-line adapter for recording movements and reading balances.

Examples:
    python -m src.adapters.ledger_cli purchase USD 2024-03-01 150.00
    python -m src.adapters.ledger_cli statement 2024-03-01 2024-03-31
    python -m src.adapters.ledger_cli verify --currency EUR
"""

import argparse
import sys

from src.domain.exceptions import LedgerError
from src.domain.models import (
    DailyBalance,
    LedgerEntry,
    LedgerReport,
    RecalculationResult,
    StatementRow,
)
from src.infrastructure.container import build_cash_ledger
from src.infrastructure.logging.logger import get_app_logger

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_RETRYABLE = 2

STATEMENT_COLUMNS = (
    "currency",
    "opening",
    "purchases",
    "exch_buy",
    "exch_sell",
    "sales",
    "deposits",
    "closing",
)


def _deposit_override(value: str) -> tuple[str, str]:
    """Parse a ``CUR=AMOUNT`` pair given to ``statement --deposit``."""
    currency, sep, amount = value.partition("=")
    if not sep or not currency.strip() or not amount.strip():
        raise argparse.ArgumentTypeError(
            f"expected CUR=AMOUNT, got {value!r}"
        )
    return currency.strip(), amount.strip()


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="ledger",
        description="Per-currency daily cash ledger.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("purchase", "record currency bought from a customer"),
        ("deposit", "record currency handed to the custodian"),
    ):
        movement = commands.add_parser(name, help=help_text)
        movement.add_argument("currency")
        movement.add_argument("day")
        movement.add_argument("amount")

    override = commands.add_parser(
        "set-deposits",
        help="set the total deposits of a day",
    )
    override.add_argument("currency")
    override.add_argument("day")
    override.add_argument("total")

    day = commands.add_parser("day", help="show the stored row of a day")
    day.add_argument("currency")
    day.add_argument("day")

    statement = commands.add_parser(
        "statement",
        help="show balances over an inclusive day range",
    )
    statement.add_argument("from_day")
    statement.add_argument("to_day")
    statement.add_argument("--currency")
    statement.add_argument(
        "--deposit",
        action="append",
        type=_deposit_override,
        default=[],
        metavar="CUR=AMOUNT",
        help="replace the deposits of a currency for this statement",
    )
    statement.add_argument(
        "--hide-empty",
        action="store_true",
        help="omit currencies without any balance or movement",
    )

    deposits = commands.add_parser(
        "deposits",
        help="list deposit entries of a day",
    )
    deposits.add_argument("currency")
    deposits.add_argument("day")

    for name, help_text in (
        ("verify", "check stored rows against the transaction log"),
        ("rebuild", "recompute stored rows from the transaction log"),
    ):
        maintenance = commands.add_parser(name, help=help_text)
        maintenance.add_argument("--currency")

    return parser


def _print_result(result: RecalculationResult) -> None:
    print(
        f"{result.currency.value} {result.day.isoformat()} "
        f"closing={result.closing_balance} "
        f"propagated={result.propagated_days}"
    )


def _print_balance(row: DailyBalance) -> None:
    print(f"{row.currency.value} {row.day.isoformat()}")
    print(f"  opening:       {row.opening_balance}")
    print(f"  purchases:     {row.purchases}")
    print(f"  exchange_buy:  {row.exchange_buy}")
    print(f"  exchange_sell: {row.exchange_sell}")
    print(f"  sales:         {row.sales}")
    print(f"  deposits:      {row.deposits}")
    print(f"  closing:       {row.closing_balance}")


def _print_statement(rows: list[StatementRow]) -> None:
    print("\t".join(STATEMENT_COLUMNS))
    for row in rows:
        print(
            "\t".join(
                [
                    row.currency.value,
                    str(row.opening_balance),
                    str(row.purchases),
                    str(row.exchange_buy),
                    str(row.exchange_sell),
                    str(row.sales),
                    str(row.deposits),
                    str(row.closing_balance),
                ]
            )
        )


def _print_entries(entries: list[LedgerEntry]) -> None:
    if not entries:
        print("No deposits recorded.")
        return
    for entry in entries:
        marker = " (adjustment)" if entry.is_adjustment else ""
        print(f"#{entry.entry_id} {entry.amount}{marker}")


def _print_report(report: LedgerReport) -> None:
    print(f"Rows checked: {report.rows_checked}")
    if report.is_consistent:
        print("Ledger is consistent.")
        return
    for issue in report.issues:
        print(
            f"{issue.currency.value} {issue.day.isoformat()} {issue.check}: "
            f"expected={issue.expected} actual={issue.actual}"
        )


def _dispatch(ledger, args: argparse.Namespace) -> int:
    command = args.command
    if command == "purchase":
        _print_result(
            ledger.record_purchase(args.currency, args.day, args.amount)
        )
    elif command == "deposit":
        _print_result(
            ledger.record_deposit(args.currency, args.day, args.amount)
        )
    elif command == "set-deposits":
        _print_result(
            ledger.set_deposit_override(args.currency, args.day, args.total)
        )
    elif command == "day":
        row = ledger.get_day(args.currency, args.day)
        if row is None:
            print(f"No stored row for {args.currency} on {args.day}.")
        else:
            _print_balance(row)
    elif command == "statement":
        _print_statement(
            ledger.get_statement(
                args.from_day,
                args.to_day,
                currency=args.currency,
                deposit_overrides=dict(args.deposit) or None,
                include_empty=not args.hide_empty,
            )
        )
    elif command == "deposits":
        _print_entries(ledger.list_deposits(args.currency, args.day))
    elif command == "verify":
        report = ledger.verify(args.currency)
        _print_report(report)
        if not report.is_consistent:
            return EXIT_FAILED
    elif command == "rebuild":
        results = ledger.rebuild(args.currency)
        if not results:
            print("Nothing to rebuild.")
        for result in results:
            print(
                f"{result.currency.value}: closing={result.closing_balance} "
                f"rewritten={result.propagated_days}"
            )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Run one ledger command and return the process exit status."""
    args = build_parser().parse_args(argv)
    logger = get_app_logger()
    ledger = build_cash_ledger()
    try:
        return _dispatch(ledger, args)
    except LedgerError as exc:
        logger.error(f"{args.command} failed [{exc.code}]: {exc}")
        print(f"error: {exc}", file=sys.stderr)
        if exc.retryable:
            print("try again", file=sys.stderr)
            return EXIT_RETRYABLE
        return EXIT_FAILED
    finally:
        ledger.close()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
