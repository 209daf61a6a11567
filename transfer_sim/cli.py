"""Command-line front end for the transfer simulator.

Renders every state change on stdout and forwards typed amounts to the
orchestrator. With ``--amount`` the given transfers run back to back;
otherwise amounts are read from a prompt until ``quit`` or EOF.

Usage::

    transfer-sim --seed 42
    transfer-sim --amount 250 --amount 900 --delay-ms 0 --force-success
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable

from transfer_sim.config import SimulatorConfig
from transfer_sim.enums import Phase, StatusKind
from transfer_sim.exceptions import (
    ConfigurationError,
    TransferInProgressError,
    TransferRejectedError,
)
from transfer_sim.logging import setup_logging
from transfer_sim.orchestrator import TransactionOrchestrator
from transfer_sim.simulator import OutcomeSource, ScriptedOutcomeSource
from transfer_sim.sinks import ConsoleSink, FanOutSink, JsonFileSink

logger = logging.getLogger(__name__)

QUIT_COMMANDS = {"q", "quit", "exit"}


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a decimal amount: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transfer-sim",
        description="Simulate a three-phase funds transfer with random failures and rollback",
    )
    parser.add_argument(
        "--balance",
        type=_decimal,
        default=None,
        help="Opening balance (default: INITIAL_BALANCE or 1000.00)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible failures and account details",
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Latency of each phase in milliseconds (default: PHASE_DELAY_MS or 1500)",
    )
    parser.add_argument(
        "--amount",
        action="append",
        default=None,
        help="Run a transfer of this amount without prompting (repeatable)",
    )
    parser.add_argument(
        "--audit-dir",
        type=Path,
        default=None,
        help="Append transfer events as JSON Lines to this directory",
    )
    outcome = parser.add_mutually_exclusive_group()
    outcome.add_argument(
        "--force-success",
        action="store_true",
        help="Disable random failures",
    )
    outcome.add_argument(
        "--fail-at",
        choices=[phase.value for phase in Phase],
        default=None,
        help="Force every attempt to fail at this phase",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON",
    )
    parser.add_argument(
        "--show-events",
        action="store_true",
        help="Print every published event",
    )
    return parser


def build_config(args: argparse.Namespace) -> SimulatorConfig:
    """Environment configuration with command-line overrides applied."""
    config = SimulatorConfig.from_env()
    if args.balance is not None:
        config.account.initial_balance = args.balance
    if args.seed is not None:
        config.seed = args.seed
    if args.delay_ms is not None:
        config.phases.delay_ms = args.delay_ms
    if args.audit_dir is not None:
        config.output.audit_dir = args.audit_dir
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.json_logs:
        config.log_format = "json"
    config.validate()
    return config


def build_outcomes(args: argparse.Namespace) -> OutcomeSource | None:
    if args.force_success:
        return ScriptedOutcomeSource.all_succeed()
    if args.fail_at:
        return ScriptedOutcomeSource.fail_at(Phase(args.fail_at))
    return None


async def run_transfer(
    orchestrator: TransactionOrchestrator,
    raw_amount: str,
    console: ConsoleSink,
) -> bool:
    """Run one attempt; True when it completed."""
    orchestrator.set_amount(raw_amount)
    try:
        state = await orchestrator.start()
    except (TransferRejectedError, TransferInProgressError) as exc:
        print(f"!! {exc}", file=console.stream or sys.stdout)
        return False
    return state.status_kind == StatusKind.SUCCESS


async def run_batch(
    orchestrator: TransactionOrchestrator,
    amounts: list[str],
    console: ConsoleSink,
) -> int:
    completed = 0
    for raw_amount in amounts:
        if await run_transfer(orchestrator, raw_amount, console):
            completed += 1
    return 0 if completed == len(amounts) else 1


async def run_interactive(
    orchestrator: TransactionOrchestrator,
    console: ConsoleSink,
    read_line: Callable[[str], str] = input,
) -> int:
    console.render(orchestrator.state)
    while True:
        try:
            raw_amount = read_line("\nTransfer amount ($), or 'quit': ")
        except EOFError:
            break
        if raw_amount.strip().lower() in QUIT_COMMANDS:
            break
        await run_transfer(orchestrator, raw_amount, console)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = build_config(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, config.log_format)

    console = ConsoleSink(show_events=args.show_events)
    audit = (
        JsonFileSink(config.output.audit_dir, pretty=config.output.pretty_json)
        if config.output.audit_dir
        else None
    )
    orchestrator = TransactionOrchestrator.from_config(
        config,
        outcomes=build_outcomes(args),
        event_sink=FanOutSink(console, audit) if audit else console,
    )
    orchestrator.subscribe(console.render)
    account = orchestrator.account
    logger.info(
        "Account %s opened for %s with balance %s",
        account.account_number,
        account.holder_name,
        account.balance,
    )

    try:
        if args.amount:
            return asyncio.run(run_batch(orchestrator, args.amount, console))
        return asyncio.run(run_interactive(orchestrator, console))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    finally:
        if audit is not None:
            audit.close()
        console.close()


if __name__ == "__main__":
    sys.exit(main())
