#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Sales Leaderboard Orchestrator

Workflow:
1. Message: chat callout → parse → reconcile leaderboard + sales log → post standings
2. Rollup: recap yesterday's sales → post recap → reset Today (and Week on week start)

The webhook server and the nightly scheduler live outside this project; they
call handle_inbound_message() / run_daily_rollup() with AppConfig.now(), or
this CLI:

    python -m src.pipeline.orchestrator message --sender "Alice" "🛜 +1 Jane Doe 11/25 Kinetic 1G"
    python -m src.pipeline.orchestrator rollup --date 2025-11-26
"""

import argparse
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Optional

from src.modules.google_api import SheetsStoreError, connect_to_sheets
from src.modules.sales.models import DailySummary, InboundMessage, SenderKind, Standing
from src.modules.sales.notify import GroupMeNotifier
from src.modules.sales.parse_message import parse_sales_message
from src.modules.sales.reconcile import reconcile_sale
from src.modules.sales.rollup import MONDAY, reset_daily, summarize
from src.modules.sales.standings import (
    format_daily_recap,
    format_standings_message,
    project_standings,
)
from src.modules.sales.stores import (
    LeaderboardStore,
    SalesLogStore,
    SheetsLeaderboardStore,
    SheetsSalesLogStore,
)
from src.utils.app_config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Live Leaderboard"


# === STEPS ===


def handle_inbound_message(
    message: InboundMessage,
    leaderboard: LeaderboardStore,
    sales_log: SalesLogStore,
    notifier: GroupMeNotifier,
    now: datetime,
    title: str = DEFAULT_TITLE,
) -> Optional[List[Standing]]:
    """Process one chat message.

    Args:
        message: Inbound chat message.
        leaderboard: Leaderboard store.
        sales_log: Sales log store.
        notifier: Chat notifier for the standings message.
        now: Processing instant in the leaderboard timezone (AppConfig.now()).
            Its date becomes the sale date, so it must agree with the day
            boundary run_daily_rollup uses.
        title: Leaderboard title shown in chat.

    Returns:
        Standings after the sale, or None if the message was ignored.

    Raises:
        SheetsStoreError: If the leaderboard or log could not be read/written.
    """
    if message.sender_kind == SenderKind.BOT:
        logger.debug(f"Ignored bot message from {message.sender_name}")
        return None

    event = parse_sales_message(message.text, message.sender_name, now=now)
    if event is None:
        logger.debug("No sales data parsed")
        return None

    logger.info(
        f"Sale from {event.rep_name}: {event.today_reported:+d} "
        f"{event.customer_name} {event.install_date} {event.provider} {event.speed}"
    )

    try:
        pairs, _ = reconcile_sale(leaderboard, sales_log, event, now=now)
    except SheetsStoreError as e:
        logger.error(f"Error updating leaderboard for {event.rep_name}: {e}")
        raise

    standings = project_standings(pairs)
    if not notifier.send(format_standings_message(standings, title)):
        logger.warning("Leaderboard updated but standings were not posted")
    return standings


def run_daily_rollup(
    leaderboard: LeaderboardStore,
    sales_log: SalesLogStore,
    notifier: GroupMeNotifier,
    current_date: date,
    now: datetime,
    week_start_day: int = MONDAY,
    top_n: int = 3,
) -> DailySummary:
    """Post yesterday's recap, then reset counters for current_date.

    now is stamped into LastUpdate and should come from AppConfig.now().

    Returns:
        Summary of the recapped day.

    Raises:
        SheetsStoreError: If the log or leaderboard could not be read/written.
    """
    recap_date = (current_date - timedelta(days=1)).isoformat()
    summary = summarize(sales_log, recap_date)

    if not notifier.send(format_daily_recap(summary, top_n=top_n)):
        logger.warning(f"Recap for {recap_date} was not posted")

    reset_daily(leaderboard, current_date, week_start_day=week_start_day, now=now)
    return summary


# === WIRING ===


def build_stores(config: AppConfig, sheets_service=None):
    """Create Sheets-backed stores from config.

    Returns:
        Tuple of (leaderboard_store, sales_log_store).
    """
    if not config.spreadsheet_id:
        raise ValueError(
            "spreadsheet_id is empty; set GOOGLE_SHEET_ID or [sheets].spreadsheet_id"
        )
    if sheets_service is None:
        sheets_service = connect_to_sheets(config)
    leaderboard = SheetsLeaderboardStore(
        sheets_service, config.spreadsheet_id, config.leaderboard_tab
    )
    sales_log = SheetsSalesLogStore(
        sheets_service, config.spreadsheet_id, config.sales_log_tab
    )
    return leaderboard, sales_log


def parse_iso_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sales Leaderboard: process callouts and run the nightly rollup"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to leaderboard.toml (default: project root)",
    )
    parser.add_argument(
        "--verbose", action="store_true", default=False, help="Debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    message_parser = subparsers.add_parser("message", help="Process one chat message")
    message_parser.add_argument("text", help="Message text")
    message_parser.add_argument("--sender", required=True, help="Sender display name")
    message_parser.add_argument(
        "--bot", action="store_true", default=False, help="Sender is a bot"
    )

    rollup_parser = subparsers.add_parser(
        "rollup", help="Post yesterday's recap and reset daily counters"
    )
    rollup_parser.add_argument(
        "--date",
        type=parse_iso_date,
        default=None,
        help="Date the new day starts on (default: today in configured timezone)",
    )
    return parser


# === MAIN ===


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)-8s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    if args.command == "message" and args.bot:
        logger.info(f"Ignored bot message from {args.sender}")
        return 0

    try:
        config = AppConfig(args.config)
        notifier = GroupMeNotifier.from_config(config)
        now = config.now()
        leaderboard, sales_log = build_stores(config)
        if args.command == "message":
            handle_inbound_message(
                InboundMessage(args.text, args.sender),
                leaderboard,
                sales_log,
                notifier,
                title=config.title,
                now=now,
            )
        else:
            run_daily_rollup(
                leaderboard,
                sales_log,
                notifier,
                current_date=args.date or now.date(),
                week_start_day=config.week_start_day,
                top_n=config.recap_top_n,
                now=now,
            )
    except SheetsStoreError:
        logger.exception(f"{args.command} failed")
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
