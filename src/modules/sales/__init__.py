"""Sales callout parsing and leaderboard bookkeeping."""

from .models import (
    DailySummary,
    InboundMessage,
    LeaderboardEntry,
    SaleEvent,
    SaleLogRecord,
    SenderKind,
    Standing,
)
from .parse_message import parse_sales_message
from .reconcile import reconcile_sale
from .rollup import reset_daily, summarize
from .standings import format_daily_recap, format_standings_message, project_standings

__all__ = [
    "DailySummary",
    "InboundMessage",
    "LeaderboardEntry",
    "SaleEvent",
    "SaleLogRecord",
    "SenderKind",
    "Standing",
    "parse_sales_message",
    "reconcile_sale",
    "reset_daily",
    "summarize",
    "format_daily_recap",
    "format_standings_message",
    "project_standings",
]
