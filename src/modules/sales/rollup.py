# -*- coding: utf-8 -*-
"""Daily rollup: per-rep recap from the sales log and counter resets.

Run once per night by an external scheduler:
1. Summarize the previous day's sales from the log
2. Reset Today for every rep (and Week on the configured week-start day)

Month and Lifetime are never reset here.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

import pandas as pd

from src.modules.sales.models import DailySummary, LeaderboardEntry
from src.modules.sales.stores import LeaderboardStore, SalesLogStore

logger = logging.getLogger(__name__)

MONDAY = 0


def summarize(sales_log: SalesLogStore, sale_date: str) -> DailySummary:
    """Count logged sales per rep for one date.

    Args:
        sales_log: Sales log store.
        sale_date: Date to summarize (YYYY-MM-DD).

    Returns:
        DailySummary with reps sorted by count, descending; ties keep the
        order in which reps first appear in the log.
    """
    records = sales_log.read_all()
    df = pd.DataFrame(
        [(r.rep_name, r.sale_date) for r in records], columns=["Rep", "SaleDate"]
    )
    day_df = df[df["SaleDate"] == sale_date]

    if day_df.empty:
        logger.info(f"No sales logged for {sale_date}")
        return DailySummary(date=sale_date)

    counts = (
        day_df.groupby("Rep", sort=False)
        .size()
        .sort_values(ascending=False, kind="stable")
    )
    per_rep = [(str(rep), int(count)) for rep, count in counts.items()]
    total = int(counts.sum())

    logger.info(f"Summary for {sale_date}: {total} sales from {len(per_rep)} reps")
    return DailySummary(date=sale_date, per_rep=per_rep, total=total)


def is_week_start(current_date: date, week_start_day: int = MONDAY) -> bool:
    return current_date.weekday() == week_start_day


def reset_daily(
    leaderboard: LeaderboardStore,
    current_date: date,
    week_start_day: int = MONDAY,
    now: Optional[datetime] = None,
) -> List[LeaderboardEntry]:
    """Zero Today for every rep, and Week too on the week-start day.

    Args:
        leaderboard: Leaderboard store.
        current_date: Date the new day starts on.
        week_start_day: datetime.weekday() number that starts a week.
        now: Instant stamped into LastUpdate; defaults to current UTC time.

    Returns:
        Entries as written back.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    reset_week = is_week_start(current_date, week_start_day)
    entries = leaderboard.read_all()
    for entry in entries:
        entry.today = 0
        if reset_week:
            entry.week = 0
        entry.last_update = now.isoformat()

    leaderboard.write_all(entries)
    logger.info(
        f"Reset today for {len(entries)} reps on {current_date.isoformat()}"
        + (" (week reset)" if reset_week else "")
    )
    return entries
