# -*- coding: utf-8 -*-
"""Apply a sale callout to the leaderboard and the sales log.

Reps only ever report their cumulative count for today ("+3" means three sales
today so far), never an increment. Week, month and lifetime totals are
therefore built from the difference between successive "today" reports:

1. Read the full leaderboard snapshot
2. Find the rep case-insensitively (first-seen casing stays canonical)
3. New rep: every counter starts at the reported count
4. Existing rep: delta = reported - today, where today counts as 0 when the
   last update was on an earlier date. A negative delta (correction or typo)
   is replaced by the reported count, so totals never go down
5. Write the snapshot back sorted by today, descending
6. Append the sale to the log
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from src.modules.sales.models import LeaderboardEntry, SaleEvent, SaleLogRecord
from src.modules.sales.stores import LeaderboardStore, SalesLogStore

logger = logging.getLogger(__name__)


def find_entry(
    entries: List[LeaderboardEntry], rep_name: str
) -> Optional[LeaderboardEntry]:
    """Find a rep's entry by case-insensitive name, None if absent."""
    key = rep_name.lower()
    for entry in entries:
        if entry.rep_name and entry.key == key:
            return entry
    return None


def compute_delta(entry: LeaderboardEntry, reported: int, sale_date: str) -> int:
    """Number of new sales implied by a "today" report.

    Args:
        entry: Rep's current leaderboard entry.
        reported: Cumulative count the rep just reported for today.
        sale_date: Date of the report (YYYY-MM-DD).

    Returns:
        Non-negative delta to add to week, month and lifetime.
    """
    baseline = entry.today
    prev_date = entry.last_update_date
    if prev_date and prev_date != sale_date:
        # Yesterday's count must not become today's baseline
        baseline = 0

    delta = reported - baseline
    if delta < 0:
        delta = reported
    return delta


def sort_by_today(entries: List[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Sort entries by today's count, descending; ties keep their order."""
    return sorted(entries, key=lambda e: e.today, reverse=True)


def apply_sale(
    entries: List[LeaderboardEntry], event: SaleEvent, now_iso: str
) -> Tuple[List[LeaderboardEntry], int]:
    """Apply one sale to a leaderboard snapshot in place.

    Returns:
        Tuple of (entries sorted by today, delta applied).
    """
    reported = max(event.today_reported, 0)
    entry = find_entry(entries, event.rep_name)

    if entry is None:
        entry = LeaderboardEntry(
            rep_name=event.rep_name,
            today=reported,
            week=reported,
            month=reported,
            lifetime=reported,
            last_update=now_iso,
        )
        entries.append(entry)
        logger.info(f"New rep on leaderboard: {event.rep_name} ({reported})")
        return sort_by_today(entries), reported

    delta = compute_delta(entry, reported, event.sale_date)
    entry.today = reported
    entry.week += delta
    entry.month += delta
    entry.lifetime += delta
    entry.last_update = now_iso
    logger.info(
        f"Updated {entry.rep_name}: today={entry.today} (+{delta}), "
        f"week={entry.week}, month={entry.month}, lifetime={entry.lifetime}"
    )
    return sort_by_today(entries), delta


def reconcile_sale(
    leaderboard: LeaderboardStore,
    sales_log: SalesLogStore,
    event: SaleEvent,
    now: Optional[datetime] = None,
) -> Tuple[List[Tuple[str, int]], SaleLogRecord]:
    """Update the leaderboard with a sale and append it to the sales log.

    Read-modify-write of the whole leaderboard without locking; store errors
    propagate to the caller.

    Args:
        leaderboard: Leaderboard store.
        sales_log: Sales log store.
        event: Parsed sale.
        now: Update instant for LastUpdate; defaults to current UTC time.

    Returns:
        Tuple of ([(rep_name, today), ...] sorted by today, appended log record).
    """
    if now is None:
        now = datetime.now(timezone.utc)

    entries = leaderboard.read_all()
    entries, _ = apply_sale(entries, event, now.isoformat())
    leaderboard.write_all(entries)

    record = SaleLogRecord.from_event(event)
    sales_log.append(record)

    return [(entry.rep_name, entry.today) for entry in entries], record
