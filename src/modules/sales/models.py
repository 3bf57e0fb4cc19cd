# -*- coding: utf-8 -*-
"""Sales leaderboard records and their sheet row layouts.

Counters are integers in memory; they become text only when converted to or
from a sheet row here.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

LEADERBOARD_COLUMNS = ["Rep", "Today", "Week", "Month", "Lifetime", "LastUpdate"]
SALES_LOG_COLUMNS = [
    "Timestamp",
    "Rep",
    "Customer",
    "SaleDate",
    "InstallDate",
    "Provider",
    "Speed",
    "TodayReported",
]

# Leading integer, as a spreadsheet user would read "12.0" or "3 (adj)"
COUNT_PREFIX_PATTERN = re.compile(r"\s*([+-]?\d+)")


class SenderKind(Enum):
    """Who posted a chat message."""

    USER = "user"
    BOT = "bot"


def parse_count(value) -> int:
    """Parse the leading base-10 integer of a counter cell, 0 when there is none."""
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    match = COUNT_PREFIX_PATTERN.match(str(value))
    if match is None:
        return 0
    return int(match.group(1), 10)


def cell(row: list, index: int) -> str:
    """Return a cell as text, "" when the row is shorter (the API drops blank tails)."""
    if index < len(row) and row[index] is not None:
        return str(row[index])
    return ""


@dataclass
class InboundMessage:
    """Chat message as delivered by the transport."""

    text: str
    sender_name: str
    sender_kind: SenderKind = SenderKind.USER

    @classmethod
    def from_groupme(cls, payload: dict) -> "InboundMessage":
        """Build from a GroupMe callback body ({text, name, sender_type})."""
        kind = SenderKind.BOT if payload.get("sender_type") == "bot" else SenderKind.USER
        return cls(
            text=payload.get("text") or "",
            sender_name=payload.get("name") or "",
            sender_kind=kind,
        )


@dataclass
class SaleEvent:
    """A parsed sale callout, consumed once by the reconciler."""

    rep_name: str
    today_reported: int
    customer_name: str
    install_date: str
    provider: str
    speed: str
    sale_date: str  # YYYY-MM-DD, processing date
    timestamp: str  # ISO-8601, processing instant


@dataclass
class LeaderboardEntry:
    """One rep's counters on the leaderboard tab."""

    rep_name: str
    today: int = 0
    week: int = 0
    month: int = 0
    lifetime: int = 0
    last_update: str = ""

    @property
    def key(self) -> str:
        return self.rep_name.lower()

    @property
    def last_update_date(self) -> Optional[str]:
        """Calendar date (YYYY-MM-DD) of the last update, None when never stamped."""
        if not self.last_update:
            return None
        return self.last_update[:10]

    @classmethod
    def from_row(cls, row: list) -> "LeaderboardEntry":
        return cls(
            rep_name=cell(row, 0),
            today=parse_count(cell(row, 1)),
            week=parse_count(cell(row, 2)),
            month=parse_count(cell(row, 3)),
            lifetime=parse_count(cell(row, 4)),
            last_update=cell(row, 5),
        )

    def to_row(self) -> List[str]:
        return [
            self.rep_name,
            str(self.today),
            str(self.week),
            str(self.month),
            str(self.lifetime),
            self.last_update,
        ]


@dataclass(frozen=True)
class SaleLogRecord:
    """Append-only sales log row."""

    timestamp: str
    rep_name: str
    customer_name: str
    sale_date: str
    install_date: str
    provider: str
    speed: str
    today_reported: int

    @classmethod
    def from_event(cls, event: SaleEvent) -> "SaleLogRecord":
        return cls(
            timestamp=event.timestamp,
            rep_name=event.rep_name,
            customer_name=event.customer_name,
            sale_date=event.sale_date,
            install_date=event.install_date,
            provider=event.provider,
            speed=event.speed,
            today_reported=event.today_reported,
        )

    @classmethod
    def from_row(cls, row: list) -> "SaleLogRecord":
        return cls(
            timestamp=cell(row, 0),
            rep_name=cell(row, 1),
            customer_name=cell(row, 2),
            sale_date=cell(row, 3),
            install_date=cell(row, 4),
            provider=cell(row, 5),
            speed=cell(row, 6),
            today_reported=parse_count(cell(row, 7)),
        )

    def to_row(self) -> List[str]:
        return [
            self.timestamp,
            self.rep_name,
            self.customer_name,
            self.sale_date,
            self.install_date,
            self.provider,
            self.speed,
            str(self.today_reported),
        ]


@dataclass
class DailySummary:
    """Per-rep sale counts for one calendar date."""

    date: str
    per_rep: List[Tuple[str, int]] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class Standing:
    """Ranked leaderboard line for display."""

    rank: int
    rep_name: str
    today: int
