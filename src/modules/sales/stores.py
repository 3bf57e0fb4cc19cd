# -*- coding: utf-8 -*-
"""Leaderboard and sales log stores.

Both stores keep rows as text, exactly as they appear in the spreadsheet. The
base classes convert between those rows and typed records; subclasses only
move rows in and out (Google Sheets in production, a list in tests).

The leaderboard is always replaced as a whole snapshot (on Sheets: clear, then
write, so a shorter snapshot leaves no stale rows). There is no locking:
two writers that read the same snapshot race and the last write wins.
"""

import copy
import logging
from typing import List, Optional

from src.modules.google_api import (
    append_sheet_row,
    clear_sheet_range,
    read_sheet_data,
    tab_range,
    write_sheet_data,
)
from src.modules.sales.models import (
    LEADERBOARD_COLUMNS,
    SALES_LOG_COLUMNS,
    LeaderboardEntry,
    SaleLogRecord,
)

logger = logging.getLogger(__name__)

LEADERBOARD_SPAN = "A:F"
SALES_LOG_SPAN = "A:H"


def _data_rows(rows: list, header: list) -> list:
    """Drop the header row (when present) and rows with no values at all."""
    if rows and rows[0][:1] == header[:1]:
        rows = rows[1:]
    return [row for row in rows if any(str(v).strip() for v in row)]


class LeaderboardStore:
    """Leaderboard tab: header row plus one row per rep."""

    def read_rows(self) -> list:
        raise NotImplementedError

    def write_rows(self, rows: list) -> None:
        raise NotImplementedError

    def read_all(self) -> List[LeaderboardEntry]:
        """Read every rep entry. An empty tab yields an empty list."""
        rows = _data_rows(self.read_rows(), LEADERBOARD_COLUMNS)
        return [LeaderboardEntry.from_row(row) for row in rows]

    def write_all(self, entries: List[LeaderboardEntry]) -> None:
        """Replace the whole tab (header included) with the given entries."""
        rows = [list(LEADERBOARD_COLUMNS)] + [entry.to_row() for entry in entries]
        self.write_rows(rows)


class SalesLogStore:
    """Append-only sales log tab."""

    def read_rows(self) -> list:
        raise NotImplementedError

    def append_row(self, row: list) -> None:
        raise NotImplementedError

    def read_all(self) -> List[SaleLogRecord]:
        rows = _data_rows(self.read_rows(), SALES_LOG_COLUMNS)
        return [SaleLogRecord.from_row(row) for row in rows]

    def append(self, record: SaleLogRecord) -> None:
        self.append_row(record.to_row())


class SheetsLeaderboardStore(LeaderboardStore):
    """Leaderboard stored in a Google Sheets tab."""

    def __init__(self, sheets_service, spreadsheet_id: str, sheet_name: str):
        self.sheets_service = sheets_service
        self.spreadsheet_id = spreadsheet_id
        self.range = tab_range(sheet_name, LEADERBOARD_SPAN)

    def read_rows(self) -> list:
        return read_sheet_data(self.sheets_service, self.spreadsheet_id, self.range)

    def write_rows(self, rows: list) -> None:
        clear_sheet_range(self.sheets_service, self.spreadsheet_id, self.range)
        write_sheet_data(self.sheets_service, self.spreadsheet_id, self.range, rows)
        logger.info(f"Wrote {len(rows) - 1} leaderboard rows to {self.range}")


class SheetsSalesLogStore(SalesLogStore):
    """Sales log stored in a Google Sheets tab."""

    def __init__(self, sheets_service, spreadsheet_id: str, sheet_name: str):
        self.sheets_service = sheets_service
        self.spreadsheet_id = spreadsheet_id
        self.range = tab_range(sheet_name, SALES_LOG_SPAN)

    def read_rows(self) -> list:
        return read_sheet_data(self.sheets_service, self.spreadsheet_id, self.range)

    def append_row(self, row: list) -> None:
        append_sheet_row(self.sheets_service, self.spreadsheet_id, self.range, row)


class InMemoryLeaderboardStore(LeaderboardStore):
    """Leaderboard held in a list of text rows."""

    def __init__(self, rows: Optional[list] = None):
        self.rows = copy.deepcopy(rows) if rows else []
        self.writes = 0

    def read_rows(self) -> list:
        return copy.deepcopy(self.rows)

    def write_rows(self, rows: list) -> None:
        self.rows = copy.deepcopy(rows)
        self.writes += 1


class InMemorySalesLogStore(SalesLogStore):
    """Sales log held in a list of text rows."""

    def __init__(self, rows: Optional[list] = None):
        self.rows = copy.deepcopy(rows) if rows else [list(SALES_LOG_COLUMNS)]

    def read_rows(self) -> list:
        return copy.deepcopy(self.rows)

    def append_row(self, row: list) -> None:
        if not self.rows:
            self.rows.append(list(SALES_LOG_COLUMNS))
        self.rows.append(list(row))
