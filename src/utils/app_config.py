# -*- coding: utf-8 -*-
"""Centralized configuration for the sales leaderboard.

Reads settings from leaderboard.toml and exposes them as attributes so the
store, notifier and orchestrator never hardcode spreadsheet ids, tab names or
timezones. Secrets (spreadsheet id override, GroupMe bot id) come from the
environment.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import tomllib

from src.utils import get_workspace_root

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


def parse_weekday(name: str) -> int:
    """Convert a weekday name to its datetime.weekday() number.

    Args:
        name: Weekday name, case-insensitive (e.g., "Monday").

    Returns:
        0 for Monday through 6 for Sunday.

    Raises:
        ValueError: If the name is not a weekday.
    """
    key = name.strip().lower()
    if key not in WEEKDAY_NAMES:
        raise ValueError(
            f"Invalid week_start_day '{name}'. Use one of: {', '.join(WEEKDAY_NAMES)}"
        )
    return WEEKDAY_NAMES.index(key)


class AppConfig:
    """Leaderboard configuration.

    Usage:
        config = AppConfig()
        now = config.now()
        store = SheetsLeaderboardStore(service, config.spreadsheet_id, config.leaderboard_tab)
    """

    def __init__(self, config_path: Optional[Path] = None, environ=None):
        """Initialize AppConfig from leaderboard.toml.

        Args:
            config_path: Path to leaderboard.toml. If None, uses the workspace root.
            environ: Mapping used for environment overrides (defaults to os.environ).

        Raises:
            FileNotFoundError: If config file not found.
            ValueError: If the timezone or week start day is invalid.
        """
        if config_path is None:
            config_path = get_workspace_root() / "leaderboard.toml"
        if environ is None:
            environ = os.environ

        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}. "
                "Copy leaderboard.toml to the project root and fill in spreadsheet_id."
            )

        with open(config_path, "rb") as f:
            self._config = tomllib.load(f)

        sheets = self._config.get("sheets", {})
        board = self._config.get("leaderboard", {})
        groupme = self._config.get("groupme", {})

        self.spreadsheet_id = environ.get("GOOGLE_SHEET_ID") or sheets.get(
            "spreadsheet_id", ""
        )
        self.leaderboard_tab = sheets.get("leaderboard_tab", "Leaderboard")
        self.sales_log_tab = sheets.get("sales_log_tab", "SalesLog")
        self.credentials_file = Path(sheets.get("credentials_file", "credentials.json"))
        self.token_file = Path(sheets.get("token_file", "token.json"))
        self.service_account_file = Path(
            sheets.get("service_account_file", "service-account.json")
        )

        self.timezone_name = board.get("timezone", "UTC")
        try:
            self.timezone = ZoneInfo(self.timezone_name)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown timezone '{self.timezone_name}'") from e
        self.week_start_day = parse_weekday(board.get("week_start_day", "monday"))
        self.title = board.get("title", "Live Leaderboard")
        self.recap_top_n = int(board.get("recap_top_n", 3))

        self.groupme_bot_id = environ.get("GROUPME_BOT_ID", "")
        self.groupme_post_url = groupme.get(
            "post_url", "https://api.groupme.com/v3/bots/post"
        )
        self.groupme_timeout = float(groupme.get("timeout_seconds", 10))

        logger.debug(
            f"Loaded config from {config_path} "
            f"(tz={self.timezone_name}, week starts {WEEKDAY_NAMES[self.week_start_day]})"
        )

    def now(self) -> datetime:
        """Current instant in the configured timezone."""
        return datetime.now(self.timezone)
