# -*- coding: utf-8 -*-
"""Tests for src/modules/sales/standings.py."""

from src.modules.sales.models import DailySummary, Standing
from src.modules.sales.standings import (
    format_daily_recap,
    format_standings_message,
    project_standings,
)


class TestProjectStandings:
    """Test rank numbering."""

    def test_ranks_from_one(self):
        standings = project_standings([("Cara", 5), ("Bob", 2), ("Alice", 1)])

        assert standings == [
            Standing(1, "Cara", 5),
            Standing(2, "Bob", 2),
            Standing(3, "Alice", 1),
        ]

    def test_empty(self):
        assert project_standings([]) == []


class TestFormatStandingsMessage:
    """Test live leaderboard message."""

    def test_medals_and_markers(self):
        standings = project_standings([("A", 4), ("B", 3), ("C", 2), ("D", 1)])

        msg = format_standings_message(standings, "Kash Supply Live Leaderboard")

        lines = msg.split("\n")
        assert lines[0] == "✨ *Kash Supply Live Leaderboard* ✨"
        assert "🥇  *A* — 4" in lines
        assert "🥈  *B* — 3" in lines
        assert "🥉  *C* — 2" in lines
        assert "▪️  *D* — 1" in lines
        assert lines[-1] == "🔥 Who's Next!? Everybody Eats! 🔥"


class TestFormatDailyRecap:
    """Test nightly recap message."""

    def test_no_installs(self):
        msg = format_daily_recap(DailySummary(date="2025-11-24"))

        assert msg.startswith("📆 *Daily Recap for 2025-11-24*")
        assert "No installs recorded yesterday" in msg

    def test_top_closers(self):
        summary = DailySummary(
            date="2025-11-24", per_rep=[("Alice", 3), ("Bob", 2)], total=5
        )

        msg = format_daily_recap(summary)

        assert "Total installs: 5" in msg
        assert "🥇 Alice — 3" in msg
        assert "🥈 Bob — 2" in msg
        assert "Everyone else" not in msg

    def test_more_reps_than_shown(self):
        summary = DailySummary(
            date="2025-11-24",
            per_rep=[("A", 4), ("B", 3), ("C", 2), ("D", 1)],
            total=10,
        )

        msg = format_daily_recap(summary, top_n=3)

        assert "D — 1" not in msg
        assert msg.endswith("Everyone else: scoreboard doesn’t lie.")
