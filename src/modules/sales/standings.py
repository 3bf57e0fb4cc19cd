# -*- coding: utf-8 -*-
"""Ranked standings and the chat messages built from them."""

from typing import List, Sequence, Tuple

from src.modules.sales.models import DailySummary, Standing

MEDALS = ["🥇", "🥈", "🥉"]
OTHER_MARKER = "▪️"
DIVIDER = "———————————————"


def project_standings(pairs: Sequence[Tuple[str, int]]) -> List[Standing]:
    """Number already-sorted (rep, today) pairs from rank 1."""
    return [
        Standing(rank=idx + 1, rep_name=rep, today=today)
        for idx, (rep, today) in enumerate(pairs)
    ]


def medal_for(rank: int) -> str:
    if rank <= len(MEDALS):
        return MEDALS[rank - 1]
    return OTHER_MARKER


def format_standings_message(standings: List[Standing], title: str) -> str:
    """Live leaderboard message posted after each sale."""
    lines = [f"✨ *{title}* ✨", ""]
    for standing in standings:
        lines.append(
            f"{medal_for(standing.rank)}  *{standing.rep_name}* — {standing.today}"
        )
    lines.extend(["", DIVIDER, "🔥 Who's Next!? Everybody Eats! 🔥"])
    return "\n".join(lines)


def format_daily_recap(summary: DailySummary, top_n: int = 3) -> str:
    """Nightly recap of one day's installs.

    Args:
        summary: Per-rep counts for the recapped date.
        top_n: Number of top closers to list.

    Returns:
        Recap message text.
    """
    msg = f"📆 *Daily Recap for {summary.date}*\n\n"

    if summary.total == 0:
        return msg + "No installs recorded yesterday. Unacceptable. Fix it today."

    msg += f"Total installs: {summary.total}\n\n"
    if summary.per_rep:
        msg += "Top Closers:\n"
        for idx, (rep, count) in enumerate(summary.per_rep[:top_n]):
            msg += f"{medal_for(idx + 1)} {rep} — {count}\n"
        if len(summary.per_rep) > top_n:
            msg += "\nEveryone else: scoreboard doesn’t lie."
    return msg
