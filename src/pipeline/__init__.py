"""Leaderboard orchestration module."""

from src.pipeline.orchestrator import (
    handle_inbound_message,
    run_daily_rollup,
)

__all__ = [
    "handle_inbound_message",
    "run_daily_rollup",
]
