"""Tests for pipeline orchestrator."""

from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

import pytest
from googleapiclient.errors import HttpError

from src.modules.google_api import SheetsStoreError
from src.modules.sales.models import (
    LEADERBOARD_COLUMNS,
    SALES_LOG_COLUMNS,
    InboundMessage,
    SenderKind,
)
from src.modules.sales.stores import (
    InMemoryLeaderboardStore,
    InMemorySalesLogStore,
    SheetsLeaderboardStore,
)
from src.pipeline.orchestrator import (
    build_parser,
    build_stores,
    handle_inbound_message,
    main,
    run_daily_rollup,
)

NOW = datetime(2025, 11, 24, 15, 30, tzinfo=timezone.utc)
SALE_TEXT = "🛜 +1 Jane Doe 11/25 Kinetic 1G"


@pytest.fixture
def leaderboard():
    return InMemoryLeaderboardStore()


@pytest.fixture
def sales_log():
    return InMemorySalesLogStore()


@pytest.fixture
def notifier():
    mock = MagicMock()
    mock.send.return_value = True
    return mock


class TestHandleInboundMessage:
    """Test the message → leaderboard → notification flow."""

    def test_sale_updates_and_notifies(self, leaderboard, sales_log, notifier):
        standings = handle_inbound_message(
            InboundMessage(SALE_TEXT, "Alice"), leaderboard, sales_log, notifier, now=NOW
        )

        assert standings[0].rep_name == "Alice"
        assert standings[0].rank == 1
        assert len(sales_log.read_all()) == 1
        sent = notifier.send.call_args[0][0]
        assert "🥇  *Alice* — 1" in sent

    def test_bot_message_ignored(self, leaderboard, sales_log, notifier):
        result = handle_inbound_message(
            InboundMessage(SALE_TEXT, "LeaderBot", SenderKind.BOT),
            leaderboard,
            sales_log,
            notifier,
            now=NOW,
        )

        assert result is None
        assert leaderboard.writes == 0
        notifier.send.assert_not_called()

    def test_chatter_ignored(self, leaderboard, sales_log, notifier):
        result = handle_inbound_message(
            InboundMessage("nice work team", "Alice"),
            leaderboard,
            sales_log,
            notifier,
            now=NOW,
        )

        assert result is None
        assert leaderboard.writes == 0
        assert sales_log.read_all() == []
        notifier.send.assert_not_called()

    def test_notification_failure_keeps_update(self, leaderboard, sales_log, notifier):
        notifier.send.return_value = False

        standings = handle_inbound_message(
            InboundMessage(SALE_TEXT, "Alice"), leaderboard, sales_log, notifier, now=NOW
        )

        assert standings is not None
        assert leaderboard.read_all()[0].today == 1

    def test_store_failure_propagates_without_notifying(self, sales_log, notifier):
        service = MagicMock()
        service.spreadsheets().values().get().execute.side_effect = HttpError(
            MagicMock(status=500), b"Backend Error"
        )
        leaderboard = SheetsLeaderboardStore(service, "sheet_id", "Leaderboard")

        with pytest.raises(SheetsStoreError):
            handle_inbound_message(
                InboundMessage(SALE_TEXT, "Alice"), leaderboard, sales_log, notifier, now=NOW
            )

        notifier.send.assert_not_called()
        assert sales_log.read_all() == []

    def test_sale_date_follows_local_clock(self, leaderboard, sales_log, notifier):
        """An evening sale in Chicago is logged on the local date, not UTC's."""
        evening = datetime(2025, 11, 24, 21, 30, tzinfo=ZoneInfo("America/Chicago"))

        handle_inbound_message(
            InboundMessage(SALE_TEXT, "Alice"), leaderboard, sales_log, notifier, now=evening
        )

        assert sales_log.read_all()[0].sale_date == "2025-11-24"
        assert leaderboard.read_all()[0].last_update_date == "2025-11-24"

    def test_now_is_required(self, leaderboard, sales_log, notifier):
        with pytest.raises(TypeError):
            handle_inbound_message(
                InboundMessage(SALE_TEXT, "Alice"), leaderboard, sales_log, notifier
            )

    def test_from_groupme_payload(self):
        message = InboundMessage.from_groupme(
            {"text": SALE_TEXT, "name": "Alice", "sender_type": "bot"}
        )
        assert message.sender_kind == SenderKind.BOT
        assert message.sender_name == "Alice"


class TestRunDailyRollup:
    """Test nightly recap + reset."""

    def test_recaps_previous_day_then_resets(self, notifier):
        leaderboard = InMemoryLeaderboardStore(
            [LEADERBOARD_COLUMNS, ["Alice", "2", "5", "9", "20", "2025-11-24T18:00:00+00:00"]]
        )
        sales_log = InMemorySalesLogStore(
            [
                SALES_LOG_COLUMNS,
                ["ts", "Alice", "Jane", "2025-11-24", "11/25", "Kinetic", "1G", "1"],
                ["ts", "Alice", "Joe", "2025-11-24", "11/26", "Kinetic", "1G", "2"],
            ]
        )

        summary = run_daily_rollup(
            leaderboard, sales_log, notifier, current_date=date(2025, 11, 25), now=NOW
        )

        assert summary.date == "2025-11-24"
        assert summary.per_rep == [("Alice", 2)]
        assert "Total installs: 2" in notifier.send.call_args[0][0]
        entry = leaderboard.read_all()[0]
        assert (entry.today, entry.week) == (0, 5)

    def test_reset_runs_when_recap_fails(self, leaderboard, sales_log, notifier):
        notifier.send.return_value = False
        leaderboard.write_all([])

        run_daily_rollup(
            leaderboard, sales_log, notifier, current_date=date(2025, 11, 24), now=NOW
        )

        assert leaderboard.writes == 2


class TestCli:
    """Test CLI wiring."""

    def test_rollup_date_argument(self):
        args = build_parser().parse_args(["rollup", "--date", "2025-11-24"])
        assert args.date == date(2025, 11, 24)

    def test_invalid_date_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["rollup", "--date", "11/24/2025"])

    def test_message_arguments(self):
        args = build_parser().parse_args(["message", SALE_TEXT, "--sender", "Alice"])
        assert args.command == "message"
        assert args.sender == "Alice"
        assert args.bot is False

    def test_build_stores_requires_spreadsheet_id(self):
        config = MagicMock(spreadsheet_id="")
        with pytest.raises(ValueError, match="spreadsheet_id"):
            build_stores(config, sheets_service=MagicMock())

    @patch("src.pipeline.orchestrator.build_stores")
    @patch("src.pipeline.orchestrator.AppConfig")
    def test_main_returns_error_on_store_failure(self, mock_config, mock_build):
        mock_config.return_value.now.return_value = NOW
        mock_config.return_value.title = "Board"
        leaderboard = MagicMock()
        leaderboard.read_all.side_effect = SheetsStoreError("read", "'Leaderboard'!A:F")
        mock_build.return_value = (leaderboard, MagicMock())

        exit_code = main(["message", SALE_TEXT, "--sender", "Alice"])

        assert exit_code == 1

    @patch("src.pipeline.orchestrator.build_stores")
    @patch("src.pipeline.orchestrator.AppConfig")
    def test_main_rollup(self, mock_config, mock_build):
        mock_config.return_value.now.return_value = NOW
        mock_config.return_value.week_start_day = 0
        mock_config.return_value.recap_top_n = 3
        mock_config.return_value.groupme_bot_id = ""
        leaderboard = InMemoryLeaderboardStore()
        mock_build.return_value = (leaderboard, InMemorySalesLogStore())

        exit_code = main(["rollup", "--date", "2025-11-24"])

        assert exit_code == 0
        assert leaderboard.writes == 1

    @patch("src.pipeline.orchestrator.build_stores")
    @patch("src.pipeline.orchestrator.AppConfig")
    def test_main_bot_message_skips_store(self, mock_config, mock_build):
        exit_code = main(["message", SALE_TEXT, "--sender", "LeaderBot", "--bot"])

        assert exit_code == 0
        mock_config.assert_not_called()
        mock_build.assert_not_called()

    @patch("src.pipeline.orchestrator.AppConfig")
    def test_main_missing_spreadsheet_id(self, mock_config):
        mock_config.return_value.spreadsheet_id = ""
        mock_config.return_value.now.return_value = NOW

        exit_code = main(["rollup", "--date", "2025-11-24"])

        assert exit_code == 1

    def test_main_missing_config_file(self, tmp_path):
        exit_code = main(["--config", str(tmp_path / "missing.toml"), "rollup"])

        assert exit_code == 1
