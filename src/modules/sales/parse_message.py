# -*- coding: utf-8 -*-
"""Forgiving parser for sale callouts posted in the group chat.

Handles formats like:
    "🛜 +1 Jane Doe 11/25 Kinetic 1G"
    "📶+2 Elliott Ezell 11/25 Kinetic 2G max 1-3"

Layout: <anything> <count> <customer name...> <MM/DD> <provider...> <speed> <extra...>
Any emoji (or none) and trailing words are tolerated. Messages that do not
have a count followed by an install date are not sales and yield None.
"""

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from src.modules.sales.models import SaleEvent

logger = logging.getLogger(__name__)

MIN_TOKENS = 3

# Searched inside the token so "📶+2" still yields +2
COUNT_PATTERN = re.compile(r"[+-]?\d+")
INSTALL_DATE_PATTERN = re.compile(r"^\d{1,2}/\d{1,2}$")
SPEED_PATTERN = re.compile(r"^\d+([GMgm]|Mbps|mbps)?$")


def find_count(tokens: List[str]) -> Optional[tuple]:
    """Find the first token carrying a signed integer.

    Returns:
        Tuple of (index, count) or None if no token has digits.
    """
    for idx, token in enumerate(tokens):
        match = COUNT_PATTERN.search(token)
        if match:
            return idx, int(match.group(0), 10)
    return None


def find_install_date(tokens: List[str], start: int) -> Optional[int]:
    """Index of the first MM/DD token at or after start, None if absent."""
    for idx in range(start, len(tokens)):
        if INSTALL_DATE_PATTERN.match(tokens[idx]):
            return idx
    return None


def is_speed(token: str) -> bool:
    return bool(SPEED_PATTERN.match(token))


def find_speed(tokens: List[str], date_index: int) -> int:
    """Pick the index of the speed token.

    The last token wins when it looks like a speed, then the second-to-last
    (even when that sits before the install date, as in "+1 Jane 5 11/25").
    Failing both, the nearest speed-looking token after the install date is
    used ("... Kinetic 2G max 1-3" -> "2G"). With no speed-looking token at all
    the last token is kept as-is.
    """
    last = len(tokens) - 1
    if is_speed(tokens[last]):
        return last
    if last >= 1 and is_speed(tokens[last - 1]):
        return last - 1
    for idx in range(last - 2, date_index, -1):
        if is_speed(tokens[idx]):
            return idx
    return last


def parse_sales_message(
    text: Optional[str], sender_name: str, now: Optional[datetime] = None
) -> Optional[SaleEvent]:
    """Parse a chat message into a SaleEvent.

    Args:
        text: Raw message text (may be empty or None).
        sender_name: Display name of the poster, kept verbatim as the rep name.
        now: Processing instant; defaults to the current UTC time.

    Returns:
        SaleEvent, or None if the message is not a sale callout.
    """
    if not text:
        return None

    tokens = text.split()
    if len(tokens) < MIN_TOKENS:
        return None

    found = find_count(tokens)
    if found is None:
        return None
    count_index, today_reported = found

    date_index = find_install_date(tokens, count_index + 1)
    if date_index is None or date_index <= count_index:
        return None

    speed_index = find_speed(tokens, date_index)
    speed = tokens[speed_index]

    provider = ""
    if speed_index > date_index:
        provider = " ".join(tokens[date_index + 1 : speed_index])

    customer_name = " ".join(tokens[count_index + 1 : date_index])

    if now is None:
        now = datetime.now(timezone.utc)

    event = SaleEvent(
        rep_name=sender_name,
        today_reported=today_reported,
        customer_name=customer_name,
        install_date=tokens[date_index],
        provider=provider,
        speed=speed,
        sale_date=now.date().isoformat(),
        timestamp=now.isoformat(),
    )
    logger.debug(f"Parsed sale: {event}")
    return event
