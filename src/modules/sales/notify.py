# -*- coding: utf-8 -*-
"""Post messages into the group chat through a GroupMe bot.

Delivery failures are logged and swallowed: by the time a message is sent the
leaderboard and log are already updated, and errors never go back to chat.
"""

import logging

import requests

logger = logging.getLogger(__name__)

GROUPME_POST_URL = "https://api.groupme.com/v3/bots/post"


class GroupMeNotifier:
    """Sends plain-text messages as a GroupMe bot."""

    def __init__(self, bot_id: str, post_url: str = GROUPME_POST_URL, timeout: float = 10):
        self.bot_id = bot_id
        self.post_url = post_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> "GroupMeNotifier":
        return cls(config.groupme_bot_id, config.groupme_post_url, config.groupme_timeout)

    def send(self, text: str) -> bool:
        """Post a message.

        Returns:
            True if GroupMe accepted the message, False otherwise.
        """
        if not self.bot_id:
            logger.error("GROUPME_BOT_ID is not set; cannot send GroupMe message.")
            return False

        try:
            response = requests.post(
                self.post_url,
                json={"bot_id": self.bot_id, "text": text},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Error sending GroupMe message: {e}")
            return False
        return True
