#!/usr/bin/env python3
"""
Access control for the release control bot.

Both the sender and the chat must be on the configured allow-lists before
any command runs.
"""

from typing import Iterable

USER_DENIED_TEXT = "You do not have access to this bot."
CHAT_DENIED_TEXT = "This chat is not allowed to use the bot."


class AccessGuard:
    """Static allow-list check for users and chats"""

    def __init__(self, allowed_user_ids: Iterable[int], allowed_chat_ids: Iterable[int]):
        self.allowed_user_ids = frozenset(allowed_user_ids)
        self.allowed_chat_ids = frozenset(allowed_chat_ids)

    def is_user_allowed(self, user_id: int) -> bool:
        return user_id in self.allowed_user_ids

    def is_chat_allowed(self, chat_id: int) -> bool:
        return chat_id in self.allowed_chat_ids

    def denial_reason(self, user_id: int, chat_id: int):
        """Return the denial text for this pair, or None if both are allowed"""
        if not self.is_user_allowed(user_id):
            return USER_DENIED_TEXT
        if not self.is_chat_allowed(chat_id):
            return CHAT_DENIED_TEXT
        return None
