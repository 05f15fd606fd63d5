#!/usr/bin/env python3
"""
Exception types for the release control bot.

Clients raise these, the dispatcher turns them into chat replies and the
poll loop logs whatever reaches it.
"""

from typing import Optional


class ReleaseBotError(Exception):
    """Base class for all bot errors"""


class TransportError(ReleaseBotError):
    """A remote call failed or returned an unexpected status"""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status is not None:
            message = f"{message} (status {self.status})"
        if self.body:
            message = f"{message}: {self.body}"
        return message


class GitHubAPIError(TransportError):
    """GitHub REST API failure"""


class TelegramAPIError(TransportError):
    """Telegram Bot API failure"""


class NotFoundError(ReleaseBotError):
    """The requested release, pre-release or pull request does not exist"""
