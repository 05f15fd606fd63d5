#!/usr/bin/env python3
"""
Telegram transport for the release control bot.

This module long-polls the Bot API for new updates, normalizes them into
MessageUpdate / CallbackUpdate and sends, edits and answers messages.
"""

import logging
from typing import List, Optional, Sequence

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup
from telegram import Update as TelegramUpdate
from telegram.constants import ParseMode
from telegram.error import TelegramError

from .errors import TelegramAPIError
from .models import CallbackUpdate, MessageUpdate, Update

POLL_TIMEOUT = 30
MAX_MESSAGE_LENGTH = 4000

Keyboard = Sequence[Sequence[InlineKeyboardButton]]


class PollCursor:
    """Offset into the Telegram update stream; only ever moves forward"""

    def __init__(self, offset: int = 0):
        self.offset = offset

    def observe(self, update_id: int) -> int:
        self.offset = max(self.offset, update_id + 1)
        return self.offset


def _truncate(text: str) -> str:
    """Cut overlong text on a line boundary so no Markdown entity is split"""
    if len(text) <= MAX_MESSAGE_LENGTH:
        return text
    cut = text.rfind("\n", 0, MAX_MESSAGE_LENGTH)
    if cut <= 0:
        cut = MAX_MESSAGE_LENGTH
    return text[:cut].rstrip() + "\n... (truncated)"


def _markup(keyboard: Optional[Keyboard]) -> Optional[InlineKeyboardMarkup]:
    if keyboard is None:
        return None
    return InlineKeyboardMarkup(keyboard)


def normalize_update(update: TelegramUpdate) -> Optional[Update]:
    """Convert a library Update into the bot's own update types.

    Returns None for anything the bot does not react to: edited messages,
    channel posts, non-text messages and callbacks from inline messages.
    """
    if update.callback_query is not None:
        query = update.callback_query
        if query.message is None:
            return None
        return CallbackUpdate(
            update_id=update.update_id,
            callback_id=query.id,
            chat_id=query.message.chat.id,
            user_id=query.from_user.id,
            message_id=query.message.message_id,
            data=query.data or ""
        )

    message = update.message
    if message is None or message.from_user is None or message.text is None:
        return None
    return MessageUpdate(
        update_id=update.update_id,
        chat_id=message.chat.id,
        user_id=message.from_user.id,
        text=message.text,
        message_id=message.message_id
    )


class TelegramTransport:
    """Long-polling Telegram client"""

    def __init__(self, bot_token: str, bot: Optional[Bot] = None):
        self.bot = bot if bot is not None else Bot(token=bot_token)
        self.cursor = PollCursor()

    async def initialize(self):
        await self.bot.initialize()

    async def shutdown(self):
        await self.bot.shutdown()

    async def poll(self) -> List[Update]:
        """Wait up to POLL_TIMEOUT seconds for new updates"""
        try:
            raw_updates = await self.bot.get_updates(
                offset=self.cursor.offset,
                timeout=POLL_TIMEOUT,
                allowed_updates=["message", "callback_query"]
            )
        except TelegramError as e:
            raise TelegramAPIError(f"Failed to fetch updates: {e.message}", body=e.message) from e

        start = self.cursor.offset
        updates = []
        for raw in raw_updates:
            if raw.update_id < start:
                logging.debug(f"Discarding already seen update {raw.update_id}")
                continue
            self.cursor.observe(raw.update_id)
            update = normalize_update(raw)
            if update is None:
                logging.debug(f"Skipping unsupported update {raw.update_id}")
                continue
            updates.append(update)
        return updates

    async def send_message(self, chat_id: int, text: str, keyboard: Optional[Keyboard] = None):
        """Send a Markdown message, optionally with an inline keyboard"""
        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text=_truncate(text),
                parse_mode=ParseMode.MARKDOWN,
                reply_markup=_markup(keyboard)
            )
        except TelegramError as e:
            raise TelegramAPIError(f"Failed to send message: {e.message}", body=e.message) from e

    async def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None
    ):
        """Replace the text and keyboard of an existing message"""
        try:
            await self.bot.edit_message_text(
                text=_truncate(text),
                chat_id=chat_id,
                message_id=message_id,
                parse_mode=ParseMode.MARKDOWN,
                reply_markup=_markup(keyboard)
            )
        except TelegramError as e:
            raise TelegramAPIError(f"Failed to edit message: {e.message}", body=e.message) from e

    async def answer_callback(self, callback_id: str, text: Optional[str] = None):
        """Acknowledge a button press with a transient notice"""
        await self._answer(callback_id, text, show_alert=False)

    async def show_alert(self, callback_id: str, text: str):
        """Acknowledge a button press with a blocking alert dialog"""
        await self._answer(callback_id, text, show_alert=True)

    async def _answer(self, callback_id: str, text: Optional[str], show_alert: bool):
        try:
            await self.bot.answer_callback_query(
                callback_query_id=callback_id,
                text=text,
                show_alert=show_alert
            )
        except TelegramError as e:
            raise TelegramAPIError(f"Failed to answer callback: {e.message}", body=e.message) from e
