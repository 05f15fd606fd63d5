#!/usr/bin/env python3
"""
Command dispatcher for the release control bot.

This module routes one normalized update to its handler: text messages get
the help text or the main menu, button presses run one CallbackAction and
render the result by editing the message the button belongs to.
"""

import logging
from typing import Awaitable, Callable, Dict

from .access import AccessGuard
from .errors import NotFoundError, ReleaseBotError, TelegramAPIError
from .formatting import (
    HELP_TEXT,
    MAIN_MENU_TEXT,
    RELEASE_STARTED_TEXT,
    back_keyboard,
    format_branches,
    format_error,
    format_not_found,
    format_pull_requests,
    format_releases,
    main_menu_keyboard,
)
from .github_client import GitHubClient
from .models import CallbackAction, CallbackUpdate, MessageUpdate, Update
from .telegram_transport import TelegramTransport

UNKNOWN_COMMAND_TEXT = "Unknown command"
RELEASE_FAILED_TEXT = "❌ Error: the release pipeline could not be started"


class CommandDispatcher:
    """Routes updates to handlers after the access check"""

    def __init__(
        self,
        transport: TelegramTransport,
        github: GitHubClient,
        guard: AccessGuard,
        workflow_file: str = "merge.yml",
        workflow_ref: str = "develop"
    ):
        self.transport = transport
        self.github = github
        self.guard = guard
        self.workflow_file = workflow_file
        self.workflow_ref = workflow_ref
        self.callback_handlers: Dict[CallbackAction, Callable[[CallbackUpdate], Awaitable[None]]] = {
            CallbackAction.SHOW_BRANCHES: self._show_branches,
            CallbackAction.SHOW_PRS: self._show_pull_requests,
            CallbackAction.SHOW_LATEST_RELEASE: self._show_latest_release,
            CallbackAction.CREATE_RELEASE: self._create_release,
            CallbackAction.BACK_TO_MAIN: self._back_to_main,
            CallbackAction.UNRECOGNIZED: self._unrecognized,
        }

    async def dispatch(self, update: Update):
        """Handle a single update"""
        if isinstance(update, CallbackUpdate):
            await self.handle_callback(update)
        else:
            await self.handle_message(update)

    async def handle_message(self, message: MessageUpdate):
        reason = self.guard.denial_reason(message.user_id, message.chat_id)
        if reason:
            logging.warning(
                f"Denied message from user {message.user_id} in chat {message.chat_id}: {reason}"
            )
            await self._safely(self.transport.send_message(message.chat_id, reason))
            return

        command = message.text.strip().split(maxsplit=1)[0] if message.text.strip() else ""
        command = command.split("@", 1)[0].lower()
        logging.info(f"Message {command or '<empty>'} from user {message.user_id}")

        if command in ("/start", "/help"):
            await self._safely(
                self.transport.send_message(message.chat_id, HELP_TEXT, main_menu_keyboard())
            )
        else:
            await self._safely(
                self.transport.send_message(message.chat_id, MAIN_MENU_TEXT, main_menu_keyboard())
            )

    async def handle_callback(self, callback: CallbackUpdate):
        reason = self.guard.denial_reason(callback.user_id, callback.chat_id)
        if reason:
            logging.warning(
                f"Denied callback {callback.data!r} from user {callback.user_id} "
                f"in chat {callback.chat_id}: {reason}"
            )
            await self._safely(self.transport.answer_callback(callback.callback_id, reason))
            return

        action = callback.action
        logging.info(f"Callback {action.value} from user {callback.user_id}")
        await self.callback_handlers[action](callback)

    async def _safely(self, call: Awaitable[None]) -> bool:
        """Await a transport call, logging instead of raising on failure"""
        try:
            await call
        except TelegramAPIError as e:
            logging.error(f"Telegram call failed: {e}")
            return False
        return True

    async def _edit(self, callback: CallbackUpdate, text: str, keyboard=None):
        await self._safely(
            self.transport.edit_message(callback.chat_id, callback.message_id, text, keyboard)
        )

    async def _edit_failure(self, callback: CallbackUpdate, what: str, error: ReleaseBotError):
        if isinstance(error, NotFoundError):
            await self._edit(callback, format_not_found(error), back_keyboard())
        else:
            logging.error(f"Failed to fetch {what}: {error}")
            await self._edit(callback, format_error(what, error))

    async def _show_branches(self, callback: CallbackUpdate):
        await self._safely(self.transport.answer_callback(callback.callback_id, "Fetching branches..."))
        try:
            branches = await self.github.list_branches()
        except ReleaseBotError as e:
            await self._edit_failure(callback, "branches", e)
            return
        await self._edit(callback, format_branches(branches), back_keyboard())

    async def _show_pull_requests(self, callback: CallbackUpdate):
        await self._safely(
            self.transport.answer_callback(callback.callback_id, "Fetching pull requests...")
        )
        try:
            pull_requests = await self.github.list_pull_requests()
        except ReleaseBotError as e:
            await self._edit_failure(callback, "pull requests", e)
            return
        await self._edit(callback, format_pull_requests(pull_requests), back_keyboard())

    async def _show_latest_release(self, callback: CallbackUpdate):
        await self._safely(
            self.transport.answer_callback(callback.callback_id, "Fetching release information...")
        )
        try:
            release = await self.github.latest_release()
        except ReleaseBotError as e:
            await self._edit_failure(callback, "the latest release", e)
            return
        try:
            pre_release = await self.github.latest_pre_release()
        except ReleaseBotError as e:
            await self._edit_failure(callback, "the latest pre-release", e)
            return
        await self._edit(callback, format_releases(release, pre_release), back_keyboard())

    async def _create_release(self, callback: CallbackUpdate):
        """
        Dispatch the release workflow.

        The callback is answered before the trigger, so a failure alert goes
        out as a second answer to the same query. Telegram usually rejects
        that; the rejection is logged and the message is left unchanged, so
        the failure may only be visible in the log.
        """
        await self._safely(
            self.transport.answer_callback(callback.callback_id, "Starting release pipeline...")
        )
        try:
            await self.github.trigger_workflow(self.workflow_file, ref=self.workflow_ref)
        except ReleaseBotError as e:
            logging.error(f"Failed to trigger workflow {self.workflow_file}: {e}")
            await self._safely(self.transport.show_alert(callback.callback_id, RELEASE_FAILED_TEXT))
            return
        await self._edit(callback, RELEASE_STARTED_TEXT, back_keyboard())

    async def _back_to_main(self, callback: CallbackUpdate):
        await self._safely(self.transport.answer_callback(callback.callback_id))
        await self._edit(callback, MAIN_MENU_TEXT, main_menu_keyboard())

    async def _unrecognized(self, callback: CallbackUpdate):
        logging.warning(f"Unknown callback data {callback.data!r}")
        await self._safely(self.transport.answer_callback(callback.callback_id, UNKNOWN_COMMAND_TEXT))
