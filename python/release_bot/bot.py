#!/usr/bin/env python3
"""
Main poll loop for the release control bot.

This module wires the components together and runs the single long-poll
loop: fetch a batch of updates, handle each one in order, repeat.
"""

import asyncio
import logging

import aiohttp

from .access import AccessGuard
from .config import Config
from .dispatcher import CommandDispatcher
from .github_client import GitHubClient
from .telegram_transport import TelegramTransport

RETRY_DELAY = 5


class ReleaseBot:
    """Perpetual long-poll loop"""

    def __init__(self, transport: TelegramTransport, dispatcher: CommandDispatcher,
                 retry_delay: float = RETRY_DELAY):
        self.transport = transport
        self.dispatcher = dispatcher
        self.retry_delay = retry_delay
        self._running = False

    def stop(self):
        self._running = False

    async def run_once(self) -> int:
        """Poll once and handle the returned batch; returns the batch size"""
        updates = await self.transport.poll()
        for update in updates:
            try:
                await self.dispatcher.dispatch(update)
            except Exception as e:
                logging.error(f"Error handling update {update.update_id}: {e}")
        return len(updates)

    async def run(self):
        """Main loop; poll failures are retried after a fixed delay"""
        logging.info("Starting release bot")
        self._running = True
        while self._running:
            try:
                await self.run_once()
            except Exception as e:
                logging.error(f"Failed to get updates: {e}")
                await asyncio.sleep(self.retry_delay)
        logging.info("Release bot stopped")


def setup_logging(log_file: str = "release_bot.log"):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


async def main(config_path: str = "config.json"):
    """Main entry point"""
    setup_logging()
    config = Config(config_path)
    logging.info(
        f"Serving {config.github_owner}/{config.github_repo} for "
        f"{len(config.allowed_user_ids)} users in {len(config.allowed_chat_ids)} chats"
    )

    transport = TelegramTransport(config.telegram_bot_token)
    guard = AccessGuard(config.allowed_user_ids, config.allowed_chat_ids)

    async with aiohttp.ClientSession() as session:
        github = GitHubClient(
            config.github_token,
            config.github_owner,
            config.github_repo,
            session
        )
        dispatcher = CommandDispatcher(
            transport,
            github,
            guard,
            workflow_file=config.workflow_file,
            workflow_ref=config.workflow_ref
        )
        await transport.initialize()
        try:
            await ReleaseBot(transport, dispatcher).run()
        finally:
            await transport.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
