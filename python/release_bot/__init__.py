#!/usr/bin/env python3
"""
Release Control Bot Package

A Telegram bot that lets allowed users browse a GitHub repository's
branches, pull requests and releases and start the release pipeline.
"""

__version__ = "1.0.0"

# Define what's available for import
__all__ = [
    # Models
    "CallbackAction",
    "MessageUpdate",
    "CallbackUpdate",
    "Branch",
    "PullRequest",
    "Release",
    "Asset",

    # Core components
    "Config",
    "AccessGuard",
    "GitHubClient",
    "TelegramTransport",
    "CommandDispatcher",
    "ReleaseBot",
]


# Lazy imports so the package can be inspected without aiohttp/telegram installed
def __getattr__(name):
    if name in ("CallbackAction", "MessageUpdate", "CallbackUpdate",
                "Branch", "PullRequest", "Release", "Asset"):
        from . import models
        return getattr(models, name)
    if name == "Config":
        from .config import Config
        return Config
    if name == "AccessGuard":
        from .access import AccessGuard
        return AccessGuard
    if name == "GitHubClient":
        from .github_client import GitHubClient
        return GitHubClient
    if name == "TelegramTransport":
        from .telegram_transport import TelegramTransport
        return TelegramTransport
    if name == "CommandDispatcher":
        from .dispatcher import CommandDispatcher
        return CommandDispatcher
    if name == "ReleaseBot":
        from .bot import ReleaseBot
        return ReleaseBot
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
