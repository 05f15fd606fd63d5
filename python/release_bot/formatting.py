#!/usr/bin/env python3
"""
Message texts and inline keyboards for the release control bot.
"""

from datetime import datetime
from typing import List

from telegram import InlineKeyboardButton
from telegram.helpers import escape_markdown

from .models import Branch, CallbackAction, PullRequest, Release

HELP_TEXT = """🤖 *Release control bot*

*Commands:*
/help - show this message
/start - show the main menu

*Actions:*
📦 Create release - starts the release build pipeline
🌿 Branches - lists the repository branches
🔀 Pull Requests - lists open pull requests
⬇️ Latest release - shows the latest release and pre-release

*Note:* only allowed users and chats can use this bot."""

MAIN_MENU_TEXT = "Choose an action:"
RELEASE_STARTED_TEXT = "✅ Release pipeline started!\nYou will be notified when it finishes."

# Listings stop short of the transport cut so it never has to trim them
LISTING_LIMIT = 3900


def _esc(value) -> str:
    return escape_markdown(str(value or ""), version=1)


def format_date(value: str) -> str:
    """Render an RFC 3339 timestamp as DD.MM.YYYY HH:MM"""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%d.%m.%Y %H:%M")


def format_size(size: int) -> str:
    amount = float(size)
    for unit in ("B", "KB", "MB"):
        if amount < 1024:
            return f"{amount:.0f} {unit}" if unit == "B" else f"{amount:.1f} {unit}"
        amount /= 1024
    return f"{amount:.1f} GB"


def _button(text: str, action: CallbackAction) -> InlineKeyboardButton:
    return InlineKeyboardButton(text, callback_data=action.value)


def main_menu_keyboard() -> List[List[InlineKeyboardButton]]:
    return [
        [_button("📦 Create release", CallbackAction.CREATE_RELEASE)],
        [_button("🌿 Show branches", CallbackAction.SHOW_BRANCHES)],
        [_button("🔀 Show pull requests", CallbackAction.SHOW_PRS)],
        [_button("⬇️ Latest release", CallbackAction.SHOW_LATEST_RELEASE)],
    ]


def back_keyboard() -> List[List[InlineKeyboardButton]]:
    return [[_button("◀️ Back", CallbackAction.BACK_TO_MAIN)]]


def _join_blocks(header: List[str], blocks: List[str], separator: str) -> str:
    """Join whole blocks under the header, dropping the tail past LISTING_LIMIT"""
    text = "\n".join(header)
    for shown, block in enumerate(blocks):
        candidate = text + (separator if shown else "") + block
        if len(candidate) > LISTING_LIMIT:
            return f"{text}\n\n… and {len(blocks) - shown} more"
        text = candidate
    return text


def format_branches(branches: List[Branch]) -> str:
    header = ["*🌿 Branches:*", ""]
    if not branches:
        return "\n".join(header + ["No branches found."])
    blocks = []
    for branch in branches:
        marker = " 🔒" if branch.protected else ""
        blocks.append(f"• {_esc(branch.name)}{marker}")
    return _join_blocks(header, blocks, "\n")


def format_pull_requests(pull_requests: List[PullRequest]) -> str:
    header = ["*🔀 Pull Requests:*", ""]
    if not pull_requests:
        return "\n".join(header + ["No open pull requests."])
    blocks = [
        "\n".join([
            f"*#{pr.number} {_esc(pr.title)}*",
            f"• Author: {_esc(pr.author)}",
            f"• State: {_esc(pr.state)}",
            f"• Created: {format_date(pr.created_at)}",
            f"• [Open pull request]({pr.html_url})",
        ])
        for pr in pull_requests
    ]
    return _join_blocks(header, blocks, "\n\n")


def _format_release(title: str, release: Release) -> List[str]:
    lines = [
        f"*{title}:*",
        f"• Name: {_esc(release.name)}",
        f"• Tag: {_esc(release.tag_name)}",
        f"• Created: {format_date(release.created_at)}",
        f"• Published: {format_date(release.published_at)}",
        f"• Link: [GitHub Release]({release.html_url})",
    ]
    if release.assets:
        lines.append("")
        lines.append("*Assets:*")
        for asset in release.assets:
            lines.append(f"• {_esc(asset.name)} ({format_size(asset.size)})")
    return lines


def format_releases(release: Release, pre_release: Release) -> str:
    lines = ["*📥 Releases*", ""]
    lines.extend(_format_release("Latest release (main)", release))
    lines.append("")
    lines.extend(_format_release("Latest pre-release (develop)", pre_release))
    return "\n".join(lines)


def format_error(what: str, error: Exception) -> str:
    return f"❌ Failed to fetch {what}: {_esc(error)}"


def format_not_found(error: Exception) -> str:
    return f"ℹ️ {_esc(error)}"
