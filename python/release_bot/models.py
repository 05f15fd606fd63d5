#!/usr/bin/env python3
"""
Data models for the release control bot.

This module contains the normalized chat updates, the closed set of
callback actions and read-only projections of GitHub API responses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class CallbackAction(Enum):
    """Inline button actions understood by the dispatcher"""
    SHOW_BRANCHES = "show_branches"
    SHOW_PRS = "show_prs"
    SHOW_LATEST_RELEASE = "show_latest_release"
    CREATE_RELEASE = "create_release"
    BACK_TO_MAIN = "back_to_main"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, token: Optional[str]) -> "CallbackAction":
        """Map raw callback data to an action, falling back to UNRECOGNIZED"""
        try:
            return cls(token)
        except ValueError:
            return cls.UNRECOGNIZED


@dataclass(frozen=True)
class MessageUpdate:
    """A text message sent to the bot"""
    update_id: int
    chat_id: int
    user_id: int
    text: str
    message_id: Optional[int] = None


@dataclass(frozen=True)
class CallbackUpdate:
    """An inline button press on one of the bot's messages"""
    update_id: int
    callback_id: str
    chat_id: int
    user_id: int
    message_id: int
    data: str = ""

    @property
    def action(self) -> CallbackAction:
        return CallbackAction.parse(self.data)


Update = Union[MessageUpdate, CallbackUpdate]


@dataclass
class Branch:
    """Repository branch"""
    name: str
    sha: str = ""
    protected: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Branch":
        return cls(
            name=data["name"],
            sha=(data.get("commit") or {}).get("sha", ""),
            protected=bool(data.get("protected", False))
        )


@dataclass
class PullRequest:
    """Pull request summary"""
    number: int
    title: str
    state: str
    html_url: str
    created_at: str
    author: str = ""
    head_ref: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequest":
        return cls(
            number=data["number"],
            title=data.get("title", ""),
            state=data.get("state", ""),
            html_url=data.get("html_url", ""),
            created_at=data.get("created_at", ""),
            author=(data.get("user") or {}).get("login", ""),
            head_ref=(data.get("head") or {}).get("ref", "")
        )


@dataclass
class Asset:
    """File attached to a release"""
    name: str
    size: int = 0
    download_url: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Asset":
        return cls(
            name=data["name"],
            size=data.get("size", 0),
            download_url=data.get("browser_download_url", "")
        )


@dataclass
class Release:
    """Published release or pre-release"""
    tag_name: str
    name: str
    html_url: str
    created_at: str = ""
    published_at: str = ""
    prerelease: bool = False
    draft: bool = False
    assets: List[Asset] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Release":
        return cls(
            tag_name=data.get("tag_name", ""),
            name=data.get("name") or data.get("tag_name", ""),
            html_url=data.get("html_url", ""),
            created_at=data.get("created_at") or "",
            published_at=data.get("published_at") or "",
            prerelease=bool(data.get("prerelease", False)),
            draft=bool(data.get("draft", False)),
            assets=[Asset.from_api(asset) for asset in data.get("assets", [])]
        )
