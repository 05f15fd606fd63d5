"""Shared fixtures for the release bot tests"""

import os
import sys
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import CallbackQuery, Chat, Message, Update, User

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from release_bot.access import AccessGuard
from release_bot.dispatcher import CommandDispatcher
from release_bot.models import CallbackUpdate, MessageUpdate

ALLOWED_USER = 111
ALLOWED_CHAT = -100


def make_response_context(status=200, json_data=None, text=""):
    """Build an async context manager mimicking session.request(...)"""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)

    context = AsyncMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=None)
    return context


def make_session(*contexts):
    session = MagicMock()
    if len(contexts) == 1:
        session.request.return_value = contexts[0]
    else:
        session.request.side_effect = list(contexts)
    return session


def tg_message_update(update_id, text="/start", user_id=ALLOWED_USER, chat_id=ALLOWED_CHAT):
    message = Message(
        message_id=update_id * 10,
        date=datetime(2024, 1, 1),
        chat=Chat(id=chat_id, type="private"),
        from_user=User(id=user_id, first_name="Test", is_bot=False),
        text=text
    )
    return Update(update_id=update_id, message=message)


def tg_callback_update(update_id, data="show_branches", user_id=ALLOWED_USER, chat_id=ALLOWED_CHAT):
    user = User(id=user_id, first_name="Test", is_bot=False)
    message = Message(
        message_id=42,
        date=datetime(2024, 1, 1),
        chat=Chat(id=chat_id, type="private"),
        text="Choose an action:"
    )
    query = CallbackQuery(
        id=f"cb-{update_id}",
        from_user=user,
        chat_instance="instance",
        data=data,
        message=message
    )
    return Update(update_id=update_id, callback_query=query)


@pytest.fixture
def guard():
    return AccessGuard({ALLOWED_USER}, {ALLOWED_CHAT})


@pytest.fixture
def transport():
    return AsyncMock()


@pytest.fixture
def github():
    return AsyncMock()


@pytest.fixture
def dispatcher(transport, github, guard):
    return CommandDispatcher(transport, github, guard, workflow_file="merge.yml", workflow_ref="develop")


@pytest.fixture
def message_factory():
    def factory(text="/start", user_id=ALLOWED_USER, chat_id=ALLOWED_CHAT):
        return MessageUpdate(update_id=1, chat_id=chat_id, user_id=user_id, text=text, message_id=5)
    return factory


@pytest.fixture
def callback_factory():
    def factory(data="show_branches", user_id=ALLOWED_USER, chat_id=ALLOWED_CHAT):
        return CallbackUpdate(
            update_id=2,
            callback_id="cb-1",
            chat_id=chat_id,
            user_id=user_id,
            message_id=42,
            data=data
        )
    return factory
