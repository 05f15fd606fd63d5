"""Unit tests for the access guard"""

import release_bot
from release_bot.access import CHAT_DENIED_TEXT, USER_DENIED_TEXT, AccessGuard


class TestAccessGuard:
    """Allow-list membership"""

    def setup_method(self):
        self.guard = AccessGuard([1, 2], [-100])

    def test_membership(self):
        assert self.guard.is_user_allowed(1)
        assert not self.guard.is_user_allowed(3)
        assert self.guard.is_chat_allowed(-100)
        assert not self.guard.is_chat_allowed(100)

    def test_user_is_checked_first(self):
        assert self.guard.denial_reason(3, 100) == USER_DENIED_TEXT

    def test_chat_denial(self):
        assert self.guard.denial_reason(1, 100) == CHAT_DENIED_TEXT

    def test_allowed_pair(self):
        assert self.guard.denial_reason(2, -100) is None

    def test_empty_lists_deny_everyone(self):
        guard = AccessGuard([], [])
        assert guard.denial_reason(1, -100) == USER_DENIED_TEXT


def test_package_exports_are_lazy():
    assert release_bot.AccessGuard is AccessGuard
    assert release_bot.CallbackAction.SHOW_PRS.value == "show_prs"
