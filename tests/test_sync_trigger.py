"""Tests for AuthState signals and the SyncTrigger."""

import logging
from unittest.mock import MagicMock

import pytest

from topicsync.sync import AuthState, Observable, SyncTrigger

# ============================================================================
# Observable / AuthState
# ============================================================================


class TestObservable:
    def test_notifies_on_change_only(self):
        signal = Observable(False, name="flag")
        listener = MagicMock()
        signal.subscribe(listener)

        signal.set(False)
        signal.set(True)
        signal.set(True)

        listener.assert_called_once_with(False, True)
        assert signal.value is True

    def test_unsubscribe(self):
        signal = Observable(0)
        listener = MagicMock()
        unsubscribe = signal.subscribe(listener)
        unsubscribe()
        unsubscribe()
        signal.set(1)
        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self, caplog):
        signal = Observable(0, name="counter")
        signal.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        second = MagicMock()
        signal.subscribe(second)

        with caplog.at_level(logging.WARNING):
            signal.set(1)

        second.assert_called_once_with(0, 1)
        assert "Listener on counter failed: boom" in caplog.text


class TestAuthState:
    def test_defaults(self):
        auth = AuthState()
        assert auth.is_authenticated.value is False
        assert auth.token.value is None

    def test_login_publishes_token_first(self):
        auth = AuthState()
        events = []
        auth.token.subscribe(lambda old, new: events.append("token"))
        auth.is_authenticated.subscribe(lambda old, new: events.append("auth"))

        auth.login("t")

        assert events == ["token", "auth"]

    def test_logout_clears_both(self):
        auth = AuthState(is_authenticated=True, token="t")
        auth.logout()
        assert auth.is_authenticated.value is False
        assert auth.token.value is None


# ============================================================================
# SyncTrigger
# ============================================================================


@pytest.fixture
def auth():
    return AuthState()


@pytest.fixture
def migration():
    return MagicMock(return_value=None)


@pytest.fixture
def trigger(auth, migration):
    return SyncTrigger(auth, migration)


class TestSyncTrigger:
    def test_does_not_fire_on_attach(self, migration):
        SyncTrigger(AuthState(is_authenticated=True, token="t"), migration)
        migration.assert_not_called()

    def test_fires_once_on_login(self, auth, trigger, migration):
        auth.login("t")
        migration.assert_called_once_with()
        assert trigger.has_synced

    def test_authenticated_flag_alone_fires(self, auth, trigger, migration):
        auth.is_authenticated.set(True)
        migration.assert_called_once()

        auth.token.set("late-token")
        migration.assert_called_once()

    def test_token_fires_when_authenticated_and_guard_clear(self, auth, trigger, migration):
        auth.is_authenticated.set(True)
        trigger.reset()

        auth.token.set("t")

        assert migration.call_count == 2
        assert trigger.has_synced

    def test_token_then_authenticated(self, auth, trigger, migration):
        auth.token.set("t")
        migration.assert_not_called()
        auth.is_authenticated.set(True)
        migration.assert_called_once()

    def test_token_refresh_does_not_refire(self, auth, trigger, migration):
        auth.login("t1")
        auth.token.set("t2")
        migration.assert_called_once()

    def test_relogin_migrates_again(self, auth, trigger, migration):
        auth.login("t")
        auth.logout()
        assert not trigger.has_synced
        auth.login("t")
        assert migration.call_count == 2

    def test_flag_flip_false_true_false_true(self, auth, trigger, migration):
        auth.is_authenticated.set(True)
        auth.is_authenticated.set(False)
        auth.is_authenticated.set(True)
        assert migration.call_count == 2

    def test_failure_is_swallowed_and_recorded(self, auth, migration, caplog):
        error = RuntimeError("backend down")
        migration.side_effect = error
        trigger = SyncTrigger(auth, migration)

        with caplog.at_level(logging.ERROR):
            auth.login("t")

        assert auth.is_authenticated.value is True
        assert trigger.last_error is error
        assert trigger.has_synced
        assert "Local data migration failed: backend down" in caplog.text

    def test_success_clears_last_error(self, auth, migration):
        migration.side_effect = [RuntimeError("x"), None]
        trigger = SyncTrigger(auth, migration)
        auth.login("t")
        auth.logout()
        auth.login("t")
        assert trigger.last_error is None

    def test_detach(self, auth, trigger, migration):
        trigger.detach()
        auth.login("t")
        migration.assert_not_called()

    def test_reset(self, auth, trigger, migration):
        auth.login("t")
        trigger.reset()
        assert not trigger.has_synced
        # No transition, so nothing fires until the next login
        migration.assert_called_once()
