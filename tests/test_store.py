"""Tests for the store, subscriptions and cancel tokens."""

from supablog.lifecycle import CancelToken, Subscription
from supablog.models import User
from supablog.store import AppState, Store
from supablog.store.actions import Action, ClearAuthError, SetPage, SetUser
from supablog.store.store import root_reducer


class Unknown(Action):
    pass


class TestRootReducer:
    def test_unknown_action_returns_same_state(self):
        state = AppState()
        assert root_reducer(state, Unknown()) is state

    def test_routes_to_both_containers(self):
        state = root_reducer(AppState(), SetPage(3))
        state = root_reducer(state, SetUser(User(id="u")))
        assert state.posts.current_page == 3
        assert state.auth.user.id == "u"

    def test_reducer_does_not_mutate_previous_state(self):
        before = AppState()
        after = root_reducer(before, SetPage(2))
        assert before.posts.current_page == 1
        assert after.posts.current_page == 2


class TestStore:
    def test_listeners_notified_on_change(self):
        store = Store()
        seen = []
        store.subscribe(seen.append)
        store.dispatch(SetPage(2))
        assert len(seen) == 1
        assert seen[0].posts.current_page == 2

    def test_no_notification_without_change(self):
        store = Store()
        seen = []
        store.subscribe(seen.append)
        store.dispatch(ClearAuthError())
        store.dispatch(SetPage(1))
        assert seen == []

    def test_subscription_context_manager(self):
        store = Store()
        seen = []
        with store.subscribe(seen.append) as subscription:
            store.dispatch(SetPage(2))
        store.dispatch(SetPage(3))
        assert len(seen) == 1
        assert subscription.active is False

    def test_listener_may_unsubscribe_during_dispatch(self):
        store = Store()
        seen = []

        def once(state):
            seen.append(state)
            subscription.unsubscribe()

        subscription = store.subscribe(once)
        store.dispatch(SetPage(2))
        store.dispatch(SetPage(3))
        assert len(seen) == 1

    def test_dispatch_returns_action(self):
        action = SetPage(4)
        assert Store().dispatch(action) is action


class TestLifecycle:
    def test_cancel_token(self):
        token = CancelToken()
        assert token.cancelled is False
        token.cancel()
        assert token.cancelled is True

    def test_unsubscribe_is_idempotent(self):
        calls = []
        subscription = Subscription(lambda: calls.append(1))
        subscription.unsubscribe()
        subscription.unsubscribe()
        assert calls == [1]
