"""Application state and the store that applies actions to it."""

import logging
from dataclasses import dataclass, field
from typing import Callable

from supablog.lifecycle import Subscription

from .actions import Action
from .auth import AuthState, auth_reducer
from .posts import PostsState, posts_reducer

logger = logging.getLogger(__name__)

StateListener = Callable[["AppState"], None]


@dataclass(frozen=True)
class AppState:
    auth: AuthState = field(default_factory=AuthState)
    posts: PostsState = field(default_factory=PostsState)


def root_reducer(state: AppState, action: Action) -> AppState:
    """Apply an action to both containers."""
    auth = auth_reducer(state.auth, action)
    posts = posts_reducer(state.posts, action)
    if auth == state.auth and posts == state.posts:
        return state
    return AppState(auth=auth, posts=posts)


class Store:
    """Holds the application state and notifies listeners of changes.

    Pass the store explicitly to pages and thunks; there is no module-level
    instance.
    """

    def __init__(self, state: AppState | None = None):
        self._state = state or AppState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> Action:
        """Apply an action and notify listeners if the state changed."""
        new_state = root_reducer(self._state, action)
        logger.debug(f"Dispatched {type(action).__name__}")
        if new_state is self._state:
            return action

        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return action

    def subscribe(self, listener: StateListener) -> Subscription:
        """Register a listener called with the new state after each change."""
        self._listeners.append(listener)
        return Subscription(lambda: self._listeners.remove(listener))
