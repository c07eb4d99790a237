"""Auth container: current user and sign up/in/out request status."""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable

from supablog.backend.base import BlogBackend
from supablog.errors import AuthServiceError, BackendError, RequestRejected
from supablog.lifecycle import Subscription
from supablog.models import User

from .actions import (
    Action,
    ClearAuthError,
    SetUser,
    SignInFailed,
    SignInRequested,
    SignInSucceeded,
    SignOutFailed,
    SignOutRequested,
    SignOutSucceeded,
    SignUpFailed,
    SignUpRequested,
    SignUpSucceeded,
)

if TYPE_CHECKING:
    from .store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthState:
    user: User | None = None
    loading: bool = False
    error: str | None = None


def _requested(state: AuthState, action) -> AuthState:
    return replace(state, loading=True, error=None)


def _succeeded(state: AuthState, action) -> AuthState:
    return replace(state, loading=False, user=action.user)


def _failed(state: AuthState, action) -> AuthState:
    return replace(state, loading=False, error=action.message)


def _sign_out_failed(state: AuthState, action: SignOutFailed) -> AuthState:
    # The user is kept even though the remote session may be gone
    return replace(state, error=action.message)


REDUCERS: dict[type, Callable[[AuthState, Action], AuthState]] = {
    SignUpRequested: _requested,
    SignUpSucceeded: _succeeded,
    SignUpFailed: _failed,
    SignInRequested: _requested,
    SignInSucceeded: _succeeded,
    SignInFailed: _failed,
    # Sign out does not toggle loading
    SignOutRequested: lambda state, action: state,
    SignOutSucceeded: lambda state, action: replace(state, user=None),
    SignOutFailed: _sign_out_failed,
    SetUser: lambda state, action: replace(state, user=action.user, error=None),
    ClearAuthError: lambda state, action: replace(state, error=None),
}


def auth_reducer(state: AuthState, action: Action) -> AuthState:
    """Apply an action to the auth container. Unknown actions are ignored."""
    reducer = REDUCERS.get(type(action))
    if reducer is None:
        return state
    return reducer(state, action)


def _auth_message(e: BackendError, fallback: str) -> str:
    if isinstance(e, AuthServiceError) and str(e):
        return str(e)
    return fallback


async def sign_up(store: "Store", backend: BlogBackend, email: str, password: str) -> User | None:
    """Register an account and store the returned user.

    Raises:
        RequestRejected: If the auth service rejects the request
    """
    store.dispatch(SignUpRequested(email))
    try:
        user = await backend.sign_up(email, password)
    except BackendError as e:
        message = _auth_message(e, "Signup failed")
        logger.error(f"Sign up failed for {email}: {e}")
        store.dispatch(SignUpFailed(message))
        raise RequestRejected("sign_up", message) from e

    store.dispatch(SignUpSucceeded(user))
    logger.info(f"Signed up {email}")
    return user


async def sign_in(store: "Store", backend: BlogBackend, email: str, password: str) -> User:
    """Sign in and store the user.

    Raises:
        RequestRejected: If the auth service rejects the credentials
    """
    store.dispatch(SignInRequested(email))
    try:
        user = await backend.sign_in(email, password)
    except BackendError as e:
        message = _auth_message(e, "Login failed")
        logger.error(f"Sign in failed for {email}: {e}")
        store.dispatch(SignInFailed(message))
        raise RequestRejected("sign_in", message) from e

    store.dispatch(SignInSucceeded(user))
    logger.info(f"Signed in {email}")
    return user


async def sign_out(store: "Store", backend: BlogBackend) -> None:
    """Sign out and clear the user.

    On failure the user stays set.

    Raises:
        RequestRejected: If the auth service call fails
    """
    store.dispatch(SignOutRequested())
    try:
        await backend.sign_out()
    except BackendError as e:
        message = str(e) or "Logout failed"
        logger.error(f"Sign out failed: {e}")
        store.dispatch(SignOutFailed(message))
        raise RequestRejected("sign_out", message) from e

    store.dispatch(SignOutSucceeded())
    logger.info("Signed out")


async def bind_auth_session(store: "Store", backend: BlogBackend) -> Subscription:
    """Mirror the backend session into the store.

    Registers a session-change listener, then loads the current session.

    Returns:
        Subscription that detaches the listener
    """
    def _on_change(event: str, user: User | None):
        logger.debug(f"Auth state change: {event}")
        store.dispatch(SetUser(user))

    subscription = Subscription(backend.on_auth_state_change(_on_change))

    try:
        user = await backend.get_session_user()
    except BackendError:
        subscription.unsubscribe()
        raise
    if user:
        store.dispatch(SetUser(user))
    return subscription
