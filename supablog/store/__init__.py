"""State containers for posts and auth."""

from .actions import MutationPolicy
from .auth import AuthState, bind_auth_session, sign_in, sign_out, sign_up
from .posts import PostsState, create_post, delete_post, fetch_posts, page_range, update_post
from .store import AppState, Store

__all__ = [
    "AppState",
    "AuthState",
    "MutationPolicy",
    "PostsState",
    "Store",
    "bind_auth_session",
    "create_post",
    "delete_post",
    "fetch_posts",
    "page_range",
    "sign_in",
    "sign_out",
    "sign_up",
    "update_post",
]
