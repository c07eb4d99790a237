"""Post container: page of posts, selected post, paging and request status."""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Callable

from supablog.backend.base import BlogBackend
from supablog.config import POSTS_PER_PAGE
from supablog.errors import BackendError, RequestRejected
from supablog.models import Post

from .actions import (
    Action,
    ClearPostsError,
    CreatePostFailed,
    CreatePostRequested,
    CreatePostSucceeded,
    DeletePostFailed,
    DeletePostRequested,
    DeletePostSucceeded,
    FetchPostsFailed,
    FetchPostsRequested,
    FetchPostsSucceeded,
    MutationPolicy,
    SetCurrentPost,
    SetPage,
    UpdatePostFailed,
    UpdatePostRequested,
    UpdatePostSucceeded,
)

if TYPE_CHECKING:
    from .store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostsState:
    posts: tuple[Post, ...] = ()
    current_post: Post | None = None
    loading: bool = False
    error: str | None = None
    total_count: int = 0
    current_page: int = 1
    posts_per_page: int = POSTS_PER_PAGE

    @property
    def total_pages(self) -> int:
        # ceil without floats
        return -(-self.total_count // self.posts_per_page)


def page_range(page: int, per_page: int) -> tuple[int, int]:
    """Zero-based inclusive row range for a 1-based page number."""
    start = (page - 1) * per_page
    return start, start + per_page - 1


# === Reducers ===

def _fetch_requested(state: PostsState, action: FetchPostsRequested) -> PostsState:
    return replace(state, loading=True, error=None)


def _fetch_succeeded(state: PostsState, action: FetchPostsSucceeded) -> PostsState:
    return replace(
        state,
        loading=False,
        posts=tuple(action.posts),
        total_count=action.count,
    )


def _failed(state: PostsState, action) -> PostsState:
    # Previous posts stay visible
    return replace(state, loading=False, error=action.message)


def _create_succeeded(state: PostsState, action: CreatePostSucceeded) -> PostsState:
    if action.policy is not MutationPolicy.OPTIMISTIC_PREPEND:
        return state
    return replace(
        state,
        posts=(action.post,) + state.posts,
        total_count=state.total_count + 1,
    )


def _update_succeeded(state: PostsState, action: UpdatePostSucceeded) -> PostsState:
    posts = list(state.posts)
    for index, post in enumerate(posts):
        if post.id == action.post.id:
            posts[index] = action.post
            break
    return replace(state, posts=tuple(posts), current_post=action.post)


def _delete_succeeded(state: PostsState, action: DeletePostSucceeded) -> PostsState:
    total_count = state.total_count
    if action.deleted > 0:
        total_count -= 1
    return replace(
        state,
        posts=tuple(post for post in state.posts if post.id != action.id),
        total_count=total_count,
    )


def _unchanged(state: PostsState, action) -> PostsState:
    return state


REDUCERS: dict[type, Callable[[PostsState, Action], PostsState]] = {
    FetchPostsRequested: _fetch_requested,
    FetchPostsSucceeded: _fetch_succeeded,
    FetchPostsFailed: _failed,
    CreatePostRequested: _unchanged,
    CreatePostSucceeded: _create_succeeded,
    CreatePostFailed: _failed,
    UpdatePostRequested: _unchanged,
    UpdatePostSucceeded: _update_succeeded,
    UpdatePostFailed: _failed,
    DeletePostRequested: _unchanged,
    DeletePostSucceeded: _delete_succeeded,
    DeletePostFailed: _failed,
    SetPage: lambda state, action: replace(state, current_page=action.page),
    SetCurrentPost: lambda state, action: replace(state, current_post=action.post),
    ClearPostsError: lambda state, action: replace(state, error=None),
}


def posts_reducer(state: PostsState, action: Action) -> PostsState:
    """Apply an action to the post container. Unknown actions are ignored."""
    reducer = REDUCERS.get(type(action))
    if reducer is None:
        return state
    return reducer(state, action)


# === Thunks ===

def _reject(store: "Store", action: Action, name: str, e: BackendError) -> RequestRejected:
    logger.error(f"{name} failed: {e}")
    store.dispatch(action)
    return RequestRejected(name, action.message)


async def fetch_posts(
    store: "Store", backend: BlogBackend, page: int, per_page: int
) -> tuple[Post, ...]:
    """Load one page of posts into the container.

    Raises:
        RequestRejected: If the backend call fails
    """
    start, end = page_range(page, per_page)
    store.dispatch(FetchPostsRequested(page, per_page))
    try:
        posts, count = await backend.list_posts(start, end)
    except BackendError as e:
        raise _reject(store, FetchPostsFailed(f"Fetch failed: {e}"), "fetch_posts", e) from e

    action = FetchPostsSucceeded(tuple(posts), count or 0)
    store.dispatch(action)
    logger.debug(f"Fetched {len(posts)} posts for page {page} (total {action.count})")
    return action.posts


async def create_post(
    store: "Store",
    backend: BlogBackend,
    title: str,
    content: str,
    policy: MutationPolicy = MutationPolicy.OPTIMISTIC_PREPEND,
) -> Post:
    """Insert a post and reflect it in the container according to ``policy``.

    Raises:
        RequestRejected: If the insert (or, under REFETCH, the reload) fails
    """
    store.dispatch(CreatePostRequested(title, content))
    try:
        post = await backend.insert_post(title, content)
    except BackendError as e:
        message = f"Database error: {e}" if str(e) else "Failed to create post"
        raise _reject(store, CreatePostFailed(message), "create_post", e) from e

    store.dispatch(CreatePostSucceeded(post, policy))
    logger.info(f"Created post {post.id}")

    if policy is MutationPolicy.REFETCH:
        state = store.state.posts
        await fetch_posts(store, backend, state.current_page, state.posts_per_page)
    return post


async def update_post(
    store: "Store", backend: BlogBackend, post_id: str, title: str, content: str
) -> Post:
    """Update a post and make it the current post.

    Raises:
        RequestRejected: If the backend call fails
    """
    store.dispatch(UpdatePostRequested(post_id, title, content))
    try:
        post = await backend.update_post(post_id, title, content)
    except BackendError as e:
        raise _reject(store, UpdatePostFailed(f"Update failed: {e}"), "update_post", e) from e

    store.dispatch(UpdatePostSucceeded(post))
    logger.info(f"Updated post {post.id}")
    return post


async def delete_post(store: "Store", backend: BlogBackend, post_id: str) -> str:
    """Delete a post and drop it from the container.

    Raises:
        RequestRejected: If the backend call fails
    """
    store.dispatch(DeletePostRequested(post_id))
    try:
        deleted = await backend.delete_post(post_id)
    except BackendError as e:
        raise _reject(store, DeletePostFailed(f"Delete failed: {e}"), "delete_post", e) from e

    if not deleted:
        logger.warning(f"Delete of post {post_id} matched no rows")
    store.dispatch(DeletePostSucceeded(post_id, deleted))
    return post_id
